"""
Description Resolver

The description of a voice expense is the utterance itself, as spoken.
The user edits it in the review form if they want something shorter.
"""

GENERIC_DESCRIPTION = "Voice expense"


def resolve_description(text: str) -> str:
    """Verbatim utterance, or the generic placeholder when it is blank."""
    description = text.strip()
    return description or GENERIC_DESCRIPTION


def is_generic(description: str) -> bool:
    return not description.strip() or description == GENERIC_DESCRIPTION
