"""
Spendlog - Source Package

Personal expense logging backend. Spending arrives as a typed form, or as
a free-form voice utterance that is parsed into a proposal the user
reviews before saving.

DESIGN PRINCIPLES:
1. Parser proposes → Human confirms → System validates and saves
2. Extraction misses lower confidence, they never fail a request
3. No silent corrections
4. Every step must be auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Spendlog Team"
