"""
HTTP service.

Routes:
    POST /api/voice-process   utterance -> ParsedSpending proposal
    GET  /api/spending        list saved entries (?category=, ?user=)
    GET  /api/spending/{id}   one saved entry
    POST /api/spending        validate and save an entry
    GET  /health              liveness and configured backends

Errors are returned as {"error": "<short message>"}; internals only go to
the logs.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from spendlog import __version__
from spendlog.audit import configure_logging, create_correlation_id
from spendlog.config import get_settings, validate_all_settings
from spendlog.extraction import CategoryModel
from spendlog.models.spending import SpendingCategory, VoiceProcessRequest
from spendlog.orchestrator import SpendingFlow, VoiceSpendingFlow, create_app_components
from spendlog.services.storage import NotFoundError, StorageError

logger = structlog.get_logger(__name__)


TEXT_REQUIRED = "Text input is required"
VOICE_FAILED = "Failed to process voice input"
MISSING_FIELDS = "Missing required fields"
ADD_FAILED = "Failed to add spending entry"
FETCH_FAILED = "Failed to fetch spending data"
NOT_FOUND = "Spending entry not found"
UNKNOWN_CATEGORY = "Unknown spending category"

router = APIRouter()


def error_response(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


async def read_json(request: Request):
    """Request body as JSON, or None when it is missing or malformed."""
    try:
        return await request.json()
    except ValueError:
        return None


def get_voice_flow(request: Request) -> VoiceSpendingFlow:
    return request.app.state.voice_flow


def get_spending_flow(request: Request) -> SpendingFlow:
    return request.app.state.spending_flow


@router.post("/api/voice-process")
async def voice_process(request: Request):
    correlation_id = create_correlation_id()
    flow = get_voice_flow(request)

    body = await read_json(request)
    try:
        payload = VoiceProcessRequest.model_validate(body)
    except ValidationError as e:
        await flow.reject_input(
            reason=e.errors()[0]["msg"] if e.errors() else "invalid body",
            correlation_id=correlation_id,
        )
        return error_response(400, TEXT_REQUIRED)

    try:
        parsed = await flow.process_utterance(payload.text, correlation_id=correlation_id)
        return JSONResponse(content=parsed.model_dump(mode="json"))
    except Exception:
        logger.exception("voice_process_failed", correlation_id=str(correlation_id))
        return error_response(500, VOICE_FAILED)


@router.get("/api/spending")
async def list_spending(
    request: Request,
    category: Optional[str] = None,
    user: Optional[str] = None,
):
    try:
        category_filter = SpendingCategory(category.lower()) if category else None
    except ValueError:
        return error_response(400, UNKNOWN_CATEGORY)

    correlation_id = create_correlation_id()
    try:
        entries = await get_spending_flow(request).list_entries(
            category=category_filter, user=user, correlation_id=correlation_id
        )
        return JSONResponse(content=[entry.model_dump(mode="json") for entry in entries])
    except (StorageError, ValueError):
        logger.exception("spending_list_failed", correlation_id=str(correlation_id))
        return error_response(500, FETCH_FAILED)


@router.get("/api/spending/{entry_id}")
async def get_spending(request: Request, entry_id: str):
    correlation_id = create_correlation_id()
    try:
        entry = await get_spending_flow(request).get_entry(
            entry_id, correlation_id=correlation_id
        )
        return JSONResponse(content=entry.model_dump(mode="json"))
    except NotFoundError:
        return error_response(404, NOT_FOUND)
    except (StorageError, ValueError):
        logger.exception("spending_get_failed", entry_id=entry_id)
        return error_response(500, FETCH_FAILED)


@router.post("/api/spending")
async def add_spending(request: Request):
    correlation_id = create_correlation_id()

    body = await read_json(request)
    if not isinstance(body, dict):
        return error_response(400, MISSING_FIELDS)

    try:
        result, entry = await get_spending_flow(request).add_entry(
            body, correlation_id=correlation_id
        )
    except StorageError:
        logger.exception("spending_add_failed", correlation_id=str(correlation_id))
        return error_response(500, ADD_FAILED)

    if entry is None:
        return error_response(
            400,
            MISSING_FIELDS,
            issues=[issue.model_dump(mode="json") for issue in result.issues],
        )

    return JSONResponse(content={
        "success": True,
        "id": entry.id,
        "warnings": result.warnings,
    })


@router.get("/health")
async def health(request: Request):
    checks = validate_all_settings()
    return {
        "status": "ok",
        "version": __version__,
        "storage": "google_sheets" if request.app.state.sheets_client else "memory",
        "settings": {
            name: checks[name] for name in ("parser", "google_sheets", "app")
        },
    }


def create_app(
    use_storage: bool = True,
    category_model: Optional[CategoryModel] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    The category model is trained once in the lifespan hook (unless one
    is passed in) and shared by every request.
    """
    settings = get_settings()
    configure_logging(settings.app.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        model = category_model or CategoryModel.train()
        voice_flow, spending_flow, sheets_client = create_app_components(
            use_storage=use_storage,
            category_model=model,
        )
        app.state.voice_flow = voice_flow
        app.state.spending_flow = spending_flow
        app.state.sheets_client = sheets_client
        logger.info(
            "app_started",
            environment=settings.app.app_environment,
            storage="google_sheets" if sheets_client else "memory",
        )
        yield

    app = FastAPI(
        title="Spendlog",
        version=__version__,
        debug=settings.app.debug_mode,
        lifespan=lifespan,
    )
    app.include_router(router)
    return app
