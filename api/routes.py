"""FastAPI route handlers."""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends
from loguru import logger

from .dependencies import get_registry, get_settings
from .exceptions import InvalidRequestError, InvalidTimezoneError, UnknownActionError
from .models.requests import FormatRequest, RenderRequest, TimestampRequest
from .models.responses import (
    FormatResponse,
    LanguageLoadResponse,
    LanguageModel,
    RenderResponse,
    TimestampResponse,
)
from config.settings import Settings
from editor.actions import FormatAction, apply_action
from editor.selection import URL_PLACEHOLDER
from markup.languages import LanguageRegistry, resolve_language_alias
from markup.preview import MarkupPreview
from markup.timestamps import (
    coerce_style,
    format_timestamp,
    generate_timestamp_token,
    is_valid_timezone,
    system_clock,
)


router = APIRouter()


def _timezone(requested: Optional[str], settings: Settings) -> str:
    if requested is None:
        return settings.display_timezone
    if not is_valid_timezone(requested):
        raise InvalidTimezoneError(requested)
    return requested


# =============================================================================
# Routes
# =============================================================================


@router.post("/v1/render", response_model=RenderResponse)
async def render(
    request_data: RenderRequest,
    registry: LanguageRegistry = Depends(get_registry),
    settings: Settings = Depends(get_settings),
):
    """Render editor content to sanitized preview HTML."""
    request_id = f"req_{uuid.uuid4().hex[:12]}"
    with logger.contextualize(request_id=request_id):
        preview = MarkupPreview(
            highlighters=registry,
            timezone=_timezone(request_data.timezone, settings),
            spoiler_label=settings.spoiler_label,
        )
        html = preview.render(request_data.text, now=request_data.now)
        logger.debug(
            f"RENDER: chars_in={len(request_data.text)} chars_out={len(html)}"
        )
        return RenderResponse(html=html)


@router.post("/v1/format", response_model=FormatResponse)
async def format_selection(
    request_data: FormatRequest,
    settings: Settings = Depends(get_settings),
):
    """Apply a toolbar action to the submitted text and selection."""
    try:
        action = FormatAction(request_data.action)
    except ValueError as e:
        raise UnknownActionError(request_data.action, raw_error=e) from e

    if action is FormatAction.TIMESTAMP and request_data.epoch is None:
        raise InvalidRequestError("timestamp action requires an epoch")

    with logger.contextualize(action=action.value):
        result = apply_action(
            action,
            request_data.text,
            request_data.start,
            request_data.end,
            language=request_data.language or settings.default_code_language,
            url=request_data.url or URL_PLACEHOLDER,
            epoch=request_data.epoch,
            style=request_data.style,
        )
        return FormatResponse.from_result(result)


@router.post("/v1/timestamp", response_model=TimestampResponse)
async def timestamp(
    request_data: TimestampRequest,
    settings: Settings = Depends(get_settings),
):
    """Build a timestamp token and its preview text."""
    style = coerce_style(request_data.style)
    now = system_clock() if request_data.now is None else request_data.now
    return TimestampResponse(
        token=generate_timestamp_token(request_data.epoch, style.value),
        preview=format_timestamp(
            request_data.epoch,
            style.value,
            now,
            _timezone(request_data.timezone, settings),
        ),
        style=style.value,
    )


@router.get("/v1/languages", response_model=List[LanguageModel])
async def list_languages(registry: LanguageRegistry = Depends(get_registry)):
    """List code-block languages and whether each is loaded."""
    return [
        LanguageModel(
            id=info.id, name=info.name, aliases=list(info.aliases), loaded=loaded
        )
        for info, loaded in registry.available()
    ]


@router.post("/v1/languages/{language_id}/load", response_model=LanguageLoadResponse)
async def load_language(
    language_id: str,
    registry: LanguageRegistry = Depends(get_registry),
):
    """Load a language so later renders highlight it."""
    with logger.contextualize(language=language_id):
        loaded = await registry.ensure_loaded(language_id)
        return LanguageLoadResponse(
            id=resolve_language_alias(language_id), loaded=loaded
        )


@router.get("/")
async def root(settings: Settings = Depends(get_settings)):
    """Root endpoint."""
    return {
        "status": "ok",
        "service": "discord-markup-preview",
        "timezone": settings.display_timezone,
    }


@router.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
