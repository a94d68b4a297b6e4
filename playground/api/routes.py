"""FastAPI route handlers — the playground's HTTP surface."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query

from playground.api.deps import get_controller, get_notifications
from playground.api.schemas import (
    BufferUpdateRequest,
    CatalogueEntryModel,
    HealthResponse,
    LanguageSwitchRequest,
    PlaygroundResponse,
    PlaygroundSnapshot,
    ResetRequest,
    ShareRequest,
    ThemeRequest,
)
from playground.controller.notifications import NotificationLog
from playground.controller.playground import PlaygroundController
from playground.share.codec import SHARE_QUERY_PARAM
from playground.state.schema import Language
from playground.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["playground"])


def _respond(
    controller: PlaygroundController,
    notifications: NotificationLog,
    result: Optional[dict[str, Any]] = None,
) -> PlaygroundResponse:
    return PlaygroundResponse(
        playground=PlaygroundSnapshot(**controller.snapshot()),
        notifications=[n.to_dict() for n in notifications.drain()],
        result=result,
    )


# ── Health ────────────────────────────────────────────────────────────────────


@router.get("/health", response_model=HealthResponse)
async def health_check(
    controller: PlaygroundController = Depends(get_controller),
) -> HealthResponse:
    """Service health check."""
    sandbox = controller.backend_for(Language.SANDBOXED)
    return HealthResponse(
        status="healthy",
        version="0.1.0",
        sandbox_state=sandbox.state.value,
        sandbox_packages=getattr(sandbox, "packages", []),
    )


# ── Playground ────────────────────────────────────────────────────────────────


@router.get("/playground", response_model=PlaygroundResponse)
async def get_playground(
    controller: PlaygroundController = Depends(get_controller),
    notifications: NotificationLog = Depends(get_notifications),
) -> PlaygroundResponse:
    """Current editor, language, and output state."""
    return _respond(controller, notifications)


@router.put("/playground/buffer", response_model=PlaygroundResponse)
async def update_buffer(
    request: BufferUpdateRequest,
    controller: PlaygroundController = Depends(get_controller),
    notifications: NotificationLog = Depends(get_notifications),
) -> PlaygroundResponse:
    """Replace the editor contents (editor input)."""
    controller.update_buffer(request.code)
    return _respond(controller, notifications)


@router.post("/playground/run", response_model=PlaygroundResponse)
async def run_code(
    controller: PlaygroundController = Depends(get_controller),
    notifications: NotificationLog = Depends(get_notifications),
) -> PlaygroundResponse:
    """Run the editor contents on the current language's backend."""
    outcome = await controller.run_code()
    result = None
    if outcome is not None:
        result = {
            "success": outcome.success,
            "execution_time_sec": outcome.execution_time_sec,
            "error_type": outcome.error_type,
        }
    return _respond(controller, notifications, result)


@router.post("/playground/language", response_model=PlaygroundResponse)
async def switch_language(
    request: LanguageSwitchRequest,
    controller: PlaygroundController = Depends(get_controller),
    notifications: NotificationLog = Depends(get_notifications),
) -> PlaygroundResponse:
    """Switch language; the sandbox starts on first switch to it."""
    logger.info("Language switch requested", language=request.language.value)
    switched = await controller.switch_language(request.language)
    return _respond(controller, notifications, {"switched": switched})


@router.post("/playground/save", response_model=PlaygroundResponse)
async def save_code(
    controller: PlaygroundController = Depends(get_controller),
    notifications: NotificationLog = Depends(get_notifications),
) -> PlaygroundResponse:
    """Save the editor contents for the current language."""
    controller.save_code()
    return _respond(controller, notifications)


@router.post("/playground/reset", response_model=PlaygroundResponse)
async def reset_code(
    request: ResetRequest,
    controller: PlaygroundController = Depends(get_controller),
    notifications: NotificationLog = Depends(get_notifications),
) -> PlaygroundResponse:
    """Reset the editor to the default template (requires ``confirm: true``)."""
    reset = controller.reset_code(lambda _prompt: request.confirm)
    return _respond(controller, notifications, {"reset": reset})


@router.post("/playground/output/clear", response_model=PlaygroundResponse)
async def clear_output(
    controller: PlaygroundController = Depends(get_controller),
    notifications: NotificationLog = Depends(get_notifications),
) -> PlaygroundResponse:
    """Clear the output panel."""
    controller.clear_output()
    return _respond(controller, notifications)


@router.put("/playground/theme", response_model=PlaygroundResponse)
async def set_theme(
    request: ThemeRequest,
    controller: PlaygroundController = Depends(get_controller),
    notifications: NotificationLog = Depends(get_notifications),
) -> PlaygroundResponse:
    """Change and persist the editor theme."""
    controller.set_editor_theme(request.theme)
    return _respond(controller, notifications)


# ── Sharing ───────────────────────────────────────────────────────────────────


@router.post("/playground/share", response_model=PlaygroundResponse)
async def share_code(
    request: ShareRequest,
    controller: PlaygroundController = Depends(get_controller),
    notifications: NotificationLog = Depends(get_notifications),
) -> PlaygroundResponse:
    """Build a share link for the editor contents."""
    url = await controller.share_code(request.base_url)
    return _respond(controller, notifications, {"url": url})


@router.post("/playground/shared", response_model=PlaygroundResponse)
async def load_shared_code(
    shared: Optional[str] = Query(default=None, alias=SHARE_QUERY_PARAM),
    controller: PlaygroundController = Depends(get_controller),
    notifications: NotificationLog = Depends(get_notifications),
) -> PlaygroundResponse:
    """Load a shared snapshot into the editor. The code is not run."""
    params = {SHARE_QUERY_PARAM: shared} if shared is not None else {}
    loaded = await controller.check_for_shared_code(params)
    return _respond(controller, notifications, {"loaded": loaded})


# ── Catalogue ─────────────────────────────────────────────────────────────────


@router.get("/catalogue/challenges", response_model=list[CatalogueEntryModel])
async def list_challenges(
    controller: PlaygroundController = Depends(get_controller),
) -> list[CatalogueEntryModel]:
    """List coding challenges."""
    return [CatalogueEntryModel(**e.to_dict()) for e in controller.catalogue.challenges.values()]


@router.get("/catalogue/snippets", response_model=list[CatalogueEntryModel])
async def list_snippets(
    controller: PlaygroundController = Depends(get_controller),
) -> list[CatalogueEntryModel]:
    """List code snippets."""
    return [CatalogueEntryModel(**e.to_dict()) for e in controller.catalogue.snippets.values()]


@router.post("/catalogue/challenges/{challenge_id}/load", response_model=PlaygroundResponse)
async def load_challenge(
    challenge_id: str,
    controller: PlaygroundController = Depends(get_controller),
    notifications: NotificationLog = Depends(get_notifications),
) -> PlaygroundResponse:
    """Load a challenge template into the editor."""
    loaded = controller.load_challenge(challenge_id)
    return _respond(controller, notifications, {"loaded": loaded})


@router.post("/catalogue/snippets/{snippet_id}/load", response_model=PlaygroundResponse)
async def load_snippet(
    snippet_id: str,
    controller: PlaygroundController = Depends(get_controller),
    notifications: NotificationLog = Depends(get_notifications),
) -> PlaygroundResponse:
    """Load a snippet template into the editor."""
    loaded = controller.load_snippet(snippet_id)
    return _respond(controller, notifications, {"loaded": loaded})
