"""FastAPI dependency injection — builds the playground and hands it to route handlers."""

from __future__ import annotations

from fastapi import Request

from playground.catalogue.catalogue import Catalogue, default_catalogue
from playground.controller.notifications import NotificationLog
from playground.controller.playground import PlaygroundController
from playground.output.sink import OutputSink
from playground.sandbox.inline_backend import InlineBackend
from playground.sandbox.subprocess_backend import SubprocessBackend
from playground.state.schema import Language, create_session
from playground.state.store import LocalStore


def create_controller(
    notifications: NotificationLog | None = None,
    store: LocalStore | None = None,
    catalogue: Catalogue | None = None,
    sandbox: SubprocessBackend | None = None,
) -> PlaygroundController:
    """Wire up one playground. Called once per application in the lifespan hook."""
    return PlaygroundController(
        session=create_session(),
        sink=OutputSink(),
        store=store or LocalStore(),
        notifier=notifications or NotificationLog(),
        catalogue=catalogue or default_catalogue(),
        backends={
            Language.NATIVE: InlineBackend(),
            Language.SANDBOXED: sandbox or SubprocessBackend(),
        },
    )


def get_controller(request: Request) -> PlaygroundController:
    """The playground built at startup."""
    return request.app.state.controller


def get_notifications(request: Request) -> NotificationLog:
    """Notification log shared with the controller."""
    return request.app.state.notifications
