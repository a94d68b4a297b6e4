"""FastAPI application entry point."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from playground.api.deps import create_controller
from playground.api.routes import router
from playground.config.settings import settings
from playground.controller.notifications import NotificationLog
from playground.controller.playground import PlaygroundController
from playground.state.schema import Language
from playground.utils.logging import get_logger, setup_logging

# Initialize logging
setup_logging(settings.LOG_LEVEL)

ControllerFactory = Callable[[NotificationLog], PlaygroundController]


def _default_factory(notifications: NotificationLog) -> PlaygroundController:
    return create_controller(notifications=notifications)


def create_app(controller_factory: ControllerFactory | None = None) -> FastAPI:
    """Build the application. The controller is created once, at startup."""
    factory = controller_factory or _default_factory

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger = get_logger("startup")
        notifications = NotificationLog()
        controller = factory(notifications)
        controller.load_saved_state()
        app.state.notifications = notifications
        app.state.controller = controller
        logger.info(
            "StudyHub playground starting",
            env=settings.ENV,
            language=controller.session.current_language.value,
            store=settings.STORE_PATH,
            sandbox_packages=settings.SANDBOX_PACKAGES,
        )
        try:
            yield
        finally:
            sandbox = controller.backend_for(Language.SANDBOXED)
            aclose = getattr(sandbox, "aclose", None)
            if aclose is not None:
                await aclose()
            logger.info("StudyHub playground stopped")

    app = FastAPI(
        title="StudyHub Playground",
        description="Code playground with inline and sandboxed Python execution",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS: permissive for dev, restrict in prod
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.ENV == "dev" else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routes
    app.include_router(router)
    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run("playground.main:app", host=settings.API_HOST, port=settings.API_PORT)
