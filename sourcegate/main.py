"""SourceGate API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map SourceGateError → structured JSON responses
    - Exactly one engine Session per process: created in the lifespan, shut down on exit
    - CORS configured from settings (not hardcoded)

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - create_app() factory: tests inject a stub engine loader; `app` stays the
      uvicorn target (uvicorn sourcegate.main:app)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sourcegate.api.error_handlers import register_error_handlers
from sourcegate.api.routes import configuration, content, diagnostics, health
from sourcegate.config import Settings, get_settings
from sourcegate.infrastructure.observability import setup_logging
from sourcegate.services.session_facade import EngineLoader, Session

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None, loader: EngineLoader | None = None,
) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(settings.log_level, settings.log_format)
        async with Session.open(settings, loader) as session:
            app.state.engine_session = session
            logger.info("SourceGate API started")
            yield
            logger.info("SourceGate API shutting down")
        app.state.engine_session = None

    app = FastAPI(title="SourceGate API", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(configuration.router)
    app.include_router(content.router)
    app.include_router(diagnostics.router)

    register_error_handlers(app)
    return app


app = create_app()
