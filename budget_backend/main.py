import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import budget_requests, reference_data, system
from .config import Settings, get_settings
from .core.errors import register_exception_handlers
from .core.logging import configure_logging
from .core.request_context import register_request_id_middleware
from .database import Base, build_engine, build_session_factory

# Register every mapped table with Base.metadata before create_all.
from .models import models as _all_models  # noqa: F401

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the API with its own engine and session factory.

    Serve with ``uvicorn budget_backend.main:create_app --factory``. The engine
    lives on ``app.state`` and is disposed when the application shuts down.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_format)

    app = FastAPI(title=settings.app_name)
    app.state.settings = settings
    app.state.engine = build_engine(settings)
    app.state.session_factory = build_session_factory(app.state.engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_request_id_middleware(app)
    register_exception_handlers(app)

    app.include_router(budget_requests.router)
    app.include_router(reference_data.router)
    app.include_router(system.router)

    @app.on_event("startup")
    def startup() -> None:
        # In dev we make sure tables exist. Alembic migrations should be used for real schema evolution.
        if settings.auto_create_tables:
            Base.metadata.create_all(bind=app.state.engine)
        logger.info("Budget request API started (database=%s)", app.state.engine.url.render_as_string())

    @app.on_event("shutdown")
    def shutdown() -> None:
        app.state.engine.dispose()
        logger.info("Database engine disposed.")

    return app
