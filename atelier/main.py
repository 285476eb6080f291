"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from atelier.application.services import Workspace
from atelier.config import get_settings
from atelier.infrastructure.database import create_tables
from atelier.infrastructure.dependencies import build_remote_store, build_workspace
from atelier.infrastructure.logging.log_config import setup_logging
from atelier.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — build the workspace, reconcile, drain on shutdown."""
    settings = get_settings()
    setup_logging()

    engine = None
    if getattr(app.state, "workspace", None) is None:
        remote_store, engine = build_remote_store(settings)

        # 1. Create the mirror tables for the database backend
        if engine is not None:
            try:
                await create_tables(engine)
            except (OSError, SQLAlchemyError) as exc:
                logger.warning("Could not create remote tables: %s", exc)

        app.state.workspace = build_workspace(settings, remote_store)

    workspace: Workspace = app.state.workspace

    # 2. Initial reconciliation, falls back to the local snapshot
    data = await workspace.refresh()
    logger.info(
        "Workspace ready (backend=%s): %d products, %d quotes, %d transactions",
        workspace.sync_backend,
        len(data.products),
        len(data.quotes),
        len(data.transactions),
    )

    yield

    # Shutdown
    await workspace.drain()
    if engine is not None:
        await engine.dispose()


def create_app(workspace: Workspace | None = None) -> FastAPI:
    """Factory function that builds and configures the FastAPI application.

    A pre-built *workspace* skips the configured wiring (used by tests).
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.workspace = workspace

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "atelier.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
