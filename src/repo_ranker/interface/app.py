"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from repo_ranker.interface.dependencies import shutdown, startup
from repo_ranker.interface.error_handlers import register_error_handlers
from repo_ranker.interface.routes import router


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage startup / shutdown of the shared HTTP client."""
    await startup()
    yield
    await shutdown()


def create_app() -> FastAPI:
    """Build and wire the FastAPI application."""
    app = FastAPI(
        title="GitHub Repo Ranker",
        version="1.0.0",
        description=(
            "Ranks a GitHub organization's repositories by stars, forks, "
            "pull requests or contribution ratio and returns the top n."
        ),
        lifespan=_lifespan,
    )

    register_error_handlers(app)
    app.include_router(router)

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
