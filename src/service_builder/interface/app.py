"""FastAPI application serving the build trigger."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from service_builder.interface.dependencies import shutdown, startup
from service_builder.interface.error_handlers import register_error_handlers
from service_builder.interface.routes import router


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    # the HTTP client and the events API key live for the whole server
    await startup()
    try:
        yield
    finally:
        await shutdown()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Service Builder",
        version="1.0.0",
        description=(
            "Builds and publishes an image for every service directory a "
            "commit created or updated, and reports deleted ones."
        ),
        lifespan=_lifespan,
    )
    register_error_handlers(app)
    app.include_router(router)
    return app
