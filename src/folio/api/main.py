"""Folio API Server - FastAPI application.

Running the Server
------------------

Development (with auto-reload):
    folio serve --reload

Production:
    folio serve --host 0.0.0.0 --port 5000

Testing the Server
------------------

Health check:
    curl http://localhost:5000/api/health

Create a post (image uploaded first via /api/assets/upload):
    curl -X POST http://localhost:5000/api/posts \
      -H "Content-Type: application/json" \
      -d '{"title": "Launch", "excerpt": "...", "content": "...", "category": "news",
           "image": {"url": "https://res.cloudinary.com/demo/image/upload/v1/posts/launch.jpg",
                     "identifier": "posts/launch"}}'

Endpoints
---------
- /api/health               : Health check
- /api/status               : Store configuration and delete policies
- /api/assets/upload        : Upload an image
- /api/assets/delete        : Delete an image
- /api/{type}               : Create / list records
- /api/{type}/{id}          : Get / update / delete a record
- /api/{type}/bulk/delete   : Delete many records
- /docs                     : OpenAPI documentation

Error mapping
-------------
ValidationError -> 400, NotFoundError -> 404, AssetStoreError -> 502,
PersistentStoreError -> 500.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from folio.api.routers.assets import router as assets_router
from folio.api.routers.health import router as health_router
from folio.api.routers.records import build_router
from folio.errors import (
    AssetStoreError,
    NotFoundError,
    PersistentStoreError,
    StrictDeleteError,
    ValidationError,
)
from folio.lifecycle.registry import RECORD_TYPES, get_content_service
from folio.settings import settings
from folio.version import __version__


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Folio API")
    yield
    logger.info("Shutting down Folio API")
    await get_content_service().assets.close()


def register_error_handlers(app: FastAPI) -> None:
    """Map folio errors to HTTP responses."""

    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": str(exc), "errors": exc.errors},
        )

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(AssetStoreError)
    async def asset_store_error(request: Request, exc: AssetStoreError) -> JSONResponse:
        content: dict = {"detail": str(exc)}
        if isinstance(exc, StrictDeleteError):
            content["failed"] = [d.model_dump(mode="json") for d in exc.failed]
        logger.error(f"{request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content=content)

    @app.exception_handler(PersistentStoreError)
    async def persistent_store_error(request: Request, exc: PersistentStoreError) -> JSONResponse:
        logger.error(f"{request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": str(exc)}
        )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Folio API",
        description="Content records with hosted images kept in sync",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(health_router)   # /api/health, /api/status
    app.include_router(assets_router)   # /api/assets/*
    for record_type in RECORD_TYPES.values():
        app.include_router(build_router(record_type))

    return app


# Create application instance
app = create_app()


# Main entry point for uvicorn
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "folio.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )
