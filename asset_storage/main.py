"""
FastAPI application entry point.

Using an application factory (create_app) so tests can build apps with
different settings.

For local development:
    uvicorn asset_storage.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.dependencies import get_asset_service
from .api.routes import assets, health
from .config.settings import get_settings

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    
    Builds the shared asset service (and its S3 client) once at startup
    so the first request doesn't pay for client construction.
    """
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())
    
    logger.info(
        "Asset Storage API starting",
        extra={
            "version": settings.api_version,
            "bucket": settings.assets_bucket_name,
            "region": settings.aws_region,
            "mock_mode": settings.storage_mock_mode,
        }
    )
    
    missing_fields = settings.validate_required_fields()
    if missing_fields:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )
    
    get_asset_service(settings)
    
    yield
    
    logger.info("Asset Storage API shutting down")


def create_app() -> FastAPI:
    """
    Application factory.
    
    Creates and configures the FastAPI application.
    """
    settings = get_settings()
    
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
        Stores base64-encoded assets in S3 and returns their public URLs.
        
        - `POST /api/v1/assets/images`: store a PNG/SVG image
        - `POST /api/v1/assets/files`: store any file
        - `DELETE /api/v1/assets/{key}`: delete a stored object
        - `POST /api/v1/assets/validate`: check whether a string is base64
        
        Passing the key of a previous upload replaces it: the old object is
        deleted before the new one is written.
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    
    app.include_router(
        health.router,
        prefix="/health",
        tags=["Health"],
    )
    
    app.include_router(
        assets.router,
        prefix="/api/v1/assets",
        tags=["Assets"],
    )
    
    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "message": "Asset Storage API",
            "version": settings.api_version,
            "docs": "/docs",
            "health": "/health",
        }
    
    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """
        Catch-all exception handler.
        
        Logs the full error server-side but returns a generic message.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )
        
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error. Please contact support if this persists."
            }
        )
    
    logger.info(
        "FastAPI application created",
        extra={
            "title": settings.api_title,
            "version": settings.api_version,
        }
    )
    
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    
    settings = get_settings()
    
    uvicorn.run(
        "asset_storage.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )
