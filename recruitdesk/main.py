"""
FastAPI application entry point.

Creates and configures the FastAPI application through an application
factory, so tests can build their own instance.

For local development:
    uvicorn recruitdesk.main:app --reload

For production:
    gunicorn recruitdesk.main:app -w 4 -k uvicorn.workers.UvicornWorker
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.routes import campaigns, coaches, health
from .config.settings import get_settings

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, get_settings().log_level.upper(), logging.INFO),
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log configuration on startup and shutdown."""
    settings = get_settings()

    logger.info(
        "RecruitDesk API starting",
        extra={
            "version": settings.api_version,
            "mock_mode": {
                "snowflake": settings.snowflake_mock_mode,
                "r2": settings.r2_mock_mode,
            }
        }
    )

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )

    yield

    logger.info("RecruitDesk API shutting down")


def create_app() -> FastAPI:
    """Application factory."""
    settings = get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
        Coach search and CSV export for recruiting campaigns.

        ## Authentication

        All `/api/v1` endpoints require an API key in the `X-API-Key` header.
        Coach endpoints also need the logged-in user in `X-User-Id`.

        ## Workflow

        1. **Browse coaches**: `POST /api/v1/campaigns/{campaign_id}/coaches/search`
           - Filter by division, university, program and tuition
        2. **Narrow the filters**: `POST /api/v1/coaches/filter-options`
           - Option counts given the current selection
        3. **Export**: `POST /api/v1/campaigns/{campaign_id}/exports`
           - CSV for the sending tool, recorded as a lead list
        4. **Find past exports**: `GET /api/v1/campaigns/{campaign_id}/lead-lists`
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
        coaches.router,
        prefix="/api/v1",
        tags=["Coaches"],
    )

    app.include_router(
        campaigns.router,
        prefix="/api/v1/campaigns",
        tags=["Campaigns"],
    )

    app.include_router(
        campaigns.records_router,
        prefix="/api/v1",
        tags=["Campaigns"],
    )

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "message": "RecruitDesk Coach Export API",
            "version": settings.api_version,
            "docs": "/docs",
            "health": "/health",
        }

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Report malformed requests in the action envelope shape."""
        messages = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        ]
        logger.info(
            "Request validation failed",
            extra={"path": request.url.path, "errors": messages}
        )
        return JSONResponse(
            status_code=422,
            content={"success": False, "validation_errors": messages},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
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


# This is what uvicorn/gunicorn will import
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "recruitdesk.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )
