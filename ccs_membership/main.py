"""
CCS Membership FastAPI application entry point.

Lifecycle: intake → review (approve / reject) → invitee → member
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from ccs_membership import __version__
from ccs_membership.config import get_settings
from ccs_membership.db.session import check_db_connection, engine
from ccs_membership.platform.factory import clear_platform_cache

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    logger.info("CCS Membership starting")
    try:
        try:
            check_db_connection()
            logger.info("Database connection verified")
        except Exception as e:
            logger.critical("Database unreachable: %s", e)
            raise

        settings = get_settings()
        if not settings.platform_api_base_url or not settings.platform_api_key:
            logger.warning(
                "Platform API not configured; review endpoints will fail until "
                "PLATFORM_API_BASE_URL and PLATFORM_API_KEY are set"
            )
        missing = settings.missing_platform_ids()
        if missing:
            logger.warning(
                "Platform ids not configured: %s; reviews that need them will fail",
                ", ".join(missing),
            )
        if not settings.secret_key:
            logger.warning("SECRET_KEY is empty; reviewer tokens are not secure")

        yield
    finally:
        logger.info("CCS Membership shutting down")
        clear_platform_cache()
        engine.dispose()
        logger.info("Database connection pool closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    from ccs_membership.api.applications import router as applications_router
    from ccs_membership.api.members import router as members_router

    app.include_router(applications_router, prefix="/api/applications", tags=["applications"])
    app.include_router(members_router, prefix="/api/members", tags=["members"])

    @app.get("/health")
    def health() -> dict:
        """Health check endpoint. Confirms DB connectivity."""
        from sqlalchemy import text

        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return {
                "status": "ok",
                "version": __version__,
                "database": "connected",
            }
        except Exception:
            from fastapi.responses import JSONResponse

            return JSONResponse(
                status_code=503,
                content={
                    "status": "unhealthy",
                    "version": __version__,
                    "database": "disconnected",
                },
            )

    return app


app = create_app()
