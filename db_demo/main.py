"""
DB Demo Service - FastAPI Application
Main entry point. Resolves the database connection once at startup.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Dict, Any, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse

from db_demo.config import settings, load_configuration_store
from db_demo.api.routes import health_router
from db_demo.db.descriptor import ConnectionDescriptor
from db_demo.db.resolver import resolve_database

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Global instance (initialized on startup)
database: Optional[ConnectionDescriptor] = None


def get_database() -> Optional[ConnectionDescriptor]:
    """Get the resolved connection descriptor."""
    return database


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Resolves the database connection before serving requests.
    """
    global database

    logger.info(f"Starting {settings.app_name}...")

    config_store = load_configuration_store(settings.appsettings_file)
    database = resolve_database(os.environ, config_store.as_mapping())
    app.state.database = database

    logger.info(f"{settings.app_name} started ({database.engine.display_name})")

    yield

    logger.info(f"{settings.app_name} stopped")
    database = None


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Demo service that discovers its MySQL or PostgreSQL database "
                "from Cloud Foundry bindings, DATABASE_URL or appsettings.json.",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)


# Exception handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    """Handle HTTP exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.detail,
            "status_code": exc.status_code
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "status_code": 500
        }
    )


app.include_router(health_router)


# Root endpoint
@app.get("/", include_in_schema=False)
async def root() -> Dict[str, Any]:
    """Root endpoint with service information."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "status": "running",
        "docs": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "db_demo.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
