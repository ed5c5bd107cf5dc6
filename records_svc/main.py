"""
Medical Records Service - FastAPI entry point.

Run with ``python main.py`` (or ``uvicorn main:app``) from this directory.

Request path:
    LoggingMiddleware   assigns X-Request-ID, logs method, path, status and duration
    CORSMiddleware
    Routers             health, exams, user-surgeries (api/routers/)
    Services            built per request by core.dependencies
    Repositories        one per table, sharing a single SQLite Database

Errors raised by services are turned into JSON responses by the routers
(handle_errors) or by the handlers registered in setup_exception_handlers().
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from core.config import API_HOST, API_PORT, API_RELOAD, settings
from core.dependencies import get_database
from core.exceptions import setup_exception_handlers
from core.logging_config import setup_logging
from core.middleware import LoggingMiddleware
from api.routers import health_router, exams_router, user_surgeries_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for FastAPI application.

    Startup:
        - Configures structured JSON logging
        - Creates the data and upload directories
        - Initializes database connection (triggers schema creation)
    """
    # Configure structured logging FIRST (before any other logging)
    setup_logging(level="INFO", json_format=True)

    logger = logging.getLogger(__name__)
    logger.info("Starting Medical Records Service...")

    settings.ensure_directories()

    db = get_database()
    logger.info(
        "Database initialized",
        extra={"db_path": db.db_path}
    )

    yield  # Application runs here

    logger.info("Medical Records Service shutting down...")


app = FastAPI(
    title="Medical Records Service",
    description="REST API for a patient's medical history: exam documents and surgeries with their hospitalizations.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================
setup_exception_handlers(app)

# =============================================================================
# MIDDLEWARE
# =============================================================================
# Middleware is executed in REVERSE order of registration.

# 1. CORS Middleware (innermost - closest to routes)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 2. Logging Middleware (outermost - captures all requests)
app.add_middleware(LoggingMiddleware)

# =============================================================================
# ROUTERS
# =============================================================================
app.include_router(health_router)
app.include_router(exams_router)
app.include_router(user_surgeries_router)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_RELOAD
    )
