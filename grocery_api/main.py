"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from grocery_api.config import settings
from grocery_api.database import close_db
from grocery_api.errors import APIError, ErrorCode, ErrorResponse
from grocery_api.logging_config import configure_logging
from grocery_api.middleware import setup_middleware
from grocery_api.redis import close_redis
from grocery_api.routers import (
    auth_router,
    health_router,
    shopping_items_router,
    shopping_lists_router,
    stores_router,
    sync_router,
)

configure_logging()
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown."""
    logger.info(f"Starting {settings.app_name} ({settings.environment})")
    yield
    await close_redis()
    await close_db()


app = FastAPI(
    title=settings.app_name,
    description="Backend API for Grocery Manager - offline-first shopping lists",
    version=API_VERSION,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.cors_allow_all else settings.cors_origins,
    allow_credentials=not settings.cors_allow_all,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

setup_middleware(app)


@app.middleware("http")
async def security_headers_middleware(request: Request, call_next):
    """Add security headers to all responses."""
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    if not settings.debug:
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
    return response


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle uncaught exceptions."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    if settings.debug:
        raise exc
    body = APIError(
        error=ErrorResponse(
            code=ErrorCode.INTERNAL_ERROR.value,
            message="An unexpected error occurred",
            trace_id=getattr(request.state, "request_id", None),
        )
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(exclude_none=True),
    )


# Include routers
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(shopping_lists_router)
app.include_router(shopping_items_router)
app.include_router(stores_router)
app.include_router(sync_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": settings.app_name, "version": API_VERSION}
