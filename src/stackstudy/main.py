# src/stackstudy/main.py
"""Main entry point for the StackStudy API."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from stackstudy.api.v1 import (
    answers_router,
    comments_router,
    questions_router,
    tags_router,
    users_router,
    votes_router,
)
from stackstudy.core.errors import (
    ForbiddenError,
    ForumError,
    InvalidArgumentError,
    NotFoundError,
    TransientStoreError,
)
from stackstudy.core.logging import configure_logging
from stackstudy.core.settings import settings

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[ForumError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidArgumentError: status.HTTP_400_BAD_REQUEST,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    TransientStoreError: status.HTTP_503_SERVICE_UNAVAILABLE,
}

# Initialize FastAPI app
app = FastAPI(
    title="StackStudy API",
    description="Q&A forum backend: questions, answers, votes and achievements",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(questions_router, prefix="/api/v1")
app.include_router(answers_router, prefix="/api/v1")
app.include_router(votes_router, prefix="/api/v1")
app.include_router(comments_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(tags_router, prefix="/api/v1")


def status_for(exc: ForumError) -> int:
    """Map a core error to its HTTP status; unknown errors are 500."""
    for error_type, code in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@app.exception_handler(ForumError)
async def forum_error_handler(request: Request, exc: ForumError) -> JSONResponse:
    code = status_for(exc)
    if code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s -> %d: %s", request.method, request.url.path, code, exc.message)
    return JSONResponse(status_code=code, content={"detail": exc.message})


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging(settings.log_level)
    logger.info("%s %s starting", settings.app_name, settings.app_version)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("stackstudy.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
