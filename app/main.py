"""Relay Chat API - Main Application Module.

This module initializes the FastAPI application with proper configuration,
middleware, routing, and lifecycle management for the chat relay.
"""

import logging
import sys
import uuid
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from pathlib import Path

# Add the project root to Python path if running directly
if __name__ == "__main__":
    project_root = Path(__file__).parent.parent
    sys.path.insert(0, str(project_root))

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import ConfigValidator, get_config_summary, settings
from app.core.logging import setup_logging
from app.services.inference_service import GeminiInferenceClient, InferenceClient
from app.storage import ChatRepository, InMemoryChatStore


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle events."""
    setup_logging(settings.log_level, settings.log_format)
    logger.info("🚀 Starting Relay Chat API...")
    ConfigValidator.validate_required_settings()
    logger.debug(f"Configuration: {get_config_summary()}")
    if not settings.has_ai_enabled:
        logger.warning("⚠️ GEMINI_API_KEY is not set; message submissions will fail")

    yield

    logger.info("🛑 Shutting down Relay Chat API...")


def create_app(
    store: ChatRepository | None = None,
    inference_client: InferenceClient | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        store: Conversation store; a fresh in-memory store by default.
        inference_client: Completion client; Gemini by default.
    """
    app = FastAPI(
        title="Relay Chat API",
        description="Chat backend relaying multi-modal messages to a language model",
        version=settings.version,
        lifespan=lifespan,
        docs_url="/docs" if settings.environment == "development" else None,
        redoc_url="/redoc" if settings.environment == "development" else None,
    )

    app.state.store = store if store is not None else InMemoryChatStore()
    app.state.inference_client = (
        inference_client if inference_client is not None else GeminiInferenceClient(settings)
    )

    # Add middleware
    setup_middleware(app)

    # Add exception handlers
    setup_exception_handlers(app)

    # Include routers
    setup_routers(app)

    return app


def setup_middleware(app: FastAPI):
    """Configure application middleware."""
    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request ID middleware
    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


def setup_exception_handlers(app: FastAPI):
    """Configure global exception handlers."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Handle custom exceptions that have structured detail
        if isinstance(exc.detail, dict) and "message" in exc.detail:
            message = exc.detail["message"]
            error_code = exc.detail.get("error_code", "HTTP_ERROR")
            details = exc.detail.get("details")
        else:
            message = str(exc.detail) if exc.detail else "An error occurred"
            error_code = "HTTP_ERROR"
            details = None

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "status": "error",
                "message": message,
                "error_code": error_code,
                "details": details,
                "timestamp": datetime.now(UTC).isoformat(),
                "request_id": getattr(request.state, "request_id", None),
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # Convert errors to JSON-serializable format
        errors = []
        for error in exc.errors():
            error_dict = {
                "loc": error.get("loc", []),
                "msg": str(error.get("msg", "Validation error")),
                "type": error.get("type", "value_error"),
            }
            # Handle custom input if present
            if "input" in error:
                error_dict["input"] = str(error["input"])
            errors.append(error_dict)

        return JSONResponse(
            status_code=422,
            content={
                "status": "error",
                "message": "Validation error",
                "error_code": "VALIDATION_ERROR",
                "details": errors,
                "timestamp": datetime.now(UTC).isoformat(),
                "request_id": getattr(request.state, "request_id", None),
            },
        )


def setup_routers(app: FastAPI):
    """Configure application routers."""
    # Import routers
    from app.domains.conversation.controller import router as conversation_router

    @app.get("/health")
    async def health_check(request: Request):
        """Report store and inference configuration status."""
        try:
            store = request.app.state.store
            store.list_conversations()
            store_status = "healthy"
        except Exception as e:
            logger.error(f"Store health check failed: {str(e)}")
            store_status = "unhealthy"

        ai_status = "configured" if settings.has_ai_enabled else "not_configured"

        return {
            "status": "healthy" if store_status == "healthy" else "degraded",
            "version": settings.version,
            "environment": settings.environment,
            "timestamp": datetime.now(UTC).isoformat(),
            "services": {
                "store": store_status,
                "ai_service": ai_status,
            },
        }

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "Relay Chat API",
            "version": settings.version,
            "description": "Chat relay with conversation history and attachments",
            "docs_url": "/docs" if settings.environment == "development" else None,
        }

    # Include domain routers
    app.include_router(conversation_router)


# Create the application instance
app = create_app()


def main():
    """Entry point for running the application directly."""
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level=settings.log_level.value.lower(),
    )


if __name__ == "__main__":
    main()
