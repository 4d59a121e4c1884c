"""
FastAPI application for Janbot.

Serves the dashboard's conversational assistant.

Endpoints:
- GET    /api/chat/models  - Registered models and availability
- POST   /api/chat         - Stream an assistant turn
- GET    /api/chat/usage   - Current token usage (billing proxy)
- POST   /api/chat/usage   - Report token usage (billing proxy)
- GET    /api/health       - Health check
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from janbot import __version__
from janbot.config.settings import get_settings
from janbot.utils.logger import get_logger, setup_logging_from_settings

from .routes import chat, health, usage

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for startup/shutdown."""
    settings = get_settings()
    setup_logging_from_settings(settings)
    logger.info("🚀 Janbot chat service starting...")

    yield

    logger.info("🛑 Janbot chat service shutting down...")


def _cors_origins() -> list[str]:
    # CORS_ALLOWED_ORIGINS is a comma-separated list; default to the local dashboard.
    raw = get_settings().CORS_ALLOWED_ORIGINS.strip()
    if not raw:
        return ["http://localhost:3000"]
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


app = FastAPI(
    title="Janbot API",
    description="Conversational assistant for AML case management",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix="/api", tags=["Health"])
app.include_router(chat.router, prefix="/api", tags=["Chat"])
app.include_router(usage.router, prefix="/api", tags=["Usage"])


@app.get("/")
async def root() -> dict[str, object]:
    """Root endpoint with API info."""
    return {
        "service": "Janbot",
        "version": __version__,
        "status": "running",
        "docs": "/docs",
        "endpoints": {
            "health": "GET /api/health",
            "models": "GET /api/chat/models",
            "chat": "POST /api/chat",
            "usage": "GET|POST /api/chat/usage",
        },
    }


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions."""
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "type": type(exc).__name__,
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("janbot.api.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
