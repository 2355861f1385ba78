"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from chatrelay.config import Settings, settings
from chatrelay.routes import chat, health
from chatrelay.upstream import close_upstream_client

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> int:
    """Root logging for the relay; uvicorn's loggers follow the same level."""
    level = logging.getLevelName((settings.log_level or "INFO").upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(level)
    return level


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: log configuration. Shutdown: close the upstream client."""
    if not settings.upstream_configured:
        logger.warning("OPENAI_API_KEY is not set; chat requests will be rejected")
    logger.info(
        "Relaying to %s (model %s)", settings.openai_base_url, settings.openai_model
    )
    yield
    await close_upstream_client()


def create_app() -> FastAPI:
    configure_logging(settings)

    app = FastAPI(
        title="Chat Relay",
        description="Streams OpenAI-compatible chat completions over SSE",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(chat.router)

    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
        logger.info("Serving static files from %s", static_dir.resolve())

    return app


app = create_app()


def run() -> None:
    """Serve the relay with uvicorn on settings.host:settings.port."""
    base_url = f"http://{settings.host}:{settings.port}"
    logger.info("Chat relay listening on %s", base_url)
    logger.info("Health check: %s/api/health", base_url)
    logger.info("SSE endpoint: POST %s/ai/chat/stream-sse", base_url)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
