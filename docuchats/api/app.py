"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docuchats import __version__
from docuchats.api.chat import router as chat_router
from docuchats.api.documents import router as documents_router
from docuchats.api.notes import router as notes_router
from docuchats.api.tts import router as tts_router
from docuchats.api.upload import router as upload_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    logger.info("Starting DocuChats API...")
    yield
    logger.info("Shutting down DocuChats API...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="DocuChats API",
        description=(
            "Upload PDFs, read their text page by page, listen to it sentence "
            "by sentence, and chat with an assistant about what you are reading."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.include_router(upload_router)
    application.include_router(documents_router)
    application.include_router(chat_router)
    application.include_router(notes_router)
    application.include_router(tts_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "docuchats"}

    return application


app = create_app()
