"""DocuChats entry point.

Prepares the data directory shared by stored PDFs and chat history, reports
which providers are configured, then serves the API and the NiceGUI library
and reader pages. Settings come from the environment (and a .env file).
"""

import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

load_dotenv()

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ServerSettings(BaseModel):
    """Process-level settings for running DocuChats.

    Attributes:
        mode: ``integrated`` serves API and UI from one server;
            ``separate`` runs them as two processes.
        host: Interface to bind.
        port: API port (and UI port in integrated mode).
        ui_port: UI port in separate mode.
        log_level: Root logging level.
        storage_secret: Secret NiceGUI signs browser storage with.
    """

    model_config = ConfigDict(validate_default=True)

    mode: Literal["integrated", "separate"] = Field(
        default_factory=lambda: os.getenv("RUN_MODE", "integrated").lower()
    )
    host: str = Field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = Field(default_factory=lambda: int(os.getenv("PORT", "8000")), ge=1, le=65535)
    ui_port: int = Field(
        default_factory=lambda: int(os.getenv("UI_PORT", "8080")), ge=1, le=65535
    )
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    storage_secret: str = Field(
        default_factory=lambda: os.getenv("NICEGUI_STORAGE_SECRET", "docuchats-secret")
    )


def configure_logging(level: str) -> None:
    """Send all log records to stdout at the given level."""
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def prepare_data_dir() -> Path:
    """Create the data directory for documents and chat history.

    Returns:
        The data directory root.
    """
    from docuchats.agent.chat_agent import SESSIONS_DB_NAME
    from docuchats.storage.local import DocumentStorage, StorageConfig

    config = StorageConfig()
    storage = DocumentStorage(config)
    stored = len(storage.list_documents())
    logger.info(f"Data directory: {config.root.resolve()} ({stored} stored documents)")
    logger.info(f"Chat history: {config.root / SESSIONS_DB_NAME}")
    return config.root


def check_providers() -> dict[str, bool]:
    """Log which model providers have credentials.

    Missing credentials are not fatal: the library and reader still work,
    and the affected endpoints answer with a configuration error.

    Returns:
        Mapping of provider name to whether it is configured.
    """
    from docuchats.agent.config import AgentConfig
    from docuchats.speech.config import SpeechConfig

    status: dict[str, bool] = {}
    for name, config_class in (("chat", AgentConfig), ("speech", SpeechConfig)):
        try:
            config_class()
        except ValidationError as e:
            logger.warning(f"{name.capitalize()} is disabled: {e.errors()[0]['msg']}")
            status[name] = False
        else:
            status[name] = True
    return status


def run_integrated(settings: ServerSettings) -> None:
    """Serve the API with the NiceGUI pages mounted on the same app."""
    import uvicorn
    from nicegui import ui

    from docuchats.api.app import create_app
    from docuchats.ui.chat_page import chat_page  # noqa: F401 - Registers the page
    from docuchats.ui.reader_page import reader_page  # noqa: F401 - Registers the page

    app = create_app()
    ui.run_with(
        app,
        title="DocuChats",
        favicon="📖",
        storage_secret=settings.storage_secret,
    )

    logger.info(f"Library and reader on http://localhost:{settings.port}/")
    logger.info(f"API docs on http://localhost:{settings.port}/docs")

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


def run_separate(settings: ServerSettings) -> None:
    """Run the API and the UI as two processes until either exits."""
    env = {
        **os.environ,
        "API_BASE_URL": os.getenv("API_BASE_URL", f"http://localhost:{settings.port}"),
        "UI_PORT": str(settings.ui_port),
    }
    api_command = [
        sys.executable,
        "-m",
        "uvicorn",
        "docuchats.api.app:app",
        "--host",
        settings.host,
        "--port",
        str(settings.port),
    ]
    ui_command = [sys.executable, "-c", "from docuchats.ui.chat_page import main; main()"]

    logger.info(f"API on http://localhost:{settings.port}")
    logger.info(f"Library and reader on http://localhost:{settings.ui_port}/")

    processes = [subprocess.Popen(api_command, env=env), subprocess.Popen(ui_command, env=env)]
    try:
        # Either process exiting takes the other down with it
        while all(process.poll() is None for process in processes):
            try:
                processes[0].wait(timeout=1)
            except subprocess.TimeoutExpired:
                continue
    except KeyboardInterrupt:
        logger.info("Shutting down servers...")
    finally:
        for process in processes:
            process.terminate()
        for process in processes:
            process.wait()


def main() -> None:
    """Console entry point."""
    settings = ServerSettings()
    configure_logging(settings.log_level)
    logger.info(f"Starting DocuChats in {settings.mode} mode")

    prepare_data_dir()
    check_providers()

    if settings.mode == "separate":
        run_separate(settings)
    else:
        run_integrated(settings)


if __name__ == "__main__":
    main()
