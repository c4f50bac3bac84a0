"""Main application entry point.

Integrated mode serves the relay and the chat page from one uvicorn server
on PORT. Separate mode runs the relay on PORT and the chat page on UI_PORT
as two processes. Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

DEFAULT_PORT = 8000
DEFAULT_UI_PORT = 8080


def relay_port() -> int:
    """Port the relay listens on, from PORT."""
    return int(os.getenv("PORT", str(DEFAULT_PORT)))


def publish_relay_url(port: int) -> str:
    """Point the chat page at the relay on ``port`` unless API_BASE_URL is set.

    Child processes inherit the value, so separate mode's UI process follows
    the same PORT as the relay.

    Returns:
        The relay base URL the chat page will use.
    """
    return os.environ.setdefault("API_BASE_URL", f"http://localhost:{port}")


def relay_command(host: str, port: int) -> list[str]:
    """Command line for a standalone relay server."""
    return [
        sys.executable, "-m", "uvicorn", "deepchat.api.app:app",
        "--host", host, "--port", str(port),
    ]


def run_integrated() -> None:
    """Serve the relay and the chat page from one server on PORT."""
    import uvicorn
    from nicegui import ui

    port = relay_port()
    publish_relay_url(port)

    from deepchat.api.app import create_app
    from deepchat.ui.chat_page import TITLE, chat_page  # noqa: F401 - Registers the page

    app = create_app()
    ui.run_with(
        app,
        title=TITLE,
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "deepchat-secret"),
    )

    logger.info(f"Chat UI and relay on http://localhost:{port}/ (docs at /docs)")
    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


def run_separate() -> None:
    """Run the relay on PORT and the chat page on UI_PORT as child processes."""
    import subprocess
    import time

    port = relay_port()
    relay_url = publish_relay_url(port)
    ui_port = int(os.getenv("UI_PORT", str(DEFAULT_UI_PORT)))

    logger.info(f"Relay on http://localhost:{port}, chat UI on http://localhost:{ui_port}")
    logger.info(f"Chat UI sends requests to {relay_url}")

    procs = [
        subprocess.Popen(relay_command(os.getenv("HOST", "0.0.0.0"), port)),
        subprocess.Popen(
            [sys.executable, "-c", f"from deepchat.ui.chat_page import main; main({ui_port})"]
        ),
    ]
    try:
        while all(p.poll() is None for p in procs):
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Shutting down servers...")
    finally:
        for p in procs:
            p.terminate()
        for p in procs:
            p.wait()


def main() -> None:
    """Application entry point; RUN_MODE=separate splits relay and UI."""
    mode = os.getenv("RUN_MODE", "integrated").lower()
    logger.info(f"Starting DeepChat in {mode} mode")

    if mode == "separate":
        run_separate()
    else:
        run_integrated()


if __name__ == "__main__":
    main()
