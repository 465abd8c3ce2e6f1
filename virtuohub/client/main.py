"""VirtuoHub client - Main application entry point."""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

from dotenv import load_dotenv

import flet as ft
from virtuohub.client.state import Store
from virtuohub.client.ui.layouts.shell import build_shell
from virtuohub.shared.core import events
from virtuohub.shared.core.configuration import SystemConfig, ValidationLevel, get_config, validate_critical_config
from virtuohub.shared.core.event_bus import EventBus
from virtuohub.shared.core.service_registry import register_cleanup_handler
from virtuohub.shared.infrastructure.api import ApiError

# Load environment variables from .env file in project root
PROJECT_ROOT = Path(__file__).parent.parent.parent.resolve()
load_dotenv(dotenv_path=PROJECT_ROOT / ".env")

LOGS_DIR = PROJECT_ROOT / "data" / "logs"

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """File handler logs everything at LOG_LEVEL (default DEBUG), console only WARNING+."""
    LOGS_DIR.mkdir(parents=True, exist_ok=True)
    log_file_path = LOGS_DIR / "virtuohub.log"

    log_level_str = os.getenv("LOG_LEVEL", "DEBUG").upper()
    log_level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    file_log_level = log_level_map.get(log_level_str, logging.DEBUG)

    root_logger = logging.getLogger()
    root_logger.setLevel(file_log_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setLevel(file_log_level)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S"
    ))
    root_logger.addHandler(console_handler)

    # Suppress verbose third-party library logs
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("flet_controls").setLevel(logging.WARNING)
    logging.getLogger("flet_transport").setLevel(logging.WARNING)

    logger.info(f"Logging configured: file={log_file_path}, console=WARNING+")


def load_config() -> SystemConfig:
    config = get_config(ValidationLevel.LENIENT)
    if not validate_critical_config(config):
        logger.warning("Auth provider settings are incomplete; guests can browse but not sign in")
    return config


async def init_services(store: Store) -> None:
    """Wire shell state and load the first page of the feed."""
    await store.app.initialize()
    logger.info("AppState initialized")

    await store.app.push_status("Loading feed...")
    try:
        posts = await store.api.list_posts()
    except ApiError as e:
        logger.warning(f"Could not load feed: {e}")
        store.app.notify("Could not load posts", e.message, "destructive")
        posts = []
    await store.app.publish(events.TOPIC_FEED_LOADED, events.create_feed_loaded_event(posts))
    await store.app.push_status("Ready")
    logger.info(f"Feed loaded with {len(posts)} post(s)")


async def main(page: ft.Page) -> None:
    """Main Flet application entry point."""
    logger.info("Initializing VirtuoHub...")
    page.title = "VirtuoHub"

    config = load_config()
    store = Store.initialize(EventBus(), config)
    register_cleanup_handler(Store.reset)
    register_cleanup_handler(store.tasks.cancel_all)

    async def _on_close(e) -> None:
        await store.aclose()
        logger.info("Store closed")

    page.on_close = _on_close

    # Build the shell first so its subscriptions are queued before init publishes
    page.views.append(build_shell(page, store))
    page.update()

    store.tasks.spawn(init_services(store), name="init-services")
    logger.info("Application initialized successfully")


def run() -> None:
    configure_logging()
    ui = get_config(ValidationLevel.LENIENT).ui

    if ui.flet_web_mode:
        logger.info(f"Starting Flet app in WEB mode on port {ui.flet_port}")
        renderer = ft.WebRenderer.AUTO if ui.flet_web_renderer == "auto" else ft.WebRenderer.CANVAS_KIT
        logger.info(f"Using web renderer: {ui.flet_web_renderer}")

        view_mode = ft.AppView.FLET_APP_WEB
        if os.getenv("FLET_FORCE_WEB_BROWSER") == "true":
            view_mode = ft.AppView.WEB_BROWSER

        ft.run(main, view=view_mode, port=ui.flet_port, host="127.0.0.1", web_renderer=renderer)
    else:
        logger.info("Starting Flet app in DESKTOP mode")
        ft.run(main, view=ft.AppView.FLET_APP)


if __name__ == "__main__":
    run()
