"""Typer app configuration and logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.logging import RichHandler

from ..config import StudioSettings
from .core.console import console
from .core.services import init_services

# Load environment variables from .env file
load_dotenv()

# Loggers written to studio.log
STUDIO_LOGGERS = ["content_store", "content", "carousel", "actions", "assistant"]

# Create Typer app
app = typer.Typer(
    name="socials-studio",
    help="AI-assisted social media content studio",
    add_completion=False,
    no_args_is_help=True,
)


def _file_handler(path: Path) -> logging.FileHandler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s"))
    return handler


def _reset_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def setup_logging(log_dir: Path, verbose: bool = False) -> None:
    """Configure logging for CLI.

    - Suppresses console output from libraries
    - Sets up file logging for AI calls (ai_calls.log) and studio
      operations (studio.log)
    - Mirrors studio logs to the console with --verbose
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    # Remove any default console handlers from root logger
    root_logger = logging.getLogger()
    _reset_handlers(root_logger)
    root_logger.setLevel(logging.CRITICAL)

    # Suppress loggers that might print to console
    for logger_name in ["httpx", "httpcore", "urllib3", "asyncio", "openai"]:
        logger = logging.getLogger(logger_name)
        logger.setLevel(logging.WARNING)
        logger.propagate = False

    # Full AI request/response logging
    ai_calls_logger = logging.getLogger("ai_calls")
    ai_calls_logger.setLevel(logging.DEBUG)
    ai_calls_logger.propagate = False
    _reset_handlers(ai_calls_logger)
    ai_calls_logger.addHandler(_file_handler(log_dir / "ai_calls.log"))

    studio_handler = _file_handler(log_dir / "studio.log")
    console_handler = RichHandler(console=console, show_path=False) if verbose else None
    for name in STUDIO_LOGGERS:
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        logger.propagate = False
        _reset_handlers(logger)
        logger.addHandler(studio_handler)
        if console_handler is not None:
            logger.addHandler(console_handler)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show studio logs in the console"),
) -> None:
    """Create projects, generate and refine content, build carousels."""
    settings = StudioSettings()
    setup_logging(settings.log_dir, verbose)
    init_services(settings)


def register_commands() -> None:
    """Register all commands from feature modules."""
    from .project.commands import project_app
    from .content.commands import content_app
    from .carousel.commands import carousel_app
    from .image.commands import image_app
    from .assistant.commands import chat

    app.add_typer(project_app, name="project")
    app.add_typer(content_app, name="content")
    app.add_typer(carousel_app, name="carousel")
    app.add_typer(image_app, name="image")
    app.command(name="chat")(chat)


# Register all commands
register_commands()


def main() -> None:
    """CLI entry point."""
    app()
