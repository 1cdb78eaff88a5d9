"""Logging setup for vtsync: rich console output plus an optional log file."""

import logging
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

APP_LOGGER = "vtsync"
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

console = Console(stderr=True)

_root: logging.Logger | None = None


def setup_logging(
    level: str = "INFO",
    log_file: Path | str | None = None,
    rich_tracebacks: bool = True,
) -> logging.Logger:
    """
    (Re)configure the ``vtsync`` logger.

    Console records go through rich; the optional file gets every record
    down to DEBUG regardless of ``level``.
    """
    global _root

    numeric = logging.getLevelName(level.upper())
    root = logging.getLogger(APP_LOGGER)
    root.handlers.clear()
    root.setLevel(logging.DEBUG if log_file else numeric)
    root.propagate = False

    handler = RichHandler(
        console=console,
        level=numeric,
        rich_tracebacks=rich_tracebacks,
        tracebacks_show_locals=numeric == logging.DEBUG,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(file_handler)

    _root = root
    return root


def get_logger(name: str = APP_LOGGER) -> logging.Logger:
    """Return ``vtsync.<name>``, configuring defaults on first use."""
    if _root is None:
        setup_logging()
    if name == APP_LOGGER:
        return logging.getLogger(APP_LOGGER)
    return logging.getLogger(f"{APP_LOGGER}.{name}")


def log_update_event(
    logger_instance: logging.Logger,
    platform_id: str,
    event: str,
    selected: int | None = None,
    updated: int | None = None,
    missing: int | None = None,
    error: str | None = None,
) -> None:
    """
    Log update cycle events for one platform.

    Args:
        logger_instance: Logger to use
        platform_id: Platform identifier (yt, bb, tt)
        event: Event type (started, completed, skipped, failed)
        selected: Number of stale videos selected
        updated: Number of records written back
        missing: Number of records reconciled as missing
        error: Error message if failed
    """
    extra: dict[str, Any] = {
        "platform_id": platform_id,
        "event": event,
    }

    if selected is not None:
        extra["selected"] = selected
    if updated is not None:
        extra["updated"] = updated
    if missing is not None:
        extra["missing"] = missing
    if error:
        extra["error"] = error

    if event == "failed":
        logger_instance.error(f"Update failed [{platform_id}]: {error}", extra=extra)
    elif event == "completed":
        logger_instance.info(
            f"Updated {updated} videos [{platform_id}] ({missing} missing)",
            extra=extra,
        )
    elif event == "skipped":
        logger_instance.info(f"No videos to update [{platform_id}]", extra=extra)
    else:
        logger_instance.info(f"Updating {selected} videos [{platform_id}]...", extra=extra)


def log_scrape_event(
    logger_instance: logging.Logger,
    platform_id: str,
    channel_id: str,
    event: str,
    video_count: int | None = None,
    error: str | None = None,
) -> None:
    """
    Log per-channel scrape events.

    Args:
        logger_instance: Logger to use
        platform_id: Platform identifier
        channel_id: Channel being scraped
        event: Event type (started, completed, failed)
        video_count: Number of newly discovered videos
        error: Error message if failed
    """
    extra: dict[str, Any] = {
        "platform_id": platform_id,
        "channel_id": channel_id,
        "event": event,
    }

    if video_count is not None:
        extra["video_count"] = video_count
    if error:
        extra["error"] = error

    if event == "failed":
        logger_instance.error(f"Scrape failed: {channel_id} [{platform_id}]: {error}", extra=extra)
    elif event == "completed":
        logger_instance.info(
            f"Scraped {channel_id} [{platform_id}] ({video_count} new videos)",
            extra=extra,
        )
    else:
        logger_instance.debug(f"Scraping {channel_id} [{platform_id}]...", extra=extra)
