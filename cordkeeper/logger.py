"""Logger configuration for Cordkeeper."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger


def setup_logger(
    level: str = "INFO",
    log_file: str | Path | None = None,
    *,
    console: bool = True,
    rotation: str = "1 MB",
    retention: str = "14 days",
) -> None:
    """Configure loguru with console and optional file output.

    The Textual dashboard owns the terminal while it runs, so the entry point
    disables ``console`` and routes everything to ``log_file`` instead.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file.
        console: Whether to keep a stderr handler.
        rotation: Log rotation size (e.g. "1 MB", "1 day").
        retention: Log retention period (e.g. "14 days").
    """
    logger.remove()

    if console:
        logger.add(
            sys.stderr,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
            level=level,
            colorize=True,
        )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level=level,
            rotation=rotation,
            retention=retention,
        )

    logger.debug(f"Logger initialized with level={level}")


__all__ = ["setup_logger"]
