# src/recall/log.py
"""Logging setup using Loguru.

Recall logs through ``loguru.logger`` but disables its own namespace on
import, so a library user sees nothing unless they opt in. Applications call
``configure_logging`` (the CLI does this with ``--verbose``) or simply
``logger.enable("recall")`` when they manage sinks themselves.
"""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} - {message}"


def configure_logging(level: str = "INFO", log_file: str | Path | None = None) -> None:
    """Enable Recall's log output.

    - Console: coloured, human-readable, on stderr
    - File (optional): rotating, compressed

    Args:
        level: Minimum level to emit ("DEBUG", "INFO", "WARNING", ...).
        log_file: Optional path for a rotating file sink.
    """
    logger.remove()
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_path),
            level=level,
            format=FILE_FORMAT,
            rotation="10 MB",
            retention="7 days",
            compression="zip",
            enqueue=True,
        )

    logger.enable("recall")
    logger.debug(f"Logging configured | level={level} | file={log_file}")
