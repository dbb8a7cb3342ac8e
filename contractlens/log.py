"""Logging setup for contractlens."""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_dir: Path | None = None, level: str | int | None = None) -> logging.Logger:
    """Configure secure logging with rotation.

    Logs are written to ~/.contractlens/logs/ with proper permissions.
    Uses INFO level by default; set CONTRACTLENS_DEBUG=1 for DEBUG level.
    Calling it again does not add a second handler for the same file.

    Args:
        log_dir: Directory for contractlens.log
        level: Explicit level, overriding the environment

    Returns:
        The contractlens package logger
    """
    # Create log directory in user's home (not world-readable /tmp)
    log_dir = log_dir or Path.home() / ".contractlens" / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    # Restrict directory permissions to owner only (700)
    log_dir.chmod(0o700)

    log_file = log_dir / "contractlens.log"

    if level is None:
        level = logging.DEBUG if os.environ.get("CONTRACTLENS_DEBUG") else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for existing in root_logger.handlers:
        if isinstance(existing, RotatingFileHandler) and Path(existing.baseFilename).resolve() == log_file.resolve():
            return logging.getLogger("contractlens")

    # Configure rotating file handler (5MB max, keep 3 backups)
    handler = RotatingFileHandler(
        log_file,
        maxBytes=5 * 1024 * 1024,  # 5 MB
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)

    return logging.getLogger("contractlens")


__all__ = ["LOG_FORMAT", "setup_logging"]
