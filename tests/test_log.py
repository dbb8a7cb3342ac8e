"""Tests for contractlens.log module.

Covers:
- Log directory and file creation
- Level selection from arguments and CONTRACTLENS_DEBUG
- No duplicate handlers on repeated setup
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from contractlens.log import setup_logging


@pytest.fixture
def clean_root_logger():
    """Remove handlers added during a test and restore the root level."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def _file_handlers(root: logging.Logger, log_dir: Path) -> list[RotatingFileHandler]:
    target = (log_dir / "contractlens.log").resolve()
    return [
        h for h in root.handlers if isinstance(h, RotatingFileHandler) and Path(h.baseFilename).resolve() == target
    ]


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_creates_log_file(self, tmp_path, clean_root_logger):
        """The directory is created and the package logger returned."""
        log_dir = tmp_path / "logs"
        logger = setup_logging(log_dir)

        assert logger.name == "contractlens"
        assert log_dir.is_dir()
        assert (log_dir.stat().st_mode & 0o777) == 0o700

        logger.info("hello")
        for handler in _file_handlers(clean_root_logger, log_dir):
            handler.flush()
        assert "hello" in (log_dir / "contractlens.log").read_text()

    def test_handler_rotation_settings(self, tmp_path, clean_root_logger):
        """The file handler rotates at 5 MB with 3 backups."""
        setup_logging(tmp_path)
        (handler,) = _file_handlers(clean_root_logger, tmp_path)
        assert handler.maxBytes == 5 * 1024 * 1024
        assert handler.backupCount == 3

    def test_no_duplicate_handlers(self, tmp_path, clean_root_logger):
        """Calling twice keeps a single handler for the file."""
        setup_logging(tmp_path)
        setup_logging(tmp_path)
        assert len(_file_handlers(clean_root_logger, tmp_path)) == 1

    def test_explicit_level(self, tmp_path, clean_root_logger):
        """An explicit level overrides the environment."""
        setup_logging(tmp_path, level=logging.WARNING)
        assert clean_root_logger.level == logging.WARNING

    def test_debug_env(self, tmp_path, clean_root_logger, monkeypatch):
        """CONTRACTLENS_DEBUG switches to DEBUG."""
        monkeypatch.setenv("CONTRACTLENS_DEBUG", "1")
        setup_logging(tmp_path)
        assert clean_root_logger.level == logging.DEBUG
