"""Tests for the application logger configuration."""

import logging

from settings import settings
from utils.logging import logger


def test_logger_level_follows_settings():
    assert logger.level == settings.logging_level


def test_logger_writes_to_stdout_only():
    assert logger.propagate is False
    assert any(isinstance(handler, logging.StreamHandler) for handler in logger.handlers)
