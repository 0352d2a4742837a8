"""Tests for logging setup."""

import io
import logging

import pytest

from raccoon_kv import configure_logging


@pytest.fixture
def restore_logger():
    logger = logging.getLogger("raccoon_kv")
    level = logger.level
    yield logger
    logger.setLevel(level)


def test_level_by_name(restore_logger):
    configure_logging("debug", stream=io.StringIO())

    assert restore_logger.level == logging.DEBUG


def test_level_by_number(restore_logger):
    configure_logging(logging.WARNING, stream=io.StringIO())

    assert restore_logger.level == logging.WARNING


def test_unknown_level(restore_logger):
    with pytest.raises(ValueError, match="chatty"):
        configure_logging("chatty")
