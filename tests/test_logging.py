"""
Tests for logging helpers.
"""

import logging

import structlog

from verify_core.logging_config import mask_phone, setup_logging


def test_mask_phone():
    assert mask_phone("+14155551234") == "+14*******34"
    assert "5551" not in mask_phone("+14155551234")
    assert mask_phone("+1") == "***"
    assert mask_phone("") == "***"


def test_setup_logging_configures_root_level():
    try:
        setup_logging("verify-core-test", level="WARNING", json_output=False)

        assert logging.getLogger().level == logging.WARNING
        assert structlog.is_configured()
    finally:
        structlog.reset_defaults()
        structlog.contextvars.clear_contextvars()
