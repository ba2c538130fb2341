# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-03-02
# Description: test_logging_utils.py
# -----------------------------------------------------------------------------
import logging

from utility.logging_utils import BASE_LOGGER_NAME, RedactSecretsFilter, get_class_logger, get_logger


class _Sample:
    pass


def _record(msg, *args):
    return logging.LogRecord("x", logging.INFO, __file__, 1, msg, args, None)


def test_class_logger_is_child_of_base():
    logger = get_class_logger(_Sample)

    assert logger.name == f"{BASE_LOGGER_NAME}.{__name__}._Sample"
    assert get_logger().propagate is False


def test_base_handlers_are_configured_once():
    get_logger("a")
    get_logger("b")

    assert len(logging.getLogger(BASE_LOGGER_NAME).handlers) >= 1
    assert logging.getLogger(f"{BASE_LOGGER_NAME}.a").handlers == []


def test_secrets_are_redacted():
    record = _record("client built with %s", "sk-abcdefghijklmnop1234")
    RedactSecretsFilter().filter(record)
    assert "sk-abc" not in record.getMessage()

    record = _record("GEMINI api_key=AIzaSyA-very-secret-value-123456")
    RedactSecretsFilter().filter(record)
    assert "secret" not in record.getMessage()


def test_plain_messages_are_untouched():
    record = _record("Indexed member %s", "abc123")
    RedactSecretsFilter().filter(record)
    assert record.getMessage() == "Indexed member abc123"
    assert record.args == ("abc123",)
