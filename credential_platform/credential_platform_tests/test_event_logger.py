"""Tests for the credential event logger."""
import logging

import pytest

from credential_platform.credential_platform.credential_service.utils.event_logger import (
    ALLOWED_EVENT_TYPES,
    log_auth_event,
)


def test_rejects_unknown_event_type():
    with pytest.raises(ValueError) as exc_info:
        log_auth_event("password_reset", email="a@x.com")
    assert "Invalid event_type" in str(exc_info.value)


@pytest.mark.parametrize("event_type", sorted(ALLOWED_EVENT_TYPES))
def test_logs_every_allowed_event(event_type, caplog):
    with caplog.at_level(logging.INFO):
        log_auth_event(event_type, email="a@x.com", user_id="42")

    assert len(caplog.records) == 1
    message = caplog.records[0].getMessage()
    assert message.startswith(f"AUTH {event_type} ")
    assert "user_id=42" in message
    assert "email=a@x.com" in message


def test_failures_logged_as_warnings(caplog):
    with caplog.at_level(logging.INFO):
        log_auth_event("login_failure", email="a@x.com")
        log_auth_event("login_success", email="a@x.com")

    assert [r.levelno for r in caplog.records] == [logging.WARNING, logging.INFO]
