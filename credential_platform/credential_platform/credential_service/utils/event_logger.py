"""
Event logger utility for credential events.
"""
from datetime import datetime, timezone
from typing import Optional
import sys
import logging
import os

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s:%(message)s"
LOG_FILE_NAME = "credential_events.log"

ALLOWED_EVENT_TYPES = {
    "register_success",
    "register_failure",
    "login_success",
    "login_failure",
    "token_refreshed",
    "token_invalid",
}

_FAILURE_EVENTS = {"register_failure", "login_failure", "token_invalid"}


def configure_logging(level: str = "INFO", log_dir: Optional[str] = None) -> None:
    """
    Configure stdout logging, plus a file handler when ``log_dir`` is given.

    A log directory that cannot be created is reported on stderr and the
    service continues with stdout only.
    """
    handlers = [logging.StreamHandler(sys.stdout)]

    if log_dir:
        try:
            os.makedirs(log_dir, exist_ok=True)
            handlers.append(logging.FileHandler(os.path.join(log_dir, LOG_FILE_NAME)))
        except OSError as e:
            print(f"WARNING: Could not set up file logging: {e}", file=sys.stderr)

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers
    )


def log_auth_event(
    event_type: str,
    email: Optional[str] = None,
    user_id: Optional[str] = None,
    reason: Optional[str] = None,
) -> None:
    """
    Log a credential event.

    Args:
        event_type: One of: register_success, register_failure, login_success,
                    login_failure, token_refreshed, token_invalid
        email: Email the request was made for, when known
        user_id: Store identifier of the user, when known
        reason: Short failure description; never a password

    Raises:
        ValueError: If event_type is invalid
    """
    if event_type not in ALLOWED_EVENT_TYPES:
        raise ValueError(
            f"Invalid event_type '{event_type}'. Must be one of: {', '.join(sorted(ALLOWED_EVENT_TYPES))}"
        )

    level = logging.WARNING if event_type in _FAILURE_EVENTS else logging.INFO
    logger.log(
        level,
        "AUTH %s user_id=%s email=%s reason=%s timestamp=%s",
        event_type, user_id, email, reason, datetime.now(timezone.utc).isoformat()
    )
