"""Logging configuration with PII redaction for the invoice builder."""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Optional

from .config import Settings, settings as default_settings

ROOT_LOGGER_NAME = "einvoice"

# IBAN pattern: 2 letters + 2 digits + up to 30 alphanumeric characters
IBAN_PATTERN = re.compile(r"([A-Z]{2}\d{2}[A-Z0-9]{1,30})")
EMAIL_PATTERN = re.compile(r"(\b\S+@\S+\.\S+\b)")
# Phone pattern: optional +, digits, spaces, dashes, slashes
PHONE_PATTERN = re.compile(r"(\+?\d[\d \-/]{6,})")

_RESERVED_RECORD_KEYS = frozenset(
    (
        "name", "msg", "args", "levelname", "levelno", "pathname", "filename",
        "module", "exc_info", "exc_text", "stack_info", "lineno", "funcName",
        "created", "msecs", "relativeCreated", "thread", "threadName",
        "processName", "process", "message", "taskName",
    )
)


def _mask_iban(match: re.Match) -> str:
    """Mask IBAN: show first 2 chars, mask the rest."""
    iban = match.group(1)
    if len(iban) <= 4:
        return "**" + "*" * (len(iban) - 2)
    return iban[:2] + "**" + "*" * (len(iban) - 4)


def _mask_email(match: re.Match) -> str:
    """Mask email: show first char of user, keep domain."""
    email = match.group(1)
    if "@" not in email:
        return email
    user, domain = email.split("@", 1)
    if len(user) <= 1:
        masked_user = "*"
    else:
        masked_user = user[0] + "*" * (len(user) - 1)
    return f"{masked_user}@{domain}"


def _mask_phone(match: re.Match) -> str:
    """Mask phone: show first 2 chars, mask the rest."""
    phone = match.group(1)
    if len(phone) <= 2:
        return "*" * len(phone)
    return phone[:2] + "*" * (len(phone) - 2)


def redact_pii(text: str) -> str:
    """Redact IBANs, e-mail addresses and phone numbers from ``text``."""
    if not isinstance(text, str):
        return text
    text = IBAN_PATTERN.sub(_mask_iban, text)
    text = EMAIL_PATTERN.sub(_mask_email, text)
    text = PHONE_PATTERN.sub(_mask_phone, text)
    return text


class PIIRedactionFilter(logging.Filter):
    """Filter to redact PII from log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.msg:
            record.msg = redact_pii(str(record.msg))

        if record.args and isinstance(record.args, tuple):
            record.args = tuple(
                redact_pii(arg) if isinstance(arg, str) else arg for arg in record.args
            )

        return True


class JSONFormatter(logging.Formatter):
    """JSON formatter with mandatory fields and PII redaction."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": redact_pii(record.getMessage()),
            "ts_utc": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        }

        if record.exc_info:
            log_entry["exc_info"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in _RESERVED_RECORD_KEYS or key in log_entry:
                continue
            if isinstance(value, str):
                value = redact_pii(value)
            log_entry[key] = value

        return json.dumps(log_entry, default=str)


def init_logging(config: Optional[Settings] = None) -> logging.Logger:
    """Configure the ``einvoice`` logger from settings."""
    config = config or default_settings
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    for existing in logger.filters[:]:
        logger.removeFilter(existing)

    handler = logging.StreamHandler(sys.stderr)
    if config.log_json:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    if config.pii_redaction:
        handler.addFilter(PIIRedactionFilter())
    logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger with PII redaction applied."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, PIIRedactionFilter) for f in logger.filters):
        logger.addFilter(PIIRedactionFilter())
    return logger


__all__ = [
    "ROOT_LOGGER_NAME",
    "PIIRedactionFilter",
    "JSONFormatter",
    "redact_pii",
    "init_logging",
    "get_logger",
]
