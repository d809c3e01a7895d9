"""Logging filters that scrub sensitive content."""

from __future__ import annotations

import logging
import re

_SENSITIVE_PATTERN = re.compile(
    r"(Authorization: Bearer\s+[\w\.-]+"
    r"|access_token\"\s*:\s*\"[^\"]+\""
    r"|password\"\s*:\s*\"[^\"]+\""
    r"|password=[^&\s]+)",
    re.IGNORECASE,
)

REDACTED = "**REDACTED**"


def redact(message: str) -> str:
    """Return ``message`` with bearer tokens and passwords masked."""
    return _SENSITIVE_PATTERN.sub(REDACTED, message)


class SensitiveFilter(logging.Filter):
    """Replace sensitive tokens in log messages with a redaction marker."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = redact(record.msg)
        return True


def install_sensitive_filter(*logger_names: str) -> None:
    """Attach a single ``SensitiveFilter`` to each named logger."""
    for name in logger_names:
        target = logging.getLogger(name)
        if not any(isinstance(flt, SensitiveFilter) for flt in target.filters):
            target.addFilter(SensitiveFilter())


__all__ = ["REDACTED", "SensitiveFilter", "install_sensitive_filter", "redact"]
