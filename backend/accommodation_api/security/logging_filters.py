"""Logging filters that scrub sensitive content."""

from __future__ import annotations

import logging
import re

_SENSITIVE_PATTERN = re.compile(
    r"(Authorization: Bearer\s+[\w\.-]+|X-User-Email:\s*\S+|access_token\"\s*:\s*\"[^\"]+\")",
    re.IGNORECASE,
)
_EMAIL_PATTERN = re.compile(r"[\w.+-]+@[\w-]+\.[\w.-]+")
_MARKER = "**REDACTED**"


def scrub(value: str) -> str:
    """Return the value with tokens and e-mail addresses redacted."""

    return _EMAIL_PATTERN.sub(_MARKER, _SENSITIVE_PATTERN.sub(_MARKER, value))


class SensitiveFilter(logging.Filter):
    """Replace tokens and e-mail addresses in log records with a marker."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = scrub(record.msg)
        if isinstance(record.args, tuple):
            record.args = tuple(
                scrub(arg) if isinstance(arg, str) else arg for arg in record.args
            )
        return True


__all__ = ["SensitiveFilter", "scrub"]
