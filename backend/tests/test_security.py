"""Tests for identity parsing, role checks and log scrubbing."""

from __future__ import annotations

import logging

import pytest
from fastapi import HTTPException

from accommodation_api.security.identity import CallerIdentity, UserRole
from accommodation_api.security.logging_filters import SensitiveFilter, scrub
from accommodation_api.security.permissions import require_roles


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("host", UserRole.HOST), (" ADMIN ", UserRole.ADMIN), ("Guest", UserRole.GUEST), ("owner", None), (None, None)],
)
def test_role_parsing(raw, expected) -> None:
    assert UserRole.parse(raw) is expected


def test_require_roles() -> None:
    require_roles(CallerIdentity(id="u1", role=UserRole.ADMIN), {UserRole.HOST, UserRole.ADMIN})

    with pytest.raises(HTTPException) as missing:
        require_roles(CallerIdentity(id="u1"), {UserRole.HOST})
    assert missing.value.status_code == 403

    with pytest.raises(HTTPException) as wrong:
        require_roles(CallerIdentity(id="u1", role=UserRole.GUEST), {UserRole.HOST})
    assert "Required roles: host" in wrong.value.detail


def test_scrub_redacts_emails_and_tokens() -> None:
    text = "X-User-Email: jane@example.com Authorization: Bearer abc.def-1"

    cleaned = scrub(text)

    assert "jane@example.com" not in cleaned
    assert "abc.def-1" not in cleaned


def test_filter_scrubs_record_args() -> None:
    record = logging.LogRecord(
        "test", logging.INFO, __file__, 1, "deleting listings of %s", ("jane@example.com",), None
    )

    assert SensitiveFilter().filter(record) is True
    assert "jane@example.com" not in record.getMessage()
