"""Tests for date range overlap predicates."""

from __future__ import annotations

import datetime

import pytest

from accommodation_api.services.intervals import iter_nights, overlaps, overlaps_open

D = datetime.date


@pytest.mark.parametrize(
    ("a", "b", "expected"),
    [
        ((D(2025, 7, 1), D(2025, 7, 31)), (D(2025, 7, 31), D(2025, 8, 10)), True),
        ((D(2025, 7, 1), D(2025, 7, 10)), (D(2025, 7, 11), D(2025, 7, 20)), False),
        ((D(2025, 7, 1), D(2025, 7, 31)), (D(2025, 7, 5), D(2025, 7, 6)), True),
        ((D(2025, 9, 1), D(2025, 9, 10)), (D(2025, 9, 5), D(2025, 9, 8)), True),
    ],
)
def test_closed_overlap(a, b, expected) -> None:
    assert overlaps(*a, *b) is expected
    assert overlaps(*b, *a) is expected


def test_open_overlap_treats_check_out_as_departure() -> None:
    window = (D(2025, 7, 10), D(2025, 7, 15))

    assert overlaps_open(D(2025, 7, 15), D(2025, 7, 20), *window) is False
    assert overlaps_open(D(2025, 7, 5), D(2025, 7, 10), *window) is False
    assert overlaps_open(D(2025, 7, 14), D(2025, 7, 20), *window) is True


def test_open_overlap_block_without_end() -> None:
    assert overlaps_open(D(2025, 7, 1), None, D(2025, 8, 1), D(2025, 8, 3)) is True
    assert overlaps_open(D(2025, 8, 3), None, D(2025, 8, 1), D(2025, 8, 3)) is False


def test_iter_nights() -> None:
    nights = list(iter_nights(D(2025, 12, 30), 3))
    assert nights == [D(2025, 12, 30), D(2025, 12, 31), D(2026, 1, 1)]
    assert list(iter_nights(D(2025, 1, 1), 0)) == []
