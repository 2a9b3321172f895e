"""Tests for availability blocking."""

from __future__ import annotations

import datetime
import uuid

import pytest

from accommodation_api.core.errors import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
)
from accommodation_api.models import BlockReason
from accommodation_api.schemas.blocked_period import ManualBlockCreate
from accommodation_api.schemas.events import ReservationCreatedEvent
from accommodation_api.services import block_service

pytestmark = pytest.mark.asyncio

D = datetime.date


def _event(accommodation_id, start, end, reservation_id="res-1") -> ReservationCreatedEvent:
    return ReservationCreatedEvent(
        reservation_id=reservation_id,
        accommodation_id=accommodation_id,
        start_date=start,
        end_date=end,
    )


async def test_manual_block_over_reservation_conflicts(repos, host, accommodation_factory) -> None:
    accommodation = await accommodation_factory()
    await block_service.create_reservation_block(
        repos, event=_event(accommodation.id, D(2025, 9, 5), D(2025, 9, 8))
    )

    with pytest.raises(ConflictError):
        await block_service.create_manual_block(
            repos,
            accommodation_id=accommodation.id,
            payload=ManualBlockCreate(start_date=D(2025, 9, 1), end_date=D(2025, 9, 10)),
            caller=host,
        )


async def test_manual_blocks_may_overlap(repos, host, accommodation_factory) -> None:
    accommodation = await accommodation_factory()
    for start, end in ((D(2025, 9, 1), D(2025, 9, 10)), (D(2025, 9, 5), D(2025, 9, 12))):
        await block_service.create_manual_block(
            repos,
            accommodation_id=accommodation.id,
            payload=ManualBlockCreate(start_date=start, end_date=end, notes="renovation"),
            caller=host,
        )

    blocks = await block_service.list_blocks(repos, accommodation_id=accommodation.id)
    assert [block.start_date for block in blocks] == [D(2025, 9, 1), D(2025, 9, 5)]
    assert all(block.reason == BlockReason.MANUAL for block in blocks)


async def test_manual_block_validation(repos, host, other_host, accommodation_factory) -> None:
    accommodation = await accommodation_factory()

    with pytest.raises(InvalidInputError):
        await block_service.create_manual_block(
            repos,
            accommodation_id=accommodation.id,
            payload=ManualBlockCreate(start_date=D(2025, 9, 3), end_date=D(2025, 9, 1)),
            caller=host,
        )
    with pytest.raises(ForbiddenError):
        await block_service.create_manual_block(
            repos,
            accommodation_id=accommodation.id,
            payload=ManualBlockCreate(start_date=D(2025, 9, 1), end_date=D(2025, 9, 3)),
            caller=other_host,
        )


async def test_delete_manual_block(repos, host, other_host, accommodation_factory) -> None:
    accommodation = await accommodation_factory()
    block = await block_service.create_manual_block(
        repos,
        accommodation_id=accommodation.id,
        payload=ManualBlockCreate(start_date=D(2025, 9, 1), end_date=D(2025, 9, 3)),
        caller=host,
    )

    with pytest.raises(ForbiddenError):
        await block_service.delete_manual_block(
            repos, accommodation_id=accommodation.id, block_id=block.id, caller=other_host
        )

    await block_service.delete_manual_block(
        repos, accommodation_id=accommodation.id, block_id=block.id, caller=host
    )
    assert await block_service.list_blocks(repos, accommodation_id=accommodation.id) == []


async def test_reservation_block_is_not_manually_deletable(repos, host, accommodation_factory) -> None:
    accommodation = await accommodation_factory()
    block = await block_service.create_reservation_block(
        repos, event=_event(accommodation.id, D(2025, 9, 5), D(2025, 9, 8))
    )
    assert block is not None

    with pytest.raises(NotFoundError):
        await block_service.delete_manual_block(
            repos, accommodation_id=accommodation.id, block_id=block.id, caller=host
        )


async def test_reservation_block_is_idempotent(repos, accommodation_factory) -> None:
    accommodation = await accommodation_factory()
    event = _event(accommodation.id, D(2025, 9, 5), D(2025, 9, 8))

    first = await block_service.create_reservation_block(repos, event=event)
    second = await block_service.create_reservation_block(repos, event=event)

    assert first is not None and second is not None
    assert first.id == second.id
    blocks = await block_service.list_blocks(repos, accommodation_id=accommodation.id)
    assert len(blocks) == 1
    assert blocks[0].reason == BlockReason.RESERVATION


async def test_reservation_block_for_unknown_accommodation(repos) -> None:
    result = await block_service.create_reservation_block(
        repos, event=_event(uuid.uuid4(), D(2025, 9, 5), D(2025, 9, 8))
    )

    assert result is None


async def test_reservation_block_rejects_inverted_range(repos, accommodation_factory) -> None:
    accommodation = await accommodation_factory()

    with pytest.raises(InvalidInputError):
        await block_service.create_reservation_block(
            repos, event=_event(accommodation.id, D(2025, 9, 8), D(2025, 9, 5))
        )


async def test_remove_reservation_block(repos, accommodation_factory) -> None:
    accommodation = await accommodation_factory()
    await block_service.create_reservation_block(
        repos, event=_event(accommodation.id, D(2025, 9, 5), D(2025, 9, 8))
    )

    assert await block_service.remove_reservation_block(repos, reservation_id="res-1") is True
    assert await block_service.remove_reservation_block(repos, reservation_id="res-1") is False
    assert not await block_service.has_active_reservation_overlap(
        repos, accommodation_id=accommodation.id, start=D(2025, 9, 1), end=D(2025, 9, 30)
    )


async def test_list_blocks_unknown_accommodation(repos) -> None:
    with pytest.raises(NotFoundError):
        await block_service.list_blocks(repos, accommodation_id=uuid.uuid4())


def _record_lookups(repos, monkeypatch: pytest.MonkeyPatch) -> list[bool]:
    locks: list[bool] = []
    original_get = repos.accommodations.get

    async def _get(accommodation_id, *, for_update=False):
        locks.append(for_update)
        return await original_get(accommodation_id, for_update=for_update)

    monkeypatch.setattr(repos.accommodations, "get", _get)
    return locks


async def test_block_writers_lock_the_accommodation_row(
    repos, host, accommodation_factory, monkeypatch: pytest.MonkeyPatch
) -> None:
    accommodation = await accommodation_factory()
    locks = _record_lookups(repos, monkeypatch)

    await block_service.create_manual_block(
        repos,
        accommodation_id=accommodation.id,
        payload=ManualBlockCreate(start_date=D(2025, 9, 1), end_date=D(2025, 9, 3)),
        caller=host,
    )
    await block_service.create_reservation_block(
        repos, event=_event(accommodation.id, D(2025, 9, 10), D(2025, 9, 12))
    )

    assert locks == [True, True]


async def test_locked_lookup_returns_the_row(repos, accommodation_factory) -> None:
    accommodation = await accommodation_factory()

    locked = await repos.accommodations.get(accommodation.id, for_update=True)

    assert locked is not None and locked.id == accommodation.id
    assert await repos.accommodations.get(uuid.uuid4(), for_update=True) is None
