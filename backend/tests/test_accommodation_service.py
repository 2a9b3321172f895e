"""Tests for the accommodation aggregate service."""

from __future__ import annotations

import datetime
import uuid
from decimal import Decimal
from io import BytesIO

import pytest
from PIL import Image

from accommodation_api.core.config import get_settings
from accommodation_api.core.errors import (
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    PhotoStorageError,
)
from accommodation_api.integrations import S3Client, S3ClientError
from accommodation_api.models import BlockedPeriod, BlockReason, PricingRule
from accommodation_api.schemas.accommodation import AccommodationCreate, AccommodationUpdate
from accommodation_api.schemas.events import ReservationCreatedEvent
from accommodation_api.services import accommodation_service, block_service
from accommodation_api.services.accommodation_service import SearchFilters
from accommodation_api.services.photo_service import PhotoUpload

pytestmark = pytest.mark.asyncio

D = datetime.date


class _FlakyS3Client(S3Client):
    """Fails every upload after the first one."""

    uploads = 0

    def put_object(self, key, data, *, content_type, cache_seconds=None):
        self.uploads += 1
        if self.uploads > 1:
            raise S3ClientError("bucket unavailable")
        return super().put_object(
            key, data, content_type=content_type, cache_seconds=cache_seconds
        )


def _image(fmt: str) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (32, 24), color=(40, 120, 200)).save(buffer, format=fmt)
    return buffer.getvalue()


def _photo(
    name: str = "room.jpg", fmt: str = "JPEG", content_type: str = "image/jpeg"
) -> PhotoUpload:
    return PhotoUpload(filename=name, content_type=content_type, data=_image(fmt))


async def test_create_sets_host_and_empty_photos(repos, host) -> None:
    accommodation = await accommodation_service.create_accommodation(
        repos,
        payload=AccommodationCreate(
            name="Alpine Lodge",
            location="Kranjska Gora",
            amenities=["sauna"],
            min_guests=2,
            max_guests=6,
            base_price=Decimal("120.00"),
        ),
        caller=host,
    )

    assert accommodation.host_id == host.id
    assert accommodation.photo_keys == []
    assert accommodation.auto_approve is False
    assert accommodation.is_per_unit is False


async def test_create_rejects_inverted_guest_bounds(repos, host) -> None:
    with pytest.raises(InvalidInputError):
        await accommodation_service.create_accommodation(
            repos,
            payload=AccommodationCreate(
                name="Tiny",
                location="Piran",
                min_guests=4,
                max_guests=2,
                base_price=Decimal("50.00"),
            ),
            caller=host,
        )


async def test_update_checks_effective_guest_bounds(repos, host, other_host, accommodation_factory) -> None:
    accommodation = await accommodation_factory(min_guests=1, max_guests=4)

    with pytest.raises(InvalidInputError):
        await accommodation_service.update_accommodation(
            repos,
            accommodation_id=accommodation.id,
            payload=AccommodationUpdate(min_guests=5),
            caller=host,
        )
    with pytest.raises(ForbiddenError):
        await accommodation_service.update_accommodation(
            repos,
            accommodation_id=accommodation.id,
            payload=AccommodationUpdate(name="Taken"),
            caller=other_host,
        )

    updated = await accommodation_service.update_accommodation(
        repos,
        accommodation_id=accommodation.id,
        payload=AccommodationUpdate(max_guests=8, base_price=Decimal("140.00")),
        caller=host,
    )
    assert updated.max_guests == 8
    assert updated.base_price == Decimal("140.00")
    assert updated.name == "Lakeside Cabin"


async def test_get_missing_accommodation(repos) -> None:
    with pytest.raises(NotFoundError):
        await accommodation_service.get_accommodation(repos, accommodation_id=uuid.uuid4())


async def test_upload_photos_appends_keys(repos, host, s3_client, photo_path, accommodation_factory) -> None:
    accommodation = await accommodation_factory()

    updated = await accommodation_service.upload_photos(
        repos,
        s3_client,
        accommodation_id=accommodation.id,
        files=[_photo(), _photo("view.png", "PNG", "image/png")],
        caller=host,
        settings=get_settings(),
    )

    assert len(updated.photo_keys) == 2
    first, second = updated.photo_keys
    assert first.startswith(f"{accommodation.id}/") and first.endswith(".jpg")
    assert second.endswith(".png")
    assert all(photo_path(key).is_file() for key in updated.photo_keys)


async def test_upload_photos_requires_host(repos, other_host, s3_client, accommodation_factory) -> None:
    accommodation = await accommodation_factory()

    with pytest.raises(ForbiddenError):
        await accommodation_service.upload_photos(
            repos,
            s3_client,
            accommodation_id=accommodation.id,
            files=[_photo()],
            caller=other_host,
            settings=get_settings(),
        )


async def test_upload_photos_is_all_or_nothing(repos, host, tmp_path, accommodation_factory) -> None:
    flaky = _FlakyS3Client("flaky", root=tmp_path / "flaky")
    accommodation = await accommodation_factory()

    with pytest.raises(PhotoStorageError):
        await accommodation_service.upload_photos(
            repos,
            flaky,
            accommodation_id=accommodation.id,
            files=[_photo("a.jpg"), _photo("b.jpg")],
            caller=host,
            settings=get_settings(),
        )

    refreshed = await accommodation_service.get_accommodation(
        repos, accommodation_id=accommodation.id
    )
    assert refreshed.photo_keys == []
    assert not any((tmp_path / "flaky" / "flaky").rglob("*.jpg"))


async def test_delete_removes_photos_rules_and_blocks(repos, host, s3_client, photo_path, accommodation_factory) -> None:
    accommodation = await accommodation_factory()
    accommodation = await accommodation_service.upload_photos(
        repos,
        s3_client,
        accommodation_id=accommodation.id,
        files=[_photo()],
        caller=host,
        settings=get_settings(),
    )
    key = accommodation.photo_keys[0]
    await repos.rules.add(
        PricingRule(
            accommodation_id=accommodation.id,
            start_date=D(2025, 7, 1),
            end_date=D(2025, 7, 31),
            multiplier=Decimal("1.50"),
        )
    )
    await repos.blocks.add(
        BlockedPeriod(
            accommodation_id=accommodation.id,
            start_date=D(2025, 8, 1),
            end_date=D(2025, 8, 5),
            reason=BlockReason.MANUAL,
        )
    )

    await accommodation_service.delete_accommodation(
        repos, s3_client, accommodation_id=accommodation.id, caller=host
    )

    assert await repos.accommodations.get(accommodation.id) is None
    assert await repos.rules.list_for_accommodation(accommodation.id) == []
    assert await repos.blocks.list_for_accommodation(accommodation.id) == []
    assert not photo_path(key).exists()


async def test_remove_all_by_host_id(repos, s3_client, accommodation_factory) -> None:
    await accommodation_factory(name="One")
    await accommodation_factory(name="Two")
    survivor = await accommodation_factory(name="Other", host_id="host-2")

    assert await accommodation_service.remove_all_by_host_id(repos, s3_client, host_id="host-1") == 2
    assert await accommodation_service.remove_all_by_host_id(repos, s3_client, host_id="host-1") == 0
    assert await repos.accommodations.get(survivor.id) is not None


async def test_find_all_filters_location_and_guests(repos, accommodation_factory) -> None:
    await accommodation_factory(name="Cabin", location="Lake Bled", min_guests=1, max_guests=2)
    await accommodation_factory(name="Villa", location="BLED centre", min_guests=4, max_guests=10)
    await accommodation_factory(name="Flat", location="Ljubljana")

    page = await accommodation_service.find_all(
        repos, filters=SearchFilters(location="bled", guests=5)
    )

    assert page.total == 1
    assert [hit.accommodation.name for hit in page.hits] == ["Villa"]
    assert page.hits[0].price is None


async def test_find_all_excludes_blocked_and_prices_the_rest(repos, accommodation_factory) -> None:
    blocked = await accommodation_factory(name="Blocked")
    free = await accommodation_factory(name="Free")
    await repos.rules.add(
        PricingRule(
            accommodation_id=free.id,
            start_date=D(2025, 7, 1),
            end_date=D(2025, 7, 31),
            multiplier=Decimal("1.50"),
        )
    )
    await block_service.create_reservation_block(
        repos,
        event=ReservationCreatedEvent(
            reservation_id="res-42",
            accommodation_id=blocked.id,
            start_date=D(2025, 7, 2),
            end_date=D(2025, 7, 4),
        ),
    )

    page = await accommodation_service.find_all(
        repos,
        filters=SearchFilters(guests=2, check_in=D(2025, 6, 30), check_out=D(2025, 7, 3)),
    )

    assert [hit.accommodation.id for hit in page.hits] == [free.id]
    price = page.hits[0].price
    assert price is not None
    assert price.nights == 3
    assert price.total == Decimal("800.00")
    assert price.rules_applied == 2


async def test_find_all_block_ending_on_check_in_does_not_exclude(repos, accommodation_factory) -> None:
    accommodation = await accommodation_factory()
    await repos.blocks.add(
        BlockedPeriod(
            accommodation_id=accommodation.id,
            start_date=D(2025, 7, 1),
            end_date=D(2025, 7, 5),
            reason=BlockReason.MANUAL,
        )
    )

    page = await accommodation_service.find_all(
        repos, filters=SearchFilters(check_in=D(2025, 7, 5), check_out=D(2025, 7, 7))
    )

    assert page.total == 1
    # Guest count falls back to min_guests.
    assert page.hits[0].price is not None
    assert page.hits[0].price.total == Decimal("200.00")


async def test_find_all_paginates_in_creation_order(repos, accommodation_factory) -> None:
    for index in range(5):
        await accommodation_factory(name=f"Listing {index}")

    page = await accommodation_service.find_all(
        repos, filters=SearchFilters(page=2, page_size=2)
    )

    assert page.total == 5
    assert page.page == 2
    assert [hit.accommodation.name for hit in page.hits] == ["Listing 2", "Listing 3"]


async def test_find_all_validates_dates(repos) -> None:
    with pytest.raises(InvalidInputError):
        await accommodation_service.find_all(
            repos, filters=SearchFilters(check_in=D(2025, 7, 5), check_out=D(2025, 7, 5))
        )
    with pytest.raises(InvalidInputError):
        await accommodation_service.find_all(
            repos, filters=SearchFilters(check_in=D(2025, 7, 5))
        )


async def test_failed_delete_keeps_photos(
    repos, host, s3_client, photo_path, accommodation_factory, monkeypatch: pytest.MonkeyPatch
) -> None:
    accommodation = await accommodation_factory()
    accommodation = await accommodation_service.upload_photos(
        repos,
        s3_client,
        accommodation_id=accommodation.id,
        files=[_photo()],
        caller=host,
        settings=get_settings(),
    )
    key = accommodation.photo_keys[0]

    async def _failing_delete(_accommodation) -> None:
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(repos.accommodations, "delete", _failing_delete)

    with pytest.raises(RuntimeError):
        await accommodation_service.delete_accommodation(
            repos, s3_client, accommodation_id=accommodation.id, caller=host
        )

    assert await repos.accommodations.get(accommodation.id) is not None
    assert photo_path(key).is_file()


async def test_delete_survives_photo_cleanup_failure(
    repos, host, s3_client, accommodation_factory, monkeypatch: pytest.MonkeyPatch
) -> None:
    accommodation = await accommodation_factory()
    accommodation = await accommodation_service.upload_photos(
        repos,
        s3_client,
        accommodation_id=accommodation.id,
        files=[_photo()],
        caller=host,
        settings=get_settings(),
    )

    def _failing_delete_object(key: str) -> None:
        raise S3ClientError(f"cannot delete {key}")

    monkeypatch.setattr(s3_client, "delete_object", _failing_delete_object)

    await accommodation_service.delete_accommodation(
        repos, s3_client, accommodation_id=accommodation.id, caller=host
    )

    assert await repos.accommodations.get(accommodation.id) is None


async def test_find_all_location_wildcards_are_literal(repos, accommodation_factory) -> None:
    await accommodation_factory(name="Cabin", location="Bled")
    await accommodation_factory(name="Loft", location="Bled_North 100%")

    percent = await accommodation_service.find_all(
        repos, filters=SearchFilters(location="%")
    )
    underscore = await accommodation_service.find_all(
        repos, filters=SearchFilters(location="d_n")
    )

    assert [hit.accommodation.name for hit in percent.hits] == ["Loft"]
    assert [hit.accommodation.name for hit in underscore.hits] == ["Loft"]
    assert (
        await accommodation_service.find_all(repos, filters=SearchFilters(location="l_d"))
    ).total == 0
