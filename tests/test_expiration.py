"""Tests for the expiration policy."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from surplus_match.domain.errors import ValidationError
from surplus_match.domain.expiration import (
    Urgency,
    derive_status,
    time_left_label,
    urgency_for,
)
from surplus_match.domain.listings import Claim, Listing, ListingStatus
from tests.conftest import NOW, make_listing


def _claim_for(listing: Listing, claimed_at: datetime) -> Claim:
    return Claim(
        id=uuid4(),
        listing_id=listing.id,
        claimant_id=uuid4(),
        claimed_at=claimed_at,
    )


def test_unclaimed_listing_is_available_before_expiry() -> None:
    listing = make_listing(expires_in=timedelta(hours=2))

    assert derive_status(listing, None, NOW) == ListingStatus.AVAILABLE
    assert (
        derive_status(listing, None, NOW + timedelta(hours=1, minutes=59))
        == ListingStatus.AVAILABLE
    )


def test_listing_expires_exactly_at_expires_at() -> None:
    listing = make_listing(expires_in=timedelta(hours=2))

    assert derive_status(listing, None, listing.expires_at) == ListingStatus.EXPIRED


def test_claim_dominates_expiry() -> None:
    listing = make_listing(expires_in=timedelta(hours=2))
    claim = _claim_for(listing, listing.expires_at - timedelta(seconds=1))

    assert derive_status(listing, claim, NOW) == ListingStatus.CLAIMED
    assert (
        derive_status(listing, claim, listing.expires_at + timedelta(days=30))
        == ListingStatus.CLAIMED
    )


def test_claim_for_another_listing_is_ignored() -> None:
    listing = make_listing()
    other = make_listing()

    status = derive_status(listing, _claim_for(other, NOW), NOW)

    assert status == ListingStatus.AVAILABLE


def test_derive_status_is_deterministic() -> None:
    listing = make_listing(expires_in=timedelta(minutes=30))
    claim = _claim_for(listing, NOW)
    moments = [NOW, listing.expires_at, listing.expires_at + timedelta(hours=5)]

    for now in moments:
        for maybe_claim in (None, claim):
            first = derive_status(listing, maybe_claim, now)
            second = derive_status(listing, maybe_claim, now)
            assert first == second


def test_expired_and_claimed_are_monotonic_in_time() -> None:
    listing = make_listing(expires_in=timedelta(hours=1))
    claim = _claim_for(listing, NOW + timedelta(minutes=10))
    later = [
        listing.expires_at + timedelta(minutes=offset) for offset in range(0, 600, 7)
    ]

    assert all(
        derive_status(listing, None, now) == ListingStatus.EXPIRED for now in later
    )
    assert all(
        derive_status(listing, claim, now) == ListingStatus.CLAIMED
        for now in [NOW, *later]
    )


@pytest.mark.parametrize(
    ("remaining", "expected"),
    [
        (timedelta(minutes=30), Urgency.CRITICAL),
        (timedelta(hours=1, minutes=59), Urgency.CRITICAL),
        (timedelta(hours=2), Urgency.HIGH),
        (timedelta(hours=5), Urgency.HIGH),
        (timedelta(hours=6), Urgency.NORMAL),
        (timedelta(days=3), Urgency.NORMAL),
        (timedelta(0), Urgency.EXPIRED),
        (timedelta(hours=-1), Urgency.EXPIRED),
    ],
)
def test_urgency_tiers(remaining: timedelta, expected: Urgency) -> None:
    assert urgency_for(NOW + remaining, NOW) == expected


@pytest.mark.parametrize(
    ("remaining", "expected"),
    [
        (timedelta(minutes=20), "Expires soon"),
        (timedelta(hours=1), "1h left"),
        (timedelta(hours=4, minutes=30), "5h left"),
        (timedelta(hours=23), "23h left"),
        (timedelta(hours=24), "1d left"),
        (timedelta(hours=30), "2d left"),
        (timedelta(minutes=-5), "Expired"),
    ],
)
def test_time_left_label(remaining: timedelta, expected: str) -> None:
    assert time_left_label(NOW + remaining, NOW) == expected


def test_listing_rejects_blank_fields() -> None:
    with pytest.raises(ValidationError):
        make_listing(item_name="   ")


def test_listing_rejects_naive_timestamps() -> None:
    with pytest.raises(ValidationError):
        Listing(
            id=uuid4(),
            owner_id=uuid4(),
            item_name="Soup",
            quantity="4 litres",
            expires_at=datetime(2026, 3, 14, 18, 0),
            created_at=datetime(2026, 3, 14, 12, 0, tzinfo=UTC),
        )
