"""Read-side projections over listings and claims.

Every projection runs listings through ``derive_status`` against the
supplied ``now``; nothing here trusts a previously computed status.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from surplus_match.domain.expiration import (
    Urgency,
    derive_status,
    time_left_label,
    urgency_for,
)
from surplus_match.domain.listings import Claim, Listing, ListingStatus


class ListingScope(StrEnum):
    """Which slice of listings an actor asks for."""

    ALL = "all"
    AVAILABLE = "available"
    CLAIMED = "claimed"


@dataclass(frozen=True)
class ListingView:
    """A listing annotated with its derived status."""

    listing: Listing
    status: ListingStatus
    claim: Claim | None
    urgency: Urgency
    time_left: str


@dataclass(frozen=True)
class DashboardSummary:
    """Listing counts per derived status."""

    total: int
    available: int
    claimed: int
    expired: int


def annotate(
    listings: Iterable[Listing], claims: dict[UUID, Claim], now: datetime
) -> list[ListingView]:
    """Attach derived status and urgency to each listing, keeping order."""
    return [view_of(listing, claims.get(listing.id), now) for listing in listings]


def view_of(listing: Listing, claim: Claim | None, now: datetime) -> ListingView:
    """Build the view for a single listing."""
    status = derive_status(listing, claim, now)
    if status == ListingStatus.AVAILABLE:
        urgency = urgency_for(listing.expires_at, now)
        time_left = time_left_label(listing.expires_at, now)
    elif status == ListingStatus.EXPIRED:
        urgency = Urgency.EXPIRED
        time_left = "Expired"
    else:
        urgency = Urgency.NORMAL
        time_left = "Claimed"
    return ListingView(
        listing=listing,
        status=status,
        claim=claim,
        urgency=urgency,
        time_left=time_left,
    )


def with_status(
    views: Iterable[ListingView], status: ListingStatus
) -> list[ListingView]:
    """Keep views whose derived status matches."""
    return [view for view in views if view.status == status]


def available_only(views: Iterable[ListingView]) -> list[ListingView]:
    """Keep views a farm can still claim."""
    return with_status(views, ListingStatus.AVAILABLE)


def claimed_by(views: Iterable[ListingView], claimant_id: UUID) -> list[ListingView]:
    """Keep views claimed by the given claimant."""
    return [
        view
        for view in views
        if view.claim is not None and view.claim.claimant_id == claimant_id
    ]


def soonest_expiring_first(views: Iterable[ListingView]) -> list[ListingView]:
    """Order by ``expires_at`` ascending so urgent food surfaces first."""
    return sorted(views, key=lambda view: view.listing.expires_at)


def newest_first(views: Iterable[ListingView]) -> list[ListingView]:
    """Order by ``created_at`` descending."""
    return sorted(views, key=lambda view: view.listing.created_at, reverse=True)


def most_recently_claimed_first(views: Iterable[ListingView]) -> list[ListingView]:
    """Order claimed views by claim time, newest first."""
    return sorted(
        views,
        key=lambda view: (
            view.claim.claimed_at if view.claim else view.listing.created_at
        ),
        reverse=True,
    )


def summarize(views: Iterable[ListingView]) -> DashboardSummary:
    """Count views per derived status."""
    counts = dict.fromkeys(ListingStatus, 0)
    total = 0
    for view in views:
        counts[view.status] += 1
        total += 1
    return DashboardSummary(
        total=total,
        available=counts[ListingStatus.AVAILABLE],
        claimed=counts[ListingStatus.CLAIMED],
        expired=counts[ListingStatus.EXPIRED],
    )
