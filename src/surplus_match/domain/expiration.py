"""Expiration policy: listing status and urgency as pure functions of time."""

import math
from datetime import datetime
from enum import StrEnum

from surplus_match.domain.listings import Claim, Listing, ListingStatus

CRITICAL_HOURS = 2
HIGH_HOURS = 6
HOURS_PER_DAY = 24


class Urgency(StrEnum):
    """How soon a listing runs out, as shown to farms."""

    CRITICAL = "critical"
    HIGH = "high"
    NORMAL = "normal"
    EXPIRED = "expired"


def derive_status(
    listing: Listing, claim: Claim | None, now: datetime
) -> ListingStatus:
    """Return the status of a listing at ``now``.

    A claim dominates expiry: a listing claimed before ``expires_at`` stays
    claimed forever. Without a claim the listing expires at ``expires_at``
    inclusive.
    """
    if claim is not None and claim.listing_id == listing.id:
        return ListingStatus.CLAIMED
    if now >= listing.expires_at:
        return ListingStatus.EXPIRED
    return ListingStatus.AVAILABLE


def hours_left(expires_at: datetime, now: datetime) -> float:
    """Return the fractional hours until expiry, negative once passed."""
    return (expires_at - now).total_seconds() / 3600


def urgency_for(expires_at: datetime, now: datetime) -> Urgency:
    """Classify the remaining window into an urgency tier."""
    if now >= expires_at:
        return Urgency.EXPIRED
    remaining = hours_left(expires_at, now)
    if remaining < CRITICAL_HOURS:
        return Urgency.CRITICAL
    if remaining < HIGH_HOURS:
        return Urgency.HIGH
    return Urgency.NORMAL


def time_left_label(expires_at: datetime, now: datetime) -> str:
    """Return a short human label for the remaining window.

    Under one hour left reads "Expires soon" rather than "1h left": the
    sub-hour check runs on the exact remaining time, before hours are
    rounded up. The mobile app rounded first and never showed it.
    """
    if now >= expires_at:
        return "Expired"
    remaining = hours_left(expires_at, now)
    if remaining < 1:
        return "Expires soon"
    hours = math.ceil(remaining)
    if hours < HOURS_PER_DAY:
        return f"{hours}h left"
    return f"{math.ceil(hours / HOURS_PER_DAY)}d left"
