"""Domain models for listings and claims."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from surplus_match.domain.errors import ValidationError


class ListingStatus(StrEnum):
    """Derived status of a listing."""

    AVAILABLE = "available"
    CLAIMED = "claimed"
    EXPIRED = "expired"


@dataclass(frozen=True)
class Listing:
    """A restaurant's offer of surplus food."""

    id: UUID
    owner_id: UUID
    item_name: str
    quantity: str
    expires_at: datetime
    created_at: datetime
    description: str | None = None
    image_ref: str | None = None

    def __post_init__(self) -> None:
        if not self.item_name.strip():
            raise ValidationError("Item name is required")
        if not self.quantity.strip():
            raise ValidationError("Quantity is required")
        require_aware(self.expires_at, "expires_at")
        require_aware(self.created_at, "created_at")


@dataclass(frozen=True)
class Claim:
    """A farm's accepted claim on a listing."""

    id: UUID
    listing_id: UUID
    claimant_id: UUID
    claimed_at: datetime

    def __post_init__(self) -> None:
        require_aware(self.claimed_at, "claimed_at")


def require_aware(value: datetime, field_name: str) -> None:
    """Reject naive timestamps so comparisons stay unambiguous."""
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValidationError(f"{field_name} must be timezone-aware")
