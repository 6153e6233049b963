"""Listing store: validated creation and time-indexed reads."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from surplus_match.domain.errors import NotFoundError, ValidationError
from surplus_match.domain.listings import Listing, require_aware

_logger = logging.getLogger(__name__)


class ListingRepository(Protocol):
    """Persistence interface for listings."""

    def create_listing(  # noqa: PLR0913
        self,
        owner_id: UUID,
        item_name: str,
        quantity: str,
        expires_at: datetime,
        created_at: datetime,
        description: str | None,
        image_ref: str | None,
    ) -> Listing:
        """Insert a listing row and return it."""

    def get_listing(self, listing_id: UUID) -> Listing | None:
        """Return a listing by id, if present."""

    def list_by_owner(self, owner_id: UUID) -> list[Listing]:
        """Return an owner's listings, newest first."""

    def list_all(self) -> list[Listing]:
        """Return every listing."""

    def list_unexpired(self, now: datetime) -> list[Listing]:
        """Return listings with ``expires_at > now``, soonest-expiring first."""

    def list_by_ids(self, listing_ids: list[UUID]) -> list[Listing]:
        """Return the listings matching the given ids."""


@dataclass
class ListingStore:
    """Application service owning listing records."""

    repository: ListingRepository

    def create_listing(  # noqa: PLR0913
        self,
        owner_id: UUID,
        item_name: str,
        quantity: str,
        expires_at: datetime,
        now: datetime,
        description: str | None = None,
        image_ref: str | None = None,
    ) -> Listing:
        """Validate input and persist a new listing."""
        cleaned_name = item_name.strip()
        cleaned_quantity = quantity.strip()
        if not cleaned_name:
            raise ValidationError("Item name is required")
        if not cleaned_quantity:
            raise ValidationError("Quantity is required")
        require_aware(expires_at, "expires_at")
        require_aware(now, "now")
        if expires_at <= now:
            raise ValidationError("Expiration must be in the future")

        listing = self.repository.create_listing(
            owner_id=owner_id,
            item_name=cleaned_name,
            quantity=cleaned_quantity,
            expires_at=expires_at,
            created_at=now,
            description=_optional_text(description),
            image_ref=_optional_text(image_ref),
        )
        _logger.info(
            "Listing created: listing_id=%s owner_id=%s expires_at=%s",
            listing.id,
            owner_id,
            expires_at.isoformat(),
        )
        return listing

    def get_by_id(self, listing_id: UUID) -> Listing:
        """Return a listing or raise NotFoundError."""
        listing = self.repository.get_listing(listing_id)
        if listing is None:
            raise NotFoundError(f"Listing {listing_id} not found")
        return listing

    def list_by_owner(self, owner_id: UUID) -> list[Listing]:
        """Return an owner's listings, newest first."""
        return sorted(
            self.repository.list_by_owner(owner_id),
            key=lambda listing: listing.created_at,
            reverse=True,
        )

    def list_all(self) -> list[Listing]:
        """Return every listing."""
        return self.repository.list_all()

    def list_unexpired(self, now: datetime) -> list[Listing]:
        """Return listings still inside their window, soonest-expiring first."""
        return sorted(
            self.repository.list_unexpired(now),
            key=lambda listing: listing.expires_at,
        )

    def list_by_ids(self, listing_ids: list[UUID]) -> list[Listing]:
        """Return listings for the given ids, skipping unknown ones."""
        if not listing_ids:
            return []
        return self.repository.list_by_ids(listing_ids)


def _optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None
