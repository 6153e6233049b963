"""Supabase-backed listing repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from surplus_match.adapters.supabase_support import execute, parse_timestamp
from surplus_match.domain.listings import Listing
from surplus_match.services.listing_store import ListingRepository

_COLUMNS = (
    "id, owner_id, item_name, quantity, description, image_ref, "
    "expires_at, created_at"
)


@dataclass
class SupabaseListingRepository(ListingRepository):
    """Supabase implementation for listing persistence."""

    client: Client

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
        response = execute(
            self.client.table("listings").insert(
                {
                    "owner_id": str(owner_id),
                    "item_name": item_name,
                    "quantity": quantity,
                    "description": description,
                    "image_ref": image_ref,
                    "expires_at": expires_at.isoformat(),
                    "created_at": created_at.isoformat(),
                }
            ),
            "create_listing",
        )
        if not response.data:
            raise RuntimeError("Failed to create listing")
        return _parse_listing(response.data[0])

    def get_listing(self, listing_id: UUID) -> Listing | None:
        """Return a listing by id, if present."""
        response = execute(
            self.client.table("listings")
            .select(_COLUMNS)
            .eq("id", str(listing_id))
            .limit(1),
            "get_listing",
        )
        if not response.data:
            return None
        return _parse_listing(response.data[0])

    def list_by_owner(self, owner_id: UUID) -> list[Listing]:
        """Return an owner's listings, newest first."""
        response = execute(
            self.client.table("listings")
            .select(_COLUMNS)
            .eq("owner_id", str(owner_id))
            .order("created_at", desc=True),
            "list_by_owner",
        )
        return [_parse_listing(row) for row in response.data or []]

    def list_all(self) -> list[Listing]:
        """Return every listing."""
        response = execute(
            self.client.table("listings")
            .select(_COLUMNS)
            .order("created_at", desc=True),
            "list_all",
        )
        return [_parse_listing(row) for row in response.data or []]

    def list_unexpired(self, now: datetime) -> list[Listing]:
        """Return listings still inside their window, soonest-expiring first."""
        response = execute(
            self.client.table("listings")
            .select(_COLUMNS)
            .gt("expires_at", now.isoformat())
            .order("expires_at"),
            "list_unexpired",
        )
        return [_parse_listing(row) for row in response.data or []]

    def list_by_ids(self, listing_ids: list[UUID]) -> list[Listing]:
        """Return the listings matching the given ids."""
        response = execute(
            self.client.table("listings")
            .select(_COLUMNS)
            .in_("id", [str(listing_id) for listing_id in listing_ids]),
            "list_by_ids",
        )
        return [_parse_listing(row) for row in response.data or []]


def _parse_listing(row: dict[str, object]) -> Listing:
    """Parse a listing row into a domain model."""
    return Listing(
        id=UUID(str(row["id"])),
        owner_id=UUID(str(row["owner_id"])),
        item_name=str(row.get("item_name", "")),
        quantity=str(row.get("quantity", "")),
        description=row.get("description"),
        image_ref=row.get("image_ref"),
        expires_at=parse_timestamp(row["expires_at"]),
        created_at=parse_timestamp(row["created_at"]),
    )
