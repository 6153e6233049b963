"""Supabase-backed claim repository.

Claims go through the ``claim_listing`` Postgres function (see
``supabase/migrations``), which checks the listing and inserts the claim in
one transaction. The UNIQUE constraint on ``claims.listing_id`` settles
concurrent callers: losers receive SQLSTATE 23505.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from surplus_match.adapters.supabase_support import execute, parse_timestamp
from surplus_match.domain.errors import (
    AlreadyClaimedError,
    ExpiredError,
    ListingError,
    NotFoundError,
)
from surplus_match.domain.listings import Claim
from surplus_match.services.claims import ClaimRepository

_COLUMNS = "id, listing_id, claimant_id, claimed_at"

UNIQUE_VIOLATION = "23505"
NO_DATA_FOUND = "P0002"
LISTING_EXPIRED = "SM410"


@dataclass
class SupabaseClaimRepository(ClaimRepository):
    """Supabase implementation for claim persistence."""

    client: Client

    def claim_if_available(
        self, listing_id: UUID, claimant_id: UUID, claimed_at: datetime
    ) -> Claim:
        """Claim a listing through the atomic ``claim_listing`` function."""
        try:
            response = execute(
                self.client.rpc(
                    "claim_listing",
                    {
                        "p_listing_id": str(listing_id),
                        "p_claimant_id": str(claimant_id),
                        "p_claimed_at": claimed_at.isoformat(),
                    },
                ),
                "claim_listing",
            )
        except APIError as exc:
            translated = _translate_claim_error(exc, listing_id)
            if translated is None:
                raise
            raise translated from exc
        rows = response.data if isinstance(response.data, list) else [response.data]
        if not rows or not rows[0]:
            raise RuntimeError("Failed to create claim")
        return _parse_claim(rows[0])

    def get_claim_for_listing(self, listing_id: UUID) -> Claim | None:
        """Return the claim for a listing, if any."""
        response = execute(
            self.client.table("claims")
            .select(_COLUMNS)
            .eq("listing_id", str(listing_id))
            .limit(1),
            "get_claim_for_listing",
        )
        if not response.data:
            return None
        return _parse_claim(response.data[0])

    def list_claims_for_listings(self, listing_ids: list[UUID]) -> list[Claim]:
        """Return the claims for the given listings."""
        response = execute(
            self.client.table("claims")
            .select(_COLUMNS)
            .in_("listing_id", [str(listing_id) for listing_id in listing_ids]),
            "list_claims_for_listings",
        )
        return [_parse_claim(row) for row in response.data or []]

    def list_claims_by_claimant(self, claimant_id: UUID) -> list[Claim]:
        """Return every claim made by a claimant, newest first."""
        response = execute(
            self.client.table("claims")
            .select(_COLUMNS)
            .eq("claimant_id", str(claimant_id))
            .order("claimed_at", desc=True),
            "list_claims_by_claimant",
        )
        return [_parse_claim(row) for row in response.data or []]


def _translate_claim_error(exc: APIError, listing_id: UUID) -> ListingError | None:
    """Map a PostgREST error from ``claim_listing`` onto the domain taxonomy."""
    if exc.code == UNIQUE_VIOLATION:
        return AlreadyClaimedError(f"Listing {listing_id} has already been claimed")
    if exc.code == NO_DATA_FOUND:
        return NotFoundError(f"Listing {listing_id} not found")
    if exc.code == LISTING_EXPIRED:
        return ExpiredError(f"Listing {listing_id} has expired")
    return None


def _parse_claim(row: dict[str, object]) -> Claim:
    """Parse a claim row into a domain model."""
    return Claim(
        id=UUID(str(row["id"])),
        listing_id=UUID(str(row["listing_id"])),
        claimant_id=UUID(str(row["claimant_id"])),
        claimed_at=parse_timestamp(row["claimed_at"]),
    )
