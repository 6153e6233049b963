"""In-process repositories for local runs and tests.

Both repositories share one lock so a claim sees a consistent listing and
claim set while it checks and inserts.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from surplus_match.domain.errors import (
    AlreadyClaimedError,
    ExpiredError,
    NotFoundError,
)
from surplus_match.domain.listings import Claim, Listing
from surplus_match.services.claims import ClaimRepository
from surplus_match.services.listing_store import ListingRepository


@dataclass
class InMemoryListingRepository(ListingRepository):
    """Dictionary-backed listing repository."""

    listings: dict[UUID, Listing] = field(default_factory=dict)
    lock: threading.Lock = field(default_factory=threading.Lock)

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
        """Store a new listing and return it."""
        listing = Listing(
            id=uuid4(),
            owner_id=owner_id,
            item_name=item_name,
            quantity=quantity,
            expires_at=expires_at,
            created_at=created_at,
            description=description,
            image_ref=image_ref,
        )
        with self.lock:
            self.listings[listing.id] = listing
        return listing

    def get_listing(self, listing_id: UUID) -> Listing | None:
        """Return a listing by id, if present."""
        with self.lock:
            return self.listings.get(listing_id)

    def list_by_owner(self, owner_id: UUID) -> list[Listing]:
        """Return an owner's listings, newest first."""
        with self.lock:
            owned = [
                listing
                for listing in self.listings.values()
                if listing.owner_id == owner_id
            ]
        return sorted(owned, key=lambda listing: listing.created_at, reverse=True)

    def list_all(self) -> list[Listing]:
        """Return every listing."""
        with self.lock:
            return list(self.listings.values())

    def list_unexpired(self, now: datetime) -> list[Listing]:
        """Return listings still inside their window, soonest-expiring first."""
        with self.lock:
            live = [
                listing
                for listing in self.listings.values()
                if listing.expires_at > now
            ]
        return sorted(live, key=lambda listing: listing.expires_at)

    def list_by_ids(self, listing_ids: list[UUID]) -> list[Listing]:
        """Return the listings matching the given ids."""
        with self.lock:
            return [
                self.listings[listing_id]
                for listing_id in listing_ids
                if listing_id in self.listings
            ]


@dataclass
class InMemoryClaimRepository(ClaimRepository):
    """Dictionary-backed claim repository keyed by listing id."""

    listing_repository: InMemoryListingRepository
    claims: dict[UUID, Claim] = field(default_factory=dict)

    def claim_if_available(
        self, listing_id: UUID, claimant_id: UUID, claimed_at: datetime
    ) -> Claim:
        """Check and insert under the shared lock."""
        with self.listing_repository.lock:
            listing = self.listing_repository.listings.get(listing_id)
            if listing is None:
                raise NotFoundError(f"Listing {listing_id} not found")
            if listing_id in self.claims:
                raise AlreadyClaimedError(
                    f"Listing {listing_id} has already been claimed"
                )
            if claimed_at >= listing.expires_at:
                raise ExpiredError(f"Listing {listing_id} has expired")
            claim = Claim(
                id=uuid4(),
                listing_id=listing_id,
                claimant_id=claimant_id,
                claimed_at=claimed_at,
            )
            self.claims[listing_id] = claim
            return claim

    def get_claim_for_listing(self, listing_id: UUID) -> Claim | None:
        """Return the claim for a listing, if any."""
        with self.listing_repository.lock:
            return self.claims.get(listing_id)

    def list_claims_for_listings(self, listing_ids: list[UUID]) -> list[Claim]:
        """Return the claims for the given listings."""
        with self.listing_repository.lock:
            return [
                self.claims[listing_id]
                for listing_id in listing_ids
                if listing_id in self.claims
            ]

    def list_claims_by_claimant(self, claimant_id: UUID) -> list[Claim]:
        """Return every claim made by a claimant."""
        with self.listing_repository.lock:
            return [
                claim
                for claim in self.claims.values()
                if claim.claimant_id == claimant_id
            ]
