"""Claim ledger: at most one claim per listing."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from surplus_match.domain.errors import (
    AlreadyClaimedError,
    ExpiredError,
    StoreTimeoutError,
)
from surplus_match.domain.listings import Claim, require_aware

_logger = logging.getLogger(__name__)


class ClaimRepository(Protocol):
    """Persistence interface for claims."""

    def claim_if_available(
        self, listing_id: UUID, claimant_id: UUID, claimed_at: datetime
    ) -> Claim:
        """Atomically insert a claim unless one exists or the listing expired.

        Raises NotFoundError, AlreadyClaimedError or ExpiredError. The check
        and the insert must be one unit in the backing store.
        """

    def get_claim_for_listing(self, listing_id: UUID) -> Claim | None:
        """Return the claim for a listing, if any."""

    def list_claims_for_listings(self, listing_ids: list[UUID]) -> list[Claim]:
        """Return the claims for the given listings."""

    def list_claims_by_claimant(self, claimant_id: UUID) -> list[Claim]:
        """Return every claim made by a claimant."""


@dataclass
class ClaimLedger:
    """Application service owning claim records."""

    repository: ClaimRepository

    def try_claim(self, listing_id: UUID, claimant_id: UUID, now: datetime) -> Claim:
        """Claim a listing for a claimant, or raise the specific failure."""
        require_aware(now, "now")
        try:
            claim = self.repository.claim_if_available(
                listing_id=listing_id,
                claimant_id=claimant_id,
                claimed_at=now,
            )
        except AlreadyClaimedError:
            _logger.info(
                "Claim lost: listing_id=%s claimant_id=%s", listing_id, claimant_id
            )
            raise
        except ExpiredError:
            _logger.info(
                "Claim rejected, listing expired: listing_id=%s claimant_id=%s",
                listing_id,
                claimant_id,
            )
            raise
        except StoreTimeoutError:
            _logger.warning(
                "Claim outcome unknown, store timed out: listing_id=%s claimant_id=%s",
                listing_id,
                claimant_id,
            )
            raise
        _logger.info(
            "Listing claimed: listing_id=%s claimant_id=%s claim_id=%s",
            listing_id,
            claimant_id,
            claim.id,
        )
        return claim

    def get_claim_for_listing(self, listing_id: UUID) -> Claim | None:
        """Return the claim for a listing, if any."""
        return self.repository.get_claim_for_listing(listing_id)

    def claims_for(self, listing_ids: list[UUID]) -> dict[UUID, Claim]:
        """Return claims keyed by listing id."""
        if not listing_ids:
            return {}
        claims = self.repository.list_claims_for_listings(listing_ids)
        return {claim.listing_id: claim for claim in claims}

    def claims_by_claimant(self, claimant_id: UUID) -> list[Claim]:
        """Return a claimant's claims, newest first."""
        return sorted(
            self.repository.list_claims_by_claimant(claimant_id),
            key=lambda claim: claim.claimed_at,
            reverse=True,
        )
