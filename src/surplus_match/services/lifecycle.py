"""Listing lifecycle: role checks and orchestration of store and ledger.

State machine per listing::

    Available --[claim succeeds]--------------> Claimed  (terminal)
    Available --[now >= expires_at, no claim]--> Expired  (terminal)

The Claimed edge is taken only inside ``ClaimLedger.try_claim``, whose
backing store performs the check and insert as one unit.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from surplus_match.domain.actors import Actor, Role
from surplus_match.domain.errors import UnauthorizedError
from surplus_match.domain.listings import Claim, Listing, ListingStatus
from surplus_match.services import queries
from surplus_match.services.claims import ClaimLedger
from surplus_match.services.listing_store import ListingStore
from surplus_match.services.queries import DashboardSummary, ListingScope, ListingView

_logger = logging.getLogger(__name__)


@dataclass
class ListingLifecycleService:
    """Entry point used by the API for every listing and claim operation."""

    listing_store: ListingStore
    claim_ledger: ClaimLedger

    def create_listing(  # noqa: PLR0913
        self,
        actor: Actor,
        item_name: str,
        quantity: str,
        expires_at: datetime,
        now: datetime,
        description: str | None = None,
        image_ref: str | None = None,
    ) -> Listing:
        """Create a listing owned by a restaurant actor."""
        _require_role(actor, Role.RESTAURANT, "create listings")
        return self.listing_store.create_listing(
            owner_id=actor.id,
            item_name=item_name,
            quantity=quantity,
            expires_at=expires_at,
            now=now,
            description=description,
            image_ref=image_ref,
        )

    def claim_listing(self, actor: Actor, listing_id: UUID, now: datetime) -> Claim:
        """Claim a listing for a farm actor.

        Ledger failures (not found, already claimed, expired, timeout)
        propagate unchanged so callers can tell them apart.
        """
        _require_role(actor, Role.FARM, "claim listings")
        return self.claim_ledger.try_claim(listing_id, actor.id, now)

    def get_claim_for_listing(self, listing_id: UUID) -> Claim | None:
        """Return the claim held on a listing, if any."""
        return self.claim_ledger.get_claim_for_listing(listing_id)

    def get_listing(self, listing_id: UUID, now: datetime) -> ListingView:
        """Return one listing with its status derived at ``now``."""
        listing = self.listing_store.get_by_id(listing_id)
        claim = self.claim_ledger.get_claim_for_listing(listing_id)
        return queries.view_of(listing, claim, now)

    def get_available_listings(self, now: datetime) -> list[ListingView]:
        """Return claimable listings, soonest-expiring first."""
        listings = self.listing_store.list_unexpired(now)
        return queries.soonest_expiring_first(
            queries.available_only(self._annotate(listings, now))
        )

    def get_listings_for_actor(
        self, actor: Actor, now: datetime, scope: ListingScope | None = None
    ) -> list[ListingView]:
        """Return the listings an actor may see.

        Restaurants see their own listings in any status (``ALL`` by
        default). Farms see available listings by default, their own claims
        under ``CLAIMED`` and both under ``ALL``.
        """
        if actor.role == Role.RESTAURANT:
            return self._restaurant_view(actor, now, scope or ListingScope.ALL)
        return self._farm_view(actor, now, scope or ListingScope.AVAILABLE)

    def get_owner_summary(self, actor: Actor, now: datetime) -> DashboardSummary:
        """Return per-status counts for a restaurant's listings."""
        _require_role(actor, Role.RESTAURANT, "view the listing dashboard")
        listings = self.listing_store.list_by_owner(actor.id)
        return queries.summarize(self._annotate(listings, now))

    def _restaurant_view(
        self, actor: Actor, now: datetime, scope: ListingScope
    ) -> list[ListingView]:
        views = self._annotate(self.listing_store.list_by_owner(actor.id), now)
        if scope == ListingScope.AVAILABLE:
            views = queries.with_status(views, ListingStatus.AVAILABLE)
        elif scope == ListingScope.CLAIMED:
            views = queries.with_status(views, ListingStatus.CLAIMED)
        return queries.newest_first(views)

    def _farm_view(
        self, actor: Actor, now: datetime, scope: ListingScope
    ) -> list[ListingView]:
        available: list[ListingView] = []
        claimed: list[ListingView] = []
        if scope in {ListingScope.AVAILABLE, ListingScope.ALL}:
            available = self.get_available_listings(now)
        if scope in {ListingScope.CLAIMED, ListingScope.ALL}:
            claims = self.claim_ledger.claims_by_claimant(actor.id)
            listings = self.listing_store.list_by_ids(
                [claim.listing_id for claim in claims]
            )
            by_listing = {claim.listing_id: claim for claim in claims}
            claimed = queries.most_recently_claimed_first(
                queries.claimed_by(
                    queries.annotate(listings, by_listing, now), actor.id
                )
            )
        return available + claimed

    def _annotate(self, listings: list[Listing], now: datetime) -> list[ListingView]:
        claims = self.claim_ledger.claims_for([listing.id for listing in listings])
        return queries.annotate(listings, claims, now)


def _require_role(actor: Actor, role: Role, action: str) -> None:
    if actor.role != role:
        _logger.warning(
            "Rejected %s by actor_id=%s with role=%s", action, actor.id, actor.role
        )
        raise UnauthorizedError(f"Only {role.value} actors may {action}")
