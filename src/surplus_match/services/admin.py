"""Admin service for reporting."""

from dataclasses import dataclass
from datetime import datetime

from surplus_match.services import queries
from surplus_match.services.claims import ClaimLedger
from surplus_match.services.listing_store import ListingStore
from surplus_match.services.queries import DashboardSummary, ListingView


@dataclass
class AdminService:
    """Service for admin dashboards."""

    listing_store: ListingStore
    claim_ledger: ClaimLedger

    def list_listings(self, now: datetime, limit: int = 50) -> list[ListingView]:
        """Return the newest listings with derived status."""
        views = queries.newest_first(self._all_views(now))
        return views[:limit]

    def summary(self, now: datetime) -> DashboardSummary:
        """Return per-status counts across every listing."""
        return queries.summarize(self._all_views(now))

    def _all_views(self, now: datetime) -> list[ListingView]:
        listings = self.listing_store.list_all()
        claims = self.claim_ledger.claims_for([listing.id for listing in listings])
        return queries.annotate(listings, claims, now)
