"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from surplus_match.adapters.memory_repositories import (
    InMemoryClaimRepository,
    InMemoryListingRepository,
)
from surplus_match.config import Settings
from surplus_match.containers import AppContainer
from surplus_match.domain.actors import Actor, Role
from surplus_match.domain.errors import StoreTimeoutError
from surplus_match.domain.listings import Claim, Listing
from surplus_match.services.admin import AdminService
from surplus_match.services.claims import ClaimLedger, ClaimRepository
from surplus_match.services.clock import Clock
from surplus_match.services.lifecycle import ListingLifecycleService
from surplus_match.services.listing_store import ListingStore

NOW = datetime(2026, 3, 14, 12, 0, tzinfo=UTC)


@dataclass
class FixedClock(Clock):
    """Clock that only moves when told to."""

    current: datetime = NOW

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


@dataclass
class TimingOutClaimRepository(ClaimRepository):
    """Claim repository whose store never answers."""

    attempts: list[UUID] = field(default_factory=list)

    def claim_if_available(
        self, listing_id: UUID, claimant_id: UUID, claimed_at: datetime
    ) -> Claim:
        self.attempts.append(listing_id)
        raise StoreTimeoutError("Backing store timed out during claim_listing")

    def get_claim_for_listing(self, listing_id: UUID) -> Claim | None:
        return None

    def list_claims_for_listings(self, listing_ids: list[UUID]) -> list[Claim]:
        return []

    def list_claims_by_claimant(self, claimant_id: UUID) -> list[Claim]:
        return []


def make_listing(
    owner_id: UUID | None = None,
    expires_in: timedelta = timedelta(hours=2),
    created_at: datetime = NOW,
    item_name: str = "Bread rolls",
) -> Listing:
    """Build a listing without going through a store."""
    return Listing(
        id=uuid4(),
        owner_id=owner_id or uuid4(),
        item_name=item_name,
        quantity="10 units",
        expires_at=created_at + expires_in,
        created_at=created_at,
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def listing_repository() -> InMemoryListingRepository:
    return InMemoryListingRepository()


@pytest.fixture
def claim_repository(
    listing_repository: InMemoryListingRepository,
) -> InMemoryClaimRepository:
    return InMemoryClaimRepository(listing_repository)


@pytest.fixture
def listing_store(listing_repository: InMemoryListingRepository) -> ListingStore:
    return ListingStore(listing_repository)


@pytest.fixture
def claim_ledger(claim_repository: InMemoryClaimRepository) -> ClaimLedger:
    return ClaimLedger(claim_repository)


@pytest.fixture
def lifecycle_service(
    listing_store: ListingStore, claim_ledger: ClaimLedger
) -> ListingLifecycleService:
    return ListingLifecycleService(
        listing_store=listing_store, claim_ledger=claim_ledger
    )


@pytest.fixture
def restaurant() -> Actor:
    return Actor(id=uuid4(), role=Role.RESTAURANT)


@pytest.fixture
def farm() -> Actor:
    return Actor(id=uuid4(), role=Role.FARM)


@pytest.fixture
def other_farm() -> Actor:
    return Actor(id=uuid4(), role=Role.FARM)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        admin_token="admin-token",
        storage_backend="memory",
    )


@pytest.fixture
def container(
    settings: Settings,
    clock: FixedClock,
    listing_store: ListingStore,
    claim_ledger: ClaimLedger,
    lifecycle_service: ListingLifecycleService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        clock=clock,
        listing_store=listing_store,
        claim_ledger=claim_ledger,
        lifecycle_service=lifecycle_service,
        admin_service=AdminService(
            listing_store=listing_store, claim_ledger=claim_ledger
        ),
        close_resources=close_resources,
    )
