"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import Client, ClientOptions, create_client

from surplus_match.adapters.memory_repositories import (
    InMemoryClaimRepository,
    InMemoryListingRepository,
)
from surplus_match.adapters.supabase_claim_repository import SupabaseClaimRepository
from surplus_match.adapters.supabase_listing_repository import (
    SupabaseListingRepository,
)
from surplus_match.adapters.supabase_support import close_client
from surplus_match.config import Settings
from surplus_match.services.admin import AdminService
from surplus_match.services.claims import ClaimLedger, ClaimRepository
from surplus_match.services.clock import Clock, SystemClock
from surplus_match.services.lifecycle import ListingLifecycleService
from surplus_match.services.listing_store import ListingRepository, ListingStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    clock: Clock
    listing_store: ListingStore
    claim_ledger: ClaimLedger
    lifecycle_service: ListingLifecycleService
    admin_service: AdminService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client: Client | None = None
    listing_repository: ListingRepository
    claim_repository: ClaimRepository
    if resolved_settings.storage_backend == "memory":
        memory_listings = InMemoryListingRepository()
        listing_repository = memory_listings
        claim_repository = InMemoryClaimRepository(memory_listings)
    else:
        supabase_client = _create_supabase_client(resolved_settings)
        listing_repository = SupabaseListingRepository(supabase_client)
        claim_repository = SupabaseClaimRepository(supabase_client)
    listing_store = ListingStore(listing_repository)
    claim_ledger = ClaimLedger(claim_repository)
    lifecycle_service = ListingLifecycleService(
        listing_store=listing_store,
        claim_ledger=claim_ledger,
    )
    admin_service = AdminService(
        listing_store=listing_store,
        claim_ledger=claim_ledger,
    )

    async def close_resources() -> None:
        if supabase_client is not None:
            close_client(supabase_client)

    return AppContainer(
        settings=resolved_settings,
        clock=SystemClock(),
        listing_store=listing_store,
        claim_ledger=claim_ledger,
        lifecycle_service=lifecycle_service,
        admin_service=admin_service,
        close_resources=close_resources,
    )


def _create_supabase_client(settings: Settings) -> Client:
    return create_client(
        settings.supabase_url,
        settings.supabase_service_key,
        options=ClientOptions(
            postgrest_client_timeout=settings.store_timeout_seconds,
        ),
    )
