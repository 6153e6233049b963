"""Tests for container wiring."""

import asyncio
from dataclasses import dataclass, field

from surplus_match import containers
from surplus_match.adapters.memory_repositories import InMemoryClaimRepository
from surplus_match.adapters.supabase_claim_repository import SupabaseClaimRepository
from surplus_match.config import Settings
from surplus_match.containers import build_container
from surplus_match.services.clock import SystemClock


@dataclass
class FakeSession:
    closed: bool = False

    def close(self) -> None:
        self.closed = True


@dataclass
class FakePostgrest:
    session: FakeSession = field(default_factory=FakeSession)


@dataclass
class FakeSupabaseClient:
    postgrest: FakePostgrest = field(default_factory=FakePostgrest)


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.lifecycle_service is not None
    assert container.admin_service is not None
    assert isinstance(container.clock, SystemClock)
    assert isinstance(container.claim_ledger.repository, InMemoryClaimRepository)
    asyncio.run(container.close_resources())


def test_close_resources_closes_supabase_session(monkeypatch) -> None:
    client = FakeSupabaseClient()
    created: list[tuple[str, str, float]] = []

    def fake_create_client(url, key, options):  # type: ignore[no-untyped-def]
        created.append((url, key, options.postgrest_client_timeout))
        return client

    monkeypatch.setattr(containers, "create_client", fake_create_client)
    settings = Settings(
        admin_token="admin-token",
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        store_timeout_seconds=3.0,
        _env_file=None,
    )

    container = build_container(settings)
    assert isinstance(container.claim_ledger.repository, SupabaseClaimRepository)
    assert not client.postgrest.session.closed

    asyncio.run(container.close_resources())

    assert created == [("https://example.supabase.co", "service-key", 3.0)]
    assert client.postgrest.session.closed
