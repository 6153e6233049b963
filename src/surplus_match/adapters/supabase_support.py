"""Shared helpers for Supabase-backed repositories."""

import logging
from datetime import datetime
from typing import Any, Protocol

import httpx

from surplus_match.domain.errors import StoreTimeoutError

_logger = logging.getLogger(__name__)


class Executable(Protocol):
    """A PostgREST request builder ready to run."""

    def execute(self) -> Any:
        """Send the request and return the API response."""


def execute(query: Executable, action: str) -> Any:
    """Run a PostgREST query, surfacing timeouts as StoreTimeoutError."""
    try:
        return query.execute()
    except httpx.TimeoutException as exc:
        _logger.warning("Supabase request timed out: action=%s", action)
        raise StoreTimeoutError(f"Backing store timed out during {action}") from exc


def parse_timestamp(raw: object) -> datetime:
    """Parse a timestamptz column value."""
    if isinstance(raw, datetime):
        return raw
    return datetime.fromisoformat(str(raw))


def close_client(client: Any) -> None:
    """Close the HTTP session behind a Supabase client's PostgREST API."""
    client.postgrest.session.close()
    _logger.info("Supabase client closed")
