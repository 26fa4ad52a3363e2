"""Shared HTTP client manager with connection pooling.

Provides a single get_http_client() interface for the Google API callers
(Gmail, Drive).

Key features:
  - Event-loop-aware client lifecycle (recreated when the loop changes,
    e.g. between test clients)
  - Per-service timeout configuration
  - Graceful shutdown via close_all_clients()
"""
from __future__ import annotations

import asyncio
import logging

import httpx

logger = logging.getLogger(__name__)

# ── Service-specific timeout configuration ─────────────────────────────

_SERVICE_TIMEOUTS: dict[str, httpx.Timeout] = {
    "gmail": httpx.Timeout(30.0, connect=10.0),
    "drive": httpx.Timeout(120.0, connect=10.0),
}

_DEFAULT_TIMEOUT = httpx.Timeout(30.0, connect=10.0)

_CONNECTION_LIMITS = httpx.Limits(
    max_connections=10,
    max_keepalive_connections=5,
    keepalive_expiry=60,
)

# ── Client pool (module-level singletons) ──────────────────────────────

_clients: dict[str, httpx.AsyncClient] = {}
_client_loop_ids: dict[str, int] = {}


def get_http_client(service: str) -> httpx.AsyncClient:
    """Get or create an httpx AsyncClient for *service*."""
    loop_id = id(asyncio.get_running_loop())

    if (
        service not in _clients
        or _clients[service].is_closed
        or _client_loop_ids.get(service) != loop_id
    ):
        timeout = _SERVICE_TIMEOUTS.get(service, _DEFAULT_TIMEOUT)
        _clients[service] = httpx.AsyncClient(
            timeout=timeout,
            limits=_CONNECTION_LIMITS,
        )
        _client_loop_ids[service] = loop_id
        logger.debug("Created new HTTP client for service '%s'", service)

    return _clients[service]


async def close_all_clients() -> None:
    """Close every pooled HTTP client (for graceful shutdown)."""
    for name, client in list(_clients.items()):
        if not client.is_closed:
            try:
                await client.aclose()
            except RuntimeError as exc:
                # Client bound to a loop that has already gone away.
                logger.debug("Could not close client '%s': %s", name, exc)
    _clients.clear()
    _client_loop_ids.clear()
    logger.info("All HTTP clients closed")
