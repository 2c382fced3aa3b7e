"""
Identity/context cache - network origin and per-session token
"""
import logging
import random
import string
import threading
import time
from typing import Callable, MutableMapping, Optional, Protocol

import httpx

from orgchart.core.exceptions import NetworkFailureError

logger = logging.getLogger(__name__)

SESSION_TOKEN_KEY = "audit_session_id"
_TOKEN_ALPHABET = string.ascii_lowercase + string.digits


class NetworkOriginLookup(Protocol):
    def lookup(self) -> str:
        ...


class HttpNetworkOriginLookup:
    """Single-shot GET against an endpoint answering {"ip": "..."}"""

    def __init__(self, url: str, timeout: float = 5.0, transport: Optional[httpx.BaseTransport] = None):
        self.url = url
        self.timeout = timeout
        self.transport = transport

    def lookup(self) -> str:
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(self.url)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise NetworkFailureError(f"Network origin lookup failed: {exc}") from exc

        ip = data.get("ip") if isinstance(data, dict) else None
        if not ip:
            raise NetworkFailureError("Network origin lookup returned no address")
        return str(ip)


def generate_session_token() -> str:
    """Timestamp plus random suffix; unique enough within a browsing session"""
    suffix = "".join(random.choices(_TOKEN_ALPHABET, k=9))
    return f"sess_{int(time.time() * 1000)}_{suffix}"


class IdentityContextCache:
    """
    Short-TTL cache of the network origin plus session token resolution

    A failed lookup returns None and leaves the cache untouched, so the next
    call retries immediately instead of waiting out the TTL.
    """

    def __init__(
        self,
        lookup: Optional[NetworkOriginLookup],
        ttl_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.lookup = lookup
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._origin: Optional[str] = None
        self._fetched_at: Optional[float] = None
        self._lock = threading.Lock()

    def _fresh(self, now: float) -> bool:
        return (
            self._origin is not None
            and self._fetched_at is not None
            and now - self._fetched_at < self.ttl_seconds
        )

    def get_network_origin(self) -> Optional[str]:
        if self.lookup is None:
            return None

        with self._lock:
            now = self.clock()
            if self._fresh(now):
                return self._origin

        # lookup runs unlocked; concurrent misses may each fetch, last one wins
        try:
            origin = self.lookup.lookup()
        except NetworkFailureError as exc:
            logger.debug("Failed to resolve network origin: %s", exc)
            return None

        with self._lock:
            self._origin = origin
            self._fetched_at = now
        return origin

    def invalidate(self) -> None:
        with self._lock:
            self._origin = None
            self._fetched_at = None

    def get_session_token(self, storage: MutableMapping[str, str]) -> str:
        """Return the token kept in session-scoped storage, creating it on first use"""
        token = storage.get(SESSION_TOKEN_KEY)
        if not token:
            token = generate_session_token()
            storage[SESSION_TOKEN_KEY] = token
        return token
