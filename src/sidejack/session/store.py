"""
Session context store.

Maps canonical session identifiers to their session context. Entries
expire once idle longer than the configured expiration, measured from the
context's last sighting. Expired entries are evicted lazily on lookup and
by the purge_expired() reaper; no lookup ever returns one.
"""

from __future__ import annotations

import threading
import time
from typing import Any

import numpy as np

from .models import SessionContext


class SessionStore:
    """Time-bounded store of session contexts with per-cookie locking."""

    def __init__(self, expiration: float = 3600.0, shards: int = 64):
        if expiration <= 0:
            raise ValueError("expiration must be positive")
        self.expiration = expiration
        self._entries: dict[str, SessionContext] = {}
        self._guard = threading.Lock()
        self._shard_locks = [threading.Lock() for _ in range(max(1, shards))]

    def lock(self, canonical_cookie: str) -> threading.Lock:
        """Lock serializing read-modify-write sequences for one cookie."""
        return self._shard_locks[hash(canonical_cookie) % len(self._shard_locks)]

    def _expired(self, ctx: SessionContext, now: float) -> bool:
        return now - ctx.last_seen > self.expiration

    def lookup(self, canonical_cookie: str, now: float | None = None) -> SessionContext | None:
        now = time.time() if now is None else now
        with self._guard:
            ctx = self._entries.get(canonical_cookie)
            if ctx is None:
                return None
            if self._expired(ctx, now):
                del self._entries[canonical_cookie]
                return None
            return ctx

    def insert(self, canonical_cookie: str, context: SessionContext) -> None:
        """Create (or replace) the context for a cookie; its timer starts at last_seen."""
        with self._guard:
            self._entries[canonical_cookie] = context

    def refresh(
        self,
        canonical_cookie: str,
        connection_id: str,
        timestamp: float,
        hardware_id: str | None = None,
    ) -> bool:
        """Record a new sighting. Owner address and user agent stay untouched."""
        with self._guard:
            ctx = self._entries.get(canonical_cookie)
            if ctx is None:
                return False
            ctx.last_seen = timestamp
            ctx.last_connection_id = connection_id
            if hardware_id is not None:
                ctx.learned_hardware_id = hardware_id
            return True

    def purge_expired(self, now: float | None = None) -> int:
        now = time.time() if now is None else now
        removed = 0
        with self._guard:
            for cookie in list(self._entries.keys()):
                if self._expired(self._entries[cookie], now):
                    del self._entries[cookie]
                    removed += 1
        return removed

    def active_sessions(self, now: float | None = None) -> list[SessionContext]:
        now = time.time() if now is None else now
        with self._guard:
            return [c for c in self._entries.values() if not self._expired(c, now)]

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    def summary(self, now: float | None = None) -> dict[str, Any]:
        """Idle-age statistics and per-service counts of live sessions."""
        now = time.time() if now is None else now
        active = self.active_sessions(now)
        if not active:
            return {"active_sessions": 0}

        idle = np.array([now - c.last_seen for c in active])
        services: dict[str, int] = {}
        for c in active:
            services[c.service_label] = services.get(c.service_label, 0) + 1

        return {
            "active_sessions": len(active),
            "mean_idle_seconds": round(float(idle.mean()), 1),
            "max_idle_seconds": round(float(idle.max()), 1),
            "owner_addresses": len({c.owner_address for c in active}),
            "services": services,
        }
