"""
Sidejacking detector.

Consumes per-header events from the HTTP layer, and once a request's
headers are complete runs the pipeline: signature match, session
extraction, store lookup, classification, store update and notification.
Each sighting is handled atomically under the store's per-cookie lock.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Iterable

from ..alerts import NotificationSink, build_alert, deliver
from ..detection import AddressResolver, Outcome, SessionClassifier, Verdict
from ..detection.aliasing import resolve_hardware_id
from ..session import Connection, SessionContext, SessionStore, Sighting, sessionize
from .config import DetectorConfig

logger = logging.getLogger(__name__)

UNKNOWN_SERVICE = "Unknown service"


class SidejackDetector:
    """Stateful cookie correlation and classification engine."""

    COOKIE_HEADER = "cookie"
    HOST_HEADER = "host"
    USER_AGENT_HEADER = "user-agent"

    def __init__(
        self,
        config: DetectorConfig | None = None,
        resolver: AddressResolver | None = None,
        sink: NotificationSink | None = None,
        store: SessionStore | None = None,
    ):
        self.config = config if config is not None else DetectorConfig()
        self.resolver = resolver
        self.sink = sink
        if store is None:
            store = SessionStore(expiration=self.config.cookie_expiration)
        self.store = store
        self.classifier = SessionClassifier(
            identity_is_address_only=self.config.identity_is_address_only,
            aliasing_enabled=self.config.aliasing_enabled,
            resolver=resolver,
        )
        self._pending: dict[str, str] = {}  # connection uid -> cookie header
        self._pending_lock = threading.Lock()
        self._stats_lock = threading.Lock()
        self.outcome_counts: dict[str, int] = {o.value: 0 for o in Outcome}
        self.dropped = 0

    # --- Header events ---

    def on_header(self, connection: Connection, is_request: bool, name: str, value: str) -> None:
        if not is_request or name.lower() != self.COOKIE_HEADER:
            return
        with self._pending_lock:
            self._pending[connection.uid] = value

    def on_headers_complete(
        self,
        connection: Connection,
        is_request: bool,
        headers: Iterable[tuple[str, str]],
        timestamp: float | None = None,
    ) -> Verdict | None:
        if not is_request:
            return None
        with self._pending_lock:
            cookie = self._pending.pop(connection.uid, "")
        if not cookie:
            return None

        host = ""
        user_agent = ""
        for name, value in headers:
            lname = name.lower()
            if lname == self.HOST_HEADER:
                host = value
            elif lname == self.USER_AGENT_HEADER:
                user_agent = value

        return self.process(Sighting(
            connection=connection,
            host=host,
            cookie=cookie,
            user_agent=user_agent,
            timestamp=time.time() if timestamp is None else timestamp,
        ))

    # --- Pipeline ---

    def canonicalize(self, host: str, cookie: str) -> tuple[str, str] | None:
        """Return (canonical cookie, service label), or None to drop the cookie."""
        sig = self.config.signatures.match(host)
        if sig is not None:
            canonical = sessionize(cookie, sig)
            if canonical:
                return canonical, sig.description
            logger.debug("No %s session in cookie for host %s", sig.description, host)

        if self.config.known_services_only:
            logger.debug("Dropping cookie for unrecognized service at %s", host)
            return None
        return cookie, UNKNOWN_SERVICE

    def process(self, sighting: Sighting) -> Verdict | None:
        """Classify one sighting. Returns None when the cookie is dropped."""
        if not sighting.cookie:
            return None
        result = self.canonicalize(sighting.host, sighting.cookie)
        if result is None:
            with self._stats_lock:
                self.dropped += 1
            return None
        canonical, label = result

        alert = None
        with self.store.lock(canonical):
            ctx = self.store.lookup(canonical, now=sighting.timestamp)
            verdict = self.classifier.classify(ctx, sighting, canonical)
            if verdict.alerts:
                alert = build_alert(
                    verdict,
                    sighting,
                    ctx,
                    suppress_for=self.config.alert_suppress_window,
                    actor_hardware_id=self._actor_hardware_id(verdict, sighting),
                )
            self._apply(verdict, canonical, label, sighting)

        with self._stats_lock:
            self.outcome_counts[verdict.outcome.value] += 1
        if alert is not None:
            deliver(self.sink, alert)
        return verdict

    def _actor_hardware_id(self, verdict: Verdict, sighting: Sighting) -> str | None:
        if verdict.outcome is Outcome.ROAM:
            return verdict.hardware_id
        if self.config.aliasing_enabled:
            return resolve_hardware_id(self.resolver, sighting.address)
        return None

    def _apply(self, verdict: Verdict, canonical: str, label: str, sighting: Sighting) -> None:
        if verdict.outcome is Outcome.FIRST_SIGHTING:
            self.store.insert(canonical, SessionContext(
                owner_address=sighting.address,
                user_agent=sighting.user_agent,
                last_seen=sighting.timestamp,
                last_connection_id=sighting.connection.uid,
                canonical_cookie=canonical,
                service_label=label,
                learned_hardware_id=verdict.hardware_id,
            ))
            logger.info("New %s session from %s", label, sighting.address)
        elif verdict.refreshes:
            self.store.refresh(
                canonical,
                sighting.connection.uid,
                sighting.timestamp,
                hardware_id=verdict.hardware_id if verdict.outcome is Outcome.ROAM else None,
            )

    # --- Maintenance ---

    def purge_expired(self, now: float | None = None) -> int:
        removed = self.store.purge_expired(now)
        if removed:
            logger.debug("Purged %d expired session contexts", removed)
        return removed

    def stats(self) -> dict[str, Any]:
        with self._stats_lock:
            counts = dict(self.outcome_counts)
            dropped = self.dropped
        result: dict[str, Any] = {
            "outcomes": counts,
            "dropped": dropped,
            "tracked_sessions": len(self.store),
        }
        sink_stats = getattr(self.sink, "stats", None)
        if callable(sink_stats):
            result["alerts"] = sink_stats()
        return result
