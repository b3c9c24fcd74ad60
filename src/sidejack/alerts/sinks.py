"""
Notification sinks.

AlertLog keeps recent alerts in memory and collapses duplicates that share
a dedup key inside their suppression window. LoggingSink writes alerts to
the logging module.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Any

import numpy as np

from .models import Alert, AlertKind

logger = logging.getLogger(__name__)


class AlertLog:
    """In-memory alert sink with suppression."""

    def __init__(self, max_alerts: int = 1000):
        self.alerts: deque[Alert] = deque(maxlen=max_alerts)
        self.suppressed = 0
        self._suppress_until: dict[tuple[AlertKind, tuple[str, str]], float] = {}
        self._lock = threading.Lock()

    def notify(self, alert: Alert) -> None:
        key = (alert.kind, alert.dedup_key)
        with self._lock:
            until = self._suppress_until.get(key)
            if until is not None and alert.timestamp < until:
                self.suppressed += 1
                logger.debug("Suppressed duplicate %s alert", alert.kind.value)
                return
            self._suppress_until[key] = alert.timestamp + alert.suppress_for
            self.alerts.append(alert)

    def recent(self, n: int = 50) -> list[dict[str, Any]]:
        if n <= 0:
            return []
        return [a.to_dict() for a in list(self.alerts)[-n:]]

    def by_kind(self, kind: AlertKind) -> list[Alert]:
        return [a for a in self.alerts if a.kind is kind]

    def __len__(self) -> int:
        return len(self.alerts)

    def stats(self) -> dict[str, Any]:
        counts = {k.value: 0 for k in AlertKind}
        for a in self.alerts:
            counts[a.kind.value] += 1
        result: dict[str, Any] = {
            "total_alerts": len(self.alerts),
            "suppressed": self.suppressed,
            "by_kind": counts,
        }
        if len(self.alerts) > 1:
            times = np.array(sorted(a.timestamp for a in self.alerts))
            result["mean_interval_seconds"] = round(float(np.diff(times).mean()), 1)
        return result


class LoggingSink:
    """Writes every alert to a logger at WARNING level."""

    def __init__(self, name: str = "sidejack.alerts"):
        self.log = logging.getLogger(name)

    def notify(self, alert: Alert) -> None:
        self.log.warning(
            "[%s] %s actor=%s conn=%s suppress=%ss",
            alert.kind.value, alert.message, alert.actor,
            alert.connection.uid, alert.suppress_for,
        )
