"""Alert data models."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..session.models import Connection


class AlertKind(str, Enum):
    REUSE = "session_reuse"
    ROAM = "session_roam"
    HIJACK = "cookie_hijack"


@dataclass
class Alert:
    kind: AlertKind
    connection: Connection
    suppress_for: float  # seconds
    actor: str
    message: str
    dedup_key: tuple[str, str]
    service_label: str = ""
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "connection": self.connection.to_dict(),
            "suppress_for": self.suppress_for,
            "actor": self.actor,
            "message": self.message,
            "dedup_key": list(self.dedup_key),
            "service": self.service_label,
            "timestamp": self.timestamp,
        }
