"""Connection, sighting and session context data models."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Connection:
    """A client/server connection as reported by the traffic layer."""
    uid: str
    client_address: str
    client_port: int = 0
    server_address: str = ""
    server_port: int = 80

    def to_dict(self) -> dict[str, Any]:
        return {
            "uid": self.uid,
            "client_address": self.client_address,
            "client_port": self.client_port,
            "server_address": self.server_address,
            "server_port": self.server_port,
        }


@dataclass
class Sighting:
    """One observed request carrying a cookie header."""
    connection: Connection
    host: str
    cookie: str
    user_agent: str = ""
    timestamp: float = field(default_factory=time.time)

    @property
    def address(self) -> str:
        return self.connection.client_address


@dataclass
class SessionContext:
    """What is known about the owner of a live session cookie."""
    owner_address: str
    user_agent: str
    last_seen: float
    last_connection_id: str
    canonical_cookie: str
    service_label: str
    learned_hardware_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "owner_address": self.owner_address,
            "user_agent": self.user_agent,
            "last_seen": self.last_seen,
            "last_connection_id": self.last_connection_id,
            "canonical_cookie": self.canonical_cookie,
            "service_label": self.service_label,
            "learned_hardware_id": self.learned_hardware_id,
        }
