"""
Service signature data model.

A signature tells the extractor which cookie fields make up a service's
session: an explicit set of required keys, a key-name pattern, or both.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from ..exceptions import SignatureError


@dataclass(frozen=True)
class ServiceSignature:
    """Cookie signature of a known web service."""
    description: str
    host_pattern: re.Pattern
    required_keys: frozenset[str] = field(default_factory=frozenset)
    key_pattern: re.Pattern | None = None

    def __post_init__(self):
        if not self.required_keys and self.key_pattern is None:
            raise SignatureError(
                "signature needs required keys or a key pattern",
                description=self.description,
            )

    @classmethod
    def build(
        cls,
        description: str,
        host: str,
        keys: list[str] | set[str] | None = None,
        key_pattern: str | None = None,
    ) -> ServiceSignature:
        """Compile raw pattern strings into a signature."""
        try:
            host_re = re.compile(host)
            key_re = re.compile(key_pattern) if key_pattern else None
        except re.error as exc:
            raise SignatureError(
                f"invalid pattern: {exc}", description=description
            ) from exc
        return cls(
            description=description,
            host_pattern=host_re,
            required_keys=frozenset(keys or ()),
            key_pattern=key_re,
        )

    def matches_host(self, host: str) -> bool:
        return self.host_pattern.search(host) is not None

    def matches_key(self, key: str) -> bool:
        return self.key_pattern is not None and self.key_pattern.search(key) is not None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "description": self.description,
            "host": self.host_pattern.pattern,
        }
        if self.required_keys:
            data["keys"] = sorted(self.required_keys)
        if self.key_pattern is not None:
            data["key_pattern"] = self.key_pattern.pattern
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ServiceSignature:
        if not isinstance(data, dict):
            raise SignatureError(f"signature entry must be a mapping, got {data!r}")
        if "description" not in data or "host" not in data:
            raise SignatureError(
                "signature entries need 'description' and 'host'",
                description=data.get("description"),
            )
        description = data["description"]
        if not isinstance(description, str) or not isinstance(data["host"], str):
            raise SignatureError("'description' and 'host' must be strings", description=str(description))
        pattern = data.get("key_pattern")
        if pattern is not None and not isinstance(pattern, str):
            raise SignatureError("'key_pattern' must be a string", description=description)
        keys = data.get("keys")
        if isinstance(keys, str):
            keys = [keys]
        elif keys is not None and not (
            isinstance(keys, list) and all(isinstance(k, str) for k in keys)
        ):
            raise SignatureError("'keys' must be a string or a list of strings", description=description)
        return cls.build(
            description=data["description"],
            host=data["host"],
            keys=keys,
            key_pattern=data.get("key_pattern"),
        )
