"""
Service signature catalog.

Ordered list of known web-service cookie signatures. Lookups walk the
catalog in order and the first signature whose host pattern matches wins.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator

import yaml

from ..exceptions import ConfigError
from .models import ServiceSignature

logger = logging.getLogger(__name__)


DEFAULT_SIGNATURES: list[dict[str, Any]] = [
    {"description": "Amazon", "host": r"amazon\.com", "keys": ["x-main"]},
    {"description": "Basecamp", "host": r"basecamphq\.com", "keys": ["_basecamp_session", "session_token"]},
    {"description": "Blogger", "host": r"blogger\.com", "keys": ["blogger_SID", "__utmx"]},
    {"description": "Facebook", "host": r"facebook\.com", "keys": ["c_user", "xs"]},
    {"description": "Flickr", "host": r"flickr\.com", "keys": ["cookie_session"]},
    {"description": "Gmail", "host": r"mail\.google\.com", "keys": ["GX", "SID"]},
    {"description": "Google", "host": r"google\.com", "keys": ["SID", "HSID", "NID"]},
    {"description": "LinkedIn", "host": r"linkedin\.com", "keys": ["bcookie", "li_at"]},
    {"description": "Twitter", "host": r"twitter\.com", "keys": ["_twitter_sess", "auth_token"]},
    {"description": "Windows Live", "host": r"live\.com", "keys": ["MSPProf", "MSPAuth", "RPSTAuth", "NAP"]},
    {"description": "WordPress", "host": r"wordpress\.com", "key_pattern": r"^wordpress_[0-9a-fA-F]+"},
    {"description": "Yahoo", "host": r"yahoo\.com", "keys": ["T", "Y"]},
    {"description": "YouTube", "host": r"youtube\.com", "keys": ["LOGIN_INFO", "SID"]},
]


class SignatureCatalog:
    """Ordered, read-only collection of service signatures."""

    def __init__(self, signatures: list[ServiceSignature] | None = None):
        self._signatures: tuple[ServiceSignature, ...] = tuple(
            signatures if signatures is not None else self._defaults()
        )

    @staticmethod
    def _defaults() -> list[ServiceSignature]:
        return [ServiceSignature.from_dict(d) for d in DEFAULT_SIGNATURES]

    @classmethod
    def default(cls) -> SignatureCatalog:
        return cls()

    @classmethod
    def from_entries(cls, entries: list[dict[str, Any]]) -> SignatureCatalog:
        if not isinstance(entries, list):
            raise ConfigError("signature list must be a sequence", option="signatures")
        return cls([ServiceSignature.from_dict(e) for e in entries])

    def extended(self, entries: list[dict[str, Any]]) -> SignatureCatalog:
        """Return a new catalog with extra entries ahead of the current ones."""
        extra = SignatureCatalog.from_entries(entries)
        return SignatureCatalog(list(extra) + list(self._signatures))

    def match(self, host: str) -> ServiceSignature | None:
        """Return the first signature whose host pattern matches, if any."""
        if not host:
            return None
        for sig in self._signatures:
            if sig.matches_host(host):
                return sig
        return None

    def __iter__(self) -> Iterator[ServiceSignature]:
        return iter(self._signatures)

    def __len__(self) -> int:
        return len(self._signatures)

    def descriptions(self) -> list[str]:
        return [s.description for s in self._signatures]

    @classmethod
    def from_yaml(cls, yaml_str: str) -> SignatureCatalog:
        """Load a replacement catalog from YAML (a list or a 'signatures' mapping)."""
        data = yaml.safe_load(yaml_str) or []
        if isinstance(data, dict):
            data = data.get("signatures", [])
        catalog = cls.from_entries(data)
        logger.debug("Loaded %d service signatures", len(catalog))
        return catalog

    def to_yaml(self) -> str:
        data = {"signatures": [s.to_dict() for s in self._signatures]}
        return yaml.dump(data, default_flow_style=False, sort_keys=False)
