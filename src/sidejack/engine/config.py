"""
Detector configuration.

Static, process-lifetime options. Can be built in code or read from a YAML
document; durations are in seconds.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import yaml

from ..exceptions import ConfigError
from ..signatures import SignatureCatalog

logger = logging.getLogger(__name__)

BOOL_OPTIONS = ("identity_is_address_only", "aliasing_enabled", "known_services_only")
DURATION_OPTIONS = ("cookie_expiration", "alert_suppress_window")
CATALOG_OPTIONS = ("signatures", "extra_signatures")


@dataclass
class DetectorConfig:
    identity_is_address_only: bool = True
    aliasing_enabled: bool = False
    known_services_only: bool = True
    cookie_expiration: float = 3600.0
    alert_suppress_window: float = 600.0
    signatures: SignatureCatalog = field(default_factory=SignatureCatalog)

    def __post_init__(self):
        if self.cookie_expiration <= 0:
            raise ConfigError("cookie_expiration must be positive", option="cookie_expiration")
        if self.alert_suppress_window < 0:
            raise ConfigError("alert_suppress_window cannot be negative", option="alert_suppress_window")

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> DetectorConfig:
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigError("configuration must be a mapping")

        known = set(BOOL_OPTIONS) | set(DURATION_OPTIONS) | set(CATALOG_OPTIONS)
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"unknown options: {', '.join(unknown)}", option=unknown[0])

        kwargs: dict[str, Any] = {}
        for opt in BOOL_OPTIONS:
            if opt in data:
                if not isinstance(data[opt], bool):
                    raise ConfigError(f"{opt} must be true or false", option=opt)
                kwargs[opt] = data[opt]
        for opt in DURATION_OPTIONS:
            if opt in data:
                value = data[opt]
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise ConfigError(f"{opt} must be a number of seconds", option=opt)
                kwargs[opt] = float(value)

        catalog = (
            SignatureCatalog.from_entries(data["signatures"])
            if "signatures" in data
            else SignatureCatalog()
        )
        if data.get("extra_signatures"):
            catalog = catalog.extended(data["extra_signatures"])
        kwargs["signatures"] = catalog

        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> DetectorConfig:
        try:
            data = yaml.safe_load(yaml_str)
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid YAML: {exc}") from exc
        return cls.from_dict(data)

    @classmethod
    def load(cls, path: str) -> DetectorConfig:
        with open(path) as f:
            config = cls.from_yaml(f.read())
        logger.info("Loaded configuration from %s (%d signatures)", path, len(config.signatures))
        return config

    def to_dict(self) -> dict[str, Any]:
        return {
            "identity_is_address_only": self.identity_is_address_only,
            "aliasing_enabled": self.aliasing_enabled,
            "known_services_only": self.known_services_only,
            "cookie_expiration": self.cookie_expiration,
            "alert_suppress_window": self.alert_suppress_window,
            "signatures": [s.to_dict() for s in self.signatures],
        }
