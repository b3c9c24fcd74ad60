"""Tests for detector configuration."""

import pytest

from sidejack.engine import DetectorConfig
from sidejack.exceptions import ConfigError, SignatureError
from sidejack.signatures import DEFAULT_SIGNATURES

CONFIG_YAML = """
identity_is_address_only: false
aliasing_enabled: true
known_services_only: false
cookie_expiration: 1800
alert_suppress_window: 60
extra_signatures:
  - description: Intranet
    host: 'intranet\\.corp'
    keys: [SESSIONID]
"""


class TestDetectorConfig:
    def test_defaults(self):
        config = DetectorConfig()
        assert config.identity_is_address_only
        assert not config.aliasing_enabled
        assert config.known_services_only
        assert config.cookie_expiration == 3600.0
        assert config.alert_suppress_window == 600.0
        assert len(config.signatures) == len(DEFAULT_SIGNATURES)

    def test_from_yaml(self):
        config = DetectorConfig.from_yaml(CONFIG_YAML)
        assert not config.identity_is_address_only
        assert config.aliasing_enabled
        assert not config.known_services_only
        assert config.cookie_expiration == 1800.0
        assert config.alert_suppress_window == 60.0
        assert config.signatures.match("intranet.corp").description == "Intranet"
        assert len(config.signatures) == len(DEFAULT_SIGNATURES) + 1

    def test_replace_signatures(self):
        config = DetectorConfig.from_dict({
            "signatures": [{"description": "Only", "host": "only", "keys": ["sid"]}],
        })
        assert config.signatures.descriptions() == ["Only"]

    def test_empty_yaml(self):
        assert DetectorConfig.from_yaml("").cookie_expiration == 3600.0

    def test_load(self, tmp_path):
        path = tmp_path / "sidejack.yaml"
        path.write_text(CONFIG_YAML)
        assert DetectorConfig.load(str(path)).aliasing_enabled

    def test_unknown_option(self):
        with pytest.raises(ConfigError) as exc:
            DetectorConfig.from_dict({"aliasing": True})
        assert exc.value.context["option"] == "aliasing"

    def test_bad_types(self):
        with pytest.raises(ConfigError):
            DetectorConfig.from_dict({"aliasing_enabled": "yes"})
        with pytest.raises(ConfigError):
            DetectorConfig.from_dict({"cookie_expiration": "1h"})

    def test_bad_durations(self):
        with pytest.raises(ConfigError):
            DetectorConfig(cookie_expiration=0)
        with pytest.raises(ConfigError):
            DetectorConfig(alert_suppress_window=-1)

    def test_bad_signature(self):
        with pytest.raises(SignatureError):
            DetectorConfig.from_dict({"extra_signatures": [{"description": "X", "host": "x"}]})
        with pytest.raises(SignatureError):
            DetectorConfig.from_yaml("signatures: [facebook]\n")
        with pytest.raises(SignatureError):
            DetectorConfig.from_dict({"extra_signatures": [{"description": "X", "host": "x", "keys": 5}]})

    def test_invalid_yaml(self):
        with pytest.raises(ConfigError):
            DetectorConfig.from_yaml("a: [unclosed")

    def test_to_dict(self):
        d = DetectorConfig().to_dict()
        assert d["cookie_expiration"] == 3600.0
        assert d["signatures"][0]["description"] == "Amazon"
