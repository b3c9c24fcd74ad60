"""Shared test fixtures for Sidejack."""

import pytest

from sidejack.alerts import AlertLog
from sidejack.detection import AddressBindingTable
from sidejack.engine import DetectorConfig, SidejackDetector
from sidejack.session import Connection, Sighting
from sidejack.signatures import ServiceSignature

T0 = 1_700_000_000.0
FB_HOST = "www.facebook.com"
FB_COOKIE = "datr=abc; c_user=1001; locale=en_US; xs=49%3Aqwerty"


def make_sighting(address, agent, uid="C1", ts=T0, host=FB_HOST, cookie=FB_COOKIE):
    return Sighting(
        connection=Connection(uid=uid, client_address=address),
        host=host,
        cookie=cookie,
        user_agent=agent,
        timestamp=ts,
    )


@pytest.fixture
def ab_signature():
    return ServiceSignature.build("Example", r"example\.com", keys=["a", "b"])


@pytest.fixture
def alert_log():
    return AlertLog()


@pytest.fixture
def bindings():
    table = AddressBindingTable()
    table.learn("10.0.0.1", "00:16:3e:00:00:01")
    table.learn("10.0.0.2", "00:16:3e:00:00:01")
    table.learn("10.0.0.9", "00:16:3e:00:00:09")
    return table


@pytest.fixture
def detector(alert_log):
    return SidejackDetector(sink=alert_log)


@pytest.fixture
def aliasing_detector(alert_log, bindings):
    return SidejackDetector(
        config=DetectorConfig(aliasing_enabled=True),
        resolver=bindings,
        sink=alert_log,
    )


@pytest.fixture
def pair_detector(alert_log, bindings):
    return SidejackDetector(
        config=DetectorConfig(identity_is_address_only=False, aliasing_enabled=True),
        resolver=bindings,
        sink=alert_log,
    )
