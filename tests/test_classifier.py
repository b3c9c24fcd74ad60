"""Tests for the sighting classifier."""

import pytest

from sidejack.detection import AddressBindingTable, Outcome, SessionClassifier, is_aliased
from sidejack.session import Connection, SessionContext, Sighting

T0 = 1_700_000_000.0
COOKIE = "c_user=1001; xs=abc"
HW = "00:16:3e:00:00:01"


def ctx(address="10.0.0.1", agent="AgentX", hw=None):
    return SessionContext(
        owner_address=address,
        user_agent=agent,
        last_seen=T0,
        last_connection_id="C1",
        canonical_cookie=COOKIE,
        service_label="Facebook",
        learned_hardware_id=hw,
    )


def sighting(address, agent):
    return Sighting(Connection("C2", address), "www.facebook.com", COOKIE, agent, T0 + 60)


class TestAddressOnlyMode:
    @pytest.fixture
    def classifier(self):
        return SessionClassifier()

    def test_first_sighting(self, classifier):
        v = classifier.classify(None, sighting("10.0.0.1", "AgentX"), COOKIE)
        assert v.outcome is Outcome.FIRST_SIGHTING
        assert v.hardware_id is None
        assert not v.alerts

    def test_benign_refresh(self, classifier):
        v = classifier.classify(ctx(), sighting("10.0.0.1", "AgentX"), COOKIE)
        assert v.outcome is Outcome.BENIGN_REFRESH
        assert v.refreshes and not v.alerts

    def test_reuse(self, classifier):
        v = classifier.classify(ctx(), sighting("10.0.0.1", "AgentY"), COOKIE)
        assert v.outcome is Outcome.REUSE
        assert v.dedup_key == (COOKIE, "AgentY")
        assert v.alerts and v.refreshes

    def test_hijack_new_address_new_agent(self, classifier):
        v = classifier.classify(ctx(), sighting("10.0.0.2", "AgentY"), COOKIE)
        assert v.outcome is Outcome.HIJACK
        assert v.dedup_key == (COOKIE, "10.0.0.2")
        assert not v.refreshes

    def test_silent_without_aliasing(self, classifier):
        v = classifier.classify(ctx(), sighting("10.0.0.2", "AgentX"), COOKIE)
        assert v.outcome is Outcome.IGNORE
        assert not v.alerts and not v.refreshes


class TestAliasing:
    @pytest.fixture
    def table(self):
        t = AddressBindingTable()
        t.learn("10.0.0.1", HW)
        t.learn("10.0.0.2", HW)
        t.learn("10.0.0.3", "00:16:3e:00:00:03")
        return t

    @pytest.fixture
    def classifier(self, table):
        return SessionClassifier(aliasing_enabled=True, resolver=table)

    def test_first_sighting_learns_hardware_id(self, classifier):
        v = classifier.classify(None, sighting("10.0.0.1", "AgentX"), COOKIE)
        assert v.hardware_id == HW

    def test_roam(self, classifier):
        v = classifier.classify(ctx(hw=HW), sighting("10.0.0.2", "AgentX"), COOKIE)
        assert v.outcome is Outcome.ROAM
        assert v.dedup_key == (COOKIE, "10.0.0.2")
        assert v.hardware_id == HW

    def test_not_aliased_is_hijack(self, classifier):
        v = classifier.classify(ctx(hw=HW), sighting("10.0.0.3", "AgentX"), COOKIE)
        assert v.outcome is Outcome.HIJACK

    def test_unknown_stored_hardware_id_is_hijack(self, classifier):
        v = classifier.classify(ctx(hw=None), sighting("10.0.0.2", "AgentX"), COOKIE)
        assert v.outcome is Outcome.HIJACK

    def test_different_agent_never_roams(self, classifier):
        v = classifier.classify(ctx(hw=HW), sighting("10.0.0.2", "AgentY"), COOKIE)
        assert v.outcome is Outcome.HIJACK

    def test_is_aliased_requires_owner_binding(self, table):
        table.forget("10.0.0.1")
        assert not is_aliased(table, "10.0.0.2", ctx(hw=HW))

    def test_failing_resolver_is_not_aliased(self):
        class Broken:
            def address_to_hardware_id(self, address):
                raise RuntimeError("lookup down")

            def hardware_id_to_addresses(self, hardware_id):
                raise RuntimeError("lookup down")

        classifier = SessionClassifier(aliasing_enabled=True, resolver=Broken())
        v = classifier.classify(ctx(hw=HW), sighting("10.0.0.2", "AgentX"), COOKIE)
        assert v.outcome is Outcome.HIJACK
        assert classifier.classify(None, sighting("10.0.0.2", "AgentX"), COOKIE).hardware_id is None


class TestPairMode:
    @pytest.fixture
    def classifier(self):
        table = AddressBindingTable()
        table.learn("10.0.0.1", HW)
        table.learn("10.0.0.2", HW)
        return SessionClassifier(identity_is_address_only=False, aliasing_enabled=True, resolver=table)

    def test_both_match(self, classifier):
        v = classifier.classify(ctx(hw=HW), sighting("10.0.0.1", "AgentX"), COOKIE)
        assert v.outcome is Outcome.BENIGN_REFRESH

    def test_agent_differs(self, classifier):
        v = classifier.classify(ctx(hw=HW), sighting("10.0.0.1", "AgentY"), COOKIE)
        assert v.outcome is Outcome.HIJACK
        assert v.dedup_key == (COOKIE, "10.0.0.1 AgentY")

    def test_aliased_address_still_hijack(self, classifier):
        v = classifier.classify(ctx(hw=HW), sighting("10.0.0.2", "AgentX"), COOKIE)
        assert v.outcome is Outcome.HIJACK
        assert v.dedup_key == (COOKIE, "10.0.0.2 AgentX")
