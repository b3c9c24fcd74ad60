"""
Sighting classifier.

Compares a new cookie sighting against the stored session context and
decides whether it is the owner returning, the owner's address with a
different browser (reuse), the owner's host on a new address (roam), or
somebody else (hijack).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from ..session.models import SessionContext, Sighting
from .aliasing import AddressResolver, is_aliased, resolve_hardware_id

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    FIRST_SIGHTING = "first_sighting"
    BENIGN_REFRESH = "benign_refresh"
    REUSE = "reuse"
    ROAM = "roam"
    HIJACK = "hijack"
    IGNORE = "ignore"  # Same agent on a new address, aliasing disabled


REFRESHING_OUTCOMES = frozenset({Outcome.BENIGN_REFRESH, Outcome.REUSE, Outcome.ROAM})
ALERTING_OUTCOMES = frozenset({Outcome.REUSE, Outcome.ROAM, Outcome.HIJACK})


@dataclass
class Verdict:
    outcome: Outcome
    dedup_key: tuple[str, str] | None = None
    hardware_id: str | None = None

    @property
    def alerts(self) -> bool:
        return self.outcome in ALERTING_OUTCOMES

    @property
    def refreshes(self) -> bool:
        return self.outcome in REFRESHING_OUTCOMES


class SessionClassifier:
    """
    Decision logic for cookie sightings.

    In address-only identity mode a session belongs to an address: a new
    user agent on the owner's address is a reuse, a new address is a
    hijack unless aliasing explains it as a roam. In pair mode the
    (address, user agent) pair is the identity and any mismatch is a
    hijack; aliasing is not consulted.
    """

    def __init__(
        self,
        identity_is_address_only: bool = True,
        aliasing_enabled: bool = False,
        resolver: AddressResolver | None = None,
    ):
        self.identity_is_address_only = identity_is_address_only
        self.aliasing_enabled = aliasing_enabled
        self.resolver = resolver

    def identity(self, address: str, user_agent: str) -> str:
        if self.identity_is_address_only:
            return address
        return f"{address} {user_agent}"

    def classify(
        self,
        context: SessionContext | None,
        sighting: Sighting,
        canonical_cookie: str,
    ) -> Verdict:
        address = sighting.address
        agent = sighting.user_agent

        if context is None:
            hw = None
            if self.aliasing_enabled:
                hw = resolve_hardware_id(self.resolver, address)
            return Verdict(Outcome.FIRST_SIGHTING, hardware_id=hw)

        same_address = address == context.owner_address
        same_agent = agent == context.user_agent

        if same_address and same_agent:
            return Verdict(Outcome.BENIGN_REFRESH)

        if not self.identity_is_address_only:
            return self._hijack(canonical_cookie, address, agent)

        if same_address:
            return Verdict(Outcome.REUSE, dedup_key=(canonical_cookie, agent))

        if not same_agent:
            return self._hijack(canonical_cookie, address, agent)

        if not self.aliasing_enabled:
            logger.debug(
                "Cookie for %s moved %s -> %s with same agent; aliasing disabled",
                context.service_label, context.owner_address, address,
            )
            return Verdict(Outcome.IGNORE)

        if is_aliased(self.resolver, address, context):
            return Verdict(
                Outcome.ROAM,
                dedup_key=(canonical_cookie, address),
                hardware_id=context.learned_hardware_id,
            )

        return self._hijack(canonical_cookie, address, agent)

    def _hijack(self, canonical_cookie: str, address: str, agent: str) -> Verdict:
        return Verdict(
            Outcome.HIJACK,
            dedup_key=(canonical_cookie, self.identity(address, agent)),
        )
