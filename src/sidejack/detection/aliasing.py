"""
Address aliasing.

Learned bindings between client addresses and hardware identifiers (MAC
addresses learned from DHCP/ARP) let the classifier recognize a host that
merely changed address. The detector consumes any object implementing
AddressResolver; AddressBindingTable is the in-memory implementation used
by the CLI, the API and the tests.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from ..session.models import SessionContext

logger = logging.getLogger(__name__)


@runtime_checkable
class AddressResolver(Protocol):
    def address_to_hardware_id(self, address: str) -> str | None: ...

    def hardware_id_to_addresses(self, hardware_id: str) -> set[str]: ...


class AddressBindingTable:
    """Bidirectional address <-> hardware id binding table."""

    def __init__(self):
        self.bindings: dict[str, str] = {}  # address -> hardware id
        self.reverse: dict[str, set[str]] = {}  # hardware id -> addresses

    def learn(self, address: str, hardware_id: str) -> None:
        """Bind an address to a hardware id, replacing any previous binding."""
        self.forget(address)
        self.bindings[address] = hardware_id
        if hardware_id not in self.reverse:
            self.reverse[hardware_id] = set()
        self.reverse[hardware_id].add(address)

    def forget(self, address: str) -> bool:
        hw = self.bindings.pop(address, None)
        if hw is None:
            return False
        addrs = self.reverse.get(hw, set())
        addrs.discard(address)
        if not addrs:
            self.reverse.pop(hw, None)
        return True

    def address_to_hardware_id(self, address: str) -> str | None:
        return self.bindings.get(address)

    def hardware_id_to_addresses(self, hardware_id: str) -> set[str]:
        return set(self.reverse.get(hardware_id, set()))

    def __len__(self) -> int:
        return len(self.bindings)


def resolve_hardware_id(resolver: AddressResolver | None, address: str) -> str | None:
    """Best-effort address lookup; resolver failures count as unknown."""
    if resolver is None:
        return None
    try:
        return resolver.address_to_hardware_id(address)
    except Exception:
        logger.exception("Address resolver failed for %s", address)
        return None


def is_aliased(
    resolver: AddressResolver | None, address: str, context: SessionContext
) -> bool:
    """True when address and the context owner share the context's learned hardware id."""
    if context.learned_hardware_id is None:
        return False
    hw = resolve_hardware_id(resolver, address)
    if hw is None or hw != context.learned_hardware_id:
        return False
    try:
        addresses = resolver.hardware_id_to_addresses(hw)
    except Exception:
        logger.exception("Address resolver failed for hardware id %s", hw)
        return False
    return context.owner_address in addresses and address in addresses
