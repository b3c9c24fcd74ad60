"""Sighting classification for Sidejack."""

from .aliasing import AddressBindingTable, AddressResolver, is_aliased
from .classifier import Outcome, SessionClassifier, Verdict

__all__ = [
    "AddressBindingTable",
    "AddressResolver",
    "is_aliased",
    "Outcome",
    "SessionClassifier",
    "Verdict",
]
