"""Service signature catalog for Sidejack."""

from .catalog import SignatureCatalog, DEFAULT_SIGNATURES
from .models import ServiceSignature

__all__ = ["SignatureCatalog", "ServiceSignature", "DEFAULT_SIGNATURES"]
