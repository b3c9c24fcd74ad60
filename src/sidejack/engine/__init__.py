"""Detector configuration and pipeline for Sidejack."""

from .config import DetectorConfig
from .detector import SidejackDetector, UNKNOWN_SERVICE

__all__ = ["DetectorConfig", "SidejackDetector", "UNKNOWN_SERVICE"]
