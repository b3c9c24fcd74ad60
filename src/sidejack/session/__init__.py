"""Session extraction and context tracking for Sidejack."""

from .extractor import sessionize, split_cookie
from .models import Connection, Sighting, SessionContext
from .store import SessionStore

__all__ = [
    "sessionize",
    "split_cookie",
    "Connection",
    "Sighting",
    "SessionContext",
    "SessionStore",
]
