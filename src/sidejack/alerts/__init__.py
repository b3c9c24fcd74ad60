"""Alert construction and delivery for Sidejack."""

from .models import Alert, AlertKind
from .notifier import NotificationSink, build_alert, deliver, format_actor
from .sinks import AlertLog, LoggingSink

__all__ = [
    "Alert",
    "AlertKind",
    "NotificationSink",
    "build_alert",
    "deliver",
    "format_actor",
    "AlertLog",
    "LoggingSink",
]
