"""
Alert construction.

Turns an alerting verdict into a structured Alert and hands it to the
notification sink.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from ..detection.classifier import Outcome, Verdict
from ..session.models import SessionContext, Sighting
from .models import Alert, AlertKind

logger = logging.getLogger(__name__)

OUTCOME_KINDS = {
    Outcome.REUSE: AlertKind.REUSE,
    Outcome.ROAM: AlertKind.ROAM,
    Outcome.HIJACK: AlertKind.HIJACK,
}


@runtime_checkable
class NotificationSink(Protocol):
    def notify(self, alert: Alert) -> None: ...


def format_actor(address: str, hardware_id: str | None = None) -> str:
    if hardware_id:
        return f"{address} ({hardware_id})"
    return address


def build_alert(
    verdict: Verdict,
    sighting: Sighting,
    context: SessionContext,
    suppress_for: float = 600.0,
    actor_hardware_id: str | None = None,
) -> Alert:
    """Build the alert for a Reuse, Roam or Hijack verdict.

    `context` must be the state from before the sighting was applied so the
    message names the previous connection.
    """
    kind = OUTCOME_KINDS.get(verdict.outcome)
    if kind is None or verdict.dedup_key is None:
        raise ValueError(f"verdict {verdict.outcome.value} does not raise an alert")

    actor = format_actor(sighting.address, actor_hardware_id)
    service = context.service_label
    prev = context.last_connection_id
    cookie = context.canonical_cookie

    if kind is AlertKind.REUSE:
        message = (
            f"{service} session reused by {actor} with user agent "
            f"'{sighting.user_agent}' (owner agent '{context.user_agent}', "
            f"previous connection {prev}): {cookie}"
        )
    elif kind is AlertKind.ROAM:
        message = (
            f"{service} session roamed from {context.owner_address} to {actor} "
            f"(previous connection {prev}): {cookie}"
        )
    else:
        message = (
            f"{service} session hijacked by {actor} from owner "
            f"{context.owner_address} (previous connection {prev}): {cookie}"
        )

    return Alert(
        kind=kind,
        connection=sighting.connection,
        suppress_for=suppress_for,
        actor=actor,
        message=message,
        dedup_key=verdict.dedup_key,
        service_label=service,
        timestamp=sighting.timestamp,
    )


def deliver(sink: NotificationSink | None, alert: Alert) -> bool:
    """Best-effort delivery; sink failures are logged, never raised."""
    logger.warning("%s: %s", alert.kind.value, alert.message)
    if sink is None:
        return False
    try:
        sink.notify(alert)
    except Exception:
        logger.exception("Notification sink failed for %s alert", alert.kind.value)
        return False
    return True
