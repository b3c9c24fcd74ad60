"""
Session extraction.

Reduces a raw cookie header to the canonical session identifier of a
service, keeping only the fields its signature names. Unrelated cookie
fields (tracking ids, preferences) never reach the identifier, so the same
session maps to the same key no matter what else the browser sends.
"""

from __future__ import annotations

from ..signatures.models import ServiceSignature

FIELD_SEPARATOR = "; "


def split_cookie(cookie: str) -> list[tuple[str, str, str]]:
    """Split a cookie header into (key, value, raw_field) triples.

    Fields without '=' are skipped.
    """
    fields = []
    for raw in cookie.split(FIELD_SEPARATOR):
        key, sep, value = raw.partition("=")
        if not sep:
            continue
        fields.append((key, value, raw))
    return fields


def sessionize(cookie: str, signature: ServiceSignature) -> str:
    """Return the canonical session identifier, or "" if none is recognized.

    Required keys are emitted sorted by key; key-pattern matches follow in
    their original order, as raw text.
    """
    fields = split_cookie(cookie)
    parts: list[str] = []

    if signature.required_keys:
        matched: dict[str, str] = {}
        for key, value, _ in fields:
            if key in signature.required_keys:
                matched[key] = value
        if len(matched) == len(signature.required_keys):
            parts.extend(f"{k}={matched[k]}" for k in sorted(matched))

    if signature.key_pattern is not None:
        parts.extend(raw for key, _, raw in fields if signature.matches_key(key))

    return FIELD_SEPARATOR.join(parts)
