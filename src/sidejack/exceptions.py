"""Exception hierarchy for configuration-time failures."""

from __future__ import annotations

from typing import Any


class SidejackError(Exception):
    def __init__(self, message: str, context: dict[str, Any] | None = None):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        context_str = f" - Context: {self.context}" if self.context else ""
        return f"{self.__class__.__name__}: {self.message}{context_str}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, context={self.context!r})"


class ConfigError(SidejackError):
    def __init__(
        self,
        message: str,
        option: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        ctx = dict(context or {})
        if option:
            ctx["option"] = option
        super().__init__(message, ctx)


class SignatureError(ConfigError):
    def __init__(
        self,
        message: str,
        description: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        ctx = dict(context or {})
        if description:
            ctx["signature"] = description
        super().__init__(message, context=ctx)
