"""Error taxonomy shared by the ICM engine, service layer and CLI."""

from __future__ import annotations

__all__ = ["ConfigError", "DomainError", "ICMError", "NumericWarning"]


class ICMError(Exception):
    """Base class for errors raised by the ICM engine."""


class ConfigError(ICMError, ValueError):
    """Raised for malformed payout or scenario configuration."""


class DomainError(ICMError, ValueError):
    """Raised when a scenario is structurally impossible to evaluate."""


class NumericWarning(UserWarning):
    """Non-fatal floating point drift recorded alongside a result.

    Instances are collected on results and logged; they are never raised by
    the engine itself.
    """

    def __init__(self, message: str, *, deviation: float = 0.0, context: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.deviation = deviation
        self.context = context

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NumericWarning):
            return NotImplemented
        return (self.message, self.deviation, self.context) == (other.message, other.deviation, other.context)

    def __hash__(self) -> int:
        return hash((self.message, self.deviation, self.context))
