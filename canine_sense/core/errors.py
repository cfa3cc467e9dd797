"""Exceptions raised by the adaptation engine.

Errors only occur while building the profile registry or loading
configuration. The evaluation path clamps and logs instead of raising,
except when the safety layer runs in strict mode.
"""

from __future__ import annotations


class CanineSenseError(Exception):
    """Base class for all engine errors."""

    pass


class DuplicateProfileError(CanineSenseError, ValueError):
    """Raised when a breed name or alias is registered twice.

    Fatal to registry construction.
    """

    pass


class InvalidProfileError(CanineSenseError, ValueError):
    """Raised when a breed profile has a missing field or an out-of-range coefficient."""

    pass


class RegistryFrozenError(CanineSenseError, RuntimeError):
    """Raised when register() is called on a frozen registry."""

    pass


class OutOfRangeParameter(CanineSenseError, ArithmeticError):
    """Raised by a strict safety layer when an output leaves its safe range.

    Seeing this indicates a coefficient-table bug, not a runtime
    condition to recover from.
    """

    def __init__(self, field_name: str, value: float, low: float, high: float):
        self.field_name = field_name
        self.value = value
        self.low = low
        self.high = high
        super().__init__(
            f"{field_name}={value!r} outside safe range [{low}, {high}]"
        )
