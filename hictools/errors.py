"""Custom exceptions for the :mod:`hictools` package."""
from __future__ import annotations


class HicToolsError(Exception):
    """Base exception for hictools errors."""


class ConfigurationError(HicToolsError, ValueError):
    """Invalid output option or parameter value."""


class InterpolationError(HicToolsError, ValueError):
    """Interpolator could not be built from the given samples."""


class InvalidInput(InterpolationError):
    """x and y sample vectors are inconsistent."""


class InsufficientData(InterpolationError):
    """Too few sample points for the requested interpolation."""


class DuplicateAbscissa(InterpolationError):
    """Two sample points share the same x value."""

    def __init__(self, value: float, message: str) -> None:
        super().__init__(message)
        self.value = value


class CapacityExceeded(HicToolsError, ValueError):
    """More entries in one block or collision than the writer accepts."""

    def __init__(self, size: int, capacity: int, what: str = "particle block") -> None:
        super().__init__(
            f"{what} has {size} entries, maximum buffer size is {capacity}"
        )
        self.size = size
        self.capacity = capacity


class OutputError(HicToolsError, OSError):
    """Output file could not be opened, written or finalised."""


class AutosaveError(OutputError):
    """Durable checkpoint of the output file failed."""

    def __init__(self, event_number: int, message: str) -> None:
        super().__init__(f"autosave after event {event_number} failed: {message}")
        self.event_number = event_number


__all__ = [
    "HicToolsError",
    "ConfigurationError",
    "InterpolationError",
    "InvalidInput",
    "InsufficientData",
    "DuplicateAbscissa",
    "CapacityExceeded",
    "OutputError",
    "AutosaveError",
]
