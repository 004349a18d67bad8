"""Error taxonomy shared by the validation, storage and business layers."""
from __future__ import annotations


class AirlineError(RuntimeError):
    """Base class for failures reported to the user without ending the session."""


class ValidationExhausted(AirlineError):
    """Raised when the user used up every attempt for a prompted value."""


class NotFound(AirlineError):
    """Raised when a lookup that must match exactly one row matched none."""


class InstanceClosed(AirlineError):
    """Raised when booking against a flight instance that has already flown."""


class CapacityExhausted(AirlineError):
    """Raised when an identifier space has no numbers left."""


class InvalidTransition(AirlineError):
    """Raised when a reservation cannot move to the requested status."""


class StorageFailure(AirlineError):
    """Raised when the database connection or a statement fails."""
