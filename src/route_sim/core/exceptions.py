"""Exception hierarchy for the route simulator."""

from typing import Any


class SimulationError(Exception):
    """Base exception for all simulator errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class PermanentError(SimulationError):
    """Errors that will not succeed on retry."""

    pass


class ValidationError(PermanentError):
    """Invalid input or data format."""

    pass


class ConfigurationError(PermanentError):
    """Missing or invalid configuration."""

    pass
