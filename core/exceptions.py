"""Exceptions for the waitlist engine."""


class EngineConfigError(ValueError):
    """Raised when engine business rules are inconsistent."""
    pass
