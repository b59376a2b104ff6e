"""Exceptions raised by juliafield."""


class InvalidConfiguration(ValueError):
    """Raised when a field cannot be built from the given settings."""
