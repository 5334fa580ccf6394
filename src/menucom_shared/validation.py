"""
Input validation utilities.
"""

import re


class ValidationError(Exception):
    """Raised when validation fails."""

    pass


class InvalidOrderError(ValidationError):
    """Raised when an order or one of its products is malformed."""

    def __init__(self, message: str, index: int | None = None):
        super().__init__(message)
        self.index = index


def digits_only(value: str | int | None) -> str | None:
    """Strip everything but digits; None when nothing is left."""
    if value is None:
        return None
    digits = re.sub(r"\D+", "", str(value))
    return digits or None
