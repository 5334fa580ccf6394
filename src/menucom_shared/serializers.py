"""
Serializers for consistent API responses.
"""

from decimal import Decimal
from typing import Any


def _safe_float(value) -> float:
    try:
        return float(value) if value is not None else 0.0
    except (TypeError, ValueError):
        return 0.0


def money(value: Decimal | None) -> float:
    """Render a Decimal amount as a JSON friendly float."""
    return _safe_float(value)


def error_response(error: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    """Create a standardized error response."""
    response = {"status": "error", "data": None, "error": error}
    if details:
        response["details"] = details
    return response
