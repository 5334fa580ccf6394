"""Base payment gateway interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from menucom_shared.models import PreferenceRequest


class PaymentProviderError(Exception):
    """Raised when a payment provider call fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class PreferenceResult:
    """Normalized outcome of a checkout creation call."""

    id: str
    provider: str = "mercadopago"

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id}


class PreferenceGateway(ABC):
    """Narrow interface over the remote payment provider."""

    name: str = ""

    @abstractmethod
    def create(self, request: PreferenceRequest) -> PreferenceResult:
        """
        Submit a checkout request to the provider.

        Args:
            request: Fully built request; never modified by the gateway

        Returns:
            PreferenceResult with the provider-issued identifier

        Raises:
            PaymentProviderError: If the provider call fails
        """
        pass

    @abstractmethod
    def validate_configuration(self) -> bool:
        """
        Validate that the gateway is properly configured.

        Returns:
            True if configured, raises otherwise

        Raises:
            ConfigurationError: If configuration is invalid
        """
        pass
