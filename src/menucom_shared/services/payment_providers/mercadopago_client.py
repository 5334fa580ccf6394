"""MercadoPago credentials and SDK client construction."""

from __future__ import annotations

from dataclasses import dataclass, field

import mercadopago
from mercadopago.config import RequestOptions

from menucom_shared.config import AppConfig, ConfigurationError
from menucom_shared.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class MercadoPagoCredentials:
    """Access token resolved once at startup and held for the process lifetime."""

    access_token: str = field(repr=False)
    sandbox: bool = False

    @classmethod
    def from_config(cls, config: AppConfig) -> MercadoPagoCredentials:
        """
        Resolve credentials from configuration.

        Raises:
            ConfigurationError: If the access token is missing or blank
        """
        access_token = (config.mp_access_token or "").strip()
        if not access_token:
            raise ConfigurationError("Falta el Access Token de MercadoPago (MP_ACCESS_TOKEN)")
        return cls(access_token=access_token, sandbox=config.mp_sandbox)

    def scrub(self, message: str) -> str:
        """Remove the access token from a message before it is logged or returned."""
        return message.replace(self.access_token, "***")


@dataclass(frozen=True)
class MercadoPagoClient:
    """Authenticated SDK handle shared read-only across requests."""

    credentials: MercadoPagoCredentials
    sdk: mercadopago.SDK = field(repr=False)
    timeout_seconds: float

    @property
    def sandbox(self) -> bool:
        return self.credentials.sandbox


def build_client(config: AppConfig) -> MercadoPagoClient:
    """
    Build the MercadoPago client from configuration.

    The token check happens here, at construction time, so a misconfigured
    deployment fails at startup instead of on the first checkout. The SDK's
    own retries are disabled; retry policy belongs to the caller.

    Raises:
        ConfigurationError: If the access token is missing or blank
    """
    credentials = MercadoPagoCredentials.from_config(config)
    request_options = RequestOptions(
        connection_timeout=config.mp_timeout_seconds,
        max_retries=0,
    )
    sdk = mercadopago.SDK(credentials.access_token, request_options=request_options)

    logger.info(
        f"MercadoPago client ready (sandbox={credentials.sandbox}, "
        f"timeout={config.mp_timeout_seconds}s)"
    )
    return MercadoPagoClient(
        credentials=credentials, sdk=sdk, timeout_seconds=config.mp_timeout_seconds
    )
