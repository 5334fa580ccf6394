"""
Utilities to centralize configuration handling across the menucom services.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation


class ConfigurationError(RuntimeError):
    """Raised when required settings are missing or invalid."""


@dataclass(frozen=True)
class AppConfig:
    """Simple container for application level settings."""

    app_name: str
    log_level: str
    debug_mode: bool
    cors_allowed_origins: tuple[str, ...]
    # MercadoPago credentials
    mp_access_token: str = field(repr=False)
    mp_sandbox: bool
    mp_api_base_url: str
    # Checkout settings
    mp_checkout_mode: str
    mp_currency_id: str
    mp_surcharge_rate: Decimal
    mp_excluded_payment_types: tuple[str, ...]
    mp_timeout_seconds: float
    mp_item_category_id: str
    mp_statement_descriptor: str
    mp_back_url: str
    mp_checkout_path: str
    mp_notification_url: str
    # OAuth settings
    oauth_client_id: str
    oauth_client_secret: str = field(repr=False)
    oauth_redirect_uri: str
    oauth_auth_url: str
    token_refresh_threshold_minutes: int
    token_default_expiration_hours: int

    def __post_init__(self) -> None:
        """
        Range checks shared by environment loading and explicit construction.

        Raises:
            ConfigurationError: If any numeric setting is out of range
        """
        errors = []
        if not self.mp_surcharge_rate.is_finite() or not 0 <= self.mp_surcharge_rate < 1:
            errors.append(
                f"MP_SURCHARGE_RATE must be between 0 and 1, got: {self.mp_surcharge_rate}"
            )
        if self.mp_timeout_seconds <= 0:
            errors.append(
                f"MP_TIMEOUT_SECONDS must be greater than 0, got: {self.mp_timeout_seconds}"
            )
        if self.token_refresh_threshold_minutes < 1:
            errors.append(
                "MP_TOKEN_REFRESH_THRESHOLD_MINUTES must be a positive integer, "
                f"got: {self.token_refresh_threshold_minutes}"
            )
        if self.token_default_expiration_hours < 1:
            errors.append(
                "MP_TOKEN_DEFAULT_EXPIRATION_HOURS must be a positive integer, "
                f"got: {self.token_default_expiration_hours}"
            )
        if errors:
            raise ConfigurationError("Invalid configuration: " + "; ".join(errors))

    @property
    def oauth_token_url(self) -> str:
        return f"{self.mp_api_base_url.rstrip('/')}/oauth/token"


def _read_env(name: str, default: str | None = None) -> str:
    """
    Internal helper to fetch environment variables with support for defaults.
    """
    value = os.getenv(name)
    if value is None:
        if default is None:
            raise ConfigurationError(f"Missing required environment variable '{name}'")
        value = default
    return value


def read_bool(name: str, default: str = "false") -> bool:
    value = _read_env(name, default)
    return value.strip().lower() in {"1", "true", "yes", "on"}


def read_list(name: str, default: str = "") -> tuple[str, ...]:
    value = _read_env(name, default)
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _read_decimal(name: str, default: str) -> Decimal:
    raw = _read_env(name, default)
    try:
        value = Decimal(raw.strip())
    except InvalidOperation:
        raise ConfigurationError(f"{name} must be a valid decimal number, got: {raw}")
    if not value.is_finite():
        raise ConfigurationError(f"{name} must be a finite number, got: {raw}")
    return value


def _read_int(name: str, default: str) -> int:
    raw = _read_env(name, default)
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a valid integer, got: {raw}")


def _read_float(name: str, default: str) -> float:
    raw = _read_env(name, default)
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a valid number, got: {raw}")


def validate_required_env_vars() -> None:
    """
    Validate that all required environment variables are set.

    Checks the variables the payments service cannot start without and the
    ranges of the numeric settings. Every problem is collected first so the
    operator sees the full list in a single failure.

    Raises:
        ConfigurationError: If any required variable is missing or has an invalid value
    """
    from menucom_shared.services.payment_providers.payment_gateway import PAYMENT_GATEWAYS

    errors = []

    access_token = os.getenv("MP_ACCESS_TOKEN", "")
    if not access_token.strip():
        errors.append("MP_ACCESS_TOKEN must be configured with the MercadoPago access token")

    surcharge_rate = os.getenv("MP_SURCHARGE_RATE", "")
    if surcharge_rate:
        try:
            rate = Decimal(surcharge_rate.strip())
            if not rate.is_finite() or rate < 0 or rate >= 1:
                errors.append(f"MP_SURCHARGE_RATE must be between 0 and 1, got: {surcharge_rate}")
        except InvalidOperation:
            errors.append(f"MP_SURCHARGE_RATE must be a valid decimal number, got: {surcharge_rate}")

    timeout = os.getenv("MP_TIMEOUT_SECONDS", "")
    if timeout:
        try:
            if float(timeout) <= 0:
                errors.append(f"MP_TIMEOUT_SECONDS must be greater than 0, got: {timeout}")
        except ValueError:
            errors.append(f"MP_TIMEOUT_SECONDS must be a valid number, got: {timeout}")

    checkout_mode = os.getenv("MP_CHECKOUT_MODE", "")
    if checkout_mode and checkout_mode.strip().lower() not in PAYMENT_GATEWAYS:
        supported = ", ".join(PAYMENT_GATEWAYS)
        errors.append(f"MP_CHECKOUT_MODE must be one of: {supported}, got: {checkout_mode}")

    for name in ("MP_TOKEN_REFRESH_THRESHOLD_MINUTES", "MP_TOKEN_DEFAULT_EXPIRATION_HOURS"):
        raw = os.getenv(name, "")
        if raw:
            try:
                if int(raw) < 1:
                    errors.append(f"{name} must be a positive integer, got: {raw}")
            except ValueError:
                errors.append(f"{name} must be a valid integer, got: {raw}")

    if errors:
        error_msg = "\nConfiguration Errors - Missing or invalid environment variables:\n"
        for error in errors:
            error_msg += f"  - {error}\n"
        raise ConfigurationError(error_msg)


def load_config(app_name: str) -> AppConfig:
    """
    Produce an AppConfig instance populated from environment variables.

    Each service passes its desired `app_name` to keep logs easy to
    differentiate while still reusing the same config loader. The access
    token defaults to an empty string here; the MercadoPago client refuses to
    build without it.
    """
    return AppConfig(
        app_name=app_name,
        log_level=_read_env("LOG_LEVEL", "INFO"),
        debug_mode=read_bool("DEBUG_MODE", "false"),
        cors_allowed_origins=read_list("CORS_ALLOWED_ORIGINS", "http://localhost:3000"),
        # MercadoPago credentials
        mp_access_token=_read_env("MP_ACCESS_TOKEN", "").strip(),
        mp_sandbox=read_bool("MP_SANDBOX_MODE", "false"),
        mp_api_base_url=_read_env("MP_API_BASE_URL", "https://api.mercadopago.com"),
        # Checkout settings
        mp_checkout_mode=_read_env("MP_CHECKOUT_MODE", "preference").strip().lower(),
        mp_currency_id=_read_env("MP_CURRENCY_ID", "ARS").strip().upper(),
        mp_surcharge_rate=_read_decimal("MP_SURCHARGE_RATE", "0.0992"),
        mp_excluded_payment_types=read_list("MP_EXCLUDED_PAYMENT_TYPES", "ticket,bank_transfer"),
        mp_timeout_seconds=_read_float("MP_TIMEOUT_SECONDS", "5"),
        mp_item_category_id=_read_env("MP_ITEM_CATEGORY_ID", "services"),
        mp_statement_descriptor=_read_env("MP_STATEMENT_DESCRIPTOR", "menucom_buy"),
        mp_back_url=_read_env("MP_BACK_URL", ""),
        mp_checkout_path=_read_env("MP_CHECKOUT_PATH", "/#/checkout/status"),
        mp_notification_url=_read_env("MP_NOTIFICATION_URL", ""),
        # OAuth settings
        oauth_client_id=_read_env("MERCADO_PAGO_CLIENT_ID", ""),
        oauth_client_secret=_read_env("MERCADO_PAGO_CLIENT_SECRET", ""),
        oauth_redirect_uri=_read_env(
            "MERCADO_PAGO_REDIRECT_URI", "http://localhost:3000/oauth/callback"
        ),
        oauth_auth_url=_read_env(
            "MERCADO_PAGO_AUTH_URL", "https://auth.mercadopago.com/authorization"
        ),
        token_refresh_threshold_minutes=_read_int("MP_TOKEN_REFRESH_THRESHOLD_MINUTES", "60"),
        token_default_expiration_hours=_read_int("MP_TOKEN_DEFAULT_EXPIRATION_HOURS", "6"),
    )
