"""
MercadoPago OAuth token lifecycle.

Sellers link their MercadoPago account through the authorization code flow;
the resulting access token expires and is refreshed on demand, right before
it is used, once it is within the configured threshold of its expiry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from urllib.parse import urlencode

import requests

from menucom_shared.config import AppConfig, ConfigurationError
from menucom_shared.logging_config import get_logger
from menucom_shared.services.payment_providers import PaymentProviderError

logger = get_logger(__name__)

OAUTH_TIMEOUT_SECONDS = 10


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def validate_oauth_config(config: AppConfig) -> bool:
    """True when client id, client secret and redirect URI are all set."""
    return all(
        value.strip()
        for value in (config.oauth_client_id, config.oauth_client_secret, config.oauth_redirect_uri)
    )


@dataclass(frozen=True)
class OAuthSettings:
    client_id: str
    client_secret: str = field(repr=False)
    redirect_uri: str
    auth_url: str
    token_url: str
    refresh_threshold: timedelta
    default_expiration: timedelta

    @classmethod
    def from_config(cls, config: AppConfig) -> OAuthSettings:
        """
        Raises:
            ConfigurationError: If client id, client secret or redirect URI is missing
        """
        missing = [
            name
            for name, value in (
                ("MERCADO_PAGO_CLIENT_ID", config.oauth_client_id),
                ("MERCADO_PAGO_CLIENT_SECRET", config.oauth_client_secret),
                ("MERCADO_PAGO_REDIRECT_URI", config.oauth_redirect_uri),
            )
            if not value.strip()
        ]
        if missing:
            raise ConfigurationError(f"OAuth de MercadoPago no configurado. Faltan: {', '.join(missing)}")

        return cls(
            client_id=config.oauth_client_id.strip(),
            client_secret=config.oauth_client_secret.strip(),
            redirect_uri=config.oauth_redirect_uri.strip(),
            auth_url=config.oauth_auth_url,
            token_url=config.oauth_token_url,
            refresh_threshold=timedelta(minutes=config.token_refresh_threshold_minutes),
            default_expiration=timedelta(hours=config.token_default_expiration_hours),
        )


@dataclass(frozen=True)
class OAuthToken:
    access_token: str = field(repr=False)
    refresh_token: str | None = field(default=None, repr=False)
    expires_at: datetime | None = None
    user_id: str | None = None
    public_key: str | None = None


def compute_expiry(
    expires_in: int | float | None, default_expiration: timedelta, now: datetime | None = None
) -> datetime:
    """Expiry timestamp from the provider's `expires_in` seconds, or the default lifetime."""
    now = now or utcnow()
    if isinstance(expires_in, bool) or not isinstance(expires_in, (int, float)) or expires_in <= 0:
        return now + default_expiration
    return now + timedelta(seconds=expires_in)


def is_token_expiring_soon(
    token: OAuthToken, threshold: timedelta, now: datetime | None = None
) -> bool:
    """True once `now` reaches `expires_at - threshold`. Tokens without expiry never expire."""
    if token.expires_at is None:
        return False
    now = now or utcnow()
    return now >= token.expires_at - threshold


class OAuthTokenService:
    """Authorization code exchange and on-demand token refresh."""

    def __init__(self, settings: OAuthSettings, session: requests.Session | None = None):
        self.settings = settings
        # Without a session each call goes through requests.post
        self.session = session

    @classmethod
    def from_config(cls, config: AppConfig) -> OAuthTokenService:
        return cls(OAuthSettings.from_config(config))

    def build_authorization_url(self, user_id: str, state: str | None = None) -> str:
        params = {
            "client_id": self.settings.client_id,
            "response_type": "code",
            "platform_id": "mp",
            "redirect_uri": self.settings.redirect_uri,
            "state": state or f"user_{user_id}_{int(utcnow().timestamp())}",
        }
        return f"{self.settings.auth_url}?{urlencode(params)}"

    def exchange_code(self, code: str, now: datetime | None = None) -> OAuthToken:
        """Exchange an authorization code for access and refresh tokens."""
        logger.info("Exchanging OAuth authorization code")
        return self._request_token(
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self.settings.redirect_uri,
            },
            now=now,
        )

    def refresh(self, token: OAuthToken, now: datetime | None = None) -> OAuthToken:
        """
        Refresh an access token.

        Raises:
            PaymentProviderError: If the token has no refresh token or the call fails
        """
        if not token.refresh_token:
            raise PaymentProviderError("El token de MercadoPago no tiene refresh token")

        refreshed = self._request_token(
            {"grant_type": "refresh_token", "refresh_token": token.refresh_token}, now=now
        )
        logger.info(f"Refreshed MercadoPago access token for user {token.user_id or 'N/A'}")
        # MercadoPago may omit a new refresh token; keep the previous one
        return OAuthToken(
            access_token=refreshed.access_token,
            refresh_token=refreshed.refresh_token or token.refresh_token,
            expires_at=refreshed.expires_at,
            user_id=refreshed.user_id or token.user_id,
            public_key=refreshed.public_key or token.public_key,
        )

    def ensure_fresh(self, token: OAuthToken, now: datetime | None = None) -> OAuthToken:
        """Return the token unchanged, or a refreshed one when it is due."""
        if not is_token_expiring_soon(token, self.settings.refresh_threshold, now):
            return token
        logger.info(f"Token expiring soon for user {token.user_id or 'N/A'}, refreshing...")
        return self.refresh(token, now=now)

    def _request_token(self, grant: dict[str, str], now: datetime | None = None) -> OAuthToken:
        payload = {
            "client_id": self.settings.client_id,
            "client_secret": self.settings.client_secret,
            **grant,
        }
        post = self.session.post if self.session is not None else requests.post
        try:
            response = post(self.settings.token_url, json=payload, timeout=OAUTH_TIMEOUT_SECONDS)
        except requests.exceptions.Timeout:
            raise PaymentProviderError("Timeout al conectar con OAuth de MercadoPago.")
        except requests.exceptions.RequestException as e:
            raise PaymentProviderError(f"Error de conexión con OAuth de MercadoPago: {e!s}")

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if response.status_code != 200 or not data.get("access_token"):
            error_msg = data.get("message") or data.get("error") or f"HTTP {response.status_code}"
            logger.error(
                f"OAuth token request ({grant['grant_type']}) failed: "
                f"status={response.status_code} error={error_msg}"
            )
            raise PaymentProviderError(
                f"No se pudo obtener el token de MercadoPago: {error_msg}",
                status_code=response.status_code,
            )

        return OAuthToken(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            expires_at=compute_expiry(data.get("expires_in"), self.settings.default_expiration, now),
            user_id=str(data["user_id"]) if data.get("user_id") is not None else None,
            public_key=data.get("public_key"),
        )
