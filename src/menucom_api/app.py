"""
Factory for the Payments API Service (REST).
Serves the MercadoPago checkout endpoints under /api.
"""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from menucom_api.routes import api_bp
from menucom_shared.config import AppConfig, load_config, validate_required_env_vars
from menucom_shared.error_handlers import register_error_handlers
from menucom_shared.logging_config import configure_logging
from menucom_shared.services.oauth_token_service import OAuthTokenService, validate_oauth_config
from menucom_shared.services.payment_providers import (
    PreferenceGateway,
    build_client,
    get_payment_gateway,
)
from menucom_shared.services.preference_service import PreferenceService


def create_app(config: AppConfig | None = None, gateway: PreferenceGateway | None = None) -> Flask:
    """
    Build the Flask application.

    Configuration is loaded and validated once here. A missing access token
    raises ConfigurationError before the app is returned, so a misconfigured
    container never starts serving.

    Args:
        config: Explicit settings; read from the environment when omitted
        gateway: Gateway override, mainly for tests; built from config when omitted
    """
    if config is None:
        # Validate all required environment variables (fail-fast)
        validate_required_env_vars()
        config = load_config("menucom-payments")

    app = Flask(__name__)
    logger = configure_logging(config.app_name, config.log_level)

    if gateway is None:
        client = build_client(config)
        gateway = get_payment_gateway(config.mp_checkout_mode, client)
    gateway.validate_configuration()

    # Basic Config
    app.config["APP_NAME"] = config.app_name
    app.config["DEBUG_MODE"] = config.debug_mode

    app.extensions["preference_service"] = PreferenceService(config, gateway)
    if validate_oauth_config(config):
        app.extensions["oauth_token_service"] = OAuthTokenService.from_config(config)
    else:
        logger.warning("MercadoPago OAuth credentials not configured")

    app.register_blueprint(api_bp, url_prefix="/api")

    # Error Handlers
    register_error_handlers(app)

    # CORS
    CORS(app, resources={r"/api/*": {"origins": list(config.cors_allowed_origins)}})

    logger.info(
        f"Payments API ready (checkout_mode={config.mp_checkout_mode}, "
        f"currency={config.mp_currency_id}, sandbox={config.mp_sandbox})"
    )
    return app
