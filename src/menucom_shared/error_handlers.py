"""
Centralized error handlers for Flask applications.
"""

from http import HTTPStatus

from flask import Flask, jsonify
from pydantic import ValidationError as PydanticValidationError
from werkzeug.exceptions import HTTPException

from menucom_shared.config import ConfigurationError
from menucom_shared.error_catalog import error_details
from menucom_shared.logging_config import get_logger
from menucom_shared.serializers import error_response
from menucom_shared.services.payment_providers import PaymentProviderError
from menucom_shared.validation import InvalidOrderError, ValidationError

logger = get_logger(__name__)


def register_error_handlers(app: Flask) -> None:
    """
    Register centralized error handlers for the Flask app.

    Every handler answers with the JSON error envelope; the service has no
    HTML pages.

    Args:
        app: Flask application instance
    """

    @app.errorhandler(InvalidOrderError)
    def handle_invalid_order(e: InvalidOrderError):
        """Handle malformed orders."""
        logger.warning(f"Invalid order: {e}")
        details = error_details("CHECK_001")
        if e.index is not None:
            details["item"] = e.index + 1
        return jsonify(error_response(str(e), details)), HTTPStatus.BAD_REQUEST

    @app.errorhandler(ValidationError)
    def handle_validation_error(e: ValidationError):
        """Handle custom validation errors."""
        logger.warning(f"Validation error: {e}")
        return jsonify(error_response(str(e), error_details("CHECK_002"))), HTTPStatus.BAD_REQUEST

    @app.errorhandler(PydanticValidationError)
    def handle_pydantic_validation_error(e: PydanticValidationError):
        """Handle Pydantic validation errors."""
        logger.warning(f"Pydantic validation error: {e}")
        details = error_details("CHECK_002")
        details["errors"] = [
            {"loc": [str(part) for part in err["loc"]], "msg": err["msg"]} for err in e.errors()
        ]
        return jsonify(error_response("Datos inválidos", details)), HTTPStatus.BAD_REQUEST

    @app.errorhandler(PaymentProviderError)
    def handle_payment_provider_error(e: PaymentProviderError):
        """Handle failures from MercadoPago."""
        logger.error(f"Payment provider error (status={e.status_code}): {e}")
        return jsonify(
            error_response(str(e), error_details("PAYMENT_001"))
        ), HTTPStatus.BAD_GATEWAY

    @app.errorhandler(ConfigurationError)
    def handle_configuration_error(e: ConfigurationError):
        """Handle missing or invalid configuration detected at request time."""
        logger.error(f"Configuration error: {e}")
        return jsonify(
            error_response("Servicio de pagos no configurado", error_details("CONFIG_001"))
        ), HTTPStatus.INTERNAL_SERVER_ERROR

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        """Handle HTTP exceptions from Werkzeug."""
        logger.warning(f"HTTP exception {e.code}: {e.description}")
        return jsonify(error_response(e.description or str(e))), e.code

    @app.errorhandler(Exception)
    def handle_generic_exception(e: Exception):
        """Handle any unhandled exceptions."""
        logger.error(f"Unhandled exception: {e}", exc_info=True)
        return jsonify(
            error_response("Error interno del servidor", error_details("SYSTEM_001"))
        ), HTTPStatus.INTERNAL_SERVER_ERROR
