"""
Health check endpoint.
"""

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify

health_bp = Blueprint("payments_health", __name__)


@health_bp.get("/health")
def healthcheck():
    """Basic endpoint to confirm the container is healthy."""
    return jsonify({"status": "ok", "service": current_app.config["APP_NAME"]}), HTTPStatus.OK
