"""
Payments API - Modular Blueprint Structure

All endpoints are registered under the main api_bp blueprint, mounted at /api.
"""

from flask import Blueprint

# Create main API blueprint
api_bp = Blueprint("payments_api", __name__)

from menucom_api.routes.health import health_bp
from menucom_api.routes.payments import payments_bp

# Register all sub-blueprints with the main API blueprint
api_bp.register_blueprint(health_bp)
api_bp.register_blueprint(payments_bp)

__all__ = ["api_bp"]
