"""
MercadoPago checkout endpoints.
"""

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request

from menucom_shared.config import ConfigurationError
from menucom_shared.models import Order, Payer
from menucom_shared.schemas import CreatePreferenceRequest
from menucom_shared.validation import ValidationError

payments_bp = Blueprint("payments", __name__, url_prefix="/payments")


@payments_bp.post("/preference")
def create_preference():
    """
    Create a MercadoPago checkout for the products in the payload.

    Returns `{"id": ...}` with the provider-issued identifier. Invalid orders
    answer 400 and provider failures 502 through the shared error handlers.
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Se esperaba un cuerpo JSON")

    data = CreatePreferenceRequest.model_validate(payload)
    order = Order.from_payload(
        [product.model_dump() for product in data.products],
        external_reference=data.external_reference,
        description=data.description,
    )
    payer = Payer.from_payload(data.payer.model_dump() if data.payer else None)

    service = current_app.extensions["preference_service"]
    result = service.create_preference(
        order, payer=payer, payment_method_id=data.payment_method_id
    )
    return jsonify(result.to_dict()), HTTPStatus.OK


@payments_bp.get("/oauth/authorization-url")
def oauth_authorization_url():
    """Authorization URL a seller follows to link their MercadoPago account."""
    oauth_service = current_app.extensions.get("oauth_token_service")
    if oauth_service is None:
        raise ConfigurationError("OAuth de MercadoPago no configurado")

    user_id = (request.args.get("user_id") or "").strip()
    if not user_id:
        raise ValidationError("El parámetro user_id es requerido")

    url = oauth_service.build_authorization_url(user_id, state=request.args.get("state"))
    return jsonify({"authorization_url": url}), HTTPStatus.OK
