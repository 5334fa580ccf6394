"""MercadoPago gateway implementations (Checkout Pro preferences and direct payments)."""

from __future__ import annotations

from abc import abstractmethod
from typing import Any

import requests

from menucom_shared.config import ConfigurationError
from menucom_shared.logging_config import get_logger
from menucom_shared.models import Payer, PreferenceLineItem, PreferenceRequest
from menucom_shared.serializers import money
from menucom_shared.validation import InvalidOrderError

from .base_provider import PaymentProviderError, PreferenceGateway, PreferenceResult
from .mercadopago_client import MercadoPagoClient

logger = get_logger(__name__)


def remove_empty(value: Any) -> Any:
    """
    Recursively drop None, blank strings, empty dicts and empty lists.

    MercadoPago echoes placeholders back for empty keys, so they are never sent.
    """
    if isinstance(value, dict):
        cleaned = {k: remove_empty(v) for k, v in value.items()}
        return {k: v for k, v in cleaned.items() if v is not None} or None
    if isinstance(value, (list, tuple)):
        cleaned = [remove_empty(v) for v in value]
        return [v for v in cleaned if v is not None] or None
    if isinstance(value, str):
        return value.strip() or None
    return value


def payer_body(payer: Payer | None) -> dict[str, Any] | None:
    if payer is None:
        return None
    body: dict[str, Any] = {
        "email": payer.email,
        "name": payer.name,
        "surname": payer.surname,
        # first_name/last_name are the fields MercadoPago uses for scoring
        "first_name": payer.name,
        "last_name": payer.surname,
    }
    if payer.phone:
        body["phone"] = {"area_code": payer.phone.area_code, "number": payer.phone.number}
    return body


def item_body(item: PreferenceLineItem) -> dict[str, Any]:
    return {
        "id": item.id,
        "title": item.title,
        "quantity": item.quantity,
        "currency_id": item.currency_id,
        "unit_price": money(item.unit_price),
        "category_id": item.category_id,
    }


class MercadoPagoGateway(PreferenceGateway):
    """Shared response handling for MercadoPago SDK resources."""

    name = "mercadopago"
    resource = ""

    def __init__(self, client: MercadoPagoClient):
        self.client = client

    def validate_configuration(self) -> bool:
        if not self.client.credentials.access_token:
            raise ConfigurationError("MercadoPago no está configurado. Configure MP_ACCESS_TOKEN.")
        return True

    @abstractmethod
    def build_body(self, request: PreferenceRequest) -> dict[str, Any]:
        """Render the provider JSON body for a request."""

    @abstractmethod
    def _submit(self, body: dict[str, Any]) -> dict[str, Any]:
        """Send the body through the SDK; returns the SDK `{status, response}` dict."""

    def create(self, request: PreferenceRequest) -> PreferenceResult:
        self.validate_configuration()
        body = remove_empty(self.build_body(request)) or {}
        scrub = self.client.credentials.scrub

        try:
            result = self._submit(body)
        except requests.exceptions.Timeout:
            raise PaymentProviderError("Timeout al conectar con MercadoPago. Intente nuevamente.")
        except requests.exceptions.ConnectionError:
            raise PaymentProviderError("No se pudo conectar con el servidor de MercadoPago.")
        except requests.exceptions.RequestException as e:
            raise PaymentProviderError(scrub(f"Error de conexión con MercadoPago: {e!s}"))
        except Exception as e:
            raise PaymentProviderError(scrub(f"Error inesperado de MercadoPago: {e!s}"))

        status = result.get("status") if isinstance(result, dict) else None
        response = result.get("response") if isinstance(result, dict) else None
        if not isinstance(response, dict):
            response = {}

        if not isinstance(status, int) or status >= 400:
            error_msg = response.get("message") or response.get("error") or f"HTTP {status}"
            raise PaymentProviderError(
                scrub(f"Error de MercadoPago: {error_msg}"), status_code=status
            )

        reference = response.get("id")
        if reference in (None, ""):
            raise PaymentProviderError(
                "MercadoPago no devolvió un identificador", status_code=status
            )

        logger.info(f"MercadoPago {self.resource} created with ID: {reference}")
        return PreferenceResult(id=str(reference), provider=self.name)


class MercadoPagoPreferenceGateway(MercadoPagoGateway):
    """Checkout Pro: creates a preference the buyer completes on MercadoPago."""

    resource = "preference"

    def build_body(self, request: PreferenceRequest) -> dict[str, Any]:
        body: dict[str, Any] = {
            "items": [item_body(item) for item in request.items],
            "external_reference": request.external_reference,
            "payer": payer_body(request.payer),
            "payment_methods": {
                "excluded_payment_types": [
                    {"id": payment_type} for payment_type in request.excluded_payment_types
                ],
            },
            "notification_url": request.notification_url,
            "statement_descriptor": request.statement_descriptor,
        }
        if request.back_urls:
            body["back_urls"] = {
                "success": request.back_urls.success,
                "failure": request.back_urls.failure,
                "pending": request.back_urls.pending,
            }
            body["auto_return"] = "approved"
        return body

    def _submit(self, body: dict[str, Any]) -> dict[str, Any]:
        return self.client.sdk.preference().create(body)


class MercadoPagoPaymentGateway(MercadoPagoGateway):
    """Direct payment through the /v1/payments endpoint."""

    resource = "payment"

    def build_body(self, request: PreferenceRequest) -> dict[str, Any]:
        if request.payer is None or not request.payer.email:
            raise InvalidOrderError("El email del pagador es requerido para pagos directos")
        if not request.payment_method_id:
            raise InvalidOrderError("El método de pago es requerido para pagos directos")

        return {
            "transaction_amount": money(request.transaction_amount),
            "description": request.description,
            "payment_method_id": request.payment_method_id,
            "external_reference": request.external_reference,
            "payer": {
                "email": request.payer.email,
                "first_name": request.payer.name,
                "last_name": request.payer.surname,
            },
            "additional_info": {
                "items": [item_body(item) for item in request.items],
            },
            "notification_url": request.notification_url,
            "statement_descriptor": request.statement_descriptor,
        }

    def _submit(self, body: dict[str, Any]) -> dict[str, Any]:
        return self.client.sdk.payment().create(body)
