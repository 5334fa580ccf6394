"""Payment providers module."""

from .base_provider import PaymentProviderError, PreferenceGateway, PreferenceResult
from .mercadopago_client import MercadoPagoClient, MercadoPagoCredentials, build_client
from .payment_gateway import PAYMENT_GATEWAYS, get_payment_gateway

__all__ = [
    "PAYMENT_GATEWAYS",
    "MercadoPagoClient",
    "MercadoPagoCredentials",
    "PaymentProviderError",
    "PreferenceGateway",
    "PreferenceResult",
    "build_client",
    "get_payment_gateway",
]
