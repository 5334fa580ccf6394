"""Payment gateway registry - Facade over the MercadoPago checkout flavours."""

from __future__ import annotations

from menucom_shared.config import ConfigurationError

from .base_provider import PreferenceGateway
from .mercadopago_client import MercadoPagoClient
from .mercadopago_provider import MercadoPagoPaymentGateway, MercadoPagoPreferenceGateway

# Registry of available checkout modes
PAYMENT_GATEWAYS = {
    "preference": MercadoPagoPreferenceGateway,
    "payment": MercadoPagoPaymentGateway,
}


def get_payment_gateway(mode: str, client: MercadoPagoClient) -> PreferenceGateway:
    """
    Get a gateway instance for a checkout mode.

    Args:
        mode: Checkout mode (preference, payment)
        client: Authenticated MercadoPago client

    Returns:
        Gateway instance bound to the client

    Raises:
        ConfigurationError: If the mode is not supported
    """
    mode = (mode or "").strip().lower()

    if mode not in PAYMENT_GATEWAYS:
        supported = ", ".join(PAYMENT_GATEWAYS.keys())
        raise ConfigurationError(
            f"Modo de checkout '{mode}' no soportado. Modos disponibles: {supported}"
        )

    gateway_class = PAYMENT_GATEWAYS[mode]
    return gateway_class(client)
