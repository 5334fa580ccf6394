"""
Checkout preference creation.

Turns an Order into a MercadoPago checkout request and submits it through a
PreferenceGateway. Validation and pricing happen entirely before the gateway
is touched, so a bad order never reaches the provider.
"""

from __future__ import annotations

import re
import uuid

from menucom_shared.config import AppConfig
from menucom_shared.logging_config import LoggerAdapter, get_logger
from menucom_shared.models import (
    BackUrls,
    Order,
    Payer,
    PreferenceLineItem,
    PreferenceRequest,
)
from menucom_shared.services.payment_providers import (
    PaymentProviderError,
    PreferenceGateway,
    PreferenceResult,
)
from menucom_shared.services.price_service import calculate_surcharge_breakdown
from menucom_shared.validation import InvalidOrderError

logger = get_logger(__name__)

STATEMENT_DESCRIPTOR_MAX_LENGTH = 22


def format_statement_descriptor(value: str | None) -> str | None:
    """
    Format the card statement descriptor the way MercadoPago accepts it:
    letters, digits, spaces and `.,_-` only, at most 22 characters.
    """
    cleaned = re.sub(r"[^A-Za-z0-9 .,_-]", "", (value or "").strip()).strip()
    if not cleaned:
        return None
    return cleaned[:STATEMENT_DESCRIPTOR_MAX_LENGTH]


def build_back_urls(base_url: str, checkout_path: str) -> BackUrls | None:
    if not base_url:
        return None
    base = f"{base_url.rstrip('/')}{checkout_path}"
    return BackUrls(
        success=f"{base}?status=success",
        failure=f"{base}?status=failure",
        pending=f"{base}?status=pending",
    )


def build_line_items(order: Order, config: AppConfig) -> tuple[PreferenceLineItem, ...]:
    """One line item per product, unit price marked up by the surcharge rate."""
    items = []
    for product in order.products:
        breakdown = calculate_surcharge_breakdown(product.price, config.mp_surcharge_rate)
        items.append(
            PreferenceLineItem(
                id=product.id or str(uuid.uuid4()),
                title=product.name,
                quantity=product.quantity,
                currency_id=config.mp_currency_id,
                unit_price=breakdown["unit_price"],
                category_id=config.mp_item_category_id or None,
            )
        )
    return tuple(items)


def build_preference_request(
    order: Order,
    config: AppConfig,
    payer: Payer | None = None,
    payment_method_id: str | None = None,
) -> PreferenceRequest:
    """
    Assemble the provider request for an order.

    Raises:
        InvalidOrderError: If the order has no products
    """
    if not order.products:
        raise InvalidOrderError("Debe proporcionar al menos un producto")

    items = build_line_items(order, config)
    description = order.description or ", ".join(item.title for item in items)

    return PreferenceRequest(
        items=items,
        external_reference=order.external_reference or str(uuid.uuid4()),
        description=description[:256],
        payer=payer,
        excluded_payment_types=config.mp_excluded_payment_types,
        back_urls=build_back_urls(config.mp_back_url, config.mp_checkout_path),
        notification_url=config.mp_notification_url or None,
        statement_descriptor=format_statement_descriptor(config.mp_statement_descriptor),
        payment_method_id=(payment_method_id or "").strip() or None,
    )


class PreferenceService:
    """Creates checkout preferences; safe to share across concurrent requests."""

    def __init__(self, config: AppConfig, gateway: PreferenceGateway):
        self.config = config
        self.gateway = gateway

    def create_preference(
        self,
        order: Order,
        payer: Payer | None = None,
        payment_method_id: str | None = None,
    ) -> PreferenceResult:
        """
        Create a checkout preference for an order.

        Args:
            order: Validated order (see Order.from_payload)
            payer: Buyer contact data from the caller context
            payment_method_id: Required only by the direct payment gateway

        Returns:
            PreferenceResult with the provider-issued identifier

        Raises:
            InvalidOrderError: If the order is malformed; the gateway is not called
            PaymentProviderError: If the provider call fails
        """
        try:
            request = build_preference_request(order, self.config, payer, payment_method_id)
        except InvalidOrderError as e:
            logger.warning(f"Invalid order rejected before checkout: {e}")
            raise

        log = LoggerAdapter(logger, {"external_reference": request.external_reference})
        log.info(
            f"Creating {self.gateway.name} checkout with {len(request.items)} items, "
            f"total={request.transaction_amount} {self.config.mp_currency_id}"
        )

        try:
            result = self.gateway.create(request)
        except (InvalidOrderError, PaymentProviderError) as e:
            log.error(f"Checkout creation failed: {e}")
            raise
        except Exception as e:
            log.error(f"Unexpected error creating checkout: {e}", exc_info=True)
            raise PaymentProviderError(f"Error creando preferencia en MercadoPago: {e!s}")

        log.info(f"Checkout created with ID: {result.id}")
        return result
