"""
Price calculation service for checkout line items.

MercadoPago charges the restaurant a commission on every sale; the menu price
is marked up by a configured surcharge rate so the restaurant receives the
full menu price. All amounts are Decimal and rounded to cents with
ROUND_HALF_UP.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Protocol

from menucom_shared.validation import InvalidOrderError

CENTS = Decimal("0.01")
MAX_PRICE = Decimal("999999999999.99")


class PricedItem(Protocol):
    unit_price: Decimal
    quantity: int


def quantize_money(amount: Decimal) -> Decimal:
    return amount.quantize(CENTS, ROUND_HALF_UP)


def parse_price(value, index: int | None = None) -> Decimal:
    """
    Parse a product price into a non-negative Decimal.

    Accepts ints, Decimals, floats and numeric strings. Booleans, NaN,
    infinities, blank or non-numeric strings, negative amounts and amounts
    above MAX_PRICE raise InvalidOrderError.
    """
    label = _item_label(index)
    if value is None or isinstance(value, bool):
        raise InvalidOrderError(f"El precio es requerido{label}", index)

    try:
        price = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidOrderError(f"Precio inválido{label}: {value!r}", index)

    if not price.is_finite():
        raise InvalidOrderError(f"Precio inválido{label}: {value!r}", index)
    if price < 0:
        raise InvalidOrderError(f"El precio no puede ser negativo{label}", index)
    if price > MAX_PRICE:
        raise InvalidOrderError(f"El precio excede el máximo permitido{label}", index)
    return price


def parse_quantity(value, index: int | None = None) -> int:
    """Parse a product quantity into a positive integer."""
    label = _item_label(index)
    if value is None or isinstance(value, bool):
        raise InvalidOrderError(f"La cantidad es requerida{label}", index)

    if isinstance(value, int):
        quantity = value
    elif isinstance(value, str) and value.strip().isdigit():
        quantity = int(value.strip())
    elif isinstance(value, float) and value.is_integer():
        quantity = int(value)
    elif isinstance(value, Decimal) and value.is_finite() and value == value.to_integral_value():
        quantity = int(value)
    else:
        raise InvalidOrderError(f"Cantidad inválida{label}: {value!r}", index)

    if quantity <= 0:
        raise InvalidOrderError(f"La cantidad debe ser mayor a 0{label}", index)
    return quantity


def calculate_surcharge_breakdown(price: Decimal, surcharge_rate: Decimal) -> dict[str, Decimal]:
    """
    Calculate the unit price charged through MercadoPago.

    Args:
        price: Menu price of the product
        surcharge_rate: Fraction added on top (e.g., 0.0992 for 9.92%)

    Returns:
        Dictionary with:
            - price_base: Menu price
            - surcharge_amount: Markup rounded to cents
            - unit_price: What the customer pays per unit

    Example:
        price=100, surcharge_rate=0.0992:
            price_base = 100
            surcharge_amount = 9.92
            unit_price = 109.92
    """
    price = Decimal(str(price))
    surcharge_rate = Decimal(str(surcharge_rate))

    try:
        unit_price = quantize_money(price + price * surcharge_rate)
        surcharge_amount = unit_price - quantize_money(price)
    except InvalidOperation:
        raise InvalidOrderError(f"No se pudo calcular el precio unitario para {price}")

    if unit_price < 0:
        raise InvalidOrderError("El precio unitario no puede ser negativo")

    return {
        "price_base": price,
        "surcharge_amount": surcharge_amount,
        "unit_price": unit_price,
    }


def calculate_transaction_amount(items: Iterable[PricedItem]) -> Decimal:
    """Total to charge: sum of unit_price * quantity, rounded to cents."""
    total = sum((item.unit_price * item.quantity for item in items), Decimal("0"))
    try:
        return quantize_money(total)
    except InvalidOperation:
        raise InvalidOrderError("El total de la orden excede el máximo permitido")


def _item_label(index: int | None) -> str:
    return "" if index is None else f" para el item {index + 1}"
