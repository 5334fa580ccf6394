"""
Checkout data model.

Plain immutable dataclasses: orders come from the request payload, line items
and requests are derived from them and never written back.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from menucom_shared.services.price_service import (
    calculate_transaction_amount,
    parse_price,
    parse_quantity,
)
from menucom_shared.validation import InvalidOrderError, digits_only


@dataclass(frozen=True)
class Product:
    name: str
    price: Decimal
    quantity: int
    id: str | None = None

    @classmethod
    def from_payload(cls, payload: Any, index: int | None = None) -> Product:
        """Build a Product from a raw mapping, validating price and quantity."""
        if isinstance(payload, Product):
            return payload
        if not isinstance(payload, Mapping):
            raise InvalidOrderError(f"Producto inválido en la posición {(index or 0) + 1}", index)

        name = payload.get("name")
        if not isinstance(name, str) or not name.strip():
            label = "" if index is None else f" para el item {index + 1}"
            raise InvalidOrderError(f"El nombre es requerido{label}", index)

        product_id = payload.get("id")
        if product_id is not None:
            product_id = str(product_id).strip() or None
        return cls(
            name=name.strip(),
            price=parse_price(payload.get("price"), index),
            quantity=parse_quantity(payload.get("quantity"), index),
            id=product_id,
        )


@dataclass(frozen=True)
class Order:
    products: tuple[Product, ...]
    external_reference: str | None = None
    description: str | None = None

    @classmethod
    def from_payload(
        cls,
        products: Sequence[Any] | None,
        external_reference: str | None = None,
        description: str | None = None,
    ) -> Order:
        """
        Build an Order from raw product payloads.

        Raises:
            InvalidOrderError: If there are no products or any product is malformed
        """
        if products is None or isinstance(products, (str, bytes, Mapping)):
            raise InvalidOrderError("La orden debe incluir una lista de productos")
        if len(products) == 0:
            raise InvalidOrderError("Debe proporcionar al menos un producto")

        return cls(
            products=tuple(Product.from_payload(p, i) for i, p in enumerate(products)),
            external_reference=(external_reference or "").strip() or None,
            description=(description or "").strip() or None,
        )


@dataclass(frozen=True)
class Phone:
    number: str
    area_code: str | None = None


@dataclass(frozen=True)
class Payer:
    """Buyer contact data provided by the caller, never derived from products."""

    email: str | None = None
    name: str | None = None
    surname: str | None = None
    phone: Phone | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> Payer | None:
        """Trim every field and drop empties; None when nothing useful is left."""
        if not payload:
            return None

        def clean(key: str) -> str | None:
            value = payload.get(key)
            if not isinstance(value, str):
                return None
            return value.strip() or None

        phone = None
        raw_phone = payload.get("phone")
        if isinstance(raw_phone, Mapping):
            number = digits_only(raw_phone.get("number"))
            if number:
                phone = Phone(number=number[:19], area_code=digits_only(raw_phone.get("area_code")))

        payer = cls(
            email=clean("email"),
            name=clean("name"),
            surname=clean("surname"),
            phone=phone,
        )
        if not any((payer.email, payer.name, payer.surname, payer.phone)):
            return None
        return payer


@dataclass(frozen=True)
class PreferenceLineItem:
    id: str
    title: str
    quantity: int
    currency_id: str
    unit_price: Decimal
    category_id: str | None = None


@dataclass(frozen=True)
class BackUrls:
    success: str
    failure: str
    pending: str


@dataclass(frozen=True)
class PreferenceRequest:
    items: tuple[PreferenceLineItem, ...]
    external_reference: str
    description: str
    payer: Payer | None = None
    excluded_payment_types: tuple[str, ...] = ()
    back_urls: BackUrls | None = None
    notification_url: str | None = None
    statement_descriptor: str | None = None
    payment_method_id: str | None = None

    @property
    def transaction_amount(self) -> Decimal:
        return calculate_transaction_amount(self.items)
