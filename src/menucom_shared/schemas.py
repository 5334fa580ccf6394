"""
Pydantic schemas for request/response validation.
"""

from typing import Any

from pydantic import BaseModel, EmailStr, Field, validator


class PhoneRequest(BaseModel):
    area_code: str | None = None
    number: str | None = None


class PayerRequest(BaseModel):
    email: EmailStr | None = None
    name: str | None = Field(None, max_length=120)
    surname: str | None = Field(None, max_length=120)
    phone: PhoneRequest | None = None

    @validator("email", pre=True)
    def normalize_email(cls, v):
        """Blank emails are treated as absent; others are lowercased."""
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v


class ProductRequest(BaseModel):
    # Price and quantity are parsed by the order model so malformed values
    # surface as InvalidOrderError instead of a schema error.
    id: str | None = None
    name: str = Field(..., min_length=1, max_length=256)
    price: Any = None
    quantity: Any = None


class CreatePreferenceRequest(BaseModel):
    products: list[ProductRequest]
    payer: PayerRequest | None = None
    external_reference: str | None = Field(None, max_length=256)
    description: str | None = Field(None, max_length=256)
    payment_method_id: str | None = None
