"""
Domain models for the Mongo lookup benchmark.

Defines the customer (parent) and order (child) document shapes seeded into
MongoDB, their closed status enumerations, and the immutable query
description shared by both lookup strategies.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Tuple

from pydantic import BaseModel, Field


class CustomerStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "InActive"


class OrderStatus(str, Enum):
    SHIPPED = "Shipped"
    PROCESSING = "Processing"
    CANCELLED = "Cancelled"
    DELIVERED = "Delivered"
    ON_HOLD = "OnHold"


def _with_padding(
    document: Dict[str, Any], padded_fields: Iterable[str], copies: int
) -> Dict[str, Any]:
    """Append `copies` numbered duplicates of each padded field (`city_1`, `city_2`, ...)."""
    padded_fields = tuple(padded_fields)
    for n in range(1, copies + 1):
        for name in padded_fields:
            document[f"{name}_{n}"] = document[name]
    return document


class Customer(BaseModel):
    """
    A parent document in the customer collection.
    """

    id: str = Field(..., alias="_id", description="Identity; the decimal index as text.")
    status: CustomerStatus = Field(CustomerStatus.ACTIVE)
    first_name: str
    last_name: str
    phone: str
    address: str = "Primary Address"
    alternate_address: str = "Primary Address"
    age: int = 30
    city: str = "London"
    postcode: str = "TW3"
    birth_day: datetime
    email_address: str = "abc'xyz.com"
    loyalty_discount: int = 5
    credit_limit: int = 200_000
    shopping_mode: str = "Online"
    shopping_frequency: str = "Monthly"
    shopping_interests: str = "Household"
    referred_by: str

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "use_enum_values": True,
        "validate_default": True,
    }

    def to_document(self, padding_copies: int = 0) -> Dict[str, Any]:
        """Dump to a BSON-ready dict, padded with `padding_copies` attribute duplicates."""
        document = self.model_dump(by_alias=True)
        descriptive = [name for name in document if name not in ("_id", "status")]
        return _with_padding(document, descriptive, padding_copies)


class CustomerRef(BaseModel):
    """Back-reference embedded in every order."""

    id: str = Field(..., alias="_id")

    model_config = {"frozen": True, "populate_by_name": True}


class Order(BaseModel):
    """
    A child document in the order collection, owned by exactly one customer.
    """

    id: str = Field(..., alias="_id")
    status: OrderStatus = Field(OrderStatus.SHIPPED)
    customer: CustomerRef
    product_quantity: int
    delivery_notes: str = "Deliver on weekend"
    order_date: datetime
    is_fragile: bool = False
    is_gift: bool = False
    is_refundable: bool = True
    in_stock: bool = True
    amount: int = 500
    discount: int = 10
    payment_mode: str = "CreditCard"
    card_no: int = 12345678
    bank: str = "HSBC"
    card_type: str = "VISA"

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "use_enum_values": True,
        "validate_default": True,
    }

    def to_document(self, padding_copies: int = 0) -> Dict[str, Any]:
        document = self.model_dump(by_alias=True)
        descriptive = [name for name in document if name not in ("_id", "status", "customer")]
        return _with_padding(document, descriptive, padding_copies)


class QuerySpec(BaseModel):
    """
    Filter, sort and page applied to the parent collection before the join.

    `filter` and `sort` are stored as tuples of pairs so the frozen model
    cannot be mutated through them. `collation_locale` is always paired with
    numeric ordering, so `_id` values such as "2" and "10" compare by number
    rather than by character.
    """

    filter: Tuple[Tuple[str, Any], ...]
    sort: Tuple[Tuple[str, int], ...]
    skip: int = Field(0, ge=0)
    limit: int = Field(20, gt=0)
    collation_locale: str = Field("en", min_length=1)

    model_config = {"frozen": True}

    def stages(self) -> list[Mapping[str, Any]]:
        """Pipeline prefix: match, sort, skip, limit (in that order)."""
        return [
            {"$match": dict(self.filter)},
            {"$sort": dict(self.sort)},
            {"$skip": self.skip},
            {"$limit": self.limit},
        ]


__all__ = [
    "Customer",
    "CustomerRef",
    "CustomerStatus",
    "Order",
    "OrderStatus",
    "QuerySpec",
]
