"""
Deterministic customer/order fixture generation.

`populate` wipes both collections, inserts `customer_count` customers with
`orders_per_customer` orders each (one document per insert, sequentially),
then builds the secondary indexes the lookups rely on.
"""

from __future__ import annotations

from datetime import datetime, time, timezone
from typing import Dict, List, Optional, Tuple

from pymongo.errors import PyMongoError

from lookup_bench.domain.models import (
    Customer,
    CustomerRef,
    CustomerStatus,
    Order,
    OrderStatus,
)
from lookup_bench.infrastructure.mongo_store import MongoStore
from lookup_bench.utils.logging import get_logger

log = get_logger(__name__)

INACTIVE_EVERY = 500
DEFAULT_PADDING_COPIES = 3
CUSTOMER_REF_FIELD = "customer._id"

# Evaluated in order; the last divisor that matches wins.
_ORDER_STATUS_RULES: Tuple[Tuple[int, OrderStatus], ...] = (
    (4, OrderStatus.PROCESSING),
    (5, OrderStatus.CANCELLED),
    (6, OrderStatus.DELIVERED),
    (7, OrderStatus.ON_HOLD),
)

CUSTOMER_INDEX_FIELDS = ["_id", "status"]
ORDER_INDEX_FIELDS = CUSTOMER_INDEX_FIELDS + [CUSTOMER_REF_FIELD]


def customer_status(index: int) -> CustomerStatus:
    if index % INACTIVE_EVERY == 0:
        return CustomerStatus.INACTIVE
    return CustomerStatus.ACTIVE


def order_status(position: int) -> OrderStatus:
    status = OrderStatus.SHIPPED
    for divisor, override in _ORDER_STATUS_RULES:
        if position % divisor == 0:
            status = override
    return status


def order_id(customer_index: int, position: int) -> str:
    return f"{customer_index}00{position}"


def _midnight_utc(as_of: Optional[datetime]) -> datetime:
    day = (as_of or datetime.now(timezone.utc)).date()
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def build_customer(index: int, as_of: datetime) -> Customer:
    return Customer(
        _id=str(index),
        status=customer_status(index),
        first_name=f"FirstName{index}",
        last_name=f"LastName{index}",
        phone=f"020 - 000{index}",
        birth_day=as_of,
        referred_by=str(index + 1),
    )


def build_orders(customer_index: int, count: int, as_of: datetime) -> List[Order]:
    ref = CustomerRef(_id=str(customer_index))
    return [
        Order(
            _id=order_id(customer_index, j),
            status=order_status(j),
            customer=ref,
            product_quantity=j,
            order_date=as_of,
        )
        for j in range(1, count + 1)
    ]


def create_indexes(store: MongoStore, collection: str, fields: List[str]) -> List[str]:
    return [store.create_index(collection, field) for field in fields]


def populate(
    store: MongoStore,
    customer_count: int,
    orders_per_customer: int,
    parent_collection: str = "customer",
    child_collection: str = "order",
    padding_copies: int = DEFAULT_PADDING_COPIES,
    as_of: Optional[datetime] = None,
) -> Dict[str, int]:
    """
    Re-seed both collections and index them.

    Parameters
    ----------
    store : MongoStore
        Storage handle; both collections are emptied first, unconditionally.
    customer_count : int
        Number of customers, identities "1" .. str(customer_count).
    orders_per_customer : int
        Orders per customer; may be 0.
    padding_copies : int
        Extra numbered copies of each descriptive attribute (document bulk).
    as_of : datetime, optional
        Day used for every date field; defaults to today (UTC).

    Returns
    -------
    dict
        Counts of inserted customers, orders and created indexes.

    Raises
    ------
    ValueError
        On a non-positive customer count or a negative order/padding count.
    pymongo.errors.PyMongoError
        Any storage failure, logged once here and re-raised unchanged.
    """
    if customer_count < 1:
        raise ValueError(f"customer_count must be >= 1, got {customer_count}")
    if orders_per_customer < 0 or padding_copies < 0:
        raise ValueError("orders_per_customer and padding_copies must be >= 0")

    day = _midnight_utc(as_of)
    orders_inserted = 0
    log.info(
        "[SEED START]",
        extra={
            "customers": customer_count,
            "orders_per_customer": orders_per_customer,
            "padding_copies": padding_copies,
        },
    )
    try:
        store.delete_all(parent_collection)
        store.delete_all(child_collection)

        for i in range(1, customer_count + 1):
            store.insert_one(parent_collection, build_customer(i, day).to_document(padding_copies))
            for order in build_orders(i, orders_per_customer, day):
                store.insert_one(child_collection, order.to_document(padding_copies))
                orders_inserted += 1

        indexes = create_indexes(store, parent_collection, CUSTOMER_INDEX_FIELDS)
        indexes += create_indexes(store, child_collection, ORDER_INDEX_FIELDS)
    except PyMongoError:
        log.exception(
            "[SEED FAILED]",
            extra={"customers_target": customer_count, "orders_inserted": orders_inserted},
        )
        raise

    summary = {"customers": customer_count, "orders": orders_inserted, "indexes": len(indexes)}
    log.info("[SEED COMPLETE]", extra=summary)
    return summary


__all__ = [
    "CUSTOMER_REF_FIELD",
    "build_customer",
    "build_orders",
    "customer_status",
    "order_id",
    "order_status",
    "populate",
]
