"""
Domain package for the Mongo lookup benchmark.

Exports the document models and the query description used by the fixture
generator, the strategies and the runner.
"""

from lookup_bench.domain.models import (
    Customer,
    CustomerRef,
    CustomerStatus,
    Order,
    OrderStatus,
    QuerySpec,
)

__all__ = [
    "Customer",
    "CustomerRef",
    "CustomerStatus",
    "Order",
    "OrderStatus",
    "QuerySpec",
]
