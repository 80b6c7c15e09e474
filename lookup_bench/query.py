"""
Builders for the filter, sort, page and collation shared by both lookups.
"""

from __future__ import annotations

from typing import Any, Dict, Tuple

from pymongo import ASCENDING
from pymongo.collation import Collation

from lookup_bench.domain.models import CustomerStatus, QuerySpec

DEFAULT_SKIP = 0
DEFAULT_LIMIT = 20
DEFAULT_LOCALE = "en"


def build_filter() -> Dict[str, Any]:
    return {"status": CustomerStatus.ACTIVE.value}


def build_sort() -> Tuple[Tuple[str, int], ...]:
    return (("_id", ASCENDING),)


def build_collation(locale: str = DEFAULT_LOCALE) -> Collation:
    """Collation comparing digit runs by value, so "2" < "10"."""
    return Collation(locale=locale, numericOrdering=True)


def build_query(
    skip: int = DEFAULT_SKIP, limit: int = DEFAULT_LIMIT, locale: str = DEFAULT_LOCALE
) -> QuerySpec:
    """Active customers, ascending by `_id`, one page. Bounds are validated by `QuerySpec`."""
    return QuerySpec(
        filter=tuple(build_filter().items()),
        sort=build_sort(),
        skip=skip,
        limit=limit,
        collation_locale=locale,
    )


__all__ = ["build_collation", "build_filter", "build_query", "build_sort"]
