"""
Fixture seeding script for the Mongo lookup benchmark.

Wipes and re-seeds the customer/order collections without running the
benchmarks, so the data can be inspected or reused with `run --no-seed`.
"""

from __future__ import annotations

import sys
import time
from datetime import datetime
from typing import Optional

import click
import typer
from pymongo.errors import PyMongoError

from lookup_bench.config import get_settings
from lookup_bench.errors import LookupBenchError
from lookup_bench.fixtures import populate
from lookup_bench.infrastructure.mongo_store import MongoStore
from lookup_bench.utils.logging import configure_logging

app = typer.Typer(help="Seed MongoDB with deterministic customer/order fixtures.")


@app.command()
def main(
    customers: int = typer.Option(
        6000,
        "--customers",
        "-c",
        help="Number of customers to generate.",
    ),
    orders: int = typer.Option(
        7,
        "--orders",
        "-o",
        help="Orders per customer.",
    ),
    padding: int = typer.Option(
        3,
        "--padding",
        "-p",
        help="Numbered copies of each descriptive attribute.",
    ),
    as_of: Optional[datetime] = typer.Option(
        None,
        "--as-of",
        help="Day stamped on every date field (default: today, UTC).",
    ),
    uri: Optional[str] = typer.Option(
        None,
        "--uri",
        help="Optional MongoDB URI override.",
    ),
) -> None:
    """
    Generate fixtures and insert them one document at a time.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)

    start = time.perf_counter()
    typer.echo(
        f"Seeding {customers:,} customers x {orders} orders "
        f"into {settings.mongo_db} (padding={padding})"
    )
    store = MongoStore.connect(uri or settings.mongo_uri, settings.mongo_db, settings.mongo_timeout_ms)
    with store:
        summary = populate(
            store,
            customer_count=customers,
            orders_per_customer=orders,
            parent_collection=settings.parent_collection,
            child_collection=settings.child_collection,
            padding_copies=padding,
            as_of=as_of,
        )
    duration = time.perf_counter() - start
    total = summary["customers"] + summary["orders"]
    typer.echo(
        f"Seed completed in {duration:.2f}s ({total / duration:,.0f} docs/s, "
        f"{summary['indexes']} indexes)."
    )


if __name__ == "__main__":
    try:
        app(standalone_mode=False)
    except click.exceptions.Abort:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
    except click.ClickException as exc:
        exc.show()
        sys.exit(exc.exit_code)
    except (LookupBenchError, PyMongoError, ValueError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        sys.exit(1)
