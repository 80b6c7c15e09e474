from __future__ import annotations

import sys
from typing import Optional

import click
import typer
from pymongo.errors import PyMongoError

from lookup_bench.config import Settings, get_settings
from lookup_bench.errors import LookupBenchError
from lookup_bench.fixtures import populate
from lookup_bench.infrastructure.mongo_store import MongoStore
from lookup_bench.infrastructure.sink import FileSink
from lookup_bench.orchestrator import run_benchmarks
from lookup_bench.reporter import headline, print_results
from lookup_bench.utils.logging import configure_logging

app = typer.Typer(help="Mongo $lookup benchmark CLI.")


def _effective_settings(
    customers: Optional[int] = None,
    orders: Optional[int] = None,
    padding: Optional[int] = None,
    output_dir: Optional[str] = None,
) -> Settings:
    settings = get_settings()
    overrides = {
        "customer_count": customers,
        "orders_per_customer": orders,
        "padding_copies": padding,
        "output_dir": output_dir,
    }
    return settings.model_copy(update={k: v for k, v in overrides.items() if v is not None})


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.mongo_uri}/{settings.mongo_db} | "
        f"collections={settings.parent_collection}->{settings.child_collection} | "
        f"customers={settings.customer_count} orders/customer={settings.orders_per_customer} "
        f"padding={settings.padding_copies} | page=skip {settings.page_skip} limit {settings.page_limit}"
    )


@app.command()
def seed(
    customers: Optional[int] = typer.Option(None, "--customers", "-c", help="Customers to create."),
    orders: Optional[int] = typer.Option(None, "--orders", "-o", help="Orders per customer."),
    padding: Optional[int] = typer.Option(None, "--padding", "-p", help="Padding copies per document."),
) -> None:
    """
    Wipe and re-seed the customer and order collections only.
    """
    settings = _effective_settings(customers, orders, padding)
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)
    with MongoStore.from_settings(settings) as store:
        summary = populate(
            store,
            customer_count=settings.customer_count,
            orders_per_customer=settings.orders_per_customer,
            parent_collection=settings.parent_collection,
            child_collection=settings.child_collection,
            padding_copies=settings.padding_copies,
        )
    typer.echo(
        f"Seeded {summary['customers']:,} customers and {summary['orders']:,} orders "
        f"({summary['indexes']} indexes)."
    )


@app.command()
def run(
    customers: Optional[int] = typer.Option(None, "--customers", "-c", help="Customers to create."),
    orders: Optional[int] = typer.Option(None, "--orders", "-o", help="Orders per customer."),
    padding: Optional[int] = typer.Option(None, "--padding", "-p", help="Padding copies per document."),
    output_dir: Optional[str] = typer.Option(None, "--output-dir", help="Directory for JSON payloads."),
    no_seed: bool = typer.Option(False, "--no-seed", help="Reuse existing collections."),
    no_pause: bool = typer.Option(False, "--no-pause", help="Exit without waiting for input."),
    table: bool = typer.Option(False, "--table", help="Also print a detailed results table."),
) -> None:
    """
    Seed, run the direct and pipeline lookups, write both payloads.
    """
    settings = _effective_settings(customers, orders, padding, output_dir)
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)

    with MongoStore.from_settings(settings) as store:
        results = run_benchmarks(
            store, settings, FileSink(settings.output_dir), seed=not no_seed
        )

    for i, result in enumerate(results):
        if i:
            typer.echo()
        typer.echo(headline(result))
    if table:
        print_results(results)

    if settings.pause_on_exit and not no_pause:
        typer.echo("Press Enter to exit...")
        sys.stdin.readline()


@app.callback(invoke_without_command=True)
def default(ctx: typer.Context) -> None:
    """
    With no subcommand, behave like `run` with every default.
    """
    if ctx.invoked_subcommand is None:
        run(
            customers=None,
            orders=None,
            padding=None,
            output_dir=None,
            no_seed=False,
            no_pause=False,
            table=False,
        )


def main() -> None:
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


if __name__ == "__main__":
    main()
