# sales_tracker/cli.py
import json
from contextlib import contextmanager

import click
from dotenv import load_dotenv

from sales_tracker.config import configure_logging, load_config
from sales_tracker.core.months import resolve_month
from sales_tracker.database import SQLiteTransactionStore
from sales_tracker.errors import InvalidMonth, SalesTrackerError
from sales_tracker.report import combined_report
from sales_tracker.seed import seed_if_empty
from sales_tracker.selection import search_month


def _validate_month(ctx, param, value):
    try:
        resolve_month(value)
    except InvalidMonth as exc:
        raise click.BadParameter(f"'{value}' is not a full English month name, e.g. 'March'") from exc
    return value


@contextmanager
def _open_store(cfg):
    try:
        with SQLiteTransactionStore(str(cfg['db_path'])) as store:
            yield store
    except SalesTrackerError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.option(
    '--config', 'config_path',
    default=None,
    type=click.Path(dir_okay=False),
    help='Path to config.yaml (built-in defaults are used when it is missing)'
)
@click.option(
    '--env-file', 'env_file',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Optional .env file with SALESBOARD_* overrides'
)
@click.option(
    '--db', 'db_path',
    default=None,
    type=click.Path(dir_okay=False),
    help='SQLite database file (overrides config)'
)
@click.pass_context
def main(ctx, config_path, env_file, db_path):
    """
    Seed a product transaction catalog into SQLite and serve month-scoped
    sales statistics over it.
    """
    if env_file:
        load_dotenv(env_file)
    cfg = load_config(config_path)
    if db_path:
        cfg['db_path'] = db_path
    configure_logging(str(cfg['log_level']))
    ctx.obj = cfg


@main.command()
@click.option('--host', default=None, help='Host to bind (default from config)')
@click.option('--port', default=None, type=int, help='Port to bind (default from config)')
@click.pass_obj
def serve(cfg, host, port):
    """Run the HTTP API."""
    import uvicorn

    from sales_tracker.api import create_app

    uvicorn.run(
        create_app(cfg),
        host=host or str(cfg['host']),
        port=port or int(cfg['port']),
        log_level=str(cfg['log_level']).lower(),
    )


@main.command()
@click.pass_obj
def seed(cfg):
    """Load the remote catalog if the store is empty."""
    with _open_store(cfg) as store:
        inserted = seed_if_empty(store, str(cfg['seed_url']), float(cfg['seed_timeout']))
        stored = store.count()
    if inserted:
        click.echo(f"Seeded {inserted} transaction(s) into {cfg['db_path']}.")
    elif not stored:
        click.echo(f"Seed source returned no transactions; {cfg['db_path']} is still empty.")
    else:
        click.echo(f"Nothing to seed; {cfg['db_path']} already has data.")


@main.command()
@click.argument('month', callback=_validate_month)
@click.pass_obj
def report(cfg, month):
    """Print the combined statistics for MONTH as JSON."""
    with _open_store(cfg) as store:
        payload = combined_report(store, month)
    click.echo(json.dumps(payload, indent=2))


@main.command()
@click.argument('month', callback=_validate_month)
@click.argument('query', required=False, default=None)
@click.pass_obj
def search(cfg, month, query):
    """Print MONTH's transactions matching QUERY (title, description or price)."""
    with _open_store(cfg) as store:
        records = search_month(store, month, query)
    click.echo(json.dumps([r.detail() for r in records], indent=2))
