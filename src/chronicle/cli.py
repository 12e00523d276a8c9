# src/chronicle/cli.py
"""chronicle Command Line Interface.

Entry point for the chronicle CLI tool.

Exit codes:
    0: Success
    1: Store failure, malformed stored data, or missing settings file
    2: Invalid query (fix the request, do not retry)
"""

import json
from pathlib import Path
from typing import Any, NoReturn

import typer
from pydantic import ValidationError

from chronicle import __version__
from chronicle.contracts import (
    CompareOp,
    DataToRetrieve,
    EntityFilters,
    Field,
    FilterList,
    FilterOperator,
    MalformedRowError,
    PrefixFilter,
    QueryContext,
    QueryValidationError,
    StoreError,
)
from chronicle.contracts.query import MAX_TIMESTAMP
from chronicle.core.config import ChronicleSettings, load_settings
from chronicle.core.logging import configure_logging
from chronicle.flow.writer import FlowRunWriter
from chronicle.reader.flow_run import FlowRunEntityReader
from chronicle.store.database import CellStore

app = typer.Typer(
    name="chronicle",
    help="chronicle: flow run reads over a wide-column timeline store.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"chronicle version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """chronicle: flow run reads over a wide-column timeline store."""
    pass


# === Option helpers ===

SettingsOption = typer.Option(
    None,
    "--settings",
    "-s",
    help="Path to settings YAML file (defaults apply when omitted).",
)


def _load(settings: str | None) -> ChronicleSettings:
    """Load settings and configure logging, exiting on bad config."""
    if settings is None:
        config = ChronicleSettings()
    else:
        try:
            config = load_settings(Path(settings))
        except FileNotFoundError:
            typer.echo(f"Error: Settings file not found: {settings}", err=True)
            raise typer.Exit(1) from None
        except ValidationError as e:
            typer.echo("Configuration errors:", err=True)
            for error in e.errors():
                loc = ".".join(str(x) for x in error["loc"])
                typer.echo(f"  - {loc}: {error['msg']}", err=True)
            raise typer.Exit(1) from None
    configure_logging(config.logging.level, json_output=config.logging.json_output)
    return config


def _metric_selector(metrics: str | None) -> FilterList | None:
    """Turn "CPU,MAP_" into an OR of metric name prefixes."""
    if not metrics:
        return None
    names = [name.strip() for name in metrics.split(",") if name.strip()]
    return FilterList(
        FilterOperator.OR,
        tuple(PrefixFilter(CompareOp.EQUAL, name) for name in names),
    )


def _fields(fields: str | None) -> frozenset[Field]:
    if not fields:
        return frozenset()
    try:
        return frozenset(Field(name.strip().lower()) for name in fields.split(","))
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--fields") from None


def _build_reader(
    config: ChronicleSettings,
    context: QueryContext,
    *,
    fields: str | None = None,
    metrics: str | None = None,
    filters: EntityFilters | None = None,
) -> FlowRunEntityReader:
    return FlowRunEntityReader(
        context,
        DataToRetrieve(
            fields_to_retrieve=_fields(fields),
            metrics_to_retrieve=_metric_selector(metrics),
        ),
        filters,
        default_limit=config.reader.default_limit,
    )


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, sort_keys=True))


def _fail(error: Exception) -> NoReturn:
    """Print a read error and exit with the code for its kind."""
    if isinstance(error, QueryValidationError):
        typer.echo(f"Invalid query: {error}", err=True)
        raise typer.Exit(2) from None
    if isinstance(error, MalformedRowError):
        typer.echo(f"Malformed stored row: {error}", err=True)
        raise typer.Exit(1) from None
    typer.echo(f"Store error: {error}", err=True)
    raise typer.Exit(1) from None


# === Commands ===


@app.command("get-run")
def get_run(
    cluster: str = typer.Option(..., "--cluster", "-c", help="Cluster id."),
    user: str = typer.Option(..., "--user", "-u", help="User id."),
    flow: str = typer.Option(..., "--flow", "-f", help="Flow name."),
    run: int = typer.Option(..., "--run", "-r", help="Flow run id."),
    metrics: str | None = typer.Option(
        None, "--metrics", "-m", help="Comma-separated metric name prefixes."
    ),
    settings: str | None = SettingsOption,
) -> None:
    """Read one flow run, including its metrics."""
    config = _load(settings)
    reader = _build_reader(
        config, QueryContext(cluster, user, flow, flow_run_id=run), metrics=metrics
    )
    try:
        with CellStore(config.store.url, echo=config.store.echo) as store:
            flow_run = reader.read_entity(store)
    except (QueryValidationError, MalformedRowError, StoreError) as e:
        _fail(e)
    if flow_run is None:
        typer.echo(f"Flow run not found: {user}@{flow}/{run}", err=True)
        raise typer.Exit(1)
    _echo_json(flow_run.to_dict())


@app.command("list-runs")
def list_runs(
    cluster: str = typer.Option(..., "--cluster", "-c", help="Cluster id."),
    user: str = typer.Option(..., "--user", "-u", help="User id."),
    flow: str = typer.Option(..., "--flow", "-f", help="Flow name."),
    limit: int | None = typer.Option(
        None, "--limit", "-n", min=1, help="Maximum runs to return."
    ),
    fields: str | None = typer.Option(
        None, "--fields", help="Comma-separated fields to retrieve (e.g. metrics)."
    ),
    metrics: str | None = typer.Option(
        None, "--metrics", "-m", help="Comma-separated metric name prefixes."
    ),
    created_begin: int = typer.Option(
        0, "--created-begin", min=0, help="Earliest run start time (inclusive)."
    ),
    created_end: int = typer.Option(
        MAX_TIMESTAMP, "--created-end", min=0, help="Latest run start time (inclusive)."
    ),
    settings: str | None = SettingsOption,
) -> None:
    """List runs of a flow, newest first."""
    config = _load(settings)
    try:
        filters = EntityFilters(
            created_time_begin=created_begin,
            created_time_end=created_end,
            limit=limit,
        )
    except ValueError as e:
        raise typer.BadParameter(str(e)) from None
    reader = _build_reader(
        config,
        QueryContext(cluster, user, flow),
        fields=fields,
        metrics=metrics,
        filters=filters,
    )
    try:
        with CellStore(config.store.url, echo=config.store.echo) as store:
            flow_runs = reader.read_entities(store)
    except (QueryValidationError, MalformedRowError, StoreError) as e:
        _fail(e)
    _echo_json([flow_run.to_dict() for flow_run in flow_runs])


@app.command()
def explain(
    cluster: str = typer.Option(..., "--cluster", "-c", help="Cluster id."),
    user: str = typer.Option(..., "--user", "-u", help="User id."),
    flow: str = typer.Option(..., "--flow", "-f", help="Flow name."),
    run: int | None = typer.Option(
        None, "--run", "-r", help="Flow run id (omit for a range read)."
    ),
    limit: int | None = typer.Option(None, "--limit", "-n", min=1),
    fields: str | None = typer.Option(None, "--fields"),
    metrics: str | None = typer.Option(None, "--metrics", "-m"),
    settings: str | None = SettingsOption,
) -> None:
    """Show the store call a query would make, without touching the store."""
    config = _load(settings)
    reader = _build_reader(
        config,
        QueryContext(cluster, user, flow, flow_run_id=run),
        fields=fields,
        metrics=metrics,
        filters=EntityFilters(limit=limit),
    )
    try:
        target = reader.plan()
    except QueryValidationError as e:
        _fail(e)
    _echo_json(target.to_dict())


@app.command()
def seed(
    file: Path = typer.Option(
        ...,
        "--file",
        "-i",
        exists=True,
        dir_okay=False,
        help="JSON file of flow runs to write.",
    ),
    settings: str | None = SettingsOption,
) -> None:
    """Write flow runs from a JSON file into the store."""
    config = _load(settings)
    try:
        with CellStore(config.store.url, echo=config.store.echo) as store:
            count = FlowRunWriter(store).load_file(file)
    except StoreError as e:
        _fail(e)
    except (KeyError, ValueError) as e:
        typer.echo(f"Invalid seed file {file}: {e}", err=True)
        raise typer.Exit(2) from None
    typer.echo(f"Wrote {count} flow runs to {config.store.url}")


if __name__ == "__main__":
    app()
