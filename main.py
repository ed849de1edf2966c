"""CLI entry point for DMN decision execution."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from config import configure_logging, get_settings
from decision_engine.coercion import decode_inputs, decode_value
from decision_engine.handler import RequestHandler
from engines import EngineError
from engines.pydmnrules_engine import read_decision_catalog
from lambda_function import lambda_handler
from models.schemas import DmnRequest


console = Console()


def _parse_input_option(option: str) -> tuple[str, Any]:
    """Split a ``name=value`` option; the value is read as JSON when it parses."""
    name, sep, value = option.partition("=")
    if not sep or not name.strip():
        raise click.BadParameter(f"expected name=value, got '{option}'", param_hint="--input")
    return name.strip(), decode_value(value)


def _load_inputs(inputs_file: Path | None, options: tuple[str, ...]) -> dict[str, Any] | None:
    inputs: dict[str, Any] = {}

    if inputs_file is not None:
        try:
            inputs.update(decode_inputs(inputs_file.read_text()))
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--inputs-file") from e

    for option in options:
        name, value = _parse_input_option(option)
        inputs[name] = value

    return inputs or None


def _print_outputs(outputs: dict[str, Any]) -> None:
    table = Table(title="Outputs")
    table.add_column("Name", style="cyan")
    table.add_column("Value")
    table.add_column("Type", style="dim")

    for name, value in outputs.items():
        table.add_row(name, str(value), type(value).__name__)

    console.print(table)


@click.group()
@click.version_option(version="1.0.0")
@click.option("--log-level", default=None, help="Override LOG_LEVEL")
def cli(log_level: str | None) -> None:
    """DMN Engine - Execute decisions from DMN XML documents."""
    configure_logging((log_level or get_settings().log_level).upper(), rich_output=True)


@cli.command()
@click.argument("dmn_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("decision_name")
@click.option("--input", "-i", "input_options", multiple=True, help="Input value as name=value")
@click.option(
    "--inputs-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON file with an object of input values",
)
@click.option("--json", "as_json", is_flag=True, help="Print the raw response envelope")
def evaluate(
    dmn_file: Path,
    decision_name: str,
    input_options: tuple[str, ...],
    inputs_file: Path | None,
    as_json: bool,
) -> None:
    """Execute DECISION_NAME from DMN_FILE."""
    request = DmnRequest(
        dmn_xml=dmn_file.read_text(),
        decision_name=decision_name,
        inputs=_load_inputs(inputs_file, input_options),
    )
    response = RequestHandler().handle(request)

    if as_json:
        console.print_json(json.dumps(response.to_payload(), default=str))
    elif response.success:
        console.print(Panel(f"[bold]Decision:[/bold] {decision_name}", title="DMN Engine"))
        _print_outputs(response.outputs or {})
    else:
        console.print(f"[red]Error: {response.error}[/red]")

    if not response.success:
        sys.exit(1)


@cli.command()
@click.argument("dmn_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def decisions(dmn_file: Path) -> None:
    """List the decisions declared in DMN_FILE."""
    try:
        model = read_decision_catalog(dmn_file.read_text())
    except EngineError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    table = Table(title=f"Decisions ({model.namespace or 'no namespace'})")
    table.add_column("Id", style="cyan")
    table.add_column("Name")
    table.add_column("Decision Table")

    for decision in model.decisions:
        table.add_row(
            decision.id,
            decision.name,
            decision.table_label or decision.table_id or "-",
        )

    console.print(table)


@cli.command()
@click.argument("event_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def invoke(event_file: Path) -> None:
    """Run the Lambda handler locally with the event in EVENT_FILE."""
    try:
        event = json.loads(event_file.read_text())
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"invalid JSON: {e}", param_hint="EVENT_FILE") from e
    result = lambda_handler(event, None)
    console.print_json(json.dumps(result, default=str))


if __name__ == "__main__":
    cli()
