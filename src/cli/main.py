"""Fulfillment CLI. Runs one workflow step against a shipment snapshot.

Usage:
    fulfillment submit shipment.yaml    Send a ready shipment for fulfillment
    fulfillment track shipment.yaml     Poll tracking for a submitted shipment
    fulfillment config show             Show resolved configuration
    fulfillment config validate         Validate a config file

Exit codes: 0 on OK/FOUND/PENDING, 1 on ABORT/PERMANENT_FAILURE or a
config/file error, 2 on invalid shipment data.
"""

import logging
import sys
from typing import Optional

import typer
from pydantic import ValidationError as ConfigValidationError
from rich.console import Console

from src.cli.config import AppConfig, load_config
from src.cli.factory import create_client, create_resolver, create_submitter
from src.cli.output import format_config, format_submit_result, format_tracking_outcome
from src.errors.domain import ValidationError
from src.services.shipment_view import ShipmentSnapshot, load_shipment
from src.services.tracking_resolver import TrackingStatus

app = typer.Typer(
    name="fulfillment",
    help="Warehouse fulfillment adapter: submit shipments and poll tracking",
    no_args_is_help=True,
)
config_app = typer.Typer(help="Configuration management")
app.add_typer(config_app, name="config")

console = Console()

_LOG_FORMATS = {
    "text": "%(levelname)s:%(name)s:%(message)s",
    "verbose": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
}

# --- Global state ---
_config_path: str | None = None


@app.callback()
def main(
    config: Optional[str] = typer.Option(
        None, "--config", help="Path to fulfillment.yaml config file"
    ),
):
    """Fulfillment CLI."""
    global _config_path
    _config_path = config


def configure_logging(cfg: AppConfig) -> None:
    """Send application logs to stderr so --json output stays parseable."""
    logging.basicConfig(
        level=cfg.logging.level.upper(),
        format=_LOG_FORMATS[cfg.logging.format],
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    logging.getLogger("src").setLevel(cfg.logging.level.upper())


def _load(path: str | None) -> AppConfig:
    try:
        cfg = load_config(config_path=path)
    except FileNotFoundError as e:
        console.print(f"[red]Config file not found:[/red] {e}")
        raise typer.Exit(1)
    except ConfigValidationError as e:
        console.print(f"[red]Config validation failed:[/red] {e}")
        raise typer.Exit(1)
    configure_logging(cfg)
    return cfg


def _emit(output: str) -> None:
    """Print pre-rendered output without letting Rich re-wrap JSON."""
    typer.echo(output.rstrip("\n"))


def _load_shipment(path: str) -> ShipmentSnapshot:
    try:
        return load_shipment(path)
    except FileNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    except (KeyError, TypeError, ValueError) as e:
        console.print(f"[red]Invalid shipment file ({type(e).__name__}):[/red] {e}")
        raise typer.Exit(1)


# --- Version ---


@app.command()
def version():
    """Show version."""
    from importlib.metadata import PackageNotFoundError
    from importlib.metadata import version as pkg_version
    try:
        v = pkg_version("fulfillment-adapter")
    except PackageNotFoundError:
        v = "unknown"
    console.print(f"[bold]Fulfillment adapter[/bold] v{v}")


# --- Workflow commands ---


@app.command()
def submit(
    shipment_file: str = typer.Argument(help="Shipment snapshot (YAML or JSON)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Submit a ready shipment to the fulfillment service."""
    cfg = _load(_config_path)
    shipment = _load_shipment(shipment_file)

    with create_client(cfg) as client:
        submitter = create_submitter(cfg, client)
        try:
            result = submitter.submit(shipment)
        except ValidationError as e:
            console.print(f"[red]Invalid shipment data ({e.code}):[/red] {e}")
            raise typer.Exit(2)

    _emit(format_submit_result(shipment.number, result, as_json=json_output))
    if result.aborted:
        raise typer.Exit(1)


@app.command()
def track(
    shipment_file: str = typer.Argument(help="Shipment snapshot (YAML or JSON)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Fetch tracking for a submitted shipment."""
    cfg = _load(_config_path)
    shipment = _load_shipment(shipment_file)

    with create_client(cfg) as client:
        outcome = create_resolver(cfg, client).resolve(shipment)

    _emit(format_tracking_outcome(shipment.number, outcome, as_json=json_output))
    if outcome.status is TrackingStatus.PERMANENT_FAILURE:
        raise typer.Exit(1)


# --- Config commands ---


@config_app.command("show")
def config_show():
    """Display resolved configuration (secrets masked)."""
    cfg = _load(_config_path)
    console.print(format_config(cfg))


@config_app.command("validate")
def config_validate(
    config: Optional[str] = typer.Option(None, "--config", help="Config file path"),
):
    """Validate a config file."""
    cfg = _load(config or _config_path)
    console.print("[green]Config is valid.[/green]")
    cap = cfg.fulfillment.max_quantity_failsafe
    console.print(f"  Quantity failsafe: {cap if cap else 'no cap'}")
    console.print(f"  Development mode: {'enabled' if cfg.fulfillment.development_mode else 'disabled'}")


if __name__ == "__main__":
    app()
