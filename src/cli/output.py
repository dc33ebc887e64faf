"""CLI output formatters for Rich panels and JSON.

Provides human-readable Rich output (default) and machine-parseable JSON
output (--json flag) for workflow step results.
"""

import json

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from src.cli.config import AppConfig
from src.errors.registry import get_error
from src.services.fulfillment_submitter import SubmitOutcome, SubmitResult
from src.services.tracking_resolver import TrackingOutcome, TrackingStatus

console = Console()

OUTCOME_COLORS = {
    SubmitOutcome.OK: "green",
    SubmitOutcome.ABORT: "red",
    TrackingStatus.FOUND: "green",
    TrackingStatus.PENDING: "yellow",
    TrackingStatus.PERMANENT_FAILURE: "red",
}

_MASK = "********"


def _render(renderable) -> str:
    with console.capture() as capture:
        console.print(renderable)
    return capture.get()


def format_submit_result(number: str, result: SubmitResult, as_json: bool = False) -> str:
    """Format a submit step result as a Rich panel or JSON.

    Args:
        number: Shipment number.
        result: Submit step result.
        as_json: If True, return JSON string instead of Rich panel.

    Returns:
        Formatted string output.
    """
    error = get_error(result.code) if result.code else None
    if as_json:
        return json.dumps({
            "shipment": number,
            "outcome": result.outcome.value,
            "code": result.code,
            "reason": result.reason,
            "retryable": error.is_retryable if error else False,
            "remediation": error.remediation if error else None,
            "params": result.response.params if result.response else None,
        }, indent=2, default=str)

    color = OUTCOME_COLORS[result.outcome]
    lines = [
        f"[bold]Shipment:[/bold] {number}",
        f"[bold]Outcome:[/bold]  [{color}]{result.outcome.value.upper()}[/{color}]",
    ]
    if result.code:
        lines.append(f"[bold]Code:[/bold]     {result.code}")
    if result.reason:
        lines.append(f"[bold]Reason:[/bold]   {result.reason}")
    if error and result.aborted:
        lines.append(f"[bold]Fix:[/bold]      {error.remediation}")
        if error.is_retryable:
            lines.append("[yellow]Retryable: resubmit once the service recovers.[/yellow]")
    return _render(Panel("\n".join(lines), title="Fulfillment Submit", border_style="cyan"))


def format_tracking_outcome(number: str, outcome: TrackingOutcome, as_json: bool = False) -> str:
    """Format a tracking poll outcome as a Rich table or JSON."""
    if as_json:
        return json.dumps({
            "shipment": number,
            "status": outcome.status.value,
            "tracking": outcome.details.as_dict() if outcome.details else None,
            "reason": outcome.reason,
            "stop_polling": outcome.should_stop_polling,
        }, indent=2)

    color = OUTCOME_COLORS[outcome.status]
    table = Table(title=f"Tracking: {number}", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Status", f"[{color}]{outcome.status.value}[/{color}]")
    if outcome.details:
        for key, value in outcome.details.as_dict().items():
            table.add_row(key.replace("_", " ").title(), value or "-")
    if outcome.reason:
        table.add_row("Reason", outcome.reason)
    table.add_row("Keep polling", "no" if outcome.should_stop_polling else "yes")
    return _render(table)


def format_config(cfg: AppConfig) -> str:
    """Format resolved configuration with credentials masked."""
    lines = [
        "[bold]Amazon:[/bold]",
        f"  endpoint: {cfg.amazon.endpoint}",
        f"  api_key: {_MASK if cfg.amazon.api_key else '(unset)'}",
        f"  secret_key: {_MASK if cfg.amazon.secret_key else '(unset)'}",
        f"  timeout_seconds: {cfg.amazon.timeout_seconds}",
        "",
        "[bold]Fulfillment:[/bold]",
        f"  max_quantity_failsafe: {cfg.fulfillment.max_quantity_failsafe or '(no cap)'}",
        f"  development_mode: {cfg.fulfillment.development_mode}",
        f"  pacing_delay_seconds: {cfg.fulfillment.pacing_delay_seconds}",
        f"  order_comment: {cfg.fulfillment.order_comment}",
        "",
        "[bold]Logging:[/bold]",
        f"  level: {cfg.logging.level}",
        f"  format: {cfg.logging.format}",
    ]
    return "\n".join(lines)
