# src/cli/runner.py

"""Headless CLI runner: fetch or load a watch and print its price signal."""

import json
import logging
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from src.services.changedetection_client import (
    ChangeDetectionClient,
    normalise_history,
)
from src.services.watch_report import (
    WatchReport,
    build_watch_report,
    report_from_payloads,
)

logger = logging.getLogger("watch_signal.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)

OFFLINE_UUID = "offline"


def report_to_dict(report: WatchReport) -> dict[str, Any]:
    """Serialise a report to a plain dict for JSON output."""
    return {
        "uuid": report.uuid,
        "title": report.page_title,
        "url": report.watch_url,
        "image_url": report.image_url,
        "snapshot": (
            report.snapshot.to_dict() if report.snapshot else None
        ),
        "notification": (
            {
                "title": report.notification_title,
                "body": report.notification_body,
            }
            if report.notification_body
            else None
        ),
        "error": report.error_message,
    }


def _print_table(report: WatchReport) -> None:
    """Render a Rich table for one watch report to stdout."""
    snapshot = report.snapshot
    if snapshot is None:
        style = "yellow"
    elif snapshot.stock_state is True:
        style = "green"
    elif snapshot.stock_state is False:
        style = "red"
    else:
        style = "cyan"

    table = Table(
        title=f"💰 {report.page_title}",
        show_lines=True,
        title_style=f"bold {style}",
        show_header=False,
    )
    table.add_column("Field", style="bold")
    table.add_column("Value", overflow="fold")

    table.add_row("Watch UUID", report.uuid)
    table.add_row("Product", report.watch_url or "—")
    table.add_row(
        "Current price", (snapshot.price if snapshot else None) or "—"
    )
    table.add_row(
        "Previous price",
        (snapshot.previous_price if snapshot else None) or "—",
    )
    table.add_row(
        "Availability",
        f"[{style}]{escape(snapshot.stock_label)}[/{style}]" if snapshot else "—",
    )
    if snapshot is None:
        table.add_row("Price data", "No price or stock data reported yet.")
    else:
        if snapshot.context:
            table.add_row("Source", snapshot.context)
        if snapshot.timestamp:
            table.add_row("Last updated", snapshot.timestamp)
    if report.image_url:
        table.add_row("Image", report.image_url)
    if report.notification_body:
        table.add_row(
            report.notification_title or "Last notification",
            report.notification_body,
        )

    Console().print(table)


def _emit(report: WatchReport, output_format: str) -> int:
    """Print *report* and return the exit code (0 = price data found)."""
    if report.error_message:
        _err.print(f"[red]⚠️  {escape(report.error_message)}[/red]")

    if report.snapshot is None:
        _err.print(
            f"[yellow]ℹ️  No price/stock data available yet for "
            f"{report.uuid}.[/yellow]"
        )
    else:
        _err.print(
            f"[green]📈 Latest price/stock data for {report.uuid}[/green]"
        )

    if output_format == "table":
        _print_table(report)
    else:
        json.dump(
            report_to_dict(report),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")

    return 0 if report.snapshot is not None else 1


def run_latest(
    uuid: str,
    watch_url: str | None,
    output_format: str,
    history_limit: int | None = None,
) -> int:
    """Fetch a watch from changedetection.io and print its latest data."""
    client = ChangeDetectionClient()
    if not client.base_url:
        _err.print("[red]CHANGEDETECTION_URL is not configured.[/red]")
        _err.print("[dim]Set it in the environment or a .env file.[/dim]")
        return 1

    _err.print(f"[bold]Fetching watch:[/bold] {uuid}")
    report = build_watch_report(client, uuid, watch_url, history_limit)
    return _emit(report, output_format)


def _load_json(path: str) -> Any:
    """Read a JSON file, exiting with status 1 on unreadable input."""
    try:
        with open(Path(path), encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as exc:
        logger.error("Failed to load %s: %s", path, exc, exc_info=True)
        _err.print(f"[red]Cannot read {path}: {exc}[/red]")
        raise SystemExit(1) from exc


def run_offline(
    details_path: str | None,
    history_path: str | None,
    watch_url: str | None,
    output_format: str,
) -> int:
    """Run the extraction engine on saved JSON payloads."""
    details = _load_json(details_path) if details_path else None
    history_payload = _load_json(history_path) if history_path else []

    history = normalise_history(history_payload)

    uuid = OFFLINE_UUID
    if isinstance(details, dict) and isinstance(details.get("uuid"), str):
        uuid = details["uuid"]

    report = report_from_payloads(uuid, details, history, watch_url)
    return _emit(report, output_format)
