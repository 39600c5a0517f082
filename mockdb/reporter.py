from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from mockdb.domain.models import Record, SyncEvent

# Columns shown first when present; everything else follows alphabetically.
_LEADING_COLUMNS = ("id", "userId", "type", "title", "message", "read", "acknowledged")


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True)
    return str(value)


def record_columns(records: Iterable[Record]) -> List[str]:
    """
    Union of the field names across records, stable for display.

    Well-known fields lead in a fixed order; the rest are sorted.
    """
    seen = set()
    for record in records:
        seen.update(record.keys())
    leading = [name for name in _LEADING_COLUMNS if name in seen]
    return leading + sorted(seen.difference(leading))


def print_records(
    records: Sequence[Record],
    title: str,
    console: Optional[Console] = None,
    order: str = "storage order",
) -> None:
    """
    Render records as a rich table, one column per field.

    Records are schema-flexible, so a field missing from a record renders
    as an empty cell.
    """
    console = console or Console()

    if not records:
        console.print(f"[yellow]No records in {title}.[/yellow]")
        return

    columns = record_columns(records)
    table = Table(
        title=title,
        box=box.ROUNDED,
        caption=f"{len(records)} record(s), {order}",
    )
    for name in columns:
        style = "cyan" if name == "id" else None
        table.add_column(name, style=style, no_wrap=name == "id", overflow="fold")

    for record in records:
        table.add_row(*(_format_value(record.get(name)) for name in columns))

    console.print(table)


def print_collections(counts: Dict[str, int], console: Optional[Console] = None) -> None:
    """Render persisted collection names with their record counts."""
    console = console or Console()

    if not counts:
        console.print("[yellow]No collections persisted yet.[/yellow]")
        return

    table = Table(title="Persisted Collections", box=box.ROUNDED)
    table.add_column("Collection", style="cyan", no_wrap=True)
    table.add_column("Records", justify="right", style="magenta")
    for name in sorted(counts):
        table.add_row(name, f"{counts[name]:,}")

    console.print(table)


def print_sync_history(events: Sequence[SyncEvent], console: Optional[Console] = None) -> None:
    """Render recorded sync events in the order they happened."""
    console = console or Console()

    if not events:
        console.print("[yellow]No sync events recorded.[/yellow]")
        return

    table = Table(title="Sync History", box=box.ROUNDED)
    table.add_column("Synced At", style="green")
    table.add_column("Role", style="cyan")
    table.add_column("Owner", style="magenta")
    table.add_column("Data Type")
    for event in events:
        table.add_row(event.synced_at.isoformat(), event.role, event.owner_id, event.data_type)

    console.print(table)


__all__ = ["print_collections", "print_records", "print_sync_history", "record_columns"]
