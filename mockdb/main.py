from __future__ import annotations

import asyncio
import json
import sys
from typing import Any, Coroutine, Dict, List, Optional, Tuple

import typer
from pydantic import ValidationError

from mockdb.config import get_settings
from mockdb.domain.models import HEALTH_ALERTS, HEALTH_METRICS, NOTIFICATIONS
from mockdb.errors import MockDbError
from mockdb.identity import SessionIdentity
from mockdb.infrastructure.substrate import CollectionSubstrate, build_substrate
from mockdb.reporter import print_collections, print_records, print_sync_history
from mockdb.stores.collection import CollectionStore
from mockdb.stores.ordering import sort_by_timestamp
from mockdb.stores.realtime import RealtimeStore
from mockdb.sync.operations import SyncOperations
from mockdb.sync.service import DataSyncService
from mockdb.utils.logging import configure_logging

app = typer.Typer(help="mockdb: local document store emulation CLI.")

StorageDirOption = typer.Option(
    None,
    "--storage-dir",
    "-d",
    help="Directory holding persisted collections (default from settings).",
)


def _parse_value(raw: str) -> Any:
    """Decode JSON literals (numbers, booleans, lists); fall back to the raw string."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def _parse_where(clause: str) -> Tuple[str, str, Any]:
    parts = clause.split(":", 2)
    if len(parts) != 3 or not parts[0]:
        raise typer.BadParameter(f"Expected field:operator:value, got '{clause}'")
    field, operator, value = parts
    return field, operator, _parse_value(value)


def _parse_assignments(pairs: List[str]) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got '{pair}'")
        fields[key] = _parse_value(value)
    return fields


def _run_write(operation: Coroutine[Any, Any, Any]) -> Any:
    """Run a store write, reporting rejected input as a usage error."""
    try:
        return asyncio.run(operation)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        typer.echo(f"Error: invalid input ({problems})", err=True)
        raise typer.Exit(code=1) from exc


def _substrate(storage_dir: Optional[str]) -> CollectionSubstrate:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    return build_substrate(storage_dir=storage_dir)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"storage={settings.storage_dir} prefix={settings.key_prefix} "
        f"strict_writes={settings.strict_writes} | "
        f"latency_ms collection={settings.collection_latency_ms} "
        f"realtime={settings.realtime_latency_ms} sync={settings.sync_latency_ms}"
    )


@app.command()
def collections(storage_dir: Optional[str] = StorageDirOption) -> None:
    """
    List persisted collections with their record counts.
    """
    substrate = _substrate(storage_dir)
    print_collections({name: len(substrate.load(name)) for name in substrate.collections()})


@app.command()
def show(
    collection: str = typer.Argument(..., help="Collection name, e.g. notifications."),
    where: List[str] = typer.Option(
        [],
        "--where",
        "-w",
        help="Filter as field:operator:value; repeat to AND several filters.",
    ),
    user: str = typer.Option(
        "cli", "--user", "-u", help="Actor identity performing the read."
    ),
    newest_first: bool = typer.Option(
        False, "--newest-first", help="Order by createdAt/timestamp, newest first."
    ),
    storage_dir: Optional[str] = StorageDirOption,
) -> None:
    """
    Read a collection through the collection store and print it.
    """
    substrate = _substrate(storage_dir)
    store = CollectionStore(
        collection,
        [_parse_where(clause) for clause in where],
        substrate=substrate,
        identity=SessionIdentity(user),
    )
    asyncio.run(store.load())
    if store.error:
        typer.echo(f"Error: {store.error}", err=True)
        raise typer.Exit(code=1)
    if newest_first:
        print_records(
            sort_by_timestamp(store.data, reverse=True), title=collection, order="newest first"
        )
    else:
        print_records(store.data, title=collection)


@app.command()
def notify(
    user: str = typer.Argument(..., help="Owner of the notification."),
    type_: str = typer.Option("general", "--type", help="Notification type."),
    title: str = typer.Option(..., "--title", help="Notification title."),
    message: str = typer.Option(..., "--message", help="Notification body."),
    priority: Optional[str] = typer.Option(None, "--priority", help="low, medium or high."),
    storage_dir: Optional[str] = StorageDirOption,
) -> None:
    """
    Raise a notification for a user.
    """
    store = RealtimeStore(NOTIFICATIONS, substrate=_substrate(storage_dir), identity=SessionIdentity(user))
    fields: Dict[str, Any] = {"type": type_, "title": title, "message": message}
    if priority is not None:
        fields["priority"] = priority
    typer.echo(_run_write(store.add_notification(fields)))


@app.command()
def alert(
    user: str = typer.Argument(..., help="Owner of the alert."),
    type_: str = typer.Option("general", "--type", help="Alert type."),
    message: str = typer.Option(..., "--message", help="Alert text."),
    severity: str = typer.Option("medium", "--severity", help="low, medium or high."),
    storage_dir: Optional[str] = StorageDirOption,
) -> None:
    """
    Raise a health alert for a user.
    """
    store = RealtimeStore(HEALTH_ALERTS, substrate=_substrate(storage_dir), identity=SessionIdentity(user))
    typer.echo(
        _run_write(store.add_health_alert({"type": type_, "message": message, "severity": severity}))
    )


@app.command()
def metrics(
    user: str = typer.Argument(..., help="Owner of the metrics record."),
    readings: List[str] = typer.Argument(..., help="Readings as key=value, e.g. heartRate=72."),
    storage_dir: Optional[str] = StorageDirOption,
) -> None:
    """
    Upsert a user's health metrics.
    """
    store = RealtimeStore(HEALTH_METRICS, substrate=_substrate(storage_dir), identity=SessionIdentity(user))
    typer.echo(_run_write(store.update_health_metrics(_parse_assignments(readings))))


@app.command()
def reset(
    collection: str = typer.Argument(..., help="Collection to drop."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
    storage_dir: Optional[str] = StorageDirOption,
) -> None:
    """
    Drop a persisted collection.
    """
    substrate = _substrate(storage_dir)
    if not yes:
        typer.confirm(f"Drop collection '{collection}'?", abort=True)
    substrate.drop(collection)
    typer.echo(f"Dropped {collection}.")


@app.command("sync-appointment")
def sync_appointment(
    patient: str = typer.Argument(..., help="Patient id."),
    doctor: str = typer.Argument(..., help="Doctor id."),
    appointment: str = typer.Option("{}", "--appointment", help="Appointment payload as JSON."),
) -> None:
    """
    Propagate an appointment to both participants and print the sync history.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    service = DataSyncService()
    operations = SyncOperations(service)
    asyncio.run(operations.sync_appointment(patient, doctor, _parse_value(appointment)))
    print_sync_history(service.history)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
    except (MockDbError, ValidationError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
