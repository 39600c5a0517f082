"""
Demo data seeding script for mockdb.

Writes a deterministic set of notifications, health alerts, health metrics
and chat messages for one user into a storage directory, going through the
same store operations the application uses.
"""

from __future__ import annotations

import asyncio
import random
import sys
import time
from typing import Any, Dict, List

import typer

from mockdb.domain.models import CHAT_MESSAGES, NOTIFICATIONS
from mockdb.identity import SessionIdentity
from mockdb.infrastructure.substrate import CollectionSubstrate, build_substrate
from mockdb.stores.collection import CollectionStore
from mockdb.stores.realtime import RealtimeStore
from mockdb.utils.latency import no_delay

app = typer.Typer(help="Seed a mockdb storage directory with demo records.")

_NOTIFICATION_TEMPLATES = [
    ("dose", "Reminder", "Take your morning medication"),
    ("appointment", "Upcoming appointment", "Check-up with Dr. Smith tomorrow at 10:00"),
    ("report", "New lab report", "Your blood panel results are available"),
]
_ALERT_TEMPLATES = [
    ("heart_rate", "Resting heart rate above usual range"),
    ("blood_pressure", "Blood pressure reading is elevated"),
]
_CHAT_LINES = [
    ("user", "How many steps should I aim for?"),
    ("assistant", "Most adults benefit from 7,000 to 10,000 steps a day."),
]


def _generate_demo_fields(seed: int) -> Dict[str, List[Dict[str, Any]]]:
    rng = random.Random(seed)
    priorities = ["low", "medium", "high"]
    return {
        "notifications": [
            {"type": kind, "title": title, "message": message, "priority": rng.choice(priorities)}
            for kind, title, message in _NOTIFICATION_TEMPLATES
        ],
        "alerts": [
            {"type": kind, "message": message, "severity": rng.choice(priorities)}
            for kind, message in _ALERT_TEMPLATES
        ],
        "metrics": [
            {
                "heartRate": rng.randint(58, 96),
                "bloodPressure": f"{rng.randint(105, 140)}/{rng.randint(65, 92)}",
                "weight": round(rng.uniform(55, 95), 1),
                "steps": rng.randint(2_000, 12_000),
            }
        ],
        "chat": [{"sender": sender, "message": text} for sender, text in _CHAT_LINES],
    }


async def _seed(substrate: CollectionSubstrate, user_id: str, seed: int) -> Dict[str, int]:
    identity = SessionIdentity(user_id)
    fields = _generate_demo_fields(seed)
    realtime = RealtimeStore(NOTIFICATIONS, substrate=substrate, identity=identity, delay=no_delay)
    chat = CollectionStore(CHAT_MESSAGES, substrate=substrate, identity=identity, delay=no_delay)

    for notification in fields["notifications"]:
        await realtime.add_notification(notification)
    for alert in fields["alerts"]:
        await realtime.add_health_alert(alert)
    for metrics in fields["metrics"]:
        await realtime.update_health_metrics(metrics)
    for line in fields["chat"]:
        await chat.add({"userId": user_id, **line})

    return {name: len(records) for name, records in fields.items()}


@app.command()
def main(
    user: str = typer.Option("demo-patient", "--user", "-u", help="Owner of the seeded records."),
    seed: int = typer.Option(42, "--seed", help="Deterministic RNG seed."),
    storage_dir: str | None = typer.Option(
        None,
        "--storage-dir",
        "-d",
        help="Storage directory (default from settings).",
    ),
) -> None:
    """
    Seed demo records for one user.
    """
    start = time.perf_counter()
    substrate = build_substrate(storage_dir=storage_dir)
    counts = asyncio.run(_seed(substrate, user, seed))
    duration = time.perf_counter() - start
    summary = ", ".join(f"{name}={count}" for name, count in counts.items())
    typer.echo(f"Seeded {summary} for user={user} in {duration:.2f}s")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
