"""
Utilities package for mockdb.

Exports shared helpers for logging, simulated latency and id generation.
Keep this package lightweight and free of domain-specific logic.
"""

from mockdb.utils.ids import generate_id, utc_now_iso
from mockdb.utils.latency import Delay, GatedDelay, asyncio_delay, no_delay
from mockdb.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "Delay",
    "GatedDelay",
    "asyncio_delay",
    "no_delay",
    "generate_id",
    "utc_now_iso",
]
