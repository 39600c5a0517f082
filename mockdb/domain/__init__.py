"""
Domain package for mockdb.

Exports the record shapes, filter predicates and collection names shared by
the stores and the sync service. Keep this package focused on data
definitions and validation concerns.
"""

from mockdb.domain.models import (
    CHAT_MESSAGES,
    HEALTH_ALERTS,
    HEALTH_METRICS,
    NOTIFICATIONS,
    FilterOperator,
    FilterPredicate,
    HealthAlertDraft,
    HealthMetricsUpdate,
    NotificationDraft,
    Record,
    SyncEvent,
    coerce_filters,
)

__all__ = [
    "CHAT_MESSAGES",
    "HEALTH_ALERTS",
    "HEALTH_METRICS",
    "NOTIFICATIONS",
    "FilterOperator",
    "FilterPredicate",
    "HealthAlertDraft",
    "HealthMetricsUpdate",
    "NotificationDraft",
    "Record",
    "SyncEvent",
    "coerce_filters",
]
