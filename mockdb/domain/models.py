"""
Domain models for mockdb.

Records themselves stay plain dictionaries so unknown fields pass through the
store untouched. The pydantic models here describe the caller-facing shapes:
filter predicates and the drafts for notifications, health alerts and health
metrics. Drafts allow extra fields as their open-ended extension map.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Literal, Mapping, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

Record = Dict[str, Any]

NOTIFICATIONS = "notifications"
HEALTH_METRICS = "health_metrics"
HEALTH_ALERTS = "health_alerts"
CHAT_MESSAGES = "chat_messages"

Priority = Literal["low", "medium", "high"]


class FilterOperator(str, Enum):
    EQ = "=="
    NE = "!="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="
    ARRAY_CONTAINS = "array-contains"


class FilterPredicate(BaseModel):
    """
    One ``field operator value`` condition.

    The operator is kept as a plain string: an operator outside
    ``FilterOperator`` is accepted and matches every record.
    """

    field: str = Field(..., min_length=1, description="Record field to test.")
    operator: str = Field(..., description="One of ==, !=, >, <, >=, <=, array-contains.")
    value: Any = Field(None, description="Right-hand operand.")

    model_config = ConfigDict(frozen=True)

    @property
    def known_operator(self) -> Optional[FilterOperator]:
        try:
            return FilterOperator(self.operator)
        except ValueError:
            return None


FilterLike = Union[FilterPredicate, Tuple[str, str, Any], Mapping[str, Any]]


def coerce_filters(filters: Optional[Sequence[FilterLike]]) -> Tuple[FilterPredicate, ...]:
    """Normalize predicates given as models, ``(field, op, value)`` tuples or dicts."""
    if not filters:
        return ()
    coerced = []
    for item in filters:
        if isinstance(item, FilterPredicate):
            coerced.append(item)
        elif isinstance(item, Mapping):
            coerced.append(FilterPredicate.model_validate(dict(item)))
        else:
            field, operator, value = item
            coerced.append(FilterPredicate(field=field, operator=operator, value=value))
    return tuple(coerced)


class NotificationDraft(BaseModel):
    """Caller fields for a notification; ``read`` and ``timestamp`` are assigned by the store."""

    type: str
    title: str
    message: str
    priority: Optional[Priority] = None

    model_config = ConfigDict(extra="allow")


class HealthAlertDraft(BaseModel):
    """Caller fields for a health alert; ``acknowledged`` is assigned by the store."""

    type: str
    message: str
    severity: Priority

    model_config = ConfigDict(extra="allow")


class HealthMetricsUpdate(BaseModel):
    """Open set of metric readings (heart rate, blood pressure, weight, ...)."""

    model_config = ConfigDict(extra="allow")


class SyncEvent(BaseModel):
    """A recorded simulated propagation of a write to another role."""

    role: str
    owner_id: str
    data_type: str
    payload: Any = None
    synced_at: datetime

    model_config = ConfigDict(frozen=True)


def draft_fields(draft: BaseModel) -> Record:
    """Dump a draft, keeping extras and dropping unset optional fields."""
    return draft.model_dump(exclude_unset=True)


__all__ = [
    "Record",
    "NOTIFICATIONS",
    "HEALTH_METRICS",
    "HEALTH_ALERTS",
    "CHAT_MESSAGES",
    "Priority",
    "FilterOperator",
    "FilterPredicate",
    "FilterLike",
    "coerce_filters",
    "NotificationDraft",
    "HealthAlertDraft",
    "HealthMetricsUpdate",
    "SyncEvent",
    "draft_fields",
]
