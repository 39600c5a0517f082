"""
Predicate evaluation for collection reads.

Predicates combine as a logical AND. A record lacking the tested field never
matches, mirroring how document databases treat absent fields. Ordering
comparisons between incomparable types fail the predicate rather than
raising. Operators outside the known set match everything.
"""

from __future__ import annotations

import operator
from typing import Any, Callable, Dict, Iterable, List, Sequence

from mockdb.domain.models import FilterOperator, FilterPredicate, Record
from mockdb.utils.logging import get_logger

log = get_logger(__name__)

_MISSING = object()


def _strict_eq(actual: Any, expected: Any) -> bool:
    """Equality that keeps booleans apart from numbers (True != 1)."""
    if isinstance(actual, bool) or isinstance(expected, bool):
        return type(actual) is type(expected) and actual == expected
    return actual == expected


def _strict_ne(actual: Any, expected: Any) -> bool:
    return not _strict_eq(actual, expected)


def _array_contains(actual: Any, expected: Any) -> bool:
    return isinstance(actual, (list, tuple)) and any(_strict_eq(item, expected) for item in actual)


_COMPARATORS: Dict[FilterOperator, Callable[[Any, Any], bool]] = {
    FilterOperator.EQ: _strict_eq,
    FilterOperator.NE: _strict_ne,
    FilterOperator.GT: operator.gt,
    FilterOperator.LT: operator.lt,
    FilterOperator.GE: operator.ge,
    FilterOperator.LE: operator.le,
    FilterOperator.ARRAY_CONTAINS: _array_contains,
}


def matches(record: Record, predicate: FilterPredicate) -> bool:
    """Return True if ``record`` satisfies a single predicate."""
    op = predicate.known_operator
    if op is None:
        log.debug("Unknown filter operator passes all records", extra={"operator": predicate.operator})
        return True

    actual = record.get(predicate.field, _MISSING)
    if actual is _MISSING:
        return False
    try:
        return bool(_COMPARATORS[op](actual, predicate.value))
    except TypeError:
        return False


def matches_all(record: Record, predicates: Sequence[FilterPredicate]) -> bool:
    return all(matches(record, predicate) for predicate in predicates)


def apply_filters(records: Iterable[Record], predicates: Sequence[FilterPredicate]) -> List[Record]:
    """Keep records passing every predicate, preserving storage order."""
    if not predicates:
        return list(records)
    return [record for record in records if matches_all(record, predicates)]


__all__ = ["apply_filters", "matches", "matches_all"]
