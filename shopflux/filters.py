"""
------------------------------------------------------------------------------
Project:        ShopFlux
File:           shopflux/filters.py
Version:        1.0.0
Producer:       ShopFlux Team
Generator:      Antigravity
Description:    Filter evaluator. Applies AND-composed predicate filters to
                enriched records; malformed filters never match.
------------------------------------------------------------------------------
"""

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from shopflux.catalog import FieldAccessor, make_accessor
from shopflux.logger import get_logger
from shopflux.models.reporting import ReportFilter
from shopflux.models.types import FilterOperator
from shopflux.utils.conversion import is_numeric, to_number

logger = get_logger("filters")


def loose_equals(a: Any, b: Any) -> bool:
    """
    Equality across numbers and their string forms ('100' == 100).
    None only equals None.
    """
    if a is None or b is None:
        return a is None and b is None
    if a == b:
        return True
    if is_numeric(a) and is_numeric(b):
        return to_number(a) == to_number(b)
    return str(a) == str(b)


def _equals(val: Any, target: Any) -> bool:
    return loose_equals(val, target)


def _contains(val: Any, target: Any) -> bool:
    return str(target).lower() in str(val).lower()


def _gt(val: Any, target: Any) -> bool:
    return to_number(val) > to_number(target)


def _lt(val: Any, target: Any) -> bool:
    return to_number(val) < to_number(target)


def _between(val: Any, target: Any) -> bool:
    if not isinstance(target, (list, tuple)) or len(target) != 2:
        raise ValueError(f"'between' expects a [min, max] pair, got {target!r}")
    if val is None:
        return False
    low, high = target
    if is_numeric(val) and is_numeric(low) and is_numeric(high):
        return to_number(low) <= to_number(val) <= to_number(high)
    return str(low) <= str(val) <= str(high)


def _in(val: Any, target: Any) -> bool:
    if not isinstance(target, (list, tuple, set, frozenset)):
        raise ValueError(f"'in' expects a list of values, got {target!r}")
    return any(loose_equals(val, t) for t in target)


_OPERATORS: Dict[FilterOperator, Callable[[Any, Any], bool]] = {
    FilterOperator.EQUALS: _equals,
    FilterOperator.CONTAINS: _contains,
    FilterOperator.GT: _gt,
    FilterOperator.LT: _lt,
    FilterOperator.BETWEEN: _between,
    FilterOperator.IN: _in,
}


def matches(record: Mapping[str, Any], flt: ReportFilter, accessor: Optional[FieldAccessor] = None) -> bool:
    """Evaluates one filter; any error makes the record non-matching."""
    try:
        op = _OPERATORS[FilterOperator(flt.operator)]
    except (ValueError, KeyError):
        logger.debug(f"Unsupported filter operator '{flt.operator}' on '{flt.field_id}'")
        return False

    getter = accessor or make_accessor(flt.field_id)
    try:
        return bool(op(getter(record), flt.value))
    except Exception as e:
        logger.debug(f"Filter on '{flt.field_id}' rejected record: {e}")
        return False


def apply_filters(
    record: Mapping[str, Any],
    filters: Sequence[ReportFilter],
    accessors: Optional[Mapping[str, FieldAccessor]] = None,
) -> bool:
    """True only if every filter matches; an empty filter list always matches."""
    accessors = accessors or {}
    return all(matches(record, flt, accessors.get(flt.field_id)) for flt in filters)


def filter_records(
    records: Iterable[Mapping[str, Any]],
    filters: Sequence[ReportFilter],
    accessors: Optional[Mapping[str, FieldAccessor]] = None,
) -> List[Mapping[str, Any]]:
    if not filters:
        return list(records)
    return [r for r in records if apply_filters(r, filters, accessors)]
