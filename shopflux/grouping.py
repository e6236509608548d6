import math
from typing import Any, Dict, List, Mapping, Optional, Sequence

from shopflux.catalog import FieldAccessor, make_accessor
from shopflux.models.reporting import ReportField
from shopflux.models.types import Aggregation
from shopflux.utils.conversion import stringify_key, to_number

_SEEDS: Dict[Aggregation, float] = {
    Aggregation.SUM: 0.0,
    Aggregation.AVG: 0.0,
    Aggregation.COUNT: 0,
    Aggregation.MIN: math.inf,
    Aggregation.MAX: -math.inf,
}


def _fold(agg: Aggregation, acc: float, val: float) -> float:
    if agg in (Aggregation.SUM, Aggregation.AVG):
        return acc + val
    if agg == Aggregation.MIN:
        return min(acc, val)
    if agg == Aggregation.MAX:
        return max(acc, val)
    return acc + 1  # COUNT ignores the value


def group(
    records: Sequence[Mapping[str, Any]],
    group_by: Optional[str],
    fields: Sequence[ReportField],
    accessors: Optional[Mapping[str, FieldAccessor]] = None,
) -> List[Dict[str, Any]]:
    """
    Buckets records by the stringified value of group_by and reduces every
    field that declares an aggregation.

    Without group_by the records pass through unchanged. Buckets keep the
    order in which their key was first seen.
    """
    if not group_by:
        return [dict(r) for r in records]

    accessors = accessors or {}
    key_getter = accessors.get(group_by) or make_accessor(group_by)
    # "count" is the bucket size and cannot be re-aggregated
    aggregated = [f for f in fields if f.aggregation is not None and f.id not in (group_by, "count")]
    getters = {f.id: accessors.get(f.id) or make_accessor(f.id) for f in aggregated}

    buckets: Dict[str, Dict[str, Any]] = {}
    for record in records:
        key = stringify_key(key_getter(record))
        bucket = buckets.get(key)
        if bucket is None:
            bucket = {group_by: key, "count": 0}
            for f in aggregated:
                bucket[f.id] = _SEEDS[f.aggregation]
            buckets[key] = bucket

        bucket["count"] += 1
        for f in aggregated:
            val = to_number(getters[f.id](record)) if f.aggregation != Aggregation.COUNT else 0.0
            bucket[f.id] = _fold(f.aggregation, bucket[f.id], val)

    for bucket in buckets.values():
        for f in aggregated:
            if f.aggregation == Aggregation.AVG:
                bucket[f.id] = bucket[f.id] / bucket["count"]
            elif math.isinf(bucket[f.id]):
                bucket[f.id] = 0

    return list(buckets.values())
