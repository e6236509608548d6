from typing import Any, Callable, Dict, List

from shopflux.models.reporting import ReportField, ReportResult
from shopflux.models.types import ChartType, FieldType
from shopflux.utils.conversion import stringify_key, to_number

_NUMERIC = (FieldType.NUMBER, FieldType.CURRENCY)


def _label_field(result: ReportResult) -> str:
    if result.config.group_by:
        return result.config.group_by
    for f in result.fields:
        if f.type not in _NUMERIC:
            return f.id
    return result.fields[0].id if result.fields else "id"


def _value_fields(result: ReportResult) -> List[ReportField]:
    label = _label_field(result)
    return [f for f in result.fields if f.id != label and (f.type in _NUMERIC or f.aggregation is not None)]


def _table(result: ReportResult) -> Dict[str, Any]:
    return {
        "columns": [{"id": f.id, "label": f.label, "type": f.type.value} for f in result.fields],
        "rows": [{f.id: row.get(f.id) for f in result.fields} for row in result.rows],
    }


def _series(result: ReportResult) -> Dict[str, Any]:
    label = _label_field(result)
    return {
        "labels": [stringify_key(row.get(label)) for row in result.rows],
        "series": [
            {"id": f.id, "name": f.label, "data": [to_number(row.get(f.id)) for row in result.rows]}
            for f in _value_fields(result)
        ],
    }


def _slices(result: ReportResult) -> Dict[str, Any]:
    label = _label_field(result)
    values = _value_fields(result)
    if not values:
        return {"data": []}
    value_id = values[0].id
    return {
        "data": [
            {"name": stringify_key(row.get(label)), "value": to_number(row.get(value_id))}
            for row in result.rows
        ]
    }


def _kpi(result: ReportResult) -> Dict[str, Any]:
    return {
        "kpis": [
            {"id": f.id, "label": f.label, "value": sum(to_number(row.get(f.id)) for row in result.rows)}
            for f in _value_fields(result)
        ],
        "count": len(result.rows),
    }


_BUILDERS: Dict[ChartType, Callable[[ReportResult], Dict[str, Any]]] = {
    ChartType.TABLE: _table,
    ChartType.BAR: _series,
    ChartType.LINE: _series,
    ChartType.AREA: _series,
    ChartType.SCATTER: _series,
    ChartType.COMPOSED: _series,
    ChartType.PIE: _slices,
    ChartType.FUNNEL: _slices,
    ChartType.TREEMAP: _slices,
    ChartType.KPI: _kpi,
}


def build_chart_payload(result: ReportResult) -> Dict[str, Any]:
    """Chart-ready structure for the report's chart type."""
    chart_type = ChartType(result.config.chart_type)
    payload = _BUILDERS[chart_type](result)
    payload["chartType"] = chart_type.value
    payload["title"] = result.config.title
    return payload
