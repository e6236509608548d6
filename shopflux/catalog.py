"""
------------------------------------------------------------------------------
Project:        ShopFlux
File:           shopflux/catalog.py
Version:        1.0.0
Producer:       ShopFlux Team
Generator:      Antigravity
Description:    Static field catalog per data source and the typed accessor
                registry used by the filter and grouping stages.
------------------------------------------------------------------------------
"""

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from shopflux.models.reporting import ReportConfig, ReportField
from shopflux.models.types import Aggregation, DataSource, FieldType
from shopflux.utils.conversion import to_number

FieldAccessor = Callable[[Mapping[str, Any]], Any]

S, N, C, D = FieldType.STRING, FieldType.NUMBER, FieldType.CURRENCY, FieldType.DATE


def _f(field_id: str, label: str, ftype: FieldType = S, agg: Optional[Aggregation] = None) -> ReportField:
    return ReportField(id=field_id, label=label, type=ftype, aggregation=agg)


# Date decomposition attributes shared by every dated source
_DATE_FIELDS = [
    _f("date", "Date", D),
    _f("dateVal", "Timestamp", N),
    _f("dateKey", "Day", S),
    _f("month", "Month", S),
    _f("year", "Year", S),
    _f("day", "Day of Month", S),
    _f("hour", "Hour", S),
    _f("isWeekend", "Weekend / Weekday", S),
]

FIELD_CATALOG: Dict[DataSource, List[ReportField]] = {
    DataSource.SALES: [
        _f("totalAmount", "Total Amount", C, Aggregation.SUM),
        _f("discount", "Discount", C, Aggregation.SUM),
        _f("gstAmount", "GST Amount", C, Aggregation.SUM),
        _f("netProfit", "Net Profit", C, Aggregation.SUM),
        _f("cogs", "Cost of Goods", C, Aggregation.SUM),
        _f("customerName", "Customer Name"),
        _f("customerArea", "Customer Area"),
        _f("priceTier", "Price Tier"),
        _f("paymentMethod", "Payment Method"),
        _f("id", "Sale ID", S, Aggregation.COUNT),
        *_DATE_FIELDS,
    ],
    DataSource.PURCHASES: [
        _f("totalAmount", "Total Amount", C, Aggregation.SUM),
        _f("supplierName", "Supplier"),
        _f("dueDate", "Payment Due", S),
        _f("id", "Purchase ID", S, Aggregation.COUNT),
        *_DATE_FIELDS,
    ],
    DataSource.INVENTORY: [
        _f("name", "Product Name"),
        _f("category", "Category"),
        _f("brand", "Brand"),
        _f("quantity", "Quantity", N, Aggregation.SUM),
        _f("purchasePrice", "Cost Price", C, Aggregation.AVG),
        _f("salePrice", "Sale Price", C, Aggregation.AVG),
        _f("stockValue", "Stock Value", C, Aggregation.SUM),
        _f("retailValue", "Retail Value", C, Aggregation.SUM),
        _f("margin", "Margin", C, Aggregation.AVG),
        _f("marginPercent", "Margin %", N, Aggregation.AVG),
    ],
    DataSource.CUSTOMERS: [
        _f("name", "Customer Name"),
        _f("area", "Area"),
        _f("totalSpent", "Total Spent", C, Aggregation.SUM),
        _f("totalPaid", "Total Paid", C, Aggregation.SUM),
        _f("dueAmount", "Due Amount", C, Aggregation.SUM),
        _f("creditUtilization", "Credit Utilization %", N, Aggregation.AVG),
        _f("transactionCount", "Orders", N, Aggregation.SUM),
        _f("lastPurchaseDays", "Days Since Last Purchase", N, Aggregation.AVG),
    ],
    DataSource.EXPENSES: [
        _f("category", "Category"),
        _f("amount", "Amount", C, Aggregation.SUM),
        _f("note", "Note"),
        _f("id", "Expense ID", S, Aggregation.COUNT),
        *_DATE_FIELDS,
    ],
}


def _check_unique_ids(catalog: Dict[DataSource, List[ReportField]]) -> None:
    for source, fields in catalog.items():
        ids = [f.id for f in fields]
        dupes = {i for i in ids if ids.count(i) > 1}
        if dupes:
            raise ValueError(f"Duplicate field ids in {source.value} catalog: {sorted(dupes)}")


_check_unique_ids(FIELD_CATALOG)


def get_catalog(source: DataSource) -> List[ReportField]:
    """Returns the declared fields of a data source."""
    return list(FIELD_CATALOG.get(DataSource(source), []))


def get_field(source: DataSource, field_id: str) -> Optional[ReportField]:
    for f in FIELD_CATALOG.get(DataSource(source), []):
        if f.id == field_id:
            return f
    return None


def make_accessor(field_id: str, field_type: Optional[FieldType] = None) -> FieldAccessor:
    """
    Builds the getter for one field id.
    Numeric and currency fields read through the zero-defaulting coercion.
    """
    if field_type in (FieldType.NUMBER, FieldType.CURRENCY):
        def numeric_getter(record: Mapping[str, Any]) -> float:
            return to_number(record.get(field_id))
        return numeric_getter

    def raw_getter(record: Mapping[str, Any]) -> Any:
        return record.get(field_id)
    return raw_getter


class AccessorRegistry:
    """
    Maps field ids to typed getters for one data source.
    Types come from the config's own field list first, then the static catalog;
    ids known to neither (ad-hoc raw attributes) get a plain getter.
    """

    def __init__(self, source: DataSource, fields: Iterable[ReportField] = ()):
        self.source = DataSource(source)
        self._types: Dict[str, FieldType] = {f.id: f.type for f in FIELD_CATALOG.get(self.source, [])}
        for f in fields:
            self._types[f.id] = f.type
        self._accessors: Dict[str, FieldAccessor] = {}

    @classmethod
    def for_config(cls, config: ReportConfig) -> "AccessorRegistry":
        registry = cls(config.data_source, config.fields)
        ids = [f.id for f in config.fields] + [flt.field_id for flt in config.filters]
        if config.group_by:
            ids.append(config.group_by)
        registry.resolve(ids)
        return registry

    def resolve(self, field_ids: Iterable[str]) -> Dict[str, FieldAccessor]:
        return {fid: self.get(fid) for fid in field_ids}

    def get(self, field_id: str) -> FieldAccessor:
        accessor = self._accessors.get(field_id)
        if accessor is None:
            accessor = make_accessor(field_id, self._types.get(field_id))
            self._accessors[field_id] = accessor
        return accessor

    def __getitem__(self, field_id: str) -> FieldAccessor:
        return self.get(field_id)

    def __contains__(self, field_id: str) -> bool:
        return field_id in self._accessors
