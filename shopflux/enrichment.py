"""
------------------------------------------------------------------------------
Project:        ShopFlux
File:           shopflux/enrichment.py
Version:        1.0.0
Producer:       ShopFlux Team
Generator:      Antigravity
Description:    Enrichment stage of the reporting pipeline. Joins a raw record
                against its related collections and adds derived attributes
                (date parts, customer/supplier names, COGS, margins, dues).
------------------------------------------------------------------------------
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional

from shopflux.logger import get_logger
from shopflux.models.records import Record, RecordCollections
from shopflux.models.types import DataSource
from shopflux.utils.conversion import MS_PER_DAY, is_hashable, parse_timestamp, to_epoch_ms, to_number, utc_now

logger = get_logger("enrichment")

UNKNOWN = "Unknown"
NO_PURCHASE_DAYS = 999


@dataclass
class LookupIndex:
    """Id-keyed views over the related collections, built once per report run."""
    customers: Dict[Any, Record] = field(default_factory=dict)
    suppliers: Dict[Any, Record] = field(default_factory=dict)
    products: Dict[Any, Record] = field(default_factory=dict)
    sales_by_customer: Dict[Any, List[Record]] = field(default_factory=dict)

    @classmethod
    def build(cls, collections: RecordCollections) -> "LookupIndex":
        index = cls()
        for target, records in ((index.customers, collections.customers),
                                (index.suppliers, collections.suppliers),
                                (index.products, collections.products)):
            for r in records:
                if is_hashable(r.get("id")):
                    target.setdefault(r.get("id"), r)
        for sale in collections.sales:
            cid = sale.get("customerId")
            if is_hashable(cid):
                index.sales_by_customer.setdefault(cid, []).append(sale)
        return index


def _lookup(mapping: Mapping[Any, Any], key: Any) -> Any:
    """Id lookup that treats missing and unhashable keys as unresolved."""
    if key is None:
        return {}
    try:
        return mapping.get(key) or {}
    except TypeError:
        return {}


def decompose_date(value: Any) -> Dict[str, Any]:
    """
    Splits a record timestamp into sortable and groupable parts.
    Returns an empty dict for missing or unparseable dates.
    """
    dt = parse_timestamp(value)
    if dt is None:
        return {}
    return {
        "dateVal": to_epoch_ms(dt),
        "dateKey": dt.strftime("%Y-%m-%d"),
        "year": str(dt.year),
        "month": f"{dt.year}-{dt.month:02d}",
        "day": str(dt.day),
        "hour": str(dt.hour),
        "isWeekend": "Weekend" if dt.weekday() >= 5 else "Weekday",
    }


def sale_cogs(sale: Mapping[str, Any], products: Mapping[Any, Record]) -> float:
    """
    Cost of goods of one sale at current purchase prices. Unknown products
    cost nothing and no line contributes a negative amount.
    """
    cogs = 0.0
    items = sale.get("items")
    if not isinstance(items, (list, tuple)):
        return cogs
    for item in items:
        if not isinstance(item, Mapping):
            continue
        product = _lookup(products, item.get("productId"))
        if not product:
            continue
        cogs += max(0.0, to_number(product.get("purchasePrice")) * to_number(item.get("quantity")))
    return cogs


def _payments(sale: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    payments = sale.get("payments")
    if not isinstance(payments, (list, tuple)):
        return []
    return [p for p in payments if isinstance(p, Mapping)]


def _enrich_sale(flat: Dict[str, Any], record: Mapping[str, Any], index: LookupIndex, now: datetime) -> None:
    customer = _lookup(index.customers, record.get("customerId"))
    flat["customerName"] = customer.get("name") or UNKNOWN
    flat["customerArea"] = customer.get("area") or UNKNOWN
    flat["priceTier"] = customer.get("priceTier") or "Standard"

    payments = _payments(record)
    flat["paymentMethod"] = (payments[0].get("method") if payments else None) or "UNPAID"

    flat["discount"] = to_number(record.get("discount"))
    flat["gstAmount"] = to_number(record.get("gstAmount"))

    cogs = sale_cogs(record, index.products)
    flat["cogs"] = cogs
    flat["netProfit"] = to_number(record.get("totalAmount")) - flat["gstAmount"] - cogs


def _enrich_purchase(flat: Dict[str, Any], record: Mapping[str, Any], index: LookupIndex, now: datetime) -> None:
    supplier = _lookup(index.suppliers, record.get("supplierId"))
    flat["supplierName"] = supplier.get("name") or UNKNOWN
    due_dates = record.get("paymentDueDates")
    flat["dueDate"] = due_dates[0] if isinstance(due_dates, (list, tuple)) and due_dates else "N/A"


def _enrich_product(flat: Dict[str, Any], record: Mapping[str, Any], index: LookupIndex, now: datetime) -> None:
    cost = to_number(record.get("purchasePrice"))
    price = to_number(record.get("salePrice"))
    qty = to_number(record.get("quantity"))

    flat["stockValue"] = qty * cost
    flat["retailValue"] = qty * price
    flat["margin"] = price - cost
    # zero cost price reports a flat 100% margin
    flat["marginPercent"] = ((price - cost) / cost) * 100 if cost > 0 else 100.0
    flat["brand"] = record.get("brand") or "Generic"


def _enrich_customer(flat: Dict[str, Any], record: Mapping[str, Any], index: LookupIndex, now: datetime) -> None:
    sales = _lookup(index.sales_by_customer, record.get("id")) or []

    total_spent = sum(to_number(s.get("totalAmount")) for s in sales)
    total_paid = sum(to_number(p.get("amount")) for s in sales for p in _payments(s))

    flat["totalSpent"] = total_spent
    flat["totalPaid"] = total_paid
    flat["dueAmount"] = total_spent - total_paid
    flat["transactionCount"] = len(sales)

    credit_limit = to_number(record.get("creditLimit"))
    flat["creditUtilization"] = (flat["dueAmount"] / credit_limit) * 100 if credit_limit > 0 else 0.0

    sale_times = [dt for dt in (parse_timestamp(s.get("date")) for s in sales) if dt is not None]
    if sale_times:
        diff_ms = abs(to_epoch_ms(now) - to_epoch_ms(max(sale_times)))
        flat["lastPurchaseDays"] = math.ceil(diff_ms / MS_PER_DAY)
    else:
        flat["lastPurchaseDays"] = NO_PURCHASE_DAYS


def _enrich_expense(flat: Dict[str, Any], record: Mapping[str, Any], index: LookupIndex, now: datetime) -> None:
    pass


_ENRICHERS: Dict[DataSource, Callable[[Dict[str, Any], Mapping[str, Any], LookupIndex, datetime], None]] = {
    DataSource.SALES: _enrich_sale,
    DataSource.PURCHASES: _enrich_purchase,
    DataSource.INVENTORY: _enrich_product,
    DataSource.CUSTOMERS: _enrich_customer,
    DataSource.EXPENSES: _enrich_expense,
}


def enrich(
    record: Mapping[str, Any],
    data_source: DataSource,
    collections: RecordCollections,
    now: Optional[datetime] = None,
    index: Optional[LookupIndex] = None,
) -> Dict[str, Any]:
    """
    Produces the enriched working copy of one record.

    Args:
        record: The raw record; never modified.
        data_source: The collection the record belongs to.
        collections: Snapshot used to resolve related entities.
        now: Reference time for relative attributes (defaults to current UTC time).
        index: Pre-built lookup index; built from collections when omitted.

    Returns:
        A new dict with the original attributes plus the derived ones.
    """
    flat: Dict[str, Any] = dict(record)
    if "date" in record:
        flat.update(decompose_date(record.get("date")))

    if index is None:
        index = LookupIndex.build(collections)
    now = parse_timestamp(now) if now is not None else utc_now()

    enricher = _ENRICHERS.get(DataSource(data_source))
    if enricher is not None:
        enricher(flat, record, index, now)
    return flat


def enrich_all(
    records: List[Mapping[str, Any]],
    data_source: DataSource,
    collections: RecordCollections,
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """Enriches a whole collection sharing one lookup index."""
    index = LookupIndex.build(collections)
    now = parse_timestamp(now) if now is not None else utc_now()
    enriched = [enrich(r, data_source, collections, now=now, index=index) for r in records if isinstance(r, Mapping)]
    logger.debug(f"Enriched {len(enriched)} {DataSource(data_source).value} records")
    return enriched
