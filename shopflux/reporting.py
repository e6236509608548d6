"""
------------------------------------------------------------------------------
Project:        ShopFlux
File:           shopflux/reporting.py
Version:        1.0.0
Producer:       ShopFlux Team
Generator:      Antigravity
Description:    Reporting engine for ShopFlux. Runs report configurations
                through enrichment, filtering and grouping, and manages the
                prebuilt and file-based report templates.
------------------------------------------------------------------------------
"""

import calendar
import json
import os
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from shopflux.catalog import AccessorRegistry
from shopflux.enrichment import enrich_all
from shopflux.filters import filter_records
from shopflux.grouping import group
from shopflux.logger import get_logger, log_report_run
from shopflux.models.records import RecordCollections
from shopflux.models.reporting import ReportConfig, ReportFilter, ReportResult
from shopflux.models.types import DATED_SOURCES, DataSource, DatePreset
from shopflux.utils.conversion import parse_timestamp, to_epoch_ms, utc_now

logger = get_logger("reporting")


class ReportEngine:
    """Generic query/aggregation pipeline over the record collections."""

    @staticmethod
    def process(collections: RecordCollections, config: ReportConfig, now: Optional[datetime] = None) -> ReportResult:
        """
        Executes a report configuration against the current collections.
        Returns the ordered rows together with the field catalog used.
        """
        source = DataSource(config.data_source)
        raw = collections.for_source(source)

        accessors = AccessorRegistry.for_config(config)
        enriched = enrich_all(raw, source, collections, now=now)
        filtered = filter_records(enriched, config.filters, accessors)
        rows = group(filtered, config.group_by, config.fields, accessors)

        logger.info(f"Report '{config.id}' on {source.value}: {len(raw)} records, {len(filtered)} matched, {len(rows)} rows")
        log_report_run(config.id, source.value, len(raw), len(rows), grouped=bool(config.group_by))

        return ReportResult(config=config, fields=list(config.fields), rows=rows, grouped=bool(config.group_by))


def _template(data: Dict[str, Any]) -> ReportConfig:
    return ReportConfig.model_validate({"createdAt": 0, **data})


PREBUILT_REPORTS: List[ReportConfig] = [
    _template({
        "id": "sales_by_customer",
        "title": "Sales by Customer",
        "description": "Total revenue grouped by customer.",
        "dataSource": "sales",
        "chartType": "BAR",
        "groupBy": "customerName",
        "fields": [
            {"id": "customerName", "label": "Customer", "type": "string"},
            {"id": "totalAmount", "label": "Total Sales", "type": "currency", "aggregation": "SUM"},
        ],
    }),
    _template({
        "id": "daily_sales",
        "title": "Daily Sales Trend",
        "description": "Revenue over time.",
        "dataSource": "sales",
        "chartType": "LINE",
        "groupBy": "dateKey",
        "fields": [
            {"id": "dateKey", "label": "Date", "type": "date"},
            {"id": "totalAmount", "label": "Revenue", "type": "currency", "aggregation": "SUM"},
            {"id": "netProfit", "label": "Net Profit", "type": "currency", "aggregation": "SUM"},
        ],
    }),
    _template({
        "id": "category_performance",
        "title": "Stock by Category",
        "description": "Stock quantity and value per product category.",
        "dataSource": "inventory",
        "chartType": "PIE",
        "groupBy": "category",
        "fields": [
            {"id": "category", "label": "Category", "type": "string"},
            {"id": "quantity", "label": "Stock Quantity", "type": "number", "aggregation": "SUM"},
            {"id": "stockValue", "label": "Stock Value", "type": "currency", "aggregation": "SUM"},
        ],
    }),
    _template({
        "id": "purchases_by_supplier",
        "title": "Purchases by Supplier",
        "description": "Purchase volume per supplier.",
        "dataSource": "purchases",
        "chartType": "BAR",
        "groupBy": "supplierName",
        "fields": [
            {"id": "supplierName", "label": "Supplier", "type": "string"},
            {"id": "totalAmount", "label": "Total Purchased", "type": "currency", "aggregation": "SUM"},
        ],
    }),
    _template({
        "id": "expenses_by_category",
        "title": "Expenses by Category",
        "description": "Where the money goes.",
        "dataSource": "expenses",
        "chartType": "TREEMAP",
        "groupBy": "category",
        "fields": [
            {"id": "category", "label": "Category", "type": "string"},
            {"id": "amount", "label": "Amount", "type": "currency", "aggregation": "SUM"},
        ],
    }),
    _template({
        "id": "customer_dues",
        "title": "Customer Dues",
        "description": "Customers with outstanding balances.",
        "dataSource": "customers",
        "chartType": "TABLE",
        "fields": [
            {"id": "name", "label": "Customer Name", "type": "string"},
            {"id": "area", "label": "Area", "type": "string"},
            {"id": "totalSpent", "label": "Total Spent", "type": "currency"},
            {"id": "dueAmount", "label": "Due Amount", "type": "currency"},
        ],
        "filters": [{"fieldId": "dueAmount", "operator": "gt", "value": 0}],
    }),
    _template({
        "id": "weekend_vs_weekday",
        "title": "Weekend vs Weekday Sales",
        "description": "Average ticket size on weekends and weekdays.",
        "dataSource": "sales",
        "chartType": "PIE",
        "groupBy": "isWeekend",
        "fields": [
            {"id": "isWeekend", "label": "Day Type", "type": "string"},
            {"id": "totalAmount", "label": "Avg. Sale", "type": "currency", "aggregation": "AVG"},
        ],
    }),
]


class ReportRegistry:
    """Singleton registry for managing report templates."""
    _instance = None

    def __new__(cls, *args, **kwargs):
        if not cls._instance:
            cls._instance = super(ReportRegistry, cls).__new__(cls)
            cls._instance.reports = {}
            cls._instance.reset()
        return cls._instance

    def reset(self) -> None:
        """Drops loaded templates and restores the prebuilt ones."""
        self.reports = {r.id: r for r in PREBUILT_REPORTS}

    def load_from_directory(self, path: str) -> int:
        """Loads all .json files from the specified directory as report templates."""
        self.reset()
        if not os.path.exists(path):
            os.makedirs(path, exist_ok=True)
            return 0

        loaded = 0
        for filename in sorted(os.listdir(path)):
            if not filename.endswith(".json"):
                continue
            full_path = os.path.join(path, filename)
            try:
                with open(full_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                report = ReportConfig.model_validate(data)
            except (OSError, json.JSONDecodeError, ValidationError) as e:
                logger.error(f"Failed to load report from {filename}: {e}")
                continue
            self.reports[report.id] = report
            loaded += 1
            logger.info(f"Loaded report template: {report.id}")
        return loaded

    def register(self, report: ReportConfig) -> None:
        self.reports[report.id] = report

    def get_report(self, report_id: str) -> Optional[ReportConfig]:
        return self.reports.get(report_id)

    def list_reports(self, data_source: Optional[DataSource] = None) -> List[ReportConfig]:
        if data_source is None:
            return list(self.reports.values())
        source = DataSource(data_source)
        return [r for r in self.reports.values() if r.data_source == source]


def resolve_date_range(
    preset: DatePreset,
    now: Optional[datetime] = None,
    custom_start: Optional[Any] = None,
    custom_end: Optional[Any] = None,
) -> Tuple[int, int]:
    """
    Translates a relative date preset into an inclusive [start, end] range of
    epoch milliseconds covering whole days.
    """
    now = parse_timestamp(now) if now is not None else utc_now()
    today = now.date()
    preset = DatePreset(preset)

    start_day: date = today
    end_day: date = today

    if preset == DatePreset.YESTERDAY:
        start_day = end_day = today - timedelta(days=1)
    elif preset == DatePreset.THIS_WEEK:
        start_day = today - timedelta(days=today.weekday())  # Monday
    elif preset == DatePreset.LAST_7:
        start_day = today - timedelta(days=7)
    elif preset == DatePreset.THIS_MONTH:
        start_day = today.replace(day=1)
        end_day = today.replace(day=calendar.monthrange(today.year, today.month)[1])
    elif preset == DatePreset.LAST_MONTH:
        end_day = today.replace(day=1) - timedelta(days=1)
        start_day = end_day.replace(day=1)
    elif preset == DatePreset.THIS_YEAR:
        start_day = date(today.year, 1, 1)
        end_day = date(today.year, 12, 31)
    elif preset == DatePreset.CUSTOM:
        start_dt = parse_timestamp(custom_start)
        end_dt = parse_timestamp(custom_end)
        if start_dt is None or end_dt is None:
            raise ValueError("Custom date range needs a valid start and end date")
        start_day, end_day = start_dt.date(), end_dt.date()

    start = datetime.combine(start_day, time.min)
    end = datetime.combine(end_day, time(23, 59, 59, 999000))
    return to_epoch_ms(start), to_epoch_ms(end)


def with_date_range(config: ReportConfig, start_ms: int, end_ms: int) -> ReportConfig:
    """
    Returns a copy of a dated report with a 'dateVal between' filter placed
    in front of its own filters. Undated sources are returned unchanged.
    """
    if DataSource(config.data_source) not in DATED_SOURCES:
        return config
    date_filter = ReportFilter(field_id="dateVal", operator="between", value=[start_ms, end_ms])
    return config.model_copy(update={"filters": [date_filter, *config.filters]})
