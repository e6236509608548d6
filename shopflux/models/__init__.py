"""
------------------------------------------------------------------------------
Project:        ShopFlux
File:           shopflux/models/__init__.py
Version:        1.0.0
Producer:       ShopFlux Team
Generator:      Antigravity
Description:    Package initializer for the data models. Exports the report
                configuration, record snapshot and metric result types.
------------------------------------------------------------------------------
"""

from .types import Aggregation, ChartType, DataSource, ExportFormat, FieldType, FilterOperator, Trend
from .records import RecordCollections
from .reporting import ReportConfig, ReportField, ReportFilter, ReportResult
from .metrics import CustomerLifetimeValue, DailyRevenue, InventoryTurnover, RevenueForecast
