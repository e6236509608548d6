"""
------------------------------------------------------------------------------
Project:        ShopFlux
File:           shopflux/models/types.py
Version:        1.0.0
Producer:       ShopFlux Team
Generator:      Antigravity
Description:    Centralized enumeration and type definitions.
------------------------------------------------------------------------------
"""

from enum import Enum


class DataSource(str, Enum):
    """Record collections a report can read from."""
    SALES = "sales"
    PURCHASES = "purchases"
    INVENTORY = "inventory"
    CUSTOMERS = "customers"
    EXPENSES = "expenses"


class FieldType(str, Enum):
    """Declared type of a reportable field; drives export formatting."""
    STRING = "string"
    NUMBER = "number"
    CURRENCY = "currency"
    DATE = "date"


class Aggregation(str, Enum):
    SUM = "SUM"
    AVG = "AVG"
    MIN = "MIN"
    MAX = "MAX"
    COUNT = "COUNT"


class FilterOperator(str, Enum):
    EQUALS = "equals"
    CONTAINS = "contains"
    GT = "gt"
    LT = "lt"
    BETWEEN = "between"
    IN = "in"


class ChartType(str, Enum):
    """Presentation hint passed through to the chart renderer."""
    TABLE = "TABLE"
    BAR = "BAR"
    LINE = "LINE"
    AREA = "AREA"
    PIE = "PIE"
    SCATTER = "SCATTER"
    COMPOSED = "COMPOSED"
    KPI = "KPI"
    FUNNEL = "FUNNEL"
    TREEMAP = "TREEMAP"


class ExportFormat(str, Enum):
    CSV = "csv"
    PDF = "pdf"
    XLSX = "xlsx"


class Trend(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class DatePreset(str, Enum):
    """Relative date windows offered by the report viewer."""
    TODAY = "today"
    YESTERDAY = "yesterday"
    THIS_WEEK = "this_week"
    LAST_7 = "last_7"
    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"
    THIS_YEAR = "this_year"
    CUSTOM = "custom"


# Sources whose records carry a 'date' timestamp
DATED_SOURCES = frozenset({DataSource.SALES, DataSource.PURCHASES, DataSource.EXPENSES})
