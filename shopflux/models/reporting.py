from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from shopflux.models.types import Aggregation, ChartType, DataSource, FieldType


def _now_ms() -> int:
    return int(datetime.now().timestamp() * 1000)


class ReportField(BaseModel):
    """One reportable attribute of a data source."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, use_enum_values=False)

    id: str
    label: str
    type: FieldType = FieldType.STRING
    aggregation: Optional[Aggregation] = None  # only used when grouping


class ReportFilter(BaseModel):
    # plain string; unknown operators are rejected at evaluation time
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    field_id: str = Field(alias="fieldId")
    operator: str
    value: Any = None


class ReportConfig(BaseModel):
    """Complete, reproducible description of one report."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str
    description: Optional[str] = None
    data_source: DataSource = Field(alias="dataSource")
    fields: List[ReportField] = Field(default_factory=list)
    filters: List[ReportFilter] = Field(default_factory=list)
    group_by: Optional[str] = Field(default=None, alias="groupBy")
    chart_type: ChartType = Field(default=ChartType.TABLE, alias="chartType")
    created_at: int = Field(default_factory=_now_ms, alias="createdAt")

    def field(self, field_id: str) -> Optional[ReportField]:
        for f in self.fields:
            if f.id == field_id:
                return f
        return None


class ReportResult(BaseModel):
    """Rows of one report run paired with the field catalog that produced them."""
    config: ReportConfig
    fields: List[ReportField]
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    grouped: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.rows
