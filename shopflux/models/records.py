"""
------------------------------------------------------------------------------
Project:        ShopFlux
File:           shopflux/models/records.py
Version:        1.0.0
Producer:       ShopFlux Team
Generator:      Antigravity
Description:    Read-only snapshot of the application's record collections.
                Records stay plain mappings; their shape is owned by the
                surrounding application.
------------------------------------------------------------------------------
"""

from typing import Any, Dict, List, Mapping

from pydantic import BaseModel, ConfigDict, Field

from shopflux.models.types import DataSource

Record = Dict[str, Any]


class RecordCollections(BaseModel):
    """
    The named collections a report run reads from.
    The engine never mutates these lists or their records.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    sales: List[Record] = Field(default_factory=list)
    purchases: List[Record] = Field(default_factory=list)
    products: List[Record] = Field(default_factory=list, alias="inventory")
    customers: List[Record] = Field(default_factory=list)
    expenses: List[Record] = Field(default_factory=list)
    suppliers: List[Record] = Field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RecordCollections":
        """Builds a snapshot from an app-state like mapping; missing or null collections become empty."""
        cleaned = {k: (v or []) for k, v in data.items() if isinstance(v, (list, tuple)) or v is None}
        return cls.model_validate(cleaned)

    def for_source(self, source: DataSource) -> List[Record]:
        if source == DataSource.SALES:
            return self.sales
        if source == DataSource.PURCHASES:
            return self.purchases
        if source == DataSource.INVENTORY:
            return self.products
        if source == DataSource.CUSTOMERS:
            return self.customers
        if source == DataSource.EXPENSES:
            return self.expenses
        return []
