from datetime import date
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from shopflux.models.types import Trend


class DailyRevenue(BaseModel):
    day: date
    revenue: float


class RevenueForecast(BaseModel):
    """Least-squares trend line fitted over a trailing window of daily revenue."""
    model_config = ConfigDict(frozen=True)

    slope: float
    intercept: float
    trend: Trend
    growth_rate: float
    window_days: int
    history: List[DailyRevenue] = Field(default_factory=list)

    def predict(self, x: float) -> float:
        """Evaluates the trend line at day index x (0 = first day of the window)."""
        return self.slope * x + self.intercept

    def project(self, days: int) -> List[DailyRevenue]:
        """Predicted revenue for the days following the window, clamped at zero."""
        if not self.history:
            return []
        last_day = self.history[-1].day
        points: List[DailyRevenue] = []
        for i in range(1, days + 1):
            value = max(0.0, self.predict(self.window_days - 1 + i))
            points.append(DailyRevenue(day=date.fromordinal(last_day.toordinal() + i), revenue=value))
        return points


class CustomerLifetimeValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    clv: float = 0.0
    avg_order_value: float = 0.0
    purchase_frequency: float = 0.0
    avg_lifespan_years: float = 1.0


class InventoryTurnover(BaseModel):
    model_config = ConfigDict(frozen=True)

    cogs: float = 0.0
    current_inventory_value: float = 0.0
    turnover_ratio: float = 0.0
    days_to_sell: float = 0.0
