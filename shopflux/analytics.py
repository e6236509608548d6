"""
------------------------------------------------------------------------------
Project:        ShopFlux
File:           shopflux/analytics.py
Version:        1.0.0
Producer:       ShopFlux Team
Generator:      Antigravity
Description:    Statistical routines over the raw collections: revenue trend
                forecast, customer lifetime value, inventory turnover and the
                weekly sales heatmap.
------------------------------------------------------------------------------
"""

import math
from datetime import datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional, Sequence

from shopflux.logger import get_logger
from shopflux.models.metrics import CustomerLifetimeValue, DailyRevenue, InventoryTurnover, RevenueForecast
from shopflux.models.types import Trend
from shopflux.utils.conversion import MS_PER_DAY, is_hashable, parse_timestamp, to_epoch_ms, to_number, utc_now

logger = get_logger("analytics")

TREND_THRESHOLD = 0.01
DEFAULT_WINDOW_DAYS = 30
UNRESOLVED_COST_RATIO = 0.7

# Heatmap columns: Morning [6,12), Afternoon [12,17), Evening [17,21), Night
HEATMAP_SLOTS = ("Morning", "Afternoon", "Evening", "Night")


def _linear_fit(ys: Sequence[float]) -> tuple:
    """Ordinary least squares over x = 0..n-1; returns (slope, intercept)."""
    n = len(ys)
    if n == 0:
        return 0.0, 0.0
    sum_x = sum(range(n))
    sum_y = sum(ys)
    sum_xy = sum(x * y for x, y in enumerate(ys))
    sum_xx = sum(x * x for x in range(n))

    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        denominator = 1
    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n
    return slope, intercept


def calculate_revenue_forecast(
    sales: Sequence[Mapping[str, Any]],
    window_days: int = DEFAULT_WINDOW_DAYS,
    now: Optional[datetime] = None,
    threshold: float = TREND_THRESHOLD,
) -> RevenueForecast:
    """
    Fits a linear trend over daily revenue of the trailing window.

    Args:
        sales: Raw sale records ('date', 'totalAmount').
        window_days: Number of calendar days ending today.
        now: Reference time (defaults to current UTC time).
        threshold: Minimum absolute slope (revenue per day) to report a trend.

    Returns:
        RevenueForecast with slope, intercept, trend, growth rate and the daily history.
    """
    window_days = max(1, int(window_days))
    now = parse_timestamp(now) if now is not None else utc_now()
    first_day = now.date() - timedelta(days=window_days - 1)
    days = [first_day + timedelta(days=i) for i in range(window_days)]

    daily: Dict[Any, float] = {d: 0.0 for d in days}
    for sale in sales:
        dt = parse_timestamp(sale.get("date"))
        if dt is None:
            continue
        key = dt.date()
        if key in daily:
            daily[key] += to_number(sale.get("totalAmount"))

    ys = [daily[d] for d in days]
    slope, intercept = _linear_fit(ys)

    if slope > threshold:
        trend = Trend.UP
    elif slope < -threshold:
        trend = Trend.DOWN
    else:
        trend = Trend.STABLE

    mean_y = sum(ys) / window_days
    growth_rate = (slope * window_days) / mean_y if mean_y != 0 else 0.0

    logger.debug(f"Forecast over {window_days} days: slope={slope:.4f} trend={trend.value}")
    return RevenueForecast(
        slope=slope,
        intercept=intercept,
        trend=trend,
        growth_rate=growth_rate,
        window_days=window_days,
        history=[DailyRevenue(day=d, revenue=daily[d]) for d in days],
    )


def calculate_clv(sales: Sequence[Mapping[str, Any]], customers: Sequence[Mapping[str, Any]]) -> CustomerLifetimeValue:
    """
    Customer lifetime value = average order value x purchase frequency x
    average lifespan in years. Lifespan defaults to one year when no
    customer has placed more than one order.
    """
    if not sales:
        return CustomerLifetimeValue()

    total_revenue = sum(to_number(s.get("totalAmount")) for s in sales)
    order_count = len(sales)
    avg_order_value = total_revenue / order_count

    distinct_customers = {s.get("customerId") for s in sales if is_hashable(s.get("customerId"))}
    purchase_frequency = order_count / (len(distinct_customers) or 1)

    dates_by_customer: Dict[Any, List[datetime]] = {}
    for s in sales:
        cid = s.get("customerId")
        dt = parse_timestamp(s.get("date"))
        if cid is None or dt is None or not is_hashable(cid):
            continue
        dates_by_customer.setdefault(cid, []).append(dt)

    lifespans: List[int] = []
    for c in customers:
        dates = dates_by_customer.get(c.get("id")) if is_hashable(c.get("id")) else None
        if not dates or len(dates) < 2:
            continue
        diff_ms = to_epoch_ms(max(dates)) - to_epoch_ms(min(dates))
        lifespans.append(math.ceil(diff_ms / MS_PER_DAY))

    avg_lifespan_years = (sum(lifespans) / len(lifespans)) / 365 if lifespans else 1.0

    return CustomerLifetimeValue(
        clv=avg_order_value * purchase_frequency * avg_lifespan_years,
        avg_order_value=avg_order_value,
        purchase_frequency=purchase_frequency,
        avg_lifespan_years=avg_lifespan_years,
    )


def calculate_inventory_turnover(
    sales: Sequence[Mapping[str, Any]],
    products: Sequence[Mapping[str, Any]],
) -> InventoryTurnover:
    """
    Turnover ratio = cost of goods sold / current inventory value.
    Line items whose product no longer exists are costed at 70% of their sale price.
    """
    cost_by_product = {p.get("id"): to_number(p.get("purchasePrice")) for p in products if is_hashable(p.get("id"))}

    cogs = 0.0
    for sale in sales:
        items = sale.get("items")
        if not isinstance(items, (list, tuple)):
            continue
        for item in items:
            if not isinstance(item, Mapping):
                continue
            pid = item.get("productId")
            if is_hashable(pid) and pid in cost_by_product:
                cost = cost_by_product[pid]
            else:
                cost = to_number(item.get("price")) * UNRESOLVED_COST_RATIO
            cogs += cost * to_number(item.get("quantity"))

    inventory_value = sum(to_number(p.get("quantity")) * to_number(p.get("purchasePrice")) for p in products)
    ratio = cogs / inventory_value if inventory_value > 0 else 0.0
    days_to_sell = 365 / ratio if ratio > 0 else 0.0

    return InventoryTurnover(
        cogs=cogs,
        current_inventory_value=inventory_value,
        turnover_ratio=ratio,
        days_to_sell=days_to_sell,
    )


def calculate_sales_heatmap(sales: Sequence[Mapping[str, Any]]) -> List[List[float]]:
    """
    Revenue by day of week (rows, Sunday = 0) and time slot (columns, see HEATMAP_SLOTS).
    """
    heatmap = [[0.0] * len(HEATMAP_SLOTS) for _ in range(7)]
    for sale in sales:
        dt = parse_timestamp(sale.get("date"))
        if dt is None:
            continue
        row = (dt.weekday() + 1) % 7
        hour = dt.hour
        if 6 <= hour < 12:
            slot = 0
        elif 12 <= hour < 17:
            slot = 1
        elif 17 <= hour < 21:
            slot = 2
        else:
            slot = 3
        heatmap[row][slot] += to_number(sale.get("totalAmount"))
    return heatmap
