"""
------------------------------------------------------------------------------
Project:        ShopFlux
File:           main.py
Version:        1.0.0
Producer:       ShopFlux Team
Generator:      Antigravity
Description:    Command line entry point. Loads a JSON snapshot of the record
                collections, runs report templates or configurations, prints
                business metrics and writes exports.
------------------------------------------------------------------------------
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from shopflux.analytics import (
    HEATMAP_SLOTS,
    calculate_clv,
    calculate_inventory_turnover,
    calculate_revenue_forecast,
    calculate_sales_heatmap,
)
from shopflux.charts import build_chart_payload
from shopflux.config import get_settings
from shopflux.exporter import ReportExporter
from shopflux.logger import get_logger, setup_logging
from shopflux.models.records import RecordCollections
from shopflux.models.reporting import ReportConfig
from shopflux.models.types import DatePreset, ExportFormat
from shopflux.reporting import ReportEngine, ReportRegistry, resolve_date_range, with_date_range
from shopflux.utils.formatting import format_currency, format_number


_WEEKDAYS = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


def load_collections(path: str) -> RecordCollections:
    with open(path, "r", encoding="utf-8") as f:
        return RecordCollections.from_mapping(json.load(f))


def _cmd_list(args: argparse.Namespace, registry: ReportRegistry) -> int:
    for report in registry.list_reports():
        print(f"{report.id:<24} {report.data_source.value:<10} {report.title}")
    return 0


def _cmd_run(args: argparse.Namespace, registry: ReportRegistry) -> int:
    logger = get_logger("cli")
    if args.config:
        with open(args.config, "r", encoding="utf-8") as f:
            config = ReportConfig.model_validate(json.load(f))
    else:
        config = registry.get_report(args.report)
        if config is None:
            logger.error(f"Unknown report template '{args.report}'")
            print(f"Unknown report '{args.report}'. Use 'list' to see available templates.", file=sys.stderr)
            return 2

    if args.preset:
        try:
            start, end = resolve_date_range(DatePreset(args.preset), custom_start=args.start, custom_end=args.end)
        except ValueError as e:
            logger.error(f"Invalid date range: {e}")
            print("A custom period needs valid --start and --end dates (YYYY-MM-DD).", file=sys.stderr)
            return 2
        config = with_date_range(config, start, end)

    collections = load_collections(args.data)
    result = ReportEngine.process(collections, config)

    if result.is_empty:
        print("No data for this report.")

    if args.chart:
        print(json.dumps(build_chart_payload(result), indent=2, default=str))
        return 0

    exporter = ReportExporter()
    if args.export:
        path = exporter.save(config, result.rows, ExportFormat(args.export), directory=args.out)
        print(f"Saved {path}")
    elif not result.is_empty:
        print(exporter.to_csv(config, result.rows), end="")
    return 0


def _cmd_metrics(args: argparse.Namespace, registry: ReportRegistry) -> int:
    collections = load_collections(args.data)
    settings = get_settings()

    forecast = calculate_revenue_forecast(
        collections.sales,
        window_days=args.window or settings.forecast_window_days,
        threshold=settings.trend_threshold,
    )
    clv = calculate_clv(collections.sales, collections.customers)
    turnover = calculate_inventory_turnover(collections.sales, collections.products)
    heatmap = calculate_sales_heatmap(collections.sales)

    def money(val: float) -> str:
        return format_currency(val, settings.currency_symbol, settings.locale)

    print(f"Revenue trend:      {forecast.trend.value} (slope {format_number(forecast.slope, settings.locale)}/day, "
          f"growth {forecast.growth_rate:.1%})")
    for point in forecast.project(settings.forecast_horizon_days):
        print(f"  {point.day.isoformat()}  {money(point.revenue)}")
    print(f"Customer LTV:       {money(clv.clv)} (AOV {money(clv.avg_order_value)}, "
          f"freq {format_number(clv.purchase_frequency, settings.locale)}, "
          f"lifespan {format_number(clv.avg_lifespan_years, settings.locale)}y)")
    print(f"Inventory turnover: {format_number(turnover.turnover_ratio, settings.locale)}x "
          f"({format_number(round(turnover.days_to_sell), settings.locale)} days to sell)")

    day, slot = max(((d, s) for d in range(7) for s in range(len(HEATMAP_SLOTS))), key=lambda ds: heatmap[ds[0]][ds[1]])
    if heatmap[day][slot] > 0:
        print(f"Busiest slot:       {_WEEKDAYS[day]} {HEATMAP_SLOTS[slot]} ({money(heatmap[day][slot])})")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    ShopFlux Entry Point.
    Initializes logging and templates and dispatches the sub-command.
    """
    parser = argparse.ArgumentParser(description="ShopFlux - Business Reports & Analytics")
    parser.add_argument("--templates", type=str, help="Directory with additional report template JSON files")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List available report templates")

    run = sub.add_parser("run", help="Run a report")
    run.add_argument("--data", required=True, help="JSON snapshot of the record collections")
    run.add_argument("--report", default="sales_by_customer", help="Template id")
    run.add_argument("--config", help="Report configuration JSON file (overrides --report)")
    run.add_argument("--preset", choices=[p.value for p in DatePreset], help="Restrict dated reports to a period")
    run.add_argument("--start", help="Custom period start (YYYY-MM-DD)")
    run.add_argument("--end", help="Custom period end (YYYY-MM-DD)")
    run.add_argument("--export", choices=[f.value for f in ExportFormat], help="Write the result to a file")
    run.add_argument("--out", help="Export directory")
    run.add_argument("--chart", action="store_true", help="Print the chart payload as JSON instead of rows")

    metrics = sub.add_parser("metrics", help="Print forecast, CLV and inventory turnover")
    metrics.add_argument("--data", required=True, help="JSON snapshot of the record collections")
    metrics.add_argument("--window", type=int, help="Forecast window in days")

    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        component_levels=settings.get_log_components(),
    )

    registry = ReportRegistry()
    templates_dir = args.templates or settings.templates_dir
    if templates_dir and Path(templates_dir).is_dir():
        registry.load_from_directory(templates_dir)

    handlers = {"list": _cmd_list, "run": _cmd_run, "metrics": _cmd_metrics}
    return handlers[args.command](args, registry)


if __name__ == "__main__":
    sys.exit(main())
