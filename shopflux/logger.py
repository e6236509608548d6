"""
------------------------------------------------------------------------------
Project:        ShopFlux
File:           shopflux/logger.py
Version:        1.0.0
Producer:       ShopFlux Team
Generator:      Antigravity
Description:    Logging for the reporting engine. Every pipeline stage logs
                under the 'shopflux' namespace ('shopflux.filters',
                'shopflux.reporting.runs', ...) so single stages can be
                switched to DEBUG while the rest stays quiet.
------------------------------------------------------------------------------
"""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

APP_LOGGER_NAME = "shopflux"

LOG_FORMAT = "%(asctime)s [%(levelname).4s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: str) -> Optional[int]:
    """Numeric level for a name like 'debug'; None for unknown names."""
    value = getattr(logging, str(level).strip().upper(), None)
    return value if isinstance(value, int) else None


def _build_handlers(log_file: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(str(path), encoding="utf-8"))
    return handlers


def setup_logging(
    level: str = "WARNING",
    log_file: Optional[str] = None,
    component_levels: Optional[Dict[str, str]] = None
) -> None:
    """
    Configures the 'shopflux' logger tree. Safe to call repeatedly: handlers
    from an earlier call are closed and replaced.

    Args:
        level: Level of the whole tree (DEBUG, INFO, WARNING, ERROR).
        log_file: Optional file receiving the same records as the console.
        component_levels: Per-stage overrides, e.g. {'filters': 'DEBUG'}.
    """
    app_logger = logging.getLogger(APP_LOGGER_NAME)
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()

    app_logger.setLevel(_resolve_level(level) or logging.WARNING)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    for handler in _build_handlers(log_file):
        handler.setFormatter(formatter)
        app_logger.addHandler(handler)

    for component, component_level in (component_levels or {}).items():
        set_component_level(component, component_level)


def get_logger(name: str) -> logging.Logger:
    """Logger of one engine component; 'filters' and 'shopflux.filters' are the same logger."""
    if name == APP_LOGGER_NAME or name.startswith(APP_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")


def set_component_level(component: str, level: str) -> None:
    """Overrides the level of one component; unknown level names are ignored."""
    numeric_level = _resolve_level(level)
    if numeric_level is None:
        return
    get_logger(component).setLevel(numeric_level)


def log_report_run(report_id: str, data_source: str, input_count: int, output_count: int, grouped: bool = False) -> None:
    """
    One trace line per report execution on 'shopflux.reporting.runs'.
    Only emitted when that logger is enabled for DEBUG.
    """
    runs = get_logger("reporting.runs")
    if not runs.isEnabledFor(logging.DEBUG):
        return
    msg = f"RUN: {report_id} | SOURCE: {data_source} | IN: {input_count} | OUT: {output_count}"
    if grouped:
        msg += " | GROUPED"
    runs.debug(msg)
