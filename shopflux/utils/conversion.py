"""
------------------------------------------------------------------------------
Project:        ShopFlux
File:           shopflux/utils/conversion.py
Version:        1.0.0
Producer:       ShopFlux Team
Generator:      Antigravity
Description:    Tolerant coercion helpers shared by the reporting pipeline.
                Numbers never raise (bad input becomes 0) and timestamps are
                normalized to naive UTC datetimes / epoch milliseconds.
------------------------------------------------------------------------------
"""

import calendar
import math
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

MS_PER_DAY = 24 * 60 * 60 * 1000


def to_number(val: Any) -> float:
    """
    Coerces a raw record value to float.
    None, empty or non-numeric strings, NaN and infinities become 0.0.
    """
    if val is None or isinstance(val, bool):
        return 0.0
    if isinstance(val, (int, float, Decimal)):
        num = float(val)
    elif isinstance(val, str):
        s = val.strip()
        if not s:
            return 0.0
        try:
            num = float(Decimal(s))
        except (InvalidOperation, ValueError):
            return 0.0
    else:
        return 0.0
    if math.isnan(num) or math.isinf(num):
        return 0.0
    return num


def is_numeric(val: Any) -> bool:
    """True for real numbers and strings that parse as a finite number."""
    if val is None or isinstance(val, bool):
        return False
    if isinstance(val, (int, float, Decimal)):
        return not (isinstance(val, float) and (math.isnan(val) or math.isinf(val)))
    if isinstance(val, str) and val.strip():
        try:
            num = float(Decimal(val.strip()))
        except (InvalidOperation, ValueError):
            return False
        return not (math.isnan(num) or math.isinf(num))
    return False


def parse_timestamp(val: Any) -> Optional[datetime]:
    """
    Parses a record timestamp into a naive UTC datetime.

    Accepts datetime/date objects, epoch milliseconds and ISO-8601 strings
    (with or without offset, 'Z' suffix allowed). Returns None when the value
    cannot be interpreted.
    """
    if val is None or val == "" or isinstance(val, bool):
        return None

    if isinstance(val, datetime):
        dt = val
    elif isinstance(val, date):
        return datetime.combine(val, time())
    elif isinstance(val, (int, float)):
        try:
            dt = datetime.fromtimestamp(float(val) / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(val, str):
        s = val.strip()
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(s)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def to_epoch_ms(dt: datetime) -> int:
    """Epoch milliseconds of a naive UTC datetime."""
    return calendar.timegm(dt.timetuple()) * 1000 + dt.microsecond // 1000


def utc_now() -> datetime:
    """Current time as naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def stringify_key(val: Any) -> str:
    """Group key representation: integral floats lose their '.0', missing values become 'Unknown'."""
    if val is None:
        return "Unknown"
    if isinstance(val, float) and val.is_integer():
        return str(int(val))
    return str(val)


def is_hashable(val: Any) -> bool:
    """True if val can key a dict; record ids of unexpected shapes (lists, dicts) cannot."""
    try:
        hash(val)
    except TypeError:
        return False
    return True
