import re
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional, Union

from shopflux.utils.conversion import is_numeric, parse_timestamp, to_number

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _group_indian(digits: str) -> str:
    """Indian digit grouping: 12,34,567."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(val: Union[float, Decimal, str, None], currency: str = "Rs.", locale: str = "en_IN") -> str:
    """
    Formats a numeric value as a locale-specific currency string.
    en_IN: Rs. 1,23,456.50
    de: 1.234,56 €
    en: € 1,234.56
    """
    if val is None:
        return "---"

    if not is_numeric(val):
        return str(val)
    amount = to_number(val)

    locale_clean = locale.replace("-", "_")
    lang = locale_clean.split("_")[0].lower()

    if locale_clean.upper().endswith("_IN"):
        sign = "-" if amount < 0 else ""
        whole, frac = f"{abs(amount):.2f}".split(".")
        return f"{sign}{currency} {_group_indian(whole)}.{frac}".strip()

    s = f"{amount:,.2f}"
    if lang == "de":
        formatted = s.replace(",", "TEMP").replace(".", ",").replace("TEMP", ".")
        return f"{formatted} {currency}".strip()
    if lang == "en":
        return f"{currency} {s}".strip() if currency != "EUR" else f"{s} EUR"
    return f"{s} {currency}".strip()


def format_number(val: Any, locale: str = "en_IN") -> str:
    """Formats a number with at most two decimals and locale grouping."""
    if val is None or val == "":
        return "0"
    amount = to_number(val)
    text = f"{abs(amount):.2f}".rstrip("0").rstrip(".")
    whole, _, frac = text.partition(".")
    if locale.replace("-", "_").upper().endswith("_IN"):
        whole = _group_indian(whole)
    else:
        whole = f"{int(whole):,}"
    sign = "-" if amount < 0 else ""
    return f"{sign}{whole}.{frac}" if frac else f"{sign}{whole}"


def format_date(val: Any, locale: str = "en_IN") -> str:
    """Formats a timestamp (epoch ms, ISO string, datetime) as a calendar date."""
    if val is None or val == "":
        return "---"

    dt: Optional[datetime] = parse_timestamp(val)
    if dt is None:
        return str(val)

    lang = locale.replace("-", "_").split("_")[0].lower()
    if lang == "de":
        return dt.strftime("%d.%m.%Y")
    if locale.replace("-", "_").upper().endswith(("_IN", "_GB")):
        return f"{dt.day:02d} {_MONTHS[dt.month - 1]} {dt.year}"
    return dt.strftime("%Y-%m-%d")  # ISO standard for EN


def generate_download_filename(title: str, extension: str, now: Optional[datetime] = None) -> str:
    """Builds '<slug>_<YYYY-MM-DD_HHMM>.<ext>' from a report title."""
    now = now or datetime.now()
    slug = re.sub(r"[^A-Za-z0-9]+", "_", title or "").strip("_") or "report"
    return f"{slug}_{now.strftime('%Y-%m-%d_%H%M')}.{extension.lstrip('.')}"
