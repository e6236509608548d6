from datetime import date, datetime

import pytest

from shopflux.utils.conversion import is_numeric, parse_timestamp, stringify_key, to_epoch_ms, to_number
from shopflux.utils.formatting import format_currency, format_date, format_number, generate_download_filename


@pytest.mark.parametrize("val, expected", [
    (123456.5, "Rs. 1,23,456.50"),
    (100, "Rs. 100.00"),
    (1000, "Rs. 1,000.00"),
    (12345678.9, "Rs. 1,23,45,678.90"),
    (-1500, "-Rs. 1,500.00"),
    ("250.5", "Rs. 250.50"),
    (0, "Rs. 0.00"),
])
def test_format_currency_indian(val, expected):
    assert format_currency(val, "Rs.", "en_IN") == expected


def test_format_currency_other_locales():
    assert format_currency(1234.56, "€", "de_DE") == "1.234,56 €"
    assert format_currency(1234.56, "$", "en_US") == "$ 1,234.56"


def test_format_currency_invalid_input():
    assert format_currency(None) == "---"
    assert format_currency("n/a") == "n/a"


def test_format_number():
    assert format_number(1234567, "en_IN") == "12,34,567"
    assert format_number(1234.5, "en_US") == "1,234.5"
    assert format_number(None) == "0"
    assert format_number(-2.25) == "-2.25"


@pytest.mark.parametrize("val", [1704448800000, "2024-01-05T10:00:00Z", datetime(2024, 1, 5, 10), date(2024, 1, 5)])
def test_format_date_inputs(val):
    assert format_date(val, "en_IN") == "05 Jan 2024"


def test_format_date_locales():
    assert format_date("2024-01-05", "de_DE") == "05.01.2024"
    assert format_date("2024-01-05", "en_US") == "2024-01-05"
    assert format_date(None) == "---"
    assert format_date("soon") == "soon"


def test_generate_download_filename():
    now = datetime(2024, 3, 1, 9, 5)
    assert generate_download_filename("Sales by Customer", "pdf", now) == "Sales_by_Customer_2024-03-01_0905.pdf"
    assert generate_download_filename("", ".csv", now) == "report_2024-03-01_0905.csv"


@pytest.mark.parametrize("val, expected", [
    (5, 5.0),
    ("12.50", 12.5),
    (" 7 ", 7.0),
    ("", 0.0),
    ("abc", 0.0),
    (None, 0.0),
    (True, 0.0),
    (float("nan"), 0.0),
    ("inf", 0.0),
    ([1], 0.0),
])
def test_to_number(val, expected):
    assert to_number(val) == expected


def test_is_numeric():
    assert is_numeric("100")
    assert is_numeric(3.5)
    assert not is_numeric("2024-01")
    assert not is_numeric(None)
    assert not is_numeric(False)


def test_parse_timestamp_normalizes_to_utc():
    assert parse_timestamp("2024-01-05T15:30:00+05:30") == datetime(2024, 1, 5, 10, 0)
    assert parse_timestamp("2024-01-05T10:00:00Z") == datetime(2024, 1, 5, 10, 0)
    assert parse_timestamp(1704448800000) == datetime(2024, 1, 5, 10, 0)
    assert parse_timestamp("yesterday") is None
    assert parse_timestamp(None) is None


def test_to_epoch_ms():
    assert to_epoch_ms(datetime(2024, 1, 5, 10, 0)) == 1704448800000
    assert to_epoch_ms(datetime(1970, 1, 1, 0, 0, 0, 999000)) == 999


def test_stringify_key():
    assert stringify_key(2.0) == "2"
    assert stringify_key(2.5) == "2.5"
    assert stringify_key(None) == "Unknown"
    assert stringify_key("North") == "North"
