import csv
import io
from datetime import datetime

import pandas as pd
import pytest

from shopflux.exporter import ReportExporter
from shopflux.models.reporting import ReportConfig
from shopflux.models.types import ExportFormat


@pytest.fixture
def config():
    return ReportConfig.model_validate({
        "id": "ledger",
        "title": "Customer Ledger",
        "description": "Outstanding balances",
        "dataSource": "sales",
        "createdAt": 0,
        "fields": [
            {"id": "customerName", "label": "Customer", "type": "string"},
            {"id": "totalAmount", "label": "Total", "type": "currency"},
            {"id": "dateVal", "label": "Date", "type": "date"},
            {"id": "count", "label": "Orders", "type": "number"},
        ],
    })


@pytest.fixture
def rows():
    return [
        {"customerName": 'Shop "A", Ltd', "totalAmount": 123456.5, "dateVal": 1704448800000, "count": 2},
        {"customerName": "Bob", "totalAmount": None, "dateVal": None, "count": 1},
    ]


@pytest.fixture
def exporter():
    return ReportExporter(currency_symbol="Rs.", locale="en_IN")


def test_csv_round_trip(exporter, config, rows):
    text = exporter.to_csv(config, rows)
    parsed = list(csv.reader(io.StringIO(text)))

    assert parsed[0] == ["Customer", "Total", "Date", "Orders"]
    assert parsed[1] == ['Shop "A", Ltd', "Rs. 1,23,456.50", "05 Jan 2024", "2"]
    assert parsed[2] == ["Bob", "", "", "1"]
    assert len(parsed) == 1 + len(rows)


def test_csv_quotes_every_cell(exporter, config, rows):
    lines = exporter.to_csv(config, rows).splitlines()
    assert lines[0] == '"Customer","Total","Date","Orders"'
    assert lines[1].startswith('"Shop ""A"", Ltd",')


def test_csv_empty_rows_gives_header_only(exporter, config):
    assert exporter.to_csv(config, []) == '"Customer","Total","Date","Orders"\n'


def test_csv_uses_settings_defaults(config, rows, monkeypatch):
    from shopflux.config import get_settings
    monkeypatch.setenv("SHOPFLUX_CURRENCY_SYMBOL", "INR")
    get_settings.cache_clear()

    text = ReportExporter().to_csv(config, rows[:1])
    assert "INR 1,23,456.50" in text


def test_pdf_export(exporter, config, rows):
    data = exporter.export(config, rows, "pdf")
    assert isinstance(data, bytes)
    assert data.startswith(b"%PDF")


def test_pdf_export_many_rows_and_empty(exporter, config, rows):
    many = exporter.to_pdf(config, rows * 100, now=datetime(2024, 3, 1))
    empty = exporter.to_pdf(config, [], now=datetime(2024, 3, 1))
    assert many.startswith(b"%PDF")
    assert empty.startswith(b"%PDF")
    assert len(many) > len(empty)


def test_xlsx_export(exporter, config, rows):
    data = exporter.export(config, rows, ExportFormat.XLSX)
    df = pd.read_excel(io.BytesIO(data))

    assert list(df.columns) == ["Customer", "Total", "Date", "Orders"]
    assert len(df) == 2
    assert df.loc[0, "Customer"] == 'Shop "A", Ltd'
    assert df.loc[0, "Total"] == pytest.approx(123456.5)
    assert df.loc[1, "Total"] == 0
    assert pd.Timestamp(df.loc[0, "Date"]).date() == datetime(2024, 1, 5).date()


def test_save_writes_named_file(exporter, config, rows, tmp_path):
    path = exporter.save(config, rows, "csv", directory=tmp_path, now=datetime(2024, 3, 1, 9, 5))
    assert path.name == "Customer_Ledger_2024-03-01_0905.csv"
    assert path.read_text(encoding="utf-8") == exporter.to_csv(config, rows)


def test_save_defaults_to_export_dir(exporter, config, rows, tmp_path):
    path = exporter.save(config, rows, ExportFormat.XLSX, now=datetime(2024, 3, 1, 9, 5))
    assert path.parent == tmp_path / "exports"
    assert path.exists()


def test_save_reraises_os_errors(exporter, config, rows, tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    with pytest.raises(OSError):
        exporter.save(config, rows, "csv", directory=blocker / "sub")


def test_export_rejects_unknown_format(exporter, config, rows):
    with pytest.raises(ValueError):
        exporter.export(config, rows, "docx")


def test_non_numeric_currency_exports_as_zero(exporter):
    config = ReportConfig.model_validate({
        "id": "raw",
        "title": "Raw",
        "dataSource": "sales",
        "createdAt": 0,
        "fields": [{"id": "totalAmount", "label": "Total", "type": "currency"}],
    })
    text = exporter.to_csv(config, [{"totalAmount": "abc"}, {"totalAmount": "42"}])
    assert text == '"Total"\n"Rs. 0.00"\n"Rs. 42.00"\n'
