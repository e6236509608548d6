import json

import pytest

from main import main


@pytest.fixture
def data_file(tmp_path, shop_data):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(shop_data), encoding="utf-8")
    return path


def test_list_templates(capsys):
    assert main(["list"]) == 0
    out = capsys.readouterr().out
    assert "sales_by_customer" in out
    assert "customer_dues" in out


def test_list_includes_directory_templates(tmp_path, capsys):
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "mine.json").write_text(json.dumps({
        "id": "my_report",
        "title": "Mine",
        "dataSource": "expenses",
        "fields": [{"id": "amount", "label": "Amount", "type": "currency"}],
    }), encoding="utf-8")

    assert main(["--templates", str(templates), "list"]) == 0
    assert "my_report" in capsys.readouterr().out


def test_run_prints_csv(data_file, capsys):
    assert main(["run", "--data", str(data_file), "--report", "sales_by_customer"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == '"Customer","Total Sales"'
    assert '"Alice","Rs. 100.00"' in lines


def test_run_unknown_report(data_file, capsys):
    assert main(["run", "--data", str(data_file), "--report", "nope"]) == 2
    assert "Unknown report" in capsys.readouterr().err


def test_run_with_custom_period(data_file, capsys):
    args = ["run", "--data", str(data_file), "--report", "sales_by_customer",
            "--preset", "custom", "--start", "2024-02-01", "--end", "2024-02-29"]
    assert main(args) == 0
    out = capsys.readouterr().out
    assert '"Unknown","Rs. 100.00"' in out
    assert "Alice" not in out


def test_run_empty_result(data_file, capsys):
    args = ["run", "--data", str(data_file), "--preset", "custom", "--start", "2020-01-01", "--end", "2020-01-31"]
    assert main(args) == 0
    assert "No data for this report." in capsys.readouterr().out


def test_run_exports_file(data_file, tmp_path, capsys):
    out_dir = tmp_path / "out"
    args = ["run", "--data", str(data_file), "--report", "category_performance", "--export", "xlsx", "--out", str(out_dir)]
    assert main(args) == 0
    files = list(out_dir.glob("Stock_by_Category_*.xlsx"))
    assert len(files) == 1
    assert "Saved" in capsys.readouterr().out


def test_run_with_config_file(data_file, tmp_path, capsys):
    config = tmp_path / "report.json"
    config.write_text(json.dumps({
        "id": "rent",
        "title": "Rent",
        "dataSource": "expenses",
        "fields": [{"id": "category", "label": "Category"}, {"id": "amount", "label": "Amount", "type": "number"}],
        "filters": [{"fieldId": "category", "operator": "equals", "value": "Rent"}],
    }), encoding="utf-8")

    assert main(["run", "--data", str(data_file), "--config", str(config)]) == 0
    assert capsys.readouterr().out.splitlines() == ['"Category","Amount"', '"Rent","1000"']


def test_metrics(data_file, capsys):
    assert main(["metrics", "--data", str(data_file), "--window", "7"]) == 0
    out = capsys.readouterr().out
    assert "Revenue trend:" in out
    assert "Customer LTV:" in out
    assert "Inventory turnover:" in out
    assert "Busiest slot:       Thursday Morning (Rs. 100.00)" in out


def test_run_prints_chart_payload(data_file, capsys):
    assert main(["run", "--data", str(data_file), "--report", "expenses_by_category", "--chart"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["chartType"] == "TREEMAP"
    assert payload["data"] == [{"name": "Rent", "value": 1000.0}, {"name": "Utilities", "value": 250.0}]


@pytest.mark.parametrize("extra", [[], ["--start", "2024-01-01"], ["--start", "2024-01-01", "--end", "someday"]])
def test_run_custom_period_needs_valid_dates(data_file, capsys, extra):
    assert main(["run", "--data", str(data_file), "--preset", "custom", *extra]) == 2
    assert "--start and --end" in capsys.readouterr().err
