import logging

import pytest
from datetime import datetime

from shopflux.config import get_settings
from shopflux.models.records import RecordCollections
from shopflux.reporting import ReportRegistry

NOW = datetime(2024, 3, 1, 12, 0)


@pytest.fixture(autouse=True)
def force_indian_locale(request, monkeypatch, tmp_path):
    """Ensures tests run with the default en_IN formatting regardless of the host environment."""
    if "localized" in request.keywords:
        yield
        return

    monkeypatch.setenv("SHOPFLUX_LOCALE", "en_IN")
    monkeypatch.setenv("SHOPFLUX_CURRENCY_SYMBOL", "Rs.")
    monkeypatch.setenv("SHOPFLUX_EXPORT_DIR", str(tmp_path / "exports"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def clean_registry():
    ReportRegistry().reset()
    yield
    ReportRegistry().reset()


@pytest.fixture(autouse=True)
def reset_logging():
    """Detaches handlers and level overrides installed by setup_logging during a test."""
    yield
    root = logging.getLogger("shopflux")
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.NOTSET)
    for name, logger in list(logging.Logger.manager.loggerDict.items()):
        if name.startswith("shopflux.") and isinstance(logger, logging.Logger):
            logger.setLevel(logging.NOTSET)


def pytest_configure(config):
    config.addinivalue_line("markers", "localized: mark test to run with real environment settings")


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def shop_data():
    """A small shop: three sales (one referencing deleted entities), two purchases, two expenses."""
    return {
        "customers": [
            {"id": "c1", "name": "Alice", "area": "North", "priceTier": "Wholesale", "creditLimit": 1000},
            {"id": "c2", "name": "Bob", "area": "South"},
            {"id": "c3", "name": "Carol", "area": "North"},
        ],
        "suppliers": [
            {"id": "sup1", "name": "Acme Traders"},
        ],
        "products": [
            {"id": "p1", "name": "Rice", "category": "Grocery", "purchasePrice": 40, "salePrice": 50, "quantity": 100},
            {"id": "p2", "name": "Oil", "category": "Grocery", "purchasePrice": 100, "salePrice": 120, "quantity": 10,
             "brand": "Sunny"},
            {"id": "p3", "name": "Soap", "category": "Personal Care", "purchasePrice": 0, "salePrice": 20, "quantity": 5},
        ],
        "sales": [
            {
                "id": "s1", "date": "2024-01-05T10:00:00Z", "customerId": "c1", "totalAmount": 100,
                "gstAmount": 5, "discount": 0,
                "items": [{"productId": "p1", "quantity": 2, "price": 50}],
                "payments": [{"method": "CASH", "amount": 100}],
            },
            {
                "id": "s2", "date": "2024-01-20T18:30:00Z", "customerId": "c2", "totalAmount": 100,
                "items": [{"productId": "p1", "quantity": 2, "price": 50}],
                "payments": [{"method": "UPI", "amount": 60}],
            },
            {
                "id": "s3", "date": "2024-02-01T09:00:00Z", "customerId": "c-deleted", "totalAmount": 100,
                "items": [{"productId": "p-gone", "quantity": 3, "price": 10}],
            },
        ],
        "purchases": [
            {"id": "pu1", "date": "2024-01-10T08:00:00Z", "supplierId": "sup1", "totalAmount": 500,
             "paymentDueDates": ["2024-02-10"]},
            {"id": "pu2", "date": "2024-02-15T08:00:00Z", "supplierId": "sup-x", "totalAmount": 200},
        ],
        "expenses": [
            {"id": "e1", "date": "2024-01-06T11:00:00Z", "category": "Rent", "amount": 1000},
            {"id": "e2", "date": "2024-02-03T11:00:00Z", "category": "Utilities", "amount": 250},
        ],
    }


@pytest.fixture
def collections(shop_data):
    return RecordCollections.from_mapping(shop_data)
