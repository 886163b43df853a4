"""Shared pytest fixtures for pricing tests."""

from datetime import datetime
from decimal import Decimal

import pytest
import structlog

from storefront_pricing.checkout import CatalogEntry, InMemoryCatalog
from storefront_pricing.promo import PromoCode

from .fixtures import NOW


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo configure_logging calls so log capture sees every level."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def catalog() -> InMemoryCatalog:
    """Products across three categories, one with a bulk variant."""
    return InMemoryCatalog(
        [
            CatalogEntry("arduino", "Arduino Uno", Decimal("25.00"), sku="LAB-ARD001",
                         category_id="boards", stock_quantity=10),
            CatalogEntry("arduino", "Arduino Uno (bulk)", Decimal("22.50"), sku="LAB-ARD002",
                         category_id="boards", variant_id="bulk", stock_quantity=100),
            CatalogEntry("resistor", "Resistor pack", Decimal("4.99"), sku="LAB-RES001",
                         category_id="components", stock_quantity=0, allow_backorder=True),
            CatalogEntry("sensor", "Temperature sensor", Decimal("12.00"), sku="LAB-SEN001",
                         category_id="components", stock_quantity=3),
            CatalogEntry("legacy", "Legacy shield", Decimal("9.00"), sku="LAB-LEG001",
                         category_id="boards", stock_quantity=5, is_active=False),
            CatalogEntry("soldout", "Sold out kit", Decimal("40.00"), sku="LAB-SOLD01",
                         category_id="kits", stock_quantity=0),
        ]
    )


@pytest.fixture
def promo_factory():
    """Build a PromoCode with defaults overridden per test."""

    def make(**overrides) -> PromoCode:
        fields = {
            "code": "save10",
            "discount_type": "percentage",
            "discount_value": Decimal("10"),
            "id": "promo-1",
        }
        fields.update(overrides)
        return PromoCode(**fields)

    return make
