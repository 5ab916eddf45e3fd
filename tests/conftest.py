"""Shared fixtures for resultobject tests."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

import pytest

from resultobject.config import reset_settings
from resultobject.i18n.catalog import DictMessageLoader, ResourceCatalog
from resultobject.i18n.locale import reset_locale
from resultobject.resources import reset_catalogs
from resultobject.validation import Validator
from resultobject.verbosity import set_default_verbosity


@pytest.fixture(autouse=True)
def clean_state(monkeypatch):
    """Isolate settings, locale and verbosity between tests."""
    for key in list(os.environ):
        if key.startswith("RESULTOBJECT_"):
            monkeypatch.delenv(key, raising=False)

    reset_settings()
    reset_catalogs()
    reset_locale()
    set_default_verbosity(None)
    yield
    reset_settings()
    reset_catalogs()
    reset_locale()
    set_default_verbosity(None)


@pytest.fixture
def app_messages() -> ResourceCatalog:
    """Application catalog with a neutral and a French locale."""
    return ResourceCatalog(
        "app",
        loaders=[
            DictMessageLoader(
                {
                    "": {
                        "greeting": "Hello {Name}",
                        "order_total": "Order {orderId} totals {Amount:F2}",
                        "cache_stale": "The cache is stale.",
                        "needs_token": "Value: {missing}",
                    },
                    "fr": {
                        "greeting": "Bonjour {Name}",
                        "order_total": "La commande {orderId} s'élève à {Amount:F2}",
                    },
                }
            )
        ],
    )


@pytest.fixture
def validator() -> Validator:
    return Validator()


@dataclass
class ValidationSource:
    int_property: int = 0
    other_int_property: int = 0
    null_int_property: Optional[int] = None
    float_property: float = 0.0
    other_float_property: float = 0.0
    decimal_property: Decimal = Decimal("0")
    other_decimal_property: Decimal = Decimal("0")
    datetime_property: datetime = datetime.min
    other_datetime_property: datetime = datetime.min
    null_datetime_property: Optional[datetime] = None
    string_property: Optional[str] = None
    list_property: Optional[list[Any]] = field(default=None)
    object_property: Any = None


@pytest.fixture
def source_factory():
    """Build ValidationSource instances with keyword overrides."""
    return ValidationSource
