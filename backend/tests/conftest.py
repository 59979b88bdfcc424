"""Pytest configuration.

Makes the ``fundable`` package importable and points settings at throwaway
values before any application module is imported.
"""

import os
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest


def _prepend_sys_path(path: Path) -> None:
    resolved = str(path.resolve())
    if resolved not in sys.path:
        sys.path.insert(0, resolved)


BACKEND_ROOT = Path(__file__).resolve().parent.parent

_prepend_sys_path(BACKEND_ROOT)
_prepend_sys_path(Path(__file__).resolve().parent)

# Settings are cached on first import, so these must be set first.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("EDGAR_BASE_URL", "https://edgar.test/")
os.environ.setdefault("EDGAR_USER_AGENT", "Fundable Tests tests@example.com")


@pytest.fixture
def five_year_income():
    """Income by year for a company with a complete, growing history."""
    return {
        2018: Decimal("500000000"),
        2019: Decimal("600000000"),
        2020: Decimal("700000000"),
        2021: Decimal("800000000"),
        2022: Decimal("900000000"),
    }


@pytest.fixture
def filed_on():
    return date(2023, 2, 3)
