"""Pytest configuration and shared fixtures."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from house_prices.data import HousingDataset, HousingRecord

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "data"


@pytest.fixture
def housing_csv_path() -> Path:
    """Path to the 12-record sample CSV (header + 12 rows, no constant columns)."""
    return FIXTURES_DIR / "housing_sample.csv"


@pytest.fixture
def housing_dataset(housing_csv_path: Path) -> HousingDataset:
    """Dataset loaded from the sample CSV."""
    return HousingDataset.load_csv(housing_csv_path)


@pytest.fixture
def make_record() -> Callable[..., HousingRecord]:
    """
    Factory for HousingRecords with sensible defaults.

    Usage:
        record = make_record(price=500_000, area=1200)
    """

    def _make(**overrides: Any) -> HousingRecord:
        values: dict[str, Any] = {
            "price": 4_000_000.0,
            "area": 5000.0,
            "bedrooms": 3,
            "bathrooms": 1,
            "stories": 2,
            "mainroad": True,
            "guestroom": False,
            "basement": False,
            "hotwaterheating": False,
            "airconditioning": False,
            "parking": 1,
            "prefarea": False,
            "furnishing_status": "semi-furnished",
        }
        values.update(overrides)
        return HousingRecord(**values)

    return _make


@pytest.fixture
def varied_records(make_record: Callable[..., HousingRecord]) -> list[HousingRecord]:
    """
    Ten records where every feature column varies.

    Price grows with area so the linear relationship is learnable.
    """
    statuses = ["furnished", "semi-furnished", "unfurnished"]
    return [
        make_record(
            price=1_000_000.0 + i * 500_000.0,
            area=2000.0 + i * 600.0,
            bedrooms=1 + i % 4,
            bathrooms=1 + i % 3,
            stories=1 + i % 2,
            mainroad=i % 2 == 0,
            guestroom=i % 3 == 0,
            basement=i % 4 == 0,
            hotwaterheating=i == 5,
            airconditioning=i >= 5,
            parking=i % 3,
            prefarea=i % 2 == 1,
            furnishing_status=statuses[i % 3],
        )
        for i in range(10)
    ]


@pytest.fixture
def varied_dataset(varied_records: list[HousingRecord]) -> HousingDataset:
    """Dataset built from varied_records."""
    return HousingDataset(varied_records)
