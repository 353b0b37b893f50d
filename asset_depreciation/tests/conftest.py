"""Pytest configuration and shared fixtures."""

from datetime import date

import pytest

from asset_depreciation.config import DepreciationConfig
from asset_depreciation.engine import DepreciationEngine
from asset_depreciation.models import Asset, DepreciationMethod
from asset_depreciation.projector import DepreciationProjector
from asset_depreciation.recorder import DepreciationRecorder
from asset_depreciation.store import InMemoryAssetStore


@pytest.fixture
def config():
    """Return a default depreciation config."""
    return DepreciationConfig()


@pytest.fixture
def engine(config):
    """Return an engine with default config."""
    return DepreciationEngine(config)


@pytest.fixture
def straight_line_asset():
    """Four-year straight-line asset costing 12,000 with no residual value."""
    return Asset(
        id="press-01",
        purchase_date=date(2020, 1, 1),
        purchase_cost=12000,
        residual_value=0,
        asset_life_years=4,
    )


@pytest.fixture
def residual_asset():
    """Five-year straight-line asset costing 2,000 with 1,000 residual value."""
    return Asset(
        id="van-07",
        purchase_date=date(2021, 1, 1),
        purchase_cost=2000,
        residual_value=1000,
        asset_life_years=5,
    )


@pytest.fixture
def ddb_asset():
    """Five-year double declining-balance asset costing 10,000, residual 1,000."""
    return Asset(
        id="lathe-03",
        purchase_date=date(2020, 1, 1),
        purchase_cost=10000,
        residual_value=1000,
        asset_life_years=5,
        depreciation_method=DepreciationMethod.DOUBLE_DECLINING_BALANCE,
    )


@pytest.fixture
def store(straight_line_asset, residual_asset, ddb_asset):
    """Return an in-memory store seeded with the sample assets."""
    return InMemoryAssetStore([straight_line_asset, residual_asset, ddb_asset])


@pytest.fixture
def recorder(store, engine):
    """Return a recorder bound to the sample store."""
    return DepreciationRecorder(store, engine)


@pytest.fixture
def projector(engine):
    """Return a projector sharing the default engine."""
    return DepreciationProjector(engine)
