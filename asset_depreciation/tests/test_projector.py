"""Tests for forward projection of depreciation periods."""

from datetime import date
from decimal import Decimal
import logging

import pytest

from asset_depreciation.config import DepreciationConfig
from asset_depreciation.engine import DepreciationEngine
from asset_depreciation.models import Asset
from asset_depreciation.projector import DepreciationProjector


class TestProjectFuture:
    """Tests for DepreciationProjector.project_future."""

    def test_straight_line_twelve_months(self, projector, straight_line_asset):
        """Twelve flat 250 slices, dated monthly from the start date."""
        projections = projector.project_future(
            straight_line_asset, Decimal("6000.00"), date(2022, 1, 1), 12
        )

        assert len(projections) == 12
        assert all(p.amount == Decimal("250.00") for p in projections)
        assert projections[0].date == date(2022, 2, 1)
        assert projections[-1].date == date(2023, 1, 1)
        assert projections[-1].book_value == Decimal("3000.00")

    def test_capped_at_remaining_life(self, projector, straight_line_asset):
        """Asking for more periods than remain stops at the end of life."""
        projections = projector.project_future(
            straight_line_asset, Decimal("6000.00"), date(2022, 1, 1), 100
        )
        assert len(projections) == 24
        assert projections[-1].book_value == Decimal("0")

    def test_rounding_telescopes(self, projector):
        """Per-period cents differ but the total is exact."""
        asset = Asset("tool", date(2024, 1, 1), 1000, 0, 1)
        projections = projector.project_future(asset, Decimal("1000"), date(2024, 1, 1), 12)

        assert len(projections) == 12
        assert {p.amount for p in projections} <= {Decimal("83.33"), Decimal("83.34")}
        assert sum((p.amount for p in projections), Decimal("0")) == Decimal("1000")
        assert projections[-1].book_value == Decimal("0")

    def test_lands_exactly_on_residual(self, projector, straight_line_asset):
        """A book value below the formula's path is clamped onto residual and stops."""
        projections = projector.project_future(
            straight_line_asset, Decimal("300"), date(2020, 1, 1), 12
        )
        assert [p.amount for p in projections] == [Decimal("250.00"), Decimal("50.00")]
        assert projections[-1].book_value == Decimal("0")

    def test_at_residual_is_empty(self, projector, residual_asset):
        """Nothing is projected once book value is at residual."""
        projections = projector.project_future(
            residual_asset, Decimal("1000"), date(2022, 1, 1), 12
        )
        assert projections == []

    def test_past_life_is_empty(self, projector, straight_line_asset):
        """Nothing is projected after the nominal life."""
        projections = projector.project_future(
            straight_line_asset, Decimal("500"), date(2025, 1, 1), 12
        )
        assert projections == []

    def test_zero_periods(self, projector, straight_line_asset):
        """Zero periods gives an empty projection."""
        assert projector.project_future(straight_line_asset, 12000, date(2020, 1, 1), 0) == []

    def test_negative_periods_rejected(self, projector, straight_line_asset):
        """Negative period counts are invalid."""
        with pytest.raises(ValueError):
            projector.project_future(straight_line_asset, 12000, date(2020, 1, 1), -1)

    def test_capped_at_max_projection_periods(self, straight_line_asset, caplog):
        """Requests above the configured maximum are truncated."""
        config = DepreciationConfig(max_projection_periods=6, default_projection_periods=6)
        projector = DepreciationProjector(DepreciationEngine(config))

        with caplog.at_level(logging.WARNING):
            projections = projector.project_future(
                straight_line_asset, 12000, date(2020, 1, 1), 12
            )

        assert len(projections) == 6
        assert "capped" in caplog.text

    def test_double_declining_balance_path(self, projector, ddb_asset):
        """The projected path declines monotonically and ends on residual."""
        projections = projector.project_future(
            ddb_asset, ddb_asset.purchase_cost, date(2020, 1, 1), 60
        )

        previous = ddb_asset.purchase_cost
        for p in projections:
            assert p.amount >= Decimal("0")
            assert p.book_value <= previous
            assert p.book_value >= ddb_asset.residual_value
            previous = p.book_value
        assert projections[-1].book_value == ddb_asset.residual_value
        assert len(projections) < 60

    def test_pure(self, projector, store, straight_line_asset):
        """Projection never writes to the ledger."""
        projector.project_future(straight_line_asset, 12000, date(2020, 1, 1), 12)
        assert store.get_entries("press-01") == []
