"""Tests for the depreciation engine.

Tests cover:
- Per-method accumulated depreciation formulas
- Historical vs analytical state derivation
- Units-of-production fallback policy
- Fully-depreciated date and remaining life
"""

from datetime import date
from decimal import Decimal
import warnings

import pytest

from asset_depreciation._warnings import ApproximationWarning
from asset_depreciation.config import DepreciationConfig
from asset_depreciation.engine import (
    DepreciationEngine,
    accumulated_for_method,
    declining_balance,
    straight_line,
    sum_of_years_digits,
)
from asset_depreciation.exceptions import UnsupportedDepreciationMethodError
from asset_depreciation.models import Asset, DepreciationEntry, DepreciationMethod

ACCURATE_METHODS = [
    DepreciationMethod.STRAIGHT_LINE,
    DepreciationMethod.DECLINING_BALANCE,
    DepreciationMethod.DOUBLE_DECLINING_BALANCE,
    DepreciationMethod.SUM_OF_YEARS_DIGITS,
]


class TestFormulas:
    """Tests for the raw per-method functions."""

    def test_straight_line_monthly_slices(self):
        """Straight line is proportional to elapsed months."""
        assert straight_line(Decimal("12000"), 48, 24) == Decimal("6000")
        assert straight_line(Decimal("12000"), 48, 0) == Decimal("0")

    def test_straight_line_capped_at_life(self):
        """Months beyond the life do not add depreciation."""
        assert straight_line(Decimal("12000"), 48, 120) == Decimal("12000")

    def test_straight_line_exact_at_full_life(self):
        """Awkward amounts still land exactly on the depreciable amount."""
        assert straight_line(Decimal("1000"), 36, 36) == Decimal("1000")

    def test_sum_of_years_digits_year_boundaries(self):
        """Life 3, D 6000: 3000 / 5000 / 6000 at years 1 / 2 / 3."""
        d = Decimal("6000")
        assert sum_of_years_digits(d, 3, 12) == Decimal("3000")
        assert sum_of_years_digits(d, 3, 24) == Decimal("5000")
        assert sum_of_years_digits(d, 3, 36) == Decimal("6000")

    def test_sum_of_years_digits_partial_year(self):
        """Half of year two's 2000 share is added after 18 months."""
        assert sum_of_years_digits(Decimal("6000"), 3, 18) == Decimal("4000")

    def test_sum_of_years_digits_before_purchase(self):
        """No months means no depreciation."""
        assert sum_of_years_digits(Decimal("6000"), 3, 0) == Decimal("0")

    def test_double_declining_balance_whole_years(self):
        """Book value falls by 40% per year for a five-year life."""
        cost, residual, rate = Decimal("10000"), Decimal("1000"), Decimal("2")
        assert declining_balance(cost, residual, 5, rate, 12) == Decimal("4000")
        assert declining_balance(cost, residual, 5, rate, 24) == Decimal("6400")

    def test_declining_balance_rate(self):
        """Declining balance uses 1.5 / life."""
        result = declining_balance(Decimal("10000"), Decimal("0"), 5, Decimal("1.5"), 12)
        assert result == Decimal("3000")

    def test_declining_balance_floors_at_residual(self):
        """The remaining balance never drops below residual value."""
        result = declining_balance(Decimal("10000"), Decimal("1000"), 5, Decimal("2"), 60)
        assert result == Decimal("9000")

    def test_rate_at_or_above_one_exhausts_first_year(self):
        """A one-year life under double declining balance hits residual at once."""
        result = declining_balance(Decimal("1000"), Decimal("100"), 1, Decimal("2"), 1)
        assert result == Decimal("900")


class TestAccumulatedForMethod:
    """Tests for dispatch, quantization and clamping."""

    def test_quantized_to_cents(self, config):
        """Results are rounded to two decimal places."""
        asset = Asset("a", date(2024, 1, 1), 1000, 0, 3)
        result = accumulated_for_method(asset, 1, DepreciationMethod.STRAIGHT_LINE, config)
        assert result == Decimal("27.78")
        assert result.as_tuple().exponent == -2

    def test_zero_depreciable_amount(self, config):
        """An asset with residual equal to cost never depreciates."""
        asset = Asset("land", date(2024, 1, 1), 5000, 5000, 10)
        for method in ACCURATE_METHODS:
            assert accumulated_for_method(asset, 60, method, config) == Decimal("0")

    def test_units_of_production_maps_to_straight_line_silently(
        self, config, straight_line_asset
    ):
        """The raw table emits no warning for units-of-production."""
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            result = accumulated_for_method(
                straight_line_asset, 12, DepreciationMethod.UNITS_OF_PRODUCTION, config
            )
        assert result == Decimal("3000.00")


class TestComputeAsOf:
    """Tests for DepreciationEngine.compute_as_of."""

    def test_analytical_straight_line_two_years(self, engine, straight_line_asset):
        """Cost 12000, life 4, 24 months, no history: 6000 / 6000."""
        state = engine.compute_as_of(straight_line_asset, date(2022, 1, 1), [])

        assert state.accumulated_depreciation == Decimal("6000.00")
        assert state.current_book_value == Decimal("6000.00")
        assert not state.is_historical
        assert not state.is_approximation
        assert len(state.entries) == 1
        synthetic = state.entries[0]
        assert synthetic.date == date(2022, 1, 1)
        assert synthetic.amount == Decimal("6000.00")
        assert synthetic.book_value == Decimal("6000.00")

    def test_straight_line_full_life_reaches_residual(self, engine, residual_asset):
        """At exactly the useful life book value equals residual value."""
        state = engine.compute_as_of(residual_asset, date(2026, 1, 1))
        assert state.current_book_value == residual_asset.residual_value

    def test_before_purchase_is_full_cost(self, engine, straight_line_asset):
        """As-of dates before purchase show no depreciation."""
        state = engine.compute_as_of(straight_line_asset, date(2019, 6, 1))
        assert state.accumulated_depreciation == Decimal("0")
        assert state.current_book_value == straight_line_asset.purchase_cost

    def test_historical_branch_uses_latest_entry(self, engine, straight_line_asset):
        """With history the latest book value is authoritative."""
        entries = [
            DepreciationEntry("press-01", date(2020, 1, 31), 300, 11700),
            DepreciationEntry("press-01", date(2020, 2, 29), 200, 11500),
        ]
        state = engine.compute_as_of(straight_line_asset, date(2030, 1, 1), entries)

        assert state.is_historical
        assert state.current_book_value == Decimal("11500")
        assert state.accumulated_depreciation == Decimal("500")
        assert state.entries == tuple(entries)

    def test_method_override(self, engine, straight_line_asset):
        """A per-call method replaces the asset's configured one."""
        state = engine.compute_as_of(
            straight_line_asset,
            date(2021, 1, 1),
            method=DepreciationMethod.SUM_OF_YEARS_DIGITS,
        )
        # 4/10 of 12000 in the first year
        assert state.accumulated_depreciation == Decimal("4800.00")

    def test_idempotent(self, engine, ddb_asset):
        """Repeated calls give identical results."""
        first = engine.compute_as_of(ddb_asset, date(2022, 7, 15))
        second = engine.compute_as_of(ddb_asset, date(2022, 7, 15))
        assert first == second

    @pytest.mark.parametrize("method", ACCURATE_METHODS)
    def test_book_value_never_below_residual(self, engine, residual_asset, method):
        """Book value stays at or above residual for every month up to double the life."""
        for year in range(11):
            for month in (1, 4, 7, 10):
                as_of = date(2021 + year, month, 1)
                state = engine.compute_as_of(residual_asset, as_of, method=method)
                assert state.current_book_value >= residual_asset.residual_value

    @pytest.mark.parametrize(
        "method",
        [DepreciationMethod.DECLINING_BALANCE, DepreciationMethod.DOUBLE_DECLINING_BALANCE],
    )
    def test_declining_balance_monotonic(self, engine, ddb_asset, method):
        """Declining-balance book value never increases month over month."""
        previous = ddb_asset.purchase_cost
        for months in range(0, 97):
            accumulated = engine.accumulated_depreciation(ddb_asset, months, method)
            book_value = ddb_asset.purchase_cost - accumulated
            assert book_value <= previous
            assert book_value >= ddb_asset.residual_value
            previous = book_value


class TestUnitsOfProduction:
    """Tests for the units-of-production policy."""

    @pytest.fixture
    def uop_asset(self):
        """Units-of-production asset otherwise identical to the straight-line one."""
        return Asset(
            "drill-02",
            date(2020, 1, 1),
            12000,
            0,
            4,
            depreciation_method=DepreciationMethod.UNITS_OF_PRODUCTION,
        )

    def test_fallback_warns_and_flags(self, engine, uop_asset, caplog):
        """The straight-line estimate is flagged, warned and logged."""
        with pytest.warns(ApproximationWarning):
            state = engine.compute_as_of(uop_asset, date(2022, 1, 1))

        assert state.is_approximation
        assert state.accumulated_depreciation == Decimal("6000.00")
        assert "Units of production" in caplog.text

    def test_error_policy_refuses(self, uop_asset):
        """With the error policy the method is rejected."""
        engine = DepreciationEngine(DepreciationConfig(units_of_production_policy="error"))
        with pytest.raises(UnsupportedDepreciationMethodError) as exc_info:
            engine.compute_as_of(uop_asset, date(2022, 1, 1))
        assert exc_info.value.method == DepreciationMethod.UNITS_OF_PRODUCTION

    def test_historical_branch_needs_no_method(self, uop_asset):
        """Historical state never evaluates the method, so nothing is refused."""
        engine = DepreciationEngine(DepreciationConfig(units_of_production_policy="error"))
        entries = [DepreciationEntry("drill-02", date(2020, 2, 1), 250, 11750)]
        state = engine.compute_as_of(uop_asset, date(2022, 1, 1), entries)
        assert state.current_book_value == Decimal("11750")


class TestLifeQueries:
    """Tests for fully-depreciated date, remaining life and status checks."""

    def test_fully_depreciated_date_straight_line(self, engine, straight_line_asset):
        """Straight line ends at purchase date plus life."""
        assert engine.fully_depreciated_date(straight_line_asset) == date(2024, 1, 1)

    def test_fully_depreciated_date_declining_balance(self, engine, ddb_asset):
        """Declining balance ends at ceil(life * 1.2) years."""
        assert engine.fully_depreciated_date(ddb_asset) == date(2026, 1, 1)

    def test_fully_depreciated_date_rounds_up(self, engine, straight_line_asset):
        """Life 4 under declining balance rounds 4.8 up to 5 years."""
        result = engine.fully_depreciated_date(
            straight_line_asset, DepreciationMethod.DECLINING_BALANCE
        )
        assert result == date(2025, 1, 1)

    def test_fully_depreciated_date_multiplier_override(self, ddb_asset):
        """The life multiplier is configurable."""
        engine = DepreciationEngine(DepreciationConfig(declining_balance_life_multiplier="1.5"))
        assert engine.fully_depreciated_date(ddb_asset) == date(2028, 1, 1)

    def test_remaining_life_months(self, engine, straight_line_asset):
        """Remaining life counts down and stops at zero."""
        assert engine.remaining_life_months(straight_line_asset, date(2020, 1, 1)) == 48
        assert engine.remaining_life_months(straight_line_asset, date(2022, 1, 1)) == 24
        assert engine.remaining_life_months(straight_line_asset, date(2030, 1, 1)) == 0

    def test_is_fully_depreciated(self, engine, ddb_asset):
        """Residual book value or a passed end date both count as fully depreciated."""
        assert engine.is_fully_depreciated(ddb_asset, Decimal("1000"), date(2021, 1, 1))
        assert not engine.is_fully_depreciated(ddb_asset, Decimal("1500"), date(2025, 1, 1))
        assert engine.is_fully_depreciated(ddb_asset, Decimal("1500"), date(2026, 1, 2))
