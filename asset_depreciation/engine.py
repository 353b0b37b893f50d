"""Depreciation engine: pure book-value calculations.

The engine answers one question: *how much of an asset's depreciable amount
has been recognized at a given date?* It does so in one of two ways, chosen
explicitly at the top of :meth:`DepreciationEngine.compute_as_of`:

1. **Historical.** If the asset has ledger entries, the latest entry's book
   value is authoritative. The past is never recomputed.
2. **Analytical.** Without history, the accumulated amount is derived from
   the method formula and the number of whole months elapsed since purchase
   (see :func:`asset_depreciation.periods.elapsed_months`).

Formulas (``M`` elapsed months, ``L`` life in months, ``D`` depreciable
amount, ``C`` purchase cost, ``R`` residual value):

============================  ==================================================
Method                        Accumulated depreciation
============================  ==================================================
STRAIGHT_LINE                 ``D * min(M, L) / L``
DECLINING_BALANCE             ``C - max(C * (1 - r)^(M/12), R)``, ``r = 1.5/life``
DOUBLE_DECLINING_BALANCE      same, ``r = 2/life``
SUM_OF_YEARS_DIGITS           full years weighted ``(life-k+1)/S`` plus the
                              pro-rated share of the current year
UNITS_OF_PRODUCTION           straight line, flagged as an approximation
============================  ==================================================

Every result is quantized to cents and clamped to ``[0, D]``.

Example:
    Analytical state two years into a four-year straight-line asset::

        engine = DepreciationEngine()
        asset = Asset("a-1", date(2020, 1, 1), 12000, 0, 4)
        state = engine.compute_as_of(asset, date(2022, 1, 1), [])
        state.accumulated_depreciation  # Decimal('6000.00')
"""

from datetime import date
from decimal import Decimal
import logging
import math
from typing import Optional, Sequence, Tuple
import warnings

from ._warnings import ApproximationWarning
from .config import DECLINING_BALANCE_LIFE_MULTIPLIER, DepreciationConfig
from .decimal_utils import ONE, ZERO, quantize_currency
from .exceptions import UnsupportedDepreciationMethodError
from .models import Asset, DepreciationEntry, DepreciationMethod, DepreciationState
from .periods import MONTHS_PER_YEAR, add_years, elapsed_months

logger = logging.getLogger(__name__)

__all__ = [
    "DECLINING_BALANCE_LIFE_MULTIPLIER",
    "DepreciationEngine",
    "accumulated_for_method",
    "declining_balance",
    "straight_line",
    "sum_of_years_digits",
]


def straight_line(depreciable_amount: Decimal, life_months: int, months: int) -> Decimal:
    """Equal monthly slices of the depreciable amount.

    Multiplies before dividing so the full life lands exactly on
    ``depreciable_amount``.
    """
    counted = min(max(months, 0), life_months)
    return depreciable_amount * counted / life_months


def declining_balance(
    purchase_cost: Decimal,
    residual_value: Decimal,
    life_years: int,
    rate_numerator: Decimal,
    months: int,
) -> Decimal:
    """Constant annual rate applied to the declining book value.

    Book value after ``y = months / 12`` years is ``C * (1 - r)^y`` with
    ``r = rate_numerator / life_years``, floored at residual value. A rate
    of 100% or more exhausts the balance within the first year.
    """
    if months <= 0:
        return ZERO
    rate = rate_numerator / Decimal(life_years)
    factor = ONE - rate
    if factor <= ZERO:
        remaining = ZERO
    else:
        years = Decimal(months) / Decimal(MONTHS_PER_YEAR)
        remaining = purchase_cost * factor**years
    return purchase_cost - max(remaining, residual_value)


def sum_of_years_digits(depreciable_amount: Decimal, life_years: int, months: int) -> Decimal:
    """Weight each year by its remaining life over the sum of the years' digits.

    Year ``k`` (1-indexed) receives ``D * (life - k + 1) / S`` with
    ``S = life * (life + 1) / 2``; a partial year receives the elapsed
    twelfths of its full-year share. Computed as a single fraction in
    twelfths so the year boundaries are exact.
    """
    if months <= 0:
        return ZERO
    full_years, partial_months = divmod(months, MONTHS_PER_YEAR)
    if full_years >= life_years:
        return depreciable_amount

    digits = sum(life_years - k + 1 for k in range(1, full_years + 1))
    twelfths = digits * MONTHS_PER_YEAR + partial_months * (life_years - full_years)
    sum_of_years = life_years * (life_years + 1) // 2
    return depreciable_amount * twelfths / (sum_of_years * MONTHS_PER_YEAR)


def accumulated_for_method(
    asset: Asset,
    months: int,
    method: DepreciationMethod,
    config: DepreciationConfig,
) -> Decimal:
    """Accumulated depreciation after ``months`` whole months.

    This is the raw math table: units-of-production maps to straight line
    without any signalling. Use :meth:`DepreciationEngine.resolve_method`
    first when the approximation has to be reported.

    Returns:
        Accumulated depreciation quantized to cents, within ``[0, D]``.
    """
    depreciable = asset.depreciable_amount

    if method in (DepreciationMethod.STRAIGHT_LINE, DepreciationMethod.UNITS_OF_PRODUCTION):
        result = straight_line(depreciable, asset.life_months, months)
    elif method == DepreciationMethod.DECLINING_BALANCE:
        result = declining_balance(
            asset.purchase_cost,
            asset.residual_value,
            asset.asset_life_years,
            config.declining_balance_rate,
            months,
        )
    elif method == DepreciationMethod.DOUBLE_DECLINING_BALANCE:
        result = declining_balance(
            asset.purchase_cost,
            asset.residual_value,
            asset.asset_life_years,
            config.double_declining_balance_rate,
            months,
        )
    elif method == DepreciationMethod.SUM_OF_YEARS_DIGITS:
        result = sum_of_years_digits(depreciable, asset.asset_life_years, months)
    else:
        raise UnsupportedDepreciationMethodError(method)

    # Quantize first; the clamp keeps a sub-cent depreciable amount exact
    return max(min(quantize_currency(result), depreciable), ZERO)


class DepreciationEngine:
    """Pure depreciation calculator.

    Holds only an immutable :class:`DepreciationConfig`; all methods are
    side-effect free (apart from approximation warnings) and safe to call
    concurrently.

    Args:
        config: Policy parameters. Defaults to :class:`DepreciationConfig`.
    """

    def __init__(self, config: Optional[DepreciationConfig] = None) -> None:
        self.config = config or DepreciationConfig()

    def resolve_method(
        self, asset: Asset, method: Optional[DepreciationMethod] = None, warn: bool = True
    ) -> Tuple[DepreciationMethod, bool]:
        """Pick the method to evaluate and report whether it is an approximation.

        Args:
            asset: Asset whose configured method is used when ``method`` is None.
            method: Optional per-call override.
            warn: Log and emit :class:`ApproximationWarning` for a fallback. Callers
                that already signalled the approximation pass False.

        Returns:
            Tuple of (method, is_approximation).

        Raises:
            UnsupportedDepreciationMethodError: If the method is unknown, or
                is units-of-production and the policy is ``"error"``.
        """
        resolved = DepreciationMethod.parse(method or asset.depreciation_method)
        if resolved != DepreciationMethod.UNITS_OF_PRODUCTION:
            return resolved, False

        if self.config.units_of_production_policy == "error":
            raise UnsupportedDepreciationMethodError(
                resolved, "no usage data is available for units of production"
            )
        if warn:
            message = (
                f"Units of production method requires usage data, using straight-line "
                f"as fallback for asset {asset.id}"
            )
            logger.warning(message)
            warnings.warn(message, ApproximationWarning, stacklevel=3)
        return resolved, True

    def accumulated_depreciation(
        self, asset: Asset, months: int, method: Optional[DepreciationMethod] = None
    ) -> Decimal:
        """Analytical accumulated depreciation after ``months`` whole months."""
        resolved, _ = self.resolve_method(asset, method)
        return accumulated_for_method(asset, months, resolved, self.config)

    def compute_as_of(
        self,
        asset: Asset,
        as_of_date: date,
        historical_entries: Sequence[DepreciationEntry] = (),
        method: Optional[DepreciationMethod] = None,
    ) -> DepreciationState:
        """Derive the depreciation state of an asset at a date.

        Args:
            asset: The asset.
            as_of_date: Date of the calculation (used by the analytical branch).
            historical_entries: Ledger entries, oldest first.
            method: Optional method override for the analytical branch.

        Returns:
            DepreciationState. With history, ``entries`` is the history
            unchanged; without, it holds one synthetic entry dated
            ``as_of_date``.
        """
        if historical_entries:
            latest = historical_entries[-1]
            return DepreciationState(
                accumulated_depreciation=asset.purchase_cost - latest.book_value,
                current_book_value=latest.book_value,
                entries=tuple(historical_entries),
                is_historical=True,
            )

        resolved, is_approximation = self.resolve_method(asset, method)
        months = elapsed_months(asset.purchase_date, as_of_date)
        accumulated = accumulated_for_method(asset, months, resolved, self.config)
        book_value = asset.purchase_cost - accumulated
        logger.debug(
            f"Analytical {resolved.value} for asset {asset.id}: {months} months, "
            f"accumulated {accumulated}, book value {book_value}"
        )
        synthetic = DepreciationEntry(
            asset_id=asset.id,
            date=as_of_date,
            amount=accumulated,
            book_value=book_value,
        )
        return DepreciationState(
            accumulated_depreciation=accumulated,
            current_book_value=book_value,
            entries=(synthetic,),
            is_historical=False,
            is_approximation=is_approximation,
        )

    def fully_depreciated_date(
        self, asset: Asset, method: Optional[DepreciationMethod] = None
    ) -> date:
        """Date at which the asset is considered fully depreciated.

        Straight line, sum-of-years-digits and units-of-production reach
        residual value exactly at the end of the nominal life. The
        declining-balance methods never do; they are treated as fully
        depreciated after ``ceil(life * declining_balance_life_multiplier)``
        years.
        """
        resolved = DepreciationMethod.parse(method or asset.depreciation_method)
        years = asset.asset_life_years
        if resolved.is_declining_balance:
            years = math.ceil(
                Decimal(asset.asset_life_years) * self.config.declining_balance_life_multiplier
            )
        return add_years(asset.purchase_date, years)

    def remaining_life_months(self, asset: Asset, as_of_date: date) -> int:
        """Whole months of nominal life left at ``as_of_date`` (never negative)."""
        return max(0, asset.life_months - elapsed_months(asset.purchase_date, as_of_date))

    def is_fully_depreciated(
        self,
        asset: Asset,
        book_value: Decimal,
        as_of_date: date,
        method: Optional[DepreciationMethod] = None,
    ) -> bool:
        """True once book value hits residual or the fully-depreciated date has passed."""
        if book_value <= asset.residual_value:
            return True
        return as_of_date > self.fully_depreciated_date(asset, method)
