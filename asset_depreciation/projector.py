"""Forward projection of depreciation periods.

Simulates month-by-month depreciation from the current book value using the
same cumulative formulas as the engine. Each period's amount is the
difference between consecutive cumulative values, so rounding never
accumulates: summing the projected amounts telescopes to the cumulative
figure. Projection is pure and never touches the ledger; callers commit
projected periods through the recorder if and when they choose.
"""

from datetime import date
from decimal import Decimal
import logging
from typing import List, Optional

from .config import DepreciationConfig
from .decimal_utils import Amount, to_decimal
from .engine import DepreciationEngine, accumulated_for_method
from .models import Asset, DepreciationMethod, ProjectedEntry
from .periods import add_months, as_date, elapsed_months

logger = logging.getLogger(__name__)


class DepreciationProjector:
    """Projects future depreciation periods for an asset.

    Args:
        engine: Engine supplying formulas and configuration.
    """

    def __init__(self, engine: Optional[DepreciationEngine] = None) -> None:
        self.engine = engine or DepreciationEngine()

    @property
    def config(self) -> DepreciationConfig:
        """Configuration shared with the engine."""
        return self.engine.config

    def project_future(
        self,
        asset: Asset,
        current_book_value: Amount,
        start_date: date,
        periods: int,
        method: Optional[DepreciationMethod] = None,
        warn: bool = True,
    ) -> List[ProjectedEntry]:
        """Project up to ``periods`` monthly entries after ``start_date``.

        Args:
            asset: Asset to project.
            current_book_value: Book value at ``start_date`` (from the ledger
                or the engine's analytical state).
            start_date: Date the projection starts from; entry ``i`` is dated
                ``start_date + i`` months.
            periods: Maximum number of months to project. Capped at the
                remaining nominal life and at ``max_projection_periods``.
            method: Optional override of the asset's method.
            warn: Signal a units-of-production approximation. Pass False when
                the caller already did for the same calculation.

        Returns:
            Ordered projected entries. Empty if the asset is already at
            residual value or past its nominal life. The projection stops
            early, landing exactly on residual value, once it is reached.

        Raises:
            ValueError: If ``periods`` is negative.
        """
        if periods < 0:
            raise ValueError(f"Projection periods must be non-negative, got {periods}")

        book_value = to_decimal(current_book_value)
        start_date = as_date(start_date)
        residual = asset.residual_value
        months_elapsed = elapsed_months(asset.purchase_date, start_date)

        if book_value <= residual or months_elapsed >= asset.life_months:
            return []

        if periods > self.config.max_projection_periods:
            logger.warning(
                f"Projection of {periods} periods for asset {asset.id} capped at "
                f"{self.config.max_projection_periods}"
            )
            periods = self.config.max_projection_periods

        resolved, _ = self.engine.resolve_method(asset, method, warn=warn)
        count = min(periods, asset.life_months - months_elapsed)

        projections: List[ProjectedEntry] = []
        previous_cumulative = accumulated_for_method(asset, months_elapsed, resolved, self.config)
        for i in range(1, count + 1):
            cumulative = accumulated_for_method(
                asset, months_elapsed + i, resolved, self.config
            )
            amount: Decimal = cumulative - previous_cumulative
            previous_cumulative = cumulative

            if book_value - amount <= residual:
                amount = book_value - residual
                book_value = residual
            else:
                book_value -= amount

            projections.append(
                ProjectedEntry(date=add_months(start_date, i), amount=amount, book_value=book_value)
            )

            if book_value == residual:
                break

        logger.debug(
            f"Projected {len(projections)} of {count} periods for asset {asset.id} "
            f"({resolved.value}); final book value {book_value}"
        )
        return projections
