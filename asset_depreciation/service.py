"""Depreciation service facade.

Wires the engine, recorder, projector and schedule builder to one
:class:`~asset_depreciation.store.AssetStore` and exposes the operations a
service layer needs: point-in-time calculation (optionally with a short
projection), current position, recording and full schedules.

Example:
    End-to-end with the in-memory store::

        from datetime import date
        from asset_depreciation import Asset, DepreciationService, InMemoryAssetStore

        store = InMemoryAssetStore([Asset("a-1", date(2020, 1, 1), 12000, 0, 4)])
        service = DepreciationService(store)

        report = service.calculate_depreciation("a-1", as_of=date(2022, 1, 1))
        report.current_book_value  # Decimal('6000.00')
"""

from datetime import date
from decimal import Decimal
import logging
from typing import List, Optional, Tuple, Union

from .config import DepreciationConfig
from .decimal_utils import Amount
from .engine import DepreciationEngine
from .models import (
    DepreciationMethod,
    DepreciationReport,
    DepreciationSchedule,
    RecordResult,
)
from .periods import as_date
from .projector import DepreciationProjector
from .recorder import DepreciationRecorder
from .schedule import ScheduleBuilder
from .store import AssetStore

logger = logging.getLogger(__name__)


class DepreciationService:
    """Facade over the depreciation components for a single store.

    Args:
        store: Ledger/registry backend.
        config: Engine configuration. Defaults to :class:`DepreciationConfig`.
    """

    def __init__(self, store: AssetStore, config: Optional[DepreciationConfig] = None) -> None:
        self.store = store
        self.config = config or DepreciationConfig()
        self.engine = DepreciationEngine(self.config)
        self.projector = DepreciationProjector(self.engine)
        self.recorder = DepreciationRecorder(store, self.engine)
        self.schedule_builder = ScheduleBuilder(store, self.engine, self.projector)

    def calculate_depreciation(
        self,
        asset_id: str,
        method: Optional[Union[DepreciationMethod, str]] = None,
        as_of: Optional[date] = None,
        include_projections: bool = False,
        projection_periods: Optional[int] = None,
    ) -> DepreciationReport:
        """Calculate the depreciation position of an asset.

        Args:
            asset_id: Asset to calculate.
            method: Optional method override (enum member or name).
            as_of: Calculation date. Defaults to today.
            include_projections: Whether to add projected periods.
            projection_periods: Months to project; defaults to
                ``config.default_projection_periods``.

        Returns:
            DepreciationReport for the asset.

        Raises:
            AssetNotFoundError: If the asset is unknown.
            UnsupportedDepreciationMethodError: If the method cannot be used.
        """
        as_of = as_date(as_of) if as_of is not None else date.today()
        logger.info(f"Calculating depreciation for asset {asset_id} as of {as_of.isoformat()}")

        asset = self.store.get_asset(asset_id)
        method_to_use = DepreciationMethod.parse(method or asset.depreciation_method)
        entries = list(self.store.get_entries(asset_id))

        state = self.engine.compute_as_of(asset, as_of, entries, method_to_use)
        report = DepreciationReport(
            asset_id=asset.id,
            depreciation_method=method_to_use,
            as_of_date=as_of,
            original_cost=asset.purchase_cost,
            residual_value=asset.residual_value,
            depreciable_amount=asset.depreciable_amount,
            accumulated_depreciation=state.accumulated_depreciation,
            current_book_value=state.current_book_value,
            is_fully_depreciated=self.engine.is_fully_depreciated(
                asset, state.current_book_value, as_of, method_to_use
            ),
            is_approximation=state.is_approximation,
            entries=list(state.entries),
        )

        if include_projections:
            periods = (
                self.config.default_projection_periods
                if projection_periods is None
                else projection_periods
            )
            # An analytical approximation has already been signalled above
            report.projected_entries = self.projector.project_future(
                asset,
                state.current_book_value,
                as_of,
                periods,
                method_to_use,
                warn=not state.is_approximation,
            )

        return report

    def get_current_depreciation(
        self, asset_id: str, as_of: Optional[date] = None
    ) -> Tuple[Decimal, Decimal]:
        """Return ``(current_book_value, accumulated_depreciation)`` for an asset."""
        as_of = as_date(as_of) if as_of is not None else date.today()
        asset = self.store.get_asset(asset_id)
        state = self.engine.compute_as_of(asset, as_of, self.store.get_entries(asset_id))
        return state.current_book_value, state.accumulated_depreciation

    def record_depreciation(
        self, asset_id: str, entry_date: date, amount: Optional[Amount] = None
    ) -> RecordResult:
        """Record depreciation; without an amount the scheduled amount is used."""
        if amount is None:
            return self.recorder.record_scheduled_depreciation(asset_id, entry_date)
        return self.recorder.record_depreciation(asset_id, entry_date, amount)

    def record_scheduled_depreciation(
        self,
        asset_id: str,
        entry_date: date,
        method: Optional[Union[DepreciationMethod, str]] = None,
    ) -> RecordResult:
        """Record the amount the method schedule says is due at ``entry_date``."""
        resolved = DepreciationMethod.parse(method) if method is not None else None
        return self.recorder.record_scheduled_depreciation(asset_id, entry_date, resolved)

    def generate_schedule(self, asset_id: str, as_of: Optional[date] = None) -> DepreciationSchedule:
        """Build the full schedule (history plus projection) of an asset."""
        return self.schedule_builder.generate_schedule(asset_id, as_of)

    @staticmethod
    def list_methods() -> List[DepreciationMethod]:
        """Return every supported depreciation method."""
        return list(DepreciationMethod)
