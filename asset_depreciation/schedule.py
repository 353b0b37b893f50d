"""Depreciation schedules: recorded history plus projected remainder."""

from datetime import date
import logging
from typing import Optional

from .engine import DepreciationEngine
from .models import DepreciationSchedule
from .periods import as_date
from .projector import DepreciationProjector
from .store import AssetStore

logger = logging.getLogger(__name__)


class ScheduleBuilder:
    """Assembles the full depreciation schedule of an asset.

    Args:
        store: Ledger/registry backend.
        engine: Engine for the current state. Defaults to a new engine.
        projector: Projector for the remaining life. Defaults to one sharing
            ``engine``.
    """

    def __init__(
        self,
        store: AssetStore,
        engine: Optional[DepreciationEngine] = None,
        projector: Optional[DepreciationProjector] = None,
    ) -> None:
        self.store = store
        self.engine = engine or DepreciationEngine()
        self.projector = projector or DepreciationProjector(self.engine)

    def generate_schedule(
        self, asset_id: str, as_of: Optional[date] = None
    ) -> DepreciationSchedule:
        """Build the schedule of an asset as of a date.

        The historical ledger is authoritative; the projection covers the
        remaining nominal life from ``as_of`` (or from the latest entry's date
        when that is later) and is advisory only. It must be
        regenerated whenever the ledger changes.

        Args:
            asset_id: Asset to schedule.
            as_of: Date the schedule is built at. Defaults to today.

        Returns:
            DepreciationSchedule with ``entries`` (recorded, oldest first) and
            ``projected_entries``.

        Raises:
            AssetNotFoundError: If the asset is unknown.
        """
        as_of = as_date(as_of) if as_of is not None else date.today()
        asset = self.store.get_asset(asset_id)
        entries = list(self.store.get_entries(asset_id))

        state = self.engine.compute_as_of(asset, as_of, entries)
        # Projection continues after the latest recorded entry, never before it
        start = max(as_of, entries[-1].date) if entries else as_of
        remaining_months = self.engine.remaining_life_months(asset, start)
        projected = self.projector.project_future(
            asset,
            state.current_book_value,
            start,
            remaining_months,
            warn=not state.is_approximation,
        )

        logger.info(
            f"Generated schedule for asset {asset_id}: {len(entries)} recorded, "
            f"{len(projected)} projected"
        )
        return DepreciationSchedule(
            asset_id=asset.id,
            original_cost=asset.purchase_cost,
            residual_value=asset.residual_value,
            depreciable_amount=asset.depreciable_amount,
            accumulated_depreciation=state.accumulated_depreciation,
            current_book_value=state.current_book_value,
            is_fully_depreciated=state.current_book_value == asset.residual_value,
            entries=entries,
            projected_entries=projected,
        )
