"""Recording depreciation against the append-only ledger.

The recorder is the only stateful component of the package. It reads the
latest ledger entry, applies the residual-value floor, appends the new entry
and, when book value reaches residual value, moves the asset to
``FULLY_DEPRECIATED``. That read-modify-append sequence is serialized per
asset with a lock so two concurrent recordings can never both build on the
same "latest" entry. Different assets never contend.

Over-depreciation is not an error: the amount is clamped to what is left
above residual value and the result is flagged with ``adjusted=True``.

Example:
    Clamp an oversized entry::

        result = recorder.record_depreciation("a-1", date(2025, 1, 31), 1000)
        if result.adjusted:
            print(f"Recorded {result.entry.amount}, dropped {result.adjustment}")
"""

from datetime import date
import logging
import threading
from typing import Dict, Optional

from .decimal_utils import ZERO, Amount, to_decimal
from .engine import DepreciationEngine
from .exceptions import AssetFullyDepreciatedError, InvalidEntryOrderingError, NegativeAmountError
from .models import AssetStatus, DepreciationEntry, DepreciationMethod, RecordResult
from .periods import as_date, elapsed_months
from .store import AssetStore

logger = logging.getLogger(__name__)


class DepreciationRecorder:
    """Appends depreciation entries under a per-asset single-writer lock.

    Args:
        store: Ledger/registry backend.
        engine: Engine used to compute scheduled amounts. Defaults to a
            :class:`DepreciationEngine` with default config.
    """

    def __init__(self, store: AssetStore, engine: Optional[DepreciationEngine] = None) -> None:
        self.store = store
        self.engine = engine or DepreciationEngine()
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, asset_id: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(asset_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[asset_id] = lock
            return lock

    def record_depreciation(self, asset_id: str, entry_date: date, amount: Amount) -> RecordResult:
        """Append a depreciation entry for an asset.

        Args:
            asset_id: Asset to depreciate.
            entry_date: Date of the entry; must be after the latest entry.
            amount: Depreciation to recognize (>= 0).

        Returns:
            RecordResult with the appended entry and adjustment flags.

        Raises:
            NegativeAmountError: If ``amount`` is negative.
            AssetNotFoundError: If the asset is unknown.
            InvalidEntryOrderingError: If ``entry_date`` is not strictly
                after the latest entry's date.
            AssetFullyDepreciatedError: If book value already equals
                residual value.
        """
        requested = to_decimal(amount)
        if requested < ZERO:
            raise NegativeAmountError(requested)
        entry_date = as_date(entry_date)
        # Unknown ids fail here, before a lock is created for them
        self.store.get_asset(asset_id)

        with self._lock_for(asset_id):
            asset = self.store.get_asset(asset_id)
            entries = self.store.get_entries(asset_id)
            latest = entries[-1] if entries else None

            if latest is not None and entry_date <= latest.date:
                raise InvalidEntryOrderingError(asset_id, entry_date, latest.date)

            previous_book_value = latest.book_value if latest is not None else asset.purchase_cost
            if previous_book_value <= asset.residual_value:
                raise AssetFullyDepreciatedError(asset_id, previous_book_value)

            recorded = requested
            adjusted = False
            if previous_book_value - requested < asset.residual_value:
                recorded = previous_book_value - asset.residual_value
                adjusted = True
                logger.warning(
                    f"Depreciation amount {requested} would reduce book value below residual "
                    f"value for asset {asset_id}; recording {recorded} instead"
                )

            book_value = previous_book_value - recorded
            entry = DepreciationEntry(
                asset_id=asset_id,
                date=entry_date,
                amount=recorded,
                book_value=book_value,
            )
            self.store.append_entry(entry)

            status_changed = False
            if book_value == asset.residual_value and asset.status != AssetStatus.FULLY_DEPRECIATED:
                self.store.set_asset_status(asset_id, AssetStatus.FULLY_DEPRECIATED)
                status_changed = True

        logger.info(
            f"Recorded depreciation of {recorded} for asset {asset_id} on "
            f"{entry_date.isoformat()}; book value {book_value}"
        )
        return RecordResult(
            entry=entry,
            requested_amount=requested,
            adjusted=adjusted,
            status_changed=status_changed,
        )

    def record_scheduled_depreciation(
        self,
        asset_id: str,
        entry_date: date,
        method: Optional[DepreciationMethod] = None,
    ) -> RecordResult:
        """Record whatever the method schedule says is due at ``entry_date``.

        The amount is the analytical accumulated depreciation at
        ``entry_date`` minus what the ledger has already recognized, floored
        at zero. Catch-up after skipped months therefore happens in one entry.

        Args:
            asset_id: Asset to depreciate.
            entry_date: Date of the entry.
            method: Optional override of the asset's method.

        Returns:
            RecordResult from :meth:`record_depreciation`.
        """
        entry_date = as_date(entry_date)
        self.store.get_asset(asset_id)
        with self._lock_for(asset_id):
            asset = self.store.get_asset(asset_id)
            entries = self.store.get_entries(asset_id)
            recognized = asset.purchase_cost - entries[-1].book_value if entries else ZERO
            months = elapsed_months(asset.purchase_date, entry_date)
            target = self.engine.accumulated_depreciation(asset, months, method)
            amount = max(target - recognized, ZERO)
            logger.debug(
                f"Scheduled amount for asset {asset_id} at {entry_date.isoformat()}: "
                f"target {target}, recognized {recognized}, due {amount}"
            )
            return self.record_depreciation(asset_id, entry_date, amount)
