"""Ledger storage interface and in-memory reference implementation.

The depreciation core never talks to a database. It depends on the narrow
:class:`AssetStore` protocol below, which the asset registry / persistence
layer implements. :class:`InMemoryAssetStore` is a complete implementation
for tests, notebooks and batch jobs that hold everything in memory.

Example:
    Seed a store and record against it::

        store = InMemoryAssetStore()
        store.add_asset(Asset("a-1", date(2024, 1, 1), 12000, 0, 4))
        recorder = DepreciationRecorder(store)
        recorder.record_depreciation("a-1", date(2024, 2, 1), 250)
"""

import copy
import logging
import threading
from typing import Any, Dict, Iterable, List, Protocol, Sequence, runtime_checkable

from .exceptions import AssetNotFoundError, InvalidEntryOrderingError
from .models import Asset, AssetStatus, DepreciationEntry

logger = logging.getLogger(__name__)


@runtime_checkable
class AssetStore(Protocol):
    """Persistence operations the depreciation core relies on.

    Implementations must return entries oldest first, and ``append_entry``
    must be atomic per asset.
    """

    def get_asset(self, asset_id: str) -> Asset:
        """Return the asset or raise :class:`AssetNotFoundError`."""
        ...  # pylint: disable=unnecessary-ellipsis

    def get_entries(self, asset_id: str) -> Sequence[DepreciationEntry]:
        """Return the asset's ledger, ordered by date ascending."""
        ...  # pylint: disable=unnecessary-ellipsis

    def append_entry(self, entry: DepreciationEntry) -> None:
        """Append one entry to the asset's ledger."""
        ...  # pylint: disable=unnecessary-ellipsis

    def set_asset_status(self, asset_id: str, status: AssetStatus) -> None:
        """Update the asset's registry status."""
        ...  # pylint: disable=unnecessary-ellipsis


class InMemoryAssetStore:
    """Dictionary-backed :class:`AssetStore`.

    Internal dictionaries are guarded by a lock, so concurrent calls from
    several threads leave the store consistent. Serializing a full
    read-latest/append sequence per asset is the recorder's job.

    Args:
        assets: Optional assets to register up front.
    """

    def __init__(self, assets: Iterable[Asset] = ()) -> None:
        self._assets: Dict[str, Asset] = {}
        self._entries: Dict[str, List[DepreciationEntry]] = {}
        self._lock = threading.Lock()
        for asset in assets:
            self.add_asset(asset)

    def add_asset(self, asset: Asset) -> None:
        """Register (or replace) an asset.

        Raises:
            ValueError: If the asset id is already registered with ledger entries.
        """
        with self._lock:
            if self._entries.get(asset.id):
                raise ValueError(f"Asset {asset.id} already has depreciation entries")
            self._assets[asset.id] = asset
            self._entries.setdefault(asset.id, [])

    def get_asset(self, asset_id: str) -> Asset:
        with self._lock:
            try:
                return self._assets[asset_id]
            except KeyError:
                raise AssetNotFoundError(asset_id) from None

    def get_entries(self, asset_id: str) -> List[DepreciationEntry]:
        """Return a snapshot copy of the ledger, oldest first."""
        with self._lock:
            if asset_id not in self._assets:
                raise AssetNotFoundError(asset_id)
            return list(self._entries[asset_id])

    def append_entry(self, entry: DepreciationEntry) -> None:
        """Append an entry, enforcing strictly increasing dates.

        Raises:
            AssetNotFoundError: If the entry's asset is unknown.
            InvalidEntryOrderingError: If the entry is not after the latest one.
        """
        with self._lock:
            if entry.asset_id not in self._assets:
                raise AssetNotFoundError(entry.asset_id)
            ledger = self._entries[entry.asset_id]
            if ledger and entry.date <= ledger[-1].date:
                raise InvalidEntryOrderingError(entry.asset_id, entry.date, ledger[-1].date)
            ledger.append(entry)
        logger.debug(
            f"Appended entry for asset {entry.asset_id} on {entry.date.isoformat()}: "
            f"amount {entry.amount}, book value {entry.book_value}"
        )

    def set_asset_status(self, asset_id: str, status: AssetStatus) -> None:
        with self._lock:
            try:
                asset = self._assets[asset_id]
            except KeyError:
                raise AssetNotFoundError(asset_id) from None
            self._assets[asset_id] = asset.with_status(status)
        logger.info(f"Asset {asset_id} status changed to {status.value}")

    def asset_ids(self) -> List[str]:
        """Return registered asset ids in insertion order."""
        with self._lock:
            return list(self._assets)

    def __len__(self) -> int:
        """Return the number of registered assets."""
        return len(self._assets)

    def __repr__(self) -> str:
        return f"InMemoryAssetStore(assets={len(self._assets)})"

    def __deepcopy__(self, memo: Dict[int, Any]) -> "InMemoryAssetStore":
        """Create an independent copy with its own lock."""
        result = InMemoryAssetStore.__new__(InMemoryAssetStore)
        memo[id(self)] = result
        with self._lock:
            result._assets = dict(self._assets)
            result._entries = copy.deepcopy(self._entries, memo)
        result._lock = threading.Lock()
        return result
