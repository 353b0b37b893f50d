"""Domain types for the depreciation engine.

The asset record is owned by an external registry and is treated as
read-only input; depreciation entries form an append-only ledger owned by
the :class:`~asset_depreciation.recorder.DepreciationRecorder`. Result types
returned by the engine, projector and schedule builder live here as well so
that every component speaks the same vocabulary.

All monetary fields are ``Decimal``. Constructors accept ``int``, ``str`` or
``float`` and convert through :func:`~asset_depreciation.decimal_utils.to_decimal`.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import pandas as pd

from .decimal_utils import ZERO, to_decimal
from .exceptions import UnsupportedDepreciationMethodError
from .periods import MONTHS_PER_YEAR, as_date


class DepreciationMethod(Enum):
    """Supported depreciation methods.

    Each member maps to a pure accumulated-depreciation function in
    :mod:`asset_depreciation.engine`.
    """

    STRAIGHT_LINE = "STRAIGHT_LINE"
    DECLINING_BALANCE = "DECLINING_BALANCE"
    DOUBLE_DECLINING_BALANCE = "DOUBLE_DECLINING_BALANCE"
    SUM_OF_YEARS_DIGITS = "SUM_OF_YEARS_DIGITS"
    UNITS_OF_PRODUCTION = "UNITS_OF_PRODUCTION"

    @classmethod
    def parse(cls, value: Union["DepreciationMethod", str]) -> "DepreciationMethod":
        """Resolve a method from an enum member or its (case-insensitive) name.

        Raises:
            UnsupportedDepreciationMethodError: If the value names no method.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError as exc:
            raise UnsupportedDepreciationMethodError(value, "unknown method name") from exc

    @property
    def display_name(self) -> str:
        """Human-readable method name."""
        return _METHOD_CATALOGUE[self][0]

    @property
    def description(self) -> str:
        """One-sentence explanation of how the method allocates cost."""
        return _METHOD_CATALOGUE[self][1]

    @property
    def is_declining_balance(self) -> bool:
        """True for the methods that never mathematically reach residual value."""
        return self in (
            DepreciationMethod.DECLINING_BALANCE,
            DepreciationMethod.DOUBLE_DECLINING_BALANCE,
        )


_METHOD_CATALOGUE: Dict[DepreciationMethod, Tuple[str, str]] = {
    DepreciationMethod.STRAIGHT_LINE: (
        "Straight Line",
        "Depreciates the asset by an equal amount each period over its useful life",
    ),
    DepreciationMethod.DECLINING_BALANCE: (
        "Declining Balance",
        "Applies a constant rate to the declining book value of the asset",
    ),
    DepreciationMethod.DOUBLE_DECLINING_BALANCE: (
        "Double Declining Balance",
        "Accelerated method that applies twice the straight-line rate to the declining "
        "book value",
    ),
    DepreciationMethod.SUM_OF_YEARS_DIGITS: (
        "Sum of Years Digits",
        "Accelerated method that allocates more depreciation in earlier years",
    ),
    DepreciationMethod.UNITS_OF_PRODUCTION: (
        "Units of Production",
        "Bases depreciation on actual usage; estimated with straight line when no usage "
        "data exists",
    ),
}


class AssetStatus(Enum):
    """Lifecycle status of an asset.

    Only ``ACTIVE -> FULLY_DEPRECIATED`` is driven by this package; the other
    statuses are maintained by the asset registry.
    """

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    UNDER_MAINTENANCE = "UNDER_MAINTENANCE"
    DISPOSED = "DISPOSED"
    FULLY_DEPRECIATED = "FULLY_DEPRECIATED"


@dataclass(frozen=True)
class Asset:
    """A fixed asset as seen by the depreciation engine.

    Attributes:
        id: Registry identifier.
        purchase_date: Date the asset was acquired; depreciation starts here.
        purchase_cost: Original cost (>= 0).
        residual_value: Floor for book value (0 <= residual <= cost).
        asset_life_years: Useful life in whole years (> 0).
        depreciation_method: Method used when no override is given.
        status: Registry status.
    """

    id: str
    purchase_date: date
    purchase_cost: Decimal
    residual_value: Decimal
    asset_life_years: int
    depreciation_method: DepreciationMethod = DepreciationMethod.STRAIGHT_LINE
    status: AssetStatus = AssetStatus.ACTIVE

    def __post_init__(self) -> None:
        """Normalize field types and validate value ranges."""
        object.__setattr__(self, "purchase_date", as_date(self.purchase_date))
        object.__setattr__(self, "purchase_cost", to_decimal(self.purchase_cost))
        object.__setattr__(self, "residual_value", to_decimal(self.residual_value))
        object.__setattr__(
            self, "depreciation_method", DepreciationMethod.parse(self.depreciation_method)
        )
        if not isinstance(self.status, AssetStatus):
            object.__setattr__(self, "status", AssetStatus(self.status))

        if self.purchase_cost < ZERO:
            raise ValueError(f"Purchase cost must be non-negative, got {self.purchase_cost}")
        if self.residual_value < ZERO:
            raise ValueError(f"Residual value must be non-negative, got {self.residual_value}")
        if self.residual_value > self.purchase_cost:
            raise ValueError(
                f"Residual value {self.residual_value} exceeds purchase cost {self.purchase_cost}"
            )
        life = self.asset_life_years
        if isinstance(life, bool) or not isinstance(life, (int, float)) or int(life) != life:
            raise ValueError(f"Asset life must be a whole number of years, got {life!r}")
        object.__setattr__(self, "asset_life_years", int(self.asset_life_years))
        if self.asset_life_years <= 0:
            raise ValueError(f"Asset life must be positive, got {self.asset_life_years}")

    @property
    def depreciable_amount(self) -> Decimal:
        """Total amount that can ever be depreciated (cost - residual)."""
        return self.purchase_cost - self.residual_value

    @property
    def life_months(self) -> int:
        """Nominal useful life in months."""
        return self.asset_life_years * MONTHS_PER_YEAR

    def with_status(self, status: AssetStatus) -> "Asset":
        """Return a copy of this asset with a different status."""
        return replace(self, status=status)


@dataclass(frozen=True)
class DepreciationEntry:
    """One row of the depreciation ledger.

    Attributes:
        asset_id: Asset the entry belongs to.
        date: Date the depreciation was recognized.
        amount: Depreciation taken by this entry.
        book_value: Book value snapshot after this entry.
    """

    asset_id: str
    date: date
    amount: Decimal
    book_value: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(self, "date", as_date(self.date))
        object.__setattr__(self, "amount", to_decimal(self.amount))
        object.__setattr__(self, "book_value", to_decimal(self.book_value))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a plain dictionary (ISO date, Decimal amounts)."""
        return {
            "date": self.date.isoformat(),
            "amount": self.amount,
            "book_value": self.book_value,
        }


@dataclass(frozen=True)
class ProjectedEntry:
    """An advisory, not-yet-recorded depreciation period."""

    date: date
    amount: Decimal
    book_value: Decimal

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a plain dictionary (ISO date, Decimal amounts)."""
        return {
            "date": self.date.isoformat(),
            "amount": self.amount,
            "book_value": self.book_value,
        }


@dataclass(frozen=True)
class DepreciationState:
    """Depreciation position of an asset at a point in time.

    Attributes:
        accumulated_depreciation: Total depreciation recognized to date.
        current_book_value: ``purchase_cost - accumulated_depreciation``.
        entries: Historical ledger when ``is_historical``; otherwise a single
            synthetic entry carrying the analytical result.
        is_historical: True when the ledger, not a formula, produced the state.
        is_approximation: True when a substitute method produced the figures.
    """

    accumulated_depreciation: Decimal
    current_book_value: Decimal
    entries: Tuple[DepreciationEntry, ...]
    is_historical: bool
    is_approximation: bool = False


@dataclass(frozen=True)
class RecordResult:
    """Outcome of a ledger recording.

    Attributes:
        entry: The entry that was appended.
        requested_amount: Amount the caller asked to record.
        adjusted: True when the amount was clamped to the residual floor.
        status_changed: True when the asset moved to ``FULLY_DEPRECIATED``.
    """

    entry: DepreciationEntry
    requested_amount: Decimal
    adjusted: bool = False
    status_changed: bool = False

    @property
    def adjustment(self) -> Decimal:
        """Amount that was requested but not recorded."""
        return self.requested_amount - self.entry.amount


def _rows(
    entries: Sequence[Union[DepreciationEntry, ProjectedEntry]], projected: bool
) -> List[Dict[str, Any]]:
    return [
        {
            "date": e.date,
            "amount": e.amount,
            "book_value": e.book_value,
            "projected": projected,
        }
        for e in entries
    ]


@dataclass
class DepreciationSchedule:
    """Full depreciation schedule: authoritative history plus projection.

    ``projected_entries`` are non-binding estimates and must be regenerated
    whenever the ledger changes.
    """

    asset_id: str
    original_cost: Decimal
    residual_value: Decimal
    depreciable_amount: Decimal
    accumulated_depreciation: Decimal
    current_book_value: Decimal
    is_fully_depreciated: bool
    entries: List[DepreciationEntry] = field(default_factory=list)
    projected_entries: List[ProjectedEntry] = field(default_factory=list)

    def to_dataframe(self) -> pd.DataFrame:
        """Return history and projection as one DataFrame.

        Columns are ``date``, ``amount``, ``book_value`` and ``projected``
        (bool). Amounts stay ``Decimal`` (object dtype) so sums remain exact.
        """
        rows = _rows(self.entries, projected=False) + _rows(
            self.projected_entries, projected=True
        )
        return pd.DataFrame(rows, columns=["date", "amount", "book_value", "projected"])

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the schedule to plain Python types."""
        return {
            "asset_id": self.asset_id,
            "original_cost": self.original_cost,
            "residual_value": self.residual_value,
            "depreciable_amount": self.depreciable_amount,
            "accumulated_depreciation": self.accumulated_depreciation,
            "current_book_value": self.current_book_value,
            "is_fully_depreciated": self.is_fully_depreciated,
            "entries": [e.to_dict() for e in self.entries],
            "projected_entries": [e.to_dict() for e in self.projected_entries],
        }


@dataclass
class DepreciationReport:
    """Point-in-time depreciation calculation for one asset."""

    asset_id: str
    depreciation_method: DepreciationMethod
    as_of_date: date
    original_cost: Decimal
    residual_value: Decimal
    depreciable_amount: Decimal
    accumulated_depreciation: Decimal
    current_book_value: Decimal
    is_fully_depreciated: bool
    is_approximation: bool
    entries: List[DepreciationEntry] = field(default_factory=list)
    projected_entries: Optional[List[ProjectedEntry]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the report to plain Python types."""
        result: Dict[str, Any] = {
            "asset_id": self.asset_id,
            "depreciation_method": self.depreciation_method.value,
            "as_of_date": self.as_of_date.isoformat(),
            "original_cost": self.original_cost,
            "residual_value": self.residual_value,
            "depreciable_amount": self.depreciable_amount,
            "accumulated_depreciation": self.accumulated_depreciation,
            "current_book_value": self.current_book_value,
            "is_fully_depreciated": self.is_fully_depreciated,
            "is_approximation": self.is_approximation,
            "entries": [e.to_dict() for e in self.entries],
        }
        if self.projected_entries is not None:
            result["projected_entries"] = [e.to_dict() for e in self.projected_entries]
        return result
