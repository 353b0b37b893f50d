"""Exceptions raised by the depreciation engine.

Over-depreciation is deliberately absent from this module: an amount that
would push book value below residual value is clamped by the recorder and
reported through :attr:`~asset_depreciation.models.RecordResult.adjusted`.
"""

from datetime import date
from decimal import Decimal
from typing import Optional


class DepreciationError(Exception):
    """Base class for all depreciation errors."""


class AssetNotFoundError(DepreciationError, KeyError):
    """Raised when an asset id is unknown to the store.

    Attributes:
        asset_id: The id that was looked up.
    """

    def __init__(self, asset_id: str) -> None:
        self.asset_id = asset_id
        super().__init__(f"Asset with ID {asset_id} not found")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class UnsupportedDepreciationMethodError(DepreciationError):
    """Raised when a depreciation method cannot be evaluated.

    Attributes:
        method: The method value that was requested.
        reason: Why the method is unsupported.
    """

    def __init__(self, method: object, reason: str = "") -> None:
        self.method = method
        self.reason = reason
        message = f"Unsupported depreciation method: {method!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class InvalidEntryOrderingError(DepreciationError):
    """Raised when a new entry is not dated strictly after the latest one.

    Attributes:
        asset_id: Asset the entry was recorded against.
        entry_date: Date of the rejected entry.
        latest_date: Date of the latest existing entry.
    """

    def __init__(self, asset_id: str, entry_date: date, latest_date: date) -> None:
        self.asset_id = asset_id
        self.entry_date = entry_date
        self.latest_date = latest_date
        super().__init__(
            f"Depreciation entry for asset {asset_id} dated {entry_date.isoformat()} "
            f"must be after the latest entry dated {latest_date.isoformat()}"
        )


class NegativeAmountError(DepreciationError, ValueError):
    """Raised when a negative depreciation amount is submitted.

    Attributes:
        amount: The rejected amount.
    """

    def __init__(self, amount: Decimal) -> None:
        self.amount = amount
        super().__init__(f"Depreciation amount must be non-negative, got {amount}")


class AssetFullyDepreciatedError(DepreciationError):
    """Raised when recording against an asset already at residual value.

    Attributes:
        asset_id: The fully depreciated asset.
        book_value: Its book value (equal to residual value).
    """

    def __init__(self, asset_id: str, book_value: Optional[Decimal] = None) -> None:
        self.asset_id = asset_id
        self.book_value = book_value
        message = f"Asset {asset_id} is fully depreciated"
        if book_value is not None:
            message += f" (book value {book_value})"
        super().__init__(message)
