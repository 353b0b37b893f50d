"""Custom warning classes for the asset_depreciation package.

These warning classes allow callers to programmatically filter, suppress,
or capture warnings using Python's standard ``warnings`` module.

Example:
    Turn approximation warnings into hard failures in a batch close::

        import warnings
        from asset_depreciation._warnings import ApproximationWarning

        warnings.filterwarnings("error", category=ApproximationWarning)

    Capture approximations during a report run::

        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter("always", ApproximationWarning)
            report = service.calculate_depreciation(asset_id)
            approximated = [x for x in w if issubclass(x.category, ApproximationWarning)]
"""


class AssetDepreciationWarning(UserWarning):
    """Base class for all asset_depreciation warnings."""


class ApproximationWarning(AssetDepreciationWarning):
    """A depreciation figure was estimated with a substitute method.

    Raised when the units-of-production method is requested but no usage
    data is modeled, so the straight-line schedule stands in for it.
    """
