"""Asset Depreciation"""

from ._version import __version__

# Use lazy imports so importing the package does not pull in pandas/matplotlib
# Direct imports are defined but modules are imported only when accessed

__all__ = [
    "__version__",
    "ApproximationWarning",
    "Asset",
    "AssetDepreciationWarning",
    "AssetFullyDepreciatedError",
    "AssetNotFoundError",
    "AssetStatus",
    "AssetStore",
    "DepreciationConfig",
    "DepreciationEngine",
    "DepreciationEntry",
    "DepreciationError",
    "DepreciationMethod",
    "DepreciationProjector",
    "DepreciationRecorder",
    "DepreciationReport",
    "DepreciationSchedule",
    "DepreciationService",
    "DepreciationState",
    "InMemoryAssetStore",
    "InvalidEntryOrderingError",
    "LoggingConfig",
    "NegativeAmountError",
    "ProjectedEntry",
    "RecordResult",
    "ScheduleBuilder",
    "UnsupportedDepreciationMethodError",
    "format_currency",
    "plot_schedule",
]


def __getattr__(name):
    """Lazy import modules to avoid loading plotting and pandas until needed."""
    if name in [
        "Asset",
        "AssetStatus",
        "DepreciationEntry",
        "DepreciationMethod",
        "DepreciationReport",
        "DepreciationSchedule",
        "DepreciationState",
        "ProjectedEntry",
        "RecordResult",
    ]:
        from . import models

        return getattr(models, name)
    elif name in [
        "AssetFullyDepreciatedError",
        "AssetNotFoundError",
        "DepreciationError",
        "InvalidEntryOrderingError",
        "NegativeAmountError",
        "UnsupportedDepreciationMethodError",
    ]:
        from . import exceptions

        return getattr(exceptions, name)
    elif name == "ApproximationWarning" or name == "AssetDepreciationWarning":
        from ._warnings import ApproximationWarning, AssetDepreciationWarning

        return locals()[name]
    elif name == "DepreciationConfig" or name == "LoggingConfig":
        from .config import DepreciationConfig, LoggingConfig

        return locals()[name]
    elif name == "DepreciationEngine":
        from .engine import DepreciationEngine

        return DepreciationEngine
    elif name == "AssetStore" or name == "InMemoryAssetStore":
        from .store import AssetStore, InMemoryAssetStore

        return locals()[name]
    elif name == "DepreciationRecorder":
        from .recorder import DepreciationRecorder

        return DepreciationRecorder
    elif name == "DepreciationProjector":
        from .projector import DepreciationProjector

        return DepreciationProjector
    elif name == "ScheduleBuilder":
        from .schedule import ScheduleBuilder

        return ScheduleBuilder
    elif name == "DepreciationService":
        from .service import DepreciationService

        return DepreciationService
    elif name == "format_currency" or name == "plot_schedule":
        from .visualization import format_currency, plot_schedule

        return locals()[name]
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
