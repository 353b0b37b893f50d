"""Configuration for the depreciation engine using Pydantic v2 models.

The engine's policy choices (declining-balance rates, how long a
declining-balance asset is assumed to take to reach residual value, how the
units-of-production method is handled, projection bounds) are collected in
:class:`DepreciationConfig` so that they are explicit, validated and
overridable rather than magic numbers in the formulas.

Examples:
    Defaults::

        from asset_depreciation.config import DepreciationConfig

        config = DepreciationConfig()

    Refuse to approximate units-of-production::

        config = DepreciationConfig(units_of_production_policy="error")

    Loading from file::

        config = DepreciationConfig.from_yaml(Path("depreciation.yaml"))
        config.setup_logging()
"""

from decimal import Decimal
import logging
from pathlib import Path
import sys
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
import yaml

DECLINING_BALANCE_LIFE_MULTIPLIER: Decimal = Decimal("1.2")
"""Multiple of the straight-line life after which a declining-balance asset is
treated as fully depreciated. The declining-balance formulas only approach
residual value asymptotically, so this is an approximation threshold."""

DECLINING_BALANCE_RATE: Decimal = Decimal("1.5")
"""Annual rate numerator for the declining-balance method (rate = 1.5 / life)."""

DOUBLE_DECLINING_BALANCE_RATE: Decimal = Decimal("2.0")
"""Annual rate numerator for double declining balance (rate = 2 / life)."""

PACKAGE_LOGGER = "asset_depreciation"


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class LoggingConfig(BaseModel):
    """Logging configuration.

    Controls level, output destinations and message formatting of the
    ``asset_depreciation`` logger hierarchy.
    """

    enabled: bool = Field(default=True, description="Enable logging")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging level"
    )
    log_file: Optional[str] = Field(
        default=None, description="Log file path (None=no file logging)"
    )
    console_output: bool = Field(default=True, description="Log to console")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )


class DepreciationConfig(BaseModel):
    """Policy parameters for depreciation calculations.

    Attributes:
        declining_balance_rate: Numerator of the declining-balance annual
            rate (``rate = declining_balance_rate / life_years``).
        double_declining_balance_rate: Numerator of the double
            declining-balance annual rate.
        declining_balance_life_multiplier: Multiple of the nominal life used
            as the fully-depreciated date for declining-balance methods.
        units_of_production_policy: ``"straight_line_fallback"`` estimates
            units-of-production with straight line and flags the result as
            an approximation; ``"error"`` refuses the method.
        default_projection_periods: Months projected when the caller asks for
            projections without giving a count.
        max_projection_periods: Hard cap on projected months per call.
        logging: Logging settings applied by :meth:`setup_logging`.
    """

    declining_balance_rate: Decimal = Field(
        default=DECLINING_BALANCE_RATE, gt=0, le=10, description="Declining-balance rate numerator"
    )
    double_declining_balance_rate: Decimal = Field(
        default=DOUBLE_DECLINING_BALANCE_RATE,
        gt=0,
        le=10,
        description="Double declining-balance rate numerator",
    )
    declining_balance_life_multiplier: Decimal = Field(
        default=DECLINING_BALANCE_LIFE_MULTIPLIER,
        ge=1,
        le=10,
        description="Life multiple after which declining-balance assets count as fully depreciated",
    )
    units_of_production_policy: Literal["straight_line_fallback", "error"] = Field(
        default="straight_line_fallback",
        description="Handling of units-of-production when no usage data is available",
    )
    default_projection_periods: int = Field(
        default=12, ge=0, description="Default number of months to project"
    )
    max_projection_periods: int = Field(
        default=1200, gt=0, le=12000, description="Maximum months projected per call"
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("double_declining_balance_rate")
    @classmethod
    def validate_double_rate(cls, v: Decimal) -> Decimal:
        """Reject a double declining-balance rate below straight line.

        Raises:
            ValueError: If the rate numerator is below 1, which would make the
                "accelerated" method slower than straight line.
        """
        if v < 1:
            raise ValueError(
                f"Double declining-balance rate {v} is slower than straight line"
            )
        return v

    @model_validator(mode="after")
    def validate_projection_bounds(self):
        """Ensure the default projection fits within the cap.

        Raises:
            ValueError: If ``default_projection_periods`` exceeds
                ``max_projection_periods``.
        """
        if self.default_projection_periods > self.max_projection_periods:
            raise ValueError(
                f"Default projection periods {self.default_projection_periods} exceeds "
                f"maximum {self.max_projection_periods}"
            )
        return self

    @classmethod
    def from_yaml(cls, path: Path) -> "DepreciationConfig":
        """Load configuration from a YAML file.

        Keys starting with ``_`` (YAML anchor holders) are ignored.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValidationError: If the configuration is invalid.
        """
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        data = {k: v for k, v in data.items() if not k.startswith("_")}
        return cls(**data)

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], base_config: Optional["DepreciationConfig"] = None
    ) -> "DepreciationConfig":
        """Create a config from a dictionary, optionally layered on a base config."""
        if base_config is None:
            return cls(**data)
        merged = _deep_merge(base_config.model_dump(), data)
        return cls(**merged)

    def to_yaml(self, path: Path) -> None:
        """Save configuration to a YAML file.

        Decimal values are written as strings so they round-trip exactly.
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                self.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False
            )

    def setup_logging(self) -> None:
        """Configure the package logger from :attr:`logging`.

        Sets up console and/or file handlers on the ``asset_depreciation``
        logger. Existing handlers on that logger are replaced.
        """
        if not self.logging.enabled:
            return

        logger = logging.getLogger(PACKAGE_LOGGER)
        logger.setLevel(getattr(logging, self.logging.level))
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()

        formatter = logging.Formatter(self.logging.format)

        if self.logging.console_output:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

        if self.logging.log_file:
            log_path = Path(self.logging.log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
