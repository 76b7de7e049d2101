"""
Configuration management for the weekly affordability pipeline.
"""

import copy
import yaml
from dataclasses import dataclass, fields
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union
import logging

from .validation import ConfigValidationError, validate_config

logger = logging.getLogger(__name__)

# Seasonal offsets of home prices relative to the yearly mean, January first
DEFAULT_SEASONAL_OFFSETS = (
    -0.010, -0.008, -0.003, 0.003, 0.008, 0.011,
    0.010, 0.007, 0.002, -0.003, -0.007, -0.010,
)


class EstimationMode(str, Enum):
    """How home prices are extended past the last observed month."""
    TREND_ONLY = "trend_only"
    DAILY_SEASONAL = "daily_seasonal"


class Config:
    _instance = None

    def __new__(cls, config_path: Optional[Union[str, Path]] = None):
        if cls._instance is None or config_path is not None:
            instance = super(Config, cls).__new__(cls)
            instance._load_config(config_path)
            cls._instance = instance
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Forget the loaded configuration so the next access reloads it."""
        cls._instance = None

    def _load_config(self, config_path: Optional[Union[str, Path]] = None):
        """Load configuration from YAML file, layered over the defaults."""
        self._config = self._get_default_config()
        path = Path(config_path) if config_path else Path(__file__).parent / "config.yaml"
        self.path = path

        if not path.exists():
            if config_path:
                raise ConfigValidationError(f"Configuration file not found: {path}")
            logger.debug(f"No configuration file at {path}, using defaults")
            return

        try:
            with open(path, "r") as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Error parsing configuration file {path}: {e}")

        if not isinstance(loaded, dict):
            raise ConfigValidationError(f"Configuration file {path} must contain a mapping")

        self._config = self._merge(self._config, loaded)
        validate_config(self._config)
        logger.info(f"Loaded configuration from {path}")

    @staticmethod
    def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        merged = copy.deepcopy(base)
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = Config._merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration values."""
        return {
            "affordability": {
                "loan_term_months": 360,
                "household_multiplier": 1.4,
                "years_back": 10,
                "weeks_per_year": 52,
                "days_per_month": 30.0,
                "price_trend_window": 6,
                "estimation_mode": EstimationMode.TREND_ONLY.value,
                "seasonal_offsets": list(DEFAULT_SEASONAL_OFFSETS)
            },
            "series": {
                "income": "CES0500000011",
                "home_price": "USAUCSFRCONDOSMSAMID",
                "mortgage_rate": "MORTGAGE30US"
            },
            "output": {
                "file": "weekly_case_shiller_output.json"
            },
            "logging": {
                "level": "INFO",
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        try:
            current = self._config
            for k in key.split('.'):
                current = current[k]
            return current
        except (KeyError, TypeError):
            return default


@dataclass(frozen=True)
class AffordabilityConfig:
    """
    Immutable settings shared by the aligners, the income projector and
    the affordability compositor.

    Attributes:
        loan_term_months: Number of monthly payments of the mortgage
        household_multiplier: Household income as a multiple of single income
        years_back: Default lookback window of the wage series
        weeks_per_year: Weeks used to annualize weekly earnings
        days_per_month: Fixed month length used by trend compounding
        price_trend_window: Number of monthly prices spanned by the growth rate
        estimation_mode: Home price extrapolation strategy
        seasonal_offsets: Monthly seasonal offsets for the seasonal strategy
        start_date: Optional start date overriding the lookback window
        income_series: BLS wage series id
        home_price_series: FRED home price series id
        mortgage_rate_series: FRED mortgage rate series id
    """
    loan_term_months: int = 360
    household_multiplier: float = 1.4
    years_back: int = 10
    weeks_per_year: int = 52
    days_per_month: float = 30.0
    price_trend_window: int = 6
    estimation_mode: EstimationMode = EstimationMode.TREND_ONLY
    seasonal_offsets: Tuple[float, ...] = DEFAULT_SEASONAL_OFFSETS
    start_date: Optional[date] = None
    income_series: str = "CES0500000011"
    home_price_series: str = "USAUCSFRCONDOSMSAMID"
    mortgage_rate_series: str = "MORTGAGE30US"

    def __post_init__(self):
        try:
            mode = EstimationMode(self.estimation_mode)
        except ValueError:
            choices = ", ".join(m.value for m in EstimationMode)
            raise ConfigValidationError(
                f"Unknown estimation mode {self.estimation_mode!r}, expected one of: {choices}"
            )
        object.__setattr__(self, "estimation_mode", mode)
        object.__setattr__(self, "seasonal_offsets", tuple(float(v) for v in self.seasonal_offsets))

        if self.loan_term_months <= 0:
            raise ConfigValidationError("loan_term_months must be positive")
        if self.household_multiplier <= 0:
            raise ConfigValidationError("household_multiplier must be positive")
        if self.years_back <= 0:
            raise ConfigValidationError("years_back must be positive")
        if self.weeks_per_year <= 0 or self.days_per_month <= 0:
            raise ConfigValidationError("weeks_per_year and days_per_month must be positive")
        if self.price_trend_window < 2:
            raise ConfigValidationError("price_trend_window must span at least 2 months")
        if len(self.seasonal_offsets) != 12:
            raise ConfigValidationError("seasonal_offsets must list exactly 12 monthly values")

    @classmethod
    def from_config(cls, config: Optional[Config] = None, **overrides: Any) -> "AffordabilityConfig":
        """
        Build the settings from a loaded configuration.

        Args:
            config: Loaded configuration, the shared instance if omitted
            **overrides: Field values taking precedence over the configuration,
                ``None`` values are ignored

        Returns:
            Validated AffordabilityConfig
        """
        config = config or Config()
        section = dict(config.get('affordability', {}))
        series = config.get('series', {})
        section.setdefault('income_series', series.get('income'))
        section.setdefault('home_price_series', series.get('home_price'))
        section.setdefault('mortgage_rate_series', series.get('mortgage_rate'))

        known = {f.name for f in fields(cls)}
        unknown = set(section) - known
        if unknown:
            raise ConfigValidationError(f"Unknown affordability settings: {sorted(unknown)}")

        values = {k: v for k, v in section.items() if v is not None}
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
