"""
Home price estimation strategies.

A strategy decides how a monthly price series is extended past its last
observed month. Both strategies share the interpolation kernel; the one in
use is selected by ``AffordabilityConfig.estimation_mode``.
"""

import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Dict, Optional, Sequence, Type

from .interpolation import estimate_daily_price, estimate_price_with_trend
from ..models import AlignedPoint, Observation
from ..utils.config import AffordabilityConfig, EstimationMode

logger = logging.getLogger(__name__)


def price_growth_rate(observations: Sequence[Observation], window: int = 6) -> float:
    """
    Average compounded monthly growth over the last ``window`` observations.

    Returns ``(last / first) ** (1 / (window - 1)) - 1`` where ``first`` is
    the observation ``window`` positions from the end, or 0.0 when the
    series is shorter than the window or either end value is not positive.
    """
    if len(observations) < window:
        return 0.0

    first = observations[-window].value
    last = observations[-1].value
    if first <= 0 or last <= 0:
        logger.warning(f"Non-positive value in growth window ({first}, {last}), assuming no growth")
        return 0.0

    return (last / first) ** (1.0 / (window - 1)) - 1


class EstimationStrategy(ABC):
    """
    Base class for price extrapolation strategies.

    Attributes:
        mode: Configuration value selecting the strategy
        last_observation: Last valid observation of the price series
    """

    mode: EstimationMode

    def __init__(self, observations: Sequence[Observation], config: AffordabilityConfig):
        if not observations:
            raise ValueError("An estimation strategy needs at least one observation")
        self.config = config
        self.observations = list(observations)
        self.last_observation = self.observations[-1]

    def actual_value(self, anchor: date) -> Optional[float]:
        """Observed value to use as is for an in-range anchor, if any."""
        return None

    @abstractmethod
    def extrapolate(self, anchor: date) -> AlignedPoint:
        """Estimate the value at an anchor after the last observed month."""

    @abstractmethod
    def describe(self) -> str:
        """One-line methodology note for the report."""


class TrendOnlyStrategy(EstimationStrategy):
    """Compounds the recent average monthly growth from the last observation."""

    mode = EstimationMode.TREND_ONLY

    def __init__(self, observations: Sequence[Observation], config: AffordabilityConfig):
        super().__init__(observations, config)
        self.monthly_growth_rate = price_growth_rate(self.observations, config.price_trend_window)
        logger.debug(f"Trend-only price estimation with monthly growth {self.monthly_growth_rate:.6f}")

    def extrapolate(self, anchor: date) -> AlignedPoint:
        value = estimate_price_with_trend(
            self.last_observation.value,
            self.last_observation.date,
            anchor,
            self.monthly_growth_rate,
            self.config.days_per_month
        )
        return AlignedPoint(
            date=anchor,
            value=round(value, 3),
            estimated=True,
            estimation_method=self.mode.value,
            monthly_growth_rate=self.monthly_growth_rate
        )

    def describe(self) -> str:
        return f"Trend-only estimation based on {self.config.price_trend_window}-month growth rate"


class DailySeasonalStrategy(EstimationStrategy):
    """Shifts the last observation by the daily seasonal factor difference."""

    mode = EstimationMode.DAILY_SEASONAL

    def actual_value(self, anchor: date) -> Optional[float]:
        last = self.last_observation.date
        if (anchor.year, anchor.month) == (last.year, last.month):
            return self.last_observation.value
        return None

    def extrapolate(self, anchor: date) -> AlignedPoint:
        value = estimate_daily_price(
            self.last_observation.value,
            self.last_observation.date,
            anchor,
            self.config.seasonal_offsets
        )
        return AlignedPoint(
            date=anchor,
            value=round(value, 3),
            estimated=True,
            estimation_method=self.mode.value
        )

    def describe(self) -> str:
        return "Daily seasonal-factor estimation from the last observed month"


STRATEGIES: Dict[EstimationMode, Type[EstimationStrategy]] = {
    EstimationMode.TREND_ONLY: TrendOnlyStrategy,
    EstimationMode.DAILY_SEASONAL: DailySeasonalStrategy,
}


def build_strategy(observations: Sequence[Observation], config: AffordabilityConfig) -> EstimationStrategy:
    """Instantiate the strategy selected by the configuration."""
    return STRATEGIES[config.estimation_mode](observations, config)
