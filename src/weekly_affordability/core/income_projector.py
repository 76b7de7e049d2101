"""
Weekly income interpolation and trend projection from monthly wage data.
"""

import logging
from datetime import date
from typing import Optional, Sequence

from .interpolation import hermite_interpolate
from ..models import Observation
from ..utils.config import AffordabilityConfig
from ..utils.validation import validate_observations

logger = logging.getLogger(__name__)


class IncomeTrendProjector:
    """
    Estimates weekly earnings on arbitrary dates from a monthly wage series.

    Dates up to the last observed month are interpolated with a Hermite
    spline through the monthly values. Later dates compound the growth
    between the last two observations, counting months as fixed 30-day
    periods.
    """

    def __init__(self, observations: Sequence[Observation], config: Optional[AffordabilityConfig] = None):
        """
        Initialize the projector.

        Args:
            observations: Monthly wage observations dated the first of the month
            config: Pipeline settings

        Raises:
            DataValidationError: If the series has no valid observation
        """
        self.config = config or AffordabilityConfig()
        self.observations = validate_observations(observations, self.config.income_series)
        self.dates = [obs.date for obs in self.observations]
        self.values = [obs.value for obs in self.observations]

    @property
    def last_date(self) -> date:
        return self.dates[-1]

    @property
    def monthly_growth_rate(self) -> Optional[float]:
        """Growth between the last two observations, None with fewer than two or a zero base."""
        if len(self.values) < 2:
            return None
        prev_income, current_income = self.values[-2], self.values[-1]
        if prev_income == 0:
            logger.warning("Previous monthly income is zero, income will not be extrapolated")
            return None
        return (current_income - prev_income) / prev_income

    def is_estimated(self, target_date: date) -> bool:
        return target_date > self.last_date

    def estimate(self, target_date: date) -> float:
        """Weekly income on ``target_date``."""
        if target_date <= self.last_date:
            result = hermite_interpolate(self.values, self.dates, target_date)
            if result is not None:
                return result

            prior = [obs for obs in self.observations if obs.date <= target_date]
            if prior:
                return prior[-1].value
            return self.values[0]

        growth = self.monthly_growth_rate
        if growth is None:
            return self.values[-1]

        months_ahead = (target_date - self.last_date).days / self.config.days_per_month
        return self.values[-1] * (1 + growth) ** months_ahead
