"""
Alignment of a monthly price series onto weekly anchor dates.
"""

import calendar
import logging
import math
from datetime import date
from typing import List, Sequence, Tuple

from .estimation import build_strategy
from .interpolation import hermite_interpolate
from ..models import AlignedPoint, Observation
from ..utils.config import AffordabilityConfig
from ..utils.validation import validate_observations

logger = logging.getLogger(__name__)

__all__ = ['align_price_series', 'control_points', 'month_end']


def month_end(day: date) -> date:
    """Last day of the month containing ``day``."""
    return date(day.year, day.month, calendar.monthrange(day.year, day.month)[1])


def control_points(observations: Sequence[Observation]) -> Tuple[List[date], List[float]]:
    """Spline control points, one per observed month dated the first of the month."""
    dates = [date(obs.date.year, obs.date.month, 1) for obs in observations]
    values = [obs.value for obs in observations]
    return dates, values


def _nearest_control_value(dates: Sequence[date], values: Sequence[float], target: date) -> float:
    nearest = min(range(len(dates)), key=lambda i: abs((dates[i] - target).days))
    return values[nearest]


def align_price_series(
    observations: Sequence[Observation],
    anchors: Sequence[date],
    config: AffordabilityConfig
) -> List[AlignedPoint]:
    """
    Map a monthly price series onto the anchor dates.

    Anchors up to the end of the last observed month are interpolated with
    a Hermite spline through the monthly control points. Later anchors are
    extrapolated by the configured estimation strategy.

    Args:
        observations: Monthly observations in chronological order
        anchors: Ascending anchor dates
        config: Pipeline settings

    Returns:
        One AlignedPoint per anchor, values rounded to 3 decimals

    Raises:
        DataValidationError: If the series has no valid observation
    """
    valid = validate_observations(observations, config.home_price_series)
    strategy = build_strategy(valid, config)
    last_actual_end = month_end(valid[-1].date)
    dates, values = control_points(valid)
    observed_dates = set(dates)

    logger.info(
        f"Aligning {len(valid)} monthly prices onto {len(anchors)} anchors "
        f"(last actual month ends {last_actual_end}, mode {strategy.mode.value})"
    )

    aligned = []
    for anchor in anchors:
        if anchor > last_actual_end:
            aligned.append(strategy.extrapolate(anchor))
            continue

        actual = strategy.actual_value(anchor)
        if actual is not None:
            aligned.append(AlignedPoint(date=anchor, value=round(actual, 3)))
            continue

        value = hermite_interpolate(values, dates, anchor)
        if value is None or not math.isfinite(value):
            value = _nearest_control_value(dates, values, anchor)
            logger.warning(f"Interpolation failed for {anchor}, using nearest monthly value {value}")

        aligned.append(AlignedPoint(
            date=anchor,
            value=round(value, 3),
            interpolated=anchor not in observed_dates
        ))

    estimated = sum(1 for point in aligned if point.estimated)
    logger.debug(f"Price alignment: {len(aligned) - estimated} interpolated, {estimated} estimated")
    return aligned
