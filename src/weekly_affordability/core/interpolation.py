"""
Interpolation kernel for date-indexed scalar series.

All functions work on plain ``datetime.date`` values and floats and measure
distances in whole days. They never raise on degenerate input: empty or
single-point series, zero day spans and non-finite intermediate results are
handled by falling back to a simpler rule.
"""

import calendar
import logging
import math
from bisect import bisect_right
from datetime import date
from typing import Optional, Sequence

import numpy as np
from scipy.interpolate import CubicHermiteSpline

from ..utils.config import DEFAULT_SEASONAL_OFFSETS

logger = logging.getLogger(__name__)


def linear_interpolate(v1: float, v2: float, d1: date, d2: date, target: date) -> float:
    """
    Linearly blend two dated values by day fraction.

    Args:
        v1: Value at ``d1``
        v2: Value at ``d2``
        d1: Start date of the bracket
        d2: End date of the bracket
        target: Date to evaluate

    Returns:
        ``v1`` at ``d1``, ``v2`` at ``d2`` and the day-weighted blend in
        between. A zero-length bracket returns ``v1``.
    """
    if target == d1:
        return v1
    if target == d2:
        return v2

    days_diff = (d2 - d1).days
    if days_diff == 0:
        return v1

    ratio = (target - d1).days / days_diff
    return v1 + (v2 - v1) * ratio


def hermite_interpolate(values: Sequence[float], dates: Sequence[date], target: date) -> Optional[float]:
    """
    Cubic Hermite spline interpolation with centred-difference tangents.

    The spline segment between the two control points bracketing ``target``
    uses the neighbouring point on each side to estimate tangents. Targets
    outside the control points get the nearest end value, brackets touching
    either end of the series fall back to linear interpolation, and so does
    any non-finite spline result.

    Args:
        values: Control point values
        dates: Control point dates, strictly increasing
        target: Date to evaluate

    Returns:
        Interpolated value, or None if there are no control points
    """
    if len(values) == 0 or len(dates) == 0:
        return None
    if len(dates) == 1:
        return values[0]

    # First control point strictly after the target
    idx = bisect_right(dates, target)
    if idx == len(dates):
        return values[-1]
    if idx == 0:
        return values[0]

    i1, i2 = idx - 1, idx
    d1, d2 = dates[i1], dates[i2]
    v1, v2 = values[i1], values[i2]

    if i1 == 0 or i2 == len(dates) - 1:
        return linear_interpolate(v1, v2, d1, d2, target)

    d0, d3 = dates[i1 - 1], dates[i2 + 1]
    v0, v3 = values[i1 - 1], values[i2 + 1]

    days_current = (d2 - d1).days
    if days_current == 0:
        return v1

    days_before = (d1 - d0).days
    days_after = (d3 - d2).days
    if days_before == 0 or days_after == 0:
        return linear_interpolate(v1, v2, d1, d2, target)

    slope_current = (v2 - v1) / days_current
    m1 = ((v1 - v0) / days_before + slope_current) / 2.0
    m2 = (slope_current + (v3 - v2) / days_after) / 2.0

    if not np.all(np.isfinite([v1, v2, m1, m2])):
        return linear_interpolate(v1, v2, d1, d2, target)

    # Tangents are per day, so the segment is parametrized in elapsed days
    segment = CubicHermiteSpline([0.0, float(days_current)], [v1, v2], [m1, m2])
    with np.errstate(over="ignore", invalid="ignore"):
        result = float(segment((target - d1).days))

    if not math.isfinite(result):
        logger.debug(f"Non-finite spline value at {target}, using linear interpolation")
        return linear_interpolate(v1, v2, d1, d2, target)

    return result


def estimate_price_with_trend(
    base_value: float,
    base_date: date,
    target_date: date,
    monthly_growth_rate: float = 0.0,
    days_per_month: float = 30.0
) -> float:
    """
    Compound a monthly growth rate over the days between two dates.

    The monthly rate is converted to the equivalent daily rate
    ``(1 + monthly) ** (1 / days_per_month) - 1`` and applied once per
    whole elapsed day.
    """
    days_elapsed = (target_date - base_date).days
    daily_growth_rate = (1 + monthly_growth_rate) ** (1.0 / days_per_month) - 1
    return base_value * (1 + daily_growth_rate) ** days_elapsed


def daily_seasonal_factor(target: date, offsets: Sequence[float] = DEFAULT_SEASONAL_OFFSETS) -> float:
    """
    Smooth daily seasonal factor from twelve monthly offsets.

    The day of year is mapped to a fractional month position
    ``(day_of_year - 1) * 12 / days_in_year`` and the factor is linearly
    interpolated between the offset of that month and the next one,
    wrapping from December back to January.
    """
    days_in_year = 366 if calendar.isleap(target.year) else 365
    position = (target.timetuple().tm_yday - 1) * 12.0 / days_in_year
    knots = np.arange(13)
    wrapped = np.append(np.asarray(offsets, dtype=float), offsets[0])
    return float(np.interp(position, knots, wrapped))


def estimate_daily_price(
    base_value: float,
    base_date: date,
    target_date: date,
    offsets: Sequence[float] = DEFAULT_SEASONAL_OFFSETS
) -> float:
    """Shift a base value by the seasonal factor difference between two dates."""
    factor_delta = daily_seasonal_factor(target_date, offsets) - daily_seasonal_factor(base_date, offsets)
    return base_value * (1 + factor_delta)
