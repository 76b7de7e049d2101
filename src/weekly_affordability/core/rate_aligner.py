"""
Alignment of the weekly mortgage rate series and extraction of anchor dates.

The anchor set of the whole pipeline is the list of dates on which the rate
series has a published value.
"""

import logging
from datetime import date
from typing import Dict, List, Sequence

from ..models import AlignedPoint, Observation
from ..utils.validation import DataValidationError

logger = logging.getLogger(__name__)


def _valid_observations(observations: Sequence[Observation]) -> List[Observation]:
    valid = [obs for obs in observations if obs.valid]
    if not valid:
        raise DataValidationError("Mortgage rate series has no valid observations to anchor the pipeline")
    return valid


def extract_anchor_dates(observations: Sequence[Observation]) -> List[date]:
    """
    Collect the release dates of the rate series.

    Returns:
        Sorted, de-duplicated dates of every observation holding a value

    Raises:
        DataValidationError: If no observation holds a value
    """
    anchors = sorted({obs.date for obs in _valid_observations(observations)})
    logger.info(f"Extracted {len(anchors)} anchor dates ({anchors[0]} to {anchors[-1]})")
    return anchors


def find_nearest_observation(observations: Sequence[Observation], target: date) -> Observation:
    """
    Valid observation closest to ``target`` by absolute day distance.

    Ties go to the observation found first, i.e. the earlier one for a
    chronologically ordered series.
    """
    return min(_valid_observations(observations), key=lambda obs: abs((obs.date - target).days))


def align_rate_series(observations: Sequence[Observation], anchors: Sequence[date]) -> List[AlignedPoint]:
    """
    Map the rate series onto the anchor dates.

    An anchor with a valid observation on the same date takes that value as
    actual data. Any other anchor takes the value of the nearest valid
    observation and is flagged as estimated.

    Raises:
        DataValidationError: If the series has no valid observation
    """
    valid = _valid_observations(observations)
    by_date: Dict[date, Observation] = {}
    for obs in valid:
        by_date.setdefault(obs.date, obs)

    aligned = []
    for anchor in anchors:
        exact = by_date.get(anchor)
        if exact is not None:
            aligned.append(AlignedPoint(date=anchor, value=exact.value))
        else:
            nearest = find_nearest_observation(valid, anchor)
            logger.debug(f"No rate released on {anchor}, using {nearest.date} ({nearest.value})")
            aligned.append(AlignedPoint(date=anchor, value=nearest.value, estimated=True))

    return aligned
