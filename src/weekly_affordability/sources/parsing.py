"""
Parsing of raw FRED and BLS responses into observation lists.

String values and placeholders are resolved here, once; malformed dates or
values abort the run with a DataValidationError naming the series.
"""

import logging
from datetime import date
from typing import Any, Dict, List

import pandas as pd

from ..models import Observation
from ..utils.validation import DataValidationError

logger = logging.getLogger(__name__)

# Values published for a release slot without data
PLACEHOLDERS = ("", ".", "-")


def income_cutoff_date(today: date, years_back: int) -> date:
    """First day of the current month, ``years_back`` years earlier."""
    return date(today.year - years_back, today.month, 1)


def _frame_to_observations(df: pd.DataFrame, series_id: str) -> List[Observation]:
    """Convert a frame with ``date``, ``raw`` and ``record`` columns."""
    raw = df['raw'].fillna('').astype(str).str.strip()
    placeholder = raw.isin(PLACEHOLDERS)
    values = pd.to_numeric(raw.where(~placeholder), errors='coerce')

    bad_values = values.isna() & ~placeholder
    if bad_values.any():
        record = df.loc[bad_values, 'record'].iloc[0]
        raise DataValidationError(f"Series {series_id}: cannot parse value in record {record}")

    df = df.assign(value=values, valid=~placeholder).sort_values('date')
    duplicated = df['date'].duplicated()
    if duplicated.any():
        dup = df.loc[duplicated, 'date'].iloc[0]
        raise DataValidationError(f"Series {series_id}: duplicate observation date {dup.date()}")

    observations = []
    for row in df.itertuples(index=False):
        obs_date = row.date.date()
        if row.valid:
            observations.append(Observation(obs_date, float(row.value)))
        else:
            observations.append(Observation.missing(obs_date))

    logger.debug(
        f"Series {series_id}: parsed {len(observations)} observations, "
        f"{int(placeholder.sum())} without a value"
    )
    return observations


def parse_fred_observations(payload: Dict[str, Any], series_id: str) -> List[Observation]:
    """
    Parse a FRED ``series/observations`` response.

    Args:
        payload: Decoded JSON with an ``observations`` list of
            ``{"date": "YYYY-MM-DD", "value": "<number>|."}`` records
        series_id: FRED series id, used in error messages

    Returns:
        Observations in chronological order; placeholder values give
        observations flagged as invalid

    Raises:
        DataValidationError: If the payload, a date or a value is malformed
    """
    records = payload.get('observations') if isinstance(payload, dict) else None
    if not isinstance(records, list):
        message = payload.get('error_message') if isinstance(payload, dict) else None
        raise DataValidationError(
            f"Series {series_id}: response has no observations list" + (f" ({message})" if message else "")
        )
    if not records:
        return []

    df = pd.DataFrame(records)
    if 'date' not in df.columns or 'value' not in df.columns:
        raise DataValidationError(f"Series {series_id}: observations need 'date' and 'value' fields")

    dates = pd.to_datetime(df['date'], format='%Y-%m-%d', errors='coerce')
    if dates.isna().any():
        record = records[int(dates.isna().to_numpy().nonzero()[0][0])]
        raise DataValidationError(f"Series {series_id}: cannot parse date in record {record}")

    frame = pd.DataFrame({'date': dates, 'raw': df['value'], 'record': records})
    return _frame_to_observations(frame, series_id)


def parse_bls_income(payload: Dict[str, Any], cutoff_date: date, series_id: str) -> List[Observation]:
    """
    Parse a BLS timeseries response into monthly observations.

    BLS lists data newest first; the result is chronological. Annual
    averages (period ``M13``) and months before ``cutoff_date`` are dropped,
    and every observation is dated the first of its month.

    Raises:
        DataValidationError: If the request failed or a record is malformed
    """
    if not isinstance(payload, dict):
        raise DataValidationError(f"Series {series_id}: unexpected response type {type(payload).__name__}")

    status = payload.get('status')
    if status and status != 'REQUEST_SUCCEEDED':
        messages = '; '.join(payload.get('message') or [])
        raise DataValidationError(f"Series {series_id}: BLS request failed with {status} {messages}".strip())

    try:
        records = payload['Results']['series'][0]['data']
    except (KeyError, IndexError, TypeError):
        raise DataValidationError(f"Series {series_id}: response has no data")

    records = [r for r in reversed(records) if r.get('period') != 'M13']
    if not records:
        return []

    df = pd.DataFrame(records)
    if not {'year', 'periodName', 'value'} <= set(df.columns):
        raise DataValidationError(f"Series {series_id}: data records need year, periodName and value")

    labels = df['year'].astype(str) + '-' + df['periodName'].astype(str) + '-01'
    dates = pd.to_datetime(labels, format='%Y-%B-%d', errors='coerce')
    if dates.isna().any():
        record = records[int(dates.isna().to_numpy().nonzero()[0][0])]
        raise DataValidationError(f"Series {series_id}: cannot parse date in record {record}")

    frame = pd.DataFrame({'date': dates, 'raw': df['value'], 'record': records})
    frame = frame[frame['date'] >= pd.Timestamp(cutoff_date)]
    if frame.empty:
        return []

    return _frame_to_observations(frame, series_id)
