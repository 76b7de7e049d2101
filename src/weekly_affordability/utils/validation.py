"""
Data validation module for the weekly affordability pipeline.
"""

from datetime import date
from typing import Any, Dict, List, Sequence
import logging

from ..models import Observation

logger = logging.getLogger(__name__)

class ValidationError(Exception):
    """Base class for validation errors."""
    pass

class DataValidationError(ValidationError):
    """Raised when upstream data validation fails."""
    pass

class ConfigValidationError(ValidationError):
    """Raised when configuration validation fails."""
    pass

def validate_observations(
    observations: Sequence[Observation],
    series_id: str,
    min_valid: int = 1
) -> List[Observation]:
    """
    Validate a parsed series and return its valid observations.

    Args:
        observations: Parsed observations in chronological order
        series_id: Identifier of the upstream series, used in error messages
        min_valid: Minimum number of valid observations required

    Returns:
        The observations flagged as valid, in the original order

    Raises:
        DataValidationError: If the series is unordered, holds duplicate
            dates or has too few valid observations
    """
    for previous, current in zip(observations, observations[1:]):
        if current.date <= previous.date:
            raise DataValidationError(
                f"Series {series_id} is not strictly increasing at {current.date.isoformat()}"
            )

    valid = [obs for obs in observations if obs.valid]
    if len(valid) < min_valid:
        raise DataValidationError(
            f"Series {series_id} has {len(valid)} valid observations, at least {min_valid} required"
        )

    skipped = len(observations) - len(valid)
    if skipped:
        logger.debug(f"Series {series_id}: ignoring {skipped} observations without a value")

    logger.debug(f"Series {series_id} validation passed: {len(valid)} valid observations")
    return valid

def validate_anchor_dates(anchors: Sequence[date]) -> None:
    """
    Validate an anchor set.

    Raises:
        DataValidationError: If the anchors are empty or not strictly ascending
    """
    if not anchors:
        raise DataValidationError("Anchor set is empty")
    for previous, current in zip(anchors, anchors[1:]):
        if current <= previous:
            raise DataValidationError(
                f"Anchor dates must be unique and ascending, got {previous} before {current}"
            )

def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate configuration dictionary.

    Args:
        config: Configuration dictionary to validate

    Raises:
        ConfigValidationError: If validation fails
    """
    required_sections = ['affordability', 'series', 'logging']

    try:
        # Check required sections
        missing_sections = set(required_sections) - set(config.keys())
        if missing_sections:
            raise ConfigValidationError(f"Missing required config sections: {missing_sections}")

        # Validate series section
        for key in ('income', 'home_price', 'mortgage_rate'):
            if key not in config['series']:
                raise ConfigValidationError(f"Missing {key} in series configuration")

        # Validate affordability section
        offsets = config['affordability'].get('seasonal_offsets')
        if offsets is not None and len(offsets) != 12:
            raise ConfigValidationError("seasonal_offsets must list exactly 12 monthly values")

        # Validate logging section
        if 'level' not in config['logging']:
            raise ConfigValidationError("Missing logging level configuration")
        if 'format' not in config['logging']:
            raise ConfigValidationError("Missing logging format configuration")

        logger.debug("Configuration validation passed")

    except ConfigValidationError:
        raise
    except Exception as e:
        raise ConfigValidationError(f"Unexpected error during config validation: {str(e)}")
