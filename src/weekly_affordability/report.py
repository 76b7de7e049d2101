"""
Assembly of the affordability report handed to the output writer.
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from .models import AffordabilityResult, CostEntry
from .utils.config import AffordabilityConfig

logger = logging.getLogger(__name__)


def summarize_counts(entries: Sequence[CostEntry], skipped: int = 0) -> Dict[str, int]:
    """Count actual and estimated entries of one cost series."""
    estimated = sum(1 for entry in entries if entry.estimated)
    income_estimated = sum(
        1 for entry in entries
        if entry.estimation_details is not None and entry.estimation_details.income_estimated
    )
    return {
        "total": len(entries),
        "actual": len(entries) - estimated,
        "estimated": estimated,
        "income_estimated": income_estimated,
        "skipped": skipped
    }


def build_report(
    result: AffordabilityResult,
    last_actual_home_price: date,
    last_actual_income: date,
    config: AffordabilityConfig,
    price_estimation: str,
    generated_at: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Build the report structure: both cost series plus summary metadata.

    Args:
        result: Output of the affordability compositor
        last_actual_home_price: Date of the last observed home price
        last_actual_income: Date of the last observed wage
        config: Pipeline settings
        price_estimation: Description of the home price estimation strategy
        generated_at: Report timestamp, now if omitted

    Returns:
        JSON-compatible dictionary
    """
    generated_at = generated_at or datetime.now().astimezone()
    single = result.single_costs

    report = {
        "single_costs": [entry.to_dict() for entry in single],
        "household_costs": [entry.to_dict() for entry in result.household_costs],
        "metadata": {
            "generated_at": generated_at.isoformat(),
            "frequency": "weekly_thursday_aligned",
            "date_range": {
                "start": single[0].date.isoformat() if single else None,
                "end": single[-1].date.isoformat() if single else None,
                "last_actual_home_price": last_actual_home_price.isoformat(),
                "last_actual_income": last_actual_income.isoformat()
            },
            "counts": summarize_counts(single, len(result.skipped_dates)),
            "data_sources": {
                "bls_series": config.income_series,
                "fred_home_price": config.home_price_series,
                "fred_mortgage": config.mortgage_rate_series
            },
            "methodology": {
                "loan_term_months": config.loan_term_months,
                "household_multiplier": config.household_multiplier,
                "estimation_mode": config.estimation_mode.value,
                "home_price_estimation": price_estimation,
                "home_price_interpolation": "Cubic Hermite spline through monthly values with linear fallback",
                "income_estimation": "Hermite spline interpolation with trend projection",
                "date_alignment": f"All data points aligned to {config.mortgage_rate_series} release dates",
                "note": "Smooth curves through monthly data with safety checks for edge cases"
            }
        }
    }

    logger.debug(f"Report built with counts {report['metadata']['counts']}")
    return report
