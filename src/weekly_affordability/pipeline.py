"""
Weekly affordability pipeline.

Input: raw BLS wage, FRED home price and FRED mortgage rate responses
Output: report with single and household cost series aligned on the
mortgage rate release dates
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

from .bls import BLSClient
from .core.affordability import calculate_costs
from .core.estimation import build_strategy
from .core.income_projector import IncomeTrendProjector
from .core.price_aligner import align_price_series
from .core.rate_aligner import align_rate_series, extract_anchor_dates
from .fred import FREDClient
from .models import AffordabilityResult, AlignedPoint, Observation
from .report import build_report
from .sources.parsing import income_cutoff_date, parse_bls_income, parse_fred_observations
from .utils.config import AffordabilityConfig
from .utils.validation import validate_anchor_dates, validate_observations

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Container for the intermediate series and the final report."""
    report: Dict[str, Any]
    costs: AffordabilityResult
    anchors: List[date] = field(default_factory=list)
    price_observations: List[Observation] = field(default_factory=list)
    income_observations: List[Observation] = field(default_factory=list)
    price_points: List[AlignedPoint] = field(default_factory=list)
    rate_points: List[AlignedPoint] = field(default_factory=list)


class AffordabilityPipeline:
    """
    Builds the weekly affordability series from raw upstream responses.

    The mortgage rate release dates define the anchors; home prices are
    interpolated or estimated on them, rates are matched to them and weekly
    income is projected on them before the costs are computed.
    """

    def __init__(self, config: Optional[AffordabilityConfig] = None):
        """
        Initialize the pipeline.

        Args:
            config: Pipeline settings, defaults if omitted
        """
        self.config = config or AffordabilityConfig()

    def fetch_start_date(self, today: date) -> date:
        """First observation date requested from the APIs."""
        return self.config.start_date or today - timedelta(days=self.config.years_back * 365)

    def income_cutoff(self, today: date) -> date:
        """Earliest wage month kept."""
        if self.config.start_date:
            return self.config.start_date.replace(day=1)
        return income_cutoff_date(today, self.config.years_back)

    def run(
        self,
        bls_payload: Dict[str, Any],
        price_payload: Dict[str, Any],
        rate_payload: Dict[str, Any],
        today: Optional[date] = None,
        generated_at: Optional[datetime] = None
    ) -> PipelineResult:
        """
        Run the pipeline on already fetched responses.

        Args:
            bls_payload: BLS timeseries response for the wage series
            price_payload: FRED observations response for the home price series
            rate_payload: FRED observations response for the mortgage rate series
            today: Reference date for the wage lookback window
            generated_at: Report timestamp

        Returns:
            PipelineResult holding the report and the intermediate series

        Raises:
            DataValidationError: If any upstream series is malformed or empty
        """
        config = self.config
        today = today or date.today()

        income = parse_bls_income(bls_payload, self.income_cutoff(today), config.income_series)
        logger.info(f"BLS income data: {len(income)} months")
        prices = parse_fred_observations(price_payload, config.home_price_series)
        logger.info(f"Home price monthly: {len(prices)} observations")
        rates = parse_fred_observations(rate_payload, config.mortgage_rate_series)
        logger.info(f"Mortgage rates (weekly): {len(rates)} observations")

        valid_prices = validate_observations(prices, config.home_price_series)
        projector = IncomeTrendProjector(income, config)

        anchors = extract_anchor_dates(rates)
        validate_anchor_dates(anchors)

        price_points = align_price_series(valid_prices, anchors, config)
        logger.info(f"Home price aligned: {len(price_points)} observations")
        rate_points = align_rate_series(rates, anchors)
        logger.info(f"Mortgage rates aligned: {len(rate_points)} observations")

        logger.info("Calculating affordability metrics")
        costs = calculate_costs(price_points, rate_points, projector, config)

        report = build_report(
            costs,
            last_actual_home_price=valid_prices[-1].date,
            last_actual_income=projector.last_date,
            config=config,
            price_estimation=build_strategy(valid_prices, config).describe(),
            generated_at=generated_at
        )

        return PipelineResult(
            report=report,
            costs=costs,
            anchors=anchors,
            price_observations=valid_prices,
            income_observations=projector.observations,
            price_points=price_points,
            rate_points=rate_points
        )

    def fetch_and_run(
        self,
        fred_client: FREDClient,
        bls_client: BLSClient,
        today: Optional[date] = None
    ) -> PipelineResult:
        """Fetch the three series and run the pipeline on them."""
        config = self.config
        today = today or date.today()
        start = self.fetch_start_date(today)

        logger.info("Fetching data from APIs")
        bls_payload = bls_client.get_series(config.income_series, start.year, today.year + 1)
        price_payload = fred_client.get_observations(config.home_price_series, start)
        rate_payload = fred_client.get_observations(config.mortgage_rate_series, start)

        return self.run(bls_payload, price_payload, rate_payload, today=today)
