"""
Command-line interface for the weekly affordability pipeline.
"""

import sys
import json
import logging
import argparse
from datetime import date, datetime
from pathlib import Path
from typing import Optional, List
from tqdm import tqdm

from .bls import BLSClient
from .core.estimation import price_growth_rate
from .fred import FREDClient
from .pipeline import AffordabilityPipeline, PipelineResult
from .utils.config import AffordabilityConfig, Config, EstimationMode
from .utils.validation import ConfigValidationError, DataValidationError


# Set up logging
logger = logging.getLogger(__name__)


def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD command line date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError("Invalid date format. Use YYYY-MM-DD.")


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Build the weekly housing affordability series'
    )
    parser.add_argument(
        '--bls-api-key', '-b',
        type=str,
        help='BLS API key',
        default=None
    )
    parser.add_argument(
        '--fred-api-key', '-f',
        type=str,
        help='FRED API key',
        default=None
    )
    parser.add_argument(
        '--start-date', '-s',
        type=parse_date,
        help='Start date (YYYY-MM-DD), overrides the default lookback window',
        default=None
    )
    parser.add_argument(
        '--estimation-mode', '-m',
        choices=[mode.value for mode in EstimationMode],
        help='Home price estimation strategy past the last observed month',
        default=None
    )
    parser.add_argument(
        '--output', '-o',
        type=str,
        help='Path to output JSON file (default: weekly_case_shiller_output.json)',
        default=None
    )
    parser.add_argument(
        '--config', '-c',
        type=str,
        help='Path to a YAML configuration file',
        default=None
    )
    parser.add_argument(
        '--debug', '-d',
        action='store_true',
        help='Enable debug output'
    )
    return parser.parse_args(argv)


def configure_logging(debug: bool = False) -> None:
    """Configure logging based on debug flag."""
    config = Config()
    log_config = config.get('logging', {})

    level = logging.DEBUG if debug else getattr(logging, log_config.get('level', 'INFO'))
    format_str = log_config.get('format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    # Reset the root logger
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler('weekly_affordability.log')
        ]
    )

    # Keep HTTP client chatter out of the run log
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('requests').setLevel(logging.WARNING)


def build_config(args: argparse.Namespace) -> AffordabilityConfig:
    """Build the pipeline settings from configuration and arguments."""
    return AffordabilityConfig.from_config(
        Config(),
        start_date=args.start_date,
        estimation_mode=args.estimation_mode
    )


def get_output_path(args: argparse.Namespace) -> Path:
    """Get the output file path from args or config."""
    output_file = args.output or Config().get('output.file') or 'weekly_case_shiller_output.json'
    output_path = Path(output_file)
    output_path.parent.mkdir(exist_ok=True, parents=True)
    return output_path


def save_report(result: PipelineResult, output_path: Path) -> None:
    """Write the report as JSON."""
    output_path.write_text(json.dumps(result.report, indent=2))
    logger.info(f"Data written to {output_path}")


def log_summary(result: PipelineResult, config: AffordabilityConfig) -> None:
    """Log the input trends and the counts of the generated series."""
    income = result.income_observations
    if len(income) >= 2 and income[-2].value != 0:
        prev, last = income[-2], income[-1]
        growth = (last.value - prev.value) / prev.value * 100
        logger.info(
            f"Last two income months: {prev.date} ({prev.value}) -> {last.date} ({last.value}), "
            f"monthly growth {growth:.3f}%"
        )

    prices = result.price_observations
    window = config.price_trend_window
    if len(prices) >= window and prices[-window].value > 0:
        total = (prices[-1].value - prices[-window].value) / prices[-window].value * 100
        avg_monthly = price_growth_rate(prices, window) * 100
        logger.info(
            f"Last {window} months price growth: {total:.3f}% total, {avg_monthly:.3f}% avg/month"
        )

    if result.anchors:
        logger.info(
            f"Anchor dates: {len(result.anchors)} ({result.anchors[0]} to {result.anchors[-1]})"
        )

    metadata = result.report['metadata']
    counts = metadata['counts']
    date_range = metadata['date_range']
    logger.info(f"Total: {counts['total']} aligned data points")
    logger.info(f"  - Actual data: {counts['actual']} points")
    logger.info(f"  - Estimated: {counts['estimated']} points")
    logger.info(f"    With estimated income: {counts['income_estimated']} points")
    if counts['skipped']:
        logger.warning(f"  - Skipped: {counts['skipped']} anchors with invalid inputs")
    logger.info(f"Full range: {date_range['start']} to {date_range['end']}")
    logger.info(f"Last actual home price: {date_range['last_actual_home_price']}")
    logger.info(f"Last actual income: {date_range['last_actual_income']}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main function to build and save the affordability report."""
    try:
        # Parse arguments and configure
        args = parse_arguments(argv)
        if args.config:
            Config(args.config)
        configure_logging(args.debug)

        logger.info("Starting weekly affordability pipeline")

        config = build_config(args)
        pipeline = AffordabilityPipeline(config)

        with tqdm(total=3, desc="Processing") as pbar:
            result = pipeline.fetch_and_run(
                FREDClient(args.fred_api_key),
                BLSClient(args.bls_api_key)
            )
            pbar.update(1)

            save_report(result, get_output_path(args))
            pbar.update(1)

            log_summary(result, config)
            pbar.update(1)

        logger.info("Process completed successfully!")
        return 0

    except (DataValidationError, ConfigValidationError, ValueError) as e:
        logger.error(str(e))
        return 1
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return 2


if __name__ == "__main__":
    sys.exit(main())
