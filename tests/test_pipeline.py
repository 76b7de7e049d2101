"""End-to-end tests for the affordability pipeline on synthetic responses."""

import unittest
from datetime import date, datetime, timedelta, timezone
from unittest.mock import MagicMock

from weekly_affordability.bls import BLSClient
from weekly_affordability.fred import FREDClient
from weekly_affordability.pipeline import AffordabilityPipeline
from weekly_affordability.utils.config import AffordabilityConfig
from weekly_affordability.utils.validation import DataValidationError

MONTHS = ['January', 'February', 'March', 'April', 'May', 'June']


def bls_payload(values):
    data = [
        {'year': '2024', 'period': f'M{i + 1:02d}', 'periodName': MONTHS[i], 'value': f'{value:.2f}'}
        for i, value in enumerate(values)
    ]
    data.reverse()
    return {'status': 'REQUEST_SUCCEEDED', 'Results': {'series': [{'seriesID': 'CES0500000011', 'data': data}]}}


def price_payload(values):
    return {'observations': [
        {'date': f'2024-{i + 1:02d}-01', 'value': str(value)} for i, value in enumerate(values)
    ]}


def rate_payload(start, end, gap=None):
    observations = []
    day = start
    while day <= end:
        value = '.' if day == gap else '6.50'
        observations.append({'date': day.isoformat(), 'value': value})
        day += timedelta(days=7)
    return {'observations': observations}


class TestAffordabilityPipeline(unittest.TestCase):
    """Test cases for the pipeline run."""

    def setUp(self):
        self.today = date(2024, 9, 1)
        self.generated_at = datetime(2024, 9, 1, 12, 0, tzinfo=timezone.utc)
        self.bls = bls_payload([1150.0, 1155.0, 1160.0, 1162.0, 1170.0, 1175.0])
        self.prices = price_payload([400000, 402000, 405000, 409000, 412000, 415000])
        self.rates = rate_payload(date(2024, 1, 4), date(2024, 8, 29), gap=date(2024, 2, 15))
        self.pipeline = AffordabilityPipeline(AffordabilityConfig())

    def run_pipeline(self, **kwargs):
        return self.pipeline.run(
            kwargs.get('bls', self.bls),
            kwargs.get('prices', self.prices),
            kwargs.get('rates', self.rates),
            today=self.today,
            generated_at=self.generated_at
        )

    def test_series_aligned_on_rate_releases(self):
        result = self.run_pipeline()

        self.assertEqual(len(result.anchors), len(self.rates['observations']) - 1)
        self.assertNotIn(date(2024, 2, 15), result.anchors)
        self.assertEqual(len(result.price_points), len(result.anchors))
        self.assertEqual(len(result.rate_points), len(result.anchors))

        report = result.report
        self.assertEqual(len(report['single_costs']), len(result.anchors))
        self.assertEqual(len(report['household_costs']), len(result.anchors))
        self.assertEqual(
            [entry['date'] for entry in report['single_costs']],
            [anchor.isoformat() for anchor in result.anchors]
        )

    def test_estimation_flags_follow_last_observations(self):
        result = self.run_pipeline()
        last_income = date(2024, 6, 1)

        for anchor, entry in zip(result.anchors, result.report['single_costs']):
            if anchor > last_income:
                self.assertTrue(entry['estimated'])
                self.assertTrue(entry['estimation_details']['income_estimated'])
                self.assertEqual(entry['estimation_details']['price_estimated'], anchor > date(2024, 6, 30))
                self.assertFalse(entry['estimation_details']['rate_estimated'])
            else:
                self.assertNotIn('estimated', entry)

    def test_metadata(self):
        result = self.run_pipeline()
        metadata = result.report['metadata']

        self.assertEqual(metadata['generated_at'], '2024-09-01T12:00:00+00:00')
        self.assertEqual(metadata['frequency'], 'weekly_thursday_aligned')
        self.assertEqual(metadata['date_range']['start'], '2024-01-04')
        self.assertEqual(metadata['date_range']['end'], '2024-08-29')
        self.assertEqual(metadata['date_range']['last_actual_home_price'], '2024-06-01')
        self.assertEqual(metadata['date_range']['last_actual_income'], '2024-06-01')

        counts = metadata['counts']
        actual = sum(1 for anchor in result.anchors if anchor <= date(2024, 6, 1))
        self.assertEqual(counts['total'], len(result.anchors))
        self.assertEqual(counts['actual'], actual)
        self.assertEqual(counts['estimated'], len(result.anchors) - actual)
        self.assertEqual(counts['income_estimated'], len(result.anchors) - actual)
        self.assertEqual(counts['skipped'], 0)

        self.assertEqual(metadata['data_sources'], {
            'bls_series': 'CES0500000011',
            'fred_home_price': 'USAUCSFRCONDOSMSAMID',
            'fred_mortgage': 'MORTGAGE30US'
        })
        self.assertEqual(metadata['methodology']['loan_term_months'], 360)
        self.assertEqual(metadata['methodology']['household_multiplier'], 1.4)
        self.assertEqual(metadata['methodology']['estimation_mode'], 'trend_only')

    def test_household_income_is_multiple_of_single(self):
        result = self.run_pipeline()
        for single, household in zip(result.costs.single_costs, result.costs.household_costs):
            self.assertAlmostEqual(household.income / single.income, 1.4, places=3)
            self.assertEqual(single.total_cost, household.total_cost)

    def test_seasonal_mode(self):
        pipeline = AffordabilityPipeline(AffordabilityConfig(estimation_mode='daily_seasonal'))
        result = pipeline.run(self.bls, self.prices, self.rates, today=self.today, generated_at=self.generated_at)
        metadata = result.report['metadata']
        self.assertEqual(metadata['methodology']['estimation_mode'], 'daily_seasonal')
        june = [p for p in result.price_points if date(2024, 6, 1) <= p.date <= date(2024, 6, 30)]
        self.assertTrue(june)
        for point in june:
            self.assertEqual(point.value, 415000.0)

    def test_start_date_sets_income_cutoff(self):
        pipeline = AffordabilityPipeline(AffordabilityConfig(start_date=date(2024, 3, 14)))
        result = pipeline.run(self.bls, self.prices, self.rates, today=self.today, generated_at=self.generated_at)
        self.assertEqual(result.income_observations[0].date, date(2024, 3, 1))
        self.assertEqual(pipeline.fetch_start_date(self.today), date(2024, 3, 14))

    def test_default_lookback(self):
        self.assertEqual(self.pipeline.fetch_start_date(self.today), self.today - timedelta(days=3650))
        self.assertEqual(self.pipeline.income_cutoff(self.today), date(2014, 9, 1))

    def test_missing_rates_are_fatal(self):
        rates = {'observations': [{'date': '2024-01-04', 'value': '.'}]}
        with self.assertRaises(DataValidationError):
            self.run_pipeline(rates=rates)

    def test_missing_prices_are_fatal(self):
        with self.assertRaises(DataValidationError):
            self.run_pipeline(prices={'observations': []})

    def test_missing_income_is_fatal(self):
        with self.assertRaises(DataValidationError):
            self.run_pipeline(bls=bls_payload([]))

    def test_fetch_and_run(self):
        fred_client = MagicMock(spec=FREDClient)
        fred_client.get_observations.side_effect = [self.prices, self.rates]
        bls_client = MagicMock(spec=BLSClient)
        bls_client.get_series.return_value = self.bls

        result = self.pipeline.fetch_and_run(fred_client, bls_client, today=self.today)

        bls_client.get_series.assert_called_once_with('CES0500000011', 2014, 2025)
        start = self.today - timedelta(days=3650)
        self.assertEqual(fred_client.get_observations.call_args_list[0][0], ('USAUCSFRCONDOSMSAMID', start))
        self.assertEqual(fred_client.get_observations.call_args_list[1][0], ('MORTGAGE30US', start))
        self.assertEqual(len(result.anchors), len(self.rates['observations']) - 1)


if __name__ == '__main__':
    unittest.main()
