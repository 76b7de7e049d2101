"""Tests for the affordability compositor."""

import unittest
from datetime import date
from unittest.mock import MagicMock

from weekly_affordability.core.affordability import calculate_costs, monthly_payment, total_mortgage_cost
from weekly_affordability.core.income_projector import IncomeTrendProjector
from weekly_affordability.core.price_aligner import align_price_series
from weekly_affordability.models import AlignedPoint, Observation
from weekly_affordability.utils.config import AffordabilityConfig


def flat_income(weekly, last_date=date(2024, 6, 1)):
    """Projector returning a constant weekly income, estimated after ``last_date``."""
    projector = MagicMock(spec=IncomeTrendProjector)
    projector.estimate.return_value = weekly
    projector.is_estimated.side_effect = lambda d: d > last_date
    return projector


class TestMortgageMath(unittest.TestCase):
    """Test cases for the amortization formulas."""

    def test_worked_example(self):
        payment = monthly_payment(500000, 0.06, 360)
        self.assertAlmostEqual(payment, 2997.75, delta=0.5)
        total = total_mortgage_cost(500000, 0.06, 360)
        self.assertAlmostEqual(total, 1079190, delta=180)
        self.assertAlmostEqual(round(total / 80000, 2), 13.49)

    def test_zero_rate_is_straight_line(self):
        self.assertAlmostEqual(monthly_payment(360000, 0.0, 360), 1000.0)
        self.assertAlmostEqual(total_mortgage_cost(360000, 0.0, 360), 360000.0)


class TestCalculateCosts(unittest.TestCase):
    """Test cases for cost entry composition."""

    def setUp(self):
        self.config = AffordabilityConfig()
        self.anchors = [date(2024, 5, 2), date(2024, 5, 9), date(2024, 6, 6)]
        self.prices = [
            AlignedPoint(self.anchors[0], 500000.0, interpolated=True),
            AlignedPoint(self.anchors[1], 500000.0, interpolated=True),
            AlignedPoint(self.anchors[2], 500000.0, estimated=True, estimation_method='trend_only'),
        ]
        self.rates = [AlignedPoint(d, 6.0) for d in self.anchors]

    def test_entries_for_both_profiles(self):
        result = calculate_costs(self.prices, self.rates, flat_income(1500.0), self.config)
        self.assertEqual(len(result.single_costs), 3)
        self.assertEqual(len(result.household_costs), 3)

        single, household = result.single_costs[0], result.household_costs[0]
        self.assertEqual(single.type, 'single')
        self.assertEqual(household.type, 'household')
        self.assertEqual(single.date, household.date)
        self.assertEqual(single.total_cost, household.total_cost)
        self.assertEqual(single.income, 78000)
        self.assertEqual(household.income, 109200)
        self.assertEqual(single.cost_to_income, '13.84')
        self.assertEqual(household.cost_to_income, '9.88')
        self.assertEqual(single.home_price, 500000)
        self.assertEqual(single.mortgage_rate, '6.00')
        self.assertEqual(single.total_cost, int(total_mortgage_cost(500000.0, 0.06)))

    def test_actual_entries_serialize_without_estimation_fields(self):
        result = calculate_costs(self.prices, self.rates, flat_income(1500.0), self.config)
        payload = result.single_costs[0].to_dict()
        self.assertEqual(payload['date'], '2024-05-02')
        self.assertEqual(payload['single_income'], 78000)
        self.assertNotIn('estimated', payload)
        self.assertNotIn('estimation_details', payload)
        self.assertIn('household_income', result.household_costs[0].to_dict())

    def test_estimation_flags(self):
        rates = list(self.rates)
        rates[1] = AlignedPoint(self.anchors[1], 6.1, estimated=True)
        result = calculate_costs(self.prices, rates, flat_income(1500.0, date(2024, 6, 1)), self.config)

        first, second, third = result.single_costs
        self.assertFalse(first.estimated)
        self.assertIsNone(first.estimation_details)

        self.assertTrue(second.estimated)
        self.assertTrue(second.estimation_details.rate_estimated)
        self.assertFalse(second.estimation_details.price_estimated)

        self.assertTrue(third.estimated)
        self.assertTrue(third.estimation_details.price_estimated)
        self.assertTrue(third.estimation_details.income_estimated)
        payload = third.to_dict()
        self.assertTrue(payload['estimated'])
        self.assertEqual(payload['estimation_details'], {
            'price_estimated': True,
            'rate_estimated': False,
            'income_estimated': True
        })
        self.assertTrue(result.household_costs[2].estimated)

    def test_invalid_prices_are_skipped(self):
        prices = [
            AlignedPoint(self.anchors[0], 0.0),
            AlignedPoint(self.anchors[1], float('nan')),
            self.prices[2],
        ]
        with self.assertLogs('weekly_affordability.core.affordability', level='WARNING'):
            result = calculate_costs(prices, self.rates, flat_income(1500.0), self.config)
        self.assertEqual(result.skipped_dates, self.anchors[:2])
        self.assertEqual(len(result.single_costs), 1)
        self.assertEqual(len(result.household_costs), 1)
        self.assertEqual(result.single_costs[0].date, self.anchors[2])

    def test_negative_last_price_skips_extrapolated_anchor(self):
        observations = [
            Observation(date(2023, month, 1), value)
            for month, value in zip(range(1, 7), [100.0, 101.0, 102.0, 103.0, 104.0, -3.0])
        ]
        anchor = date(2023, 7, 6)
        with self.assertLogs('weekly_affordability', level='WARNING'):
            prices = align_price_series(observations, [anchor], self.config)
            result = calculate_costs(prices, [AlignedPoint(anchor, 6.0)], flat_income(1500.0), self.config)

        self.assertEqual(prices[0].value, -3.0)
        self.assertTrue(prices[0].estimated)
        self.assertEqual(result.skipped_dates, [anchor])
        self.assertEqual(len(result), 0)

    def test_pairs_only_while_both_series_have_points(self):
        result = calculate_costs(self.prices, self.rates[:2], flat_income(1500.0), self.config)
        self.assertEqual(len(result), 2)

    def test_uses_income_projection_per_anchor(self):
        projector = IncomeTrendProjector([
            Observation(date(2024, 4, 1), 1000.0),
            Observation(date(2024, 5, 1), 1010.0),
        ])
        result = calculate_costs(self.prices, self.rates, projector, self.config)
        expected = projector.estimate(self.anchors[2]) * 52
        self.assertEqual(result.single_costs[2].income, int(expected))
        self.assertTrue(result.single_costs[2].estimation_details.income_estimated)

    def test_configured_household_multiplier(self):
        config = AffordabilityConfig(household_multiplier=2.0)
        result = calculate_costs(self.prices, self.rates, flat_income(1000.0), config)
        self.assertEqual(result.household_costs[0].income, 104000)


if __name__ == '__main__':
    unittest.main()
