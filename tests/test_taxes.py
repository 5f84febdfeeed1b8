import unittest
import math
import os
import sys
from decimal import Decimal

import numpy as np

# Add parent dir to path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from engine.brackets import BRACKET_TABLES, Bracket, FilingStatus
from engine.errors import InvalidFilingStatus, InvalidIncome, InvalidInputError
from engine.taxes import (
    TaxCalculator, compute_tax, evaluate, marginal_rate, tier_breakdown, bracket_table
)


def finite_ceilings(status):
    return [b.upper_bound for b in BRACKET_TABLES[status] if b.upper_bound is not None]


class TestComputeTax(unittest.TestCase):
    def test_zero_income_is_zero_tax(self):
        for status in FilingStatus:
            self.assertEqual(compute_tax(status, 0), 0)

    def test_single_first_bracket(self):
        self.assertAlmostEqual(compute_tax(FilingStatus.SINGLE, 10000), 1000.00, places=2)

    def test_single_third_bracket(self):
        # 11925 x 10% + 36550 x 12% + 1525 x 22%
        self.assertAlmostEqual(compute_tax(FilingStatus.SINGLE, 50000), 5914.00, places=2)

    def test_single_top_bracket(self):
        expected = (
            11925 * 0.10 + (48475 - 11925) * 0.12 + (103350 - 48475) * 0.22
            + (197300 - 103350) * 0.24 + (250525 - 197300) * 0.32
            + (626350 - 250525) * 0.35 + (700000 - 626350) * 0.37
        )
        self.assertAlmostEqual(expected, 216020.25, places=2)
        self.assertAlmostEqual(compute_tax(FilingStatus.SINGLE, 700000), 216020.25, places=2)

    def test_estates_and_trusts(self):
        # 315 + 1992 + 1470 + 1522.50
        self.assertAlmostEqual(compute_tax(FilingStatus.ESTATES_AND_TRUSTS, 20000), 5299.50, places=2)

    def test_head_of_household(self):
        # 17000 x 10% + 47850 x 12% + 15150 x 22%
        self.assertAlmostEqual(compute_tax(FilingStatus.HEAD_OF_HOUSEHOLD, 80000), 10775.00, places=2)

    def test_married_filing_separately_top_tier_starts_at_375800(self):
        below = compute_tax(FilingStatus.MARRIED_FILING_SEPARATELY, 375800)
        above = compute_tax(FilingStatus.MARRIED_FILING_SEPARATELY, 376800)
        self.assertAlmostEqual(above - below, 370.00, places=6)

    def test_married_filing_jointly_uses_501050(self):
        at = compute_tax(FilingStatus.MARRIED_FILING_JOINTLY, 501050)
        above = compute_tax(FilingStatus.MARRIED_FILING_JOINTLY, 501150)
        self.assertAlmostEqual(above - at, 35.00, places=6)
        self.assertAlmostEqual(
            compute_tax(FilingStatus.MARRIED_FILING_JOINTLY, 501050) - compute_tax(FilingStatus.MARRIED_FILING_JOINTLY, 500950),
            32.00, places=6
        )

    def test_accepts_selectors_and_codes(self):
        expected = compute_tax(FilingStatus.MARRIED_FILING_JOINTLY, 150000)
        for selector in (4, "4", "MFJ", "married_filing_jointly", "Married Filing Jointly"):
            self.assertEqual(compute_tax(selector, 150000), expected)

    def test_accepts_decimal_and_numpy_income(self):
        self.assertAlmostEqual(compute_tax(1, Decimal("10000")), 1000.00, places=2)
        self.assertAlmostEqual(compute_tax(1, np.float64(10000)), 1000.00, places=2)


class TestInvariants(unittest.TestCase):
    def test_continuous_at_every_boundary(self):
        eps = 1e-6
        for status in FilingStatus:
            for ceiling in finite_ceilings(status):
                below = compute_tax(status, ceiling - eps)
                at = compute_tax(status, ceiling)
                above = compute_tax(status, ceiling + eps)
                self.assertLess(abs(at - below), 1e-5, f"{status.name} jumps below {ceiling}")
                self.assertLess(abs(above - at), 1e-5, f"{status.name} jumps above {ceiling}")

    def test_monotonic_non_decreasing(self):
        grid = np.linspace(0, 1_000_000, 2001)
        for status in FilingStatus:
            taxes = np.array([compute_tax(status, float(x)) for x in grid])
            self.assertTrue(np.all(np.diff(taxes) >= 0), f"{status.name} is not monotonic")

    def test_tax_never_exceeds_income(self):
        for status in FilingStatus:
            for income in (1, 5000, 123456.78, 10_000_000):
                tax = compute_tax(status, income)
                self.assertGreaterEqual(tax, 0)
                self.assertLess(tax, income)

    def test_top_rate_applies_above_last_ceiling(self):
        for status in FilingStatus:
            top = BRACKET_TABLES[status][-1]
            last = finite_ceilings(status)[-1]
            delta = compute_tax(status, last + 1000) - compute_tax(status, last)
            self.assertAlmostEqual(delta, 1000 * top.rate, places=6)


class TestValidation(unittest.TestCase):
    def test_invalid_status_values(self):
        for bad in (0, 6, -1, "7", "married", "", None, 1.0, True):
            with self.assertRaises(InvalidFilingStatus):
                compute_tax(bad, 1000)

    def test_negative_income(self):
        with self.assertRaises(InvalidIncome):
            compute_tax(FilingStatus.SINGLE, -0.01)

    def test_non_finite_income(self):
        for bad in (math.inf, -math.inf, math.nan, float("nan")):
            with self.assertRaises(InvalidIncome):
                compute_tax(FilingStatus.SINGLE, bad)

    def test_non_numeric_income(self):
        for bad in ("1000", None, True, [1000]):
            with self.assertRaises(InvalidIncome):
                compute_tax(FilingStatus.SINGLE, bad)

    def test_income_too_large_for_float(self):
        for bad in (10**400, Decimal("1e400"), Decimal("sNaN")):
            with self.assertRaises(InvalidIncome):
                compute_tax(FilingStatus.SINGLE, bad)

    def test_superscript_digit_status(self):
        with self.assertRaises(InvalidFilingStatus):
            compute_tax("²", 1000)

    def test_errors_share_a_base(self):
        self.assertTrue(issubclass(InvalidFilingStatus, InvalidInputError))
        self.assertTrue(issubclass(InvalidIncome, InvalidInputError))
        self.assertTrue(issubclass(InvalidInputError, ValueError))

    def test_status_checked_before_income(self):
        with self.assertRaises(InvalidFilingStatus):
            compute_tax(9, -5)


class TestEvaluate(unittest.TestCase):
    def test_result_matches_compute_tax(self):
        for status in FilingStatus:
            result = evaluate(status, 275000)
            self.assertEqual(result.amount, compute_tax(status, 275000))
            self.assertEqual(result.filing_status, status)
            self.assertEqual(result.filing_status_label, status.label)

    def test_breakdown_sums_to_income_and_tax(self):
        result = evaluate(FilingStatus.SINGLE, 50000)
        self.assertEqual(len(result.tiers), 3)
        self.assertAlmostEqual(sum(t.taxable_amount for t in result.tiers), 50000, places=6)
        self.assertAlmostEqual(sum(t.tax for t in result.tiers), result.amount, places=6)
        self.assertEqual(result.tiers[0].lower_bound, 0)
        self.assertEqual(result.tiers[1].lower_bound, 11925)
        self.assertAlmostEqual(result.tiers[2].taxable_amount, 1525, places=6)

    def test_rates(self):
        result = evaluate(FilingStatus.SINGLE, 50000)
        self.assertEqual(result.marginal_rate, 0.22)
        self.assertAlmostEqual(result.effective_rate, 5914.00 / 50000, places=9)

    def test_zero_income_rates(self):
        result = evaluate(FilingStatus.ESTATES_AND_TRUSTS, 0)
        self.assertEqual(result.amount, 0)
        self.assertEqual(result.effective_rate, 0.0)
        self.assertEqual(result.marginal_rate, 0.10)
        self.assertEqual(result.tiers, ())

    def test_marginal_rate_at_boundary_stays_in_lower_tier(self):
        self.assertEqual(marginal_rate(FilingStatus.SINGLE, 11925), 0.10)
        self.assertEqual(marginal_rate(FilingStatus.SINGLE, 11926), 0.12)
        self.assertEqual(marginal_rate(FilingStatus.SINGLE, 10_000_000), 0.37)

    def test_open_tier_in_breakdown(self):
        tiers = tier_breakdown(FilingStatus.ESTATES_AND_TRUSTS, 20000)
        self.assertEqual(len(tiers), 4)
        self.assertIsNone(tiers[-1].upper_bound)
        self.assertAlmostEqual(tiers[-1].taxable_amount, 4350, places=6)

    def test_result_is_frozen(self):
        result = evaluate(FilingStatus.SINGLE, 1000)
        with self.assertRaises(AttributeError):
            result.amount = 0


class TestCustomTables(unittest.TestCase):
    def test_calculator_uses_supplied_tables(self):
        flat = {status: (Bracket(None, 0.5),) for status in FilingStatus}
        calc = TaxCalculator(tables=flat)
        self.assertEqual(calc.calculate_tax(FilingStatus.SINGLE, 1000), 500)
        self.assertEqual(compute_tax(FilingStatus.SINGLE, 1000), 100)

    def test_bracket_table_lookup(self):
        table = bracket_table("EST")
        self.assertEqual(len(table), 4)
        self.assertEqual(table[0], Bracket(3150, 0.10))


if __name__ == '__main__':
    unittest.main()
