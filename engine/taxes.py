import logging
import numbers
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Mapping, Optional, Tuple

import numpy as np

from engine.brackets import BRACKET_TABLES, Bracket, FilingStatus
from engine.errors import InvalidIncome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaxQuery:
    filing_status: FilingStatus
    gross_income: float


@dataclass(frozen=True)
class TierContribution:
    """Income falling inside one bracket and the tax it produces."""
    lower_bound: float
    upper_bound: Optional[float]
    rate: float
    taxable_amount: float
    tax: float


@dataclass(frozen=True)
class TaxResult:
    filing_status: FilingStatus
    gross_income: float
    amount: float
    filing_status_label: str
    marginal_rate: float
    effective_rate: float
    tiers: Tuple[TierContribution, ...] = ()


def validate_income(gross_income) -> float:
    """Return gross_income as a float, or raise InvalidIncome."""
    if isinstance(gross_income, bool):
        raise InvalidIncome(gross_income, "must be a number")
    if not isinstance(gross_income, (numbers.Real, Decimal)):
        raise InvalidIncome(gross_income, "must be a number")

    try:
        income = float(gross_income)
    except (OverflowError, ValueError):
        raise InvalidIncome(gross_income, "is out of range") from None
    if not np.isfinite(income):
        raise InvalidIncome(gross_income, "must be finite")
    if income < 0:
        raise InvalidIncome(gross_income, "must not be negative")
    return income


class TaxCalculator:
    """
    Progressive (marginal) tax evaluator over a catalog of bracket tables.

    Only the slice of income inside each tier is taxed at that tier's rate, so
    the result is continuous and non-decreasing in income.
    """

    def __init__(self, tables: Mapping[FilingStatus, Tuple[Bracket, ...]] = BRACKET_TABLES):
        self.tables = tables

    def query(self, filing_status, gross_income) -> TaxQuery:
        return TaxQuery(FilingStatus.parse(filing_status), validate_income(gross_income))

    def brackets(self, filing_status) -> Tuple[Bracket, ...]:
        return self.tables[FilingStatus.parse(filing_status)]

    def _walk(self, query: TaxQuery) -> List[TierContribution]:
        tiers = []
        remaining = query.gross_income
        lower = 0

        for bracket in self.tables[query.filing_status]:
            if remaining <= 0:
                break
            if bracket.upper_bound is None:
                taxable_in_tier = remaining
            else:
                taxable_in_tier = min(remaining, bracket.upper_bound - lower)
            tiers.append(TierContribution(
                lower_bound=lower,
                upper_bound=bracket.upper_bound,
                rate=bracket.rate,
                taxable_amount=taxable_in_tier,
                tax=taxable_in_tier * bracket.rate,
            ))
            remaining -= taxable_in_tier
            lower = bracket.upper_bound

        return tiers

    def calculate_tax(self, filing_status, gross_income) -> float:
        """
        Total tax owed on gross_income under the filing status' brackets.

        Raises InvalidFilingStatus / InvalidIncome before any computation.
        """
        query = self.query(filing_status, gross_income)
        total = 0.0
        for tier in self._walk(query):
            total += tier.tax
        return total

    def tier_breakdown(self, filing_status, gross_income) -> List[TierContribution]:
        return self._walk(self.query(filing_status, gross_income))

    def marginal_rate(self, filing_status, gross_income) -> float:
        """Rate applied to the last dollar of income (first tier's rate at zero income)."""
        query = self.query(filing_status, gross_income)
        tiers = self._walk(query)
        if not tiers:
            return self.tables[query.filing_status][0].rate
        return tiers[-1].rate

    def evaluate(self, filing_status, gross_income) -> TaxResult:
        query = self.query(filing_status, gross_income)
        tiers = tuple(self._walk(query))

        amount = 0.0
        for tier in tiers:
            amount += tier.tax
        marginal = tiers[-1].rate if tiers else self.tables[query.filing_status][0].rate
        effective = amount / query.gross_income if query.gross_income > 0 else 0.0

        logger.debug(
            "Evaluated %s on %.2f: tax=%.2f across %d tiers",
            query.filing_status.name, query.gross_income, amount, len(tiers)
        )
        return TaxResult(
            filing_status=query.filing_status,
            gross_income=query.gross_income,
            amount=amount,
            filing_status_label=query.filing_status.label,
            marginal_rate=marginal,
            effective_rate=effective,
            tiers=tiers,
        )


_default_calculator = TaxCalculator()


def compute_tax(filing_status, gross_income) -> float:
    return _default_calculator.calculate_tax(filing_status, gross_income)


def evaluate(filing_status, gross_income) -> TaxResult:
    return _default_calculator.evaluate(filing_status, gross_income)


def tier_breakdown(filing_status, gross_income) -> List[TierContribution]:
    return _default_calculator.tier_breakdown(filing_status, gross_income)


def marginal_rate(filing_status, gross_income) -> float:
    return _default_calculator.marginal_rate(filing_status, gross_income)


def bracket_table(filing_status) -> Tuple[Bracket, ...]:
    return _default_calculator.brackets(filing_status)
