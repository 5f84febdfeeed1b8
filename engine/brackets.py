"""
2025 federal income tax bracket tables, one per filing status.

Each table is an ordered tuple of (upper_bound, rate) tiers. The lower edge of a
tier is the previous tier's upper bound (0 for the first). The last tier has no
upper bound and absorbs everything above the final finite threshold.
"""
import numbers
from dataclasses import dataclass
from enum import IntEnum
from types import MappingProxyType
from typing import Optional, Tuple

from engine.errors import InvalidFilingStatus

TAX_YEAR = 2025


@dataclass(frozen=True)
class Bracket:
    upper_bound: Optional[float]  # None means no upper bound
    rate: float                   # e.g., 0.22 for 22%


class FilingStatus(IntEnum):
    """
    Taxpayer category. The integer values are the console menu selectors.
    """
    SINGLE = 1
    HEAD_OF_HOUSEHOLD = 2
    MARRIED_FILING_SEPARATELY = 3
    MARRIED_FILING_JOINTLY = 4
    ESTATES_AND_TRUSTS = 5

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def phrase(self) -> str:
        return _PHRASES[self]

    @property
    def code(self) -> str:
        return _CODES[self]

    @classmethod
    def parse(cls, value) -> "FilingStatus":
        """
        Resolve a selector (1-5), member name or short code to a FilingStatus.

        Raises InvalidFilingStatus for anything else.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise InvalidFilingStatus(value)

        if isinstance(value, str):
            key = value.strip()
            if key.isdecimal():
                try:
                    return cls(int(key))
                except ValueError:
                    raise InvalidFilingStatus(value) from None

            key = key.upper().replace('-', '_').replace(' ', '_')
            if key in cls.__members__:
                return cls[key]
            for status, code in _CODES.items():
                if code == key:
                    return status
            raise InvalidFilingStatus(value)

        if isinstance(value, numbers.Integral):
            try:
                return cls(int(value))
            except ValueError:
                raise InvalidFilingStatus(value) from None

        raise InvalidFilingStatus(value)


_LABELS = {
    FilingStatus.SINGLE: "Unmarried Individuals (Single)",
    FilingStatus.HEAD_OF_HOUSEHOLD: "Heads of Households",
    FilingStatus.MARRIED_FILING_SEPARATELY: "Married Individuals Filing Separate Returns",
    FilingStatus.MARRIED_FILING_JOINTLY: "Married Individuals Filing Joint Returns and Surviving Spouses",
    FilingStatus.ESTATES_AND_TRUSTS: "Estates and Trusts",
}

# Fragment used in the result sentence
_PHRASES = {
    FilingStatus.SINGLE: "being an Unmarried Individual",
    FilingStatus.HEAD_OF_HOUSEHOLD: "being the Head of Household",
    FilingStatus.MARRIED_FILING_SEPARATELY: "being Married Individuals Filing Separate Returns",
    FilingStatus.MARRIED_FILING_JOINTLY: "being Married Individuals Filing Joint Returns or Surviving Spouses",
    FilingStatus.ESTATES_AND_TRUSTS: "the Estates and Trusts",
}

_CODES = {
    FilingStatus.SINGLE: "S",
    FilingStatus.HEAD_OF_HOUSEHOLD: "HOH",
    FilingStatus.MARRIED_FILING_SEPARATELY: "MFS",
    FilingStatus.MARRIED_FILING_JOINTLY: "MFJ",
    FilingStatus.ESTATES_AND_TRUSTS: "EST",
}


def _table(*tiers) -> Tuple[Bracket, ...]:
    return tuple(Bracket(upper, rate) for upper, rate in tiers)


_TABLES = {
    FilingStatus.SINGLE: _table(
        (11925, 0.10), (48475, 0.12), (103350, 0.22), (197300, 0.24),
        (250525, 0.32), (626350, 0.35), (None, 0.37)
    ),
    FilingStatus.HEAD_OF_HOUSEHOLD: _table(
        (17000, 0.10), (64850, 0.12), (103350, 0.22), (197300, 0.24),
        (250500, 0.32), (626350, 0.35), (None, 0.37)
    ),
    FilingStatus.MARRIED_FILING_SEPARATELY: _table(
        (11925, 0.10), (48475, 0.12), (103350, 0.22), (197300, 0.24),
        (250525, 0.32), (375800, 0.35), (None, 0.37)
    ),
    # 32% tier ends at 501,050 (not 501,500)
    FilingStatus.MARRIED_FILING_JOINTLY: _table(
        (23850, 0.10), (96950, 0.12), (206700, 0.22), (394600, 0.24),
        (501050, 0.32), (751600, 0.35), (None, 0.37)
    ),
    FilingStatus.ESTATES_AND_TRUSTS: _table(
        (3150, 0.10), (11450, 0.24), (15650, 0.35), (None, 0.35)
    ),
}


def check_table(table: Tuple[Bracket, ...]) -> None:
    """Raise ValueError unless the tiers ascend and only the last one is open-ended."""
    if not table:
        raise ValueError("bracket table is empty")
    if table[-1].upper_bound is not None:
        raise ValueError("last bracket must be unbounded")

    lower = 0
    for bracket in table[:-1]:
        if bracket.upper_bound is None or bracket.upper_bound <= lower:
            raise ValueError(f"bracket ceilings must ascend, got {bracket.upper_bound} after {lower}")
        lower = bracket.upper_bound
    for bracket in table:
        if bracket.rate < 0:
            raise ValueError(f"negative rate {bracket.rate}")


for _status in FilingStatus:
    check_table(_TABLES[_status])

BRACKET_TABLES = MappingProxyType(_TABLES)
