import logging

import pandas as pd

from engine.brackets import TAX_YEAR, FilingStatus
from engine.taxes import TaxResult, bracket_table, evaluate
from schemas.tax import TaxRequest

logger = logging.getLogger(__name__)

BREAKDOWN_COLUMNS = ['Lower', 'Upper', 'Rate', 'Taxable', 'Tax']


def format_currency(value) -> str:
    """Format a dollar amount as $1,234,567.89"""
    if value is None:
        value = 0.0
    return f"${value:,.2f}"


def format_result_message(result: TaxResult) -> str:
    return (
        f"The calculated tax based on {result.filing_status.phrase} and a gross income of "
        f"{format_currency(result.gross_income)} is {format_currency(result.amount)}."
    )


def breakdown_frame(result: TaxResult) -> pd.DataFrame:
    """One row per bracket that received income. An open upper bound is NaN."""
    records = [
        {
            'Lower': tier.lower_bound,
            'Upper': tier.upper_bound,
            'Rate': tier.rate,
            'Taxable': tier.taxable_amount,
            'Tax': tier.tax,
        }
        for tier in result.tiers
    ]
    return pd.DataFrame(records, columns=BREAKDOWN_COLUMNS, dtype=float)


def format_frame(df: pd.DataFrame) -> dict:
    """Format a frame for API response"""
    # object dtype so missing bounds come out as None and numbers as plain floats
    records = df.astype(object).where(df.notna(), None).to_dict(orient='records')
    return {'results': records, 'columns': list(df.columns)}


def format_breakdown(result: TaxResult) -> dict:
    return format_frame(breakdown_frame(result))


def run_tax_service(params: TaxRequest) -> dict:
    """
    Evaluate one request and shape it for the API / display layer.
    """
    result = evaluate(params.filing_status, params.gross_income)

    payload = {
        'success': True,
        'tax_year': TAX_YEAR,
        'filing_status': int(result.filing_status),
        'filing_status_label': result.filing_status_label,
        'gross_income': result.gross_income,
        'tax': round(result.amount, 2),
        'formatted_tax': format_currency(result.amount),
        'formatted_income': format_currency(result.gross_income),
        'marginal_rate': result.marginal_rate,
        'effective_rate': round(result.effective_rate, 6),
        'message': format_result_message(result),
        'breakdown': None,
    }
    if params.include_breakdown:
        payload['breakdown'] = format_breakdown(result)
    return payload


def list_filing_statuses() -> list:
    return [
        {'value': int(status), 'code': status.code, 'name': status.name.lower(), 'label': status.label}
        for status in FilingStatus
    ]


def bracket_table_service(filing_status) -> dict:
    """
    Tier table for one filing status. Raises InvalidFilingStatus for unknown selectors.
    """
    status = FilingStatus.parse(filing_status)
    rows = []
    lower = 0
    for bracket in bracket_table(status):
        rows.append({'Lower': lower, 'Upper': bracket.upper_bound, 'Rate': bracket.rate})
        lower = bracket.upper_bound

    return {
        'tax_year': TAX_YEAR,
        'filing_status': int(status),
        'filing_status_label': status.label,
        'brackets': rows,
    }
