"""
cli.py
------
Console front end: asks for a filing status and total income, then prints the
calculated tax.

Run:
    python cli.py
    python cli.py --status 4 --income 150000 --breakdown
"""
import argparse
import logging
import sys

import pandas as pd

from engine.brackets import FilingStatus
from engine.errors import InvalidIncome, InvalidInputError
from engine.taxes import evaluate
from services.tax_service import breakdown_frame, format_currency, format_result_message

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID_INPUT = 2


def menu_text() -> str:
    lines = ["Enter your filing status: "]
    for status in FilingStatus:
        lines.append(f"{int(status)}) {status.label}")
    return "\n".join(lines)


def parse_income(raw) -> float:
    """Parse '150000', '$150,000.00' etc. Raises InvalidIncome for anything non-numeric."""
    if isinstance(raw, (int, float)):
        return raw
    cleaned = str(raw).strip().lstrip('$').replace(',', '').strip()
    try:
        return float(cleaned)
    except ValueError:
        raise InvalidIncome(raw, "must be a number") from None


def prompt_filing_status(out=sys.stdout) -> str:
    print("Hello and welcome!", file=out)
    print(menu_text(), file=out)
    return input()


def prompt_income(out=sys.stdout) -> str:
    print("Enter your total income: ", file=out)
    return input()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Estimate 2025 federal income tax.")
    parser.add_argument("-s", "--status",
                        help="Filing status: 1-5, or S / HOH / MFS / MFJ / EST. Prompted if omitted.")
    parser.add_argument("-i", "--income",
                        help="Total gross income. Prompted if omitted.")
    parser.add_argument("--breakdown", action="store_true",
                        help="Also print the tax owed in each bracket.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return parser


def main(argv=None, out=sys.stdout, err=sys.stderr) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        raw_status = args.status if args.status is not None else prompt_filing_status(out)
        status = FilingStatus.parse(raw_status)
        raw_income = args.income if args.income is not None else prompt_income(out)
        result = evaluate(status, parse_income(raw_income))
    except InvalidInputError as e:
        logger.debug("Invalid input: %s", e)
        print(f"Error: {e}", file=err)
        return EXIT_INVALID_INPUT
    except EOFError:
        print("Error: no input provided", file=err)
        return EXIT_INVALID_INPUT

    print(format_result_message(result), file=out)

    if args.breakdown and result.tiers:
        df = breakdown_frame(result)
        df['Upper'] = df['Upper'].map(lambda v: "and above" if pd.isna(v) else format_currency(v))
        df['Lower'] = df['Lower'].map(format_currency)
        df['Rate'] = df['Rate'].map(lambda v: f"{v:.0%}")
        df['Taxable'] = df['Taxable'].map(format_currency)
        df['Tax'] = df['Tax'].map(format_currency)
        print(df.to_string(index=False), file=out)

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
