#!/usr/bin/env python3
"""Import a transactions CSV and print the dashboard rollups."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from budgetpro import config
from budgetpro.csv_codec import MalformedInput
from budgetpro.formatting import format_currency, format_percentage
from budgetpro.state import BudgetTracker

logger = logging.getLogger("import_summary")


def parse_month(value: str) -> Tuple[int, int]:
    try:
        year, month = (int(part) for part in value.split('-'))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected YYYY-MM, got '{value}'")
    if not 1 <= month <= 12:
        raise argparse.ArgumentTypeError(f"Month out of range in '{value}'")
    return year, month


def main(path: Path, income: float = 0.0, month: Optional[Tuple[int, int]] = None) -> int:
    tracker = BudgetTracker()
    tracker.set_monthly_income(income)

    try:
        text = path.read_text(encoding='utf-8')
    except OSError as exc:
        logger.error("Unable to read %s: %s", path, exc)
        return 1

    try:
        result = tracker.import_csv(text)
    except MalformedInput as exc:
        logger.error("Import failed: %s", exc)
        return 1

    print(f"Imported: {len(result.accepted)}  Rejected: {result.rejected}")
    for rejection in result.rejections:
        print(f"  line {rejection.line}: {rejection.reason}")

    summary = tracker.analytics().calculate_summary()
    print(f"\nTotal income:     {format_currency(summary['total_income'])}")
    print(f"Total expenses:   {format_currency(summary['total_expenses'])}")
    print(f"Remaining budget: {format_currency(summary['remaining_budget'])}")
    print(f"Savings progress: {format_percentage(summary['savings_progress'])}")

    monthly = summary['monthly_overview']
    if not monthly.empty:
        print("\nMonthly overview:")
        print(monthly[['Month_Label', 'Income', 'Expenses']].to_string(index=False))

    year, month_no = month or (None, None)
    report = tracker.reconcile(year=year, month=month_no)
    print(f"\nBudget vs actual for {report.year}-{report.month:02d}:")
    if report.rows.empty:
        print("  (no budgeted or spent categories)")
    else:
        print(report.rows.drop(columns=['Color']).to_string(index=False))
    totals = report.totals
    print(
        f"Totals: budgeted {format_currency(totals['budgeted'])}, "
        f"actual {format_currency(totals['actual'])}, "
        f"variance {format_currency(totals['variance'])}"
    )
    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Import a transactions CSV and show the summary.')
    parser.add_argument('path', type=Path, help='CSV file with type,description,amount,category,date columns')
    parser.add_argument('--income', type=float, default=0.0, help='Monthly income used for the remaining budget')
    parser.add_argument('--month', type=parse_month, default=None, help='Reference month for reconciliation (YYYY-MM)')
    args = parser.parse_args()
    config.configure_logging()
    sys.exit(main(args.path, income=args.income, month=args.month))
