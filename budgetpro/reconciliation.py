"""Budget-vs-actual reconciliation for one calendar month.

Transactions reference budget categories by name only.  The report is the
union of budgeted names and names with spending in the month, so spending
in an unbudgeted category still shows up (with a zero budget).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence

import pandas as pd

from .config import UNBUDGETED_COLOR
from . import dates
from .ledger import month_rows, transactions_frame
from .models import EXPENSE, BudgetCategory, Transaction, find_category_by_name

REPORT_COLUMNS = ['Category', 'Color', 'Budgeted', 'Actual', 'Variance']


@dataclass(frozen=True)
class ReconciliationReport:
    year: int
    month: int
    rows: pd.DataFrame
    totals: Dict[str, float]

    def row_for(self, category: str) -> Optional[pd.Series]:
        match = self.rows[self.rows['Category'] == category]
        if match.empty:
            return None
        return match.iloc[0]


def actual_spending(
    transactions: Sequence[Transaction], year: int, month: int
) -> pd.Series:
    """Sum Expense amounts per category name for one month, in encounter order."""
    df = transactions_frame(transactions)
    expenses = month_rows(df[df['type'] == EXPENSE], year, month)
    return expenses.groupby('category', sort=False)['amount'].sum()


def reconcile_month(
    transactions: Sequence[Transaction],
    categories: Sequence[BudgetCategory],
    year: Optional[int] = None,
    month: Optional[int] = None,
) -> ReconciliationReport:
    """Compare each category's allocation with its spending in the month.

    ``year``/``month`` default to the current calendar month.  Rows are
    ordered by budgeted amount, largest first; ties keep encounter order
    (budget list first, then unbudgeted spending).
    """
    if year is None or month is None:
        current = dates.today()
        year = current.year if year is None else year
        month = current.month if month is None else month

    spending = actual_spending(transactions, year, month)
    names = list(dict.fromkeys([c.name for c in categories] + list(spending.index)))

    rows = []
    for name in names:
        budget_category = find_category_by_name(categories, name)
        budgeted = float(budget_category.amount) if budget_category else 0.0
        actual = float(spending.get(name, 0.0))
        rows.append({
            'Category': name,
            'Color': budget_category.color if budget_category else UNBUDGETED_COLOR,
            'Budgeted': budgeted,
            'Actual': actual,
            'Variance': budgeted - actual,
        })

    report = pd.DataFrame(rows, columns=REPORT_COLUMNS)
    report = report.sort_values('Budgeted', ascending=False, kind='stable').reset_index(drop=True)

    total_budgeted = float(report['Budgeted'].sum())
    total_actual = float(report['Actual'].sum())
    totals = {
        'budgeted': total_budgeted,
        'actual': total_actual,
        'variance': total_budgeted - total_actual,
    }
    return ReconciliationReport(year=year, month=month, rows=report, totals=totals)
