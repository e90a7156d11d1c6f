"""Dashboard rollups.

This module contains the summary figures shown on the dashboard: all-time
income and expense totals, remaining budget, savings progress, category
breakdowns and the month-by-month overview.  Nothing is cached; build a
:class:`BudgetAnalytics` from the current state whenever a view needs it.
"""

from __future__ import annotations

from typing import Any, Dict, Sequence

import pandas as pd

from .config import CATEGORY_COLORS, UNKNOWN_EXPENSE_COLOR
from .goals import savings_totals
from .ledger import transactions_frame
from .models import EXPENSE, INCOME, find_category_by_name

MONTH_ABBREVIATIONS = [
    'Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
    'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec',
]


def cycle_color(count: int, palette: Sequence[str] = CATEGORY_COLORS) -> str:
    """Palette entry for the item created after ``count`` existing items."""
    return palette[count % len(palette)]


class BudgetAnalytics:
    """Budget analytics computed from an :class:`~budgetpro.state.AppState`."""

    def __init__(self, state):
        """Initialize with the application state to aggregate."""
        self.state = state
        self.data = transactions_frame(state.transactions)

    def _rows_of_type(self, tx_type: str) -> pd.DataFrame:
        return self.data[self.data['type'] == tx_type]

    def calculate_summary(self) -> Dict[str, Any]:
        """Calculate the headline figures (all-time, no date filter)."""
        income = float(self._rows_of_type(INCOME)['amount'].sum())
        expenses = float(self._rows_of_type(EXPENSE)['amount'].sum())
        savings = savings_totals(self.state.savings_goals)

        return {
            'total_income': income,
            'total_expenses': expenses,
            'remaining_budget': float(self.state.monthly_income) - expenses,
            'savings_progress': savings['overall_progress'],
            'expense_by_category': self.calculate_expense_by_category(),
            'income_by_category': self.calculate_income_by_category(),
            'monthly_overview': self.calculate_monthly_overview(),
        }

    def calculate_expense_by_category(self) -> pd.DataFrame:
        """Expense totals per category, colored from the budget list."""
        totals = self._rows_of_type(EXPENSE).groupby('category', sort=False)['amount'].sum()
        rows = []
        for name, value in totals.items():
            budget_category = find_category_by_name(self.state.budget, name)
            rows.append({
                'Category': name,
                'Amount': float(value),
                'Color': budget_category.color if budget_category else UNKNOWN_EXPENSE_COLOR,
            })
        return pd.DataFrame(rows, columns=['Category', 'Amount', 'Color'])

    def calculate_income_by_category(self) -> pd.DataFrame:
        """Income totals per category, colored by first-seen order."""
        income = self._rows_of_type(INCOME)
        income = income[income['category'] != '']
        totals = income.groupby('category', sort=False)['amount'].sum()
        rows = [
            {'Category': name, 'Amount': float(value), 'Color': cycle_color(index)}
            for index, (name, value) in enumerate(totals.items())
        ]
        return pd.DataFrame(rows, columns=['Category', 'Amount', 'Color'])

    def calculate_monthly_overview(self) -> pd.DataFrame:
        """Income and expenses per calendar month, oldest first.

        Transactions whose date fails to parse are skipped.  Anything that
        is not Income counts as an expense.
        """
        dated = self.data.dropna(subset=['Parsed Date']).copy()
        columns = ['Month_Label', 'Year', 'Month', 'Income', 'Expenses']
        if dated.empty:
            return pd.DataFrame(columns=columns)

        dated['Income'] = dated['amount'].where(dated['type'] == INCOME, 0.0)
        dated['Expenses'] = dated['amount'].where(dated['type'] != INCOME, 0.0)
        monthly = (
            dated.groupby(['Year', 'Month'])[['Income', 'Expenses']]
            .sum()
            .reset_index()
            .sort_values(['Year', 'Month'], kind='stable')
            .reset_index(drop=True)
        )
        monthly['Year'] = monthly['Year'].astype(int)
        monthly['Month'] = monthly['Month'].astype(int)
        monthly['Month_Label'] = [
            f"{MONTH_ABBREVIATIONS[month - 1]} '{str(year)[-2:]}"
            for year, month in zip(monthly['Year'], monthly['Month'])
        ]
        return monthly[columns]

    def calculate_budget_allocation(self) -> Dict[str, Any]:
        """Share of the total monthly allocation held by each category."""
        total = float(sum(c.amount for c in self.state.budget))
        allocation = [
            {
                'name': c.name,
                'percentage': round(c.amount / total * 100, 1) if total > 0 else 0.0,
            }
            for c in self.state.budget
        ]
        return {
            'total_budget': total,
            'remaining': float(self.state.monthly_income) - total,
            'allocation': allocation,
        }

    def calculate_savings_overview(self) -> Dict[str, float]:
        return savings_totals(self.state.savings_goals)
