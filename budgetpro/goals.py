"""Goal progress and deadline urgency.

Two kinds of goals are tracked:

* Budget goals cap spending in one budget category for the calendar month
  of the goal's own deadline.  Progress is clamped to 0-100% and an
  ``is_over`` flag reports overspending.
* Savings goals accumulate towards a target.  Progress is *not* clamped,
  so an over-funded goal reports more than 100%.

Deadlines are compared as calendar dates (see :mod:`budgetpro.dates`).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Sequence

import pandas as pd

from . import dates
from .config import OVERDUE_COLOR
from .ledger import month_rows, transactions_frame
from .models import EXPENSE, BudgetCategory, BudgetGoal, SavingsGoal, Transaction, find_category_by_id

logger = logging.getLogger(__name__)

OVERDUE = 'overdue'
DUE_TODAY = 'due_today'
DUE_TOMORROW = 'due_tomorrow'
UPCOMING = 'upcoming'
NO_DEADLINE = 'none'


@dataclass(frozen=True)
class DeadlineStatus:
    label: str
    urgency: str
    days_remaining: Optional[int] = None  # negative when overdue

    @property
    def days_overdue(self) -> int:
        if self.days_remaining is None or self.days_remaining >= 0:
            return 0
        return -self.days_remaining


@dataclass(frozen=True)
class BudgetGoalProgress:
    goal: BudgetGoal
    category: BudgetCategory
    spent: float
    progress: float
    is_over: bool
    deadline: DeadlineStatus


@dataclass(frozen=True)
class SavingsGoalProgress:
    goal: SavingsGoal
    progress: float
    remaining: float
    days_overdue: int
    bar_color: str

    @property
    def is_overdue(self) -> bool:
        return self.days_overdue > 0


def _resolve_today(today: Optional[date]) -> date:
    return dates.as_date(today) if today is not None else dates.today()


def _parse_deadline(deadline: Optional[str]) -> Optional[date]:
    parsed = dates.parse_calendar_date(deadline)
    if parsed is None and deadline:
        logger.warning("Ignoring unparseable deadline %r", deadline)
    return parsed


def deadline_status(deadline: Optional[str], today: Optional[date] = None) -> DeadlineStatus:
    """Classify a deadline relative to ``today`` (date only, no time of day)."""
    deadline_date = _parse_deadline(deadline)
    if deadline_date is None:
        return DeadlineStatus('No deadline', NO_DEADLINE)

    diff_days = (deadline_date - _resolve_today(today)).days
    if diff_days < 0:
        overdue = abs(diff_days)
        return DeadlineStatus(f'{overdue} days overdue', OVERDUE, diff_days)
    if diff_days == 0:
        return DeadlineStatus('Due today', DUE_TODAY, 0)
    if diff_days == 1:
        return DeadlineStatus('Due tomorrow', DUE_TOMORROW, 1)
    return DeadlineStatus(f'{diff_days} days left', UPCOMING, diff_days)


def _spent_in_deadline_month(df: pd.DataFrame, category_name: str, deadline: str) -> float:
    deadline_date = dates.parse_calendar_date(deadline)
    if deadline_date is None:
        return 0.0
    expenses = df[(df['type'] == EXPENSE) & (df['category'] == category_name)]
    return float(month_rows(expenses, deadline_date.year, deadline_date.month)['amount'].sum())


def _budget_goal_progress(
    df: pd.DataFrame, goal: BudgetGoal, category: BudgetCategory, today: date
) -> BudgetGoalProgress:
    spent = _spent_in_deadline_month(df, category.name, goal.deadline)
    target = goal.target_amount
    progress = min(max(spent / target * 100, 0.0), 100.0) if target > 0 else 0.0
    return BudgetGoalProgress(
        goal=goal,
        category=category,
        spent=spent,
        progress=progress,
        is_over=spent > target,
        deadline=deadline_status(goal.deadline, today),
    )


def budget_goal_progress(
    goal: BudgetGoal,
    category: BudgetCategory,
    transactions: Sequence[Transaction],
    today: Optional[date] = None,
) -> BudgetGoalProgress:
    """Progress of one spending goal against its category's monthly spend."""
    return _budget_goal_progress(
        transactions_frame(transactions), goal, category, _resolve_today(today)
    )


def orphaned_goals(
    categories: Sequence[BudgetCategory], goals: Sequence[BudgetGoal]
) -> List[BudgetGoal]:
    """Goals whose category has been deleted."""
    return [g for g in goals if find_category_by_id(categories, g.category_id) is None]


def goals_by_category(
    categories: Sequence[BudgetCategory],
    goals: Sequence[BudgetGoal],
    transactions: Sequence[Transaction],
    today: Optional[date] = None,
) -> Dict[str, List[BudgetGoalProgress]]:
    """Goal progress grouped by category id, in budget order.

    Orphaned goals are left out rather than reported as errors.
    """
    df = transactions_frame(transactions)
    current = _resolve_today(today)
    grouped: Dict[str, List[BudgetGoalProgress]] = {c.id: [] for c in categories}
    for goal in goals:
        category = find_category_by_id(categories, goal.category_id)
        if category is None:
            logger.debug("Skipping orphaned budget goal %s", goal.id)
            continue
        grouped[category.id].append(_budget_goal_progress(df, goal, category, current))
    return grouped


def savings_goal_progress(goal: SavingsGoal, today: Optional[date] = None) -> SavingsGoalProgress:
    target = goal.target_amount
    progress = goal.current_amount / target * 100 if target > 0 else 0.0
    overdue = deadline_status(goal.deadline, today).days_overdue
    return SavingsGoalProgress(
        goal=goal,
        progress=progress,
        remaining=target - goal.current_amount,
        days_overdue=overdue,
        bar_color=OVERDUE_COLOR if overdue > 0 else goal.color,
    )


def savings_totals(goals: Sequence[SavingsGoal]) -> Dict[str, float]:
    total_saved = float(sum(g.current_amount for g in goals))
    total_target = float(sum(g.target_amount for g in goals))
    progress = total_saved / total_target * 100 if total_target > 0 else 0.0
    return {
        'total_saved': total_saved,
        'total_target': total_target,
        'overall_progress': progress,
    }
