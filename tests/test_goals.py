from __future__ import annotations

from datetime import date, datetime

import pytest

from budgetpro.config import OVERDUE_COLOR
from budgetpro.goals import (
    DUE_TODAY,
    DUE_TOMORROW,
    NO_DEADLINE,
    OVERDUE,
    UPCOMING,
    budget_goal_progress,
    deadline_status,
    goals_by_category,
    orphaned_goals,
    savings_goal_progress,
    savings_totals,
)
from budgetpro.models import BudgetCategory, BudgetGoal, SavingsGoal, Transaction

TODAY = date(2024, 6, 15)


def _food():
    return BudgetCategory('c1', 'Food', 300.0, '#16a34a')


def _savings(current, target, deadline='', color='#3b82f6'):
    return SavingsGoal('s1', 'Trip', 'Travel', current, target, deadline, color)


@pytest.mark.parametrize(
    "deadline, label, urgency",
    [
        ('2024-06-10', '5 days overdue', OVERDUE),
        ('2024-06-14', '1 days overdue', OVERDUE),
        ('2024-06-15', 'Due today', DUE_TODAY),
        ('2024-06-16', 'Due tomorrow', DUE_TOMORROW),
        ('2024-07-01', '16 days left', UPCOMING),
        ('', 'No deadline', NO_DEADLINE),
        ('2024-13-40', 'No deadline', NO_DEADLINE),
    ],
)
def test_deadline_status(deadline: str, label: str, urgency: str) -> None:
    status = deadline_status(deadline, TODAY)
    assert status.label == label
    assert status.urgency == urgency


def test_deadline_status_ignores_time_of_day() -> None:
    late_evening = datetime(2024, 6, 15, 23, 59)
    assert deadline_status('2024-06-15', late_evening).label == 'Due today'
    assert deadline_status('2024-06-16T00:00:00', late_evening).label == 'Due tomorrow'


def test_budget_goal_progress_is_clamped_and_flags_overspend() -> None:
    goal = BudgetGoal('g1', 'c1', 'Cap food', 100.0, '2024-06-30')
    transactions = [
        Transaction('1', 'Expense', 'Market', 150.0, 'Food', '2024-06-03'),
        Transaction('2', 'Expense', 'Market', 70.0, 'Food', '2024-05-03'),
        Transaction('3', 'Income', 'Refund', 40.0, 'Food', '2024-06-04'),
    ]
    progress = budget_goal_progress(goal, _food(), transactions, TODAY)
    assert progress.spent == 150.0
    assert progress.progress == 100.0
    assert progress.is_over
    assert progress.deadline.label == '15 days left'


def test_budget_goal_with_zero_target_has_zero_progress() -> None:
    goal = BudgetGoal('g1', 'c1', 'Nothing', 0.0, '2024-06-30')
    transactions = [Transaction('1', 'Expense', 'x', 10.0, 'Food', '2024-06-03')]
    progress = budget_goal_progress(goal, _food(), transactions, TODAY)
    assert progress.progress == 0.0
    assert progress.is_over


def test_savings_progress_is_not_clamped() -> None:
    progress = savings_goal_progress(_savings(150.0, 100.0), TODAY)
    assert progress.progress == 150.0
    assert progress.remaining == -50.0
    assert not progress.is_overdue


def test_overdue_savings_goal_uses_overdue_color() -> None:
    progress = savings_goal_progress(_savings(10.0, 100.0, deadline='2024-06-10'), TODAY)
    assert progress.days_overdue == 5
    assert progress.bar_color == OVERDUE_COLOR

    on_time = savings_goal_progress(_savings(10.0, 100.0, deadline='2024-06-20'), TODAY)
    assert on_time.bar_color == '#3b82f6'


def test_orphaned_goals_are_excluded_from_grouping() -> None:
    categories = [_food()]
    goals = [
        BudgetGoal('g1', 'c1', 'Cap food', 200.0, '2024-06-30'),
        BudgetGoal('g2', 'gone', 'Old goal', 50.0, '2024-06-30'),
    ]
    grouped = goals_by_category(categories, goals, [], TODAY)
    assert list(grouped) == ['c1']
    assert [p.goal.id for p in grouped['c1']] == ['g1']
    assert [g.id for g in orphaned_goals(categories, goals)] == ['g2']


def test_savings_totals() -> None:
    goals = [
        SavingsGoal('a', 'A', 'Travel', 50.0, 100.0, '', '#000000'),
        SavingsGoal('b', 'B', 'Home', 25.0, 400.0, '', '#000000'),
    ]
    totals = savings_totals(goals)
    assert totals['total_saved'] == 75.0
    assert totals['total_target'] == 500.0
    assert totals['overall_progress'] == pytest.approx(15.0)
    assert savings_totals([])['overall_progress'] == 0.0


def test_budget_goal_counts_spend_with_time_and_offset_suffixes() -> None:
    goal = BudgetGoal('g1', 'c1', 'Cap food', 100.0, '2024-06-30')
    transactions = [
        Transaction('1', 'Expense', 'Market', 10.0, 'Food', '2024-06-15'),
        Transaction('2', 'Expense', 'Cafe', 5.0, 'Food', '2024-06-14T10:00:00+02:00'),
        Transaction('3', 'Expense', 'Late', 7.0, 'Food', '2024-06-30T23:30:00-05:00'),
    ]
    grouped = goals_by_category([_food()], [goal], transactions, TODAY)
    assert grouped['c1'][0].spent == 22.0
