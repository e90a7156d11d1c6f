"""Record types held by the budget tracker.

All records are immutable.  Edits are full-record replacements performed
by :class:`budgetpro.state.BudgetTracker`, which exclusively owns every
instance for the lifetime of the session.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet

from .config import DEFAULT_CATEGORY_COLOR, DEFAULT_CATEGORY_ID, DEFAULT_CATEGORY_NAME

INCOME = 'Income'
EXPENSE = 'Expense'
TRANSACTION_TYPES = (INCOME, EXPENSE)


@dataclass(frozen=True)
class TransactionDraft:
    """A validated transaction that has not been assigned an id yet."""

    type: str
    description: str
    amount: float  # always >= 0, sign is carried by ``type``
    category: str
    date: str  # calendar date, YYYY-MM-DD
    tags: FrozenSet[str] = field(default_factory=frozenset)

    def with_id(self, transaction_id: str) -> 'Transaction':
        return Transaction(
            id=transaction_id,
            type=self.type,
            description=self.description,
            amount=self.amount,
            category=self.category,
            date=self.date,
            tags=self.tags,
        )


@dataclass(frozen=True)
class Transaction:
    id: str
    type: str
    description: str
    amount: float
    category: str
    date: str
    tags: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def is_income(self) -> bool:
        return self.type == INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == EXPENSE

    def to_record(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'type': self.type,
            'description': self.description,
            'amount': self.amount,
            'category': self.category,
            'date': self.date,
        }


@dataclass(frozen=True)
class BudgetCategory:
    id: str
    name: str
    amount: float  # monthly allocation
    color: str

    @property
    def is_default(self) -> bool:
        return self.id == DEFAULT_CATEGORY_ID


@dataclass(frozen=True)
class BudgetGoal:
    """Spending limit for one category, scoped to the month of ``deadline``."""

    id: str
    category_id: str
    title: str
    target_amount: float
    deadline: str


@dataclass(frozen=True)
class SavingsGoal:
    id: str
    title: str
    category: str
    current_amount: float
    target_amount: float
    deadline: str
    color: str


def default_category() -> BudgetCategory:
    return BudgetCategory(
        id=DEFAULT_CATEGORY_ID,
        name=DEFAULT_CATEGORY_NAME,
        amount=0.0,
        color=DEFAULT_CATEGORY_COLOR,
    )


def find_category_by_name(categories, name: str):
    """Return the first category whose name equals ``name`` exactly."""
    for category in categories:
        if category.name == name:
            return category
    return None


def find_category_by_id(categories, category_id: str):
    for category in categories:
        if category.id == category_id:
            return category
    return None


__all__ = [
    'INCOME',
    'EXPENSE',
    'TRANSACTION_TYPES',
    'TransactionDraft',
    'Transaction',
    'BudgetCategory',
    'BudgetGoal',
    'SavingsGoal',
    'default_category',
    'find_category_by_name',
    'find_category_by_id',
]
