"""Session state and the coordinator that owns every mutation.

:class:`AppState` is the single explicit container for income, budget
categories, transactions and goals.  :class:`BudgetTracker` is the only
writer: each mutation replaces the relevant collection in one assignment,
and every read-side aggregation receives the state explicitly.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field, replace
from typing import Callable, Iterable, List, Optional

from .config import CATEGORY_COLORS, INCOME_CATEGORIES
from .csv_codec import decode_csv, encode_csv
from .models import (
    INCOME,
    BudgetCategory,
    BudgetGoal,
    SavingsGoal,
    Transaction,
    TransactionDraft,
    default_category,
)
from .normalizer import ImportResult, build_transaction_draft, normalize_rows
from .reconciliation import ReconciliationReport, reconcile_month
from .summary import BudgetAnalytics, cycle_color

logger = logging.getLogger(__name__)


def _default_budget() -> List[BudgetCategory]:
    return [default_category()]


@dataclass
class AppState:
    monthly_income: float = 0.0
    budget: List[BudgetCategory] = field(default_factory=_default_budget)
    transactions: List[Transaction] = field(default_factory=list)  # newest first
    savings_goals: List[SavingsGoal] = field(default_factory=list)
    budget_goals: List[BudgetGoal] = field(default_factory=list)
    income_categories: List[str] = field(default_factory=lambda: list(INCOME_CATEGORIES))

    @property
    def expense_categories(self) -> List[str]:
        return [c.name for c in self.budget]


def _parse_allocation(value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


class BudgetTracker:
    """Coordinator for all reads and writes of one session's state."""

    def __init__(self, state: Optional[AppState] = None, id_factory: Optional[Callable[[], str]] = None):
        self.state = state if state is not None else AppState()
        self._new_id = id_factory or (lambda: uuid.uuid4().hex)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def add_transaction(self, draft: TransactionDraft) -> Transaction:
        transaction = draft.with_id(self._new_id())
        self.state.transactions = [transaction] + self.state.transactions
        return transaction

    def add_transactions(self, drafts: Iterable[TransactionDraft]) -> List[Transaction]:
        """Insert a batch ahead of existing transactions, keeping batch order."""
        batch = [draft.with_id(self._new_id()) for draft in drafts]
        self.state.transactions = batch + self.state.transactions
        return batch

    def known_categories(self, tx_type: str) -> List[str]:
        """Stored category names that entries of ``tx_type`` resolve against."""
        if tx_type == INCOME:
            return list(self.state.income_categories)
        return self.state.expense_categories

    def record_transaction(
        self,
        tx_type: str,
        description: str,
        amount,
        category: Optional[str] = None,
        date: Optional[str] = None,
        tags: Optional[Iterable[str]] = None,
    ) -> Transaction:
        """Validate a manual entry and add it to the store."""
        draft = build_transaction_draft(
            tx_type, description, amount, category, date, tags,
            known=self.known_categories(tx_type),
        )
        return self.add_transaction(draft)

    def edit_transaction(
        self,
        transaction_id: str,
        tx_type: str,
        description: str,
        amount,
        category: Optional[str] = None,
        date: Optional[str] = None,
    ) -> Optional[Transaction]:
        """Replace a stored transaction with a re-validated manual entry.

        Returns ``None`` when no transaction has ``transaction_id``.
        """
        existing = next((t for t in self.state.transactions if t.id == transaction_id), None)
        if existing is None:
            return None
        draft = build_transaction_draft(
            tx_type, description, amount, category, date, existing.tags,
            known=self.known_categories(tx_type),
        )
        transaction = draft.with_id(transaction_id)
        self.update_transaction(transaction)
        return transaction

    def update_transaction(self, transaction: Transaction) -> bool:
        if not any(t.id == transaction.id for t in self.state.transactions):
            return False
        self.state.transactions = [
            transaction if t.id == transaction.id else t for t in self.state.transactions
        ]
        return True

    def delete_transaction(self, transaction_id: str) -> bool:
        remaining = [t for t in self.state.transactions if t.id != transaction_id]
        removed = len(remaining) != len(self.state.transactions)
        self.state.transactions = remaining
        return removed

    def import_csv(self, text: str) -> ImportResult:
        """Decode, normalize and insert a CSV document.

        ``MalformedInput`` propagates and nothing is inserted.  Rows that
        fail validation are dropped and reported in the result.
        """
        rows = decode_csv(text)
        result = normalize_rows(rows, self.state.expense_categories, self.state.income_categories)
        self.add_transactions(result.accepted)
        logger.info(
            "Imported %d transactions (%d rows rejected)", len(result.accepted), result.rejected
        )
        return result

    def export_csv(self) -> str:
        return encode_csv(self.state.transactions)

    # ------------------------------------------------------------------
    # Income and budget categories
    # ------------------------------------------------------------------

    def set_monthly_income(self, amount) -> None:
        self.state.monthly_income = _parse_allocation(amount)

    def next_category_color(self) -> str:
        return cycle_color(len(self.state.budget), CATEGORY_COLORS)

    def add_category(self, name: str, amount, color: Optional[str] = None) -> Optional[BudgetCategory]:
        """Add a budget category; blank names and non-positive amounts are ignored."""
        name = (name or '').strip()
        allocation = _parse_allocation(amount)
        if not name or allocation <= 0:
            logger.debug("Ignoring invalid category %r with amount %r", name, amount)
            return None
        category = BudgetCategory(
            id=self._new_id(),
            name=name,
            amount=allocation,
            color=color or self.next_category_color(),
        )
        self.state.budget = self.state.budget + [category]
        return category

    def update_category(
        self,
        category_id: str,
        *,
        name: Optional[str] = None,
        amount=None,
        color: Optional[str] = None,
    ) -> None:
        """Edit a category in place.  Renaming the catch-all category is a no-op.

        Renames do not cascade: existing transactions keep the old name.
        """
        updated = []
        for category in self.state.budget:
            if category.id == category_id:
                changes = {}
                if name is not None:
                    if category.is_default:
                        logger.debug("Ignoring rename of the default category")
                    else:
                        changes['name'] = name
                if amount is not None:
                    changes['amount'] = _parse_allocation(amount)
                if color is not None:
                    changes['color'] = color
                category = replace(category, **changes)
            updated.append(category)
        self.state.budget = updated

    def delete_category(self, category_id: str) -> bool:
        """Delete a category.  Its goals become orphans and drop out of views."""
        remaining = []
        removed = False
        for category in self.state.budget:
            if category.id == category_id:
                if category.is_default:
                    logger.debug("Ignoring delete of the default category")
                    remaining.append(category)
                    continue
                removed = True
                continue
            remaining.append(category)
        self.state.budget = remaining
        return removed

    # ------------------------------------------------------------------
    # Goals
    # ------------------------------------------------------------------

    def add_budget_goal(self, category_id: str, title: str, target_amount: float, deadline: str) -> BudgetGoal:
        goal = BudgetGoal(
            id=self._new_id(),
            category_id=category_id,
            title=title,
            target_amount=float(target_amount),
            deadline=deadline,
        )
        self.state.budget_goals = self.state.budget_goals + [goal]
        return goal

    def update_budget_goal(self, goal: BudgetGoal) -> None:
        self.state.budget_goals = [goal if g.id == goal.id else g for g in self.state.budget_goals]

    def delete_budget_goal(self, goal_id: str) -> None:
        self.state.budget_goals = [g for g in self.state.budget_goals if g.id != goal_id]

    def add_savings_goal(
        self,
        title: str,
        category: str,
        target_amount: float,
        current_amount: float = 0.0,
        deadline: str = '',
    ) -> SavingsGoal:
        """Add a savings goal, colored by cycling the palette over existing goals."""
        goal = SavingsGoal(
            id=self._new_id(),
            title=title,
            category=category,
            current_amount=float(current_amount or 0.0),
            target_amount=float(target_amount),
            deadline=deadline,
            color=cycle_color(len(self.state.savings_goals), CATEGORY_COLORS),
        )
        self.state.savings_goals = self.state.savings_goals + [goal]
        return goal

    def update_savings_goal(self, goal: SavingsGoal) -> None:
        self.state.savings_goals = [goal if g.id == goal.id else g for g in self.state.savings_goals]

    def delete_savings_goal(self, goal_id: str) -> None:
        self.state.savings_goals = [g for g in self.state.savings_goals if g.id != goal_id]

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def analytics(self) -> BudgetAnalytics:
        return BudgetAnalytics(self.state)

    def reconcile(self, year: Optional[int] = None, month: Optional[int] = None) -> ReconciliationReport:
        return reconcile_month(self.state.transactions, self.state.budget, year=year, month=month)
