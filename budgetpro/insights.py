"""Payload assembly for the external insight service.

Text generation happens outside this package.  This module builds the
structured payload and prompt from the current state, splits a response
into bullet points, and provides :class:`InsightRequest`, the host-side
model of a cancellable request with idle/loading/success/error states.
No aggregation ever waits on it.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Optional

from .config import RECENT_TRANSACTION_LIMIT
from .formatting import format_currency

logger = logging.getLogger(__name__)

IDLE = 'idle'
LOADING = 'loading'
SUCCESS = 'success'
ERROR = 'error'

NOT_CONFIGURED_MESSAGE = "Insight service is not configured for this environment."

PROMPT_TEMPLATE = """\
You are a friendly financial advisor. Analyze the following financial data and provide 3-5 brief, actionable insights.
Focus on spending habits, budget adherence, and progress towards savings goals. Format the response as a simple text paragraph or bullet points using '*' for each point.

Data:
- Monthly Income: {monthly_income}
- Budget Categories: {budget_categories}
- Recent Transactions: {recent_transactions}
- Savings Goals: {savings_goals}
"""


def build_insight_payload(state, limit: int = RECENT_TRANSACTION_LIMIT) -> Dict[str, Any]:
    """Collect income, allocations, the most recent transactions and savings goals."""
    return {
        'monthly_income': float(state.monthly_income),
        'budget_categories': [
            {'name': c.name, 'allocated': c.amount} for c in state.budget
        ],
        # the store keeps the newest transactions first
        'recent_transactions': [
            {
                'description': t.description,
                'amount': t.amount,
                'category': t.category,
                'type': t.type,
                'date': t.date,
            }
            for t in state.transactions[:limit]
        ],
        'savings_goals': [
            {'title': g.title, 'current': g.current_amount, 'target': g.target_amount}
            for g in state.savings_goals
        ],
    }


def build_insight_prompt(payload: Dict[str, Any]) -> str:
    return PROMPT_TEMPLATE.format(
        monthly_income=format_currency(payload['monthly_income']),
        budget_categories=json.dumps(payload['budget_categories']),
        recent_transactions=json.dumps(payload['recent_transactions']),
        savings_goals=json.dumps(payload['savings_goals']),
    )


def split_insights(text: str) -> List[str]:
    """Split a response on ``*`` markers into non-empty bullet points."""
    return [part.strip() for part in (text or '').split('*') if part.strip()]


class InsightRequest:
    """Tri-state (plus idle) request slot with cancellation.

    Each :meth:`begin` hands out a ticket; results delivered with a stale
    ticket (cancelled or superseded) are ignored.
    """

    def __init__(self) -> None:
        self.status = IDLE
        self.text = ''
        self.error = ''
        self._ticket = 0

    @property
    def is_loading(self) -> bool:
        return self.status == LOADING

    @property
    def insights(self) -> List[str]:
        return split_insights(self.text) if self.status == SUCCESS else []

    def begin(self) -> int:
        self._ticket += 1
        self.status = LOADING
        self.text = ''
        self.error = ''
        return self._ticket

    def cancel(self) -> None:
        if self.status == LOADING:
            self._ticket += 1
            self.status = IDLE

    def resolve(self, ticket: int, text: str) -> bool:
        if ticket != self._ticket or self.status != LOADING:
            logger.debug("Dropping stale insight response for ticket %d", ticket)
            return False
        self.status = SUCCESS
        self.text = text
        return True

    def fail(self, ticket: int, message: str) -> bool:
        if ticket != self._ticket or self.status != LOADING:
            return False
        self.status = ERROR
        self.error = message or 'Failed to fetch insights. Please try again later.'
        return True

    def run(self, prompt: str, generate: Optional[Callable[[str], str]]) -> None:
        """Send ``prompt`` to ``generate`` and record the outcome."""
        ticket = self.begin()
        if generate is None:
            self.fail(ticket, NOT_CONFIGURED_MESSAGE)
            return
        try:
            text = generate(prompt)
        except Exception as exc:
            logger.error("Insight generation failed: %s", exc)
            self.fail(ticket, str(exc))
            return
        self.resolve(ticket, text or '')
