"""Turn decoded CSV rows into validated transaction drafts.

Row-level failures never abort a batch: :func:`normalize_rows` folds the
rows into ``(accepted, rejections)`` and the caller reports the count.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Optional, Sequence, Union

import numpy as np

from .config import DEFAULT_CATEGORY_NAME
from .dates import iso_today
from .models import INCOME, TRANSACTION_TYPES, TransactionDraft

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RowRejected:
    """A CSV row that failed type/amount validation and was skipped."""

    line: int  # 1-based record number, header is line 1
    reason: str
    row: Mapping[str, str]


@dataclass
class ImportResult:
    accepted: List[TransactionDraft] = field(default_factory=list)
    rejections: List[RowRejected] = field(default_factory=list)

    @property
    def rejected(self) -> int:
        return len(self.rejections)


def parse_amount(value: Union[str, float, int, None]) -> Optional[float]:
    """Parse a finite amount, or return ``None``."""
    if value is None:
        return None
    try:
        amount = float(str(value).strip())
    except ValueError:
        return None
    if not np.isfinite(amount):
        return None
    return amount


def match_category(raw: Optional[str], known: Sequence[str]) -> str:
    """Resolve a raw category label against the known names.

    Matching is case-insensitive and returns the stored spelling.  Unknown
    non-empty labels are kept as free-form categories; empty labels fall
    back to ``Other``.
    """
    trimmed = (raw or '').strip()
    if not trimmed:
        return DEFAULT_CATEGORY_NAME
    lowered = trimmed.lower()
    for name in known:
        if name.lower() == lowered:
            return name
    return trimmed


def normalize_row(
    row: Mapping[str, str],
    expense_categories: Sequence[str],
    income_categories: Sequence[str],
    line: int = 0,
) -> Union[TransactionDraft, RowRejected]:
    tx_type = row.get('type')
    if tx_type not in TRANSACTION_TYPES:
        return RowRejected(line, f'Invalid transaction type "{tx_type}"', row)

    amount = parse_amount(row.get('amount'))
    if amount is None:
        return RowRejected(line, f'Invalid amount "{row.get("amount")}"', row)
    if amount < 0:
        return RowRejected(line, f'Negative amount "{row.get("amount")}"', row)

    known = income_categories if tx_type == INCOME else expense_categories
    date_value = (row.get('date') or '').strip()

    return TransactionDraft(
        type=tx_type,
        description=(row.get('description') or '').strip(),
        amount=amount,
        category=match_category(row.get('category'), known),
        date=date_value or iso_today(),
    )


def normalize_rows(
    rows: Iterable[Mapping[str, str]],
    expense_categories: Sequence[str],
    income_categories: Sequence[str],
) -> ImportResult:
    result = ImportResult()
    # data rows start on line 2, after the header
    for line, row in enumerate(rows, start=2):
        outcome = normalize_row(row, expense_categories, income_categories, line=line)
        if isinstance(outcome, RowRejected):
            logger.warning("Skipping row %d: %s", outcome.line, outcome.reason)
            result.rejections.append(outcome)
        else:
            result.accepted.append(outcome)
    return result


def build_transaction_draft(
    tx_type: str,
    description: str,
    amount: Union[str, float],
    category: Optional[str] = None,
    date: Optional[str] = None,
    tags: Optional[Iterable[str]] = None,
    known: Sequence[str] = (),
) -> TransactionDraft:
    """Build a draft from manual entry.

    ``known`` holds the category names for ``tx_type``; the category is
    resolved against them the same way imported rows are.  There is no
    reject path here; an unparseable amount raises ``ValueError`` since
    form validation is expected upstream.
    """
    if tx_type not in TRANSACTION_TYPES:
        raise ValueError(f"Unknown transaction type '{tx_type}'")
    value = parse_amount(amount)
    if value is None:
        raise ValueError(f"Invalid amount: {amount}")
    if value < 0:
        raise ValueError(f"Amount must not be negative: {amount}")
    return TransactionDraft(
        type=tx_type,
        description=(description or '').strip(),
        amount=value,
        category=match_category(category, known),
        date=(date or '').strip().split('T')[0] or iso_today(),
        tags=frozenset(tags or ()),
    )
