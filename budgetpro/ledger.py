"""Read-side helpers over the transaction store.

The store itself is a plain list of :class:`~budgetpro.models.Transaction`
records, most recently added first.  Aggregations work on the pandas view
returned by :func:`transactions_frame`, which is rebuilt on every call.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Sequence

import pandas as pd

from .config import DEFAULT_CATEGORY_NAME
from .dates import parse_calendar_date
from .models import INCOME, Transaction

FRAME_COLUMNS = ['id', 'type', 'description', 'amount', 'category', 'date']
SORT_KEYS = ('date', 'description', 'category', 'amount')

_EPOCH = date(1970, 1, 1)


def transactions_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Build a DataFrame view of the store with parsed date columns.

    Dates are read as calendar components, so any time or offset suffix is
    ignored.  ``Year``/``Month`` are ``NaN`` for dates that fail to parse,
    so such rows never match a calendar month.
    """
    df = pd.DataFrame.from_records(
        [t.to_record() for t in transactions],
        columns=FRAME_COLUMNS,
    )
    df['amount'] = pd.to_numeric(df['amount'], errors='coerce').fillna(0.0).astype(float)
    calendar_dates = pd.Series(
        [parse_calendar_date(value) for value in df['date']],
        index=df.index,
        dtype=object,
    )
    df['Parsed Date'] = pd.to_datetime(calendar_dates, errors='coerce')
    df['Year'] = df['Parsed Date'].dt.year
    df['Month'] = df['Parsed Date'].dt.month
    return df


def month_rows(df: pd.DataFrame, year: int, month: int) -> pd.DataFrame:
    return df[(df['Year'] == year) & (df['Month'] == month)]


def _date_sort_value(t: Transaction) -> int:
    parsed = parse_calendar_date(t.date)
    return (parsed - _EPOCH).days if parsed else 0


def search_transactions(
    transactions: Sequence[Transaction],
    query: str = '',
    sort_key: str = 'date',
    direction: str = 'desc',
) -> List[Transaction]:
    """Filter by description substring and sort for the transaction list.

    Text keys compare case-insensitively; equal keys keep store order.
    """
    if sort_key not in SORT_KEYS:
        raise ValueError(f"Unsupported sort key '{sort_key}'")
    needle = (query or '').lower()
    matches = [t for t in transactions if needle in t.description.lower()]

    if sort_key == 'amount':
        key = lambda t: t.amount  # noqa: E731
    elif sort_key == 'date':
        key = _date_sort_value
    else:
        key = lambda t: (getattr(t, sort_key) or '').lower()  # noqa: E731

    return sorted(matches, key=key, reverse=(direction == 'desc'))


def category_options(
    tx_type: str,
    expense_categories: Sequence[str],
    income_categories: Sequence[str],
    editing: Optional[Transaction] = None,
) -> List[str]:
    """Category choices for the entry form, sorted, always including ``Other``."""
    source = income_categories if tx_type == INCOME else expense_categories
    options = set(source)
    if editing is not None and editing.type == tx_type and editing.category:
        options.add(editing.category)
    options.add(DEFAULT_CATEGORY_NAME)
    return sorted(options)
