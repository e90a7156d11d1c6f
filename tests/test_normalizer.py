"""Unit tests for budgetpro.normalizer."""

from __future__ import annotations

from datetime import date

import pytest

from budgetpro import dates
from budgetpro.csv_codec import decode_csv
from budgetpro.normalizer import (
    RowRejected,
    build_transaction_draft,
    match_category,
    normalize_row,
    normalize_rows,
    parse_amount,
)

EXPENSE_CATEGORIES = ['Other', 'Groceries', 'Rent']
INCOME_CATEGORIES = ['Salary', 'Freelance', 'Investment', 'Gifts', 'Other']

SAMPLE_CSV = """type,description,amount,category,date
Expense,Market,54.20,groceries,2024-06-01
Income,June pay,3200,SALARY,2024-06-01
Expense,Rent June,1200,Rent,2024-06-02
Transfer,Savings move,300,Other,2024-06-03
Expense,Cinema,18,Fun,2024-06-04
expense,Lowercase type,10,Other,2024-06-05
Expense,Snacks,6.5,,2024-06-06
"""


@pytest.fixture
def fixed_today(monkeypatch):
    monkeypatch.setattr(dates, 'today', lambda: date(2024, 6, 15))


def test_partial_failure_keeps_valid_rows() -> None:
    result = normalize_rows(decode_csv(SAMPLE_CSV), EXPENSE_CATEGORIES, INCOME_CATEGORIES)
    assert len(result.accepted) == 5
    assert result.rejected == 2
    assert [r.line for r in result.rejections] == [5, 7]
    assert all(isinstance(r, RowRejected) for r in result.rejections)


def test_categories_resolve_to_stored_spelling_per_type() -> None:
    result = normalize_rows(decode_csv(SAMPLE_CSV), EXPENSE_CATEGORIES, INCOME_CATEGORIES)
    categories = [t.category for t in result.accepted]
    assert categories == ['Groceries', 'Salary', 'Rent', 'Fun', 'Other']


def test_income_names_do_not_match_expense_rows() -> None:
    row = {'type': 'Expense', 'description': 'x', 'amount': '1', 'category': 'salary', 'date': '2024-01-01'}
    draft = normalize_row(row, EXPENSE_CATEGORIES, INCOME_CATEGORIES)
    assert draft.category == 'salary'


@pytest.mark.parametrize("amount", ["", "abc", "nan", "inf", "-inf"])
def test_non_finite_or_unparseable_amount_is_rejected(amount: str) -> None:
    row = {'type': 'Expense', 'description': 'x', 'amount': amount, 'category': '', 'date': ''}
    outcome = normalize_row(row, EXPENSE_CATEGORIES, INCOME_CATEGORIES, line=3)
    assert isinstance(outcome, RowRejected)
    assert outcome.line == 3
    assert 'amount' in outcome.reason


def test_negative_amount_is_rejected() -> None:
    row = {'type': 'Income', 'description': 'x', 'amount': '-5', 'category': '', 'date': ''}
    assert isinstance(normalize_row(row, EXPENSE_CATEGORIES, INCOME_CATEGORIES), RowRejected)


def test_missing_date_defaults_to_today_and_description_is_trimmed(fixed_today) -> None:
    row = {'type': 'Expense', 'description': '  Coffee  ', 'amount': ' 3.75 ', 'category': ' ', 'date': ''}
    draft = normalize_row(row, EXPENSE_CATEGORIES, INCOME_CATEGORIES)
    assert draft.date == '2024-06-15'
    assert draft.description == 'Coffee'
    assert draft.amount == 3.75
    assert draft.category == 'Other'


def test_parse_amount() -> None:
    assert parse_amount('12') == 12.0
    assert parse_amount(' 0.5 ') == 0.5
    assert parse_amount(None) is None
    assert parse_amount('12abc') is None


def test_match_category_prefers_first_stored_name() -> None:
    assert match_category('FOOD', ['Food', 'food']) == 'Food'
    assert match_category('  Travel ', ['Food']) == 'Travel'
    assert match_category(None, ['Food']) == 'Other'


def test_manual_entry_defaults(fixed_today) -> None:
    draft = build_transaction_draft('Expense', 'Lunch', '12.5', category='', date='', tags=['work'])
    assert draft.amount == 12.5
    assert draft.category == 'Other'
    assert draft.date == '2024-06-15'
    assert draft.tags == frozenset({'work'})


def test_manual_entry_strips_time_component() -> None:
    draft = build_transaction_draft('Income', 'Pay', 10, category='Salary', date='2024-06-01T09:30:00')
    assert draft.date == '2024-06-01'


def test_manual_entry_raises_on_bad_input() -> None:
    with pytest.raises(ValueError):
        build_transaction_draft('Expense', 'Lunch', 'twelve')
    with pytest.raises(ValueError):
        build_transaction_draft('Expense', 'Lunch', -1)
    with pytest.raises(ValueError):
        build_transaction_draft('Refund', 'Lunch', 1)


def test_row_of_empty_cells_is_rejected() -> None:
    rows = decode_csv("type,description,amount,category,date\n,,,,\n")
    result = normalize_rows(rows, EXPENSE_CATEGORIES, INCOME_CATEGORIES)
    assert result.accepted == []
    assert result.rejected == 1


def test_manual_entry_matches_known_categories() -> None:
    draft = build_transaction_draft('Expense', 'x', 5, 'groceries', '2024-06-01', known=EXPENSE_CATEGORIES)
    assert draft.category == 'Groceries'
    unknown = build_transaction_draft('Expense', 'x', 5, ' Hobby ', '2024-06-01', known=EXPENSE_CATEGORIES)
    assert unknown.category == 'Hobby'


@pytest.mark.parametrize("amount", ["nan", "inf"])
def test_manual_entry_rejects_non_finite_amount(amount: str) -> None:
    with pytest.raises(ValueError):
        build_transaction_draft('Expense', 'Lunch', amount)
