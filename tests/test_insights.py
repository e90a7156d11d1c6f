from __future__ import annotations

from budgetpro.insights import (
    ERROR,
    IDLE,
    LOADING,
    NOT_CONFIGURED_MESSAGE,
    SUCCESS,
    InsightRequest,
    build_insight_payload,
    build_insight_prompt,
    split_insights,
)
from budgetpro.models import SavingsGoal, Transaction
from budgetpro.state import AppState


def _state(n_transactions: int = 3) -> AppState:
    return AppState(
        monthly_income=4200.0,
        transactions=[
            Transaction(str(i), 'Expense', f'item {i}', float(i), 'Other', '2024-06-01')
            for i in range(n_transactions)
        ],
        savings_goals=[SavingsGoal('s1', 'Trip', 'Travel', 100.0, 500.0, '', '#16a34a')],
    )


def test_payload_takes_most_recent_transactions() -> None:
    payload = build_insight_payload(_state(25), limit=20)
    recent = payload['recent_transactions']
    assert len(recent) == 20
    assert recent[0]['description'] == 'item 0'
    assert recent[-1]['description'] == 'item 19'
    assert payload['budget_categories'] == [{'name': 'Other', 'allocated': 0.0}]
    assert payload['savings_goals'] == [{'title': 'Trip', 'current': 100.0, 'target': 500.0}]


def test_prompt_includes_formatted_income_and_data() -> None:
    prompt = build_insight_prompt(build_insight_payload(_state()))
    assert 'Monthly Income: $4,200.00' in prompt
    assert '"title": "Trip"' in prompt
    assert "using '*' for each point" in prompt


def test_split_insights() -> None:
    text = "* Spend less on food.\n* Save more.\n\n*  "
    assert split_insights(text) == ['Spend less on food.', 'Save more.']
    assert split_insights('') == []


def test_run_without_generator_reports_error() -> None:
    request = InsightRequest()
    assert request.status == IDLE
    request.run('prompt', None)
    assert request.status == ERROR
    assert request.error == NOT_CONFIGURED_MESSAGE
    assert request.insights == []


def test_run_success() -> None:
    request = InsightRequest()
    prompts = []

    def generate(prompt: str) -> str:
        prompts.append(prompt)
        return "* One\n* Two"

    request.run('hello', generate)
    assert prompts == ['hello']
    assert request.status == SUCCESS
    assert request.insights == ['One', 'Two']


def test_run_failure_is_captured() -> None:
    def generate(prompt: str) -> str:
        raise RuntimeError('service unavailable')

    request = InsightRequest()
    request.run('hello', generate)
    assert request.status == ERROR
    assert request.error == 'service unavailable'


def test_cancelled_request_ignores_late_response() -> None:
    request = InsightRequest()
    ticket = request.begin()
    assert request.is_loading
    request.cancel()
    assert request.status == IDLE
    assert not request.resolve(ticket, '* late')
    assert request.text == ''


def test_superseded_ticket_is_ignored() -> None:
    request = InsightRequest()
    first = request.begin()
    second = request.begin()
    assert not request.fail(first, 'old failure')
    assert request.status == LOADING
    assert request.resolve(second, '* fresh')
    assert request.insights == ['fresh']
