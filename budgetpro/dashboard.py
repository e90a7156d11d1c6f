"""Streamlit host for the budget tracker.

The host owns one :class:`~budgetpro.state.BudgetTracker` per browser
session (kept in ``st.session_state``) and passes its state to the
aggregation functions on every rerun.  Nothing derived is cached between
reruns.

To run the dashboard from the command line::

    streamlit run budgetpro/dashboard.py

or use ``run_dashboard.py`` at the repository root.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import replace

import pandas as pd
import streamlit as st

if __package__:
    from . import config
    from . import visualization as viz
    from .csv_codec import MalformedInput
    from .formatting import escape_dollar_for_markdown, format_currency, format_percentage
    from .goals import goals_by_category, savings_goal_progress
    from .insights import InsightRequest, build_insight_payload, build_insight_prompt
    from .ledger import category_options, search_transactions
    from .models import EXPENSE, TRANSACTION_TYPES
    from .state import BudgetTracker
else:
    # ``streamlit run budgetpro/dashboard.py`` executes this file as a script
    CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
    PARENT_DIR = os.path.dirname(CURRENT_DIR)
    if PARENT_DIR not in sys.path:
        sys.path.insert(0, PARENT_DIR)
    from budgetpro import config  # type: ignore
    from budgetpro import visualization as viz  # type: ignore
    from budgetpro.csv_codec import MalformedInput  # type: ignore
    from budgetpro.formatting import escape_dollar_for_markdown, format_currency, format_percentage  # type: ignore
    from budgetpro.goals import goals_by_category, savings_goal_progress  # type: ignore
    from budgetpro.insights import InsightRequest, build_insight_payload, build_insight_prompt  # type: ignore
    from budgetpro.ledger import category_options, search_transactions  # type: ignore
    from budgetpro.models import EXPENSE, TRANSACTION_TYPES  # type: ignore
    from budgetpro.state import BudgetTracker  # type: ignore

logger = logging.getLogger(__name__)

PAGES = ['Dashboard', 'Budget', 'Expenses', 'Savings']

# Optional text-generation hook; the host deployment may assign a callable
# taking the prompt and returning the response text.
INSIGHT_GENERATOR = None


def get_tracker() -> BudgetTracker:
    if 'tracker' not in st.session_state:
        st.session_state['tracker'] = BudgetTracker()
    return st.session_state['tracker']


def get_insight_request() -> InsightRequest:
    if 'insight_request' not in st.session_state:
        st.session_state['insight_request'] = InsightRequest()
    return st.session_state['insight_request']


def _money(amount: float) -> str:
    return escape_dollar_for_markdown(format_currency(amount))


def render_dashboard(tracker: BudgetTracker) -> None:
    summary = tracker.analytics().calculate_summary()

    k1, k2, k3, k4 = st.columns(4)
    k1.metric("Total Income", format_currency(summary['total_income']))
    k2.metric("Total Expenses", format_currency(summary['total_expenses']))
    k3.metric("Remaining Budget", format_currency(summary['remaining_budget']))
    k4.metric("Savings Progress", format_percentage(summary['savings_progress']))

    left, right = st.columns(2)
    with left:
        st.plotly_chart(
            viz.create_category_donut_chart(summary['expense_by_category'], "Expenses by category"),
            use_container_width=True,
        )
    with right:
        st.plotly_chart(
            viz.create_category_donut_chart(summary['income_by_category'], "Income by category"),
            use_container_width=True,
        )
    st.plotly_chart(
        viz.create_monthly_overview_chart(summary['monthly_overview']),
        use_container_width=True,
    )

    st.subheader("AI insights")
    request = get_insight_request()
    col_run, col_cancel = st.columns([1, 1])
    if col_run.button("Get insights", disabled=request.is_loading):
        prompt = build_insight_prompt(build_insight_payload(tracker.state))
        with st.spinner("Generating insights..."):
            request.run(prompt, INSIGHT_GENERATOR)
    if col_cancel.button("Cancel", disabled=not request.is_loading):
        request.cancel()
    if request.error:
        st.error(request.error)
    for point in request.insights:
        st.markdown(f"- {escape_dollar_for_markdown(point)}")


def render_budget_goal(tracker: BudgetTracker, item) -> None:
    goal = item.goal
    color = ':red' if item.is_over else ':green'
    st.markdown(
        f"**{goal.title}** ({item.deadline.label}): "
        f"{color}[{_money(item.spent)}] of {_money(goal.target_amount)}"
    )
    st.progress(item.progress / 100)
    col_target, col_delete = st.columns([3, 1])
    target = col_target.number_input(
        "Spending limit", min_value=0.0, value=float(goal.target_amount), key=f"goal_target_{goal.id}"
    )
    if target != goal.target_amount:
        tracker.update_budget_goal(replace(goal, target_amount=target))
    if col_delete.button("Delete goal", key=f"del_budget_goal_{goal.id}"):
        tracker.delete_budget_goal(goal.id)
        st.rerun()


def render_budget(tracker: BudgetTracker) -> None:
    state = tracker.state
    income = st.number_input("Monthly income", min_value=0.0, value=float(state.monthly_income), step=100.0)
    if income != state.monthly_income:
        tracker.set_monthly_income(income)

    report = tracker.reconcile()
    st.subheader(f"Budget vs actual ({report.year}-{report.month:02d})")
    st.dataframe(report.rows.drop(columns=['Color']), use_container_width=True, hide_index=True)
    st.markdown(
        f"**Totals:** budgeted {_money(report.totals['budgeted'])}, "
        f"actual {_money(report.totals['actual'])}, "
        f"variance {_money(report.totals['variance'])}"
    )
    st.plotly_chart(viz.create_budget_vs_actual_chart(report.rows), use_container_width=True)

    st.subheader("Categories")
    progress_by_category = goals_by_category(state.budget, state.budget_goals, state.transactions)
    for category in state.budget:
        with st.expander(f"{category.name}: {format_currency(category.amount)}"):
            amount = st.number_input(
                "Allocation", min_value=0.0, value=float(category.amount), key=f"alloc_{category.id}"
            )
            if amount != category.amount:
                tracker.update_category(category.id, amount=amount)
            for item in progress_by_category.get(category.id, []):
                render_budget_goal(tracker, item)
            with st.form(f"new_budget_goal_{category.id}", clear_on_submit=True):
                title = st.text_input("Goal title", key=f"goal_title_{category.id}")
                target = st.number_input(
                    "Spending limit", min_value=0.0, step=10.0, key=f"goal_limit_{category.id}"
                )
                deadline = st.date_input("Deadline", key=f"goal_deadline_{category.id}")
                if st.form_submit_button("Add goal") and title and target > 0:
                    tracker.add_budget_goal(category.id, title, target, deadline.isoformat())
                    st.rerun()
            if not category.is_default and st.button("Delete category", key=f"del_{category.id}"):
                tracker.delete_category(category.id)
                st.rerun()

    with st.form("new_category", clear_on_submit=True):
        name = st.text_input("Category name")
        allocation = st.number_input("Amount", min_value=0.0, step=10.0)
        if st.form_submit_button("+ Add") and tracker.add_category(name, allocation) is None:
            st.warning("Enter a name and an amount greater than zero.")

    allocation_summary = tracker.analytics().calculate_budget_allocation()
    st.markdown(
        f"Total budget {_money(allocation_summary['total_budget'])}, "
        f"unallocated income {_money(allocation_summary['remaining'])}"
    )


def render_expenses(tracker: BudgetTracker) -> None:
    state = tracker.state

    uploaded = st.file_uploader("Import transactions (CSV)", type=["csv"])
    if uploaded is not None and st.button("Import"):
        try:
            result = tracker.import_csv(uploaded.getvalue().decode('utf-8'))
        except MalformedInput as exc:
            logger.error("CSV import failed: %s", exc)
            st.error(f"Error importing transactions: {exc}")
        else:
            st.success(f"{len(result.accepted)} transactions imported successfully!")
            if result.rejected:
                st.warning(f"{result.rejected} rows were skipped.")

    if state.transactions:
        st.download_button(
            "Export",
            data=tracker.export_csv(),
            file_name=config.EXPORT_FILENAME,
            mime="text/csv",
        )

    with st.form("new_transaction", clear_on_submit=True):
        tx_type = st.selectbox("Type", TRANSACTION_TYPES, index=TRANSACTION_TYPES.index(EXPENSE))
        description = st.text_input("Description")
        amount = st.number_input("Amount", min_value=0.0, step=1.0)
        category = st.selectbox(
            "Category",
            category_options(tx_type, state.expense_categories, state.income_categories),
        )
        tx_date = st.date_input("Date")
        if st.form_submit_button("Add transaction"):
            tracker.record_transaction(tx_type, description, amount, category, tx_date.isoformat())

    query = st.text_input("Search transactions...")
    sort_key = st.selectbox("Sort by", ['date', 'description', 'category', 'amount'])
    direction = st.radio("Direction", ['desc', 'asc'], horizontal=True)
    rows = search_transactions(state.transactions, query, sort_key, direction)
    st.dataframe(
        pd.DataFrame([t.to_record() for t in rows]),
        use_container_width=True,
        hide_index=True,
    )
    if rows:
        render_transaction_editor(tracker, rows)


def _transaction_label(transaction) -> str:
    return f"{transaction.date} · {transaction.description} · {format_currency(transaction.amount)}"


def render_transaction_editor(tracker: BudgetTracker, rows) -> None:
    by_id = {t.id: t for t in rows}
    selected_id = st.selectbox(
        "Edit transaction",
        list(by_id),
        format_func=lambda tx_id: _transaction_label(by_id[tx_id]),
    )
    selected = by_id[selected_id]

    with st.form(f"edit_transaction_{selected.id}"):
        tx_type = st.selectbox(
            "Type", TRANSACTION_TYPES, index=TRANSACTION_TYPES.index(selected.type), key=f"edit_type_{selected.id}"
        )
        description = st.text_input("Description", value=selected.description, key=f"edit_description_{selected.id}")
        amount = st.number_input(
            "Amount", min_value=0.0, value=float(selected.amount), step=1.0, key=f"edit_amount_{selected.id}"
        )
        options = category_options(
            tx_type, tracker.state.expense_categories, tracker.state.income_categories, editing=selected
        )
        category = st.selectbox(
            "Category",
            options,
            index=options.index(selected.category) if selected.category in options else 0,
            key=f"edit_category_{selected.id}",
        )
        tx_date = st.text_input("Date (YYYY-MM-DD)", value=selected.date, key=f"edit_date_{selected.id}")
        save, delete = st.columns(2)
        if save.form_submit_button("Save changes"):
            tracker.edit_transaction(selected.id, tx_type, description, amount, category, tx_date)
            st.rerun()
        if delete.form_submit_button("Delete"):
            tracker.delete_transaction(selected.id)
            st.rerun()


def render_savings(tracker: BudgetTracker) -> None:
    overview = tracker.analytics().calculate_savings_overview()
    k1, k2, k3 = st.columns(3)
    k1.metric("Total Saved", format_currency(overview['total_saved']))
    k2.metric("Total Target", format_currency(overview['total_target']))
    k3.metric("Overall Progress", format_percentage(overview['overall_progress']))

    for goal in tracker.state.savings_goals:
        progress = savings_goal_progress(goal)
        st.markdown(
            f"<span style='color:{progress.bar_color}'>■</span> **{goal.title}** ({goal.category}): "
            f"{_money(goal.current_amount)} of {_money(goal.target_amount)}",
            unsafe_allow_html=True,
        )
        st.progress(min(progress.progress, 100.0) / 100)
        if progress.is_overdue:
            st.caption(f":red[{progress.days_overdue} days overdue]")
        if st.button("Delete goal", key=f"del_goal_{goal.id}"):
            tracker.delete_savings_goal(goal.id)
            st.rerun()

    with st.form("new_goal", clear_on_submit=True):
        title = st.text_input("Goal title")
        category = st.selectbox("Category", config.SAVINGS_GOAL_CATEGORIES)
        target = st.number_input("Target amount", min_value=0.0, step=100.0)
        current = st.number_input("Current amount", min_value=0.0, step=100.0)
        deadline = st.date_input("Deadline")
        if st.form_submit_button("Add goal") and title and target > 0:
            tracker.add_savings_goal(title, category, target, current, deadline.isoformat())


def main() -> None:
    """Entry point for the Streamlit app."""
    config.configure_logging()
    st.set_page_config(page_title="BudgetPro", layout="wide")
    st.title("BudgetPro")

    tracker = get_tracker()
    page = st.sidebar.radio("Menu", PAGES)
    renderers = {
        'Dashboard': render_dashboard,
        'Budget': render_budget,
        'Expenses': render_expenses,
        'Savings': render_savings,
    }
    renderers[page](tracker)


if __name__ == "__main__":
    main()
