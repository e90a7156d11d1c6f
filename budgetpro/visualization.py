"""Plotly visualisation helpers for the budget tracker.

Each function accepts a DataFrame produced by :mod:`budgetpro.summary` or
:mod:`budgetpro.reconciliation` and returns a
``plotly.graph_objects.Figure`` that the host renders (for example via
``st.plotly_chart``).  Empty inputs produce a placeholder figure instead
of raising.
"""

from __future__ import annotations

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go


def _empty_figure(message: str = "No data to display") -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title=message)
    return fig


def create_category_donut_chart(breakdown: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Donut chart of a category breakdown using each row's resolved color.

    Parameters
    ----------
    breakdown : pandas.DataFrame
        Frame with ``Category``, ``Amount`` and ``Color`` columns, as returned
        by ``BudgetAnalytics.calculate_expense_by_category``.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Donut chart.
    """
    if breakdown.empty:
        return _empty_figure()
    fig = go.Figure(
        go.Pie(
            labels=breakdown['Category'],
            values=breakdown['Amount'],
            hole=0.6,
            marker=dict(colors=list(breakdown['Color'])),
            sort=False,
        )
    )
    fig.update_layout(title=title or "Category breakdown")
    return fig


def create_monthly_overview_chart(monthly: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Grouped income/expense bars per month.

    Parameters
    ----------
    monthly : pandas.DataFrame
        Output of ``BudgetAnalytics.calculate_monthly_overview``.
    title : str, optional
        Chart title.
    """
    if monthly.empty:
        return _empty_figure()
    long_df = monthly.melt(
        id_vars=['Month_Label'],
        value_vars=['Income', 'Expenses'],
        var_name='Flow',
        value_name='Amount',
    )
    fig = px.bar(
        long_df,
        x='Month_Label',
        y='Amount',
        color='Flow',
        barmode='group',
        color_discrete_map={'Income': '#16a34a', 'Expenses': '#ef4444'},
    )
    fig.update_layout(
        title=title or "Monthly overview",
        xaxis_title="Month",
        yaxis_title="Amount",
    )
    return fig


def create_budget_vs_actual_chart(report_rows: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Budgeted vs actual spend per category from a reconciliation report."""
    if report_rows.empty:
        return _empty_figure()
    fig = go.Figure()
    fig.add_trace(go.Bar(
        name='Budgeted',
        x=report_rows['Category'],
        y=report_rows['Budgeted'],
        marker_color=list(report_rows['Color']),
        opacity=0.5,
    ))
    fig.add_trace(go.Bar(
        name='Actual',
        x=report_rows['Category'],
        y=report_rows['Actual'],
        marker_color=list(report_rows['Color']),
    ))
    fig.update_layout(
        title=title or "Budget vs actual",
        barmode='group',
        xaxis_title="Category",
        yaxis_title="Amount",
    )
    return fig
