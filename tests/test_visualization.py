import pandas as pd

from budgetpro import visualization as viz


def test_donut_chart_uses_row_colors() -> None:
    breakdown = pd.DataFrame({
        'Category': ['Food', 'Fun'],
        'Amount': [120.0, 30.0],
        'Color': ['#16a34a', '#8884d8'],
    })
    fig = viz.create_category_donut_chart(breakdown, "Expenses")
    pie = fig.data[0]
    assert list(pie.labels) == ['Food', 'Fun']
    assert list(pie.marker.colors) == ['#16a34a', '#8884d8']
    assert pie.hole == 0.6
    assert fig.layout.title.text == "Expenses"


def test_empty_inputs_render_placeholder() -> None:
    empty = pd.DataFrame(columns=['Category', 'Amount', 'Color'])
    assert viz.create_category_donut_chart(empty).layout.title.text == "No data to display"
    assert viz.create_budget_vs_actual_chart(pd.DataFrame()).layout.title.text == "No data to display"
    assert viz.create_monthly_overview_chart(pd.DataFrame()).layout.title.text == "No data to display"


def test_monthly_overview_chart_groups_income_and_expenses() -> None:
    monthly = pd.DataFrame({
        'Month_Label': ["May '24", "Jun '24"],
        'Year': [2024, 2024],
        'Month': [5, 6],
        'Income': [2500.0, 405.0],
        'Expenses': [30.0, 120.0],
    })
    fig = viz.create_monthly_overview_chart(monthly)
    assert {trace.name for trace in fig.data} == {'Income', 'Expenses'}
    assert fig.layout.barmode == 'group'


def test_budget_vs_actual_chart_has_two_series() -> None:
    rows = pd.DataFrame({
        'Category': ['Food', 'Fun'],
        'Color': ['#16a34a', '#6b7280'],
        'Budgeted': [300.0, 0.0],
        'Actual': [120.0, 50.0],
        'Variance': [180.0, -50.0],
    })
    fig = viz.create_budget_vs_actual_chart(rows)
    assert [trace.name for trace in fig.data] == ['Budgeted', 'Actual']
    assert list(fig.data[1].y) == [120.0, 50.0]
