from datetime import date

from matplotlib.figure import Figure

from factories import make_account
from services.forecast_service import project
from ui.charts import TOTAL_COLOR, draw_projection


def _axes():
    return Figure(figsize=(6, 3)).add_subplot(111)


def test_draws_one_line_per_account_plus_total():
    accounts = [make_account("acc-1", 10.0, name="Checking"), make_account("acc-2", 5.0, name="Savings")]
    points = project(accounts, [], [], horizon_days=30, as_of=date(2024, 1, 1))
    ax = _axes()

    draw_projection(ax, points, accounts)

    labels = [line.get_label() for line in ax.get_lines() if not line.get_label().startswith("_")]
    assert labels == ["Checking", "Savings", "Total"]
    total = next(line for line in ax.get_lines() if line.get_label() == "Total")
    assert total.get_color() == TOTAL_COLOR
    assert list(total.get_ydata()) == [15.0] * 31


def test_total_only():
    accounts = [make_account("acc-1", 10.0)]
    points = project(accounts, [], [], horizon_days=5, as_of=date(2024, 1, 1))
    ax = _axes()

    draw_projection(ax, points, accounts, show_accounts=False)

    labels = [line.get_label() for line in ax.get_lines() if not line.get_label().startswith("_")]
    assert labels == ["Total"]


def test_no_points_shows_placeholder():
    ax = _axes()
    draw_projection(ax, [], [])
    assert [t.get_text() for t in ax.texts] == ["No data"]
