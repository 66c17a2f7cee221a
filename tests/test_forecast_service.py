"""Tests for the balance projector."""

from datetime import date, datetime

import pytest

from factories import make_account, make_rule, make_tx
from models.frequency import Frequency
from models.projection import DailyPoint
from services.forecast_service import monthly_summary, project

START = date(2024, 1, 1)


def point_on(points, day):
    return next(p for p in points if p.date == day)


class TestProjectShape:
    def test_one_point_per_day_including_both_ends(self):
        points = project([make_account()], [], [], horizon_days=365, as_of=START)

        assert len(points) == 366
        assert points[0].date == START
        assert points[-1].date == date(2024, 12, 31)

    def test_zero_horizon_gives_today_only(self):
        points = project([make_account(initial_balance=5.0)], [], [], horizon_days=0, as_of=START)
        assert [p.date for p in points] == [START]

    def test_no_accounts_gives_zero_totals(self):
        points = project([], [], [make_rule()], horizon_days=10, as_of=START)
        assert all(p.total == 0 and p.balances == {} for p in points)

    def test_deterministic(self):
        accounts = [make_account("acc-1", 100.0), make_account("acc-2", 50.0)]
        txs = [make_tx("t-1", "2023-12-24", amount=12.34)]
        rules = [
            make_rule("r1", Frequency.WEEKLY, "2024-01-03", amount=9.99),
            make_rule("r2", Frequency.MONTHLY, "2024-01-31", type_="income", amount=1500.0),
        ]
        first = project(accounts, txs, rules, as_of=START)
        second = project(accounts, txs, rules, as_of=START)
        assert first == second


class TestDayZero:
    """The first point reconciles with the current balance."""

    def test_initial_plus_past_transactions(self):
        accounts = [make_account("acc-1", 1000.0)]
        txs = [
            make_tx("t-1", "2023-12-01", type_="income", amount=500.0),
            make_tx("t-2", "2024-01-01", amount=200.0),
            make_tx("t-3", "2023-06-15", amount=0.01),
        ]
        points = project(accounts, txs, [], horizon_days=5, as_of=START)

        assert points[0].balances == {"acc-1": 1299.99}
        assert points[0].total == 1299.99

    def test_other_accounts_transactions_ignored(self):
        accounts = [make_account("acc-1", 10.0)]
        txs = [make_tx("t-1", "2023-12-01", account_id="elsewhere", amount=99.0)]
        assert project(accounts, txs, [], horizon_days=0, as_of=START)[0].total == 10.0

    def test_future_dated_transaction_posts_on_its_day(self):
        accounts = [make_account("acc-1", 100.0)]
        txs = [
            make_tx("t-1", "2024-01-05", amount=40.0),
            make_tx("t-2", "2025-06-01", amount=1000.0),
        ]
        points = project(accounts, txs, [], horizon_days=10, as_of=START)

        assert points[0].total == 100.0
        assert point_on(points, date(2024, 1, 4)).total == 100.0
        assert point_on(points, date(2024, 1, 5)).total == 60.0
        assert points[-1].total == 60.0

    def test_datetime_as_of(self):
        points = project([make_account()], [], [], horizon_days=1, as_of=datetime(2024, 1, 1, 18, 30))
        assert points[0].date == START


class TestRules:
    """Rule occurrences feed the impact table."""

    def test_no_cent_drift(self):
        rule = make_rule(frequency=Frequency.DAILY, next_date="2024-01-01", amount=0.10)
        points = project([make_account(initial_balance=100.0)], [], [rule], horizon_days=365, as_of=START)

        assert points[0].total == 99.9
        assert points[-1].total == 63.4

    def test_income_and_expense_signs(self):
        rules = [
            make_rule("pay", Frequency.MONTHLY, "2024-01-10", type_="income", amount=2000.0),
            make_rule("rent", Frequency.MONTHLY, "2024-01-12", amount=800.0),
        ]
        points = project([make_account()], [], rules, horizon_days=20, as_of=START)

        assert point_on(points, date(2024, 1, 10)).total == 2000.0
        assert point_on(points, date(2024, 1, 12)).total == 1200.0
        assert points[-1].total == 1200.0

    def test_transfer_moves_money_between_accounts(self):
        accounts = [make_account("acc-1", 1000.0), make_account("acc-2", 0.0)]
        rule = make_rule(type_="transfer", to_account_id="acc-2", next_date="2024-01-15",
                         amount=100.0, frequency=Frequency.MONTHLY)
        points = project(accounts, [], [rule], horizon_days=60, as_of=START)

        feb = point_on(points, date(2024, 2, 15))
        assert feb.balances == {"acc-1": 800.0, "acc-2": 200.0}
        assert all(p.total == 1000.0 for p in points)

    def test_end_date_stops_posting(self):
        rule = make_rule(next_date="2024-01-15", end_date="2024-03-01", amount=10.0)
        points = project([make_account()], [], [rule], horizon_days=365, as_of=START)
        assert points[-1].total == -20.0

    def test_once_posts_a_single_time(self):
        rule = make_rule(frequency=Frequency.ONCE, next_date="2024-01-10", amount=50.0)
        points = project([make_account()], [], [rule], horizon_days=365, as_of=START)

        assert point_on(points, date(2024, 1, 9)).total == 0.0
        assert points[-1].total == -50.0

    def test_overdue_occurrences_are_not_projected(self):
        rule = make_rule(frequency=Frequency.WEEKLY, next_date="2023-12-18", amount=10.0)
        points = project([make_account()], [], [rule], horizon_days=6, as_of=START)

        # 2023-12-18 and 12-25 are in the past; 2024-01-01 is today
        assert points[0].total == -10.0
        assert points[-1].total == -10.0

    def test_occurrences_beyond_horizon_ignored(self):
        rule = make_rule(next_date="2024-03-01")
        points = project([make_account()], [], [rule], horizon_days=30, as_of=START)
        assert points[-1].total == 0.0

    def test_bad_rules_do_not_break_projection(self):
        rules = [
            make_rule("bad-date", next_date="garbage"),
            make_rule("no-account", account_id=""),
            make_rule("unknown", account_id="ghost"),
            make_rule("ok", next_date="2024-01-02", amount=1.0),
        ]
        points = project([make_account()], [], rules, horizon_days=3, as_of=START)
        assert points[-1].total == -1.0

    def test_rules_are_not_modified(self):
        rule = make_rule(frequency=Frequency.DAILY, next_date="2024-01-01")
        project([make_account()], [], [rule], horizon_days=30, as_of=START)
        assert rule.next_date == "2024-01-01"


class TestAccountFilter:
    def test_only_selected_accounts(self):
        accounts = [make_account("acc-1", 100.0), make_account("acc-2", 40.0)]
        txs = [make_tx("t-1", "2023-12-01", account_id="acc-1", amount=30.0)]
        rules = [make_rule(account_id="acc-1", next_date="2024-01-05")]
        points = project(accounts, txs, rules, horizon_days=10, as_of=START, account_ids={"acc-2"})

        assert set(points[0].balances) == {"acc-2"}
        assert all(p.total == 40.0 for p in points)

    def test_transfer_into_selected_account_still_posts(self):
        accounts = [make_account("acc-1", 100.0), make_account("acc-2", 0.0)]
        rule = make_rule(type_="transfer", to_account_id="acc-2", next_date="2024-01-05", amount=25.0)
        points = project(accounts, [], [rule], horizon_days=10, as_of=START, account_ids={"acc-2"})

        assert points[-1].balances == {"acc-2": 25.0}


class TestMonthlySummary:
    def test_closing_and_lowest_per_month(self):
        points = [
            DailyPoint(date(2024, 1, 30), {}, 100.0),
            DailyPoint(date(2024, 1, 31), {}, 80.0),
            DailyPoint(date(2024, 2, 1), {}, 50.0),
            DailyPoint(date(2024, 2, 2), {}, 20.0),
            DailyPoint(date(2024, 2, 3), {}, 70.0),
        ]
        rows = monthly_summary(points)

        assert rows == [
            {"month": "2024-01", "closing": 80.0, "lowest": 80.0, "lowest_date": date(2024, 1, 31)},
            {"month": "2024-02", "closing": 70.0, "lowest": 20.0, "lowest_date": date(2024, 2, 2)},
        ]

    def test_empty(self):
        assert monthly_summary([]) == []


class TestForecastService:
    """ForecastService against the sqlite-backed DAOs."""

    @pytest.fixture
    def forecast_setup(self, recurring_service, tx_dao, checking, savings):
        tx_dao.create(make_tx("seed-1", "2023-12-20", account_id=checking.id, amount=100.0))
        recurring_service.create("Save", "transfer", 50.0, checking.id, "monthly", "2024-01-10",
                                 to_account_id=savings.id)
        recurring_service.create("Pay", "income", 2000.0, checking.id, "monthly", "2024-01-25")
        return checking, savings

    def test_daily_projection(self, forecast_service, forecast_setup):
        checking, savings = forecast_setup
        points = forecast_service.get_daily_projection(as_of=START)

        assert len(points) == forecast_service.horizon_days + 1
        assert points[0].balances[checking.id] == 900.0
        assert points[0].balances[savings.id] == 250.0
        jan_end = point_on(points, date(2024, 1, 31))
        assert jan_end.balances[checking.id] == 2850.0
        assert jan_end.balances[savings.id] == 300.0

    def test_filter_by_account(self, forecast_service, forecast_setup):
        _, savings = forecast_setup
        points = forecast_service.get_daily_projection(account_ids={savings.id}, as_of=START)
        assert point_on(points, date(2024, 2, 10)).total == 350.0

    def test_current_balances(self, forecast_service, forecast_setup):
        checking, savings = forecast_setup
        balances = forecast_service.current_balances(as_of=START)

        assert balances[checking.id] == 900.0
        assert balances[savings.id] == 250.0

    def test_projection_does_not_touch_rules(self, forecast_service, recurring_service, forecast_setup):
        before = recurring_service.get_all()
        forecast_service.get_daily_projection(as_of=START)
        assert recurring_service.get_all() == before

    def test_monthly_summary_rows(self, forecast_service, forecast_setup):
        rows = forecast_service.get_monthly_summary(as_of=START)
        assert rows[0]["month"] == "2024-01"
        assert len(rows) == 12
