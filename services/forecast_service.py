import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable

from database.account_dao import AccountDAO
from database.recurring_dao import RecurringDAO
from database.transaction_dao import TransactionDAO
from models.account import Account
from models.projection import DailyPoint
from models.recurring_rule import RecurringRule
from models.transaction import Transaction
from services.recurrence import occurrences
from services.recurring_service import skip_reason
from utils.constants import PROJECTION_HORIZON_DAYS
from utils.currency import from_cents, to_cents
from utils.date_helpers import format_month, parse_date, to_day, today

logger = logging.getLogger(__name__)


def project(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
    rules: Iterable[RecurringRule],
    horizon_days: int = PROJECTION_HORIZON_DAYS,
    as_of: date | None = None,
    account_ids: set[str] | None = None,
) -> list[DailyPoint]:
    """Day-by-day balance forecast from ``as_of`` (default today) for horizon_days.

    Returns horizon_days + 1 points; point 0 is the current balance of each
    account: initial balance plus every transaction dated on or before
    ``as_of``. Later-dated transactions post on their own day. Rules are
    replayed from their stored next date and are never modified. Money is
    accumulated in integer cents and converted only for output.

    account_ids restricts the projection to those accounts; a transfer
    touching one selected account still posts on that account.
    """
    start = to_day(as_of or today())
    end = start + timedelta(days=horizon_days)

    selected = [a for a in accounts if account_ids is None or a.id in account_ids]
    balances: dict[str, int] = {a.id: to_cents(a.initial_balance) for a in selected}
    impacts: dict[str, dict[date, int]] = {a.id: defaultdict(int) for a in selected}

    for tx in transactions:
        if tx.account_id not in balances:
            continue
        cents = to_cents(tx.signed_amount)
        tx_date = parse_date(tx.date)
        if tx_date is None or tx_date <= start:
            balances[tx.account_id] += cents
        elif tx_date <= end:
            impacts[tx.account_id][tx_date] += cents

    for rule in rules:
        reason = skip_reason(rule)
        if reason:
            logger.debug("Rule %s left out of projection: %s", rule.id, reason)
            continue
        touches = balances.keys() & {rule.account_id, rule.to_account_id}
        if not touches:
            continue
        cents = to_cents(rule.amount)
        for day in occurrences(rule, end, start=start):
            if rule.is_transfer:
                if rule.account_id in impacts:
                    impacts[rule.account_id][day] -= cents
                if rule.to_account_id in impacts:
                    impacts[rule.to_account_id][day] += cents
            elif rule.account_id in impacts:
                impacts[rule.account_id][day] += cents if rule.type == "income" else -cents

    points: list[DailyPoint] = []
    for offset in range(horizon_days + 1):
        day = start + timedelta(days=offset)
        for acc_id in balances:
            balances[acc_id] += impacts[acc_id].get(day, 0)
        points.append(DailyPoint(
            date=day,
            balances={acc_id: from_cents(c) for acc_id, c in balances.items()},
            total=from_cents(sum(balances.values())),
        ))
    return points


def monthly_summary(points: list[DailyPoint]) -> list[dict]:
    """
    [{month:'YYYY-MM', closing:float, lowest:float, lowest_date:date}]
    one row per calendar month touched by the projection.
    """
    by_month: dict[str, dict] = {}
    for p in points:
        key = format_month(p.date)
        row = by_month.get(key)
        if row is None:
            row = by_month[key] = {"month": key, "closing": p.total, "lowest": p.total, "lowest_date": p.date}
        row["closing"] = p.total
        if p.total < row["lowest"]:
            row["lowest"] = p.total
            row["lowest_date"] = p.date
    return list(by_month.values())


class ForecastService:
    def __init__(
        self,
        account_dao: AccountDAO,
        tx_dao: TransactionDAO,
        recurring_dao: RecurringDAO,
        horizon_days: int = PROJECTION_HORIZON_DAYS,
    ):
        self._account_dao = account_dao
        self._tx_dao = tx_dao
        self._recurring_dao = recurring_dao
        self._horizon_days = horizon_days

    @property
    def horizon_days(self) -> int:
        return self._horizon_days

    def get_daily_projection(
        self, account_ids: set[str] | None = None, as_of: date | None = None
    ) -> list[DailyPoint]:
        return project(
            self._account_dao.get_all(),
            self._tx_dao.get_all(),
            self._recurring_dao.get_all(),
            horizon_days=self._horizon_days,
            as_of=as_of,
            account_ids=account_ids,
        )

    def current_balances(self, as_of: date | None = None) -> dict[str, float]:
        """{account_id: balance} as of today."""
        points = project(
            self._account_dao.get_all(),
            self._tx_dao.get_all(),
            [],
            horizon_days=0,
            as_of=as_of,
        )
        return points[0].balances

    def get_monthly_summary(
        self, account_ids: set[str] | None = None, as_of: date | None = None
    ) -> list[dict]:
        return monthly_summary(self.get_daily_projection(account_ids, as_of))
