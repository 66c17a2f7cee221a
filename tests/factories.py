"""Plain model builders for tests that don't need a database."""

from models.account import Account
from models.frequency import Frequency
from models.recurring_rule import RecurringRule
from models.transaction import Transaction


def make_account(account_id="acc-1", initial_balance=0.0, **kwargs) -> Account:
    return Account(
        id=account_id,
        name=kwargs.pop("name", account_id),
        initial_balance=initial_balance,
        **kwargs,
    )


def make_rule(
    rule_id="rule-1",
    frequency=Frequency.MONTHLY,
    next_date="2024-01-15",
    amount=100.0,
    type_="expense",
    account_id="acc-1",
    **kwargs,
) -> RecurringRule:
    return RecurringRule(
        id=rule_id,
        description=kwargs.pop("description", "Rent"),
        amount=amount,
        type=type_,
        account_id=account_id,
        frequency=frequency,
        next_date=next_date,
        category_id=kwargs.pop("category_id", "housing"),
        **kwargs,
    )


def make_tx(tx_id="t-1", date="2024-01-01", account_id="acc-1", type_="expense", amount=10.0, **kwargs) -> Transaction:
    return Transaction(
        id=tx_id,
        date=date,
        account_id=account_id,
        type=type_,
        amount=amount,
        category_id=kwargs.pop("category_id", "other"),
        **kwargs,
    )
