"""Pytest configuration and fixtures."""

import itertools

import pytest

from database.db_manager import DatabaseManager
from database.account_dao import AccountDAO
from database.transaction_dao import TransactionDAO
from database.category_dao import CategoryDAO
from database.recurring_dao import RecurringDAO
from services.account_service import AccountService
from services.recurring_service import RecurringService
from services.forecast_service import ForecastService


@pytest.fixture
def db():
    manager = DatabaseManager(":memory:")
    manager.initialize()
    yield manager
    manager.close()


@pytest.fixture
def account_dao(db):
    return AccountDAO(db)


@pytest.fixture
def tx_dao(db):
    return TransactionDAO(db)


@pytest.fixture
def category_dao(db):
    return CategoryDAO(db)


@pytest.fixture
def recurring_dao(db):
    return RecurringDAO(db)


@pytest.fixture
def account_service(account_dao, tx_dao, db):
    return AccountService(account_dao, tx_dao, db)


@pytest.fixture
def recurring_service(recurring_dao, tx_dao, account_dao, db):
    return RecurringService(recurring_dao, tx_dao, account_dao, db)


@pytest.fixture
def forecast_service(account_dao, tx_dao, recurring_dao):
    return ForecastService(account_dao, tx_dao, recurring_dao)


@pytest.fixture
def checking(account_service):
    return account_service.create("Checking", "current", 1000.0)


@pytest.fixture
def savings(account_service):
    return account_service.create("Savings", "savings", 250.0)


@pytest.fixture
def id_factory():
    """Deterministic ids: tx-1, tx-2, ..."""
    counter = itertools.count(1)
    return lambda: f"tx-{next(counter)}"
