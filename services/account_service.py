import logging
from models.account import Account
from database.account_dao import AccountDAO
from database.db_manager import DatabaseManager
from database.transaction_dao import TransactionDAO
from utils.ids import new_id

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(self, account_dao: AccountDAO, tx_dao: TransactionDAO, db: DatabaseManager):
        self._dao = account_dao
        self._tx_dao = tx_dao
        self._db = db

    def get_all(self) -> list[Account]:
        return self._dao.get_all()

    def get_by_id(self, account_id: str) -> Account | None:
        return self._dao.get_by_id(account_id)

    def create(
        self,
        name: str,
        account_type: str = "current",
        initial_balance: float = 0.0,
        color: str = "#2196F3",
        icon: str = "Wallet",
    ) -> Account:
        name = name.strip()
        if not name:
            raise ValueError("Account name cannot be empty.")
        if self._dao.get_by_name(name):
            raise ValueError(f"An account named '{name}' already exists.")
        account = Account(
            id=new_id(),
            name=name,
            account_type=(account_type or "current").strip().lower(),
            initial_balance=float(initial_balance),
            color=color,
            icon=icon,
        )
        return self._dao.create(account)

    def update(
        self,
        account_id: str,
        name: str,
        account_type: str = "current",
        initial_balance: float = 0.0,
        color: str = "#2196F3",
        icon: str = "Wallet",
    ) -> Account:
        name = name.strip()
        if not name:
            raise ValueError("Account name cannot be empty.")
        existing = self._dao.get_by_name(name)
        if existing and existing.id != account_id:
            raise ValueError(f"An account named '{name}' already exists.")
        if self._dao.get_by_id(account_id) is None:
            raise ValueError("Account not found.")
        return self._dao.update(Account(
            id=account_id,
            name=name,
            account_type=(account_type or "current").strip().lower(),
            initial_balance=float(initial_balance),
            color=color,
            icon=icon,
        ))

    def delete(self, account_id: str):
        """Delete the account with its transactions and scheduled transactions.

        Transfers are removed as whole pairs, so the counterpart on the other
        account goes too.
        """
        with self._db.transaction():
            self._tx_dao.delete_transfer_partners_of_account(account_id)
            self._dao.delete(account_id)
        logger.info("Deleted account %s", account_id)

    def get_names(self) -> dict[str, str]:
        """{account_id: name} for label lookups."""
        return {a.id: a.name for a in self._dao.get_all()}
