import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from typing import Callable, Iterable, Iterator

from database.account_dao import AccountDAO
from database.db_manager import DatabaseManager
from database.recurring_dao import RecurringDAO
from database.transaction_dao import TransactionDAO
from models.frequency import Frequency
from models.projection import MaterializeResult
from models.recurring_rule import RecurringRule
from models.transaction import Transaction
from services.recurrence import advance, is_expired, next_date_of, occurrences
from utils.constants import RULE_TYPES, TRANSFER_CATEGORY_ID, UPCOMING_DAYS
from utils.date_helpers import format_date, parse_date, to_day, today
from utils.ids import new_id

logger = logging.getLogger(__name__)


@dataclass
class RulePlan:
    """What materializing one rule produces, before anything is persisted."""
    source: RecurringRule
    rule: RecurringRule
    new_transactions: list[Transaction] = field(default_factory=list)
    retire: bool = False

    @property
    def advanced(self) -> bool:
        """True when the rule survives with a later next date."""
        return not self.retire and self.rule.next_date != self.source.next_date

    @property
    def changed(self) -> bool:
        return self.retire or self.advanced or bool(self.new_transactions)


def skip_reason(rule: RecurringRule, account_ids: set[str] | None = None) -> str | None:
    """Why a rule cannot be materialized or projected, or None if it can.

    A rule needs a parseable next date and a source account, plus a
    destination account when it is a transfer. With ``account_ids`` given,
    the accounts must also be among them.
    """
    if parse_date(rule.next_date) is None:
        return f"invalid next date {rule.next_date!r}"
    needed = [rule.account_id]
    if rule.is_transfer:
        needed.append(rule.to_account_id)
    if not all(needed):
        return "missing account reference"
    if account_ids is not None and not all(acc in account_ids for acc in needed):
        return "unknown account"
    return None


def _occurrence_transactions(
    rule: RecurringRule, day: str, id_factory: Callable[[], str]
) -> list[Transaction]:
    if rule.is_transfer:
        out_id, in_id = id_factory(), id_factory()
        return [
            Transaction(
                id=out_id, date=day, account_id=rule.account_id, type="expense",
                amount=rule.amount, category_id=TRANSFER_CATEGORY_ID,
                description=rule.description, checked=False,
                is_transfer=True, linked_transaction_id=in_id,
            ),
            Transaction(
                id=in_id, date=day, account_id=rule.to_account_id, type="income",
                amount=rule.amount, category_id=TRANSFER_CATEGORY_ID,
                description=rule.description, checked=False,
                is_transfer=True, linked_transaction_id=out_id,
            ),
        ]
    return [
        Transaction(
            id=id_factory(), date=day, account_id=rule.account_id, type=rule.type,
            amount=rule.amount, category_id=rule.category_id,
            description=rule.description, checked=False,
        )
    ]


def materialize_rule(
    rule: RecurringRule,
    as_of: date,
    id_factory: Callable[[], str] = new_id,
) -> RulePlan:
    """Catch one rule up to ``as_of``.

    Each pass through the loop yields a new rule value whose next date is
    past the occurrence just generated, so running again with the same
    ``as_of`` generates nothing. A rule whose loop was entered at all (even
    if it stopped straight away at its end date) is retired when it fires
    only once.
    """
    as_of = to_day(as_of)
    current = rule
    new_transactions: list[Transaction] = []
    touched = False

    while next_date_of(current) <= as_of:
        touched = True
        due = next_date_of(current)
        if is_expired(current, due):
            break
        new_transactions.extend(_occurrence_transactions(current, format_date(due), id_factory))
        current = replace(current, next_date=format_date(advance(due, current.frequency)))

    retire = touched and current.frequency == Frequency.ONCE
    return RulePlan(source=rule, rule=current, new_transactions=new_transactions, retire=retire)


def plan_due_rules(
    as_of: date,
    rules: Iterable[RecurringRule],
    account_ids: set[str] | None = None,
    id_factory: Callable[[], str] = new_id,
) -> Iterator[RulePlan]:
    """Yield a plan for every rule that has something to write as of ``as_of``.

    Rules missing a required account reference are logged and skipped.
    """
    for rule in rules:
        reason = skip_reason(rule, account_ids)
        if reason:
            logger.warning("Skipping rule %s (%s): %s", rule.id, rule.description, reason)
            continue
        plan = materialize_rule(rule, as_of, id_factory)
        if plan.changed:
            yield plan


def record_plan(result: MaterializeResult, plan: RulePlan) -> None:
    result.new_transactions.extend(plan.new_transactions)
    if plan.retire:
        result.retired_rule_ids.append(plan.source.id)
    elif plan.advanced:
        result.updated_rules.append(plan.rule)


def materialize(
    as_of: date,
    rules: Iterable[RecurringRule],
    existing_transactions: Iterable[Transaction] = (),
    account_ids: set[str] | None = None,
    id_factory: Callable[[], str] = new_id,
) -> MaterializeResult:
    """Plan every due occurrence of ``rules`` up to ``as_of`` without persisting.

    ``result.new_transactions`` is in generation order; ``result.transactions``
    is the combined in-memory list, with the new transactions (newest first)
    ahead of ``existing_transactions``.
    """
    result = MaterializeResult()
    for plan in plan_due_rules(as_of, rules, account_ids, id_factory):
        record_plan(result, plan)
    result.transactions = merge_new_transactions(result.new_transactions, existing_transactions)
    return result


def merge_new_transactions(
    new_transactions: Iterable[Transaction], existing: Iterable[Transaction]
) -> list[Transaction]:
    """Newly materialized transactions, newest first, ahead of the existing ones."""
    return list(reversed(list(new_transactions))) + list(existing)


class RecurringService:
    def __init__(
        self,
        recurring_dao: RecurringDAO,
        tx_dao: TransactionDAO,
        account_dao: AccountDAO,
        db: DatabaseManager,
    ):
        self._dao = recurring_dao
        self._tx_dao = tx_dao
        self._account_dao = account_dao
        self._db = db
        self._run_lock = threading.Lock()
        self._has_run = False

    def get_all(self) -> list[RecurringRule]:
        return self._dao.get_all()

    def get_by_id(self, rule_id: str) -> RecurringRule | None:
        return self._dao.get_by_id(rule_id)

    def create(
        self,
        description: str,
        type_: str,
        amount: float,
        account_id: str,
        frequency: str,
        next_date: str,
        category_id: str = "",
        to_account_id: str | None = None,
        end_date: str | None = None,
        include_in_forecast: bool = True,
    ) -> RecurringRule:
        rule = self._build(
            new_id(), description, type_, amount, account_id, frequency,
            next_date, category_id, to_account_id, end_date, include_in_forecast,
        )
        created = self._dao.create(rule)
        logger.info("Created %s rule %s (%s)", created.frequency.value, created.id, created.description)
        return created

    def update(
        self,
        rule_id: str,
        description: str,
        type_: str,
        amount: float,
        account_id: str,
        frequency: str,
        next_date: str,
        category_id: str = "",
        to_account_id: str | None = None,
        end_date: str | None = None,
        include_in_forecast: bool = True,
    ) -> RecurringRule:
        if self._dao.get_by_id(rule_id) is None:
            raise ValueError("Scheduled transaction not found.")
        rule = self._build(
            rule_id, description, type_, amount, account_id, frequency,
            next_date, category_id, to_account_id, end_date, include_in_forecast,
        )
        return self._dao.update(rule)

    def delete(self, rule_id: str):
        self._dao.delete(rule_id)

    def upcoming(
        self, days: int = UPCOMING_DAYS, reference_date: date | None = None
    ) -> list[tuple[date, RecurringRule]]:
        """Occurrences of every rule within the next ``days`` days, soonest first."""
        ref = to_day(reference_date or today())
        until = ref + timedelta(days=days)
        result = [
            (d, rule)
            for rule in self._dao.get_all()
            if skip_reason(rule) is None
            for d in occurrences(rule, until, start=ref)
        ]
        result.sort(key=lambda item: (item[0], item[1].description))
        return result

    # ── Materialization ──────────────────────────────────────────────────────

    def apply_due_rules(self, reference_date: date | None = None) -> MaterializeResult:
        """
        Materialize every occurrence due on or before reference_date (default: today).

        Each rule is written atomically: its new transactions together with
        its next-date update (or deletion, for one-shot rules) commit as one
        unit. A persistence error propagates; rules already written stay written.
        """
        ref = to_day(reference_date or today())
        account_ids = {a.id for a in self._account_dao.get_all()}
        existing = self._tx_dao.get_all()
        result = MaterializeResult()

        for plan in plan_due_rules(ref, self._dao.get_all(), account_ids):
            with self._db.transaction():
                for tx in plan.new_transactions:
                    self._tx_dao.create(tx)
                    logger.debug("Materialized %s %.2f on %s", tx.type, tx.amount, tx.date)
                if plan.retire:
                    self._dao.delete(plan.source.id)
                elif plan.advanced:
                    self._dao.update(plan.rule)
            record_plan(result, plan)

        logger.info(
            "Applied recurring rules as of %s: %d new transaction(s), %d rule(s) advanced, %d retired",
            format_date(ref), len(result.new_transactions),
            len(result.updated_rules), len(result.retired_rule_ids),
        )
        result.transactions = merge_new_transactions(result.new_transactions, existing)
        return result

    def apply_due_rules_once(self, reference_date: date | None = None) -> MaterializeResult | None:
        """Startup entry point; returns None if this service already ran."""
        with self._run_lock:
            if self._has_run:
                logger.debug("Recurring rules already applied in this process")
                return None
            self._has_run = True
        return self.apply_due_rules(reference_date)

    # ── Helpers ──────────────────────────────────────────────────────────────

    def _build(
        self, rule_id, description, type_, amount, account_id, frequency,
        next_date, category_id, to_account_id, end_date, include_in_forecast,
    ) -> RecurringRule:
        self._validate(description, type_, amount, account_id, frequency, next_date, to_account_id, end_date)
        is_transfer = type_ == "transfer"
        return RecurringRule(
            id=rule_id,
            description=description.strip(),
            amount=float(amount),
            type=type_,
            account_id=account_id,
            frequency=Frequency(frequency),
            next_date=next_date,
            category_id=TRANSFER_CATEGORY_ID if is_transfer else (category_id or "other"),
            to_account_id=to_account_id if is_transfer else None,
            end_date=end_date or None,
            include_in_forecast=include_in_forecast,
        )

    def _validate(self, description, type_, amount, account_id, frequency, next_date, to_account_id, end_date):
        if not description or not description.strip():
            raise ValueError("Description cannot be empty.")
        if type_ not in RULE_TYPES:
            raise ValueError("Type must be income, expense or transfer.")
        if amount is None or amount < 0:
            raise ValueError("Amount cannot be negative.")
        try:
            Frequency(frequency)
        except ValueError:
            raise ValueError("Invalid frequency.") from None
        start = parse_date(next_date)
        if start is None:
            raise ValueError("Invalid next date.")
        if end_date:
            end = parse_date(end_date)
            if end is None:
                raise ValueError("Invalid end date.")
            if end < start:
                raise ValueError("End date cannot be before the next date.")
        if not account_id or self._account_dao.get_by_id(account_id) is None:
            raise ValueError("Account not found.")
        if type_ == "transfer":
            if not to_account_id or self._account_dao.get_by_id(to_account_id) is None:
                raise ValueError("A transfer needs a destination account.")
            if to_account_id == account_id:
                raise ValueError("Source and destination accounts must differ.")
