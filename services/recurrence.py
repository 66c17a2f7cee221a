"""Calendar arithmetic for recurring rules.

Everything here is pure: no I/O, no clock. Dates are ``datetime.date``
values; month and year steps clamp to the last valid day of the target
month, and every step is taken from the current date, so 01-31 monthly
goes 02-29 -> 03-29 rather than snapping back to the 31st.
"""
from datetime import date
from typing import Iterator

from models.frequency import Frequency
from models.recurring_rule import RecurringRule
from utils.constants import ONCE_SENTINEL_YEARS
from utils.date_helpers import add_days, add_months, add_years, parse_date


def advance(current: date, frequency: Frequency | str) -> date:
    """Return the occurrence after ``current`` for the given frequency.

    ``once`` jumps ONCE_SENTINEL_YEARS ahead, which callers treat as
    "no further occurrences"; the materializer retires such rules.
    """
    match Frequency.parse(frequency):
        case Frequency.ONCE:
            return add_years(current, ONCE_SENTINEL_YEARS)
        case Frequency.DAILY:
            return add_days(current, 1)
        case Frequency.WEEKLY:
            return add_days(current, 7)
        case Frequency.BIWEEKLY:
            return add_days(current, 14)
        case Frequency.BIMONTHLY:
            return add_days(current, 15)
        case Frequency.FOURWEEKLY:
            return add_days(current, 28)
        case Frequency.MONTHLY:
            return add_months(current, 1)
        case Frequency.BIMESTRIAL:
            return add_months(current, 2)
        case Frequency.QUARTERLY:
            return add_months(current, 3)
        case Frequency.FOURMONTHLY:
            return add_months(current, 4)
        case Frequency.SEMIANNUAL:
            return add_months(current, 6)
        case Frequency.ANNUAL:
            return add_years(current, 1)
        case Frequency.BIENNIAL:
            return add_years(current, 2)
    raise AssertionError(f"unhandled frequency {frequency!r}")


def next_date_of(rule: RecurringRule) -> date:
    d = parse_date(rule.next_date)
    if d is None:
        raise ValueError(f"Rule {rule.id} has an invalid next date: {rule.next_date!r}")
    return d


def end_date_of(rule: RecurringRule) -> date | None:
    return parse_date(rule.end_date) if rule.end_date else None


def is_due(rule: RecurringRule, as_of: date) -> bool:
    """True when the rule's next date is on or before ``as_of``."""
    return next_date_of(rule) <= as_of


def is_expired(rule: RecurringRule, candidate: date) -> bool:
    """True when the rule has an end date and ``candidate`` is past it."""
    end = end_date_of(rule)
    return end is not None and candidate > end


def occurrences(rule: RecurringRule, until: date, start: date | None = None) -> Iterator[date]:
    """Yield occurrence dates from the rule's next date through ``until``.

    Stops at the rule's end date. Dates before ``start`` are stepped over
    but not yielded. The rule itself is not modified.
    """
    current = next_date_of(rule)
    while current <= until:
        if is_expired(rule, current):
            return
        if start is None or current >= start:
            yield current
        current = advance(current, rule.frequency)
