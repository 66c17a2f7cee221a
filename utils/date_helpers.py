from datetime import date, datetime, timedelta
import calendar
from utils.constants import DATE_FORMAT, MONTH_FORMAT

# ── Display date formats ──────────────────────────────────────────────────────

_STRFTIME_MAP = {
    "MM/DD/YYYY": "%m/%d/%Y",
    "DD/MM/YYYY": "%d/%m/%Y",
    "YYYY-MM-DD": "%Y-%m-%d",
    "DD.MM.YYYY": "%d.%m.%Y",
}


def today() -> date:
    return date.today()


def to_day(value: date | datetime) -> date:
    """Strip any time-of-day component so comparisons happen on calendar days."""
    if isinstance(value, datetime):
        return value.date()
    return value


def parse_date(date_str: str) -> date | None:
    """Parse a date string in YYYY-MM-DD format, returning None on failure."""
    if not date_str:
        return None
    # Tolerate a trailing time component, e.g. '2024-01-15T00:00:00'
    date_str = date_str.strip()[:10]
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d"):
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue
    return None


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def format_month(d: date) -> str:
    return d.strftime(MONTH_FORMAT)


def clamp_day_to_month(year: int, month: int, day: int) -> int:
    """Clamp day to valid range for the given year/month."""
    max_day = calendar.monthrange(year, month)[1]
    return min(day, max_day)


def add_days(d: date, n: int) -> date:
    return d + timedelta(days=n)


def add_months(d: date, n: int) -> date:
    """Add n months to date d, clamping day to month end."""
    month = d.month - 1 + n
    year = d.year + month // 12
    month = month % 12 + 1
    day = clamp_day_to_month(year, month, d.day)
    return d.replace(year=year, month=month, day=day)


def add_years(d: date, n: int) -> date:
    """Add n calendar years; Feb 29 lands on Feb 28 in non-leap years."""
    return add_months(d, 12 * n)


def friendly_month(month_str: str) -> str:
    """Convert YYYY-MM to e.g. 'February 2026'."""
    try:
        d = datetime.strptime(month_str, MONTH_FORMAT).date()
    except ValueError:
        return month_str
    return d.strftime("%B %Y")


def format_display_date(date_str: str, fmt_key: str = "YYYY-MM-DD") -> str:
    """Convert a YYYY-MM-DD storage string to the user-facing display format."""
    if not date_str:
        return date_str
    d = parse_date(date_str)
    if d is None:
        return date_str
    return d.strftime(_STRFTIME_MAP.get(fmt_key, "%Y-%m-%d"))
