import matplotlib.dates as mdates

from models.account import Account
from models.projection import DailyPoint
from utils.constants import ACCOUNT_LINE_COLORS

TOTAL_COLOR = "#6366f1"


def draw_projection(ax, points: list[DailyPoint], accounts: list[Account], show_accounts: bool = True):
    """Plot the projected total (and optionally each account) on a matplotlib Axes."""
    ax.clear()
    if not points:
        ax.text(0.5, 0.5, "No data", ha="center", va="center",
                transform=ax.transAxes, color="gray")
        return

    dates = [p.date for p in points]
    if show_accounts:
        for idx, acct in enumerate(a for a in accounts if a.id in points[0].balances):
            color = acct.color or ACCOUNT_LINE_COLORS[idx % len(ACCOUNT_LINE_COLORS)]
            ax.plot(dates, [p.balances[acct.id] for p in points],
                    color=color, linewidth=1, alpha=0.7, label=acct.name)

    ax.plot(dates, [p.total for p in points], color=TOTAL_COLOR, linewidth=2, label="Total")
    ax.axhline(0, color="#F44336", linewidth=0.8, linestyle="--")

    ax.xaxis.set_major_locator(mdates.MonthLocator())
    ax.xaxis.set_major_formatter(mdates.DateFormatter("%b"))
    ax.yaxis.set_major_formatter(
        lambda v, _: f"{v/1000:.0f}k" if abs(v) >= 1000 else f"{v:.0f}"
    )
    ax.legend(loc="upper left", fontsize=8, frameon=False)
