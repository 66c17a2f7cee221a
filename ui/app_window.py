import customtkinter as ctk
from models.projection import MaterializeResult
from services.account_service import AccountService
from services.recurring_service import RecurringService
from services.forecast_service import ForecastService
from database.category_dao import CategoryDAO
from ui.tabs.scheduled_tab import ScheduledTab
from ui.tabs.forecast_tab import ForecastTab
from utils.constants import APP_NAME, APP_WIDTH, APP_HEIGHT, SEVERITY_COLORS


_REFRESH_SCOPES: dict[str, set[str]] = {
    "scheduled": {"scheduled", "forecast"},
    "account":   {"scheduled", "forecast"},
    "full":      {"scheduled", "forecast"},
}


class AppWindow(ctk.CTk):
    def __init__(
        self,
        account_service: AccountService,
        recurring_service: RecurringService,
        forecast_service: ForecastService,
        category_dao: CategoryDAO,
        startup_result: MaterializeResult | None = None,
        startup_error: str | None = None,
        date_format: str = "YYYY-MM-DD",
        currency_symbol: str = "$",
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._acct_svc = account_service
        self._recurring_svc = recurring_service
        self._forecast_svc = forecast_service
        self._cat_dao = category_dao
        self._date_format = date_format
        self._symbol = currency_symbol

        self.title(APP_NAME)
        self.minsize(APP_WIDTH, APP_HEIGHT)
        self.geometry(f"{APP_WIDTH}x{APP_HEIGHT}")

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_banner_area()
        self._build_tabs()

        if startup_error:
            self.after(300, lambda: self._show_banner(
                f"Scheduled transactions could not all be applied: {startup_error}. "
                "They will be retried at next start.",
                severity="error",
            ))
        elif startup_result and startup_result.new_transactions:
            self.after(300, lambda: self._show_banner(
                startup_result.summary(),
                action_text="View",
                action_cmd=lambda: self._tabview.set("Scheduled"),
            ))

    def _build_banner_area(self):
        self._banner_frame = ctk.CTkFrame(self, fg_color="transparent", height=0)
        self._banner_frame.grid(row=0, column=0, sticky="ew", padx=8)

    def _build_tabs(self):
        self._tabview = ctk.CTkTabview(self)
        self._tabview.grid(row=1, column=0, sticky="nsew", padx=8, pady=(0, 8))

        for tab_name in ("Forecast", "Scheduled"):
            self._tabview.add(tab_name)
            self._tabview.tab(tab_name).grid_columnconfigure(0, weight=1)
            self._tabview.tab(tab_name).grid_rowconfigure(0, weight=1)

        self._forecast_tab = ForecastTab(
            self._tabview.tab("Forecast"),
            forecast_service=self._forecast_svc,
            account_service=self._acct_svc,
            currency_symbol=self._symbol,
        )
        self._forecast_tab.grid(row=0, column=0, sticky="nsew")

        self._scheduled_tab = ScheduledTab(
            self._tabview.tab("Scheduled"),
            recurring_service=self._recurring_svc,
            account_service=self._acct_svc,
            category_dao=self._cat_dao,
            notify_refresh=self.notify_tabs_refresh,
            date_format=self._date_format,
            currency_symbol=self._symbol,
        )
        self._scheduled_tab.grid(row=0, column=0, sticky="nsew")

    # ── Refresh ──────────────────────────────────────────────────────────────
    def notify_tabs_refresh(self, scope: str = "full"):
        tabs = _REFRESH_SCOPES.get(scope, _REFRESH_SCOPES["full"])
        if "scheduled" in tabs: self._scheduled_tab.refresh()
        if "forecast"  in tabs: self._forecast_tab.refresh()

    # ── Banner ───────────────────────────────────────────────────────────────
    def _show_banner(self, message: str, severity: str = "info", action_text=None, action_cmd=None):
        """Replace the current startup notice with a dismissible one."""
        for w in self._banner_frame.winfo_children():
            w.destroy()

        banner = ctk.CTkFrame(
            self._banner_frame,
            fg_color=SEVERITY_COLORS.get(severity, SEVERITY_COLORS["info"]),
            corner_radius=6,
        )
        banner.pack(fill="x", pady=2)
        banner.grid_columnconfigure(0, weight=1)
        ctk.CTkLabel(
            banner, text=message, text_color="white",
            anchor="w", justify="left", wraplength=900, padx=10, pady=6,
        ).grid(row=0, column=0, sticky="ew")

        col = 1
        if action_text and action_cmd:
            ctk.CTkButton(
                banner, text=action_text, width=60, height=24,
                fg_color="transparent", border_width=1, border_color="white",
                text_color="white", command=action_cmd,
            ).grid(row=0, column=col, padx=2)
            col += 1
        ctk.CTkButton(
            banner, text="✕", width=28, height=24,
            fg_color="transparent", text_color="white",
            command=banner.destroy,
        ).grid(row=0, column=col, padx=(0, 4))
