import logging
import threading
import customtkinter as ctk
from matplotlib.figure import Figure
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg

from services.forecast_service import ForecastService, monthly_summary
from services.account_service import AccountService
from ui.charts import draw_projection
from utils.currency import format_currency
from utils.date_helpers import friendly_month

logger = logging.getLogger(__name__)


class ForecastTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        forecast_service: ForecastService,
        account_service: AccountService,
        currency_symbol: str = "$",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._forecast_svc = forecast_service
        self._acct_svc = account_service
        self._symbol = currency_symbol

        self._accounts = account_service.get_all()
        self._acct_var = ctk.StringVar(value="All Accounts")
        self._detail_var = ctk.StringVar(value="Per Account")
        self._load_gen = 0

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=0)
        self.grid_rowconfigure(2, weight=1)

        self._build_toolbar()
        self._build_chart_area()
        self._build_table()
        self.after(100, self._load)

    def refresh(self):
        self._accounts = self._acct_svc.get_all()
        self._acct_combo.configure(values=["All Accounts"] + [a.name for a in self._accounts])
        self._load()

    # ── Helpers ──────────────────────────────────────────────────────────────

    def _get_account_ids(self) -> set[str] | None:
        name = self._acct_var.get()
        if name == "All Accounts":
            return None
        acct = next((a for a in self._accounts if a.name == name), None)
        return {acct.id} if acct else None

    def _style_ax(self, ax, fig):
        is_dark = ctk.get_appearance_mode() == "Dark"
        bg = "#2b2b2b" if is_dark else "#e4e4e4"
        fg = "#aaaaaa" if is_dark else "#444444"
        fig.patch.set_facecolor(bg)
        ax.set_facecolor(bg)
        ax.tick_params(colors=fg, labelsize=8)
        for spine in ax.spines.values():
            spine.set_edgecolor(fg)

    # ── Layout ───────────────────────────────────────────────────────────────

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))

        ctk.CTkLabel(bar, text="Account:").pack(side="left", padx=(12, 4), pady=8)
        self._acct_combo = ctk.CTkComboBox(
            bar, values=["All Accounts"] + [a.name for a in self._accounts],
            variable=self._acct_var, width=180, state="readonly",
            command=lambda _: self._load(),
        )
        self._acct_combo.pack(side="left", padx=(0, 16))

        ctk.CTkLabel(bar, text="Lines:").pack(side="left", padx=(0, 4))
        ctk.CTkSegmentedButton(
            bar,
            values=["Per Account", "Total Only"],
            variable=self._detail_var,
            command=lambda _: self._load(),
        ).pack(side="left", padx=(0, 8))

    def _build_chart_area(self):
        outer = ctk.CTkFrame(self, fg_color=("gray90", "gray20"), corner_radius=8)
        outer.grid(row=1, column=0, sticky="ew", padx=8, pady=8)
        outer.grid_columnconfigure(0, weight=1)

        self._chart_title = ctk.CTkLabel(
            outer, text="Balance Forecast",
            font=ctk.CTkFont(size=13, weight="bold"),
        )
        self._chart_title.pack(pady=(10, 0))

        self._chart_fig = Figure(figsize=(8, 3), dpi=80, tight_layout=True)
        self._chart_ax = self._chart_fig.add_subplot(111)
        self._chart_mpl = FigureCanvasTkAgg(self._chart_fig, master=outer)
        self._chart_mpl.get_tk_widget().pack(fill="x", expand=True, padx=8, pady=(4, 8))

    def _build_table(self):
        outer = ctk.CTkFrame(self, fg_color=("gray90", "gray20"), corner_radius=8)
        outer.grid(row=2, column=0, sticky="nsew", padx=8, pady=(0, 8))
        outer.grid_columnconfigure(0, weight=1)
        outer.grid_rowconfigure(1, weight=1)

        header = ctk.CTkFrame(outer, fg_color=("gray80", "gray25"), corner_radius=0)
        header.grid(row=0, column=0, sticky="ew", padx=4, pady=(4, 0))
        for col, (text, w) in enumerate([("Month", 160), ("Closing", 120), ("Lowest", 120), ("Lowest On", 120)]):
            header.grid_columnconfigure(col, weight=1, minsize=w)
            ctk.CTkLabel(
                header, text=text,
                font=ctk.CTkFont(weight="bold"),
                anchor="center",
            ).grid(row=0, column=col, padx=4, pady=6, sticky="ew")

        self._table_scroll = ctk.CTkScrollableFrame(outer, fg_color="transparent")
        self._table_scroll.grid(row=1, column=0, sticky="nsew", padx=4, pady=(0, 4))
        for col in range(4):
            self._table_scroll.grid_columnconfigure(col, weight=1, minsize=120)

    # ── Data loading ─────────────────────────────────────────────────────────

    def _load(self):
        self._load_gen += 1
        gen = self._load_gen
        account_ids = self._get_account_ids()
        show_accounts = self._detail_var.get() == "Per Account"

        def fetch():
            try:
                points = self._forecast_svc.get_daily_projection(account_ids)
            except Exception:
                logger.exception("Forecast projection failed")
                points = []
            self.after(0, lambda: self._on_data_ready(gen, points, show_accounts))

        threading.Thread(target=fetch, daemon=True).start()

    def _on_data_ready(self, gen: int, points, show_accounts: bool):
        if gen != self._load_gen:
            return  # superseded by a newer load
        if not self.winfo_exists():
            return
        days = self._forecast_svc.horizon_days
        self._chart_title.configure(text=f"Balance Forecast (next {days} days)")
        draw_projection(self._chart_ax, points, self._accounts, show_accounts)
        self._style_ax(self._chart_ax, self._chart_fig)
        self._chart_mpl.draw_idle()
        self._populate_table(monthly_summary(points))

    # ── Table population ─────────────────────────────────────────────────────

    def _populate_table(self, rows: list[dict]):
        for w in self._table_scroll.winfo_children():
            w.destroy()

        for row_idx, r in enumerate(rows):
            bg = ("gray85", "gray22") if row_idx % 2 == 0 else ("gray90", "gray18")
            lowest_color = "#4CAF50" if r["lowest"] >= 0 else "#F44336"

            for col, (text, color) in enumerate([
                (friendly_month(r["month"]), None),
                (format_currency(r["closing"], self._symbol), None),
                (format_currency(r["lowest"], self._symbol), lowest_color),
                (r["lowest_date"].strftime("%d %b"), None),
            ]):
                ctk.CTkLabel(
                    self._table_scroll,
                    text=text,
                    text_color=color or ("gray10", "gray90"),
                    fg_color=bg,
                    anchor="center",
                    corner_radius=0,
                ).grid(row=row_idx, column=col, padx=1, pady=1, sticky="ew")
