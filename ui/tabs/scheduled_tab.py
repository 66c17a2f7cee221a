import customtkinter as ctk
from services.recurring_service import RecurringService
from services.account_service import AccountService
from database.category_dao import CategoryDAO
from ui.components.confirm_dialog import ConfirmDialog
from utils.currency import format_currency
from utils.date_helpers import format_display_date


class ScheduledTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        recurring_service: RecurringService,
        account_service: AccountService,
        category_dao: CategoryDAO,
        notify_refresh,
        date_format: str = "YYYY-MM-DD",
        currency_symbol: str = "$",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = recurring_service
        self._acct_svc = account_service
        self._cat_dao = category_dao
        self._notify_refresh = notify_refresh
        self._date_format = date_format
        self._symbol = currency_symbol

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_toolbar()
        self._build_list()
        self._load()

    def refresh(self):
        self._load()

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        ctk.CTkLabel(
            bar, text="Scheduled Transactions",
            font=ctk.CTkFont(size=14, weight="bold"),
        ).pack(side="left", padx=12, pady=8)
        self._upcoming_label = ctk.CTkLabel(bar, text="", text_color="gray60")
        self._upcoming_label.pack(side="right", padx=12)

    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        upcoming = self._svc.upcoming()
        self._upcoming_label.configure(
            text=f"{len(upcoming)} occurrence{'s' if len(upcoming) != 1 else ''} in the next 30 days"
        )

        rules = self._svc.get_all()
        if not rules:
            ctk.CTkLabel(
                self._scroll,
                text="No scheduled transactions yet.",
                text_color="gray60",
            ).grid(row=0, column=0, pady=40)
            return

        # Header
        hdr = ctk.CTkFrame(self._scroll, fg_color=("gray82", "gray22"), corner_radius=0)
        hdr.grid(row=0, column=0, sticky="ew", pady=(0, 2))
        for i, (col, w) in enumerate([
            ("Description", 170), ("Type", 70), ("Amount", 90),
            ("Account", 150), ("Category", 100), ("Frequency", 110),
            ("Next Due", 100), ("Ends", 100), ("", 60),
        ]):
            ctk.CTkLabel(
                hdr, text=col, width=w, anchor="w",
                font=ctk.CTkFont(weight="bold"),
            ).grid(row=0, column=i, padx=4, pady=4)

        account_names = self._acct_svc.get_names()
        category_names = self._cat_dao.get_names()
        for idx, rule in enumerate(rules):
            self._add_row(idx + 1, rule, account_names, category_names)

    def _add_row(self, idx, rule, account_names, category_names):
        bg = ("gray92", "gray17") if idx % 2 == 0 else ("gray88", "gray21")
        row = ctk.CTkFrame(self._scroll, fg_color=bg, corner_radius=4)
        row.grid(row=idx, column=0, sticky="ew", pady=1, padx=2)

        account = account_names.get(rule.account_id, "?")
        if rule.is_transfer:
            account = f"{account} → {account_names.get(rule.to_account_id, '?')}"
        amount_color = "#4CAF50" if rule.type == "income" else (
            "#6366f1" if rule.is_transfer else "#F44336"
        )

        data = [
            (rule.description, 170, None),
            (rule.type.title(), 70, None),
            (format_currency(rule.amount, self._symbol), 90, amount_color),
            (account, 150, None),
            (category_names.get(rule.category_id, "Unknown"), 100, None),
            (rule.frequency.label, 110, None),
            (format_display_date(rule.next_date, self._date_format), 100, None),
            (format_display_date(rule.end_date, self._date_format) if rule.end_date else "—", 100, None),
        ]
        for i, (text, width, color) in enumerate(data):
            ctk.CTkLabel(
                row, text=text, width=width, anchor="w",
                text_color=color or ("gray10", "gray90"),
            ).grid(row=0, column=i, padx=4, pady=4)

        ctk.CTkButton(
            row, text="Delete", width=56, height=24,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda r=rule: self._delete(r),
        ).grid(row=0, column=len(data), padx=(4, 6))

    def _delete(self, rule):
        dialog = ConfirmDialog(
            self.winfo_toplevel(),
            title="Delete Scheduled Transaction",
            message=f"Delete '{rule.description}'? Transactions already created are kept.",
        )
        if dialog.result:
            self._svc.delete(rule.id)
            self._notify_refresh("scheduled")
