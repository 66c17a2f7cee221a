APP_NAME = "Recurring Ledger"
APP_WIDTH = 1100
APP_HEIGHT = 700
DB_FILE = "ledger.db"
LOG_FILE = "ledger.log"

DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"

PROJECTION_HORIZON_DAYS = 365
ONCE_SENTINEL_YEARS = 100
UPCOMING_DAYS = 30

TRANSFER_CATEGORY_ID = "transfer"

RULE_TYPES = ("income", "expense", "transfer")

DEFAULT_ACCOUNT_NAME = "Current Account"

DEFAULT_CATEGORIES = [
    {"id": "salary",        "name": "Salary",          "icon": "Banknote",       "color": "#16a34a"},
    {"id": "bonus",         "name": "Bonus",           "icon": "Award",          "color": "#d9f99d"},
    {"id": "refunds",       "name": "Refunds",         "icon": "TrendingUp",     "color": "#4ade80"},
    {"id": "housing",       "name": "Rent/Mortgage",   "icon": "Home",           "color": "#F44336"},
    {"id": "utilities",     "name": "Utilities",       "icon": "Zap",            "color": "#9C27B0"},
    {"id": "groceries",     "name": "Groceries",       "icon": "ShoppingCart",   "color": "#FF9800"},
    {"id": "transport",     "name": "Transport",       "icon": "Car",            "color": "#2196F3"},
    {"id": "telecom",       "name": "Phone/Internet",  "icon": "Wifi",           "color": "#3b82f6"},
    {"id": "subscriptions", "name": "Subscriptions",   "icon": "Monitor",        "color": "#1e40af"},
    {"id": "bank_fees",     "name": "Bank Fees",       "icon": "Landmark",       "color": "#1f2937"},
    {"id": "taxes",         "name": "Taxes",           "icon": "Briefcase",      "color": "#7c2d12"},
    {"id": "other",         "name": "Other",           "icon": "MoreHorizontal", "color": "#6b7280"},
    {"id": TRANSFER_CATEGORY_ID, "name": "Transfer",   "icon": "ArrowRightLeft", "color": "#6366f1"},
]

SEVERITY_COLORS = {
    "error":   "#F44336",
    "warning": "#FF9800",
    "info":    "#2196F3",
}

ACCOUNT_LINE_COLORS = [
    "#2196F3", "#4CAF50", "#FF9800", "#9C27B0", "#00BCD4", "#F44336", "#795548",
]
