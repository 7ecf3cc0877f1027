# constants.py
"""
Fixed values shared by the data layer and the UI: validation bounds,
status labels, table headings, regexes, window sizes and user messages.
Anything an operator might want to change lives in config.py instead.
"""

# ---------------- validation bounds ----------------
MIN_ISBN_LENGTH = 10
MAX_ISBN_LENGTH = 13
MIN_PASSWORD_LENGTH = 6
MAX_NAME_LENGTH = 100
MAX_TITLE_LENGTH = 255
MIN_PHONE_LENGTH = 10
MAX_QUANTITY = 9999

EMAIL_REGEX = r"^[A-Za-z0-9+_.-]+@(.+)$"
PHONE_REGEX = r"^[0-9-+()\s]+$"
ISBN_REGEX = r"^[0-9-]+$"
USERNAME_REGEX = r"^[a-zA-Z0-9_]{3,30}$"

# ---------------- status values ----------------
ACTIVE_STATUS = "ACTIVE"
INACTIVE_STATUS = "INACTIVE"
AVAILABLE_STATUS = "AVAILABLE"
OUT_OF_STOCK_STATUS = "OUT_OF_STOCK"

STAFF_STATUSES = (ACTIVE_STATUS, INACTIVE_STATUS)

STATUS_LABELS = {
    AVAILABLE_STATUS: "Available",
    OUT_OF_STOCK_STATUS: "Out of stock",
    ACTIVE_STATUS: "Active",
    INACTIVE_STATUS: "Inactive",
}

DEFAULT_BOOK_QUANTITY = 1

# ---------------- tables ----------------
BOOK_COLUMNS = ("id", "title", "author", "isbn", "quantity", "status", "date_added")
BOOK_HEADINGS = ("ID", "Title", "Author", "ISBN", "Quantity", "Status", "Date Added")

STAFF_COLUMNS = ("id", "name", "role", "hire_date", "status", "email", "phone")
STAFF_HEADINGS = ("ID", "Name", "Role", "Hire Date", "Status", "Email", "Phone")

DATE_FMT = "%Y-%m-%d"
DATETIME_FMT = "%Y-%m-%d %H:%M:%S"

# ---------------- UI ----------------
WINDOW_SIZE = "1200x800"
LOGIN_WINDOW_SIZE = "400x300"
BOOK_DIALOG_SIZE = "420x330"
STAFF_DIALOG_SIZE = "420x420"

PALETTE = {
    "bg": "#f0f6ff",
    "panel": "#ffffff",
    "accent": "#2196f3",
    "muted": "#475569",
    "success": "#4caf50",
    "warning": "#ff9800",
    "danger": "#f44336",
}

# ---------------- messages ----------------
LOGIN_SUCCESS_MSG = "Login successful!"
LOGIN_FAILED_MSG = "Invalid username or password."
CONNECTION_ERROR_MSG = "Database connection failed."
OPERATION_SUCCESS_MSG = "Operation completed successfully."
OPERATION_FAILED_MSG = "Operation failed. Please try again."
