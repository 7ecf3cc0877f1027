# models.py
"""
Plain record types for the three tables plus the one derived field
(book status) that is recomputed from quantity on every write.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from .constants import (
    ACTIVE_STATUS,
    AVAILABLE_STATUS,
    DATE_FMT,
    DATETIME_FMT,
    MAX_ISBN_LENGTH,
    MIN_ISBN_LENGTH,
    OUT_OF_STOCK_STATUS,
    STATUS_LABELS,
)


def derive_book_status(quantity: int) -> str:
    return AVAILABLE_STATUS if quantity > 0 else OUT_OF_STOCK_STATUS


def status_label(status: Optional[str]) -> str:
    if not status:
        return ""
    return STATUS_LABELS.get(status, status.replace("_", " ").title())


# ---------------- date helpers ----------------
def parse_datetime(value) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        try:
            return datetime.strptime(value, DATETIME_FMT)
        except ValueError:
            return None


def parse_date(value) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value[:10], DATE_FMT).date()
    except ValueError:
        return None


def format_date(value) -> str:
    return value.strftime(DATE_FMT) if value else ""


def format_datetime(value) -> str:
    return value.strftime(DATETIME_FMT) if value else ""


# ---------------- records ----------------
@dataclass
class Admin:
    username: str
    password_hash: str = ""
    id: Optional[int] = None
    created_date: Optional[datetime] = None
    last_login: Optional[datetime] = None
    status: str = ACTIVE_STATUS

    @classmethod
    def from_row(cls, row):
        return cls(
            id=row["id"],
            username=row["username"],
            password_hash=row["password_hash"],
            created_date=parse_datetime(row["created_date"]),
            last_login=parse_datetime(row["last_login"]),
            status=row["status"],
        )

    def is_active(self) -> bool:
        return self.status == ACTIVE_STATUS

    def __repr__(self):
        # keep the hash out of logs
        return f"Admin(id={self.id!r}, username={self.username!r}, status={self.status!r})"


@dataclass
class Book:
    title: str
    author: str
    isbn: str
    quantity: int = 1
    book_id: Optional[int] = None
    date_added: Optional[datetime] = None
    status: Optional[str] = None

    @classmethod
    def from_row(cls, row):
        return cls(
            book_id=row["book_id"],
            title=row["title"],
            author=row["author"],
            isbn=row["isbn"],
            quantity=row["quantity"],
            date_added=parse_datetime(row["date_added"]),
            status=row["status"],
        )

    def refresh_status(self) -> str:
        self.status = derive_book_status(self.quantity)
        return self.status

    def is_available(self) -> bool:
        return self.quantity > 0 and self.status == AVAILABLE_STATUS

    def has_valid_isbn_length(self) -> bool:
        return self.isbn is not None and MIN_ISBN_LENGTH <= len(self.isbn) <= MAX_ISBN_LENGTH

    def as_row(self):
        return (
            self.book_id,
            self.title,
            self.author,
            self.isbn,
            self.quantity,
            status_label(self.status),
            format_datetime(self.date_added),
        )


@dataclass
class Staff:
    name: str
    role: str
    hire_date: Optional[date] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    staff_id: Optional[int] = None
    status: str = ACTIVE_STATUS

    @classmethod
    def from_row(cls, row):
        return cls(
            staff_id=row["staff_id"],
            name=row["name"],
            role=row["role"],
            hire_date=parse_date(row["hire_date"]),
            status=row["status"],
            email=row["email"],
            phone=row["phone"],
        )

    def is_active(self) -> bool:
        return self.status == ACTIVE_STATUS

    def as_row(self):
        return (
            self.staff_id,
            self.name,
            self.role,
            format_date(self.hire_date),
            status_label(self.status),
            self.email or "",
            self.phone or "",
        )
