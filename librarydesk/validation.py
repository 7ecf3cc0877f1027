# validation.py
"""
Stateless input checks used by the dialogs and by the data layer before it
writes. Uniqueness is left to the database constraints.
"""

import re
from datetime import date
from typing import Optional

from .constants import (
    EMAIL_REGEX,
    ISBN_REGEX,
    MAX_ISBN_LENGTH,
    MAX_NAME_LENGTH,
    MAX_QUANTITY,
    MAX_TITLE_LENGTH,
    MIN_ISBN_LENGTH,
    MIN_PASSWORD_LENGTH,
    MIN_PHONE_LENGTH,
    PHONE_REGEX,
    USERNAME_REGEX,
)

EMAIL_RE = re.compile(EMAIL_REGEX)
PHONE_RE = re.compile(PHONE_REGEX)
ISBN_RE = re.compile(ISBN_REGEX)
USERNAME_RE = re.compile(USERNAME_REGEX)
ISBN_SEPARATORS_RE = re.compile(r"[\s-]")
WHITESPACE_RE = re.compile(r"\s+")


def is_not_empty(value) -> bool:
    return value is not None and bool(str(value).strip())


def is_valid_email(email) -> bool:
    if not is_not_empty(email):
        return False
    return EMAIL_RE.fullmatch(email) is not None


def is_valid_phone(phone) -> bool:
    # phone is optional
    if not is_not_empty(phone):
        return True
    return PHONE_RE.fullmatch(phone) is not None and len(phone) >= MIN_PHONE_LENGTH


def clean_isbn(isbn) -> str:
    if isbn is None:
        return ""
    return ISBN_SEPARATORS_RE.sub("", isbn)


def is_valid_isbn(isbn) -> bool:
    if not is_not_empty(isbn):
        return False
    cleaned = clean_isbn(isbn)
    if not MIN_ISBN_LENGTH <= len(cleaned) <= MAX_ISBN_LENGTH:
        return False
    # separators are already gone, so this only admits digits
    return ISBN_RE.fullmatch(cleaned) is not None


def is_valid_password(password) -> bool:
    if not is_not_empty(password):
        return False
    return len(password) >= MIN_PASSWORD_LENGTH


def is_valid_username(username) -> bool:
    if not is_not_empty(username):
        return False
    return USERNAME_RE.fullmatch(username) is not None


def is_valid_number(value) -> bool:
    if not is_not_empty(value):
        return False
    try:
        int(str(value).strip())
    except ValueError:
        return False
    return True


def is_positive_integer(value) -> bool:
    """True for whole numbers >= 0 (zero counts, as for book quantity)."""
    if not is_valid_number(value):
        return False
    return int(str(value).strip()) >= 0


def quantity_error(value) -> Optional[str]:
    """Why `value` is not a usable book quantity, or None when it is."""
    if not is_valid_number(value):
        return "Quantity must be a whole number."
    quantity = int(str(value).strip())
    if quantity < 0:
        return "Quantity cannot be negative."
    if quantity > MAX_QUANTITY:
        return f"Quantity cannot exceed {MAX_QUANTITY}."
    return None


def is_valid_length(value, min_length, max_length) -> bool:
    if value is None:
        return False
    length = len(value.strip())
    return min_length <= length <= max_length


def sanitize_input(value) -> str:
    if value is None:
        return ""
    return WHITESPACE_RE.sub(" ", value.strip())


def is_future_date(value, today=None) -> bool:
    if value is None:
        return False
    return value > (today or date.today())


def is_valid_book(book) -> bool:
    if book is None:
        return False
    if not is_not_empty(book.title) or len(book.title) > MAX_TITLE_LENGTH:
        return False
    if not is_not_empty(book.author) or len(book.author) > MAX_NAME_LENGTH:
        return False
    if not is_valid_isbn(book.isbn):
        return False
    if book.quantity is None or not 0 <= book.quantity <= MAX_QUANTITY:
        return False
    return True


def is_valid_staff(staff) -> bool:
    if staff is None:
        return False
    if not is_not_empty(staff.name) or len(staff.name) > MAX_NAME_LENGTH:
        return False
    if not is_not_empty(staff.role):
        return False
    if staff.hire_date is None:
        return False
    if staff.email and not is_valid_email(staff.email):
        return False
    if staff.phone and not is_valid_phone(staff.phone):
        return False
    return True
