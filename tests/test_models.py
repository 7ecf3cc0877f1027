from datetime import date, datetime

from librarydesk.constants import AVAILABLE_STATUS, OUT_OF_STOCK_STATUS
from librarydesk.models import (
    Admin,
    Book,
    Staff,
    derive_book_status,
    format_date,
    format_datetime,
    parse_date,
    parse_datetime,
    status_label,
)


def test_derive_book_status():
    assert derive_book_status(5) == AVAILABLE_STATUS
    assert derive_book_status(1) == AVAILABLE_STATUS
    assert derive_book_status(0) == OUT_OF_STOCK_STATUS
    assert derive_book_status(-3) == OUT_OF_STOCK_STATUS


def test_book_refresh_status_and_availability():
    book = Book(title="Dune", author="Frank Herbert", isbn="9780441013593", quantity=2)
    assert book.refresh_status() == AVAILABLE_STATUS
    assert book.is_available()
    book.quantity = 0
    book.refresh_status()
    assert book.status == OUT_OF_STOCK_STATUS
    assert not book.is_available()


def test_isbn_length_check_on_book():
    assert Book(title="t", author="a", isbn="0441013597").has_valid_isbn_length()
    assert not Book(title="t", author="a", isbn="044101").has_valid_isbn_length()


def test_status_label():
    assert status_label(OUT_OF_STOCK_STATUS) == "Out of stock"
    assert status_label("ACTIVE") == "Active"
    assert status_label("ON_LEAVE") == "On Leave"
    assert status_label(None) == ""


def test_parse_and_format():
    assert parse_datetime("2024-03-02 10:15:00") == datetime(2024, 3, 2, 10, 15)
    assert parse_datetime("") is None
    assert parse_datetime("garbage") is None
    assert parse_date("2024-03-02") == date(2024, 3, 2)
    assert parse_date("2024-03-02 10:15:00") == date(2024, 3, 2)
    assert parse_date("03/02/2024") is None
    assert format_date(date(2024, 3, 2)) == "2024-03-02"
    assert format_datetime(datetime(2024, 3, 2, 10, 15)) == "2024-03-02 10:15:00"
    assert format_date(None) == ""


def test_table_rows():
    staff = Staff(name="Ada", role="Librarian", hire_date=date(2020, 5, 1), staff_id=4)
    assert staff.as_row() == (4, "Ada", "Librarian", "2020-05-01", "Active", "", "")
    book = Book(title="Dune", author="Frank Herbert", isbn="9780441013593", quantity=0,
                book_id=9, status=OUT_OF_STOCK_STATUS)
    assert book.as_row()[5] == "Out of stock"


def test_admin_repr_hides_hash():
    admin = Admin(username="admin", password_hash="$2b$12$secret", id=1)
    assert "secret" not in repr(admin)
    assert admin.is_active()
