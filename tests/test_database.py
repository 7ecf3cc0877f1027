import hashlib
import logging
from datetime import date

from librarydesk.constants import (
    ACTIVE_STATUS,
    AVAILABLE_STATUS,
    INACTIVE_STATUS,
    MAX_QUANTITY,
    OUT_OF_STOCK_STATUS,
)
from librarydesk.database import (
    ERR_DUPLICATE,
    ERR_INVALID,
    ERR_NOT_FOUND,
    LibraryDatabase,
    hash_password,
    init_db,
    verify_password,
)


# ---------------- books ----------------
def test_add_then_list_returns_same_values(db, make_book):
    book = make_book(isbn="978-0-13-235088-4")
    res = db.add_book(book)
    assert res
    assert res.message == "Book added successfully!"
    assert book.book_id == res.row_id
    assert book.isbn == "9780132350884"

    books = db.get_all_books()
    assert len(books) == 1
    stored = books[0]
    assert (stored.book_id, stored.title, stored.author, stored.isbn, stored.quantity) == (
        book.book_id, "Clean Code", "Robert C. Martin", "9780132350884", 3,
    )
    assert stored.status == AVAILABLE_STATUS
    assert stored.date_added is not None


def test_zero_quantity_is_out_of_stock(db, make_book):
    book = make_book(quantity=0)
    assert db.add_book(book)
    assert db.get_book(book.book_id).status == OUT_OF_STOCK_STATUS


def test_duplicate_isbn_rejected_and_existing_row_unchanged(db, make_book):
    first = make_book()
    assert db.add_book(first)

    res = db.add_book(make_book(title="Another Title", author="Someone Else", quantity=9))
    assert not res
    assert res.error == ERR_DUPLICATE
    assert "9780132350884" in res.message

    assert db.get_total_books() == 1
    stored = db.get_book(first.book_id)
    assert (stored.title, stored.author, stored.quantity) == ("Clean Code", "Robert C. Martin", 3)


def test_invalid_book_is_not_written(db, make_book):
    res = db.add_book(make_book(isbn="12"))
    assert not res
    assert res.error == ERR_INVALID
    assert db.get_total_books() == 0


def test_update_rederives_status(db, make_book):
    book = make_book(quantity=2)
    db.add_book(book)

    book.quantity = 0
    book.title = "Clean Code (2nd printing)"
    res = db.update_book(book)
    assert res
    assert res.message == "Book updated successfully!"

    stored = db.get_book(book.book_id)
    assert stored.title == "Clean Code (2nd printing)"
    assert stored.status == OUT_OF_STOCK_STATUS

    book.quantity = 4
    db.update_book(book)
    assert db.get_book(book.book_id).status == AVAILABLE_STATUS


def test_update_to_taken_isbn_is_duplicate(db, make_book):
    a = make_book()
    b = make_book(title="Refactoring", author="Martin Fowler", isbn="9780134757599")
    db.add_book(a)
    db.add_book(b)
    b.isbn = a.isbn
    res = db.update_book(b)
    assert res.error == ERR_DUPLICATE
    assert db.get_book(b.book_id).isbn == "9780134757599"


def test_update_missing_book(db, make_book):
    ghost = make_book()
    ghost.book_id = 999
    res = db.update_book(ghost)
    assert res.error == ERR_NOT_FOUND


def test_delete_book_and_missing_id(db, make_book):
    book = make_book()
    db.add_book(book)

    res = db.delete_book(12345)
    assert not res
    assert res.error == ERR_NOT_FOUND
    assert db.get_total_books() == 1

    assert db.delete_book(book.book_id)
    assert db.get_total_books() == 0
    assert db.get_book(book.book_id) is None


def test_search_books(db, make_book):
    db.add_book(make_book())
    db.add_book(make_book(title="Refactoring", author="Martin Fowler", isbn="9780134757599"))
    db.add_book(make_book(title="Dune", author="Frank Herbert", isbn="9780441013593"))

    assert [b.title for b in db.search_books("martin")] == ["Clean Code", "Refactoring"]
    assert [b.title for b in db.search_books("0441")] == ["Dune"]
    assert db.search_books("no such thing") == []
    assert len(db.search_books("   ")) == 3


def test_book_counts(db, make_book):
    db.add_book(make_book())
    db.add_book(make_book(title="Dune", author="Frank Herbert", isbn="9780441013593", quantity=0))
    assert db.get_total_books() == 2
    assert db.count_books_by_status() == {AVAILABLE_STATUS: 1, OUT_OF_STOCK_STATUS: 1}


# ---------------- staff ----------------
def test_add_staff_forces_active(db, make_staff):
    staff = make_staff()
    staff.status = INACTIVE_STATUS
    res = db.add_staff(staff)
    assert res
    assert res.message == "Staff member added successfully!"

    stored = db.get_staff(staff.staff_id)
    assert stored.status == ACTIVE_STATUS
    assert stored.hire_date == date(2020, 5, 1)
    assert (stored.name, stored.role, stored.email, stored.phone) == (
        "Ada Lovelace", "Librarian", "ada@example.com", "555-123-4567",
    )


def test_staff_optional_contact_fields(db, make_staff):
    staff = make_staff(email=None, phone="")
    assert db.add_staff(staff)
    stored = db.get_staff(staff.staff_id)
    assert stored.email is None
    assert stored.phone is None


def test_update_staff_status_and_total(db, make_staff):
    a = make_staff()
    b = make_staff(name="Grace Hopper", role="Archivist", email=None, phone=None)
    db.add_staff(a)
    db.add_staff(b)
    assert db.get_total_staff() == 2

    b.status = INACTIVE_STATUS
    assert db.update_staff(b)
    assert db.get_total_staff() == 1
    assert db.count_staff_by_status() == {ACTIVE_STATUS: 1, INACTIVE_STATUS: 1}

    b.status = "RETIRED"
    res = db.update_staff(b)
    assert res.error == ERR_INVALID
    assert db.get_staff(b.staff_id).status == INACTIVE_STATUS


def test_delete_and_search_staff(db, make_staff):
    a = make_staff()
    b = make_staff(name="Grace Hopper", role="Archivist", email="grace@navy.mil", phone=None)
    db.add_staff(a)
    db.add_staff(b)

    assert [s.name for s in db.search_staff("archiv")] == ["Grace Hopper"]
    assert [s.name for s in db.search_staff("navy")] == ["Grace Hopper"]
    assert len(db.search_staff("")) == 2

    res = db.delete_staff(999)
    assert res.error == ERR_NOT_FOUND
    assert len(db.get_all_staff()) == 2

    assert db.delete_staff(a.staff_id)
    assert [s.name for s in db.get_all_staff()] == ["Grace Hopper"]


# ---------------- admin ----------------
def test_default_admin_seeded_once(db):
    assert db.count_admins() == 1
    db.init_schema()
    assert db.count_admins() == 1


def test_authenticate_updates_last_login(db):
    assert db.get_admin("admin").last_login is None
    admin = db.authenticate_admin("admin", "admin123")
    assert admin is not None
    assert admin.username == "admin"
    assert admin.last_login is not None
    assert db.get_admin("admin").last_login == admin.last_login


def test_wrong_password_does_not_touch_state(db):
    assert db.authenticate_admin("admin", "wrong-password") is None
    assert db.authenticate_admin("nobody", "admin123") is None
    assert db.get_admin("admin").last_login is None


def test_inactive_admin_cannot_login(db, holder):
    with holder.lock:
        conn = holder.get_connection()
        conn.execute("UPDATE admin_table SET status = ? WHERE username = ?", (INACTIVE_STATUS, "admin"))
        conn.commit()
    assert db.authenticate_admin("admin", "admin123") is None


def test_legacy_sha256_hash_accepted(db, holder):
    legacy = hashlib.sha256(b"oldpass1").hexdigest()
    with holder.lock:
        conn = holder.get_connection()
        conn.execute(
            "INSERT INTO admin_table (username, password_hash, status) VALUES (?, ?, ?)",
            ("oldtimer", legacy, ACTIVE_STATUS),
        )
        conn.commit()
    assert db.authenticate_admin("oldtimer", "oldpass1") is not None
    assert db.authenticate_admin("oldtimer", "oldpass2") is None


def test_create_admin(db):
    res = db.create_admin("frontdesk", "s3cret!!")
    assert res
    assert db.authenticate_admin("frontdesk", "s3cret!!") is not None

    dup = db.create_admin("frontdesk", "another1")
    assert dup.error == ERR_DUPLICATE
    assert db.create_admin("x", "short").error == ERR_INVALID


def test_password_hashing():
    hashed = hash_password("admin123")
    assert hashed.startswith("$2")
    assert verify_password("admin123", hashed)
    assert not verify_password("admin124", hashed)
    assert not verify_password("", hashed)
    assert not verify_password("admin123", "")


def test_init_db_and_reconnect(holder, make_book):
    db = init_db(holder)
    db.add_book(make_book())
    holder.close()
    # next call re-opens the same file
    assert LibraryDatabase(holder).get_total_books() == 1


def test_search_treats_wildcards_literally(db, make_book, make_staff):
    db.add_book(make_book())
    db.add_book(make_book(title="Dune", author="Frank Herbert", isbn="9780441013593"))
    db.add_book(make_book(title="100% Python", author="Guido", isbn="9780000000017"))
    db.add_book(make_book(title="snake_case Handbook", author="Pep Eight", isbn="9780000000024"))

    assert [b.title for b in db.search_books("%")] == ["100% Python"]
    assert [b.title for b in db.search_books("_")] == ["snake_case Handbook"]
    assert db.search_books("\\") == []

    db.add_staff(make_staff())
    db.add_staff(make_staff(name="Grace Hopper", role="Archivist", email="g_hopper@navy.mil", phone=None))
    assert [s.name for s in db.search_staff("_")] == ["Grace Hopper"]
    assert db.search_staff("%") == []


def test_unseedable_default_admin_is_logged(holder, monkeypatch, caplog):
    from librarydesk.config import settings

    monkeypatch.setattr(settings, "default_admin_password", "123")
    db = LibraryDatabase(holder)
    with caplog.at_level(logging.ERROR, logger="librarydesk.database"):
        db.init_schema()

    assert db.count_admins() == 0
    assert any(
        r.levelno == logging.ERROR and "LIBRARY_DEFAULT_ADMIN_PASSWORD" in r.getMessage()
        for r in caplog.records
    )


def test_quantity_above_limit_rejected(db, make_book):
    res = db.add_book(make_book(quantity=MAX_QUANTITY + 1))
    assert res.error == ERR_INVALID
    assert db.get_total_books() == 0
