# database.py
"""
SQLite data layer for the library desk.

ConnectionHolder keeps one live connection and re-opens it when it has been
closed. LibraryDatabase issues one parameterized statement per operation
against that connection; failures are logged and turned into sentinel
results (None, [], 0, or a falsy OperationResult) instead of propagating.
The one exception is DatabaseUnavailable, raised when no connection can be
opened at all.
"""

import hashlib
import hmac
import logging
import os
import sqlite3
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

import bcrypt

from .config import settings
from .constants import (
    ACTIVE_STATUS,
    AVAILABLE_STATUS,
    DATETIME_FMT,
    INACTIVE_STATUS,
    MIN_PASSWORD_LENGTH,
    OUT_OF_STOCK_STATUS,
    STAFF_STATUSES,
)
from .models import Admin, Book, Staff, derive_book_status, format_date
from .validation import (
    clean_isbn,
    is_not_empty,
    is_valid_book,
    is_valid_password,
    is_valid_staff,
    is_valid_username,
    sanitize_input,
)

logger = logging.getLogger(__name__)


class LibraryError(Exception):
    pass


class DatabaseUnavailable(LibraryError):
    """The database file could not be opened."""


# error kinds carried by OperationResult
ERR_INVALID = "invalid"
ERR_DUPLICATE = "duplicate"
ERR_NOT_FOUND = "not_found"
ERR_DATABASE = "database"


@dataclass
class OperationResult:
    success: bool
    message: str = ""
    error: Optional[str] = None
    row_id: Optional[int] = None

    def __bool__(self):
        return self.success

    @classmethod
    def ok(cls, message, row_id=None):
        return cls(True, message, None, row_id)

    @classmethod
    def fail(cls, error, message):
        return cls(False, message, error)


def _now_str():
    return datetime.now().strftime(DATETIME_FMT)


def _like_pattern(term: str) -> str:
    # % and _ in user input match literally
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


# ---------------- password hashing ----------------
def hash_password(password_plain: str) -> str:
    return bcrypt.hashpw(password_plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password_plain: str, stored_hash: str) -> bool:
    if not password_plain or not stored_hash:
        return False
    if stored_hash.startswith("$2"):
        try:
            return bcrypt.checkpw(password_plain.encode("utf-8"), stored_hash.encode("utf-8"))
        except ValueError:
            logger.warning("Malformed bcrypt hash in admin_table")
            return False
    # rows imported from the old schema hold a single unsalted SHA-256 hex digest
    digest = hashlib.sha256(password_plain.encode("utf-8")).hexdigest()
    return hmac.compare_digest(digest, stored_hash.strip().lower())


# ---------------- connection ----------------
class ConnectionHolder:
    """Owns the single shared connection. Re-opens it when found closed."""

    def __init__(self, db_path: str, timeout: float = 30.0):
        self.db_path = db_path
        self.timeout = timeout
        self.lock = threading.RLock()
        self._connection: Optional[sqlite3.Connection] = None

    @staticmethod
    def _is_open(conn) -> bool:
        if conn is None:
            return False
        try:
            # reads the file header, so a corrupt or foreign file fails here
            conn.execute("PRAGMA schema_version")
        except sqlite3.Error:
            return False
        return True

    def _open(self) -> sqlite3.Connection:
        db_dir = os.path.dirname(os.path.abspath(self.db_path))
        try:
            os.makedirs(db_dir, exist_ok=True)
            conn = sqlite3.connect(self.db_path, timeout=self.timeout, check_same_thread=False)
        except (sqlite3.Error, OSError) as e:
            logger.critical("Failed to open database %s: %s", self.db_path, e)
            raise DatabaseUnavailable(f"Could not open database at {self.db_path}") from e
        try:
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys = ON")
            conn.execute("PRAGMA schema_version")
        except sqlite3.Error as e:
            conn.close()
            logger.critical("Database %s is unreadable: %s", self.db_path, e)
            raise DatabaseUnavailable(f"{self.db_path} is not a readable SQLite database") from e
        return conn

    def get_connection(self) -> sqlite3.Connection:
        with self.lock:
            if not self._is_open(self._connection):
                reopening = self._connection is not None
                if reopening:
                    self._connection.close()
                self._connection = self._open()
                if reopening:
                    logger.info("Database connection reestablished: %s", self.db_path)
                else:
                    logger.info("Database connection established: %s", self.db_path)
            return self._connection

    def test_connection(self) -> bool:
        try:
            return self._is_open(self.get_connection())
        except DatabaseUnavailable:
            logger.warning("Connection test failed for %s", self.db_path)
            return False

    def close(self):
        with self.lock:
            if self._connection is not None:
                try:
                    self._connection.close()
                    logger.info("Database connection closed")
                except sqlite3.Error as e:
                    logger.warning("Failed to close database connection: %s", e)
                self._connection = None

    def connection_status(self) -> str:
        with self.lock:
            if self._is_open(self._connection):
                return f"Connected to: {os.path.abspath(self.db_path)}"
            return "Not connected"


_default_holder: Optional[ConnectionHolder] = None
_default_lock = threading.Lock()


def get_default_holder() -> ConnectionHolder:
    global _default_holder
    with _default_lock:
        if _default_holder is None:
            _default_holder = ConnectionHolder(settings.db_path, settings.db_timeout)
        return _default_holder


# ---------------- schema ----------------
SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS admin_table (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        username TEXT UNIQUE NOT NULL,
        password_hash TEXT NOT NULL,
        created_date TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        last_login TIMESTAMP,
        status TEXT NOT NULL DEFAULT 'ACTIVE'
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS books_table (
        book_id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        author TEXT NOT NULL,
        isbn TEXT UNIQUE NOT NULL,
        quantity INTEGER NOT NULL DEFAULT 1 CHECK (quantity >= 0),
        date_added TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        status TEXT NOT NULL DEFAULT 'AVAILABLE'
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS staff_table (
        staff_id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        role TEXT NOT NULL,
        hire_date TEXT NOT NULL,
        status TEXT NOT NULL DEFAULT 'ACTIVE',
        email TEXT,
        phone TEXT
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_books_title ON books_table(title)",
    "CREATE INDEX IF NOT EXISTS idx_staff_name ON staff_table(name)",
)


class LibraryDatabase:
    def __init__(self, holder: Optional[ConnectionHolder] = None):
        self.holder = holder or get_default_holder()

    def _execute(self, sql, params=()):
        with self.holder.lock:
            conn = self.holder.get_connection()
            try:
                cur = conn.execute(sql, params)
                conn.commit()
            except sqlite3.Error:
                conn.rollback()
                raise
            return cur

    def _fetchall(self, sql, params=()):
        with self.holder.lock:
            return self.holder.get_connection().execute(sql, params).fetchall()

    def _fetchone(self, sql, params=()):
        with self.holder.lock:
            return self.holder.get_connection().execute(sql, params).fetchone()

    def init_schema(self, seed_admin=True):
        """Create missing tables. Raises DatabaseUnavailable if the file cannot hold them."""
        with self.holder.lock:
            conn = self.holder.get_connection()
            try:
                for statement in SCHEMA:
                    conn.execute(statement)
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                logger.exception("Could not create schema in %s", self.holder.db_path)
                raise DatabaseUnavailable(f"Could not create tables in {self.holder.db_path}") from e
        logger.info("Schema ready in %s", self.holder.db_path)
        if seed_admin:
            self.ensure_default_admin()

    # ---------------- admin (auth) ----------------
    def authenticate_admin(self, username: str, password: str) -> Optional[Admin]:
        # lookup and last-login touch happen under one lock hold, so two logins
        # for the same account are serialized
        with self.holder.lock:
            try:
                row = self._fetchone(
                    "SELECT * FROM admin_table WHERE username = ? AND status = ?",
                    (username, ACTIVE_STATUS),
                )
            except sqlite3.Error:
                logger.exception("Error authenticating admin: %s", username)
                return None

            if row is None or not verify_password(password, row["password_hash"]):
                logger.warning("Authentication failed for user: %s", username)
                return None

            admin = Admin.from_row(row)
            touched_at = datetime.now().replace(microsecond=0)
            if self.update_last_login(admin.id, touched_at):
                admin.last_login = touched_at
        logger.info("Admin authenticated successfully: %s", username)
        return admin

    def update_last_login(self, admin_id: int, when: Optional[datetime] = None) -> bool:
        stamp = (when or datetime.now()).strftime(DATETIME_FMT)
        try:
            cur = self._execute("UPDATE admin_table SET last_login = ? WHERE id = ?", (stamp, admin_id))
        except sqlite3.Error:
            logger.warning("Failed to update last login for admin ID: %s", admin_id, exc_info=True)
            return False
        return cur.rowcount > 0

    def get_admin(self, username: str) -> Optional[Admin]:
        try:
            row = self._fetchone("SELECT * FROM admin_table WHERE username = ?", (username,))
        except sqlite3.Error:
            logger.exception("Error loading admin: %s", username)
            return None
        return Admin.from_row(row) if row else None

    def create_admin(self, username: str, password: str) -> OperationResult:
        if not is_valid_username(username) or not is_valid_password(password):
            logger.warning("Invalid admin data provided for: %s", username)
            return OperationResult.fail(ERR_INVALID, "Invalid username or password.")
        try:
            cur = self._execute(
                "INSERT INTO admin_table (username, password_hash, created_date, status) VALUES (?, ?, ?, ?)",
                (username, hash_password(password), _now_str(), ACTIVE_STATUS),
            )
        except sqlite3.IntegrityError:
            logger.warning("Admin %s already exists", username)
            return OperationResult.fail(ERR_DUPLICATE, f"Admin '{username}' already exists.")
        except sqlite3.Error:
            logger.exception("Error creating admin: %s", username)
            return OperationResult.fail(ERR_DATABASE, "Could not create admin.")
        logger.info("Admin created: %s", username)
        return OperationResult.ok(f"Admin '{username}' created.", cur.lastrowid)

    def count_admins(self) -> int:
        try:
            row = self._fetchone("SELECT COUNT(*) AS total FROM admin_table")
        except sqlite3.Error:
            logger.exception("Error counting admins")
            return 0
        return row["total"] if row else 0

    def ensure_default_admin(self):
        if self.count_admins() == 0:
            res = self.create_admin(settings.default_admin_username, settings.default_admin_password)
            if res:
                logger.info("Seeded default admin '%s'", settings.default_admin_username)
            else:
                logger.error(
                    "Could not seed default admin '%s': %s Check LIBRARY_DEFAULT_ADMIN and "
                    "LIBRARY_DEFAULT_ADMIN_PASSWORD (at least %d characters).",
                    settings.default_admin_username, res.message, MIN_PASSWORD_LENGTH,
                )
            return res
        return None

    # ---------------- books ----------------
    def get_all_books(self) -> List[Book]:
        try:
            rows = self._fetchall("SELECT * FROM books_table ORDER BY title")
        except sqlite3.Error:
            logger.exception("Error retrieving books from database")
            return []
        logger.info("Retrieved %d books from database", len(rows))
        return [Book.from_row(r) for r in rows]

    def get_book(self, book_id: int) -> Optional[Book]:
        try:
            row = self._fetchone("SELECT * FROM books_table WHERE book_id = ?", (book_id,))
        except sqlite3.Error:
            logger.exception("Error loading book with ID: %s", book_id)
            return None
        return Book.from_row(row) if row else None

    def add_book(self, book: Book) -> OperationResult:
        if not is_valid_book(book):
            logger.warning("Invalid book data provided")
            return OperationResult.fail(ERR_INVALID, "Invalid book data.")
        isbn = clean_isbn(book.isbn)
        status = derive_book_status(book.quantity)
        added = datetime.now().replace(microsecond=0)
        try:
            cur = self._execute(
                "INSERT INTO books_table (title, author, isbn, quantity, date_added, status) VALUES (?, ?, ?, ?, ?, ?)",
                (book.title, book.author, isbn, book.quantity, added.strftime(DATETIME_FMT), status),
            )
        except sqlite3.IntegrityError:
            logger.warning("Book with ISBN %s already exists", isbn)
            return OperationResult.fail(ERR_DUPLICATE, f"A book with ISBN {isbn} already exists.")
        except sqlite3.Error:
            logger.exception("Error adding book: %s", book.title)
            return OperationResult.fail(ERR_DATABASE, "Failed to add book.")
        book.book_id, book.isbn, book.status, book.date_added = cur.lastrowid, isbn, status, added
        logger.info("Book added successfully: %s", book.title)
        return OperationResult.ok("Book added successfully!", cur.lastrowid)

    def update_book(self, book: Book) -> OperationResult:
        if not is_valid_book(book) or book.book_id is None:
            logger.warning("Invalid book data provided for update")
            return OperationResult.fail(ERR_INVALID, "Invalid book data.")
        isbn = clean_isbn(book.isbn)
        status = derive_book_status(book.quantity)
        try:
            cur = self._execute(
                "UPDATE books_table SET title = ?, author = ?, isbn = ?, quantity = ?, status = ? WHERE book_id = ?",
                (book.title, book.author, isbn, book.quantity, status, book.book_id),
            )
        except sqlite3.IntegrityError:
            logger.warning("Book with ISBN %s already exists", isbn)
            return OperationResult.fail(ERR_DUPLICATE, f"A book with ISBN {isbn} already exists.")
        except sqlite3.Error:
            logger.exception("Error updating book: %s", book.title)
            return OperationResult.fail(ERR_DATABASE, "Failed to update book.")
        if cur.rowcount == 0:
            logger.warning("No book with ID %s to update", book.book_id)
            return OperationResult.fail(ERR_NOT_FOUND, "Book not found.")
        book.isbn, book.status = isbn, status
        logger.info("Book updated successfully: %s", book.title)
        return OperationResult.ok("Book updated successfully!", book.book_id)

    def delete_book(self, book_id: int) -> OperationResult:
        try:
            cur = self._execute("DELETE FROM books_table WHERE book_id = ?", (book_id,))
        except sqlite3.Error:
            logger.exception("Error deleting book with ID: %s", book_id)
            return OperationResult.fail(ERR_DATABASE, "Failed to delete book.")
        if cur.rowcount == 0:
            logger.warning("No book with ID %s to delete", book_id)
            return OperationResult.fail(ERR_NOT_FOUND, "Book not found.")
        logger.info("Book deleted successfully with ID: %s", book_id)
        return OperationResult.ok("Book deleted successfully!", book_id)

    def search_books(self, search_term: str) -> List[Book]:
        if not is_not_empty(search_term):
            return self.get_all_books()
        pattern = _like_pattern(sanitize_input(search_term))
        try:
            rows = self._fetchall(
                "SELECT * FROM books_table WHERE title LIKE ? ESCAPE '\\' OR author LIKE ? ESCAPE '\\' "
                "OR isbn LIKE ? ESCAPE '\\' ORDER BY title",
                (pattern, pattern, pattern),
            )
        except sqlite3.Error:
            logger.exception("Error searching books")
            return []
        logger.info("Found %d books matching search term: %s", len(rows), search_term)
        return [Book.from_row(r) for r in rows]

    def get_total_books(self) -> int:
        try:
            row = self._fetchone("SELECT COUNT(*) AS total FROM books_table")
        except sqlite3.Error:
            logger.exception("Error getting total book count")
            return 0
        return row["total"] if row else 0

    def count_books_by_status(self) -> Dict[str, int]:
        counts = {AVAILABLE_STATUS: 0, OUT_OF_STOCK_STATUS: 0}
        try:
            rows = self._fetchall("SELECT status, COUNT(*) AS cnt FROM books_table GROUP BY status")
        except sqlite3.Error:
            logger.exception("Error counting books by status")
            return counts
        for r in rows:
            counts[r["status"]] = r["cnt"]
        return counts

    # ---------------- staff ----------------
    def get_all_staff(self) -> List[Staff]:
        try:
            rows = self._fetchall("SELECT * FROM staff_table ORDER BY name")
        except sqlite3.Error:
            logger.exception("Error retrieving staff from database")
            return []
        logger.info("Retrieved %d staff members from database", len(rows))
        return [Staff.from_row(r) for r in rows]

    def get_staff(self, staff_id: int) -> Optional[Staff]:
        try:
            row = self._fetchone("SELECT * FROM staff_table WHERE staff_id = ?", (staff_id,))
        except sqlite3.Error:
            logger.exception("Error loading staff member with ID: %s", staff_id)
            return None
        return Staff.from_row(row) if row else None

    def add_staff(self, staff: Staff) -> OperationResult:
        if not is_valid_staff(staff):
            logger.warning("Invalid staff data provided")
            return OperationResult.fail(ERR_INVALID, "Invalid staff data.")
        try:
            cur = self._execute(
                "INSERT INTO staff_table (name, role, hire_date, status, email, phone) VALUES (?, ?, ?, ?, ?, ?)",
                (staff.name, staff.role, format_date(staff.hire_date), ACTIVE_STATUS,
                 staff.email or None, staff.phone or None),
            )
        except sqlite3.Error:
            logger.exception("Error adding staff member: %s", staff.name)
            return OperationResult.fail(ERR_DATABASE, "Failed to add staff member.")
        staff.staff_id, staff.status = cur.lastrowid, ACTIVE_STATUS
        logger.info("Staff member added successfully: %s", staff.name)
        return OperationResult.ok("Staff member added successfully!", cur.lastrowid)

    def update_staff(self, staff: Staff) -> OperationResult:
        if not is_valid_staff(staff) or staff.staff_id is None:
            logger.warning("Invalid staff data provided for update")
            return OperationResult.fail(ERR_INVALID, "Invalid staff data.")
        status = staff.status or ACTIVE_STATUS
        if status not in STAFF_STATUSES:
            logger.warning("Unknown staff status %r", status)
            return OperationResult.fail(ERR_INVALID, f"Status must be {ACTIVE_STATUS} or {INACTIVE_STATUS}.")
        try:
            cur = self._execute(
                "UPDATE staff_table SET name = ?, role = ?, hire_date = ?, status = ?, email = ?, phone = ? "
                "WHERE staff_id = ?",
                (staff.name, staff.role, format_date(staff.hire_date), status,
                 staff.email or None, staff.phone or None, staff.staff_id),
            )
        except sqlite3.Error:
            logger.exception("Error updating staff member: %s", staff.name)
            return OperationResult.fail(ERR_DATABASE, "Failed to update staff member.")
        if cur.rowcount == 0:
            logger.warning("No staff member with ID %s to update", staff.staff_id)
            return OperationResult.fail(ERR_NOT_FOUND, "Staff member not found.")
        logger.info("Staff member updated successfully: %s", staff.name)
        return OperationResult.ok("Staff member updated successfully!", staff.staff_id)

    def delete_staff(self, staff_id: int) -> OperationResult:
        try:
            cur = self._execute("DELETE FROM staff_table WHERE staff_id = ?", (staff_id,))
        except sqlite3.Error:
            logger.exception("Error deleting staff member with ID: %s", staff_id)
            return OperationResult.fail(ERR_DATABASE, "Failed to delete staff member.")
        if cur.rowcount == 0:
            logger.warning("No staff member with ID %s to delete", staff_id)
            return OperationResult.fail(ERR_NOT_FOUND, "Staff member not found.")
        logger.info("Staff member deleted successfully with ID: %s", staff_id)
        return OperationResult.ok("Staff member deleted successfully!", staff_id)

    def search_staff(self, search_term: str) -> List[Staff]:
        if not is_not_empty(search_term):
            return self.get_all_staff()
        pattern = _like_pattern(sanitize_input(search_term))
        try:
            rows = self._fetchall(
                "SELECT * FROM staff_table WHERE name LIKE ? ESCAPE '\\' OR role LIKE ? ESCAPE '\\' "
                "OR email LIKE ? ESCAPE '\\' ORDER BY name",
                (pattern, pattern, pattern),
            )
        except sqlite3.Error:
            logger.exception("Error searching staff")
            return []
        logger.info("Found %d staff members matching search term: %s", len(rows), search_term)
        return [Staff.from_row(r) for r in rows]

    def get_total_staff(self) -> int:
        try:
            row = self._fetchone("SELECT COUNT(*) AS total FROM staff_table WHERE status = ?", (ACTIVE_STATUS,))
        except sqlite3.Error:
            logger.exception("Error getting total staff count")
            return 0
        return row["total"] if row else 0

    def count_staff_by_status(self) -> Dict[str, int]:
        counts = {ACTIVE_STATUS: 0, INACTIVE_STATUS: 0}
        try:
            rows = self._fetchall("SELECT status, COUNT(*) AS cnt FROM staff_table GROUP BY status")
        except sqlite3.Error:
            logger.exception("Error counting staff by status")
            return counts
        for r in rows:
            counts[r["status"]] = r["cnt"]
        return counts


def init_db(holder: Optional[ConnectionHolder] = None) -> LibraryDatabase:
    db = LibraryDatabase(holder)
    db.init_schema()
    return db
