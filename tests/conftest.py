from datetime import date

import pytest

from librarydesk.database import ConnectionHolder, LibraryDatabase
from librarydesk.models import Book, Staff


@pytest.fixture
def holder(tmp_path, request):
    # one database file per test
    db_file = str(tmp_path / f"test_{request.node.name}.db")
    h = ConnectionHolder(db_file, timeout=5)
    yield h
    h.close()


@pytest.fixture
def db(holder):
    database = LibraryDatabase(holder)
    database.init_schema()
    return database


@pytest.fixture
def make_book():
    def _make(title="Clean Code", author="Robert C. Martin", isbn="9780132350884", quantity=3):
        return Book(title=title, author=author, isbn=isbn, quantity=quantity)
    return _make


@pytest.fixture
def make_staff():
    def _make(name="Ada Lovelace", role="Librarian", hire_date=date(2020, 5, 1),
              email="ada@example.com", phone="555-123-4567"):
        return Staff(name=name, role=role, hire_date=hire_date, email=email, phone=phone)
    return _make
