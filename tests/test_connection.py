import os

import pytest

from librarydesk.database import ConnectionHolder, DatabaseUnavailable, LibraryDatabase, LibraryError


def test_connection_is_reused(holder):
    first = holder.get_connection()
    assert holder.get_connection() is first


def test_reopens_after_close(holder):
    first = holder.get_connection()
    first.close()
    second = holder.get_connection()
    assert second is not first
    assert second.execute("SELECT 1").fetchone()[0] == 1


def test_connection_status(holder):
    assert holder.connection_status() == "Not connected"
    assert holder.test_connection()
    assert holder.connection_status() == f"Connected to: {os.path.abspath(holder.db_path)}"
    holder.close()
    assert holder.connection_status() == "Not connected"


def test_creates_missing_parent_folder(tmp_path):
    h = ConnectionHolder(str(tmp_path / "data" / "nested" / "library.db"))
    try:
        assert h.test_connection()
        assert (tmp_path / "data" / "nested").is_dir()
    finally:
        h.close()


def test_unopenable_path_raises(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("plain file")
    h = ConnectionHolder(str(blocker / "library.db"))

    with pytest.raises(DatabaseUnavailable):
        h.get_connection()
    assert issubclass(DatabaseUnavailable, LibraryError)
    assert h.test_connection() is False
    assert h.connection_status() == "Not connected"


def test_non_sqlite_file_fails_connection_test(tmp_path):
    junk = tmp_path / "library.db"
    junk.write_bytes(b"this is not a sqlite database, just some bytes\n" * 20)
    h = ConnectionHolder(str(junk))

    assert h.test_connection() is False
    assert h.connection_status() == "Not connected"
    with pytest.raises(DatabaseUnavailable):
        LibraryDatabase(h).init_schema()
