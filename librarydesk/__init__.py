"""Desktop library management: books, staff and admin login over SQLite."""

__version__ = "1.0.0"
