# main.py
"""
Entry point: logging, connection check, schema, then the login window. The
dashboard replaces the login once an admin has signed in.
"""

import logging
import sys
from tkinter import messagebox

import customtkinter as ctk

from .config import settings
from .constants import CONNECTION_ERROR_MSG, MIN_PASSWORD_LENGTH
from .dashboard import MainDashboard
from .database import ConnectionHolder, DatabaseUnavailable, LibraryDatabase
from .logging_setup import configure_logging
from .login import LoginWindow
from .widgets import apply_theme

logger = logging.getLogger(__name__)


def _connection_help(db_path):
    return (
        f"{CONNECTION_ERROR_MSG}\n\n"
        "Please check:\n"
        f"1. The database path is correct: {db_path}\n"
        "2. The folder exists and is writable\n"
        "3. The file is not locked by another program\n"
        "4. The file is a SQLite database and not damaged\n"
        "5. LIBRARY_DB_PATH in your .env file, if set"
    )


def _abort(root, holder, title, message):
    messagebox.showerror(title, message)
    holder.close()
    root.destroy()
    sys.exit(1)


def main():
    configure_logging(settings)
    logger.info("Starting %s %s", settings.app_name, settings.app_version)
    apply_theme(settings)

    root = ctk.CTk()
    root.withdraw()

    holder = ConnectionHolder(settings.db_path, settings.db_timeout)
    db = LibraryDatabase(holder)
    try:
        if not holder.test_connection():
            raise DatabaseUnavailable(f"Could not open database at {settings.db_path}")
        db.init_schema()
    except DatabaseUnavailable as e:
        logger.critical("Cannot start: %s", e)
        _abort(root, holder, "Database Connection Error", _connection_help(settings.db_path))

    if db.count_admins() == 0:
        logger.critical("Cannot start: admin_table is empty")
        _abort(root, holder, "No Admin Account",
               "No admin account exists and the default one could not be created.\n\n"
               "Set LIBRARY_DEFAULT_ADMIN and LIBRARY_DEFAULT_ADMIN_PASSWORD "
               f"(at least {MIN_PASSWORD_LENGTH} characters) and restart.")

    def on_login_success(admin):
        root.deiconify()
        MainDashboard(root, db, admin)

    LoginWindow(root, db, on_login_success)
    root.mainloop()
    holder.close()
    logger.info("Application closed")


if __name__ == "__main__":
    main()
