# dialogs.py
"""
Modal add/edit forms for books and staff.

Each dialog validates its fields and, on Save, leaves a populated record in
`self.result`; the caller blocks on `show()` and persists the record itself.
"""

import tkinter as tk
from datetime import date
from tkinter import Toplevel, messagebox

import customtkinter as ctk

from .constants import (
    ACTIVE_STATUS,
    BOOK_DIALOG_SIZE,
    DATE_FMT,
    DEFAULT_BOOK_QUANTITY,
    MAX_NAME_LENGTH,
    MAX_QUANTITY,
    MAX_TITLE_LENGTH,
    PALETTE,
    STAFF_DIALOG_SIZE,
    STAFF_STATUSES,
)
from .models import Book, Staff, format_date, parse_date
from .validation import (
    clean_isbn,
    is_future_date,
    is_not_empty,
    is_valid_email,
    is_valid_isbn,
    is_valid_phone,
    quantity_error,
    sanitize_input,
)
from .widgets import center_window


class _RecordDialog:
    size = "400x300"

    def __init__(self, parent, title):
        self.parent = parent
        self.result = None

        self.win = Toplevel(parent)
        self.win.title(title)
        self.win.geometry(self.size)
        self.win.resizable(False, False)
        self.win.transient(parent)
        self.win.protocol("WM_DELETE_WINDOW", self.cancel)

        self.form = ctk.CTkFrame(self.win)
        self.form.pack(fill="both", expand=True, padx=16, pady=(16, 6))
        self.form.grid_columnconfigure(1, weight=1)
        self._row = 0

    def add_field(self, label, widget_factory):
        ctk.CTkLabel(self.form, text=label).grid(row=self._row, column=0, sticky="w", padx=6, pady=6)
        widget = widget_factory(self.form)
        widget.grid(row=self._row, column=1, sticky="ew", padx=6, pady=6)
        self._row += 1
        return widget

    def finish_layout(self):
        ctk.CTkLabel(self.form, text="* Required fields", font=("Arial", 10, "italic"),
                     text_color="gray").grid(row=self._row, column=0, columnspan=2, sticky="w", padx=6)
        btns = ctk.CTkFrame(self.win, fg_color="transparent")
        btns.pack(pady=(4, 12))
        ctk.CTkButton(btns, text="Save", width=90, fg_color=PALETTE["success"], command=self.save).pack(side="left", padx=6)
        ctk.CTkButton(btns, text="Cancel", width=90, command=self.cancel).pack(side="left", padx=6)
        self.win.bind("<Return>", lambda e: self.save())
        self.win.bind("<Escape>", lambda e: self.cancel())
        center_window(self.win, self.parent)

    def show_error(self, message, widget=None):
        messagebox.showerror("Validation Error", message, parent=self.win)
        if widget is not None:
            widget.focus_set()

    def show(self):
        self.win.grab_set()
        self.win.wait_window()
        return self.result

    def save(self):
        record = self.collect()
        if record is not None:
            self.result = record
            self.close()

    def collect(self):
        raise NotImplementedError

    def cancel(self):
        self.result = None
        self.close()

    def close(self):
        self.win.grab_release()
        self.win.destroy()


class BookDialog(_RecordDialog):
    size = BOOK_DIALOG_SIZE

    def __init__(self, parent, title, book=None):
        super().__init__(parent, title)
        self.book = book

        self.title_var = tk.StringVar(value=book.title if book else "")
        self.author_var = tk.StringVar(value=book.author if book else "")
        self.isbn_var = tk.StringVar(value=book.isbn if book else "")
        self.quantity_var = tk.StringVar(value=str(book.quantity if book else DEFAULT_BOOK_QUANTITY))

        self.title_entry = self.add_field("Title:*", lambda f: ctk.CTkEntry(f, textvariable=self.title_var))
        self.author_entry = self.add_field("Author:*", lambda f: ctk.CTkEntry(f, textvariable=self.author_var))
        self.isbn_entry = self.add_field("ISBN:*", lambda f: ctk.CTkEntry(f, textvariable=self.isbn_var))
        self.quantity_spin = self.add_field(
            "Quantity:*",
            lambda f: tk.Spinbox(f, from_=0, to=MAX_QUANTITY, textvariable=self.quantity_var, width=8),
        )
        self.finish_layout()
        self.title_entry.focus_set()

    def collect(self):
        title = sanitize_input(self.title_var.get())
        author = sanitize_input(self.author_var.get())
        isbn = sanitize_input(self.isbn_var.get())
        quantity = self.quantity_var.get().strip()

        if not is_not_empty(title):
            self.show_error("Title is required.", self.title_entry)
            return None
        if len(title) > MAX_TITLE_LENGTH:
            self.show_error(f"Title must be at most {MAX_TITLE_LENGTH} characters.", self.title_entry)
            return None
        if not is_not_empty(author):
            self.show_error("Author is required.", self.author_entry)
            return None
        if len(author) > MAX_NAME_LENGTH:
            self.show_error(f"Author must be at most {MAX_NAME_LENGTH} characters.", self.author_entry)
            return None
        if not is_valid_isbn(isbn):
            self.show_error("Please enter a valid ISBN (10-13 digits).", self.isbn_entry)
            return None
        problem = quantity_error(quantity)
        if problem:
            self.show_error(problem, self.quantity_spin)
            return None

        return Book(
            book_id=self.book.book_id if self.book else None,
            title=title,
            author=author,
            isbn=clean_isbn(isbn),
            quantity=int(quantity),
        )


class StaffDialog(_RecordDialog):
    size = STAFF_DIALOG_SIZE

    def __init__(self, parent, title, staff=None):
        super().__init__(parent, title)
        self.staff = staff

        self.name_var = tk.StringVar(value=staff.name if staff else "")
        self.role_var = tk.StringVar(value=staff.role if staff else "")
        self.hire_var = tk.StringVar(value=format_date(staff.hire_date) if staff and staff.hire_date
                                     else date.today().strftime(DATE_FMT))
        self.email_var = tk.StringVar(value=(staff.email or "") if staff else "")
        self.phone_var = tk.StringVar(value=(staff.phone or "") if staff else "")
        self.status_var = tk.StringVar(value=staff.status if staff else ACTIVE_STATUS)

        self.name_entry = self.add_field("Name:*", lambda f: ctk.CTkEntry(f, textvariable=self.name_var))
        self.role_entry = self.add_field("Role:*", lambda f: ctk.CTkEntry(f, textvariable=self.role_var))
        self.hire_entry = self.add_field(
            "Hire Date (YYYY-MM-DD):*", lambda f: ctk.CTkEntry(f, textvariable=self.hire_var)
        )
        self.email_entry = self.add_field("Email:", lambda f: ctk.CTkEntry(f, textvariable=self.email_var))
        self.phone_entry = self.add_field("Phone:", lambda f: ctk.CTkEntry(f, textvariable=self.phone_var))
        # new staff always start ACTIVE, so status is only editable on existing rows
        if staff is not None:
            self.add_field(
                "Status:",
                lambda f: ctk.CTkOptionMenu(f, values=list(STAFF_STATUSES), variable=self.status_var),
            )
        self.finish_layout()
        self.name_entry.focus_set()

    def collect(self):
        name = sanitize_input(self.name_var.get())
        role = sanitize_input(self.role_var.get())
        hire_text = self.hire_var.get().strip()
        email = sanitize_input(self.email_var.get())
        phone = sanitize_input(self.phone_var.get())

        if not is_not_empty(name):
            self.show_error("Name is required.", self.name_entry)
            return None
        if len(name) > MAX_NAME_LENGTH:
            self.show_error(f"Name must be at most {MAX_NAME_LENGTH} characters.", self.name_entry)
            return None
        if not is_not_empty(role):
            self.show_error("Role is required.", self.role_entry)
            return None
        hire_date = parse_date(hire_text)
        if hire_date is None:
            self.show_error("Hire date is required (YYYY-MM-DD).", self.hire_entry)
            return None
        if is_future_date(hire_date):
            self.show_error("Hire date cannot be in the future.", self.hire_entry)
            return None
        if email and not is_valid_email(email):
            self.show_error("Please enter a valid email address.", self.email_entry)
            return None
        if phone and not is_valid_phone(phone):
            self.show_error("Please enter a valid phone number.", self.phone_entry)
            return None

        return Staff(
            staff_id=self.staff.staff_id if self.staff else None,
            name=name,
            role=role,
            hire_date=hire_date,
            email=email or None,
            phone=phone or None,
            status=self.status_var.get(),
        )
