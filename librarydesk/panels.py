# panels.py
"""
List/detail panels for books and staff.

Every database call runs on a worker thread; the table is reloaded after any
mutation that succeeds. Edit and Delete stay disabled until a row is selected.
"""

import logging
from tkinter import messagebox

import customtkinter as ctk

from .constants import (
    BOOK_COLUMNS,
    BOOK_HEADINGS,
    OPERATION_FAILED_MSG,
    OPERATION_SUCCESS_MSG,
    PALETTE,
    STAFF_COLUMNS,
    STAFF_HEADINGS,
)
from .dialogs import BookDialog, StaffDialog
from .widgets import HEADER_FONT, fill_tree, make_tree, set_enabled
from .worker import run_in_background

logger = logging.getLogger(__name__)


class RecordPanel(ctk.CTkFrame):
    heading = ""
    noun = "record"
    plural = "records"
    columns = ()
    headings = ()

    def __init__(self, master, db, set_status=None, on_change=None):
        super().__init__(master)
        self.db = db
        self.set_status = set_status or (lambda msg: None)
        self.on_change = on_change or (lambda: None)
        self.records = {}

        ctk.CTkLabel(self, text=self.heading, font=HEADER_FONT).pack(pady=8)

        bar = ctk.CTkFrame(self)
        bar.pack(fill="x", padx=12, pady=6)
        ctk.CTkLabel(bar, text="Search:").pack(side="left", padx=(8, 4))
        self.search_var = ctk.StringVar()
        self.search_entry = ctk.CTkEntry(bar, textvariable=self.search_var, width=260)
        self.search_entry.pack(side="left", padx=4)
        self.search_entry.bind("<Return>", lambda e: self.perform_search())
        ctk.CTkButton(bar, text="Search", width=90, command=self.perform_search).pack(side="left", padx=4)

        self.refresh_btn = ctk.CTkButton(bar, text="Refresh", width=100, command=self.refresh_data)
        self.refresh_btn.pack(side="right", padx=4)
        self.delete_btn = ctk.CTkButton(bar, text=f"Delete {self.noun.title()}", width=120,
                                        fg_color=PALETTE["danger"], command=self.delete_selected)
        self.delete_btn.pack(side="right", padx=4)
        self.edit_btn = ctk.CTkButton(bar, text=f"Edit {self.noun.title()}", width=120,
                                      fg_color=PALETTE["warning"], command=self.edit_selected)
        self.edit_btn.pack(side="right", padx=4)
        self.add_btn = ctk.CTkButton(bar, text=f"Add {self.noun.title()}", width=120,
                                     fg_color=PALETTE["success"], command=self.show_add_dialog)
        self.add_btn.pack(side="right", padx=4)

        table_frame = ctk.CTkFrame(self)
        table_frame.pack(fill="both", expand=True, padx=12, pady=8)
        self.tree = make_tree(table_frame, self.columns, self.headings)
        self.tree.bind("<<TreeviewSelect>>", lambda e: self.update_buttons())
        self.tree.bind("<Double-1>", self.on_double_click)

        self.update_buttons()
        self.load()

    # ---------------- hooks for subclasses ----------------
    def fetch_all(self):
        raise NotImplementedError

    def fetch_matching(self, term):
        raise NotImplementedError

    def record_id(self, record):
        raise NotImplementedError

    def describe(self, record):
        raise NotImplementedError

    def open_dialog(self, title, record=None):
        raise NotImplementedError

    def insert_record(self, record):
        raise NotImplementedError

    def update_record(self, record):
        raise NotImplementedError

    def delete_record(self, record_id):
        raise NotImplementedError

    # ---------------- selection ----------------
    def selected_record(self):
        sel = self.tree.selection()
        if not sel:
            return None
        return self.records.get(sel[0])

    def update_buttons(self):
        has_selection = bool(self.tree.selection())
        set_enabled(self.edit_btn, has_selection)
        set_enabled(self.delete_btn, has_selection)

    def on_double_click(self, event):
        if self.tree.identify_row(event.y):
            self.edit_selected()

    # ---------------- loading ----------------
    def load(self):
        self._run(self.fetch_all, self.populate, f"Loading {self.plural}...")

    def perform_search(self):
        term = self.search_var.get().strip()
        if not term:
            self.load()
            return
        self._run(lambda: self.fetch_matching(term), self.populate, f"Searching {self.plural}...")

    def refresh_data(self):
        self.search_var.set("")
        self.load()

    def populate(self, records):
        self.records = {str(self.record_id(r)): r for r in records}
        fill_tree(self.tree, ((str(self.record_id(r)), r.as_row()) for r in records))
        self.update_buttons()
        self.set_status(f"{len(records)} {self.plural} shown")

    # ---------------- mutations ----------------
    def show_add_dialog(self):
        record = self.open_dialog(f"Add New {self.noun.title()}")
        if record is not None:
            self._mutate(lambda: self.insert_record(record))

    def edit_selected(self):
        current = self.selected_record()
        if current is None:
            return
        record = self.open_dialog(f"Edit {self.noun.title()}", current)
        if record is not None:
            self._mutate(lambda: self.update_record(record))

    def delete_selected(self):
        current = self.selected_record()
        if current is None:
            return
        if messagebox.askyesno("Confirm Delete",
                               f"Are you sure you want to delete the {self.noun}:\n\"{self.describe(current)}\"?",
                               icon="warning", parent=self):
            record_id = self.record_id(current)
            self._mutate(lambda: self.delete_record(record_id))

    def _mutate(self, fn):
        def done(result):
            if result:
                messagebox.showinfo("Success", result.message or OPERATION_SUCCESS_MSG, parent=self)
                self.load()
                self.on_change()
            else:
                messagebox.showerror("Error", result.message or OPERATION_FAILED_MSG, parent=self)
        self._run(fn, done, "Saving...")

    def _run(self, fn, on_done, status):
        self.set_status(status)

        def failed(exc):
            logger.error("%s panel task failed: %s", self.noun, exc)
            self.set_status("Database error")
            messagebox.showerror("Database Error", f"{OPERATION_FAILED_MSG}\n\n{exc}", parent=self)

        run_in_background(self.after, fn, on_done, failed, name=f"{self.noun}-panel")


class BookPanel(RecordPanel):
    heading = "Books Inventory"
    noun = "book"
    plural = "books"
    columns = BOOK_COLUMNS
    headings = BOOK_HEADINGS

    def fetch_all(self):
        return self.db.get_all_books()

    def fetch_matching(self, term):
        return self.db.search_books(term)

    def record_id(self, record):
        return record.book_id

    def describe(self, record):
        return record.title

    def open_dialog(self, title, record=None):
        return BookDialog(self.winfo_toplevel(), title, record).show()

    def insert_record(self, record):
        return self.db.add_book(record)

    def update_record(self, record):
        return self.db.update_book(record)

    def delete_record(self, record_id):
        return self.db.delete_book(record_id)


class StaffPanel(RecordPanel):
    heading = "Staff Members"
    noun = "staff"
    plural = "staff"
    columns = STAFF_COLUMNS
    headings = STAFF_HEADINGS

    def fetch_all(self):
        return self.db.get_all_staff()

    def fetch_matching(self, term):
        return self.db.search_staff(term)

    def record_id(self, record):
        return record.staff_id

    def describe(self, record):
        return record.name

    def open_dialog(self, title, record=None):
        return StaffDialog(self.winfo_toplevel(), title, record).show()

    def insert_record(self, record):
        return self.db.add_staff(record)

    def update_record(self, record):
        return self.db.update_staff(record)

    def delete_record(self, record_id):
        return self.db.delete_staff(record_id)
