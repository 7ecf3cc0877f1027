# dashboard.py
"""
Main window shown after login: sidebar navigation, menu bar, a dashboard page
(stat cards, status chart, quick actions), the book and staff panels, and a
status bar with the signed-in user and a clock.
"""

import logging
import tkinter as tk
from datetime import datetime
from tkinter import messagebox

import customtkinter as ctk
import matplotlib

matplotlib.use("TkAgg")
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg
from matplotlib.figure import Figure

from .config import settings
from .constants import (
    ACTIVE_STATUS,
    AVAILABLE_STATUS,
    DATETIME_FMT,
    INACTIVE_STATUS,
    OUT_OF_STOCK_STATUS,
    PALETTE,
    STATUS_LABELS,
    WINDOW_SIZE,
)
from .panels import BookPanel, StaffPanel
from .widgets import HEADER_FONT, TITLE_FONT
from .worker import run_in_background

logger = logging.getLogger(__name__)

PAGES = (("Dashboard", "dashboard"), ("Books", "books"), ("Staff", "staff"))


class MainDashboard:
    def __init__(self, root, db, admin):
        self.root = root
        self.db = db
        self.admin = admin
        self._clock_job = None

        self.root.title(f"{settings.app_name} - Dashboard")
        self.root.geometry(WINDOW_SIZE)
        self.root.protocol("WM_DELETE_WINDOW", self.exit_application)

        self._build_menu()

        # status bar first so it keeps its place at the bottom
        self.status_bar = ctk.CTkFrame(self.root, height=28, corner_radius=0)
        self.status_bar.pack(side="bottom", fill="x")
        self.status_lbl = ctk.CTkLabel(self.status_bar, text="Ready")
        self.status_lbl.pack(side="left", padx=10)
        self.time_lbl = ctk.CTkLabel(self.status_bar, text="")
        self.time_lbl.pack(side="right", padx=10)
        ctk.CTkLabel(self.status_bar, text=f"User: {admin.username}", font=("Arial", 12, "bold")).pack(side="right", padx=10)

        self.sidebar = ctk.CTkFrame(self.root, width=200)
        self.sidebar.pack(side="left", fill="y")
        self.main_area = ctk.CTkFrame(self.root)
        self.main_area.pack(side="right", fill="both", expand=True)
        self.main_area.grid_rowconfigure(0, weight=1)
        self.main_area.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(self.sidebar, text="Library", font=("Helvetica", 20, "bold")).pack(pady=12)
        for label, key in PAGES:
            ctk.CTkButton(self.sidebar, text=label, command=lambda k=key: self.show_frame(k)).pack(fill="x", padx=12, pady=6)
        ctk.CTkButton(self.sidebar, text="Exit", fg_color=PALETTE["danger"],
                      command=self.exit_application).pack(side="bottom", fill="x", padx=12, pady=12)

        self.frames = {"dashboard": ctk.CTkFrame(self.main_area, fg_color=PALETTE["bg"])}
        self._build_dashboard(self.frames["dashboard"])
        self.book_panel = BookPanel(self.main_area, db, set_status=self.set_status, on_change=self.refresh_stats)
        self.staff_panel = StaffPanel(self.main_area, db, set_status=self.set_status, on_change=self.refresh_stats)
        self.frames["books"] = self.book_panel
        self.frames["staff"] = self.staff_panel
        for f in self.frames.values():
            f.grid(row=0, column=0, sticky="nsew")

        self.root.bind("<F5>", lambda e: self.refresh_all())
        for idx, (_, key) in enumerate(PAGES, start=1):
            self.root.bind(f"<Control-Key-{idx}>", lambda e, k=key: self.show_frame(k))

        self.show_frame("dashboard")
        self._tick()
        logger.info("Main dashboard initialized for user: %s", admin.username)

    # ---------------- chrome ----------------
    def _build_menu(self):
        menubar = tk.Menu(self.root)

        file_menu = tk.Menu(menubar, tearoff=0)
        file_menu.add_command(label="Refresh All", accelerator="F5", command=self.refresh_all)
        file_menu.add_separator()
        file_menu.add_command(label="Exit", command=self.exit_application)
        menubar.add_cascade(label="File", menu=file_menu, underline=0)

        view_menu = tk.Menu(menubar, tearoff=0)
        for idx, (label, key) in enumerate(PAGES, start=1):
            view_menu.add_command(label=label, accelerator=f"Ctrl+{idx}", command=lambda k=key: self.show_frame(k))
        menubar.add_cascade(label="View", menu=view_menu, underline=0)

        help_menu = tk.Menu(menubar, tearoff=0)
        help_menu.add_command(label="About", command=self.show_about)
        menubar.add_cascade(label="Help", menu=help_menu, underline=0)

        self.root.config(menu=menubar)

    def set_status(self, message):
        self.status_lbl.configure(text=message)

    def _tick(self):
        self.time_lbl.configure(text=datetime.now().strftime(DATETIME_FMT))
        self._clock_job = self.root.after(1000, self._tick)

    def show_frame(self, name):
        self.frames[name].tkraise()
        label = dict((k, l) for l, k in PAGES)[name]
        self.set_status(f"Viewing {label} module")
        if name == "dashboard":
            self.refresh_stats()

    # ---------------- dashboard page ----------------
    def _build_dashboard(self, f):
        ctk.CTkLabel(f, text=f"Welcome, {self.admin.username}!", font=TITLE_FONT).pack(pady=(16, 8))

        cards = ctk.CTkFrame(f, fg_color="transparent")
        cards.pack(fill="x", padx=12, pady=6)
        self.books_card = self._stat_card(cards, "Total Books", PALETTE["accent"])
        self.staff_card = self._stat_card(cards, "Active Staff", PALETTE["success"])

        chart_frame = ctk.CTkFrame(f)
        chart_frame.pack(fill="both", expand=True, padx=12, pady=8)
        self.fig = Figure(figsize=(9, 3.5), dpi=100)
        self.ax_books = self.fig.add_subplot(121)
        self.ax_staff = self.fig.add_subplot(122)
        self.canvas = FigureCanvasTkAgg(self.fig, master=chart_frame)
        self.canvas.get_tk_widget().pack(fill="both", expand=True)

        actions = ctk.CTkFrame(f)
        actions.pack(fill="x", padx=12, pady=(4, 12))
        ctk.CTkLabel(actions, text="Quick Actions", font=HEADER_FONT).grid(row=0, column=0, columnspan=4, pady=(6, 4))
        ctk.CTkButton(actions, text="Add New Book", command=self.quick_add_book).grid(row=1, column=0, padx=10, pady=8)
        ctk.CTkButton(actions, text="Add New Staff", command=self.quick_add_staff).grid(row=1, column=1, padx=10, pady=8)
        ctk.CTkButton(actions, text="View All Books", command=lambda: self.show_frame("books")).grid(row=1, column=2, padx=10, pady=8)
        ctk.CTkButton(actions, text="View All Staff", command=lambda: self.show_frame("staff")).grid(row=1, column=3, padx=10, pady=8)

    def _stat_card(self, parent, title, color):
        card = ctk.CTkFrame(parent, border_width=2, border_color=color, fg_color=PALETTE["panel"])
        card.pack(side="left", fill="both", expand=True, padx=10, pady=6)
        ctk.CTkLabel(card, text=title, font=("Arial", 16, "bold"), text_color=color).pack(pady=(14, 2))
        value = ctk.CTkLabel(card, text="-", font=("Arial", 36, "bold"), text_color=color)
        value.pack(pady=(2, 14))
        return value

    def _load_stats(self):
        return {
            "total_books": self.db.get_total_books(),
            "active_staff": self.db.get_total_staff(),
            "books": self.db.count_books_by_status(),
            "staff": self.db.count_staff_by_status(),
        }

    def refresh_stats(self):
        run_in_background(self.root.after, self._load_stats, self.draw_dashboard, self._on_stats_error, name="dashboard-stats")

    def _on_stats_error(self, exc):
        logger.error("Could not load dashboard statistics: %s", exc)
        self.set_status("Could not load statistics")

    def draw_dashboard(self, stats):
        self.books_card.configure(text=str(stats["total_books"]))
        self.staff_card.configure(text=str(stats["active_staff"]))

        book_keys = (AVAILABLE_STATUS, OUT_OF_STOCK_STATUS)
        self.ax_books.clear()
        self.ax_books.bar([STATUS_LABELS[k] for k in book_keys], [stats["books"].get(k, 0) for k in book_keys],
                          color=[PALETTE["accent"], PALETTE["warning"]])
        self.ax_books.set_title("Books by status")

        staff_keys = (ACTIVE_STATUS, INACTIVE_STATUS)
        self.ax_staff.clear()
        self.ax_staff.bar([STATUS_LABELS[k] for k in staff_keys], [stats["staff"].get(k, 0) for k in staff_keys],
                          color=[PALETTE["success"], PALETTE["muted"]])
        self.ax_staff.set_title("Staff by status")

        for ax in (self.ax_books, self.ax_staff):
            ax.grid(axis="y", alpha=0.25)
            ax.yaxis.get_major_locator().set_params(integer=True)
        self.fig.tight_layout()
        self.canvas.draw()

    # ---------------- actions ----------------
    def quick_add_book(self):
        self.show_frame("books")
        self.book_panel.show_add_dialog()

    def quick_add_staff(self):
        self.show_frame("staff")
        self.staff_panel.show_add_dialog()

    def refresh_all(self):
        self.set_status("Refreshing data...")
        self.book_panel.refresh_data()
        self.staff_panel.refresh_data()
        self.refresh_stats()

    def show_about(self):
        messagebox.showinfo(
            f"About {settings.app_name}",
            f"{settings.app_name}\nVersion: {settings.app_version}\nAuthor: {settings.app_author}\n\n"
            "A library management desktop app\nbuilt with Tkinter, customtkinter and SQLite.\n\n"
            f"{self.db.holder.connection_status()}",
            parent=self.root,
        )

    def exit_application(self):
        if not messagebox.askyesno("Confirm Exit", "Are you sure you want to exit?", parent=self.root):
            return
        if self._clock_job is not None:
            self.root.after_cancel(self._clock_job)
        logger.info("User logged out: %s", self.admin.username)
        self.db.holder.close()
        self.root.destroy()
