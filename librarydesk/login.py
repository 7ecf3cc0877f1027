# login.py
import logging
from tkinter import TclError, Toplevel, messagebox

import customtkinter as ctk

from .config import settings
from .constants import LOGIN_FAILED_MSG, LOGIN_SUCCESS_MSG, LOGIN_WINDOW_SIZE, MIN_PASSWORD_LENGTH, PALETTE
from .validation import is_valid_password, is_valid_username
from .widgets import center_window
from .worker import run_in_background

logger = logging.getLogger(__name__)


class LoginWindow:
    """Modal login over a withdrawn root. Calls on_success(admin) once authenticated."""

    def __init__(self, root, db, on_success):
        self.root = root
        self.db = db
        self.on_success = on_success
        self.busy = False

        self.win = Toplevel(root)
        self.win.title(f"{settings.app_name} - Login")
        self.win.geometry(LOGIN_WINDOW_SIZE)
        self.win.resizable(False, False)
        self.win.protocol("WM_DELETE_WINDOW", self.on_close)

        ctk.CTkLabel(self.win, text=settings.app_name, font=("Arial", 18, "bold")).pack(pady=(16, 8))

        frm = ctk.CTkFrame(self.win)
        frm.pack(padx=16, pady=6, fill="x")
        ctk.CTkLabel(frm, text="Username").grid(row=0, column=0, sticky="e", padx=6, pady=6)
        self.user_var = ctk.StringVar()
        self.user_entry = ctk.CTkEntry(frm, textvariable=self.user_var)
        self.user_entry.grid(row=0, column=1, padx=6, pady=6, sticky="ew")
        ctk.CTkLabel(frm, text="Password").grid(row=1, column=0, sticky="e", padx=6, pady=6)
        self.pw_var = ctk.StringVar()
        self.pw_entry = ctk.CTkEntry(frm, textvariable=self.pw_var, show="*")
        self.pw_entry.grid(row=1, column=1, padx=6, pady=6, sticky="ew")
        frm.grid_columnconfigure(1, weight=1)

        btns = ctk.CTkFrame(self.win, fg_color="transparent")
        btns.pack(fill="x", padx=16, pady=(6, 4))
        self.login_btn = ctk.CTkButton(btns, text="Login", command=self.try_login)
        self.login_btn.pack(side="left", padx=6)
        ctk.CTkButton(btns, text="Exit", fg_color=PALETTE["danger"], command=self.on_close).pack(side="right", padx=6)

        self.status_lbl = ctk.CTkLabel(self.win, text=" ", text_color=PALETTE["danger"])
        self.status_lbl.pack(pady=(4, 8))

        self.win.bind("<Return>", lambda e: self.try_login())
        center_window(self.win)
        self.win.grab_set()
        self.user_entry.focus_set()
        logger.info("Login window shown")

    def show_error(self, message):
        self.status_lbl.configure(text=message, text_color=PALETTE["danger"])

    def try_login(self):
        if self.busy:
            return
        username = self.user_var.get().strip()
        password = self.pw_var.get()
        self.status_lbl.configure(text=" ")

        if not is_valid_username(username):
            self.show_error("Please enter a valid username")
            self.user_entry.focus_set()
            return
        if not is_valid_password(password):
            self.show_error(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
            self.pw_entry.focus_set()
            return

        self.busy = True
        self.login_btn.configure(state="disabled", text="Logging in...")
        self.status_lbl.configure(text="Authenticating...", text_color=PALETTE["accent"])
        run_in_background(
            self.win.after,
            lambda: self.db.authenticate_admin(username, password),
            self._on_authenticated,
            self._on_auth_error,
            name="login",
        )

    def _reset_button(self):
        self.busy = False
        self.login_btn.configure(state="normal", text="Login")

    def _on_authenticated(self, admin):
        self._reset_button()
        if admin is None:
            self.show_error(LOGIN_FAILED_MSG)
            self.pw_var.set("")
            self.pw_entry.focus_set()
            return
        logger.info("Login successful for user: %s", admin.username)
        self.status_lbl.configure(text=LOGIN_SUCCESS_MSG, text_color=PALETTE["success"])
        self.win.grab_release()
        self.win.destroy()
        self.on_success(admin)

    def _on_auth_error(self, exc):
        self._reset_button()
        logger.error("Login error: %s", exc)
        self.show_error("Login failed. Please check your database connection.")
        messagebox.showerror("Database Error", str(exc), parent=self.win)

    def on_close(self):
        try:
            self.win.grab_release()
        except TclError:
            pass
        self.win.destroy()
        # tearing down the withdrawn root also ends mainloop()
        self.root.destroy()
