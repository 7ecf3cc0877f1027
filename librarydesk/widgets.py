# widgets.py
"""Small Tk helpers shared by the windows and panels."""

import tkinter as tk
from tkinter import ttk

import customtkinter as ctk

from .constants import PALETTE

HEADER_FONT = ("Arial", 18, "bold")
TITLE_FONT = ("Arial", 24, "bold")


def apply_theme(settings):
    ctk.set_appearance_mode(settings.appearance_mode)
    ctk.set_default_color_theme(settings.color_theme)


def make_tree(parent, columns, headings, wide=("title", "name")):
    container = tk.Frame(parent, bg=PALETTE["panel"])
    container.pack(fill="both", expand=True)
    tree = ttk.Treeview(container, columns=columns, show="headings", selectmode="browse")
    for col, head in zip(columns, headings):
        tree.heading(col, text=head)
        width = 260 if col in wide else 120
        tree.column(col, width=width, anchor="w")
    vsb = ttk.Scrollbar(container, orient="vertical", command=tree.yview)
    tree.configure(yscrollcommand=vsb.set)
    tree.pack(side="left", fill="both", expand=True)
    vsb.pack(side="right", fill="y")
    tree.tag_configure("even", background="#ffffff")
    tree.tag_configure("odd", background="#f7fbff")
    return tree


def fill_tree(tree, rows):
    """Replace the tree contents. rows is an iterable of (iid, values)."""
    children = tree.get_children()
    if children:
        tree.delete(*children)
    for idx, (iid, values) in enumerate(rows):
        tree.insert("", "end", iid=iid, values=values, tags=("even" if idx % 2 == 0 else "odd",))


def center_window(win, parent=None):
    win.update_idletasks()
    w, h = win.winfo_width(), win.winfo_height()
    if parent is not None and parent.winfo_ismapped():
        x = parent.winfo_rootx() + (parent.winfo_width() - w) // 2
        y = parent.winfo_rooty() + (parent.winfo_height() - h) // 2
    else:
        x = (win.winfo_screenwidth() - w) // 2
        y = (win.winfo_screenheight() - h) // 2
    win.geometry(f"+{max(x, 0)}+{max(y, 0)}")


def set_enabled(widget, enabled):
    widget.configure(state="normal" if enabled else "disabled")
