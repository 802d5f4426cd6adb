from __future__ import annotations

import tkinter as tk
from tkinter import ttk


class PointsPanel:
    def __init__(self, owner, parent: tk.Widget) -> None:
        self.owner = owner
        frame = ttk.LabelFrame(parent, text="Points", padding=8)
        self.frame = frame
        frame.pack(side="top", fill="both", expand=True, pady=(8, 0))

        owner.tree = ttk.Treeview(
            frame,
            columns=("point", "x", "y"),
            show="headings",
            selectmode="browse",
            height=12,
        )
        owner.tree.heading("point", text="Point")
        owner.tree.heading("x", text="X")
        owner.tree.heading("y", text="Y")
        owner.tree.column("point", width=50, anchor="e")
        owner.tree.column("x", width=120, anchor="e")
        owner.tree.column("y", width=120, anchor="e")

        yscroll = ttk.Scrollbar(frame, orient="vertical", command=owner.tree.yview)
        owner.tree.configure(yscrollcommand=yscroll.set)
        yscroll.pack(side="right", fill="y")
        owner.tree.pack(side="left", fill="both", expand=True)


class PointsActor:
    def __init__(self, owner) -> None:
        object.__setattr__(self, "owner", owner)

    def __getattr__(self, name):
        return getattr(self.owner, name)

    def __setattr__(self, name, value) -> None:
        if name == "owner":
            object.__setattr__(self, name, value)
            return
        setattr(self.owner, name, value)

    def _refresh_table(self):
        # rebuilt from scratch so indices always match the session order
        for item in self.tree.get_children(""):
            self.tree.delete(item)
        fmt = self.settings.format_value
        last = None
        for idx, x, y in self.session.rows():
            last = self.tree.insert("", "end", iid=str(idx), values=(idx, fmt(x), fmt(y)))
        if last is not None:
            self.tree.see(last)
