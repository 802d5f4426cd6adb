from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Callable


class ToolbarPanel:
    def __init__(
        self,
        owner,
        parent: tk.Widget,
        *,
        on_open_image: Callable[[], None],
        on_snip_screen: Callable[[], None],
        on_fit_toggle: Callable[[], None],
    ) -> None:
        self.owner = owner
        self.frame = ttk.Frame(parent)
        self.frame.pack(side="top", fill="x")

        ttk.Button(self.frame, text="Open Image…", command=on_open_image).pack(side="left")
        ttk.Button(self.frame, text="Snip Screen", command=on_snip_screen).pack(side="left", padx=(8, 0))

        ttk.Separator(self.frame, orient="vertical").pack(side="left", fill="y", padx=10)
        ttk.Checkbutton(
            self.frame,
            text="Fit",
            variable=owner.var_fit_image,
            command=on_fit_toggle,
        ).pack(side="left")

        ttk.Label(self.frame, textvariable=owner.status_var).pack(side="right")
