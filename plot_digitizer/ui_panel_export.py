from __future__ import annotations

import logging
import tkinter as tk
from tkinter import ttk, filedialog
from typing import Callable

from .export_csv import points_csv_string, write_points_csv
from .export_xlsx import write_points_xlsx

logger = logging.getLogger(__name__)


class ExportPanel:
    def __init__(
        self,
        owner,
        parent: tk.Widget,
        *,
        on_export_excel: Callable[[], None],
        on_export_csv: Callable[[], None],
        on_copy_csv: Callable[[], None],
        on_clear_all: Callable[[], None],
    ) -> None:
        self.owner = owner
        frame = ttk.Frame(parent)
        self.frame = frame
        frame.pack(side="bottom", fill="x", pady=(8, 0))

        ttk.Button(frame, text="Export Excel…", command=on_export_excel).pack(side="left")
        ttk.Button(frame, text="Export CSV…", command=on_export_csv).pack(side="left", padx=(8, 0))
        ttk.Button(frame, text="Copy CSV", command=on_copy_csv).pack(side="left", padx=(8, 0))
        ttk.Button(frame, text="Clear All", command=on_clear_all).pack(side="right")


class Exporter:
    def __init__(self, owner) -> None:
        object.__setattr__(self, "owner", owner)

    def __getattr__(self, name):
        return getattr(self.owner, name)

    def __setattr__(self, name, value) -> None:
        if name == "owner":
            object.__setattr__(self, name, value)
            return
        setattr(self.owner, name, value)

    def _rows_or_info(self, title: str):
        rows = self.session.rows()
        if not rows:
            self._show_info(title, "No points to export yet. Calibrate, then click data points.")
        return rows

    def _export_excel(self):
        rows = self._rows_or_info("Export Excel")
        if not rows:
            return

        path = filedialog.asksaveasfilename(
            parent=self.owner,
            initialfile=self.settings.export_filename,
            defaultextension=".xlsx",
            filetypes=[("Excel files", "*.xlsx"), ("All files", "*.*")],
        )
        if not path:
            return
        try:
            saved = write_points_xlsx(path, rows, sheet_name=self.settings.sheet_name)
        except (OSError, ValueError) as e:
            logger.error("Excel export failed: %s", e)
            self._show_error("Export Excel", str(e))
            return
        self._show_info("Export Excel", f"Saved:\n{saved}")

    def _export_csv(self):
        rows = self._rows_or_info("Export CSV")
        if not rows:
            return

        stem = self.settings.export_filename.rsplit(".", 1)[0]
        path = filedialog.asksaveasfilename(
            parent=self.owner,
            initialfile=f"{stem}.csv",
            defaultextension=".csv",
            filetypes=[("CSV files", "*.csv"), ("All files", "*.*")],
        )
        if not path:
            return
        try:
            write_points_csv(path, rows)
        except OSError as e:
            logger.error("CSV export failed: %s", e)
            self._show_error("Export CSV", str(e))
            return
        self._show_info("Export CSV", f"Saved:\n{path}")

    def _copy_csv(self):
        rows = self._rows_or_info("Copy CSV")
        if not rows:
            return
        self.clipboard_clear()
        self.clipboard_append(points_csv_string(rows))
        self.set_status(f"Copied {len(rows)} points to the clipboard.")
