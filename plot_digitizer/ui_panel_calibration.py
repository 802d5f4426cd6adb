from __future__ import annotations

import logging
import tkinter as tk
from tkinter import ttk
from typing import Callable

from .calibration import AxisRange, CalibrationError, SLOT_ORDER, parse_axis_range

logger = logging.getLogger(__name__)

_DONE = "✓"
_NEXT = "▶"


class CalibrationPanel:
    def __init__(
        self,
        owner,
        parent: tk.Widget,
        *,
        on_set_calibration: Callable[[], None],
        on_reset_calibration: Callable[[], None],
    ) -> None:
        self.owner = owner
        frame = ttk.LabelFrame(parent, text="Calibration", padding=8)
        self.frame = frame
        frame.pack(side="top", fill="x")

        ttk.Label(frame, text="Click on the image, in order:").pack(fill="x")
        owner.instruction_labels = {}
        steps = ttk.Frame(frame)
        steps.pack(fill="x", pady=(2, 0))
        for i, slot in enumerate(SLOT_ORDER):
            lbl = ttk.Label(steps, text="")
            lbl.grid(row=i, column=0, sticky="w")
            owner.instruction_labels[slot] = lbl

        grid = ttk.Frame(frame)
        grid.pack(fill="x", pady=(8, 0))
        for col in range(5):
            grid.columnconfigure(col, weight=1 if col in (2, 4) else 0)

        for row, (axis, var_min, var_max, var_log) in enumerate([
            ("X", owner.var_x_min, owner.var_x_max, owner.var_x_log),
            ("Y", owner.var_y_min, owner.var_y_max, owner.var_y_log),
        ]):
            ttk.Label(grid, text=f"{axis} axis").grid(row=row * 2, column=0, columnspan=5, sticky="w", pady=(6, 0))
            ttk.Label(grid, text="min").grid(row=row * 2 + 1, column=1, sticky="w")
            ttk.Entry(grid, textvariable=var_min, width=10).grid(row=row * 2 + 1, column=2, sticky="ew", padx=(4, 8))
            ttk.Label(grid, text="max").grid(row=row * 2 + 1, column=3, sticky="w")
            ttk.Entry(grid, textvariable=var_max, width=10).grid(row=row * 2 + 1, column=4, sticky="ew", padx=(4, 0))
            ttk.Checkbutton(grid, text="Log scale", variable=var_log).grid(
                row=row * 2 + 1, column=0, sticky="w", padx=(0, 8)
            )

        owner.calibration_summary = tk.StringVar(value="")
        ttk.Label(frame, textvariable=owner.calibration_summary, justify="left").pack(fill="x", pady=(8, 0))

        btns = ttk.Frame(frame)
        btns.pack(fill="x", pady=(8, 0))
        ttk.Button(btns, text="Set Calibration", command=on_set_calibration).pack(side="left")
        ttk.Button(btns, text="Reset Calibration", command=on_reset_calibration).pack(side="left", padx=(8, 0))


class Calibrator:
    def __init__(self, owner) -> None:
        object.__setattr__(self, "owner", owner)

    def __getattr__(self, name):
        return getattr(self.owner, name)

    def __setattr__(self, name, value) -> None:
        if name == "owner":
            object.__setattr__(self, name, value)
            return
        setattr(self.owner, name, value)

    def _refresh_instructions(self) -> None:
        engine = self.session.engine
        nxt = engine.next_slot if self._pil is not None else None
        for slot, lbl in self.instruction_labels.items():
            if slot in engine.points:
                pt = engine.points[slot]
                lbl.configure(text=f"{_DONE} {slot.label}  ({pt.x:.1f}, {pt.y:.1f})", foreground="#2E8B57")
            elif slot == nxt:
                lbl.configure(text=f"{_NEXT} {slot.label}", foreground="#3498db")
            else:
                lbl.configure(text=f"   {slot.label}", foreground="")
        self._update_calibration_summary()

    def _update_calibration_summary(self) -> None:
        engine = self.session.engine
        if not engine.is_ready:
            self.calibration_summary.set("Calibration not set.")
            return

        def _desc(axis: str, r: AxisRange) -> str:
            return f"{axis}: {r.min:g} → {r.max:g} ({r.scale.value})"

        self.calibration_summary.set(_desc("x", engine.x_range) + "\n" + _desc("y", engine.y_range))

    def _read_ranges(self):
        x_range = parse_axis_range(self.var_x_min.get(), self.var_x_max.get(), self.var_x_log.get(), axis="x")
        y_range = parse_axis_range(self.var_y_min.get(), self.var_y_max.get(), self.var_y_log.get(), axis="y")
        return x_range, y_range

    def _apply_calibration(self) -> None:
        try:
            x_range, y_range = self._read_ranges()
            self.session.set_axis_ranges(x_range, y_range)
        except CalibrationError as e:
            logger.info("Calibration rejected: %s", e)
            self._show_error("Calibration", str(e))
            return

        degenerate = self.session.engine.degenerate_axes()
        if degenerate:
            axes = " and ".join(a.upper() for a in degenerate)
            self._show_warning(
                "Calibration",
                f"The two {axes}-axis calibration points are on the same pixel, so {axes} values "
                "cannot be computed. Reset Calibration and click the axis ends again.",
            )

        self._refresh_instructions()
        self.owner.canvas_actor._update_tip()
        self.set_status("Calibration set. Click data points.")

    def _reset_calibration(self) -> None:
        self.session.reset_calibration()
        self._refresh_instructions()
        self.owner.canvas_actor._redraw_overlay()
        self.owner.canvas_actor._update_tip()
        self.set_status("Calibration reset.")

    def _clear_fields(self) -> None:
        for var in (self.var_x_min, self.var_x_max, self.var_y_min, self.var_y_max):
            var.set("")
        self.var_x_log.set(False)
        self.var_y_log.set(False)
