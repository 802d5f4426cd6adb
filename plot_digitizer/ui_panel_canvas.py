from __future__ import annotations

import logging
import tkinter as tk
from tkinter import ttk
from typing import Tuple

from PIL import Image, ImageTk

from .calibration import CalibrationError, CalibrationStage, SLOT_ORDER

logger = logging.getLogger(__name__)


class CanvasPanel:
    def __init__(self, owner, parent: tk.Widget, *, actor) -> None:
        self.owner = owner
        self.actor = actor

        frame = ttk.Frame(parent)
        self.frame = frame
        frame.pack(side="top", fill="both", expand=True)

        s = owner.settings
        loupe_px = s.loupe_size * s.loupe_zoom

        loupe_frm = ttk.Frame(frame)
        loupe_frm.pack(side="top", fill="x")
        ttk.Label(loupe_frm, text="Loupe:").pack(side="left", anchor="n")
        owner.loupe = tk.Canvas(loupe_frm, width=loupe_px, height=loupe_px, highlightthickness=1, highlightbackground="#666")
        owner.loupe.pack(side="left", padx=(6, 0))

        info = ttk.Frame(loupe_frm)
        info.pack(side="left", padx=(10, 0), fill="both", expand=True)
        owner.readout_var = tk.StringVar(value="")
        ttk.Label(info, textvariable=owner.readout_var, font="TkFixedFont").pack(side="top", anchor="w")
        owner.tip_var = tk.StringVar(value="")
        owner.tip_label = ttk.Label(info, textvariable=owner.tip_var, wraplength=600, justify="left")
        owner.tip_label.pack(side="top", anchor="w", fill="x", pady=(6, 0))

        owner.canvas = tk.Canvas(frame, background="#111", highlightthickness=1, highlightbackground="#333", cursor="crosshair")
        owner.canvas.pack(side="bottom", fill="both", expand=True, pady=(8, 0))
        owner.canvas.bind("<Configure>", actor._on_canvas_configure)
        owner.canvas.bind("<Button-1>", actor._on_click)
        owner.canvas.bind("<Motion>", actor._on_motion)
        owner.canvas.bind("<Leave>", actor._on_canvas_leave)


class CanvasActor:
    def __init__(self, owner) -> None:
        object.__setattr__(self, "owner", owner)

    def __getattr__(self, name):
        return getattr(self.owner, name)

    def __setattr__(self, name, value) -> None:
        if name == "owner":
            object.__setattr__(self, name, value)
            return
        setattr(self.owner, name, value)

    def _on_canvas_configure(self, _evt=None):
        # Avoid thrashing when resizing: schedule a single re-render
        if self._render_after_id is not None:
            self.after_cancel(self._render_after_id)
        self._render_after_id = self.after(30, self._render_image)

    def _render_image(self):
        self._render_after_id = None
        self.canvas.delete("all")
        self.loupe.delete("all")
        if self._pil is None:
            self._photo = None
            return

        self.canvas.update_idletasks()
        cw = max(10, self.canvas.winfo_width())
        ch = max(10, self.canvas.winfo_height())
        disp_w, disp_h = self.view.fit(cw, ch, upscale=bool(self.var_fit_image.get()))

        disp = self._pil.resize((disp_w, disp_h), Image.NEAREST)
        self._photo = ImageTk.PhotoImage(disp)
        self.canvas.create_image(self.view.offx, self.view.offy, image=self._photo, anchor="nw", tags=("img",))

        self._redraw_overlay()

    def _redraw_overlay(self):
        self.canvas.delete("overlay")
        if self._pil is None:
            return
        s = self.settings
        for p in self.session.points_on_image():
            cx, cy = self.view.to_canvas(*p.px)
            r = s.point_marker_radius
            self.canvas.create_oval(cx - r, cy - r, cx + r, cy + r,
                                    fill=s.point_marker_fill, outline="",
                                    tags=("overlay", "pt"))

        for slot in SLOT_ORDER:
            pt = self.session.engine.points.get(slot)
            if pt is None:
                continue
            cx, cy = self.view.to_canvas(pt.x, pt.y)
            r = s.calibration_marker_radius
            self.canvas.create_oval(cx - r, cy - r, cx + r, cy + r,
                                    fill=s.calibration_marker_fill,
                                    outline=s.calibration_marker_outline,
                                    width=s.calibration_marker_width,
                                    tags=("overlay", "cal"))
            # label to the upper right of the marker
            self.canvas.create_text(cx + r + 3, cy - r - 3, text=slot.label, anchor="sw",
                                    fill=s.calibration_marker_fill, font=("TkDefaultFont", 8),
                                    tags=("overlay", "cal"))

    # ---------- events ----------

    def _event_image_px(self, event) -> Tuple[float, float]:
        return self.view.to_image_px(event.x, event.y)

    def _on_click(self, event):
        self.canvas.focus_set()
        if self._pil is None:
            self.set_status("Open an image first.")
            return
        xpx, ypx = self._event_image_px(event)
        if not self.view.contains(xpx, ypx):
            return

        try:
            outcome = self.session.click(xpx, ypx)
        except CalibrationError as e:
            self._show_error("Digitize", str(e))
            return

        if outcome.kind == "calibration":
            self.owner.calibrator._refresh_instructions()
            self.set_status(f"{outcome.slot.label} set at ({xpx:.1f}, {ypx:.1f}).")
        elif outcome.kind == "point":
            self.owner.points_actor._refresh_table()
            n = len(self.session.points)
            self.set_status(
                f"Point {n}: ({self.settings.format_value(outcome.point.x)}, "
                f"{self.settings.format_value(outcome.point.y)})"
            )
        else:
            logger.debug("Click at (%.1f, %.1f) ignored: waiting for axis ranges", xpx, ypx)
            self.set_status("Calibration points complete. Enter the axis ranges and press Set Calibration.")
        self._redraw_overlay()
        self._update_tip()

    def _on_motion(self, event):
        self._last_mouse_canvas = (event.x, event.y)
        if self._pil is None:
            return
        xpx, ypx = self._event_image_px(event)
        if not self.view.contains(xpx, ypx):
            self.readout_var.set("")
            return
        self._draw_loupe(xpx, ypx)
        self._update_readout(xpx, ypx)

    def _on_canvas_leave(self, _event):
        self._last_mouse_canvas = None
        self.readout_var.set("")

    def _update_readout(self, xpx: float, ypx: float) -> None:
        msg = f"pixel: {xpx:8.1f}, {ypx:8.1f}"
        if self.session.engine.is_ready:
            x, y = self.session.engine.pixel_to_plot(xpx, ypx)
            fmt = self.settings.format_value
            msg += f"\nplot:  {fmt(x)}, {fmt(y)}"
        self.readout_var.set(msg)

    def _draw_loupe(self, xpx: float, ypx: float):
        s = self.settings
        size = s.loupe_size
        zoom = s.loupe_zoom
        ix, iy = int(xpx), int(ypx)
        x0 = max(0, min(self.view.image_w - size, ix - size // 2))
        y0 = max(0, min(self.view.image_h - size, iy - size // 2))
        x1 = min(self.view.image_w, x0 + size)
        y1 = min(self.view.image_h, y0 + size)
        crop = self._pil.crop((x0, y0, x1, y1)).resize(((x1 - x0) * zoom, (y1 - y0) * zoom), Image.NEAREST)
        self._loupe_photo = ImageTk.PhotoImage(crop)
        self.loupe.delete("all")
        self.loupe.create_image(0, 0, image=self._loupe_photo, anchor="nw")

        def to_loupe(px: float, py: float) -> Tuple[float, float]:
            return ((px - x0) * zoom, (py - y0) * zoom)

        r = max(2, zoom // 2)
        for slot in SLOT_ORDER:
            pt = self.session.engine.points.get(slot)
            if pt is None or not (x0 <= pt.x <= x1 and y0 <= pt.y <= y1):
                continue
            lx, ly = to_loupe(pt.x, pt.y)
            self.loupe.create_oval(lx - r, ly - r, lx + r, ly + r, outline=s.calibration_marker_fill, width=2)
        for p in self.session.points_on_image():
            px, py = p.px
            if not (x0 <= px <= x1 and y0 <= py <= y1):
                continue
            lx, ly = to_loupe(px, py)
            self.loupe.create_oval(lx - r, ly - r, lx + r, ly + r, outline=s.point_marker_fill, width=2)

        # crosshair
        cx, cy = to_loupe(xpx, ypx)
        extent = size * zoom
        self.loupe.create_line(cx, 0, cx, extent, fill="red")
        self.loupe.create_line(0, cy, extent, cy, fill="red")

    def _update_tip(self):
        stage = self.session.stage
        if self._pil is None:
            msg = "Open an image or snip a plot from the screen to begin."
        elif stage in (CalibrationStage.UNSET, CalibrationStage.AWAITING_POINT):
            slot = self.session.engine.next_slot
            msg = (
                f"Calibration {self.session.engine.step + 1} of 4: click the {slot.label}. "
                "Points are taken in order: X-axis start, X-axis end, Y-axis start, Y-axis end. "
                "Use the loupe to place them precisely."
            )
        elif stage == CalibrationStage.AWAITING_RANGES:
            msg = (
                "All four calibration points recorded. Enter the min/max value of each axis "
                "(tick Log scale for logarithmic axes), then press Set Calibration. "
                "Clicks on the image are ignored until then."
            )
        else:
            msg = (
                "Click data points to digitize them; each click is added to the table. "
                "Reset Calibration to mark the axes again."
            )
        self.tip_var.set(msg)
