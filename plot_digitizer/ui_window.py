from __future__ import annotations

import logging
import tkinter as tk
from tkinter import ttk, filedialog, messagebox
from pathlib import Path
from typing import Optional

from mss.exception import ScreenShotError
from PIL import Image, UnidentifiedImageError

from .model import DigitizerSession
from .settings import DigitizerSettings, load_settings, save_settings
from .ui_state import CanvasViewState
from .ui_panel_toolbar import ToolbarPanel
from .ui_panel_canvas import CanvasPanel, CanvasActor
from .ui_panel_calibration import CalibrationPanel, Calibrator
from .ui_panel_points import PointsPanel, PointsActor
from .ui_panel_export import ExportPanel, Exporter
from .ui_snip import SnipOverlay, grab_screen

logger = logging.getLogger(__name__)

IMAGE_FILETYPES = [
    ("Images", "*.png *.jpg *.jpeg *.gif *.bmp *.tif *.tiff *.webp"),
    ("All files", "*.*"),
]


class DigitizerWindow(tk.Tk):
    def __init__(self, *, settings: Optional[DigitizerSettings] = None):
        super().__init__()
        self.title("Plot Digitizer")
        self.geometry("1180x760")
        self.resizable(True, True)

        self.settings = settings if settings is not None else load_settings()
        self.session = DigitizerSession()
        self.view = CanvasViewState()

        self._pil: Optional[Image.Image] = None
        self._photo = None
        self._loupe_photo = None
        self._last_mouse_canvas = None
        self._render_after_id = None

        # Axis range entries (text, validated on Set Calibration)
        self.var_x_min = tk.StringVar(value="")
        self.var_x_max = tk.StringVar(value="")
        self.var_y_min = tk.StringVar(value="")
        self.var_y_max = tk.StringVar(value="")
        self.var_x_log = tk.BooleanVar(value=False)
        self.var_y_log = tk.BooleanVar(value=False)
        self.var_fit_image = tk.BooleanVar(value=self.settings.fit_image)

        self.status_var = tk.StringVar(value="Ready.")

        self.canvas_actor = CanvasActor(self)
        self.calibrator = Calibrator(self)
        self.points_actor = PointsActor(self)
        self.exporter = Exporter(self)

        self._build_ui()
        self.calibrator._refresh_instructions()
        self.canvas_actor._update_tip()

    # ---------- UI ----------
    def _build_ui(self):
        root = ttk.Frame(self, padding=8)
        root.pack(fill="both", expand=True)

        self.toolbar_panel = ToolbarPanel(
            self,
            root,
            on_open_image=self._open_image,
            on_snip_screen=self._begin_snip,
            on_fit_toggle=self._on_fit_toggle,
        )

        self._panes = ttk.Panedwindow(root, orient="horizontal")
        self._panes.pack(fill="both", expand=True, pady=(8, 0))

        left = ttk.Frame(self._panes)
        right = ttk.Frame(self._panes, width=340)
        self._panes.add(left, weight=2)
        self._panes.add(right, weight=1)

        self.canvas_panel = CanvasPanel(self, left, actor=self.canvas_actor)

        self.calibration_panel = CalibrationPanel(
            self,
            right,
            on_set_calibration=self.calibrator._apply_calibration,
            on_reset_calibration=self.calibrator._reset_calibration,
        )
        self.export_panel = ExportPanel(
            self,
            right,
            on_export_excel=self.exporter._export_excel,
            on_export_csv=self.exporter._export_csv,
            on_copy_csv=self.exporter._copy_csv,
            on_clear_all=self._clear_all,
        )
        self.points_panel = PointsPanel(self, right)

        self.after(0, self._set_default_pane_ratio)

    def _set_default_pane_ratio(self):
        self._panes.update_idletasks()
        total = self._panes.winfo_width()
        if total <= 1:
            return
        # Left ~67%, right ~33% by default.
        self._panes.sashpos(0, int(total * 0.67))

    def set_status(self, msg: str):
        self.status_var.set(msg)

    # ---------- Image sources ----------
    def _open_image(self):
        path = filedialog.askopenfilename(
            parent=self,
            title="Open plot image",
            initialdir=self.settings.last_image_dir or None,
            filetypes=IMAGE_FILETYPES,
        )
        if not path:
            return
        try:
            with Image.open(path) as im:
                img = im.convert("RGB")
        except (OSError, UnidentifiedImageError) as e:
            logger.error("Could not open %s: %s", path, e)
            self._show_error("Open image", f"Could not open image:\n{e}")
            return

        self._load_image(img, source=Path(path).name)

        self.settings.last_image_dir = str(Path(path).parent)
        try:
            save_settings(self.settings)
        except OSError as e:
            logger.warning("Could not save settings: %s", e)

    def _begin_snip(self):
        # Move out of the way so the capture shows what is behind us.
        self.withdraw()
        self.after(200, self._snip_screen)

    def _snip_screen(self):
        self.set_status("Capturing screen…")
        try:
            shot, geometry = grab_screen()
        except ScreenShotError as e:
            logger.error("Screen capture failed: %s", e)
            self.deiconify()
            self._show_error("Snip screen", f"Screen capture failed:\n{e}")
            self.set_status("Ready.")
            return

        def on_snip(cropped: Image.Image):
            self._load_image(cropped, source="screen snip")

        overlay = SnipOverlay(self, shot, geometry, on_snip)

        def restore(event=None):
            if event is not None and event.widget is not overlay:
                return
            self.deiconify()
            self.lift()
            if self.status_var.get().startswith("Capturing"):
                self.set_status("Ready.")

        overlay.bind("<Destroy>", restore)

    def _load_image(self, img: Image.Image, *, source: str) -> None:
        self._pil = img.convert("RGB")
        w, h = self._pil.size
        self.view.image_w, self.view.image_h = w, h
        self.session.load_image(w, h)
        self.calibrator._refresh_instructions()
        self.canvas_actor._render_image()
        self.canvas_actor._update_tip()
        self.set_status(f"Loaded {source} ({w}x{h}). Calibration reset.")

    # ---------- Session ----------
    def _clear_all(self):
        self.session.clear_all()
        self._pil = None
        self.view.image_w, self.view.image_h = 0, 0
        self.calibrator._clear_fields()
        self.calibrator._refresh_instructions()
        self.points_actor._refresh_table()
        self.canvas_actor._render_image()
        self.canvas_actor._update_tip()
        self.set_status("Cleared.")

    def _on_fit_toggle(self):
        self.settings.fit_image = bool(self.var_fit_image.get())
        self.canvas_actor._render_image()

    def _show_info(self, title: str, message: str) -> None:
        messagebox.showinfo(title, message, parent=self)

    def _show_warning(self, title: str, message: str) -> None:
        messagebox.showwarning(title, message, parent=self)

    def _show_error(self, title: str, message: str) -> None:
        messagebox.showerror(title, message, parent=self)
