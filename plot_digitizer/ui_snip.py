from __future__ import annotations

import logging
import tkinter as tk
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import mss
from PIL import Image, ImageTk

logger = logging.getLogger(__name__)

Box = Tuple[int, int, int, int]

# smallest selection (logical pixels) that can still hold a plot and its axes
MIN_SNIP_SIZE = 40


@dataclass(frozen=True)
class SnipGeometry:
    """
    Where the captured screen sits and how its pixels relate to the overlay.

    mss reports the monitor rect in the desktop's logical coordinates, but on
    HiDPI displays the grabbed image can be larger (e.g. 2x on Retina). The
    overlay is laid out in logical pixels, so selections are scaled by
    (scale_x, scale_y) before cropping the screenshot.
    """

    left: int
    top: int
    width: int
    height: int
    scale_x: float = 1.0
    scale_y: float = 1.0

    @classmethod
    def from_monitor(cls, mon: dict, shot_size: Tuple[int, int]) -> "SnipGeometry":
        width = int(mon.get("width") or shot_size[0])
        height = int(mon.get("height") or shot_size[1])
        return cls(
            left=int(mon.get("left", 0)),
            top=int(mon.get("top", 0)),
            width=width,
            height=height,
            scale_x=shot_size[0] / width,
            scale_y=shot_size[1] / height,
        )

    def clamp_box(self, x0: float, y0: float, x1: float, y1: float) -> Box:
        """Order the drag corners and clip them to the overlay."""
        left, right = sorted((x0, x1))
        top, bottom = sorted((y0, y1))
        return (
            int(max(0, min(self.width, left))),
            int(max(0, min(self.height, top))),
            int(max(0, min(self.width, right))),
            int(max(0, min(self.height, bottom))),
        )

    def to_image_box(self, box: Box) -> Box:
        x0, y0, x1, y1 = box
        return (
            int(round(x0 * self.scale_x)),
            int(round(y0 * self.scale_y)),
            int(round(x1 * self.scale_x)),
            int(round(y1 * self.scale_y)),
        )


def is_usable(box: Box) -> bool:
    x0, y0, x1, y1 = box
    return (x1 - x0) >= MIN_SNIP_SIZE and (y1 - y0) >= MIN_SNIP_SIZE


def crop_selection(shot: Image.Image, geometry: SnipGeometry, box: Box) -> Optional[Image.Image]:
    """Crop the screenshot to an overlay selection; None if it is too small for a plot."""
    if not is_usable(box):
        return None
    return shot.crop(geometry.to_image_box(box))


def grab_screen() -> Tuple[Image.Image, SnipGeometry]:
    """Capture the whole virtual screen (all monitors)."""
    with mss.mss() as sct:
        mon = sct.monitors[0]
        shot = sct.grab(mon)
    img = Image.frombytes("RGB", shot.size, shot.rgb)
    geometry = SnipGeometry.from_monitor(dict(mon), img.size)
    logger.debug("Captured screen %s at %.2fx", img.size, geometry.scale_x)
    return img, geometry


class SnipOverlay(tk.Toplevel):
    """Borderless full-screen copy of the screenshot; drag around a plot to load it."""

    HINT = "Drag a box around the plot, axes included. Esc or right-click cancels."

    def __init__(
        self,
        parent: tk.Tk,
        screenshot: Image.Image,
        geometry: SnipGeometry,
        on_snip: Callable[[Image.Image], None],
    ):
        super().__init__(parent)
        self.screenshot = screenshot
        self.geom = geometry
        self.on_snip = on_snip
        self._anchor: Optional[Tuple[float, float]] = None

        self.overrideredirect(True)
        self.attributes("-topmost", True)
        g = geometry
        self.geometry(f"{g.width}x{g.height}+{g.left}+{g.top}")

        shown = screenshot
        if screenshot.size != (g.width, g.height):
            shown = screenshot.resize((g.width, g.height), Image.BILINEAR)
        self._photo = ImageTk.PhotoImage(shown)

        c = tk.Canvas(self, width=g.width, height=g.height, highlightthickness=0, cursor="crosshair")
        c.pack(fill="both", expand=True)
        c.create_image(0, 0, image=self._photo, anchor="nw")
        c.create_rectangle(0, 0, g.width, g.height, fill="black", stipple="gray25", outline="")
        c.create_text(g.width // 2, 24, text=self.HINT, fill="white", font=("TkDefaultFont", 14))
        self._sel = c.create_rectangle(0, 0, 0, 0, outline="", width=2)
        self._size_text = c.create_text(0, 0, text="", anchor="sw", fill="white", font="TkFixedFont")
        self.canvas = c

        c.bind("<ButtonPress-1>", self._on_press)
        c.bind("<B1-Motion>", self._on_drag)
        c.bind("<ButtonRelease-1>", self._on_release)
        c.bind("<ButtonPress-3>", lambda _e: self._cancel())
        self.bind("<Escape>", lambda _e: self._cancel())
        self.focus_force()

    def _show_selection(self, box: Box) -> None:
        x0, y0, x1, y1 = box
        colour = "#3498db" if is_usable(box) else "#e74c3c"
        self.canvas.coords(self._sel, x0, y0, x1, y1)
        self.canvas.itemconfigure(self._sel, outline=colour)
        ix0, iy0, ix1, iy1 = self.geom.to_image_box(box)
        self.canvas.coords(self._size_text, x0, max(12, y0 - 4))
        self.canvas.itemconfigure(self._size_text, text=f"{ix1 - ix0} x {iy1 - iy0}")

    def _on_press(self, event):
        self._anchor = (event.x, event.y)
        self._show_selection(self.geom.clamp_box(event.x, event.y, event.x, event.y))

    def _on_drag(self, event):
        if self._anchor is None:
            return
        self._show_selection(self.geom.clamp_box(*self._anchor, event.x, event.y))

    def _on_release(self, event):
        if self._anchor is None:
            return
        box = self.geom.clamp_box(*self._anchor, event.x, event.y)
        self._anchor = None
        cropped = crop_selection(self.screenshot, self.geom, box)
        if cropped is None:
            # keep the overlay up so the user can drag again
            self._show_selection(box)
            self.canvas.itemconfigure(self._size_text, text=f"too small, need {MIN_SNIP_SIZE} px each way")
            return

        on_snip = self.on_snip
        parent = self.master
        self.destroy()
        parent.after_idle(lambda: on_snip(cropped))

    def _cancel(self):
        logger.debug("Snip cancelled")
        self.destroy()
