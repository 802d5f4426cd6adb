from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass
class CanvasViewState:
    # image size in pixels
    image_w: int = 0
    image_h: int = 0

    # display transform: canvas = off + image * scale
    scale: float = 1.0
    offx: int = 0
    offy: int = 0

    def fit(self, canvas_w: int, canvas_h: int, *, upscale: bool = True) -> Tuple[int, int]:
        """Center the image in the canvas; returns the displayed size."""
        if self.image_w <= 0 or self.image_h <= 0:
            self.scale, self.offx, self.offy = 1.0, 0, 0
            return 0, 0
        sx = canvas_w / self.image_w
        sy = canvas_h / self.image_h
        if upscale:
            self.scale = min(sx, sy)
        else:
            self.scale = min(1.0, sx, sy)
        disp_w = max(1, int(self.image_w * self.scale))
        disp_h = max(1, int(self.image_h * self.scale))
        self.offx = (canvas_w - disp_w) // 2
        self.offy = (canvas_h - disp_h) // 2
        return disp_w, disp_h

    def to_canvas(self, xpx: float, ypx: float) -> Tuple[float, float]:
        return self.offx + xpx * self.scale, self.offy + ypx * self.scale

    def to_image_px(self, cx: float, cy: float) -> Tuple[float, float]:
        # Not rounded or clamped: sub-pixel clicks keep their precision.
        return (cx - self.offx) / self.scale, (cy - self.offy) / self.scale

    def contains(self, xpx: float, ypx: float) -> bool:
        return 0 <= xpx < self.image_w and 0 <= ypx < self.image_h
