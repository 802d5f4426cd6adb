from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Literal, Optional, Tuple

from .calibration import AxisRange, CalibrationEngine, CalibrationSlot, CalibrationStage

logger = logging.getLogger(__name__)


ClickKind = Literal["calibration", "point", "ignored"]
PointRow = Tuple[int, float, float]


@dataclass(frozen=True)
class DigitizedPoint:
    # plot coordinates, computed once when the point is created
    x: float
    y: float
    # clicked image pixel; only used to redraw the marker
    px: Tuple[float, float]


@dataclass(frozen=True)
class ClickOutcome:
    kind: ClickKind
    slot: Optional[CalibrationSlot] = None
    point: Optional[DigitizedPoint] = None


@dataclass
class DigitizerSession:
    engine: CalibrationEngine = field(default_factory=CalibrationEngine)
    points: List[DigitizedPoint] = field(default_factory=list)
    image_size: Optional[Tuple[int, int]] = None
    # points before this index were clicked on an earlier image
    image_point_offset: int = 0

    @property
    def stage(self) -> CalibrationStage:
        return self.engine.stage

    def click(self, xpx: float, ypx: float) -> ClickOutcome:
        """Route an image click to calibration until READY, then to digitizing."""
        if self.engine.is_ready:
            return ClickOutcome("point", point=self.add_point(xpx, ypx))
        slot = self.engine.record_calibration_point(xpx, ypx)
        if slot is None:
            return ClickOutcome("ignored")
        return ClickOutcome("calibration", slot=slot)

    def add_point(self, xpx: float, ypx: float) -> DigitizedPoint:
        x, y = self.engine.pixel_to_plot(xpx, ypx)
        p = DigitizedPoint(x=x, y=y, px=(float(xpx), float(ypx)))
        self.points.append(p)
        logger.info("Point %d: pixel (%.2f, %.2f) -> (%g, %g)", len(self.points), xpx, ypx, x, y)
        return p

    def set_axis_ranges(self, x_range: AxisRange, y_range: AxisRange) -> None:
        self.engine.set_axis_ranges(x_range, y_range)

    def reset_calibration(self) -> None:
        self.engine.reset()

    def load_image(self, width: int, height: int) -> None:
        self.image_size = (int(width), int(height))
        self.image_point_offset = len(self.points)
        self.engine.reset()
        logger.info("Loaded image %dx%d", width, height)

    def clear_all(self) -> None:
        self.points = []
        self.image_size = None
        self.image_point_offset = 0
        self.engine.reset()
        logger.info("Cleared all points and calibration")

    def points_on_image(self) -> List[DigitizedPoint]:
        return self.points[self.image_point_offset:]

    def rows(self) -> List[PointRow]:
        return [(i + 1, p.x, p.y) for i, p in enumerate(self.points)]
