from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)


class CalibrationError(ValueError):
    """Raised for calibration input that cannot produce a usable transform."""


class AxisScale(str, Enum):
    LINEAR = "linear"
    LOG10 = "log10"


class CalibrationSlot(str, Enum):
    X_START = "x_start"
    X_END = "x_end"
    Y_START = "y_start"
    Y_END = "y_end"

    @property
    def label(self) -> str:
        return _SLOT_LABELS[self]


_SLOT_LABELS = {
    CalibrationSlot.X_START: "X-axis start",
    CalibrationSlot.X_END: "X-axis end",
    CalibrationSlot.Y_START: "Y-axis start",
    CalibrationSlot.Y_END: "Y-axis end",
}

# click order
SLOT_ORDER: Tuple[CalibrationSlot, ...] = (
    CalibrationSlot.X_START,
    CalibrationSlot.X_END,
    CalibrationSlot.Y_START,
    CalibrationSlot.Y_END,
)


class CalibrationStage(str, Enum):
    UNSET = "unset"
    AWAITING_POINT = "awaiting_point"
    AWAITING_RANGES = "awaiting_ranges"
    READY = "ready"


@dataclass(frozen=True)
class CalibrationPoint:
    x: float
    y: float


@dataclass(frozen=True)
class AxisRange:
    min: float
    max: float
    is_logarithmic: bool = False

    def __post_init__(self) -> None:
        if not (math.isfinite(self.min) and math.isfinite(self.max)):
            raise CalibrationError("Axis bounds must be finite numbers.")
        if self.min == self.max:
            raise CalibrationError("Axis min and max must differ.")
        if self.is_logarithmic and (self.min <= 0 or self.max <= 0):
            raise CalibrationError("Log scale requires positive min and max.")

    @property
    def scale(self) -> AxisScale:
        return AxisScale.LOG10 if self.is_logarithmic else AxisScale.LINEAR


def _parse_bound(s: str, label: str) -> float:
    s = (s or "").strip()
    if not s:
        raise CalibrationError(f"Missing {label} value. Enter it in the Calibration panel.")
    try:
        return float(s)
    except ValueError:
        raise CalibrationError(f"{label} value {s!r} is not a number.") from None


def parse_axis_range(min_text: str, max_text: str, is_logarithmic: bool = False, *, axis: str = "x") -> AxisRange:
    """
    Build an AxisRange from text typed into the Calibration panel.

    Rejects empty or non-numeric text, nan/inf, equal bounds, and
    non-positive bounds on a log axis with CalibrationError.
    """
    lo = _parse_bound(min_text, f"{axis} min")
    hi = _parse_bound(max_text, f"{axis} max")
    try:
        return AxisRange(min=lo, max=hi, is_logarithmic=bool(is_logarithmic))
    except CalibrationError as e:
        raise CalibrationError(f"{axis.upper()} axis: {e}") from None


@dataclass
class AxisCalibration:
    # pixel anchors: p0 maps to v0, p1 maps to v1
    p0: float
    p1: float
    v0: float
    v1: float
    scale: AxisScale = AxisScale.LINEAR

    def is_valid(self) -> bool:
        return self.p0 != self.p1 and self.v0 != self.v1

    def px_to_value(self, p: float) -> float:
        # Zero span has no meaningful position; report nan instead of raising.
        if self.p0 == self.p1:
            return math.nan
        with np.errstate(over="ignore", invalid="ignore"):
            t = (np.float64(p) - self.p0) / (self.p1 - self.p0)
            if self.scale == AxisScale.LINEAR:
                return float(self.v0 + t * (self.v1 - self.v0))
            if self.scale == AxisScale.LOG10:
                if self.v0 <= 0 or self.v1 <= 0:
                    raise CalibrationError("Log scale requires positive v0 and v1.")
                lv0 = np.log10(self.v0)
                lv1 = np.log10(self.v1)
                return float(np.power(10.0, lv0 + t * (lv1 - lv0)))
        raise CalibrationError(f"Unsupported scale: {self.scale}")


@dataclass
class Calibration:
    x: AxisCalibration
    y: AxisCalibration

    def px_to_data(self, xpx: float, ypx: float) -> Tuple[float, float]:
        return self.x.px_to_value(xpx), self.y.px_to_value(ypx)


class CalibrationEngine:
    """
    Four-point axis calibration and the pixel -> plot transform.

    Points are recorded in SLOT_ORDER. After the fourth point the engine
    waits for axis ranges; extra clicks in that stage are dropped. Setting
    ranges makes the engine READY, the only stage in which pixel_to_plot
    is allowed.
    """

    def __init__(self) -> None:
        self.points: Dict[CalibrationSlot, CalibrationPoint] = {}
        self.x_range: Optional[AxisRange] = None
        self.y_range: Optional[AxisRange] = None
        self.is_set = False
        self._calibration: Optional[Calibration] = None

    @property
    def step(self) -> int:
        return len(self.points)

    @property
    def next_slot(self) -> Optional[CalibrationSlot]:
        if self.step >= len(SLOT_ORDER):
            return None
        return SLOT_ORDER[self.step]

    @property
    def stage(self) -> CalibrationStage:
        if self.is_set:
            return CalibrationStage.READY
        if self.step == 0:
            return CalibrationStage.UNSET
        if self.step < len(SLOT_ORDER):
            return CalibrationStage.AWAITING_POINT
        return CalibrationStage.AWAITING_RANGES

    @property
    def is_ready(self) -> bool:
        return self.stage == CalibrationStage.READY

    def record_calibration_point(self, x: float, y: float) -> Optional[CalibrationSlot]:
        slot = self.next_slot
        if slot is None:
            logger.debug("Calibration complete; dropping click at (%.2f, %.2f)", x, y)
            return None
        self.points[slot] = CalibrationPoint(float(x), float(y))
        logger.info("Recorded %s at (%.2f, %.2f)", slot.label, x, y)
        return slot

    def set_axis_ranges(self, x_range: AxisRange, y_range: AxisRange) -> None:
        missing = [s.label for s in SLOT_ORDER if s not in self.points]
        if missing:
            raise CalibrationError(
                "Click all four calibration points first. Missing: " + ", ".join(missing) + "."
            )
        self.x_range = x_range
        self.y_range = y_range
        self._calibration = self._build_calibration()
        self.is_set = True
        for axis in self.degenerate_axes():
            logger.warning("%s-axis calibration points coincide; %s values will be nan", axis.upper(), axis)
        logger.info(
            "Calibration set: x=[%g, %g]%s y=[%g, %g]%s",
            x_range.min, x_range.max, " (log)" if x_range.is_logarithmic else "",
            y_range.min, y_range.max, " (log)" if y_range.is_logarithmic else "",
        )

    def degenerate_axes(self) -> List[str]:
        """Axes whose two calibration points share the same pixel coordinate."""
        if self._calibration is None:
            return []
        axes = (("x", self._calibration.x), ("y", self._calibration.y))
        return [name for name, cal in axes if not cal.is_valid()]

    def _build_calibration(self) -> Calibration:
        assert self.x_range is not None and self.y_range is not None
        xs = self.points[CalibrationSlot.X_START]
        xe = self.points[CalibrationSlot.X_END]
        ys = self.points[CalibrationSlot.Y_START]
        ye = self.points[CalibrationSlot.Y_END]
        # y_start sits at the larger pixel row; anchoring p0 there makes
        # t = (ys.y - py) / (ys.y - ye.y).
        xcal = AxisCalibration(p0=xs.x, p1=xe.x, v0=self.x_range.min, v1=self.x_range.max, scale=self.x_range.scale)
        ycal = AxisCalibration(p0=ys.y, p1=ye.y, v0=self.y_range.min, v1=self.y_range.max, scale=self.y_range.scale)
        return Calibration(x=xcal, y=ycal)

    def pixel_to_plot(self, x: float, y: float) -> Tuple[float, float]:
        if not self.is_ready or self._calibration is None:
            raise CalibrationError("Calibration is not set. Click four axis points and set the axis ranges.")
        return self._calibration.px_to_data(x, y)

    def reset(self) -> None:
        self.points = {}
        self.x_range = None
        self.y_range = None
        self.is_set = False
        self._calibration = None
        logger.info("Calibration reset")
