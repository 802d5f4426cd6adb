"""
Unit tests for DigitizerSession

Tests cover:
- Click routing between calibration and digitizing
- Point history order and row numbering
- Image reload, calibration reset and full clear
"""
import math

import pytest

from plot_digitizer.calibration import AxisRange, CalibrationError, CalibrationSlot, CalibrationStage
from plot_digitizer.model import DigitizedPoint, DigitizerSession

from conftest import calibrate


def test_clicks_before_ready_record_calibration(session):
    out = session.click(5, 95)
    assert out.kind == "calibration"
    assert out.slot == CalibrationSlot.X_START
    assert session.points == []


def test_clicks_after_four_points_are_ignored_until_ranges(session):
    for px, py in [(0, 100), (100, 100), (0, 100), (0, 0)]:
        session.click(px, py)
    out = session.click(50, 50)
    assert out.kind == "ignored"
    assert session.stage == CalibrationStage.AWAITING_RANGES
    assert session.points == []


def test_clicks_when_ready_add_points(linear_session):
    out = linear_session.click(50, 25)
    assert out.kind == "point"
    assert out.point == DigitizedPoint(x=5.0, y=7.5, px=(50.0, 25.0))
    assert linear_session.points == [out.point]


def test_rows_are_one_based_and_ordered(linear_session):
    for px in (10, 20, 30):
        linear_session.click(px, 100)
    rows = linear_session.rows()
    assert [r[0] for r in rows] == [1, 2, 3]
    assert [r[1] for r in rows] == pytest.approx([1.0, 2.0, 3.0])
    assert rows == linear_session.rows()


def test_points_keep_values_after_recalibration(linear_session):
    linear_session.click(50, 50)
    linear_session.set_axis_ranges(AxisRange(0, 100), AxisRange(0, 100))
    linear_session.click(50, 50)
    assert linear_session.rows() == [(1, 5.0, 5.0), (2, 50.0, 50.0)]


def test_log_session_point(log_session):
    out = log_session.click(50, 100)
    assert out.point.x == pytest.approx(31.6228, abs=1e-4)
    assert out.point.y == 0.0


def test_add_point_requires_calibration(session):
    with pytest.raises(CalibrationError):
        session.add_point(1, 1)


def test_reset_calibration_keeps_points(linear_session):
    linear_session.click(10, 10)
    linear_session.reset_calibration()
    assert linear_session.stage == CalibrationStage.UNSET
    assert len(linear_session.points) == 1
    assert linear_session.click(10, 10).kind == "calibration"


def test_load_image_resets_calibration_keeps_points(linear_session):
    linear_session.click(10, 10)
    linear_session.load_image(640, 480)
    assert linear_session.image_size == (640, 480)
    assert linear_session.stage == CalibrationStage.UNSET
    assert len(linear_session.points) == 1
    # markers only for points clicked on the current image
    assert linear_session.points_on_image() == []
    calibrate(linear_session, AxisRange(0, 1), AxisRange(0, 1))
    linear_session.click(50, 50)
    assert len(linear_session.points_on_image()) == 1
    assert [r[0] for r in linear_session.rows()] == [1, 2]


def test_clear_all(linear_session):
    linear_session.click(10, 10)
    linear_session.click(20, 20)
    linear_session.clear_all()
    assert linear_session.points == []
    assert linear_session.rows() == []
    assert linear_session.stage == CalibrationStage.UNSET
    out = linear_session.click(30, 30)
    assert out.kind == "calibration"
    assert out.slot == CalibrationSlot.X_START
    assert linear_session.points == []


def test_degenerate_axis_points_are_recorded_as_nan():
    s = DigitizerSession()
    for px, py in [(10, 90), (10, 90), (0, 90), (0, 10)]:
        s.click(px, py)
    s.set_axis_ranges(AxisRange(0, 1), AxisRange(0, 1))
    out = s.click(40, 50)
    assert not math.isfinite(out.point.x)
    assert out.point.y == pytest.approx(0.5)


def test_point_requires_its_pixel():
    with pytest.raises(TypeError):
        DigitizedPoint(x=1.0, y=2.0)
