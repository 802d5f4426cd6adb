"""
Tests for the canvas display transform (no display needed).
"""
import pytest

from plot_digitizer.ui_state import CanvasViewState


def test_fit_letterboxes_and_centers():
    v = CanvasViewState(image_w=200, image_h=100)
    disp = v.fit(400, 400)
    assert v.scale == 2.0
    assert disp == (400, 200)
    assert (v.offx, v.offy) == (0, 100)


def test_no_upscale_keeps_native_size():
    v = CanvasViewState(image_w=200, image_h=100)
    assert v.fit(400, 400, upscale=False) == (200, 100)
    assert v.scale == 1.0
    assert (v.offx, v.offy) == (100, 150)


def test_downscale_even_without_upscale():
    v = CanvasViewState(image_w=800, image_h=400)
    v.fit(400, 400, upscale=False)
    assert v.scale == 0.5


def test_canvas_image_roundtrip():
    v = CanvasViewState(image_w=300, image_h=150)
    v.fit(640, 480)
    cx, cy = v.to_canvas(123.25, 77.5)
    assert v.to_image_px(cx, cy) == pytest.approx((123.25, 77.5))


def test_click_in_letterbox_is_outside_image():
    v = CanvasViewState(image_w=200, image_h=100)
    v.fit(400, 400)
    xpx, ypx = v.to_image_px(200, 50)
    assert ypx < 0
    assert not v.contains(xpx, ypx)
    assert v.contains(*v.to_image_px(200, 200))


def test_fit_without_image():
    v = CanvasViewState()
    assert v.fit(400, 400) == (0, 0)
    assert not v.contains(0, 0)
