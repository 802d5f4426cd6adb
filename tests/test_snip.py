"""
Tests for screen-snip geometry: HiDPI scaling, clipping and the minimum plot size.
"""
import pytest

pytest.importorskip("tkinter")

from PIL import Image

from plot_digitizer.ui_snip import MIN_SNIP_SIZE, SnipGeometry, crop_selection, is_usable


def _shot(w, h):
    img = Image.new("RGB", (w, h), "white")
    # mark the pixel at physical (100, 60)
    img.putpixel((100, 60), (255, 0, 0))
    return img


def test_geometry_from_plain_monitor():
    g = SnipGeometry.from_monitor({"left": -1920, "top": 0, "width": 3840, "height": 1080}, (3840, 1080))
    assert (g.left, g.top, g.width, g.height) == (-1920, 0, 3840, 1080)
    assert g.scale_x == g.scale_y == 1.0


def test_geometry_on_retina_display():
    g = SnipGeometry.from_monitor({"left": 0, "top": 0, "width": 1440, "height": 900}, (2880, 1800))
    assert (g.scale_x, g.scale_y) == (2.0, 2.0)
    assert g.to_image_box((10, 20, 110, 70)) == (20, 40, 220, 140)


def test_clamp_orders_corners_and_clips():
    g = SnipGeometry(left=0, top=0, width=800, height=600)
    assert g.clamp_box(300, 400, 100, 50) == (100, 50, 300, 400)
    assert g.clamp_box(-20, 550, 900, 700) == (0, 550, 800, 600)


def test_small_selection_is_rejected():
    g = SnipGeometry(left=0, top=0, width=800, height=600)
    shot = _shot(800, 600)
    assert not is_usable((0, 0, MIN_SNIP_SIZE - 1, 300))
    assert crop_selection(shot, g, (10, 10, 300, 10 + MIN_SNIP_SIZE - 1)) is None
    assert is_usable((0, 0, MIN_SNIP_SIZE, MIN_SNIP_SIZE))


def test_crop_uses_physical_pixels():
    g = SnipGeometry.from_monitor({"left": 0, "top": 0, "width": 400, "height": 300}, (800, 600))
    cropped = crop_selection(_shot(800, 600), g, (40, 20, 140, 100))
    assert cropped.size == (200, 160)
    # logical (50, 30) is physical (100, 60), i.e. (20, 20) inside the crop
    assert cropped.getpixel((20, 20)) == (255, 0, 0)
