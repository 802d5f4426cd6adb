"""
Shared fixtures for plot digitizer tests.

Provides a session calibrated on a 100x100 pixel frame, linear or log.
"""
import os
import sys

import pytest

# Ensure the repository root is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from plot_digitizer.calibration import AxisRange
from plot_digitizer.model import DigitizerSession


def calibrate(session, x_range, y_range):
    """Click x_start (0, 100), x_end (100, 100), y_start (0, 100), y_end (0, 0)."""
    for px, py in [(0, 100), (100, 100), (0, 100), (0, 0)]:
        session.click(px, py)
    session.set_axis_ranges(x_range, y_range)
    return session


@pytest.fixture
def session():
    s = DigitizerSession()
    s.load_image(200, 200)
    return s


@pytest.fixture
def linear_session(session):
    return calibrate(session, AxisRange(0, 10), AxisRange(0, 10))


@pytest.fixture
def log_session(session):
    return calibrate(session, AxisRange(1, 1000, is_logarithmic=True), AxisRange(0, 10))
