import math

import numpy as np
import pytest

from motorsim.metrics.metrics import itae, ise, overshoot_percent, rmse, settling_time, steady_state_error


def test_error_integrals():
    y = np.array([0.0, 1.0, 2.0])
    yref = np.array([2.0, 2.0, 2.0])
    assert rmse(y, yref) == pytest.approx(math.sqrt(5.0 / 3.0))
    assert ise(y, yref) == pytest.approx(5.0)
    assert itae(np.array([0.0, 1.0, 2.0]), y, yref) == pytest.approx(1.0)


def test_overshoot_rising_and_falling_steps():
    assert overshoot_percent([0.0, 55.0, 50.0], 50.0) == pytest.approx(10.0)
    assert overshoot_percent([0.0, 40.0, 49.0], 50.0) == 0.0
    assert overshoot_percent([80.0, 15.0, 20.0], 20.0, y0=80.0) == pytest.approx(5.0 / 60.0 * 100.0)
    assert overshoot_percent([1.0, 2.0], 0.0) == 0.0


def test_settling_time():
    t = np.array([0.0, 1.0, 2.0, 3.0])
    assert settling_time(t, [0.0, 40.0, 49.5, 50.0], 50.0) == pytest.approx(2.0)
    assert settling_time(t, [50.0, 50.0, 50.0, 50.0], 50.0) == 0.0
    assert math.isinf(settling_time(t, [0.0, 10.0, 20.0, 30.0], 50.0))
    assert math.isinf(settling_time([], [], 50.0))


def test_settling_band_reference():
    t = np.array([0.0, 1.0, 2.0])
    # 2% of a 60-point step is 1.2
    assert settling_time(t, [80.0, 21.0, 20.5], 20.0, band_ref=60.0) == pytest.approx(1.0)


def test_steady_state_error_uses_tail():
    y = np.array([0.0, 0.0, 48.0, 49.0])
    yref = np.full(4, 50.0)
    assert steady_state_error(y, yref, tail=2) == pytest.approx(1.5)
    assert steady_state_error([], []) == 0.0
