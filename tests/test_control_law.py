import math

import pytest

from motorsim.control.control_law import ControlGains, InvalidTimestep, V_MAX, compute_voltage

DT = 0.05


def _step(error, gains, pid=False, ff=False, setpoint_velocity=0.0, integral=0.0, last_error=0.0, dt=DT):
    return compute_voltage(
        error=error,
        setpoint_velocity=setpoint_velocity,
        dt=dt,
        gains=gains,
        pid_enabled=pid,
        ff_enabled=ff,
        integral=integral,
        last_error=last_error,
    )


def test_both_disabled_gives_zero_voltage_and_keeps_integrator():
    u = _step(30.0, ControlGains(kp=1.0, ki=1.0, kd=1.0, ks=1.0, kv=1.0, ka=1.0), integral=3.0, last_error=7.0)
    assert u.voltage == 0.0
    assert u.integral == 3.0
    assert u.last_error == 7.0


def test_proportional_only():
    u = _step(50.0, ControlGains(kp=0.1), pid=True)
    assert u.voltage == pytest.approx(5.0)
    assert u.integral == pytest.approx(2.5)
    assert u.last_error == 50.0


def test_integral_accumulates_without_windup_limit():
    g = ControlGains(ki=1.0)
    integral = 0.0
    for _ in range(1000):
        u = _step(100.0, g, pid=True, integral=integral, last_error=100.0)
        integral = u.integral
    assert integral == pytest.approx(1000 * 100.0 * DT)
    assert u.voltage == V_MAX
    assert u.voltage_unsat > V_MAX


def test_derivative_uses_last_error():
    u = _step(10.0, ControlGains(kd=0.01), pid=True, last_error=8.0)
    assert u.d_term == pytest.approx(0.01 * (10.0 - 8.0) / DT)


def test_static_term_sign_and_deadband():
    g = ControlGains(ks=0.5)
    assert _step(10.0, g, ff=True).ff_static == pytest.approx(6.0)
    assert _step(-10.0, g, ff=True).ff_static == pytest.approx(-6.0)
    assert _step(0.5, g, ff=True).ff_static == 0.0
    assert _step(-0.5, g, ff=True).ff_static == 0.0
    assert _step(0.51, g, ff=True).ff_static == pytest.approx(6.0)


def test_feedforward_velocity_and_acceleration_terms():
    u = _step(4.0, ControlGains(kv=0.5, ka=0.01), ff=True, setpoint_velocity=200.0)
    assert u.ff_velocity == pytest.approx(2.0)
    assert u.ff_accel == pytest.approx(2.0)
    assert u.voltage == pytest.approx(4.0)


def test_pid_and_feedforward_are_summed():
    g = ControlGains(kp=0.02, kv=0.03)
    u = _step(20.0, g, pid=True, ff=True)
    assert u.voltage == pytest.approx(0.02 * 20.0 + 0.03 * 20.0)


def test_voltage_clamped_both_ways():
    g = ControlGains(kp=10.0)
    assert _step(100.0, g, pid=True).voltage == V_MAX
    assert _step(-100.0, g, pid=True).voltage == -V_MAX


@pytest.mark.parametrize("dt", [0.0, -0.05, math.nan, math.inf])
def test_invalid_timestep(dt):
    with pytest.raises(InvalidTimestep):
        _step(1.0, ControlGains(kp=1.0), pid=True, dt=dt)


def test_invalid_timestep_is_value_error():
    with pytest.raises(ValueError):
        _step(1.0, ControlGains(), dt=0.0)
