from __future__ import annotations
import math
from dataclasses import dataclass

V_MAX = 12.0
STATIC_DEADBAND = 0.5  # |error| at or below this leaves the kS term off


class InvalidTimestep(ValueError):
    """Raised when a tick is requested with dt <= 0 (or a non-finite dt)."""

    def __init__(self, dt: float):
        super().__init__(f"timestep must be a positive finite number, got {dt!r}")
        self.dt = dt


def check_dt(dt: float) -> float:
    dt = float(dt)
    if not math.isfinite(dt) or dt <= 0.0:
        raise InvalidTimestep(dt)
    return dt


@dataclass
class ControlGains:
    kp: float = 0.0
    ki: float = 0.0
    kd: float = 0.0
    ks: float = 0.0  # static friction
    kv: float = 0.0  # velocity
    ka: float = 0.0  # acceleration


@dataclass(frozen=True)
class ControlOutput:
    voltage: float
    voltage_unsat: float
    integral: float
    last_error: float
    ff_static: float = 0.0
    ff_velocity: float = 0.0
    ff_accel: float = 0.0
    p_term: float = 0.0
    i_term: float = 0.0
    d_term: float = 0.0


def compute_voltage(
    error: float,
    setpoint_velocity: float,
    dt: float,
    gains: ControlGains,
    pid_enabled: bool,
    ff_enabled: bool,
    integral: float,
    last_error: float,
    v_max: float = V_MAX,
) -> ControlOutput:
    """Voltage command for one tick.

    Feedforward and PID contributions are summed, then clamped to
    [-v_max, v_max]. The integrator state is not mutated here: the updated
    ``integral`` and ``last_error`` come back in the result and the caller
    stores them. With PID disabled both are passed through unchanged.
    """
    dt = check_dt(dt)

    ff_static = ff_velocity = ff_accel = 0.0
    if ff_enabled:
        if abs(error) > STATIC_DEADBAND:
            ff_static = (1.0 if error > 0 else -1.0) * gains.ks * v_max
        ff_velocity = gains.kv * error
        ff_accel = gains.ka * setpoint_velocity

    p_term = i_term = d_term = 0.0
    if pid_enabled:
        # no anti-windup: the integral grows for as long as the error persists
        integral = integral + error * dt
        derivative = (error - last_error) / dt
        p_term = gains.kp * error
        i_term = gains.ki * integral
        d_term = gains.kd * derivative
        last_error = error

    u_unsat = ff_static + ff_velocity + ff_accel + p_term + i_term + d_term
    u_sat = max(-v_max, min(v_max, u_unsat))

    return ControlOutput(
        voltage=u_sat,
        voltage_unsat=u_unsat,
        integral=integral,
        last_error=last_error,
        ff_static=ff_static,
        ff_velocity=ff_velocity,
        ff_accel=ff_accel,
        p_term=p_term,
        i_term=i_term,
        d_term=d_term,
    )
