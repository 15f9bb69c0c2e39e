from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Tuple

from motorsim.control.control_law import ControlGains, ControlOutput, V_MAX, check_dt, compute_voltage
from motorsim.sim.history import DEFAULT_CAPACITY, HistoryBuffer, Sample

logger = logging.getLogger(__name__)

SIMULATION_RATE_MS = 50
OUTPUT_MIN = 0.0
OUTPUT_MAX = 100.0


@dataclass(frozen=True)
class MotorParams:
    k_motor: float = 0.15  # velocity gain per volt
    k_damp: float = 0.08   # viscous damping
    v_max: float = V_MAX


def default_motor_params() -> MotorParams:
    return MotorParams()


@dataclass
class EngineConfig:
    desired_output: float = 50.0
    pid_enabled: bool = False
    ff_enabled: bool = False
    gains: ControlGains = field(default_factory=ControlGains)


@dataclass
class EngineState:
    current_output: float = 0.0
    velocity: float = 0.0
    acceleration: float = 0.0
    motor_voltage: float = 0.0
    integral: float = 0.0
    last_error: float = 0.0
    last_setpoint: float = 0.0
    elapsed_time: float = 0.0


@dataclass(frozen=True)
class Snapshot:
    current_output: float
    motor_voltage: float
    velocity: float
    acceleration: float
    elapsed_time: float
    history: Tuple[Sample, ...]


class SimulationEngine:
    """Single-motor simulation advanced one fixed step at a time.

    ``config`` may be changed freely between ticks; ``state`` and ``history``
    are written only by :meth:`tick` and :meth:`reset`. Not reentrant: drive it
    from one thread (see ``RealtimeWorker``).
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        motor: MotorParams | None = None,
        history_capacity: int = DEFAULT_CAPACITY,
    ):
        self.config = config if config is not None else EngineConfig()
        self.motor = motor if motor is not None else default_motor_params()
        self.state = EngineState()
        self.history = HistoryBuffer(history_capacity)
        self.last_control: ControlOutput | None = None
        self._pid_was_enabled = bool(self.config.pid_enabled)

    def _sync_pid_flag(self) -> None:
        # catches writes straight to config.pid_enabled as well as the setter
        enabled = bool(self.config.pid_enabled)
        if self._pid_was_enabled and not enabled:
            self.state.integral = 0.0
            self.state.last_error = 0.0
            logger.debug("PID disabled, integrator cleared")
        self._pid_was_enabled = enabled

    def set_pid_enabled(self, enabled: bool) -> None:
        self.config.pid_enabled = bool(enabled)
        self._sync_pid_flag()

    def set_ff_enabled(self, enabled: bool) -> None:
        self.config.ff_enabled = bool(enabled)

    def reset(self) -> None:
        self.state = EngineState()
        self.history.clear()
        self.last_control = None
        logger.debug("engine reset")

    def tick(self, dt: float) -> Snapshot:
        dt = check_dt(dt)  # reject before touching any state
        self._sync_pid_flag()
        cfg, s, m = self.config, self.state, self.motor

        target = float(cfg.desired_output)
        error = target - s.current_output
        setpoint_velocity = (target - s.last_setpoint) / dt

        u = compute_voltage(
            error=error,
            setpoint_velocity=setpoint_velocity,
            dt=dt,
            gains=cfg.gains,
            pid_enabled=cfg.pid_enabled,
            ff_enabled=cfg.ff_enabled,
            integral=s.integral,
            last_error=s.last_error,
            v_max=m.v_max,
        )
        s.integral = u.integral
        s.last_error = u.last_error

        # first-order motor with viscous damping, explicit Euler
        velocity_change = (u.voltage * m.k_motor - s.velocity * m.k_damp) * dt
        new_velocity = s.velocity + velocity_change
        new_output = s.current_output + new_velocity * dt

        s.current_output = max(OUTPUT_MIN, min(OUTPUT_MAX, new_output))
        s.motor_voltage = u.voltage
        s.acceleration = velocity_change / dt
        s.velocity = new_velocity

        s.elapsed_time += dt
        self.history.append(s.elapsed_time, target, s.current_output)

        # read by the next tick, so setpoint velocity always lags one step
        s.last_setpoint = target
        self.last_control = u

        return self.snapshot()

    def snapshot(self) -> Snapshot:
        s = self.state
        return Snapshot(
            current_output=s.current_output,
            motor_voltage=s.motor_voltage,
            velocity=s.velocity,
            acceleration=s.acceleration,
            elapsed_time=s.elapsed_time,
            history=self.history.snapshot(),
        )
