from __future__ import annotations

import logging
import threading
import time
from typing import Callable, List

from PySide6.QtCore import QThread, Signal

from motorsim.control.control_law import ControlGains
from motorsim.control.gain_limits import clamp_setpoint, clamp_to_limits
from motorsim.sim.engine import SimulationEngine, Snapshot, SIMULATION_RATE_MS

logger = logging.getLogger(__name__)


def snapshot_to_dict(snap: Snapshot) -> dict:
    return {
        "current_output": snap.current_output,
        "motor_voltage": snap.motor_voltage,
        "velocity": snap.velocity,
        "acceleration": snap.acceleration,
        "elapsed_time": snap.elapsed_time,
        "t": [s.time for s in snap.history],
        "desired": [s.desired for s in snap.history],
        "actual": [s.actual for s in snap.history],
    }


class RealtimeWorker(QThread):
    """Fixed-rate driver: ticks one engine every ``rate_ms`` on this thread.

    The worker thread is the only caller of ``engine.tick``. Setters called
    from other threads are queued and applied before the next tick.
    """
    sig_status = Signal(str)
    sig_data = Signal(dict)
    sig_done = Signal(dict)

    def __init__(self, engine: SimulationEngine | None = None, rate_ms: float = SIMULATION_RATE_MS,
                 max_ticks: int | None = None, pace: bool = True):
        super().__init__()
        self.engine = engine if engine is not None else SimulationEngine()
        self.rate_ms = float(rate_ms)
        self.dt = self.rate_ms / 1000.0
        self.max_ticks = max_ticks
        self.pace = pace
        self.is_running = False
        self.ticks = 0
        self._lock = threading.Lock()
        self._pending: List[Callable[[SimulationEngine], None]] = []

    def stop(self):
        self.is_running = False

    def _post(self, fn: Callable[[SimulationEngine], None]) -> None:
        with self._lock:
            self._pending.append(fn)

    def _drain(self) -> None:
        with self._lock:
            pending, self._pending = self._pending, []
        for fn in pending:
            fn(self.engine)

    def set_desired_output(self, value: float) -> None:
        value = clamp_setpoint(value)
        self._post(lambda e: setattr(e.config, "desired_output", value))

    def set_gains(self, gains: ControlGains) -> None:
        """Queue new gains, clamped to the ranges offered in the UI."""
        gains = clamp_to_limits(gains)
        self._post(lambda e: setattr(e.config, "gains", gains))

    def set_pid_enabled(self, enabled: bool) -> None:
        self._post(lambda e: e.set_pid_enabled(enabled))

    def set_ff_enabled(self, enabled: bool) -> None:
        self._post(lambda e: e.set_ff_enabled(enabled))

    def request_reset(self) -> None:
        self._post(lambda e: e.reset())

    def run(self):
        self.is_running = True
        self.sig_status.emit(f"running (dt={self.dt:.3f} s)")
        logger.debug("realtime worker started, rate %.1f ms", self.rate_ms)

        next_t = time.perf_counter()
        while self.is_running:
            if self.max_ticks is not None and self.ticks >= self.max_ticks:
                break
            self._drain()
            try:
                snap = self.engine.tick(self.dt)
            except Exception as e:
                logger.exception("tick %d failed", self.ticks)
                self.sig_status.emit(f"error: {e}")
                self.is_running = False
                return
            self.ticks += 1
            self.sig_data.emit(snapshot_to_dict(snap))

            if self.pace:
                next_t += self.dt
                delay = next_t - time.perf_counter()
                if delay > 0:
                    time.sleep(delay)
                else:
                    next_t = time.perf_counter()

        self._drain()
        self.is_running = False
        logger.debug("realtime worker stopped after %d ticks", self.ticks)
        self.sig_status.emit("done")
        self.sig_done.emit({"ticks": self.ticks, "history": self.engine.history.to_dataframe()})
