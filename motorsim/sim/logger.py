from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List
import pandas as pd

from motorsim.sim.engine import SimulationEngine


@dataclass
class SimLogger:
    """Unbounded per-tick trace for offline runs (the engine history is capped)."""
    records: Dict[str, List[float]] = field(default_factory=dict)

    def append(self, **kwargs: float) -> None:
        for k, v in kwargs.items():
            self.records.setdefault(k, []).append(float(v))

    def log_engine(self, engine: SimulationEngine) -> None:
        s, cfg, u = engine.state, engine.config, engine.last_control
        self.append(
            t=s.elapsed_time,
            desired=cfg.desired_output,
            actual=s.current_output,
            error=cfg.desired_output - s.current_output,
            voltage=s.motor_voltage,
            voltage_unsat=u.voltage_unsat if u else 0.0,
            velocity=s.velocity,
            acceleration=s.acceleration,
            integral=s.integral,
            ff_static=u.ff_static if u else 0.0,
            ff_velocity=u.ff_velocity if u else 0.0,
            ff_accel=u.ff_accel if u else 0.0,
            p_term=u.p_term if u else 0.0,
            i_term=u.i_term if u else 0.0,
            d_term=u.d_term if u else 0.0,
        )

    def __len__(self) -> int:
        return len(next(iter(self.records.values()), []))

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(self.records)
