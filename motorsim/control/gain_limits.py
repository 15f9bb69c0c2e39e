from __future__ import annotations
from dataclasses import dataclass, fields, replace
from typing import Dict

from motorsim.control.control_law import ControlGains


@dataclass(frozen=True)
class GainRange:
    lo: float
    hi: float
    step: float


# Input ranges offered to whoever edits the gains (sliders, spin boxes).
# The engine itself accepts any non-negative gain.
GAIN_LIMITS: Dict[str, GainRange] = {
    "kp": GainRange(0.0, 1.0, 0.001),
    "ki": GainRange(0.0, 0.1, 0.001),
    "kd": GainRange(0.0, 0.5, 0.001),
    "ks": GainRange(0.0, 1.0, 0.01),
    "kv": GainRange(0.0, 2.0, 0.01),
    "ka": GainRange(0.0, 1.0, 0.01),
}

SETPOINT_RANGE = (0.0, 100.0)


def clamp_to_limits(gains: ControlGains, limits: Dict[str, GainRange] = GAIN_LIMITS) -> ControlGains:
    """Return a copy of ``gains`` with every field clamped to its input range."""
    clamped = {}
    for f in fields(gains):
        v = float(getattr(gains, f.name))
        r = limits.get(f.name)
        clamped[f.name] = v if r is None else max(r.lo, min(r.hi, v))
    return replace(gains, **clamped)


def clamp_setpoint(value: float) -> float:
    lo, hi = SETPOINT_RANGE
    return max(lo, min(hi, float(value)))
