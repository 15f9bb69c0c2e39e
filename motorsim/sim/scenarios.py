from __future__ import annotations
from dataclasses import dataclass

@dataclass(frozen=True)
class SetpointScenario:
    """Setpoint profile: hold ``initial``, step to ``final`` at ``t_step``.

    With ``ramp_s > 0`` the change is a linear ramp of that duration instead
    of a step. Values are clamped to the 0..100 output range.
    """
    initial: float = 0.0
    final: float = 50.0
    t_step: float = 0.0
    ramp_s: float = 0.0

    def desired_output(self, t: float) -> float:
        if t < self.t_step:
            v = self.initial
        elif self.ramp_s > 0.0 and t < self.t_step + self.ramp_s:
            v = self.initial + (self.final - self.initial) * (t - self.t_step) / self.ramp_s
        else:
            v = self.final
        return max(0.0, min(100.0, v))
