from __future__ import annotations
import logging
import os
from typing import Dict, Tuple
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

from motorsim.control.control_law import ControlGains, V_MAX
from motorsim.sim.engine import EngineConfig, MotorParams, SimulationEngine, SIMULATION_RATE_MS
from motorsim.sim.logger import SimLogger
from motorsim.sim.scenarios import SetpointScenario
from motorsim.metrics.metrics import rmse, ise, itae, overshoot_percent, settling_time, steady_state_error
from motorsim.plotting.plot_style import MODE_COLORS, apply_plot_style, plot_tracking

logger = logging.getLogger(__name__)

MODES = ("off", "pid", "ff", "pid_ff")


def default_gains() -> ControlGains:
    """Gains that track a 0 -> 50 % step reasonably in every mode."""
    return ControlGains(kp=0.8, ki=0.02, kd=0.3, ks=0.05, kv=0.6, ka=0.01)


def mode_flags(mode: str) -> Tuple[bool, bool]:
    m = mode.lower()
    if m not in MODES:
        raise ValueError(f"mode must be one of {MODES}, got {mode!r}")
    return m in ("pid", "pid_ff"), m in ("ff", "pid_ff")


def run_scenario(
    mode: str,
    gains: ControlGains,
    scenario: SetpointScenario,
    t_end: float = 20.0,
    dt: float = SIMULATION_RATE_MS / 1000.0,
    motor: MotorParams | None = None,
) -> Tuple[pd.DataFrame, Dict[str, float]]:
    """Drive a fresh engine through ``scenario`` and return (trace, metrics)."""
    pid_on, ff_on = mode_flags(mode)
    engine = SimulationEngine(
        EngineConfig(desired_output=scenario.desired_output(0.0), pid_enabled=pid_on, ff_enabled=ff_on, gains=gains),
        motor=motor,
    )
    log = SimLogger()

    n_steps = int(round(t_end / dt))
    for k in range(n_steps):
        # setpoint for the interval [k*dt, (k+1)*dt)
        engine.config.desired_output = scenario.desired_output(k * dt)
        engine.tick(dt)
        log.log_engine(engine)

    df = log.to_dataframe()
    return df, compute_metrics(df, scenario, v_max=engine.motor.v_max)


def compute_metrics(df: pd.DataFrame, scenario: SetpointScenario, v_max: float = V_MAX) -> Dict[str, float]:
    if len(df) == 0:
        return {}
    mask = df["t"].values > float(scenario.t_step)
    t = df.loc[mask, "t"].values
    y = df.loc[mask, "actual"].values
    yref = df.loc[mask, "desired"].values
    if t.size == 0:
        return {}
    yfinal = float(yref[-1])
    # step is measured from where the motor actually was, not from scenario.initial
    before = df.loc[~mask, "actual"].values
    y0 = float(before[-1]) if before.size else 0.0
    return {
        "rmse": rmse(y, yref),
        "ise": ise(y, yref),
        "itae": itae(t - t[0], y, yref),
        "overshoot_%": overshoot_percent(y, yfinal, y0=y0),
        "settling_s": settling_time(t, y, yfinal, tol_pct=2.0, band_ref=yfinal - y0),
        "sse": steady_state_error(y, yref),
        "sat_pct": float(100.0 * np.mean(np.abs(df.loc[mask, "voltage"].values) >= v_max - 1e-9)),
        "final_output": float(df["actual"].values[-1]),
    }


def _plot_run(df: pd.DataFrame, title: str, path_png: str) -> None:
    fig = plt.figure(figsize=(9, 7))
    ax1 = fig.add_subplot(311)
    plot_tracking(ax1, df)
    ax1.set_title(title)
    ax1.legend()

    ax2 = fig.add_subplot(312)
    ax2.plot(df["t"], df["voltage"], label="V (sat)")
    ax2.plot(df["t"], df["voltage_unsat"], "--", label="V (unsat)")
    ax2.set_ylabel("Voltage (V)")
    ax2.legend()

    ax3 = fig.add_subplot(313)
    ax3.plot(df["t"], df["velocity"], label="velocity")
    ax3.plot(df["t"], df["acceleration"], label="acceleration")
    ax3.set_xlabel("Time (s)")
    ax3.legend()

    fig.tight_layout()
    fig.savefig(path_png, dpi=160)
    plt.close(fig)


def run_mode_demo(mode: str, out_dir: str = "outputs") -> Dict[str, float]:
    os.makedirs(out_dir, exist_ok=True)
    apply_plot_style()
    scenario = SetpointScenario(initial=0.0, final=50.0, t_step=1.0)
    df, met = run_scenario(mode, default_gains(), scenario, t_end=30.0)

    base = os.path.join(out_dir, f"step_{mode}")
    df.to_csv(base + ".csv", index=False)
    _plot_run(df, f"Step 0 -> 50 %, mode={mode}", base + ".png")

    print(f"=== Step demo ({mode}) finished ===")
    print(met)
    print(f"Saved: {base}.csv and {base}.png")
    return met


def run_compare_demo(out_dir: str = "outputs") -> pd.DataFrame:
    os.makedirs(out_dir, exist_ok=True)
    apply_plot_style()
    scenario = SetpointScenario(initial=0.0, final=50.0, t_step=1.0)
    gains = default_gains()

    runs = {}
    rows = []
    for mode in MODES:
        df, met = run_scenario(mode, gains, scenario, t_end=30.0)
        runs[mode] = df
        rows.append({"mode": mode, **met})
        logger.debug("mode %s: %s", mode, met)
    mdf = pd.DataFrame(rows)
    mdf.to_csv(os.path.join(out_dir, "compare_metrics.csv"), index=False)

    fig = plt.figure(figsize=(10, 7))
    ax1 = fig.add_subplot(211)
    plot_tracking(ax1, runs["off"], label="off", color=MODE_COLORS["off"])
    for mode in MODES[1:]:
        plot_tracking(ax1, runs[mode], label=mode, color=MODE_COLORS[mode], with_setpoint=False)
    ax1.legend()

    ax2 = fig.add_subplot(212)
    for mode, df in runs.items():
        ax2.plot(df["t"], df["voltage"], color=MODE_COLORS[mode], label=mode)
    ax2.set_xlabel("Time (s)")
    ax2.set_ylabel("Voltage (V)")
    ax2.legend()

    fig.tight_layout()
    fig.savefig(os.path.join(out_dir, "compare_modes.png"), dpi=160)
    plt.close(fig)

    print("=== Compare control modes finished ===")
    print(mdf)
    print(f"Saved: {out_dir}/compare_metrics.csv and {out_dir}/compare_modes.png")
    return mdf
