from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

import pandas as pd
import matplotlib.pyplot as plt

from motorsim.control.control_law import ControlGains
from motorsim.sim.engine import MotorParams, SIMULATION_RATE_MS
from motorsim.sim.scenarios import SetpointScenario
from motorsim.sim.simulator import MODES, run_scenario
from motorsim.plotting.plot_style import MODE_COLORS, apply_plot_style, plot_tracking, save_figure

logger = logging.getLogger(__name__)


def _gains_from(cfg: Dict[str, Any], base: ControlGains | None = None) -> ControlGains:
    base = base if base is not None else ControlGains()
    return ControlGains(
        kp=float(cfg.get("kp", base.kp)),
        ki=float(cfg.get("ki", base.ki)),
        kd=float(cfg.get("kd", base.kd)),
        ks=float(cfg.get("ks", base.ks)),
        kv=float(cfg.get("kv", base.kv)),
        ka=float(cfg.get("ka", base.ka)),
    )


def _scenario_from(cfg: Dict[str, Any]) -> SetpointScenario:
    return SetpointScenario(
        initial=float(cfg.get("initial", 0.0)),
        final=float(cfg["final"]),
        t_step=float(cfg.get("t_step", 0.0)),
        ramp_s=float(cfg.get("ramp_s", 0.0)),
    )


def apply_motor_variation(p: MotorParams, mult: Dict[str, float]) -> MotorParams:
    """Return a new MotorParams with multipliers applied to k_motor / k_damp."""
    return MotorParams(
        k_motor=p.k_motor * float(mult.get("k_motor", 1.0)),
        k_damp=p.k_damp * float(mult.get("k_damp", 1.0)),
        v_max=p.v_max,
    )


def run_batch(catalog_path: str, out_dir: str | None = None) -> str:
    """Run every catalog scenario under each control mode and write tables/logs/plots.

    Catalog layout::

        {
          "nominal": {"dt": 0.05, "t_end": 30.0, "gains": {...}, "modes": [...]},
          "scenarios": [{"id": "S1", "setpoint": {"final": 50, "t_step": 1.0},
                         "gains": {...}, "mult": {"k_damp": 2.0}}, ...]
        }

    Returns the output directory path.
    """
    apply_plot_style()

    catalog = json.loads(Path(catalog_path).read_text(encoding="utf-8"))
    nom = catalog["nominal"]
    scenarios = catalog["scenarios"]

    dt = float(nom.get("dt", SIMULATION_RATE_MS / 1000.0))
    t_end = float(nom.get("t_end", 30.0))
    gains_nom = _gains_from(nom.get("gains", {}))
    modes = [m.lower() for m in nom.get("modes", MODES)]
    for m in modes:
        if m not in MODES:
            raise ValueError(f"unknown mode {m!r} in catalog, expected one of {MODES}")

    if out_dir is None:
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        out_dir = str(Path("outputs") / f"batch_{stamp}")
    out = Path(out_dir)
    (out / "csv").mkdir(parents=True, exist_ok=True)
    (out / "plots").mkdir(parents=True, exist_ok=True)

    results = []

    for sc in scenarios:
        sid = sc["id"]
        scenario = _scenario_from(sc["setpoint"])
        gains = _gains_from(sc.get("gains", {}), base=gains_nom)
        motor = apply_motor_variation(MotorParams(), sc.get("mult", {}))
        logger.debug("scenario %s: %s %s", sid, scenario, motor)

        runs = {}
        for mode in modes:
            df, met = run_scenario(mode, gains, scenario, t_end=t_end, dt=dt, motor=motor)
            df.to_csv(out / "csv" / f"{sid}_{mode}.csv", index=False)
            runs[mode] = df
            results.append({"scenario": sid, "mode": mode, **met})

        fig, axs = plt.subplots(2, 1, figsize=(9.2, 6.5), sharex=True)
        for i, (mode, df) in enumerate(runs.items()):
            plot_tracking(axs[0], df, label=mode, color=MODE_COLORS[mode], with_setpoint=(i == 0))
        axs[0].legend()
        axs[0].set_title(f"Scenario {sid}: output vs setpoint")

        for mode, df in runs.items():
            axs[1].plot(df["t"], df["voltage"], color=MODE_COLORS[mode], label=mode)
        axs[1].axhline(motor.v_max, linestyle=":", color="gray")
        axs[1].axhline(-motor.v_max, linestyle=":", color="gray")
        axs[1].set_xlabel("t (s)")
        axs[1].set_ylabel("V")
        axs[1].legend(ncols=2)
        axs[1].set_title("Motor voltage and limits")

        fig.tight_layout()
        save_figure(fig, str(out / "plots" / f"{sid}_compare"), dpi=300)
        plt.close(fig)

    rdf = pd.DataFrame(results)
    rdf.to_csv(out / "metrics_all.csv", index=False)

    pivot = rdf.pivot_table(
        index="scenario",
        columns="mode",
        values=["rmse", "overshoot_%", "settling_s", "itae", "sse", "sat_pct"],
        aggfunc="first",
    )
    pivot.to_csv(out / "metrics_pivot.csv")

    # Store a copy of the catalog for traceability
    (out / "scenarios_catalog.json").write_text(json.dumps(catalog, indent=2), encoding="utf-8")
    return str(out)
