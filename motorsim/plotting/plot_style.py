from __future__ import annotations
import matplotlib as mpl
import matplotlib.pyplot as plt

DESIRED_COLOR = "#f97316"
ACTUAL_COLOR = "#3b82f6"
MODE_COLORS = {
    "off": "#64748b",
    "pid": ACTUAL_COLOR,
    "ff": "#10b981",
    "pid_ff": "#a855f7",
}


def apply_plot_style() -> None:
    """White background, dashed light grid, setpoint/output colours first in the cycle."""
    plt.rcParams.update({
        "figure.facecolor": "white",
        "axes.facecolor": "white",
        "savefig.facecolor": "white",
        "axes.grid": True,
        "grid.linestyle": "--",
        "grid.color": "#cbd5e1",
        "grid.linewidth": 0.6,
        "axes.prop_cycle": mpl.cycler(color=[ACTUAL_COLOR, DESIRED_COLOR, "#10b981", "#a855f7", "#64748b"]),
        "font.size": 10,
        "legend.fontsize": 9,
        "lines.linewidth": 1.8,
    })


def plot_tracking(ax, df, label: str = "output", color: str | None = None, with_setpoint: bool = True) -> None:
    """Output-vs-setpoint panel on a 0..100 % axis."""
    if with_setpoint:
        ax.plot(df["t"], df["desired"], "--", color=DESIRED_COLOR, label="setpoint")
    ax.plot(df["t"], df["actual"], color=color or ACTUAL_COLOR, label=label)
    ax.set_ylim(-2, 102)
    ax.set_ylabel("Output (%)")


def save_figure(fig, path_no_ext: str, dpi: int = 160) -> None:
    """Save both PNG and SVG."""
    fig.savefig(path_no_ext + ".png", dpi=dpi, bbox_inches="tight")
    fig.savefig(path_no_ext + ".svg", bbox_inches="tight")
