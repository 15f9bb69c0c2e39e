from __future__ import annotations

import numpy as np


def rmse(y: np.ndarray, yref: np.ndarray) -> float:
    y = np.asarray(y, dtype=float)
    yref = np.asarray(yref, dtype=float)
    return float(np.sqrt(np.mean((y - yref) ** 2)))


def ise(y: np.ndarray, yref: np.ndarray) -> float:
    y = np.asarray(y, dtype=float)
    yref = np.asarray(yref, dtype=float)
    return float(np.sum((y - yref) ** 2))


def itae(t: np.ndarray, y: np.ndarray, yref: np.ndarray) -> float:
    t = np.asarray(t, dtype=float)
    y = np.asarray(y, dtype=float)
    yref = np.asarray(yref, dtype=float)
    return float(np.sum(t * np.abs(y - yref)))


def overshoot_percent(y: np.ndarray, yref_final: float, y0: float = 0.0) -> float:
    """Peak excursion past ``yref_final`` as a percentage of the step size."""
    y = np.asarray(y, dtype=float)
    step = yref_final - y0
    if step == 0 or y.size == 0:
        return 0.0
    if step > 0:
        peak = float(np.max(y)) - yref_final
    else:
        peak = yref_final - float(np.min(y))
    return max(0.0, peak / abs(step) * 100.0)


def settling_time(t: np.ndarray, y: np.ndarray, yref_final: float, tol_pct: float = 2.0,
                  band_ref: float | None = None) -> float:
    """Settling time (s) using ±tol_pct% band around yref_final.

    The band is a percentage of ``band_ref`` (default: |yref_final|).
    If never settles, return inf.
    """
    t = np.asarray(t, dtype=float)
    y = np.asarray(y, dtype=float)
    if t.size == 0:
        return float("inf")
    ref = abs(yref_final) if band_ref is None else abs(band_ref)
    band = ref * (tol_pct / 100.0)
    inside = np.abs(y - yref_final) <= band
    # last sample outside the band decides
    outside = np.flatnonzero(~inside)
    if outside.size == 0:
        return 0.0
    i = int(outside[-1]) + 1
    if i >= t.size:
        return float("inf")
    return float(t[i] - t[0])


def steady_state_error(y: np.ndarray, yref: np.ndarray, tail: int = 10) -> float:
    y = np.asarray(y, dtype=float)
    yref = np.asarray(yref, dtype=float)
    if y.size == 0:
        return 0.0
    n = min(int(tail), y.size)
    return float(np.mean(yref[-n:] - y[-n:]))
