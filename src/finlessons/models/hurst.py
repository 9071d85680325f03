"""
Hurst Exponent
==============

The Hurst exponent H measures long-range memory in a series:

    H = 0.5   random walk, no memory
    H > 0.5   persistent: moves tend to continue (trending)
    H < 0.5   anti-persistent: moves tend to reverse (mean-reverting)

This module classifies a given H for the lesson and estimates H from data
with classic rescaled-range (R/S) analysis (Hurst, 1951):

    E[R/S](n) ~ c n^H   =>   log(R/S) = H log(n) + log(c)
"""

from dataclasses import dataclass
from typing import Dict

import numpy as np


@dataclass
class HurstEstimate:
    """Result of an R/S regression."""
    hurst: float              # H clipped to [0, 1]
    r_squared: float          # fit quality of the log-log regression
    fit_points: int           # number of window sizes used
    method: str


def classify(H: float) -> Dict[str, object]:
    """
    Lesson labels for an exponent.

    Returns:
        classification, memory_strength (|H - 0.5| x 2), predictability and
        risk_profile
    """
    if H < 0.5:
        classification, predictability, risk = "Mean-Reverting", "Reverting", "Lower tail risk"
    elif H > 0.5:
        classification, predictability, risk = "Trending", "Persistent", "Higher tail risk"
    else:
        classification, predictability, risk = "Random Walk", "None", "Normal risk"
    return {
        "classification": classification,
        "memory_strength": abs(H - 0.5) * 2.0,
        "predictability": predictability,
        "risk_profile": risk,
    }


def rescaled_range_hurst(series, min_window: int = 10, n_windows: int = 20) -> HurstEstimate:
    """
    Estimate H by rescaled-range analysis.

    For each window size n (log-spaced between ``min_window`` and N/4) the
    series is cut into non-overlapping windows; every window contributes
    R/S = (max - min of the cumulative mean-adjusted sum) / std. H is the
    slope of log(mean R/S) against log(n).

    Parameters:
        series: Increments or returns (not price levels)
        min_window: Smallest window size
        n_windows: Number of candidate window sizes

    Returns:
        HurstEstimate; H = 0.5 with method "insufficient_data" when fewer
        than three window sizes can be evaluated.
    """
    x = np.asarray(series, dtype=float).ravel()
    x = x[np.isfinite(x)]
    n = len(x)
    max_window = n // 4

    if max_window < min_window:
        return HurstEstimate(0.5, 0.0, 0, "insufficient_data")

    sizes = np.unique(np.logspace(np.log10(min_window), np.log10(max_window),
                                  n_windows).astype(int))
    log_n, log_rs = [], []
    for size in sizes:
        rs_values = []
        for start in range(0, n - size + 1, size):
            window = x[start:start + size]
            std = np.std(window, ddof=1)
            if std < 1e-12:
                continue
            walk = np.cumsum(window - window.mean())
            rs_values.append((walk.max() - walk.min()) / std)
        if rs_values:
            log_n.append(np.log(size))
            log_rs.append(np.log(np.mean(rs_values)))

    if len(log_n) < 3:
        return HurstEstimate(0.5, 0.0, len(log_n), "insufficient_data")

    log_n, log_rs = np.array(log_n), np.array(log_rs)
    coeffs = np.polyfit(log_n, log_rs, 1)
    fitted = np.polyval(coeffs, log_n)
    ss_res = np.sum((log_rs - fitted) ** 2)
    ss_tot = np.sum((log_rs - log_rs.mean()) ** 2)
    r_squared = 1.0 - ss_res / ss_tot if ss_tot > 0 else 0.0

    return HurstEstimate(
        hurst=float(np.clip(coeffs[0], 0.0, 1.0)),
        r_squared=float(max(0.0, r_squared)),
        fit_points=len(log_n),
        method="rescaled_range",
    )


def distribution_comparison(lo: float = -4.0, hi: float = 4.0,
                            step: float = 0.1) -> Dict[str, np.ndarray]:
    """
    Standard normal density next to a wider bell curve exp(-0.3 x^2)
    used to illustrate the wider dispersion of persistent series.
    """
    n = int(round((hi - lo) / step))
    x = np.round(lo + np.arange(n + 1) * step, 10)
    random_walk = np.exp(-0.5 * x ** 2) / np.sqrt(2.0 * np.pi)
    trending = np.exp(-0.3 * x ** 2) / np.sqrt(2.0 * np.pi / 0.3)
    return {"return": x, "random_walk": random_walk, "trending": trending}
