"""
Bounded Discrete Fourier Analysis
=================================

Direct (non-fast) Fourier summation over a small frequency grid, sized for
interactive use rather than spectral accuracy:

    X(f) = sum_{n < M} x_n exp(-2 pi i f n / fs),    M = min(N, max_samples)
    |X(f)| / N,   arg X(f)

for f = k f_max / n_bins, k = 0..n_bins. Only the first ``max_samples``
samples enter the sum while the normalisation uses the full length N, so a
truncated transform under-reports magnitudes by roughly M / N. The number of
analysed and discarded samples is returned with every spectrum.

Also provides the window functions of the signal-processing lesson and a
period scan that looks for market cycles in a detrended series.
"""

from dataclasses import dataclass
from typing import Sequence

import numpy as np
import pandas as pd

from ..config import CONFIG
from ..utils import timeit

WINDOWS = ("none", "hanning", "hamming")


@dataclass
class Spectrum:
    """Bounded DFT output."""
    frame: pd.DataFrame        # frequency, magnitude, phase, real, imaginary
    samples_analysed: int
    samples_discarded: int


def window_weights(kind: str, n: int) -> np.ndarray:
    """
    Taper weights.

        hanning  w_i = 0.5 (1 - cos(2 pi i / (n - 1)))
        hamming  w_i = 0.54 - 0.46 cos(2 pi i / (n - 1))
    """
    if kind not in WINDOWS:
        raise ValueError(f"Unknown window {kind!r}; expected one of {WINDOWS}")
    if kind == "none" or n < 2:
        return np.ones(n)
    phase = 2.0 * np.pi * np.arange(n) / (n - 1)
    if kind == "hanning":
        return 0.5 * (1.0 - np.cos(phase))
    return 0.54 - 0.46 * np.cos(phase)


@timeit
def bounded_dft(signal: Sequence[float], sample_rate: float, max_frequency: float,
                n_bins: int = None, max_samples: int = None) -> Spectrum:
    """
    Direct DFT of ``signal`` on ``n_bins + 1`` frequencies in [0, max_frequency].

    Parameters:
        signal: Time-domain samples (already windowed if desired)
        sample_rate: Samples per second
        max_frequency: Upper end of the frequency grid (Hz)
        n_bins: Grid intervals (default ``CONFIG.spectral.n_bins``)
        max_samples: Summation bound (default ``CONFIG.spectral.max_samples``)

    Returns:
        Spectrum with the frequency table and the truncation counts
    """
    x = np.asarray(signal, dtype=float)
    n_total = len(x)
    if n_total == 0:
        raise ValueError("Signal is empty")
    if sample_rate <= 0:
        raise ValueError(f"Sample rate must be positive, got {sample_rate}")

    n_bins = n_bins or CONFIG.spectral.n_bins
    max_samples = max_samples or CONFIG.spectral.max_samples
    used = min(n_total, max_samples)

    freqs = np.arange(n_bins + 1) * (max_frequency / n_bins)
    n = np.arange(used)
    angle = -2.0 * np.pi * np.outer(freqs, n) / sample_rate
    real = (x[:used] * np.cos(angle)).sum(axis=1)
    imag = (x[:used] * np.sin(angle)).sum(axis=1)

    frame = pd.DataFrame({
        "frequency": freqs,
        "magnitude": np.sqrt(real ** 2 + imag ** 2) / n_total,
        "phase": np.arctan2(imag, real),
        "real": real / n_total,
        "imaginary": imag / n_total,
    })
    return Spectrum(frame, used, n_total - used)


def detrend(signal: Sequence[float]) -> np.ndarray:
    """Remove the least-squares straight line."""
    y = np.asarray(signal, dtype=float)
    if len(y) < 2:
        return y - y.mean()
    t = np.arange(len(y))
    slope, intercept = np.polyfit(t, y, 1)
    return y - (slope * t + intercept)


def scan_periods(n_points: int, max_period: int = None, step: int = None) -> np.ndarray:
    """Candidate cycle lengths 5, 10, ... up to min(N // 2, max_period)."""
    max_period = max_period or CONFIG.spectral.max_period
    step = step or CONFIG.spectral.period_step
    upper = min(n_points // 2, max_period)
    return np.arange(step, upper + 1, step)


def period_scan(signal: Sequence[float], periods: Sequence[int] = None) -> pd.DataFrame:
    """
    Cycle strength at each candidate period.

    The series is detrended first so a drift does not leak into long
    periods. Magnitude is the single-sided amplitude estimate
    2 |sum_t y_t exp(-2 pi i t / P)| / N, which recovers A for a clean
    sine A sin(2 pi t / P) sampled over whole cycles.
    """
    y = detrend(signal)
    n = len(y)
    if periods is None:
        periods = scan_periods(n)
    periods = np.asarray(periods, dtype=float)
    if len(periods) == 0:
        return pd.DataFrame({"period": np.array([], dtype=int), "magnitude": np.array([])})

    t = np.arange(n)
    angle = -2.0 * np.pi * np.outer(1.0 / periods, t)
    real = (y * np.cos(angle)).sum(axis=1)
    imag = (y * np.sin(angle)).sum(axis=1)
    magnitude = 2.0 * np.sqrt(real ** 2 + imag ** 2) / n
    return pd.DataFrame({"period": periods.astype(int), "magnitude": magnitude})
