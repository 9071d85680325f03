"""
Cycle Signals
=============

Seeded synthetic signals for the two Fourier lessons: a two-tone signal in
seconds for the signal-processing lesson and a price-like composite of two
market cycles, a linear trend and noise for the finance lesson.
"""

import math

import numpy as np
import pandas as pd

from .rng import SeededRandom


def two_tone_signal(frequency1: float, frequency2: float, amplitude1: float,
                    amplitude2: float, phase1: float, phase2: float,
                    sample_rate: float, duration: float, noise_level: float,
                    rng: SeededRandom) -> pd.DataFrame:
    """
    x(t) = A1 sin(2 pi f1 t + phi1) + A2 sin(2 pi f2 t + phi2) + e(t)

    e(t) is uniform in [-noise_level, noise_level].

    Returns:
        DataFrame with time, amplitude (the composite), signal1, signal2 and
        noise
    """
    n = int(math.floor(sample_rate * duration))
    t = np.arange(n) / sample_rate
    noise = np.array([noise_level * (rng.random() - 0.5) * 2.0 for _ in range(n)])
    s1 = amplitude1 * np.sin(2.0 * np.pi * frequency1 * t + phase1)
    s2 = amplitude2 * np.sin(2.0 * np.pi * frequency2 * t + phase2)
    return pd.DataFrame({
        "time": t,
        "amplitude": s1 + s2 + noise,
        "signal1": s1,
        "signal2": s2,
        "noise": noise,
    })


def market_cycle_composite(period1: float, period2: float, amplitude1: float,
                           amplitude2: float, noise_level: float, n_points: int,
                           trend_strength: float, rng: SeededRandom) -> pd.DataFrame:
    """
    Composite of two cycles with drift and noise, plus a price view.

        c_t = A1 sin(2 pi t / P1) + A2 sin(2 pi t / P2) + k t + noise (u - 0.5)
        price_t = 100 + 10 c_t
    """
    t = np.arange(n_points)
    cycle1 = amplitude1 * np.sin(2.0 * np.pi * t / period1)
    cycle2 = amplitude2 * np.sin(2.0 * np.pi * t / period2)
    trend = trend_strength * t
    noise = np.array([noise_level * (rng.random() - 0.5) for _ in range(n_points)])
    composite = cycle1 + cycle2 + trend + noise
    return pd.DataFrame({
        "time": t,
        "cycle1": cycle1,
        "cycle2": cycle2,
        "trend": trend,
        "noise": noise,
        "composite": composite,
        "price": 100.0 + composite * 10.0,
    })
