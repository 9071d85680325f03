"""
Fractional-Memory Price Paths
=============================

Cheap long-memory approximation for teaching the Hurst exponent:

    P_0 = 100
    P_{i+1} = P_i + sigma * Z_i * (i + 1)^(H - 0.5) / 10,   Z_i ~ N(0, 1)

Increments are independent and only their scale grows (H > 0.5) or shrinks
(H < 0.5) with the step index. This is an APPROXIMATION and not an exact
fractional Brownian motion sampler: it reproduces the widening or narrowing
dispersion of fBm paths but not their autocorrelation structure. Use
Cholesky or Davies-Harte sampling when exact fBm covariances are required.
"""

from typing import Dict

import numpy as np
import pandas as pd

from .rng import SeededRandom

START_PRICE = 100.0

# (H, length, volatility, seed) of the three reference regimes
REFERENCE_SERIES: Dict[str, tuple] = {
    "mean_reverting": (0.3, 100, 0.15, 123),
    "random_walk": (0.5, 100, 0.15, 456),
    "trending": (0.7, 100, 0.15, 789),
}


def fractional_memory_path(H: float, length: int, volatility: float,
                           seed: int) -> pd.DataFrame:
    """
    Seeded price path with index-scaled increments.

    Parameters:
        H: Hurst-like exponent in (0, 1)
        length: Number of points
        volatility: Increment scale
        seed: SeededRandom seed

    Returns:
        DataFrame with time, price and return (simple return, 0 at t=0)
    """
    if not 0.0 < H < 1.0:
        raise ValueError(f"H must lie in (0, 1), got {H}")
    if length < 1:
        raise ValueError(f"Length must be positive, got {length}")

    rng = SeededRandom(seed)
    prices = np.empty(length)
    price = START_PRICE
    for i in range(length):
        price += volatility * rng.gauss() * (i + 1) ** (H - 0.5) / 10.0
        prices[i] = price

    returns = np.zeros(length)
    returns[1:] = np.diff(prices) / prices[:-1]
    return pd.DataFrame({"time": np.arange(length), "price": prices, "return": returns})


def reference_paths() -> Dict[str, pd.DataFrame]:
    """Fixed mean-reverting / random-walk / trending paths for comparison."""
    return {name: fractional_memory_path(*args) for name, args in REFERENCE_SERIES.items()}
