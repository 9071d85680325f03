"""
Synthetic Series Generators
===========================
Seeded random source, regime-based intraday sessions, fractional-memory
paths and cycle signals.
"""

from .rng import SeededRandom
from .market import (
    REGIMES, RegimeMarketSimulator, SessionConfig, choppy_session,
    ideal_trend_session, mixed_regime_session,
)
from .fractional import fractional_memory_path, reference_paths
from .signals import market_cycle_composite, two_tone_signal

__all__ = [
    "SeededRandom",
    "REGIMES", "RegimeMarketSimulator", "SessionConfig", "choppy_session",
    "ideal_trend_session", "mixed_regime_session",
    "fractional_memory_path", "reference_paths",
    "market_cycle_composite", "two_tone_signal",
]
