"""
config.py
---------
Centralised configuration for the lesson computation core.
Tunables are read from environment variables with sensible defaults so the
same build can run interactively (small grids) or in tests.
"""

import os
from dataclasses import dataclass, field
from typing import Dict


@dataclass
class CalendarConfig:
    """Day-count conventions used when annualised inputs are rescaled."""
    trading_days:   int = 252
    calendar_days:  int = 365


@dataclass
class SpectralConfig:
    """Bounds for the direct (non-fast) Fourier summation."""
    max_samples:    int   = int(os.getenv("FINLESSONS_DFT_MAX_SAMPLES", "200"))
    n_bins:         int   = int(os.getenv("FINLESSONS_DFT_BINS", "100"))
    max_frequency:  float = 50.0      # Hz cap for the frequency grid
    max_period:     int   = 100       # longest cycle scanned by the period scan
    period_step:    int   = 5


@dataclass
class MarketConfig:
    """Intraday session layout and guard rails for regime simulations."""
    session_open:   float = 9.5       # 09:30 in decimal hours
    session_close:  float = 16.0      # 16:00
    price_floor:    float = 0.7       # × base price
    price_cap:      float = 1.3       # × base price
    min_volume:     int   = 1000
    sma_window:     int   = 20


@dataclass
class EngineConfig:
    """Master configuration aggregating all sub-configs."""
    calendar: CalendarConfig = field(default_factory=CalendarConfig)
    spectral: SpectralConfig = field(default_factory=SpectralConfig)
    market:   MarketConfig   = field(default_factory=MarketConfig)

    # Reproducibility and caching
    default_seed: int = int(os.getenv("FINLESSONS_SEED", "42"))
    cache_size:   int = int(os.getenv("FINLESSONS_CACHE_SIZE", "32"))

    log_level: str = os.getenv("FINLESSONS_LOG_LEVEL", "INFO")

    # Ordinal used when sorting lessons by difficulty
    difficulty_order: Dict[str, int] = field(default_factory=lambda: {
        "beginner": 1, "intermediate": 2, "advanced": 3,
    })


# Singleton instance used throughout the project
CONFIG = EngineConfig()
