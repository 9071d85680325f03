"""
Volume-Weighted Average Price (VWAP)
====================================

    VWAP_t = sum(P_i V_i) / sum(V_i),  i <= t

The lesson contrasts VWAP with a simple moving average on a simulated
intraday session, walks through the running sums row by row and shows how
the indicator behaves in trending, choppy and mixed markets.
"""

from typing import Any, Dict, Mapping

import numpy as np
import pandas as pd

from ..config import CONFIG
from ..core.module import ChartContent, InteractiveContent, LessonModule, PhaseDescriptor
from ..core.parameters import Parameter, ParameterKind, ParameterValidation
from ..models.vwap import session_summary, vwap_walkthrough
from ..simulation.market import (
    MARKET_CONDITIONS, REGIMES, VOLUME_PATTERNS, RegimeMarketSimulator, SessionConfig,
    choppy_session, ideal_trend_session, mixed_regime_session,
)
from ..simulation.rng import SeededRandom
from ..utils import clock_label

CONDITION_LABELS = {
    "trending": "Trending Market",
    "choppy": "Choppy Market",
    "mixed": "Mixed Conditions",
}
PATTERN_LABELS = {
    "u-shaped": "U-Shaped (High at Open/Close)",
    "declining": "Declining Throughout Day",
    "random": "Random Distribution",
    "spike": "Mid-Day Volume Spike",
}

PARAMETERS = (
    Parameter(key="stock_price", label="Stock Price", default=100,
              min=50, max=200, step=1, unit="$", formatter=lambda v: f"${v:.2f}",
              category="market", importance="high",
              description="Base price of the stock at market open"),
    Parameter(key="volume_multiplier", label="Volume Multiplier", default=1.0,
              min=0.5, max=3.0, step=0.1, unit="x", formatter=lambda v: f"{v:.1f}x",
              category="volume", importance="medium",
              description="Scales overall trading volume for the session"),
    Parameter(key="market_volatility", label="Market Volatility", default=0.2,
              min=0.1, max=0.5, step=0.01, unit="%",
              formatter=lambda v: f"{v * 100:.0f}%",
              category="market", importance="high",
              description="Size of intraday price moves"),
    Parameter(key="time_intervals", label="Time Intervals", default=50,
              min=20, max=100, step=5, unit="intervals",
              formatter=lambda v: f"{v} intervals",
              validation=ParameterValidation(min=20, max=100, type="integer"),
              category="calculation", importance="low",
              description="Number of bars the trading session is divided into"),
    Parameter(key="market_condition", label="Market Condition", default="trending",
              kind=ParameterKind.SELECT, options=MARKET_CONDITIONS,
              formatter=lambda v: CONDITION_LABELS.get(v, v),
              validation=ParameterValidation(type="string"),
              category="scenario", importance="high",
              description="Market regime driving the simulated price path"),
    Parameter(key="volume_pattern", label="Volume Pattern", default="u-shaped",
              kind=ParameterKind.SELECT, options=VOLUME_PATTERNS,
              formatter=lambda v: PATTERN_LABELS.get(v, v),
              validation=ParameterValidation(type="string"),
              category="volume", importance="medium",
              description="How traded volume is distributed across the day"),
)


def _expected_pattern(pattern: str, progress: np.ndarray) -> np.ndarray:
    """Mean of the intraday volume multiplier at each point of the session."""
    if pattern == "u-shaped":
        return 1.4 - np.sin(progress * np.pi) ** 0.3
    if pattern == "declining":
        return 1.5 - progress * 0.8
    if pattern == "random":
        return np.ones_like(progress)
    distance = np.abs(progress - 0.5)
    return np.where(distance < 0.2, 2.0 - distance / 0.2, 0.8)


def calculate(params: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Structural facts of the session implied by the parameters. Everything
    that depends on the random path lives in the generated series.
    """
    mkt = CONFIG.market
    base = params["stock_price"]
    intervals = int(params["time_intervals"])
    condition = params["market_condition"]
    regime = REGIMES[condition]

    progress = np.arange(intervals) / (intervals - 1)
    profile = _expected_pattern(params["volume_pattern"], progress)
    condition_factor = 0.8 if condition == "choppy" else 1.0
    expected_volume = 10000.0 * float(profile.mean()) * params["volume_multiplier"] * condition_factor

    return {
        "session_open": clock_label(mkt.session_open),
        "session_close": clock_label(mkt.session_close),
        "interval_minutes": (mkt.session_close - mkt.session_open) * 60.0 / intervals,
        "price_floor": base * mkt.price_floor,
        "price_cap": base * mkt.price_cap,
        "trend_strength": regime.trend_strength,
        "trend_persistence": regime.trend_persistence,
        "noise_level": regime.noise_level,
        "mean_reversion_strength": regime.mean_reversion_strength,
        "momentum_decay": regime.momentum_decay,
        "volume_profile_mean": float(profile.mean()),
        "expected_interval_volume": max(float(mkt.min_volume), expected_volume),
    }


def generate(params: Mapping[str, Any], result: Mapping[str, Any],
             seed: int) -> Dict[str, pd.DataFrame]:
    base = params["stock_price"]
    config = SessionConfig(
        base_price=base,
        volatility=params["market_volatility"],
        intervals=int(params["time_intervals"]),
        condition=params["market_condition"],
        volume_multiplier=params["volume_multiplier"],
        volume_pattern=params["volume_pattern"],
    )

    intraday = RegimeMarketSimulator(config).simulate(SeededRandom(seed))
    summary = pd.DataFrame([session_summary(intraday)]).reset_index(names="position")

    return {
        "intraday": intraday,
        "session_summary": summary,
        "walkthrough_simple": vwap_walkthrough(base, "simple"),
        "walkthrough_trending": vwap_walkthrough(base, "trending"),
        "walkthrough_realistic": vwap_walkthrough(base, "realistic"),
        "trending_up": ideal_trend_session(base, "up", SeededRandom(seed + 1)),
        "trending_down": ideal_trend_session(base, "down", SeededRandom(seed + 2)),
        "choppy": choppy_session(base, SeededRandom(seed + 3)),
        "mixed": mixed_regime_session(base, params["market_volatility"], SeededRandom(seed + 4)),
    }


def domain_check(params: Mapping[str, Any], result: Mapping[str, Any]) -> bool:
    """
    No domain constraint beyond parameter validation: every validated
    snapshot describes a feasible session, and the simulator enforces the
    price band and the volume floor while generating.
    """
    return True


PHASES = (
    PhaseDescriptor(
        id="introduction", title="What is VWAP?",
        description="Introduction to Volume-Weighted Average Price and comparison with "
                    "simple averages",
        estimated_time=8,
        content=InteractiveContent(
            parameters=("stock_price", "market_volatility", "volume_pattern"),
            series=("intraday",),
            caption="Price, VWAP and SMA across the session")),
    PhaseDescriptor(
        id="calculation", title="The VWAP Calculation",
        description="Step-by-step breakdown of how VWAP is calculated",
        estimated_time=7,
        content=ChartContent(
            series=("walkthrough_simple", "walkthrough_trending", "walkthrough_realistic"),
            caption="Running price-volume sums row by row")),
    PhaseDescriptor(
        id="strategy", title="Trading Strategies with VWAP",
        description="How institutional and retail traders use VWAP in practice",
        estimated_time=10,
        content=InteractiveContent(
            parameters=("market_condition", "volume_multiplier", "time_intervals"),
            series=("intraday", "session_summary"))),
    PhaseDescriptor(
        id="risk-management", title="Limitations and Advanced Concepts",
        description="Understanding when VWAP works well and when it doesn't",
        estimated_time=10,
        content=ChartContent(series=("trending_up", "trending_down", "choppy", "mixed"))),
)

MODULE = LessonModule(
    id="vwap",
    title="Volume-Weighted Average Price (VWAP)",
    short_title="VWAP",
    description="Learn how volume-weighted pricing works in financial markets through "
                "interactive charts and real-world trading scenarios.",
    difficulty="intermediate",
    duration="25-35 minutes",
    estimated_time=30,
    topics=("Trading", "Technical Analysis", "Volume Analysis", "Market Microstructure"),
    categories=("technical-analysis", "trading-strategies", "market-data"),
    tags=("vwap", "volume-weighted", "trading-benchmark", "intraday-analysis",
          "market-microstructure"),
    prerequisites=(
        "Basic understanding of stock prices and trading volume",
        "Familiarity with simple moving averages",
        "Understanding of intraday trading concepts",
        "Basic knowledge of market participants (institutional vs retail)",
    ),
    learning_objectives=(
        "Understand the concept and calculation of VWAP",
        "Learn how VWAP differs from simple moving averages",
        "Explore institutional and retail trading applications of VWAP",
        "Analyze VWAP behavior in different market conditions",
        "Understand the limitations and proper context for VWAP usage",
        "Interpret volume-price relationships in intraday trading",
    ),
    parameter_schema=PARAMETERS,
    calculate=calculate,
    generate=generate,
    phases=PHASES,
    domain_check=domain_check,
)
