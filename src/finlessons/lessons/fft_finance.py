"""
Fast Fourier Transform in Finance
=================================

Prices are treated as a signal: two market cycles, a linear drift and noise.
A period scan on the detrended composite shows which cycle lengths carry
the most energy and how noise blurs them.
"""

from typing import Any, Dict, Mapping

import numpy as np
import pandas as pd

from ..core.module import (
    ChartContent, InteractiveContent, LessonModule, NarrativeContent, PhaseDescriptor,
)
from ..core.parameters import Parameter, ParameterValidation
from ..models.spectral import period_scan, scan_periods
from ..simulation.rng import SeededRandom
from ..simulation.signals import market_cycle_composite

NOISY_FLOOR = 1.0           # noise level of the "realistic" spectrum
NOISY_SCALE = 4.0

PARAMETERS = (
    Parameter(key="period1", label="Short-Term Cycle Period", default=20,
              min=5, max=60, step=1, unit="days", formatter=lambda v: f"{v} days",
              validation=ParameterValidation(min=5, max=60, type="integer"),
              category="Market Cycles", importance="high",
              description="Period of the primary short-term market cycle (in trading days)"),
    Parameter(key="period2", label="Long-Term Cycle Period", default=50,
              min=30, max=120, step=5, unit="days", formatter=lambda v: f"{v} days",
              validation=ParameterValidation(min=30, max=120, type="integer"),
              category="Market Cycles", importance="high",
              description="Period of the secondary long-term market cycle (in trading days)"),
    Parameter(key="amplitude1", label="Short-Term Cycle Strength", default=1.0,
              min=0.1, max=2.0, step=0.1, unit="x", formatter=lambda v: f"{v:.1f}x",
              category="Market Cycles", importance="medium",
              description="Amplitude/strength of the short-term market cycle"),
    Parameter(key="amplitude2", label="Long-Term Cycle Strength", default=0.8,
              min=0.1, max=2.0, step=0.1, unit="x", formatter=lambda v: f"{v:.1f}x",
              category="Market Cycles", importance="medium",
              description="Amplitude/strength of the long-term market cycle"),
    Parameter(key="noise_level", label="Market Noise Level", default=0.3,
              min=0.0, max=1.0, step=0.05, formatter=lambda v: f"{v * 100:.0f}%",
              category="Market Conditions", importance="medium",
              description="Amount of random noise in the market data"),
    Parameter(key="data_points", label="Data History Length", default=200,
              min=100, max=500, step=25, unit="days", formatter=lambda v: f"{v} days",
              validation=ParameterValidation(min=100, max=500, type="integer"),
              category="Analysis Parameters", importance="low",
              description="Number of trading days in the analysis window"),
    Parameter(key="trend_strength", label="Overall Trend Strength", default=0.02,
              min=-0.05, max=0.05, step=0.005, formatter=lambda v: f"{v * 100:.1f}%/day",
              category="Market Conditions", importance="medium",
              description="Strength of the underlying market trend"),
)


def _clean_composite(params: Mapping[str, Any]) -> np.ndarray:
    t = np.arange(int(params["data_points"]))
    return (params["amplitude1"] * np.sin(2.0 * np.pi * t / params["period1"])
            + params["amplitude2"] * np.sin(2.0 * np.pi * t / params["period2"])
            + params["trend_strength"] * t)


def calculate(params: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Cycle facts of the noise-free composite. ``strongest_period`` is the
    scanned period with the largest magnitude, which can differ from the
    planted periods when they fall between grid points.
    """
    n = int(params["data_points"])
    periods = scan_periods(n)
    scan = period_scan(_clean_composite(params), periods)
    strongest = int(scan.loc[scan["magnitude"].idxmax(), "period"]) if len(scan) else 0
    return {
        "dominant_period": int(params["period1"]),
        "secondary_period": int(params["period2"]),
        "data_points_count": n,
        "cycles_detected": len(periods),
        "strongest_period": strongest,
    }


def _composite(params: Mapping[str, Any], noise_level: float, rng: SeededRandom) -> pd.DataFrame:
    return market_cycle_composite(
        period1=params["period1"], period2=params["period2"],
        amplitude1=params["amplitude1"], amplitude2=params["amplitude2"],
        noise_level=noise_level, n_points=int(params["data_points"]),
        trend_strength=params["trend_strength"], rng=rng)


def generate(params: Mapping[str, Any], result: Mapping[str, Any],
             seed: int) -> Dict[str, pd.DataFrame]:
    market = _composite(params, params["noise_level"], SeededRandom(seed))
    noisy = _composite(params, max(NOISY_FLOOR, NOISY_SCALE * params["noise_level"]),
                       SeededRandom(seed + 1))

    clean = pd.DataFrame({
        "period": [params["period1"], params["period2"]],
        "magnitude": [params["amplitude1"], params["amplitude2"]],
    }).sort_values("period", kind="stable").reset_index(drop=True)

    return {
        "constituent_cycles": market[["time", "cycle1", "cycle2"]],
        "composite_signal": market[["time", "composite", "price"]],
        "frequency_spectrum": period_scan(market["composite"]),
        "clean_spectrum": clean,
        "noisy_spectrum": period_scan(noisy["composite"]),
    }


def domain_check(params: Mapping[str, Any], result: Mapping[str, Any]) -> bool:
    return result["cycles_detected"] > 0


PHASES = (
    PhaseDescriptor(
        id="introduction", title="Financial Data as a Signal",
        description="Understanding how market data can be viewed as signals with underlying "
                    "cyclical components",
        estimated_time=8,
        content=InteractiveContent(parameters=("period1", "period2", "amplitude1", "amplitude2"),
                                   series=("constituent_cycles", "composite_signal"))),
    PhaseDescriptor(
        id="fft-cycles", title="Uncovering Market Cycles",
        description="Using FFT to transform price data and identify dominant cyclical patterns",
        estimated_time=10,
        content=InteractiveContent(parameters=("noise_level", "data_points", "trend_strength"),
                                   series=("frequency_spectrum",))),
    PhaseDescriptor(
        id="strategy", title="Financial Strategy & Use Cases",
        description="Developing trading strategies based on identified market cycles",
        estimated_time=9,
        content=NarrativeContent(
            body="A dominant cycle suggests buying near its troughs and trimming near its "
                 "peaks, confirmed by the trend rather than fighting it.")),
    PhaseDescriptor(
        id="risk-management", title="Implications & Risk Management",
        description="Understanding limitations and implementing proper risk controls",
        estimated_time=8,
        content=ChartContent(series=("clean_spectrum", "noisy_spectrum"),
                             caption="Planted cycles against what a noisy market reveals")),
)

MODULE = LessonModule(
    id="fft-finance",
    title="Fast Fourier Transform in Finance",
    short_title="FFT Finance",
    description="Learn how to use FFT to identify market cycles and develop trading strategies "
                "based on frequency domain analysis of financial time series.",
    difficulty="advanced",
    duration="30-40 minutes",
    estimated_time=35,
    topics=("Signal Processing", "Market Analysis", "Quantitative Finance", "Frequency Domain"),
    categories=("advanced-analytics", "trading-strategies", "mathematical-finance"),
    tags=("fft", "fourier-transform", "market-cycles", "frequency-analysis",
          "signal-processing", "trading"),
    prerequisites=(
        "Basic understanding of financial markets and price charts",
        "Familiarity with mathematical concepts like sine waves and frequencies",
        "Knowledge of trading strategies and market cycles",
        "Understanding of statistical analysis and data interpretation",
    ),
    learning_objectives=(
        "Understand how financial time series can be decomposed into frequency components",
        "Learn to identify dominant market cycles using FFT analysis",
        "Develop strategies based on cyclical patterns in market data",
        "Recognize the limitations and risks of frequency-based trading approaches",
        "Apply FFT concepts to real-world financial analysis and risk management",
    ),
    parameter_schema=PARAMETERS,
    calculate=calculate,
    generate=generate,
    phases=PHASES,
    domain_check=domain_check,
)
