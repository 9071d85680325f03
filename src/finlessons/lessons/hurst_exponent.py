"""
The Hurst Exponent: Measuring Market Memory
===========================================

    H < 0.5   anti-persistent, mean-reverting
    H = 0.5   random walk, no memory
    H > 0.5   persistent, trending

The learner picks H and sees a path whose increments are scaled by
(i + 1)^(H - 0.5). The path is an illustration of memory, not an exact
fractional Brownian motion; the rescaled-range estimate reported next to it
shows how far the two differ.
"""

from typing import Any, Dict, Mapping

import pandas as pd

from ..core.module import (
    ChartContent, InteractiveContent, LessonModule, NarrativeContent, PhaseDescriptor,
)
from ..core.parameters import Parameter, ParameterKind, ParameterValidation
from ..models.hurst import classify, distribution_comparison, rescaled_range_hurst
from ..simulation.fractional import fractional_memory_path, reference_paths

PARAMETERS = (
    Parameter(key="H", label="Hurst Exponent (H)", default=0.5,
              min=0.1, max=0.9, step=0.05, formatter=lambda v: f"{v:.2f}",
              category="Core Parameters", importance="high",
              description="Controls the memory and persistence of the time series"),
    Parameter(key="series_length", label="Series Length", default=252,
              min=50, max=500, step=10, unit="periods",
              formatter=lambda v: f"{v} periods",
              validation=ParameterValidation(min=50, max=500, type="integer"),
              category="Simulation Parameters", importance="medium",
              description="Number of time periods to simulate"),
    Parameter(key="volatility", label="Volatility", default=0.2,
              min=0.05, max=0.5, step=0.05, unit="%",
              formatter=lambda v: f"{v * 100:.0f}%",
              category="Simulation Parameters", importance="medium",
              description="Annual volatility of the time series"),
    Parameter(key="seed", label="Random Seed", default=42,
              kind=ParameterKind.INPUT, min=1, max=9999, step=1,
              formatter=str,
              validation=ParameterValidation(min=1, max=9999, type="integer"),
              category="Simulation Parameters", importance="low",
              description="Seed for reproducible random number generation"),
)


def _interactive_path(params: Mapping[str, Any]) -> pd.DataFrame:
    return fractional_memory_path(
        H=params["H"], length=int(params["series_length"]),
        volatility=params["volatility"], seed=int(params["seed"]))


def calculate(params: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Regime labels for the chosen H plus an R/S estimate on the path the
    chosen seed produces. The seed is a parameter here, so the result is
    still a pure function of the snapshot.
    """
    result = classify(params["H"])
    estimate = rescaled_range_hurst(_interactive_path(params)["return"].iloc[1:])
    result.update({
        "estimated_hurst": estimate.hurst,
        "estimate_r_squared": estimate.r_squared,
        "estimate_method": estimate.method,
    })
    return result


def generate(params: Mapping[str, Any], result: Mapping[str, Any],
             seed: int) -> Dict[str, pd.DataFrame]:
    """Paths are driven by the ``seed`` parameter, not the session seed."""
    series = {"interactive": _interactive_path(params)}
    series.update(reference_paths())
    series["distribution"] = pd.DataFrame(distribution_comparison())
    return series


def domain_check(params: Mapping[str, Any], result: Mapping[str, Any]) -> bool:
    return 0.0 <= result["memory_strength"] <= 1.0


PHASES = (
    PhaseDescriptor(
        id="introduction", title="Understanding Time Series Behavior",
        description="Explore the three fundamental behaviors of financial time series: random "
                    "walks, trends, and mean reversion",
        estimated_time=8,
        content=ChartContent(series=("mean_reverting", "random_walk", "trending"),
                             caption="Three reference regimes from fixed seeds")),
    PhaseDescriptor(
        id="hurst-definition", title="Defining the Hurst Exponent",
        description="Learn how the Hurst Exponent quantifies time series memory and see it "
                    "in action",
        estimated_time=10,
        content=InteractiveContent(parameters=("H", "series_length", "volatility", "seed"),
                                   series=("interactive",))),
    PhaseDescriptor(
        id="strategy", title="Application in Financial Strategy",
        description="Discover how to match trading strategies to market behavior using the "
                    "Hurst Exponent",
        estimated_time=8,
        content=NarrativeContent(
            body="Momentum rules suit H > 0.5, pairs and mean-reversion rules suit H < 0.5, "
                 "and near 0.5 neither has an edge.")),
    PhaseDescriptor(
        id="risk-management", title="Hurst Exponent in Risk Management",
        description="Understand how the Hurst Exponent affects risk profiles and tail risk "
                    "assessment",
        estimated_time=9,
        content=ChartContent(series=("distribution",),
                             caption="Wider dispersion of persistent series")),
)

MODULE = LessonModule(
    id="hurst-exponent",
    title="The Hurst Exponent: Measuring Market Memory",
    short_title="Hurst Exponent",
    description="Learn how the Hurst Exponent quantifies time series memory and persistence, "
                "and how to apply it in trading strategies and risk management.",
    difficulty="intermediate",
    duration="25-35 minutes",
    estimated_time=30,
    topics=("Time Series Analysis", "Market Microstructure", "Risk Management"),
    categories=("quantitative-analysis", "risk-management"),
    tags=("hurst-exponent", "time-series", "market-memory", "persistence",
          "mean-reversion", "trending"),
    prerequisites=(
        "Basic understanding of time series data",
        "Familiarity with financial markets",
        "Knowledge of random walks and market efficiency",
    ),
    learning_objectives=(
        "Understand what the Hurst Exponent measures and its three regimes",
        "Learn to interpret H values for different market behaviors",
        "Apply Hurst analysis to strategy selection",
        "Understand implications for risk management and tail risk",
    ),
    parameter_schema=PARAMETERS,
    calculate=calculate,
    generate=generate,
    phases=PHASES,
    domain_check=domain_check,
)
