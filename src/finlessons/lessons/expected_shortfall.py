"""
Expected Shortfall: Beyond Value at Risk
========================================

VaR answers "how bad can a normal bad day get"; ES answers "how bad is it
on average once we are past that point". Under normal returns

    VaR = -(mu - z sigma)
    ES  = -(mu - sigma phi(z) / alpha)

and ES >= VaR for every confidence level.
"""

from typing import Any, Dict, Mapping

import pandas as pd

from ..core.module import (
    ChartContent, InteractiveContent, LessonModule, NarrativeContent, PhaseDescriptor,
)
from ..core.parameters import Parameter, ParameterValidation
from ..models.risk import parametric_var_es, returns_distribution, subadditivity_table
from ..utils import format_percent

PARAMETERS = (
    Parameter(key="confidence_level", label="Confidence Level", default=0.95,
              min=0.90, max=0.99, step=0.01, unit="%",
              formatter=lambda v: f"{v * 100:.0f}%",
              category="Risk Parameters", importance="high",
              description="The confidence level for VaR and ES calculations (e.g., 95% means "
                          "we look at the worst 5% of outcomes)"),
    Parameter(key="portfolio_volatility", label="Portfolio Volatility", default=0.15,
              min=0.05, max=0.50, step=0.01, unit="%",
              formatter=format_percent,
              category="Risk Parameters", importance="high",
              description="The annualized volatility (standard deviation) of portfolio returns"),
    Parameter(key="expected_return", label="Expected Return", default=0.08,
              min=-0.10, max=0.20, step=0.01, unit="%",
              formatter=format_percent,
              category="Portfolio Parameters", importance="medium",
              description="The annualized expected return of the portfolio"),
    Parameter(key="time_horizon", label="Time Horizon", default=1,
              min=1, max=30, step=1, unit="days",
              formatter=lambda v: f"{v} day{'' if v == 1 else 's'}",
              validation=ParameterValidation(min=1, max=30, type="integer"),
              category="Portfolio Parameters", importance="medium",
              description="The time period for the risk measurement (in days)"),
)


def calculate(params: Mapping[str, Any]) -> Dict[str, Any]:
    risk = parametric_var_es(
        confidence=params["confidence_level"],
        annual_volatility=params["portfolio_volatility"],
        annual_return=params["expected_return"],
        horizon=int(params["time_horizon"]),
    )
    result = risk.as_dict()
    result["sharpe_ratio"] = params["expected_return"] / params["portfolio_volatility"]
    return result


def generate(params: Mapping[str, Any], result: Mapping[str, Any],
             seed: int) -> Dict[str, pd.DataFrame]:
    """Deterministic; ``seed`` is unused."""
    return {
        "returns_distribution": returns_distribution(
            std_pct=result["horizon_volatility"], var_pct=result["var_value"]),
        "subadditivity": subadditivity_table(),
    }


def domain_check(params: Mapping[str, Any], result: Mapping[str, Any]) -> bool:
    return result["es_value"] >= result["var_value"]


PHASES = (
    PhaseDescriptor(
        id="introduction", title="Introduction to Value at Risk",
        description="Understand VaR and its limitations as a risk measure",
        estimated_time=6,
        content=NarrativeContent(
            body="VaR is a quantile of the loss distribution. It says nothing about how "
                 "large losses are once the quantile is breached.")),
    PhaseDescriptor(
        id="expected-shortfall", title="Defining Expected Shortfall",
        description="Learn what Expected Shortfall is and how it addresses VaR limitations",
        estimated_time=6,
        content=InteractiveContent(parameters=("confidence_level", "portfolio_volatility"),
                                   series=("returns_distribution",))),
    PhaseDescriptor(
        id="comparison", title="VaR vs. Expected Shortfall",
        description="Direct comparison of VaR and ES on the same distribution",
        estimated_time=6,
        content=InteractiveContent(parameters=("expected_return", "time_horizon"),
                                   series=("returns_distribution",))),
    PhaseDescriptor(
        id="coherence", title="Coherent Risk Measures",
        description="Understand why ES is coherent and VaR is not",
        estimated_time=7,
        content=ChartContent(series=("subadditivity",),
                             caption="Stand-alone risks against the diversified portfolio")),
)

MODULE = LessonModule(
    id="expected-shortfall",
    title="Expected Shortfall: Beyond Value at Risk",
    short_title="Expected Shortfall",
    description="Discover Expected Shortfall (ES) as a superior risk measure to VaR, exploring "
                "its coherent properties and practical applications in risk management.",
    difficulty="intermediate",
    duration="20-30 minutes",
    estimated_time=25,
    topics=("Risk Management", "Value at Risk", "Expected Shortfall",
            "Coherent Risk Measures"),
    categories=("risk-management", "mathematical-finance", "portfolio-theory"),
    tags=("expected-shortfall", "var", "cvar", "risk-measures", "tail-risk", "coherent-risk"),
    prerequisites=(
        "Basic understanding of probability distributions",
        "Familiarity with risk and return concepts",
        "Knowledge of Value at Risk (VaR)",
        "Understanding of portfolio theory basics",
    ),
    learning_objectives=(
        "Understand the limitations of Value at Risk (VaR)",
        "Learn the definition and calculation of Expected Shortfall",
        "Compare VaR and ES as risk measures",
        "Understand the concept of coherent risk measures",
        "Learn about subadditivity and its importance",
        "Apply ES concepts to portfolio risk management",
    ),
    parameter_schema=PARAMETERS,
    calculate=calculate,
    generate=generate,
    phases=PHASES,
    domain_check=domain_check,
)
