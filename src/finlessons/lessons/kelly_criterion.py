"""
Kelly Criterion: Optimal Bet Sizing Strategy
============================================
"""

from typing import Any, Dict, Mapping

import pandas as pd

from ..core.module import (
    ChartContent, InteractiveContent, LessonModule, NarrativeContent, PhaseDescriptor,
)
from ..core.parameters import Parameter, ParameterValidation
from ..models.kelly import (
    BetTerms, fractional_kelly_table, growth_curve, kelly_summary, simulate_bankrolls,
)
from ..simulation.rng import SeededRandom
from ..utils import format_currency

PARAMETERS = (
    Parameter(key="probability_of_winning", label="Probability of Winning", default=0.6,
              min=0.01, max=0.99, step=0.01, unit="%",
              formatter=lambda v: f"{v * 100:.0f}%",
              category="Basic Parameters", importance="high",
              description="The likelihood that your bet or investment will be successful"),
    Parameter(key="win_loss_ratio", label="Win/Loss Ratio", default=2.0,
              min=0.1, max=10.0, step=0.1, unit=":1",
              formatter=lambda v: f"{v:.1f}:1",
              category="Basic Parameters", importance="high",
              description="The ratio of how much you win versus how much you lose on each bet"),
    Parameter(key="initial_bankroll", label="Initial Bankroll", default=1000,
              min=100, max=10000, step=100, unit="$",
              formatter=lambda v: format_currency(v, 0),
              category="Simulation Parameters", importance="medium",
              description="The starting amount of capital available for betting"),
    Parameter(key="number_of_bets", label="Number of Bets", default=100,
              min=10, max=500, step=10, unit="bets",
              formatter=lambda v: f"{v} bets",
              validation=ParameterValidation(min=10, max=500, type="integer"),
              category="Simulation Parameters", importance="medium",
              description="The number of bets to simulate in the growth analysis"),
)


def calculate(params: Mapping[str, Any]) -> Dict[str, Any]:
    terms = BetTerms(p=params["probability_of_winning"], b=params["win_loss_ratio"])
    return kelly_summary(terms)


def generate(params: Mapping[str, Any], result: Mapping[str, Any],
             seed: int) -> Dict[str, pd.DataFrame]:
    p, b = params["probability_of_winning"], params["win_loss_ratio"]
    f_star = result["kelly_fraction"]
    n_bets = int(params["number_of_bets"])

    rng = SeededRandom(seed)
    return {
        "growth_rate_vs_bet_size": growth_curve(p, b),
        "bankroll_growth": simulate_bankrolls(
            p, b, f_star, params["initial_bankroll"], n_bets, rng.randoms(n_bets)),
        "fractional_kelly": fractional_kelly_table(p, b, f_star).reset_index(names="position"),
    }


def domain_check(params: Mapping[str, Any], result: Mapping[str, Any]) -> bool:
    return 0.0 <= result["kelly_percentage"] <= 100.0


PHASES = (
    PhaseDescriptor(
        id="introduction", title="Introduction to Kelly Criterion",
        description="Learn the fundamentals of the Kelly Criterion and why it matters for "
                    "optimal betting",
        estimated_time=8,
        content=NarrativeContent(
            body="f* = p - q / b sizes each bet to maximise the expected logarithm of wealth.")),
    PhaseDescriptor(
        id="bet-sizing", title="Visualizing Optimal Bet Size",
        description="Explore how bet size affects long-term growth rate",
        estimated_time=7,
        content=InteractiveContent(parameters=("probability_of_winning", "win_loss_ratio"),
                                   series=("growth_rate_vs_bet_size",))),
    PhaseDescriptor(
        id="bankroll-growth", title="Bankroll Growth Simulation",
        description="Compare different betting strategies through simulation",
        estimated_time=8,
        content=InteractiveContent(parameters=("initial_bankroll", "number_of_bets"),
                                   series=("bankroll_growth",))),
    PhaseDescriptor(
        id="fractional-kelly", title="Fractional Kelly and Risk Management",
        description="Learn about practical modifications to reduce risk",
        estimated_time=7,
        content=ChartContent(series=("fractional_kelly",),
                             caption="Growth given up versus volatility removed")),
)

MODULE = LessonModule(
    id="kelly-criterion",
    title="Kelly Criterion: Optimal Bet Sizing Strategy",
    short_title="Kelly Criterion",
    description="Learn how to determine the optimal size for bets and investments using the "
                "Kelly Criterion formula through interactive visualizations and practical "
                "examples.",
    difficulty="intermediate",
    duration="25-35 minutes",
    estimated_time=30,
    topics=("Betting Strategy", "Risk Management", "Portfolio Theory", "Mathematical Finance"),
    categories=("risk-management", "mathematical-finance", "betting-strategy"),
    tags=("kelly-criterion", "bet-sizing", "risk-management", "expected-value",
          "bankroll-management"),
    prerequisites=(
        "Basic understanding of probability",
        "Familiarity with expected value concepts",
        "Basic knowledge of risk and reward",
        "Understanding of percentages and ratios",
    ),
    learning_objectives=(
        "Understand the Kelly Criterion formula and its components",
        "Learn how to calculate optimal bet sizes",
        "Explore the relationship between probability, payoffs, and bet sizing",
        "Understand the risks of over-betting and under-betting",
        "Learn about fractional Kelly strategies for risk management",
        "Apply Kelly Criterion concepts to real-world scenarios",
    ),
    parameter_schema=PARAMETERS,
    calculate=calculate,
    generate=generate,
    phases=PHASES,
    domain_check=domain_check,
)
