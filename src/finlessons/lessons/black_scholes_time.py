"""
Black-Scholes: Understanding Time to Maturity (T)
=================================================

How the time left to expiry moves a European call: discounting pulls value
down while uncertainty about the terminal price pushes it up.
"""

from typing import Any, Dict, Mapping

import pandas as pd

from ..config import CONFIG
from ..core.module import (
    ChartContent, InteractiveContent, LessonModule, PhaseDescriptor,
)
from ..core.parameters import Parameter
from ..models.black_scholes import (
    OptionInputs, call_price, discount_factor, price_summary, terminal_price_density,
)
from ..utils import format_percent

MAX_DAYS = 730
DAY_STEP = 5

PARAMETERS = (
    Parameter(key="time_to_maturity", label="Time to Maturity", default=90,
              min=1, max=MAX_DAYS, step=1, unit="days",
              formatter=lambda v: f"{v} days ({v / 30:.1f} months)",
              category="time", importance="high",
              description="Time remaining until option expires. Affects both discounting "
                          "and uncertainty of final stock price."),
    Parameter(key="stock_price", label="Current Stock Price (S0)", default=100,
              min=50, max=200, step=1, unit="$", formatter=lambda v: f"${v}",
              category="market", importance="high",
              description="Current price of the underlying asset. Higher stock prices "
                          "generally increase call option values."),
    Parameter(key="strike_price", label="Strike Price (K)", default=100,
              min=50, max=200, step=1, unit="$", formatter=lambda v: f"${v}",
              category="contract", importance="high",
              description="Price at which the option can be exercised. Lower strike prices "
                          "increase call option values."),
    Parameter(key="volatility", label="Volatility (sigma)", default=0.2,
              min=0.05, max=0.8, step=0.01, unit="%",
              formatter=format_percent,
              category="risk", importance="high",
              description="Measure of stock price uncertainty. Higher volatility increases "
                          "option values due to greater potential for favorable outcomes."),
    Parameter(key="risk_free_rate", label="Risk-free Rate (r)", default=0.05,
              min=0.001, max=0.15, step=0.001, unit="%",
              formatter=format_percent,
              category="market", importance="medium",
              description="Theoretical rate of return with zero risk. Used for discounting "
                          "future cash flows to present value."),
)


def _inputs(params: Mapping[str, Any]) -> OptionInputs:
    return OptionInputs(
        S=params["stock_price"], K=params["strike_price"], r=params["risk_free_rate"],
        sigma=params["volatility"],
        T=params["time_to_maturity"] / CONFIG.calendar.calendar_days)


def calculate(params: Mapping[str, Any]) -> Dict[str, Any]:
    return price_summary(_inputs(params))


def generate(params: Mapping[str, Any], result: Mapping[str, Any],
             seed: int) -> Dict[str, pd.DataFrame]:
    """Deterministic curves; ``seed`` is unused."""
    S, K = params["stock_price"], params["strike_price"]
    r, sigma = params["risk_free_rate"], params["volatility"]
    year = CONFIG.calendar.calendar_days

    days = list(range(1, MAX_DAYS + 1, DAY_STEP))
    times = [d / year for d in days]
    discount = pd.DataFrame({
        "days": days,
        "time": times,
        "discount_factor": [discount_factor(r, t) for t in times],
    })
    option_time = pd.DataFrame({
        "days": days,
        "time": times,
        "option_price": [call_price(S, K, r, sigma, t) for t in times],
    })

    vols = [k / 100 for k in range(5, 81)]
    T = result["time_in_years"]
    vol_price = pd.DataFrame({
        "volatility": [v * 100 for v in vols],
        "option_price": [call_price(S, K, r, v, T) for v in vols],
    })

    density = pd.DataFrame(terminal_price_density(S, r, sigma, T))
    return {
        "discount_factor": discount,
        "option_price_time": option_time,
        "volatility_price": vol_price,
        "stock_price_pdf": density,
    }


def domain_check(params: Mapping[str, Any], result: Mapping[str, Any]) -> bool:
    return result["option_price"] >= 0 and result["time_value"] >= -1e-4


PHASES = (
    PhaseDescriptor(
        id="introduction", title="Introduction to Risk-Neutral Pricing and Time (T)",
        description="Why time to maturity enters the price through both discounting and uncertainty",
        estimated_time=8,
        content=ChartContent(series=("discount_factor",),
                             caption="Discount factor exp(-rT) as maturity grows")),
    PhaseDescriptor(
        id="stock-price-evolution", title="Time's Role in Stock Price Evolution",
        description="Terminal stock price distribution widens with the square root of time",
        estimated_time=9,
        content=InteractiveContent(parameters=("time_to_maturity", "volatility"),
                                   series=("stock_price_pdf",))),
    PhaseDescriptor(
        id="lebesgue-integral", title="The Lebesgue Integral and Option Pricing",
        description="The call price as the discounted expectation of the payoff",
        estimated_time=10,
        content=ChartContent(series=("option_price_time",),
                             caption="Call value against time to maturity")),
    PhaseDescriptor(
        id="volatility-impact", title="The Impact of Volatility (sigma)",
        description="Higher volatility raises the call value through its convex payoff",
        estimated_time=8,
        content=InteractiveContent(parameters=("volatility", "time_to_maturity"),
                                   series=("volatility_price",))),
)

MODULE = LessonModule(
    id="black-scholes-time",
    title="Black-Scholes: Understanding Time to Maturity (T)",
    short_title="Time to Maturity",
    description="Explore how time affects option pricing in the Black-Scholes model through "
                "interactive visualizations and mathematical explanations.",
    difficulty="intermediate",
    duration="30-45 minutes",
    estimated_time=35,
    topics=("Options", "Black-Scholes", "Time Value", "Risk-Neutral Pricing"),
    categories=("derivatives", "mathematical-finance", "option-pricing"),
    tags=("black-scholes", "time-decay", "option-pricing", "risk-neutral", "volatility"),
    prerequisites=(
        "Basic understanding of options (calls and puts)",
        "Familiarity with probability and statistics",
        "Basic calculus knowledge (derivatives and integrals)",
        "Understanding of present value and discounting",
    ),
    learning_objectives=(
        "Understand the role of time in option pricing",
        "Learn about risk-neutral pricing framework",
        "Explore stock price evolution under geometric Brownian motion",
        "Understand the mathematical foundation of Black-Scholes formula",
        "Analyze the impact of volatility on option values",
        "Interpret option pricing charts and distributions",
    ),
    parameter_schema=PARAMETERS,
    calculate=calculate,
    generate=generate,
    phases=PHASES,
    domain_check=domain_check,
)
