"""
Kelly Criterion
===============

Optimal fraction of capital to stake on a repeated binary bet that pays b:1
with win probability p (Kelly, 1956).

    f* = p - q / b,        q = 1 - p
    g(f) = p ln(1 + f b) + q ln(1 - f)

g(f) is the expected log-growth per bet; f* maximises it. Betting more than
f* lowers growth and past 2 f* the growth turns negative even with an edge.

Numerical guards:
    * f* is capped to [0, 1] so the fraction never exceeds the bankroll.
    * Log arguments are floored at ``EPSILON`` before the logarithm so f >= 1
      gives a large negative finite growth instead of -inf.
    * Any remaining non-finite value is replaced by ``GROWTH_SENTINEL``.
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Sequence

import numpy as np
import pandas as pd

from ..utils import safe_float

EPSILON = 0.001
GROWTH_SENTINEL = -10.0

FRACTIONAL_LEVELS = (0.25, 0.5, 0.75, 1.0)


@dataclass(frozen=True)
class BetTerms:
    """
    Terms of a repeated binary bet.

    Attributes:
        p: Probability of winning, 0 <= p <= 1
        b: Net odds received on a win (win/loss ratio), b > 0
    """
    p: float
    b: float

    def __post_init__(self):
        if not 0.0 <= self.p <= 1.0:
            raise ValueError(f"Win probability must lie in [0, 1], got {self.p}")
        if self.b <= 0:
            raise ValueError(f"Win/loss ratio must be positive, got {self.b}")

    @property
    def q(self) -> float:
        return 1.0 - self.p


def kelly_fraction(p: float, b: float) -> float:
    """f* = min(1, max(0, p - (1 - p) / b))."""
    return min(1.0, max(0.0, p - (1.0 - p) / b))


def growth_rate(p: float, b: float, f: float) -> float:
    """Expected log-growth per bet at stake fraction f, never -inf or NaN."""
    win = max(EPSILON, 1.0 + f * b)
    loss = max(EPSILON, 1.0 - f)
    g = p * math.log(win) + (1.0 - p) * math.log(loss)
    return safe_float(g, GROWTH_SENTINEL)


def growth_volatility(p: float, b: float, f: float) -> float:
    """Standard deviation of the one-bet return f b (win) / -f (loss)."""
    q = 1.0 - p
    mean = p * f * b - q * f
    variance = p * (f * b) ** 2 + q * f ** 2 - mean ** 2
    return math.sqrt(max(0.0, variance))


def kelly_summary(terms: BetTerms) -> Dict[str, float]:
    """
    Scalar results of the Kelly lesson.

    Returns:
        kelly_fraction, kelly_percentage, half_kelly_percentage,
        expected_value (p b - q), growth_rate at f*, probability_of_losing
        and edge (expected value per unit staked).
    """
    f = kelly_fraction(terms.p, terms.b)
    expected_value = terms.p * terms.b - terms.q
    return {
        "kelly_fraction": f,
        "kelly_percentage": f * 100.0,
        "half_kelly_percentage": f * 50.0,
        "expected_value": expected_value,
        "growth_rate": growth_rate(terms.p, terms.b, f),
        "probability_of_losing": terms.q,
        "edge": expected_value,
    }


def growth_curve(p: float, b: float, max_bet_pct: int = 50) -> pd.DataFrame:
    """Growth rate for bet sizes 0..max_bet_pct percent in 1% steps."""
    bet_sizes = np.arange(0, max_bet_pct + 1)
    rates = [growth_rate(p, b, size / 100.0) for size in bet_sizes]
    return pd.DataFrame({"bet_size": bet_sizes, "growth_rate": rates})


def fractional_kelly_table(p: float, b: float, f_star: float,
                           levels: Sequence[float] = FRACTIONAL_LEVELS) -> pd.DataFrame:
    """Growth and volatility when staking a fraction of the full Kelly bet."""
    rows: List[Dict] = []
    for level in levels:
        f = f_star * level
        rows.append({
            "fraction": level,
            "label": f"{level * 100:g}%",
            "bet_fraction": f,
            "growth_rate": growth_rate(p, b, f),
            "volatility": growth_volatility(p, b, f),
        })
    return pd.DataFrame(rows)


def simulate_bankrolls(p: float, b: float, f_star: float, initial: float,
                       n_bets: int, uniforms: Sequence[float]) -> pd.DataFrame:
    """
    Bankroll paths for full Kelly, half Kelly and an over-bet of 1.5 f*
    (capped at 50%) driven by the same win/loss sequence.

    Parameters:
        uniforms: At least ``n_bets`` draws in [0, 1); bet i is a win when
            uniforms[i] < p.

    Returns:
        DataFrame indexed by bet_number (0..n_bets) with kelly, half_kelly
        and over_bet bankrolls, rounded to whole units and floored at 0.
    """
    if len(uniforms) < n_bets:
        raise ValueError(f"Need {n_bets} uniform draws, got {len(uniforms)}")

    fractions = {
        "kelly": f_star,
        "half_kelly": f_star / 2.0,
        "over_bet": min(f_star * 1.5, 0.5),
    }
    wealth = {name: float(initial) for name in fractions}
    rows = [{"bet_number": 0, **wealth}]

    for bet in range(1, n_bets + 1):
        won = uniforms[bet - 1] < p
        for name, f in fractions.items():
            stake = wealth[name] * f
            wealth[name] = max(0.0, wealth[name] + (stake * b if won else -stake))
        rows.append({"bet_number": bet,
                     **{name: float(round(value)) for name, value in wealth.items()}})

    return pd.DataFrame(rows)
