"""
Black-Scholes Time-to-Maturity Pricer
=====================================

European call pricing with the Black-Scholes (1973) formula, specialised for
lessons that study how time to maturity T drives option value.

Mathematical Framework:
    d1 = [ln(S/K) + (r + sigma^2 / 2) T] / (sigma sqrt(T))
    d2 = d1 - sigma sqrt(T)

    C = S N(d1) - K exp(-rT) N(d2)
    P = C - S + K exp(-rT)                  (put-call parity)

At T <= 0 the price is the terminal payoff max(S - K, 0). This is a boundary
case of the contract, not a limit of the formula.

N(.) uses the Abramowitz-Stegun error function from ``models.normal`` so
prices are reproducible to the last digit.
"""

import math
from dataclasses import dataclass
from typing import Dict

import numpy as np

from .normal import norm_cdf


@dataclass(frozen=True)
class OptionInputs:
    """
    Inputs of the time-to-maturity pricer.

    Attributes:
        S: Spot price
        K: Strike price
        r: Continuously-compounded risk-free rate
        sigma: Annualised volatility
        T: Time to maturity in years (T <= 0 means expired)

    Example:
        >>> OptionInputs(S=100, K=100, r=0.05, sigma=0.2, T=90 / 365)
    """
    S: float
    K: float
    r: float
    sigma: float
    T: float

    def __post_init__(self):
        if self.S <= 0:
            raise ValueError(f"Spot price must be positive, got {self.S}")
        if self.K <= 0:
            raise ValueError(f"Strike price must be positive, got {self.K}")
        if self.sigma <= 0:
            raise ValueError(f"Volatility must be positive, got {self.sigma}")


def discount_factor(r: float, T: float) -> float:
    """Present value of 1 paid at T: exp(-rT)."""
    return math.exp(-r * T)


def d1_d2(S: float, K: float, r: float, sigma: float, T: float) -> tuple:
    """
    Black-Scholes d1 and d2.

    Returns (nan, nan) at T <= 0 where the terms are undefined.
    """
    if T <= 0:
        return float("nan"), float("nan")
    sqrt_T = math.sqrt(T)
    d1 = (math.log(S / K) + (r + 0.5 * sigma * sigma) * T) / (sigma * sqrt_T)
    return d1, d1 - sigma * sqrt_T


def call_price(S: float, K: float, r: float, sigma: float, T: float) -> float:
    """European call, floored at zero; intrinsic value at expiry."""
    if T <= 0:
        return max(S - K, 0.0)
    d1, d2 = d1_d2(S, K, r, sigma, T)
    price = S * norm_cdf(d1) - K * math.exp(-r * T) * norm_cdf(d2)
    return max(price, 0.0)


def put_price(S: float, K: float, r: float, sigma: float, T: float) -> float:
    """European put via put-call parity, floored at zero."""
    if T <= 0:
        return max(K - S, 0.0)
    parity = call_price(S, K, r, sigma, T) - S + K * math.exp(-r * T)
    return max(parity, 0.0)


def call_delta(S: float, K: float, r: float, sigma: float, T: float) -> float:
    """dC/dS = N(d1); a step function at expiry."""
    if T <= 0:
        return 1.0 if S > K else 0.0
    d1, _ = d1_d2(S, K, r, sigma, T)
    return norm_cdf(d1)


def price_summary(inputs: OptionInputs) -> Dict[str, float]:
    """
    Every scalar the time-to-maturity lesson reports.

    Returns:
        Dict with time_in_years, discount_factor, d1, d2, option_price,
        put_price, intrinsic_value, time_value and delta. d1/d2 are None for
        an expired option.
    """
    S, K, r, sigma, T = inputs.S, inputs.K, inputs.r, inputs.sigma, inputs.T
    price = call_price(S, K, r, sigma, T)
    intrinsic = max(S - K, 0.0)
    d1, d2 = d1_d2(S, K, r, sigma, T)
    return {
        "time_in_years": T,
        "discount_factor": discount_factor(r, T),
        "d1": None if math.isnan(d1) else d1,
        "d2": None if math.isnan(d2) else d2,
        "option_price": price,
        "put_price": put_price(S, K, r, sigma, T),
        "intrinsic_value": intrinsic,
        "time_value": price - intrinsic,
        "delta": call_delta(S, K, r, sigma, T),
    }


def terminal_price_density(S0: float, r: float, sigma: float, T: float,
                           n_points: int = 200, w_min: float = -4.0,
                           w_max: float = 4.0) -> Dict[str, np.ndarray]:
    """
    Terminal stock price along a grid of Brownian outcomes W_T = w.

        S_T = S0 exp((r - sigma^2 / 2) T + sigma w)
        density(w) = exp(-w^2 / 2T) / sqrt(2 pi T)

    Parameters:
        n_points: Number of grid intervals (the grid has n_points + 1 nodes)

    Returns:
        Dict of arrays: w, ST, density, normalized_density (density x 100)
    """
    if T <= 0:
        raise ValueError(f"Density needs a positive horizon, got T={T}")
    step = (w_max - w_min) / n_points
    w = w_min + np.arange(n_points + 1) * step
    ST = S0 * np.exp((r - 0.5 * sigma * sigma) * T + sigma * w)
    density = np.exp(-(w * w) / (2.0 * T)) / np.sqrt(2.0 * np.pi * T)
    return {"w": w, "ST": ST, "density": density, "normalized_density": density * 100.0}
