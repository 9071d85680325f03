"""
Standard Normal Distribution
============================

Closed-form approximations of the standard normal CDF used by the lesson
calculators. The error function follows Abramowitz & Stegun (1964), formula
7.1.26, whose maximum absolute error is 1.5e-7. This keeps results identical
across implementations that share the same published coefficients.

    erf(x) ~ 1 - (a1 t + a2 t^2 + a3 t^3 + a4 t^4 + a5 t^5) exp(-x^2),
    t = 1 / (1 + p x)

The inverse CDF is only needed for confidence levels outside the tabulated
ones and is delegated to ``scipy.stats.norm``.
"""

import math

import numpy as np
from scipy.stats import norm

A1 = 0.254829592
A2 = -0.284496736
A3 = 1.421413741
A4 = -1.453152027
A5 = 1.061405429
P = 0.3275911

SQRT_2PI = math.sqrt(2.0 * math.pi)

# Classic one-sided z-scores quoted in risk textbooks
Z_SCORES = {0.90: 1.282, 0.95: 1.645, 0.99: 2.326}


def _erfc_positive(z: float) -> float:
    """A&S 7.1.26 complement 1 - erf(z) for z >= 0."""
    t = 1.0 / (1.0 + P * z)
    return (((((A5 * t + A4) * t) + A3) * t + A2) * t + A1) * t * math.exp(-z * z)


def erf(x: float) -> float:
    """Abramowitz-Stegun 7.1.26 error function."""
    sign = 1.0 if x >= 0 else -1.0
    return sign * (1.0 - _erfc_positive(abs(x)))


def norm_cdf(x: float) -> float:
    """
    Standard normal CDF, N(x) = 0.5 (1 + erf(x / sqrt(2))).

    The lower tail 0.5 erfc(|x| / sqrt(2)) is evaluated directly so N stays
    monotone for large negative x instead of cancelling 1 + erf.
    """
    tail = 0.5 * _erfc_positive(abs(x) / math.sqrt(2.0))
    return tail if x < 0 else 1.0 - tail


def norm_pdf(x: float) -> float:
    """Standard normal density."""
    return math.exp(-0.5 * x * x) / SQRT_2PI


def norm_pdf_array(x: np.ndarray) -> np.ndarray:
    """Vectorised density for chart grids."""
    x = np.asarray(x, dtype=float)
    return np.exp(-0.5 * x ** 2) / SQRT_2PI


def z_score(confidence: float) -> float:
    """
    One-sided z-score for a confidence level.

    The tabulated 90/95/99% values are returned verbatim; any other level
    falls back to the exact inverse CDF.

    Parameters:
        confidence: Confidence level in (0, 1)

    Returns:
        z such that P(Z <= z) = confidence
    """
    if not 0.0 < confidence < 1.0:
        raise ValueError(f"Confidence must lie in (0, 1), got {confidence}")
    key = round(confidence, 4)
    if key in Z_SCORES:
        return Z_SCORES[key]
    return float(norm.ppf(confidence))
