"""
Lesson Models
=============
Closed-form and numerical calculators behind the lessons: normal CDF,
Black-Scholes time decay, Kelly sizing, parametric VaR/ES, VWAP, bounded
Fourier analysis and the Hurst exponent.
"""

from .normal import erf, norm_cdf, norm_pdf, z_score
from .black_scholes import OptionInputs, call_price, price_summary, put_price
from .kelly import BetTerms, growth_rate, kelly_fraction, kelly_summary
from .risk import RiskResult, parametric_var_es
from .vwap import cumulative_vwap, session_summary, typical_price, vwap_walkthrough
from .spectral import Spectrum, bounded_dft, period_scan, window_weights
from .hurst import HurstEstimate, classify, rescaled_range_hurst

__all__ = [
    "erf", "norm_cdf", "norm_pdf", "z_score",
    "OptionInputs", "call_price", "price_summary", "put_price",
    "BetTerms", "growth_rate", "kelly_fraction", "kelly_summary",
    "RiskResult", "parametric_var_es",
    "cumulative_vwap", "session_summary", "typical_price", "vwap_walkthrough",
    "Spectrum", "bounded_dft", "period_scan", "window_weights",
    "HurstEstimate", "classify", "rescaled_range_hurst",
]
