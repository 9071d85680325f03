"""
Parametric Value at Risk and Expected Shortfall
===============================================

Normal-distribution VaR and Expected Shortfall (ES, a.k.a. CVaR) from
annualised portfolio inputs.

    sigma_d = sigma / sqrt(252),   mu_d = mu / 252
    sigma_h = sigma_d sqrt(h),     mu_h = mu_d h

    VaR = -(mu_h - z sigma_h)
    ES  = -(mu_h - sigma_h phi(z) / alpha),    alpha = 1 - confidence

Both figures are reported in percent of portfolio value. Because
phi(z) / alpha > z for every alpha in (0, 1), ES >= VaR always holds: ES is
the average loss beyond the VaR threshold (Acerbi & Tasche, 2002).
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd

from ..config import CONFIG
from .normal import norm_pdf, norm_pdf_array, z_score


@dataclass
class RiskResult:
    """Container for one parametric VaR/ES computation (percent units)."""
    var: float
    es: float
    confidence: float
    alpha: float
    z_score: float
    daily_volatility: float
    daily_return: float
    horizon_volatility: float
    horizon_return: float
    horizon: int = 1
    additional: Optional[dict] = None

    def as_dict(self) -> dict:
        return {
            "var_value": self.var,
            "es_value": self.es,
            "z_score": self.z_score,
            "alpha": self.alpha,
            "daily_volatility": self.daily_volatility,
            "daily_return": self.daily_return,
            "horizon_volatility": self.horizon_volatility,
            "horizon_return": self.horizon_return,
            "es_to_var_ratio": self.es / self.var if self.var else None,
        }


def parametric_var_es(confidence: float, annual_volatility: float,
                      annual_return: float, horizon: int = 1,
                      trading_days: int = None) -> RiskResult:
    """
    Normal VaR and ES for a portfolio.

    Parameters:
        confidence: Confidence level, e.g. 0.95
        annual_volatility: Annualised volatility (0.15 = 15%)
        annual_return: Annualised expected return
        horizon: Holding period in trading days
        trading_days: Days per year used to de-annualise (default 252)

    Returns:
        RiskResult with VaR and ES in percent
    """
    if annual_volatility <= 0:
        raise ValueError(f"Volatility must be positive, got {annual_volatility}")
    if horizon < 1:
        raise ValueError(f"Horizon must be at least one day, got {horizon}")

    days = trading_days or CONFIG.calendar.trading_days
    z = z_score(confidence)
    alpha = 1.0 - confidence

    daily_vol = annual_volatility / math.sqrt(days)
    daily_ret = annual_return / days
    sigma_h = daily_vol * math.sqrt(horizon)
    mu_h = daily_ret * horizon

    var = -(mu_h - z * sigma_h) * 100.0
    es = -(mu_h - sigma_h * norm_pdf(z) / alpha) * 100.0

    return RiskResult(
        var=var, es=es, confidence=confidence, alpha=alpha, z_score=z,
        daily_volatility=daily_vol * 100.0, daily_return=daily_ret * 100.0,
        horizon_volatility=sigma_h * 100.0, horizon_return=mu_h * 100.0,
        horizon=horizon)


def returns_distribution(std_pct: float, var_pct: float,
                         lo: float = -10.0, hi: float = 10.0,
                         step: float = 0.1) -> pd.DataFrame:
    """
    Zero-mean normal return density (in percent) with the loss tail beyond
    VaR marked.

    A return x belongs to the tail when x <= -VaR, i.e. the loss exceeds VaR.

    Returns:
        DataFrame with return, density, tail_density and is_tail columns.
    """
    if std_pct <= 0:
        raise ValueError(f"Standard deviation must be positive, got {std_pct}")
    n = int(round((hi - lo) / step))
    x = np.round(lo + np.arange(n + 1) * step, 10)
    density = norm_pdf_array(x / std_pct) / std_pct
    is_tail = x <= -var_pct
    return pd.DataFrame({
        "return": x,
        "density": density,
        "tail_density": np.where(is_tail, density, 0.0),
        "is_tail": is_tail,
    })


def subadditivity_table() -> pd.DataFrame:
    """
    Illustrative two-asset figures showing that summed stand-alone risk
    overstates diversified portfolio risk.
    """
    return pd.DataFrame([
        {"position": 0, "name": "Asset A", "var": 2.5, "es": 3.2},
        {"position": 1, "name": "Asset B", "var": 3.1, "es": 4.0},
        {"position": 2, "name": "A + B (Sum)", "var": 5.6, "es": 7.2},
        {"position": 3, "name": "Portfolio A+B", "var": 4.2, "es": 5.8},
    ])
