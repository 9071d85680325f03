"""
Volume-Weighted Average Price
=============================

    VWAP_t = sum_{s <= t} P_s V_s / sum_{s <= t} V_s

VWAP is the benchmark execution price of an intraday session: a buy filled
below VWAP beat the average participant. This module holds the pure
computations (cumulative VWAP, typical price, moving averages, signal
labelling and session statistics). Path simulation lives in
``finlessons.simulation.market``.

Rows that share a timestamp form one bucket: the bucket is added to the
running sums as a whole and every row of the bucket reports the same VWAP,
so the result does not depend on the order of rows inside a bucket.
"""

import math
from typing import Dict, Optional, Sequence

import numpy as np
import pandas as pd

from ..utils import clamp, clock_label

SIGNAL_AT = "at VWAP"
SIGNAL_ABOVE = "above VWAP"
SIGNAL_BELOW = "below VWAP"
SIGNAL_NEUTRAL = "neutral"


def typical_price(high, low, close):
    """(H + L + C) / 3, scalar or vectorised."""
    return (high + low + close) / 3.0


def cumulative_vwap(prices: Sequence[float], volumes: Sequence[float],
                    times: Optional[Sequence] = None) -> np.ndarray:
    """
    Running VWAP of an ordered series.

    Parameters:
        prices: Price of each row
        volumes: Volume of each row (non-negative)
        times: Optional bucket labels in session order; rows sharing a label
            are aggregated before accumulation

    Returns:
        Array of VWAP values, one per row. Where the cumulative volume is
        still zero the row's own price is returned.
    """
    frame = pd.DataFrame({
        "price": np.asarray(prices, dtype=float),
        "volume": np.asarray(volumes, dtype=float),
    })
    if (frame["volume"] < 0).any():
        raise ValueError("Volumes must be non-negative")
    frame["pv"] = frame["price"] * frame["volume"]
    frame["bucket"] = np.arange(len(frame)) if times is None else list(times)

    totals = frame.groupby("bucket", sort=False)[["pv", "volume"]].sum().cumsum()
    cum_pv = frame["bucket"].map(totals["pv"]).to_numpy()
    cum_vol = frame["bucket"].map(totals["volume"]).to_numpy()

    with np.errstate(divide="ignore", invalid="ignore"):
        vwap = np.where(cum_vol > 0, cum_pv / cum_vol, frame["price"].to_numpy())
    return vwap


def rolling_sma(prices: Sequence[float], window: int) -> np.ndarray:
    """Simple moving average; the first window-1 values use what is available."""
    if window < 1:
        raise ValueError(f"Window must be at least 1, got {window}")
    return pd.Series(prices, dtype=float).rolling(window, min_periods=1).mean().to_numpy()


def vwap_deviation(price, vwap):
    """Percent distance of price from VWAP."""
    return (price - vwap) / vwap * 100.0


def deviation_signal(deviation_pct: float) -> str:
    """Label used in the step-by-step walkthrough."""
    if abs(deviation_pct) < 0.1:
        return SIGNAL_AT
    if deviation_pct > 0.2:
        return SIGNAL_ABOVE
    if deviation_pct < -0.2:
        return SIGNAL_BELOW
    return SIGNAL_NEUTRAL


# ---------------------------------------------------------------------------
# Step-by-step walkthroughs
# ---------------------------------------------------------------------------
_REALISTIC_MOVES = (0, 0.15, -0.05, 0.35, 0.20, -0.10, 0.25, 0.40, 0.15, 0.30)
_REALISTIC_VOLUME = (1.0, 1.3, 0.8, 1.5, 1.1, 0.9, 1.4, 1.2, 0.7, 1.6)


def _walkthrough_rows(base_price: float, scenario: str) -> list:
    if scenario == "simple":
        return [
            ("09:30", 100.00, 10000, "Market opens at round price"),
            ("09:35", 100.50, 15000, "Price rises with increased volume"),
            ("09:40", 100.25, 12000, "Price pulls back slightly"),
            ("09:45", 100.75, 8000, "Price rises on lower volume"),
            ("09:50", 100.60, 18000, "Price consolidates with high volume"),
        ]
    if scenario == "trending":
        return [
            ("09:30", base_price, 12000, "Opening price establishes base"),
            ("09:35", base_price + 0.25, 15000, "Initial upward movement"),
            ("09:40", base_price + 0.45, 18000, "Trend continues with volume"),
            ("09:45", base_price + 0.35, 10000, "Minor pullback on lower volume"),
            ("09:50", base_price + 0.65, 22000, "Strong move higher"),
            ("09:55", base_price + 0.80, 16000, "Trend acceleration"),
            ("10:00", base_price + 0.70, 14000, "Slight consolidation"),
        ]
    if scenario == "realistic":
        rows = []
        for i, (move, scale) in enumerate(zip(_REALISTIC_MOVES, _REALISTIC_VOLUME)):
            if i == 0:
                text = "Market opening price"
            elif move > _REALISTIC_MOVES[i - 1]:
                text = "Price increase"
            elif move < _REALISTIC_MOVES[i - 1]:
                text = "Price decrease"
            else:
                text = "Price unchanged"
            if scale > 1.2:
                text += " with high volume"
            elif scale < 0.9:
                text += " on low volume"
            rows.append((clock_label(9.5 + i * 0.083), base_price + move,
                         math.floor(12000 * scale), text))
        return rows
    raise ValueError(f"Unknown walkthrough scenario: {scenario!r}")


def vwap_walkthrough(base_price: float = 100.0, scenario: str = "realistic",
                     sma_window: int = 5) -> pd.DataFrame:
    """
    Worked VWAP table for the calculation phase.

    Scenarios:
        simple     five fixed prints around 100
        trending   seven prints drifting up from ``base_price``
        realistic  ten prints with mixed moves and volume

    Returns:
        DataFrame with step, time, price, volume, pv, cumulative_pv,
        cumulative_volume, vwap, sma, vwap_diff, signal, description,
        pv_contribution, volume_contribution and price_impact (change in
        VWAP from the previous step).
    """
    rows = _walkthrough_rows(base_price, scenario)
    frame = pd.DataFrame(rows, columns=["time", "price", "volume", "description"])
    frame.insert(0, "step", np.arange(1, len(frame) + 1))

    frame["pv"] = frame["price"] * frame["volume"]
    frame["cumulative_pv"] = frame["pv"].cumsum()
    frame["cumulative_volume"] = frame["volume"].cumsum()
    frame["vwap"] = cumulative_vwap(frame["price"], frame["volume"])
    frame["sma"] = rolling_sma(frame["price"], sma_window)
    frame["vwap_diff"] = vwap_deviation(frame["price"], frame["vwap"])
    frame["signal"] = frame["vwap_diff"].map(deviation_signal)
    frame["pv_contribution"] = frame["pv"] / frame["cumulative_pv"] * 100.0
    frame["volume_contribution"] = frame["volume"] / frame["cumulative_volume"] * 100.0
    frame["price_impact"] = frame["vwap"].diff().fillna(0.0)
    return frame


# ---------------------------------------------------------------------------
# Session statistics
# ---------------------------------------------------------------------------
def trend_consistency(prices: Sequence[float]) -> float:
    """|#up moves - #down moves| / #moves; 1 means every move went one way."""
    changes = np.diff(np.asarray(prices, dtype=float))
    if len(changes) == 0:
        return 0.0
    return abs(int((changes > 0).sum()) - int((changes < 0).sum())) / len(changes)


def trading_signal(session: pd.DataFrame, lookback: int = 5) -> str:
    """Entry/exit label for the last bar of a session."""
    last = session.iloc[-1]
    deviation = vwap_deviation(last["price"], last["vwap"])
    recent = session["price"].iloc[-lookback:]
    direction = recent.iloc[-1] - recent.iloc[0]

    if abs(deviation) < 0.1:
        return "neutral"
    if deviation > 0.5 and direction < 0:
        return "sell"
    if deviation < -0.5 and direction > 0:
        return "buy"
    if deviation > 0.2:
        return "above_vwap"
    if deviation < -0.2:
        return "below_vwap"
    return "neutral"


def signal_strength(session: pd.DataFrame) -> int:
    """0-100 score from VWAP deviation, relative volume and momentum."""
    last = session.iloc[-1]
    deviation = abs(vwap_deviation(last["price"], last["vwap"]))
    relative_volume = last["volume"] / session["volume"].mean()
    momentum = abs(last["momentum"]) if "momentum" in session else 0.0

    score = (min(deviation * 20.0, 50.0)
             + min((relative_volume - 1.0) * 25.0, 30.0)
             + momentum * 20.0)
    return int(clamp(math.floor(score), 0, 100))


def volatility_regime(prices: Sequence[float]) -> str:
    """Classify the session range relative to the average price."""
    prices = np.asarray(prices, dtype=float)
    range_pct = (prices.max() - prices.min()) / prices.mean() * 100.0
    if range_pct < 1:
        return "low_volatility"
    if range_pct > 3:
        return "high_volatility"
    return "normal_volatility"


def vwap_effectiveness(session: pd.DataFrame, threshold: float = 0.002) -> float:
    """
    Percent of meaningful deviations (> threshold) that cross back over VWAP
    on the next bar.
    """
    if len(session) < 10:
        return 0.0
    deviation = ((session["price"] - session["vwap"]) / session["vwap"]).to_numpy()
    current, following = deviation[1:-1], deviation[2:]
    meaningful = np.abs(current) > threshold
    if not meaningful.any():
        return 0.0
    reversions = np.sign(current[meaningful]) != np.sign(following[meaningful])
    return float(reversions.sum() / meaningful.sum() * 100.0)


def session_summary(session: pd.DataFrame, trading_days: int = 252) -> Dict[str, object]:
    """
    Headline statistics of a simulated session.

    Returns:
        current_vwap, current_sma, current_price, total_volume, total_pv,
        price_vs_vwap, total_return, vwap_return, average_volume,
        annualized_volatility, average_vwap_deviation, trend_consistency,
        signal, signal_strength, market_condition_score, vwap_effectiveness
        (percent units where applicable).
    """
    first, last = session.iloc[0], session.iloc[-1]
    prices = session["price"].to_numpy()
    returns = np.diff(prices) / prices[:-1]
    realised = math.sqrt(float(np.mean(returns ** 2))) if len(returns) else 0.0

    return {
        "current_vwap": float(last["vwap"]),
        "current_sma": float(last["sma"]),
        "current_price": float(last["price"]),
        "total_volume": float(last["cumulative_volume"]),
        "total_pv": float(last["cumulative_pv"]),
        "price_vs_vwap": float(vwap_deviation(last["price"], last["vwap"])),
        "total_return": float((last["price"] - first["price"]) / first["price"] * 100.0),
        "vwap_return": float((last["vwap"] - first["vwap"]) / first["vwap"] * 100.0),
        "average_volume": float(math.floor(session["volume"].mean())),
        "annualized_volatility": realised * math.sqrt(trading_days) * 100.0,
        "average_vwap_deviation": float(
            ((session["price"] - session["vwap"]).abs() / session["vwap"]).mean() * 100.0),
        "trend_consistency": trend_consistency(prices),
        "signal": trading_signal(session),
        "signal_strength": signal_strength(session),
        "market_condition_score": volatility_regime(prices),
        "vwap_effectiveness": vwap_effectiveness(session),
    }
