"""
Regime-Based Intraday Market Simulator
======================================

Seeded intraday sessions (09:30 to 16:00) for the VWAP lesson. Each step
composes a price move from up to three components whose weights come from
the market regime:

    trend           direction persisted by a decaying momentum term
    mean reversion  pull toward the base price, proportional to the distance
    noise           uniform shock scaled by volatility

    trending   dir ts sigma (0.5 u + 0.5) + m persistence + (u - 0.5) sigma noise
    choppy     (base - p) mrs - 0.3 last_move + (u - 0.5) sigma noise
    mixed      trending-style rule while sin(3 pi progress) > 0, otherwise
               mean reversion plus noise

    momentum  <- clamp(momentum decay + 0.1 move, -0.5, 0.5)
    price     <- clamp(price + move, 0.7 base, 1.3 base)

Volume is a stochastic base (8000 + 4000 u) shaped by an intraday pattern,
scaled up on large moves, and floored at a minimum print size.

All randomness comes from one ``SeededRandom`` consumed in a fixed order, so
equal seeds and parameters give identical sessions.
"""

import math
from dataclasses import dataclass
from typing import Dict, List

import numpy as np
import pandas as pd

from ..config import CONFIG
from ..models.vwap import cumulative_vwap, rolling_sma, typical_price, vwap_deviation
from ..utils import clamp, clock_label, timeit
from .rng import SeededRandom

MARKET_CONDITIONS = ("trending", "choppy", "mixed")
VOLUME_PATTERNS = ("u-shaped", "declining", "random", "spike")


@dataclass(frozen=True)
class RegimeConfig:
    """Component weights of one market regime."""
    trend_strength: float
    trend_persistence: float
    noise_level: float
    mean_reversion_strength: float
    momentum_decay: float


REGIMES: Dict[str, RegimeConfig] = {
    "trending": RegimeConfig(0.4, 0.8, 0.3, 0.1, 0.95),
    "choppy": RegimeConfig(0.1, 0.3, 0.8, 0.4, 0.85),
    "mixed": RegimeConfig(0.25, 0.6, 0.5, 0.25, 0.9),
}


def _sign(x: float) -> float:
    return (x > 0) - (x < 0)


def volume_pattern_multiplier(pattern: str, progress: float, rng: SeededRandom) -> float:
    """
    Intraday shape of traded volume.

        u-shaped   1.4 - sin(pi p)^0.3    (heavy open and close, quiet lunch)
        declining  1.5 - 0.8 p
        random     0.5 + u
        spike      2 - d / 0.2 within 0.2 of midday, else 0.6 + 0.4 u
    """
    if pattern == "u-shaped":
        return 1.4 - math.sin(progress * math.pi) ** 0.3
    if pattern == "declining":
        return 1.5 - progress * 0.8
    if pattern == "random":
        return 0.5 + rng.random()
    if pattern == "spike":
        distance = abs(progress - 0.5)
        if distance < 0.2:
            return 2.0 - distance / 0.2
        return 0.6 + rng.random() * 0.4
    raise ValueError(f"Unknown volume pattern {pattern!r}; expected one of {VOLUME_PATTERNS}")


@dataclass
class SessionConfig:
    """Inputs of one simulated session."""
    base_price: float = 100.0
    volatility: float = 0.2
    intervals: int = 50
    condition: str = "trending"
    volume_multiplier: float = 1.0
    volume_pattern: str = "u-shaped"

    def __post_init__(self):
        if self.condition not in REGIMES:
            raise ValueError(
                f"Unknown market condition {self.condition!r}; expected one of {MARKET_CONDITIONS}")
        if self.volume_pattern not in VOLUME_PATTERNS:
            raise ValueError(
                f"Unknown volume pattern {self.volume_pattern!r}; expected one of {VOLUME_PATTERNS}")
        if self.base_price <= 0 or self.volatility <= 0:
            raise ValueError("Base price and volatility must be positive")
        if self.intervals < 2:
            raise ValueError(f"A session needs at least 2 intervals, got {self.intervals}")


class RegimeMarketSimulator:
    """
    Intraday OHLCV session generator.

    Usage:
        >>> sim = RegimeMarketSimulator(SessionConfig(condition="choppy"))
        >>> session = sim.simulate(SeededRandom(7))
        >>> session[["time", "price", "volume", "vwap"]].head()
    """

    def __init__(self, config: SessionConfig):
        self.config = config
        self.regime = REGIMES[config.condition]

    # ------------------------------------------------------------ components
    def price_move(self, price: float, progress: float, momentum: float,
                   last_move: float, rng: SeededRandom) -> float:
        cfg, reg = self.config, self.regime
        base, vol = cfg.base_price, cfg.volatility

        if cfg.condition == "trending":
            direction = _sign(momentum) if momentum != 0 else rng.sign()
            trend = direction * reg.trend_strength * vol * (rng.random() * 0.5 + 0.5)
            noise = (rng.random() - 0.5) * vol * reg.noise_level
            return trend + momentum * reg.trend_persistence + noise

        if cfg.condition == "choppy":
            noise = (rng.random() - 0.5) * vol * reg.noise_level
            return (base - price) * reg.mean_reversion_strength - last_move * 0.3 + noise

        if math.sin(progress * math.pi * 3) > 0:
            direction = _sign(momentum) if momentum != 0 else _sign(rng.random() - 0.5)
            return direction * reg.trend_strength * vol + momentum * reg.trend_persistence
        noise = (rng.random() - 0.5) * vol * reg.noise_level
        return (base - price) * reg.mean_reversion_strength + noise

    def next_momentum(self, momentum: float, move: float) -> float:
        updated = momentum * self.regime.momentum_decay + move * 0.1
        return clamp(updated, -0.5, 0.5)

    def volume(self, progress: float, move: float, rng: SeededRandom) -> int:
        cfg = self.config
        base = 8000 + rng.random() * 4000
        pattern = volume_pattern_multiplier(cfg.volume_pattern, progress, rng)
        responsiveness = 1 + abs(move) / cfg.volatility * 0.5
        condition = 0.8 if cfg.condition == "choppy" else 1.0
        raw = math.floor(base * pattern * responsiveness * cfg.volume_multiplier * condition)
        return max(CONFIG.market.min_volume, raw)

    def bar(self, close: float, move: float, rng: SeededRandom) -> Dict[str, float]:
        """OHLC bar ending at ``close`` after a move of ``move``."""
        spread = close * self.config.volatility * 0.01
        intrabar = spread * (1 + rng.random())
        open_ = close - move
        high = max(open_, close) + intrabar * rng.random()
        low = min(open_, close) - intrabar * rng.random()
        return {"open": open_, "high": high, "low": low, "close": close}

    # ------------------------------------------------------------ simulation
    @timeit
    def simulate(self, rng: SeededRandom) -> pd.DataFrame:
        """
        Run one session.

        Returns:
            DataFrame with step, time, price, open, high, low, close, volume,
            typical_price, pv, cumulative_pv, cumulative_volume, vwap, sma,
            vwap_deviation, volume_ma, price_change and momentum.
        """
        cfg, mkt = self.config, CONFIG.market
        floor, cap = cfg.base_price * mkt.price_floor, cfg.base_price * mkt.price_cap
        time_step = (mkt.session_close - mkt.session_open) / cfg.intervals

        price, momentum, last_move = cfg.base_price, 0.0, 0.0
        rows: List[Dict] = []
        for i in range(cfg.intervals):
            progress = i / (cfg.intervals - 1)
            move = self.price_move(price, progress, momentum, last_move, rng)
            momentum = self.next_momentum(momentum, move)
            last_move = move
            price = clamp(price + move, floor, cap)

            volume = self.volume(progress, move, rng)
            bar = self.bar(price, move, rng)
            rows.append({
                "step": i,
                "time": clock_label(mkt.session_open + i * time_step),
                "price": price,
                **bar,
                "volume": volume,
                "price_change": move,
                "momentum": momentum,
            })

        session = pd.DataFrame(rows)
        return _attach_vwap_columns(
            session,
            typical_price(session["high"], session["low"], session["close"]),
            sma_window=mkt.sma_window)


def _attach_vwap_columns(session: pd.DataFrame, reference: pd.Series,
                         sma_window: int = None) -> pd.DataFrame:
    """Add pv, running sums, VWAP and deviation columns computed on ``reference``."""
    session["typical_price"] = reference
    session["pv"] = reference * session["volume"]
    session["cumulative_pv"] = session["pv"].cumsum()
    session["cumulative_volume"] = session["volume"].cumsum()
    session["vwap"] = cumulative_vwap(reference, session["volume"])
    if sma_window:
        session["sma"] = rolling_sma(session["price"], sma_window)
        session["volume_ma"] = np.floor(
            session["volume"].rolling(10, min_periods=1).mean())
    session["vwap_deviation"] = vwap_deviation(session["price"], session["vwap"])
    return session


# ---------------------------------------------------------------------------
# Teaching scenarios
# ---------------------------------------------------------------------------
def _scenario_clock(i: int, intervals: int) -> str:
    mkt = CONFIG.market
    return clock_label(mkt.session_open + i * (mkt.session_close - mkt.session_open) / intervals)


def ideal_trend_session(base_price: float, direction: str, rng: SeededRandom,
                        intervals: int = 40) -> pd.DataFrame:
    """
    Clean trend worth 2% of ``base_price`` over the session with 0.1% noise;
    price stays on one side of VWAP.
    """
    sign = {"up": 1, "down": -1}.get(direction)
    if sign is None:
        raise ValueError(f"Direction must be 'up' or 'down', got {direction!r}")
    step_move = base_price * 0.02 * sign / intervals

    price, rows = base_price, []
    for i in range(intervals):
        trend = step_move * (0.8 + rng.random() * 0.4)
        noise = (rng.random() - 0.5) * base_price * 0.001
        move = trend + noise
        price += move

        from_trend = 1.3 if abs(move) > abs(step_move) * 0.5 else 0.9
        time_of_day = 0.8 + 0.4 * math.sin(math.pi * i / intervals)
        volume = math.floor((12000 + rng.random() * 3000) * from_trend * time_of_day)
        rows.append({"step": i, "time": _scenario_clock(i, intervals), "price": price,
                     "volume": volume, "price_change": move,
                     "trend_strength": abs(price - base_price) / base_price * 100.0})

    session = pd.DataFrame(rows)
    return _attach_vwap_columns(session, session["price"])


def choppy_session(base_price: float, rng: SeededRandom, intervals: int = 40) -> pd.DataFrame:
    """
    Mean-reverting session: reversals become likelier after each continuation
    and price is pulled back when it strays more than 3% from base.
    """
    price, last_direction, streak, rows = base_price, 1, 0, []
    for i in range(intervals):
        direction = last_direction
        if rng.random() < min(0.7, 0.3 + streak * 0.1):
            direction = -last_direction
            streak = 0
        else:
            streak += 1

        reversion = -(price - base_price) * 0.15
        shock = (rng.random() - 0.5) * base_price * 0.008
        move = reversion + shock + direction * base_price * 0.002
        price += move
        if abs(price - base_price) > base_price * 0.03:
            price = base_price + (price - base_price) * 0.7

        is_reversal = _sign(move) != _sign(last_direction)
        volume = math.floor((9000 + rng.random() * 4000)
                            * (1.4 if is_reversal else 0.8)
                            * (1 + abs(move) / (base_price * 0.01)))
        rows.append({"step": i, "time": _scenario_clock(i, intervals), "price": price,
                     "volume": volume, "price_change": move, "is_reversal": is_reversal,
                     "choppiness": abs(move) / (base_price * 0.01),
                     "distance_from_base": (price - base_price) / base_price * 100.0})
        last_direction = _sign(move) or last_direction

    session = pd.DataFrame(rows)
    return _attach_vwap_columns(session, session["price"])


def mixed_regime_session(base_price: float, volatility: float, rng: SeededRandom,
                         intervals: int = 50, max_phase_length: int = 12) -> pd.DataFrame:
    """
    Session alternating between trending and choppy phases. Trend phases push
    up in the first half of the day and down in the second.
    """
    price, phase, phase_length, rows = base_price, "trending", 0, []
    for i in range(intervals):
        if phase_length >= max_phase_length or (phase_length > 5 and rng.random() < 0.2):
            phase = "choppy" if phase == "trending" else "trending"
            phase_length = 0
        phase_length += 1

        if phase == "trending":
            direction = 1 if i < intervals / 2 else -1
            move = direction * volatility * (0.3 + rng.random() * 0.4)
            volume = math.floor((14000 + rng.random() * 5000) * 1.2)
        else:
            move = (base_price - price) * 0.1 + (rng.random() - 0.5) * volatility * 1.2
            volume = math.floor((10000 + rng.random() * 5000) * 0.9)
        price += move
        rows.append({"step": i, "time": _scenario_clock(i, intervals), "price": price,
                     "volume": volume, "price_change": move, "phase": phase})

    session = pd.DataFrame(rows)
    return _attach_vwap_columns(session, session["price"])
