"""
Unit Tests -- Seeded Simulation
===============================
Tests the linear-congruential generator, the regime market simulator and
its teaching scenarios, fractional-memory paths and the cycle signals.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import math

import numpy as np
import pandas as pd
import pytest

from finlessons.config import CONFIG
from finlessons.simulation.fractional import (
    REFERENCE_SERIES, fractional_memory_path, reference_paths,
)
from finlessons.simulation.market import (
    MARKET_CONDITIONS, VOLUME_PATTERNS, RegimeMarketSimulator, SessionConfig,
    choppy_session, ideal_trend_session, mixed_regime_session, volume_pattern_multiplier,
)
from finlessons.simulation.rng import INCREMENT, MODULUS, MULTIPLIER, SeededRandom
from finlessons.simulation.signals import market_cycle_composite, two_tone_signal


# ---------------------------------------------------------------------------
# Random source
# ---------------------------------------------------------------------------
class TestSeededRandom:

    def test_first_draw_follows_recurrence(self):
        expected = ((42 * MULTIPLIER + INCREMENT) % MODULUS) / MODULUS
        assert SeededRandom(42).random() == expected

    def test_reproducible(self):
        assert SeededRandom(7).randoms(50) == SeededRandom(7).randoms(50)
        assert SeededRandom(7).gaussians(20) == SeededRandom(7).gaussians(20)

    def test_seeds_differ(self):
        assert SeededRandom(1).randoms(5) != SeededRandom(2).randoms(5)

    def test_unit_interval(self):
        draws = SeededRandom(99).randoms(2000)
        assert min(draws) >= 0.0
        assert max(draws) < 1.0

    def test_gauss_draws_u1_then_u2(self):
        u1, u2 = SeededRandom(5).randoms(2)
        expected = math.sqrt(-2.0 * math.log(max(u1, 1.0 / MODULUS))) * math.cos(2.0 * math.pi * u2)
        assert SeededRandom(5).gauss() == pytest.approx(expected)

    def test_gauss_moments(self):
        z = np.array(SeededRandom(2024).gaussians(5000))
        assert abs(z.mean()) < 0.1
        assert abs(z.std() - 1.0) < 0.1

    def test_uniform_and_sign(self):
        rng = SeededRandom(3)
        assert all(5.0 <= rng.uniform(5.0, 6.0) < 6.0 for _ in range(100))
        assert {rng.sign() for _ in range(100)} == {-1, 1}


# ---------------------------------------------------------------------------
# Regime simulator
# ---------------------------------------------------------------------------
class TestRegimeMarketSimulator:

    @pytest.mark.parametrize("condition", MARKET_CONDITIONS)
    @pytest.mark.parametrize("pattern", VOLUME_PATTERNS)
    def test_guard_rails(self, condition, pattern):
        cfg = SessionConfig(base_price=100.0, volatility=0.5, intervals=60,
                            condition=condition, volume_pattern=pattern)
        session = RegimeMarketSimulator(cfg).simulate(SeededRandom(17))
        assert len(session) == 60
        assert session["price"].between(70.0, 130.0).all()
        assert (session["volume"] >= CONFIG.market.min_volume).all()
        assert session["momentum"].abs().max() <= 0.5
        assert (session["high"] >= session["low"]).all()

    def test_reproducible(self):
        cfg = SessionConfig(condition="choppy")
        first = RegimeMarketSimulator(cfg).simulate(SeededRandom(8))
        second = RegimeMarketSimulator(cfg).simulate(SeededRandom(8))
        pd.testing.assert_frame_equal(first, second)

    def test_seed_changes_path(self):
        cfg = SessionConfig()
        first = RegimeMarketSimulator(cfg).simulate(SeededRandom(8))
        second = RegimeMarketSimulator(cfg).simulate(SeededRandom(9))
        assert not np.allclose(first["price"], second["price"])

    def test_columns_and_clock(self):
        session = RegimeMarketSimulator(SessionConfig(intervals=13)).simulate(SeededRandom(1))
        for column in ("step", "time", "price", "open", "high", "low", "close", "volume",
                       "typical_price", "pv", "cumulative_pv", "cumulative_volume", "vwap",
                       "sma", "vwap_deviation", "volume_ma", "price_change", "momentum"):
            assert column in session
        assert session.columns[0] == "step"
        assert session["time"].iloc[0] == "09:30"
        assert session["time"].iloc[1] == "10:00"
        assert session["cumulative_volume"].is_monotonic_increasing

    def test_vwap_uses_typical_price(self):
        session = RegimeMarketSimulator(SessionConfig(intervals=20)).simulate(SeededRandom(4))
        expected = (session["typical_price"] * session["volume"]).cumsum() / session["volume"].cumsum()
        assert session["vwap"].to_numpy() == pytest.approx(expected.to_numpy())

    @pytest.mark.parametrize("kwargs", [
        {"condition": "sideways"},
        {"volume_pattern": "flat"},
        {"intervals": 1},
        {"base_price": 0.0},
        {"volatility": -0.1},
    ])
    def test_config_validation(self, kwargs):
        with pytest.raises(ValueError):
            SessionConfig(**kwargs)


class TestVolumePattern:

    def test_u_shape(self):
        rng = SeededRandom(1)
        assert volume_pattern_multiplier("u-shaped", 0.0, rng) == pytest.approx(1.4)
        assert volume_pattern_multiplier("u-shaped", 0.5, rng) == pytest.approx(0.4)
        assert volume_pattern_multiplier("u-shaped", 1.0, rng) == pytest.approx(1.4, abs=1e-3)

    def test_declining(self):
        rng = SeededRandom(1)
        assert volume_pattern_multiplier("declining", 0.0, rng) == 1.5
        assert volume_pattern_multiplier("declining", 1.0, rng) == pytest.approx(0.7)

    def test_spike_peaks_at_midday(self):
        assert volume_pattern_multiplier("spike", 0.5, SeededRandom(1)) == 2.0

    def test_unknown(self):
        with pytest.raises(ValueError):
            volume_pattern_multiplier("w-shaped", 0.5, SeededRandom(1))


# ---------------------------------------------------------------------------
# Teaching scenarios
# ---------------------------------------------------------------------------
class TestScenarioSessions:

    def test_trend_direction(self):
        up = ideal_trend_session(100.0, "up", SeededRandom(1))
        down = ideal_trend_session(100.0, "down", SeededRandom(2))
        assert len(up) == 40
        assert up["price"].iloc[-1] > 101.0
        assert down["price"].iloc[-1] < 99.0
        assert up["vwap"].iloc[-1] < up["price"].iloc[-1]
        assert down["vwap"].iloc[-1] > down["price"].iloc[-1]

    def test_trend_direction_validation(self):
        with pytest.raises(ValueError):
            ideal_trend_session(100.0, "sideways", SeededRandom(1))

    def test_choppy_stays_near_base(self):
        session = choppy_session(100.0, SeededRandom(3))
        assert session["price"].between(95.0, 105.0).all()
        assert session["is_reversal"].any()

    def test_mixed_phases_are_bounded(self):
        session = mixed_regime_session(100.0, 0.5, SeededRandom(4), intervals=60)
        assert set(session["phase"]) <= {"trending", "choppy"}
        runs = (session["phase"] != session["phase"].shift()).cumsum()
        assert session.groupby(runs).size().max() <= 12

    def test_scenarios_reproducible(self):
        first = choppy_session(50.0, SeededRandom(12))
        second = choppy_session(50.0, SeededRandom(12))
        pd.testing.assert_frame_equal(first, second)


# ---------------------------------------------------------------------------
# Fractional-memory paths
# ---------------------------------------------------------------------------
class TestFractionalPaths:

    def test_shape_and_start(self):
        path = fractional_memory_path(0.6, 120, 0.2, seed=5)
        assert list(path.columns) == ["time", "price", "return"]
        assert len(path) == 120
        assert path["time"].is_monotonic_increasing
        assert path["return"].iloc[0] == 0.0

    def test_reproducible(self):
        a = fractional_memory_path(0.3, 80, 0.15, seed=9)
        b = fractional_memory_path(0.3, 80, 0.15, seed=9)
        pd.testing.assert_frame_equal(a, b)

    def test_first_increment(self):
        path = fractional_memory_path(0.7, 5, 0.2, seed=21)
        z = SeededRandom(21).gauss()
        assert path["price"].iloc[0] == pytest.approx(100.0 + 0.2 * z / 10.0)

    @pytest.mark.parametrize("H,length", [(0.0, 10), (1.0, 10), (0.5, 0)])
    def test_validation(self, H, length):
        with pytest.raises(ValueError):
            fractional_memory_path(H, length, 0.1, seed=1)

    def test_reference_paths(self):
        paths = reference_paths()
        assert set(paths) == set(REFERENCE_SERIES)
        H, length, vol, seed = REFERENCE_SERIES["trending"]
        pd.testing.assert_frame_equal(paths["trending"],
                                      fractional_memory_path(H, length, vol, seed))


# ---------------------------------------------------------------------------
# Cycle signals
# ---------------------------------------------------------------------------
class TestSignals:

    def test_two_tone(self):
        frame = two_tone_signal(5, 15, 1.0, 0.5, 0.0, 0.0, 100, 2.0, 0.1, SeededRandom(42))
        assert len(frame) == 200
        assert frame["time"].iloc[1] == pytest.approx(0.01)
        assert frame["noise"].abs().max() <= 0.1
        assert frame["amplitude"].to_numpy() == pytest.approx(
            (frame["signal1"] + frame["signal2"] + frame["noise"]).to_numpy())

    def test_market_composite(self):
        frame = market_cycle_composite(20, 50, 1.0, 0.5, 0.2, 100, 0.01, SeededRandom(42))
        assert len(frame) == 100
        assert frame["noise"].abs().max() <= 0.1
        assert frame["price"].to_numpy() == pytest.approx(
            (100.0 + 10.0 * frame["composite"]).to_numpy())
        assert frame["trend"].iloc[-1] == pytest.approx(0.99)


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
