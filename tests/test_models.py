"""
Unit Tests -- Closed-Form Models
================================
Tests the A&S normal CDF, z-score lookup, Black-Scholes pricing and density,
Kelly sizing and parametric VaR / Expected Shortfall.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import math

import numpy as np
import pytest
from scipy.stats import norm

from finlessons.models.normal import erf, norm_cdf, norm_pdf, z_score
from finlessons.models.black_scholes import (
    OptionInputs, call_delta, call_price, d1_d2, price_summary, put_price,
    terminal_price_density,
)
from finlessons.models.kelly import (
    GROWTH_SENTINEL, BetTerms, fractional_kelly_table, growth_curve, growth_rate,
    kelly_fraction, kelly_summary, simulate_bankrolls,
)
from finlessons.models.risk import parametric_var_es, returns_distribution, subadditivity_table


# ---------------------------------------------------------------------------
# Normal distribution
# ---------------------------------------------------------------------------
class TestNormal:
    """Abramowitz-Stegun approximation against scipy."""

    def test_cdf_matches_scipy(self):
        grid = np.linspace(-6, 6, 241)
        errors = [abs(norm_cdf(x) - norm.cdf(x)) for x in grid]
        assert max(errors) < 1.5e-7

    def test_erf_is_odd(self):
        for x in (0.1, 0.7, 2.3):
            assert erf(-x) == pytest.approx(-erf(x), abs=1e-15)

    def test_cdf_monotone_in_lower_tail(self):
        values = [norm_cdf(x) for x in np.linspace(-9, 0, 9001)]
        assert all(b >= a for a, b in zip(values, values[1:]))
        assert 0.0 < norm_cdf(-8.0) < 1e-14

    def test_cdf_symmetry(self):
        for x in (0.3, 1.7, 4.2):
            assert norm_cdf(-x) + norm_cdf(x) == pytest.approx(1.0, abs=1e-15)

    def test_cdf_at_zero(self):
        assert norm_cdf(0.0) == pytest.approx(0.5, abs=1e-9)

    def test_pdf(self):
        assert norm_pdf(0.0) == pytest.approx(1 / math.sqrt(2 * math.pi))
        assert norm_pdf(1.645) == pytest.approx(0.1031, abs=1e-4)

    def test_tabulated_z_scores(self):
        assert z_score(0.90) == 1.282
        assert z_score(0.95) == 1.645
        assert z_score(0.99) == 2.326

    def test_z_score_fallback_uses_inverse_cdf(self):
        assert z_score(0.975) == pytest.approx(1.959964, abs=1e-6)
        assert z_score(0.93) == pytest.approx(norm.ppf(0.93))

    @pytest.mark.parametrize("bad", [0.0, 1.0, -0.2, 1.5])
    def test_z_score_out_of_range(self, bad):
        with pytest.raises(ValueError):
            z_score(bad)


# ---------------------------------------------------------------------------
# Black-Scholes
# ---------------------------------------------------------------------------
class TestBlackScholes:

    @pytest.mark.parametrize("S,K", [(120, 100), (80, 100), (100, 100)])
    def test_expiry_is_intrinsic(self, S, K):
        assert call_price(S, K, 0.05, 0.2, 0.0) == max(S - K, 0.0)
        assert put_price(S, K, 0.05, 0.2, 0.0) == max(K - S, 0.0)
        assert call_price(S, K, 0.05, 0.2, -1.0) == max(S - K, 0.0)

    @pytest.mark.parametrize("sigma", [0.05, 0.2, 0.8])
    def test_monotone_in_spot(self, sigma):
        # full slider domain: S in [50, 200], 1 to 730 days
        for days in range(1, 731, 3):
            T = days / 365
            prices = [call_price(S, 100, 0.05, sigma, T) for S in range(50, 201)]
            assert all(b >= a for a, b in zip(prices, prices[1:])), days

    def test_monotone_on_fine_grid(self):
        prices = [call_price(S, 100, 0.05, 0.05, 0.1) for S in np.linspace(50, 200, 3001)]
        assert all(b >= a for a, b in zip(prices, prices[1:]))

    def test_put_call_parity(self):
        S, K, r, sigma, T = 105.0, 100.0, 0.03, 0.3, 0.75
        lhs = call_price(S, K, r, sigma, T) - put_price(S, K, r, sigma, T)
        assert lhs == pytest.approx(S - K * math.exp(-r * T), abs=1e-10)

    def test_known_value(self):
        # S=K=100, r=5%, sigma=20%, T=1 -> 10.4506
        assert call_price(100, 100, 0.05, 0.2, 1.0) == pytest.approx(10.4506, abs=1e-3)

    def test_d1_d2_undefined_at_expiry(self):
        d1, d2 = d1_d2(100, 100, 0.05, 0.2, 0.0)
        assert math.isnan(d1) and math.isnan(d2)

    def test_delta_bounds(self):
        for S in (60, 100, 160):
            assert 0.0 <= call_delta(S, 100, 0.05, 0.2, 0.5) <= 1.0
        assert call_delta(120, 100, 0.05, 0.2, 0.0) == 1.0

    def test_summary(self):
        summary = price_summary(OptionInputs(S=100, K=100, r=0.05, sigma=0.2, T=90 / 365))
        assert summary["time_value"] == pytest.approx(
            summary["option_price"] - summary["intrinsic_value"])
        assert summary["discount_factor"] == pytest.approx(math.exp(-0.05 * 90 / 365))
        assert summary["d2"] == pytest.approx(summary["d1"] - 0.2 * math.sqrt(90 / 365))

    def test_summary_expired(self):
        summary = price_summary(OptionInputs(S=110, K=100, r=0.05, sigma=0.2, T=0.0))
        assert summary["d1"] is None
        assert summary["option_price"] == 10.0
        assert summary["time_value"] == 0.0

    def test_inputs_validation(self):
        with pytest.raises(ValueError):
            OptionInputs(S=-1, K=100, r=0.05, sigma=0.2, T=1)
        with pytest.raises(ValueError):
            OptionInputs(S=100, K=100, r=0.05, sigma=0.0, T=1)

    def test_terminal_density_grid(self):
        density = terminal_price_density(100, 0.05, 0.2, 0.5)
        assert len(density["w"]) == 201
        assert density["w"][0] == -4.0 and density["w"][-1] == pytest.approx(4.0)
        assert np.all(np.diff(density["ST"]) > 0)
        with pytest.raises(ValueError):
            terminal_price_density(100, 0.05, 0.2, 0.0)


# ---------------------------------------------------------------------------
# Kelly
# ---------------------------------------------------------------------------
class TestKelly:

    def test_textbook_example(self):
        summary = kelly_summary(BetTerms(p=0.6, b=2.0))
        assert summary["kelly_fraction"] == pytest.approx(0.4)
        assert summary["kelly_percentage"] == pytest.approx(40.0)
        assert summary["half_kelly_percentage"] == pytest.approx(20.0)
        assert summary["expected_value"] == pytest.approx(0.8)
        assert summary["probability_of_losing"] == pytest.approx(0.4)

    @pytest.mark.parametrize("p", np.linspace(0.0, 1.0, 21))
    @pytest.mark.parametrize("b", [0.1, 0.5, 1.0, 2.0, 10.0])
    def test_fraction_bounded(self, p, b):
        assert 0.0 <= kelly_fraction(p, b) <= 1.0

    def test_no_edge_no_bet(self):
        assert kelly_fraction(0.3, 1.0) == 0.0

    def test_growth_is_finite_at_full_stake(self):
        g = growth_rate(0.6, 2.0, 1.0)
        assert math.isfinite(g)
        assert g < 0

    def test_growth_beyond_ruin_is_floored(self):
        assert growth_rate(0.5, 1.0, 5.0) > GROWTH_SENTINEL

    def test_growth_peaks_at_kelly(self):
        curve = growth_curve(0.6, 2.0)
        assert len(curve) == 51
        best = curve.loc[curve["growth_rate"].idxmax(), "bet_size"]
        assert best == 40

    def test_fractional_table(self):
        table = fractional_kelly_table(0.6, 2.0, 0.4)
        assert list(table["fraction"]) == [0.25, 0.5, 0.75, 1.0]
        assert table["volatility"].is_monotonic_increasing
        assert table["growth_rate"].iloc[-1] == pytest.approx(growth_rate(0.6, 2.0, 0.4))

    def test_bet_terms_validation(self):
        with pytest.raises(ValueError):
            BetTerms(p=1.2, b=2.0)
        with pytest.raises(ValueError):
            BetTerms(p=0.5, b=0.0)

    def test_bankroll_simulation(self):
        uniforms = [0.1, 0.9, 0.3, 0.7, 0.2]
        paths = simulate_bankrolls(0.6, 2.0, 0.4, 1000, 5, uniforms)
        assert list(paths.columns) == ["bet_number", "kelly", "half_kelly", "over_bet"]
        assert len(paths) == 6
        assert paths.iloc[0]["kelly"] == 1000
        # first bet wins: 1000 * (1 + 0.4 * 2)
        assert paths.iloc[1]["kelly"] == 1800
        assert (paths[["kelly", "half_kelly", "over_bet"]] >= 0).all().all()

    def test_bankroll_needs_enough_draws(self):
        with pytest.raises(ValueError):
            simulate_bankrolls(0.6, 2.0, 0.4, 1000, 10, [0.5] * 3)


# ---------------------------------------------------------------------------
# VaR / Expected Shortfall
# ---------------------------------------------------------------------------
class TestRisk:

    def test_uses_tabulated_z(self):
        result = parametric_var_es(0.95, 0.15, 0.08)
        assert result.z_score == 1.645
        assert result.alpha == pytest.approx(0.05)

    def test_values(self):
        result = parametric_var_es(0.95, 0.15, 0.08)
        sigma = 0.15 / math.sqrt(252)
        mu = 0.08 / 252
        assert result.var == pytest.approx(-(mu - 1.645 * sigma) * 100)
        assert result.es == pytest.approx(-(mu - sigma * norm_pdf(1.645) / 0.05) * 100)

    @pytest.mark.parametrize("confidence", [0.90, 0.92, 0.95, 0.975, 0.99])
    @pytest.mark.parametrize("vol", [0.05, 0.2, 0.5])
    @pytest.mark.parametrize("ret", [-0.1, 0.0, 0.2])
    @pytest.mark.parametrize("horizon", [1, 10, 30])
    def test_es_not_below_var(self, confidence, vol, ret, horizon):
        result = parametric_var_es(confidence, vol, ret, horizon)
        assert result.es >= result.var

    def test_horizon_scaling(self):
        one = parametric_var_es(0.99, 0.2, 0.0, 1)
        ten = parametric_var_es(0.99, 0.2, 0.0, 10)
        assert ten.var == pytest.approx(one.var * math.sqrt(10))

    def test_as_dict(self):
        data = parametric_var_es(0.95, 0.15, 0.08).as_dict()
        assert data["es_to_var_ratio"] == pytest.approx(data["es_value"] / data["var_value"])

    def test_invalid_inputs(self):
        with pytest.raises(ValueError):
            parametric_var_es(0.95, 0.0, 0.08)
        with pytest.raises(ValueError):
            parametric_var_es(0.95, 0.15, 0.08, horizon=0)

    def test_tail_marks_losses_beyond_var(self):
        frame = returns_distribution(std_pct=1.0, var_pct=1.6)
        assert frame["return"].is_monotonic_increasing
        assert frame.loc[frame["return"] <= -1.6, "is_tail"].all()
        assert not frame.loc[frame["return"] > -1.6, "is_tail"].any()
        assert (frame.loc[~frame["is_tail"], "tail_density"] == 0).all()

    def test_subadditivity(self):
        table = subadditivity_table()
        summed = table.loc[table["name"] == "A + B (Sum)"].iloc[0]
        portfolio = table.loc[table["name"] == "Portfolio A+B"].iloc[0]
        assert portfolio["es"] <= summed["es"]
        assert portfolio["var"] <= summed["var"]


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
