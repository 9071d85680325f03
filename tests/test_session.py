"""
Unit Tests -- Lesson Session
============================
Tests lazy, memoised calculation and series generation, cache invalidation
on parameter updates, reseeding and the domain check.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import pandas as pd
import pytest

from finlessons.core.session import LessonSession, snapshot_key


@pytest.fixture
def counted_module(module_factory):
    """Module whose calculate/generate record every call."""
    calls = {"calculate": 0, "generate": 0}

    def calculate(params):
        calls["calculate"] += 1
        return {"double": params["x"] * 2}

    def generate(params, result, seed):
        calls["generate"] += 1
        return {"line": pd.DataFrame({"t": range(3), "y": [result["double"] + seed] * 3})}

    module = module_factory(calculate=calculate, generate=generate,
                            domain_check=lambda p, r: r["double"] < 10)
    return module, calls


class TestSnapshotKey:

    def test_order_independent(self):
        assert snapshot_key({"a": 1, "b": 2.5}) == snapshot_key({"b": 2.5, "a": 1})

    def test_value_sensitive(self):
        assert snapshot_key({"a": 1.0}) != snapshot_key({"a": 1.5})


class TestLessonSession:

    def test_parameters_merge_results(self, counted_module):
        module, _ = counted_module
        session = LessonSession(module)
        merged = session.parameters
        assert merged["x"] == 1.0
        assert merged["double"] == 2.0

    def test_calculation_is_memoised(self, counted_module):
        module, calls = counted_module
        session = LessonSession(module)
        session.calculations
        session.calculations
        session.parameters
        assert calls["calculate"] == 1

    def test_update_invalidates(self, counted_module):
        module, calls = counted_module
        session = LessonSession(module)
        assert session.calculations["double"] == 2.0
        session.update_parameter("x", 3.0)
        assert session.calculations["double"] == 6.0
        assert calls["calculate"] == 2

    def test_failed_update_keeps_cache(self, counted_module):
        module, calls = counted_module
        session = LessonSession(module)
        session.calculations
        update = session.update_parameter("x", 50.0)
        assert not update.is_valid
        session.calculations
        assert calls["calculate"] == 1

    def test_chart_data_memoised_and_invalidated(self, counted_module):
        module, calls = counted_module
        session = LessonSession(module, seed=1)
        first = session.chart_data["line"]
        session.chart_data
        assert calls["generate"] == 1
        session.update_parameters({"x": 2.0, "mode": "slow"})
        second = session.chart_data["line"]
        assert calls["generate"] == 2
        assert first["y"].iloc[0] == 3.0
        assert second["y"].iloc[0] == 5.0

    def test_edited_series_do_not_leak_into_cache(self, counted_module):
        module, calls = counted_module
        session = LessonSession(module, seed=1)
        frame = session.chart_data["line"]
        frame.loc[2, "y"] = -1.0
        frame["extra"] = 0
        again = session.chart_data["line"]
        assert again["y"].iloc[2] == 3.0
        assert "extra" not in again
        assert calls["generate"] == 1

    def test_reseed_changes_series_not_results(self, counted_module):
        module, calls = counted_module
        session = LessonSession(module, seed=1)
        session.chart_data
        session.reseed(10)
        assert session.chart_data["line"]["y"].iloc[0] == 12.0
        assert calls["calculate"] == 1

    def test_reset(self, counted_module):
        module, _ = counted_module
        session = LessonSession(module)
        session.update_parameter("x", 4.0)
        session.reset_parameters()
        assert session.calculations["double"] == 2.0

    def test_is_valid_tracks_domain_check(self, counted_module):
        module, _ = counted_module
        session = LessonSession(module)
        assert session.is_valid
        session.update_parameter("x", 6.0)
        assert not session.is_valid

    def test_initial_overrides(self, counted_module):
        module, _ = counted_module
        session = LessonSession(module, initial={"x": 4.5})
        assert session.calculations["double"] == 9.0

    def test_invalid_initial_overrides(self, counted_module):
        module, _ = counted_module
        with pytest.raises(ValueError):
            LessonSession(module, initial={"x": -1})

    def test_calculation_errors_propagate(self, module_factory):
        def broken(params):
            raise ZeroDivisionError("boom")

        session = LessonSession(module_factory(calculate=broken))
        with pytest.raises(ZeroDivisionError):
            session.calculations


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
