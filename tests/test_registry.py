"""
Unit Tests -- Lesson Module Registry
====================================
Tests registration and its state machine, structural validation, lookups,
sorting, filtering, search, validation reports and statistics.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import pytest

from finlessons.core.module import (
    ChartContent, InteractiveContent, NarrativeContent, PhaseDescriptor, validate_module,
)
from finlessons.core.registry import LessonNotFoundError, LessonRegistry, LessonValidationError


@pytest.fixture
def populated(registry, module_factory):
    registry.register(module_factory("b", "beta risk", difficulty="advanced",
                                     topics=("Risk",), categories=("risk-management",),
                                     tags=("var",), estimated_time=12))
    registry.register(module_factory("a", "Alpha Options", difficulty="intermediate",
                                     topics=("Options",), categories=("derivatives",),
                                     tags=("black-scholes",)))
    registry.register(module_factory("c", "Charlie Basics", difficulty="beginner",
                                     topics=("Risk", "Basics"),
                                     categories=("risk-management", "intro"),
                                     description="Gentle introduction"))
    return registry


class _Loose:
    """Plain object standing in for a malformed module."""

    def __init__(self, **fields):
        self.__dict__.update(fields)


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------
class TestRegistration:

    def test_register_and_get(self, registry, module_factory):
        module = module_factory()
        assert registry.register(module) is True
        assert registry.get("a") is module
        assert registry.has("a")
        assert "a" in registry
        assert len(registry) == 1

    def test_duplicate_without_overwrite(self, registry, module_factory):
        original = module_factory("a", "Original")
        assert registry.register(original) is True
        assert registry.register(module_factory("a", "Second")) is False
        assert len(registry.get_all()) == 1
        assert registry.get("a") is original
        assert registry.get_metadata("a").title == "Original"

    def test_duplicate_id_checked_before_validation(self, registry, module_factory):
        original = module_factory()
        registry.register(original)
        broken = module_factory(phases=())
        assert registry.register(broken) is False
        assert registry.get("a") is original

    def test_invalid_overwrite_still_raises(self, registry, module_factory):
        registry.register(module_factory())
        with pytest.raises(LessonValidationError):
            registry.register(module_factory(phases=()), overwrite=True)

    def test_overwrite_replaces(self, registry, module_factory):
        registry.register(module_factory("a", "Original"))
        replacement = module_factory("a", "Replacement")
        assert registry.register(replacement, overwrite=True) is True
        assert registry.get("a") is replacement
        assert registry.get_metadata("a").title == "Replacement"
        assert len(registry) == 1

    def test_unregister(self, registry, module_factory):
        registry.register(module_factory())
        assert registry.unregister("a") is True
        assert registry.unregister("a") is False
        assert registry.get("a") is None
        assert registry.register(module_factory()) is True

    def test_invalid_module_raises_with_every_error(self, registry):
        broken = _Loose(id="", title=None, description="x", calculate=42,
                        generate=lambda *a: {}, parameter_schema=(), phases=())
        with pytest.raises(LessonValidationError) as info:
            registry.register(broken)
        errors = info.value.errors
        assert "Missing required field: id" in errors
        assert "Missing required field: title" in errors
        assert "Lesson calculate must be callable" in errors
        assert "Lesson has no phases defined" in errors
        assert len(registry) == 0

    def test_validate_false_skips_checks(self, registry):
        loose = _Loose(id="loose", title="Loose", description="", phases=(),
                       parameter_schema=(), calculate=None, generate=None)
        assert registry.register(loose, validate=False) is True
        assert registry.get("loose") is loose


# ---------------------------------------------------------------------------
# Structural validation
# ---------------------------------------------------------------------------
class TestModuleValidation:

    def test_valid_module(self, module_factory):
        report = validate_module(module_factory())
        assert report.is_valid
        assert report.warnings == []

    def test_duplicate_phase_ids(self, module_factory):
        phases = (
            PhaseDescriptor(id="p", title="One", content=NarrativeContent(body="x")),
            PhaseDescriptor(id="p", title="Two", content=NarrativeContent(body="y")),
        )
        report = validate_module(module_factory(phases=phases, estimated_time=0))
        assert "Phase 1 has duplicate id 'p'" in report.errors

    def test_phase_without_content(self, module_factory):
        phases = (PhaseDescriptor(id="p", title="One", content="not content"),)
        report = validate_module(module_factory(phases=phases, estimated_time=0))
        assert "Phase 0 missing or invalid content" in report.errors

    def test_default_keys_must_exist(self, module_factory):
        report = validate_module(module_factory(default_parameters={"x": 1.0, "y": 2.0}))
        assert "Default parameter 'y' not found in parameter definitions" in report.errors

    def test_defaults_checked_against_empty_schema(self, module_factory):
        module = module_factory(parameter_schema=(), default_parameters={"ghost": 1})
        report = validate_module(module)
        assert "Default parameter 'ghost' not found in parameter definitions" in report.errors

    def test_empty_schema_default_rejected_on_register(self, registry, module_factory):
        with pytest.raises(LessonValidationError):
            registry.register(module_factory(parameter_schema=(),
                                              default_parameters={"ghost": 1}))
        assert len(registry) == 0

    def test_schema_must_be_sequence(self):
        loose = _Loose(id="l", title="L", description="d", calculate=len, generate=len,
                       parameter_schema="x", phases=[
                           PhaseDescriptor(id="p", title="P",
                                           content=ChartContent(series=("s",)))])
        report = validate_module(loose)
        assert "Lesson parameter_schema must be a sequence" in report.errors

    def test_warnings(self, module_factory):
        phases = (PhaseDescriptor(id="p", title="P", estimated_time=40,
                                  content=InteractiveContent(parameters=("nope",),
                                                             series=("line",))),)
        report = validate_module(module_factory(phases=phases, difficulty="",
                                                estimated_time=25))
        assert report.is_valid
        assert "Lesson has no difficulty level" in report.warnings
        assert "Estimated time does not match duration range" in report.warnings
        assert "Phase 0 references unknown parameter 'nope'" in report.warnings
        assert any(w.startswith("Phase times (40min)") for w in report.warnings)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------
class TestLookups:

    @pytest.mark.parametrize("bad_id", [None, "", 42, "missing"])
    def test_get_returns_none(self, populated, bad_id):
        assert populated.get(bad_id) is None

    def test_get_throws_on_request(self, populated):
        with pytest.raises(LessonNotFoundError):
            populated.get("missing", throw_on_not_found=True)
        with pytest.raises(LessonNotFoundError):
            populated.get("", throw_on_not_found=True)

    def test_ids_and_metadata(self, populated):
        assert populated.get_ids() == ["b", "a", "c"]
        meta = populated.get_metadata("c")
        assert meta.phase_count == 3
        assert meta.parameter_count == 2
        assert meta.categories == ("risk-management", "intro")
        assert len(populated.get_metadata()) == 3
        assert populated.get_metadata("zzz") is None


# ---------------------------------------------------------------------------
# Sorting & filtering
# ---------------------------------------------------------------------------
class TestGetAll:

    def test_default_sort_is_title_case_insensitive(self, populated):
        assert [m.id for m in populated.get_all()] == ["a", "b", "c"]

    def test_descending(self, populated):
        assert [m.id for m in populated.get_all(sort_order="desc")] == ["c", "b", "a"]

    def test_difficulty_ordinal(self, populated):
        ids = [m.id for m in populated.get_all(sort_by="difficulty")]
        assert ids == ["c", "a", "b"]

    def test_unknown_difficulty_sorts_first(self, populated, module_factory):
        populated.register(module_factory("z", "Zulu", difficulty="expert"))
        assert populated.get_all(sort_by="difficulty")[0].id == "z"

    def test_numeric_sort(self, populated):
        ids = [m.id for m in populated.get_all(sort_by="estimated_time")]
        assert ids[0] == "b"

    def test_equality_filter(self, populated):
        assert [m.id for m in populated.get_all(filter_by={"difficulty": "beginner"})] == ["c"]

    def test_containment_filter(self, populated):
        ids = [m.id for m in populated.get_all(filter_by={"categories": "risk-management"})]
        assert ids == ["b", "c"]

    def test_any_of_filter(self, populated):
        ids = [m.id for m in populated.get_all(filter_by={"topics": ["Options", "Basics"]})]
        assert ids == ["a", "c"]

    def test_combined_filters(self, populated):
        found = populated.get_all(filter_by={"topics": "Risk", "difficulty": "advanced"})
        assert [m.id for m in found] == ["b"]

    def test_include_metadata(self, populated):
        pairs = populated.get_all(include_metadata=True,
                                  filter_by={"categories": "risk-management"})
        assert [module.id for module, _ in pairs] == ["b", "c"]
        for module, meta in pairs:
            assert meta is populated.get_metadata(module.id)
            assert meta.title == module.title

    def test_shortcuts(self, populated):
        assert [m.id for m in populated.get_by_category("derivatives")] == ["a"]
        assert [m.id for m in populated.get_by_difficulty("beginner")] == ["c"]
        assert [m.id for m in populated.get_by_topic("Risk")] == ["b", "c"]


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------
class TestSearch:

    def test_case_insensitive_title(self, populated):
        assert [m.id for m in populated.search("ALPHA")] == ["a"]

    def test_matches_lists(self, populated):
        assert [m.id for m in populated.search("black")] == ["a"]
        assert [m.id for m in populated.search("risk")] == ["b", "c"]

    def test_description(self, populated):
        assert [m.id for m in populated.search("gentle")] == ["c"]

    def test_restricted_fields(self, populated):
        assert populated.search("gentle", fields=("title",)) == []

    @pytest.mark.parametrize("query", ["", None, 5])
    def test_empty_or_invalid_query(self, populated, query):
        assert populated.search(query) == []


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------
class TestReports:

    def test_validate_all(self, populated):
        populated.register(_Loose(id="bad", title="Bad", description="", phases=()),
                           validate=False)
        report = populated.validate_all()
        assert sorted(report.valid) == ["a", "b", "c"]
        assert [issue.id for issue in report.invalid] == ["bad"]
        assert report.invalid[0].messages

    def test_stats(self, populated):
        stats = populated.stats()
        assert stats.total_modules == 3
        assert stats.by_difficulty == {"advanced": 1, "intermediate": 1, "beginner": 1}
        assert stats.by_category["risk-management"] == 2
        assert stats.total_phases == 9
        assert stats.total_parameters == 6
        assert stats.averages == {"phases": 3.0, "parameters": 2.0}

    def test_empty_stats(self, registry):
        stats = registry.stats()
        assert stats.total_modules == 0
        assert stats.average_phases == 0.0

    def test_isolated_instances(self, module_factory):
        first, second = LessonRegistry(), LessonRegistry()
        first.register(module_factory())
        assert len(second) == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
