"""
Lesson Module Definition
========================

A lesson module bundles everything one interactive lesson needs:

    parameter_schema   -> what the learner can adjust
    calculate          -> ParameterSet -> CalculationResult (pure)
    generate           -> (ParameterSet, CalculationResult, seed) -> {name: DataFrame}
    phases             -> ordered phase descriptors with typed content
    metadata           -> title, difficulty, topics, categories, tags ...

Phase content is a closed set of variants known when the module is defined,
so the presentation layer dispatches on ``content.kind`` instead of probing
runtime types.
"""
from __future__ import annotations

import re
from collections.abc import Sequence as SequenceABC
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

import pandas as pd

from .parameters import Parameter, default_parameters

ParameterSet = Mapping[str, Any]
CalculationResult = Mapping[str, Any]
SeriesBundle = Dict[str, pd.DataFrame]

CalculateFn = Callable[[ParameterSet], Dict[str, Any]]
GenerateFn = Callable[[ParameterSet, CalculationResult, int], SeriesBundle]
DomainCheckFn = Callable[[ParameterSet, CalculationResult], bool]


# ---------------------------------------------------------------------------
# Phase content variants
# ---------------------------------------------------------------------------
class ContentKind(Enum):
    NARRATIVE = "narrative"
    CHART = "chart"
    INTERACTIVE = "interactive"


@dataclass(frozen=True)
class NarrativeContent:
    """Explanatory text only."""
    body: str
    kind: ContentKind = field(default=ContentKind.NARRATIVE, init=False)


@dataclass(frozen=True)
class ChartContent:
    """Text plus one or more generated series."""
    series: Tuple[str, ...]
    caption: str = ""
    kind: ContentKind = field(default=ContentKind.CHART, init=False)


@dataclass(frozen=True)
class InteractiveContent:
    """Series driven live by a subset of the lesson's parameters."""
    parameters: Tuple[str, ...]
    series: Tuple[str, ...]
    caption: str = ""
    kind: ContentKind = field(default=ContentKind.INTERACTIVE, init=False)


PhaseContent = (NarrativeContent, ChartContent, InteractiveContent)


@dataclass(frozen=True)
class PhaseDescriptor:
    """One step of a lesson."""
    id: str
    title: str
    content: Any
    description: str = ""
    estimated_time: int = 0         # minutes

    def referenced_series(self) -> Tuple[str, ...]:
        return getattr(self.content, "series", ())

    def referenced_parameters(self) -> Tuple[str, ...]:
        return getattr(self.content, "parameters", ())


# ---------------------------------------------------------------------------
# Lesson module
# ---------------------------------------------------------------------------
def _always_valid(parameters: ParameterSet, result: CalculationResult) -> bool:
    return True


@dataclass(frozen=True, eq=False)
class LessonModule:
    """
    Immutable bundle of schema, computation and metadata for one lesson.

    ``default_parameters`` falls back to the schema defaults and is exposed as
    a read-only mapping.
    """
    id: str
    title: str
    description: str
    parameter_schema: Tuple[Parameter, ...]
    calculate: CalculateFn
    generate: GenerateFn
    phases: Tuple[PhaseDescriptor, ...]
    short_title: str = ""
    difficulty: str = "intermediate"
    duration: str = ""
    estimated_time: int = 0
    topics: Tuple[str, ...] = ()
    categories: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()
    prerequisites: Tuple[str, ...] = ()
    learning_objectives: Tuple[str, ...] = ()
    default_parameters: Optional[Mapping[str, Any]] = None
    domain_check: DomainCheckFn = _always_valid
    version: str = "1.0.0"
    last_updated: str = ""

    def __post_init__(self):
        defaults = self.default_parameters
        if defaults is None:
            defaults = default_parameters(self.parameter_schema or ())
        object.__setattr__(self, "default_parameters", MappingProxyType(dict(defaults)))

    # Convenience lookups
    def phase(self, phase_id: str) -> Optional[PhaseDescriptor]:
        return next((p for p in self.phases if p.id == phase_id), None)

    def parameter(self, key: str) -> Optional[Parameter]:
        return next((p for p in self.parameter_schema if p.key == key), None)

    def with_defaults(self, **overrides: Any) -> Dict[str, Any]:
        """Defaults merged with ``overrides`` (not validated)."""
        params = dict(self.default_parameters)
        params.update(overrides)
        return params


# ---------------------------------------------------------------------------
# Structural validation
# ---------------------------------------------------------------------------
@dataclass
class ModuleValidation:
    """Outcome of validating one module; errors block registration."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _is_sequence(value: Any) -> bool:
    return isinstance(value, SequenceABC) and not isinstance(value, (str, bytes))


def validate_module(module: Any) -> ModuleValidation:
    """
    Check a module's structure. Every violation is reported; nothing stops at
    the first error. Works on any object exposing the module attributes.
    """
    report = ModuleValidation()
    errors, warnings = report.errors, report.warnings

    for name in ("id", "title", "description"):
        value = getattr(module, name, None)
        if not value or not isinstance(value, str):
            errors.append(f"Missing required field: {name}")

    for name in ("calculate", "generate"):
        fn = getattr(module, name, None)
        if fn is None:
            errors.append(f"Missing required field: {name}")
        elif not callable(fn):
            errors.append(f"Lesson {name} must be callable")

    schema = getattr(module, "parameter_schema", None)
    param_keys: List[str] = []
    schema_ok = False
    if schema is None:
        errors.append("Missing required field: parameter_schema")
    elif not _is_sequence(schema):
        errors.append("Lesson parameter_schema must be a sequence")
    else:
        schema_ok = True
        for index, param in enumerate(schema):
            if not isinstance(param, Parameter):
                errors.append(f"Parameter {index} is not a Parameter definition")
                continue
            if param.key in param_keys:
                errors.append(f"Duplicate parameter key: {param.key}")
            param_keys.append(param.key)

    phases = getattr(module, "phases", None)
    if phases is None:
        errors.append("Missing required field: phases")
    elif not _is_sequence(phases):
        errors.append("Lesson phases must be a sequence")
    elif len(phases) == 0:
        errors.append("Lesson has no phases defined")
    else:
        seen = set()
        for index, phase in enumerate(phases):
            phase_id = getattr(phase, "id", None)
            if not phase_id:
                errors.append(f"Phase {index} missing required id")
            elif phase_id in seen:
                errors.append(f"Phase {index} has duplicate id '{phase_id}'")
            else:
                seen.add(phase_id)
            if not getattr(phase, "title", None):
                errors.append(f"Phase {index} missing required title")
            if not isinstance(getattr(phase, "content", None), PhaseContent):
                errors.append(f"Phase {index} missing or invalid content")
            for key in getattr(getattr(phase, "content", None), "parameters", ()):
                if param_keys and key not in param_keys:
                    warnings.append(f"Phase {index} references unknown parameter '{key}'")

    defaults = getattr(module, "default_parameters", None)
    if defaults and schema_ok:
        for key in defaults:
            if key not in param_keys:
                errors.append(f"Default parameter '{key}' not found in parameter definitions")

    if not getattr(module, "difficulty", None):
        warnings.append("Lesson has no difficulty level")

    duration = getattr(module, "duration", None)
    estimated = getattr(module, "estimated_time", None)
    if duration and estimated:
        match = re.match(r"(\d+)-?(\d+)?", duration)
        if match:
            lo = int(match.group(1))
            hi = int(match.group(2)) if match.group(2) else lo
            if not lo <= estimated <= hi:
                warnings.append("Estimated time does not match duration range")

    if estimated and _is_sequence(phases) and phases:
        phase_total = sum(getattr(p, "estimated_time", 0) or 0 for p in phases)
        if phase_total and abs(phase_total - estimated) > 5:
            warnings.append(
                f"Phase times ({phase_total}min) don't match lesson estimated time ({estimated}min)")

    return report


def lesson_metadata_fields(module: Any) -> Dict[str, Any]:
    """Lightweight descriptive fields of a module (no callables, no schema)."""
    return {
        "id": getattr(module, "id", None),
        "title": getattr(module, "title", None),
        "short_title": getattr(module, "short_title", ""),
        "description": getattr(module, "description", ""),
        "difficulty": getattr(module, "difficulty", None),
        "duration": getattr(module, "duration", ""),
        "estimated_time": getattr(module, "estimated_time", 0),
        "topics": tuple(getattr(module, "topics", ()) or ()),
        "categories": tuple(getattr(module, "categories", ()) or ()),
        "tags": tuple(getattr(module, "tags", ()) or ()),
        "phase_count": len(getattr(module, "phases", ()) or ()),
        "parameter_count": len(getattr(module, "parameter_schema", ()) or ()),
        "version": getattr(module, "version", ""),
        "last_updated": getattr(module, "last_updated", ""),
    }
