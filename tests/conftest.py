"""
conftest.py
-----------
Pytest configuration: puts ``src/`` on the import path and provides small
lesson modules and registries shared across the suite.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import pandas as pd
import pytest

from finlessons.core.module import (
    ChartContent, InteractiveContent, LessonModule, NarrativeContent, PhaseDescriptor,
)
from finlessons.core.parameters import Parameter, ParameterKind
from finlessons.core.registry import LessonRegistry


def _calculate(params):
    return {"double": params["x"] * 2}


def _generate(params, result, seed):
    return {"line": pd.DataFrame({"t": range(5), "y": [result["double"]] * 5})}


def make_module(module_id="a", title="Alpha Lesson", **overrides):
    """Minimal valid lesson module; keyword overrides replace any field."""
    fields = dict(
        id=module_id,
        title=title,
        description="A small lesson used in tests",
        parameter_schema=(
            Parameter(key="x", label="X", default=1.0, min=0.0, max=10.0, step=0.5),
            Parameter(key="mode", label="Mode", default="fast",
                      kind=ParameterKind.SELECT, options=("fast", "slow")),
        ),
        calculate=_calculate,
        generate=_generate,
        phases=(
            PhaseDescriptor(id="intro", title="Intro", estimated_time=5,
                            content=NarrativeContent(body="Hello")),
            PhaseDescriptor(id="chart", title="Chart", estimated_time=5,
                            content=ChartContent(series=("line",))),
            PhaseDescriptor(id="play", title="Play", estimated_time=5,
                            content=InteractiveContent(parameters=("x",), series=("line",))),
        ),
        difficulty="beginner",
        duration="10-20 minutes",
        estimated_time=15,
        topics=("Testing",),
        categories=("unit",),
        tags=("sample",),
    )
    fields.update(overrides)
    return LessonModule(**fields)


@pytest.fixture
def module_factory():
    return make_module


@pytest.fixture
def registry():
    """Fresh, empty registry."""
    return LessonRegistry()
