"""
Lesson Core
===========
Parameter schema and store, lesson module contract, session binding and the
module registry.
"""

from .parameters import (
    Parameter, ParameterError, ParameterKind, ParameterValidation, ValidationOutcome,
    default_parameters, format_parameter_value, get_parameter, group_by_category,
    parameters_by_category, parameters_by_importance, validate_parameter,
    validate_parameters,
)
from .store import ParameterStore, ParameterUpdate
from .module import (
    ChartContent, ContentKind, InteractiveContent, LessonModule, ModuleValidation,
    NarrativeContent, PhaseDescriptor, validate_module,
)
from .session import LessonSession, snapshot_key
from .registry import (
    LessonMetadata, LessonNotFoundError, LessonRegistry, LessonValidationError,
    RegistryStats, ValidationReport,
)

__all__ = [
    "Parameter", "ParameterError", "ParameterKind", "ParameterValidation",
    "ValidationOutcome", "default_parameters", "format_parameter_value",
    "get_parameter", "group_by_category", "parameters_by_category",
    "parameters_by_importance", "validate_parameter", "validate_parameters",
    "ParameterStore", "ParameterUpdate",
    "ChartContent", "ContentKind", "InteractiveContent", "LessonModule",
    "ModuleValidation", "NarrativeContent", "PhaseDescriptor", "validate_module",
    "LessonSession", "snapshot_key",
    "LessonMetadata", "LessonNotFoundError", "LessonRegistry",
    "LessonValidationError", "RegistryStats", "ValidationReport",
]
