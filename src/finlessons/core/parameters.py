"""
Lesson Parameter Schema
=======================

Declarative description of one adjustable lesson input, plus the validation
helpers shared by every lesson.

A ``Parameter`` is declared once at module-definition time and never mutated.
Validation never raises: it returns a ``ValidationOutcome`` so that callers can
show per-field messages without aborting a session.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from numbers import Real
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple


class ParameterKind(Enum):
    """Input widget family a parameter is meant for."""
    SLIDER = "slider"
    INPUT = "input"
    SELECT = "select"


@dataclass(frozen=True)
class ParameterValidation:
    """
    Validation rules for a parameter.

    Attributes:
        required: Value must be present (not None / empty string)
        min: Inclusive lower bound for numeric values
        max: Inclusive upper bound for numeric values
        type: "number", "integer" or "string"
    """
    required: bool = True
    min: Optional[float] = None
    max: Optional[float] = None
    type: str = "number"

    def __post_init__(self):
        if self.type not in ("number", "integer", "string"):
            raise ValueError(f"Unknown validation type: {self.type!r}")
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(f"Validation min {self.min} exceeds max {self.max}")


@dataclass(frozen=True)
class ParameterError:
    """One violated rule: which key, which bound, and a readable message."""
    key: str
    bound: str
    message: str


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of validating a single value."""
    is_valid: bool
    value: Any = None
    error: Optional[ParameterError] = None


def _default_formatter(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class Parameter:
    """
    One adjustable lesson input.

    Invariants (checked on construction):
        min <= default <= max, 0 < step <= max - min
        select parameters: default is one of ``options``

    Example:
        >>> Parameter(key="volatility", label="Volatility", min=0.05, max=0.8,
        ...           step=0.01, default=0.2, unit="%")
    """
    key: str
    label: str
    default: Any
    kind: ParameterKind = ParameterKind.SLIDER
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    unit: str = ""
    formatter: Callable[[Any], str] = _default_formatter
    validation: Optional[ParameterValidation] = None
    category: str = "general"
    importance: str = "medium"
    description: str = ""
    options: Tuple[Any, ...] = ()

    def __post_init__(self):
        if not self.key:
            raise ValueError("Parameter key must be a non-empty string")

        if self.kind is ParameterKind.SELECT:
            if not self.options:
                raise ValueError(f"Select parameter '{self.key}' needs options")
            if self.default not in self.options:
                raise ValueError(
                    f"Default {self.default!r} of '{self.key}' is not one of {self.options}")
            if self.validation is None:
                object.__setattr__(self, "validation", ParameterValidation(type="string"))
            return

        if self.min is None or self.max is None:
            raise ValueError(f"Numeric parameter '{self.key}' needs min and max")
        if not (self.min <= self.default <= self.max):
            raise ValueError(
                f"Default {self.default} of '{self.key}' outside [{self.min}, {self.max}]")
        if self.step is not None:
            if self.step <= 0:
                raise ValueError(f"Step of '{self.key}' must be positive, got {self.step}")
            if self.step > self.max - self.min:
                raise ValueError(f"Step of '{self.key}' exceeds its range")
        if self.validation is None:
            object.__setattr__(
                self, "validation", ParameterValidation(min=self.min, max=self.max))

    def format(self, value: Any) -> str:
        """Render ``value`` with the parameter's formatter."""
        return self.formatter(value)

    def clamp(self, value: float) -> float:
        """Clamp a numeric value into the declared validation bounds."""
        lo = self.validation.min if self.validation.min is not None else self.min
        hi = self.validation.max if self.validation.max is not None else self.max
        if lo is not None:
            value = max(lo, value)
        if hi is not None:
            value = min(hi, value)
        return value

    def validate(self, value: Any, clamp: bool = False) -> ValidationOutcome:
        """
        Validate (and coerce) a candidate value.

        Numeric strings are parsed; integral floats become ints for
        ``integer`` parameters. With ``clamp=True`` out-of-range numbers are
        pulled back to the nearest bound instead of being rejected.
        """
        rules = self.validation

        if value is None or (isinstance(value, str) and value.strip() == ""):
            if rules.required:
                return self._fail("required", f"{self.label} is required")
            return ValidationOutcome(True, value)

        if self.kind is ParameterKind.SELECT or rules.type == "string":
            if self.options and value not in self.options:
                return self._fail(
                    "options", f"{self.label} must be one of {', '.join(map(str, self.options))}")
            return ValidationOutcome(True, value)

        number = _coerce_number(value)
        if number is None:
            return self._fail("type", f"{self.label} must be a number")

        if rules.type == "integer":
            if not float(number).is_integer():
                return self._fail("type", f"{self.label} must be a whole number")
            number = int(number)

        if clamp:
            number = self.clamp(number)
            if rules.type == "integer":
                number = int(number)
        elif rules.min is not None and number < rules.min:
            return self._fail("min", f"{self.label} must be at least {rules.min}")
        elif rules.max is not None and number > rules.max:
            return self._fail("max", f"{self.label} must be at most {rules.max}")

        return ValidationOutcome(True, number)

    def _fail(self, bound: str, message: str) -> ValidationOutcome:
        return ValidationOutcome(False, error=ParameterError(self.key, bound, message))


def _coerce_number(value: Any) -> Optional[float]:
    """Return a finite real number for ``value`` or None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, Real):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


# ---------------------------------------------------------------------------
# Schema-level helpers
# ---------------------------------------------------------------------------
def get_parameter(key: str, schema: Sequence[Parameter]) -> Optional[Parameter]:
    """Look up a parameter definition by key."""
    for param in schema:
        if param.key == key:
            return param
    return None


def validate_parameter(key: str, value: Any, schema: Sequence[Parameter],
                       clamp: bool = False) -> ValidationOutcome:
    """Validate one value against the schema; unknown keys are errors."""
    param = get_parameter(key, schema)
    if param is None:
        return ValidationOutcome(
            False, error=ParameterError(key, "unknown", f"Unknown parameter: {key}"))
    return param.validate(value, clamp=clamp)


def validate_parameters(values: Mapping[str, Any], schema: Sequence[Parameter],
                        clamp: bool = False) -> Tuple[Dict[str, Any], List[ParameterError]]:
    """
    Validate a batch of values.

    Returns:
        (validated values, errors). Every failing key contributes one error;
        nothing is short-circuited.
    """
    validated: Dict[str, Any] = {}
    errors: List[ParameterError] = []
    for key, value in values.items():
        outcome = validate_parameter(key, value, schema, clamp=clamp)
        if outcome.is_valid:
            validated[key] = outcome.value
        else:
            errors.append(outcome.error)
    return validated, errors


def default_parameters(schema: Iterable[Parameter]) -> Dict[str, Any]:
    """Default value of every parameter in the schema."""
    return {param.key: param.default for param in schema}


def parameters_by_category(category: str, schema: Iterable[Parameter]) -> List[Parameter]:
    return [p for p in schema if p.category == category]


def parameters_by_importance(importance: str, schema: Iterable[Parameter]) -> List[Parameter]:
    return [p for p in schema if p.importance == importance]


def group_by_category(schema: Iterable[Parameter]) -> Dict[str, List[Parameter]]:
    """Parameters grouped by category, preserving declaration order."""
    groups: Dict[str, List[Parameter]] = {}
    for param in schema:
        groups.setdefault(param.category, []).append(param)
    return groups


def format_parameter_value(key: str, value: Any, schema: Sequence[Parameter]) -> str:
    """Display string for a value; falls back to ``str(value)``."""
    param = get_parameter(key, schema)
    if param is None:
        return _default_formatter(value)
    return param.format(value)
