"""
Parameter Store
===============

Per-session holder of one lesson's current parameter values.

Every mutation is validated first and applied atomically; a failed update
leaves the store untouched and reports what went wrong through a
``ParameterUpdate`` rather than raising. Subscribers are notified
synchronously after each successful mutation so that memoised results can be
dropped before the next read.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, List, Mapping, Sequence, Tuple

from ..utils import get_logger
from .parameters import Parameter, ParameterError, validate_parameters

logger = get_logger(__name__)

Listener = Callable[[Mapping[str, Any]], None]


@dataclass(frozen=True)
class ParameterUpdate:
    """Structured outcome of a store mutation."""
    is_valid: bool
    parameters: Mapping[str, Any]
    errors: Tuple[ParameterError, ...] = field(default_factory=tuple)

    def error_for(self, key: str):
        """First error reported for ``key`` (or None)."""
        return next((e for e in self.errors if e.key == key), None)


class ParameterStore:
    """
    Validated, atomically-updated parameter values for one lesson session.

    Usage:
        >>> store = ParameterStore(module.parameter_schema, module.default_parameters)
        >>> update = store.set("volatility", 0.3)
        >>> update.is_valid, store.get()["volatility"]
        (True, 0.3)
    """

    def __init__(self, schema: Sequence[Parameter], defaults: Mapping[str, Any]):
        self._schema = tuple(schema)
        validated, errors = validate_parameters(defaults, self._schema)
        if errors:
            raise ValueError(
                "Invalid default parameters: " + "; ".join(e.message for e in errors))
        self._defaults = MappingProxyType(dict(validated))
        self._values = dict(validated)
        self._snapshot = MappingProxyType(dict(self._values))
        self._listeners: List[Listener] = []
        self.version = 0

    @property
    def schema(self) -> Tuple[Parameter, ...]:
        return self._schema

    def get(self) -> Mapping[str, Any]:
        """Current read-only snapshot."""
        return self._snapshot

    def subscribe(self, listener: Listener) -> None:
        """Call ``listener(snapshot)`` after every successful mutation."""
        self._listeners.append(listener)

    def set(self, key: str, value: Any, clamp: bool = False) -> ParameterUpdate:
        return self.set_many({key: value}, clamp=clamp)

    def set_many(self, partial: Mapping[str, Any], clamp: bool = False) -> ParameterUpdate:
        """Validate every entry, then apply all of them or none."""
        validated, errors = validate_parameters(partial, self._schema, clamp=clamp)
        if errors:
            logger.debug("Rejected update %s: %s", dict(partial),
                         [e.message for e in errors])
            return ParameterUpdate(False, self._snapshot, tuple(errors))

        candidate = dict(self._values)
        candidate.update(validated)
        self._commit(candidate)
        return ParameterUpdate(True, self._snapshot)

    def reset(self) -> ParameterUpdate:
        """Restore the module defaults."""
        self._commit(dict(self._defaults))
        return ParameterUpdate(True, self._snapshot)

    def _commit(self, values: dict) -> None:
        self._values = values
        self._snapshot = MappingProxyType(dict(values))
        self.version += 1
        for listener in self._listeners:
            listener(self._snapshot)
