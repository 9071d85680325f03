"""
Lesson Session
==============

Binds one lesson module to one parameter store and exposes what the
presentation layer consumes:

    parameters        ParameterSet merged with the CalculationResult
    calculations      CalculationResult
    chart_data        {series name: DataFrame}
    is_valid          lesson-specific domain check
    update_parameter / update_parameters / reset_parameters

Results are computed lazily on first read and memoised under a structural key
of the full parameter snapshot (plus the seed for generated series). Every
successful store mutation clears the memo synchronously.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Hashable, Mapping, Optional, Tuple

import pandas as pd

from ..config import CONFIG
from ..utils import get_logger
from .module import LessonModule
from .store import ParameterStore, ParameterUpdate

logger = get_logger(__name__)


def snapshot_key(parameters: Mapping[str, Any]) -> Tuple[Tuple[str, Hashable], ...]:
    """
    Structural, order-independent key for a parameter snapshot.

    Two snapshots with equal keys and equal values (float equality included)
    map to the same key regardless of object identity.
    """
    return tuple(sorted((str(k), v) for k, v in parameters.items()))


class LessonSession:
    """
    Reactive state for one learner working through one lesson.

    Usage:
        >>> session = LessonSession(kelly_module)
        >>> session.update_parameter("probability_of_winning", 0.55)
        >>> session.calculations["kelly_percentage"]
    """

    def __init__(self, module: LessonModule, seed: Optional[int] = None,
                 initial: Optional[Mapping[str, Any]] = None):
        self.module = module
        self.seed = CONFIG.default_seed if seed is None else int(seed)
        self.store = ParameterStore(module.parameter_schema, module.default_parameters)
        self._results: Dict[tuple, Mapping[str, Any]] = {}
        self._series: Dict[tuple, Dict[str, pd.DataFrame]] = {}
        self.store.subscribe(self._invalidate)

        if initial:
            update = self.store.set_many(initial)
            if not update.is_valid:
                raise ValueError(
                    f"Invalid initial parameters for '{module.id}': "
                    + "; ".join(e.message for e in update.errors))

    # ------------------------------------------------------------------ reads
    @property
    def raw_parameters(self) -> Mapping[str, Any]:
        return self.store.get()

    @property
    def calculations(self) -> Mapping[str, Any]:
        snapshot = self.store.get()
        key = snapshot_key(snapshot)
        if key not in self._results:
            self._results[key] = MappingProxyType(dict(self._run_calculate(snapshot)))
        return self._results[key]

    @property
    def parameters(self) -> Mapping[str, Any]:
        merged = dict(self.store.get())
        merged.update(self.calculations)
        return MappingProxyType(merged)

    @property
    def chart_data(self) -> Dict[str, pd.DataFrame]:
        """Memoised series; every read hands out fresh copies of the cached frames."""
        snapshot = self.store.get()
        key = (snapshot_key(snapshot), self.seed)
        if key not in self._series:
            if len(self._series) >= CONFIG.cache_size:
                self._series.pop(next(iter(self._series)))
            self._series[key] = self._run_generate(snapshot, self.calculations)
        return {name: frame.copy() for name, frame in self._series[key].items()}

    @property
    def is_valid(self) -> bool:
        return bool(self.module.domain_check(self.store.get(), self.calculations))

    # -------------------------------------------------------------- mutations
    def update_parameter(self, key: str, value: Any, clamp: bool = False) -> ParameterUpdate:
        return self.store.set(key, value, clamp=clamp)

    def update_parameters(self, partial: Mapping[str, Any], clamp: bool = False) -> ParameterUpdate:
        return self.store.set_many(partial, clamp=clamp)

    def reset_parameters(self) -> ParameterUpdate:
        return self.store.reset()

    def reseed(self, seed: int) -> None:
        """Switch the generator seed; calculations are unaffected."""
        self.seed = int(seed)

    # -------------------------------------------------------------- internals
    def _invalidate(self, snapshot: Mapping[str, Any]) -> None:
        self._results.clear()
        self._series.clear()

    def _run_calculate(self, snapshot: Mapping[str, Any]) -> Mapping[str, Any]:
        try:
            return self.module.calculate(snapshot)
        except Exception:
            logger.error("Calculation failed for lesson '%s' with %s",
                         self.module.id, dict(snapshot))
            raise

    def _run_generate(self, snapshot: Mapping[str, Any],
                      result: Mapping[str, Any]) -> Dict[str, pd.DataFrame]:
        try:
            return dict(self.module.generate(snapshot, result, self.seed))
        except Exception:
            logger.error("Series generation failed for lesson '%s' (seed=%d) with %s",
                         self.module.id, self.seed, dict(snapshot))
            raise
