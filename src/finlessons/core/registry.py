"""
Lesson Module Registry
======================

Catalog that registers, validates, looks up, filters and summarises lesson
modules. The registry is an ordinary object: applications build one at
start-up (see ``finlessons.lessons.build_default_registry``) and pass it to
whoever needs it, and tests build isolated instances.

Per-id state machine:
    unregistered --register--> registered --unregister--> unregistered
    registered --register(overwrite=True)--> registered
"""
from __future__ import annotations

from collections.abc import Sequence as SequenceABC
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from ..config import CONFIG
from ..utils import get_logger
from .module import LessonModule, lesson_metadata_fields, validate_module

logger = get_logger(__name__)

DEFAULT_SEARCH_FIELDS = ("title", "description", "topics", "tags")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------
class LessonValidationError(Exception):
    """Raised by ``register`` when a module fails structural validation."""

    def __init__(self, module_id: Any, errors: Sequence[str]):
        self.module_id = module_id
        self.errors = list(errors)
        super().__init__(
            f"Lesson validation failed for '{module_id}': {', '.join(self.errors)}")


class LessonNotFoundError(LookupError):
    """Raised by ``get`` only when the caller asks for it."""

    def __init__(self, module_id: Any):
        self.module_id = module_id
        super().__init__(f"Lesson not found: '{module_id}'")


# ---------------------------------------------------------------------------
# Result containers
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class LessonMetadata:
    """Cached, lightweight view of a registered module for fast listing."""
    id: str
    title: str
    short_title: str
    description: str
    difficulty: Optional[str]
    duration: str
    estimated_time: int
    topics: tuple
    categories: tuple
    tags: tuple
    phase_count: int
    parameter_count: int
    version: str
    last_updated: str


@dataclass(frozen=True)
class ModuleIssues:
    id: str
    messages: List[str]


@dataclass
class ValidationReport:
    """Outcome of ``validate_all``."""
    valid: List[str] = field(default_factory=list)
    invalid: List[ModuleIssues] = field(default_factory=list)
    warnings: List[ModuleIssues] = field(default_factory=list)


@dataclass
class RegistryStats:
    """Aggregate counts over every registered module."""
    total_modules: int = 0
    by_difficulty: Dict[str, int] = field(default_factory=dict)
    by_category: Dict[str, int] = field(default_factory=dict)
    total_phases: int = 0
    total_parameters: int = 0
    average_phases: float = 0.0
    average_parameters: float = 0.0

    @property
    def averages(self) -> Dict[str, float]:
        return {"phases": self.average_phases, "parameters": self.average_parameters}


@dataclass(frozen=True)
class RegistryEntry:
    module: LessonModule
    metadata: LessonMetadata


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------
def _is_list_like(value: Any) -> bool:
    return isinstance(value, (SequenceABC, set, frozenset)) and not isinstance(value, (str, bytes))


class LessonRegistry:
    """
    In-memory catalog of lesson modules.

    Usage:
        >>> registry = LessonRegistry()
        >>> registry.register(kelly_module)
        True
        >>> registry.get("kelly-criterion").title
        'Kelly Criterion: Optimal Bet Sizing Strategy'
    """

    def __init__(self, difficulty_order: Optional[Mapping[str, int]] = None):
        self._entries: Dict[str, RegistryEntry] = {}
        self._difficulty_order = dict(difficulty_order or CONFIG.difficulty_order)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, module_id: object) -> bool:
        return module_id in self._entries

    # ------------------------------------------------------------ lifecycle
    def register(self, module: LessonModule, validate: bool = True,
                 overwrite: bool = False) -> bool:
        """
        Add ``module`` to the catalog.

        Returns:
            True when stored; False when the id is already registered and
            ``overwrite`` is not set (the existing entry is left untouched).

        Raises:
            LessonValidationError: structural validation failed (every
            violation is listed).
        """
        module_id = getattr(module, "id", None)

        if isinstance(module_id, str) and module_id in self._entries and not overwrite:
            logger.warning("Lesson '%s' already registered. Use overwrite=True to replace.",
                           module_id)
            return False

        if validate:
            report = validate_module(module)
            if not report.is_valid:
                logger.error("Failed to register lesson '%s': %s", module_id, report.errors)
                raise LessonValidationError(module_id, report.errors)
            if report.warnings:
                logger.warning("Lesson '%s' validation warnings: %s", module_id, report.warnings)

        replaced = module_id in self._entries
        metadata = LessonMetadata(**lesson_metadata_fields(module))
        self._entries[module_id] = RegistryEntry(module, metadata)
        logger.info("Lesson '%s' %s", module_id,
                    "replaced" if replaced else "registered successfully")
        return True

    def unregister(self, module_id: str) -> bool:
        existed = self._entries.pop(module_id, None) is not None
        if existed:
            logger.info("Lesson '%s' unregistered", module_id)
        return existed

    # -------------------------------------------------------------- lookups
    def get(self, module_id: Any, throw_on_not_found: bool = False) -> Optional[LessonModule]:
        """Module for ``module_id``; None for unknown or malformed ids."""
        if not module_id or not isinstance(module_id, str):
            if throw_on_not_found:
                raise LessonNotFoundError(module_id)
            return None

        entry = self._entries.get(module_id)
        if entry is None:
            if throw_on_not_found:
                raise LessonNotFoundError(module_id)
            return None
        return entry.module

    def has(self, module_id: str) -> bool:
        return module_id in self._entries

    def get_ids(self) -> List[str]:
        return list(self._entries)

    def get_metadata(self, module_id: Optional[str] = None
                     ) -> Union[LessonMetadata, List[LessonMetadata], None]:
        """Metadata for one id (None if unknown) or for every module."""
        if module_id is not None:
            entry = self._entries.get(module_id)
            return entry.metadata if entry else None
        return [entry.metadata for entry in self._entries.values()]

    def get_all(self, sort_by: str = "title", sort_order: str = "asc",
                filter_by: Optional[Mapping[str, Any]] = None,
                include_metadata: bool = False
                ) -> List[Union[LessonModule, Tuple[LessonModule, LessonMetadata]]]:
        """
        Registered modules, filtered then stably sorted.

        Filters compare by equality, or by containment when the module field
        is a sequence (any-of when the filter value is itself a list). With
        ``include_metadata`` each item is a ``(module, metadata)`` pair.
        """
        entries = list(self._entries.values())

        if filter_by:
            entries = [e for e in entries if self._matches(e.module, filter_by)]

        entries = sorted(entries, key=lambda e: self._sort_key(e.module, sort_by),
                         reverse=(sort_order == "desc"))
        if include_metadata:
            return [(e.module, e.metadata) for e in entries]
        return [e.module for e in entries]

    def get_by_category(self, category: str) -> List[LessonModule]:
        return self.get_all(filter_by={"categories": category})

    def get_by_difficulty(self, difficulty: str) -> List[LessonModule]:
        return self.get_all(filter_by={"difficulty": difficulty})

    def get_by_topic(self, topic: str) -> List[LessonModule]:
        return self.get_all(filter_by={"topics": topic})

    def search(self, query: Any, fields: Iterable[str] = DEFAULT_SEARCH_FIELDS
               ) -> List[LessonModule]:
        """Case-insensitive substring search; an empty query matches nothing."""
        if not query or not isinstance(query, str):
            return []

        term = query.lower()
        fields = tuple(fields)
        hits = []
        for module in self.get_all():
            for name in fields:
                value = getattr(module, name, None)
                if isinstance(value, str):
                    found = term in value.lower()
                elif _is_list_like(value):
                    found = any(isinstance(item, str) and term in item.lower()
                                for item in value)
                else:
                    found = False
                if found:
                    hits.append(module)
                    break
        return hits

    # ----------------------------------------------------------- reporting
    def validate_all(self) -> ValidationReport:
        report = ValidationReport()
        for module_id, entry in self._entries.items():
            outcome = validate_module(entry.module)
            if outcome.is_valid:
                report.valid.append(module_id)
                if outcome.warnings:
                    report.warnings.append(ModuleIssues(module_id, outcome.warnings))
            else:
                report.invalid.append(ModuleIssues(module_id, outcome.errors))
        return report

    def stats(self) -> RegistryStats:
        stats = RegistryStats()
        for entry in self._entries.values():
            meta = entry.metadata
            stats.total_modules += 1
            difficulty = meta.difficulty or "unknown"
            stats.by_difficulty[difficulty] = stats.by_difficulty.get(difficulty, 0) + 1
            for category in meta.categories:
                stats.by_category[category] = stats.by_category.get(category, 0) + 1
            stats.total_phases += meta.phase_count
            stats.total_parameters += meta.parameter_count

        if stats.total_modules:
            stats.average_phases = round(stats.total_phases / stats.total_modules, 1)
            stats.average_parameters = round(stats.total_parameters / stats.total_modules, 1)
        return stats

    # ------------------------------------------------------------ internals
    @staticmethod
    def _matches(module: LessonModule, filter_by: Mapping[str, Any]) -> bool:
        for name, wanted in filter_by.items():
            value = getattr(module, name, None)
            if _is_list_like(value):
                if _is_list_like(wanted):
                    if not any(w in value for w in wanted):
                        return False
                elif wanted not in value:
                    return False
            elif value != wanted:
                return False
        return True

    def _sort_key(self, module: LessonModule, sort_by: str):
        value = getattr(module, sort_by, None)
        if sort_by == "difficulty":
            return self._difficulty_order.get(value, 0)
        if isinstance(value, str):
            return (0, value.lower())
        if value is None:
            return (1, "")
        return (0, value)
