"""Ordered classification tables used across the optimizer.

Each table is a list of ``(predicate, label)`` pairs evaluated top to bottom;
the first match wins unless the caller counts every match.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

Predicate = Callable[[str], bool]
Rule = Tuple[Predicate, str]


def contains_any(*keywords: str) -> Predicate:
    """Predicate matching text that contains any of ``keywords``."""

    def _match(text: str) -> bool:
        return any(keyword in text for keyword in keywords)

    return _match


def matches(pattern: str, flags: int = re.IGNORECASE) -> Predicate:
    compiled = re.compile(pattern, flags)

    def _match(text: str) -> bool:
        return compiled.search(text) is not None

    return _match


def first_label(rules: Sequence[Rule], text: str, default: Optional[str] = None):
    for predicate, label in rules:
        if predicate(text):
            return label
    return default


def all_labels(rules: Sequence[Rule], text: str) -> List[str]:
    return [label for predicate, label in rules if predicate(text)]


# Functional buckets separating natural spec boundaries. Matched against the
# lower-cased description.
BOUNDARY_CATEGORIES: List[Rule] = [
    (contains_any("validate", "check", "verify"), "validation"),
    (contains_any("process", "transform", "convert"), "processing"),
    (contains_any("analyze", "calculate", "compute"), "analysis"),
    (contains_any("fetch", "retrieve", "query"), "retrieval"),
    (contains_any("store", "save", "persist"), "storage"),
    (contains_any("format", "render", "display"), "formatting"),
]

# Naming table for decomposed specs; broader keyword sets than the boundaries.
PRIMARY_FUNCTIONS: List[Rule] = [
    (contains_any("validate", "check", "verify"), "Validation"),
    (contains_any("process", "transform", "convert"), "Processing"),
    (contains_any("analyze", "calculate", "compute"), "Analysis"),
    (contains_any("fetch", "retrieve", "query", "get"), "Data Retrieval"),
    (contains_any("store", "save", "persist", "write"), "Data Storage"),
    (contains_any("format", "render", "display", "output"), "Formatting"),
]

# Operations likely to return the same result for the same inputs.
DETERMINISTIC_OPERATIONS: List[Rule] = [
    (matches(r"query|fetch|retrieve|get"), "retrieval"),
    (matches(r"analyze|process|calculate"), "computation"),
    (matches(r"validate|check|verify"), "validation"),
]

# Applied in order to a lower-cased description; digits go first, so later
# rules only see what survives that substitution.
OPERATION_NORMALIZERS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"\d+"), "N"),
    (
        re.compile(
            r"[a-f0-9]{8}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{12}",
            re.IGNORECASE,
        ),
        "UUID",
    ),
    (re.compile(r"\b\w+@\w+\.\w+\b"), "EMAIL"),
    (re.compile(r"\b[a-z]+_\d+\b", re.IGNORECASE), "ITEM"),
]

# Input name shapes, case-sensitive substring checks.
INPUT_SHAPES: List[Rule] = [
    (contains_any("id", "Id"), "ID"),
    (contains_any("data", "Data"), "DATA"),
    (contains_any("config", "Config"), "CONFIG"),
]

CACHEABLE_TYPES = frozenset({"vibe", "data_retrieval", "analysis"})


def operation_pattern(description: str) -> str:
    """Generalize a description by masking identifiers."""
    pattern = description.lower()
    for regex, replacement in OPERATION_NORMALIZERS:
        pattern = regex.sub(replacement, pattern)
    return pattern.strip()


def input_pattern(inputs: Iterable[str]) -> str:
    return "-".join(sorted(first_label(INPUT_SHAPES, name, "PARAM") for name in inputs))


def functional_category(description: str) -> Optional[str]:
    """Boundary bucket of ``description`` or ``None`` when nothing matches."""
    return first_label(BOUNDARY_CATEGORIES, description.lower())


def is_deterministic_operation(description: str) -> bool:
    return first_label(DETERMINISTIC_OPERATIONS, description) is not None


def primary_function(descriptions: Iterable[str]) -> str:
    """Most frequent naming bucket across ``descriptions``.

    Ties go to the bucket encountered first; ``General`` when none match.
    """
    counts: dict[str, int] = {}
    for description in descriptions:
        for label in all_labels(PRIMARY_FUNCTIONS, description.lower()):
            counts[label] = counts.get(label, 0) + 1
    if not counts:
        return "General"
    return max(counts.items(), key=lambda item: item[1])[0]
