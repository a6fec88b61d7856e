"""Synthetic identifier generation."""

from __future__ import annotations

import itertools
import uuid
from typing import Callable

IdFactory = Callable[[str], str]


def default_id_factory(prefix: str) -> str:
    """Return ``prefix`` followed by a random short suffix."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def sequential_id_factory(start: int = 1) -> IdFactory:
    """Build a deterministic factory yielding ``prefix-1``, ``prefix-2``, ..."""
    counter = itertools.count(start)

    def _next(prefix: str) -> str:
        return f"{prefix}-{next(counter)}"

    return _next
