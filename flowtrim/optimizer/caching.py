"""Selection of cacheable steps and their cache parameters."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, List, Optional

from .. import constants as c
from ..contracts import CachedWorkflow, CachePoint, Workflow, WorkflowStep
from .rules import CACHEABLE_TYPES, is_deterministic_operation, operation_pattern

logger = logging.getLogger(__name__)


def is_cacheable(step: WorkflowStep) -> bool:
    """Cacheable types running an operation with reproducible results."""
    return step.type in CACHEABLE_TYPES and is_deterministic_operation(step.description)


def generate_cache_key(step: WorkflowStep) -> str:
    return f"{step.type}:{operation_pattern(step.description)}:{'|'.join(sorted(step.inputs))}"


def analyze_step_frequency(workflow: Workflow) -> Dict[str, int]:
    """Map each step id to the number of steps sharing its cache key."""
    keys = {step.id: generate_cache_key(step) for step in workflow.steps}
    occurrences = Counter(keys.values())
    return {step_id: occurrences[key] for step_id, key in keys.items()}


def estimate_hit_rate(step: WorkflowStep, frequency: Dict[str, int]) -> float:
    repeats = frequency.get(step.id, 1)
    rate = c.CACHE_BASE_HIT_RATE
    rate += min(c.CACHE_MAX_FREQUENCY_BONUS, (repeats - 1) * c.CACHE_FREQUENCY_BONUS)
    if step.type == "data_retrieval":
        rate += c.CACHE_RETRIEVAL_BONUS
    if len(step.inputs) <= c.CACHE_SIMPLE_INPUT_LIMIT:
        rate += c.CACHE_SIMPLE_INPUT_BONUS
    return min(c.CACHE_MAX_HIT_RATE, rate)


def calculate_ttl(step: WorkflowStep) -> Optional[int]:
    """Time-to-live in seconds, or ``None`` for types without one."""
    if step.type == "data_retrieval":
        if "config" in step.description:
            return c.CACHE_TTL_CONFIG_SECONDS
        return c.CACHE_TTL_DATA_SECONDS
    if step.type == "vibe":
        return c.CACHE_TTL_VIBE_SECONDS
    if step.type == "analysis":
        return c.CACHE_TTL_ANALYSIS_SECONDS
    return None


def identify_cache_points(workflow: Workflow) -> List[CachePoint]:
    frequency = analyze_step_frequency(workflow)
    return [
        CachePoint(
            step_id=step.id,
            cache_key=generate_cache_key(step),
            ttl=calculate_ttl(step),
            estimated_hit_rate=estimate_hit_rate(step, frequency),
        )
        for step in workflow.steps
        if is_cacheable(step)
    ]


def calculate_overall_hit_rate(cache_points: List[CachePoint]) -> float:
    if not cache_points:
        return 0
    return sum(point.estimated_hit_rate for point in cache_points) / len(cache_points)


def implement_caching_layer(workflow: Workflow) -> CachedWorkflow:
    """Annotate ``workflow`` with cache points and their mean hit rate."""
    cache_points = identify_cache_points(workflow)
    hit_rate = calculate_overall_hit_rate(cache_points)
    logger.debug(
        f"Workflow {workflow.id}: {len(cache_points)} cache points, "
        f"mean hit rate {hit_rate:.2f}"
    )
    return CachedWorkflow(
        id=workflow.id,
        steps=[step.model_copy(deep=True) for step in workflow.steps],
        data_flow=[dep.model_copy() for dep in workflow.data_flow],
        estimated_complexity=workflow.estimated_complexity,
        cache_points=cache_points,
        estimated_hit_rate=hit_rate,
    )
