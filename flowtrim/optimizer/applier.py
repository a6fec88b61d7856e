"""Application of consolidated optimizations to a cloned workflow."""

from __future__ import annotations

import logging
import math
from typing import Callable, Dict, List, Optional

from .. import constants as c
from ..config import ApplicationConfig
from ..contracts import (
    EfficiencySavings,
    Optimization,
    OptimizedWorkflow,
    Workflow,
    WorkflowStep,
)
from ..errors import PartialApplicationError

logger = logging.getLogger(__name__)

StepMutator = Callable[[List[WorkflowStep], Optimization], None]


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _reduced_cost(cost: float, factor: float) -> float:
    # ceil never raises a fractional cost above its original value
    return max(0, min(cost, math.ceil(cost * factor)))


def apply_batching_optimization(steps: List[WorkflowStep], optimization: Optimization) -> None:
    """Fold the affected steps into the first one and drop the rest."""
    affected_ids = set(optimization.steps_affected)
    affected = [step for step in steps if step.id in affected_ids]
    if len(affected) <= 1:
        return

    first = affected[0]
    first.quota_cost = _reduced_cost(
        sum(step.quota_cost for step in affected), c.BATCHED_COST_FACTOR
    )
    first.description = f"Batched: {first.description}"

    removed = {step.id for step in affected[1:]}
    steps[:] = [step for step in steps if step.id not in removed]


def apply_caching_optimization(steps: List[WorkflowStep], optimization: Optimization) -> None:
    affected_ids = set(optimization.steps_affected)
    for step in steps:
        if step.id in affected_ids:
            step.quota_cost = _reduced_cost(step.quota_cost, c.CACHED_COST_FACTOR)
            step.description = f"Cached: {step.description}"


def apply_vibe_to_spec_optimization(
    steps: List[WorkflowStep], optimization: Optimization
) -> None:
    """Convert affected vibe steps to specs; other step types are left alone."""
    affected_ids = set(optimization.steps_affected)
    for step in steps:
        if step.id in affected_ids and step.type == "vibe":
            step.type = "spec"
            step.quota_cost = _reduced_cost(step.quota_cost, c.SPEC_CONVERSION_COST_FACTOR)
            step.description = f"Spec-based: {step.description}"


def apply_decomposition_optimization(
    steps: List[WorkflowStep], optimization: Optimization
) -> None:
    """Recorded only; structural splitting is done by ``break_into_specs``."""


MUTATORS: Dict[str, StepMutator] = {
    "batching": apply_batching_optimization,
    "caching": apply_caching_optimization,
    "vibe_to_spec": apply_vibe_to_spec_optimization,
    "decomposition": apply_decomposition_optimization,
}


def _check_missing_steps(
    steps: List[WorkflowStep], optimization: Optimization, policy: str
) -> None:
    present = {step.id for step in steps}
    missing = [step_id for step_id in optimization.steps_affected if step_id not in present]
    if not missing:
        return
    if policy == "skip":
        raise PartialApplicationError(optimization.type, missing)
    if policy == "warn":
        logger.warning(
            f"Applying {optimization.type} optimization to surviving steps only; "
            f"missing: {', '.join(missing)}"
        )


def _type_cost(steps: List[WorkflowStep], step_type: str) -> float:
    return sum(step.quota_cost for step in steps if step.type == step_type)


def _reduction_percentage(original: float, optimized: float) -> int:
    if original <= 0:
        return 0
    return _round_half_up((original - optimized) / original * 100)


def calculate_efficiency_gains(
    original_steps: List[WorkflowStep], optimized_steps: List[WorkflowStep]
) -> EfficiencySavings:
    original_cost = sum(step.quota_cost for step in original_steps)
    optimized_cost = sum(step.quota_cost for step in optimized_steps)
    return EfficiencySavings(
        vibe_reduction=_reduction_percentage(
            _type_cost(original_steps, "vibe"), _type_cost(optimized_steps, "vibe")
        ),
        spec_reduction=_reduction_percentage(
            _type_cost(original_steps, "spec"), _type_cost(optimized_steps, "spec")
        ),
        cost_savings=original_cost - optimized_cost,
        total_savings_percentage=_reduction_percentage(original_cost, optimized_cost),
    )


def apply_optimizations(
    workflow: Workflow,
    optimizations: List[Optimization],
    config: Optional[ApplicationConfig] = None,
) -> OptimizedWorkflow:
    """Apply ``optimizations`` in order to a deep copy of the workflow steps.

    A failing optimization is logged and skipped; the rest still apply. The
    input workflow is never modified and is referenced as ``original_workflow``.
    """
    policy = (config or ApplicationConfig()).missing_steps_policy
    steps = [step.model_copy(deep=True) for step in workflow.steps]
    applied: List[Optimization] = []

    for optimization in optimizations:
        try:
            mutator = MUTATORS[optimization.type]
            if optimization.type != "decomposition":
                _check_missing_steps(steps, optimization, policy)
            mutator(steps, optimization)
        except Exception as e:
            logger.warning(f"Failed to apply {optimization.type} optimization: {e}")
            continue
        applied.append(optimization)

    gains = calculate_efficiency_gains(workflow.steps, steps)
    logger.info(
        f"Workflow {workflow.id}: applied {len(applied)}/{len(optimizations)} "
        f"optimizations, {gains.total_savings_percentage}% total savings"
    )
    return OptimizedWorkflow(
        id=f"{workflow.id}-optimized",
        steps=steps,
        data_flow=[dep.model_copy() for dep in workflow.data_flow],
        estimated_complexity=max(1, workflow.estimated_complexity - 1),
        optimizations=applied,
        original_workflow=workflow,
        efficiency_gains=gains,
    )
