"""Splitting oversized workflows into smaller named specs."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .. import constants as c
from ..config import DecompositionConfig
from ..contracts import SpecDefinition, Workflow, WorkflowStep
from .rules import functional_category, primary_function

logger = logging.getLogger(__name__)


def has_functional_boundary(first: WorkflowStep, second: WorkflowStep) -> bool:
    """Both steps fall in known but different functional buckets."""
    category1 = functional_category(first.description)
    category2 = functional_category(second.description)
    return category1 is not None and category2 is not None and category1 != category2


def has_minimal_data_overlap(first: WorkflowStep, second: WorkflowStep) -> bool:
    overlap = set(first.outputs) & set(second.inputs)
    return len(overlap) <= 1


def has_required_dependency(
    workflow: Workflow, first: WorkflowStep, second: WorkflowStep
) -> bool:
    return any(
        dep.required and dep.from_step == first.id and dep.to_step == second.id
        for dep in workflow.data_flow
    )


def is_natural_breaking_point(
    previous: WorkflowStep,
    current: WorkflowStep,
    workflow: Workflow,
    config: DecompositionConfig,
) -> bool:
    if previous.type != current.type:
        return True
    if previous.quota_cost >= config.cost_boundary or current.quota_cost >= config.cost_boundary:
        return True
    if has_functional_boundary(previous, current):
        return True
    return not has_required_dependency(
        workflow, previous, current
    ) and has_minimal_data_overlap(previous, current)


def filter_breaking_points(
    breaking_points: Sequence[int], total_steps: int, config: DecompositionConfig
) -> List[int]:
    """Drop points that would leave a spec smaller than the minimum size.

    With no natural points, workflows above the maximum size get artificial
    points every ``max_spec_size`` steps.
    """
    min_size = config.min_spec_size
    max_size = config.max_spec_size

    if not breaking_points and total_steps > max_size:
        breaking_points = [
            min(index, total_steps - min_size)
            for index in range(max_size, total_steps, max_size)
        ]

    filtered: List[int] = []
    last_point = 0
    for point in breaking_points:
        if point - last_point >= min_size:
            filtered.append(point)
            last_point = point

    if filtered and total_steps - last_point < min_size:
        filtered.pop()

    return filtered


def identify_breaking_points(workflow: Workflow, config: DecompositionConfig) -> List[int]:
    steps = workflow.steps
    points = [
        index
        for index in range(1, len(steps))
        if is_natural_breaking_point(steps[index - 1], steps[index], workflow, config)
    ]
    logger.debug(f"Workflow {workflow.id}: natural breaking points {points}")
    return filter_breaking_points(points, len(steps), config)


def create_spec_definition(
    steps: Sequence[WorkflowStep], spec_index: int, workflow_id: str
) -> SpecDefinition:
    function = primary_function(step.description for step in steps)
    return SpecDefinition(
        id=f"{workflow_id}-spec-{spec_index}",
        name=f"{function} Spec {spec_index}",
        description=(
            f"Handles {function.lower()} operations: "
            f"{', '.join(step.description for step in steps)}"
        ),
        steps=[step.id for step in steps],
        estimated_quota_cost=sum(step.quota_cost for step in steps),
    )


def create_specs_from_breaking_points(
    workflow: Workflow, breaking_points: Sequence[int]
) -> List[SpecDefinition]:
    bounds = [0, *breaking_points, len(workflow.steps)]
    specs: List[SpecDefinition] = []
    for index, (start, end) in enumerate(zip(bounds, bounds[1:]), start=1):
        segment = workflow.steps[start:end]
        if segment:
            specs.append(create_spec_definition(segment, index, workflow.id))
    return specs


def break_into_specs(
    workflow: Workflow, config: Optional[DecompositionConfig] = None
) -> List[SpecDefinition]:
    """Partition the steps of ``workflow`` into contiguous specs.

    Workflows of three steps or fewer are never decomposed. The returned specs
    cover every step exactly once, in the original order.
    """
    config = config or DecompositionConfig()
    step_count = len(workflow.steps)
    if step_count < c.MIN_DECOMPOSABLE_STEPS:
        return []

    specs = create_specs_from_breaking_points(
        workflow, identify_breaking_points(workflow, config)
    )
    if not specs:
        specs = create_specs_from_breaking_points(workflow, [step_count // 2])

    logger.debug(f"Workflow {workflow.id} decomposed into {len(specs)} specs")
    return specs
