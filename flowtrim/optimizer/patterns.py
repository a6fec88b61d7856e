"""Aggregate statistics over the steps of a workflow."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Hashable, List

from ..contracts import Workflow, WorkflowStep


@dataclass(frozen=True)
class StepAnalysis:
    """Per-type subsets and groupings used to spot optimization candidates."""

    vibe_steps: List[WorkflowStep] = field(default_factory=list)
    spec_steps: List[WorkflowStep] = field(default_factory=list)
    data_retrieval_steps: List[WorkflowStep] = field(default_factory=list)
    similar_operations: List[List[WorkflowStep]] = field(default_factory=list)
    repeated_operations: List[List[WorkflowStep]] = field(default_factory=list)
    total_quota_cost: float = 0
    avg_step_cost: float = 0
    step_count: int = 0


def _group_steps(
    steps: List[WorkflowStep], key: Callable[[WorkflowStep], Hashable]
) -> List[List[WorkflowStep]]:
    groups: Dict[Hashable, List[WorkflowStep]] = {}
    for step in steps:
        groups.setdefault(key(step), []).append(step)
    return [group for group in groups.values() if len(group) > 1]


def find_similar_operations(steps: List[WorkflowStep]) -> List[List[WorkflowStep]]:
    """Steps sharing type and the first 20 characters of their description."""
    return _group_steps(steps, lambda step: (step.type, step.description[:20]))


def find_repeated_operations(steps: List[WorkflowStep]) -> List[List[WorkflowStep]]:
    """Steps identical in type, description, inputs and outputs."""
    return _group_steps(
        steps,
        lambda step: (
            step.type,
            step.description,
            tuple(step.inputs),
            tuple(step.outputs),
        ),
    )


def analyze_workflow_steps(workflow: Workflow) -> StepAnalysis:
    steps = workflow.steps
    total = sum(step.quota_cost for step in steps)
    return StepAnalysis(
        vibe_steps=[step for step in steps if step.type == "vibe"],
        spec_steps=[step for step in steps if step.type == "spec"],
        data_retrieval_steps=[step for step in steps if step.type == "data_retrieval"],
        similar_operations=find_similar_operations(steps),
        repeated_operations=find_repeated_operations(steps),
        total_quota_cost=total,
        avg_step_cost=total / len(steps) if steps else 0,
        step_count=len(steps),
    )
