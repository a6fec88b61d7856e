"""Grouping of similar steps into batched operations."""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional

from .. import constants as c
from ..contracts import BatchedOperation, Workflow, WorkflowStep
from ..ids import IdFactory, default_id_factory
from .rules import input_pattern, operation_pattern

logger = logging.getLogger(__name__)


def batch_key(step: WorkflowStep) -> str:
    """Type, normalized operation and input shape of ``step``."""
    return f"{step.type}-{operation_pattern(step.description)}-{input_pattern(step.inputs)}"


def identify_batchable_operations(steps: List[WorkflowStep]) -> List[List[WorkflowStep]]:
    groups: Dict[str, List[WorkflowStep]] = {}
    for step in steps:
        groups.setdefault(batch_key(step), []).append(step)
    return [group for group in groups.values() if len(group) >= 2]


def batch_savings_percentage(batch_size: int) -> int:
    """Savings grow with the batch size and cap at 70%."""
    efficiency = min(
        c.BATCH_MAX_EFFICIENCY,
        c.BATCH_BASE_EFFICIENCY + batch_size * c.BATCH_EFFICIENCY_PER_STEP,
    )
    # 0.2 + 0.3 == 0.5000000000000001, so trim float noise before flooring
    return math.floor(round(efficiency * 100, 6))


def create_batched_operation(
    operations: List[WorkflowStep], id_factory: IdFactory = default_id_factory
) -> BatchedOperation:
    first = operations[0]
    return BatchedOperation(
        id=id_factory("batch"),
        original_operations=[op.id for op in operations],
        type=first.type,
        description=(
            f"Batched {first.type} operations: {operation_pattern(first.description)}"
        ),
        batch_size=len(operations),
        estimated_savings=batch_savings_percentage(len(operations)),
    )


def apply_batching_strategy(
    workflow: Workflow, id_factory: Optional[IdFactory] = None
) -> List[BatchedOperation]:
    """Return one batched operation per group of two or more similar steps."""
    factory = id_factory or default_id_factory
    batches = [
        create_batched_operation(group, factory)
        for group in identify_batchable_operations(workflow.steps)
    ]
    logger.debug(f"Workflow {workflow.id}: {len(batches)} batchable groups")
    return batches
