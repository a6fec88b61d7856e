"""Structural validation of workflows entering the engine."""

from __future__ import annotations

import math
from typing import Any, Mapping, Union

from pydantic import ValidationError

from .contracts import STEP_TYPES, Workflow
from .errors import WorkflowValidationError

WorkflowInput = Union[Workflow, Mapping[str, Any]]


def coerce_workflow(data: WorkflowInput) -> Workflow:
    """Return ``data`` as a ``Workflow`` model, validating mappings."""
    if isinstance(data, Workflow):
        return data
    if not isinstance(data, Mapping):
        raise WorkflowValidationError("Workflow cannot be null or undefined")
    try:
        return Workflow.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or None
        raise WorkflowValidationError(
            f"Invalid workflow field {field}: {first['msg']}", field
        ) from exc


def validate_workflow(workflow: Workflow) -> None:
    """Check the invariants the optimizer relies on.

    Models built with ``model_construct`` or mutated after construction skip
    pydantic validation, so the checks are repeated here explicitly.
    """

    if workflow is None:
        raise WorkflowValidationError("Workflow cannot be null or undefined")

    if not workflow.id or not isinstance(workflow.id, str):
        raise WorkflowValidationError("Workflow must have a valid ID", "id")

    if not isinstance(workflow.steps, list):
        raise WorkflowValidationError("Workflow steps must be an array", "steps")

    if not workflow.steps:
        raise WorkflowValidationError("Workflow must have at least one step", "steps")

    complexity = workflow.estimated_complexity
    if (
        not isinstance(complexity, (int, float))
        or not math.isfinite(complexity)
        or complexity < 0
    ):
        raise WorkflowValidationError(
            "Workflow must have a finite, non-negative estimated complexity",
            "estimated_complexity",
        )

    seen: set[str] = set()
    for index, step in enumerate(workflow.steps):
        if not step.id or not isinstance(step.id, str):
            raise WorkflowValidationError(
                f"Workflow step {index} must have a valid ID", f"steps[{index}].id"
            )
        if step.id in seen:
            raise WorkflowValidationError(
                f"Workflow step {index} reuses ID {step.id}", f"steps[{index}].id"
            )
        seen.add(step.id)

        if step.type not in STEP_TYPES:
            raise WorkflowValidationError(
                f"Workflow step {index} must have a valid type",
                f"steps[{index}].type",
            )

        if not step.description or not isinstance(step.description, str):
            raise WorkflowValidationError(
                f"Workflow step {index} must have a description",
                f"steps[{index}].description",
            )

        cost = step.quota_cost
        if (
            isinstance(cost, bool)
            or not isinstance(cost, (int, float))
            or not math.isfinite(cost)
            or cost < 0
        ):
            raise WorkflowValidationError(
                f"Workflow step {index} must have a finite, non-negative quota cost",
                f"steps[{index}].quota_cost",
            )

        if not isinstance(step.inputs, list):
            raise WorkflowValidationError(
                f"Workflow step {index} inputs must be an array",
                f"steps[{index}].inputs",
            )
        if not isinstance(step.outputs, list):
            raise WorkflowValidationError(
                f"Workflow step {index} outputs must be an array",
                f"steps[{index}].outputs",
            )
