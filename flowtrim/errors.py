"""Error taxonomy and recovery helpers for workflow optimization."""

from __future__ import annotations

import logging
from typing import Literal, Optional

from .contracts import (
    EfficiencySavings,
    EstimatedSavings,
    Optimization,
    OptimizedWorkflow,
    Workflow,
)

logger = logging.getLogger(__name__)

Stage = Literal["intent", "analysis", "optimization", "forecasting"]


class WorkflowValidationError(ValueError):
    """Raised when a workflow is structurally invalid."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class ProcessingFailureError(Exception):
    """Failure of a pipeline stage, optionally with a fallback available."""

    def __init__(
        self,
        message: str,
        stage: Stage,
        error_type: str,
        suggested_action: str,
        fallback_available: bool = False,
        original_error: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.error_type = error_type
        self.suggested_action = suggested_action
        self.fallback_available = fallback_available
        self.original_error = original_error


class OptimizationError(ProcessingFailureError):
    """Recoverable failure of the optimization stage."""

    def __init__(
        self,
        message: str,
        suggested_action: str,
        original_error: Optional[BaseException] = None,
    ) -> None:
        super().__init__(
            message,
            stage="optimization",
            error_type="optimization_failed",
            suggested_action=suggested_action,
            fallback_available=True,
            original_error=original_error,
        )


class PartialApplicationError(RuntimeError):
    """An optimization references steps that no longer exist."""

    def __init__(self, optimization_type: str, missing: list[str]) -> None:
        super().__init__(
            f"{optimization_type} optimization references missing steps: "
            f"{', '.join(missing)}"
        )
        self.optimization_type = optimization_type
        self.missing = missing


def is_recoverable(error: BaseException) -> bool:
    """Return ``True`` when a fallback result may replace the failed call."""
    if isinstance(error, ProcessingFailureError):
        return error.fallback_available
    if isinstance(error, WorkflowValidationError):
        return False
    return True


def fallback_strategy(error: BaseException, stage: Stage) -> str:
    """Human-readable advice for recovering from ``error`` at ``stage``."""
    if isinstance(error, WorkflowValidationError):
        return "Fix input validation issues and retry"
    strategies = {
        "intent": "Simplify intent description or provide more specific details",
        "analysis": "Use basic analysis techniques with reduced complexity",
        "optimization": "Apply minimal optimization strategies with lower risk",
        "forecasting": "Use conservative estimates based on workflow complexity",
    }
    return strategies.get(
        stage, "Retry with simplified parameters or reduced complexity"
    )


def fallback_optimized_workflow(
    workflow: Workflow, error: Optional[BaseException] = None
) -> OptimizedWorkflow:
    """Minimal low-impact result to return after a recoverable failure."""
    if error is not None:
        logger.warning(f"Optimization failed, using fallback: {error}")

    steps = [step.model_copy(deep=True) for step in workflow.steps]
    affected = [steps[0].id] if steps else []
    return OptimizedWorkflow(
        id=workflow.id,
        steps=steps,
        data_flow=list(workflow.data_flow),
        estimated_complexity=workflow.estimated_complexity,
        optimizations=[
            Optimization(
                type="caching",
                description="Basic caching optimization (fallback)",
                steps_affected=affected,
                estimated_savings=EstimatedSavings(vibes=0, specs=0, percentage=5),
            )
        ],
        original_workflow=workflow,
        efficiency_gains=EfficiencySavings(
            vibe_reduction=5,
            spec_reduction=0,
            cost_savings=0,
            total_savings_percentage=5,
        ),
    )
