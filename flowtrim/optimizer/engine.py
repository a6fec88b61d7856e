"""Entry points tying the optimizer stages together."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Union

from ..config import FlowtrimConfig
from ..contracts import (
    BatchedOperation,
    CachedWorkflow,
    Optimization,
    OptimizedWorkflow,
    SpecDefinition,
    Workflow,
)
from ..errors import OptimizationError, WorkflowValidationError
from ..ids import IdFactory
from ..validation import WorkflowInput, coerce_workflow, validate_workflow
from .adapter import AnalysisInput, convert_analysis_to_issues
from .applier import apply_optimizations
from .batching import apply_batching_strategy
from .caching import implement_caching_layer
from .decomposition import break_into_specs
from .opportunities import (
    IssueInput,
    ParamsInput,
    identify_optimization_opportunities,
)

logger = logging.getLogger(__name__)


def _validated(workflow: WorkflowInput) -> Workflow:
    """Return a validated workflow or raise a recoverable ``OptimizationError``."""
    try:
        model = coerce_workflow(workflow)
        validate_workflow(model)
    except WorkflowValidationError as e:
        raise OptimizationError(
            f"Workflow optimization input validation failed: {e}",
            "Please ensure the workflow has valid steps and structure",
            e,
        ) from e
    return model


def optimize_workflow(
    workflow: WorkflowInput,
    issues: Optional[Iterable[IssueInput]] = None,
    params: ParamsInput = None,
    config: Optional[FlowtrimConfig] = None,
) -> OptimizedWorkflow:
    """Validate, find opportunities for and optimize ``workflow``.

    Args:
        workflow: Workflow model or mapping with camelCase/snake_case keys.
        issues: Externally reported efficiency issues.
        params: Optional tuning parameters scaling the savings estimates.
        config: Engine configuration; defaults are used when omitted.

    Raises:
        OptimizationError: If the workflow fails validation.
    """
    config = config or FlowtrimConfig()
    model = _validated(workflow)
    optimizations = identify_optimization_opportunities(model, issues, params)
    return apply_optimizations(model, optimizations, config.application)


def optimize_workflow_from_analysis(
    workflow: WorkflowInput,
    analysis: AnalysisInput,
    params: ParamsInput = None,
    config: Optional[FlowtrimConfig] = None,
) -> OptimizedWorkflow:
    """Like ``optimize_workflow`` but deriving issues from a consulting analysis."""
    config = config or FlowtrimConfig()
    model = _validated(workflow)
    issues = convert_analysis_to_issues(analysis, model)
    optimizations = identify_optimization_opportunities(model, issues, params)
    return apply_optimizations(model, optimizations, config.application)


class WorkflowOptimizer:
    """Async facade matching the interface of the other pipeline stages.

    Holds configuration only; every call works on its own copies, so one
    instance may serve concurrent callers.
    """

    def __init__(
        self,
        config: Optional[FlowtrimConfig] = None,
        id_factory: Optional[IdFactory] = None,
    ) -> None:
        self.config = config or FlowtrimConfig()
        self.id_factory = id_factory

    async def identify_optimization_opportunities(
        self,
        workflow: WorkflowInput,
        issues: Optional[Iterable[IssueInput]] = None,
        params: ParamsInput = None,
    ) -> List[Optimization]:
        return identify_optimization_opportunities(
            coerce_workflow(workflow), issues, params
        )

    async def apply_batching_strategy(self, workflow: WorkflowInput) -> List[BatchedOperation]:
        return apply_batching_strategy(coerce_workflow(workflow), self.id_factory)

    async def implement_caching_layer(self, workflow: WorkflowInput) -> CachedWorkflow:
        return implement_caching_layer(coerce_workflow(workflow))

    async def break_into_specs(self, workflow: WorkflowInput) -> List[SpecDefinition]:
        return break_into_specs(coerce_workflow(workflow), self.config.decomposition)

    async def apply_optimizations(
        self, workflow: WorkflowInput, optimizations: List[Optimization]
    ) -> OptimizedWorkflow:
        return apply_optimizations(
            coerce_workflow(workflow), optimizations, self.config.application
        )

    async def optimize_workflow(
        self,
        workflow: WorkflowInput,
        issues_or_analysis: Union[Sequence[IssueInput], AnalysisInput, None] = None,
        params: ParamsInput = None,
    ) -> OptimizedWorkflow:
        """Dispatch to the issue-list or analysis entry point."""
        if issues_or_analysis is None or isinstance(issues_or_analysis, (list, tuple)):
            return optimize_workflow(workflow, issues_or_analysis, params, self.config)
        return optimize_workflow_from_analysis(
            workflow, issues_or_analysis, params, self.config
        )
