"""Flowtrim: quota-aware optimization for step-based workflows."""

from .config import FlowtrimConfig, load_config
from .contracts import (
    ConsultingAnalysis,
    EfficiencyIssue,
    Optimization,
    OptimizationParams,
    OptimizedWorkflow,
    Workflow,
    WorkflowStep,
)
from .errors import OptimizationError, WorkflowValidationError
from .optimizer import (
    WorkflowOptimizer,
    apply_batching_strategy,
    apply_optimizations,
    break_into_specs,
    identify_optimization_opportunities,
    implement_caching_layer,
    optimize_workflow,
    optimize_workflow_from_analysis,
)

__version__ = "0.1.0"
__all__ = [
    "ConsultingAnalysis",
    "EfficiencyIssue",
    "FlowtrimConfig",
    "Optimization",
    "OptimizationError",
    "OptimizationParams",
    "OptimizedWorkflow",
    "Workflow",
    "WorkflowOptimizer",
    "WorkflowStep",
    "WorkflowValidationError",
    "apply_batching_strategy",
    "apply_optimizations",
    "break_into_specs",
    "identify_optimization_opportunities",
    "implement_caching_layer",
    "load_config",
    "optimize_workflow",
    "optimize_workflow_from_analysis",
]
