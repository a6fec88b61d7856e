"""Workflow optimization engine."""

from __future__ import annotations

from .adapter import convert_analysis_to_issues
from .applier import apply_optimizations, calculate_efficiency_gains
from .batching import apply_batching_strategy
from .caching import implement_caching_layer
from .decomposition import break_into_specs
from .engine import (
    WorkflowOptimizer,
    optimize_workflow,
    optimize_workflow_from_analysis,
)
from .opportunities import (
    consolidate_optimizations,
    identify_optimization_opportunities,
)
from .patterns import StepAnalysis, analyze_workflow_steps

__all__ = [
    "StepAnalysis",
    "WorkflowOptimizer",
    "analyze_workflow_steps",
    "apply_batching_strategy",
    "apply_optimizations",
    "break_into_specs",
    "calculate_efficiency_gains",
    "consolidate_optimizations",
    "convert_analysis_to_issues",
    "identify_optimization_opportunities",
    "implement_caching_layer",
    "optimize_workflow",
    "optimize_workflow_from_analysis",
]
