"""Discovery of optimization opportunities from issues and step patterns."""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from .. import constants as c
from ..contracts import (
    EfficiencyIssue,
    EstimatedSavings,
    Optimization,
    OptimizationParams,
    Workflow,
)
from .patterns import StepAnalysis, analyze_workflow_steps

logger = logging.getLogger(__name__)

IssueInput = Union[EfficiencyIssue, Mapping[str, Any]]
ParamsInput = Union[OptimizationParams, Mapping[str, Any], None]

# issue type -> (optimization type, description prefix)
ISSUE_OPTIMIZATIONS = {
    "redundant_query": ("caching", "Cache results for redundant queries"),
    "excessive_loops": ("batching", "Batch operations to reduce loop overhead"),
    "unnecessary_vibes": ("vibe_to_spec", "Convert repetitive vibes to structured specs"),
    "missing_cache": ("caching", "Add caching layer for repeated operations"),
}


def _unique_preserve_order(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        ordered.append(value)
    return ordered


def coerce_issues(issues: Optional[Iterable[IssueInput]]) -> List[EfficiencyIssue]:
    return [
        issue if isinstance(issue, EfficiencyIssue) else EfficiencyIssue.model_validate(issue)
        for issue in issues or []
    ]


def coerce_params(params: ParamsInput) -> Optional[OptimizationParams]:
    if params is None or isinstance(params, OptimizationParams):
        return params
    return OptimizationParams.model_validate(params)


def severity_percentage(severity: str) -> int:
    return c.SEVERITY_SAVINGS_PERCENTAGE.get(
        severity, c.DEFAULT_SEVERITY_SAVINGS_PERCENTAGE
    )


def _vibe_savings(steps_affected: Sequence[str], analysis: StepAnalysis) -> float:
    affected = set(steps_affected)
    return sum(step.quota_cost for step in analysis.vibe_steps if step.id in affected)


def match_issue_to_optimization(
    issue: EfficiencyIssue, analysis: StepAnalysis, known_ids: Sequence[str]
) -> Optional[Optimization]:
    """Translate one reported issue into its optimization, if the type is known."""
    mapping = ISSUE_OPTIMIZATIONS.get(issue.type)
    if mapping is None:
        logger.debug(f"Dropping issue with unrecognized type {issue.type!r}")
        return None
    optimization_type, prefix = mapping

    known = set(known_ids)
    steps_affected = _unique_preserve_order(
        step_id for step_id in issue.steps_affected if step_id in known
    )
    unknown = [step_id for step_id in issue.steps_affected if step_id not in known]
    if unknown:
        logger.warning(
            f"Issue {issue.type!r} references unknown steps: {', '.join(unknown)}"
        )
    if not steps_affected:
        return None

    specs = 0
    if optimization_type == "vibe_to_spec":
        specs = math.ceil(len(steps_affected) / c.VIBES_PER_CONVERTED_SPEC)

    return Optimization(
        type=optimization_type,
        description=f"{prefix}: {issue.description}",
        steps_affected=steps_affected,
        estimated_savings=EstimatedSavings(
            vibes=_vibe_savings(steps_affected, analysis),
            specs=specs,
            percentage=severity_percentage(issue.severity),
        ),
    )


def identify_pattern_optimizations(
    workflow: Workflow, analysis: StepAnalysis
) -> List[Optimization]:
    """Opportunities visible from the step structure alone."""
    optimizations: List[Optimization] = []

    if (
        analysis.step_count >= c.DECOMPOSITION_MIN_STEPS
        and analysis.total_quota_cost > c.DECOMPOSITION_MIN_TOTAL_COST
    ):
        optimizations.append(
            Optimization(
                type="decomposition",
                description="Break complex workflow into smaller, reusable specs",
                steps_affected=workflow.step_ids(),
                estimated_savings=EstimatedSavings(
                    vibes=math.floor(
                        analysis.total_quota_cost * c.DECOMPOSITION_SAVINGS_RATE
                    ),
                    specs=math.ceil(
                        analysis.step_count / c.DECOMPOSITION_STEPS_PER_SPEC
                    ),
                    percentage=15,
                ),
            )
        )

    for group in analysis.similar_operations:
        if len(group) < c.SIMILAR_GROUP_MIN_SIZE:
            continue
        group_cost = sum(step.quota_cost for step in group)
        optimizations.append(
            Optimization(
                type="batching",
                description=f"Batch {len(group)} similar {group[0].type} operations",
                steps_affected=[step.id for step in group],
                estimated_savings=EstimatedSavings(
                    vibes=math.floor(group_cost * c.SIMILAR_GROUP_SAVINGS_RATE),
                    specs=0,
                    percentage=40,
                ),
            )
        )

    for group in analysis.repeated_operations:
        if len(group) < c.REPEATED_GROUP_MIN_SIZE:
            continue
        group_cost = sum(step.quota_cost for step in group)
        optimizations.append(
            Optimization(
                type="caching",
                description=f"Cache results for {len(group)} repeated operations",
                steps_affected=[step.id for step in group],
                estimated_savings=EstimatedSavings(
                    vibes=math.floor(group_cost * c.REPEATED_GROUP_SAVINGS_RATE),
                    specs=0,
                    percentage=60,
                ),
            )
        )

    return optimizations


def consolidate_optimizations(optimizations: List[Optimization]) -> List[Optimization]:
    """Merge same-type optimizations whose step sets overlap.

    The walk follows generation order and only merges candidates that overlap
    the optimization currently visited, so the outcome depends on that order.
    """
    consolidated: List[Optimization] = []
    processed: set[str] = set()

    for optimization in optimizations:
        key = optimization.dedup_key()
        if key in processed:
            continue
        processed.add(key)

        members = set(optimization.steps_affected)
        similar = [
            other
            for other in optimizations
            if other.type == optimization.type
            and members.intersection(other.steps_affected)
        ]

        if len(similar) <= 1:
            consolidated.append(optimization)
            continue

        merged_steps = _unique_preserve_order(
            step_id for other in similar for step_id in other.steps_affected
        )
        consolidated.append(
            Optimization(
                type=optimization.type,
                description=(
                    f"Consolidated {optimization.type} optimization affecting "
                    f"{len(merged_steps)} steps"
                ),
                steps_affected=merged_steps,
                estimated_savings=EstimatedSavings(
                    vibes=sum(o.estimated_savings.vibes for o in similar),
                    specs=sum(o.estimated_savings.specs for o in similar),
                    percentage=max(o.estimated_savings.percentage for o in similar),
                ),
            )
        )
        processed.update(other.dedup_key() for other in similar)

    return consolidated


def _scaled(
    savings: EstimatedSavings, multiplier: float, scale_vibes: bool = True
) -> EstimatedSavings:
    update: dict[str, float] = {
        "percentage": min(c.MAX_ADJUSTED_PERCENTAGE, savings.percentage * multiplier)
    }
    if scale_vibes:
        update["vibes"] = math.ceil(savings.vibes * multiplier)
    return savings.model_copy(update=update)


def adjust_optimizations_for_parameters(
    optimizations: List[Optimization], params: OptimizationParams
) -> List[Optimization]:
    """Scale savings estimates to the caller's volume, budget and latency needs."""
    adjusted_list: List[Optimization] = []
    for optimization in optimizations:
        savings = optimization.estimated_savings

        if params.cost_constraints is not None and params.cost_constraints.is_tight():
            savings = _scaled(savings, c.TIGHT_CONSTRAINT_MULTIPLIER)
            savings = savings.model_copy(update={"specs": max(0, savings.specs - 1)})

        if (
            params.expected_user_volume is not None
            and params.expected_user_volume > c.HIGH_VOLUME_THRESHOLD
            and optimization.type in ("caching", "batching")
        ):
            savings = _scaled(savings, c.HIGH_VOLUME_MULTIPLIER)

        if (
            params.performance_sensitivity == "high"
            and optimization.type == "vibe_to_spec"
        ):
            savings = _scaled(
                savings, c.HIGH_PERFORMANCE_MULTIPLIER, scale_vibes=False
            )

        adjusted_list.append(
            optimization.model_copy(update={"estimated_savings": savings})
        )
    return adjusted_list


def identify_optimization_opportunities(
    workflow: Workflow,
    issues: Optional[Iterable[IssueInput]] = None,
    params: ParamsInput = None,
) -> List[Optimization]:
    """Return the consolidated candidate optimizations for ``workflow``.

    Issue-matched optimizations come first, followed by pattern-driven ones;
    consolidation then merges overlapping same-type candidates in that order.
    """
    analysis = analyze_workflow_steps(workflow)
    known_ids = workflow.step_ids()

    optimizations: List[Optimization] = []
    for issue in coerce_issues(issues):
        optimization = match_issue_to_optimization(issue, analysis, known_ids)
        if optimization is not None:
            optimizations.append(optimization)

    optimizations.extend(identify_pattern_optimizations(workflow, analysis))
    consolidated = consolidate_optimizations(optimizations)
    logger.debug(
        f"Workflow {workflow.id}: {len(optimizations)} candidates, "
        f"{len(consolidated)} after consolidation"
    )

    resolved = coerce_params(params)
    if resolved is not None:
        return adjust_optimizations_for_parameters(consolidated, resolved)
    return consolidated
