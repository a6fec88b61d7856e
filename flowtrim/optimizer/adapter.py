"""Translate a consulting analysis into efficiency issues."""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Union

from ..contracts import ConsultingAnalysis, EfficiencyIssue, Workflow

logger = logging.getLogger(__name__)

AnalysisInput = Union[ConsultingAnalysis, Mapping[str, Any]]

CATEGORY_POTENTIAL_THRESHOLD = 30
CATEGORY_HIGH_SEVERITY = 60
DRIVER_SAVINGS_THRESHOLD = 20
DRIVER_HIGH_SEVERITY = 40
ZERO_BASED_SAVINGS_THRESHOLD = 30


def coerce_analysis(analysis: AnalysisInput) -> ConsultingAnalysis:
    if isinstance(analysis, ConsultingAnalysis):
        return analysis
    return ConsultingAnalysis.model_validate(analysis or {})


def _first_word(text: str) -> str:
    return text.split(" ")[0]


def convert_analysis_to_issues(
    analysis: AnalysisInput, workflow: Workflow
) -> List[EfficiencyIssue]:
    """Synthesize issues from category, value-driver and zero-based findings.

    Always returns at least one issue: when nothing crosses a threshold a
    generic medium-severity ``redundant_query`` over all steps is emitted.
    """
    analysis = coerce_analysis(analysis)
    all_steps = workflow.step_ids()
    issues: List[EfficiencyIssue] = []

    if analysis.mece_analysis is not None:
        for category in analysis.mece_analysis.categories:
            potential = category.optimization_potential
            if potential <= CATEGORY_POTENTIAL_THRESHOLD:
                continue
            vibe_related = "Vibe" in category.name
            prefixes = [_first_word(driver) for driver in category.drivers]
            issues.append(
                EfficiencyIssue(
                    type="unnecessary_vibes" if vibe_related else "redundant_query",
                    severity="high" if potential > CATEGORY_HIGH_SEVERITY else "medium",
                    description=(
                        f"High optimization potential in {category.name}: {potential}%"
                    ),
                    suggested_fix=(
                        f"Optimize {category.name} operations through "
                        f"{'spec conversion' if vibe_related else 'caching/batching'}"
                    ),
                    steps_affected=[
                        step.id
                        for step in workflow.steps
                        if any(prefix in step.description for prefix in prefixes)
                    ],
                )
            )

    if analysis.value_driver_analysis is not None:
        for driver in analysis.value_driver_analysis.primary_drivers:
            potential = driver.savings_potential
            if potential <= DRIVER_SAVINGS_THRESHOLD:
                continue
            keyword = _first_word(driver.name.lower())
            issues.append(
                EfficiencyIssue(
                    type="unnecessary_vibes" if "Vibe" in driver.name else "missing_cache",
                    severity="high" if potential > DRIVER_HIGH_SEVERITY else "medium",
                    description=(
                        f"Value driver {driver.name} has {potential} savings potential"
                    ),
                    suggested_fix=(
                        f"Optimize {driver.name} to reduce cost from "
                        f"{driver.current_cost} to {driver.optimized_cost}"
                    ),
                    steps_affected=[
                        step.id
                        for step in workflow.steps
                        if keyword in step.description.lower()
                    ],
                )
            )

    zero_based = analysis.zero_based_solution
    if zero_based is not None and zero_based.potential_savings > ZERO_BASED_SAVINGS_THRESHOLD:
        issues.append(
            EfficiencyIssue(
                type="unnecessary_vibes",
                severity="high",
                description=(
                    f"Zero-based analysis suggests {zero_based.potential_savings}% "
                    "savings through radical redesign"
                ),
                suggested_fix=zero_based.radical_approach,
                steps_affected=list(all_steps),
            )
        )

    if not issues:
        issues.append(
            EfficiencyIssue(
                type="redundant_query",
                severity="medium",
                description=(
                    "General workflow optimization opportunities identified "
                    "through consulting analysis"
                ),
                suggested_fix="Apply batching, caching, and spec conversion optimizations",
                steps_affected=list(all_steps),
            )
        )

    logger.debug(f"Converted analysis into {len(issues)} issues for {workflow.id}")
    return issues
