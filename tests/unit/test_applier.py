"""Tests for applying optimizations to a workflow."""

import logging

import pytest

from flowtrim.config import ApplicationConfig
from flowtrim.contracts import EstimatedSavings, Optimization
from flowtrim.optimizer.applier import apply_optimizations


def _optimization(opt_type, steps):
    return Optimization(
        type=opt_type,
        description=f"{opt_type} candidate",
        steps_affected=steps,
        estimated_savings=EstimatedSavings(vibes=0, specs=0, percentage=10),
    )


@pytest.fixture
def workflow(make_step, make_workflow):
    return make_workflow(
        [
            make_step("s1", "processing", "Transform a", quota_cost=10),
            make_step("s2", "processing", "Transform b", quota_cost=10),
            make_step("s3", "processing", "Transform c", quota_cost=10),
            make_step("s4", "vibe", "Summarize", quota_cost=10),
        ],
        complexity=5,
    )


def test_vibe_to_spec_converts_and_reduces_cost(make_step, make_workflow):
    workflow = make_workflow([make_step("v", "vibe", "Generate story", quota_cost=10)])

    result = apply_optimizations(workflow, [_optimization("vibe_to_spec", ["v"])])

    [step] = result.steps
    assert step.type == "spec"
    assert step.quota_cost == 3
    assert step.description == "Spec-based: Generate story"
    gains = result.efficiency_gains
    assert gains.total_savings_percentage == 70
    assert gains.vibe_reduction == 100
    assert gains.spec_reduction == 0
    assert gains.cost_savings == 7


def test_vibe_to_spec_ignores_other_types(workflow):
    result = apply_optimizations(workflow, [_optimization("vibe_to_spec", ["s1"])])
    assert result.steps[0].type == "processing"
    assert result.steps[0].quota_cost == 10


def test_batching_folds_steps_into_first(workflow):
    result = apply_optimizations(
        workflow, [_optimization("batching", ["s1", "s2", "s3"])]
    )

    assert [step.id for step in result.steps] == ["s1", "s4"]
    assert result.steps[0].quota_cost == 18
    assert result.steps[0].description == "Batched: Transform a"
    assert result.efficiency_gains.cost_savings == 12
    assert result.efficiency_gains.total_savings_percentage == 30


def test_caching_reduces_cost(workflow):
    result = apply_optimizations(workflow, [_optimization("caching", ["s4"])])

    assert result.steps[3].quota_cost == 4
    assert result.steps[3].description == "Cached: Summarize"
    assert result.efficiency_gains.vibe_reduction == 60


def test_fractional_cost_never_grows(make_step, make_workflow):
    workflow = make_workflow([make_step("s", "vibe", "Analyze", quota_cost=0.5)])

    result = apply_optimizations(workflow, [_optimization("caching", ["s"])])

    assert result.steps[0].quota_cost == 0.5


def test_decomposition_is_recorded_without_changes(workflow):
    optimization = _optimization("decomposition", workflow.step_ids())

    result = apply_optimizations(workflow, [optimization])

    assert result.steps == workflow.steps
    assert result.optimizations == [optimization]
    assert result.efficiency_gains.total_savings_percentage == 0


def test_result_identity_and_source_are_preserved(workflow):
    result = apply_optimizations(workflow, [_optimization("caching", ["s1"])])

    assert result.id == "wf-optimized"
    assert result.estimated_complexity == 4
    assert result.original_workflow is workflow
    assert workflow.steps[0].quota_cost == 10
    assert workflow.steps[0].description == "Transform a"


def test_complexity_never_drops_below_one(make_step, make_workflow):
    workflow = make_workflow([make_step("s")], complexity=1)
    assert apply_optimizations(workflow, []).estimated_complexity == 1


def test_failing_optimization_is_skipped(workflow, caplog):
    broken = Optimization.model_construct(
        type="teleport",
        description="unsupported",
        steps_affected=["s1"],
        estimated_savings=EstimatedSavings(),
    )
    caching = _optimization("caching", ["s4"])

    with caplog.at_level(logging.WARNING):
        result = apply_optimizations(workflow, [broken, caching])

    assert result.optimizations == [caching]
    assert "teleport" in caplog.text


def test_missing_steps_are_ignored_by_default(workflow):
    batching = _optimization("batching", ["s1", "s2"])
    caching = _optimization("caching", ["s2"])

    result = apply_optimizations(workflow, [batching, caching])

    assert result.optimizations == [batching, caching]
    assert not any(step.description.startswith("Cached") for step in result.steps)


def test_missing_steps_skip_policy_drops_optimization(workflow, caplog):
    batching = _optimization("batching", ["s1", "s2"])
    caching = _optimization("caching", ["s2", "s4"])

    with caplog.at_level(logging.WARNING):
        result = apply_optimizations(
            workflow, [batching, caching], ApplicationConfig(missing_steps_policy="skip")
        )

    assert result.optimizations == [batching]
    assert result.steps[-1].quota_cost == 10
    assert "s2" in caplog.text


def test_missing_steps_warn_policy_applies_to_survivors(workflow, caplog):
    batching = _optimization("batching", ["s1", "s2"])
    caching = _optimization("caching", ["s2", "s4"])

    with caplog.at_level(logging.WARNING):
        result = apply_optimizations(
            workflow, [batching, caching], ApplicationConfig(missing_steps_policy="warn")
        )

    assert result.optimizations == [batching, caching]
    assert result.steps[-1].quota_cost == 4
    assert "missing: s2" in caplog.text


def test_zero_cost_workflow_reports_zero_gains(make_step, make_workflow):
    workflow = make_workflow([make_step("s", "vibe", "Analyze", quota_cost=0)])

    result = apply_optimizations(workflow, [_optimization("caching", ["s"])])

    assert result.efficiency_gains.total_savings_percentage == 0
    assert result.efficiency_gains.vibe_reduction == 0
