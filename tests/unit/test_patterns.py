from flowtrim.contracts import Workflow
from flowtrim.optimizer.patterns import analyze_workflow_steps


def test_analyze_workflow_steps_groups_similar_and_repeated(make_step, make_workflow):
    workflow = make_workflow(
        [
            make_step("a", "vibe", "Generate summary for A", quota_cost=10),
            make_step("b", "vibe", "Generate summary for B", quota_cost=10),
            make_step("c", "data_retrieval", "Fetch config", ["key"], ["cfg"], 5),
            make_step("d", "data_retrieval", "Fetch config", ["key"], ["cfg"], 5),
            make_step("e", "spec", "Format report", quota_cost=2),
        ]
    )

    analysis = analyze_workflow_steps(workflow)

    assert [step.id for step in analysis.vibe_steps] == ["a", "b"]
    assert [step.id for step in analysis.spec_steps] == ["e"]
    assert [step.id for step in analysis.data_retrieval_steps] == ["c", "d"]
    assert [[s.id for s in group] for group in analysis.similar_operations] == [
        ["a", "b"],
        ["c", "d"],
    ]
    assert [[s.id for s in group] for group in analysis.repeated_operations] == [
        ["c", "d"]
    ]
    assert analysis.total_quota_cost == 32
    assert analysis.avg_step_cost == 6.4
    assert analysis.step_count == 5


def test_repeated_operations_require_identical_inputs(make_step, make_workflow):
    workflow = make_workflow(
        [
            make_step("a", "data_retrieval", "Fetch config", ["key"], ["cfg"]),
            make_step("b", "data_retrieval", "Fetch config", ["other"], ["cfg"]),
        ]
    )

    analysis = analyze_workflow_steps(workflow)
    assert analysis.repeated_operations == []
    assert len(analysis.similar_operations) == 1


def test_empty_workflow_has_zero_average():
    analysis = analyze_workflow_steps(Workflow(id="empty"))
    assert analysis.step_count == 0
    assert analysis.avg_step_cost == 0
    assert analysis.similar_operations == []
