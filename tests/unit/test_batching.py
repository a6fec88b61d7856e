import pytest

from flowtrim.ids import sequential_id_factory
from flowtrim.optimizer.batching import (
    apply_batching_strategy,
    batch_key,
    batch_savings_percentage,
)


@pytest.fixture
def workflow(make_step, make_workflow):
    return make_workflow(
        [
            make_step("s1", "vibe", "Process item 1", ["itemId"], quota_cost=5),
            make_step("s2", "vibe", "Process item 2", ["itemId"], quota_cost=5),
            make_step("s3", "vibe", "Process item 3", ["itemId"], quota_cost=5),
            make_step("s4", "vibe", "Process item 4", ["payload"], quota_cost=5),
            make_step("s5", "spec", "Process item 5", ["itemId"], quota_cost=5),
        ]
    )


def test_batch_key_combines_type_operation_and_inputs(workflow):
    assert batch_key(workflow.steps[0]) == "vibe-process item N-ID"
    assert batch_key(workflow.steps[3]) == "vibe-process item N-PARAM"


def test_similar_steps_are_batched(workflow):
    [batch] = apply_batching_strategy(workflow, sequential_id_factory())

    assert batch.id == "batch-1"
    assert batch.original_operations == ["s1", "s2", "s3"]
    assert batch.type == "vibe"
    assert batch.description == "Batched vibe operations: process item N"
    assert batch.batch_size == 3
    assert batch.estimated_savings == 50


def test_default_ids_are_prefixed(workflow):
    [batch] = apply_batching_strategy(workflow)
    assert batch.id.startswith("batch-")


def test_no_batches_without_similar_steps(make_step, make_workflow):
    workflow = make_workflow(
        [make_step("a", "vibe", "Write poem"), make_step("b", "spec", "Write poem")]
    )
    assert apply_batching_strategy(workflow) == []


@pytest.mark.parametrize(
    "size,expected",
    [(2, 40), (3, 50), (4, 60), (5, 70), (12, 70)],
)
def test_batch_savings_grow_with_size_and_cap(size, expected):
    assert batch_savings_percentage(size) == expected
