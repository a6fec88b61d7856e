import pytest

from flowtrim.contracts import DataDependency, Workflow, WorkflowStep


@pytest.fixture
def make_step():
    def _make(
        step_id,
        type="processing",
        description=None,
        inputs=None,
        outputs=None,
        quota_cost=1,
    ):
        return WorkflowStep(
            id=step_id,
            type=type,
            description=description or f"Handle {step_id}",
            inputs=list(inputs or []),
            outputs=list(outputs or []),
            quota_cost=quota_cost,
        )

    return _make


@pytest.fixture
def make_workflow():
    def _make(steps, workflow_id="wf", complexity=5, data_flow=None):
        return Workflow(
            id=workflow_id,
            steps=steps,
            data_flow=data_flow or [],
            estimated_complexity=complexity,
        )

    return _make


@pytest.fixture
def chained_workflow(make_step, make_workflow):
    """Uniform steps linked by required data dependencies."""

    def _make(count, workflow_id="chain", **step_kwargs):
        steps = [
            make_step(
                f"s{i}",
                description=f"Transform record {i}",
                inputs=[f"r{i - 1}"],
                outputs=[f"r{i}"],
                **step_kwargs,
            )
            for i in range(1, count + 1)
        ]
        deps = [
            DataDependency(
                from_step=f"s{i}", to_step=f"s{i + 1}", data_type="record", required=True
            )
            for i in range(1, count)
        ]
        return make_workflow(steps, workflow_id=workflow_id, data_flow=deps)

    return _make
