"""Simple example showing a workflow run through the optimizer."""

import asyncio

from flowtrim import EfficiencyIssue, Workflow, WorkflowOptimizer, WorkflowStep


async def main():
    """Optimize a small reporting workflow."""
    workflow = Workflow(
        id="monthly-report",
        estimated_complexity=4,
        steps=[
            WorkflowStep(
                id="fetch-users",
                type="data_retrieval",
                description="Fetch user data",
                inputs=["userId"],
                outputs=["user"],
                quota_cost=5,
            ),
            WorkflowStep(
                id="summarize",
                type="vibe",
                description="Summarize user activity",
                inputs=["user"],
                outputs=["summary"],
                quota_cost=20,
            ),
            WorkflowStep(
                id="render",
                type="processing",
                description="Format report",
                inputs=["summary"],
                outputs=["report"],
                quota_cost=2,
            ),
        ],
    )
    issues = [
        EfficiencyIssue(
            type="unnecessary_vibes",
            severity="high",
            description="Summary follows a fixed template",
            steps_affected=["summarize"],
        )
    ]

    optimizer = WorkflowOptimizer()
    optimized = await optimizer.optimize_workflow(workflow, issues)

    print(f"Optimized workflow: {optimized.id}")
    for optimization in optimized.optimizations:
        print(f"- {optimization.type}: {optimization.description}")
    gains = optimized.efficiency_gains
    print(f"Total savings: {gains.total_savings_percentage}% ({gains.cost_savings} quota)")


if __name__ == "__main__":
    asyncio.run(main())
