import pytest

from flowtrim.contracts import ConsultingAnalysis
from flowtrim.optimizer.adapter import convert_analysis_to_issues


@pytest.fixture
def workflow(make_step, make_workflow):
    return make_workflow(
        [
            make_step("gen", "vibe", "Generate vibe summary", quota_cost=20),
            make_step("query", "data_retrieval", "Query user database", quota_cost=5),
            make_step("fmt", "processing", "Format output", quota_cost=1),
        ]
    )


def test_mece_categories_above_threshold_become_issues(workflow):
    analysis = {
        "meceAnalysis": {
            "categories": [
                {"name": "Vibe Operations", "drivers": ["Generate text"], "optimizationPotential": 70},
                {"name": "Data Queries", "drivers": ["Query calls"], "optimizationPotential": 40},
                {"name": "Formatting", "drivers": ["Format"], "optimizationPotential": 30},
            ]
        }
    }

    issues = convert_analysis_to_issues(analysis, workflow)

    assert [(i.type, i.severity, i.steps_affected) for i in issues] == [
        ("unnecessary_vibes", "high", ["gen"]),
        ("redundant_query", "medium", ["query"]),
    ]
    assert "High optimization potential in Vibe Operations" in issues[0].description
    assert issues[0].suggested_fix == "Optimize Vibe Operations operations through spec conversion"


def test_value_drivers_above_threshold_become_issues(workflow):
    analysis = ConsultingAnalysis.model_validate(
        {
            "valueDriverAnalysis": {
                "primaryDrivers": [
                    {"name": "Query costs", "currentCost": 50, "optimizedCost": 10, "savingsPotential": 45},
                    {"name": "Vibe generation", "savingsPotential": 25},
                    {"name": "Formatting", "savingsPotential": 20},
                ]
            }
        }
    )

    issues = convert_analysis_to_issues(analysis, workflow)

    assert [(i.type, i.severity, i.steps_affected) for i in issues] == [
        ("missing_cache", "high", ["query"]),
        ("unnecessary_vibes", "medium", ["gen"]),
    ]


def test_zero_based_solution_covers_every_step(workflow):
    analysis = {
        "zeroBasedSolution": {
            "radicalApproach": "Replace the pipeline with a template",
            "potentialSavings": 45,
        }
    }

    [issue] = convert_analysis_to_issues(analysis, workflow)

    assert issue.type == "unnecessary_vibes"
    assert issue.severity == "high"
    assert issue.suggested_fix == "Replace the pipeline with a template"
    assert issue.steps_affected == ["gen", "query", "fmt"]


def test_empty_analysis_yields_generic_issue(workflow):
    [issue] = convert_analysis_to_issues({}, workflow)

    assert issue.type == "redundant_query"
    assert issue.severity == "medium"
    assert issue.steps_affected == ["gen", "query", "fmt"]
