"""Core data contracts for the flowtrim optimization engine."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

StepType = Literal["vibe", "spec", "data_retrieval", "processing", "analysis"]
IssueType = Literal[
    "redundant_query", "excessive_loops", "unnecessary_vibes", "missing_cache"
]
OptimizationType = Literal["batching", "caching", "decomposition", "vibe_to_spec"]
Severity = Literal["low", "medium", "high"]

STEP_TYPES: tuple[str, ...] = (
    "vibe",
    "spec",
    "data_retrieval",
    "processing",
    "analysis",
)


class FlowModel(BaseModel):
    """Base model accepting both snake_case and camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        """Dump using the camelCase names exchanged with other pipeline stages."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class WorkflowStep(FlowModel):
    """A single unit of work with its quota cost."""

    id: str
    type: StepType
    description: str
    inputs: List[str] = Field(default_factory=list)
    outputs: List[str] = Field(default_factory=list)
    quota_cost: float = 0


class DataDependency(FlowModel):
    """Directed data edge between two steps."""

    from_step: str = Field(alias="from")
    to_step: str = Field(alias="to")
    data_type: str = ""
    required: bool = False


class Workflow(FlowModel):
    """Ordered collection of steps plus their data flow."""

    id: str
    steps: List[WorkflowStep] = Field(default_factory=list)
    data_flow: List[DataDependency] = Field(default_factory=list)
    estimated_complexity: float = 0

    def step_ids(self) -> List[str]:
        return [step.id for step in self.steps]

    def total_quota_cost(self) -> float:
        return sum(step.quota_cost for step in self.steps)


class EfficiencyIssue(FlowModel):
    """Externally reported inefficiency covering one or more steps."""

    type: str
    severity: str = "medium"
    description: str = ""
    suggested_fix: str = ""
    steps_affected: List[str] = Field(default_factory=list)


class EstimatedSavings(FlowModel):
    vibes: float = 0
    specs: float = 0
    percentage: float = Field(default=0, ge=0, le=100)


class Optimization(FlowModel):
    """Candidate transformation with its estimated savings."""

    type: OptimizationType
    description: str
    steps_affected: List[str] = Field(default_factory=list)
    estimated_savings: EstimatedSavings = Field(default_factory=EstimatedSavings)

    def dedup_key(self) -> str:
        """Identity used during consolidation: type plus sorted step ids."""
        return f"{self.type}-{','.join(sorted(self.steps_affected))}"


class BatchedOperation(FlowModel):
    """Cluster of similar steps that can run as one call."""

    id: str
    original_operations: List[str]
    type: str
    description: str
    batch_size: int = Field(ge=2)
    estimated_savings: int = Field(ge=0, le=100)


class CachePoint(FlowModel):
    step_id: str
    cache_key: str
    ttl: Optional[int] = None
    estimated_hit_rate: float = Field(ge=0, le=0.9)


class CachedWorkflow(Workflow):
    """Workflow annotated with the steps whose results may be reused."""

    cache_points: List[CachePoint] = Field(default_factory=list)
    estimated_hit_rate: float = 0


class SpecDefinition(FlowModel):
    """Contiguous slice of a workflow packaged as its own specification."""

    id: str
    name: str
    description: str
    steps: List[str]
    estimated_quota_cost: float


class EfficiencySavings(FlowModel):
    vibe_reduction: float = 0
    spec_reduction: float = 0
    cost_savings: float = 0
    total_savings_percentage: float = 0


class OptimizedWorkflow(Workflow):
    """Transformed workflow that keeps a reference to its source."""

    optimizations: List[Optimization] = Field(default_factory=list)
    original_workflow: Workflow
    efficiency_gains: EfficiencySavings = Field(default_factory=EfficiencySavings)


class CostConstraints(FlowModel):
    max_vibes: Optional[float] = None
    max_specs: Optional[float] = None
    max_cost_dollars: Optional[float] = None

    def is_tight(self) -> bool:
        return (
            (self.max_vibes is not None and self.max_vibes < 20)
            or (self.max_specs is not None and self.max_specs < 5)
            or (self.max_cost_dollars is not None and self.max_cost_dollars < 10)
        )


class OptimizationParams(FlowModel):
    """Optional tuning knobs supplied by the caller."""

    expected_user_volume: Optional[float] = None
    cost_constraints: Optional[CostConstraints] = None
    performance_sensitivity: Optional[Severity] = None


# ---------------------------------------------------------------------------
# Consulting analysis input accepted by the analysis adapter


class QuotaDriverCategory(FlowModel):
    name: str
    drivers: List[str] = Field(default_factory=list)
    quota_impact: float = 0
    optimization_potential: float = 0


class MECEAnalysis(FlowModel):
    categories: List[QuotaDriverCategory] = Field(default_factory=list)
    total_coverage: float = 0
    overlaps: List[str] = Field(default_factory=list)


class ValueDriver(FlowModel):
    name: str
    current_cost: float = 0
    optimized_cost: float = 0
    savings_potential: float = 0


class ValueDriverAnalysis(FlowModel):
    primary_drivers: List[ValueDriver] = Field(default_factory=list)
    secondary_drivers: List[ValueDriver] = Field(default_factory=list)
    root_causes: List[str] = Field(default_factory=list)


class ZeroBasedSolution(FlowModel):
    radical_approach: str = ""
    assumptions_challenged: List[str] = Field(default_factory=list)
    potential_savings: float = 0
    implementation_risk: Severity = "medium"


class ConsultingAnalysis(FlowModel):
    """Higher-level analysis produced by the consulting technique stage."""

    mece_analysis: Optional[MECEAnalysis] = None
    value_driver_analysis: Optional[ValueDriverAnalysis] = None
    zero_based_solution: Optional[ZeroBasedSolution] = None
