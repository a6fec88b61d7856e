"""Loading workflow documents for the CLI."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Optional

import yaml

from ..contracts import ConsultingAnalysis, EfficiencyIssue, OptimizationParams


def load_document(path: Path) -> Any:
    """Parse a JSON or YAML file; the suffix decides, YAML being the default."""
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return json.loads(text)
    return yaml.safe_load(text)


def load_workflow(path: Path) -> dict:
    data = load_document(path)
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a workflow mapping")
    return data


def load_issues(path: Path) -> List[EfficiencyIssue]:
    data = load_document(path) or []
    if not isinstance(data, list):
        raise ValueError(f"{path} does not contain a list of issues")
    return [EfficiencyIssue.model_validate(item) for item in data]


def load_analysis(path: Path) -> ConsultingAnalysis:
    return ConsultingAnalysis.model_validate(load_document(path) or {})


def load_params(path: Optional[Path]) -> Optional[OptimizationParams]:
    if path is None:
        return None
    return OptimizationParams.model_validate(load_document(path) or {})
