"""Command line interface for the flowtrim optimizer."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

import typer
import yaml
from pydantic import ValidationError

from flowtrim.cli_utils.files import (
    load_analysis,
    load_issues,
    load_params,
    load_workflow,
)
from flowtrim.config import FlowtrimConfig, load_config
from flowtrim.errors import (
    OptimizationError,
    WorkflowValidationError,
    fallback_optimized_workflow,
)
from flowtrim.optimizer import (
    apply_batching_strategy,
    break_into_specs,
    identify_optimization_opportunities,
    implement_caching_layer,
    optimize_workflow,
    optimize_workflow_from_analysis,
)
from flowtrim.validation import coerce_workflow

app = typer.Typer(help="Optimize quota-costed workflows")

T = TypeVar("T")


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None, help="Path to a flowtrim.yaml configuration file"
    ),
) -> None:
    """Flowtrim CLI entry point."""
    try:
        settings = load_config(str(config) if config else None)
    except (ValidationError, yaml.YAMLError) as exc:
        typer.secho(f"Invalid configuration: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    logging.basicConfig(level=settings.log_level)
    ctx.obj = settings


def _settings(ctx: typer.Context) -> FlowtrimConfig:
    return ctx.obj if isinstance(ctx.obj, FlowtrimConfig) else FlowtrimConfig()


def _read(loader: Callable[[Path], T], path: Path) -> T:
    try:
        return loader(path)
    except FileNotFoundError:
        typer.secho(f"File not found: {path}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    except (ValueError, yaml.YAMLError) as exc:
        typer.secho(f"Could not read {path}: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1)


def _workflow(path: Path):
    try:
        return coerce_workflow(_read(load_workflow, path))
    except WorkflowValidationError as exc:
        typer.secho(f"Invalid workflow: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1)


def _emit(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2))


@app.command("optimize")
def optimize(
    ctx: typer.Context,
    workflow_path: Path,
    issues: Optional[Path] = typer.Option(None, help="YAML/JSON list of efficiency issues"),
    analysis: Optional[Path] = typer.Option(None, help="YAML/JSON consulting analysis"),
    params: Optional[Path] = typer.Option(None, help="YAML/JSON tuning parameters"),
    fallback: bool = typer.Option(
        False, help="Print the minimal fallback result instead of failing"
    ),
) -> None:
    """
    Optimize a workflow and print the optimized workflow as JSON.

    Issues and analysis are mutually exclusive; with neither, only
    pattern-driven optimizations are applied.

    Example:
        flowtrim optimize workflow.yaml --issues issues.yaml
        flowtrim optimize workflow.json --analysis analysis.json --params params.yaml
    """
    if issues is not None and analysis is not None:
        typer.secho("Use either --issues or --analysis, not both", fg=typer.colors.RED)
        raise typer.Exit(code=2)

    settings = _settings(ctx)
    raw = _read(load_workflow, workflow_path)
    tuning = _read(load_params, params) if params is not None else None

    try:
        if analysis is not None:
            result = optimize_workflow_from_analysis(
                raw, _read(load_analysis, analysis), tuning, settings
            )
        else:
            found = _read(load_issues, issues) if issues is not None else []
            result = optimize_workflow(raw, found, tuning, settings)
    except OptimizationError as exc:
        if not fallback:
            typer.secho(str(exc), fg=typer.colors.RED)
            typer.secho(exc.suggested_action, fg=typer.colors.YELLOW)
            raise typer.Exit(code=1)
        try:
            result = fallback_optimized_workflow(coerce_workflow(raw), exc)
        except WorkflowValidationError as invalid:
            typer.secho(f"Invalid workflow: {invalid}", fg=typer.colors.RED)
            raise typer.Exit(code=1)

    _emit(result.to_wire())


@app.command("opportunities")
def opportunities(
    workflow_path: Path,
    issues: Optional[Path] = typer.Option(None, help="YAML/JSON list of efficiency issues"),
    params: Optional[Path] = typer.Option(None, help="YAML/JSON tuning parameters"),
) -> None:
    """List the consolidated optimization candidates for a workflow."""
    workflow = _workflow(workflow_path)
    found = _read(load_issues, issues) if issues is not None else []
    tuning = _read(load_params, params) if params is not None else None
    candidates = identify_optimization_opportunities(workflow, found, tuning)
    _emit([candidate.to_wire() for candidate in candidates])


@app.command("batch")
def batch(workflow_path: Path) -> None:
    """Print the batchable step groups of a workflow."""
    workflow = _workflow(workflow_path)
    _emit([operation.to_wire() for operation in apply_batching_strategy(workflow)])


@app.command("cache")
def cache(workflow_path: Path) -> None:
    """Print the workflow annotated with cache points."""
    _emit(implement_caching_layer(_workflow(workflow_path)).to_wire())


@app.command("decompose")
def decompose(ctx: typer.Context, workflow_path: Path) -> None:
    """Split a workflow into smaller specs."""
    workflow = _workflow(workflow_path)
    specs = break_into_specs(workflow, _settings(ctx).decomposition)
    _emit([spec.to_wire() for spec in specs])


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    app()
