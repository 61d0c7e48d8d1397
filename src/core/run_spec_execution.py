"""Shared run-spec execution engine for CLI and SDK workflows.

Steps arrive already validated, so execution only routes each typed step
to the matching client call and renders its result lines.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence

from core.constants import ALL_STAGES_ALIAS
from core.result_lines import format_result_lines
from core.run_spec import RunSpec, load_run_spec
from core.run_spec_steps import (
    AddModelsStep,
    AnalyzeStep,
    ClassifyGpusStep,
    ImportStep,
    MapModelsStep,
    NormalizeAppNamesStep,
    ProcessStep,
    RunSpecStep,
)
from core.types import (
    AppDetailsAnalysis,
    AppNameNormalizationResult,
    GpuClassificationSummary,
    ImportResult,
    ModelMapResult,
    StageResult,
)


class RunSpecClient(Protocol):
    """Client API contract required by run-spec execution."""

    def with_database_url(self, database_url: str) -> Any: ...

    def import_file(self, source_path: str) -> ImportResult: ...

    def process(self, stage: str) -> StageResult: ...

    def process_all(self) -> tuple[StageResult, ...]: ...

    def classify_gpus(self) -> GpuClassificationSummary: ...

    def normalize_app_names(self, mapping: Mapping[str, str]) -> AppNameNormalizationResult: ...

    def map_models(self) -> ModelMapResult: ...

    def analyze_app_details(self) -> AppDetailsAnalysis: ...

    def add_model_names(self, names: Sequence[str], base_model: str | None = None) -> int: ...


def execute_run_spec_file(client: RunSpecClient, spec_file: str) -> tuple[str, ...]:
    """Load and execute a run-spec file, returning printable output lines."""
    return execute_run_spec(client, load_run_spec(spec_file))


def execute_run_spec(client: RunSpecClient, spec: RunSpec) -> tuple[str, ...]:
    """Execute a validated run-spec and return output lines in step order."""
    if spec.database_url:
        client = client.with_database_url(spec.database_url)
    output_lines: list[str] = []
    for step in spec.steps:
        output_lines.extend(_execute_step(client, step))
    return tuple(output_lines)


def _execute_step(client: RunSpecClient, step: RunSpecStep) -> tuple[str, ...]:
    if isinstance(step, ImportStep):
        return format_result_lines(client.import_file(step.source))
    if isinstance(step, ProcessStep):
        if step.stage != ALL_STAGES_ALIAS:
            return format_result_lines(client.process(step.stage))
        return tuple(
            line for result in client.process_all() for line in format_result_lines(result)
        )
    if isinstance(step, ClassifyGpusStep):
        return format_result_lines(client.classify_gpus())
    if isinstance(step, NormalizeAppNamesStep):
        return format_result_lines(client.normalize_app_names(step.mapping))
    if isinstance(step, MapModelsStep):
        return format_result_lines(client.map_models())
    if isinstance(step, AnalyzeStep):
        return format_result_lines(client.analyze_app_details())
    if isinstance(step, AddModelsStep):
        inserted_count = client.add_model_names(step.names, base_model=step.base_model)
        return (f"inserted_count={inserted_count}",)
    raise TypeError(f"Unhandled run-spec step {type(step).__name__}.")
