"""Stage definitions for each derived table."""

from __future__ import annotations

from core.constants import ALL_STAGES_ALIAS, STAGE_NAMES
from core.errors import BenchValidationError
from core.types import StageName, StageResult
from ingest.stage_processor import StageDefinition, StagedRow, run_stage
from store.database import DatabaseManager
from store.schema import (
    AppDetail,
    Gpu,
    Library,
    PerformanceResult,
    Run,
    RunMoreDetails,
    SystemInfo,
)
from transforms.field_parsers import (
    parse_app_details,
    parse_device,
    parse_libraries,
    parse_performance,
    parse_system_info,
)


def _build_performance_row(run: Run) -> StagedRow:
    parsed = parse_performance(run.vram_usage)
    return StagedRow(
        row=PerformanceResult(run_id=run.id, its=parsed.raw_samples, avg_its=parsed.average)
    )


def _build_app_details_row(run: Run) -> StagedRow:
    parsed = parse_app_details(run.info)
    row = AppDetail(
        run_id=run.id,
        app_name=parsed.app_name,
        updated=parsed.updated,
        hash=parsed.hash,
        url=parsed.url,
    )
    return StagedRow(row=row, unparsed=parsed.unparsed)


def _build_system_info_row(run: Run) -> StagedRow:
    parsed = parse_system_info(run.system_info)
    row = SystemInfo(
        run_id=run.id,
        arch=parsed.arch,
        cpu=parsed.cpu,
        system=parsed.system,
        release=parsed.release,
        python=parsed.python,
    )
    return StagedRow(row=row, unparsed=parsed.unparsed)


def _build_libraries_row(run: Run) -> StagedRow:
    parsed = parse_libraries(run.model_info)
    row = Library(
        run_id=run.id,
        torch=parsed.torch,
        xformers=parsed.xformers,
        run_xformers=run.xformers,
        diffusers=parsed.diffusers,
        transformers=parsed.transformers,
    )
    return StagedRow(row=row, unparsed=parsed.unparsed)


def _build_gpu_row(run: Run) -> StagedRow:
    parsed = parse_device(run.device_info)
    row = Gpu(
        run_id=run.id,
        device=parsed.device,
        driver=parsed.driver,
        gpu_chip=parsed.gpu_chip,
    )
    return StagedRow(row=row, unparsed=parsed.unparsed)


def _build_run_details_row(run: Run) -> StagedRow:
    row = RunMoreDetails(
        run_id=run.id,
        timestamp=run.timestamp,
        model_name=run.model_name,
        user=run.user,
        notes=run.notes,
    )
    return StagedRow(row=row)


STAGE_DEFINITIONS: dict[str, StageDefinition] = {
    "performance": StageDefinition("performance", PerformanceResult, _build_performance_row),
    "app_details": StageDefinition("app_details", AppDetail, _build_app_details_row),
    "system_info": StageDefinition("system_info", SystemInfo, _build_system_info_row),
    "libraries": StageDefinition("libraries", Library, _build_libraries_row),
    "gpu": StageDefinition("gpu", Gpu, _build_gpu_row),
    "run_details": StageDefinition("run_details", RunMoreDetails, _build_run_details_row),
}


def resolve_stage(stage: str) -> StageDefinition:
    """Return the definition for a stage identifier.

    Raises:
        BenchValidationError: If the stage is unknown.
    """
    definition = STAGE_DEFINITIONS.get(stage)
    if definition is None:
        raise BenchValidationError(
            f"Unknown stage '{stage}'. Use one of: {', '.join(STAGE_NAMES)}, "
            f"or '{ALL_STAGES_ALIAS}'."
        )
    return definition


def process_stage(database: DatabaseManager, stage: StageName | str) -> StageResult:
    """Run one named stage processor."""
    return run_stage(database, resolve_stage(stage))


def process_all_stages(database: DatabaseManager) -> tuple[StageResult, ...]:
    """Run every stage processor in declaration order."""
    return tuple(run_stage(database, STAGE_DEFINITIONS[name]) for name in STAGE_NAMES)
