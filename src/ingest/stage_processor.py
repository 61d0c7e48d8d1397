"""Idempotent stage processing framework.

A stage scans runs that lack a row in its target table, parses each one,
and inserts every successful row in a single transaction. Runs whose row
cannot be built are counted per run and retried on the next invocation
because the run still has no target row. The scan and insert run under a
per-table lock so concurrent invocations of the same stage cannot both
claim a run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from core.errors import BenchFieldParseError
from core.logging_config import get_logger
from core.types import StageError, StageName, StageResult
from store.database import DatabaseManager
from store.run_store import pending_runs
from store.schema import Run, RunDerivedRow
from store.table_locks import table_lock

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class StagedRow:
    """Derived row ready to insert plus tokens the parser could not place."""

    row: RunDerivedRow
    unparsed: tuple[str, ...] = ()


@dataclass(frozen=True)
class StageDefinition:
    """Binding of a stage name to its target table and row builder.

    Attributes:
        name: Stage identifier.
        target_model: Derived table populated by the stage.
        build_row: Builds one derived row from a run. Raises
            BenchFieldParseError when the run's field is malformed.
    """

    name: StageName
    target_model: type[RunDerivedRow]
    build_row: Callable[[Run], StagedRow]


def run_stage(database: DatabaseManager, definition: StageDefinition) -> StageResult:
    """Populate a derived table for every run still missing a row.

    Args:
        database: Target database.
        definition: Stage to execute.

    Returns:
        Scan, insert, failure, and partial-parse counts for this invocation.

    Raises:
        BenchStoreError: If the scan or insert transaction fails. Nothing
            from the invocation is committed in that case.
    """
    table_name = definition.target_model.__tablename__
    errors: list[StageError] = []
    inserted_count = 0
    partial_count = 0
    with table_lock(database.database_url, table_name):
        with database.transaction() as session:
            runs = pending_runs(session, definition.target_model)
            for run in runs:
                staged = _build_staged_row(definition, run, errors)
                if staged is None:
                    continue
                session.add(staged.row)
                inserted_count += 1
                if staged.unparsed:
                    partial_count += 1
            session.flush()
    result = StageResult(
        stage=definition.name,
        rows_scanned=len(runs),
        rows_inserted=inserted_count,
        rows_failed=len(errors),
        rows_partial=partial_count,
        errors=tuple(errors),
    )
    _LOGGER.info(
        "stage_completed",
        stage=result.stage,
        table=table_name,
        rows_scanned=result.rows_scanned,
        rows_inserted=result.rows_inserted,
        rows_failed=result.rows_failed,
        rows_partial=result.rows_partial,
    )
    return result


def _build_staged_row(
    definition: StageDefinition,
    run: Run,
    errors: list[StageError],
) -> StagedRow | None:
    """Build one row, recording parse failures instead of raising."""
    try:
        staged = definition.build_row(run)
    except BenchFieldParseError as error:
        errors.append(StageError(run_id=run.id, reason=str(error)))
        _LOGGER.warning(
            "stage_row_failed",
            stage=definition.name,
            run_id=run.id,
            field_name=error.field_name,
            reason=error.reason,
        )
        return None
    if staged.unparsed:
        _LOGGER.info(
            "stage_partial_parse",
            stage=definition.name,
            run_id=run.id,
            unparsed=" ".join(staged.unparsed),
        )
    return staged
