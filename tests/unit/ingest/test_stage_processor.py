"""Unit tests for stage processors."""

from __future__ import annotations

import threading

import pytest
from sqlalchemy import select

from core.constants import STAGE_NAMES
from core.errors import BenchFieldParseError, BenchStoreError, BenchValidationError
from ingest import stage_processor
from ingest.stages import STAGE_DEFINITIONS, process_all_stages, process_stage
from store.run_store import count_rows
from store.schema import AppDetail, Library, PerformanceResult, RunMoreDetails, SystemInfo
from tests.fixture_paths import fixture_path

_IDENTITY_TEXT = "app: test updated: 2024-01-01 hash: abc123 url: https://example.com"


@pytest.mark.parametrize("stage", STAGE_NAMES)
def test_process_stage_second_call_inserts_nothing(bench_client, stage: str) -> None:
    """Re-running a stage without new runs should be a no-op."""
    bench_client.import_file(fixture_path("uploads/valid_runs.json"))
    target_model = STAGE_DEFINITIONS[stage].target_model

    process_stage(bench_client.database, stage)
    with bench_client.database.transaction() as session:
        rows_after_first = count_rows(session, target_model)
    second = process_stage(bench_client.database, stage)
    with bench_client.database.transaction() as session:
        rows_after_second = count_rows(session, target_model)

    assert second.rows_inserted == 0 and rows_after_first == rows_after_second


def test_process_stage_with_no_runs_returns_zero_counts(bench_client) -> None:
    """A stage over an empty store should succeed with zeros."""
    result = process_stage(bench_client.database, "gpu")

    assert (result.rows_scanned, result.rows_inserted, result.rows_failed) == (0, 0, 0)


def _failing_for_users(users: set[str]) -> stage_processor.StageDefinition:
    definition = STAGE_DEFINITIONS["run_details"]

    def _build_row(run):
        if run.user in users:
            raise BenchFieldParseError("user", f"rejected user '{run.user}'")
        return definition.build_row(run)

    return stage_processor.StageDefinition("run_details", RunMoreDetails, _build_row)


def test_process_stage_records_failures_and_continues(bench_client) -> None:
    """A run whose row cannot be built should be counted without blocking siblings."""
    bench_client.import_file(fixture_path("uploads/valid_runs.json"))

    result = stage_processor.run_stage(bench_client.database, _failing_for_users({"dave"}))

    assert (
        result.rows_scanned == 4
        and result.rows_inserted == 3
        and result.rows_failed == 1
        and result.errors[0].run_id == 4
        and "user" in result.errors[0].reason
    )


def test_process_stage_retries_failed_runs(bench_client) -> None:
    """Failed runs stay pending and are rescanned on the next call."""
    bench_client.import_file(fixture_path("uploads/valid_runs.json"))
    stage_processor.run_stage(bench_client.database, _failing_for_users({"dave"}))

    retry = stage_processor.run_stage(bench_client.database, _failing_for_users(set()))

    assert retry.rows_scanned == 1 and retry.rows_failed == 0 and retry.rows_inserted == 1


def test_process_stage_performance_skips_non_numeric_samples(bench_client) -> None:
    """Runs with non-numeric samples should still get a performance row."""
    bench_client.import_runs([{"vram_usage": "12.5/N/A"}, {"vram_usage": "invalid/nan/12.5"}])

    first = process_stage(bench_client.database, "performance")
    second = process_stage(bench_client.database, "performance")
    with bench_client.database.transaction() as session:
        averages = session.scalars(
            select(PerformanceResult.avg_its).order_by(PerformanceResult.id)
        ).all()

    assert (
        (first.rows_inserted, first.rows_failed) == (2, 0)
        and second.rows_scanned == 0
        and averages == [pytest.approx(12.5), pytest.approx(12.5)]
    )


def test_process_stage_free_text_field_inserts_null_row(bench_client) -> None:
    """A field without recognized keys should insert an all-null partial row."""
    bench_client.import_runs([{"info": "Test run 3"}])

    result = process_stage(bench_client.database, "app_details")
    with bench_client.database.transaction() as session:
        row = session.scalars(select(AppDetail)).one()

    assert (result.rows_inserted, result.rows_failed, result.rows_partial) == (1, 0, 1) and (
        row.app_name,
        row.url,
    ) == (None, None)


def test_process_stage_picks_up_new_runs_only(bench_client) -> None:
    """Runs imported after a stage run should be the only ones scanned."""
    bench_client.import_runs([{"info": _IDENTITY_TEXT}])
    process_stage(bench_client.database, "app_details")
    bench_client.import_runs([{"info": None}, {"info": "app: second"}])

    result = process_stage(bench_client.database, "app_details")

    assert result.rows_scanned == 2 and result.rows_inserted == 2


def test_process_stage_app_details_end_to_end(bench_client) -> None:
    """One identity record should produce one parsed AppDetail row."""
    bench_client.import_runs([{"info": _IDENTITY_TEXT}])

    process_stage(bench_client.database, "app_details")
    with bench_client.database.transaction() as session:
        rows = session.scalars(select(AppDetail)).all()

    assert len(rows) == 1 and (
        rows[0].app_name,
        rows[0].updated,
        rows[0].hash,
        rows[0].url,
    ) == ("test", "2024-01-01", "abc123", "https://example.com")


def test_process_stage_performance_stores_samples_and_average(bench_client) -> None:
    """Performance rows should keep raw samples and the average."""
    bench_client.import_runs([{"vram_usage": "10.1/NaN/9.9"}, {"vram_usage": "NaN"}])

    process_stage(bench_client.database, "performance")
    with bench_client.database.transaction() as session:
        rows = session.scalars(select(PerformanceResult).order_by(PerformanceResult.id)).all()

    assert (
        rows[0].its == "10.1/NaN/9.9"
        and rows[0].avg_its == pytest.approx(10.0)
        and rows[1].avg_its is None
    )


def test_process_stage_libraries_keeps_both_xformers_values(bench_client) -> None:
    """Library rows should store model-info and run-level xformers separately."""
    bench_client.import_runs(
        [{"model_info": "torch: 2.0.1 xformers: 0.0.20", "xformers": "disabled"}]
    )

    process_stage(bench_client.database, "libraries")
    with bench_client.database.transaction() as session:
        row = session.scalars(select(Library)).one()

    assert row.xformers == "0.0.20" and row.run_xformers == "disabled" and row.torch == "2.0.1"


def test_process_stage_partial_parse_inserts_row(bench_client) -> None:
    """Unrecognized keys should not prevent the row from being stored."""
    bench_client.import_runs([{"system_info": "arch: x86_64 gpu: none python: 3.10"}])

    result = process_stage(bench_client.database, "system_info")
    with bench_client.database.transaction() as session:
        row = session.scalars(select(SystemInfo)).one()

    assert (
        result.rows_inserted == 1
        and result.rows_partial == 1
        and row.arch == "x86_64"
        and row.python == "3.10"
    )


def test_process_stage_unknown_stage_raises(bench_client) -> None:
    """Unknown stage identifiers should be rejected."""
    with pytest.raises(BenchValidationError):
        process_stage(bench_client.database, "thermals")


def test_process_stage_storage_fault_commits_nothing(bench_client, monkeypatch) -> None:
    """A failing insert should roll back every row of the invocation."""
    bench_client.import_file(fixture_path("uploads/valid_runs.json"))
    definition = STAGE_DEFINITIONS["app_details"]

    def _broken_row(run):
        staged = definition.build_row(run)
        staged.row.run_id = 999_999
        return staged

    broken = stage_processor.StageDefinition("app_details", AppDetail, _broken_row)

    with pytest.raises(BenchStoreError):
        stage_processor.run_stage(bench_client.database, broken)
    with bench_client.database.transaction() as session:
        remaining = count_rows(session, AppDetail)

    assert remaining == 0


def test_process_stage_concurrent_calls_do_not_duplicate_rows(bench_client) -> None:
    """Concurrent invocations of one stage should serialize on the table."""
    bench_client.import_file(fixture_path("uploads/valid_runs.json"))
    results = []
    errors: list[Exception] = []

    def _worker() -> None:
        try:
            results.append(process_stage(bench_client.database, "gpu"))
        except Exception as error:
            errors.append(error)

    threads = [threading.Thread(target=_worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert not errors and sum(result.rows_inserted for result in results) == 4


def test_process_all_stages_runs_every_stage(bench_client) -> None:
    """Running all stages should return one result per stage in order."""
    bench_client.import_file(fixture_path("uploads/valid_runs.json"))

    results = process_all_stages(bench_client.database)

    assert (
        tuple(result.stage for result in results) == STAGE_NAMES
        and [result.rows_failed for result in results] == [0] * 6
        and [result.rows_partial for result in results] == [0, 0, 1, 0, 0, 0]
    )
