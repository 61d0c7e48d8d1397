"""Integration tests for the full ingestion and normalization workflow."""

from __future__ import annotations

import pytest
from sqlalchemy import select

from core.types import GpuBrand, LaptopState
from store.bench_sdk import BenchClient
from store.schema import Gpu, Library, PerformanceResult, RunMoreDetails
from tests.fixture_paths import fixture_path


def test_pipeline_import_process_classify_and_map(bench_config) -> None:
    """End-to-end flow should derive, classify, and link every run."""
    client = BenchClient(bench_config)
    client.add_model_names(["v1-5-pruned-emaonly", "sdxl-base-1.0"])

    imported = client.import_file(fixture_path("uploads/valid_runs.json"))
    stage_results = client.process_all()
    summary = client.classify_gpus()
    mapping = client.map_models()
    with client.database.transaction() as session:
        gpus = session.scalars(select(Gpu).order_by(Gpu.id)).all()
        averages = session.scalars(
            select(PerformanceResult.avg_its).order_by(PerformanceResult.id)
        ).all()
        libraries = session.scalars(select(Library).order_by(Library.id)).all()
        linked = session.scalars(
            select(RunMoreDetails.model_map_id).where(RunMoreDetails.model_map_id.is_not(None))
        ).all()

    assert (
        imported.imported_count == 4
        and sum(result.rows_inserted for result in stage_results) == 24
        and summary.laptop_count == 1
        and [gpu.brand for gpu in gpus]
        == [GpuBrand.NVIDIA, GpuBrand.NVIDIA, GpuBrand.AMD, GpuBrand.INTEL]
        and gpus[1].laptop is LaptopState.LAPTOP
        and averages[0] == pytest.approx(10.0)
        and averages[1] is None
        and averages[2] == pytest.approx(22.0)
        and averages[3] == pytest.approx(12.5)
        and libraries[2].run_xformers == "none"
        and libraries[2].xformers is None
        and mapping.updated_count == 2
        and len(linked) == 2
    )


def test_pipeline_reprocessing_is_idempotent(bench_config) -> None:
    """A second full pass should scan and insert nothing."""
    client = BenchClient(bench_config)
    client.import_file(fixture_path("uploads/valid_runs.json"))
    client.process_all()

    second = client.process_all()

    assert [result.rows_inserted for result in second] == [0] * 6 and [
        result.rows_scanned for result in second
    ] == [0] * 6


def test_pipeline_run_spec_uses_database_default(tmp_path, bench_config) -> None:
    """Run-spec defaults should redirect steps to another database."""
    other_url = f"sqlite:///{tmp_path / 'other.db'}"
    spec_file = tmp_path / "spec.yaml"
    spec_file.write_text(
        "version: 1\n"
        f"defaults:\n  database_url: {other_url}\n"
        "steps:\n"
        "  - command: import\n"
        f"    source: {fixture_path('uploads/valid_runs.json')}\n",
        encoding="utf-8",
    )
    client = BenchClient(bench_config)

    lines = client.run_spec(str(spec_file))

    assert lines[0] == "imported_count=4" and client.run_count() == 0 and (
        client.with_database_url(other_url).run_count() == 4
    )
