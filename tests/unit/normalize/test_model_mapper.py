"""Unit tests for the model mapper pass."""

from __future__ import annotations

from sqlalchemy import select

from normalize.model_mapper import map_models
from store.schema import ModelMap, RunMoreDetails
from tests.fixture_paths import fixture_path


def _links(bench_client) -> list[int | None]:
    with bench_client.database.transaction() as session:
        return list(
            session.scalars(select(RunMoreDetails.model_map_id).order_by(RunMoreDetails.id))
        )


def test_map_models_links_exact_matches(bench_client) -> None:
    """Exact names should link and everything else counts as not found."""
    bench_client.add_model_names(["v1-5-pruned-emaonly", "sdxl-base-1.0"])
    bench_client.import_file(fixture_path("uploads/valid_runs.json"))
    bench_client.process("run_details")

    result = map_models(bench_client.database)
    links = _links(bench_client)

    assert (result.updated_count, result.not_found_count) == (2, 2) and links[2:] == [
        None,
        None,
    ] and None not in links[:2]


def test_map_models_never_changes_existing_links(bench_client) -> None:
    """Re-running after dictionary changes should leave links untouched."""
    bench_client.add_model_names(["v1-5-pruned-emaonly"])
    bench_client.import_file(fixture_path("uploads/valid_runs.json"))
    bench_client.process("run_details")
    map_models(bench_client.database)
    before = _links(bench_client)
    with bench_client.database.transaction() as session:
        session.add(ModelMap(model_name="v1-5-pruned-emaonly"))

    second = map_models(bench_client.database)
    after = _links(bench_client)

    assert second.updated_count == 0 and after[0] == before[0] and after[0] is not None


def test_map_models_links_late_dictionary_entries(bench_client) -> None:
    """Rows left unlinked should link once their name is added."""
    bench_client.import_file(fixture_path("uploads/valid_runs.json"))
    bench_client.process("run_details")
    first = map_models(bench_client.database)
    bench_client.add_model_names(["unlisted-model"])

    second = map_models(bench_client.database)

    assert first.updated_count == 0 and second.updated_count == 1 and second.not_found_count == 3
