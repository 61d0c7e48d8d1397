"""Unit tests for run-spec parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import BenchRunSpecError
from core.run_spec import load_run_spec
from core.run_spec_steps import AddModelsStep, ImportStep, NormalizeAppNamesStep, ProcessStep
from tests.fixture_paths import fixture_path


def _write_spec(tmp_path: Path, steps: str) -> str:
    spec_file = tmp_path / "spec.yaml"
    spec_file.write_text(f"version: 1\nsteps:\n{steps}", encoding="utf-8")
    return str(spec_file)


def test_load_run_spec_valid_pipeline_parses_steps() -> None:
    """Valid run-spec should parse expected command order."""
    spec = load_run_spec(str(fixture_path("run_spec/valid_pipeline.yaml")))

    assert tuple(step.command for step in spec.steps) == (
        "import",
        "process",
        "normalize-app-names",
        "analyze",
    )


def test_load_run_spec_builds_typed_steps() -> None:
    """Step arguments should be carried on typed step objects."""
    spec = load_run_spec(str(fixture_path("run_spec/valid_pipeline.yaml")))

    assert (
        spec.steps[0] == ImportStep(source="tests/fixtures/uploads/valid_runs.json")
        and spec.steps[1] == ProcessStep(stage="app_details")
        and isinstance(spec.steps[2], NormalizeAppNamesStep)
        and spec.steps[2].mapping["vladmandic"] == "SD.Next"
    )


def test_load_run_spec_process_defaults_to_all_stages() -> None:
    """A process step without a stage should run every stage."""
    spec = load_run_spec(str(fixture_path("run_spec/full_pipeline.yaml")))

    assert spec.steps[0] == AddModelsStep(names=("v1-5-pruned-emaonly", "sdxl-base-1.0")) and (
        spec.steps[2] == ProcessStep(stage="all")
    )


def test_load_run_spec_invalid_command_raises_error() -> None:
    """Unsupported command name should raise run-spec error."""
    with pytest.raises(BenchRunSpecError):
        load_run_spec(str(fixture_path("run_spec/invalid_command.yaml")))


def test_load_run_spec_invalid_defaults_key_raises_error() -> None:
    """Unknown defaults field should be rejected."""
    with pytest.raises(BenchRunSpecError):
        load_run_spec(str(fixture_path("run_spec/invalid_defaults_key.yaml")))


@pytest.mark.parametrize(
    ("fixture_name", "message_part"),
    [("missing_source.yaml", "source"), ("incomplete_mapping.yaml", "vladmandic")],
)
def test_load_run_spec_rejects_incomplete_steps(fixture_name: str, message_part: str) -> None:
    """Missing step arguments should fail at load time."""
    with pytest.raises(BenchRunSpecError) as error_info:
        load_run_spec(str(fixture_path(f"run_spec/{fixture_name}")))

    assert message_part in str(error_info.value)


@pytest.mark.parametrize(
    "steps",
    [
        "  - command: process\n    stage: thermals\n",
        "  - command: import\n    source: runs.json\n    stage: gpu\n",
        "  - command: add-models\n    names: []\n",
        "  - command: analyze\n    verbose: true\n",
        "  - command: import\n    source: 12\n",
    ],
)
def test_load_run_spec_rejects_invalid_step_args(tmp_path: Path, steps: str) -> None:
    """Unknown stages, stray fields, and mistyped values should be rejected."""
    with pytest.raises(BenchRunSpecError):
        load_run_spec(_write_spec(tmp_path, steps))


def test_load_run_spec_reports_failing_step_position(tmp_path: Path) -> None:
    """Errors should name the step that failed validation."""
    spec_path = _write_spec(
        tmp_path,
        "  - command: analyze\n  - command: process\n    stage: thermals\n",
    )

    with pytest.raises(BenchRunSpecError) as error_info:
        load_run_spec(spec_path)

    assert "step #2" in str(error_info.value) and "thermals" in str(error_info.value)


def test_load_run_spec_reads_database_url_default(tmp_path: Path) -> None:
    """Defaults should carry the database URL."""
    spec_file = tmp_path / "spec.yaml"
    spec_file.write_text(
        "version: 1\ndefaults:\n  database_url: sqlite:///x.db\nsteps:\n  - command: analyze\n",
        encoding="utf-8",
    )

    spec = load_run_spec(str(spec_file))

    assert spec.database_url == "sqlite:///x.db"


@pytest.mark.parametrize(
    "content",
    [
        "version: 2\nsteps:\n  - command: analyze\n",
        "version: true\nsteps:\n  - command: analyze\n",
        "version: 1\nsteps: []\n",
        "version: 1\nsteps:\n  - analyze\n",
        "version: 1\nname: demo\nsteps:\n  - command: analyze\n",
        "[unclosed\n",
        "",
    ],
)
def test_load_run_spec_rejects_invalid_documents(tmp_path: Path, content: str) -> None:
    """Bad versions, bad steps, unknown root fields, YAML errors, and empty files should fail."""
    spec_file = tmp_path / "spec.yaml"
    spec_file.write_text(content, encoding="utf-8")

    with pytest.raises(BenchRunSpecError):
        load_run_spec(str(spec_file))


def test_load_run_spec_missing_file_raises(tmp_path: Path) -> None:
    """A missing file should raise a run-spec error."""
    with pytest.raises(BenchRunSpecError):
        load_run_spec(str(tmp_path / "absent.yaml"))
