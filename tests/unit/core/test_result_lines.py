"""Unit tests for key=value result rendering."""

from __future__ import annotations

from core.result_lines import format_result_lines
from core.types import ImportResult, ModelMapResult, StageError, StageResult


def test_format_result_lines_renders_fields_in_order() -> None:
    """Scalar fields should render in declaration order."""
    lines = format_result_lines(ModelMapResult(updated_count=2, not_found_count=1))

    assert lines == ("updated_count=2", "not_found_count=1")


def test_format_result_lines_expands_tuple_fields() -> None:
    """Tuple fields should emit one line per element."""
    result = StageResult(
        stage="performance",
        rows_scanned=2,
        rows_inserted=1,
        rows_failed=1,
        rows_partial=0,
        errors=(StageError(run_id=7, reason="bad sample"),),
    )

    lines = format_result_lines(result)

    assert (
        lines[-1] == "errors=run_id:7 bad sample"
        and lines[-2] == "rows_partial=0"
        and lines[0] == "stage=performance"
    )


def test_format_result_lines_omits_empty_tuples() -> None:
    """Empty error tuples should produce no lines."""
    lines = format_result_lines(ImportResult(imported_count=3, rejected_count=0))

    assert lines == ("imported_count=3", "rejected_count=0")
