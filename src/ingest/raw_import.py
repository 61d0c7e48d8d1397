"""Raw batch import into the run store.

Import validates only the container shape. Individual records are kept
as uploaded; their text fields are parsed later by stage processors.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from core.constants import RAW_RUN_FIELDS
from core.errors import BenchImportError
from core.logging_config import get_logger
from core.types import ImportResult, RawRunRecord
from store.database import DatabaseManager
from store.run_store import insert_runs

_LOGGER = get_logger(__name__)


def import_runs(database: DatabaseManager, payload: Any) -> ImportResult:
    """Store every record of an upload in one transaction.

    Args:
        database: Target database.
        payload: Decoded upload, expected to be a list of objects.

    Returns:
        Imported and rejected counts.

    Raises:
        BenchImportError: If the payload is not a list.
        BenchStoreError: If the insert transaction fails.
    """
    if not isinstance(payload, list):
        raise BenchImportError(
            f"Invalid import payload: expected a JSON list of run records, "
            f"got {type(payload).__name__}. Wrap records in a list and retry import."
        )
    records: list[RawRunRecord] = []
    errors: list[str] = []
    for index, element in enumerate(payload):
        if not isinstance(element, Mapping):
            errors.append(
                f"element {index}: expected an object, got {type(element).__name__}"
            )
            continue
        records.append(build_raw_record(element))
    imported_count = 0
    if records:
        with database.transaction() as session:
            imported_count = insert_runs(session, records)
    _LOGGER.info(
        "runs_imported",
        imported_count=imported_count,
        rejected_count=len(errors),
    )
    return ImportResult(
        imported_count=imported_count,
        rejected_count=len(errors),
        errors=tuple(errors),
    )


def build_raw_record(element: Mapping[str, Any]) -> RawRunRecord:
    """Build a raw record from one upload object.

    Known fields are kept; unknown keys are ignored and missing ones
    become None.
    """
    values = {field_name: _coerce_field(element.get(field_name)) for field_name in RAW_RUN_FIELDS}
    return RawRunRecord(**values)


def _coerce_field(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True)
    return str(value)
