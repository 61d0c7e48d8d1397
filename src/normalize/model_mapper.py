"""Model-name linkage pass.

Unlinked RunMoreDetails rows are matched by exact model name against the
model dictionary. Linked rows are never revisited, so a link, once set,
is permanent.
"""

from __future__ import annotations

from sqlalchemy import select

from core.logging_config import get_logger
from core.types import ModelMapResult
from store.database import DatabaseManager
from store.dictionaries import find_model_id
from store.schema import RunMoreDetails

_LOGGER = get_logger(__name__)


def map_models(database: DatabaseManager) -> ModelMapResult:
    """Link unlinked runs to model dictionary entries.

    Args:
        database: Target database.

    Returns:
        Linked and not-found counts.

    Raises:
        BenchStoreError: If the update transaction fails.
    """
    updated_count = 0
    not_found_count = 0
    with database.transaction() as session:
        statement = (
            select(RunMoreDetails)
            .where(RunMoreDetails.model_map_id.is_(None))
            .order_by(RunMoreDetails.id)
        )
        for details in session.scalars(statement).all():
            model_id = find_model_id(session, details.model_name)
            if model_id is None:
                not_found_count += 1
                continue
            details.model_map_id = model_id
            updated_count += 1
    _LOGGER.info("models_mapped", updated_count=updated_count, not_found_count=not_found_count)
    return ModelMapResult(updated_count=updated_count, not_found_count=not_found_count)
