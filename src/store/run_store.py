"""Raw run store queries.

Runs are appended once during import and never updated. Stage processors
find their work through ``pending_runs``, an anti-join against one derived
table, so retries of previously failed runs happen without bookkeeping.
"""

from __future__ import annotations

from typing import Iterable

from sqlalchemy import exists, func, select
from sqlalchemy.orm import Session

from core.types import RawRunRecord
from store.schema import Run, RunDerivedRow


def insert_runs(session: Session, records: Iterable[RawRunRecord]) -> int:
    """Append raw runs to the store.

    Args:
        session: Open session inside a transaction.
        records: Raw records in upload order.

    Returns:
        Number of runs added.
    """
    runs = [
        Run(
            timestamp=record.timestamp,
            vram_usage=record.vram_usage,
            info=record.info,
            system_info=record.system_info,
            model_info=record.model_info,
            device_info=record.device_info,
            xformers=record.xformers,
            model_name=record.model_name,
            user=record.user,
            notes=record.notes,
        )
        for record in records
    ]
    session.add_all(runs)
    session.flush()
    return len(runs)


def count_runs(session: Session) -> int:
    """Return the number of stored runs."""
    return session.scalar(select(func.count()).select_from(Run)) or 0


def pending_runs(session: Session, target_model: type[RunDerivedRow]) -> list[Run]:
    """Return runs that have no row in a derived table yet.

    Args:
        session: Open session.
        target_model: Derived table model to anti-join against.

    Returns:
        Pending runs in ascending id order.
    """
    has_target_row = exists().where(target_model.run_id == Run.id)
    statement = select(Run).where(~has_target_row).order_by(Run.id)
    return list(session.scalars(statement))


def count_rows(session: Session, model: type[RunDerivedRow]) -> int:
    """Return the number of rows in a derived table."""
    return session.scalar(select(func.count()).select_from(model)) or 0
