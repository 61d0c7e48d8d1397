"""Model and GPU dictionary maintenance.

ModelMap holds known model names; GpuBase holds canonical GPUs and GpuMap
maps raw GPU names onto them. Lookups use exact string equality.
"""

from __future__ import annotations

from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.errors import BenchValidationError
from store.schema import GpuBase, GpuMap, ModelMap


def find_model_id(session: Session, model_name: str | None) -> int | None:
    """Return the lowest ModelMap id with an exact name match.

    Args:
        session: Open session.
        model_name: Run model name, possibly None.

    Returns:
        Matching dictionary id, or None.
    """
    if model_name is None:
        return None
    statement = (
        select(ModelMap.id)
        .where(ModelMap.model_name == model_name)
        .order_by(ModelMap.id)
        .limit(1)
    )
    return session.scalar(statement)


def add_model_names(
    session: Session,
    names: Iterable[str],
    base_model: str | None = None,
) -> int:
    """Insert model names that are not in the dictionary yet.

    Args:
        session: Open session inside a transaction.
        names: Model names to register.
        base_model: Optional base model shared by the new entries.

    Returns:
        Number of entries inserted.

    Raises:
        BenchValidationError: If a name is blank.
    """
    inserted_count = 0
    seen: set[str] = set()
    for name in names:
        _require_name(name, "model name")
        if name in seen or find_model_id(session, name) is not None:
            continue
        seen.add(name)
        session.add(ModelMap(model_name=name, base_model=base_model))
        inserted_count += 1
    session.flush()
    return inserted_count


def add_gpu_base(session: Session, name: str, brand: str | None = None) -> int:
    """Return the id of a GpuBase row, creating it when absent."""
    _require_name(name, "base GPU name")
    existing_id = session.scalar(
        select(GpuBase.id).where(GpuBase.name == name).order_by(GpuBase.id).limit(1)
    )
    if existing_id is not None:
        return existing_id
    gpu_base = GpuBase(name=name, brand=brand)
    session.add(gpu_base)
    session.flush()
    return gpu_base.id


def add_gpu_alias(session: Session, gpu_name: str, base_name: str) -> int:
    """Map a raw GPU name to a base GPU, creating the base when absent.

    Args:
        session: Open session inside a transaction.
        gpu_name: Raw GPU name as reported by clients.
        base_name: Canonical base GPU name.

    Returns:
        GpuMap row id.
    """
    _require_name(gpu_name, "GPU name")
    base_gpu_id = add_gpu_base(session, base_name)
    gpu_map = GpuMap(gpu_name=gpu_name, base_gpu_id=base_gpu_id)
    session.add(gpu_map)
    session.flush()
    return gpu_map.id


def resolve_base_gpu(session: Session, gpu_name: str) -> str | None:
    """Return the canonical base GPU name for a raw GPU name."""
    statement = (
        select(GpuBase.name)
        .join(GpuMap, GpuMap.base_gpu_id == GpuBase.id)
        .where(GpuMap.gpu_name == gpu_name)
        .order_by(GpuMap.id)
        .limit(1)
    )
    return session.scalar(statement)


def _require_name(value: str, label: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise BenchValidationError(f"Invalid {label}: expected a non-empty string, got {value!r}.")
