"""Relational schema for raw runs, derived tables, and dictionaries.

Every derived table carries a nullable ``run_id`` foreign key back to
``runs``. At most one derived row per run and table is guaranteed by the
stage processors' anti-join scan, not by a uniqueness constraint.
"""

from __future__ import annotations

from sqlalchemy import Enum, Float, ForeignKey, Integer, MetaData, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, MappedAsDataclass, mapped_column

from core.types import GpuBrand, LaptopState

naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(MappedAsDataclass, DeclarativeBase, kw_only=True):
    """Declarative base whose models are also keyword-only dataclasses."""

    metadata = MetaData(naming_convention=naming_convention)


def _enum_values(enum_type: type[GpuBrand] | type[LaptopState]) -> list[str]:
    return [member.value for member in enum_type]


class Run(Base):
    """One raw benchmark submission, immutable after import."""

    __tablename__ = "runs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, init=False)
    timestamp: Mapped[str | None] = mapped_column(Text, default=None)
    vram_usage: Mapped[str | None] = mapped_column(Text, default=None)
    info: Mapped[str | None] = mapped_column(Text, default=None)
    system_info: Mapped[str | None] = mapped_column(Text, default=None)
    model_info: Mapped[str | None] = mapped_column(Text, default=None)
    device_info: Mapped[str | None] = mapped_column(Text, default=None)
    xformers: Mapped[str | None] = mapped_column(Text, default=None)
    model_name: Mapped[str | None] = mapped_column(Text, default=None)
    user: Mapped[str | None] = mapped_column(Text, default=None)
    notes: Mapped[str | None] = mapped_column(Text, default=None)


class RunDerivedRow(Base):
    """Abstract base for tables populated by a stage processor."""

    __abstract__ = True

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, init=False)
    run_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("runs.id"), index=True, default=None
    )


class PerformanceResult(RunDerivedRow):
    """Iteration-rate samples and their average."""

    __tablename__ = "performance_results"

    its: Mapped[str | None] = mapped_column(Text, default=None)
    avg_its: Mapped[float | None] = mapped_column(Float, default=None)


class AppDetail(RunDerivedRow):
    """Application identity of a run."""

    __tablename__ = "app_details"

    app_name: Mapped[str | None] = mapped_column(Text, default=None)
    updated: Mapped[str | None] = mapped_column(Text, default=None)
    hash: Mapped[str | None] = mapped_column(Text, default=None)
    url: Mapped[str | None] = mapped_column(Text, default=None)


class SystemInfo(RunDerivedRow):
    """Host environment of a run."""

    __tablename__ = "system_info"

    arch: Mapped[str | None] = mapped_column(Text, default=None)
    cpu: Mapped[str | None] = mapped_column(Text, default=None)
    system: Mapped[str | None] = mapped_column(Text, default=None)
    release: Mapped[str | None] = mapped_column(Text, default=None)
    python: Mapped[str | None] = mapped_column(Text, default=None)


class Library(RunDerivedRow):
    """Dependency versions of a run.

    ``xformers`` comes from the model-info string while ``run_xformers``
    copies the run-level xformers field; the two are independent values.
    """

    __tablename__ = "libraries"

    torch: Mapped[str | None] = mapped_column(Text, default=None)
    xformers: Mapped[str | None] = mapped_column(Text, default=None)
    run_xformers: Mapped[str | None] = mapped_column(Text, default=None)
    diffusers: Mapped[str | None] = mapped_column(Text, default=None)
    transformers: Mapped[str | None] = mapped_column(Text, default=None)


class Gpu(RunDerivedRow):
    """Parsed and classified GPU device."""

    __tablename__ = "gpus"

    device: Mapped[str | None] = mapped_column(Text, index=True, default=None)
    driver: Mapped[str | None] = mapped_column(Text, default=None)
    gpu_chip: Mapped[str | None] = mapped_column(Text, default=None)
    brand: Mapped[GpuBrand | None] = mapped_column(
        Enum(GpuBrand, native_enum=False, values_callable=_enum_values, length=16),
        default=None,
    )
    laptop: Mapped[LaptopState] = mapped_column(
        Enum(LaptopState, native_enum=False, values_callable=_enum_values, length=16),
        default=LaptopState.UNKNOWN,
    )


class ModelMap(Base):
    """Dictionary entry for a known model name."""

    __tablename__ = "model_map"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, init=False)
    model_name: Mapped[str] = mapped_column(Text, index=True)
    base_model: Mapped[str | None] = mapped_column(Text, default=None)


class RunMoreDetails(RunDerivedRow):
    """Denormalized run summary with an optional model dictionary link."""

    __tablename__ = "run_more_details"

    timestamp: Mapped[str | None] = mapped_column(Text, default=None)
    model_name: Mapped[str | None] = mapped_column(Text, index=True, default=None)
    user: Mapped[str | None] = mapped_column(Text, default=None)
    notes: Mapped[str | None] = mapped_column(Text, default=None)
    model_map_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("model_map.id"), default=None
    )


class GpuBase(Base):
    """Canonical base GPU referenced by GPU name aliases."""

    __tablename__ = "gpu_base"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, init=False)
    name: Mapped[str] = mapped_column(Text, index=True)
    brand: Mapped[str | None] = mapped_column(Text, default=None)


class GpuMap(Base):
    """Raw GPU name alias pointing at a canonical base GPU."""

    __tablename__ = "gpu_map"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, init=False)
    gpu_name: Mapped[str] = mapped_column(Text, index=True)
    base_gpu_id: Mapped[int] = mapped_column(Integer, ForeignKey("gpu_base.id"))
