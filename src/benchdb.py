"""Public SDK surface for benchdb.

This module provides a stable import path for pipeline users.
It re-exports the primary client, config, and typed result models.
"""

from __future__ import annotations

from core.config import BenchConfig
from core.errors import (
    BenchError,
    BenchFieldParseError,
    BenchImportError,
    BenchStoreError,
    BenchValidationError,
)
from core.types import (
    AppDetailsAnalysis,
    AppNameNormalizationResult,
    GpuBrand,
    GpuClassificationSummary,
    ImportResult,
    LaptopState,
    ModelMapResult,
    StageResult,
)
from store.bench_sdk import BenchClient
from transforms.field_parsers import (
    parse_app_details,
    parse_device,
    parse_libraries,
    parse_performance,
    parse_system_info,
)

__all__ = [
    "AppDetailsAnalysis",
    "AppNameNormalizationResult",
    "BenchClient",
    "BenchConfig",
    "BenchError",
    "BenchFieldParseError",
    "BenchImportError",
    "BenchStoreError",
    "BenchValidationError",
    "GpuBrand",
    "GpuClassificationSummary",
    "ImportResult",
    "LaptopState",
    "ModelMapResult",
    "StageResult",
    "parse_app_details",
    "parse_device",
    "parse_libraries",
    "parse_performance",
    "parse_system_info",
]
