"""Shared typed models.

This module defines immutable data models used by import, parsing,
stage processing, normalization, and the SDK to keep interfaces explicit.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal

StageName = Literal[
    "performance",
    "app_details",
    "system_info",
    "libraries",
    "gpu",
    "run_details",
]
AppNameCategory = Literal[
    "automatic1111",
    "vladmandic",
    "stable_diffusion",
    "null_app_name_null_url",
]


class GpuBrand(str, Enum):
    """GPU vendor assigned by the GPU classifier."""

    NVIDIA = "NVIDIA"
    AMD = "AMD"
    INTEL = "Intel"
    UNKNOWN = "Unknown"


class LaptopState(str, Enum):
    """Form factor of a GPU; UNKNOWN until the classifier has run."""

    LAPTOP = "laptop"
    DESKTOP = "desktop"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class RawRunRecord:
    """One raw benchmark submission as uploaded by a client.

    Attributes:
        timestamp: Submission timestamp text.
        vram_usage: Memory-usage string carrying iteration-rate samples.
        info: Application identity string.
        system_info: Host environment string.
        model_info: Library version string.
        device_info: GPU device string.
        xformers: Run-level xformers field.
        model_name: Free-text model name.
        user: Submitter.
        notes: Free-text notes.
    """

    timestamp: str | None = None
    vram_usage: str | None = None
    info: str | None = None
    system_info: str | None = None
    model_info: str | None = None
    device_info: str | None = None
    xformers: str | None = None
    model_name: str | None = None
    user: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class ParsedPerformance:
    """Parsed iteration-rate samples.

    Attributes:
        raw_samples: Original samples string, None for empty input.
        samples: Valid numeric samples in input order.
        average: Mean of valid samples, None when no sample is valid.
    """

    raw_samples: str | None
    samples: tuple[float, ...]
    average: float | None


@dataclass(frozen=True)
class ParsedAppDetails:
    """Parsed application identity."""

    app_name: str | None = None
    updated: str | None = None
    hash: str | None = None
    url: str | None = None
    unparsed: tuple[str, ...] = ()


@dataclass(frozen=True)
class ParsedSystemInfo:
    """Parsed host environment."""

    arch: str | None = None
    cpu: str | None = None
    system: str | None = None
    release: str | None = None
    python: str | None = None
    unparsed: tuple[str, ...] = ()


@dataclass(frozen=True)
class ParsedLibraries:
    """Parsed dependency versions from the model-info string."""

    torch: str | None = None
    xformers: str | None = None
    diffusers: str | None = None
    transformers: str | None = None
    unparsed: tuple[str, ...] = ()


@dataclass(frozen=True)
class ParsedDevice:
    """Parsed GPU device description."""

    device: str | None = None
    driver: str | None = None
    gpu_chip: str | None = None
    unparsed: tuple[str, ...] = ()


@dataclass(frozen=True)
class ImportResult:
    """Outcome of one raw batch import.

    Attributes:
        imported_count: Records stored in the raw run store.
        rejected_count: List elements that were not records.
        errors: One message per rejected element.
    """

    imported_count: int
    rejected_count: int
    errors: tuple[str, ...] = ()


@dataclass(frozen=True)
class StageError:
    """One run that a stage processor could not parse."""

    run_id: int
    reason: str


@dataclass(frozen=True)
class StageResult:
    """Outcome of one stage processor invocation.

    Attributes:
        stage: Stage identifier.
        rows_scanned: Pending runs found by the anti-join scan.
        rows_inserted: Derived rows committed.
        rows_failed: Runs skipped because their row could not be built.
        rows_partial: Inserted rows whose field had unparsed tokens.
        errors: Per-run failure details.
    """

    stage: StageName
    rows_scanned: int
    rows_inserted: int
    rows_failed: int
    rows_partial: int = 0
    errors: tuple[StageError, ...] = ()


@dataclass(frozen=True)
class GpuClassificationSummary:
    """Brand and form-factor counts after a classifier pass."""

    nvidia_count: int
    amd_count: int
    intel_count: int
    unknown_count: int
    laptop_count: int
    desktop_count: int


@dataclass(frozen=True)
class AppNameNormalizationResult:
    """Rows renamed per application-name category."""

    automatic1111: int
    vladmandic: int
    stable_diffusion: int
    null_app_name_null_url: int


@dataclass(frozen=True)
class ModelMapResult:
    """Outcome of one model mapper pass."""

    updated_count: int
    not_found_count: int


@dataclass(frozen=True)
class AppDetailsAnalysis:
    """AppDetail row counts grouped by app name and URL null-ness.

    Attributes:
        total_rows: All AppDetail rows.
        null_app_name_null_url: Both app name and URL null.
        null_app_name_non_null_url: App name null, URL present.
        non_null_app_name_null_url: App name present, URL null.
        non_null_app_name_non_null_url: Both present.
    """

    total_rows: int
    null_app_name_null_url: int
    null_app_name_non_null_url: int
    non_null_app_name_null_url: int
    non_null_app_name_non_null_url: int
