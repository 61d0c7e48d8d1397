"""Python SDK for benchmark pipeline operations.

This module exposes high-level APIs for raw import, stage processing,
normalization passes, dictionary maintenance, and run-spec execution.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any, Mapping, Sequence

from core.config import BenchConfig
from core.run_spec_execution import execute_run_spec_file
from core.types import (
    AppDetailsAnalysis,
    AppNameNormalizationResult,
    GpuClassificationSummary,
    ImportResult,
    ModelMapResult,
    StageResult,
)
from ingest.input_reader import read_raw_payload
from ingest.raw_import import import_runs
from ingest.stages import process_all_stages, process_stage
from normalize.app_details_analysis import analyze_app_details
from normalize.app_name_normalizer import normalize_app_names
from normalize.gpu_classifier import classify_gpus
from normalize.model_mapper import map_models
from store import dictionaries
from store.database import DatabaseManager
from store.run_store import count_runs


class BenchClient:
    """Primary SDK entry point for the ingestion pipeline."""

    def __init__(self, config: BenchConfig | None = None) -> None:
        """Create SDK client and ensure the schema exists.

        Args:
            config: Optional runtime configuration.

        Raises:
            BenchStoreError: If the database cannot be initialized.
        """
        self._config = config or BenchConfig.from_env()
        self._database = DatabaseManager(self._config)
        self._database.create_tables()

    @property
    def config(self) -> BenchConfig:
        """Return the runtime configuration."""
        return self._config

    @property
    def database(self) -> DatabaseManager:
        """Return the underlying database manager."""
        return self._database

    def with_database_url(self, database_url: str) -> "BenchClient":
        """Clone the client against a different database.

        Args:
            database_url: SQLAlchemy database URL.

        Returns:
            New SDK client instance.
        """
        return BenchClient(replace(self._config, database_url=database_url))

    def import_runs(self, payload: Any) -> ImportResult:
        """Import a decoded upload into the raw run store.

        Args:
            payload: List of run record objects.

        Returns:
            Imported and rejected counts.

        Raises:
            BenchImportError: If the payload is not a list.
            BenchStoreError: If the insert fails.
        """
        return import_runs(self._database, payload)

    def import_file(self, source_path: str | Path) -> ImportResult:
        """Import a JSON upload file into the raw run store."""
        return import_runs(self._database, read_raw_payload(source_path))

    def process(self, stage: str) -> StageResult:
        """Run one stage processor.

        Args:
            stage: Stage identifier such as ``gpu`` or ``app_details``.

        Returns:
            Stage counts for this invocation.

        Raises:
            BenchValidationError: If the stage is unknown.
            BenchStoreError: If the stage transaction fails.
        """
        return process_stage(self._database, stage)

    def process_all(self) -> tuple[StageResult, ...]:
        """Run every stage processor in order."""
        return process_all_stages(self._database)

    def classify_gpus(self) -> GpuClassificationSummary:
        """Recompute GPU brand and laptop state."""
        return classify_gpus(self._database)

    def normalize_app_names(self, mapping: Mapping[str, str]) -> AppNameNormalizationResult:
        """Apply canonical application names.

        Args:
            mapping: Canonical name for each app-name category.

        Returns:
            Renamed row count per category.
        """
        return normalize_app_names(self._database, mapping)

    def map_models(self) -> ModelMapResult:
        """Link run details to model dictionary entries."""
        return map_models(self._database)

    def analyze_app_details(self) -> AppDetailsAnalysis:
        """Count AppDetail rows by identity null-ness."""
        return analyze_app_details(self._database)

    def add_model_names(self, names: Sequence[str], base_model: str | None = None) -> int:
        """Register model names in the model dictionary.

        Returns:
            Number of new dictionary entries.
        """
        with self._database.transaction() as session:
            return dictionaries.add_model_names(session, names, base_model)

    def add_gpu_alias(self, gpu_name: str, base_name: str) -> int:
        """Map a raw GPU name to a canonical base GPU."""
        with self._database.transaction() as session:
            return dictionaries.add_gpu_alias(session, gpu_name, base_name)

    def resolve_base_gpu(self, gpu_name: str) -> str | None:
        """Return the canonical base GPU name, if one is mapped."""
        with self._database.transaction() as session:
            return dictionaries.resolve_base_gpu(session, gpu_name)

    def run_count(self) -> int:
        """Return the number of raw runs stored."""
        with self._database.transaction() as session:
            return count_runs(session)

    def run_spec(self, spec_file: str) -> tuple[str, ...]:
        """Execute a YAML run-spec through the shared execution engine.

        Args:
            spec_file: Path to YAML run-spec file.

        Returns:
            Ordered command output lines.
        """
        return execute_run_spec_file(self, spec_file)
