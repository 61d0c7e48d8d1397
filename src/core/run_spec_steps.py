"""Typed run-spec steps and their argument schemas.

Each pipeline command has its own step type. Arguments are checked when the
run-spec is loaded, so a misspelled stage or an incomplete name mapping
fails before any earlier step has written to the database.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, ClassVar, Mapping, Union

from core.constants import ALL_STAGES_ALIAS, APP_NAME_CATEGORIES, STAGE_NAMES
from core.errors import BenchRunSpecError


@dataclass(frozen=True)
class ImportStep:
    """Import one JSON upload file."""

    command: ClassVar[str] = "import"
    source: str


@dataclass(frozen=True)
class ProcessStep:
    """Run one stage processor, or every stage for ``all``."""

    command: ClassVar[str] = "process"
    stage: str = ALL_STAGES_ALIAS


@dataclass(frozen=True)
class ClassifyGpusStep:
    command: ClassVar[str] = "classify-gpus"


@dataclass(frozen=True)
class NormalizeAppNamesStep:
    """Apply one canonical name per app-name category."""

    command: ClassVar[str] = "normalize-app-names"
    mapping: Mapping[str, str]


@dataclass(frozen=True)
class MapModelsStep:
    command: ClassVar[str] = "map-models"


@dataclass(frozen=True)
class AnalyzeStep:
    command: ClassVar[str] = "analyze"


@dataclass(frozen=True)
class AddModelsStep:
    """Register model names in the model dictionary."""

    command: ClassVar[str] = "add-models"
    names: tuple[str, ...]
    base_model: str | None = None


RunSpecStep = Union[
    ImportStep,
    ProcessStep,
    ClassifyGpusStep,
    NormalizeAppNamesStep,
    MapModelsStep,
    AnalyzeStep,
    AddModelsStep,
]


def build_step(command: str, args: Mapping[str, object], context: str) -> RunSpecStep:
    """Validate step arguments and build the typed step.

    Args:
        command: Step command name.
        args: Step keys other than ``command``.
        context: Step label used in error messages.

    Returns:
        Typed step for the command.

    Raises:
        BenchRunSpecError: If the command is unknown or its arguments are
            missing, mistyped, or unexpected.
    """
    schema = _STEP_SCHEMAS.get(command)
    if schema is None:
        raise BenchRunSpecError(
            f"Unsupported command '{command}' in {context}. "
            f"Use one of: {', '.join(_STEP_SCHEMAS)}."
        )
    allowed_fields, builder = schema
    unknown_fields = sorted(str(key) for key in args if key not in allowed_fields)
    if unknown_fields:
        raise BenchRunSpecError(
            f"Invalid {context} ({command}): unknown fields {', '.join(unknown_fields)}. "
            f"Allowed: {', '.join(sorted(allowed_fields)) or 'none'}."
        )
    return builder(args, f"{context} ({command})")


def _build_import_step(args: Mapping[str, object], context: str) -> ImportStep:
    source = _optional_text(args, "source", context)
    if source is None:
        raise BenchRunSpecError(f"Invalid {context}: field 'source' is required.")
    return ImportStep(source=source)


def _build_process_step(args: Mapping[str, object], context: str) -> ProcessStep:
    stage = _optional_text(args, "stage", context)
    if stage is None:
        return ProcessStep()
    if stage != ALL_STAGES_ALIAS and stage not in STAGE_NAMES:
        raise BenchRunSpecError(
            f"Invalid {context}: unknown stage '{stage}'. "
            f"Use one of: {', '.join(STAGE_NAMES)}, or '{ALL_STAGES_ALIAS}'."
        )
    return ProcessStep(stage=stage)


def _build_normalize_step(args: Mapping[str, object], context: str) -> NormalizeAppNamesStep:
    raw_mapping = args.get("mapping")
    if not isinstance(raw_mapping, Mapping):
        raise BenchRunSpecError(
            f"Invalid {context}: field 'mapping' must map each app-name category to a name."
        )
    unknown_categories = sorted(str(key) for key in raw_mapping if key not in APP_NAME_CATEGORIES)
    if unknown_categories:
        raise BenchRunSpecError(
            f"Invalid {context}: unknown app-name categories {', '.join(unknown_categories)}."
        )
    mapping: dict[str, str] = {}
    for category in APP_NAME_CATEGORIES:
        name = _optional_text(raw_mapping, category, context)
        if name is None:
            raise BenchRunSpecError(
                f"Invalid {context}: mapping is missing a name for '{category}'."
            )
        mapping[category] = name
    return NormalizeAppNamesStep(mapping=mapping)


def _build_add_models_step(args: Mapping[str, object], context: str) -> AddModelsStep:
    raw_names = args.get("names")
    if not isinstance(raw_names, list) or not raw_names:
        raise BenchRunSpecError(f"Invalid {context}: field 'names' must be a non-empty list.")
    names = []
    for raw_name in raw_names:
        if not isinstance(raw_name, str) or not raw_name.strip():
            raise BenchRunSpecError(f"Invalid {context}: model names must be non-empty strings.")
        names.append(raw_name.strip())
    return AddModelsStep(
        names=tuple(names),
        base_model=_optional_text(args, "base_model", context),
    )


def _optional_text(args: Mapping[str, object], field_name: str, context: str) -> str | None:
    value = args.get(field_name)
    if value is None:
        return None
    if not isinstance(value, str):
        raise BenchRunSpecError(
            f"Invalid {context}: field '{field_name}' must be a string, "
            f"got {type(value).__name__}."
        )
    return value.strip() or None


_StepBuilder = Callable[[Mapping[str, object], str], RunSpecStep]

_STEP_SCHEMAS: dict[str, tuple[frozenset[str], _StepBuilder]] = {
    "import": (frozenset({"source"}), _build_import_step),
    "process": (frozenset({"stage"}), _build_process_step),
    "classify-gpus": (frozenset(), lambda args, context: ClassifyGpusStep()),
    "normalize-app-names": (frozenset({"mapping"}), _build_normalize_step),
    "map-models": (frozenset(), lambda args, context: MapModelsStep()),
    "analyze": (frozenset(), lambda args, context: AnalyzeStep()),
    "add-models": (frozenset({"names", "base_model"}), _build_add_models_step),
}
