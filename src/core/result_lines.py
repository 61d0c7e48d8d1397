"""Printable ``key=value`` rendering of pipeline results.

The CLI and run-spec execution share this rendering so scripted callers
see one stable output format.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from enum import Enum

from core.types import StageError


def format_result_lines(result: object) -> tuple[str, ...]:
    """Render a frozen result dataclass as ordered ``key=value`` lines.

    Tuple fields emit one line per element under the field name.

    Args:
        result: Result dataclass instance.

    Returns:
        Output lines in field declaration order.
    """
    if not is_dataclass(result) or isinstance(result, type):
        raise TypeError(f"Expected a result dataclass instance, got {type(result).__name__}.")
    lines: list[str] = []
    for field in fields(result):
        value = getattr(result, field.name)
        if isinstance(value, tuple):
            lines.extend(f"{field.name}={_format_value(item)}" for item in value)
            continue
        lines.append(f"{field.name}={_format_value(value)}")
    return tuple(lines)


def _format_value(value: object) -> str:
    if value is None:
        return "-"
    if isinstance(value, StageError):
        return f"run_id:{value.run_id} {value.reason}"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)
