"""Runtime configuration model for benchdb.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import DEFAULT_DATA_ROOT, DEFAULT_DATABASE_FILE_NAME
from core.errors import BenchConfigError

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class BenchConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory for the default SQLite database.
        database_url: SQLAlchemy database URL for the relational store.
        echo_sql: Whether SQLAlchemy should log emitted SQL statements.
    """

    data_root: Path
    database_url: str
    echo_sql: bool = False

    @classmethod
    def from_env(cls) -> "BenchConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            BenchConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("BENCHDB_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        data_root = Path(data_root_value).expanduser().resolve()
        database_url = os.getenv("BENCHDB_DATABASE_URL") or default_database_url(data_root)
        echo_sql = _parse_bool_flag("BENCHDB_ECHO_SQL", os.getenv("BENCHDB_ECHO_SQL", "false"))
        return cls(data_root=data_root, database_url=database_url, echo_sql=echo_sql)


def default_database_url(data_root: Path) -> str:
    """Build the default SQLite URL under a data root."""
    return f"sqlite:///{data_root / DEFAULT_DATABASE_FILE_NAME}"


def _parse_bool_flag(variable_name: str, raw_value: str) -> bool:
    """Parse a boolean environment flag.

    Args:
        variable_name: Environment variable name for error context.
        raw_value: Raw string from environment.

    Returns:
        Parsed boolean value.

    Raises:
        BenchConfigError: If value is not a recognized boolean spelling.
    """
    normalized_value = raw_value.strip().lower()
    if normalized_value in _TRUE_VALUES:
        return True
    if normalized_value in _FALSE_VALUES:
        return False
    raise BenchConfigError(
        f"Invalid {variable_name} value: expected true/false, got '{raw_value}'. "
        f"Set {variable_name} to one of: {', '.join(_TRUE_VALUES + _FALSE_VALUES)}."
    )
