"""Raw upload readers for import.

This module decodes JSON uploads from local files or in-memory bytes.
It returns the decoded payload untouched; shape validation happens at
import time so a bad element never hides a bad container.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from core.errors import BenchImportError


def read_raw_payload(source_path: str | Path) -> Any:
    """Load a JSON upload from a local file.

    Args:
        source_path: Path to a JSON file holding a list of run records.

    Returns:
        Decoded JSON payload.

    Raises:
        BenchImportError: If the file is missing, unreadable, or not JSON.
    """
    file_path = Path(source_path).expanduser()
    if not file_path.is_file():
        raise BenchImportError(
            f"Failed to read upload at {file_path}: file does not exist. "
            "Provide an existing JSON file."
        )
    try:
        content = file_path.read_bytes()
    except OSError as error:
        raise BenchImportError(
            f"Failed to read upload at {file_path}: {error}. Check file permissions."
        ) from error
    return parse_raw_payload(content, source_name=str(file_path))


def parse_raw_payload(content: bytes | str, source_name: str = "<memory>") -> Any:
    """Decode a JSON upload body.

    Args:
        content: Raw upload body.
        source_name: Origin label for error messages.

    Returns:
        Decoded JSON payload.

    Raises:
        BenchImportError: If the body is not UTF-8 JSON.
    """
    try:
        text = content.decode("utf-8") if isinstance(content, bytes) else content
    except UnicodeDecodeError as error:
        raise BenchImportError(
            f"Failed to decode upload {source_name}: {error.reason}. Upload UTF-8 encoded JSON."
        ) from error
    try:
        return json.loads(text)
    except json.JSONDecodeError as error:
        raise BenchImportError(
            f"Failed to parse upload {source_name} at line {error.lineno}: "
            f"{error.msg}. Fix the JSON syntax and retry import."
        ) from error
