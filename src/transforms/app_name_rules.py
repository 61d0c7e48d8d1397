"""Application-name category matching.

Categories are evaluated in fixed order against a row's current app name
and URL. The first matching category wins.
"""

from __future__ import annotations

from typing import Mapping

from core.constants import APP_NAME_CATEGORIES, APP_URL_PATTERNS
from core.errors import BenchValidationError
from core.types import AppNameCategory


def match_app_name_category(app_name: str | None, url: str | None) -> AppNameCategory | None:
    """Return the category of one AppDetail row, or None when none matches.

    Args:
        app_name: Current application name.
        url: Source URL.

    Returns:
        Matching category identifier.
    """
    lowered_url = url.lower() if url is not None else None
    if lowered_url is not None:
        if APP_URL_PATTERNS["automatic1111"] in lowered_url:
            return "automatic1111"
        if APP_URL_PATTERNS["vladmandic"] in lowered_url and not app_name:
            return "vladmandic"
        if APP_URL_PATTERNS["stable_diffusion"] in lowered_url and app_name is None:
            return "stable_diffusion"
        return None
    if app_name is None:
        return "null_app_name_null_url"
    return None


def validate_name_mapping(mapping: Mapping[str, str]) -> dict[str, str]:
    """Check that every category has a non-empty canonical name.

    Args:
        mapping: Category to canonical name.

    Returns:
        Mapping restricted to the known categories.

    Raises:
        BenchValidationError: If a category is missing, blank, or unknown.
    """
    unknown = sorted(set(mapping) - set(APP_NAME_CATEGORIES))
    if unknown:
        raise BenchValidationError(
            f"Unknown app-name categories: {', '.join(unknown)}. "
            f"Use only: {', '.join(APP_NAME_CATEGORIES)}."
        )
    validated: dict[str, str] = {}
    for category in APP_NAME_CATEGORIES:
        name = mapping.get(category)
        if not isinstance(name, str) or not name.strip():
            raise BenchValidationError(
                f"Missing canonical name for app-name category '{category}'. "
                "Provide a non-empty name for every category."
            )
        validated[category] = name.strip()
    return validated
