"""Application-name canonicalization pass.

Rows are classified on their state before this call, then renamed to the
caller's canonical name for the matching category. Rows matching no
category are left untouched.
"""

from __future__ import annotations

from collections import Counter
from typing import Mapping

from sqlalchemy import select

from core.logging_config import get_logger
from core.types import AppNameNormalizationResult
from store.database import DatabaseManager
from store.schema import AppDetail
from transforms.app_name_rules import match_app_name_category, validate_name_mapping

_LOGGER = get_logger(__name__)


def normalize_app_names(
    database: DatabaseManager,
    mapping: Mapping[str, str],
) -> AppNameNormalizationResult:
    """Apply canonical application names to matching AppDetail rows.

    Args:
        database: Target database.
        mapping: Canonical name for each of the four categories.

    Returns:
        Renamed row count per category.

    Raises:
        BenchValidationError: If the mapping is incomplete.
        BenchStoreError: If the update transaction fails.
    """
    names = validate_name_mapping(mapping)
    counts: Counter[str] = Counter()
    with database.transaction() as session:
        rows = list(session.scalars(select(AppDetail).order_by(AppDetail.id)))
        matches = [(row, match_app_name_category(row.app_name, row.url)) for row in rows]
        for row, category in matches:
            if category is None:
                continue
            row.app_name = names[category]
            counts[category] += 1
    result = AppNameNormalizationResult(
        automatic1111=counts["automatic1111"],
        vladmandic=counts["vladmandic"],
        stable_diffusion=counts["stable_diffusion"],
        null_app_name_null_url=counts["null_app_name_null_url"],
    )
    _LOGGER.info(
        "app_names_normalized",
        automatic1111=result.automatic1111,
        vladmandic=result.vladmandic,
        stable_diffusion=result.stable_diffusion,
        null_app_name_null_url=result.null_app_name_null_url,
    )
    return result
