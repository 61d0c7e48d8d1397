"""Read-only null-ness report over AppDetail."""

from __future__ import annotations

from sqlalchemy import func, select

from core.logging_config import get_logger
from core.types import AppDetailsAnalysis
from store.database import DatabaseManager
from store.schema import AppDetail

_LOGGER = get_logger(__name__)


def analyze_app_details(database: DatabaseManager) -> AppDetailsAnalysis:
    """Count AppDetail rows by (app_name is null, url is null).

    Args:
        database: Target database.

    Returns:
        Total and per-combination row counts.
    """
    app_name_null = AppDetail.app_name.is_(None).label("app_name_null")
    url_null = AppDetail.url.is_(None).label("url_null")
    statement = select(app_name_null, url_null, func.count()).group_by(app_name_null, url_null)
    with database.transaction() as session:
        grouped = {
            (bool(name_is_null), bool(url_is_null)): count
            for name_is_null, url_is_null, count in session.execute(statement)
        }
    analysis = AppDetailsAnalysis(
        total_rows=sum(grouped.values()),
        null_app_name_null_url=grouped.get((True, True), 0),
        null_app_name_non_null_url=grouped.get((True, False), 0),
        non_null_app_name_null_url=grouped.get((False, True), 0),
        non_null_app_name_non_null_url=grouped.get((False, False), 0),
    )
    _LOGGER.info(
        "app_details_analyzed",
        total_rows=analysis.total_rows,
        null_app_name_null_url=analysis.null_app_name_null_url,
        null_app_name_non_null_url=analysis.null_app_name_non_null_url,
        non_null_app_name_null_url=analysis.non_null_app_name_null_url,
        non_null_app_name_non_null_url=analysis.non_null_app_name_non_null_url,
    )
    return analysis
