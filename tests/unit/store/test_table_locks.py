"""Unit tests for per-table locks."""

from __future__ import annotations

from store.table_locks import lock_for_table, table_lock


def test_lock_for_table_reuses_lock_per_table() -> None:
    """The same database and table should share one lock."""
    first = lock_for_table("sqlite:///a.db", "gpus")
    second = lock_for_table("sqlite:///a.db", "gpus")

    assert first is second


def test_lock_for_table_separates_tables_and_databases() -> None:
    """Different tables or databases should not share locks."""
    base = lock_for_table("sqlite:///a.db", "gpus")

    assert base is not lock_for_table("sqlite:///a.db", "app_details") and base is not (
        lock_for_table("sqlite:///b.db", "gpus")
    )


def test_table_lock_holds_lock_inside_block() -> None:
    """The lock should be held only inside the context block."""
    lock = lock_for_table("sqlite:///c.db", "libraries")

    with table_lock("sqlite:///c.db", "libraries"):
        held_inside = lock.locked()

    assert held_inside and not lock.locked()
