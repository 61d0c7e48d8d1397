"""Per-table exclusion for scan-then-insert stage processing.

Two concurrent invocations of the same stage processor would otherwise
compute the same anti-join set before either commits. Holding the lock
for a (database, table) pair serializes them: the second scan starts only
after the first invocation has committed or rolled back.
"""

from __future__ import annotations

from contextlib import contextmanager
import threading
from typing import Iterator

_TABLE_LOCKS: dict[tuple[str, str], threading.Lock] = {}
_TABLE_LOCKS_GUARD = threading.Lock()


def lock_for_table(database_url: str, table_name: str) -> threading.Lock:
    """Return the process-wide lock for one target table."""
    key = (database_url, table_name)
    with _TABLE_LOCKS_GUARD:
        lock = _TABLE_LOCKS.get(key)
        if lock is None:
            lock = threading.Lock()
            _TABLE_LOCKS[key] = lock
        return lock


@contextmanager
def table_lock(database_url: str, table_name: str) -> Iterator[None]:
    """Hold the exclusion lock for one target table."""
    lock = lock_for_table(database_url, table_name)
    with lock:
        yield
