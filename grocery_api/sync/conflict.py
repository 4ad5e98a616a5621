"""Last-write-wins conflict resolution.

The stored copy wins ties and wins whenever the client sent no timestamp.
The same rule is exposed twice: as a pure function used by the read-then-write
path, and as a SQL predicate used by the single-statement upsert so both paths
always agree.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any, Protocol

from sqlalchemy import ColumnElement, false, or_

from grocery_api.utils import as_naive_utc


class Decision(str, enum.Enum):
    CREATE = "create"
    OVERWRITE = "overwrite"
    KEEP_STORED = "keep_stored"


class Timestamped(Protocol):
    updated_at: datetime | None


def incoming_wins(stored_updated_at: datetime | None, incoming_updated_at: datetime | None) -> bool:
    if incoming_updated_at is None:
        return False
    if stored_updated_at is None:
        return True
    return as_naive_utc(incoming_updated_at) > as_naive_utc(stored_updated_at)


def resolve(stored: Timestamped | None, incoming: Timestamped) -> Decision:
    """Decide what to do with an incoming entity given the stored one, if any."""
    if stored is None:
        return Decision.CREATE
    if incoming_wins(stored.updated_at, incoming.updated_at):
        return Decision.OVERWRITE
    return Decision.KEEP_STORED


def incoming_wins_clause(updated_at_column: Any, incoming_updated_at: datetime | None) -> ColumnElement[bool]:
    """SQL form of :func:`incoming_wins` evaluated against the stored row."""
    if incoming_updated_at is None:
        return false()
    return or_(
        updated_at_column.is_(None),
        updated_at_column < as_naive_utc(incoming_updated_at),
    )
