"""Combining client-accepted results with the server change feed."""

from collections.abc import Iterable
from typing import Protocol, TypeVar


class HasSyncId(Protocol):
    sync_id: str | None


T = TypeVar("T", bound=HasSyncId)


def merge_results(client_accepted: Iterable[T], server_changed: Iterable[T]) -> list[T]:
    """Client results first, then server changes not already present by sync id.

    Entries without a sync id are never considered duplicates of each other.
    """
    merged = list(client_accepted)
    seen = {dto.sync_id for dto in merged if dto.sync_id is not None}
    merged.extend(
        dto for dto in server_changed if dto.sync_id is None or dto.sync_id not in seen
    )
    return merged
