"""Top-level coordinator of a synchronization run."""

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from grocery_api.models.user import User
from grocery_api.schemas.sync import SyncRequest, SyncResponse
from grocery_api.sync.change_feed import ChangeFeed
from grocery_api.sync.deletion import DeletionProcessor
from grocery_api.sync.merge import merge_results
from grocery_api.sync.strategies import (
    EntitySyncStrategy,
    ShoppingItemSyncStrategy,
    ShoppingListSyncStrategy,
    StoreLocationSyncStrategy,
)
from grocery_api.sync.unit_of_work import UnitOfWork
from grocery_api.utils import utcnow

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SyncOrchestrator:
    """Run deletion, per-kind reconciliation, change feeds and merges in order.

    Each stage gets its own unit of work. A failing stage is logged and
    contributes nothing; :meth:`synchronize` itself never raises for it.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def synchronize(self, request: SyncRequest, principal: User) -> SyncResponse:
        sync_time = utcnow()
        principal_id = principal.id

        logger.info(
            f"Sync for user {principal_id}: "
            f"{len(request.shopping_lists or [])} lists, "
            f"{len(request.shopping_items or [])} items, "
            f"{len(request.store_locations or [])} stores, "
            f"{len(request.deleted_items or [])} deletions"
        )

        if request.deleted_items:
            deleted = await self._stage(
                "deletions",
                lambda session: DeletionProcessor(session).process(request.deleted_items, principal_id),
                default=0,
            )
            logger.info(f"Applied {deleted} deletions for user {principal_id}")

        accepted_lists = await self._apply(
            ShoppingListSyncStrategy, request.shopping_lists, principal_id, sync_time
        )
        accepted_items = await self._apply(
            ShoppingItemSyncStrategy, request.shopping_items, principal_id, sync_time
        )
        accepted_stores = await self._apply(
            StoreLocationSyncStrategy, request.store_locations, principal_id, sync_time
        )

        checkpoint = request.last_sync_timestamp
        changed_lists = await self._changes(ChangeFeed.for_shopping_lists, principal_id, checkpoint)
        changed_items = await self._changes(ChangeFeed.for_shopping_items, principal_id, checkpoint)
        changed_stores = await self._changes(ChangeFeed.for_store_locations, principal_id, checkpoint)

        return SyncResponse(
            server_timestamp=sync_time,
            shopping_lists=merge_results(accepted_lists, changed_lists),
            shopping_items=merge_results(accepted_items, changed_items),
            store_locations=merge_results(accepted_stores, changed_stores),
        )

    async def _apply(
        self,
        strategy_cls: type[EntitySyncStrategy],
        batch: list | None,
        principal_id: int,
        sync_time: datetime,
    ) -> list:
        if not batch:
            return []
        return await self._stage(
            strategy_cls.kind,
            lambda session: strategy_cls(session).apply(batch, principal_id, sync_time),
            default=[],
        )

    async def _changes(
        self,
        feed_factory: Callable[[AsyncSession], ChangeFeed],
        principal_id: int,
        checkpoint: datetime | None,
    ) -> list:
        return await self._stage(
            f"change feed {feed_factory.__name__}",
            lambda session: feed_factory(session).get_changed(principal_id, checkpoint),
            default=[],
        )

    async def _stage(
        self,
        name: str,
        work: Callable[[AsyncSession], Awaitable[T]],
        default: T,
    ) -> T:
        try:
            async with UnitOfWork(self.session_factory) as session:
                return await work(session)
        except Exception:
            logger.exception(f"Sync stage '{name}' failed")
            return default
