"""Application of client tombstones."""

import logging
from typing import assert_never

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from grocery_api.schemas.sync import DeletedItemDto, EntityType
from grocery_api.services.shopping_item import ShoppingItemService
from grocery_api.services.shopping_list import ShoppingListService
from grocery_api.services.store_location import StoreLocationService

logger = logging.getLogger(__name__)


class DeletionProcessor:
    """Hard-delete entities the client reports as deleted.

    Missing sync ids, unknown kinds, entities that are already gone and
    entities owned by someone else are all no-ops.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.lists = ShoppingListService(session)
        self.items = ShoppingItemService(session)
        self.stores = StoreLocationService(session)

    async def process(self, tombstones: list[DeletedItemDto] | None, principal_id: int) -> int:
        """Apply ``tombstones`` and return how many rows were deleted."""
        deleted = 0
        for tombstone in tombstones or []:
            if not tombstone.sync_id:
                continue
            try:
                async with self.session.begin_nested():
                    if await self._delete(tombstone, principal_id):
                        deleted += 1
            except SQLAlchemyError as exc:
                logger.warning(
                    f"Failed to apply tombstone {tombstone.entity_type.value} "
                    f"{tombstone.sync_id}: {exc}"
                )
        return deleted

    async def _delete(self, tombstone: DeletedItemDto, principal_id: int) -> bool:
        sync_id = tombstone.sync_id
        match tombstone.entity_type:
            case EntityType.SHOPPING_ITEM:
                item = await self.items.get_by_sync_id(sync_id)
                if item is None or not await self.items.is_owned_by(item, principal_id):
                    return False
                await self.items.delete(item)
                return True
            case EntityType.SHOPPING_LIST:
                shopping_list = await self.lists.get_by_sync_id_and_owner(sync_id, principal_id)
                if shopping_list is None:
                    return False
                await self.lists.delete(shopping_list)
                return True
            case EntityType.STORE_LOCATION:
                store = await self.stores.get_by_sync_id_and_owner(sync_id, principal_id)
                if store is None:
                    return False
                await self.stores.delete(store)
                return True
            case EntityType.UNKNOWN:
                logger.debug(f"Ignoring tombstone {sync_id} of unknown type")
                return False
            case _:
                assert_never(tombstone.entity_type)
