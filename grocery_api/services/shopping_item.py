"""Shopping item repository service."""

from datetime import datetime

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from grocery_api.models.shopping_item import ShoppingItem
from grocery_api.models.shopping_list import ShoppingList
from grocery_api.schemas.shopping_item import (
    ShoppingItemCreate,
    ShoppingItemDto,
    ShoppingItemUpdate,
)
from grocery_api.services.upsert import build_sync_id_upsert
from grocery_api.sync.conflict import incoming_wins_clause
from grocery_api.utils import new_sync_id, utcnow

# Fields a client may change on an item
ITEM_FIELDS = ("name", "quantity", "unit_type", "checked", "sort_index")


class ShoppingItemService:
    """Persistence operations for shopping items.

    Items are owned transitively through their shopping list.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    def _owned_by(self, user_id: int):
        return select(ShoppingItem).join(
            ShoppingList, ShoppingItem.shopping_list_id == ShoppingList.id
        ).where(ShoppingList.user_id == user_id)

    async def get_by_id_and_owner(self, item_id: int, user_id: int) -> ShoppingItem | None:
        result = await self.db.execute(
            self._owned_by(user_id).where(ShoppingItem.id == item_id)
        )
        return result.scalar_one_or_none()

    async def get_by_sync_id(self, sync_id: str) -> ShoppingItem | None:
        result = await self.db.execute(
            select(ShoppingItem)
            .where(ShoppingItem.sync_id == sync_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_sync_id_and_owner(self, sync_id: str, user_id: int) -> ShoppingItem | None:
        result = await self.db.execute(
            self._owned_by(user_id)
            .where(ShoppingItem.sync_id == sync_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def exists_by_sync_id_and_owner(self, sync_id: str, user_id: int) -> bool:
        return await self.get_by_sync_id_and_owner(sync_id, user_id) is not None

    async def is_owned_by(self, item: ShoppingItem, user_id: int) -> bool:
        """Check the owner of the item's list."""
        result = await self.db.execute(
            select(ShoppingList.user_id).where(ShoppingList.id == item.shopping_list_id)
        )
        return result.scalar_one_or_none() == user_id

    async def list_by_owner(self, user_id: int) -> list[ShoppingItem]:
        result = await self.db.execute(self._owned_by(user_id).order_by(ShoppingItem.id))
        return list(result.scalars().all())

    async def list_by_list(self, list_id: int) -> list[ShoppingItem]:
        """Items of one list in display order."""
        result = await self.db.execute(
            select(ShoppingItem)
            .where(ShoppingItem.shopping_list_id == list_id)
            .order_by(ShoppingItem.sort_index, ShoppingItem.id)
        )
        return list(result.scalars().all())

    async def find_changed_since(self, user_id: int, since: datetime) -> list[ShoppingItem]:
        result = await self.db.execute(
            self._owned_by(user_id)
            .where(ShoppingItem.last_synced > since)
            .order_by(ShoppingItem.id)
        )
        return list(result.scalars().all())

    async def create(self, shopping_list: ShoppingList, data: ShoppingItemCreate) -> ShoppingItem:
        """Create an item from the REST API with a server-assigned sync id."""
        now = utcnow()
        item = ShoppingItem(
            **{field: getattr(data, field) for field in ITEM_FIELDS},
            shopping_list_id=shopping_list.id,
            sync_id=new_sync_id(),
            created_at=now,
            updated_at=now,
            last_synced=now,
            version=0,
        )
        return await self.insert(item)

    async def insert(self, item: ShoppingItem) -> ShoppingItem:
        """Plain insert; a duplicate sync id surfaces as ``IntegrityError``."""
        async with self.db.begin_nested():
            self.db.add(item)
            await self.db.flush()
        await self.db.refresh(item)
        return item

    async def update(self, item: ShoppingItem, data: ShoppingItemUpdate) -> ShoppingItem:
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)

        for field, value in update_data.items():
            setattr(item, field, value)

        now = utcnow()
        item.updated_at = now
        item.last_synced = now
        item.version += 1
        await self.db.flush()
        await self.db.refresh(item)
        return item

    async def overwrite(
        self, item: ShoppingItem, dto: ShoppingItemDto, sync_time: datetime
    ) -> ShoppingItem:
        """Replace client-editable fields and stamp the shared sync time."""
        for field in ITEM_FIELDS:
            setattr(item, field, getattr(dto, field))
        item.updated_at = sync_time
        item.last_synced = sync_time
        item.version += 1
        await self.db.flush()
        return item

    def build_from_sync(
        self,
        shopping_list: ShoppingList,
        dto: ShoppingItemDto,
        sync_id: str,
        sync_time: datetime,
    ) -> ShoppingItem:
        return ShoppingItem(
            **{field: getattr(dto, field) for field in ITEM_FIELDS},
            shopping_list_id=shopping_list.id,
            sync_id=sync_id,
            created_at=sync_time,
            updated_at=sync_time,
            last_synced=sync_time,
            version=0,
        )

    async def upsert_by_sync_id(
        self, shopping_list: ShoppingList, dto: ShoppingItemDto, sync_time: datetime
    ) -> ShoppingItem | None:
        """Insert or conditionally update in one statement.

        The update branch is restricted to an item already in ``shopping_list``,
        which the caller has verified belongs to the principal.
        """
        values = {field: getattr(dto, field) for field in ITEM_FIELDS}
        values.update(
            shopping_list_id=shopping_list.id,
            sync_id=dto.sync_id,
            created_at=sync_time,
            updated_at=sync_time,
            last_synced=sync_time,
            version=0,
        )
        stmt = build_sync_id_upsert(
            self.db,
            ShoppingItem,
            values=values,
            update_columns=[*ITEM_FIELDS, "updated_at", "last_synced"],
            where=and_(
                ShoppingItem.shopping_list_id == shopping_list.id,
                incoming_wins_clause(ShoppingItem.updated_at, dto.updated_at),
            ),
        )
        if stmt is None:
            return None
        result = await self.db.execute(stmt)
        item_id = result.scalar_one_or_none()
        if item_id is None:
            return None
        return await self.reload(item_id)

    async def reload(self, item_id: int) -> ShoppingItem | None:
        result = await self.db.execute(
            select(ShoppingItem)
            .where(ShoppingItem.id == item_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def delete(self, item: ShoppingItem) -> None:
        await self.db.delete(item)
        await self.db.flush()

    @staticmethod
    def to_dto(item: ShoppingItem) -> ShoppingItemDto:
        return ShoppingItemDto.model_validate(item)
