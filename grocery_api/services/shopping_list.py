"""Shopping list repository service."""

from datetime import datetime

from sqlalchemy import and_, delete, exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from grocery_api.models.shopping_item import ShoppingItem
from grocery_api.models.shopping_list import ShoppingList
from grocery_api.schemas.shopping_list import (
    ShoppingListCreate,
    ShoppingListDto,
    ShoppingListUpdate,
)
from grocery_api.services.upsert import build_sync_id_upsert
from grocery_api.sync.conflict import incoming_wins_clause
from grocery_api.utils import new_sync_id, utcnow


class ShoppingListService:
    """Persistence operations for shopping lists, always scoped to an owner."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id_and_owner(self, list_id: int, user_id: int) -> ShoppingList | None:
        result = await self.db.execute(
            select(ShoppingList).where(
                ShoppingList.id == list_id, ShoppingList.user_id == user_id
            )
        )
        return result.scalar_one_or_none()

    async def get_by_sync_id_and_owner(self, sync_id: str, user_id: int) -> ShoppingList | None:
        result = await self.db.execute(
            select(ShoppingList)
            .where(ShoppingList.sync_id == sync_id, ShoppingList.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def exists_by_sync_id_and_owner(self, sync_id: str, user_id: int) -> bool:
        result = await self.db.execute(
            select(
                exists().where(
                    ShoppingList.sync_id == sync_id, ShoppingList.user_id == user_id
                )
            )
        )
        return bool(result.scalar())

    async def list_by_owner(self, user_id: int) -> list[ShoppingList]:
        result = await self.db.execute(
            select(ShoppingList)
            .where(ShoppingList.user_id == user_id)
            .order_by(ShoppingList.id)
        )
        return list(result.scalars().all())

    async def find_changed_since(self, user_id: int, since: datetime) -> list[ShoppingList]:
        """Lists of the owner whose last sync stamp is strictly after ``since``."""
        result = await self.db.execute(
            select(ShoppingList)
            .where(ShoppingList.user_id == user_id, ShoppingList.last_synced > since)
            .order_by(ShoppingList.id)
        )
        return list(result.scalars().all())

    async def create(self, user_id: int, data: ShoppingListCreate) -> ShoppingList:
        """Create a list from the REST API with a server-assigned sync id."""
        now = utcnow()
        shopping_list = ShoppingList(
            name=data.name,
            user_id=user_id,
            sync_id=new_sync_id(),
            created_at=now,
            updated_at=now,
            last_synced=now,
            version=0,
        )
        return await self.insert(shopping_list)

    async def insert(self, shopping_list: ShoppingList) -> ShoppingList:
        """Plain insert; a duplicate sync id surfaces as ``IntegrityError``."""
        async with self.db.begin_nested():
            self.db.add(shopping_list)
            await self.db.flush()
        await self.db.refresh(shopping_list)
        return shopping_list

    async def update(self, shopping_list: ShoppingList, data: ShoppingListUpdate) -> ShoppingList:
        now = utcnow()
        shopping_list.name = data.name
        shopping_list.updated_at = now
        shopping_list.last_synced = now
        shopping_list.version += 1
        await self.db.flush()
        await self.db.refresh(shopping_list)
        return shopping_list

    async def overwrite(
        self, shopping_list: ShoppingList, dto: ShoppingListDto, sync_time: datetime
    ) -> ShoppingList:
        """Replace client-editable fields and stamp the shared sync time."""
        shopping_list.name = dto.name
        shopping_list.updated_at = sync_time
        shopping_list.last_synced = sync_time
        shopping_list.version += 1
        await self.db.flush()
        return shopping_list

    def build_from_sync(
        self, user_id: int, dto: ShoppingListDto, sync_id: str, sync_time: datetime
    ) -> ShoppingList:
        return ShoppingList(
            name=dto.name,
            user_id=user_id,
            sync_id=sync_id,
            created_at=sync_time,
            updated_at=sync_time,
            last_synced=sync_time,
            version=0,
        )

    async def upsert_by_sync_id(
        self, user_id: int, dto: ShoppingListDto, sync_time: datetime
    ) -> ShoppingList | None:
        """Insert or conditionally update in one statement.

        Returns the written row, or ``None`` when the dialect has no upsert or
        the stored row was left untouched (foreign owner or stale client copy).
        """
        stmt = build_sync_id_upsert(
            self.db,
            ShoppingList,
            values={
                "name": dto.name,
                "user_id": user_id,
                "sync_id": dto.sync_id,
                "created_at": sync_time,
                "updated_at": sync_time,
                "last_synced": sync_time,
                "version": 0,
            },
            update_columns=["name", "updated_at", "last_synced"],
            where=and_(
                ShoppingList.user_id == user_id,
                incoming_wins_clause(ShoppingList.updated_at, dto.updated_at),
            ),
        )
        if stmt is None:
            return None
        result = await self.db.execute(stmt)
        list_id = result.scalar_one_or_none()
        if list_id is None:
            return None
        return await self.reload(list_id)

    async def reload(self, list_id: int) -> ShoppingList | None:
        result = await self.db.execute(
            select(ShoppingList)
            .where(ShoppingList.id == list_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def delete(self, shopping_list: ShoppingList) -> None:
        """Hard delete a list together with its items."""
        await self.db.execute(
            delete(ShoppingItem).where(ShoppingItem.shopping_list_id == shopping_list.id)
        )
        await self.db.delete(shopping_list)
        await self.db.flush()

    @staticmethod
    def to_dto(shopping_list: ShoppingList) -> ShoppingListDto:
        return ShoppingListDto.model_validate(shopping_list)
