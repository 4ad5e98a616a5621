"""Store location repository service."""

from datetime import datetime

from sqlalchemy import and_, exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from grocery_api.models.store_location import StoreLocation
from grocery_api.schemas.store_location import (
    StoreLocationCreate,
    StoreLocationDto,
    StoreLocationUpdate,
)
from grocery_api.services.upsert import build_sync_id_upsert
from grocery_api.sync.conflict import incoming_wins_clause
from grocery_api.utils import new_sync_id, utcnow

# Fields a client may change on a store; geofence_id is only set on creation
STORE_FIELDS = ("name", "address", "latitude", "longitude")


class StoreLocationService:
    """Persistence operations for store locations, always scoped to an owner."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id_and_owner(self, store_id: int, user_id: int) -> StoreLocation | None:
        result = await self.db.execute(
            select(StoreLocation).where(
                StoreLocation.id == store_id, StoreLocation.user_id == user_id
            )
        )
        return result.scalar_one_or_none()

    async def get_by_sync_id_and_owner(self, sync_id: str, user_id: int) -> StoreLocation | None:
        result = await self.db.execute(
            select(StoreLocation)
            .where(StoreLocation.sync_id == sync_id, StoreLocation.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_geofence_id_and_owner(
        self, geofence_id: str, user_id: int
    ) -> StoreLocation | None:
        result = await self.db.execute(
            select(StoreLocation)
            .where(
                StoreLocation.geofence_id == geofence_id,
                StoreLocation.user_id == user_id,
            )
            .order_by(StoreLocation.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def exists_by_sync_id_and_owner(self, sync_id: str, user_id: int) -> bool:
        result = await self.db.execute(
            select(
                exists().where(
                    StoreLocation.sync_id == sync_id, StoreLocation.user_id == user_id
                )
            )
        )
        return bool(result.scalar())

    async def list_by_owner(self, user_id: int) -> list[StoreLocation]:
        result = await self.db.execute(
            select(StoreLocation)
            .where(StoreLocation.user_id == user_id)
            .order_by(StoreLocation.id)
        )
        return list(result.scalars().all())

    async def find_changed_since(self, user_id: int, since: datetime) -> list[StoreLocation]:
        result = await self.db.execute(
            select(StoreLocation)
            .where(StoreLocation.user_id == user_id, StoreLocation.last_synced > since)
            .order_by(StoreLocation.id)
        )
        return list(result.scalars().all())

    async def find_nearby(
        self, user_id: int, latitude: float, longitude: float, radius: float
    ) -> list[StoreLocation]:
        """Stores within ``radius`` degrees of a point (planar approximation)."""
        distance_squared = (StoreLocation.latitude - latitude) * (
            StoreLocation.latitude - latitude
        ) + (StoreLocation.longitude - longitude) * (StoreLocation.longitude - longitude)
        result = await self.db.execute(
            select(StoreLocation)
            .where(StoreLocation.user_id == user_id, distance_squared < radius * radius)
            .order_by(distance_squared)
        )
        return list(result.scalars().all())

    async def create(self, user_id: int, data: StoreLocationCreate) -> StoreLocation:
        """Create a store from the REST API with a server-assigned sync id."""
        now = utcnow()
        store = StoreLocation(
            **{field: getattr(data, field) for field in STORE_FIELDS},
            geofence_id=data.geofence_id,
            user_id=user_id,
            sync_id=new_sync_id(),
            created_at=now,
            updated_at=now,
            last_synced=now,
            version=0,
        )
        return await self.insert(store)

    async def insert(self, store: StoreLocation) -> StoreLocation:
        """Plain insert; a duplicate sync id surfaces as ``IntegrityError``."""
        async with self.db.begin_nested():
            self.db.add(store)
            await self.db.flush()
        await self.db.refresh(store)
        return store

    async def update(self, store: StoreLocation, data: StoreLocationUpdate) -> StoreLocation:
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)

        for field, value in update_data.items():
            setattr(store, field, value)

        now = utcnow()
        store.updated_at = now
        store.last_synced = now
        store.version += 1
        await self.db.flush()
        await self.db.refresh(store)
        return store

    async def overwrite(
        self, store: StoreLocation, dto: StoreLocationDto, sync_time: datetime
    ) -> StoreLocation:
        """Replace client-editable fields and stamp the shared sync time."""
        for field in STORE_FIELDS:
            setattr(store, field, getattr(dto, field))
        store.updated_at = sync_time
        store.last_synced = sync_time
        store.version += 1
        await self.db.flush()
        return store

    def build_from_sync(
        self, user_id: int, dto: StoreLocationDto, sync_id: str, sync_time: datetime
    ) -> StoreLocation:
        return StoreLocation(
            **{field: getattr(dto, field) for field in STORE_FIELDS},
            geofence_id=dto.geofence_id,
            user_id=user_id,
            sync_id=sync_id,
            created_at=sync_time,
            updated_at=sync_time,
            last_synced=sync_time,
            version=0,
        )

    async def upsert_by_sync_id(
        self, user_id: int, dto: StoreLocationDto, sync_time: datetime
    ) -> StoreLocation | None:
        """Insert or conditionally update in one statement."""
        values = {field: getattr(dto, field) for field in STORE_FIELDS}
        values.update(
            geofence_id=dto.geofence_id,
            user_id=user_id,
            sync_id=dto.sync_id,
            created_at=sync_time,
            updated_at=sync_time,
            last_synced=sync_time,
            version=0,
        )
        stmt = build_sync_id_upsert(
            self.db,
            StoreLocation,
            values=values,
            update_columns=[*STORE_FIELDS, "updated_at", "last_synced"],
            where=and_(
                StoreLocation.user_id == user_id,
                incoming_wins_clause(StoreLocation.updated_at, dto.updated_at),
            ),
        )
        if stmt is None:
            return None
        result = await self.db.execute(stmt)
        store_id = result.scalar_one_or_none()
        if store_id is None:
            return None
        return await self.reload(store_id)

    async def reload(self, store_id: int) -> StoreLocation | None:
        result = await self.db.execute(
            select(StoreLocation)
            .where(StoreLocation.id == store_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def delete(self, store: StoreLocation) -> None:
        await self.db.delete(store)
        await self.db.flush()

    @staticmethod
    def to_dto(store: StoreLocation) -> StoreLocationDto:
        return StoreLocationDto.model_validate(store)
