"""Per-kind application of a client batch against server state.

Every DTO is reconciled inside its own SAVEPOINT. The outcome of each DTO is
an :class:`Ok`, :class:`Skipped` or :class:`Err` value; only ``Ok`` values
make it into the result, the others are logged.

Reconciliation order for a DTO carrying a sync id:

1. single-statement upsert keyed on ``sync_id`` (when enabled and supported),
2. look-up by sync id followed by :func:`grocery_api.sync.conflict.resolve`,
3. plain insert, retried once as a re-read after a duplicate-key race.

DTOs without a sync id are created with a server-generated one.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generic, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from grocery_api.config import settings
from grocery_api.errors import (
    DuplicateKeyConflict,
    NotFound,
    OwnershipViolation,
    SyncError,
    TransientStoreError,
)
from grocery_api.models.shopping_item import ShoppingItem
from grocery_api.models.shopping_list import ShoppingList
from grocery_api.models.store_location import StoreLocation
from grocery_api.schemas.shopping_item import ShoppingItemDto
from grocery_api.schemas.shopping_list import ShoppingListDto
from grocery_api.schemas.store_location import StoreLocationDto
from grocery_api.services.shopping_item import ShoppingItemService
from grocery_api.services.shopping_list import ShoppingListService
from grocery_api.services.store_location import StoreLocationService
from grocery_api.services.upsert import supports_upsert
from grocery_api.sync.conflict import Decision, resolve
from grocery_api.sync.merge import HasSyncId
from grocery_api.utils import new_sync_id

logger = logging.getLogger(__name__)

DtoT = TypeVar("DtoT", bound=HasSyncId)
EntityT = TypeVar("EntityT")


@dataclass(frozen=True)
class Ok(Generic[DtoT]):
    value: DtoT


@dataclass(frozen=True)
class Skipped:
    reason: SyncError


@dataclass(frozen=True)
class Err:
    error: Exception


Outcome = Ok[Any] | Skipped | Err


class EntitySyncStrategy(ABC, Generic[DtoT, EntityT]):
    """Apply a batch of client DTOs of one entity kind.

    Subclasses supply the owner scope of a DTO and the repository calls; the
    reconciliation protocol itself lives here.
    """

    kind: str = "entity"

    def __init__(
        self,
        session: AsyncSession,
        *,
        atomic_upsert: bool | None = None,
        retry_delay_ms: int | None = None,
    ):
        self.session = session
        self.atomic_upsert = settings.sync_atomic_upsert if atomic_upsert is None else atomic_upsert
        self.retry_delay_ms = settings.sync_retry_delay_ms if retry_delay_ms is None else retry_delay_ms

    async def apply(
        self, batch: list[DtoT] | None, principal_id: int, sync_time: datetime
    ) -> list[DtoT]:
        """Reconcile ``batch`` for ``principal_id`` and return the resulting DTOs."""
        if not batch:
            return []

        outcomes = [await self._apply_one(dto, principal_id, sync_time) for dto in batch]

        for dto, outcome in zip(batch, outcomes):
            match outcome:
                case Skipped(reason=reason):
                    logger.debug(
                        f"Skipped {self.kind} {dto.sync_id}: "
                        f"{reason.code.value} {reason.message}"
                    )
                case Err(error=error):
                    logger.warning(
                        f"Failed to sync {self.kind} {dto.sync_id}: {error}",
                        extra={"extra_fields": {"kind": self.kind, "sync_id": dto.sync_id}},
                    )

        return [outcome.value for outcome in outcomes if isinstance(outcome, Ok)]

    async def _apply_one(self, dto: DtoT, principal_id: int, sync_time: datetime) -> Outcome:
        sync_id = dto.sync_id
        try:
            async with self.session.begin_nested():
                entity = await self.reconcile(dto, principal_id, sync_time)
                result = self.to_dto(entity)
        except (NotFound, OwnershipViolation) as exc:
            return Skipped(exc)
        except SyncError as exc:
            return Err(exc)
        except SQLAlchemyError as exc:
            return Err(TransientStoreError(str(exc), sync_id=sync_id))
        return Ok(result)

    async def reconcile(self, dto: DtoT, principal_id: int, sync_time: datetime) -> EntityT:
        scope = await self.resolve_scope(dto, principal_id)
        sync_id = dto.sync_id

        if not sync_id:
            return await self.insert(self.build(scope, dto, new_sync_id(), sync_time))

        if self.atomic_upsert and supports_upsert(self.session):
            entity = await self._atomic_upsert(scope, dto, sync_time)
            if entity is not None:
                return entity

        return await self._read_resolve_write(scope, dto, principal_id, sync_time)

    async def _atomic_upsert(self, scope: Any, dto: DtoT, sync_time: datetime) -> EntityT | None:
        try:
            async with self.session.begin_nested():
                return await self.upsert(scope, dto, sync_time)
        except SQLAlchemyError as exc:
            logger.warning(
                f"Atomic upsert failed for {self.kind} {dto.sync_id}, "
                f"falling back: {exc}"
            )
            return None

    async def _read_resolve_write(
        self, scope: Any, dto: DtoT, principal_id: int, sync_time: datetime
    ) -> EntityT:
        stored = await self.find_stored(dto, principal_id)

        match resolve(stored, dto):
            case Decision.CREATE:
                return await self._insert_or_reread(scope, dto, principal_id, sync_time)
            case Decision.OVERWRITE:
                return await self.overwrite(stored, dto, sync_time)
            case Decision.KEEP_STORED:
                return stored

    async def _insert_or_reread(
        self, scope: Any, dto: DtoT, principal_id: int, sync_time: datetime
    ) -> EntityT:
        sync_id = dto.sync_id
        try:
            return await self.insert(self.build(scope, dto, sync_id, sync_time))
        except IntegrityError as exc:
            conflict = DuplicateKeyConflict(str(exc.orig), sync_id=sync_id)

        logger.info(f"Duplicate {self.kind} {sync_id} on insert, re-reading")
        await asyncio.sleep(self.retry_delay_ms / 1000)

        stored = await self.find_stored(dto, principal_id)
        if stored is None:
            raise conflict
        return stored

    @abstractmethod
    async def resolve_scope(self, dto: DtoT, principal_id: int) -> Any:
        """Return the owner scope of ``dto`` or raise NotFound/OwnershipViolation."""

    @abstractmethod
    async def find_stored(self, dto: DtoT, principal_id: int) -> EntityT | None: ...

    @abstractmethod
    def build(self, scope: Any, dto: DtoT, sync_id: str, sync_time: datetime) -> EntityT: ...

    @abstractmethod
    async def insert(self, entity: EntityT) -> EntityT: ...

    @abstractmethod
    async def upsert(self, scope: Any, dto: DtoT, sync_time: datetime) -> EntityT | None: ...

    @abstractmethod
    async def overwrite(self, entity: EntityT, dto: DtoT, sync_time: datetime) -> EntityT: ...

    @abstractmethod
    def to_dto(self, entity: EntityT) -> DtoT: ...


class ShoppingListSyncStrategy(EntitySyncStrategy[ShoppingListDto, ShoppingList]):
    kind = "shopping_list"

    def __init__(self, session: AsyncSession, **kwargs: Any):
        super().__init__(session, **kwargs)
        self.repo = ShoppingListService(session)

    async def resolve_scope(self, dto: ShoppingListDto, principal_id: int) -> int:
        return principal_id

    async def find_stored(self, dto: ShoppingListDto, principal_id: int) -> ShoppingList | None:
        return await self.repo.get_by_sync_id_and_owner(dto.sync_id, principal_id)

    def build(self, scope: int, dto: ShoppingListDto, sync_id: str, sync_time: datetime) -> ShoppingList:
        return self.repo.build_from_sync(scope, dto, sync_id, sync_time)

    async def insert(self, entity: ShoppingList) -> ShoppingList:
        return await self.repo.insert(entity)

    async def upsert(self, scope: int, dto: ShoppingListDto, sync_time: datetime) -> ShoppingList | None:
        return await self.repo.upsert_by_sync_id(scope, dto, sync_time)

    async def overwrite(
        self, entity: ShoppingList, dto: ShoppingListDto, sync_time: datetime
    ) -> ShoppingList:
        return await self.repo.overwrite(entity, dto, sync_time)

    def to_dto(self, entity: ShoppingList) -> ShoppingListDto:
        return self.repo.to_dto(entity)


class ShoppingItemSyncStrategy(EntitySyncStrategy[ShoppingItemDto, ShoppingItem]):
    """Items are scoped by their parent list, which must belong to the principal."""

    kind = "shopping_item"

    def __init__(self, session: AsyncSession, **kwargs: Any):
        super().__init__(session, **kwargs)
        self.repo = ShoppingItemService(session)
        self.lists = ShoppingListService(session)

    async def resolve_scope(self, dto: ShoppingItemDto, principal_id: int) -> ShoppingList:
        if dto.shopping_list_id is None:
            raise NotFound("item has no shopping list", sync_id=dto.sync_id)
        shopping_list = await self.lists.get_by_id_and_owner(dto.shopping_list_id, principal_id)
        if shopping_list is None:
            raise NotFound(
                f"shopping list {dto.shopping_list_id} not found for user {principal_id}",
                sync_id=dto.sync_id,
            )
        return shopping_list

    async def find_stored(self, dto: ShoppingItemDto, principal_id: int) -> ShoppingItem | None:
        item = await self.repo.get_by_sync_id(dto.sync_id)
        if item is None:
            return None
        if not await self.repo.is_owned_by(item, principal_id):
            raise OwnershipViolation("item belongs to another user", sync_id=dto.sync_id)
        return item

    def build(
        self, scope: ShoppingList, dto: ShoppingItemDto, sync_id: str, sync_time: datetime
    ) -> ShoppingItem:
        return self.repo.build_from_sync(scope, dto, sync_id, sync_time)

    async def insert(self, entity: ShoppingItem) -> ShoppingItem:
        return await self.repo.insert(entity)

    async def upsert(
        self, scope: ShoppingList, dto: ShoppingItemDto, sync_time: datetime
    ) -> ShoppingItem | None:
        return await self.repo.upsert_by_sync_id(scope, dto, sync_time)

    async def overwrite(
        self, entity: ShoppingItem, dto: ShoppingItemDto, sync_time: datetime
    ) -> ShoppingItem:
        return await self.repo.overwrite(entity, dto, sync_time)

    def to_dto(self, entity: ShoppingItem) -> ShoppingItemDto:
        return self.repo.to_dto(entity)


class StoreLocationSyncStrategy(EntitySyncStrategy[StoreLocationDto, StoreLocation]):
    """Stores are matched by geofence first, then by sync id."""

    kind = "store_location"

    def __init__(self, session: AsyncSession, **kwargs: Any):
        super().__init__(session, **kwargs)
        self.repo = StoreLocationService(session)

    async def reconcile(
        self, dto: StoreLocationDto, principal_id: int, sync_time: datetime
    ) -> StoreLocation:
        same_geofence = await self.repo.get_by_geofence_id_and_owner(dto.geofence_id, principal_id)
        if same_geofence is None:
            return await super().reconcile(dto, principal_id, sync_time)

        if same_geofence.sync_id is None and dto.sync_id:
            same_geofence.sync_id = dto.sync_id
        return await self.repo.overwrite(same_geofence, dto, sync_time)

    async def resolve_scope(self, dto: StoreLocationDto, principal_id: int) -> int:
        return principal_id

    async def find_stored(self, dto: StoreLocationDto, principal_id: int) -> StoreLocation | None:
        return await self.repo.get_by_sync_id_and_owner(dto.sync_id, principal_id)

    def build(
        self, scope: int, dto: StoreLocationDto, sync_id: str, sync_time: datetime
    ) -> StoreLocation:
        return self.repo.build_from_sync(scope, dto, sync_id, sync_time)

    async def insert(self, entity: StoreLocation) -> StoreLocation:
        return await self.repo.insert(entity)

    async def upsert(
        self, scope: int, dto: StoreLocationDto, sync_time: datetime
    ) -> StoreLocation | None:
        return await self.repo.upsert_by_sync_id(scope, dto, sync_time)

    async def overwrite(
        self, entity: StoreLocation, dto: StoreLocationDto, sync_time: datetime
    ) -> StoreLocation:
        return await self.repo.overwrite(entity, dto, sync_time)

    def to_dto(self, entity: StoreLocation) -> StoreLocationDto:
        return self.repo.to_dto(entity)
