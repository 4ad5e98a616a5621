"""Server-side changes since a client checkpoint."""

from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime
from typing import Any, Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from grocery_api.schemas.shopping_item import ShoppingItemDto
from grocery_api.schemas.shopping_list import ShoppingListDto
from grocery_api.schemas.store_location import StoreLocationDto
from grocery_api.services.shopping_item import ShoppingItemService
from grocery_api.services.shopping_list import ShoppingListService
from grocery_api.services.store_location import StoreLocationService

DtoT = TypeVar("DtoT")


class ChangeFeed(Generic[DtoT]):
    """Read-only view of one entity kind for a principal.

    With no checkpoint every owned entity is returned, otherwise those whose
    ``last_synced`` is strictly after the checkpoint.
    """

    def __init__(
        self,
        list_all: Callable[[int], Awaitable[Sequence[Any]]],
        changed_since: Callable[[int, datetime], Awaitable[Sequence[Any]]],
        to_dto: Callable[[Any], DtoT],
    ):
        self._list_all = list_all
        self._changed_since = changed_since
        self._to_dto = to_dto

    async def get_changed(self, principal_id: int, checkpoint: datetime | None) -> list[DtoT]:
        if checkpoint is None:
            entities = await self._list_all(principal_id)
        else:
            entities = await self._changed_since(principal_id, checkpoint)
        return [self._to_dto(entity) for entity in entities]

    @classmethod
    def for_shopping_lists(cls, session: AsyncSession) -> "ChangeFeed[ShoppingListDto]":
        repo = ShoppingListService(session)
        return cls(repo.list_by_owner, repo.find_changed_since, repo.to_dto)

    @classmethod
    def for_shopping_items(cls, session: AsyncSession) -> "ChangeFeed[ShoppingItemDto]":
        repo = ShoppingItemService(session)
        return cls(repo.list_by_owner, repo.find_changed_since, repo.to_dto)

    @classmethod
    def for_store_locations(cls, session: AsyncSession) -> "ChangeFeed[StoreLocationDto]":
        repo = StoreLocationService(session)
        return cls(repo.list_by_owner, repo.find_changed_since, repo.to_dto)
