"""Shopping item CRUD endpoints."""

from fastapi import APIRouter, HTTPException, status

from grocery_api.dependencies import CurrentUser, DbSession
from grocery_api.models.shopping_item import ShoppingItem
from grocery_api.models.shopping_list import ShoppingList
from grocery_api.schemas.shopping_item import (
    ShoppingItemCreate,
    ShoppingItemDto,
    ShoppingItemUpdate,
)
from grocery_api.services.shopping_item import ShoppingItemService
from grocery_api.services.shopping_list import ShoppingListService

router = APIRouter(prefix="/api/shopping-items", tags=["shopping-items"])


async def _get_owned_list(db, list_id: int, user_id: int) -> ShoppingList:
    shopping_list = await ShoppingListService(db).get_by_id_and_owner(list_id, user_id)
    if shopping_list is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Shopping list not found",
        )
    return shopping_list


async def _get_owned_item(service: ShoppingItemService, item_id: int, user_id: int) -> ShoppingItem:
    item = await service.get_by_id_and_owner(item_id, user_id)
    if item is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Shopping item not found",
        )
    return item


@router.get("/list/{list_id}", response_model=list[ShoppingItemDto])
async def list_items(list_id: int, current_user: CurrentUser, db: DbSession) -> list[ShoppingItemDto]:
    """Items of a list ordered by their sort index."""
    shopping_list = await _get_owned_list(db, list_id, current_user.id)
    service = ShoppingItemService(db)
    return [service.to_dto(item) for item in await service.list_by_list(shopping_list.id)]


@router.get("/{item_id}", response_model=ShoppingItemDto)
async def get_item(item_id: int, current_user: CurrentUser, db: DbSession) -> ShoppingItemDto:
    service = ShoppingItemService(db)
    return service.to_dto(await _get_owned_item(service, item_id, current_user.id))


@router.post("", response_model=ShoppingItemDto, status_code=status.HTTP_201_CREATED)
async def create_item(
    data: ShoppingItemCreate, current_user: CurrentUser, db: DbSession
) -> ShoppingItemDto:
    shopping_list = await _get_owned_list(db, data.shopping_list_id, current_user.id)
    service = ShoppingItemService(db)
    return service.to_dto(await service.create(shopping_list, data))


@router.put("/{item_id}", response_model=ShoppingItemDto)
async def update_item(
    item_id: int, data: ShoppingItemUpdate, current_user: CurrentUser, db: DbSession
) -> ShoppingItemDto:
    service = ShoppingItemService(db)
    item = await _get_owned_item(service, item_id, current_user.id)
    return service.to_dto(await service.update(item, data))


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(item_id: int, current_user: CurrentUser, db: DbSession) -> None:
    service = ShoppingItemService(db)
    await service.delete(await _get_owned_item(service, item_id, current_user.id))
