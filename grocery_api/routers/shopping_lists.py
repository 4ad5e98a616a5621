"""Shopping list CRUD endpoints."""

from fastapi import APIRouter, HTTPException, status

from grocery_api.dependencies import CurrentUser, DbSession
from grocery_api.models.shopping_list import ShoppingList
from grocery_api.schemas.shopping_list import (
    ShoppingListCreate,
    ShoppingListDto,
    ShoppingListUpdate,
)
from grocery_api.services.shopping_list import ShoppingListService

router = APIRouter(prefix="/api/shopping-lists", tags=["shopping-lists"])


async def _get_owned(service: ShoppingListService, list_id: int, user_id: int) -> ShoppingList:
    shopping_list = await service.get_by_id_and_owner(list_id, user_id)
    if shopping_list is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Shopping list not found",
        )
    return shopping_list


@router.get("", response_model=list[ShoppingListDto])
async def list_shopping_lists(current_user: CurrentUser, db: DbSession) -> list[ShoppingListDto]:
    service = ShoppingListService(db)
    return [service.to_dto(shopping_list) for shopping_list in await service.list_by_owner(current_user.id)]


@router.get("/{list_id}", response_model=ShoppingListDto)
async def get_shopping_list(list_id: int, current_user: CurrentUser, db: DbSession) -> ShoppingListDto:
    service = ShoppingListService(db)
    return service.to_dto(await _get_owned(service, list_id, current_user.id))


@router.post("", response_model=ShoppingListDto, status_code=status.HTTP_201_CREATED)
async def create_shopping_list(
    data: ShoppingListCreate, current_user: CurrentUser, db: DbSession
) -> ShoppingListDto:
    service = ShoppingListService(db)
    return service.to_dto(await service.create(current_user.id, data))


@router.put("/{list_id}", response_model=ShoppingListDto)
async def update_shopping_list(
    list_id: int, data: ShoppingListUpdate, current_user: CurrentUser, db: DbSession
) -> ShoppingListDto:
    service = ShoppingListService(db)
    shopping_list = await _get_owned(service, list_id, current_user.id)
    return service.to_dto(await service.update(shopping_list, data))


@router.delete("/{list_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_shopping_list(list_id: int, current_user: CurrentUser, db: DbSession) -> None:
    """Delete a list and all of its items."""
    service = ShoppingListService(db)
    await service.delete(await _get_owned(service, list_id, current_user.id))
