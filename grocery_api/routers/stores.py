"""Store location CRUD and proximity endpoints."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from grocery_api.dependencies import CurrentUser, DbSession
from grocery_api.models.store_location import StoreLocation
from grocery_api.schemas.store_location import (
    StoreLocationCreate,
    StoreLocationDto,
    StoreLocationUpdate,
)
from grocery_api.services.store_location import StoreLocationService

router = APIRouter(prefix="/api/stores", tags=["stores"])


async def _get_owned(service: StoreLocationService, store_id: int, user_id: int) -> StoreLocation:
    store = await service.get_by_id_and_owner(store_id, user_id)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Store location not found",
        )
    return store


@router.get("", response_model=list[StoreLocationDto])
async def list_stores(current_user: CurrentUser, db: DbSession) -> list[StoreLocationDto]:
    service = StoreLocationService(db)
    return [service.to_dto(store) for store in await service.list_by_owner(current_user.id)]


# Must precede /{store_id}
@router.get("/nearby", response_model=list[StoreLocationDto])
async def nearby_stores(
    current_user: CurrentUser,
    db: DbSession,
    latitude: Annotated[float, Query(ge=-90, le=90)],
    longitude: Annotated[float, Query(ge=-180, le=180)],
    radius: Annotated[float, Query(gt=0)] = 0.01,
) -> list[StoreLocationDto]:
    """Stores within ``radius`` degrees of the given point, closest first."""
    service = StoreLocationService(db)
    stores = await service.find_nearby(current_user.id, latitude, longitude, radius)
    return [service.to_dto(store) for store in stores]


@router.get("/{store_id}", response_model=StoreLocationDto)
async def get_store(store_id: int, current_user: CurrentUser, db: DbSession) -> StoreLocationDto:
    service = StoreLocationService(db)
    return service.to_dto(await _get_owned(service, store_id, current_user.id))


@router.post("", response_model=StoreLocationDto, status_code=status.HTTP_201_CREATED)
async def create_store(
    data: StoreLocationCreate, current_user: CurrentUser, db: DbSession
) -> StoreLocationDto:
    service = StoreLocationService(db)
    return service.to_dto(await service.create(current_user.id, data))


@router.put("/{store_id}", response_model=StoreLocationDto)
async def update_store(
    store_id: int, data: StoreLocationUpdate, current_user: CurrentUser, db: DbSession
) -> StoreLocationDto:
    service = StoreLocationService(db)
    store = await _get_owned(service, store_id, current_user.id)
    return service.to_dto(await service.update(store, data))


@router.delete("/{store_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_store(store_id: int, current_user: CurrentUser, db: DbSession) -> None:
    service = StoreLocationService(db)
    await service.delete(await _get_owned(service, store_id, current_user.id))
