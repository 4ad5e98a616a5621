"""Schemas for the batch synchronization endpoint."""

import enum
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from grocery_api.config import settings
from grocery_api.schemas.common import CamelModel, SyncId, UTCDateTime
from grocery_api.schemas.shopping_item import ShoppingItemDto
from grocery_api.schemas.shopping_list import ShoppingListDto
from grocery_api.schemas.store_location import StoreLocationDto


class EntityType(str, enum.Enum):
    """Kind of entity a tombstone refers to."""

    SHOPPING_ITEM = "SHOPPING_ITEM"
    SHOPPING_LIST = "SHOPPING_LIST"
    STORE_LOCATION = "STORE_LOCATION"
    UNKNOWN = "UNKNOWN"


def _parse_entity_type(value: Any) -> EntityType:
    if isinstance(value, EntityType):
        return value
    try:
        return EntityType(value)
    except ValueError:
        return EntityType.UNKNOWN


class DeletedItemDto(CamelModel):
    """Tombstone declared by a client for an entity it deleted locally."""

    sync_id: SyncId = None
    original_id: int | None = None
    entity_type: Annotated[EntityType, BeforeValidator(_parse_entity_type)] = EntityType.UNKNOWN
    deleted_at: UTCDateTime | None = None


MAX_BATCH = settings.sync_max_batch_size


class SyncRequest(CamelModel):
    """Client changes proposed for reconciliation."""

    last_sync_timestamp: UTCDateTime | None = None
    shopping_lists: Annotated[list[ShoppingListDto], Field(max_length=MAX_BATCH)] | None = None
    shopping_items: Annotated[list[ShoppingItemDto], Field(max_length=MAX_BATCH)] | None = None
    store_locations: Annotated[list[StoreLocationDto], Field(max_length=MAX_BATCH)] | None = None
    deleted_items: Annotated[list[DeletedItemDto], Field(max_length=MAX_BATCH)] | None = None


class SyncResponse(CamelModel):
    """Merged server delta returned to the client."""

    server_timestamp: UTCDateTime
    shopping_lists: list[ShoppingListDto] = []
    shopping_items: list[ShoppingItemDto] = []
    store_locations: list[StoreLocationDto] = []
