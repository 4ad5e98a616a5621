"""Shopping list schemas."""

from typing import Annotated

from pydantic import Field

from grocery_api.schemas.common import CamelModel, SyncId, UTCDateTime


class ShoppingListDto(CamelModel):
    """Shopping list as exchanged with clients, both for CRUD and sync."""

    id: int | None = None
    name: Annotated[str, Field(min_length=1, max_length=100)]
    sync_id: SyncId = None
    created_at: UTCDateTime | None = None
    updated_at: UTCDateTime | None = None
    last_synced: UTCDateTime | None = None
    version: int | None = None


class ShoppingListCreate(CamelModel):
    """Schema for shopping list creation."""

    name: Annotated[str, Field(min_length=1, max_length=100)]


class ShoppingListUpdate(CamelModel):
    """Schema for updating a shopping list."""

    name: Annotated[str, Field(min_length=1, max_length=100)]
