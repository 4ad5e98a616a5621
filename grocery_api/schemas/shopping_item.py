"""Shopping item schemas."""

from typing import Annotated

from pydantic import Field

from grocery_api.schemas.common import CamelModel, SyncId, UTCDateTime


class ShoppingItemBase(CamelModel):
    """Fields shared by every shopping item schema."""

    name: Annotated[str, Field(min_length=1, max_length=255)]
    quantity: Annotated[float, Field(gt=0)] = 1.0
    unit_type: Annotated[str, Field(min_length=1, max_length=50)] = "units"
    checked: bool = False
    sort_index: int = 0


class ShoppingItemDto(ShoppingItemBase):
    """Shopping item as exchanged with clients, both for CRUD and sync."""

    id: int | None = None
    shopping_list_id: int | None = None
    sync_id: SyncId = None
    created_at: UTCDateTime | None = None
    updated_at: UTCDateTime | None = None
    last_synced: UTCDateTime | None = None
    version: int | None = None


class ShoppingItemCreate(ShoppingItemBase):
    """Schema for shopping item creation."""

    shopping_list_id: int


class ShoppingItemUpdate(CamelModel):
    """Schema for updating a shopping item."""

    name: Annotated[str | None, Field(min_length=1, max_length=255)] = None
    quantity: Annotated[float | None, Field(gt=0)] = None
    unit_type: Annotated[str | None, Field(min_length=1, max_length=50)] = None
    checked: bool | None = None
    sort_index: int | None = None
