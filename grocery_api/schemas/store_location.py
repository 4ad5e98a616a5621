"""Store location schemas."""

from typing import Annotated

from pydantic import Field

from grocery_api.schemas.common import CamelModel, SyncId, UTCDateTime


class StoreLocationBase(CamelModel):
    """Fields shared by every store location schema."""

    name: Annotated[str, Field(min_length=1, max_length=255)]
    address: Annotated[str, Field(min_length=1, max_length=500)]
    latitude: Annotated[float, Field(ge=-90, le=90)]
    longitude: Annotated[float, Field(ge=-180, le=180)]
    geofence_id: Annotated[str, Field(min_length=1, max_length=100)]


class StoreLocationDto(StoreLocationBase):
    """Store location as exchanged with clients, both for CRUD and sync."""

    id: int | None = None
    sync_id: SyncId = None
    created_at: UTCDateTime | None = None
    updated_at: UTCDateTime | None = None
    last_synced: UTCDateTime | None = None
    version: int | None = None


class StoreLocationCreate(StoreLocationBase):
    """Schema for store location creation."""

    pass


class StoreLocationUpdate(CamelModel):
    """Schema for updating a store location."""

    name: Annotated[str | None, Field(min_length=1, max_length=255)] = None
    address: Annotated[str | None, Field(min_length=1, max_length=500)] = None
    latitude: Annotated[float | None, Field(ge=-90, le=90)] = None
    longitude: Annotated[float | None, Field(ge=-180, le=180)] = None
