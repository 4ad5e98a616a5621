"""Pydantic schemas for API validation."""

from grocery_api.schemas.auth import (
    AuthResponse,
    LoginRequest,
    LogoutRequest,
    RefreshTokenRequest,
    SignupRequest,
    TokenResponse,
)
from grocery_api.schemas.common import MessageResponse
from grocery_api.schemas.shopping_item import (
    ShoppingItemCreate,
    ShoppingItemDto,
    ShoppingItemUpdate,
)
from grocery_api.schemas.shopping_list import (
    ShoppingListCreate,
    ShoppingListDto,
    ShoppingListUpdate,
)
from grocery_api.schemas.store_location import (
    StoreLocationCreate,
    StoreLocationDto,
    StoreLocationUpdate,
)
from grocery_api.schemas.sync import (
    DeletedItemDto,
    EntityType,
    SyncRequest,
    SyncResponse,
)
from grocery_api.schemas.user import UserResponse

__all__ = [
    "AuthResponse",
    "LoginRequest",
    "LogoutRequest",
    "RefreshTokenRequest",
    "SignupRequest",
    "TokenResponse",
    "MessageResponse",
    "UserResponse",
    "ShoppingListDto",
    "ShoppingListCreate",
    "ShoppingListUpdate",
    "ShoppingItemDto",
    "ShoppingItemCreate",
    "ShoppingItemUpdate",
    "StoreLocationDto",
    "StoreLocationCreate",
    "StoreLocationUpdate",
    "DeletedItemDto",
    "EntityType",
    "SyncRequest",
    "SyncResponse",
]
