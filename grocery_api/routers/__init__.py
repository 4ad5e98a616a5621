"""API routers."""

from grocery_api.routers.auth import router as auth_router
from grocery_api.routers.health import router as health_router
from grocery_api.routers.shopping_items import router as shopping_items_router
from grocery_api.routers.shopping_lists import router as shopping_lists_router
from grocery_api.routers.stores import router as stores_router
from grocery_api.routers.sync import router as sync_router

__all__ = [
    "auth_router",
    "health_router",
    "shopping_items_router",
    "shopping_lists_router",
    "stores_router",
    "sync_router",
]
