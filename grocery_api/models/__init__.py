"""SQLAlchemy models."""

from grocery_api.models.shopping_item import ShoppingItem
from grocery_api.models.shopping_list import ShoppingList
from grocery_api.models.store_location import StoreLocation
from grocery_api.models.user import RefreshToken, User

__all__ = [
    "User",
    "RefreshToken",
    "ShoppingList",
    "ShoppingItem",
    "StoreLocation",
]
