"""Business logic and repository services."""

from grocery_api.services.auth import AuthService, UsernameOrEmailTaken
from grocery_api.services.shopping_item import ShoppingItemService
from grocery_api.services.shopping_list import ShoppingListService
from grocery_api.services.store_location import StoreLocationService
from grocery_api.services.user import UserService

__all__ = [
    "AuthService",
    "UsernameOrEmailTaken",
    "ShoppingItemService",
    "ShoppingListService",
    "StoreLocationService",
    "UserService",
]
