"""Repositories: typed wrappers translating domain operations into API calls."""

from storefront.infrastructure.data.repositories.base import BaseRepository
from storefront.infrastructure.data.repositories.inventory import InventoryRepository
from storefront.infrastructure.data.repositories.orders import OrderRepository
from storefront.infrastructure.data.repositories.products import ProductRepository
from storefront.infrastructure.data.repositories.users import UserRepository

__all__ = [
    "BaseRepository",
    "InventoryRepository",
    "OrderRepository",
    "ProductRepository",
    "UserRepository",
]
