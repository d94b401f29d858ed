"""Durable key/value storage."""

from storefront.infrastructure.storage.local_storage import LocalStorage

__all__ = ["LocalStorage"]
