"""State container plus the actions and selectors built on it."""

from storefront.services.store.state_container import StateContainer

__all__ = ["StateContainer"]
