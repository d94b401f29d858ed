"""Read-only views over the state container."""

from __future__ import annotations

from typing import Any

from storefront.domains.state import StateKey
from storefront.services.store.state_container import StateContainer


def line_price(item: dict[str, Any]) -> float:
    """Unit price after the line's discount, if any."""
    base = float(item.get("basePrice") or 0)
    discount = float(item.get("discountPercent") or 0)
    if discount > 0:
        return base * (1 - discount / 100)
    return base


def get_cart_items(store: StateContainer) -> list[dict[str, Any]]:
    return store.get(StateKey.CART) or []


def get_cart_total(store: StateContainer) -> float:
    return sum(line_price(item) * item.get("quantity", 0) for item in get_cart_items(store))


def get_cart_item_count(store: StateContainer) -> int:
    return sum(item.get("quantity", 0) for item in get_cart_items(store))


def get_cart_item(store: StateContainer, product_id: Any) -> dict[str, Any] | None:
    return next((item for item in get_cart_items(store) if item.get("productId") == product_id), None)


def is_product_in_cart(store: StateContainer, product_id: Any) -> bool:
    return get_cart_item(store, product_id) is not None


def get_current_user(store: StateContainer) -> dict[str, Any] | None:
    return store.get(StateKey.CURRENT_USER)


def is_admin(store: StateContainer) -> bool:
    return bool(store.get(StateKey.IS_ADMIN))


def is_logged_in(store: StateContainer) -> bool:
    return store.get(StateKey.CURRENT_USER) is not None
