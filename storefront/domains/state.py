"""
Application state keys, defaults and the persisted projection.

The state bag is a closed enumeration: only the keys below may be read or
written through the state container.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class StateKey(str, Enum):
    CURRENT_USER = "currentUser"
    CART = "cart"
    IS_ADMIN = "isAdmin"
    PRODUCTS = "products"
    ORDERS = "orders"
    INVENTORY = "inventory"
    LAST_SYNC = "lastSync"


# Written to durable storage on every change; everything else is cache.
PERSISTED_KEYS: tuple[StateKey, ...] = (
    StateKey.CURRENT_USER,
    StateKey.CART,
    StateKey.IS_ADMIN,
    StateKey.LAST_SYNC,
)

# Restored by reset() on logout.
IDENTITY_KEYS: tuple[StateKey, ...] = (
    StateKey.CURRENT_USER,
    StateKey.CART,
    StateKey.IS_ADMIN,
)


def default_state() -> dict[StateKey, Any]:
    """Fresh defaults. Returns new list objects on every call."""
    return {
        StateKey.CURRENT_USER: None,
        StateKey.CART: [],
        StateKey.IS_ADMIN: False,
        StateKey.PRODUCTS: [],
        StateKey.ORDERS: [],
        StateKey.INVENTORY: [],
        StateKey.LAST_SYNC: None,
    }


def coerce_key(key: StateKey | str) -> StateKey:
    """
    Map a key or its wire name ("currentUser", ...) to a StateKey.

    Raises:
        KeyError: If the key is not part of the application state.
    """
    if isinstance(key, StateKey):
        return key
    try:
        return StateKey(key)
    except ValueError:
        raise KeyError(f"Unknown state key: {key!r}") from None


def _valid_cart_item(item: Any) -> bool:
    if not isinstance(item, dict):
        return False
    quantity = item.get("quantity")
    price = item.get("basePrice")
    return (
        bool(item.get("productId"))
        and bool(item.get("productName"))
        and isinstance(quantity, (int, float))
        and not isinstance(quantity, bool)
        and isinstance(price, (int, float))
        and not isinstance(price, bool)
    )


def validate_saved_state(data: Any) -> bool:
    """Structural check on a decoded persisted payload before it is applied."""
    if not isinstance(data, dict):
        return False
    cart = data.get(StateKey.CART.value)
    if cart is not None:
        if not isinstance(cart, list):
            return False
        if not all(_valid_cart_item(item) for item in cart):
            return False
    return True
