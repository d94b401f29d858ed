"""
State mutations used by the UI layer: cart edits, login state, cached collections.

Every action builds a new value and hands it to `StateContainer.set`; nothing
here mutates a list that the container already holds.
"""

from __future__ import annotations

import time
from typing import Any

from storefront.domains.state import StateKey
from storefront.services.events import EventChannel, Events
from storefront.services.store.state_container import StateContainer


def _emit(events: EventChannel | None, channel: str, payload: Any = None) -> None:
    if events is not None:
        events.publish(channel, payload)


def add_to_cart(
    store: StateContainer,
    product: dict[str, Any],
    quantity: int = 1,
    events: EventChannel | None = None,
) -> None:
    """Add `quantity` of `product`, merging with an existing line for the same product."""
    cart = list(store.get(StateKey.CART) or [])
    for i, item in enumerate(cart):
        if item.get("productId") == product.get("id"):
            cart[i] = {**item, "quantity": item.get("quantity", 0) + quantity}
            break
    else:
        cart.append({
            "productId": product.get("id"),
            "productName": product.get("name"),
            "basePrice": product.get("basePrice"),
            "discountPercent": product.get("discountPercent") or 0,
            "quantity": quantity,
            "imageUrl": product.get("imageUrl"),
            "addedAt": int(time.time() * 1000),
        })
    store.set(StateKey.CART, cart)
    _emit(events, Events.CART_ITEM_ADDED, {"product": product, "quantity": quantity})


def remove_from_cart(store: StateContainer, product_id: Any, events: EventChannel | None = None) -> None:
    cart = [item for item in (store.get(StateKey.CART) or []) if item.get("productId") != product_id]
    store.set(StateKey.CART, cart)
    _emit(events, Events.CART_ITEM_REMOVED, {"productId": product_id})


def update_quantity(
    store: StateContainer,
    product_id: Any,
    quantity: int,
    events: EventChannel | None = None,
) -> None:
    """Set a line's quantity; zero or less removes the line. Unknown products are ignored."""
    cart = list(store.get(StateKey.CART) or [])
    index = next((i for i, item in enumerate(cart) if item.get("productId") == product_id), -1)
    if index < 0:
        return
    if quantity <= 0:
        del cart[index]
        store.set(StateKey.CART, cart)
        _emit(events, Events.CART_ITEM_REMOVED, {"productId": product_id})
    else:
        cart[index] = {**cart[index], "quantity": quantity}
        store.set(StateKey.CART, cart)
        _emit(events, Events.CART_ITEM_UPDATED, {"productId": product_id, "quantity": quantity})


def clear_cart(store: StateContainer, events: EventChannel | None = None) -> None:
    store.set(StateKey.CART, [])
    _emit(events, Events.CART_CLEARED)


def login(store: StateContainer, user: dict[str, Any], is_admin: bool = False) -> None:
    store.set(StateKey.CURRENT_USER, user)
    store.set(StateKey.IS_ADMIN, bool(is_admin))


def logout(store: StateContainer) -> None:
    store.reset()


_CACHE_EVENTS = {
    StateKey.PRODUCTS: Events.PRODUCTS_LOADED,
    StateKey.ORDERS: Events.ORDERS_LOADED,
    StateKey.INVENTORY: Events.INVENTORY_LOADED,
}


def cache_collection(
    store: StateContainer,
    key: StateKey,
    items: Any,
    events: EventChannel | None = None,
) -> None:
    """Replace a cached collection and announce it on its `<domain>:loaded` channel."""
    if key not in _CACHE_EVENTS:
        raise KeyError(f"{key.value} is not a cached collection")
    store.set(key, items)
    _emit(events, _CACHE_EVENTS[key], items)


def cache_products(store: StateContainer, products: Any, events: EventChannel | None = None) -> None:
    cache_collection(store, StateKey.PRODUCTS, products, events)


def cache_orders(store: StateContainer, orders: Any, events: EventChannel | None = None) -> None:
    cache_collection(store, StateKey.ORDERS, orders, events)


def cache_inventory(store: StateContainer, inventory: Any, events: EventChannel | None = None) -> None:
    cache_collection(store, StateKey.INVENTORY, inventory, events)


def invalidate_cache(
    store: StateContainer,
    key: StateKey | None = None,
    events: EventChannel | None = None,
) -> None:
    """Empty one cached collection, or all of them when `key` is None."""
    keys = [key] if key is not None else list(_CACHE_EVENTS)
    for k in keys:
        if k not in _CACHE_EVENTS:
            raise KeyError(f"{k.value} is not a cached collection")
        store.set(k, [])
    _emit(events, Events.CACHE_INVALIDATED, key.value if key is not None else None)
