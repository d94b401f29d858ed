"""
Publish/subscribe event channel.

Handlers run synchronously on the publishing thread, in subscription order.
A handler that raises is logged and skipped; its siblings still run and the
publisher never sees the exception.
"""

from __future__ import annotations

import threading
from typing import Any, Callable

from storefront.utils.logger import get_logger

logger = get_logger("events")

Handler = Callable[[Any], None]


class Events:
    """Channel names shared by the client layer and its collaborators."""

    STORE_CHANGED = "store:changed"
    STORE_HYDRATED = "store:hydrated"

    AUTH_LOGIN = "auth:login"
    AUTH_LOGOUT = "auth:logout"
    AUTH_ERROR = "auth:error"

    CART_ITEM_ADDED = "cart:item:added"
    CART_ITEM_REMOVED = "cart:item:removed"
    CART_ITEM_UPDATED = "cart:item:updated"
    CART_CLEARED = "cart:cleared"

    PRODUCTS_LOADED = "products:loaded"
    ORDERS_LOADED = "orders:loaded"
    INVENTORY_LOADED = "inventory:loaded"
    CACHE_INVALIDATED = "cache:invalidated"

    SYNC_COMPLETED = "sync:completed"
    SYNC_FAILED = "sync:failed"
    SYNC_REFRESHED = "sync:refreshed"


class _Subscription:
    __slots__ = ("handler", "active")

    def __init__(self, handler: Handler) -> None:
        self.handler = handler
        self.active = True


class EventChannel:
    def __init__(self) -> None:
        self._channels: dict[str, list[_Subscription]] = {}
        self._lock = threading.Lock()

    def subscribe(self, channel: str, handler: Handler) -> Callable[[], None]:
        """
        Register `handler` on `channel`, creating the channel if needed.

        Returns:
            A callable that removes this subscription. Calling it twice is harmless.

        Raises:
            TypeError: If handler is not callable.
        """
        if not callable(handler):
            raise TypeError("Handler must be callable")
        sub = _Subscription(handler)
        with self._lock:
            self._channels.setdefault(channel, []).append(sub)

        def unsubscribe() -> None:
            self._remove(channel, sub)

        return unsubscribe

    def subscribe_once(self, channel: str, handler: Handler) -> Callable[[], None]:
        """Like subscribe, but the subscription removes itself before the first call."""
        if not callable(handler):
            raise TypeError("Handler must be callable")
        unsubscribe: Callable[[], None]

        def once(payload: Any) -> None:
            unsubscribe()
            handler(payload)

        unsubscribe = self.subscribe(channel, once)
        return unsubscribe

    def _remove(self, channel: str, sub: _Subscription) -> None:
        with self._lock:
            sub.active = False
            subs = self._channels.get(channel)
            if subs is None:
                return
            if sub in subs:
                subs.remove(sub)
            if not subs:
                del self._channels[channel]

    def publish(self, channel: str, payload: Any = None) -> None:
        with self._lock:
            subs = list(self._channels.get(channel, ()))
        for sub in subs:
            # Removed by an earlier handler in this same publish.
            if not sub.active:
                continue
            try:
                sub.handler(payload)
            except Exception:
                logger.exception("Error in event handler for %r", channel)

    def unsubscribe_all(self, channel: str) -> None:
        with self._lock:
            for sub in self._channels.pop(channel, ()):
                sub.active = False

    def count(self, channel: str) -> int:
        with self._lock:
            return len(self._channels.get(channel, ()))

    def channels(self) -> list[str]:
        with self._lock:
            return list(self._channels)

    def clear(self) -> None:
        with self._lock:
            for subs in self._channels.values():
                for sub in subs:
                    sub.active = False
            self._channels.clear()
