"""
Reactive application state with durable persistence of a fixed subset.

`set` is the only mutation path. Each call swaps in a new mapping, then
notifies direct listeners and the event channel, then persists if the key
belongs to the persisted projection. Values are deep-copied on the way in and
on the way out, so callers and listeners never share container state.

Listeners run outside the internal lock, so a listener may call `set` again,
even for the key it is being notified about. The nested update is applied and
notified immediately; the outer notification loop then continues with the
value it was started with, and the last write wins in the state itself.
"""

from __future__ import annotations

import copy
import json
import threading
from typing import Any, Callable

from storefront.domains.state import (
    IDENTITY_KEYS,
    PERSISTED_KEYS,
    StateKey,
    coerce_key,
    default_state,
    validate_saved_state,
)
from storefront.infrastructure.storage.local_storage import APP_STATE_KEY, LocalStorage
from storefront.services.events import EventChannel, Events
from storefront.utils.logger import get_logger

logger = get_logger("store")

Listener = Callable[[StateKey, Any, Any], None]


class StateContainer:
    def __init__(
        self,
        storage: LocalStorage,
        events: EventChannel | None = None,
        initial: dict[StateKey | str, Any] | None = None,
    ) -> None:
        self._storage = storage
        self._events = events
        state = default_state()
        for key, value in (initial or {}).items():
            state[coerce_key(key)] = copy.deepcopy(value)
        self._state: dict[StateKey, Any] = state
        self._listeners: list[Listener] = []
        self._lock = threading.RLock()

    def get(self, key: StateKey | str | None = None) -> Any:
        """
        Return one value, or a snapshot of the whole state keyed by wire name.

        Both are deep copies; mutating them never affects the container.
        """
        with self._lock:
            if key is None:
                return {k.value: copy.deepcopy(v) for k, v in self._state.items()}
            return copy.deepcopy(self._state[coerce_key(key)])

    def set(self, key: StateKey | str, value: Any) -> None:
        """
        Replace the value of `key` with a deep copy of `value`.

        Raises:
            KeyError: If `key` is not a known state key.
        """
        skey = coerce_key(key)
        stored = copy.deepcopy(value)
        with self._lock:
            old_value = self._state[skey]
            self._state = {**self._state, skey: stored}
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(skey, copy.deepcopy(stored), copy.deepcopy(old_value))
            except Exception:
                logger.exception("Error in store listener for %s", skey.value)

        if self._events is not None:
            self._events.publish(
                Events.STORE_CHANGED,
                {
                    "key": skey.value,
                    "value": copy.deepcopy(stored),
                    "old_value": copy.deepcopy(old_value),
                },
            )

        if skey in PERSISTED_KEYS:
            self.persist()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register `listener(key, new_value, old_value)`. Returns an unsubscribe callable."""
        if not callable(listener):
            raise TypeError("Listener must be callable")
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _projection(self) -> dict[str, Any]:
        with self._lock:
            return {k.value: self._state[k] for k in PERSISTED_KEYS}

    def persist(self) -> bool:
        """
        Write the persisted projection to storage.

        Returns:
            True on success. Failures are logged and reported as False; in-memory
            state stays authoritative.
        """
        try:
            payload = json.dumps(self._projection(), separators=(",", ":"), ensure_ascii=False)
            self._storage.set_item(APP_STATE_KEY, payload)
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Failed to persist state: %s", e)
            return False

    def hydrate(self) -> bool:
        """
        Overlay persisted values onto the current state. Keys missing from
        storage keep their current values. Safe to call more than once.

        Returns:
            True if a stored payload was applied.
        """
        raw = self._storage.get_item(APP_STATE_KEY)
        if not raw:
            return False
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.warning("Failed to hydrate state, discarding stored copy: %s", e)
            self._clear_persisted()
            return False

        if not validate_saved_state(data):
            logger.warning("Stored state failed validation; ignoring it")
            return False

        with self._lock:
            merged = dict(self._state)
            for key in PERSISTED_KEYS:
                if key.value in data:
                    merged[key] = data[key.value]
            self._state = merged

        if self._events is not None:
            self._events.publish(Events.STORE_HYDRATED, self.get())
        return True

    def _clear_persisted(self) -> None:
        try:
            self._storage.remove_item(APP_STATE_KEY)
        except OSError as e:
            logger.warning("Failed to clear persisted state: %s", e)

    def reset(self) -> None:
        """Restore the identity keys (user, cart, admin flag) to defaults and persist."""
        defaults = default_state()
        for key in IDENTITY_KEYS:
            self.set(key, defaults[key])
        self.persist()
