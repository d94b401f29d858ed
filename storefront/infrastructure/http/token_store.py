"""Bearer token cache, written through to durable storage."""

from __future__ import annotations

from storefront.infrastructure.storage.local_storage import AUTH_TOKEN_KEY, LocalStorage
from storefront.utils.logger import get_logger

logger = get_logger("auth")


class TokenStore:
    """
    Holds the opaque bearer token issued by the backend.

    Storage is read once, when the store is built; after that the in-memory
    value is authoritative and every change is written through.
    """

    def __init__(self, storage: LocalStorage) -> None:
        self._storage = storage
        self._token: str | None = storage.get_item(AUTH_TOKEN_KEY) or None

    def get_token(self) -> str | None:
        return self._token

    def set_token(self, token: str | None) -> None:
        if not token:
            self.clear_token()
            return
        self._token = token
        try:
            self._storage.set_item(AUTH_TOKEN_KEY, token)
        except OSError as e:
            logger.warning("Failed to persist auth token: %s", e)

    def clear_token(self) -> None:
        self._token = None
        try:
            self._storage.remove_item(AUTH_TOKEN_KEY)
        except OSError as e:
            logger.warning("Failed to remove persisted auth token: %s", e)

    def has_token(self) -> bool:
        return self._token is not None
