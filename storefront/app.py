"""
Composition root: builds the client-side services in dependency order.

Persisted state is hydrated before anything else reads the container.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from storefront.infrastructure.data.repositories import (
    InventoryRepository,
    OrderRepository,
    ProductRepository,
    UserRepository,
)
from storefront.infrastructure.http.api_client import ApiClient
from storefront.infrastructure.http.token_store import TokenStore
from storefront.infrastructure.storage.local_storage import LocalStorage
from storefront.services.auth import AuthService
from storefront.services.events import EventChannel
from storefront.services.store.state_container import StateContainer
from storefront.services.sync_scheduler import SyncScheduler
from storefront.utils.config import load_config


@dataclass
class StorefrontApp:
    storage: LocalStorage
    events: EventChannel
    store: StateContainer
    tokens: TokenStore
    api: ApiClient
    products: ProductRepository
    orders: OrderRepository
    inventory: InventoryRepository
    users: UserRepository
    auth: AuthService
    sync: SyncScheduler

    def shutdown(self) -> None:
        self.sync.stop()


def create_app(
    base_url: str | None = None,
    storage_root: Path | None = None,
    sync_interval_seconds: float | None = None,
) -> StorefrontApp:
    """Wire every service. Arguments override the matching environment settings."""
    load_config()
    storage = LocalStorage(storage_root)
    events = EventChannel()
    store = StateContainer(storage, events)
    store.hydrate()

    tokens = TokenStore(storage)
    api = ApiClient(base_url=base_url, token_store=tokens)
    products = ProductRepository(api)
    orders = OrderRepository(api)
    inventory = InventoryRepository(api)
    users = UserRepository(api)
    auth = AuthService(api, store, events)
    sync = SyncScheduler(
        store,
        products,
        orders,
        inventory,
        events=events,
        interval_seconds=sync_interval_seconds,
    )
    return StorefrontApp(
        storage=storage,
        events=events,
        store=store,
        tokens=tokens,
        api=api,
        products=products,
        orders=orders,
        inventory=inventory,
        users=users,
        auth=auth,
        sync=sync,
    )
