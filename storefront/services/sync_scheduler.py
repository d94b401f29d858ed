"""
Background refresh of cached collections (products, orders, inventory).

A repeating APScheduler job calls `SyncScheduler.tick`. Each tick checks the
per-domain staleness entries and refreshes the stale domains concurrently.
One domain failing never blocks or fails the others: failures are logged and
the rest of the tick carries on. Only an unexpected error in the tick body
itself is reported on `sync:failed`.
"""

from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.interval import IntervalTrigger

from storefront.domains.state import StateKey
from storefront.infrastructure.data.repositories import (
    InventoryRepository,
    OrderRepository,
    ProductRepository,
)
from storefront.services.events import EventChannel, Events
from storefront.services.store.actions import cache_collection
from storefront.services.store.state_container import StateContainer
from storefront.utils.config import (
    inventory_stale_seconds,
    orders_stale_seconds,
    products_stale_seconds,
    sync_interval_seconds,
)
from storefront.utils.logger import get_logger

logger = get_logger("sync")

JOB_ID = "storefront-sync"


class SyncDomain(str, Enum):
    PRODUCTS = "products"
    ORDERS = "orders"
    INVENTORY = "inventory"


class SchedulerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


_DOMAIN_KEYS = {
    SyncDomain.PRODUCTS: StateKey.PRODUCTS,
    SyncDomain.ORDERS: StateKey.ORDERS,
    SyncDomain.INVENTORY: StateKey.INVENTORY,
}


@dataclass
class SyncEntry:
    """Staleness threshold (seconds) and last successful refresh (epoch seconds)."""

    domain: SyncDomain
    threshold: float
    last_refreshed: float | None = None

    def is_stale(self, now: float) -> bool:
        return self.last_refreshed is None or now - self.last_refreshed > self.threshold


@dataclass
class SyncReport:
    refreshed: list[str] = field(default_factory=list)
    failed: dict[str, Exception] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return bool(self.refreshed)


def default_entries() -> dict[SyncDomain, SyncEntry]:
    return {
        SyncDomain.PRODUCTS: SyncEntry(SyncDomain.PRODUCTS, products_stale_seconds()),
        SyncDomain.ORDERS: SyncEntry(SyncDomain.ORDERS, orders_stale_seconds()),
        SyncDomain.INVENTORY: SyncEntry(SyncDomain.INVENTORY, inventory_stale_seconds()),
    }


class SyncScheduler:
    """
    Owns the periodic sync job and the per-domain sync entries.

    State goes IDLE -> RUNNING -> IDLE once per tick; a tick that fires while
    another is still running is skipped.
    """

    def __init__(
        self,
        store: StateContainer,
        products: ProductRepository,
        orders: OrderRepository,
        inventory: InventoryRepository,
        events: EventChannel | None = None,
        interval_seconds: float | None = None,
        thresholds: dict[SyncDomain | str, float] | None = None,
        clock: Callable[[], float] = time.time,
        scheduler: BaseScheduler | None = None,
    ) -> None:
        self.store = store
        self.products = products
        self.orders = orders
        self.inventory = inventory
        self.events = events
        self.interval_seconds = interval_seconds if interval_seconds is not None else sync_interval_seconds()
        self.entries = default_entries()
        for domain, threshold in (thresholds or {}).items():
            self.entries[SyncDomain(domain)].threshold = threshold
        self._clock = clock
        self._scheduler = scheduler
        self._owns_scheduler = scheduler is None
        self._state = SchedulerState.IDLE
        self._state_lock = threading.Lock()

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def running(self) -> bool:
        return self._scheduler is not None and bool(self._scheduler.running)

    # --- lifecycle ---

    def start(self) -> None:
        """Schedule `tick` every `interval_seconds`. Restarting replaces the job."""
        if self._scheduler is None:
            self._scheduler = BackgroundScheduler(daemon=True)
        self._scheduler.add_job(
            self.tick,
            IntervalTrigger(seconds=self.interval_seconds),
            id=JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        if not self._scheduler.running:
            self._scheduler.start()
        logger.info("Auto-sync started (every %ss)", self.interval_seconds)

    def stop(self) -> None:
        if self._scheduler is None:
            return
        if self._scheduler.get_job(JOB_ID) is not None:
            self._scheduler.remove_job(JOB_ID)
        if self._owns_scheduler:
            if self._scheduler.running:
                self._scheduler.shutdown(wait=False)
            self._scheduler = None
        logger.info("Auto-sync stopped")

    # --- staleness ---

    def is_stale(self, domain: SyncDomain | str, now: float | None = None) -> bool:
        return self.entries[SyncDomain(domain)].is_stale(self._clock() if now is None else now)

    def _due_domains(self, now: float) -> list[SyncDomain]:
        due = [d for d in (SyncDomain.PRODUCTS, SyncDomain.ORDERS) if self.entries[d].is_stale(now)]
        if self.store.get(StateKey.IS_ADMIN) and self.entries[SyncDomain.INVENTORY].is_stale(now):
            due.append(SyncDomain.INVENTORY)
        return due

    # --- refresh ---

    def _fetch(self, domain: SyncDomain, user: dict[str, Any] | None) -> Any:
        if domain is SyncDomain.PRODUCTS:
            return self.products.get_active()
        if domain is SyncDomain.ORDERS:
            user_id = (user or {}).get("id")
            if user_id is None:
                raise ValueError("No signed-in user to sync orders for")
            return self.orders.get_by_user(user_id)
        return self.inventory.list_all()

    def _refresh(self, domain: SyncDomain, user: dict[str, Any] | None) -> None:
        items = self._fetch(domain, user)
        cache_collection(self.store, _DOMAIN_KEYS[domain], items, self.events)
        self.entries[domain].last_refreshed = self._clock()
        logger.debug("Synced %s", domain.value)

    def _stamp_last_sync(self) -> None:
        self.store.set(StateKey.LAST_SYNC, int(self._clock() * 1000))

    def _emit(self, channel: str, payload: Any = None) -> None:
        if self.events is not None:
            self.events.publish(channel, payload)

    def tick(self) -> SyncReport | None:
        """
        Run one sync pass.

        Returns:
            A SyncReport, or None when the tick was skipped (no signed-in user,
            another tick running) or failed outright.
        """
        with self._state_lock:
            if self._state is SchedulerState.RUNNING:
                logger.debug("Previous sync still running; skipping tick")
                return None
            self._state = SchedulerState.RUNNING
        try:
            return self._run_tick()
        except Exception as e:
            logger.exception("Auto-sync failed: %s", e)
            self._emit(Events.SYNC_FAILED, e)
            return None
        finally:
            with self._state_lock:
                self._state = SchedulerState.IDLE

    def _run_tick(self) -> SyncReport | None:
        user = self.store.get(StateKey.CURRENT_USER)
        if not user:
            logger.debug("No signed-in user; skipping sync")
            return None

        report = SyncReport()
        due = self._due_domains(self._clock())
        if not due:
            return report

        with ThreadPoolExecutor(max_workers=len(due), thread_name_prefix="storefront-sync") as pool:
            futures = {pool.submit(self._refresh, domain, user): domain for domain in due}
            for future in as_completed(futures):
                domain = futures[future]
                try:
                    future.result()
                    report.refreshed.append(domain.value)
                except Exception as e:
                    logger.warning("Failed to sync %s: %s", domain.value, e)
                    report.failed[domain.value] = e

        if report.ok:
            self._stamp_last_sync()
            logger.info("Data sync completed: %s", ", ".join(sorted(report.refreshed)))
            self._emit(Events.SYNC_COMPLETED, {"refreshed": sorted(report.refreshed)})
        else:
            logger.warning("Data sync refreshed nothing; %d domain(s) failed", len(report.failed))
        return report

    def force_refresh(self, domain: SyncDomain | str) -> None:
        """
        Refresh regardless of staleness. "all" refreshes products and orders,
        plus inventory for admins, one after another.

        Raises:
            ValueError: For an unknown domain.
            Whatever the refresh raised; nothing is swallowed here.
        """
        if domain == "all":
            domains = [SyncDomain.PRODUCTS, SyncDomain.ORDERS]
            if self.store.get(StateKey.IS_ADMIN):
                domains.append(SyncDomain.INVENTORY)
        else:
            domains = [SyncDomain(domain)]
        user = self.store.get(StateKey.CURRENT_USER)
        try:
            for d in domains:
                self._refresh(d, user)
        except Exception as e:
            logger.warning("Refresh of %s failed: %s", domain, e)
            raise
        self._stamp_last_sync()
        self._emit(Events.SYNC_REFRESHED, str(getattr(domain, "value", domain)))
