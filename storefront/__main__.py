"""
Run the background sync loop: ``python -m storefront``.

Hydrates persisted state, starts the sync job and blocks until Ctrl-C.
"""

import threading

from storefront.app import create_app
from storefront.services.events import Events
from storefront.utils.config import load_config
from storefront.utils.logger import setup_from_config

load_config()
log = setup_from_config()


def main() -> None:
    app = create_app()
    app.events.subscribe(Events.SYNC_COMPLETED, lambda p: log.info("Sync completed: %s", p))
    app.events.subscribe(Events.SYNC_FAILED, lambda e: log.warning("Sync failed: %s", e))

    user = app.store.get("currentUser")
    if user:
        log.info("Resuming session for %s", user.get("email") or user.get("fullName"))
    else:
        log.info("No stored session; sync stays idle until a user signs in")

    app.sync.start()
    app.sync.tick()
    stop = threading.Event()
    try:
        while not stop.wait(1.0):
            pass
    except KeyboardInterrupt:
        log.info("Shutting down")
    finally:
        app.shutdown()


if __name__ == "__main__":
    main()
