from flask import current_app

from billsplit.core.bill_service import BillStore
from billsplit.core.user_service import UserDirectory

STORE_KEY = "billsplit_store"


def init_store(app, hasher):
    """Create the app's BillStore (and its UserDirectory) and attach it to `app.extensions`."""
    users = UserDirectory(hasher, app.config["TIER_LIMITS"])
    store = BillStore(users)

    if app.config.get("SEED_DEMO_DATA"):
        users.seed_demo_users()
        store.seed_demo_bills()

    app.extensions[STORE_KEY] = store
    app.logger.info("[BillStore] Store ready (demo data: %s)", bool(app.config.get("SEED_DEMO_DATA")))
    return store


def get_store() -> BillStore:
    """Get the store of the current app. Must be called after init_store."""
    store = current_app.extensions.get(STORE_KEY)
    if store is None:
        raise RuntimeError("Store not initialized. Call init_store first.")
    return store
