"""Process-wide service state.

Holds the settings and the built rating store shared by all request
handlers. The store is read-only once built; replacing it swaps the
reference, so in-flight requests keep the store they started with.
"""

import logging
import threading
from typing import Optional

from simrec.config import Settings
from simrec.exceptions import StoreNotLoadedError
from simrec.recommender.store import RatingStore
from simrec.recommender.utils import load_store_from_dir

# Configure module logger
logger = logging.getLogger(__name__)

_settings: Optional[Settings] = None
_store: Optional[RatingStore] = None
_load_lock = threading.Lock()


def get_settings() -> Settings:
    """Return the active settings, reading the environment on first use."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def set_settings(settings: Optional[Settings]) -> None:
    global _settings
    _settings = settings


def get_store() -> RatingStore:
    """Return the built rating store.

    Raises:
        StoreNotLoadedError: If no store has been loaded yet.
    """
    store = _store
    if store is None:
        raise StoreNotLoadedError(str(get_settings().data_dir))
    return store


def set_store(store: Optional[RatingStore]) -> None:
    """Install ``store`` as the shared store (``None`` clears it)."""
    global _store
    _store = store


def load_store(settings: Optional[Settings] = None) -> RatingStore:
    """Build a store from the configured data directory and install it.

    Raises:
        FileNotFoundError: If the data files are missing.
        SimRecError: If the data is malformed.
    """
    settings = settings or get_settings()
    with _load_lock:
        logger.info(
            "Loading rating store",
            extra={"data_dir": str(settings.data_dir), "user_policy": settings.user_policy},
        )
        store = load_store_from_dir(settings.data_dir, user_policy=settings.user_policy)
        set_store(store)
    logger.info(
        "Rating store ready",
        extra={
            "num_users": store.num_users,
            "num_items": store.num_items,
            "num_ratings": store.num_ratings,
        },
    )
    return store
