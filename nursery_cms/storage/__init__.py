"""
Storage Package

The application owns exactly one storage instance, injected through
``create_app(storage=...)`` or built from ``STORAGE_BACKEND``. Request code
reaches it with ``get_storage()``.
"""

from flask import current_app

from nursery_cms.storage.base import (
    ActivityFilter, GalleryFilter, NewsletterFilter, Storage,
)
from nursery_cms.storage.database import DatabaseStorage
from nursery_cms.storage.memory import MemStorage

EXTENSION_KEY = 'nursery_cms.storage'

BACKENDS = {
    'database': DatabaseStorage,
    'memory': MemStorage,
}


def build_storage(app):
    backend = app.config.get('STORAGE_BACKEND', 'database')
    try:
        storage_class = BACKENDS[backend]
    except KeyError:
        raise ValueError(f"Unknown STORAGE_BACKEND {backend!r}; expected one of {sorted(BACKENDS)}")
    return storage_class()


def init_storage(app, storage):
    """Attach ``storage`` to ``app``; must run inside the app context."""
    storage.prepare()
    app.extensions[EXTENSION_KEY] = storage

    if app.config.get('SEED_DEMO_DATA'):
        from nursery_cms.storage.seed import seed_defaults
        seed_defaults(storage, app.config['DEFAULT_ADMIN_PASSWORD'])


def get_storage() -> Storage:
    return current_app.extensions[EXTENSION_KEY]


__all__ = [
    'Storage', 'MemStorage', 'DatabaseStorage',
    'GalleryFilter', 'NewsletterFilter', 'ActivityFilter',
    'build_storage', 'init_storage', 'get_storage',
]
