"""Client application configuration stores."""

from __future__ import annotations

import os
from typing import Optional

from ..config import RequestObjectConfig, load_config
from .inmemory import InMemoryAppConfigStore
from .sqlite import SQLiteAppConfigStore
from .store import AppConfigStore


def get_app_store(
    database_url: Optional[str] = None, config: Optional[RequestObjectConfig] = None
) -> AppConfigStore:
    """Factory function to obtain a client application store.

    The backend is selected based on ``database_url`` which can be provided
    explicitly, via environment variable ``OIDC_REQOBJ_DATABASE_URL``, or from
    loaded configuration. Without a database, an in-memory store seeded with
    the ``clients`` section of the configuration is returned. Statically
    configured clients are also written to a SQLite store.
    """

    config = config or load_config()
    database_url = (
        database_url
        or os.getenv("OIDC_REQOBJ_DATABASE_URL")
        or config.database_url
    )

    if not database_url:
        return InMemoryAppConfigStore(config.clients)

    if database_url.startswith("sqlite://"):
        path = database_url.replace("sqlite://", "", 1)
        store = SQLiteAppConfigStore(path)
        for app in config.clients:
            store.save(app)
        return store

    raise ValueError(f"Unsupported database backend: {database_url}")


__all__ = [
    "AppConfigStore",
    "InMemoryAppConfigStore",
    "SQLiteAppConfigStore",
    "get_app_store",
]
