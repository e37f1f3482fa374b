"""In-memory implementation of the client application store."""

from __future__ import annotations

from typing import Dict, Iterable

from ..errors import AppLookupError
from ..models import ClientAppConfig
from .store import AppConfigStore


class InMemoryAppConfigStore(AppConfigStore):
    """Keep client applications in local memory.

    Useful for tests or when clients are declared statically in the
    configuration file.
    """

    def __init__(self, apps: Iterable[ClientAppConfig] = ()) -> None:
        self._apps: Dict[str, ClientAppConfig] = {app.client_id: app for app in apps}

    def get_by_client_id(self, client_id: str) -> ClientAppConfig:
        app = self._apps.get(client_id)
        if app is None:
            raise AppLookupError(client_id)
        return app

    def save(self, app: ClientAppConfig) -> None:
        self._apps[app.client_id] = app

    def list_apps(self) -> list[ClientAppConfig]:
        return list(self._apps.values())
