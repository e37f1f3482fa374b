"""Repository abstraction for client application configuration."""

from __future__ import annotations

from typing import Protocol

from ..models import ClientAppConfig


class AppConfigStore(Protocol):
    """Protocol for client application configuration backends."""

    def get_by_client_id(self, client_id: str) -> ClientAppConfig:
        """Return the configuration for ``client_id``.

        Raises:
            AppLookupError: If the client is unknown or the backend fails.
        """

    def save(self, app: ClientAppConfig) -> None:
        """Create or replace a client application."""

    def list_apps(self) -> list[ClientAppConfig]:
        """Return all registered client applications."""
