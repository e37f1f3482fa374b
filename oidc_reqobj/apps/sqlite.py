"""SQLite implementation of the client application store."""

from __future__ import annotations

import json
import sqlite3
import threading
from pathlib import Path

from ..errors import AppLookupError
from ..models import ClientAppConfig
from .store import AppConfigStore


class SQLiteAppConfigStore(AppConfigStore):
    """Persist client applications using SQLite."""

    def __init__(self, db_path: str | Path):
        self.db_path = str(db_path)
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._ensure_schema()

    # ------------------------------------------------------------------
    # Schema management
    def _ensure_schema(self) -> None:
        with self._lock:
            self._conn.execute(
                """
                CREATE TABLE IF NOT EXISTS client_apps (
                    client_id TEXT PRIMARY KEY,
                    signature_validation_enabled INTEGER NOT NULL DEFAULT 0,
                    client_secret TEXT,
                    jwks_uri TEXT,
                    jwks TEXT,
                    redirect_uris TEXT NOT NULL DEFAULT '[]'
                )
                """
            )
            self._conn.commit()

    # ------------------------------------------------------------------
    def _row_to_app(self, row: sqlite3.Row) -> ClientAppConfig:
        return ClientAppConfig(
            client_id=row["client_id"],
            request_object_signature_validation_enabled=bool(
                row["signature_validation_enabled"]
            ),
            client_secret=row["client_secret"],
            jwks_uri=row["jwks_uri"],
            jwks=json.loads(row["jwks"]) if row["jwks"] else None,
            redirect_uris=json.loads(row["redirect_uris"] or "[]"),
        )

    def get_by_client_id(self, client_id: str) -> ClientAppConfig:
        try:
            with self._lock:
                row = self._conn.execute(
                    "SELECT * FROM client_apps WHERE client_id = ?", (client_id,)
                ).fetchone()
            if row is None:
                raise AppLookupError(client_id)
            return self._row_to_app(row)
        except (sqlite3.Error, ValueError) as e:
            raise AppLookupError(
                client_id, f"Error reading client application {client_id}: {e}"
            ) from e

    def save(self, app: ClientAppConfig) -> None:
        with self._lock:
            self._conn.execute(
                """
                INSERT INTO client_apps (
                    client_id, signature_validation_enabled, client_secret,
                    jwks_uri, jwks, redirect_uris
                ) VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(client_id) DO UPDATE SET
                    signature_validation_enabled=excluded.signature_validation_enabled,
                    client_secret=excluded.client_secret,
                    jwks_uri=excluded.jwks_uri,
                    jwks=excluded.jwks,
                    redirect_uris=excluded.redirect_uris
                """,
                (
                    app.client_id,
                    int(app.request_object_signature_validation_enabled),
                    app.client_secret,
                    app.jwks_uri,
                    json.dumps(app.jwks) if app.jwks is not None else None,
                    json.dumps(app.redirect_uris),
                ),
            )
            self._conn.commit()

    def list_apps(self) -> list[ClientAppConfig]:
        with self._lock:
            rows = self._conn.execute(
                "SELECT * FROM client_apps ORDER BY client_id"
            ).fetchall()
        return [self._row_to_app(row) for row in rows]

    def close(self) -> None:
        self._conn.close()
