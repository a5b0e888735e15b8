"""Shared test doubles for the identity provider and the SQL driver."""

import time
from typing import Any, List, Optional, Sequence

import pytest
from azure.core.credentials import AccessToken

from products_api.config import DatabaseConfig, configuration


class FakeDriverError(Exception):
    """Stands in for the driver's DB-API Error class."""

    pass


class FakeCursor:
    def __init__(self, driver: "FakeDriver"):
        self._driver = driver
        self._rows: List[Sequence[Any]] = []
        self.closed = False

    def execute(self, sql: str, params: Optional[Sequence[Any]] = None) -> None:
        self._driver.executed.append((sql, params))
        if self._driver.execute_error is not None:
            raise self._driver.execute_error
        self._rows = list(self._driver.rows)

    def fetchone(self) -> Optional[Sequence[Any]]:
        if self._driver.fetch_error is not None:
            raise self._driver.fetch_error
        if not self._rows:
            return None
        return self._rows.pop(0)

    def close(self) -> None:
        self.closed = True
        if self._driver.cursor_close_error is not None:
            raise self._driver.cursor_close_error


class FakeConnection:
    def __init__(self, driver: "FakeDriver"):
        self._driver = driver
        self.closed = False

    def cursor(self) -> FakeCursor:
        cursor = FakeCursor(self._driver)
        self._driver.cursors.append(cursor)
        return cursor

    def close(self) -> None:
        self.closed = True
        if self._driver.connection_close_error is not None:
            raise self._driver.connection_close_error


class FakeDriver:
    """Minimal DB-API module: connect() plus Error."""

    Error = FakeDriverError

    def __init__(self, rows: Optional[List[Sequence[Any]]] = None):
        self.rows: List[Sequence[Any]] = rows or []
        self.connect_error: Optional[Exception] = None
        self.execute_error: Optional[Exception] = None
        self.fetch_error: Optional[Exception] = None
        self.cursor_close_error: Optional[Exception] = None
        self.connection_close_error: Optional[Exception] = None
        self.connect_calls: List[tuple] = []
        self.connections: List[FakeConnection] = []
        self.cursors: List[FakeCursor] = []
        self.executed: List[tuple] = []

    def connect(self, connection_string: str, attrs_before: Optional[dict] = None) -> FakeConnection:
        self.connect_calls.append((connection_string, attrs_before))
        if self.connect_error is not None:
            raise self.connect_error
        connection = FakeConnection(self)
        self.connections.append(connection)
        return connection


class FakeCredential:
    """TokenCredential that hands out numbered tokens and records scopes."""

    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.requested_scopes: List[tuple] = []
        self.closed = False

    def get_token(self, *scopes: str, **kwargs: Any) -> AccessToken:
        self.requested_scopes.append(scopes)
        if self.error is not None:
            raise self.error
        return AccessToken(f"token-{len(self.requested_scopes)}", int(time.time()) + 3600)

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeCredential":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


@pytest.fixture
def fake_driver():
    """A fake SQL driver with no rows."""
    return FakeDriver()


@pytest.fixture
def fake_credential():
    """A fake Azure credential that always succeeds."""
    return FakeCredential()


@pytest.fixture
def credential_factory():
    """Build fake credentials, e.g. to stand in for DefaultAzureCredential."""
    return FakeCredential


@pytest.fixture
def database_config():
    """Database configuration pointing at a placeholder server."""
    return DatabaseConfig(
        connection_string="Driver={ODBC Driver 18 for SQL Server};Server=tcp:test.database.windows.net,1433;Database=northwind",
        connection_string_for_token="RunAs=App",
    )


@pytest.fixture
def app_config_yaml(monkeypatch):
    """Serve application configuration from a dict instead of config.yaml."""
    content = {
        "database": {
            "connection_string": "Driver={ODBC Driver 18 for SQL Server};Server=tcp:app.database.windows.net,1433;Database=northwind",
            "connection_string_for_token": "RunAs=App",
        },
        "logging": {"level": "DEBUG"},
    }
    for key in ("APP_ENV", "NORTHWIND_CONNECTION_STRING", "CONNECTION_STRING_FOR_TOKEN", "LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(configuration, "_load_yaml_config", lambda: content)
    configuration.reset_config()
    yield content
    configuration.reset_config()
