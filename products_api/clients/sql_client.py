"""Azure SQL client authenticated with an Azure AD access token."""

import logging
import struct
from typing import Any, Iterator, Optional, Sequence

logger = logging.getLogger(__name__)

# msodbcsql pre-connect attribute carrying the access token
SQL_COPT_SS_ACCESS_TOKEN = 1256


class DatabaseError(Exception):
    """Raised for any driver failure: connect, login, execute or fetch."""

    pass


def encode_access_token(token: str) -> bytes:
    """Pack a token the way the ODBC driver expects it.

    The driver reads a 4-byte little-endian length followed by the token
    as UTF-16-LE.
    """
    token_bytes = token.encode("utf-16-le")
    return struct.pack(f"<I{len(token_bytes)}s", len(token_bytes), token_bytes)


def _load_driver():
    """Import the default DB-API driver."""
    import pyodbc

    return pyodbc


class SqlServerClient:
    """SQL Server client with connection management.

    Opens one connection with the access token as its only credential.
    Supports the context manager pattern so the connection is closed on
    every exit path.
    """

    def __init__(self, connection_string: str, access_token: str, driver: Optional[Any] = None):
        """Initialize the client.

        Args:
            connection_string: ODBC connection string without credentials
            access_token: Bearer token for the database resource
            driver: DB-API 2.0 module exposing connect() and Error.
                Defaults to pyodbc.
        """
        self.connection_string = connection_string
        self._access_token = access_token
        self._driver = driver if driver is not None else _load_driver()
        self._connection = None

    @property
    def connection(self):
        """Get the database connection."""
        return self._connection

    def connect(self) -> None:
        """Open the connection with the token attached before login."""
        attrs_before = {SQL_COPT_SS_ACCESS_TOKEN: encode_access_token(self._access_token)}
        try:
            self._connection = self._driver.connect(self.connection_string, attrs_before=attrs_before)
        except self._driver.Error as e:
            raise DatabaseError(f"Failed to open database connection: {e}") from e

    def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> Iterator[Sequence[Any]]:
        """Execute a statement and yield rows from a forward-only cursor.

        The cursor is closed when iteration ends, fails, or is abandoned.
        A close failure after a complete read is raised; while another
        exception is propagating it is only logged.

        Raises:
            RuntimeError: If client is not connected.
            DatabaseError: If execution, fetching or closing fails.
        """
        if self._connection is None:
            raise RuntimeError("SQL client not connected. Call connect() first.")

        try:
            cursor = self._connection.cursor()
        except self._driver.Error as e:
            raise DatabaseError(f"Failed to create cursor: {e}") from e

        completed = False
        try:
            if params:
                cursor.execute(sql, params)
            else:
                cursor.execute(sql)

            while True:
                row = cursor.fetchone()
                if row is None:
                    break
                yield row
            completed = True
        except self._driver.Error as e:
            raise DatabaseError(f"Query failed: {e}") from e
        finally:
            self._release(cursor, "cursor", quiet=not completed)

    def _release(self, resource: Any, name: str, quiet: bool) -> None:
        """Close a cursor or connection, wrapping driver errors."""
        try:
            resource.close()
        except self._driver.Error as e:
            if quiet:
                logger.warning(f"Ignoring error while closing {name}: {e}")
            else:
                raise DatabaseError(f"Failed to close {name}: {e}") from e

    def _close_connection(self, quiet: bool) -> None:
        if self._connection is not None:
            connection, self._connection = self._connection, None
            self._release(connection, "connection", quiet)

    def close(self) -> None:
        """Close the database connection.

        Raises:
            DatabaseError: If the driver fails to close it.
        """
        self._close_connection(quiet=False)

    def __enter__(self) -> "SqlServerClient":
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        """Context manager exit with cleanup.

        A close failure never replaces an exception already in flight.
        """
        self._close_connection(quiet=exc_type is not None)
        return False
