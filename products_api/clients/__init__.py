"""Client modules for external services."""

from products_api.clients.sql_client import (
    SQL_COPT_SS_ACCESS_TOKEN,
    DatabaseError,
    SqlServerClient,
    encode_access_token,
)
from products_api.clients.token_provider import (
    SQL_RESOURCE_URI,
    AzureSqlTokenProvider,
    TokenAcquisitionError,
)

__all__ = [
    "SQL_COPT_SS_ACCESS_TOKEN",
    "SQL_RESOURCE_URI",
    "AzureSqlTokenProvider",
    "DatabaseError",
    "SqlServerClient",
    "TokenAcquisitionError",
    "encode_access_token",
]
