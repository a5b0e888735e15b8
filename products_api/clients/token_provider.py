"""Azure AD access tokens for Azure SQL Database."""

import logging
from typing import Optional

from azure.core.credentials import TokenCredential
from azure.core.exceptions import AzureError
from azure.identity import DefaultAzureCredential

logger = logging.getLogger(__name__)

SQL_RESOURCE_URI = "https://database.windows.net/"


class TokenAcquisitionError(Exception):
    """Raised when the identity provider cannot issue a token."""

    pass


class AzureSqlTokenProvider:
    """Requests a bearer token scoped to Azure SQL Database.

    The credential source is injected so callers (and tests) decide how the
    identity is resolved. Without one, each call builds a
    DefaultAzureCredential, which walks the ambient chain (environment
    variables, managed identity, Azure CLI), and closes it afterwards.
    An injected credential belongs to the caller and is never closed here.

    Every call goes to the identity provider. Nothing is cached.
    """

    def __init__(self, credential: Optional[TokenCredential] = None):
        self._credential = credential

    def get_token(self, connection_string: Optional[str] = None) -> str:
        """Get an access token for the Azure SQL resource.

        Args:
            connection_string: Accepted for call compatibility and ignored.
                The token is always requested for SQL_RESOURCE_URI.

        Returns:
            The opaque bearer token string.

        Raises:
            TokenAcquisitionError: If the credential fails to produce a token.
        """
        if self._credential is not None:
            return self._request_token(self._credential)

        with DefaultAzureCredential() as credential:
            return self._request_token(credential)

    def _request_token(self, credential: TokenCredential) -> str:
        scope = SQL_RESOURCE_URI + ".default"
        logger.debug(f"Requesting access token for scope {scope}")

        try:
            access_token = credential.get_token(scope)
        except AzureError as e:
            raise TokenAcquisitionError(f"Failed to acquire token for {SQL_RESOURCE_URI}: {e}") from e

        return access_token.token
