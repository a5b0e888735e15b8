import logging
from contextlib import closing
from typing import Any, List, Optional, Sequence

from ..clients import AzureSqlTokenProvider, SqlServerClient
from ..config import DatabaseConfig
from ..models import Product

logger = logging.getLogger(__name__)

PRODUCTS_QUERY = "select Name, ProductNumber from SalesLT.Product"


class ProductRowError(Exception):
    """Raised when a product row holds a non-text column."""

    pass


def _product_from_row(row: Sequence[Any]) -> Product:
    name, product_number = row[0], row[1]
    if not isinstance(name, str) or not isinstance(product_number, str):
        raise ProductRowError(
            f"Expected text columns (Name, ProductNumber), got "
            f"({type(name).__name__}, {type(product_number).__name__})"
        )
    return Product(name=name, product_number=product_number)


class ProductQueryService:
    _config: DatabaseConfig
    _token_provider: AzureSqlTokenProvider

    def __init__(
        self,
        config: DatabaseConfig,
        token_provider: AzureSqlTokenProvider,
        driver: Optional[Any] = None,
    ):
        self._config = config
        self._token_provider = token_provider
        self._driver = driver

    def fetch_products(self) -> List[Product]:
        """Read every product, in the order the database returns them.

        A fresh token is requested on each call. The connection and cursor
        are closed whether the read succeeds or not.

        Raises:
            TokenAcquisitionError: If no token could be obtained.
            DatabaseError: If connecting, executing or fetching fails.
            ProductRowError: If a row does not hold two text columns.
        """
        access_token = self._token_provider.get_token(self._config.connection_string_for_token)

        products: List[Product] = []
        with SqlServerClient(self._config.connection_string, access_token, driver=self._driver) as client:
            logger.debug(f"Executing: {PRODUCTS_QUERY}")
            with closing(client.query(PRODUCTS_QUERY)) as rows:
                for row in rows:
                    products.append(_product_from_row(row))

        return products
