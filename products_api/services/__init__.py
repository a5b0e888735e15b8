from products_api.services.product_query_service import (
    PRODUCTS_QUERY,
    ProductQueryService,
    ProductRowError,
)

__all__ = ["PRODUCTS_QUERY", "ProductQueryService", "ProductRowError"]
