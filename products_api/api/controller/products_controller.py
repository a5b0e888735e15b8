"""REST controller for the product list."""

import logging
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from products_api.clients import AzureSqlTokenProvider, DatabaseError
from products_api.config import get_config
from products_api.models import Product
from products_api.services import ProductQueryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["products"])


class ProductResponse(BaseModel):
    """Outgoing product record."""

    name: str
    product_number: str = Field(alias="productNumber")


def get_product_query_service() -> ProductQueryService:
    """Build the query service from application configuration."""
    config = get_config()
    return ProductQueryService(
        config=config.database,
        token_provider=AzureSqlTokenProvider(),
    )


@router.get("", response_model=List[ProductResponse])
def get_products(
    service: ProductQueryService = Depends(get_product_query_service),
) -> List[ProductResponse]:
    """
    Return all products.

    A failed database read is logged and answered with an empty list;
    the status stays 200.
    """
    products: List[Product] = []
    try:
        products = service.fetch_products()
    except DatabaseError as e:
        logger.exception(f"Error querying products: {e}")

    return [
        ProductResponse.model_validate(p.to_dict())
        for p in products
    ]
