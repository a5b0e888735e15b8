"""Product model for database representation."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Product:
    """Product row read from SalesLT.Product."""

    name: str
    product_number: str

    def to_dict(self) -> dict:
        """Convert to the wire representation."""
        return {
            "name": self.name,
            "productNumber": self.product_number,
        }
