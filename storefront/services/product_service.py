# storefront/services/product_service.py
import logging
from typing import Iterable, Protocol

from ..api import schemas

logger = logging.getLogger(__name__)


class ProductRepository(Protocol):
    def get_product(self, product_id: str) -> schemas.Product | None: ...

    def all_products(self) -> list[schemas.Product]: ...


class SupabaseProductRepository:
    """Reads products from a Supabase table. Errors from the client propagate."""

    def __init__(self, client, table: str = "products"):
        self.client = client
        self.table = table

    def get_product(self, product_id: str) -> schemas.Product | None:
        res = self.client.table(self.table).select("*").eq("id", product_id).limit(1).execute()
        if not res.data:
            return None
        return schemas.Product.model_validate(res.data[0])

    def all_products(self) -> list[schemas.Product]:
        res = self.client.table(self.table).select("*").order("id").execute()
        products = [schemas.Product.model_validate(row) for row in res.data or []]
        logger.info(f"DB: Loaded {len(products)} products from '{self.table}'.")
        return products


class InMemoryProductRepository:
    """Products held in a dict, for local runs without Supabase and for tests."""

    def __init__(self, products: Iterable[schemas.Product] = ()):
        self._products = {product.id: product for product in products}

    def get_product(self, product_id: str) -> schemas.Product | None:
        product = self._products.get(product_id)
        # Hand out copies so enhancement never rewrites the stored record
        return product.model_copy() if product else None

    def all_products(self) -> list[schemas.Product]:
        return [product.model_copy() for product in self._products.values()]
