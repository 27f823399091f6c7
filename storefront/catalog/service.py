from sqlalchemy.orm import Session
from typing import List, Dict, Any, Iterable
import logging

from .models import Product
from ..core.config import settings
from ..core.exceptions import ProductNotFoundError
from ..schemas.catalog import ProductResponse
from ..services.cache import ReadThroughCache, MISS

logger = logging.getLogger(__name__)

PRODUCT_LIST_KEY = "products:all"


def product_cache_key(product_id: str) -> str:
    return f"product:{product_id}"


class CatalogService:
    """Customer-facing product reads, served through the read-through cache."""

    @staticmethod
    def _load_products(db: Session) -> List[Dict[str, Any]]:
        products = db.query(Product).filter(Product.user_visibility.is_(True)).order_by(Product.name).all()
        return [ProductResponse.model_validate(p).model_dump() for p in products]

    @staticmethod
    def list_products(db: Session, cache: ReadThroughCache) -> List[Dict[str, Any]]:
        """All visible products, ordered by name."""
        return cache.get_or_load(
            PRODUCT_LIST_KEY,
            lambda: CatalogService._load_products(db),
            settings.CATALOG_CACHE_TTL_MS
        )

    @staticmethod
    def get_product(db: Session, cache: ReadThroughCache, product_id: str) -> Dict[str, Any]:
        """One visible product; raises ProductNotFoundError otherwise. Misses are not cached."""
        key = product_cache_key(product_id)
        cached = cache.get(key)
        if cached is not MISS:
            return cached

        product = db.query(Product).filter(
            Product.id == product_id,
            Product.user_visibility.is_(True)
        ).first()
        if not product:
            raise ProductNotFoundError(product_id)

        data = ProductResponse.model_validate(product).model_dump()
        cache.set(key, data, settings.CATALOG_CACHE_TTL_MS)
        return data

    @staticmethod
    def invalidate_products(cache: ReadThroughCache, product_ids: Iterable[str]) -> None:
        """Drop cached entries whose stock or price just changed."""
        for product_id in product_ids:
            cache.clear(product_cache_key(product_id))
        cache.clear(PRODUCT_LIST_KEY)
