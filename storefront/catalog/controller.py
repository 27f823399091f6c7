from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..api.deps import CatalogCache
from ..database.core import get_db
from ..schemas.catalog import ProductResponse
from .service import CatalogService

router = APIRouter(prefix="/products")

@router.get("/", response_model=List[ProductResponse])
async def list_products(cache: CatalogCache, db: Session = Depends(get_db)):
    """Visible products, served from cache when fresh"""
    return CatalogService.list_products(db, cache)

@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str, cache: CatalogCache, db: Session = Depends(get_db)):
    return CatalogService.get_product(db, cache, product_id)
