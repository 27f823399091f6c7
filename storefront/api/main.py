# storefront/api/main.py

from fastapi import APIRouter
from ..catalog.controller import router as catalog_router
from ..cart.controller import router as cart_router
from ..addresses.controller import router as addresses_router
from ..orders.controller import router as orders_router

# Create main API router
api_router = APIRouter()

api_router.include_router(catalog_router, tags=["Catalog"])
api_router.include_router(cart_router, tags=["Cart"])
api_router.include_router(addresses_router, tags=["Addresses"])
api_router.include_router(orders_router, tags=["Orders"])
