from typing import Annotated
from fastapi import Depends, Request

from ..services.cache import ReadThroughCache


def get_catalog_cache(request: Request) -> ReadThroughCache:
    """The application's catalog cache, created in the lifespan handler."""
    return request.app.state.catalog_cache


CatalogCache = Annotated[ReadThroughCache, Depends(get_catalog_cache)]
