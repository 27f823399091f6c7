# main.py

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.logging import configure_logging
from storefront.core.config import settings
from storefront.core.error_handlers import setup_error_handlers
from storefront.api.main import api_router
from storefront.services.cache import ReadThroughCache

# Import models to ensure they are registered with SQLAlchemy
from storefront.database.models import Base
from storefront.database.core import engine

configure_logging()
logger = logging.getLogger("storefront.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    # Startup
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")

    if not hasattr(app.state, "catalog_cache"):
        app.state.catalog_cache = ReadThroughCache(default_ttl_ms=settings.CATALOG_CACHE_TTL_MS)
    logger.info("Storefront API startup completed")

    yield

    # Shutdown
    app.state.catalog_cache.clear()
    logger.info("Storefront API stopped")


app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
    lifespan=lifespan
)

# Set up error handlers
setup_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": settings.API_VERSION}
