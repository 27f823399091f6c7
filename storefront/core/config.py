# storefront/core/config.py
import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    # --- API Info ---
    API_TITLE: str = "Storefront API"
    API_DESCRIPTION: str = "Customer storefront and admin console backend: catalog, cart and order placement."
    API_VERSION: str = "1.0.0"

    # --- Server Configuration ---
    PORT: int = int(os.getenv("PORT", "8000"))
    HOST: str = os.getenv("HOST", "0.0.0.0")
    CORS_ORIGINS: list = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

    # --- Database ---
    # Falls back to a local SQLite file when no DATABASE_URL is provided
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./storefront.db")

    # --- Access tokens (issued by the auth provider, verified here) ---
    ENCODING_SECRET_KEY: str = os.getenv("ENCODING_SECRET_KEY") or "dev-secret-change-me"
    ENCODING_ALGORITHM: str = os.getenv("ENCODING_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "15"))

    # --- Catalog cache ---
    CATALOG_CACHE_TTL_MS: int = int(os.getenv("CATALOG_CACHE_TTL_MS", str(5 * 60 * 1000)))

    # --- Checkout ---
    # Online payment is not wired up yet, so only cash on delivery is enabled by default
    DEFAULT_PAYMENT_MODE: str = "cod"
    ENABLED_PAYMENT_MODES: list = [
        m.strip() for m in os.getenv("ENABLED_PAYMENT_MODES", "cod").split(",") if m.strip()
    ]


settings = Settings()
