#!/usr/bin/env python3
import logging
import sys

import uvicorn

from storefront.core.config import settings
from storefront.logging import configure_logging

logger = logging.getLogger("storefront.start")


def main():
    configure_logging()
    logger.info(f"Starting Storefront API on {settings.HOST}:{settings.PORT}")
    try:
        uvicorn.run(
            "main:app",
            host=settings.HOST,
            port=settings.PORT,
            log_level="info"
        )
    except Exception as e:
        logger.exception(f"Error starting server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
