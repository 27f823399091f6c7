import logging.config
import os
from pathlib import Path

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "logging.conf"


def configure_logging(config_path=None) -> logging.Logger:
    """Load logging configuration from ``logging.conf`` (once per process)."""
    # Ensure logs directory exists
    os.makedirs("logs", exist_ok=True)

    path = Path(config_path or os.getenv("LOG_CONFIG", DEFAULT_CONFIG_PATH))
    if path.exists():
        logging.config.fileConfig(path, disable_existing_loggers=False)
    else:
        logging.basicConfig(level=logging.INFO)
        logging.getLogger(__name__).warning(f"Logging config {path} not found, using basicConfig")

    return logging.getLogger("storefront")

