"""HTTP application entry point."""

import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from . import __version__
from .api.router import init_router, router
from .config import AppConfig, get_config_path, load_config
from .state.garage import Garage

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def load_app_config() -> AppConfig:
    """Load config from the default path, falling back to defaults."""
    config_path = get_config_path()
    if not config_path.exists():
        logger.warning(f"Configuration file not found: {config_path}, using defaults")
        return AppConfig()

    config = load_config(config_path)
    logger.info(f"Loaded configuration from {config_path}")
    return config


def build_garage(config: AppConfig) -> Garage:
    """
    Create the garage described by the config.

    Raises:
        ValueError: If the config does not give both garage dimensions
    """
    if config.garage.levels is None or config.garage.slots_per_level is None:
        raise ValueError("garage.levels and garage.slots_per_level must be set to serve the API")

    return Garage(
        config.garage.levels,
        config.garage.slots_per_level,
        allow_category_fallback=config.garage.allow_category_fallback,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Garage Tracker API...")

    config = load_app_config()
    logging.getLogger().setLevel(config.logging.level)

    try:
        garage = build_garage(config)
    except ValueError as e:
        logger.error(str(e))
        logger.error("Please set the garage section in config/config.yaml")
        sys.exit(1)

    init_router(garage)
    logger.info(f"Garage Tracker API ready on http://{config.api.host}:{config.api.port}")

    yield  # Application runs here

    logger.info("Shutting down...")
    init_router(None)
    logger.info("Shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Garage Tracker",
    description="API for parking vehicles in a multi-level garage",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(router, prefix="/api/v1")


def main():
    """Run the application."""
    config_path = get_config_path()
    if config_path.exists():
        cfg = load_config(config_path)
        host = cfg.api.host
        port = cfg.api.port
    else:
        host = "0.0.0.0"
        port = 8000

    uvicorn.run(
        "garage_tracker.main:app",
        host=host,
        port=port,
        reload=False,
    )


if __name__ == "__main__":
    main()
