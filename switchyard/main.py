"""Main application entry point for the Switchyard dispatch layer."""

import logging

import uvicorn

from .container import build_container
from .core.config import settings
from .interfaces.api import create_app

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

container = build_container(settings)
app = create_app(container)


def run() -> None:
    """Serve the API with uvicorn."""
    uvicorn.run(
        "switchyard.main:app",
        host=settings.fastapi_host,
        port=settings.fastapi_port,
        reload=settings.fastapi_reload and settings.is_development(),
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
