"""Simple launcher for the itinerary resolver API.

Configures logging from the environment, then serves the FastAPI app
with uvicorn on ITR_HOST / ITR_PORT.
"""

from __future__ import annotations

import uvicorn

from itinerary_resolver.api import create_app
from itinerary_resolver.config import get_config
from itinerary_resolver.logging_config import configure_logging


def main() -> None:
    config = get_config()
    configure_logging(config.observability)
    uvicorn.run(create_app(), host=config.host, port=config.port, log_config=None)


if __name__ == "__main__":
    main()
