import logging

import uvicorn

from products_api.api import app, configure_logging
from products_api.config import get_config, get_environment

logger = logging.getLogger(__name__)


def main() -> None:
    config = get_config()
    configure_logging(config.logging.level)
    logger.info(f"Starting Products API (environment: {get_environment()})")
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level=config.logging.level.lower())


if __name__ == "__main__":
    main()
