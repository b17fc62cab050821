#!/usr/bin/env python3
"""
Main entry point for the scheduler service.
"""

import uvicorn

from core.config import settings
from core.logging_config import configure_logging_from_settings, get_logger

logger = get_logger(__name__)


def main():
    """Main entry point."""
    configure_logging_from_settings()

    try:
        logger.info(f"Starting scheduler service on {settings.api_host}:{settings.api_port}")

        uvicorn.run(
            "services.scheduler.api:app",
            host=settings.api_host,
            port=settings.api_port,
            log_level=settings.log_level.lower()
        )

    except KeyboardInterrupt:
        logger.info("Shutting down scheduler service")
    except Exception as e:
        logger.error(f"Failed to start scheduler service: {e}")
        raise


if __name__ == "__main__":
    main()
