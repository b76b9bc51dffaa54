"""Application entry point."""

import logging
import uvicorn

from journal_analytics.config import Config
from journal_analytics.app import create_app, create_datasource

logger = logging.getLogger(__name__)


def main():
    """Run the application."""
    config = Config.from_env()

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    datasource = create_datasource(config)
    if config.trades_csv:
        logger.info(f"Reading trades from CSV export {config.trades_csv}")
    else:
        logger.info(f"Reading trades from Supabase at {config.supabase_url}")
    logger.info(f"Serving on {config.host}:{config.port}")

    uvicorn.run(
        create_app(config, datasource=datasource),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
