"""Main entry point for the commit count collector.

Refreshes the statistics of every tracked repository once and exits.
"""
import asyncio
import os
import sys
import logging
from dotenv import load_dotenv
from collector.domain.errors import ConfigError
from collector.infrastructure.config import load_config
from collector.infrastructure.github_client import GitHubGraphQLClient
from collector.infrastructure.logging_config import DEFAULT_LOG_FILE, configure_logging
from collector.infrastructure.page_scraper import GitHubPageScraper
from collector.infrastructure.postgres_repository import PostgresRepositoryStorage
from collector.application.reconciliation_service import ReconciliationService


logger = logging.getLogger(__name__)


async def main():
    """Execute one reconciliation run."""
    try:
        config = load_config()
    except ConfigError as e:
        logger.error(f"{e}")
        sys.exit(1)

    logger.info(f"Starting commit count collector ({config.environment})")

    # Initialize infrastructure components
    try:
        storage = PostgresRepositoryStorage(config.database.connection_params())
    except Exception as e:
        logger.error(f"Failed to connect to the database: {e}")
        sys.exit(1)

    github_client = GitHubGraphQLClient(config.github_token)
    page_scraper = GitHubPageScraper(config.github_base_url)

    # Initialize application service
    service = ReconciliationService(
        github_client=github_client,
        page_scraper=page_scraper,
        storage=storage
    )

    try:
        await service.reconcile_all()
    except Exception as e:
        logger.error(f"Reconciliation failed: {e}", exc_info=True)
        sys.exit(1)
    finally:
        await service.close()


def run():
    # Load environment variables from .env or env file
    load_dotenv('.env') or load_dotenv('env')
    configure_logging(os.getenv("LOG_FILE", DEFAULT_LOG_FILE))
    asyncio.run(main())


if __name__ == "__main__":
    run()
