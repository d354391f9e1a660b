"""Reconciliation service refreshing the statistics of tracked repositories."""
import logging
from datetime import datetime, timezone
from typing import Callable, Optional
from collector.domain.activity import (
    commits_count_for_the_last_month,
    commits_count_for_the_last_week,
    one_month_before,
)
from collector.domain.errors import GitHubAPIError, ScrapingError, StorageError
from collector.domain.github_interface import IGitHubClient, IPageScraper
from collector.domain.repository_interface import IRepositoryStorage
from collector.domain.models import (
    Repository,
    RepositoryMetadata,
    RepositoryStats,
    ScrapedCounters,
)


logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def build_stats(
    metadata: RepositoryMetadata,
    counters: ScrapedCounters,
    now: datetime
) -> RepositoryStats:
    """Merge fetched metadata and scraped counters into one update record."""
    history = metadata.commit_history
    return RepositoryStats(
        language=metadata.primary_language,
        pull_requests_count=metadata.pull_requests_count,
        watchers_count=metadata.watchers_count,
        stargazers_count=metadata.stargazers_count,
        issues_count=metadata.issues_count,
        commits_count_for_the_last_week=commits_count_for_the_last_week(history, now),
        commits_count_for_the_last_month=commits_count_for_the_last_month(history),
        commits_count=counters.commits_count,
        contributors_count=counters.contributors_count
    )


class ReconciliationService:
    """Application service for refreshing repository statistics.

    Orchestrates the GitHub API, the landing page scraper and storage.
    Repositories are processed one at a time; an API, scraping or
    storage error abandons only the current repository, whose stored statistics are
    left untouched.
    """

    def __init__(
        self,
        github_client: IGitHubClient,
        page_scraper: IPageScraper,
        storage: IRepositoryStorage,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """Initialize reconciliation service.

        Args:
            github_client: GitHub API client implementation
            page_scraper: Landing page scraper implementation
            storage: Repository storage implementation
            clock: Returns the reference time of a run (defaults to UTC now)
        """
        self._github_client = github_client
        self._page_scraper = page_scraper
        self._storage = storage
        self._clock = clock or _utc_now

    async def reconcile(self, repository: Repository, now: datetime) -> bool:
        """Fetch, scrape, merge and persist one repository.

        Args:
            repository: Repository to refresh
            now: Reference time of the run

        Returns:
            True when the repository was updated, False when abandoned
        """
        project_id = repository.project.project_id

        try:
            metadata = await self._github_client.fetch_metadata(
                repository.owner,
                repository.name,
                one_month_before(now)
            )
        except GitHubAPIError as e:
            logger.error(f"{e}")
            logger.error(f"API ERROR. ProjectId: {project_id}")
            return False

        try:
            counters = await self._page_scraper.fetch_counters(
                repository.owner,
                repository.name
            )
        except ScrapingError as e:
            logger.error(f"{e}")
            logger.error(f"Scraping ERROR. ProjectId: {project_id}")
            return False

        stats = build_stats(metadata, counters, now)
        try:
            self._storage.update_repository_stats(repository.repo_id, stats)
        except StorageError as e:
            logger.error(f"{e}")
            logger.error(f"DB ERROR. ProjectId: {project_id}")
            return False
        return True

    async def reconcile_all(self) -> None:
        """Refresh every tracked repository, sequentially."""
        now = self._clock()
        logger.info(
            f"Starting reconciliation of {self._storage.get_repository_count()} "
            f"repositories at {now.isoformat()}"
        )

        for repository in self._storage.iter_repositories():
            await self.reconcile(repository, now)

        logger.info("Reconciliation complete")

    async def close(self) -> None:
        """Close connections."""
        try:
            await self._github_client.close()
        finally:
            try:
                await self._page_scraper.close()
            finally:
                self._storage.close()
