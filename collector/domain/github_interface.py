"""GitHub interfaces (ports) for fetching repository statistics.

This is the anti-corruption layer that shields the domain from GitHub API
and page markup specifics.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from collector.domain.models import RepositoryMetadata, ScrapedCounters


class IGitHubClient(ABC):
    """Abstract interface for GitHub API operations."""

    @abstractmethod
    async def fetch_metadata(self, owner: str, name: str, since: datetime) -> RepositoryMetadata:
        """Fetch counts and commit history for one repository.

        Args:
            owner: Repository owner login
            name: Repository name
            since: Only commits at or after this time are returned

        Returns:
            RepositoryMetadata for the repository

        Raises:
            GitHubAPIError: On any transport or query failure
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""
        pass


class IPageScraper(ABC):
    """Abstract interface for scraping the repository landing page."""

    @abstractmethod
    async def fetch_counters(self, owner: str, name: str) -> ScrapedCounters:
        """Scrape total commits and contributors for one repository.

        Raises:
            ScrapingError: On fetch failure or unexpected page layout
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""
        pass
