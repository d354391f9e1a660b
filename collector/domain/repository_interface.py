"""Repository interface (port) for data persistence.

This is the port in hexagonal architecture that the infrastructure layer implements.
"""
from abc import ABC, abstractmethod
from typing import Iterator
from collector.domain.models import Repository, RepositoryStats


class IRepositoryStorage(ABC):
    """Abstract interface for repository data storage."""

    @abstractmethod
    def iter_repositories(self) -> Iterator[Repository]:
        """Iterate over every tracked repository joined to its project.

        Implementations hold one open cursor for the whole iteration and
        must release it however the iteration ends.
        """
        pass

    @abstractmethod
    def update_repository_stats(self, repo_id: int, stats: RepositoryStats) -> None:
        """Replace the statistics block of one repository in a single update.

        Args:
            repo_id: Identity of the repository row
            stats: Freshly derived statistics

        Raises:
            StorageError: When the row cannot be written
        """
        pass

    @abstractmethod
    def get_repository_count(self) -> int:
        """Get the total number of repositories in storage."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close any open connections."""
        pass
