"""Domain models representing core business entities."""
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from collector.domain.errors import ScrapingError


EXPECTED_COUNTERS = 5


@dataclass(frozen=True)
class Project:
    """A tracked project (e.g. a coin) that owns source repositories.

    `owner` is the account or organization name on GitHub.
    """
    project_id: int
    name: str
    symbol: str
    owner: str


@dataclass(frozen=True)
class Repository:
    """Immutable domain entity representing a tracked GitHub repository."""
    project: Project
    name: str
    repo_id: Optional[int] = None

    @property
    def owner(self) -> str:
        """Returns the owning project's GitHub account."""
        return self.project.owner

    @property
    def full_name(self) -> str:
        """Returns the full repository name (owner/name)."""
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class RepositoryMetadata:
    """Counts and commit history returned by the GraphQL API.

    `commit_history` holds the `committedDate` of every default-branch
    commit since the requested timestamp, as ISO-8601 strings.
    """
    pull_requests_count: int
    watchers_count: int
    stargazers_count: int
    issues_count: int
    primary_language: str
    commit_history: Tuple[str, ...] = ()
    history_total_count: int = 0


@dataclass(frozen=True)
class ScrapedCounters:
    """Numbers scraped from the repository landing page.

    Only the first and last positions are interpreted. The three in between
    are kept as extracted.
    """
    commits_count: int
    contributors_count: int
    other_counts: Tuple[int, int, int]

    @classmethod
    def from_sequence(cls, numbers: Sequence[int]) -> 'ScrapedCounters':
        """Map the positional scrape result to named fields.

        Args:
            numbers: Extracted numbers in document order

        Returns:
            ScrapedCounters instance

        Raises:
            ScrapingError: When the sequence does not hold exactly 5 numbers
        """
        if len(numbers) != EXPECTED_COUNTERS:
            raise ScrapingError(
                f"Expected {EXPECTED_COUNTERS} counters, got {len(numbers)}"
            )
        return cls(
            commits_count=numbers[0],
            contributors_count=numbers[4],
            other_counts=(numbers[1], numbers[2], numbers[3])
        )


@dataclass(frozen=True)
class RepositoryStats:
    """Statistics block written back to a repository row in one update."""
    language: str
    pull_requests_count: int
    watchers_count: int
    stargazers_count: int
    issues_count: int
    commits_count_for_the_last_week: int
    commits_count_for_the_last_month: int
    commits_count: int
    contributors_count: int
