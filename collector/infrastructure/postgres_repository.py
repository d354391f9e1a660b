"""PostgreSQL repository implementation for data persistence."""
import logging
from typing import Any, Dict, Iterator
import psycopg2
from collector.domain.errors import StorageError
from collector.domain.repository_interface import IRepositoryStorage
from collector.domain.models import Project, Repository, RepositoryStats


logger = logging.getLogger(__name__)


class PostgresRepositoryStorage(IRepositoryStorage):
    """PostgreSQL implementation of repository storage.

    Reads tracked repositories through a single server-side cursor and
    writes each repository's statistics with one UPDATE per row.
    """

    SELECT_REPOSITORIES = """
        SELECT r.id, r.name, p.id, p.name, p.symbol, p.owner
        FROM repositories r
        JOIN projects p ON p.id = r.project_id
        ORDER BY r.id
    """

    UPDATE_STATS = """
        UPDATE repositories SET
            language = %(language)s,
            pull_requests_count = %(pull_requests_count)s,
            watchers_count = %(watchers_count)s,
            stargazers_count = %(stargazers_count)s,
            issues_count = %(issues_count)s,
            commits_count_for_the_last_week = %(commits_count_for_the_last_week)s,
            commits_count_for_the_last_month = %(commits_count_for_the_last_month)s,
            commits_count = %(commits_count)s,
            contributors_count = %(contributors_count)s,
            updated_at = CURRENT_TIMESTAMP
        WHERE id = %(id)s
    """

    def __init__(self, connection_params: Dict[str, Any]):
        """Initialize PostgreSQL connection.

        Args:
            connection_params: Keyword arguments for psycopg2.connect
        """
        self._conn = psycopg2.connect(**connection_params)
        self._conn.autocommit = False
        logger.info("Connected to PostgreSQL database")

    def iter_repositories(self) -> Iterator[Repository]:
        """Iterate over all repositories joined to their projects.

        Uses a named WITH HOLD cursor so that it stays open across the
        commits and rollbacks issued by update_repository_stats.

        Yields:
            Repository entities
        """
        cursor = self._conn.cursor(name="tracked_repositories", withhold=True)
        try:
            cursor.execute(self.SELECT_REPOSITORIES)
            # Held cursors survive later rollbacks only once declared in a committed transaction
            self._conn.commit()
            for repo_id, repo_name, project_id, project_name, symbol, owner in cursor:
                project = Project(
                    project_id=project_id,
                    name=project_name,
                    symbol=symbol,
                    owner=owner
                )
                yield Repository(project=project, name=repo_name, repo_id=repo_id)
        finally:
            cursor.close()

    def update_repository_stats(self, repo_id: int, stats: RepositoryStats) -> None:
        """Overwrite every statistics column of one repository.

        Args:
            repo_id: Identity of the repository row
            stats: Statistics to persist

        Raises:
            StorageError: When the update fails; the transaction is rolled
                back and the WITH HOLD read cursor stays usable
        """
        cursor = self._conn.cursor()

        try:
            cursor.execute(self.UPDATE_STATS, {
                "id": repo_id,
                "language": stats.language,
                "pull_requests_count": stats.pull_requests_count,
                "watchers_count": stats.watchers_count,
                "stargazers_count": stats.stargazers_count,
                "issues_count": stats.issues_count,
                "commits_count_for_the_last_week": stats.commits_count_for_the_last_week,
                "commits_count_for_the_last_month": stats.commits_count_for_the_last_month,
                "commits_count": stats.commits_count,
                "contributors_count": stats.contributors_count,
            })
            self._conn.commit()
            logger.info(f"Updated statistics of repository {repo_id}")

        except psycopg2.Error as e:
            self._conn.rollback()
            logger.error(f"Error updating repository {repo_id}: {e}")
            raise StorageError(str(e)) from e
        finally:
            cursor.close()

    def get_repository_count(self) -> int:
        """Get the total number of repositories in storage.

        Returns:
            Count of repositories
        """
        cursor = self._conn.cursor()
        try:
            cursor.execute("SELECT COUNT(*) FROM repositories")
            count = cursor.fetchone()[0]
            return count
        finally:
            cursor.close()

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            logger.info("Closed PostgreSQL connection")
