"""GitHub GraphQL API client fetching per-repository metadata."""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from gql import gql, Client
from gql.transport.aiohttp import AIOHTTPTransport
from collector.domain.activity import format_git_timestamp
from collector.domain.errors import GitHubAPIError
from collector.domain.github_interface import IGitHubClient
from collector.domain.models import RepositoryMetadata


logger = logging.getLogger(__name__)

GRAPHQL_URL = "https://api.github.com/graphql"

# GraphQL query for counts and the default-branch history since $since
REPOSITORY_QUERY = gql("""
    query RepositoryStats($owner: String!, $name: String!, $since: GitTimestamp!) {
        repository(owner: $owner, name: $name) {
            pullRequests {
                totalCount
            }
            stargazers {
                totalCount
            }
            watchers {
                totalCount
            }
            issues {
                totalCount
            }
            primaryLanguage {
                name
            }
            defaultBranchRef {
                name
                target {
                    ... on Commit {
                        history(since: $since) {
                            totalCount
                            nodes {
                                committedDate
                            }
                        }
                    }
                }
            }
        }
    }
""")


@dataclass(frozen=True)
class RepositoryQuery:
    """Variables of one repository metadata query, built fresh per call."""
    owner: str
    name: str
    since: datetime

    def variable_values(self) -> dict:
        return {
            "owner": self.owner,
            "name": self.name,
            "since": format_git_timestamp(self.since),
        }


def parse_repository_result(result: dict) -> RepositoryMetadata:
    """Transform a GraphQL response into a RepositoryMetadata entity.

    Args:
        result: Query result dictionary

    Returns:
        RepositoryMetadata

    Raises:
        GitHubAPIError: When the repository is missing from the response
    """
    repository = result.get("repository")
    if not repository:
        raise GitHubAPIError("Repository not found in GraphQL response")

    language = repository.get("primaryLanguage") or {}

    history = {}
    branch = repository.get("defaultBranchRef")
    if branch:
        history = (branch.get("target") or {}).get("history") or {}
    nodes = history.get("nodes") or []

    return RepositoryMetadata(
        pull_requests_count=repository["pullRequests"]["totalCount"],
        watchers_count=repository["watchers"]["totalCount"],
        stargazers_count=repository["stargazers"]["totalCount"],
        issues_count=repository["issues"]["totalCount"],
        primary_language=language.get("name") or "",
        commit_history=tuple(node["committedDate"] for node in nodes),
        history_total_count=history.get("totalCount", 0)
    )


class GitHubGraphQLClient(IGitHubClient):
    """GitHub GraphQL API client.

    Implements the IGitHubClient port, providing an anti-corruption layer
    between the domain and GitHub's API. Failures are reported as
    GitHubAPIError and never retried.
    """

    def __init__(self, access_token: str, url: str = GRAPHQL_URL):
        """Initialize GitHub client.

        Args:
            access_token: GitHub personal access token
            url: GraphQL endpoint
        """
        self._access_token = access_token
        self._url = url
        self._transport: Optional[AIOHTTPTransport] = None
        self._client: Optional[Client] = None

    async def _init_client(self) -> None:
        """Initialize the GraphQL client (lazy initialization)."""
        if self._client is None:
            headers = {"Authorization": f"Bearer {self._access_token}"}
            self._transport = AIOHTTPTransport(url=self._url, headers=headers)
            self._client = Client(
                transport=self._transport,
                fetch_schema_from_transport=False
            )

    async def _execute_query(self, query: RepositoryQuery) -> dict:
        """Execute the repository query once.

        Raises:
            GitHubAPIError: On any transport or query error
        """
        await self._init_client()

        try:
            async with self._client as session:
                return await session.execute(
                    REPOSITORY_QUERY,
                    variable_values=query.variable_values()
                )
        except Exception as e:
            logger.error(f"Error executing GraphQL query for {query.owner}/{query.name}: {e}")
            raise GitHubAPIError(str(e)) from e

    async def fetch_metadata(self, owner: str, name: str, since: datetime) -> RepositoryMetadata:
        """Fetch counts and commit history for one repository.

        Args:
            owner: Repository owner login
            name: Repository name
            since: Start of the commit history window

        Returns:
            RepositoryMetadata entity
        """
        query = RepositoryQuery(owner=owner, name=name, since=since)
        result = await self._execute_query(query)

        try:
            metadata = parse_repository_result(result)
        except (KeyError, TypeError) as e:
            raise GitHubAPIError(f"Unexpected GraphQL response shape: {e}") from e

        logger.debug(
            f"Fetched {owner}/{name}: {len(metadata.commit_history)} commits since "
            f"{format_git_timestamp(since)}"
        )
        return metadata

    async def close(self) -> None:
        """Close the GraphQL client and transport."""
        if self._transport:
            await self._transport.close()
            self._transport = None
            self._client = None
