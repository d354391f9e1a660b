"""Domain exceptions raised across the collector layers."""


class CollectorError(Exception):
    """Base exception for the commit count collector."""
    pass


class ConfigError(CollectorError):
    """Raised when startup configuration is missing or invalid."""
    pass


class GitHubAPIError(CollectorError):
    """Raised when the GraphQL metadata query fails."""
    pass


class ScrapingError(CollectorError):
    """Raised when the repository landing page cannot be scraped."""
    pass


class StorageError(CollectorError):
    """Raised when a repository row cannot be written."""
    pass
