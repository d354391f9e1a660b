"""Scraper for counters shown on a GitHub repository landing page."""
import asyncio
import logging
from typing import List, Optional
import aiohttp
from bs4 import BeautifulSoup
from collector.domain.errors import ScrapingError
from collector.domain.github_interface import IPageScraper
from collector.domain.models import ScrapedCounters


logger = logging.getLogger(__name__)

REPOSITORY_BASE_URL = "https://github.com"

# Marker of the numbers summary (commits ... contributors) on the page
EMPHASIZED_NUMBER_SELECTOR = "span.text-emphasized"


def extract_emphasized_numbers(html: str) -> List[int]:
    """Extract every emphasized number from the page in document order.

    Thousands-separator commas and surrounding whitespace are removed
    before parsing.

    Args:
        html: Landing page markup

    Returns:
        Extracted integers

    Raises:
        ScrapingError: When an emphasized element is not an integer
    """
    soup = BeautifulSoup(html, "html.parser")
    numbers = []
    for element in soup.select(EMPHASIZED_NUMBER_SELECTOR):
        text = element.get_text().strip().replace(",", "")
        try:
            numbers.append(int(text))
        except ValueError as e:
            raise ScrapingError(f"Non-numeric emphasized value: {text!r}") from e
    return numbers


class GitHubPageScraper(IPageScraper):
    """Fetches `<base_url>/<owner>/<name>` and reads its numbers summary.

    Implements the IPageScraper port. The page exposes total commits and
    contributors only positionally, so the extracted sequence must have
    exactly five entries.
    """

    def __init__(self, base_url: str = REPOSITORY_BASE_URL):
        self._base_url = base_url.rstrip("/")
        self._session: Optional[aiohttp.ClientSession] = None

    async def _init_session(self) -> None:
        """Initialize the HTTP session (lazy initialization)."""
        if self._session is None:
            self._session = aiohttp.ClientSession()

    def repository_url(self, owner: str, name: str) -> str:
        return f"{self._base_url}/{owner}/{name}"

    async def _fetch_page(self, url: str) -> str:
        await self._init_session()

        try:
            async with self._session.get(url, raise_for_status=True) as response:
                return await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Error fetching {url}: {e}")
            raise ScrapingError(str(e)) from e

    async def fetch_counters(self, owner: str, name: str) -> ScrapedCounters:
        """Scrape the numbers summary of one repository.

        Args:
            owner: Repository owner login
            name: Repository name

        Returns:
            ScrapedCounters with commits and contributors counts

        Raises:
            ScrapingError: On fetch failure, parse failure or wrong count
        """
        url = self.repository_url(owner, name)
        html = await self._fetch_page(url)
        numbers = extract_emphasized_numbers(html)
        logger.debug(f"Scraped {url}: {numbers}")
        return ScrapedCounters.from_sequence(numbers)

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None
