"""Website scraping for the context library."""

import re
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup

from rfi_responder.core.exceptions import ExtractionError
from rfi_responder.utils.logging import get_logger

LOGGER = get_logger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": "RFIResponder/0.1 (context library scraper)",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}
REMOVED_TAGS = ["script", "style", "nav", "header", "footer"]
CONTENT_TAGS = ["p", "h1", "h2", "h3", "h4", "h5", "h6", "li", "td", "th", "div"]
_WHITESPACE = re.compile(r"\s+")


@dataclass
class ScrapedPage:
    url: str
    title: str
    content: str


class WebScraper:
    """Fetches a page and reduces it to a title and block-level text."""

    def __init__(
        self,
        timeout: int = 30,
        min_snippet_length: int = 20,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.min_snippet_length = min_snippet_length
        self.transport = transport

    @staticmethod
    def validate_url(url: str) -> bool:
        parsed = urlparse(url or "")
        return parsed.scheme in ("http", "https") and bool(parsed.netloc)

    async def scrape(self, url: str) -> ScrapedPage:
        """Fetch ``url`` and extract its readable text.

        Raises:
            ExtractionError: Invalid URL, fetch failure or no usable text
        """
        if not self.validate_url(url):
            raise ExtractionError(f"Invalid URL: {url}")

        LOGGER.info(f"Scraping website: {url}")
        html = await self._fetch(url)
        title, content = self.parse_html(html, fallback_title=url)

        if not content:
            raise ExtractionError(f"No readable content found at {url}")

        LOGGER.info(
            f"Scraped {url}: '{title}'",
            extra={"content_length": len(content)},
        )
        return ScrapedPage(url=url, title=title, content=content)

    async def _fetch(self, url: str) -> str:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers=DEFAULT_HEADERS,
                transport=self.transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.text
        except httpx.HTTPStatusError as e:
            raise ExtractionError(
                f"Failed to fetch URL: {e.response.status_code} {e.response.reason_phrase}",
                original_error=e,
            ) from e
        except httpx.HTTPError as e:
            raise ExtractionError(f"Failed to fetch URL: {e}", original_error=e) from e

    def parse_html(self, html: str, fallback_title: str = "") -> tuple:
        """Return ``(title, content)`` for an HTML document.

        Content is the text of block-level tags, one snippet per block
        separated by blank lines, with whitespace collapsed and snippets
        shorter than ``min_snippet_length`` dropped.
        """
        soup = BeautifulSoup(html, "html.parser")

        title_tag = soup.find("title")
        title = title_tag.get_text(strip=True) if title_tag else ""

        for tag in soup(REMOVED_TAGS):
            tag.decompose()

        snippets: List[str] = []
        seen = set()
        for tag_name in CONTENT_TAGS:
            for element in soup.find_all(tag_name):
                text = _WHITESPACE.sub(" ", element.get_text(" ")).strip()
                if len(text) < self.min_snippet_length or text in seen:
                    continue
                seen.add(text)
                snippets.append(text)

        return title or fallback_title, "\n\n".join(snippets)
