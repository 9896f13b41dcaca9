"""Wikipedia article client built on the MediaWiki extracts API."""

import logging
from urllib.parse import quote

import httpx

from src.config import WikipediaConfig
from src.errors import DocumentNotFoundError, MalformedUpstreamError
from src.ingestion.identifiers import derive_id
from src.models.document import SourceDocument

logger = logging.getLogger(__name__)

ARTICLE_BASE_URL = "https://en.wikipedia.org/wiki/"


def build_query_params(title: str, full: bool) -> dict[str, str]:
    """Build API parameters for a plain-text extract of one page.

    Headings are kept in wiki style ("== History ==") so the segmenter can
    split on them. Without ``full`` only the lead section is requested.
    """
    params = {
        "action": "query",
        "prop": "extracts",
        "format": "json",
        "formatversion": "2",
        "redirects": "1",
        "explaintext": "1",
        "exsectionformat": "wiki",
        "titles": title,
    }
    if not full:
        params["exintro"] = "1"
    return params


def article_url(title: str) -> str:
    return ARTICLE_BASE_URL + quote(title.replace(" ", "_"), safe="")


class WikipediaClient:
    """Fetches Wikipedia articles as SourceDocuments.

    The underlying httpx client is created once and reused; call
    ``close()`` when done.

    Args:
        config: WikipediaConfig with API URL, user agent and timeout.
        http_client: Optional pre-built httpx client.
    """

    def __init__(
        self,
        config: WikipediaConfig | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._config = config or WikipediaConfig()
        self._client = http_client or httpx.Client(
            headers={"User-Agent": self._config.user_agent},
            timeout=self._config.timeout_seconds,
        )

    def get_page(self, title: str, full: bool = False) -> SourceDocument:
        """Fetch one article.

        Args:
            title: Page title; redirects are followed.
            full: Fetch the whole article instead of only the introduction.

        Returns:
            The article, with its ID derived from the resolved title.

        Raises:
            DocumentNotFoundError: If the page does not exist.
            MalformedUpstreamError: If the response lacks a title or text.
            httpx.HTTPError: On transport failures or non-2xx responses.
        """
        logger.info("Fetching Wikipedia page '%s' (full=%s)", title, full)
        response = self._client.get(self._config.api_url, params=build_query_params(title, full))
        response.raise_for_status()

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedUpstreamError(
                f"Wikipedia returned a non-JSON response for '{title}'",
                source="wikipedia",
                item=title,
            ) from e

        if not isinstance(payload, dict):
            raise MalformedUpstreamError(
                f"Wikipedia returned a {type(payload).__name__} instead of an object for '{title}'",
                source="wikipedia",
                item=title,
            )

        pages = (payload.get("query") or {}).get("pages") or []
        page = pages[0] if pages else None

        if page is None or page.get("missing") or page.get("invalid"):
            raise DocumentNotFoundError(f"Could not find a Wikipedia page for '{title}'", item=title)

        page_title = page.get("title")
        extract = page.get("extract")
        if not page_title or not extract or not extract.strip():
            raise MalformedUpstreamError(
                f"Empty Wikipedia page returned for '{title}'",
                source="wikipedia",
                item=title,
            )

        return SourceDocument(
            id=derive_id(page_title),
            title=page_title,
            full_text=extract.strip(),
            source_url=article_url(page_title),
        )

    def close(self) -> None:
        self._client.close()
