# ABOUTME: Fetches rendered page HTML and keeps only the infobox tables it contains
# ABOUTME: Produces raw PageRecords, or None when the page could not be fetched

from bs4 import BeautifulSoup

from wiki_infoboxes.core.models import PageRecord
from wiki_infoboxes.extraction.wiki.api import MediaWikiClient, ParseResult
from wiki_infoboxes.utils.logging import get_logger


def find_infobox_tables(page_html: str) -> list[str]:
    """Return the outer HTML of every ``table.infobox`` in a page, in document order."""
    soup = BeautifulSoup(page_html, "html.parser")
    return [str(table) for table in soup.select("table.infobox")]


class PageContentFetcher:
    """Turn a page ID (or name) into a PageRecord holding its infobox HTML."""

    def __init__(self, client: MediaWikiClient):
        self.client = client
        self.logger = get_logger(__name__)

    async def fetch_page_html(self, page_id: int) -> PageRecord | None:
        """Fetch a page by ID. Returns None if the page could not be retrieved."""
        result = await self.client.parse(page_id=page_id, prop="text")
        return self._to_record(result, page_id=page_id)

    async def fetch_page_html_by_name(self, page: str) -> PageRecord | None:
        """Fetch a page by its title. Returns None if the page could not be retrieved."""
        result = await self.client.parse(page=page, prop="text")
        return self._to_record(result, page=page)

    def _to_record(self, result: ParseResult | None, **lookup) -> PageRecord | None:
        if result is None:
            self.logger.warning("Page fetch failed", **lookup)
            return None

        if result.error is not None or result.parse is None:
            error = result.error
            self.logger.warning(
                "Page fetch returned an API error",
                error_code=error.code if error else None,
                error_info=error.info if error else None,
                **lookup,
            )
            return None

        infobox_html = find_infobox_tables(result.parse.text.html)
        self.logger.debug(
            "Fetched page HTML",
            page_id=result.parse.pageid,
            title=result.parse.title,
            infobox_count=len(infobox_html),
        )
        return PageRecord(title=result.parse.title, page_id=result.parse.pageid, infobox_html=tuple(infobox_html))
