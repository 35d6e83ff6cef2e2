# ABOUTME: Finds every article embedding a template by walking embedded-in continuation cursors
# ABOUTME: Pagination stops quietly at the first failed request and keeps what it already has

from collections.abc import AsyncIterator

from wiki_infoboxes.extraction.wiki.api import EmbeddedIn, EmbeddedInResult, MediaWikiClient
from wiki_infoboxes.utils.logging import get_logger


class EmbeddedInFinder:
    """Resolve template title -> IDs of the article pages that embed it."""

    def __init__(self, client: MediaWikiClient):
        self.client = client
        self.logger = get_logger(__name__)

    async def iter_result_pages(
        self, template_title: str, cursor: str | None = None
    ) -> AsyncIterator[EmbeddedInResult]:
        """Yield embedded-in result pages one request at a time.

        Starts from ``cursor`` when given, so an interrupted walk can be resumed.
        Ends when a page carries no continuation token or a request fails.
        """
        while True:
            result = await self.client.embedded_in(template_title, cursor)
            if result is None:
                self.logger.warning(
                    "Embedded-in pagination stopped on a failed request", template=template_title, cursor=cursor
                )
                return

            yield result

            cursor = result.cursor
            if cursor is None:
                return

    async def find_pages(self, template_title: str) -> list[EmbeddedIn]:
        """Collect every embedded-in entry for ``template_title``."""
        entries: list[EmbeddedIn] = []
        result_pages = 0
        async for result in self.iter_result_pages(template_title):
            entries.extend(result.query.embeddedin)
            result_pages += 1

        self.logger.info(
            "Found embedding pages", template=template_title, entry_count=len(entries), result_pages=result_pages
        )
        return entries

    async def find_page_ids(self, template_title: str) -> set[int]:
        """Get the page IDs of every article embedding ``template_title``."""
        return {entry.pageid for entry in await self.find_pages(template_title)}
