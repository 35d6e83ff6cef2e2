"""MediaWiki API access: embedded-in listing and page content retrieval."""

from .api import MediaWikiClient
from .embedded_in import EmbeddedInFinder
from .page_content import PageContentFetcher, find_infobox_tables

__all__ = ["EmbeddedInFinder", "MediaWikiClient", "PageContentFetcher", "find_infobox_tables"]
