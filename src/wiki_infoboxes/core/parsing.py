# ABOUTME: Parses raw infobox HTML pages into identifier records page by page
# ABOUTME: Keeps page order and drops only infoboxes that yielded nothing at all

from collections.abc import Iterable

from wiki_infoboxes.core.models import PageRecord, ParsedPageRecord
from wiki_infoboxes.extraction import infobox
from wiki_infoboxes.utils.logging import get_logger

logger = get_logger(__name__)


def parse_page(page: PageRecord) -> ParsedPageRecord:
    """Run the infobox extractor over every fragment of a page."""
    records = []
    for fragment in page.infobox_html:
        record = infobox.extract(fragment)
        if not record.is_empty():
            records.append(record)

    return ParsedPageRecord(title=page.title, page_id=page.page_id, infoboxes=tuple(records))


def parse_pages(pages: Iterable[PageRecord]) -> list[ParsedPageRecord]:
    """Parse raw pages into one ParsedPageRecord each, preserving input order."""
    parsed = [parse_page(page) for page in pages]

    logger.info(
        "Parsed pages",
        page_count=len(parsed),
        infobox_count=sum(len(page.infoboxes) for page in parsed),
        pages_with_identifiers=sum(1 for page in parsed if page.identifier_count),
    )
    return parsed
