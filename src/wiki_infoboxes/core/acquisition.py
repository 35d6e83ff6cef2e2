# ABOUTME: Acquires raw infobox HTML for every page embedding a template
# ABOUTME: Full download or strictly additive incremental update against an existing snapshot

from collections.abc import Iterable

from wiki_infoboxes.core.models import PageRecord
from wiki_infoboxes.extraction.wiki import EmbeddedInFinder, PageContentFetcher
from wiki_infoboxes.persistence import SnapshotNotFoundError, SnapshotStore
from wiki_infoboxes.utils.logging import get_logger, log_pipeline_step


def new_page_ids(remote_ids: Iterable[int], existing: Iterable[PageRecord]) -> set[int]:
    """IDs reported by the wiki that are not in the existing records yet."""
    return set(remote_ids) - {record.page_id for record in existing}


class PageAcquisition:
    """Download PageRecords for the pages embedding a template."""

    def __init__(
        self,
        finder: EmbeddedInFinder,
        fetcher: PageContentFetcher,
        store: SnapshotStore[PageRecord] | None = None,
    ):
        self.finder = finder
        self.fetcher = fetcher
        self.store = store
        self.logger = get_logger(__name__)

    async def fetch_pages(self, page_ids: Iterable[int]) -> list[PageRecord]:
        """Fetch pages one at a time in ascending ID order, skipping any that fail."""
        page_ids = sorted(page_ids)
        records: list[PageRecord] = []
        failed: list[int] = []

        for page_id in page_ids:
            record = await self.fetcher.fetch_page_html(page_id)
            if record is None:
                failed.append(page_id)
                continue
            records.append(record)

        if failed:
            # Left out of this run; a later incremental update will pick them up
            self.logger.warning("Some pages could not be fetched", failed_count=len(failed), failed_page_ids=failed)

        self.logger.info("Fetched pages", requested=len(page_ids), fetched=len(records))
        return records

    @log_pipeline_step("download_all")
    async def download_all(self, template_title: str) -> list[PageRecord]:
        """Download every page embedding ``template_title`` without consulting existing data."""
        page_ids = await self.finder.find_page_ids(template_title)
        if not page_ids:
            return []
        return await self.fetch_pages(page_ids)

    @log_pipeline_step("update_from_records")
    async def update_from_records(self, template_title: str, existing: list[PageRecord]) -> list[PageRecord]:
        """Fetch only pages missing from ``existing`` and append them after it."""
        remote_ids = await self.finder.find_page_ids(template_title)
        missing = new_page_ids(remote_ids, existing)

        self.logger.info(
            "Computed new pages",
            template=template_title,
            remote_count=len(remote_ids),
            existing_count=len(existing),
            new_count=len(missing),
        )

        if not missing:
            return list(existing)
        return list(existing) + await self.fetch_pages(missing)

    async def update_from_snapshot(self, template_title: str, snapshot_name: str) -> list[PageRecord]:
        """Update the records stored under ``snapshot_name``, or download everything if there are none."""
        if self.store is None:
            raise ValueError("update_from_snapshot requires a snapshot store")

        try:
            existing = self.store.load(snapshot_name)
        except SnapshotNotFoundError:
            self.logger.info("No existing snapshot, downloading all pages", snapshot=snapshot_name)
            return await self.download_all(template_title)

        return await self.update_from_records(template_title, existing)
