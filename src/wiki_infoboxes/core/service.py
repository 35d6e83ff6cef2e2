# ABOUTME: High-level service API orchestrating acquisition, parsing and snapshot archiving
# ABOUTME: Runs the raw and parsed stages for each template, writing snapshots only when they change

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel

from wiki_infoboxes.config import Config, TemplateTarget, get_config
from wiki_infoboxes.core.acquisition import PageAcquisition
from wiki_infoboxes.core.models import PageRecord, ParsedPageRecord
from wiki_infoboxes.core.parsing import parse_pages
from wiki_infoboxes.extraction.wiki import EmbeddedInFinder, MediaWikiClient, PageContentFetcher
from wiki_infoboxes.persistence import SnapshotStore
from wiki_infoboxes.utils.logging import get_logger, with_template_context

RecordT = TypeVar("RecordT", bound=BaseModel)

ProgressCallback = Callable[[str], None]


@dataclass(slots=True)
class StageOutcome:
    """What happened to one snapshot during a run."""

    snapshot: str
    existing_count: int
    updated_count: int
    written: bool
    archived_to: Path | None = None

    @property
    def added_count(self) -> int:
        return self.updated_count - self.existing_count


@dataclass(slots=True)
class TemplateRunSummary:
    """Outcome of updating both stages for one template."""

    template: str
    template_title: str
    raw: StageOutcome
    parsed: StageOutcome
    pages_with_identifiers: int = 0


def commit_snapshot(
    store: SnapshotStore[RecordT],
    name: str,
    existing: Sequence[RecordT],
    updated: Sequence[RecordT],
    force: bool = False,
) -> StageOutcome:
    """Archive the old snapshot and write the new one, unless nothing was added.

    Updates only ever append, so an unchanged size means an unchanged snapshot.
    That includes a first run that found nothing: no empty snapshot is created.
    ``force`` writes regardless (full re-download, explicit re-parse).
    """
    outcome = StageOutcome(snapshot=name, existing_count=len(existing), updated_count=len(updated), written=False)
    if not force and len(updated) == len(existing):
        return outcome

    outcome.archived_to = store.replace(name, updated)
    outcome.written = True
    return outcome


class InfoboxUpdateService:
    """Service for archiving and updating infobox snapshots, one template at a time."""

    def __init__(
        self,
        config: Config | None = None,
        client: MediaWikiClient | None = None,
        raw_store: SnapshotStore[PageRecord] | None = None,
        parsed_store: SnapshotStore[ParsedPageRecord] | None = None,
        progress_callback: ProgressCallback | None = None,
    ):
        self.config = config or get_config()
        self.client = client or MediaWikiClient(
            api_url=self.config.api_url, user_agent=self.config.user_agent, timeout=self.config.request_timeout
        )
        self.raw_store = raw_store or SnapshotStore(PageRecord, self.config.raw_data_dir, self.config.archive_dir)
        self.parsed_store = parsed_store or SnapshotStore(
            ParsedPageRecord, self.config.parsed_data_dir, self.config.archive_dir
        )
        self.acquisition = PageAcquisition(
            EmbeddedInFinder(self.client), PageContentFetcher(self.client), store=self.raw_store
        )
        self.progress_callback = progress_callback
        self.logger = get_logger(__name__)

    def _report(self, message: str) -> None:
        if self.progress_callback:
            self.progress_callback(message)

    async def update_raw_pages(
        self, target: TemplateTarget, redownload: bool = False
    ) -> tuple[list[PageRecord], StageOutcome]:
        """Bring the raw HTML snapshot for a template up to date."""
        existing = self.raw_store.load_or_empty(target.raw_snapshot)
        self._report(f"Found {len(existing)} pages in existing file {target.raw_snapshot}")

        if redownload:
            self._report(f"Redownloading all pages embedding {target.template_title}...")
            updated = await self.acquisition.download_all(target.template_title)
        else:
            self._report(f"Updating new pages embedding {target.template_title}...")
            updated = await self.acquisition.update_from_records(target.template_title, existing)

        outcome = commit_snapshot(self.raw_store, target.raw_snapshot, existing, updated, force=redownload)
        if outcome.written:
            self._report(
                f"Downloaded and saved {len(updated)} pages ({outcome.added_count:+d}) to {target.raw_snapshot}"
            )
            return updated, outcome

        self._report(f"No new pages for {target.template_title}, {target.raw_snapshot} is current")
        return existing, outcome

    def update_parsed_pages(
        self, target: TemplateTarget, pages: Sequence[PageRecord], force: bool = False
    ) -> tuple[list[ParsedPageRecord], StageOutcome]:
        """Parse raw pages and bring the parsed snapshot for a template up to date."""
        existing = self.parsed_store.load_or_empty(target.parsed_snapshot)
        self._report(f"Found {len(existing)} parsed pages in existing file {target.parsed_snapshot}")

        parsed = parse_pages(pages)
        outcome = commit_snapshot(self.parsed_store, target.parsed_snapshot, existing, parsed, force=force)
        if outcome.written:
            self._report(f"Parsed and saved {len(parsed)} pages to {target.parsed_snapshot}")
            return parsed, outcome

        self._report(f"No new parsed pages, {target.parsed_snapshot} is current")
        return existing, outcome

    async def update_template(self, target: TemplateTarget, redownload: bool = False) -> TemplateRunSummary:
        """Run both stages for one template."""
        with with_template_context(target.name, target.template_title) as logger:
            logger.info("Starting template update", redownload=redownload)

            pages, raw_outcome = await self.update_raw_pages(target, redownload=redownload)
            parsed, parsed_outcome = self.update_parsed_pages(target, pages, force=redownload)

            summary = TemplateRunSummary(
                template=target.name,
                template_title=target.template_title,
                raw=raw_outcome,
                parsed=parsed_outcome,
                pages_with_identifiers=sum(1 for page in parsed if page.identifier_count),
            )
            logger.info(
                "Template update complete",
                raw_written=raw_outcome.written,
                parsed_written=parsed_outcome.written,
                page_count=len(pages),
                pages_with_identifiers=summary.pages_with_identifiers,
            )
            return summary

    async def update_all(
        self, names: Sequence[str] | None = None, redownload: bool = False
    ) -> list[TemplateRunSummary]:
        """Run the update for each selected template (all of them by default)."""
        targets = self.config.templates()
        if names:
            targets = [target for target in targets if target.name in names]

        return [await self.update_template(target, redownload=redownload) for target in targets]

    def reparse_template(self, target: TemplateTarget) -> StageOutcome:
        """Re-parse the stored raw snapshot and overwrite the parsed snapshot."""
        pages = self.raw_store.load(target.raw_snapshot)
        self._report(f"Re-parsing {len(pages)} pages from {target.raw_snapshot}")
        _, outcome = self.update_parsed_pages(target, pages, force=True)
        return outcome

    async def fetch_page(self, page: str) -> tuple[PageRecord, ParsedPageRecord] | None:
        """Fetch and parse a single page by name or numeric ID without persisting anything."""
        fetcher = self.acquisition.fetcher
        record = await (fetcher.fetch_page_html(int(page)) if page.isdigit() else fetcher.fetch_page_html_by_name(page))
        if record is None:
            return None
        return record, parse_pages([record])[0]

    async def close(self) -> None:
        """Clean up HTTP resources."""
        await self.client.close()
