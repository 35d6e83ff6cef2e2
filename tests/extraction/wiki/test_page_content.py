# ABOUTME: Tests for fetching page HTML and isolating its infobox tables
# ABOUTME: HTML splitting is tested directly, fetching goes through mocked HTTP

import pytest

from wiki_infoboxes.extraction.wiki import MediaWikiClient, PageContentFetcher, find_infobox_tables

API_URL = "https://test.wiki/w/api.php"

PAGE_HTML = """
<div class="mw-parser-output">
<table class="infobox ib-chembox"><caption>Water</caption><tr><td>CAS Number</td><td>7732-18-5</td></tr></table>
<p>Water is an inorganic compound.</p>
<table class="wikitable"><tr><td>Not an infobox</td></tr></table>
<table class="infobox"><tr><th>CAS Number</th><td>7732-18-5</td></tr></table>
</div>
"""


@pytest.fixture
def fetcher():
    return PageContentFetcher(MediaWikiClient(api_url=API_URL))


class TestFindInfoboxTables:
    def test_keeps_only_infobox_tables_in_order(self):
        tables = find_infobox_tables(PAGE_HTML)

        assert len(tables) == 2
        assert tables[0].startswith('<table class="infobox ib-chembox">')
        assert "<caption>Water</caption>" in tables[0]
        assert tables[1].startswith('<table class="infobox">')

    def test_page_without_infobox(self):
        assert find_infobox_tables("<p>Just prose.</p>") == []


class TestFetchPageHtml:
    @pytest.mark.asyncio
    async def test_builds_page_record(self, fetcher, httpx_mock):
        httpx_mock.add_response(json={"parse": {"title": "Water", "pageid": 33306, "text": {"*": PAGE_HTML}}})

        record = await fetcher.fetch_page_html(33306)

        assert record.title == "Water"
        assert record.page_id == 33306
        assert len(record.infobox_html) == 2

    @pytest.mark.asyncio
    async def test_api_error_yields_none(self, fetcher, httpx_mock):
        httpx_mock.add_response(json={"error": {"code": "nosuchpageid", "info": "There is no page with ID 1."}})

        assert await fetcher.fetch_page_html(1) is None

    @pytest.mark.asyncio
    async def test_http_failure_yields_none(self, fetcher, httpx_mock):
        httpx_mock.add_response(status_code=502)

        assert await fetcher.fetch_page_html(1) is None

    @pytest.mark.asyncio
    async def test_fetch_by_name(self, fetcher, httpx_mock):
        httpx_mock.add_response(json={"parse": {"title": "Water", "pageid": 33306, "text": {"*": PAGE_HTML}}})

        record = await fetcher.fetch_page_html_by_name("Water")

        assert httpx_mock.get_request().url.params["page"] == "Water"
        assert record.page_id == 33306
