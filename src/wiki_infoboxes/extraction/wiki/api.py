# ABOUTME: Thin async MediaWiki API client and the response models it decodes into
# ABOUTME: Failed requests come back as None instead of raising, callers decide what that means

from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from wiki_infoboxes.config import get_config
from wiki_infoboxes.utils.logging import get_logger

# Max permitted embedded-in page size
EI_LIMIT = 500
# Article namespace only (exclude users, templates, etc.)
EI_NAMESPACE = 0


class _ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class EmbeddedIn(_ApiModel):
    """One page that embeds the queried title."""

    pageid: int
    ns: int = 0
    title: str = ""


class EmbeddedInQuery(_ApiModel):
    embeddedin: list[EmbeddedIn] = Field(default_factory=list)


class Continuation(_ApiModel):
    eicontinue: str | None = None
    continue_: str | None = Field(default=None, alias="continue")


class EmbeddedInResult(_ApiModel):
    """A single page of ``list=embeddedin`` results."""

    batchcomplete: str | bool | None = None
    continuation: Continuation | None = Field(default=None, alias="continue")
    query: EmbeddedInQuery = Field(default_factory=EmbeddedInQuery)

    @property
    def cursor(self) -> str | None:
        """The eicontinue token for the next page, None on the last page."""
        return self.continuation.eicontinue if self.continuation else None


class ParseText(_ApiModel):
    html: str = Field(default="", alias="*")


class ParsedContent(_ApiModel):
    title: str
    pageid: int
    text: ParseText = Field(default_factory=ParseText)


class ApiError(_ApiModel):
    code: str | None = None
    info: str | None = None


class ParseResult(_ApiModel):
    """Result of an ``action=parse`` query."""

    parse: ParsedContent | None = None
    error: ApiError | None = None


class MediaWikiClient:
    """Async client for the handful of MediaWiki API queries the harvester needs."""

    def __init__(
        self,
        api_url: str | None = None,
        client: httpx.AsyncClient | None = None,
        user_agent: str | None = None,
        timeout: float | None = None,
    ):
        config = get_config()
        self.api_url = api_url or config.api_url
        self.http_client = client or httpx.AsyncClient(  # Allow for dependency injection
            headers={"User-Agent": user_agent or config.user_agent},
            timeout=timeout if timeout is not None else config.request_timeout,
            follow_redirects=True,
        )
        self.logger = get_logger(__name__)

    async def _get(self, params: dict[str, Any]) -> dict[str, Any] | None:
        """Issue a GET against the API, returning the decoded JSON body or None on any failure."""
        try:
            response = await self.http_client.get(self.api_url, params=params)
        except httpx.HTTPError as e:
            self.logger.warning(
                "API request failed", action=params.get("action"), error=str(e), error_type=type(e).__name__
            )
            return None

        if response.status_code != 200:
            self.logger.warning("API request returned non-success status", status_code=response.status_code)
            return None

        try:
            return response.json()
        except ValueError as e:
            self.logger.warning("API response was not valid JSON", error=str(e))
            return None

    async def embedded_in(self, title: str, cursor: str | None = None) -> EmbeddedInResult | None:
        """Fetch one page of pages embedding ``title``, continuing from ``cursor`` if given."""
        params: dict[str, Any] = {
            "action": "query",
            "list": "embeddedin",
            "eititle": title,
            "eilimit": EI_LIMIT,
            "einamespace": EI_NAMESPACE,
            "format": "json",
        }
        if cursor is not None:
            params["eicontinue"] = cursor

        body = await self._get(params)
        if body is None:
            return None

        try:
            return EmbeddedInResult.model_validate(body)
        except ValidationError as e:
            self.logger.warning("Unexpected embedded-in response", title=title, error=str(e))
            return None

    async def parse(
        self, page_id: int | None = None, page: str | None = None, prop: str = "text"
    ) -> ParseResult | None:
        """Fetch parsed page content by page ID or by page name."""
        if (page_id is None) == (page is None):
            raise ValueError("Exactly one of page_id or page must be given")

        params: dict[str, Any] = {"action": "parse", "prop": prop, "format": "json"}
        if page_id is not None:
            params["pageid"] = page_id
        else:
            params["page"] = page

        body = await self._get(params)
        if body is None:
            return None

        try:
            return ParseResult.model_validate(body)
        except ValidationError as e:
            self.logger.warning("Unexpected parse response", page_id=page_id, page=page, error=str(e))
            return None

    async def close(self) -> None:
        await self.http_client.aclose()
