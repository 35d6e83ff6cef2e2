# ABOUTME: Domain records for raw infobox HTML pages and parsed chemical identifiers
# ABOUTME: Pydantic models whose aliases match the persisted JSON snapshot schema

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class _Record(BaseModel):
    """Frozen record that accepts both field names and JSON aliases."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class PageRecord(_Record):
    """Raw stage: the infobox tables found on one Wikipedia page."""

    title: str = Field(description="Page title")
    page_id: int = Field(alias="pageId", description="MediaWiki page ID")
    infobox_html: tuple[str, ...] = Field(
        default=(), alias="infoboxHtml", description="Outer HTML of every infobox table on the page"
    )


class IdentifierRecord(_Record):
    """Chemical identifiers retrieved from a single infobox."""

    title: str | None = Field(default=None, alias="infoboxTitle", description="Infobox caption")
    dashboard_ids: frozenset[str] = Field(default=frozenset(), alias="dtxsids")
    cas_numbers: frozenset[str] = Field(default=frozenset(), alias="casrns")
    inchi_keys: frozenset[str] = Field(default=frozenset(), alias="inchikeys")
    smiles: frozenset[str] = Field(default=frozenset(), alias="smiles")

    @field_serializer("dashboard_ids", "cas_numbers", "inchi_keys", "smiles")
    def _sorted(self, values: frozenset[str]) -> list[str]:
        return sorted(values)

    def is_empty(self) -> bool:
        """Check if nothing at all was retrieved from the infobox."""
        return self.title is None and not self.has_identifiers()

    def has_identifiers(self) -> bool:
        """Check if any identifier other than the title was retrieved."""
        return bool(self.cas_numbers or self.inchi_keys or self.smiles or self.dashboard_ids)


class ParsedPageRecord(_Record):
    """Parsed stage: the non-empty identifier records of one page."""

    title: str
    page_id: int = Field(alias="pageId")
    infoboxes: tuple[IdentifierRecord, ...] = ()

    @property
    def identifier_count(self) -> int:
        return sum(1 for infobox in self.infoboxes if infobox.has_identifiers())
