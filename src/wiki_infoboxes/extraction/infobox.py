# ABOUTME: Extracts chemical identifiers from Chembox and Drugbox infobox tables
# ABOUTME: Classifies a table once, then runs one flat extraction function per template schema

import re
from enum import Enum

from bs4 import BeautifulSoup, Tag

from wiki_infoboxes.core.models import IdentifierRecord
from wiki_infoboxes.utils.logging import get_logger

logger = get_logger(__name__)

INCHIKEY_PATTERN = re.compile(r"[A-Z]{14}-[A-Z]{10}-[A-Z]{1}")
CASRN_PATTERN = re.compile(r"[0-9]{2,7}-[0-9]{2}-[0-9]")
DTXSID_PATTERN = re.compile(r"DTXSID[0-9]+")

CAS_LABEL = "CAS Number"
DASHBOARD_LABEL = "CompTox Dashboard (EPA)"
INCHI_PREFIX = "InChI"
SMILES_PREFIX = "SMILES"

CHEMBOX_CLASSES = frozenset({"infobox", "ib-chembox"})


class InfoboxKind(str, Enum):
    """Infobox template schemas we know how to mine."""

    CHEMBOX = "chembox"
    DRUGBOX = "drugbox"


# --- Shared helpers ------------------------------------------------------------------


def element_text(element: Tag) -> str:
    """Visible text of an element with whitespace collapsed, the way a browser shows it."""
    return " ".join(element.get_text().split())


def list_items(element: Tag) -> list[str]:
    """Texts of every ``<li>`` inside the element."""
    return [element_text(li) for li in element.find_all("li")]


def extract_from_text(text: str, pattern: re.Pattern[str]) -> list[str]:
    """All non-overlapping matches of ``pattern`` in ``text``."""
    return pattern.findall(text)


def extract_pattern(element: Tag, pattern: re.Pattern[str]) -> list[str]:
    """Match ``pattern`` against each list item of the element, or its whole text if it has no list."""
    if element.find("li") is None:
        return extract_from_text(element_text(element), pattern)

    matches: list[str] = []
    for text in list_items(element):
        matches.extend(extract_from_text(text, pattern))
    return matches


def list_or_text(element: Tag, label: str | None = None) -> list[str]:
    """List item texts of the element, or its single text when there is no list.

    When falling back to the single text, a leading ``label`` followed by a word
    break is removed so the row header is not mistaken for a value.
    """
    if element.find("li") is not None:
        return list_items(element)

    text = element_text(element)
    if label:
        match = re.match(rf"{re.escape(label)}\b:?\s*", text)
        if match:
            text = text[match.end() :]
    return [text] if text else []


def trim_to_colon(values: list[str]) -> list[str]:
    """Drop qualifiers such as ``Isomeric:`` that precede a value."""
    trimmed = []
    for value in values:
        if ": " in value:
            value = value[value.index(":") + 1 :].strip()
        if value:
            trimmed.append(value)
    return trimmed


def _caption(table: Tag) -> str | None:
    caption = table.find("caption")
    return element_text(caption) if caption is not None else None


# --- Schema dispatch -----------------------------------------------------------------


def classify(table: Tag) -> InfoboxKind:
    """Chembox tables carry both the ``infobox`` and ``ib-chembox`` classes, anything else is a Drugbox."""
    classes = set(table.get("class") or [])
    return InfoboxKind.CHEMBOX if CHEMBOX_CLASSES <= classes else InfoboxKind.DRUGBOX


def find_infobox_table(fragment_html: str) -> Tag | None:
    """Locate the top-level infobox table in a stored HTML fragment."""
    soup = BeautifulSoup(fragment_html, "html.parser")
    return soup.select_one("table.infobox")


def extract(fragment_html: str) -> IdentifierRecord:
    """Parse one infobox HTML fragment into an IdentifierRecord.

    Fragments without an infobox table produce an empty record.
    """
    table = find_infobox_table(fragment_html)
    if table is None:
        logger.debug("Fragment has no infobox table", fragment_length=len(fragment_html))
        return IdentifierRecord()

    return extract_table(table)


def extract_table(table: Tag) -> IdentifierRecord:
    if classify(table) is InfoboxKind.CHEMBOX:
        return extract_chembox(table)
    return extract_drugbox(table)


# --- Chembox -------------------------------------------------------------------------


def extract_chembox(table: Tag) -> IdentifierRecord:
    """Extract identifiers from a Chembox, where labels and values sit in neighbouring cells."""
    title = _caption(table)
    if title is None:
        logger.warning("Chembox infobox has no caption")

    casrns: set[str] = set()
    dtxsids: set[str] = set()
    inchikeys: set[str] = set()
    smiles: set[str] = set()

    for row in table.find_all("tr"):
        for cell in row.find_all("td"):
            label = element_text(cell)
            if label == CAS_LABEL:
                value_cell = cell.find_next_sibling("td")
                if value_cell is not None:
                    casrns.update(extract_pattern(value_cell, CASRN_PATTERN))
            elif label == DASHBOARD_LABEL:
                value_cell = cell.find_next_sibling("td")
                if value_cell is not None:
                    dtxsids.update(extract_pattern(value_cell, DTXSID_PATTERN))
            elif label.startswith(INCHI_PREFIX):
                inchikeys.update(extract_pattern(cell, INCHIKEY_PATTERN))
            elif label.startswith(SMILES_PREFIX):
                smiles.update(trim_to_colon(list_or_text(cell, SMILES_PREFIX)))

    return IdentifierRecord(
        title=title, cas_numbers=casrns, dashboard_ids=dtxsids, inchi_keys=inchikeys, smiles=smiles
    )


# --- Drugbox -------------------------------------------------------------------------


def extract_drugbox(table: Tag) -> IdentifierRecord:
    """Extract identifiers from a Drugbox, where labelled rows use a header cell.

    Structure rows (SMILES, InChI) have no header, so the data cell's own text is the label.
    """
    casrns: set[str] = set()
    dtxsids: set[str] = set()
    inchikeys: set[str] = set()
    smiles: set[str] = set()

    for row in table.find_all("tr"):
        header = row.find("th")
        cell = row.find("td")
        if cell is None:
            # Section headings and image rows carry no data cell
            continue

        if header is not None:
            label = element_text(header)
            if label == CAS_LABEL:
                casrns.update(extract_pattern(cell, CASRN_PATTERN))
            elif label == DASHBOARD_LABEL:
                dtxsids.update(extract_pattern(cell, DTXSID_PATTERN))
            continue

        label = element_text(cell)
        if label.startswith(SMILES_PREFIX):
            smiles.update(trim_to_colon(list_or_text(cell, SMILES_PREFIX)))
        elif label.startswith(INCHI_PREFIX):
            inchikeys.update(extract_pattern(cell, INCHIKEY_PATTERN))

    return IdentifierRecord(
        title=_caption(table), cas_numbers=casrns, dashboard_ids=dtxsids, inchi_keys=inchikeys, smiles=smiles
    )
