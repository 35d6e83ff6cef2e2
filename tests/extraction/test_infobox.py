# ABOUTME: Tests for Chembox and Drugbox identifier extraction
# ABOUTME: Uses trimmed-down copies of real Wikipedia infobox markup, no network access

import pytest
from bs4 import BeautifulSoup

from wiki_infoboxes.core.models import IdentifierRecord
from wiki_infoboxes.extraction.infobox import (
    InfoboxKind,
    classify,
    extract,
    list_or_text,
    trim_to_colon,
)

CHEMBOX_HTML = """
<table class="infobox ib-chembox">
<caption>Formaldehyde</caption>
<tbody>
<tr><th colspan="2">Identifiers</th></tr>
<tr>
  <td><div><a href="/wiki/CAS_Registry_Number">CAS Number</a></div></td>
  <td><ul><li><span><a href="#">50-00-0</a></span> <span>Y</span></li></ul></td>
</tr>
<tr>
  <td><a href="/wiki/CompTox">CompTox Dashboard</a> <span class="nowrap">(<a href="/wiki/EPA">EPA</a>)</span></td>
  <td><ul><li><a href="#">DTXSID7020637</a></li></ul></td>
</tr>
<tr>
  <td colspan="2"><div>InChI</div>
    <ul><li>InChI=1S/CH2O/c1-2/h1H2 <span>Y</span><br/>Key: WSFSSNUMVMOOMR-UHFFFAOYSA-N <span>Y</span></li></ul>
  </td>
</tr>
<tr>
  <td colspan="2"><div>SMILES</div><ul><li>C=O</li></ul></td>
</tr>
</tbody>
</table>
"""

DRUGBOX_HTML = """
<table class="infobox">
<tbody>
<tr><th colspan="2">Clinical data</th></tr>
<tr><th scope="row">Trade names</th><td>Bayer Aspirin</td></tr>
<tr><th colspan="2">Identifiers</th></tr>
<tr>
  <th scope="row"><a href="/wiki/CAS_Registry_Number">CAS Number</a></th>
  <td><ul><li><a href="#">50-78-2</a> <span>Y</span></li></ul></td>
</tr>
<tr>
  <th scope="row"><a href="/wiki/CompTox">CompTox Dashboard</a> <span>(<a href="/wiki/EPA">EPA</a>)</span></th>
  <td><ul><li><a href="#">DTXSID5020108</a></li></ul></td>
</tr>
<tr><th colspan="2">Chemical and physical data</th></tr>
<tr>
  <td colspan="2"><div>SMILES</div><ul><li>O=C(C)Oc1ccccc1C(=O)O</li></ul></td>
</tr>
<tr>
  <td colspan="2"><div>InChI</div>
    <ul>
      <li>InChI=1S/C9H8O4/c1-6(10)13-8-5-3-2-4-7(8)9(11)12/h2-5H,1H3,(H,11,12) <span>Y</span></li>
      <li>Key:BSYNRYMUTXBXSQ-UHFFFAOYSA-N <span>Y</span></li>
    </ul>
  </td>
</tr>
</tbody>
</table>
"""


def _table(html: str):
    return BeautifulSoup(html, "html.parser").find("table")


class TestClassify:
    """Test schema dispatch on table classes"""

    @pytest.mark.parametrize(
        "classes,expected",
        [
            ("infobox ib-chembox", InfoboxKind.CHEMBOX),
            ("ib-chembox infobox bordered", InfoboxKind.CHEMBOX),
            ("infobox", InfoboxKind.DRUGBOX),
            ("infobox ib-drugbox", InfoboxKind.DRUGBOX),
            ("ib-chembox", InfoboxKind.DRUGBOX),
        ],
    )
    def test_classify(self, classes, expected):
        assert classify(_table(f'<table class="{classes}"></table>')) is expected


class TestHelpers:
    @pytest.mark.parametrize(
        "values,expected",
        [
            (["Isomeric: C1=CC=CC=C1"], ["C1=CC=CC=C1"]),
            (["CCO"], ["CCO"]),
            (["Key:ABC"], ["Key:ABC"]),
            (["Isomeric: "], []),
            ([""], []),
        ],
    )
    def test_trim_to_colon(self, values, expected):
        assert trim_to_colon(values) == expected

    def test_list_or_text_prefers_list_items(self):
        cell = _table("<table><tr><td><div>SMILES</div><ul><li>CCO</li><li>OCC</li></ul></td></tr></table>").td
        assert list_or_text(cell, "SMILES") == ["CCO", "OCC"]

    @pytest.mark.parametrize(
        "cell_html,expected",
        [
            ("<div>SMILES</div> CCO", ["CCO"]),
            ("SMILES: CCO", ["CCO"]),
            ("SMILES Isomeric: C1=CC=CC=C1", ["Isomeric: C1=CC=CC=C1"]),
            ("SMILESCCO", ["SMILESCCO"]),
        ],
    )
    def test_list_or_text_strips_label_without_list(self, cell_html, expected):
        cell = _table(f"<table><tr><td>{cell_html}</td></tr></table>").td
        assert list_or_text(cell, "SMILES") == expected

    def test_list_or_text_bare_label_yields_nothing(self):
        cell = _table("<table><tr><td>SMILES</td></tr></table>").td
        assert list_or_text(cell, "SMILES") == []


class TestChembox:
    """Test identifier extraction from Chembox tables"""

    def test_extracts_all_identifiers(self):
        record = extract(CHEMBOX_HTML)

        assert record.title == "Formaldehyde"
        assert record.cas_numbers == {"50-00-0"}
        assert record.dashboard_ids == {"DTXSID7020637"}
        assert record.inchi_keys == {"WSFSSNUMVMOOMR-UHFFFAOYSA-N"}
        assert record.smiles == {"C=O"}

    def test_multiple_cas_numbers_in_list(self):
        html = """
        <table class="infobox ib-chembox"><caption>Mixture</caption>
        <tr><td>CAS Number</td><td><ul><li>50-00-0</li><li>7732-18-5</li></ul></td></tr>
        </table>
        """
        assert extract(html).cas_numbers == {"50-00-0", "7732-18-5"}

    def test_cas_without_list_uses_cell_text(self):
        html = """
        <table class="infobox ib-chembox"><caption>Water</caption>
        <tr><td>CAS Number</td><td>7732-18-5 Y</td></tr>
        </table>
        """
        assert extract(html).cas_numbers == {"7732-18-5"}

    def test_label_without_value_cell_is_skipped(self):
        html = """
        <table class="infobox ib-chembox"><caption>Lonely</caption>
        <tr><td>CAS Number</td></tr>
        </table>
        """
        record = extract(html)
        assert record.title == "Lonely"
        assert not record.has_identifiers()

    def test_qualified_smiles(self):
        html = """
        <table class="infobox ib-chembox"><caption>Benzene</caption>
        <tr><td colspan="2"><div>SMILES</div><ul><li>Isomeric: C1=CC=CC=C1</li></ul></td></tr>
        </table>
        """
        assert extract(html).smiles == {"C1=CC=CC=C1"}

    def test_missing_caption_is_not_fatal(self):
        html = '<table class="infobox ib-chembox"><tr><td>CAS Number</td><td>64-17-5</td></tr></table>'
        record = extract(html)
        assert record.title is None
        assert record.cas_numbers == {"64-17-5"}

    def test_ignores_malformed_values(self):
        html = """
        <table class="infobox ib-chembox"><caption>Bad</caption>
        <tr><td>CAS Number</td><td><ul><li>not a number</li><li>1-2-3</li></ul></td></tr>
        </table>
        """
        assert extract(html).cas_numbers == frozenset()


class TestDrugbox:
    """Test identifier extraction from Drugbox tables"""

    def test_extracts_all_identifiers(self):
        record = extract(DRUGBOX_HTML)

        assert record.title is None
        assert record.cas_numbers == {"50-78-2"}
        assert record.dashboard_ids == {"DTXSID5020108"}
        assert record.inchi_keys == {"BSYNRYMUTXBXSQ-UHFFFAOYSA-N"}
        assert record.smiles == {"O=C(C)Oc1ccccc1C(=O)O"}

    def test_qualified_smiles_in_list(self):
        html = """
        <table class="infobox">
        <tr><td colspan="2"><div>SMILES</div><ul><li>Isomeric: C1=CC=CC=C1</li></ul></td></tr>
        </table>
        """
        assert extract(html).smiles == {"C1=CC=CC=C1"}

    def test_qualified_smiles_without_list(self):
        html = """
        <table class="infobox">
        <tr><td colspan="2"><div>SMILES</div>
        Isomeric: C1=CC=CC=C1</td></tr>
        </table>
        """
        assert extract(html).smiles == {"C1=CC=CC=C1"}

    def test_inchikey_cell_without_list(self):
        html = """
        <table class="infobox">
        <tr><td colspan="2">InChI Key: BSYNRYMUTXBXSQ-UHFFFAOYSA-N</td></tr>
        </table>
        """
        assert extract(html).inchi_keys == {"BSYNRYMUTXBXSQ-UHFFFAOYSA-N"}

    def test_uses_caption_when_present(self):
        html = '<table class="infobox"><caption>Aspirin</caption><tr><th>CAS Number</th><td>50-78-2</td></tr></table>'
        record = extract(html)
        assert record.title == "Aspirin"
        assert record.cas_numbers == {"50-78-2"}

    def test_no_caption_no_data_rows(self):
        html = '<table class="infobox"><tr><th colspan="2">Identifiers</th></tr></table>'
        assert extract(html) == IdentifierRecord()


class TestExtract:
    def test_fragment_without_table_is_empty(self):
        record = extract("<div>No infobox here</div>")
        assert record.is_empty()

    def test_empty_fragment_is_empty(self):
        assert extract("").is_empty()


class TestInchiKeyCell:
    @pytest.mark.parametrize("classes", ["infobox ib-chembox", "infobox"])
    def test_labelled_inchikey_text(self, classes):
        html = f"""
        <table class="{classes}"><caption>Placeholder</caption>
        <tr><td colspan="2">InChIKey: AAAAAAAAAAAAAA-BBBBBBBBBB-C</td></tr>
        </table>
        """
        assert extract(html).inchi_keys == {"AAAAAAAAAAAAAA-BBBBBBBBBB-C"}
