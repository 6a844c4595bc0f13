"""
Tests for the parsed-document view and its two backends.
"""

from bs4 import BeautifulSoup

from ixtract.parser.document import (
    LxmlDocument,
    TagSoupDocument,
    get_attr,
    indent_level,
    load_document,
    local_name,
)
from tests.fixtures import INLINE_FILING

NESTED_TABLES = """
<table id="outer">
  <tr><td>a</td><td><table id="inner"><tr><td>x</td></tr><tr><td>y</td></tr></table></td></tr>
  <tr><td>b</td><td>c</td></tr>
</table>
"""


def _cell(markup: str):
    return BeautifulSoup(f"<table><tr>{markup}</tr></table>", "html.parser").find("td")


def test_local_name_and_case_insensitive_attributes():
    soup = BeautifulSoup('<ix:nonFraction contextRef="C1">1</ix:nonFraction>', "html.parser")
    el = soup.find(True)
    assert local_name(el) == "nonfraction"

    el.attrs = {"contextRef": "C1"}
    assert get_attr(el, "contextref") == "C1"
    assert get_attr(el, "CONTEXTREF") == "C1"
    assert get_attr(el, "unitref") is None


def test_backends_agree_on_structure(backend):
    doc = load_document(INLINE_FILING, backend=backend)
    assert doc.backend == backend

    tables = doc.tables()
    assert len(tables) == 1
    assert len(doc.rows(tables[0])) == 5
    assert len(doc.find_all("context")) == 4
    assert len(doc.find_all("ix:nonfraction")) == 6


def test_rows_skip_nested_tables(backend):
    doc = load_document(NESTED_TABLES, backend=backend)
    outer = [t for t in doc.tables() if doc.attr(t, "id") == "outer"][0]
    inner = [t for t in doc.tables() if doc.attr(t, "id") == "inner"][0]

    assert len(doc.rows(outer)) == 2
    assert len(doc.rows(inner)) == 2


def test_heading_before(backend):
    doc = load_document(
        "<h2>損益計算書</h2><table><tr><td>x</td></tr></table>"
        "<h3>Other</h3><div><table><tr><td>y</td></tr></table></div>"
        "<h3>Far</h3><p>gap</p><table><tr><td>z</td></tr></table>",
        backend=backend,
    )
    first, wrapped, distant = doc.tables()

    assert doc.text(doc.heading_before(first)) == "損益計算書"
    assert doc.text(doc.heading_before(wrapped)) == "Other"
    assert doc.heading_before(distant) is None
    assert doc.text(doc.heading_before(distant, immediate=False)) == "Far"


def test_load_document_accepts_soup_and_documents():
    soup = BeautifulSoup("<p>x</p>", "html.parser")
    doc = load_document(soup)
    assert isinstance(doc, TagSoupDocument)
    assert load_document(doc) is doc


def test_load_document_unknown_backend_falls_back():
    doc = load_document("<p>x</p>", backend="no-such-parser")
    assert isinstance(doc, (LxmlDocument, TagSoupDocument))
    assert doc.text(doc.find_all("p")[0]) == "x"


def test_indent_level_from_style_and_spaces():
    assert indent_level(_cell('<td style="padding-left: 20px">x</td>')) == 2
    assert indent_level(_cell('<td><span style="margin-left:1em">x</span></td>')) == 1
    assert indent_level(_cell("<td>\xa0\xa0\xa0\xa0x</td>")) == 2
    assert indent_level(_cell("<td>　　x</td>")) == 1
    assert indent_level(_cell("<td>\n   x</td>")) == 0
