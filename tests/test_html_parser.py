"""
End-to-end tests for the extraction pipeline.
"""

from ixtract.parser import html_parser
from ixtract.parser.html_parser import extract_financial_data
from tests.fixtures import INLINE_FILING, NON_FINANCIAL_TABLE, PLAIN_TABLE, REFERENCE_YEAR

FACTS_WITHOUT_TABLES = """
<div style="display:none">
<xbrli:context id="CurrentYearInstant">
  <xbrli:period><xbrli:instant>2024-03-31</xbrli:instant></xbrli:period>
</xbrli:context>
</div>
<p>総資産 <ix:nonFraction name="jppfs_cor:Assets" contextRef="CurrentYearInstant" unitRef="JPY">9,999</ix:nonFraction></p>
"""


def test_inline_filing(backend):
    result = extract_financial_data(INLINE_FILING, backend=backend, reference_year=REFERENCE_YEAR)

    assert result.success is True
    assert set(result.contexts) == {
        "CurrentYearInstant",
        "Prior1YearInstant",
        "CurrentYearDuration",
        "CurrentYearInstant_NonConsolidatedMember",
    }
    assert set(result.units) == {"JPY", "JPYPerShares"}
    assert len(result.tables) == 1

    table = result.tables[0]
    assert table.table_type == "balance_sheet"
    assert table.score == 13
    assert table.fallback is False

    diagnostics = result.diagnostics
    assert diagnostics.document_type == "ixbrl"
    assert diagnostics.table_count == 1
    assert diagnostics.mapped_tables == 1
    assert diagnostics.used_fallback is False
    assert diagnostics.context_count == 4
    assert diagnostics.unit_count == 2
    assert diagnostics.element_count >= 6


def test_untagged_table_goes_through_fallback_mapping(backend):
    result = extract_financial_data(PLAIN_TABLE, backend=backend)
    table = result.tables[0]

    assert result.diagnostics.used_fallback is False
    assert "no tagged elements found" in result.diagnostics.warnings
    assert table.fallback is True
    assert table.table_type == "balance_sheet"
    assert table.statistics.tag_count == 0
    assert len(table.rows) == 2


def test_raw_tables_when_nothing_qualifies(backend):
    result = extract_financial_data(NON_FINANCIAL_TABLE, backend=backend)

    assert result.diagnostics.used_fallback is True
    assert len(result.tables) == 1
    assert result.tables[0].table_type == "unknown"
    assert result.tables[0].score == 0


def test_virtual_table_when_there_are_no_tables(backend):
    result = extract_financial_data(FACTS_WITHOUT_TABLES, backend=backend, reference_year=REFERENCE_YEAR)

    assert result.diagnostics.table_count == 0
    assert len(result.tables) == 1
    assert result.tables[0].as_text_rows() == [["Assets", "", "9,999"]]
    assert result.tables[0].table_type == "balance_sheet"


def test_empty_document(backend):
    result = extract_financial_data("", backend=backend)

    assert result.success is True
    assert result.tables == []
    assert result.contexts == {}


def test_failures_are_reported_not_raised(monkeypatch):
    def boom(*args, **kwargs):
        raise ValueError("broken context section")

    monkeypatch.setattr(html_parser, "resolve_contexts", boom)
    result = extract_financial_data(INLINE_FILING)

    assert result.success is False
    assert result.diagnostics.errors == ["broken context section"]
    assert result.tables == []
    assert result.contexts == {}
