"""
Tests for JSON / CSV export.
"""

import csv
import json

from configs.labels import HIERARCHY_CSV_HEADERS
from ixtract.exporters.data_exporter import export_hierarchy_csv, export_json, export_tables_csv
from ixtract.formatting.hierarchy import table_to_hierarchy
from ixtract.parser.html_parser import extract_financial_data
from tests.fixtures import INLINE_FILING, REFERENCE_YEAR


def _read_csv(path):
    with path.open(encoding="utf-8-sig", newline="") as f:
        return list(csv.reader(f))


def test_export_json(tmp_path):
    result = extract_financial_data(INLINE_FILING, reference_year=REFERENCE_YEAR)
    path = export_json(result, tmp_path / "out" / "filing.json")

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert set(payload) == {"contexts", "units", "tables", "diagnostics"}
    assert payload["contexts"]["CurrentYearInstant"]["is_current_period"] is True
    assert payload["tables"][0]["rows"][1][1]["is_tagged"] is True
    # Japanese labels are written as-is
    assert "連結貸借対照表" in path.read_text(encoding="utf-8")


def test_export_tables_csv(tmp_path):
    result = extract_financial_data(INLINE_FILING, reference_year=REFERENCE_YEAR)
    paths = export_tables_csv(result.tables, tmp_path)

    assert [p.name for p in paths] == ["table-0_balance_sheet.csv"]
    rows = _read_csv(paths[0])
    assert rows[0] == ["科目", "前連結会計年度", "当連結会計年度"]
    assert rows[2] == ["現金及び預金", "1,000", "1,200"]


def test_export_hierarchy_csv(tmp_path):
    result = extract_financial_data(INLINE_FILING, reference_year=REFERENCE_YEAR)
    hierarchy = table_to_hierarchy(result.tables[0], locale="ja")

    rows = _read_csv(export_hierarchy_csv(hierarchy, tmp_path / "bs.csv"))

    assert rows[0] == HIERARCHY_CSV_HEADERS
    assert len(rows) == 5
    assert rows[2] == ["　現金及び預金", "1", "1000", "1200", "200", "20.0%", "円", "jppfs_cor:CashAndDeposits"]
    assert rows[4][0] == "資産合計"
    assert rows[4][5] == "-50.0%"
