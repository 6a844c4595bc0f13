import csv
import json
from pathlib import Path
from typing import List, Sequence

from pydantic import BaseModel

from configs.labels import HIERARCHY_CSV_HEADERS
from ixtract.formatting.hierarchy import flatten
from ixtract.models.financial import HierarchyResult, TableModel


def write_csv_file(path: Path, rows: List[List[str]]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    # utf-8-sig so spreadsheet tools detect the encoding of Japanese labels
    with path.open("w", newline="", encoding="utf-8-sig") as f:
        csv.writer(f).writerows(rows)
    return path


def export_json(payload: BaseModel, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(payload.model_dump(mode="json"), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    return path


def table_rows(table: TableModel) -> List[List[str]]:
    return [table.header_labels()] + table.as_text_rows()


def export_tables_csv(tables: Sequence[TableModel], directory: Path) -> List[Path]:
    """One CSV per table, named after the table id and type."""
    return [
        write_csv_file(directory / f"{table.id}_{table.table_type}.csv", table_rows(table))
        for table in tables
    ]


def _number(value) -> str:
    if value is None:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}"


def export_hierarchy_csv(result: HierarchyResult, path: Path) -> Path:
    unit = result.metadata.unit_label
    rows = [list(HIERARCHY_CSV_HEADERS)]

    for item in flatten(result.data):
        rows.append([
            "　" * item.level + item.name,
            str(item.level),
            _number(item.previous),
            _number(item.current),
            _number(item.change),
            f"{item.change_rate:.1f}%" if item.change_rate is not None else "",
            unit,
            item.concept or "",
        ])

    return write_csv_file(path, rows)
