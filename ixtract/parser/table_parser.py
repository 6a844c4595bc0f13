import logging
from typing import Dict, List, Optional, Tuple

from bs4 import Tag

from configs.labels import get_label
from configs.parsing import FACT_TAGS, HEADER_SCAN_ROWS
from configs.settings import LOCALE
from ixtract.models.financial import Cell, Context, TableModel, TableStatistics, Unit
from ixtract.parser.document import (
    ParsedDocument,
    indent_level,
    load_document,
    local_name,
    qualified_name,
)
from ixtract.parser.table_classifier import infer_table_type, infer_table_type_from_text
from ixtract.parser.tags import extract_tag, is_tag_bearing

logger = logging.getLogger(__name__)


def _span(value: Optional[str]) -> int:
    try:
        return max(1, int(value or 1))
    except (TypeError, ValueError):
        return 1


# -------------------------------------------------
# Row expansion
# -------------------------------------------------
def expand_rows(
    doc: ParsedDocument,
    rows: List[Tag],
    contexts: Dict[str, Context],
    units: Dict[str, Unit],
    tagged: bool = True,
) -> List[List[Cell]]:
    """
    Logical cells per row. A colspan/rowspan cell keeps its text and tag in
    the first slot; the other slots it covers are empty placeholders.
    """
    expanded: List[List[Cell]] = []
    # col_index -> rows still covered by a rowspan above
    span_map: Dict[int, int] = {}

    for row in rows:
        out: List[Cell] = []
        col = 0

        def fill_from_span():
            nonlocal col
            while col in span_map:
                out.append(Cell())
                if span_map[col] <= 1:
                    del span_map[col]
                else:
                    span_map[col] -= 1
                col += 1

        for cell_el in doc.cells(row):
            fill_from_span()

            colspan = _span(doc.attr(cell_el, "colspan"))
            rowspan = _span(doc.attr(cell_el, "rowspan"))
            tag = extract_tag(doc, cell_el, contexts, units) if tagged else None

            out.append(Cell(value=doc.text(cell_el), tag=tag, indent=indent_level(cell_el)))
            out.extend(Cell() for _ in range(colspan - 1))

            if rowspan > 1:
                for offset in range(colspan):
                    span_map[col + offset] = rowspan - 1
            col += colspan

        fill_from_span()
        expanded.append(out)

    return expanded


def merge_header_rows(header_rows: List[List[Cell]]) -> List[Cell]:
    """
    Merge stacked header rows column by column; later rows only fill
    slots that are still empty.
    """
    width = max((len(r) for r in header_rows), default=0)
    merged = [Cell() for _ in range(width)]

    for row in header_rows:
        for i, cell in enumerate(row):
            slot = merged[i]
            if not slot.value and cell.value:
                slot.value = cell.value
            if slot.tag is None and cell.tag is not None:
                slot.tag = cell.tag
            if not slot.indent:
                slot.indent = cell.indent

    return merged


def apply_default_labels(headers: List[Cell], locale: str) -> None:
    for cell in headers:
        if cell.value or cell.tag is None or cell.tag.context is None:
            continue
        if cell.tag.context.is_current_period:
            cell.value = get_label("current", locale)
        elif cell.tag.context.is_previous_period:
            cell.value = get_label("previous", locale)


def synthetic_header(locale: str) -> List[Cell]:
    return [Cell(value=get_label(k, locale)) for k in ("item", "previous", "current")]


def pad_rows(headers: List[Cell], rows: List[List[Cell]]) -> int:
    width = max([len(headers)] + [len(r) for r in rows])
    for row in [headers] + rows:
        row.extend(Cell() for _ in range(width - len(row)))
    return width


def table_statistics(headers: List[Cell], rows: List[List[Cell]], width: int) -> TableStatistics:
    concepts: List[str] = []
    tag_count = 0

    for cell in headers + [c for row in rows for c in row]:
        if cell.tag is None:
            continue
        tag_count += 1
        if cell.tag.concept and cell.tag.concept not in concepts:
            concepts.append(cell.tag.concept)

    return TableStatistics(
        row_count=len(rows),
        column_count=width,
        empty_cells=sum(1 for row in rows for c in row if not c.value),
        total_cells=len(rows) * width,
        tag_count=tag_count,
        concepts=concepts,
    )


def find_header_rows(doc: ParsedDocument, rows: List[Tag]) -> List[int]:
    positions = [
        i for i, row in enumerate(rows[:HEADER_SCAN_ROWS])
        if any(local_name(c) == "th" for c in doc.cells(row))
    ]
    if not positions and rows:
        positions = [0]
    return positions


def table_title(doc: ParsedDocument, table: Tag) -> str:
    heading = doc.heading_before(table, immediate=False)
    if heading is not None:
        return doc.text(heading)
    captions = doc.find_all("caption", root=table)
    return doc.text(captions[0]) if captions else ""


# -------------------------------------------------
# Table models
# -------------------------------------------------
def _build_model(
    doc: ParsedDocument,
    table: Tag,
    contexts: Dict[str, Context],
    units: Dict[str, Unit],
    tagged: bool,
    index: int,
    locale: str,
) -> Tuple[TableModel, str]:
    rows = doc.rows(table)
    expanded = expand_rows(doc, rows, contexts, units, tagged=tagged)

    header_positions = find_header_rows(doc, rows)
    headers = merge_header_rows([expanded[i] for i in header_positions])
    data_rows = [r for i, r in enumerate(expanded) if i not in header_positions]

    apply_default_labels(headers, locale)

    if not any(c.value or c.tag for c in headers):
        headers = synthetic_header(locale)

    width = pad_rows(headers, data_rows)
    text = doc.text(table)

    model = TableModel(
        id=f"table-{index}",
        headers=headers,
        rows=data_rows,
        title=table_title(doc, table),
        source=doc.snapshot(table),
        statistics=table_statistics(headers, data_rows, width),
        fallback=not tagged,
    )
    return model, text


def has_tags(doc: ParsedDocument, table: Tag) -> bool:
    return any(is_tag_bearing(doc, el) for el in doc.iter_elements(table))


def map_table(
    document,
    table: Tag,
    contexts: Dict[str, Context],
    units: Dict[str, Unit],
    index: int = 0,
    score: int = 0,
    locale: Optional[str] = None,
) -> TableModel:
    """
    Table model with every cell annotated with its resolved tag metadata.

    A table without any tagged element is handed to map_table_fallback.
    """
    doc = load_document(document)
    locale = locale or LOCALE

    if not has_tags(doc, table):
        return map_table_fallback(doc, table, index=index, score=score, locale=locale)

    model, text = _build_model(doc, table, contexts, units, True, index, locale)
    model.table_type = infer_table_type(model.title, text, model.statistics.concepts)
    model.score = score

    logger.debug(
        "table_mapped | %s",
        {
            "event": "table_mapped",
            "table_id": model.id,
            "table_type": model.table_type,
            "rows": model.statistics.row_count,
            "columns": model.statistics.column_count,
            "tags": model.statistics.tag_count,
        },
    )
    return model


def map_table_fallback(
    document,
    table: Tag,
    index: int = 0,
    score: int = 0,
    locale: Optional[str] = None,
) -> TableModel:
    """Text-only table model; type comes from table text keywords."""
    doc = load_document(document)
    locale = locale or LOCALE

    model, text = _build_model(doc, table, {}, {}, False, index, locale)
    model.table_type = infer_table_type_from_text(text)
    model.score = score

    logger.debug(
        "table_mapped_fallback | %s",
        {
            "event": "table_mapped_fallback",
            "table_id": model.id,
            "table_type": model.table_type,
            "rows": model.statistics.row_count,
        },
    )
    return model


def build_virtual_table(
    document,
    elements: List[Tag],
    contexts: Dict[str, Context],
    units: Dict[str, Unit],
    index: int = 0,
    locale: Optional[str] = None,
) -> Optional[TableModel]:
    """
    Three-column table assembled from tagged numeric facts, for filings
    that carry tags but no tables.
    """
    doc = load_document(document)
    locale = locale or LOCALE

    # concept -> [item, previous, current]
    by_concept: Dict[str, List[Cell]] = {}

    for el in elements:
        if qualified_name(el) not in FACT_TAGS:
            continue
        tag = extract_tag(doc, el, contexts, units)
        if tag is None or not tag.concept:
            continue

        row = by_concept.setdefault(
            tag.concept,
            [Cell(value=tag.concept.split(":")[-1]), Cell(), Cell()],
        )
        fiscal_year = tag.context.fiscal_year if tag.context else "unknown"
        slot = {"previous": 1, "current": 2}.get(fiscal_year)
        if slot is None or row[slot].value:
            continue
        row[slot] = Cell(value=doc.text(el), tag=tag)

    rows = [r for r in by_concept.values() if r[1].value or r[2].value]
    if not rows:
        return None

    headers = synthetic_header(locale)
    stats = table_statistics(headers, rows, 3)

    return TableModel(
        id=f"table-{index}",
        headers=headers,
        rows=rows,
        table_type=infer_table_type("", "", stats.concepts),
        title="",
        statistics=stats,
    )
