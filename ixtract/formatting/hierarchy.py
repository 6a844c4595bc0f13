import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from configs.labels import get_label
from configs.parsing import (
    CONCEPT_COLUMN_KEYWORDS,
    CURRENT_COLUMN_KEYWORDS,
    DATE_PATTERN,
    INDENT_WIDTH,
    ITEM_COLUMN_KEYWORDS,
    NUMBERED_HEADING_PATTERN,
    PREVIOUS_COLUMN_KEYWORDS,
    REPORT_TYPE_KEYWORDS,
    TOTAL_KEYWORDS,
    UNIT_LABEL_PATTERNS,
)
from configs.settings import LOCALE
from ixtract.models.financial import (
    HierarchicalItem,
    HierarchyMetadata,
    HierarchyResult,
    PeriodLabels,
    TableModel,
)
from ixtract.parser.values import normalize_value

logger = logging.getLogger(__name__)

FlatItem = Dict[str, Any]

_LEADING_SPACE = ("　", " ", "\xa0", "\t")

REPORT_NAMES = {
    "balance_sheet": "貸借対照表",
    "income_statement": "損益計算書",
    "cash_flow": "キャッシュ・フロー計算書",
    "shareholder": "大株主の状況",
}


# -------------------------------------------------
# Line item rules
# -------------------------------------------------
def leading_spaces(name: str) -> int:
    return len(name) - len(name.lstrip("".join(_LEADING_SPACE)))


def is_total_line(name: str) -> bool:
    lowered = (name or "").lower()
    return any(k in lowered for k in TOTAL_KEYWORDS)


def adjust_level(level: int, name: str) -> int:
    """
    Apply the line item overrides to a base level: totals move up one step
    and a numbered heading is always a root.
    """
    if is_total_line(name):
        level = max(0, level - 1)
    if NUMBERED_HEADING_PATTERN.match((name or "").strip()):
        level = 0
    return level


def estimate_level(name: str) -> int:
    """Nesting level from leading whitespace."""
    return adjust_level(leading_spaces(name or "") // INDENT_WIDTH, name)


def compute_change(
    previous: Optional[float],
    current: Optional[float],
) -> Tuple[Optional[float], Optional[float]]:
    if previous is None or current is None:
        return None, None
    change = current - previous
    if previous == 0:
        return change, None
    return change, change / abs(previous) * 100


# -------------------------------------------------
# Tree construction
# -------------------------------------------------
def build_hierarchy(flat_items: Sequence[FlatItem]) -> List[HierarchicalItem]:
    """
    Parent/child tree from ordered flat items.

    Each item needs a `name`; `level` is inferred from the name when absent.
    Values may be raw strings and are normalized here. The returned levels
    are tree depths.
    """
    roots: List[HierarchicalItem] = []
    nodes: List[HierarchicalItem] = []
    # (index into nodes, input level) of the open ancestors
    stack: List[Tuple[int, int]] = []

    for item in flat_items:
        raw_name = str(item.get("name") or "")
        name = raw_name.strip()
        if not name:
            continue

        level = item.get("level")
        level = estimate_level(raw_name) if level is None else int(level)

        while stack and stack[-1][1] >= level:
            stack.pop()

        previous = normalize_value(item.get("previous"))
        current = normalize_value(item.get("current"))
        change, change_rate = compute_change(previous, current)
        total = is_total_line(name)

        parent = nodes[stack[-1][0]] if stack else None
        node = HierarchicalItem(
            name=name,
            path=(parent.path if parent else []) + [name],
            level=len(stack),
            previous=previous,
            current=current,
            change=change,
            change_rate=change_rate,
            is_total=total,
            is_calculated=total,
            context_ref=item.get("context_ref"),
            unit_ref=item.get("unit_ref"),
            concept=item.get("concept"),
        )

        if parent is None:
            roots.append(node)
        else:
            parent.children.append(node)

        nodes.append(node)
        stack.append((len(nodes) - 1, level))

    return roots


def flatten(items: Sequence[HierarchicalItem]) -> List[HierarchicalItem]:
    out: List[HierarchicalItem] = []
    pending = list(reversed(items))
    while pending:
        node = pending.pop()
        out.append(node)
        pending.extend(reversed(node.children))
    return out


# -------------------------------------------------
# Column / metadata detection
# -------------------------------------------------
def _matches(header: str, keywords: Sequence[str]) -> bool:
    lowered = (header or "").lower()
    return any(k.lower() in lowered for k in keywords)


def detect_columns(headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> Dict[str, Optional[int]]:
    """
    Column indexes for item, previous, current and concept.

    Header keywords first; then positions (item, previous, current) for
    three or more columns; then the first numeric columns.
    """
    columns: Dict[str, Optional[int]] = {
        "item": None, "previous": None, "current": None, "concept": None,
    }

    for i, header in enumerate(headers):
        if columns["item"] is None and _matches(header, ITEM_COLUMN_KEYWORDS):
            columns["item"] = i
        elif columns["previous"] is None and _matches(header, PREVIOUS_COLUMN_KEYWORDS):
            columns["previous"] = i
        elif columns["current"] is None and _matches(header, CURRENT_COLUMN_KEYWORDS):
            columns["current"] = i
        elif columns["concept"] is None and _matches(header, CONCEPT_COLUMN_KEYWORDS):
            columns["concept"] = i

    if columns["item"] is None and headers:
        columns["item"] = 0

    if columns["previous"] is None and columns["current"] is None:
        if len(headers) >= 3:
            columns["previous"], columns["current"] = 1, 2
        else:
            numeric = [
                i for i in range(len(headers))
                if i != columns["item"]
                and any(i < len(r) and normalize_value(r[i]) is not None for r in rows)
            ]
            if len(numeric) >= 2:
                columns["previous"], columns["current"] = numeric[0], numeric[1]
            elif numeric:
                columns["current"] = numeric[0]

    return columns


def detect_unit_label(texts: Sequence[str], locale: Optional[str] = None) -> str:
    for text in texts:
        if not isinstance(text, str):
            continue
        for pattern, label in UNIT_LABEL_PATTERNS:
            if pattern.search(text):
                return label
    return get_label("unit", locale or LOCALE)


def detect_period_labels(headers: Sequence[str], locale: Optional[str] = None) -> PeriodLabels:
    locale = locale or LOCALE
    periods = PeriodLabels(
        previous=get_label("previous", locale),
        current=get_label("current", locale),
    )

    for header in headers:
        for target, keywords in (
            ("previous", PREVIOUS_COLUMN_KEYWORDS),
            ("current", CURRENT_COLUMN_KEYWORDS),
        ):
            if not _matches(header, keywords):
                continue
            m = DATE_PATTERN.search(header)
            if m:
                setattr(periods, target, m.group(0))
            break

    return periods


def identify_report_type(texts: Sequence[str], locale: Optional[str] = None) -> str:
    """Statement name with the most keyword hits, or the generic label."""
    blob = " ".join(t for t in texts if isinstance(t, str)).lower()
    best, best_hits = None, 0
    for report, keywords in REPORT_TYPE_KEYWORDS.items():
        hits = sum(blob.count(k.lower()) for k in keywords)
        if hits > best_hits:
            best, best_hits = report, hits
    return best or get_label("report", locale or LOCALE)


def _cell(row: Sequence[Any], index: Optional[int]):
    if index is None or index >= len(row):
        return None
    return row[index]


# -------------------------------------------------
# Flat tabular input -> hierarchy result
# -------------------------------------------------
def convert_rows(rows: Sequence[Dict[str, Any]], locale: Optional[str] = None) -> HierarchyResult:
    """
    Hierarchy result from row dicts keyed by column header.
    """
    locale = locale or LOCALE

    try:
        if not rows:
            return HierarchyResult(
                success=False,
                metadata=HierarchyMetadata(
                    report_type=get_label("report", locale),
                    unit_label=get_label("unit", locale),
                    periods=detect_period_labels([], locale),
                ),
                errors=["no data"],
            )

        headers = [str(h) for h in rows[0].keys()]
        values = [[row.get(h) for h in rows[0].keys()] for row in rows]
        columns = detect_columns(headers, values)

        flat = []
        for row in values:
            name = _cell(row, columns["item"])
            if name is None or not str(name).strip():
                continue
            flat.append({
                "name": str(name),
                "previous": _cell(row, columns["previous"]),
                "current": _cell(row, columns["current"]),
                "concept": _cell(row, columns["concept"]) or None,
            })

        texts = headers + [str(f["name"]) for f in flat]
        cell_texts = [v for row in values for v in row if isinstance(v, str)]

        result = HierarchyResult(
            data=build_hierarchy(flat),
            metadata=HierarchyMetadata(
                report_type=identify_report_type(texts, locale),
                unit_label=detect_unit_label(headers + cell_texts, locale),
                periods=detect_period_labels(headers + cell_texts, locale),
            ),
        )

    except Exception as e:
        logger.exception("hierarchy_failed | %s", {"event": "hierarchy_failed", "error": str(e)})
        return HierarchyResult(success=False, errors=[str(e) or e.__class__.__name__])

    logger.debug(
        "hierarchy_built | %s",
        {
            "event": "hierarchy_built",
            "rows": len(rows),
            "roots": len(result.data),
            "columns": columns,
        },
    )
    return result


def table_to_hierarchy(table: TableModel, locale: Optional[str] = None) -> HierarchyResult:
    """
    Hierarchy result from a mapped table, keeping cell indentation and tags.
    """
    locale = locale or LOCALE

    try:
        headers = table.header_labels()
        columns = detect_columns(headers, table.as_text_rows())

        flat = []
        for row in table.rows:
            item = _cell(row, columns["item"])
            if item is None or not item.value:
                continue

            previous = _cell(row, columns["previous"])
            current = _cell(row, columns["current"])
            concept_cell = _cell(row, columns["concept"])
            fact = next(
                (c.tag for c in (current, previous, item) if c is not None and c.tag is not None),
                None,
            )

            flat.append({
                "name": item.value,
                "level": (
                    adjust_level(item.indent, item.value) if item.indent else estimate_level(item.value)
                ),
                "previous": previous.value if previous is not None else None,
                "current": current.value if current is not None else None,
                "concept": (concept_cell.value if concept_cell is not None and concept_cell.value else None)
                or (fact.concept if fact else None),
                "context_ref": fact.context_ref if fact else None,
                "unit_ref": fact.unit_ref if fact else None,
            })

        names = [f["name"] for f in flat]
        report_type = REPORT_NAMES.get(table.table_type) or identify_report_type(
            [table.title] + headers + names, locale
        )

        return HierarchyResult(
            data=build_hierarchy(flat),
            metadata=HierarchyMetadata(
                report_type=report_type,
                unit_label=detect_unit_label([table.title] + headers, locale),
                periods=detect_period_labels(headers, locale),
            ),
        )

    except Exception as e:
        logger.exception("hierarchy_failed | %s", {"event": "hierarchy_failed", "error": str(e)})
        return HierarchyResult(success=False, errors=[str(e) or e.__class__.__name__])
