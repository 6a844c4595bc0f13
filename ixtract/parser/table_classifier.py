import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from bs4 import Tag

from configs.parsing import (
    ACCOUNT_CATEGORY_TERMS,
    CONCEPT_DENSITY_THRESHOLD,
    DOCUMENT_TYPE_RULES,
    FALLBACK_TYPE_RULES,
    FINANCIAL_KEYWORDS,
    MIN_FIRST_ROW_CELLS,
    MIN_TABLE_ROWS,
    TABLE_SCORE_WEIGHTS,
    TABLE_TYPE_RULES,
)
from configs.settings import SCORE_THRESHOLD
from ixtract.parser.document import ParsedDocument, load_document, qualified_name
from ixtract.parser.tags import TagIndex, contains_tagged, is_taxonomy_name

logger = logging.getLogger(__name__)


@dataclass
class ScoredTable:
    table: Tag
    score: int
    position: int
    rules: List[str] = field(default_factory=list)


def contains_keyword(text: str, keywords: Iterable[str] = FINANCIAL_KEYWORDS) -> bool:
    lowered = (text or "").lower()
    return any(k.lower() in lowered for k in keywords)


# -------------------------------------------------
# Scoring rules
# -------------------------------------------------
def _heading_keyword(doc: ParsedDocument, table: Tag, index: Optional[TagIndex]) -> bool:
    heading = doc.heading_before(table)
    return heading is not None and contains_keyword(doc.text(heading))


def _text_keyword(doc: ParsedDocument, table: Tag, index: Optional[TagIndex]) -> bool:
    return contains_keyword(doc.text(table))


def _tagged_content(doc: ParsedDocument, table: Tag, index: Optional[TagIndex]) -> bool:
    if index and contains_tagged(doc, table, index):
        return True
    for el in doc.iter_elements(table):
        if doc.attr(el, "contextref") is not None:
            return True
        if is_taxonomy_name(doc.attr(el, "name")):
            return True
    return False


def _table_shape(doc: ParsedDocument, table: Tag, index: Optional[TagIndex]) -> bool:
    rows = doc.rows(table)
    return len(rows) >= MIN_TABLE_ROWS and len(doc.cells(rows[0])) >= MIN_FIRST_ROW_CELLS


def _account_column(doc: ParsedDocument, table: Tag, index: Optional[TagIndex]) -> bool:
    for row in doc.rows(table):
        cells = doc.cells(row)
        if cells and contains_keyword(doc.text(cells[0]), ACCOUNT_CATEGORY_TERMS):
            return True
    return False


SCORING_RULES = {
    "heading_keyword": _heading_keyword,
    "text_keyword": _text_keyword,
    "tagged_content": _tagged_content,
    "table_shape": _table_shape,
    "account_column": _account_column,
}


def score_table(
    doc: ParsedDocument,
    table: Tag,
    index: Optional[TagIndex] = None,
) -> Tuple[int, List[str]]:
    """Total score and the names of the rules that fired."""
    score = 0
    fired = []
    for name, rule in SCORING_RULES.items():
        if rule(doc, table, index):
            score += TABLE_SCORE_WEIGHTS[name]
            fired.append(name)
    return score, fired


def classify_tables(
    document,
    tables: Optional[Sequence[Tag]] = None,
    index: Optional[TagIndex] = None,
    threshold: Optional[int] = None,
) -> List[ScoredTable]:
    """
    Candidate financial tables, best first.

    Ties keep document order. An empty list means no table qualified and
    the caller may process raw tables without scoring instead.
    """
    doc = load_document(document)
    tables = doc.tables() if tables is None else tables
    threshold = SCORE_THRESHOLD if threshold is None else threshold

    scored = []
    for position, table in enumerate(tables):
        score, fired = score_table(doc, table, index)
        logger.debug(
            "table_scored | %s",
            {"event": "table_scored", "position": position, "score": score, "rules": fired},
        )
        if score >= threshold:
            scored.append(ScoredTable(table=table, score=score, position=position, rules=fired))

    # sorted() is stable, so equal scores stay in document order
    return sorted(scored, key=lambda s: -s.score)


# -------------------------------------------------
# Table type inference
# -------------------------------------------------
def infer_table_type(title: str, text: str = "", concepts: Sequence[str] = ()) -> str:
    """
    Type from the heading first, then tag-concept density, then table text.
    """
    for table_type, keywords, _ in TABLE_TYPE_RULES:
        if contains_keyword(title, keywords):
            return table_type

    if concepts:
        best, best_share = "unknown", 0.0
        for table_type, _, patterns in TABLE_TYPE_RULES:
            hits = sum(1 for c in concepts if any(p.lower() in c.lower() for p in patterns))
            share = hits / len(concepts)
            if share > best_share:
                best, best_share = table_type, share
        if best_share >= CONCEPT_DENSITY_THRESHOLD:
            return best

    return infer_table_type_from_text(text)


def infer_table_type_from_text(text: str) -> str:
    lowered = (text or "").lower()
    for table_type, groups in FALLBACK_TYPE_RULES:
        for group in groups:
            if all(k.lower() in lowered for k in group):
                return table_type
    return "unknown"


# -------------------------------------------------
# Document type
# -------------------------------------------------
def detect_document_type(document) -> str:
    doc = load_document(document)

    found = set()
    for el in doc.iter_elements():
        name = qualified_name(el)
        if name.startswith("ix:"):
            found.add("ixbrl")
        elif name in ("xbrl", "xbrli:xbrl"):
            found.add("xbrl")

        concept = doc.attr(el, "name") or ""
        for doc_type, prefixes in DOCUMENT_TYPE_RULES:
            if concept.startswith(prefixes):
                found.add(doc_type)

    # Inline markup wins over the taxonomy it carries
    for doc_type in ("ixbrl", "xbrl", "edinet", "tdnet"):
        if doc_type in found:
            return doc_type
    return "unknown"
