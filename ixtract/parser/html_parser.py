import logging
from time import perf_counter
from typing import Optional

from configs.settings import BUILD_VIRTUAL_TABLE, LOCALE
from ixtract.models.financial import Diagnostics, ExtractionResult
from ixtract.parser.contexts import resolve_contexts
from ixtract.parser.document import load_document
from ixtract.parser.table_classifier import classify_tables, detect_document_type
from ixtract.parser.table_parser import build_virtual_table, map_table, map_table_fallback
from ixtract.parser.tags import build_tag_index, scan_tagged_elements
from ixtract.parser.units import resolve_units

logger = logging.getLogger(__name__)


def extract_financial_data(
    source,
    backend: Optional[str] = None,
    reference_year: Optional[int] = None,
    locale: Optional[str] = None,
    fiscal_year_policy: Optional[str] = None,
) -> ExtractionResult:
    """
    Contexts, units and classified financial tables for one filing.

    Never raises: a failure anywhere yields an empty result with the
    message recorded in diagnostics.errors.
    """
    t0 = perf_counter()
    locale = locale or LOCALE

    try:
        doc = load_document(source, backend=backend)
        diagnostics = Diagnostics(document_type=detect_document_type(doc))

        # 1️⃣ Dictionaries
        contexts = resolve_contexts(
            doc, reference_year=reference_year, policy=fiscal_year_policy
        )
        units = resolve_units(doc, locale=locale)
        diagnostics.context_count = len(contexts)
        diagnostics.unit_count = len(units)

        # 2️⃣ Tag index
        elements = scan_tagged_elements(doc)
        index = build_tag_index(doc, elements, contexts, units)
        diagnostics.element_count = len(elements)
        if not elements:
            diagnostics.warnings.append("no tagged elements found")

        # 3️⃣ Candidate tables
        tables = doc.tables()
        diagnostics.table_count = len(tables)
        candidates = classify_tables(doc, tables, index=index)

        mapped = [
            map_table(doc, c.table, contexts, units, index=i, score=c.score, locale=locale)
            for i, c in enumerate(candidates)
        ]

        # 4️⃣ Degraded paths
        if not tables and elements and BUILD_VIRTUAL_TABLE:
            virtual = build_virtual_table(doc, elements, contexts, units, locale=locale)
            if virtual is not None:
                mapped.append(virtual)
                diagnostics.warnings.append("no tables found, built table from tagged facts")

        if not candidates and tables:
            diagnostics.used_fallback = True
            diagnostics.warnings.append("no financial table qualified, using raw tables")
            mapped = [
                map_table_fallback(doc, table, index=i, locale=locale)
                for i, table in enumerate(tables)
            ]

        diagnostics.mapped_tables = len(mapped)

    except Exception as e:
        logger.exception(
            "extraction_failed | %s",
            {"event": "extraction_failed", "error": str(e)},
        )
        return ExtractionResult(
            diagnostics=Diagnostics(errors=[str(e) or e.__class__.__name__]),
        )

    logger.info(
        "extraction_done | %s",
        {
            "event": "extraction_done",
            "document_type": diagnostics.document_type,
            "contexts": diagnostics.context_count,
            "units": diagnostics.unit_count,
            "elements": diagnostics.element_count,
            "tables": diagnostics.table_count,
            "mapped_tables": diagnostics.mapped_tables,
            "fallback": diagnostics.used_fallback,
            "elapsed": round(perf_counter() - t0, 3),
        },
    )

    return ExtractionResult(
        contexts=contexts,
        units=units,
        tables=mapped,
        diagnostics=diagnostics,
    )
