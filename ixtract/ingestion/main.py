import argparse
from pathlib import Path
from statistics import mean
from time import perf_counter
from typing import List, Optional

from pydantic import BaseModel, Field
from tqdm.auto import tqdm

from configs.paths import FILINGS_DIR, LOG_DIR, OUTPUT_DIR, ensure_dirs
from configs.settings import PARSER_BACKEND
from ixtract.exporters.data_exporter import (
    export_hierarchy_csv,
    export_json,
    export_tables_csv,
)
from ixtract.formatting.hierarchy import table_to_hierarchy
from ixtract.models.financial import CommentSection, ExtractionResult, HierarchyResult
from ixtract.parser.html_parser import extract_financial_data
from ixtract.parser.text_parser import extract_comments
from ixtract.utils.logger import setup_logger

FILING_SUFFIXES = {".htm", ".html", ".xhtml", ".xbrl", ".xml"}


class FilingReport(BaseModel):
    source: str
    extraction: ExtractionResult
    hierarchies: List[HierarchyResult] = Field(default_factory=list)
    comments: List[CommentSection] = Field(default_factory=list)


# -------------------------------------------------
# Helpers
# -------------------------------------------------
def find_filings(path: Path) -> List[Path]:
    if path.is_file():
        return [path]
    return sorted(p for p in path.rglob("*") if p.suffix.lower() in FILING_SUFFIXES)


def decode_markup(raw: bytes) -> str:
    for encoding in ("utf-8", "cp932", "euc-jp"):
        try:
            return raw.decode(encoding)
        except UnicodeDecodeError:
            continue
    return raw.decode("utf-8", errors="replace")


def process_filing(
    path: Path,
    backend: Optional[str] = None,
    reference_year: Optional[int] = None,
) -> FilingReport:
    markup = decode_markup(path.read_bytes())

    extraction = extract_financial_data(markup, backend=backend, reference_year=reference_year)

    return FilingReport(
        source=str(path),
        extraction=extraction,
        hierarchies=[table_to_hierarchy(t) for t in extraction.tables],
        comments=extract_comments(markup),
    )


def write_report(report: FilingReport, out_dir: Path, stem: str, csv: bool = False) -> Path:
    path = export_json(report, out_dir / f"{stem}.json")

    if csv:
        export_tables_csv(report.extraction.tables, out_dir / stem)
        for table, hierarchy in zip(report.extraction.tables, report.hierarchies):
            export_hierarchy_csv(hierarchy, out_dir / stem / f"{table.id}_hierarchy.csv")

    return path


# -------------------------------------------------
# Main pipeline
# -------------------------------------------------
def main(
    input_path: Path,
    out_dir: Path = OUTPUT_DIR,
    backend: Optional[str] = None,
    reference_year: Optional[int] = None,
    csv: bool = False,
    debug: bool = False,
) -> List[Path]:

    # ---- Setup logger ----
    logger = setup_logger(
        log_dir=LOG_DIR,
        debug=debug,
    )

    filings = find_filings(input_path)
    if not filings:
        logger.warning(
            "no_filings | %s",
            {"event": "no_filings", "input": str(input_path)},
        )
        return []

    written: List[Path] = []
    table_counts: List[int] = []
    failed = 0

    t0 = perf_counter()

    # ---- Process filings ----
    for path in tqdm(filings, desc="Extracting filings"):

        logger.info(
            "processing_filing | %s",
            {
                "event": "processing_filing",
                "file": path.name,
                "backend": backend or PARSER_BACKEND,
            },
        )

        report = process_filing(path, backend=backend, reference_year=reference_year)
        diagnostics = report.extraction.diagnostics

        if diagnostics.errors:
            failed += 1
            logger.warning(
                "filing_failed | %s",
                {"event": "filing_failed", "file": path.name, "errors": diagnostics.errors},
            )

        for table in report.extraction.tables:
            logger.debug(
                "table_extracted | %s",
                {
                    "event": "table_extracted",
                    "file": path.name,
                    "table_id": table.id,
                    "table_type": table.table_type,
                    "num_rows": table.statistics.row_count,
                    "num_columns": table.statistics.column_count,
                    "headers": table.header_labels()[:5],  # preview only
                },
            )

        written.append(write_report(report, out_dir, path.stem, csv=csv))
        table_counts.append(len(report.extraction.tables))

    elapsed = perf_counter() - t0

    print(
        f"Processed {len(filings)} filings | "
        f"{sum(table_counts)} tables | "
        f"{failed} failed | "
        f"{elapsed:.2f}s | "
        f"Avg tables {round(mean(table_counts), 1)}"
    )

    return written


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Extract financial statement tables from (inline) XBRL filings.")
    ap.add_argument("input", type=Path, nargs="?", default=FILINGS_DIR, help="Filing file or directory of filings.")
    ap.add_argument("--out", type=Path, default=OUTPUT_DIR, help="Output directory.")
    ap.add_argument("--backend", choices=["lxml", "html.parser"], default=None, help="HTML parser backend.")
    ap.add_argument("--reference-year", type=int, default=None, help="Year treated as 'now' for fiscal periods.")
    ap.add_argument("--csv", action="store_true", help="Also write tables and hierarchies as CSV.")
    ap.add_argument("--debug", action="store_true")
    return ap.parse_args(argv)


# -------------------------------------------------
# Entry point
# -------------------------------------------------
if __name__ == "__main__":
    ensure_dirs()
    args = parse_args()
    main(
        input_path=args.input,
        out_dir=args.out,
        backend=args.backend,
        reference_year=args.reference_year,
        csv=args.csv,
        debug=args.debug,
    )
