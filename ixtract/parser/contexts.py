import logging
import re
from datetime import date
from typing import Dict, Iterable, Optional, Tuple

from bs4 import Tag

from configs.parsing import (
    CONSOLIDATION_RULES,
    FISCAL_YEAR_OFFSETS,
    PERIOD_REFERENCE_RULES,
)
from configs.settings import FISCAL_YEAR_POLICY
from ixtract.models.financial import Context
from ixtract.parser.document import ParsedDocument, load_document, local_name

logger = logging.getLogger(__name__)

_YEAR = re.compile(r"^\s*(\d{4})")


# -------------------------------------------------
# Rule helpers
# -------------------------------------------------
def match_rules(text: str, rules: Iterable[Tuple[str, Iterable[str]]]) -> Optional[str]:
    """First rule label whose vocabulary occurs in text (case-insensitive)."""
    lowered = (text or "").lower()
    for label, vocabulary in rules:
        if any(word.lower() in lowered for word in vocabulary):
            return label
    return None


def classify_consolidation(segment: Dict[str, str], context_id: str = "") -> str:
    # Member values before dimension names: an axis such as
    # ConsolidatedOrNonConsolidatedAxis names both outcomes.
    # All members are matched together so rule order decides, not member order
    for texts in (segment.values(), segment.keys()):
        found = match_rules(" ".join(texts), CONSOLIDATION_RULES)
        if found:
            return found

    return match_rules(context_id, CONSOLIDATION_RULES) or "unknown"


def period_year(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    m = _YEAR.match(value)
    return int(m.group(1)) if m else None


def classify_fiscal_year(period_end: Optional[str], reference_year: int) -> str:
    """
    Wall-clock policy: the period's year compared against reference_year.
    """
    year = period_year(period_end)
    if year is None:
        return "unknown"
    return FISCAL_YEAR_OFFSETS.get(reference_year - year, "unknown")


def classify_relative(period_end: Optional[str], latest_year: Optional[int]) -> str:
    """
    Relative policy: latest year in the filing is current, the one before previous.
    """
    year = period_year(period_end)
    if year is None or latest_year is None:
        return "unknown"
    if year == latest_year:
        return "current"
    if year == latest_year - 1:
        return "previous"
    return "unknown"


# -------------------------------------------------
# Explicit definitions
# -------------------------------------------------
def _first(doc: ParsedDocument, root: Tag, name: str) -> Optional[Tag]:
    found = doc.find_all(name, root=root)
    return found[0] if found else None


def _text_of(doc: ParsedDocument, root: Tag, name: str) -> Optional[str]:
    el = _first(doc, root, name)
    if el is None:
        return None
    return doc.text(el) or None


def _parse_segment(doc: ParsedDocument, context_el: Tag) -> Dict[str, str]:
    segment: Dict[str, str] = {}

    for container in doc.find_all("segment", "scenario", root=context_el):
        for member in doc.find_all("explicitmember", root=container):
            dimension = doc.attr(member, "dimension")
            value = doc.text(member)
            if dimension and value:
                segment[dimension] = value

        for member in doc.find_all("typedmember", root=container):
            dimension = doc.attr(member, "dimension")
            children = doc.children(member)
            if not dimension or not children:
                continue
            value = doc.text(children[0])
            if value:
                segment[f"{dimension}[{local_name(children[0])}]"] = value

    return segment


def parse_context(doc: ParsedDocument, context_el: Tag, context_id: str) -> Context:
    instant = _text_of(doc, context_el, "instant")
    start = _text_of(doc, context_el, "startdate")
    end = _text_of(doc, context_el, "enddate")

    if instant:
        period = {"period_type": "instant", "instant": instant}
    elif start and end:
        period = {"period_type": "duration", "start_date": start, "end_date": end}
    else:
        # A lone start or end date is not a usable period
        period = {"period_type": "unknown"}

    entity = None
    scheme = None
    identifier = _first(doc, context_el, "identifier")
    if identifier is not None:
        entity = doc.text(identifier) or None
        scheme = doc.attr(identifier, "scheme")

    segment = _parse_segment(doc, context_el)

    return Context(
        id=context_id,
        entity=entity,
        scheme=scheme,
        segment=segment,
        consolidation=classify_consolidation(segment, context_id),
        **period,
    )


# -------------------------------------------------
# Inline references without a definition
# -------------------------------------------------
def synthesize_context(context_ref: str) -> Context:
    return Context(
        id=context_ref,
        consolidation=match_rules(context_ref, CONSOLIDATION_RULES) or "unknown",
        fiscal_year=match_rules(context_ref, PERIOD_REFERENCE_RULES) or "unknown",
        synthesized=True,
    )


def _apply_fiscal_years(
    contexts: Dict[str, Context],
    policy: str,
    reference_year: Optional[int],
) -> None:
    if policy == "relative":
        years = [period_year(c.period_end) for c in contexts.values()]
        years = [y for y in years if y is not None]
        latest = max(years) if years else None
        for ctx in contexts.values():
            ctx.fiscal_year = classify_relative(ctx.period_end, latest)
        return

    year = reference_year if reference_year is not None else date.today().year
    for ctx in contexts.values():
        ctx.fiscal_year = classify_fiscal_year(ctx.period_end, year)


def resolve_contexts(
    document,
    reference_year: Optional[int] = None,
    policy: Optional[str] = None,
) -> Dict[str, Context]:
    """
    Build the context dictionary for one document.

    Explicit definitions are resolved first; every context reference left
    without a definition then gets a context synthesized from its own name.
    """
    doc = load_document(document)
    contexts: Dict[str, Context] = {}

    for el in doc.find_all("context"):
        context_id = doc.attr(el, "id")
        if not context_id or context_id in contexts:
            continue
        contexts[context_id] = parse_context(doc, el, context_id)

    _apply_fiscal_years(contexts, policy or FISCAL_YEAR_POLICY, reference_year)

    synthesized = 0
    for el in doc.find_with_attribute("contextref"):
        ref = doc.attr(el, "contextref")
        if not ref or ref in contexts:
            continue
        contexts[ref] = synthesize_context(ref)
        synthesized += 1

    logger.debug(
        "contexts_resolved | %s",
        {
            "event": "contexts_resolved",
            "explicit": len(contexts) - synthesized,
            "synthesized": synthesized,
        },
    )

    return contexts
