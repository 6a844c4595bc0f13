import logging
from typing import Dict, Optional, Tuple

from bs4 import Tag

from configs.labels import get_label
from configs.parsing import CURRENCY_SYMBOLS, MEASURE_LABELS, UNIT_REFERENCE_RULES
from configs.settings import LOCALE
from ixtract.models.financial import Unit
from ixtract.parser.document import ParsedDocument, load_document

logger = logging.getLogger(__name__)


def measure_local(measure: str) -> str:
    return measure.split(":")[-1] if measure else ""


def describe_measure(measure: str, locale: Optional[str] = None) -> Tuple[str, str]:
    """(symbol, label) for one measure string such as `iso4217:JPY`."""
    if not measure:
        return "", ""

    if measure.lower().startswith("iso4217:"):
        code = measure_local(measure).upper()
        label = get_label("currency", locale or LOCALE).format(code=code)
        return CURRENCY_SYMBOLS.get(code, code), label

    local = measure_local(measure).lower()
    for key, (symbol, label) in MEASURE_LABELS.items():
        if key in local:
            return symbol, label

    return measure_local(measure), measure_local(measure)


def _measure_text(doc: ParsedDocument, root: Tag) -> str:
    measures = doc.find_all("measure", root=root)
    return doc.text(measures[0]) if measures else ""


def parse_unit(doc: ParsedDocument, unit_el: Tag, unit_id: str, locale: Optional[str] = None) -> Unit:
    divide = doc.find_all("divide", root=unit_el)

    if divide:
        numerator_el = doc.find_all("unitnumerator", root=divide[0])
        denominator_el = doc.find_all("unitdenominator", root=divide[0])
        numerator = _measure_text(doc, numerator_el[0]) if numerator_el else ""
        denominator = _measure_text(doc, denominator_el[0]) if denominator_el else ""
        rendered = f"{measure_local(numerator)}/{measure_local(denominator)}"
        return Unit(
            id=unit_id,
            measure=f"{numerator}/{denominator}",
            symbol=rendered,
            label=rendered,
            kind="fraction",
            numerator=numerator or None,
            denominator=denominator or None,
        )

    measure = _measure_text(doc, unit_el)
    symbol, label = describe_measure(measure, locale)
    return Unit(id=unit_id, measure=measure, symbol=symbol, label=label)


def infer_unit(unit_ref: str, locale: Optional[str] = None) -> Unit:
    """Minimal unit for a reference with no definition, guessed from its name."""
    lowered = unit_ref.lower()
    measure: Optional[str] = None
    for fragment, candidate in UNIT_REFERENCE_RULES:
        if fragment.lower() in lowered:
            measure = candidate
            break

    if measure is None:
        return Unit(id=unit_ref)

    symbol, label = describe_measure(measure, locale)
    return Unit(id=unit_ref, measure=measure, symbol=symbol, label=label)


def resolve_units(document, locale: Optional[str] = None) -> Dict[str, Unit]:
    doc = load_document(document)
    units: Dict[str, Unit] = {}

    for el in doc.find_all("unit"):
        unit_id = doc.attr(el, "id")
        if not unit_id or unit_id in units:
            continue
        units[unit_id] = parse_unit(doc, el, unit_id, locale)

    inferred = 0
    for el in doc.find_with_attribute("unitref"):
        ref = doc.attr(el, "unitref")
        if not ref or ref in units:
            continue
        units[ref] = infer_unit(ref, locale)
        inferred += 1

    logger.debug(
        "units_resolved | %s",
        {"event": "units_resolved", "explicit": len(units) - inferred, "inferred": inferred},
    )

    return units
