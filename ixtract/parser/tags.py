import logging
from typing import Dict, List, Optional

from bs4 import Tag

from configs.parsing import (
    FACT_TAGS,
    TAG_ATTRIBUTES,
    TAXONOMY_NAME_PATTERN,
    XBRL_SCHEME_PATTERN,
)
from ixtract.models.financial import Context, TaggedElement, Unit
from ixtract.parser.document import ParsedDocument, load_document, qualified_name

logger = logging.getLogger(__name__)

TagIndex = Dict[int, TaggedElement]

# Fallback attributes used by hand-authored markup
_DATA_HINTS = {
    "contextref": ("data-contextref", "data-context"),
    "unitref": ("data-unitref", "data-unit"),
    "name": ("data-name", "data-xbrl"),
}

_FIELD_NAMES = {
    "name": "concept",
    "contextref": "context_ref",
    "unitref": "unit_ref",
    "decimals": "decimals",
    "scale": "scale",
    "format": "format",
    "sign": "sign",
}


def is_taxonomy_name(name: Optional[str]) -> bool:
    if not name:
        return False
    return ":" in name or bool(TAXONOMY_NAME_PATTERN.match(name))


def is_tag_bearing(doc: ParsedDocument, el: Tag) -> bool:
    if qualified_name(el) in FACT_TAGS:
        return True
    if doc.attr(el, "contextref") is not None or doc.attr(el, "unitref") is not None:
        return True
    if is_taxonomy_name(doc.attr(el, "name")):
        return True
    scheme = doc.attr(el, "scheme")
    return bool(scheme and XBRL_SCHEME_PATTERN.search(scheme))


def scan_tagged_elements(document) -> List[Tag]:
    """
    Every element carrying structured-data attributes, in document order.
    """
    doc = load_document(document)
    seen = set()
    found: List[Tag] = []

    for el in doc.iter_elements():
        if id(el) in seen or not is_tag_bearing(doc, el):
            continue
        seen.add(id(el))
        found.append(el)

    return found


def _read_attributes(doc: ParsedDocument, el: Tag) -> Dict[str, Optional[str]]:
    values = {attr: doc.attr(el, attr) for attr in TAG_ATTRIBUTES}

    for attr, hints in _DATA_HINTS.items():
        if values[attr]:
            continue
        for hint in hints:
            if doc.attr(el, hint):
                values[attr] = doc.attr(el, hint)
                break

    # A plain `name` (anchors, form fields) is not a concept
    if values["name"] and not (
        is_taxonomy_name(values["name"])
        or qualified_name(el) in FACT_TAGS
        or values["contextref"]
    ):
        values["name"] = None

    return values


def extract_tag(
    doc: ParsedDocument,
    el: Tag,
    contexts: Dict[str, Context],
    units: Dict[str, Unit],
) -> Optional[TaggedElement]:
    """
    Tag metadata for an element, read from itself and then from its first
    tag-bearing descendant. Returns None when neither carries any.
    """
    values = _read_attributes(doc, el)

    if not values["name"] or not values["contextref"]:
        for child in doc.iter_elements(el):
            if not is_tag_bearing(doc, child):
                continue
            child_values = _read_attributes(doc, child)
            if not (child_values["name"] or child_values["contextref"]):
                continue
            for key, value in child_values.items():
                values[key] = values[key] or value
            break

    if not (values["name"] or values["contextref"] or values["unitref"]):
        return None

    tag = TaggedElement(**{_FIELD_NAMES[k]: v for k, v in values.items()})
    if tag.context_ref:
        tag.context = contexts.get(tag.context_ref)
    if tag.unit_ref:
        tag.unit = units.get(tag.unit_ref)
    return tag


def build_tag_index(
    document,
    elements: List[Tag],
    contexts: Dict[str, Context],
    units: Dict[str, Unit],
) -> TagIndex:
    doc = load_document(document)
    index: TagIndex = {}
    for el in elements:
        tag = extract_tag(doc, el, contexts, units)
        if tag is not None:
            index[id(el)] = tag
    return index


def contains_tagged(doc: ParsedDocument, root: Tag, index: TagIndex) -> bool:
    return any(id(el) in index for el in doc.iter_elements(root))
