import logging
import re

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import Comment, Declaration, Doctype, ProcessingInstruction

from configs.sanitizer import (
    ALLOWED_TAGS,
    SAFE_HTML_ATTRIBUTES,
    SAFE_STYLE_PROPERTIES,
    SAFE_XBRL_ATTRIBUTES,
    TABLE_SKELETON_TAGS,
)

logger = logging.getLogger(__name__)

TAG_LIKE = re.compile(r"<[^>]*>")
MARKUP_TAG = re.compile(r"<\s*(/?)\s*([a-zA-Z][\w:.-]*)([^>]*)>")
MARKUP_DIRECTIVE = re.compile(r"<![^>]*>")
UNSAFE_STYLE_VALUE = re.compile(r"expression\s*\(|url\s*\(|javascript:", re.IGNORECASE)

_NON_TEXT = (Comment, Declaration, Doctype, ProcessingInstruction)


def strip_tags(text: str) -> str:
    return TAG_LIKE.sub("", text)


def format_text(text: str) -> str:
    if not text or not isinstance(text, str):
        return ""
    return re.sub(r"\s+", " ", text).strip()


# -------------------------------------------------
# Strip-all
# -------------------------------------------------
def sanitize_html(content) -> str:
    """
    Plain text content of content.

    Input without anything tag-like is returned unchanged.
    """
    if not content or not isinstance(content, str):
        return ""

    if not TAG_LIKE.search(content):
        return content

    try:
        text = BeautifulSoup(content, "html.parser").get_text()
    except Exception as e:
        logger.warning("sanitize_parse_failed | %s", {"event": "sanitize_parse_failed", "error": str(e)})
        text = content

    # Entities such as &lt;b&gt; decode back into tags; one pass removes them
    return strip_tags(text).strip()


# -------------------------------------------------
# Preserve table skeleton
# -------------------------------------------------
def sanitize_html_preserve_tables(content) -> str:
    """
    Keep only table structure tags, with their attributes removed.
    """
    if not content or not isinstance(content, str):
        return ""

    def rewrite(m: re.Match) -> str:
        closing, name = m.group(1), m.group(2).lower()
        if name not in TABLE_SKELETON_TAGS:
            return ""
        if closing:
            return m.group(0)
        return f"<{name}>"

    try:
        return MARKUP_TAG.sub(rewrite, MARKUP_DIRECTIVE.sub("", content))
    except Exception as e:
        logger.warning("sanitize_tables_failed | %s", {"event": "sanitize_tables_failed", "error": str(e)})
        return sanitize_html(content)


# -------------------------------------------------
# Allow-list with safe styles
# -------------------------------------------------
def filter_style(style: str) -> str:
    kept = []
    for declaration in (style or "").split(";"):
        if ":" not in declaration:
            continue
        prop, value = declaration.split(":", 1)
        prop, value = prop.strip().lower(), value.strip()
        if prop in SAFE_STYLE_PROPERTIES and value and not UNSAFE_STYLE_VALUE.search(value):
            kept.append(f"{prop}: {value}")
    return "; ".join(kept)


def _text_content(el: Tag) -> str:
    # get_text() skips <script>/<style> strings, these are kept as text
    return "".join(
        str(s) for s in el.descendants
        if isinstance(s, NavigableString) and not isinstance(s, _NON_TEXT)
    )


def _is_allowed(el: Tag) -> bool:
    return (el.name or "").lower() in ALLOWED_TAGS


def sanitize_html_enhanced(content) -> str:
    """
    Allow-listed elements only; everything else is flattened to its text.

    On any internal failure the input is returned unchanged, which callers
    must treat as unsanitized.
    """
    if not content or not isinstance(content, str):
        return ""

    try:
        soup = BeautifulSoup(content, "html.parser")

        for node in [n for n in soup.descendants if isinstance(n, _NON_TEXT)]:
            node.extract()

        for el in soup.find_all(True):
            if ":" in el.name:
                el.attrs = {k: v for k, v in el.attrs.items() if k.lower() in SAFE_XBRL_ATTRIBUTES}

        # Deepest first, so a parent only ever sees already-cleaned children
        for el in reversed(soup.find_all(True)):
            if _is_allowed(el):
                continue
            if el.find(_is_allowed) is not None:
                el.unwrap()
            else:
                el.replace_with(NavigableString(_text_content(el)))

        for el in soup.find_all(True):
            if ":" not in el.name:
                el.attrs = {k: v for k, v in el.attrs.items() if k.lower() in SAFE_HTML_ATTRIBUTES}

            style = el.attrs.get("style")
            if style is None:
                continue
            cleaned = filter_style(style)
            if cleaned:
                el["style"] = cleaned
            else:
                del el["style"]

        return str(soup)

    except Exception as e:
        logger.warning(
            "sanitize_enhanced_failed | %s",
            {"event": "sanitize_enhanced_failed", "error": str(e)},
        )
        return content
