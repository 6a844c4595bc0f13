import logging
import re
from abc import ABC, abstractmethod
from typing import Iterable, Iterator, List, Optional, Union

from bs4 import BeautifulSoup, FeatureNotFound, Tag

from configs.parsing import (
    HEADING_TAGS,
    INDENT_PX_PER_LEVEL,
    INDENT_WIDTH,
    STYLE_INDENT_PATTERN,
)
from configs.settings import PARSER_BACKEND

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"[ \t\r\n\f\v\xa0]+")


# -------------------------------------------------
# Tag helpers (backend independent)
# -------------------------------------------------
def local_name(tag: Tag) -> str:
    """`ix:nonFraction` -> `nonfraction`."""
    return (tag.name or "").split(":")[-1].lower()


def qualified_name(tag: Tag) -> str:
    return (tag.name or "").lower()


def get_attr(tag: Tag, name: str) -> Optional[str]:
    """Read an attribute, ignoring the case of its name."""
    wanted = name.lower()
    for key, value in tag.attrs.items():
        if key.lower() != wanted:
            continue
        if isinstance(value, (list, tuple)):
            return " ".join(value)
        return value
    return None


def has_attr(tag: Tag, name: str) -> bool:
    return get_attr(tag, name) is not None


def clean_text(text: str) -> str:
    return _WHITESPACE.sub(" ", text or "").strip()


def to_px(value: float, unit: str) -> float:
    u = (unit or "px").lower()
    if u == "pt":
        return value * (96.0 / 72.0)
    if u in ("em", "rem"):
        return value * 16.0
    return value


def indent_level(cell: Tag) -> int:
    """
    Hierarchy level hinted by CSS indentation or leading spaces in a cell.
    """
    best = 0.0

    styled = [cell] + cell.find_all(True, attrs={"style": True})
    for node in styled:
        for _, num, unit in STYLE_INDENT_PATTERN.findall(get_attr(node, "style") or ""):
            best = max(best, to_px(float(num), unit))

    # Source formatting whitespace is not indentation, nbsp and U+3000 are
    raw = (cell.get_text("") or "").lstrip(" \t\r\n")
    spaces = len(raw) - len(raw.lstrip("\xa0　"))
    level = int(best // INDENT_PX_PER_LEVEL)

    return max(level, spaces // INDENT_WIDTH)


# -------------------------------------------------
# Parsed document capability set
# -------------------------------------------------
class ParsedDocument(ABC):
    """
    Read-only view over a parsed filing.

    Extraction code talks only to this interface, so any tree that can
    answer these queries can be fed through the pipeline.
    """

    backend: str = ""

    @property
    @abstractmethod
    def root(self) -> Tag:
        ...

    @abstractmethod
    def iter_elements(self, root: Optional[Tag] = None) -> Iterator[Tag]:
        """Every element below root, in document order."""

    def find_all(self, *names: str, root: Optional[Tag] = None) -> List[Tag]:
        """Elements whose qualified or local tag name is in names."""
        wanted = {n.lower() for n in names}
        return [
            el for el in self.iter_elements(root)
            if qualified_name(el) in wanted or local_name(el) in wanted
        ]

    def find_with_attribute(self, name: str, root: Optional[Tag] = None) -> List[Tag]:
        return [el for el in self.iter_elements(root) if has_attr(el, name)]

    def attr(self, el: Tag, name: str) -> Optional[str]:
        return get_attr(el, name)

    def text(self, el: Tag) -> str:
        return clean_text(el.get_text(""))

    def children(self, el: Tag) -> List[Tag]:
        return [c for c in el.children if isinstance(c, Tag)]

    def previous_sibling(self, el: Tag) -> Optional[Tag]:
        return el.find_previous_sibling(True)

    def next_sibling(self, el: Tag) -> Optional[Tag]:
        return el.find_next_sibling(True)

    def snapshot(self, el: Tag) -> str:
        return str(el)

    # ---- Table navigation ----
    def tables(self) -> List[Tag]:
        return self.find_all("table")

    def rows(self, table: Tag) -> List[Tag]:
        """Rows owned by table, skipping rows of nested tables."""
        return [
            tr for tr in self.find_all("tr", root=table)
            if tr.find_parent("table") is table
        ]

    def cells(self, row: Tag) -> List[Tag]:
        return [c for c in self.children(row) if local_name(c) in ("td", "th")]

    def heading_before(self, el: Tag, immediate: bool = True) -> Optional[Tag]:
        """
        Heading sibling preceding el.

        immediate=True only accepts the directly preceding element; a table
        that is the first child of a wrapper is looked up from the wrapper.
        """
        node = el
        while node is not None:
            prev = self.previous_sibling(node)
            if prev is None:
                parent = node.parent
                if immediate and parent is not None and local_name(parent) in ("div", "section"):
                    node = parent
                    continue
                return None
            if local_name(prev) in HEADING_TAGS:
                return prev
            if immediate:
                return None
            node = prev
        return None


class _SoupDocument(ParsedDocument):
    features = ""

    def __init__(self, soup: BeautifulSoup):
        self.soup = soup

    @classmethod
    def parse(cls, markup: Union[str, bytes]) -> "ParsedDocument":
        return cls(BeautifulSoup(markup, cls.features))

    @property
    def root(self) -> Tag:
        return self.soup


class LxmlDocument(_SoupDocument):
    """Full structured-tree parser backed by lxml."""

    backend = "lxml"
    features = "lxml"

    def iter_elements(self, root: Optional[Tag] = None) -> Iterator[Tag]:
        return iter((root if root is not None else self.soup).find_all(True))


class TagSoupDocument(_SoupDocument):
    """Lightweight tag-soup walker over the stdlib html.parser tree."""

    backend = "html.parser"
    features = "html.parser"

    def iter_elements(self, root: Optional[Tag] = None) -> Iterator[Tag]:
        for node in (root if root is not None else self.soup).descendants:
            if isinstance(node, Tag):
                yield node


BACKENDS = {
    LxmlDocument.backend: LxmlDocument,
    TagSoupDocument.backend: TagSoupDocument,
}


def load_document(
    source: Union[str, bytes, BeautifulSoup, ParsedDocument],
    backend: Optional[str] = None,
) -> ParsedDocument:
    """
    Wrap raw markup or an existing soup in a ParsedDocument.

    Falls back to the tag-soup walker when lxml is not installed.
    """
    if isinstance(source, ParsedDocument):
        return source

    if isinstance(source, BeautifulSoup):
        name = getattr(source.builder, "NAME", "")
        cls = TagSoupDocument if name == "html.parser" else LxmlDocument
        return cls(source)

    backend = backend or PARSER_BACKEND
    order: Iterable[str] = [backend] + [b for b in BACKENDS if b != backend]

    for name in order:
        cls = BACKENDS.get(name)
        if cls is None:
            continue
        try:
            return cls.parse(source)
        except FeatureNotFound:
            logger.warning(
                "parser_unavailable | %s",
                {"event": "parser_unavailable", "backend": name},
            )
            continue

    return TagSoupDocument.parse(source)
