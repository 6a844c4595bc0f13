import html
import logging
import re
from typing import List

from bs4 import NavigableString, Tag
from bs4.element import Comment

from configs.parsing import COMMENT_HEADING_TAGS, COMMENT_KEYWORDS, RELATED_ITEM_TERMS
from ixtract.models.financial import CommentSection
from ixtract.parser.document import ParsedDocument, TagSoupDocument, local_name

logger = logging.getLogger(__name__)


def normalize_text(text: str) -> str:
    text = html.unescape(text)
    text = text.replace("\xa0", " ")
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def find_related_items(content: str) -> List[str]:
    return [term for term in RELATED_ITEM_TERMS if term in content]


def is_comment_heading(title: str) -> bool:
    lowered = title.lower()
    return any(k.lower() in lowered for k in COMMENT_KEYWORDS)


def section_text(doc: ParsedDocument, heading: Tag) -> str:
    """Text of the siblings after heading, up to the next h2-h4."""
    parts = []
    for node in heading.next_siblings:
        if isinstance(node, Tag):
            if local_name(node) in COMMENT_HEADING_TAGS:
                break
            text = doc.text(node)
        elif isinstance(node, NavigableString) and not isinstance(node, Comment):
            text = str(node).strip()
        else:
            continue
        if text:
            parts.append(text + "\n")
    return normalize_text("".join(parts))


def extract_comments(markup: str) -> List[CommentSection]:
    """
    Note / accounting-policy sections found under h2-h4 headings.
    """
    if not markup:
        return []

    try:
        doc = TagSoupDocument.parse(markup)
        sections = []

        for position, heading in enumerate(doc.find_all(*COMMENT_HEADING_TAGS)):
            title = doc.text(heading)
            if not is_comment_heading(title):
                continue

            content = section_text(doc, heading)
            sections.append(
                CommentSection(
                    id=f"comment-{position}",
                    title=title,
                    content=content,
                    related_items=find_related_items(content),
                )
            )

    except Exception as e:
        logger.exception("comments_failed | %s", {"event": "comments_failed", "error": str(e)})
        return []

    logger.debug(
        "comments_extracted | %s",
        {"event": "comments_extracted", "sections": len(sections)},
    )
    return sections
