"""
Document Splitter: source text to cells.

The boundary locator reports where each top-level form starts and ends. The
text is cut at those offsets into an alternating sequence of regions::

    separator, form, separator, form, ..., separator

Separators may be empty. Every form becomes an executable cell; every
separator becomes a prose cell, decoded from a comment block when it looks
like one. Empty cells are dropped at the end.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Sequence, Tuple

from ..config import DEFAULT_CODE_LANGUAGE, DEFAULT_COMMENT_MARKER, DEFAULT_MARKUP_LANGUAGE
from ..models.notebook import Cell, Document
from .comment_block import decode_comment_block, is_comment_block

logger = logging.getLogger(__name__)

Span = Tuple[int, int]


class RegionKind(str, Enum):
    SEPARATOR = "separator"
    FORM = "form"


@dataclass(frozen=True)
class Region:
    """A slice of the source text between two consecutive boundary offsets."""

    kind: RegionKind
    start: int
    end: int
    text: str


def boundary_offsets(text: str, spans: Iterable[Span]) -> List[int]:
    """
    Flatten spans into cut points, framed by 0 and len(text).

    The final ``len(text)`` is appended even when the last span already ends
    there, so the trailing separator always exists (possibly empty).

    Raises:
        ValueError: if spans overlap, run backwards or leave the text.
    """
    offsets = [0]
    for start, end in spans:
        if start < offsets[-1] or end < start or end > len(text):
            raise ValueError(f"invalid form span ({start}, {end}) for text of length {len(text)}")
        offsets.extend((start, end))
    offsets.append(len(text))
    return offsets


def regions(text: str, spans: Iterable[Span]) -> List[Region]:
    """Cut the text into alternating separator and form regions."""
    offsets = boundary_offsets(text, spans)
    result = []
    for index, (start, end) in enumerate(zip(offsets[:-1], offsets[1:])):
        kind = RegionKind.SEPARATOR if index % 2 == 0 else RegionKind.FORM
        result.append(Region(kind=kind, start=start, end=end, text=text[start:end]))
    return result


def classify_region(region: Region,
                    marker: str = DEFAULT_COMMENT_MARKER,
                    code_language: str = DEFAULT_CODE_LANGUAGE,
                    markup_language: str = DEFAULT_MARKUP_LANGUAGE) -> Cell:
    """Turn one region into a cell. Pure; depends only on the region itself."""
    if region.kind == RegionKind.FORM:
        return Cell.executable(region.text, language_id=code_language)

    if is_comment_block(region.text, marker):
        content, metadata = decode_comment_block(region.text, marker)
        return Cell.prose(content, language_id=markup_language, reconstruction=metadata)

    # Empty separators come out here too, as empty prose
    return Cell.prose(region.text, language_id=markup_language)


def split_document(text: str,
                   spans: Sequence[Span],
                   marker: str = DEFAULT_COMMENT_MARKER,
                   code_language: str = DEFAULT_CODE_LANGUAGE,
                   markup_language: str = DEFAULT_MARKUP_LANGUAGE) -> Document:
    """
    Split source text into a Document.

    Args:
        text: Full source text
        spans: Ordered, non-overlapping ``(start, end)`` offsets of the
            top-level forms in ``text``
        marker: Line-comment prefix that marks prose blocks
        code_language: Language id for executable cells
        markup_language: Language id for prose cells

    Returns:
        Document with the non-empty cells in source order
    """
    cells = [
        classify_region(region, marker, code_language, markup_language)
        for region in regions(text, spans)
    ]
    document = Document(cells=[cell for cell in cells if cell.content])

    logger.debug(f"Split {len(text)} chars into {len(document)} cells "
                 f"({len(document.executable_cells())} executable)")
    return document
