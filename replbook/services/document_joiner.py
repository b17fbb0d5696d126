"""
Document Joiner: cells back to source text.

Inverse of the splitter. Cells are concatenated in order with nothing in
between; whatever whitespace separated two forms lives in the prose cell
between them.
"""

import logging

from ..config import DEFAULT_COMMENT_MARKER
from ..models.notebook import Cell, Document
from .comment_block import encode_comment_block

logger = logging.getLogger(__name__)


def render_cell(cell: Cell, marker: str = DEFAULT_COMMENT_MARKER) -> str:
    """Source text contributed by a single cell."""
    if cell.is_comment_derived:
        return encode_comment_block(cell.content, cell.reconstruction, marker)
    return cell.content


def join_document(document: Document, marker: str = DEFAULT_COMMENT_MARKER) -> str:
    """Reconstruct the source text of a Document."""
    text = "".join(render_cell(cell, marker) for cell in document.cells)
    logger.debug(f"Joined {len(document)} cells into {len(text)} chars")
    return text
