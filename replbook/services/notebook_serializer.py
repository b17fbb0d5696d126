"""
Notebook serializer: file bytes to notebook cells and back.

Files are plain UTF-8 source with no framing. All the work is done by the
splitter and joiner; this class only decodes, locates forms and encodes.
"""

import logging
from typing import Optional

from ..config import config
from ..models.notebook import Document
from ..models.wire import NotebookData
from .document_joiner import join_document
from .document_splitter import split_document
from .form_locator import BoundaryLocator, locate_top_level_forms

logger = logging.getLogger(__name__)


class NotebookSerializer:
    """Load/save contract between source files and the host's notebook model."""

    def __init__(self, locator: Optional[BoundaryLocator] = None, *,
                 marker: Optional[str] = None,
                 code_language: Optional[str] = None,
                 markup_language: Optional[str] = None):
        """
        Initialize the serializer.

        Conventions not given explicitly are read from the project config.

        Args:
            locator: Reports top-level form spans; defaults to the built-in
                Clojure scanner
            marker: Line-comment prefix of prose blocks
            code_language: Language id for executable cells
            markup_language: Language id for prose cells
        """
        self.locator = locator or locate_top_level_forms
        self.marker = marker or config.get_comment_marker()
        self.code_language = code_language or config.get_code_language()
        self.markup_language = markup_language or config.get_markup_language()

    def deserialize(self, data: bytes) -> Document:
        """Decode file bytes into a Document."""
        text = data.decode("utf-8", errors="replace")
        spans = self.locator(text)
        document = split_document(text, spans, self.marker, self.code_language, self.markup_language)
        logger.info(f"📖 Loaded {len(document)} cells from {len(data)} bytes")
        return document

    def serialize(self, document: Document) -> bytes:
        """Encode a Document back into file bytes."""
        data = join_document(document, self.marker).encode("utf-8")
        logger.info(f"💾 Saved {len(document)} cells as {len(data)} bytes")
        return data

    def deserialize_notebook(self, data: bytes) -> NotebookData:
        """Decode file bytes into the host's cell shape."""
        return NotebookData.from_document(self.deserialize(data))

    def serialize_notebook(self, notebook: NotebookData) -> bytes:
        """Encode the host's cells back into file bytes."""
        return self.serialize(notebook.to_document())
