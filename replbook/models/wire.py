"""
Host-facing shape of notebook cells.

The editor host exchanges cells as ``{kind, value, languageId, metadata}``
with camelCase keys and numeric kinds. These models translate between that
shape and the internal Cell/Document models.
"""

from enum import IntEnum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .notebook import Cell, CellKind, Document, ProseMetadata


class NotebookCellKind(IntEnum):
    """Cell kinds as numbered by the host."""
    MARKUP = 1
    CODE = 2


class NotebookCellMetadata(BaseModel):
    """Reconstruction hints stored on comment-derived markup cells."""

    model_config = ConfigDict(populate_by_name=True)

    as_markdown: bool = Field(default=False, alias="asMarkdown")
    starting_whitespace: int = Field(default=0, ge=0, alias="startingWhitespace")
    ending_whitespace: int = Field(default=0, ge=0, alias="endingWhitespace")


class NotebookCellData(BaseModel):
    """A cell as the host sees it."""

    model_config = ConfigDict(populate_by_name=True)

    kind: NotebookCellKind
    value: str = ""
    language_id: str = Field(alias="languageId")
    metadata: Optional[NotebookCellMetadata] = None

    @classmethod
    def from_cell(cls, cell: Cell) -> "NotebookCellData":
        if cell.kind == CellKind.EXECUTABLE:
            return cls(kind=NotebookCellKind.CODE, value=cell.content, language_id=cell.language_id)

        metadata = None
        if cell.is_comment_derived:
            metadata = NotebookCellMetadata(
                as_markdown=True,
                starting_whitespace=cell.reconstruction.leading_blank_lines,
                ending_whitespace=cell.reconstruction.trailing_blank_lines,
            )
        return cls(kind=NotebookCellKind.MARKUP, value=cell.content,
                   language_id=cell.language_id, metadata=metadata)

    def to_cell(self) -> Cell:
        if self.kind == NotebookCellKind.CODE:
            return Cell.executable(self.value, language_id=self.language_id)

        # Markup cells created in the host carry no hints and are written verbatim
        reconstruction = None
        if self.metadata is not None and self.metadata.as_markdown:
            reconstruction = ProseMetadata(
                is_comment_derived=True,
                leading_blank_lines=self.metadata.starting_whitespace,
                trailing_blank_lines=self.metadata.ending_whitespace,
            )
        return Cell.prose(self.value, language_id=self.language_id, reconstruction=reconstruction)


class NotebookData(BaseModel):
    """All cells of a notebook as the host sees them."""

    cells: List[NotebookCellData] = Field(default_factory=list)

    @classmethod
    def from_document(cls, document: Document) -> "NotebookData":
        return cls(cells=[NotebookCellData.from_cell(cell) for cell in document.cells])

    def to_document(self) -> Document:
        return Document(cells=[cell.to_cell() for cell in self.cells])
