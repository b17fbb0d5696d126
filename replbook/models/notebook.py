"""
Data models for the cell-structured view of a source file.

A source file is held as a Document: an ordered list of Cells, alternating
between executable top-level forms and the prose found between them.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from ..config import DEFAULT_CODE_LANGUAGE, DEFAULT_MARKUP_LANGUAGE


class CellKind(str, Enum):
    """Types of cells in a document."""
    EXECUTABLE = "executable"  # A top-level form, evaluated by the REPL
    PROSE = "prose"            # Text between forms


class ProseMetadata(BaseModel):
    """
    How a prose cell was extracted from a line-comment block.

    Holds what the joiner needs to re-encode the cell as commented source:
    the number of newlines that preceded the first comment line and the
    number of whitespace characters that followed the last one.
    """

    is_comment_derived: bool = True
    leading_blank_lines: int = Field(default=0, ge=0)
    trailing_blank_lines: int = Field(default=0, ge=0)


class Cell(BaseModel):
    """A single cell in a document."""

    kind: CellKind
    content: str = ""
    language_id: str = DEFAULT_MARKUP_LANGUAGE

    # Only set on prose cells extracted from a comment block
    reconstruction: Optional[ProseMetadata] = None

    @model_validator(mode="after")
    def _reconstruction_only_on_prose(self) -> "Cell":
        if self.kind == CellKind.EXECUTABLE and self.reconstruction is not None:
            raise ValueError("executable cells cannot carry prose reconstruction metadata")
        return self

    @property
    def is_comment_derived(self) -> bool:
        return self.reconstruction is not None and self.reconstruction.is_comment_derived

    @classmethod
    def executable(cls, content: str, language_id: str = DEFAULT_CODE_LANGUAGE) -> "Cell":
        return cls(kind=CellKind.EXECUTABLE, content=content, language_id=language_id)

    @classmethod
    def prose(cls, content: str, language_id: str = DEFAULT_MARKUP_LANGUAGE,
              reconstruction: Optional[ProseMetadata] = None) -> "Cell":
        return cls(kind=CellKind.PROSE, content=content, language_id=language_id,
                   reconstruction=reconstruction)


class Document(BaseModel):
    """An ordered sequence of cells, in source order."""

    cells: List[Cell] = Field(default_factory=list)

    def executable_cells(self) -> List[Cell]:
        """Executable cells in document order."""
        return [cell for cell in self.cells if cell.kind == CellKind.EXECUTABLE]

    def __len__(self) -> int:
        return len(self.cells)
