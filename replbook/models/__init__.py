"""Data models for replbook."""

from .notebook import Document, Cell, CellKind, ProseMetadata
from .execution import (
    ExecutionRecord, ExecutionState, ExecutionSuccess, ExecutionFailure, OutputItem, ErrorDescriptor
)
from .wire import NotebookData, NotebookCellData, NotebookCellKind, NotebookCellMetadata

__all__ = [
    "Document",
    "Cell",
    "CellKind",
    "ProseMetadata",
    "ExecutionRecord",
    "ExecutionState",
    "ExecutionSuccess",
    "ExecutionFailure",
    "OutputItem",
    "ErrorDescriptor",
    "NotebookData",
    "NotebookCellData",
    "NotebookCellKind",
    "NotebookCellMetadata",
]
