"""Services for replbook."""

from .document_splitter import split_document
from .document_joiner import join_document
from .execution_service import ExecutionPipeline
from .notebook_kernel import NotebookKernel
from .notebook_serializer import NotebookSerializer

__all__ = [
    "split_document",
    "join_document",
    "ExecutionPipeline",
    "NotebookKernel",
    "NotebookSerializer",
]
