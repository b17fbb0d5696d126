"""
Shared service instances to ensure consistency across API endpoints.

The serializer is ready at import time. The kernel needs a REPL session, so
it only exists once the host has attached an evaluator.
"""

import logging
from typing import Optional

from ..config import config
from .evaluator import PrettyPrinter, RemoteEvaluator
from .execution_service import ExecutionPipeline
from .notebook_kernel import NotebookKernel
from .notebook_serializer import NotebookSerializer

logger = logging.getLogger(__name__)

notebook_serializer = NotebookSerializer()

_kernel: Optional[NotebookKernel] = None


def attach_evaluator(evaluator: RemoteEvaluator, pretty_printer: Optional[PrettyPrinter] = None) -> NotebookKernel:
    """Bind the REPL session used by every subsequent execution request."""
    global _kernel
    pipeline = ExecutionPipeline(
        evaluator,
        pretty_printer,
        language_id=config.get_code_language(),
        structured_mime=config.get_structured_mime(),
    )
    _kernel = NotebookKernel(pipeline, code_language=config.get_code_language())
    logger.info(f"🔌 Evaluator attached: {type(evaluator).__name__}")
    return _kernel


def detach_evaluator() -> None:
    global _kernel
    _kernel = None
    logger.info("🔌 Evaluator detached")


def get_kernel() -> Optional[NotebookKernel]:
    return _kernel


__all__ = ["notebook_serializer", "attach_evaluator", "detach_evaluator", "get_kernel"]
