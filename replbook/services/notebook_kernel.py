"""
Notebook kernel: renders pipeline results into the host's output surface.

The host creates one execution handle per cell. The kernel starts it when the
pipeline starts the cell, replaces its output with the rendered record and
ends it with the success flag and end time.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Protocol

from ..config import DEFAULT_CODE_LANGUAGE
from ..models.execution import ERROR_MIME, ExecutionRecord, ExecutionState, ExecutionSuccess, OutputItem
from ..models.notebook import Cell
from .execution_service import ExecutionPipeline

logger = logging.getLogger(__name__)


class CellExecution(Protocol):
    """Host handle for one cell execution."""

    def start(self, started_at: datetime) -> None:
        ...

    async def replace_output(self, items: List[OutputItem]) -> None:
        ...

    def end(self, success: bool, ended_at: datetime) -> None:
        ...


class ExecutionController(Protocol):
    """Host object that hands out execution handles."""

    def create_cell_execution(self, cell: Cell) -> CellExecution:
        ...


def render_output(record: ExecutionRecord) -> List[OutputItem]:
    """Output items for a record: the rendered results, or a single error item."""
    if isinstance(record.outcome, ExecutionSuccess):
        return list(record.outcome.outputs)
    error = record.outcome.error
    return [OutputItem(mime=ERROR_MIME, payload=json.dumps({"name": error.name, "message": error.message}))]


class CellExecutionTracker:
    """
    Guards the Pending -> Running -> Completed lifecycle of one host execution.

    A handle that is started twice, or ended before being started, would leave
    the host's cell status inconsistent, so those transitions raise.
    """

    def __init__(self, execution: CellExecution):
        self._execution = execution
        self.state = ExecutionState.PENDING

    def start(self, started_at: datetime) -> None:
        self._transition(ExecutionState.PENDING, ExecutionState.RUNNING)
        self._execution.start(started_at)

    async def complete(self, record: ExecutionRecord) -> None:
        self._transition(ExecutionState.RUNNING, ExecutionState.COMPLETED)
        await self._execution.replace_output(render_output(record))
        self._execution.end(record.succeeded, record.ended_at)

    def _transition(self, expected: ExecutionState, target: ExecutionState) -> None:
        if self.state != expected:
            raise RuntimeError(f"cannot move execution from {self.state.value} to {target.value}")
        self.state = target


class NotebookKernel:
    """Executes notebook cells on behalf of the host."""

    id: str = "replbook-kernel"
    notebook_type: str = "replbook-notebook"

    def __init__(self, pipeline: ExecutionPipeline, code_language: str = DEFAULT_CODE_LANGUAGE,
                 label: Optional[str] = None):
        self.pipeline = pipeline
        self.supported_languages = [code_language]
        self.label = label or f"{code_language.capitalize()} Notebook"

    async def execute_all(self, cells: Iterable[Cell], controller: ExecutionController) -> List[ExecutionRecord]:
        """Execute cells in order, rendering each one before the next starts."""
        trackers: Dict[int, CellExecutionTracker] = {}

        def cell_started(index: int, cell: Cell, started_at: datetime) -> None:
            tracker = CellExecutionTracker(controller.create_cell_execution(cell))
            tracker.start(started_at)
            trackers[index] = tracker

        records = []
        async for record in self.pipeline.run(cells, on_cell_started=cell_started):
            await trackers.pop(record.cell_index).complete(record)
            records.append(record)

        failed = sum(1 for record in records if not record.succeeded)
        logger.info(f"📓 Executed {len(records)} cells ({failed} failed)")
        return records
