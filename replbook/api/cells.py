"""
API endpoints for cell execution.

Cells are executed through the kernel attached in ``services.shared``; each
response carries both the raw records and the output items the kernel
rendered for every cell.
"""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from ..models.execution import ExecutionRecord, OutputItem
from ..models.notebook import Cell
from ..models.wire import NotebookCellData, NotebookCellKind
from ..services.shared import get_kernel

logger = logging.getLogger(__name__)

router = APIRouter()


class CellsExecuteRequest(BaseModel):
    """Request model for executing cells in order."""
    cells: List[NotebookCellData] = Field(default_factory=list)


class RenderedCell(BaseModel):
    """What the host would display for one executed cell."""
    cell_index: int
    success: Optional[bool] = None
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    outputs: List[OutputItem] = Field(default_factory=list)


class KernelInfo(BaseModel):
    id: str
    label: str
    supported_languages: List[str]


class CellsExecuteResponse(BaseModel):
    """One record and one rendered cell per executed code cell, in request order."""
    kernel: KernelInfo
    records: List[ExecutionRecord] = Field(default_factory=list)
    rendered: List[RenderedCell] = Field(default_factory=list)


class ResponseCellExecution:
    """Execution handle that keeps what the kernel renders for the response."""

    def __init__(self, rendered: RenderedCell):
        self.rendered = rendered

    def start(self, started_at: datetime) -> None:
        self.rendered.started_at = started_at

    async def replace_output(self, items: List[OutputItem]) -> None:
        self.rendered.outputs = list(items)

    def end(self, success: bool, ended_at: datetime) -> None:
        self.rendered.success = success
        self.rendered.ended_at = ended_at


class ResponseController:
    """Hands out one response-backed execution handle per cell, in order."""

    def __init__(self):
        self.rendered: List[RenderedCell] = []

    def create_cell_execution(self, cell: Cell) -> ResponseCellExecution:
        rendered = RenderedCell(cell_index=len(self.rendered))
        self.rendered.append(rendered)
        return ResponseCellExecution(rendered)


@router.post("/execute", response_model=CellsExecuteResponse)
async def execute_cells(request: CellsExecuteRequest):
    """
    Execute the code cells of the request, one after another.

    Markup cells and code cells in a language the kernel does not support are
    skipped. A failing cell is reported in its record and does not stop the
    cells after it.
    """
    kernel = get_kernel()
    if kernel is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="No evaluator attached"
        )

    cells = [
        cell.to_cell() for cell in request.cells
        if cell.kind == NotebookCellKind.CODE and cell.language_id in kernel.supported_languages
    ]
    logger.info(f"⚡ Executing {len(cells)} cells")

    controller = ResponseController()
    records = await kernel.execute_all(cells, controller)
    return CellsExecuteResponse(
        kernel=KernelInfo(id=kernel.id, label=kernel.label, supported_languages=kernel.supported_languages),
        records=records,
        rendered=controller.rendered,
    )
