import json
from datetime import datetime

import pytest

from replbook.models.execution import ExecutionRecord, ExecutionState, ExecutionSuccess, OutputItem
from replbook.models.notebook import Cell
from replbook.services.evaluator import EvaluationResponse
from replbook.services.execution_service import ExecutionPipeline
from replbook.services.notebook_kernel import CellExecutionTracker, NotebookKernel, render_output


class RecordingExecution:
    def __init__(self, cell, log):
        self.cell = cell
        self.log = log
        self.outputs = None
        self.success = None

    def start(self, started_at):
        self.log.append(("start", self.cell.content))

    async def replace_output(self, items):
        self.outputs = items
        self.log.append(("output", self.cell.content))

    def end(self, success, ended_at):
        self.success = success
        self.log.append(("end", self.cell.content))


class RecordingController:
    def __init__(self):
        self.log = []
        self.executions = []

    def create_cell_execution(self, cell):
        execution = RecordingExecution(cell, self.log)
        self.executions.append(execution)
        return execution


class ScriptedEvaluator:
    async def evaluate(self, context, code):
        if code == "(boom)":
            raise ArithmeticError("Divide by zero")
        return EvaluationResponse(result=code.strip("()"))


@pytest.mark.asyncio
async def test_each_cell_is_rendered_before_the_next_starts() -> None:
    kernel = NotebookKernel(ExecutionPipeline(ScriptedEvaluator()))
    controller = RecordingController()

    await kernel.execute_all([Cell.executable("(a)"), Cell.executable("(b)")], controller)

    assert controller.log == [
        ("start", "(a)"), ("output", "(a)"), ("end", "(a)"),
        ("start", "(b)"), ("output", "(b)"), ("end", "(b)"),
    ]


@pytest.mark.asyncio
async def test_failed_cell_gets_single_error_item() -> None:
    kernel = NotebookKernel(ExecutionPipeline(ScriptedEvaluator()))
    controller = RecordingController()

    records = await kernel.execute_all(
        [Cell.executable("(boom)"), Cell.executable("(ok)")], controller
    )

    failed, ok = controller.executions
    assert failed.success is False
    assert len(failed.outputs) == 1
    assert failed.outputs[0].mime == "application/vnd.code.notebook.error"
    assert json.loads(failed.outputs[0].payload) == {"name": "ArithmeticError", "message": "Divide by zero"}

    assert ok.success is True
    assert ok.outputs[0] == OutputItem(mime="text/plain", payload="ok")
    assert [record.succeeded for record in records] == [False, True]


def test_kernel_identity() -> None:
    kernel = NotebookKernel(ExecutionPipeline(ScriptedEvaluator()))

    assert kernel.id == "replbook-kernel"
    assert kernel.notebook_type == "replbook-notebook"
    assert kernel.label == "Clojure Notebook"
    assert kernel.supported_languages == ["clojure"]


def test_render_output_passes_success_outputs_through() -> None:
    now = datetime.now()
    outputs = [OutputItem(mime="text/plain", payload="1")]
    record = ExecutionRecord(cell_index=0, started_at=now, ended_at=now, outcome=ExecutionSuccess(outputs=outputs))

    assert render_output(record) == outputs


@pytest.mark.asyncio
async def test_tracker_rejects_out_of_order_transitions() -> None:
    now = datetime.now()
    record = ExecutionRecord(cell_index=0, started_at=now, ended_at=now, outcome=ExecutionSuccess())
    tracker = CellExecutionTracker(RecordingExecution(Cell.executable("(a)"), []))

    with pytest.raises(RuntimeError):
        await tracker.complete(record)

    tracker.start(now)
    assert tracker.state == ExecutionState.RUNNING
    with pytest.raises(RuntimeError):
        tracker.start(now)

    await tracker.complete(record)
    assert tracker.state == ExecutionState.COMPLETED
