import json

import pytest

from replbook.models.execution import ExecutionFailure, ExecutionSuccess, OutputItem
from replbook.models.notebook import Cell
from replbook.services.evaluator import EvaluationError, EvaluationResponse, PrettyPrintResult
from replbook.services.execution_service import (
    ExecutionPipeline,
    build_outputs,
    describe_error,
    strip_surrounding_quotes,
)


class FakeEvaluator:
    """Evaluates by lookup; raises whatever is registered for a piece of code."""

    def __init__(self, results=None, failures=None):
        self.results = results or {}
        self.failures = failures or {}
        self.calls: list[str] = []

    async def evaluate(self, context, code):
        self.calls.append(code)
        if code in self.failures:
            raise self.failures[code]
        return EvaluationResponse(result=self.results.get(code, "nil"))


class UpperCasePrinter:
    def pretty_print(self, text):
        return PrettyPrintResult(value=text.upper())


class AsyncPrinter:
    async def pretty_print(self, text):
        return {"value": f"<{text}>"}


class FailingPrinter:
    def pretty_print(self, text):
        raise RuntimeError("printer crashed")


def cells(*contents: str) -> list[Cell]:
    return [Cell.executable(content) for content in contents]


@pytest.mark.asyncio
async def test_success_outputs_for_plain_result() -> None:
    pipeline = ExecutionPipeline(FakeEvaluator(results={"(+ 1 2)": "3"}))

    record = await pipeline.execute_cell(Cell.executable("(+ 1 2)"))

    assert isinstance(record.outcome, ExecutionSuccess)
    assert record.outcome.outputs == [
        OutputItem(mime="text/plain", payload="3"),
        OutputItem(mime="text/markdown", payload="```clojure\n3\n```"),
        OutputItem(mime="x-application/edn", payload="3"),
    ]
    assert record.started_at <= record.ended_at


@pytest.mark.asyncio
async def test_html_result_gets_an_html_output() -> None:
    raw = '"<html><body>hi</body></html>"'
    pipeline = ExecutionPipeline(FakeEvaluator(results={"(page)": raw}))

    record = await pipeline.execute_cell(Cell.executable("(page)"))

    outputs = record.outcome.outputs
    assert len(outputs) == 4
    assert outputs[0].payload == raw
    assert outputs[3] == OutputItem(mime="text/html", payload="<html><body>hi</body></html>")


@pytest.mark.asyncio
async def test_markdown_output_uses_pretty_printer() -> None:
    pipeline = ExecutionPipeline(
        FakeEvaluator(results={"(keyword \"a\")": ":a"}),
        UpperCasePrinter(),
        language_id="clojure",
    )

    record = await pipeline.execute_cell(Cell.executable("(keyword \"a\")"))

    assert record.outcome.outputs[1].payload == "```clojure\n:A\n```"
    # Plain and structured outputs stay raw
    assert record.outcome.outputs[0].payload == ":a"
    assert record.outcome.outputs[2].payload == ":a"


@pytest.mark.asyncio
async def test_async_pretty_printer_and_mapping_reply() -> None:
    pipeline = ExecutionPipeline(FakeEvaluator(results={"x": "1"}), AsyncPrinter())

    record = await pipeline.execute_cell(Cell.executable("x"))

    assert record.outcome.outputs[1].payload == "```clojure\n<1>\n```"


@pytest.mark.asyncio
async def test_cells_run_in_order_one_at_a_time() -> None:
    evaluator = FakeEvaluator(results={"(a)": "1", "(b)": "2", "(c)": "3"})
    pipeline = ExecutionPipeline(evaluator)

    records = await pipeline.execute_all(cells("(a)", "(b)", "(c)"))

    assert evaluator.calls == ["(a)", "(b)", "(c)"]
    assert [record.cell_index for record in records] == [0, 1, 2]
    assert [record.outcome.outputs[0].payload for record in records] == ["1", "2", "3"]
    assert records[1].started_at >= records[0].ended_at
    assert records[2].started_at >= records[1].ended_at


@pytest.mark.asyncio
async def test_next_cell_waits_for_consumer() -> None:
    evaluator = FakeEvaluator()
    pipeline = ExecutionPipeline(evaluator)

    seen_calls = []
    async for record in pipeline.run(cells("(a)", "(b)")):
        seen_calls.append(list(evaluator.calls))

    assert seen_calls == [["(a)"], ["(a)", "(b)"]]


@pytest.mark.asyncio
async def test_failing_cell_does_not_stop_the_run() -> None:
    evaluator = FakeEvaluator(
        results={"(a)": "1", "(c)": "3"},
        failures={"(b)": ValueError("Unable to resolve symbol: b")},
    )
    pipeline = ExecutionPipeline(evaluator)

    records = await pipeline.execute_all(cells("(a)", "(b)", "(c)"))

    assert [record.succeeded for record in records] == [True, False, True]
    assert isinstance(records[1].outcome, ExecutionFailure)
    assert records[1].outcome.error.name == "ValueError"
    assert records[1].outcome.error.message == "Unable to resolve symbol: b"
    assert records[2].outcome.outputs[0].payload == "3"


@pytest.mark.asyncio
async def test_non_exception_failure_value_is_dumped_as_json() -> None:
    value = {"status": ["eval-error"], "ex": "class clojure.lang.ArityException"}
    pipeline = ExecutionPipeline(FakeEvaluator(failures={"(f)": EvaluationError(value)}))

    record = await pipeline.execute_cell(Cell.executable("(f)"))

    assert record.outcome.error.name == "error"
    assert record.outcome.error.message == json.dumps(value, indent=4)


@pytest.mark.asyncio
async def test_pretty_printer_failure_is_a_cell_failure() -> None:
    pipeline = ExecutionPipeline(FakeEvaluator(results={"(a)": "1"}), FailingPrinter())

    record = await pipeline.execute_cell(Cell.executable("(a)"))

    assert not record.succeeded
    assert record.outcome.error.name == "RuntimeError"
    assert record.outcome.error.message == "printer crashed"


@pytest.mark.asyncio
async def test_cell_started_callback_sees_each_cell_before_its_record() -> None:
    pipeline = ExecutionPipeline(FakeEvaluator())
    events = []

    async for record in pipeline.run(cells("(a)", "(b)"),
                                     on_cell_started=lambda index, cell, at: events.append(("start", index))):
        events.append(("done", record.cell_index))

    assert events == [("start", 0), ("done", 0), ("start", 1), ("done", 1)]


def test_strip_surrounding_quotes_removes_at_most_one_each_side() -> None:
    assert strip_surrounding_quotes('"abc"') == "abc"
    assert strip_surrounding_quotes('""abc""') == '"abc"'
    assert strip_surrounding_quotes('"abc') == "abc"
    assert strip_surrounding_quotes("abc") == "abc"
    assert strip_surrounding_quotes('"') == ""


def test_build_outputs_only_detects_html_prefix() -> None:
    outputs = build_outputs('"<div>no</div>"', '"<div>no</div>"')
    assert [item.mime for item in outputs] == ["text/plain", "text/markdown", "x-application/edn"]

    outputs = build_outputs("<html/>", "<html/>", structured_mime="application/edn")
    assert [item.mime for item in outputs] == ["text/plain", "text/markdown", "application/edn", "text/html"]


def test_describe_error_fallbacks() -> None:
    assert describe_error(KeyError("k")).name == "KeyError"

    empty = describe_error(RuntimeError())
    assert empty.name == "RuntimeError"
    assert empty.message == "{}"

    wrapped = describe_error(EvaluationError(TimeoutError("no reply")))
    assert (wrapped.name, wrapped.message) == ("TimeoutError", "no reply")

    text = describe_error(EvaluationError("disconnected"))
    assert (text.name, text.message) == ("error", '"disconnected"')


class NilEvaluator:
    """Replies with a non-text result for one piece of code."""

    def __init__(self, nil_code):
        self.nil_code = nil_code

    async def evaluate(self, context, code):
        if code == self.nil_code:
            return {"result": None}
        return {"result": code.strip("()")}


class LenientPrinter:
    def pretty_print(self, text):
        return {"value": str(text)}


@pytest.mark.asyncio
async def test_non_text_result_fails_only_its_own_cell() -> None:
    pipeline = ExecutionPipeline(NilEvaluator("(b)"), LenientPrinter())

    records = await pipeline.execute_all(cells("(a)", "(b)", "(c)"))

    assert len(records) == 3
    assert [record.succeeded for record in records] == [True, False, True]
    assert records[2].outcome.outputs[0].payload == "c"


def test_describe_error_with_circular_value_falls_back_to_repr() -> None:
    value = {"status": "eval-error"}
    value["self"] = value

    descriptor = describe_error(EvaluationError(value))

    assert descriptor.name == "error"
    assert descriptor.message == repr(value)
