"""
Execution Service for running executable cells through a REPL.

Cells are evaluated strictly one after another: later forms may depend on
definitions made by earlier ones in the same REPL session. Every cell gets
its own ExecutionRecord, and a failing cell never stops the cells after it.
"""

import inspect
import json
import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, AsyncIterator, Callable, Iterable, List, Optional

from ..config import DEFAULT_CODE_LANGUAGE, DEFAULT_STRUCTURED_MIME
from ..models.execution import (
    ErrorDescriptor, ExecutionFailure, ExecutionOutcome, ExecutionRecord, ExecutionSuccess, OutputItem,
    HTML_MIME, MARKDOWN_MIME, PLAIN_TEXT_MIME,
)
from ..models.notebook import Cell
from .evaluator import EvaluationError, PassthroughPrettyPrinter, PrettyPrinter, RemoteEvaluator

logger = logging.getLogger(__name__)

GENERIC_ERROR_NAME = "error"
HTML_PREFIX = "<html"

CellStartedCallback = Callable[[int, Cell, datetime], None]


def strip_surrounding_quotes(text: str) -> str:
    """Remove one leading and one trailing double quote, when present."""
    if text.startswith('"'):
        text = text[1:]
    if text.endswith('"'):
        text = text[:-1]
    return text


def build_outputs(result: str, pretty: str,
                  language_id: str = DEFAULT_CODE_LANGUAGE,
                  structured_mime: str = DEFAULT_STRUCTURED_MIME) -> List[OutputItem]:
    """
    Render a successful result in every representation the host can display.

    Printed strings that hold an HTML document are also offered as HTML.
    """
    outputs = [
        OutputItem(mime=PLAIN_TEXT_MIME, payload=result),
        OutputItem(mime=MARKDOWN_MIME, payload=f"```{language_id}\n{pretty}\n```"),
        OutputItem(mime=structured_mime, payload=result),
    ]

    unquoted = strip_surrounding_quotes(result)
    if unquoted.startswith(HTML_PREFIX):
        outputs.append(OutputItem(mime=HTML_MIME, payload=unquoted))

    return outputs


def _stable_dump(value: Any) -> str:
    try:
        return json.dumps(value, indent=4, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        # Circular structures cannot be dumped
        return repr(value)


def describe_error(err: BaseException) -> ErrorDescriptor:
    """
    Name and message of a failure.

    Exceptions report their class name and message. Values that are not
    exceptions (wrapped in EvaluationError) and exceptions without a message
    fall back to a generic name and a JSON dump.
    """
    if isinstance(err, EvaluationError):
        if isinstance(err.value, BaseException):
            return describe_error(err.value)
        return ErrorDescriptor(name=GENERIC_ERROR_NAME, message=_stable_dump(err.value))

    name = type(err).__name__ or GENERIC_ERROR_NAME
    message = str(err) or _stable_dump(getattr(err, "__dict__", {}))
    return ErrorDescriptor(name=name, message=message)


def _field(reply: Any, name: str) -> str:
    if isinstance(reply, Mapping):
        return reply[name]
    return getattr(reply, name)


class ExecutionPipeline:
    """Sequential, fault-isolated evaluation of executable cells."""

    def __init__(self, evaluator: RemoteEvaluator,
                 pretty_printer: Optional[PrettyPrinter] = None,
                 *,
                 language_id: str = DEFAULT_CODE_LANGUAGE,
                 structured_mime: str = DEFAULT_STRUCTURED_MIME):
        """
        Initialize the pipeline.

        Args:
            evaluator: REPL session shared by every cell of every run
            pretty_printer: Formatter for the markdown rendering; results are
                shown as printed when omitted
            language_id: Language tag of the markdown code fence
            structured_mime: Mime tag of the structured-data output
        """
        self._evaluator = evaluator
        self._pretty_printer = pretty_printer or PassthroughPrettyPrinter()
        self._language_id = language_id
        self._structured_mime = structured_mime

    async def run(self, cells: Iterable[Cell],
                  on_cell_started: Optional[CellStartedCallback] = None) -> AsyncIterator[ExecutionRecord]:
        """
        Execute cells in order, yielding one record per cell.

        The next cell is not started until the consumer has taken the
        previous record, so a consumer that renders each record before asking
        for the next one sees them strictly in document order.
        """
        for index, cell in enumerate(cells):
            record = await self.execute_cell(cell, index, on_cell_started)
            yield record

    async def execute_all(self, cells: Iterable[Cell]) -> List[ExecutionRecord]:
        """Execute cells in order and collect their records."""
        return [record async for record in self.run(cells)]

    async def execute_cell(self, cell: Cell, index: int = 0,
                           on_cell_started: Optional[CellStartedCallback] = None) -> ExecutionRecord:
        """Run one cell from start to completion. Never raises for evaluation problems."""
        started_at = datetime.now()
        if on_cell_started is not None:
            on_cell_started(index, cell, started_at)

        logger.debug(f"▶️ Executing cell {index}: {cell.content[:80]!r}")
        outcome = await self._evaluate(cell.content)
        ended_at = datetime.now()

        if isinstance(outcome, ExecutionFailure):
            logger.warning(f"❌ Cell {index} failed: {outcome.error.name}: {outcome.error.message}")
        else:
            logger.debug(f"✅ Cell {index} completed in {(ended_at - started_at).total_seconds():.3f}s")

        return ExecutionRecord(cell_index=index, started_at=started_at, ended_at=ended_at, outcome=outcome)

    async def _evaluate(self, code: str) -> ExecutionOutcome:
        # Evaluation and pretty-printing failures are reported the same way
        try:
            response = await self._evaluator.evaluate(None, code)
            result = _field(response, "result")

            pretty = self._pretty_printer.pretty_print(result)
            if inspect.isawaitable(pretty):
                pretty = await pretty
            pretty_value = _field(pretty, "value")

            outputs = build_outputs(result, pretty_value, self._language_id, self._structured_mime)
            return ExecutionSuccess(outputs=outputs)
        except Exception as err:
            return ExecutionFailure(error=describe_error(err))
