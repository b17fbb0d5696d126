"""
Interfaces of the REPL collaborators used by the execution pipeline.

The pipeline never opens connections itself: the host passes in an evaluator
bound to its REPL session and, optionally, a pretty printer. Tests pass fakes.
"""

from typing import Any, Awaitable, Optional, Protocol, Union

from pydantic import BaseModel


class EvaluationResponse(BaseModel):
    """Reply of the evaluator for one piece of code."""
    result: str


class PrettyPrintResult(BaseModel):
    """Reply of the pretty printer."""
    value: str


class EvaluationError(Exception):
    """
    Raised by evaluators that fail with something other than an exception.

    REPL clients often reject with the raw response message (a dict of status
    flags, an exception class name, ...). Wrapping it keeps the original value
    available for error reporting.
    """

    def __init__(self, value: Any):
        super().__init__(value)
        self.value = value


class RemoteEvaluator(Protocol):
    """A REPL session able to evaluate code."""

    async def evaluate(self, context: Optional[Any], code: str) -> EvaluationResponse:
        ...


class PrettyPrinter(Protocol):
    """Formats a printed result for display. May be synchronous or not."""

    def pretty_print(self, text: str) -> Union[PrettyPrintResult, Awaitable[PrettyPrintResult]]:
        ...


class PassthroughPrettyPrinter:
    """Pretty printer that leaves results as the REPL printed them."""

    def pretty_print(self, text: str) -> PrettyPrintResult:
        return PrettyPrintResult(value=text)
