"""
Data models for cell execution.

An ExecutionRecord is created when a cell starts running and lives only until
the host has rendered it. Its outcome is either a list of rendered outputs or
a single error descriptor, never both.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, Field

# Output mime tags
PLAIN_TEXT_MIME = "text/plain"
MARKDOWN_MIME = "text/markdown"
HTML_MIME = "text/html"
ERROR_MIME = "application/vnd.code.notebook.error"


class ExecutionState(str, Enum):
    """Lifecycle of a single cell execution."""
    PENDING = "pending"      # Not yet started
    RUNNING = "running"      # Waiting on the evaluator
    COMPLETED = "completed"  # Outcome recorded


class OutputItem(BaseModel):
    """One rendering of an execution result."""
    mime: str
    payload: str


class ErrorDescriptor(BaseModel):
    """Name and message of a failed execution."""
    name: str
    message: str


class ExecutionSuccess(BaseModel):
    status: Literal["success"] = "success"
    outputs: List[OutputItem] = Field(default_factory=list)


class ExecutionFailure(BaseModel):
    status: Literal["failure"] = "failure"
    error: ErrorDescriptor


ExecutionOutcome = Annotated[Union[ExecutionSuccess, ExecutionFailure], Field(discriminator="status")]


class ExecutionRecord(BaseModel):
    """Outcome of one evaluation attempt of one executable cell."""

    cell_index: int
    started_at: datetime
    ended_at: datetime
    outcome: ExecutionOutcome

    @property
    def succeeded(self) -> bool:
        return isinstance(self.outcome, ExecutionSuccess)
