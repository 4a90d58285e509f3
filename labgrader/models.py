"""
Pydantic models for the lab grader.

Defines the evidence shared by all detectors, the rubric task table types,
sandbox execution results, commit metadata and the final grade outcome.
"""

from datetime import datetime
from enum import Enum, IntEnum
from typing import Callable

from pydantic import BaseModel, ConfigDict, Field


class SubmissionStatus(IntEnum):
    """Submission timeliness status code written to the CSV record."""

    ON_TIME = 0
    LATE = 1
    MISSING = 2


class ExecutionOutcome(str, Enum):
    """How a sandboxed run ended."""

    COMPLETED = "completed"
    FAULTED = "faulted"
    TIMED_OUT = "timed_out"
    COMPILE_FAULT = "compile_fault"
    SKIPPED = "skipped"
    # the sandbox itself failed; the submission never ran
    UNAVAILABLE = "unavailable"


class ExecutionResult(BaseModel):
    """
    Result from running student code in the sandbox.

    Attributes:
        outcome: How the run ended.
        logs: Captured console output, one entry per call, in emission order.
        fault: Compile or runtime error text, or the sandbox failure when
            UNAVAILABLE.
        dropped_logs: Console calls past the capture limit, counted but not
            kept.
        duration_seconds: Wall-clock time spent in the sandbox.
    """

    model_config = ConfigDict(frozen=True)

    outcome: ExecutionOutcome = Field(..., description="How the run ended")
    logs: tuple[str, ...] = Field(default=(), description="Captured console output")
    fault: str | None = Field(default=None, description="Compile or runtime error text")
    dropped_logs: int = Field(default=0, ge=0, description="Console calls not captured")
    duration_seconds: float = Field(default=0.0, ge=0, description="Sandbox wall-clock time")

    @property
    def ran(self) -> bool:
        """Whether the code was actually executed (even if it then failed)."""
        return self.outcome in (
            ExecutionOutcome.COMPLETED,
            ExecutionOutcome.FAULTED,
            ExecutionOutcome.TIMED_OUT,
        )

    @property
    def compile_error(self) -> str | None:
        return self.fault if self.outcome == ExecutionOutcome.COMPILE_FAULT else None

    @property
    def runtime_error(self) -> str | None:
        return self.fault if self.ran else None

    @property
    def sandbox_error(self) -> str | None:
        return self.fault if self.outcome == ExecutionOutcome.UNAVAILABLE else None


class Evidence(BaseModel):
    """
    Everything the detectors may look at, built once per grading run.

    Attributes:
        code: Comment-stripped submission source.
        logs: Console output from the sandboxed run, or None when the code
            was not executed.
        runtime_error: Fault raised while running, if any.
    """

    model_config = ConfigDict(frozen=True)

    code: str = Field(..., description="Comment-stripped source")
    logs: tuple[str, ...] | None = Field(default=None, description="Captured console output")
    runtime_error: str | None = Field(default=None, description="Runtime fault text")


class Requirement(BaseModel):
    """Outcome of one rubric requirement for one grading run."""

    label: str = Field(..., description="What the requirement asks for")
    ok: bool = Field(..., description="Whether the requirement is satisfied")
    hint: str = Field(default="", description="Hint shown when not satisfied")


class RequirementCheck(BaseModel):
    """A requirement label paired with the detector that decides it."""

    model_config = ConfigDict(frozen=True)

    label: str
    detector: Callable[[Evidence], bool]
    hint: str = ""


class Task(BaseModel):
    """
    One rubric task (an assignment TODO).

    Attributes:
        id: Short identifier, e.g. "TODO 1".
        name: Display name.
        max_marks: Marks available for the task.
        checks: Ordered requirement checks.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Task identifier")
    name: str = Field(..., description="Display name")
    max_marks: int = Field(..., ge=0, description="Maximum marks")
    checks: tuple[RequirementCheck, ...] = Field(default=(), description="Requirement checks")


class TaskResult(BaseModel):
    """Marks earned for a single task and the requirements behind them."""

    model_config = ConfigDict(frozen=True)

    task_id: str = Field(..., description="Task identifier")
    name: str = Field(..., description="Task display name")
    earned: int = Field(..., ge=0, description="Marks earned")
    max_marks: int = Field(..., ge=0, description="Maximum marks")
    requirements: tuple[Requirement, ...] = Field(default=(), description="Requirement outcomes")

    @property
    def satisfied(self) -> int:
        return sum(1 for r in self.requirements if r.ok)


class CommitRecord(BaseModel):
    """One line of git history."""

    sha: str
    committed_at: datetime | None = None
    author: str = ""
    email: str = ""
    subject: str = ""


class CommitInfo(BaseModel):
    """
    The commit chosen to timestamp the submission.

    Attributes:
        sha: Commit hash, or "unknown".
        timestamp: Commit time, or None when it could not be determined.
        author: Author name.
        email: Author email.
        subject: First line of the commit message.
        used_fallback: True when no qualifying student commit was found.
        note: How the commit was chosen.
    """

    sha: str = Field(default="unknown", description="Commit hash")
    timestamp: datetime | None = Field(default=None, description="Commit time")
    author: str = Field(default="unknown", description="Author name")
    email: str = Field(default="unknown", description="Author email")
    subject: str = Field(default="", description="Commit subject")
    used_fallback: bool = Field(default=True, description="Whether a fallback commit was used")
    note: str = Field(default="", description="How the commit was chosen")

    @property
    def iso(self) -> str:
        return self.timestamp.isoformat() if self.timestamp else "unknown"


class SourceFile(BaseModel):
    """
    The located student source file.

    Attributes:
        path: Path relative to the repository, or None when not found.
        found: Whether a source file was located.
        content: Raw file content.
        empty: Whether the content reduces to (almost) nothing.
    """

    path: str | None = Field(default=None, description="Path of the source file")
    found: bool = Field(default=False, description="Whether a file was located")
    content: str = Field(default="", description="Raw file content")
    empty: bool = Field(default=True, description="Whether the file is effectively empty")


class GradeOutcome(BaseModel):
    """
    Complete grading result for a submission.

    Attributes:
        student_id: Student identifier.
        status: Submission timeliness status.
        submission_marks: Marks for submitting (on time / late / missing).
        tasks: Per-task results in rubric order.
        total: Total marks, capped at max_total.
        max_total: Maximum possible marks.
    """

    student_id: str = Field(..., description="Student identifier")
    status: SubmissionStatus = Field(..., description="Submission status code")
    submission_marks: int = Field(..., ge=0, description="Submission marks")
    tasks: list[TaskResult] = Field(default_factory=list, description="Per-task results")
    total: int = Field(..., ge=0, description="Total marks")
    max_total: int = Field(..., ge=0, description="Maximum possible marks")
    source: SourceFile = Field(default_factory=SourceFile, description="Located source file")
    commit: CommitInfo = Field(default_factory=CommitInfo, description="Chosen commit")
    execution: ExecutionResult | None = Field(default=None, description="Sandbox result")
    deadline: datetime = Field(..., description="Submission deadline")
    graded_at: datetime = Field(..., description="When grading ran")

    @property
    def tasks_earned(self) -> int:
        return sum(t.earned for t in self.tasks)
