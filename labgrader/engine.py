"""
Rubric scoring engine.

Builds the shared Evidence once, runs every requirement detector against it
with per-requirement fault isolation, and aggregates marks into a
GradeOutcome.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Protocol, Sequence

from .config import MAX_TOTAL
from .models import (
    CommitInfo,
    Evidence,
    ExecutionOutcome,
    ExecutionResult,
    GradeOutcome,
    Requirement,
    SourceFile,
    SubmissionStatus,
    Task,
    TaskResult,
)
from .normalizer import strip_comments
from .rubric import TASKS
from .timeliness import classify, submission_marks

logger = logging.getLogger(__name__)

MISSING_REQUIREMENT = Requirement(
    label="No submission / empty JS → cannot grade tasks",
    ok=False,
)


class Executor(Protocol):
    def execute(self, code: str) -> ExecutionResult: ...


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def score_requirements(requirements: Sequence[Requirement], max_marks: int) -> int:
    """
    Marks proportional to satisfied requirements.

    Returns:
        round(max_marks * satisfied / total), rounding halves up; 0 when
        there are no requirements.
    """
    total = len(requirements)
    if total == 0:
        return 0
    ok = sum(1 for r in requirements if r.ok)
    return round_half_up(max_marks * ok / total)


def build_evidence(source: SourceFile, execution: ExecutionResult | None) -> Evidence:
    """
    Combine comment-stripped source with sandbox output.

    Logs are only attached when the code actually ran.
    """
    logs = None
    runtime_error = None
    if execution is not None and execution.ran:
        logs = execution.logs
        runtime_error = execution.runtime_error
    return Evidence(code=strip_comments(source.content), logs=logs, runtime_error=runtime_error)


class RubricEngine:
    """
    Evaluates the rubric tasks against evidence.
    """

    def __init__(self, tasks: Sequence[Task] = TASKS) -> None:
        self.tasks = tuple(tasks)

    @property
    def max_marks(self) -> int:
        return sum(t.max_marks for t in self.tasks)

    def evaluate_task(self, task: Task, evidence: Evidence) -> TaskResult:
        requirements = []
        for check in task.checks:
            try:
                ok = bool(check.detector(evidence))
            except Exception as e:
                logger.warning("%s: detector for %r raised %s: %s", task.id, check.label, type(e).__name__, e)
                ok = False
            requirements.append(Requirement(label=check.label, ok=ok, hint=check.hint))

        return TaskResult(
            task_id=task.id,
            name=task.name,
            earned=score_requirements(requirements, task.max_marks),
            max_marks=task.max_marks,
            requirements=tuple(requirements),
        )

    def grade(self, evidence: Evidence | None, status: SubmissionStatus) -> list[TaskResult]:
        """
        Grade every task.

        Args:
            evidence: Shared evidence; ignored (and may be None) when the
                submission is missing.
            status: Submission status. MISSING forces zero marks without
                running any detector.

        Returns:
            One TaskResult per task, in rubric order.
        """
        if status == SubmissionStatus.MISSING or evidence is None:
            return [
                TaskResult(
                    task_id=t.id,
                    name=t.name,
                    earned=0,
                    max_marks=t.max_marks,
                    requirements=(MISSING_REQUIREMENT,),
                )
                for t in self.tasks
            ]
        return [self.evaluate_task(t, evidence) for t in self.tasks]


def build_outcome(
    student_id: str,
    status: SubmissionStatus,
    tasks: Sequence[TaskResult],
    source: SourceFile,
    commit: CommitInfo,
    execution: ExecutionResult | None,
    deadline: datetime,
    graded_at: datetime | None = None,
) -> GradeOutcome:
    """
    Aggregate task marks and submission marks into a GradeOutcome.

    The total is the task marks plus the submission marks, capped at
    MAX_TOTAL.
    """
    sub_marks = submission_marks(status)
    total = min(MAX_TOTAL, sum(t.earned for t in tasks) + sub_marks)

    return GradeOutcome(
        student_id=student_id,
        status=status,
        submission_marks=sub_marks,
        tasks=list(tasks),
        total=total,
        max_total=MAX_TOTAL,
        source=source,
        commit=commit,
        execution=execution,
        deadline=deadline,
        graded_at=graded_at or datetime.now(timezone.utc),
    )


def grade_source(
    source: SourceFile,
    commit: CommitInfo,
    deadline: datetime,
    executor: Executor | None,
    student_id: str,
    engine: RubricEngine | None = None,
    graded_at: datetime | None = None,
) -> GradeOutcome:
    """
    Grade one located submission.

    Args:
        source: The located source file.
        commit: The commit chosen to timestamp the submission.
        deadline: Submission deadline.
        executor: Sandbox used for the single dynamic run, or None to grade
            statically only.
        student_id: Student identifier for the outcome.
        engine: Rubric engine (defaults to the lab rubric).
        graded_at: Grading time (defaults to now).

    Returns:
        The complete GradeOutcome. Never raises for submission content.
    """
    engine = engine or RubricEngine()
    status = classify(source, commit, deadline)

    execution: ExecutionResult | None = None
    evidence: Evidence | None = None
    if status != SubmissionStatus.MISSING:
        if executor is None:
            execution = ExecutionResult(outcome=ExecutionOutcome.SKIPPED)
        else:
            try:
                execution = executor.execute(source.content)
            except Exception as e:
                logger.warning("Sandbox raised %s: %s", type(e).__name__, e)
                execution = ExecutionResult(
                    outcome=ExecutionOutcome.UNAVAILABLE,
                    fault=f"{type(e).__name__}: {e}",
                )
        evidence = build_evidence(source, execution)

    tasks = engine.grade(evidence, status)
    return build_outcome(
        student_id=student_id,
        status=status,
        tasks=tasks,
        source=source,
        commit=commit,
        execution=execution,
        deadline=deadline,
        graded_at=graded_at,
    )
