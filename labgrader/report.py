"""
Report builder for a graded submission.

Writes the fixed-schema CSV record, the Markdown feedback, a JSON dump of
the outcome, and appends the feedback to the GitHub step summary.
"""

import csv
import io
from pathlib import Path

from .config import (
    CSV_HEADER,
    DEFAULT_ARTIFACTS_DIR,
    FEEDBACK_DIRNAME,
    FEEDBACK_FILENAME,
    GRADE_CSV_FILENAME,
    GRADE_JSON_FILENAME,
    LAB_NAME,
    SUBMISSION_MARKS_MAX,
)
from .models import GradeOutcome, Requirement, SourceFile, SubmissionStatus


def source_note(source: SourceFile) -> str:
    if not source.found:
        return "❌ No student JS file found in repository root (or index.html link)."
    if source.empty:
        return f"⚠️ Found `{source.path}` but it appears empty (or only comments)."
    return f"✅ Found `{source.path}`."


def submission_note(outcome: GradeOutcome) -> str:
    commit = outcome.commit
    if outcome.status == SubmissionStatus.MISSING:
        return f"No submission detected (missing/empty JS): submission marks = 0/{SUBMISSION_MARKS_MAX}."
    if outcome.status == SubmissionStatus.LATE:
        return (
            f"Late submission via latest *student* commit: {outcome.submission_marks}/{SUBMISSION_MARKS_MAX}. "
            f"(commit: {commit.sha} @ {commit.iso})"
        )
    return (
        f"On-time submission via latest *student* commit: {outcome.submission_marks}/{SUBMISSION_MARKS_MAX}. "
        f"(commit: {commit.sha} @ {commit.iso})"
    )


def format_requirements(requirements: tuple[Requirement, ...]) -> list[str]:
    lines = []
    for r in requirements:
        if r.ok:
            lines.append(f"- ✅ {r.label}")
        else:
            lines.append(f"- ❌ {r.label}" + (f" — {r.hint}" if r.hint else ""))
    return lines


def build_feedback(outcome: GradeOutcome) -> str:
    """
    Render the Markdown feedback document.

    Args:
        outcome: Graded submission.

    Returns:
        Markdown text: header details, marks table, total, per-requirement
        feedback and any compile or runtime fault.
    """
    commit = outcome.commit
    lines = [
        f"# Lab | {LAB_NAME} | Autograding Summary",
        "",
        f"- Student: `{outcome.student_id}`",
        f"- {source_note(outcome.source)}",
        f"- {submission_note(outcome)}",
        f"- Due (Riyadh): `{outcome.deadline.isoformat()}`",
        "- Chosen commit for submission timing:",
        f"  - SHA: `{commit.sha}`",
        f"  - Author: `{commit.author}` <{commit.email}>",
        f"  - Time (UTC ISO): `{commit.iso}`",
        f"  - Note: {commit.note}",
        f"- Status: **{int(outcome.status)}** (0=on time, 1=late, 2=no submission/empty)",
        f"- Run: `{outcome.graded_at.isoformat()}`",
        "",
        "## Marks Breakdown",
        "",
        "| Item | Marks |",
        "|------|------:|",
    ]
    for task in outcome.tasks:
        lines.append(f"| {task.task_id}: {task.name} | {task.earned}/{task.max_marks} |")
    lines.append(f"| Submission | {outcome.submission_marks}/{SUBMISSION_MARKS_MAX} |")

    lines += [
        "",
        "## Total Marks",
        "",
        f"**{outcome.total} / {outcome.max_total}**",
        "",
        "## Detailed Feedback",
    ]
    for task in outcome.tasks:
        lines += ["", f"### {task.task_id}: {task.name}"]
        lines += format_requirements(task.requirements)

    execution = outcome.execution
    if execution is not None and execution.compile_error:
        lines += [
            "",
            "---",
            "⚠️ **SyntaxError: code could not compile.** Dynamic checks were skipped; grading used static checks only.",
            "",
            "```",
            execution.compile_error,
            "```",
        ]
    elif execution is not None and execution.runtime_error:
        lines += [
            "",
            "---",
            "⚠️ **Runtime error detected (best-effort captured):**",
            "",
            "```",
            execution.runtime_error,
            "```",
        ]
    elif execution is not None and execution.sandbox_error:
        lines += [
            "",
            "---",
            "ℹ️ **Dynamic checks unavailable:** the grader could not run your code, "
            "so grading used static checks only. This is not an error in your submission.",
            "",
            "```",
            execution.sandbox_error,
            "```",
        ]

    return "\n".join(lines) + "\n"


def build_csv(outcome: GradeOutcome) -> str:
    """Render the fixed-schema CSV record. The column layout must not change."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    writer.writerow([outcome.student_id, outcome.total, outcome.max_total, int(outcome.status)])
    return buffer.getvalue()


class ReportWriter:
    """
    Writes grading artifacts for one submission.
    """

    def __init__(self, output_dir: Path | None = None) -> None:
        """
        Initialize the report writer.

        Args:
            output_dir: Directory to save artifacts. Defaults to ./artifacts/
        """
        self.output_dir = output_dir or DEFAULT_ARTIFACTS_DIR

    def save_all(self, outcome: GradeOutcome, step_summary_path: Path | None = None) -> dict[str, Path]:
        """
        Save all artifacts.

        Creates:
        - grade.csv with the fixed record
        - feedback/README.md with the Markdown feedback
        - grade.json with the full outcome

        Also appends the feedback to the step summary file when given.

        Returns:
            Dictionary of output file paths.
        """
        feedback_dir = self.output_dir / FEEDBACK_DIRNAME
        feedback_dir.mkdir(parents=True, exist_ok=True)

        output_files: dict[str, Path] = {}
        feedback = build_feedback(outcome)

        csv_path = self.output_dir / GRADE_CSV_FILENAME
        csv_path.write_text(build_csv(outcome), encoding="utf-8")
        output_files["csv"] = csv_path

        feedback_path = feedback_dir / FEEDBACK_FILENAME
        feedback_path.write_text(feedback, encoding="utf-8")
        output_files["feedback"] = feedback_path

        json_path = self.output_dir / GRADE_JSON_FILENAME
        with open(json_path, "w", encoding="utf-8") as f:
            f.write(outcome.model_dump_json(indent=2))
        output_files["json"] = json_path

        if step_summary_path is not None:
            with open(step_summary_path, "a", encoding="utf-8") as f:
                f.write(feedback)
            output_files["step_summary"] = step_summary_path

        return output_files
