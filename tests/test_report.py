import json
from datetime import datetime
from pathlib import Path

from conftest import DEADLINE, FULL_SOLUTION, TASK1_ONLY, FakeExecutor, make_source, on_time_commit
from labgrader.engine import grade_source
from labgrader.executor import SafeExecutor
from labgrader.models import ExecutionOutcome, ExecutionResult, GradeOutcome, SourceFile
from labgrader.report import ReportWriter, build_csv, build_feedback, source_note


def outcome_for(source: SourceFile, graded_at: datetime, execution: ExecutionResult | None = None) -> GradeOutcome:
    executor = FakeExecutor(execution) if execution else FakeExecutor()
    return grade_source(source, on_time_commit(), DEADLINE, executor, "sara", graded_at=graded_at)


def test_csv_has_fixed_schema(graded_at: datetime) -> None:
    outcome = outcome_for(make_source(TASK1_ONLY), graded_at)
    assert build_csv(outcome) == "student_username,obtained_marks,total_marks,status\nsara,31,100,0\n"


def test_csv_for_missing_submission(graded_at: datetime) -> None:
    outcome = outcome_for(SourceFile(), graded_at)
    assert build_csv(outcome).splitlines()[1] == "sara,0,100,2"


def test_source_notes() -> None:
    assert source_note(SourceFile()).startswith("❌ No student JS file found")
    assert "appears empty" in source_note(SourceFile(path="script.js", found=True, empty=True))
    assert source_note(make_source(TASK1_ONLY)) == "✅ Found `script.js`."


def test_feedback_lists_marks_and_requirements(graded_at: datetime) -> None:
    feedback = build_feedback(outcome_for(make_source(TASK1_ONLY), graded_at))

    assert feedback.startswith("# Lab | 4.2 JS Advance | Autograding Summary")
    assert "- Student: `sara`" in feedback
    assert "On-time submission via latest *student* commit: 20/20. (commit: abc123 @" in feedback
    assert "| TODO 1: Object with Getters & Setters (Student: fullName + GPA validation) | 11/11 |" in feedback
    assert "| TODO 7: Regex + forEach — find words containing 'ab' | 0/14 |" in feedback
    assert "| Submission | 20/20 |" in feedback
    assert "**31 / 100**" in feedback
    assert "- ✅ Has a GPA updater (setter or updateGpa method)" in feedback
    assert "- ❌ Declares an array with (about) 10 numbers — Use an array with 10 numeric values (any values)." in feedback
    assert "- ❌ Uses getDate()" in feedback
    assert "- Status: **0** (0=on time, 1=late, 2=no submission/empty)" in feedback


def test_feedback_for_missing_submission(graded_at: datetime) -> None:
    feedback = build_feedback(outcome_for(SourceFile(), graded_at))

    assert "No submission detected (missing/empty JS): submission marks = 0/20." in feedback
    assert feedback.count("- ❌ No submission / empty JS → cannot grade tasks") == 7
    assert "**0 / 100**" in feedback


def test_feedback_shows_compile_fault(graded_at: datetime) -> None:
    execution = ExecutionResult(outcome=ExecutionOutcome.COMPILE_FAULT, fault="SyntaxError: Unexpected end of input")
    feedback = build_feedback(outcome_for(make_source(FULL_SOLUTION), graded_at, execution))

    assert "⚠️ **SyntaxError: code could not compile.**" in feedback
    assert "```\nSyntaxError: Unexpected end of input\n```" in feedback
    assert "Runtime error" not in feedback


def test_feedback_shows_runtime_fault(graded_at: datetime) -> None:
    execution = ExecutionResult(outcome=ExecutionOutcome.FAULTED, logs=("x",), fault="TypeError: boom")
    feedback = build_feedback(outcome_for(make_source(FULL_SOLUTION), graded_at, execution))

    assert "⚠️ **Runtime error detected (best-effort captured):**" in feedback
    assert "```\nTypeError: boom\n```" in feedback


def test_feedback_separates_sandbox_failure_from_runtime_fault(graded_at: datetime) -> None:
    executor = SafeExecutor(node_executable="labgrader-no-such-node")
    outcome = grade_source(make_source(FULL_SOLUTION), on_time_commit(), DEADLINE, executor, "sara", graded_at=graded_at)
    feedback = build_feedback(outcome)

    assert outcome.execution.outcome == ExecutionOutcome.UNAVAILABLE
    assert "Dynamic checks unavailable" in feedback
    assert "Sandbox could not start (labgrader-no-such-node)" in feedback
    assert "Runtime error" not in feedback


def test_save_all_writes_artifacts(tmp_path: Path, graded_at: datetime) -> None:
    outcome = outcome_for(make_source(TASK1_ONLY), graded_at)
    summary = tmp_path / "step_summary.md"
    summary.write_text("previous step\n", encoding="utf-8")

    files = ReportWriter(output_dir=tmp_path / "artifacts").save_all(outcome, step_summary_path=summary)

    assert files["csv"] == tmp_path / "artifacts" / "grade.csv"
    assert files["feedback"] == tmp_path / "artifacts" / "feedback" / "README.md"
    assert files["csv"].read_text(encoding="utf-8") == build_csv(outcome)
    assert files["feedback"].read_text(encoding="utf-8") == build_feedback(outcome)
    assert json.loads(files["json"].read_text(encoding="utf-8"))["total"] == 31
    assert summary.read_text(encoding="utf-8") == "previous step\n" + build_feedback(outcome)


def test_save_all_without_step_summary(tmp_path: Path, graded_at: datetime) -> None:
    files = ReportWriter(output_dir=tmp_path).save_all(outcome_for(SourceFile(), graded_at))
    assert "step_summary" not in files
