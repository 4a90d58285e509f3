"""
Lab Grader: automated grading for the JS Advance lab

Usage:
  main.py [--config=PATH] [--repo=DIR] [--artifacts=DIR] [--verbose]
  main.py (-h | --help)

Options:
  --config=PATH     Path to YAML configuration file (optional).
  --repo=DIR        Student repository to grade (overrides the config).
  --artifacts=DIR   Where to write grade.csv and feedback (overrides the config).
  --verbose         Print debug logging.
  -h --help         Show this screen.
"""

import logging
import sys
from pathlib import Path

from docopt import docopt
from pydantic import ValidationError
from yaml import YAMLError

from labgrader.config import DEFAULT_STUDENT_ID
from labgrader.config_loader import GraderConfig, apply_environment, load_config
from labgrader.discovery import locate_submission
from labgrader.engine import grade_source
from labgrader.executor import SafeExecutor
from labgrader.git_history import read_history
from labgrader.models import GradeOutcome, SubmissionStatus
from labgrader.report import ReportWriter
from labgrader.timeliness import select_student_commit


def print_grade_summary(outcome: GradeOutcome) -> None:
    """
    Print a summary of the grade to console.

    Args:
        outcome: GradeOutcome to summarize.
    """
    print(f"\n  {'='*50}")
    print(f"  Student: {outcome.student_id}")
    print(f"  Status: {int(outcome.status)} ({outcome.status.name})")
    print(f"  {'='*50}")

    for task in outcome.tasks:
        status = "+" if task.earned >= task.max_marks * 0.7 else "-"
        print(f"  [{status}] {task.task_id}: {task.earned}/{task.max_marks}")
    print(f"  [{'+' if outcome.submission_marks else '-'}] Submission: {outcome.submission_marks}")

    print()


def run_grading_pipeline(config: GraderConfig) -> GradeOutcome:
    """
    Grade one student repository and write the artifacts.

    Args:
        config: Grader configuration (environment already applied).

    Returns:
        The GradeOutcome that was written.
    """
    repo_dir = config.repo_dir
    print(f"Locating submission in {repo_dir}...")
    source = locate_submission(repo_dir)
    if not source.found:
        print("  No student JS file found")
    elif source.empty:
        print(f"  Found {source.path} but it appears empty")
    else:
        print(f"  Found {source.path}")

    commits, note = read_history(repo_dir)
    commit = select_student_commit(commits, config.bot_signals, note=note)
    print(f"  Submission commit: {commit.sha} @ {commit.iso} ({commit.note})")

    executor = None
    if not config.skip_execution:
        executor = SafeExecutor(
            timeout_ms=config.sandbox_timeout_ms,
            node_executable=config.node_executable,
        )

    outcome = grade_source(
        source=source,
        commit=commit,
        deadline=config.deadline,
        executor=executor,
        student_id=config.student_id or DEFAULT_STUDENT_ID,
    )

    execution = outcome.execution
    if outcome.status != SubmissionStatus.MISSING and execution is not None:
        print(f"  Sandbox: {execution.outcome.value}")
        if config.verbose and execution.logs:
            print("  --- Console Output ---")
            for line in execution.logs[:20]:
                print(f"  {line}")
            if execution.dropped_logs:
                print(f"  ({execution.dropped_logs} further console calls not captured)")
            print("  ----------------------")

    writer = ReportWriter(output_dir=config.artifacts_dir)
    output_files = writer.save_all(outcome, step_summary_path=config.step_summary_path)
    print(f"  Saved grade to {output_files['csv']}")
    print(f"  Saved feedback to {output_files['feedback']}")

    print_grade_summary(outcome)
    print(f"✔ Lab graded: {outcome.total}/{outcome.max_total} (status={int(outcome.status)})")
    return outcome


def main(argv: list[str] | None = None) -> int:
    """
    Main CLI entrypoint.

    Returns:
        Exit code (0 for success, 1 for error).
    """
    arguments = docopt(__doc__, argv=argv)

    logging.basicConfig(
        level=logging.DEBUG if arguments["--verbose"] else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config_path = Path(arguments["--config"]) if arguments["--config"] else None
    try:
        config = load_config(config_path)
        if config_path:
            print(f"Loaded configuration from {config_path}")
    except (FileNotFoundError, YAMLError, ValidationError) as e:
        print(f"Error loading config: {e}")
        return 1

    overrides: dict = {}
    if arguments["--repo"]:
        overrides["repo_dir"] = Path(arguments["--repo"])
    if arguments["--artifacts"]:
        overrides["artifacts_dir"] = Path(arguments["--artifacts"])
    if arguments["--verbose"]:
        overrides["verbose"] = True
    config = apply_environment(config.model_copy(update=overrides))

    if not config.repo_dir.is_dir():
        print(f"Error: Repository directory not found: {config.repo_dir}")
        return 1

    try:
        run_grading_pipeline(config)
        return 0
    except KeyboardInterrupt:
        print("\nGrading interrupted by user.")
        return 1
    except OSError as e:
        print(f"\nError writing artifacts: {e}")
        if config.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
