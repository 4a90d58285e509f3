from datetime import timedelta

import pytest

from conftest import DEADLINE, make_source
from labgrader.models import CommitInfo, CommitRecord, SourceFile, SubmissionStatus
from labgrader.timeliness import classify, is_late, looks_like_bot, select_student_commit, submission_marks


def record(sha: str, hours_before: float | None, author: str = "Sara Ali", email: str = "sara@example.com", subject: str = "work") -> CommitRecord:
    committed_at = None if hours_before is None else DEADLINE - timedelta(hours=hours_before)
    return CommitRecord(sha=sha, committed_at=committed_at, author=author, email=email, subject=subject)


@pytest.mark.parametrize(
    "author,email,subject",
    [
        ("github-classroom[bot]", "66690702+github-classroom[bot]@users.noreply.github.com", "Initial commit"),
        ("GitHub Actions", "actions@github.com", "Update grade"),
        ("Sara", "sara@example.com", "Run Autograding"),
        ("dependabot", "x@y.z", "Bump lodash"),
        ("Sara", "sara@example.com", "Update WORKFLOW file"),
    ],
)
def test_bot_signals(author: str, email: str, subject: str) -> None:
    assert looks_like_bot(CommitRecord(sha="x", author=author, email=email, subject=subject))


def test_student_commit_is_not_bot() -> None:
    assert not looks_like_bot(record("a", 1))


def test_custom_signals() -> None:
    commit = record("a", 1, author="ci-runner")
    assert not looks_like_bot(commit)
    assert looks_like_bot(commit, signals=["ci-runner"])


def test_selects_latest_non_bot_commit() -> None:
    commits = [
        record("bot2", 0.5, author="github-actions[bot]"),
        record("student2", 2),
        record("student1", 10),
    ]
    info = select_student_commit(commits)

    assert info.sha == "student2"
    assert not info.used_fallback
    assert info.timestamp == DEADLINE - timedelta(hours=2)
    assert info.note == "selected latest non-bot commit"


def test_skips_commits_without_a_timestamp() -> None:
    info = select_student_commit([record("broken", None), record("good", 3)])
    assert info.sha == "good"


def test_all_bot_commits_fall_back_to_newest() -> None:
    commits = [
        record("bot2", 1, author="github-classroom[bot]"),
        record("bot1", 5, author="github-classroom[bot]"),
    ]
    info = select_student_commit(commits)

    assert info.sha == "bot2"
    assert info.used_fallback
    assert "fallback" in info.note


def test_empty_history_is_unknown() -> None:
    info = select_student_commit([], note="git inspection failed: not a git repository")

    assert info.sha == "unknown"
    assert info.timestamp is None
    assert info.iso == "unknown"
    assert info.note.startswith("git inspection failed")


def test_is_late() -> None:
    assert not is_late(DEADLINE, DEADLINE)
    assert not is_late(DEADLINE - timedelta(seconds=1), DEADLINE)
    assert is_late(DEADLINE + timedelta(seconds=1), DEADLINE)
    assert is_late(None, DEADLINE)


def test_classify_states() -> None:
    good = make_source("console.log('hello world');")
    before = CommitInfo(timestamp=DEADLINE - timedelta(hours=1))
    after = CommitInfo(timestamp=DEADLINE + timedelta(hours=1))

    assert classify(SourceFile(), before, DEADLINE) == SubmissionStatus.MISSING
    assert classify(make_source("  "), before, DEADLINE) == SubmissionStatus.MISSING
    assert classify(good, before, DEADLINE) == SubmissionStatus.ON_TIME
    assert classify(good, after, DEADLINE) == SubmissionStatus.LATE
    assert classify(good, CommitInfo(), DEADLINE) == SubmissionStatus.LATE


def test_submission_marks() -> None:
    assert submission_marks(SubmissionStatus.ON_TIME) == 20
    assert submission_marks(SubmissionStatus.LATE) == 10
    assert submission_marks(SubmissionStatus.MISSING) == 0
