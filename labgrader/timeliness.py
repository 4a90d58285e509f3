"""
Submission timeliness classification.

Lateness is judged from the latest *student* commit, not the latest
workflow or GitHub Actions commit.
"""

import logging
from datetime import datetime
from typing import Sequence

from .config import BOT_SIGNALS, SUBMISSION_MARKS_LATE, SUBMISSION_MARKS_ON_TIME
from .models import CommitInfo, CommitRecord, SourceFile, SubmissionStatus

logger = logging.getLogger(__name__)


def looks_like_bot(commit: CommitRecord, signals: Sequence[str] = BOT_SIGNALS) -> bool:
    """True if author, email or subject carry any automation signal."""
    hay = f"{commit.author} {commit.email} {commit.subject}".lower()
    return any(s.lower() in hay for s in signals)


def select_student_commit(
    commits: Sequence[CommitRecord],
    signals: Sequence[str] = BOT_SIGNALS,
    note: str = "",
) -> CommitInfo:
    """
    Pick the commit used to timestamp the submission.

    Args:
        commits: History, newest first.
        signals: Bot signal substrings.
        note: Explanation to report when history is empty (e.g. a git error).

    Returns:
        The newest non-bot commit with a valid timestamp. If every commit
        looks bot-like, the newest commit with `used_fallback` set. With no
        history at all, an unknown CommitInfo.
    """
    if not commits:
        return CommitInfo(note=note or "git log returned no commits")

    for commit in commits:
        if looks_like_bot(commit, signals):
            continue
        if commit.committed_at is None:
            continue
        return _to_info(commit, used_fallback=False, note="selected latest non-bot commit")

    logger.debug("All %d commits looked bot-like; falling back to the newest", len(commits))
    return _to_info(
        commits[0],
        used_fallback=True,
        note="all commits looked bot-like; using latest commit as fallback",
    )


def _to_info(commit: CommitRecord, used_fallback: bool, note: str) -> CommitInfo:
    return CommitInfo(
        sha=commit.sha or "unknown",
        timestamp=commit.committed_at,
        author=commit.author or "unknown",
        email=commit.email or "unknown",
        subject=commit.subject,
        used_fallback=used_fallback,
        note=note,
    )


def is_late(timestamp: datetime | None, deadline: datetime) -> bool:
    """
    Whether a commit time misses the deadline.

    An unknown timestamp counts as late. This is a conservative policy
    choice: it cannot tell "no qualifying commit" apart from a git failure.
    """
    if timestamp is None:
        return True
    return timestamp > deadline


def classify(source: SourceFile, commit: CommitInfo, deadline: datetime) -> SubmissionStatus:
    """
    Decide the submission status once.

    MISSING when no source was found or it is empty; otherwise LATE or
    ON_TIME from the chosen commit's timestamp.
    """
    if not source.found or source.empty:
        return SubmissionStatus.MISSING
    if is_late(commit.timestamp, deadline):
        return SubmissionStatus.LATE
    return SubmissionStatus.ON_TIME


def submission_marks(status: SubmissionStatus) -> int:
    if status == SubmissionStatus.ON_TIME:
        return SUBMISSION_MARKS_ON_TIME
    if status == SubmissionStatus.LATE:
        return SUBMISSION_MARKS_LATE
    return 0
