"""
Reads commit history from the submission repository with `git log`.
"""

import logging
import subprocess
from datetime import datetime, timezone
from pathlib import Path

from .config import GIT_LOG_FORMAT, GIT_LOG_LIMIT
from .models import CommitRecord

logger = logging.getLogger(__name__)


def parse_log_line(line: str) -> CommitRecord:
    """
    Parse one `%H|%ct|%an|%ae|%s` line. The subject may itself contain `|`.
    """
    parts = line.split("|")
    sha = parts[0] if parts else ""
    committed_at = None
    if len(parts) > 1:
        try:
            committed_at = datetime.fromtimestamp(int(parts[1]), tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            committed_at = None
    return CommitRecord(
        sha=sha,
        committed_at=committed_at,
        author=parts[2] if len(parts) > 2 else "",
        email=parts[3] if len(parts) > 3 else "",
        subject="|".join(parts[4:]),
    )


def read_history(repo_dir: Path, limit: int = GIT_LOG_LIMIT) -> tuple[list[CommitRecord], str]:
    """
    Read recent commits, newest first.

    Args:
        repo_dir: Repository working directory.
        limit: Maximum number of commits to read.

    Returns:
        Tuple of (commits, note). On any git failure the commit list is
        empty and the note says why.
    """
    try:
        result = subprocess.run(
            ["git", "log", f"--format={GIT_LOG_FORMAT}", "-n", str(limit)],
            cwd=str(repo_dir),
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        logger.warning("git could not be run: %s", e)
        return [], f"git inspection failed: {e}"

    if result.returncode != 0:
        detail = result.stderr.strip() or f"exit code {result.returncode}"
        logger.debug("git log failed: %s", detail)
        return [], f"git inspection failed: {detail}"

    lines = [line for line in result.stdout.strip().splitlines() if line.strip()]
    if not lines:
        return [], "git log returned no commits"

    return [parse_log_line(line) for line in lines], ""
