"""
Locates the student's JavaScript file in the repository.

Prefers a local script linked from index.html, then conventional file
names, then any root-level .js file.
"""

import logging
import os
import re
from pathlib import Path

from .config import CANDIDATE_FILENAMES, GRADER_FILENAMES, INDEX_FILENAME
from .models import SourceFile
from .normalizer import is_empty_code

logger = logging.getLogger(__name__)

_HTML_COMMENT = re.compile(r"<!--[\s\S]*?-->")
_SCRIPT_SRC = re.compile(
    r"<script\b[^>]*\bsrc\s*=\s*[\"']([^\"']+)[\"'][^>]*>\s*</script\s*>",
    re.IGNORECASE,
)
_REMOTE = re.compile(r"^https?://", re.IGNORECASE)


def read_text_safe(path: Path) -> str:
    """Read a UTF-8 file, returning "" when it cannot be read."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return ""


def find_script_srcs(html: str) -> list[str]:
    """Extract `<script src=...>` values, ignoring commented-out tags."""
    return _SCRIPT_SRC.findall(_HTML_COMMENT.sub("", html))


def resolve_script(src: str, index_path: Path) -> Path | None:
    """Resolve a script src relative to index.html. Remote URLs give None."""
    if _REMOTE.match(src):
        return None
    cleaned = src.lstrip("/")
    return Path(os.path.normpath(index_path.parent / cleaned))


def guess_source_path(repo_dir: Path) -> Path | None:
    """
    Find the most likely student source file.

    Args:
        repo_dir: Repository root.

    Returns:
        Path to the file, or None if nothing suitable exists.
    """
    index_path = repo_dir / INDEX_FILENAME
    if index_path.is_file():
        for src in find_script_srcs(read_text_safe(index_path)):
            resolved = resolve_script(src, index_path)
            if resolved and resolved.is_file() and resolved.suffix.lower() == ".js":
                logger.debug("Using script linked from %s: %s", INDEX_FILENAME, resolved)
                return resolved

    for name in CANDIDATE_FILENAMES:
        candidate = repo_dir / name
        if candidate.is_file():
            return candidate

    for entry in sorted(repo_dir.iterdir()):
        if not entry.is_file():
            continue
        if entry.name in GRADER_FILENAMES:
            continue
        if entry.suffix.lower() == ".js":
            return entry

    return None


def locate_submission(repo_dir: Path) -> SourceFile:
    """
    Locate and read the submission.

    Returns:
        SourceFile with `found`, `content` and `empty` filled in. A
        repository that cannot be listed reads as no submission.
    """
    try:
        path = guess_source_path(repo_dir)
    except OSError as e:
        logger.warning("Could not search %s for a submission: %s", repo_dir, e)
        return SourceFile()
    if path is None:
        return SourceFile()

    content = read_text_safe(path)
    try:
        shown = path.relative_to(repo_dir).as_posix()
    except ValueError:
        shown = str(path)

    return SourceFile(
        path=shown,
        found=True,
        content=content,
        empty=is_empty_code(content),
    )
