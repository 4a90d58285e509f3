"""
Source normalisation for pattern search.

Comment removal is regex based and not string-aware; good enough for the
detectors, which are heuristics themselves.
"""

import re

from .config import EMPTY_CODE_THRESHOLD

_BLOCK_COMMENT = re.compile(r"/\*[\s\S]*?\*/")
# Only `//` at line start or after whitespace, so "https://..." survives
_LINE_COMMENT = re.compile(r"(^|\s)//.*$", re.MULTILINE)
_WHITESPACE = re.compile(r"\s+")


def strip_comments(code: str) -> str:
    """Remove block and line comments from JavaScript source."""
    code = _BLOCK_COMMENT.sub("", code)
    return _LINE_COMMENT.sub(r"\1", code)


def compact_whitespace(text: str) -> str:
    """Collapse whitespace runs into single spaces and trim."""
    return _WHITESPACE.sub(" ", text).strip()


def is_empty_code(code: str, threshold: int = EMPTY_CODE_THRESHOLD) -> bool:
    """
    Decide whether a submission is effectively empty.

    Args:
        code: Raw source text.
        threshold: Minimum meaningful length.

    Returns:
        True if fewer than `threshold` characters remain once comments are
        removed and whitespace is collapsed.
    """
    return len(compact_whitespace(strip_comments(code))) < threshold
