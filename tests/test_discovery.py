from pathlib import Path

import pytest

from labgrader.discovery import find_script_srcs, guess_source_path, locate_submission, resolve_script
from labgrader.models import SourceFile


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_find_script_srcs_ignores_commented_tags() -> None:
    html = """
    <!-- <script src="old.js"></script> -->
    <script src="js/lab.js"></script>
    <script type="module" src='other.js' defer></script>
    """
    assert find_script_srcs(html) == ["js/lab.js", "other.js"]


def test_resolve_script_skips_remote_urls(tmp_path: Path) -> None:
    index = tmp_path / "index.html"
    assert resolve_script("https://cdn.example.com/lib.js", index) is None
    assert resolve_script("/js/lab.js", index) == tmp_path / "js" / "lab.js"


def test_prefers_script_linked_from_index(student_repo: Path) -> None:
    write(student_repo / "script.js", "console.log('fallback');")
    write(student_repo / "js" / "lab.js", "console.log('linked');")
    write(student_repo / "index.html", '<script src="https://cdn.x/lib.js"></script><script src="./js/lab.js"></script>')

    assert guess_source_path(student_repo) == student_repo / "js" / "lab.js"


def test_missing_linked_script_falls_back_to_common_names(student_repo: Path) -> None:
    write(student_repo / "index.html", '<script src="gone.js"></script>')
    write(student_repo / "app.js", "console.log('app');")
    write(student_repo / "main.js", "console.log('main');")

    assert guess_source_path(student_repo) == student_repo / "app.js"


def test_any_root_js_excluding_grader_files(student_repo: Path) -> None:
    write(student_repo / "grade.cjs", "// grader")
    write(student_repo / "lab4.js", "console.log('lab');")

    assert guess_source_path(student_repo) == student_repo / "lab4.js"


def test_nothing_found(student_repo: Path) -> None:
    write(student_repo / "grade.cjs", "// grader")
    write(student_repo / "README.md", "# Lab")

    assert guess_source_path(student_repo) is None
    source = locate_submission(student_repo)
    assert not source.found
    assert source.empty


def test_locate_submission_reads_content(student_repo: Path) -> None:
    write(student_repo / "script.js", "const answer = 42;\nconsole.log(answer);\n")

    source = locate_submission(student_repo)

    assert source.found
    assert source.path == "script.js"
    assert "answer" in source.content
    assert not source.empty


def test_locate_submission_flags_comment_only_file(student_repo: Path) -> None:
    write(student_repo / "script.js", "// TODO 1\n// TODO 2\n")

    source = locate_submission(student_repo)

    assert source.found
    assert source.empty


def test_unlistable_repo_reads_as_not_found(student_repo: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def refuse(self):
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "iterdir", refuse)

    assert locate_submission(student_repo) == SourceFile()
