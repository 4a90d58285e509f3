from labgrader.normalizer import compact_whitespace, is_empty_code, strip_comments


def test_strip_comments_removes_block_and_line_comments() -> None:
    code = "/* header\n spanning lines */\nconst a = 1; // trailing\n// whole line\nconst b = 2;"
    cleaned = strip_comments(code)

    assert "header" not in cleaned
    assert "trailing" not in cleaned
    assert "whole line" not in cleaned
    assert "const a = 1;" in cleaned
    assert "const b = 2;" in cleaned


def test_strip_comments_keeps_urls_inside_strings() -> None:
    code = 'const url = "https://example.com/path";'
    assert strip_comments(code) == code


def test_compact_whitespace() -> None:
    assert compact_whitespace("  a \n\n\t b  ") == "a b"


def test_comment_only_file_is_empty() -> None:
    assert is_empty_code("// TODO: write the lab\n/* nothing yet */\n")


def test_three_characters_is_empty() -> None:
    assert is_empty_code("  x;\n\n y ")


def test_ten_characters_is_not_empty() -> None:
    assert not is_empty_code("let a = 1;")


def test_threshold_is_configurable() -> None:
    assert is_empty_code("let a = 1;", threshold=20)
