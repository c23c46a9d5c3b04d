import pytest

from codeowner_reviewers.patterns import PatternSyntaxError, compile_pattern


def test_star_crosses_directories():
    p = compile_pattern("*.go")
    assert p.matches("main.go")
    assert p.matches("lib/util.go")
    assert not p.matches("main.gox")


def test_star_is_not_segment_aware():
    p = compile_pattern("docs/*")
    assert p.matches("docs/a.md")
    assert p.matches("docs/sub/page.md")
    assert not p.matches("x/docs/a.md")


def test_question_mark_matches_one_char():
    p = compile_pattern("file?.txt")
    assert p.matches("file1.txt")
    assert p.matches("file/.txt")
    assert not p.matches("file10.txt")


def test_brackets_are_character_classes():
    p = compile_pattern("file[0-9].txt")
    assert p.matches("file5.txt")
    assert not p.matches("filea.txt")


def test_whole_path_must_match():
    p = compile_pattern("src/api")
    assert p.matches("src/api")
    assert not p.matches("src/api/handler.go")
    assert not p.matches("lib/src/api")


def test_leading_slash_is_literal():
    p = compile_pattern("/docs/*")
    assert not p.matches("docs/a.md")
    assert p.matches("/docs/a.md")


def test_regex_metacharacters_are_not_escaped():
    # '.' keeps its regex meaning
    p = compile_pattern("*.md")
    assert p.matches("READMExmd")
    assert compile_pattern("a+.txt").matches("aaa.txt")


def test_invalid_regex_raises():
    with pytest.raises(PatternSyntaxError):
        compile_pattern("src/(api/*")


def test_compile_is_cached():
    assert compile_pattern("lib/*.py") is compile_pattern("lib/*.py")


def test_trailing_newline_is_not_ignored():
    p = compile_pattern("*.go")
    assert not p.matches("main.go\n")
    assert p.matches("main.go")
