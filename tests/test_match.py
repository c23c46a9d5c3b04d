import logging

from codeowner_reviewers.codeowners_file import parse_codeowners_text
from codeowner_reviewers.ownership import OwnershipIndex, rank_rules


def test_deeper_rule_wins_over_file_order():
    rules = parse_codeowners_text("*.go @go-team\nsrc/api/*.go @api-team")
    idx = OwnershipIndex(rules)
    assert idx.match("src/api/handler.go").owners == ("@api-team",)
    assert idx.match("lib/util.go").owners == ("@go-team",)


def test_ties_keep_file_order():
    rules = parse_codeowners_text("src/* @first\nsrc/*.py @second\n* @root")
    ranked = rank_rules(rules)
    assert [r.owners[0] for r in ranked] == ["@first", "@second", "@root"]
    assert OwnershipIndex(rules).match("src/a.py").owners == ("@first",)


def test_ranking_is_idempotent():
    rules = parse_codeowners_text("* @a\nx/y/z @b\nx/* @c\nq/* @d\nm/n/* @e")
    once = rank_rules(rules)
    assert rank_rules(once) == once


def test_first_match_stops_scan():
    rules = parse_codeowners_text("* @everyone\nsrc/*/*.py @py\nsrc/* @src")
    idx = OwnershipIndex(rules)
    m = idx.match("src/app/main.py")
    assert m.chosen.pattern == "src/*/*.py"
    assert m.matches == [m.chosen]


def test_explain_lists_all_matches_in_rank_order():
    rules = parse_codeowners_text("* @everyone\nsrc/*/*.py @py\nsrc/* @src")
    m = OwnershipIndex(rules).explain("src/app/main.py")
    assert [r.pattern for r in m.matches] == ["src/*/*.py", "src/*", "*"]
    assert m.chosen.pattern == "src/*/*.py"


def test_no_match_returns_none():
    idx = OwnershipIndex(parse_codeowners_text("docs/* @docs"))
    m = idx.match("src/main.py")
    assert m.chosen is None
    assert m.owners == ()


def test_invalid_pattern_is_skipped_not_fatal(caplog):
    rules = parse_codeowners_text("src/(broken/* @bad\n*.py @py")
    with caplog.at_level(logging.WARNING):
        idx = OwnershipIndex(rules)
    assert [r.pattern for r in idx.skipped] == ["src/(broken/*"]
    assert idx.match("src/(broken/a.py").owners == ("@py",)
    assert "skipping rule" in caplog.text
