from types import SimpleNamespace

from codeowner_reviewers.codeowners_file import parse_codeowners_text, read_codeowners
from codeowner_reviewers.errors import CodeownersNotFoundError
from codeowner_reviewers.ownership import OwnershipIndex
from codeowner_reviewers.resolve import Assignment, NotFound, assign_reviewers, resolve_reviewers

GO_RULES = "*.go @go-team\nsrc/api/*.go @api-team"


def _reader(text):
    return lambda: (text, ".github/CODEOWNERS")


def test_each_file_uses_its_most_specific_rule():
    result = assign_reviewers(_reader(GO_RULES), ["src/api/handler.go", "lib/util.go"])
    assert isinstance(result, Assignment)
    assert set(result.resolution.reviewers) == {"@api-team", "@go-team"}
    assert result.resolution.files_to_owners == {
        "src/api/handler.go": ("@api-team",),
        "lib/util.go": ("@go-team",),
    }
    assert result.reviewers_output == "@api-team,@go-team"
    assert result.resolution.files_processed == 2
    assert result.resolution.rules_parsed == 2


def test_security_reviewers_are_split_out():
    result = assign_reviewers(
        _reader(GO_RULES), ["src/api/handler.go", "lib/util.go"], security_reviewers=["@go-team"]
    )
    c = result.classification
    assert c.regular == ("@api-team",)
    assert c.security_from_rules == ("@go-team",)
    assert c.security_additional == ()
    # the machine-readable output still lists everyone
    assert result.reviewers_output == "@api-team,@go-team"


def test_empty_or_comment_only_codeowners():
    for text in ("", "# just a comment\n\n# another"):
        result = assign_reviewers(_reader(text), ["a.py", "b/c.go"])
        assert result.resolution.reviewers == ()
        assert result.reviewers_output == ""


def test_unmatched_file_contributes_nothing():
    result = assign_reviewers(_reader(GO_RULES), ["README.md", "lib/util.go"])
    assert result.resolution.reviewers == ("@go-team",)
    assert result.resolution.unmatched_files == ["README.md"]


def test_missing_codeowners_is_a_result_not_an_exception():
    def missing():
        raise CodeownersNotFoundError([".github/CODEOWNERS", "CODEOWNERS"])

    result = assign_reviewers(missing, ["a.py"])
    assert isinstance(result, NotFound)
    assert result.reviewers_output == ""
    assert result.searched == (".github/CODEOWNERS", "CODEOWNERS")
    assert "not found" in result.message


def test_star_matches_nested_paths():
    result = assign_reviewers(_reader("docs/* @docs-team"), ["docs/sub/page.md"])
    assert result.resolution.reviewers == ("@docs-team",)


def test_reviewers_are_deduplicated_across_files():
    index = OwnershipIndex(parse_codeowners_text("*.py @py @lead\ntests/* @qa @lead"))
    res = resolve_reviewers(index, ["a.py", "b.py", "tests/t.txt"])
    assert res.reviewers == ("@py", "@lead", "@qa")


def test_changed_files_may_be_mappings_or_objects():
    index = OwnershipIndex(parse_codeowners_text(GO_RULES))
    res = resolve_reviewers(index, [{"filename": "x.go"}, SimpleNamespace(filename="src/api/y.go")])
    assert res.reviewers == ("@go-team", "@api-team")


def test_bad_pattern_does_not_abort_the_run():
    text = "src/(oops @broken\n*.go @go-team"
    result = assign_reviewers(_reader(text), ["main.go"])
    assert result.resolution.reviewers == ("@go-team",)
    assert result.resolution.skipped_patterns == ["src/(oops"]


def test_custom_message_is_passed_through():
    result = assign_reviewers(_reader(GO_RULES), [], custom_message="hello *there*")
    assert result.custom_message == "hello *there*"
    assert result.resolution.files_processed == 0


def test_bom_prefixed_codeowners_keeps_first_rule(tmp_path):
    (tmp_path / "CODEOWNERS").write_bytes("\ufeff*.go @go-team\n".encode("utf-8"))
    result = assign_reviewers(lambda: read_codeowners(tmp_path), ["main.go"])
    assert result.reviewers_output == "@go-team"
