import pytest

from codeowner_reviewers.config import ReviewerConfig, load_config, parse_config_obj, parse_security_reviewers
from codeowner_reviewers.errors import ConfigError


def test_security_reviewers_from_comma_string():
    assert parse_security_reviewers(" @a, @org/sec ,, @a ", source="input") == ("@a", "@org/sec", "@a")
    assert parse_security_reviewers("", source="input") == ()
    assert parse_security_reviewers(None, source="input") == ()


def test_security_reviewers_rejects_other_types():
    with pytest.raises(ConfigError):
        parse_security_reviewers(42, source="cfg")


def test_load_config_yaml(tmp_path):
    p = tmp_path / "cfg.yml"
    p.write_text(
        "codeowners_path: docs/CODEOWNERS\n"
        "custom_message: Be kind\n"
        "security_reviewers:\n"
        "  - '@sec'\n"
        "  - '@org/security'\n",
        encoding="utf-8",
    )
    cfg = load_config(p)
    assert cfg == ReviewerConfig(
        codeowners_path="docs/CODEOWNERS",
        custom_message="Be kind",
        security_reviewers=("@sec", "@org/security"),
    )


def test_missing_config_file_gives_defaults(tmp_path):
    cfg = load_config(tmp_path / "absent.yml")
    assert cfg == ReviewerConfig()
    assert cfg.codeowners_path == ".github/CODEOWNERS"


def test_unknown_keys_are_rejected():
    with pytest.raises(ConfigError):
        parse_config_obj({"reviewers": ["@a"]}, source="cfg.yml")


def test_invalid_yaml_raises_config_error(tmp_path):
    p = tmp_path / "cfg.yml"
    p.write_text("security_reviewers: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(p)


def test_override_ignores_empty_inputs():
    base = ReviewerConfig(codeowners_path="CODEOWNERS", security_reviewers=("@sec",))
    assert base.override(codeowners_path="", custom_message="", security_reviewers="") == base
    cfg = base.override(codeowners_path=" .gitlab/CODEOWNERS ", security_reviewers="@x,@y")
    assert cfg.codeowners_path == ".gitlab/CODEOWNERS"
    assert cfg.security_reviewers == ("@x", "@y")
