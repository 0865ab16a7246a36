import textwrap

import pytest

from slack_templates.config import DEFAULT_STORAGE_PATH, _substitute, load_config, slack_token


def test_substitute_replaces_env_var(monkeypatch):
    monkeypatch.setenv("MY_TOKEN", "abc123")
    assert _substitute("${MY_TOKEN}") == "abc123"


def test_substitute_leaves_unknown_var_unchanged():
    result = _substitute("${DEFINITELY_NOT_SET_XYZ}")
    assert result == "${DEFINITELY_NOT_SET_XYZ}"


def test_substitute_handles_nested_dict_and_list(monkeypatch):
    monkeypatch.setenv("TOKEN", "tok")
    data = {"key": "${TOKEN}", "nested": {"inner": ["${TOKEN}", "plain"]}}
    assert _substitute(data) == {"key": "tok", "nested": {"inner": ["tok", "plain"]}}


def test_load_config_parses_yaml_over_defaults(tmp_path, monkeypatch):
    monkeypatch.setenv("TEAM_TOKEN", "xoxp-team")
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(textwrap.dedent("""
        slack:
          token: ${TEAM_TOKEN}
        storage:
          path: /tmp/templates.json
    """))
    config = load_config(cfg_file)
    assert config["slack"]["token"] == "xoxp-team"
    assert config["storage"]["path"] == "/tmp/templates.json"
    assert config["logging"]["level"] == "INFO"
    assert config["export"]["path"].endswith("slack-templates.json")


def test_load_config_without_file_uses_defaults(monkeypatch):
    monkeypatch.setenv("SLACK_TOKEN", "xoxp-env")
    config = load_config(None)
    assert config["storage"]["path"] == DEFAULT_STORAGE_PATH
    assert slack_token(config) == "xoxp-env"


def test_unresolved_token_is_none(monkeypatch):
    monkeypatch.delenv("SLACK_TOKEN", raising=False)
    assert slack_token({"slack": {"token": "${SLACK_TOKEN}"}}) is None
    assert slack_token({}) is None


def test_load_config_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nonexistent.yaml")


def test_load_config_rejects_non_mapping(tmp_path):
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text("- a\n- b\n")
    with pytest.raises(ValueError):
        load_config(cfg_file)
