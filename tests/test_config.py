"""Tests for configuration."""

import itertools
from pathlib import Path

import pytest

from gira.config import GiraConfig, InvalidConfigurationError, load_config


@pytest.mark.parametrize(
    ("url", "user", "token"),
    list(itertools.product(["", "atlassian"], ["", "anonymous"], ["", "abc"])),
)
def test_tracker_capable_requires_every_credential(url: str, user: str, token: str) -> None:
    """Test that Jira is only usable with URL, user and token all present."""
    config = GiraConfig(jira_url=url, jira_user=user, jira_token=token)
    assert config.tracker_capable == bool(url and user and token)


def test_defaults() -> None:
    """Test that an empty environment disables Jira without failing."""
    config = load_config()
    assert config.jira_issue_pattern == ""
    assert not config.tracker_capable
    assert config.lookup_workers == 1
    assert config.jira_timeout == 30.0
    assert config.protect_current_branch


def test_reads_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that settings come from GIRA_ environment variables."""
    monkeypatch.setenv("GIRA_JIRA_ISSUE_PATTERN", r"ABC-\d+")
    monkeypatch.setenv("GIRA_JIRA_URL", "https://jira.example.com/")
    monkeypatch.setenv("GIRA_JIRA_USER", "me")
    monkeypatch.setenv("GIRA_JIRA_TOKEN", "t0k3n")

    config = load_config()

    assert config.jira_issue_pattern == r"ABC-\d+"
    assert config.jira_url == "https://jira.example.com"
    assert config.tracker_capable


def test_env_file(tmp_path: Path) -> None:
    """Test loading settings from a custom dotenv file."""
    env_file = tmp_path / "custom.env"
    env_file.write_text("GIRA_JIRA_USER=from-file\nGIRA_LOOKUP_WORKERS=4\n")

    config = load_config(env_file)

    assert config.jira_user == "from-file"
    assert config.lookup_workers == 4


def test_overrides_ignore_none(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that unset CLI overrides leave environment values alone."""
    monkeypatch.setenv("GIRA_LOOKUP_WORKERS", "3")
    assert load_config(lookup_workers=None).lookup_workers == 3
    assert load_config(lookup_workers=8).lookup_workers == 8


def test_missing_env_file(tmp_path: Path) -> None:
    """Test that a missing env file is a configuration error."""
    with pytest.raises(InvalidConfigurationError, match="not found"):
        load_config(tmp_path / "missing.env")


def test_invalid_workers() -> None:
    """Test that validation errors surface as configuration errors."""
    with pytest.raises(InvalidConfigurationError):
        load_config(lookup_workers=0)
