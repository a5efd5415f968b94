"""Test configuration and fixtures."""

from pathlib import Path
from typing import Generator

import pytest
from git import Actor, Repo

from gira.config import GiraConfig

JIRA_URL = "https://jira.test.com"

BRANCHES = [
    "JIRA-1-done-thing",
    "JIRA-2-in-progress",
    "feature/JIRA-3-later",
    "no-ticket",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep the developer's GIRA_* settings and dotenv files out of tests."""
    for var in (
        "GIRA_JIRA_ISSUE_PATTERN",
        "GIRA_JIRA_URL",
        "GIRA_JIRA_USER",
        "GIRA_JIRA_TOKEN",
        "GIRA_JIRA_TIMEOUT",
        "GIRA_LOOKUP_WORKERS",
        "GIRA_PROTECT_CURRENT_BRANCH",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def jira_config() -> GiraConfig:
    """Create a tracker-capable configuration."""
    return GiraConfig(
        jira_issue_pattern=r"JIRA-\d+",
        jira_url=JIRA_URL,
        jira_user="anonymous",
        jira_token="secret",
    )


@pytest.fixture
def test_env(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a repository with main checked out and a few issue branches.

    Returns:
        Path of the local repository
    """
    local_path = tmp_path / "local"
    local_path.mkdir()
    local_repo = Repo.init(local_path)

    # Set up git config
    author = Actor("Test User", "test@example.com")
    local_repo.config_writer().set_value("user", "name", author.name).release()
    local_repo.config_writer().set_value("user", "email", author.email).release()

    # Create initial commit and make sure it lives on main
    readme = local_path / "README.md"
    readme.write_text("# Test Repository")
    local_repo.index.add(["README.md"])
    local_repo.index.commit("Initial commit", author=author)
    if "main" not in local_repo.heads:
        local_repo.create_head("main")
    main_branch = local_repo.heads.main
    main_branch.checkout()

    for name in BRANCHES:
        local_repo.create_head(name, "main")

    # A remote-tracking ref that must never be listed as a local branch
    local_repo.git.update_ref("refs/remotes/origin/JIRA-9-remote", "HEAD")

    # Remove whatever default branch init created if it isn't main
    for head in list(local_repo.heads):
        if head.name not in BRANCHES and head.name != "main":
            local_repo.delete_head(head, force=True)

    yield local_path
