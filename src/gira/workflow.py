"""Reconcile, select and delete: the pipelines behind the CLI commands."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Optional

from gira.branches import (
    Branch,
    BranchDeletionError,
    compile_issue_pattern,
    delete_selected,
    format_status_report,
    group_by_status,
    load_branches,
    reconcile,
)
from gira.config import ISSUE_PATTERN_ENV, GiraConfig
from gira.git import GitRepo
from gira.jira import JiraClient
from gira.tui import run_selector

logger = logging.getLogger(__name__)

Selector = Callable[[list[Branch]], bool]


@dataclass
class DeleteOutcome:
    """Result of the interactive delete pipeline."""

    success: bool
    cancelled: bool = False
    deleted: list[Branch] = field(default_factory=list)
    message: str = ""


def collect_branches(config: GiraConfig, repo: GitRepo) -> list[Branch]:
    """List local branches and enrich them with Jira statuses.

    Raises:
        InvalidConfigurationError: The issue pattern does not compile
        JiraAuthError: Jira is configured but rejected the credentials
        GitError: Branches could not be listed
    """
    pattern = compile_issue_pattern(config.jira_issue_pattern)

    protected: list[str] = []
    if config.protect_current_branch:
        head = repo.head_reference()
        if head:
            protected.append(head)

    branches = load_branches(repo.list_local_branches(), protected=protected)
    logger.debug("Found %d local branches", len(branches))

    if pattern is None:
        logger.info("%s is not set, skipping issue lookups", ISSUE_PATTERN_ENV)
    elif not config.tracker_capable:
        logger.info("Jira is not configured, skipping issue lookups")

    with JiraClient(config) as client:
        client.authenticate()
        if pattern is not None and client.enabled:
            reconcile(branches, pattern, client, workers=config.lookup_workers)
    return branches


def delete_branches(config: GiraConfig, repo: GitRepo, select: Optional[Selector] = None) -> DeleteOutcome:
    """Run the full reconcile -> select -> delete pipeline.

    Fatal errors (bad pattern, Jira authentication, unreadable repository)
    propagate before anything is deleted. A failed deletion is reported in the
    outcome rather than raised.
    """
    branches = collect_branches(config, repo)
    if not branches:
        return DeleteOutcome(success=True, message="No local branches found")

    if select is None:
        select = run_selector
    cancelled = select(branches)
    if cancelled:
        return DeleteOutcome(success=True, cancelled=True, message="Operation cancelled")

    try:
        deleted = delete_selected(repo, branches)
    except BranchDeletionError as err:
        return DeleteOutcome(success=False, deleted=err.deleted, message=f"Error deleting branch(es): {err}")

    if not deleted:
        return DeleteOutcome(success=True, message="No branches were deleted")
    return DeleteOutcome(success=True, deleted=deleted, message=f"Successfully deleted {len(deleted)} branch(es)")


def status_report(config: GiraConfig, repo: GitRepo) -> str:
    """Return local branches grouped by issue status as plain text."""
    return format_status_report(group_by_status(collect_branches(config, repo)))
