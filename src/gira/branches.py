"""Branch view model, issue reconciliation and batch deletion."""

import logging
import re
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, Protocol

from gira.config import ISSUE_PATTERN_ENV, InvalidConfigurationError
from gira.git import LOCAL_BRANCH_PREFIX, GitError
from gira.jira import IssueLookupError

logger = logging.getLogger(__name__)

NO_ISSUE_LABEL = f"Not following {ISSUE_PATTERN_ENV}"


class IssueSource(Protocol):
    def fetch(self, key: str) -> tuple[str, str]: ...


class ReferenceStore(Protocol):
    def remove_reference(self, reference_name: str) -> None: ...


@dataclass
class Branch:
    """A local branch under consideration for deletion."""

    reference_name: str
    issue_status: str = ""
    selected: bool = False
    protected: bool = False

    @property
    def display_name(self) -> str:
        return display_name(self.reference_name)


class BranchDeletionError(Exception):
    """Deleting a selected branch failed; later branches were left untouched."""

    def __init__(self, branch: Branch, deleted: list[Branch], cause: GitError) -> None:
        super().__init__(f"Failed to delete {branch.display_name}: {cause}")
        self.branch = branch
        self.deleted = deleted
        self.cause = cause


def display_name(reference_name: str) -> str:
    """Strip the local branch prefix from a reference name."""
    if reference_name.startswith(LOCAL_BRANCH_PREFIX):
        return reference_name[len(LOCAL_BRANCH_PREFIX) :]
    return reference_name


def compile_issue_pattern(pattern: Optional[str]) -> Optional[re.Pattern[str]]:
    """Compile the issue key pattern once per run.

    An empty pattern disables extraction rather than being an error.

    Raises:
        InvalidConfigurationError: If the pattern is not a valid regular expression
    """
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as err:
        raise InvalidConfigurationError(f"Invalid {ISSUE_PATTERN_ENV} {pattern!r}: {err}") from err


def extract_issue_key(name: str, pattern: Optional[re.Pattern[str]]) -> str:
    """Return the first substring of name matching pattern, or an empty string."""
    if pattern is None:
        return ""
    match = pattern.search(name)
    return match.group(0) if match else ""


def load_branches(reference_names: Iterable[str], protected: Iterable[str] = ()) -> list[Branch]:
    """Create one Branch per local reference, keeping listing order."""
    protected = set(protected)
    branches: list[Branch] = []
    seen: set[str] = set()
    for ref in reference_names:
        if not ref.startswith(LOCAL_BRANCH_PREFIX) or ref in seen:
            continue
        seen.add(ref)
        branches.append(Branch(reference_name=ref, protected=ref in protected))
    return branches


def _lookup(client: IssueSource, key: str) -> str:
    _, status = client.fetch(key)
    return status


def reconcile(
    branches: list[Branch],
    pattern: Optional[re.Pattern[str]],
    client: IssueSource,
    workers: int = 1,
) -> list[Branch]:
    """Enrich branches in place with the status of their correlated issue.

    A failed lookup only leaves that branch's status empty. With workers > 1
    lookups run concurrently, but each branch is written exactly once from
    the calling thread.
    """
    pending: list[tuple[Branch, str]] = []
    for branch in branches:
        key = extract_issue_key(branch.display_name, pattern)
        if key:
            pending.append((branch, key))
        else:
            logger.debug("No issue key in %s", branch.display_name)

    if workers > 1 and len(pending) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [(branch, executor.submit(_lookup, client, key)) for branch, key in pending]
            for branch, future in futures:
                try:
                    status = future.result()
                except IssueLookupError as err:
                    logger.warning("Error requesting Jira information: %s", err)
                    continue
                branch.issue_status = status
    else:
        for branch, key in pending:
            try:
                status = _lookup(client, key)
            except IssueLookupError as err:
                logger.warning("Error requesting Jira information: %s", err)
                continue
            branch.issue_status = status

    for branch, key in pending:
        logger.debug("%s (%s) -> %s", branch.display_name, key, branch.issue_status or "(no status)")
    return branches


def group_by_status(branches: Iterable[Branch]) -> dict[Optional[str], list[Branch]]:
    """Bucket branches by exact issue status; branches without one go under None."""
    groups: dict[Optional[str], list[Branch]] = {}
    for branch in branches:
        groups.setdefault(branch.issue_status or None, []).append(branch)
    return groups


def format_status_report(groups: dict[Optional[str], list[Branch]]) -> str:
    """Render grouped branches as plain text."""
    lines: list[str] = []
    for status, members in groups.items():
        heading = status if status is not None else NO_ISSUE_LABEL
        lines.append(heading)
        lines.append("-" * len(heading))
        lines.extend(branch.display_name for branch in members)
        lines.append("")
    return "\n".join(lines) + "\n"


def delete_selected(store: ReferenceStore, branches: Iterable[Branch]) -> list[Branch]:
    """Remove every selected branch, in listing order, stopping at the first failure.

    Returns:
        The branches that were deleted

    Raises:
        BranchDeletionError: On the first failed removal; earlier removals stay
    """
    deleted: list[Branch] = []
    for branch in branches:
        if not branch.selected:
            continue
        try:
            store.remove_reference(branch.reference_name)
        except GitError as err:
            raise BranchDeletionError(branch, deleted, err) from err
        logger.info("Deleted %s", branch.display_name)
        deleted.append(branch)
    return deleted
