"""Git repository operations."""

from pathlib import Path

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

LOCAL_BRANCH_PREFIX = "refs/heads/"


class GitError(Exception):
    """Git operation error."""


class GitRepo:
    """Git repository operations."""

    def __init__(self, path: Path) -> None:
        """Initialize repository."""
        try:
            self.repo: Repo = Repo(path)
            if self.repo.bare:
                raise GitError("Cannot operate on bare repository")
        except (GitCommandError, ValueError, InvalidGitRepositoryError, NoSuchPathError) as err:
            raise GitError(f"Failed to open repository: {err}") from err

    def list_local_branches(self) -> list[str]:
        """List fully-qualified local branch references in listing order."""
        try:
            refs = self.repo.git.for_each_ref("--format=%(refname)", LOCAL_BRANCH_PREFIX).splitlines()
        except GitCommandError as err:
            raise GitError(f"Failed to read branches: {err}") from err

        return [ref for ref in refs if ref.startswith(LOCAL_BRANCH_PREFIX)]

    def remove_reference(self, reference_name: str) -> None:
        """Remove a reference from the repository.

        Raises:
            GitError: If the reference does not exist or cannot be removed
        """
        try:
            # Verify first so a missing ref is an error rather than a silent no-op
            self.repo.git.rev_parse("--verify", "--quiet", reference_name)
            self.repo.git.update_ref("-d", reference_name)
        except GitCommandError as err:
            raise GitError(f"Failed to delete {reference_name}: {err}") from err

    def head_reference(self) -> str:
        """Get the reference HEAD points to, or an empty string when detached."""
        try:
            if self.repo.head.is_detached:
                return ""
            return self.repo.head.reference.path
        except (GitCommandError, ValueError, TypeError) as err:
            raise GitError(f"Failed to get current branch: {err}") from err
