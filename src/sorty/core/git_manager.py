"""
Git operations used to restrict checks to changed files, using GitPython
"""

import logging
from pathlib import Path

from git import Repo

logger = logging.getLogger(__name__)


class GitManager:
    """Thin wrapper over a GitPython repository"""

    def __init__(self, repo_path: str | Path | None = None):
        """
        Initialize Git manager

        Args:
            repo_path: Path inside a Git repository. If None, uses the current directory
        """
        self.repo_path = Path(repo_path) if repo_path else Path.cwd()
        self.repo = None
        self._initialize_repo()

    def _initialize_repo(self) -> None:
        """Initialize Git repository object"""
        try:
            self.repo = Repo(self.repo_path, search_parent_directories=True)
            self.repo_path = Path(self.repo.working_dir)
            logger.debug(f"Initialized Git repository at {self.repo_path}")
        except Exception as e:
            logger.error(f"Failed to initialize Git repository: {e}")
            raise ValueError(f"Not a valid Git repository: {self.repo_path}")

    def resolve_commit(
        self,
        ref: str,
    ) -> str:
        """Resolve a commit reference to full SHA"""
        try:
            commit = self.repo.commit(ref)
            return commit.hexsha
        except Exception as e:
            logger.error(f"Error resolving commit {ref}: {e}")
            raise ValueError(f"Invalid commit reference: {ref}")

    def get_modified_files(
        self,
        from_commit: str,
        to_commit: str | None = None,
    ) -> list[str]:
        """Files changed between two commits, or between a commit and the work tree"""
        commit_from = self.repo.commit(from_commit)
        if to_commit is None:
            diffs = commit_from.diff(None)
        else:
            diffs = commit_from.diff(self.repo.commit(to_commit))

        files = set()
        for diff in diffs:
            # deleted files have nothing left to check
            if diff.change_type != "D" and diff.b_path:
                files.add(diff.b_path)

        return sorted(files)

    def get_changed_rust_files(
        self,
        since: str,
        extensions: list[str] | None = None,
    ) -> list[Path]:
        """Existing Rust files changed since ``since``, including untracked ones"""
        suffixes = set(extensions or [".rs"])
        self.resolve_commit(since)

        changed = set(self.get_modified_files(since))
        changed.update(self.repo.untracked_files)

        paths = []
        for name in sorted(changed):
            path = self.repo_path / name
            if path.suffix in suffixes and path.is_file():
                paths.append(path)

        logger.debug(f"{len(paths)} Rust files changed since {since}")
        return paths
