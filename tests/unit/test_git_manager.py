"""
Unit tests for Git manager
"""

import subprocess

import pytest
from sorty.core.git_manager import GitManager


class TestGitManager:
    """Test Git manager functionality"""

    def test_initialize_repo(self, test_repo):
        """Test Git repository initialization"""
        git_manager = GitManager(test_repo)

        assert git_manager.repo_path == test_repo
        assert git_manager.repo is not None

    def test_invalid_repo(self, tmp_path):
        """Test initialization with invalid repository"""
        non_repo_path = tmp_path / "not_a_repo"
        non_repo_path.mkdir()

        with pytest.raises(ValueError, match="Not a valid Git repository"):
            GitManager(non_repo_path)

    def test_resolve_commit(self, test_repo):
        """Test commit reference resolution"""
        git_manager = GitManager(test_repo)

        # Resolve HEAD
        sha = git_manager.resolve_commit("HEAD")
        assert len(sha) == 40

        # Invalid reference should raise error
        with pytest.raises(ValueError, match="Invalid commit reference"):
            git_manager.resolve_commit("nonexistent")

    def test_get_modified_files(self, test_repo):
        """Test files changed between commits"""
        git_manager = GitManager(test_repo)

        (test_repo / "new.rs").write_text("use x;\n")
        subprocess.run(["git", "add", "new.rs"], cwd=test_repo, capture_output=True)
        subprocess.run(
            ["git", "commit", "-m", "Add new.rs"], cwd=test_repo, capture_output=True
        )

        assert git_manager.get_modified_files("HEAD~1", "HEAD") == ["new.rs"]

    def test_untracked_files_in_subdirectory(self, test_repo):
        """Test untracked Rust files are found below the repository root"""
        git_manager = GitManager(test_repo)

        (test_repo / "src").mkdir()
        (test_repo / "src" / "untracked.rs").write_text("")

        changed = git_manager.get_changed_rust_files("HEAD")

        assert [p.relative_to(git_manager.repo_path).as_posix() for p in changed] == [
            "src/untracked.rs"
        ]

    def test_get_changed_rust_files(self, test_repo):
        """Test modified and untracked Rust files are both returned"""
        git_manager = GitManager(test_repo)

        (test_repo / "lib.rs").write_text("use b;\nuse a;\n")
        (test_repo / "fresh.rs").write_text("")
        (test_repo / "README.md").write_text("Changed")

        changed = git_manager.get_changed_rust_files("HEAD")

        assert [p.name for p in changed] == ["fresh.rs", "lib.rs"]

    def test_deleted_files_are_not_returned(self, test_repo):
        git_manager = GitManager(test_repo)

        (test_repo / "lib.rs").unlink()

        assert git_manager.get_changed_rust_files("HEAD") == []

    def test_invalid_since(self, test_repo):
        git_manager = GitManager(test_repo)

        with pytest.raises(ValueError, match="Invalid commit reference"):
            git_manager.get_changed_rust_files("no-such-ref")
