"""Pytest configuration and fixtures."""

import os
import subprocess
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

# Git environment for tests - preserve PATH so git can be found
GIT_ENV = {
    **os.environ,
    "GIT_AUTHOR_NAME": "Test User",
    "GIT_AUTHOR_EMAIL": "test@test.com",
    "GIT_COMMITTER_NAME": "Test User",
    "GIT_COMMITTER_EMAIL": "test@test.com",
}


def git(repo_path: Path, *args: str) -> str:
    """Run git in ``repo_path`` and return stripped stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=repo_path,
        check=True,
        capture_output=True,
        text=True,
        env=GIT_ENV,
    )
    return result.stdout.strip()


@pytest.fixture
def temp_dir() -> Generator[Path]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def run_git() -> Callable[..., str]:
    """Helper for running git commands inside a test repository."""
    return git


@pytest.fixture
def git_repo(temp_dir: Path) -> Generator[Path]:
    """Create a temporary git repository with one commit on ``main``."""
    repo_path = temp_dir / "test-repo"
    repo_path.mkdir()

    git(repo_path, "init", "--initial-branch=main")
    git(repo_path, "config", "user.email", "test@test.com")
    git(repo_path, "config", "user.name", "Test User")
    # Disable GPG signing for test commits
    git(repo_path, "config", "commit.gpgsign", "false")

    # Create initial commit
    (repo_path / "README.md").write_text("# Test Repo\n")
    git(repo_path, "add", ".")
    git(repo_path, "commit", "-m", "Initial commit")

    yield repo_path


@pytest.fixture
def ci_repo(git_repo: Path) -> Path:
    """Repository laid out like a CI checkout.

    ``main`` has two commits, ``origin`` is configured, and
    ``refs/remotes/origin/feature/login`` points at a commit that no local
    branch contains. HEAD is detached at the tip of ``main``.
    """
    git(git_repo, "remote", "add", "origin", "https://example.com/test-repo.git")

    git(git_repo, "checkout", "-q", "-b", "feature/login")
    (git_repo / "login.py").write_text("print('login')\n")
    git(git_repo, "add", ".")
    git(git_repo, "commit", "-m", "Add login")
    feature_sha = git(git_repo, "rev-parse", "HEAD")

    git(git_repo, "checkout", "-q", "main")
    (git_repo / "CHANGELOG.md").write_text("# Changes\n")
    git(git_repo, "add", ".")
    git(git_repo, "commit", "-m", "Add changelog")

    # Keep only the remote-tracking copy of the feature branch
    git(git_repo, "update-ref", "refs/remotes/origin/feature/login", feature_sha)
    git(git_repo, "branch", "-q", "-D", "feature/login")
    git(git_repo, "checkout", "-q", "--detach", "main")

    return git_repo
