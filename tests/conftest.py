"""Pytest configuration and fixtures for mirrordeploy tests."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from mirrordeploy.types import DeployTarget

GIT_IDENTITY = ("-c", "user.email=test@test.com", "-c", "user.name=Test")


def run_git(*args: str, cwd: Path | None = None) -> str:
    """Run git command safely without shell=True."""
    result = subprocess.run(
        ["git", *GIT_IDENTITY, *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def commit_file(repo: Path, name: str, content: str) -> str:
    """Write a file, commit it, and return the new commit SHA."""
    (repo / name).write_text(content)
    run_git("add", "-A", cwd=repo)
    run_git("commit", "-q", "-m", f"Add {name}", cwd=repo)
    return run_git("rev-parse", "HEAD", cwd=repo)


@pytest.fixture
def source_repo(tmp_path: Path) -> Path:
    """Create a source repository on master with one commit.

    Returns:
        Path to the source repository
    """
    repo = tmp_path / "source"
    repo.mkdir()
    run_git("init", "-q", "-b", "master", cwd=repo)
    commit_file(repo, "README.md", "# Source Repo")
    return repo


@pytest.fixture
def destination_repo(tmp_path: Path) -> Path:
    """Create an empty bare repository to push into.

    Returns:
        Path to the bare repository
    """
    repo = tmp_path / "destination.git"
    run_git("init", "-q", "--bare", "-b", "master", str(repo))
    return repo


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    """Directory that will hold local mirrors (not created yet)."""
    return tmp_path / "projects" / "mirrors"


@pytest.fixture
def target(source_repo: Path, destination_repo: Path, repo_root: Path) -> DeployTarget:
    """Deploy target wired to the local source and destination repos."""
    return DeployTarget(
        source_repo_url=str(source_repo),
        destination_repo_url=str(destination_repo),
        local_repo_identifier="some_repo",
        private_key=None,
        local_root_directory=repo_root,
    )


@pytest.fixture
def remote_target(tmp_path: Path) -> DeployTarget:
    """Deploy target with remote URLs, for tests that never reach the network."""
    return DeployTarget(
        source_repo_url="git@github.com:g5dev/some_repo.git",
        destination_repo_url="git@bitbucket.org:g5dev/some_repo.git",
        local_repo_identifier="some_repo",
        private_key="this is the value of my key",
        local_root_directory=tmp_path / "my_home" / "projects",
    )


@pytest.fixture
def fake_logger() -> MagicMock:
    """Logger double with the two methods the deployer uses."""
    return MagicMock(spec=["info", "error", "exception"])
