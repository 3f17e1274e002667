"""Mock MirrorRepo with remote tracking and scripted push failures.

Provides MockMirrorRepo for testing the deploy sequence without running
git. Every call is recorded in ``calls`` so tests can assert ordering.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from mirrordeploy.exceptions import TransientExecutionError


class MockMirrorRepo:
    """Mock mirror handle for testing.

    Example:
        repo = MockMirrorRepo(remotes={"bitbucket": "git@elsewhere:old.git"})
        repo.configure(push_failures=2)

        repo.remove_remote("bitbucket")
        repo.add_remote("bitbucket", "git@bitbucket.org:g5dev/some_repo.git")

        repo.push("bitbucket", "master", force=True)  # raises TransientExecutionError
    """

    def __init__(
        self,
        repo_path: str | Path = "/mirrors/1234",
        remotes: dict[str, str] | None = None,
    ) -> None:
        """Initialize mock mirror.

        Args:
            repo_path: Simulated mirror path
            remotes: Initially configured remotes
        """
        self.repo_path = Path(repo_path)
        self.remotes: dict[str, str] = dict(remotes or {})
        self.calls: list[tuple[Any, ...]] = []
        self.pushes: list[dict[str, Any]] = []
        self.tags: dict[str, str] = {}

        self._push_failures = 0

    def configure(self, push_failures: int = 0) -> MockMirrorRepo:
        """Configure mock behavior.

        Args:
            push_failures: Number of pushes that fail before one succeeds

        Returns:
            Self for chaining
        """
        self._push_failures = push_failures
        return self

    @property
    def dir(self) -> Path:
        return self.repo_path

    def remote_url(self, name: str) -> str | None:
        self.calls.append(("remote_url", name))
        return self.remotes.get(name)

    def add_remote(self, name: str, url: str) -> None:
        self.calls.append(("add_remote", name, url))
        if name in self.remotes:
            raise TransientExecutionError(f"error: remote {name} already exists.", exit_code=3)
        self.remotes[name] = url

    def remove_remote(self, name: str) -> None:
        self.calls.append(("remove_remote", name))
        del self.remotes[name]

    def tag(self, name: str, ref: str = "HEAD", force: bool = False) -> None:
        self.calls.append(("tag", name, ref))
        self.tags[name] = ref

    def push(
        self,
        remote: str,
        branch: str,
        force: bool = False,
        env: Mapping[str, str] | None = None,
    ) -> str:
        self.calls.append(("push", remote, branch, force))
        if self._push_failures > 0:
            self._push_failures -= 1
            raise TransientExecutionError(
                "fatal: Could not read from remote repository.",
                command=f"git push {remote} {branch}",
                exit_code=128,
                output="fatal: Could not read from remote repository.\n",
            )
        self.pushes.append(
            {
                "remote": remote,
                "url": self.remotes.get(remote),
                "branch": branch,
                "force": force,
                "env": dict(env or {}),
            }
        )
        return f"To {self.remotes.get(remote)}\n + abc123...def456 {branch} -> {branch} (forced update)\n"
