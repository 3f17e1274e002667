"""MirrorRepo -- git operations on an opened local mirror."""

from collections.abc import Mapping
from pathlib import Path

from mirrordeploy.constants import DEFAULT_GIT_TIMEOUT_SECONDS
from mirrordeploy.git.base import GitRunner
from mirrordeploy.git.types import RemoteInfo
from mirrordeploy.logging import get_logger

logger = get_logger("git.ops")


class MirrorRepo(GitRunner):
    """Handle on a local mirror used for remote management and pushing.

    This is the object handed to deploy customization callbacks, so it
    also exposes a few mutating helpers (tagging, branch checkout).
    """

    def __init__(
        self,
        repo_path: str | Path,
        timeout: int = DEFAULT_GIT_TIMEOUT_SECONDS,
    ) -> None:
        super().__init__(repo_path, timeout=timeout)

    @property
    def dir(self) -> Path:
        """Working directory of the mirror."""
        return self.repo_path

    def remote_url(self, name: str) -> str | None:
        """Get the URL configured for a remote.

        Args:
            name: Remote name

        Returns:
            The remote URL, or None if the remote is not configured
        """
        result = self._run("remote", "get-url", name, check=False)
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def list_remotes(self) -> list[RemoteInfo]:
        """List all remotes with their URLs."""
        result = self._run("remote")
        names = [line.strip() for line in result.stdout.splitlines() if line.strip()]
        return [RemoteInfo(name=name, url=self.remote_url(name)) for name in names]

    def add_remote(self, name: str, url: str) -> None:
        """Add a remote binding.

        Args:
            name: Remote name
            url: Remote URL
        """
        self._run("remote", "add", name, url)
        logger.info(f"Added remote {name} -> {url}")

    def remove_remote(self, name: str) -> None:
        """Remove a remote binding.

        Args:
            name: Remote name
        """
        self._run("remote", "remove", name)
        logger.info(f"Removed remote {name}")

    def pull(self, env: Mapping[str, str] | None = None) -> str:
        """Pull the tracked upstream into the mirror.

        Args:
            env: Extra environment, typically the SSH wrapper's

        Returns:
            Combined git output
        """
        return self._run("pull", env=env).stdout

    def push(
        self,
        remote: str,
        branch: str,
        force: bool = False,
        env: Mapping[str, str] | None = None,
    ) -> str:
        """Push a branch to a remote.

        Args:
            remote: Remote name
            branch: Branch to push
            force: Force push
            env: Extra environment, typically the SSH wrapper's

        Returns:
            Combined git output
        """
        args = ["push", remote, branch]
        if force:
            args.append("--force")
        return self._run(*args, env=env).stdout

    def current_branch(self) -> str:
        """Get the current branch name."""
        result = self._run("rev-parse", "--abbrev-ref", "HEAD")
        return result.stdout.strip()

    def checkout(self, ref: str) -> None:
        """Checkout a branch or commit.

        Args:
            ref: Branch name or commit SHA
        """
        self._run("checkout", ref)
        logger.info(f"Checked out {ref}")

    def tag(self, name: str, ref: str = "HEAD", force: bool = False) -> None:
        """Create a lightweight tag.

        Args:
            name: Tag name
            ref: Ref to tag
            force: Replace an existing tag of the same name
        """
        args = ["tag", name, ref]
        if force:
            args.insert(1, "--force")
        self._run(*args)
        logger.info(f"Tagged {ref} as {name}")
