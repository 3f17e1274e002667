"""Local mirror management: where a repo lives on disk and how it is refreshed."""

import shutil
import zlib
from functools import cached_property
from pathlib import Path
from typing import Any

from mirrordeploy.constants import DEFAULT_GIT_TIMEOUT_SECONDS, GIT_MARKER
from mirrordeploy.git import MirrorRepo, run_git
from mirrordeploy.logging import get_logger
from mirrordeploy.runner import CommandRunner
from mirrordeploy.ssh import ephemeral_ssh
from mirrordeploy.types import DeployTarget


def checksum(identifier: str) -> str:
    """Stable folder name for a repo identifier (CRC-32, decimal)."""
    return str(zlib.crc32(identifier.encode("utf-8")))


def mirror_folder(root: str | Path, identifier: str) -> Path:
    """Path of the mirror for ``identifier`` under ``root``, without creating it."""
    return Path(root) / checksum(identifier)


class MirrorManager:
    """Clone-or-pull management of the local mirror for one deploy target."""

    def __init__(
        self,
        target: DeployTarget,
        runner: CommandRunner | None = None,
        logger: Any = None,
        timeout: int = DEFAULT_GIT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the manager.

        Args:
            target: Repositories and credentials for the deploy
            runner: Command runner applying the retry policy
            logger: Object with ``info``/``error`` methods
            timeout: Timeout for each git command in seconds
        """
        self.target = target
        self.logger = logger or get_logger("mirror")
        self.runner = runner or CommandRunner(logger=self.logger)
        self.timeout = timeout

    @cached_property
    def folder(self) -> Path:
        """Mirror directory, created with any missing parents."""
        self.logger.info("setup_folder")
        folder = mirror_folder(self.target.local_root_directory, self.target.local_repo_identifier)
        folder.mkdir(parents=True, exist_ok=True)
        return folder

    @cached_property
    def repo(self) -> MirrorRepo:
        """Up-to-date mirror handle, cloning or pulling on first access."""
        self.logger.info("setup_repo")
        return self.clone_or_pull()

    def exists_locally(self) -> bool:
        """Whether the mirror has already been cloned."""
        return self.folder.joinpath(*GIT_MARKER).is_file()

    def clone_or_pull(self) -> MirrorRepo:
        """Pull into an existing mirror, or clone a fresh one."""
        self.logger.info("clone_or_pull")
        return self.pull() if self.exists_locally() else self.clone()

    update_working_copy = clone_or_pull

    def clone(self) -> MirrorRepo:
        """Clone the source repository into the mirror folder.

        Returns:
            Handle on the new mirror
        """
        self.logger.info(f"cloning {self.target.source_repo_url} to {self.folder}")
        with ephemeral_ssh(self.target.private_key) as wrapper:
            self.runner.run(self._git_clone, wrapper.env)
        return self.open()

    def pull(self) -> MirrorRepo:
        """Pull the source repository into the existing mirror.

        The process working directory is never changed.

        Returns:
            Handle on the refreshed mirror
        """
        self.logger.info(f"pulling from {self.folder}")
        repo = self.open()
        with ephemeral_ssh(self.target.private_key) as wrapper:
            self.runner.run(repo.pull, env=wrapper.env)
        return repo

    def open(self) -> MirrorRepo:
        """Open the mirror folder as a git repository."""
        self.logger.info("git open")
        return MirrorRepo(self.folder, timeout=self.timeout)

    def _git_clone(self, env: dict[str, str]) -> str:
        self._clear_folder()
        result = run_git(
            "clone",
            self.target.source_repo_url,
            str(self.folder),
            env=env,
            timeout=self.timeout,
        )
        return result.stdout

    def _clear_folder(self) -> None:
        # a killed clone leaves a partial .git behind and git refuses non-empty targets
        if any(self.folder.iterdir()):
            self.logger.info(f"clearing leftovers of an interrupted clone in {self.folder}")
            shutil.rmtree(self.folder)
            self.folder.mkdir()
