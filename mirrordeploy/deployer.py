"""Push orchestration: refresh the mirror, rebind the remote, force-push."""

from collections.abc import Callable
from typing import Any

from mirrordeploy.constants import (
    DEFAULT_BRANCH,
    DEFAULT_GIT_TIMEOUT_SECONDS,
    DEFAULT_REMOTE_NAME,
    DeployState,
)
from mirrordeploy.git import MirrorRepo
from mirrordeploy.logging import get_logger
from mirrordeploy.mirror import MirrorManager
from mirrordeploy.runner import CommandRunner
from mirrordeploy.ssh import ephemeral_ssh
from mirrordeploy.types import DeployTarget

Customizer = Callable[[MirrorRepo], None]


class Deployer:
    """Deploys a source repository to a secondary remote through a local mirror.

    Each call to ``push_app_to_remote`` walks the states
    START -> MIRROR_RESOLVED -> REMOTE_RECONFIGURED -> [CUSTOMIZATION_APPLIED]
    -> PUSHED -> DONE, or ends in FAILED when any step raises. Only the
    mirror's on-disk contents survive between calls.
    """

    def __init__(
        self,
        target: DeployTarget,
        runner: CommandRunner | None = None,
        logger: Any = None,
        timeout: int = DEFAULT_GIT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the deployer.

        Args:
            target: Repositories and credentials for the deploy
            runner: Command runner applying the retry policy
            logger: Object with ``info``/``error`` methods
            timeout: Timeout for each git command in seconds
        """
        self.target = target
        self.logger = logger or get_logger("deployer")
        self.runner = runner or CommandRunner(logger=self.logger)
        self.mirror = MirrorManager(target, runner=self.runner, logger=self.logger, timeout=timeout)
        self.state = DeployState.START

    def push_app_to_remote(
        self,
        remote_name: str = DEFAULT_REMOTE_NAME,
        branch: str = DEFAULT_BRANCH,
        customize: Customizer | None = None,
    ) -> bool:
        """Mirror the source repo and force-push ``branch`` to ``remote_name``.

        Args:
            remote_name: Remote to (re)create on the mirror
            branch: Branch to force-push
            customize: Called with the mirror after the remote is bound and
                before the push, e.g. to tag or move branches

        Returns:
            True on success

        Raises:
            CommandExecutionError: If a git step kept failing after retries
        """
        self.logger.info(f"push_app_to_remote {remote_name}")
        self.state = DeployState.START
        try:
            repo = self.mirror.clone_or_pull()
            self.state = DeployState.MIRROR_RESOLVED

            self._rebind_remote(repo, remote_name)
            self.state = DeployState.REMOTE_RECONFIGURED

            if customize is not None:
                customize(repo)
                self.state = DeployState.CUSTOMIZATION_APPLIED

            self.logger.info(
                f"deploying {repo.dir} to {self.target.destination_repo_url} from branch {branch}"
            )
            with ephemeral_ssh(self.target.private_key) as wrapper:
                self.runner.run(repo.push, remote_name, branch, force=True, env=wrapper.env)
            self.state = DeployState.PUSHED
        except BaseException:
            self.state = DeployState.FAILED
            raise

        self.state = DeployState.DONE
        return True

    push_app_to_bitbucket = push_app_to_remote

    def _rebind_remote(self, repo: MirrorRepo, remote_name: str) -> None:
        if self.runner.run(repo.remote_url, remote_name):
            self.runner.run(repo.remove_remote, remote_name)
        self.runner.run(repo.add_remote, remote_name, self.target.destination_repo_url)
