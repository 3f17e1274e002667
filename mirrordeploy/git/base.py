"""GitRunner base class -- low-level git command execution."""

import os
import subprocess
from collections.abc import Mapping
from pathlib import Path

from mirrordeploy.constants import DEFAULT_GIT_TIMEOUT_SECONDS
from mirrordeploy.exceptions import GitError, TransientExecutionError
from mirrordeploy.logging import get_logger

logger = get_logger("git.base")

# Inherited values would point git at some other work tree
_STRIPPED_ENV_VARS = ("GIT_WORK_TREE", "GIT_DIR")


def git_env(extra: Mapping[str, str] | None = None) -> dict[str, str]:
    """Build the environment for a git subprocess.

    Starts from a copy of the current process environment, so callers
    never need to touch ``os.environ`` themselves.

    Args:
        extra: Variables to add, e.g. the SSH wrapper's ``GIT_SSH``

    Returns:
        Environment mapping for ``subprocess.run``
    """
    env = {k: v for k, v in os.environ.items() if k not in _STRIPPED_ENV_VARS}
    if extra:
        env.update(extra)
    return env


def run_git(
    *args: str,
    env: Mapping[str, str] | None = None,
    check: bool = True,
    timeout: int = DEFAULT_GIT_TIMEOUT_SECONDS,
) -> subprocess.CompletedProcess[str]:
    """Run a git command with stderr folded into stdout.

    Args:
        *args: Git command arguments
        env: Extra environment variables for the child process
        check: Whether to raise on non-zero exit
        timeout: Timeout in seconds

    Returns:
        Completed process result; ``stdout`` holds the combined output

    Raises:
        TransientExecutionError: If the command fails (when check=True) or times out
    """
    cmd = ["git", *args]
    command = " ".join(cmd)
    logger.debug(f"Running: {command}")

    try:
        result = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            env=git_env(env),
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        # partial output arrives as bytes even with text=True
        partial = e.output or ""
        if isinstance(partial, bytes):
            partial = partial.decode("utf-8", errors="replace")
        raise TransientExecutionError(
            f"Git command timed out after {timeout}s: {' '.join(args)}",
            command=command,
            exit_code=-1,
            output=partial,
        ) from e

    if check and result.returncode != 0:
        output = result.stdout or ""
        raise TransientExecutionError(
            f"Git command failed: {output.strip() or command}",
            command=command,
            exit_code=result.returncode,
            output=output,
        )
    return result


class GitRunner:
    """Git command runner bound to one repository directory.

    Provides the subprocess execution layer used by ``MirrorRepo``.
    """

    def __init__(
        self,
        repo_path: str | Path,
        timeout: int = DEFAULT_GIT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize git runner.

        Args:
            repo_path: Path to the git repository
            timeout: Default timeout for each git command

        Raises:
            GitError: If the path is not a git repository
        """
        self.repo_path = Path(repo_path).resolve()
        self.timeout = timeout
        self._validate_repo()

    def _validate_repo(self) -> None:
        """Validate that repo_path is a git repository."""
        if not (self.repo_path / ".git").exists():
            raise GitError(
                f"Not a git repository: {self.repo_path}",
                details={"path": str(self.repo_path)},
            )

    def _run(
        self,
        *args: str,
        check: bool = True,
        env: Mapping[str, str] | None = None,
        timeout: int | None = None,
    ) -> subprocess.CompletedProcess[str]:
        """Run a git command inside the repository.

        Args:
            *args: Git command arguments
            check: Whether to raise on non-zero exit
            env: Extra environment variables for the child process
            timeout: Timeout in seconds, defaults to the runner's timeout

        Returns:
            Completed process result
        """
        return run_git(
            "-C",
            str(self.repo_path),
            *args,
            env=env,
            check=check,
            timeout=timeout or self.timeout,
        )
