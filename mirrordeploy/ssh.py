"""Ephemeral SSH credentials for git network operations.

A private key is written to a private temporary directory together with a
small wrapper script that forces ``ssh`` to use that key without prompting.
Git is pointed at the wrapper through ``GIT_SSH_COMMAND`` and ``GIT_SSH`` in
the environment handed to each subprocess. ``GIT_SSH_COMMAND`` outranks an
inherited ``core.sshCommand`` or ``GIT_SSH``. ``os.environ`` is never
modified. Both files are removed when the scope exits, whether the wrapped
operation succeeded or raised.
"""

import os
import shlex
import shutil
import tempfile
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeVar

from mirrordeploy.constants import SSH_WRAPPER_PREFIX
from mirrordeploy.exceptions import CredentialError
from mirrordeploy.logging import get_logger

logger = get_logger("ssh")

T = TypeVar("T")

SSH_OPTIONS = (
    "-o IdentitiesOnly=yes "
    "-o StrictHostKeyChecking=no "
    "-o UserKnownHostsFile=/dev/null "
    "-o BatchMode=yes "
    "-o LogLevel=ERROR"
)

WRAPPER_TEMPLATE = """#!/bin/sh
exec ssh -o IdentityFile={key} {options} "$@"
"""


@dataclass(frozen=True)
class SshWrapper:
    """Paths and environment for one ephemeral SSH identity."""

    key_path: Path | None = None
    wrapper_path: Path | None = None
    env: dict[str, str] = field(default_factory=dict)

    @property
    def git_ssh(self) -> str:
        """Command prefix form, e.g. ``GIT_SSH=/tmp/.../ssh-wrapper``."""
        if "GIT_SSH" not in self.env:
            return ""
        return f"GIT_SSH={shlex.quote(self.env['GIT_SSH'])}"

    @property
    def active(self) -> bool:
        """Whether a key is in use."""
        return self.wrapper_path is not None


def _write_private(path: Path, content: str, mode: int) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, mode)
    with os.fdopen(fd, "w") as f:
        f.write(content)
    os.chmod(path, mode)


@contextmanager
def ephemeral_ssh(private_key: str | None) -> Iterator[SshWrapper]:
    """Provide an SSH wrapper for the duration of a ``with`` block.

    Args:
        private_key: PEM/OpenSSH private key text, or None for no override

    Yields:
        SshWrapper whose ``env`` should be passed to git subprocesses

    Raises:
        CredentialError: If the key material is empty
    """
    if private_key is None:
        yield SshWrapper()
        return

    if not private_key.strip():
        raise CredentialError("Private key material is empty")

    workdir = Path(tempfile.mkdtemp(prefix=SSH_WRAPPER_PREFIX))
    try:
        key_path = workdir / "id_rsa"
        wrapper_path = workdir / "ssh-wrapper"

        # ssh rejects keys without a trailing newline
        key_text = private_key if private_key.endswith("\n") else private_key + "\n"
        _write_private(key_path, key_text, 0o600)
        _write_private(
            wrapper_path,
            WRAPPER_TEMPLATE.format(key=shlex.quote(str(key_path)), options=SSH_OPTIONS),
            0o700,
        )
        logger.debug(f"Created ssh wrapper in {workdir}")

        yield SshWrapper(
            key_path=key_path,
            wrapper_path=wrapper_path,
            env={
                "GIT_SSH": str(wrapper_path),
                # parsed by a shell, unlike GIT_SSH
                "GIT_SSH_COMMAND": shlex.quote(str(wrapper_path)),
            },
        )
    finally:
        shutil.rmtree(workdir)
        logger.debug(f"Removed ssh wrapper in {workdir}")


def with_ephemeral_ssh(private_key: str | None, operation: Callable[[SshWrapper], T]) -> T:
    """Run ``operation`` with a freshly created SSH wrapper.

    Args:
        private_key: Private key text, or None for no override
        operation: Callable receiving the SshWrapper

    Returns:
        Whatever ``operation`` returns
    """
    with ephemeral_ssh(private_key) as wrapper:
        return operation(wrapper)
