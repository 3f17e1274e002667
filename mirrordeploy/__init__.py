"""mirrordeploy - mirror a git repository and force-push it to another remote."""

__version__ = "0.4.0"

from mirrordeploy.constants import DeployState
from mirrordeploy.deployer import Deployer
from mirrordeploy.exceptions import (
    CommandExecutionError,
    ConfigurationError,
    DeployerError,
    TransientExecutionError,
)
from mirrordeploy.mirror import MirrorManager, checksum
from mirrordeploy.runner import CommandRunner
from mirrordeploy.ssh import ephemeral_ssh, with_ephemeral_ssh
from mirrordeploy.types import DeployTarget

__all__ = [
    "__version__",
    "DeployState",
    "DeployTarget",
    "Deployer",
    "MirrorManager",
    "CommandRunner",
    "checksum",
    "ephemeral_ssh",
    "with_ephemeral_ssh",
    # Errors
    "DeployerError",
    "ConfigurationError",
    "TransientExecutionError",
    "CommandExecutionError",
]
