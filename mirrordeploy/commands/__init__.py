"""mirrordeploy CLI commands."""

from mirrordeploy.commands.deploy import deploy
from mirrordeploy.commands.mirror_path import mirror_path

__all__ = [
    "deploy",
    "mirror_path",
]
