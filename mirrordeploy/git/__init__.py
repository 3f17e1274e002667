"""mirrordeploy git package -- subprocess-backed git operations.

Re-exports core classes for convenient access:
    from mirrordeploy.git import GitRunner, MirrorRepo, run_git
"""

from mirrordeploy.git.base import GitRunner, git_env, run_git
from mirrordeploy.git.ops import MirrorRepo
from mirrordeploy.git.types import RemoteInfo

__all__ = [
    "GitRunner",
    "MirrorRepo",
    "RemoteInfo",
    "git_env",
    "run_git",
]
