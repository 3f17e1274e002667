"""Shared data types for mirrordeploy git operations."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RemoteInfo:
    """A named remote configured on a mirror."""

    name: str
    url: str | None
