"""Core value types for mirrordeploy."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class DeployTarget(BaseModel):
    """Everything one deploy call needs to know about the repositories.

    Immutable for the lifetime of a deploy.
    """

    model_config = ConfigDict(frozen=True)

    source_repo_url: str = Field(min_length=1)
    destination_repo_url: str = Field(min_length=1)
    local_repo_identifier: str = Field(min_length=1)
    private_key: str | None = Field(default=None, repr=False)
    local_root_directory: Path
