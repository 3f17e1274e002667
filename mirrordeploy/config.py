"""mirrordeploy configuration management using Pydantic."""

from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ConfigDict, Field

from mirrordeploy.constants import (
    DEFAULT_BRANCH,
    DEFAULT_CONFIG_PATH,
    DEFAULT_GIT_TIMEOUT_SECONDS,
    DEFAULT_LOG_DIR,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_REMOTE_NAME,
    DEFAULT_REPO_ROOT,
)
from mirrordeploy.exceptions import ConfigurationError
from mirrordeploy.retry_backoff import RetryBackoffCalculator
from mirrordeploy.types import DeployTarget


def derive_identifier(repo_url: str) -> str:
    """Derive a repo identifier from its URL.

    ``git@github.com:g5/some_repo.git`` and
    ``https://github.com/g5/some_repo`` both give ``some_repo``.
    """
    name = repo_url.rstrip("/").rsplit("/", 1)[-1].rsplit(":", 1)[-1]
    return name.removesuffix(".git")


class TargetConfig(BaseModel):
    """Source and destination of the mirror."""

    model_config = ConfigDict(validate_assignment=True)

    source_repo_url: str | None = None
    destination_repo_url: str | None = None
    local_repo_identifier: str | None = None
    private_key: str | None = Field(default=None, repr=False)
    private_key_file: str | None = None
    local_root_directory: str = DEFAULT_REPO_ROOT


class RetryConfig(BaseModel):
    """Retry policy for transient git failures."""

    model_config = ConfigDict(validate_assignment=True)

    max_attempts: int = Field(default=DEFAULT_MAX_ATTEMPTS, ge=1, le=10)
    backoff_strategy: str = Field(default="fixed", pattern="^(exponential|linear|fixed)$")
    backoff_base_seconds: float = Field(default=0, ge=0, le=600)
    backoff_max_seconds: float = Field(default=30, ge=0, le=3600)

    def calculator(self) -> RetryBackoffCalculator:
        """Build the backoff calculator for this policy."""
        return RetryBackoffCalculator(
            strategy=self.backoff_strategy,
            base_seconds=self.backoff_base_seconds,
            max_seconds=self.backoff_max_seconds,
        )


class GitSettings(BaseModel):
    """Remote and branch used when pushing."""

    model_config = ConfigDict(validate_assignment=True)

    remote_name: str = Field(default=DEFAULT_REMOTE_NAME, min_length=1)
    branch: str = Field(default=DEFAULT_BRANCH, min_length=1)
    timeout_seconds: int = Field(default=DEFAULT_GIT_TIMEOUT_SECONDS, ge=1, le=3600)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="info", pattern="^(debug|info|warn|error)$")
    directory: str = DEFAULT_LOG_DIR
    json_output: bool = False


class DeployerConfig(BaseModel):
    """Complete mirrordeploy configuration."""

    target: TargetConfig = Field(default_factory=TargetConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    git: GitSettings = Field(default_factory=GitSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> "DeployerConfig":
        """Load configuration from YAML file.

        Args:
            config_path: Path to config file. Defaults to .mirrordeploy/config.yaml

        Returns:
            DeployerConfig instance
        """
        config_path = Path(DEFAULT_CONFIG_PATH) if config_path is None else Path(config_path)

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DeployerConfig":
        """Create configuration from dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            DeployerConfig instance
        """
        return cls(**data)

    def save(self, config_path: str | Path | None = None) -> None:
        """Save configuration to YAML file.

        Args:
            config_path: Path to save config. Defaults to .mirrordeploy/config.yaml
        """
        config_path = Path(DEFAULT_CONFIG_PATH) if config_path is None else Path(config_path)

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary.

        Returns:
            Configuration as dictionary
        """
        return self.model_dump()

    def apply(self, **values: Any) -> None:
        """Set flat keys on whichever section owns them.

        ``apply(source_repo_url=..., branch=...)`` updates ``target`` and
        ``git`` respectively. None values are ignored. Setting one key source
        (``private_key`` or ``private_key_file``) clears the other.

        Raises:
            ConfigurationError: If a key belongs to no section
        """
        sections = (self.target, self.git, self.retry)
        for key, value in values.items():
            if value is None:
                continue
            if key == "private_key_file":
                self.target.private_key = None
            elif key == "private_key":
                self.target.private_key_file = None
            for section in sections:
                if key in type(section).model_fields:
                    setattr(section, key, value)
                    break
            else:
                raise ConfigurationError(f"Unknown configuration key: {key}", field=key)

    def private_key(self) -> str | None:
        """Resolve the private key from inline text or a key file."""
        if self.target.private_key:
            return self.target.private_key
        if self.target.private_key_file:
            key_path = Path(self.target.private_key_file).expanduser()
            if not key_path.is_file():
                raise ConfigurationError(
                    f"Private key file not found: {key_path}", field="private_key_file"
                )
            return key_path.read_text()
        return None

    def to_target(self) -> DeployTarget:
        """Build the immutable deploy target.

        Raises:
            ConfigurationError: If a required field is missing
        """
        source = self.target.source_repo_url
        if not source:
            raise ConfigurationError("source_repo_url must be set", field="source_repo_url")
        destination = self.target.destination_repo_url
        if not destination:
            raise ConfigurationError(
                "destination_repo_url must be set", field="destination_repo_url"
            )

        identifier = self.target.local_repo_identifier or derive_identifier(source)
        if not identifier:
            raise ConfigurationError(
                f"Cannot derive a repo identifier from {source}; set local_repo_identifier",
                field="local_repo_identifier",
            )

        return DeployTarget(
            source_repo_url=source,
            destination_repo_url=destination,
            local_repo_identifier=identifier,
            private_key=self.private_key(),
            local_root_directory=Path(self.target.local_root_directory).expanduser(),
        )
