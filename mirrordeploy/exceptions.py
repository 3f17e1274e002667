"""mirrordeploy exception hierarchy."""

from typing import Any


class DeployerError(Exception):
    """Base exception for all mirrordeploy errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigurationError(DeployerError):
    """Error in deployer configuration."""

    def __init__(
        self, message: str, field: str | None = None, details: dict[str, Any] | None = None
    ) -> None:
        super().__init__(message, details)
        self.field = field


class CredentialError(DeployerError):
    """Private key material could not be used."""

    pass


class GitError(DeployerError):
    """Error in git operations."""

    def __init__(
        self,
        message: str,
        command: str | None = None,
        exit_code: int | None = None,
        output: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.command = command
        self.exit_code = exit_code
        self.output = output


class TransientExecutionError(GitError):
    """A git command failed in a way worth retrying."""

    pass


class CommandExecutionError(GitError):
    """A git command kept failing after every retry."""

    def __init__(
        self,
        message: str,
        command: str | None = None,
        exit_code: int | None = None,
        output: str = "",
        attempts: int = 1,
    ) -> None:
        super().__init__(
            message,
            command=command,
            exit_code=exit_code,
            output=output,
            details={"attempts": attempts},
        )
        self.attempts = attempts
