"""Command runner that retries transient git failures.

Every git-touching step of a deploy goes through ``CommandRunner.run``. An
operation is retried only when it fails with a transient execution error;
anything else (bad arguments, filesystem errors, bugs) is re-raised on the
first attempt exactly as it was raised.
"""

import subprocess
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from mirrordeploy.constants import (
    DEFAULT_MAX_ATTEMPTS,
    GIT_OUTPUT_BANNER_END,
    GIT_OUTPUT_BANNER_START,
    FailureKind,
)
from mirrordeploy.exceptions import CommandExecutionError, GitError, TransientExecutionError
from mirrordeploy.logging import get_logger
from mirrordeploy.retry_backoff import RetryBackoffCalculator

T = TypeVar("T")


def classify(error: BaseException) -> FailureKind:
    """Decide whether a failed attempt is worth retrying.

    Args:
        error: Exception raised by the operation

    Returns:
        TRANSIENT for git execution failures, FATAL for everything else
    """
    if isinstance(error, TransientExecutionError):
        return FailureKind.TRANSIENT
    return FailureKind.FATAL


@dataclass(frozen=True)
class Attempt:
    """One failed invocation of an operation."""

    number: int
    kind: FailureKind
    error: BaseException


@dataclass
class RunOutcome(Generic[T]):
    """Result of running an operation under the retry policy."""

    value: T | None = None
    attempts: list[Attempt] = field(default_factory=list)
    succeeded: bool = False

    @property
    def calls(self) -> int:
        """Number of times the operation was invoked."""
        return len(self.attempts) + (1 if self.succeeded else 0)

    @property
    def last_error(self) -> BaseException | None:
        return self.attempts[-1].error if self.attempts else None


class CommandRunner:
    """Run operations with a bounded retry on transient git errors."""

    def __init__(
        self,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        logger: Any = None,
        backoff: RetryBackoffCalculator | None = None,
        classifier: Callable[[BaseException], FailureKind] = classify,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the runner.

        Args:
            max_attempts: Total attempts, including the first one
            logger: Object with ``info``/``error`` methods
            backoff: Delay calculator between attempts (no delay if None)
            classifier: Maps an exception to a FailureKind
            sleep: Sleep function, replaceable in tests
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        self.max_attempts = max_attempts
        self.logger = logger or get_logger("runner")
        self.backoff = backoff
        self.classifier = classifier
        self.sleep = sleep

    def execute(self, operation: Callable[..., T], *args: Any, **kwargs: Any) -> RunOutcome[T]:
        """Invoke ``operation`` until it succeeds or attempts run out.

        Fatal errors are re-raised immediately. Transient errors are
        recorded in the returned outcome instead of being raised.

        Args:
            operation: Callable to invoke
            *args: Positional arguments for the operation
            **kwargs: Keyword arguments for the operation

        Returns:
            RunOutcome describing every failed attempt and the final value
        """
        outcome: RunOutcome[T] = RunOutcome()

        for number in range(1, self.max_attempts + 1):
            try:
                outcome.value = operation(*args, **kwargs)
            except Exception as e:
                kind = self.classifier(e)
                if kind is FailureKind.FATAL:
                    raise
                outcome.attempts.append(Attempt(number=number, kind=kind, error=e))
                self.logger.error(f"git attempt {number}/{self.max_attempts} failed: {e}")
                if number < self.max_attempts and self.backoff is not None:
                    delay = self.backoff.delay_for(number)
                    if delay > 0:
                        self.sleep(delay)
                continue

            outcome.succeeded = True
            return outcome

        return outcome

    def run(self, operation: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Run ``operation`` under the retry policy.

        Args:
            operation: Callable to invoke
            *args: Positional arguments for the operation
            **kwargs: Keyword arguments for the operation

        Returns:
            The operation's return value

        Raises:
            CommandExecutionError: If every attempt failed with a transient error
        """
        name = getattr(operation, "__name__", repr(operation))
        self.logger.info(f"git run command: {name}")

        outcome = self.execute(operation, *args, **kwargs)
        if outcome.succeeded:
            self._log_output(outcome.value)
            return outcome.value  # type: ignore[return-value]

        error = outcome.last_error
        self.logger.error(f"git command {name} failed after {len(outcome.attempts)} attempts: {error}")
        raise CommandExecutionError(
            str(error),
            command=getattr(error, "command", None),
            exit_code=getattr(error, "exit_code", None),
            output=error.output if isinstance(error, GitError) else "",
            attempts=len(outcome.attempts),
        ) from error

    def _log_output(self, result: Any) -> None:
        if isinstance(result, subprocess.CompletedProcess):
            result = result.stdout
        if isinstance(result, str):
            self.logger.info(
                f"Output from git:\n{GIT_OUTPUT_BANNER_START}\n{result}{GIT_OUTPUT_BANNER_END}\n"
            )
