"""mirrordeploy constants and enumerations."""

from enum import Enum

DEFAULT_REMOTE_NAME = "bitbucket"
DEFAULT_BRANCH = "master"

# One try plus two retries
DEFAULT_MAX_ATTEMPTS = 3

DEFAULT_GIT_TIMEOUT_SECONDS = 300

STATE_DIR = ".mirrordeploy"
DEFAULT_CONFIG_PATH = f"{STATE_DIR}/config.yaml"
DEFAULT_LOG_DIR = f"{STATE_DIR}/logs"
DEFAULT_REPO_ROOT = f"~/{STATE_DIR}/repos"

# Existence of this file inside a mirror folder means it was already cloned
GIT_MARKER = (".git", "config")

SSH_WRAPPER_PREFIX = "git-ssh-wrapper-"

GIT_OUTPUT_BANNER_START = "↓####### GIT ########↓"
GIT_OUTPUT_BANNER_END = "↑##### END GIT ######↑"


class DeployState(Enum):
    """Progress of a single deploy call."""

    START = "start"
    MIRROR_RESOLVED = "mirror_resolved"
    REMOTE_RECONFIGURED = "remote_reconfigured"
    CUSTOMIZATION_APPLIED = "customization_applied"
    PUSHED = "pushed"
    DONE = "done"
    FAILED = "failed"


class FailureKind(Enum):
    """How the command runner treats a failed attempt."""

    TRANSIENT = "transient"
    FATAL = "fatal"
