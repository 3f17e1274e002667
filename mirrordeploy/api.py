"""Process-wide configure-and-deploy convenience API.

    import mirrordeploy.api as mirrordeploy

    mirrordeploy.configure(destination_repo_url="git@bitbucket.org:acme/app.git")
    mirrordeploy.deploy(source_repo_url="git@github.com:acme/app.git")

Call-time overrides passed to ``deploy`` are written into the shared
configuration, so they take precedence for that call and stay in effect
for later ones.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

from mirrordeploy.config import DeployerConfig
from mirrordeploy.deployer import Customizer, Deployer
from mirrordeploy.logging import clear_deploy_context, get_logger, set_deploy_context
from mirrordeploy.runner import CommandRunner

logger = get_logger("api")

_configuration: DeployerConfig | None = None


def configuration() -> DeployerConfig:
    """Return the shared configuration, loading it from disk on first use."""
    global _configuration
    if _configuration is None:
        _configuration = DeployerConfig.load()
    return _configuration


def reset_configuration(
    config: DeployerConfig | None = None, config_path: str | Path | None = None
) -> DeployerConfig:
    """Replace the shared configuration.

    Args:
        config: Configuration to install; loaded from ``config_path`` if None
        config_path: YAML file to load when ``config`` is not given

    Returns:
        The installed configuration
    """
    global _configuration
    _configuration = config if config is not None else DeployerConfig.load(config_path)
    return _configuration


def configure(
    fn: Callable[[DeployerConfig], None] | None = None, **values: Any
) -> DeployerConfig:
    """Update the shared configuration.

    Args:
        fn: Called with the live configuration object
        **values: Flat keys applied with ``DeployerConfig.apply``

    Returns:
        The shared configuration
    """
    config = configuration()
    config.apply(**values)
    if fn is not None:
        fn(config)
    return config


def deploy(
    customize: Customizer | None = None,
    deploy_logger: Any = None,
    **overrides: Any,
) -> bool:
    """Deploy using the shared configuration.

    Args:
        customize: Optional callback run on the mirror before pushing
        deploy_logger: Logger handed to the deployer and runner
        **overrides: Flat configuration keys to set before deploying

    Returns:
        True on success

    Raises:
        ConfigurationError: If the configuration is incomplete
        CommandExecutionError: If git kept failing after retries
    """
    config = configuration()
    config.apply(**overrides)
    target = config.to_target()

    runner = CommandRunner(
        max_attempts=config.retry.max_attempts,
        logger=deploy_logger,
        backoff=config.retry.calculator(),
    )
    deployer = Deployer(
        target,
        runner=runner,
        logger=deploy_logger,
        timeout=config.git.timeout_seconds,
    )

    set_deploy_context(repo=target.local_repo_identifier)
    try:
        logger.info(
            f"Deploying {target.source_repo_url} to {target.destination_repo_url}"
        )
        return deployer.push_app_to_remote(
            remote_name=config.git.remote_name,
            branch=config.git.branch,
            customize=customize,
        )
    finally:
        clear_deploy_context()
