"""mirrordeploy deploy command - mirror a repository and force-push it."""

import click
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from mirrordeploy import api
from mirrordeploy.config import DeployerConfig
from mirrordeploy.exceptions import ConfigurationError, DeployerError
from mirrordeploy.logging import get_logger, setup_logging
from mirrordeploy.types import DeployTarget

console = Console()
logger = get_logger("deploy")


@click.command()
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Path to config YAML")
@click.option("--source", "source_repo_url", help="Repository to mirror")
@click.option("--destination", "destination_repo_url", help="Repository to push to")
@click.option("--identifier", "local_repo_identifier", help="Local repo identifier (default: source repo name)")
@click.option("--key-file", "private_key_file", type=click.Path(dir_okay=False), help="SSH private key file")
@click.option("--repo-dir", "local_root_directory", help="Directory holding local mirrors")
@click.option("--remote", "remote_name", help="Remote name on the mirror (default: bitbucket)")
@click.option("--branch", "-b", help="Branch to force-push (default: master)")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warn", "error"]),
    default=None,
    help="Override the configured log level",
)
def deploy(
    config_path: str | None,
    source_repo_url: str | None,
    destination_repo_url: str | None,
    local_repo_identifier: str | None,
    private_key_file: str | None,
    local_root_directory: str | None,
    remote_name: str | None,
    branch: str | None,
    log_level: str | None,
) -> None:
    """Mirror a repository locally and force-push it to another remote.

    Examples:

        mirrordeploy deploy --source git@github.com:acme/app.git \\
            --destination git@bitbucket.org:acme/app.git --key-file ~/.ssh/deploy

        mirrordeploy deploy --config deploy.yaml --branch main
    """
    try:
        config = DeployerConfig.load(config_path)
        if log_level:
            config.logging.level = log_level
        setup_logging(
            level=config.logging.level,
            log_dir=config.logging.directory,
            json_output=config.logging.json_output,
        )

        api.reset_configuration(config)
        overrides = {
            "source_repo_url": source_repo_url,
            "destination_repo_url": destination_repo_url,
            "local_repo_identifier": local_repo_identifier,
            "private_key_file": private_key_file,
            "local_root_directory": local_root_directory,
            "remote_name": remote_name,
            "branch": branch,
        }
        api.configure(**overrides)
        target = config.to_target()
        show_deploy_plan(target, config)

        api.deploy()

        console.print(
            f"\n[green]✓[/green] Pushed {config.git.branch} to {config.git.remote_name}"
        )

    except (ConfigurationError, ValidationError) as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise SystemExit(1) from None
    except DeployerError as e:
        logger.exception("Deploy command failed")
        console.print(f"\n[red]Error:[/red] {e}")
        raise SystemExit(1) from None


def show_deploy_plan(target: DeployTarget, config: DeployerConfig) -> None:
    """Print what is about to be deployed.

    Args:
        target: Resolved deploy target
        config: Active configuration
    """
    table = Table(title="Deploy")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Source", target.source_repo_url)
    table.add_row("Destination", target.destination_repo_url)
    table.add_row("Identifier", target.local_repo_identifier)
    table.add_row("Mirrors", str(target.local_root_directory))
    table.add_row("Remote", config.git.remote_name)
    table.add_row("Branch", config.git.branch)
    table.add_row("SSH key", "yes" if target.private_key else "no")

    console.print(table)
