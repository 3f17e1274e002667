"""mirrordeploy mirror-path command - locate the local mirror of a repo."""

from pathlib import Path

import click
from rich.console import Console

from mirrordeploy.config import DeployerConfig
from mirrordeploy.constants import GIT_MARKER
from mirrordeploy.git import MirrorRepo
from mirrordeploy.mirror import mirror_folder
from mirrordeploy.runner import CommandRunner

console = Console()


@click.command("mirror-path")
@click.argument("identifier")
@click.option("--repo-dir", "local_root_directory", help="Directory holding local mirrors")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Path to config YAML")
def mirror_path(identifier: str, local_root_directory: str | None, config_path: str | None) -> None:
    """Show where IDENTIFIER is mirrored and which remotes it has."""
    root = local_root_directory or DeployerConfig.load(config_path).target.local_root_directory
    folder = mirror_folder(Path(root).expanduser(), identifier)

    click.echo(str(folder))

    if not folder.joinpath(*GIT_MARKER).is_file():
        console.print("[dim]not cloned yet[/dim]")
        return

    for remote in CommandRunner().run(MirrorRepo(folder).list_remotes):
        console.print(f"  [cyan]{remote.name}[/cyan] {remote.url or ''}")
