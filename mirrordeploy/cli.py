"""mirrordeploy command-line interface."""

import click

from mirrordeploy import __version__
from mirrordeploy.commands import deploy, mirror_path


@click.group()
@click.version_option(version=__version__, prog_name="mirrordeploy")
def cli() -> None:
    """mirrordeploy - mirror a git repository and force-push it elsewhere.

    Keeps a local mirror of a source repository and pushes it to a second
    remote such as Bitbucket or Heroku using a temporary SSH key.
    """


cli.add_command(deploy)
cli.add_command(mirror_path)


if __name__ == "__main__":
    cli()
