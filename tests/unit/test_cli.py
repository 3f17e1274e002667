"""Unit tests for mirrordeploy CLI module."""

from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from mirrordeploy.cli import cli
from mirrordeploy.exceptions import CommandExecutionError
from mirrordeploy.mirror import checksum
from tests.conftest import run_git


class TestCliGroup:
    """Tests for main CLI group."""

    def test_cli_help(self) -> None:
        """Test CLI shows help with all commands."""
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "mirrordeploy" in result.output
        assert "deploy" in result.output
        assert "mirror-path" in result.output

    def test_cli_version(self) -> None:
        """Test CLI shows version."""
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "mirrordeploy" in result.output.lower()


class TestMirrorPath:
    """Tests for the mirror-path command."""

    def test_prints_checksum_folder(self, tmp_path: Path) -> None:
        """Test the mirror folder is printed for an identifier."""
        runner = CliRunner()
        result = runner.invoke(cli, ["mirror-path", "some_repo", "--repo-dir", str(tmp_path)])

        assert result.exit_code == 0
        assert str(tmp_path / checksum("some_repo")) in result.output
        assert "not cloned yet" in result.output

    def test_lists_remotes_of_existing_mirror(self, tmp_path: Path) -> None:
        """Test remotes are listed once the mirror exists."""
        folder = tmp_path / checksum("some_repo")
        folder.mkdir()
        run_git("init", "-q", "-b", "master", cwd=folder)
        run_git("remote", "add", "bitbucket", "git@bitbucket.org:g5dev/some_repo.git", cwd=folder)

        runner = CliRunner()
        result = runner.invoke(cli, ["mirror-path", "some_repo", "--repo-dir", str(tmp_path)])

        assert result.exit_code == 0
        assert "bitbucket" in result.output
        assert "git@bitbucket.org:g5dev/some_repo.git" in result.output


class TestDeployCommand:
    """Tests for the deploy command."""

    def test_missing_source_fails(self, tmp_path: Path) -> None:
        """Test deploy without a source exits with a configuration error."""
        runner = CliRunner()
        result = runner.invoke(cli, ["deploy", "--config", str(tmp_path / "none.yaml")])

        assert result.exit_code == 1
        assert "source_repo_url" in result.output

    def test_deploy_success(self, tmp_path: Path) -> None:
        """Test a successful deploy prints the pushed branch."""
        runner = CliRunner()
        with patch("mirrordeploy.commands.deploy.api.deploy", return_value=True) as deploy:
            result = runner.invoke(
                cli,
                [
                    "deploy",
                    "--config", str(tmp_path / "none.yaml"),
                    "--source", "git@github.com:g5dev/some_repo.git",
                    "--destination", "git@bitbucket.org:g5dev/some_repo.git",
                    "--repo-dir", str(tmp_path),
                    "--branch", "main",
                ],
            )

        assert result.exit_code == 0, result.output
        deploy.assert_called_once_with()
        assert "Pushed main to bitbucket" in result.output

    def test_deploy_git_failure(self, tmp_path: Path) -> None:
        """Test a git failure exits 1 and shows the error."""
        runner = CliRunner()
        error = CommandExecutionError("fatal: Could not read from remote repository.", attempts=3)
        with patch("mirrordeploy.commands.deploy.api.deploy", side_effect=error):
            result = runner.invoke(
                cli,
                [
                    "deploy",
                    "--config", str(tmp_path / "none.yaml"),
                    "--source", "git@github.com:g5dev/some_repo.git",
                    "--destination", "git@bitbucket.org:g5dev/some_repo.git",
                    "--repo-dir", str(tmp_path),
                ],
            )

        assert result.exit_code == 1
        assert "Could not read from remote repository" in result.output

    def test_config_file_values_used(self, tmp_path: Path) -> None:
        """Test values from --config feed the deploy."""
        config_path = tmp_path / "deploy.yaml"
        config_path.write_text(
            "target:\n"
            "  source_repo_url: git@github.com:g5dev/some_repo.git\n"
            "  destination_repo_url: git@heroku.com:some_repo.git\n"
            f"  local_root_directory: {tmp_path}\n"
            "git:\n"
            "  remote_name: heroku\n"
        )

        runner = CliRunner()
        with patch("mirrordeploy.commands.deploy.api.deploy", return_value=True):
            result = runner.invoke(cli, ["deploy", "--config", str(config_path)])

        assert result.exit_code == 0, result.output
        assert "Pushed master to heroku" in result.output

    def test_key_file_overrides_inline_key(self, tmp_path: Path) -> None:
        """Test --key-file wins over a private_key from the config file."""
        config_path = tmp_path / "deploy.yaml"
        config_path.write_text(
            "target:\n"
            "  source_repo_url: git@github.com:g5dev/some_repo.git\n"
            "  destination_repo_url: git@bitbucket.org:g5dev/some_repo.git\n"
            "  private_key: INLINE-KEY\n"
            f"  local_root_directory: {tmp_path}\n"
        )
        key_file = tmp_path / "deploy_key"
        key_file.write_text("FILE-KEY\n")

        runner = CliRunner()
        with patch("mirrordeploy.api.Deployer") as deployer_cls:
            deployer_cls.return_value.push_app_to_remote.return_value = True
            result = runner.invoke(cli, ["deploy", "--config", str(config_path), "--key-file", str(key_file)])

        assert result.exit_code == 0, result.output
        assert deployer_cls.call_args.args[0].private_key == "FILE-KEY\n"
