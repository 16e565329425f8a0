"""Unit tests for config commands."""

import tomllib
from pathlib import Path

from cleansafe.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


def _config_path(xdg_dirs: dict[str, Path]) -> Path:
    return xdg_dirs["config"] / "cleansafe" / "config.toml"


class TestConfigShow:
    """Tests for config show."""

    def test_defaults(self, xdg_dirs: dict[str, Path]) -> None:
        """Without a file the defaults are shown."""
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "retention_days" in result.output
        assert "30" in result.output
        assert "defaults" in result.output

    def test_reads_file(self, xdg_dirs: dict[str, Path]) -> None:
        """Values from the config file are shown."""
        path = _config_path(xdg_dirs)
        path.parent.mkdir(parents=True)
        path.write_text("retention_days = 7\nuse_trash = false\n")

        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "7" in result.output
        assert "false" in result.output

    def test_invalid_file(self, xdg_dirs: dict[str, Path]) -> None:
        """Schema errors exit 1."""
        path = _config_path(xdg_dirs)
        path.parent.mkdir(parents=True)
        path.write_text("retention_days = 0\n")

        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 1
        assert "Invalid config content" in result.output


class TestConfigInit:
    """Tests for config init."""

    def test_writes_defaults(self, xdg_dirs: dict[str, Path]) -> None:
        """init writes a parsable default config."""
        result = runner.invoke(app, ["config", "init"])

        assert result.exit_code == 0
        data = tomllib.loads(_config_path(xdg_dirs).read_text())
        assert data["retention_days"] == 30

    def test_keeps_existing(self, xdg_dirs: dict[str, Path]) -> None:
        """An existing file is left alone without --force."""
        path = _config_path(xdg_dirs)
        path.parent.mkdir(parents=True)
        path.write_text("retention_days = 7\n")

        result = runner.invoke(app, ["config", "init"])

        assert result.exit_code == 0
        assert "already exists" in result.output
        assert path.read_text() == "retention_days = 7\n"

    def test_force_overwrites(self, xdg_dirs: dict[str, Path]) -> None:
        """--force replaces an existing file."""
        path = _config_path(xdg_dirs)
        path.parent.mkdir(parents=True)
        path.write_text("retention_days = 7\n")

        result = runner.invoke(app, ["config", "init", "--force"])

        assert result.exit_code == 0
        assert tomllib.loads(path.read_text())["retention_days"] == 30
