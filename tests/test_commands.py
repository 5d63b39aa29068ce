"""CLI tests through click's CliRunner."""

import json
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from devboot.commands import cli
from devboot.installer import DependencyInstallResult

DEPENDENCY_INSTALL = "devboot.installer.module_installer.DependencyInstaller.install"


@pytest.fixture
def runner():
    """Create a CliRunner for testing."""
    return CliRunner()


class TestAdd:
    def test_add_without_packages(self, runner, project_dir):
        result = runner.invoke(
            cli, ["add", "prettier", "--no-install", "--path", str(project_dir)]
        )

        assert result.exit_code == 0, result.output
        assert "Prettier configured successfully" in result.output
        assert (project_dir / ".prettierrc.json").exists()
        scripts = json.loads((project_dir / "package.json").read_text())["scripts"]
        assert scripts["format"] == "prettier --write ."

    def test_add_several_with_packages(self, runner, project_dir):
        with patch(
            DEPENDENCY_INSTALL,
            new_callable=AsyncMock,
            return_value=DependencyInstallResult(success=True, installed=["x@1"]),
        ) as install:
            result = runner.invoke(
                cli, ["add", "editorconfig", "eslint", "--verbose", "--path", str(project_dir)]
            )

        assert result.exit_code == 0, result.output
        assert install.await_count == 2
        assert "✨ eslint.config.mjs" in result.output
        assert (project_dir / ".editorconfig").exists()

    def test_dry_run(self, runner, project_dir):
        result = runner.invoke(
            cli, ["add", "typescript", "--dry-run", "--path", str(project_dir)]
        )

        assert result.exit_code == 0, result.output
        assert "Installation Plan: typescript" in result.output
        assert "typescript@^5.8.3 (dev)" in result.output
        assert not (project_dir / "tsconfig.json").exists()

    def test_unknown_capability(self, runner, project_dir):
        result = runner.invoke(cli, ["add", "eslnt", "--path", str(project_dir)])

        assert result.exit_code == 1
        assert "Unknown capability: eslnt" in result.output
        assert "Did you mean: eslint?" in result.output

    def test_already_installed(self, runner, project_dir):
        (project_dir / ".editorconfig").write_text("root = true\n")

        result = runner.invoke(
            cli, ["add", "editorconfig", "--no-install", "--path", str(project_dir)]
        )

        assert result.exit_code == 1
        assert "already exists" in result.output
        assert "--force" in result.output
        assert (project_dir / ".editorconfig").read_text() == "root = true\n"

    def test_conflict_blocks_non_interactive(self, runner, project_dir):
        (project_dir / "biome.json").write_text("{}")

        result = runner.invoke(
            cli, ["add", "eslint", "--no-install", "--path", str(project_dir)]
        )

        assert result.exit_code == 1
        assert "eslint conflicts with installed biome" in result.output
        assert not (project_dir / "eslint.config.mjs").exists()

    def test_conflict_overridden_by_force(self, runner, project_dir):
        (project_dir / "biome.json").write_text("{}")

        result = runner.invoke(
            cli, ["add", "eslint", "--force", "--no-install", "--path", str(project_dir)]
        )

        assert result.exit_code == 0, result.output
        assert (project_dir / "eslint.config.mjs").exists()

    def test_dependency_failure_exit_code(self, runner, project_dir):
        from devboot.errors import ErrorKind, InstallError

        error = InstallError(
            ErrorKind.DEPENDENCY_INSTALL_FAILURE,
            "npm is not installed",
            reason="executable-not-found",
            remediation="Install Node.js from https://nodejs.org",
        )
        with patch(
            DEPENDENCY_INSTALL,
            new_callable=AsyncMock,
            return_value=DependencyInstallResult(success=False, error=error),
        ):
            result = runner.invoke(cli, ["add", "prettier", "--path", str(project_dir)])

        assert result.exit_code == 1
        assert "npm is not installed" in result.output
        assert "packages must be installed manually" in result.output
        assert (project_dir / ".prettierrc.json").exists()

    def test_not_a_project(self, runner, temp_dir):
        result = runner.invoke(cli, ["add", "prettier", "--path", str(temp_dir)])

        assert result.exit_code == 1
        assert "No package.json" in result.output

    def test_settings_skip_install(self, runner, project_dir, temp_dir, monkeypatch):
        settings = temp_dir / "settings.json"
        settings.write_text('{"skip_install": true}')
        monkeypatch.setenv("DEVBOOT_CONFIG", str(settings))

        with patch(DEPENDENCY_INSTALL, new_callable=AsyncMock) as install:
            result = runner.invoke(cli, ["add", "prettier", "--path", str(project_dir)])

        assert result.exit_code == 0, result.output
        install.assert_not_called()

    def test_invalid_settings(self, runner, project_dir, temp_dir, monkeypatch):
        settings = temp_dir / "settings.json"
        settings.write_text('{"colour": "red"}')
        monkeypatch.setenv("DEVBOOT_CONFIG", str(settings))

        result = runner.invoke(cli, ["add", "prettier", "--path", str(project_dir)])

        assert result.exit_code == 1
        assert "Unknown settings" in result.output


class TestList:
    def test_list(self, runner, project_dir):
        (project_dir / "tsconfig.json").write_text("{}")

        result = runner.invoke(cli, ["list", "--path", str(project_dir)])

        assert result.exit_code == 0
        assert "typescript: installed" in result.output
        assert "prettier: not installed" in result.output

    def test_list_verbose(self, runner, project_dir):
        result = runner.invoke(cli, ["list", "--verbose", "--path", str(project_dir)])

        assert result.exit_code == 0
        assert "• eslint (ESLint)" in result.output
        assert "Conflicts with: biome" in result.output


class TestStatus:
    def test_status_groups_by_category(self, runner, project_dir):
        (project_dir / ".husky").mkdir()
        (project_dir / "vitest.config.ts").write_text("export default {};")

        result = runner.invoke(cli, ["status", "--path", str(project_dir)])

        assert result.exit_code == 0
        assert "Testing:" in result.output
        assert "• vitest (vitest.config.ts)" in result.output
        assert "Git:" in result.output

    def test_status_empty(self, runner, project_dir):
        result = runner.invoke(cli, ["status", "--path", str(project_dir)])
        assert "No tooling configurations detected." in result.output


class TestRemove:
    def test_remove(self, runner, project_dir):
        (project_dir / ".editorconfig").write_text("root = true\n")

        result = runner.invoke(cli, ["remove", "editorconfig", "--path", str(project_dir)])

        assert result.exit_code == 0, result.output
        assert not (project_dir / ".editorconfig").exists()

    def test_remove_missing(self, runner, project_dir):
        result = runner.invoke(cli, ["remove", "editorconfig", "--path", str(project_dir)])

        assert result.exit_code == 1
        assert "No EditorConfig configuration files found" in result.output


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output
