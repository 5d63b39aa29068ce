"""Tests for the package manager subprocess layer."""

import asyncio
import errno
from unittest.mock import AsyncMock, patch

import pytest

from devboot.errors import ErrorKind
from devboot.execution import CommandResult
from devboot.installer import DependencyInstaller, DependencyManifest
from devboot.installer.dependencies import (
    build_install_command,
    build_uninstall_command,
    manual_install_commands,
)
from devboot.project import PackageManager, resolve_context

from tests.helpers import write_package_json

RUNNER = "devboot.installer.dependencies.run_command_async"


def ok():
    return CommandResult(command="npm install", returncode=0, stdout="added 1 package", stderr="")


def failed(stderr, returncode=1):
    return CommandResult(command="npm install", returncode=returncode, stdout="", stderr=stderr)


class TestCommandTable:
    @pytest.mark.parametrize(
        "manager,dev,expected",
        [
            (PackageManager.NPM, False, ["npm", "install", "--save", "a@^1"]),
            (PackageManager.NPM, True, ["npm", "install", "--save-dev", "a@^1"]),
            (PackageManager.PNPM, False, ["pnpm", "add", "a@^1"]),
            (PackageManager.PNPM, True, ["pnpm", "add", "-D", "a@^1"]),
            (PackageManager.YARN, True, ["yarn", "add", "-D", "a@^1"]),
            (PackageManager.BUN, True, ["bun", "add", "-d", "a@^1"]),
        ],
    )
    def test_install_commands(self, manager, dev, expected):
        assert build_install_command(["a@^1"], dev, manager) == expected

    def test_uninstall_commands(self):
        assert build_uninstall_command(["a"], PackageManager.NPM) == ["npm", "uninstall", "a"]
        assert build_uninstall_command(["a"], PackageManager.YARN) == ["yarn", "remove", "a"]

    def test_manual_install_commands(self):
        manifest = DependencyManifest(runtime={"a": "^1"}, development={"b": "^2"})
        assert manual_install_commands(manifest, PackageManager.PNPM) == [
            "pnpm add 'a@^1'",
            "pnpm add -D 'b@^2'",
        ]


class TestInstall:
    @pytest.mark.asyncio
    async def test_empty_manifest_is_skipped(self, context):
        with patch(RUNNER, new_callable=AsyncMock) as runner:
            result = await DependencyInstaller().install(DependencyManifest(), context)

        runner.assert_not_called()
        assert result.success
        assert result.skipped
        assert result.installed == []

    @pytest.mark.asyncio
    async def test_runtime_completes_before_development_starts(self, context):
        events = []

        async def runner(argv, cwd=None):
            events.append(("start", argv[2]))
            await asyncio.sleep(0.01)
            events.append(("end", argv[2]))
            return ok()

        manifest = DependencyManifest(runtime={"a": "^1"}, development={"b": "^2"})
        with patch(RUNNER, side_effect=runner):
            result = await DependencyInstaller().install(manifest, context)

        assert events == [
            ("start", "--save"),
            ("end", "--save"),
            ("start", "--save-dev"),
            ("end", "--save-dev"),
        ]
        assert result.success
        assert result.installed == ["a@^1", "b@^2"]

    @pytest.mark.asyncio
    async def test_runs_in_project_root(self, context):
        with patch(RUNNER, new_callable=AsyncMock, return_value=ok()) as runner:
            await DependencyInstaller().install(
                DependencyManifest(development={"b": "^2"}), context
            )

        runner.assert_awaited_once_with(
            ["npm", "install", "--save-dev", "b@^2"], cwd=context.root_path
        )

    @pytest.mark.asyncio
    async def test_runtime_failure_stops_development_install(self, context):
        manifest = DependencyManifest(runtime={"a": "^1"}, development={"b": "^2"})
        with patch(
            RUNNER, new_callable=AsyncMock, return_value=failed("npm ERR! code E404")
        ) as runner:
            result = await DependencyInstaller().install(manifest, context)

        assert runner.await_count == 1
        assert not result.success
        assert result.installed == []
        assert result.error.reason == "package-not-found"

    @pytest.mark.asyncio
    async def test_development_failure_keeps_runtime_installed(self, context):
        manifest = DependencyManifest(runtime={"a": "^1"}, development={"b": "^2"})
        with patch(
            RUNNER,
            new_callable=AsyncMock,
            side_effect=[ok(), failed("npm ERR! code ERESOLVE")],
        ):
            result = await DependencyInstaller().install(manifest, context)

        assert not result.success
        assert result.installed == ["a@^1"]
        assert result.error.reason == "resolution-conflict"
        assert "--legacy-peer-deps" in result.error.remediation

    @pytest.mark.asyncio
    async def test_warnings_on_stderr_are_not_failures(self, context):
        with patch(
            RUNNER,
            new_callable=AsyncMock,
            return_value=CommandResult("npm install", 0, "", "npm warning deprecated glob@7"),
        ):
            result = await DependencyInstaller().install(
                DependencyManifest(development={"b": "^2"}), context
            )

        assert result.success

    @pytest.mark.asyncio
    async def test_stderr_without_warning_is_failure(self, context):
        with patch(
            RUNNER,
            new_callable=AsyncMock,
            return_value=CommandResult("npm install", 0, "", "something broke"),
        ):
            result = await DependencyInstaller().install(
                DependencyManifest(development={"b": "^2"}), context
            )

        assert not result.success
        assert result.error.kind == ErrorKind.DEPENDENCY_INSTALL_FAILURE
        assert result.error.reason == "other"


class TestClassification:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "stderr,returncode,reason",
        [
            ("npm ERR! 404 Not Found - GET https://registry.npmjs.org/nope", 1, "package-not-found"),
            ("ERR_PNPM_FETCH_404  GET https://registry.npmjs.org/nope", 1, "package-not-found"),
            ("npm ERR! code ERESOLVE", 1, "resolution-conflict"),
            ("ERR_PNPM_PEER_DEP_ISSUES Unmet peer dependencies", 1, "resolution-conflict"),
            ("npm ERR! getaddrinfo ENOTFOUND registry.npmjs.org", 1, "network-unreachable"),
            ("npm ERR! code EAI_AGAIN", 1, "network-unreachable"),
            ("npm ERR! Error: EACCES: permission denied, mkdir", 1, "permission-denied"),
            ("sh: pnpm: command not found", 127, "executable-not-found"),
            ("", 1, "other"),
        ],
    )
    async def test_command_failures(self, context, stderr, returncode, reason):
        with patch(
            RUNNER,
            new_callable=AsyncMock,
            return_value=failed(stderr, returncode),
        ):
            result = await DependencyInstaller().install(
                DependencyManifest(development={"b": "^2"}), context
            )

        assert result.error.reason == reason
        assert result.error.remediation
        assert result.error.context["packages"] == ["b@^2"]

    @pytest.mark.asyncio
    async def test_missing_executable(self, project_dir):
        write_package_json(project_dir, {"name": "p"})
        (project_dir / "pnpm-lock.yaml").write_text("lockfileVersion: '9.0'\n")
        context = resolve_context(project_dir)

        with patch(
            RUNNER,
            new_callable=AsyncMock,
            side_effect=FileNotFoundError(errno.ENOENT, "No such file", "pnpm"),
        ):
            result = await DependencyInstaller().install(
                DependencyManifest(development={"b": "^2"}), context
            )

        assert result.error.reason == "executable-not-found"
        assert result.error.remediation == "Install pnpm: npm install -g pnpm"
        assert result.error.context["command"] == "pnpm add -D 'b@^2'"

    @pytest.mark.asyncio
    async def test_spawn_network_error(self, context):
        with patch(
            RUNNER,
            new_callable=AsyncMock,
            side_effect=ConnectionRefusedError(errno.ECONNREFUSED, "Connection refused"),
        ):
            result = await DependencyInstaller().install(
                DependencyManifest(development={"b": "^2"}), context
            )

        assert result.error.reason == "network-unreachable"


class TestUninstall:
    @pytest.mark.asyncio
    async def test_uninstall_uses_removal_verb(self, context):
        with patch(RUNNER, new_callable=AsyncMock, return_value=ok()) as runner:
            result = await DependencyInstaller().uninstall(["prettier"], context)

        runner.assert_awaited_once_with(["npm", "uninstall", "prettier"], cwd=context.root_path)
        assert result.success

    @pytest.mark.asyncio
    async def test_uninstall_nothing(self, context):
        with patch(RUNNER, new_callable=AsyncMock) as runner:
            result = await DependencyInstaller().uninstall([], context)

        runner.assert_not_called()
        assert result.skipped
