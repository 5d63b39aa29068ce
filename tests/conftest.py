"""Pytest fixtures for devboot tests."""

import tempfile
from pathlib import Path
from typing import Generator

import pytest

from devboot.installer import InstallOptions
from devboot.project import ProjectContext, resolve_context

from tests.helpers import write_package_json


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep user settings and CI detection out of every test."""
    monkeypatch.setenv("DEVBOOT_CONFIG", str(tmp_path / "no-settings" / "config.json"))
    monkeypatch.delenv("CI", raising=False)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def project_dir(temp_dir: Path) -> Path:
    """A minimal Node.js project: just a package.json."""
    write_package_json(temp_dir, {"name": "p", "scripts": {}})
    return temp_dir


@pytest.fixture
def context(project_dir: Path) -> ProjectContext:
    return resolve_context(project_dir)


@pytest.fixture
def options() -> InstallOptions:
    return InstallOptions(non_interactive=True, skip_install=True)
