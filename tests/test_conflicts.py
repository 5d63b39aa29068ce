"""Tests for installed-config detection and conflict checks."""

import pytest

from devboot.capabilities import default_registry
from devboot.errors import ErrorKind, ProjectError
from devboot.installer import ConflictDetector, DetectedConfig, categorize_configs


@pytest.fixture
def detector():
    return ConflictDetector(default_registry())


class TestDetectInstalled:
    @pytest.mark.asyncio
    async def test_empty_project(self, project_dir, detector):
        assert await detector.detect_installed(project_dir) == []

    @pytest.mark.asyncio
    async def test_registry_and_patterns(self, project_dir, detector):
        (project_dir / ".prettierrc.json").write_text("{}")
        (project_dir / "biome.json").write_text("{}")
        (project_dir / ".husky").mkdir()
        (project_dir / "jest.config.js").write_text("module.exports = {};")

        detected = {c.name: c for c in await detector.detect_installed(project_dir)}

        assert set(detected) == {"prettier", "biome", "husky", "jest"}
        assert detected["prettier"].from_registry
        assert detected["prettier"].detected_files == [".prettierrc.json"]
        assert not detected["husky"].from_registry
        assert detected["husky"].detected_files == [".husky"]

    @pytest.mark.asyncio
    async def test_registry_wins_over_pattern(self, project_dir, detector):
        (project_dir / "tsconfig.json").write_text("{}")
        (project_dir / "tsconfig.node.json").write_text("{}")

        detected = await detector.detect_installed(project_dir)

        assert len(detected) == 1
        assert detected[0].name == "typescript"
        assert detected[0].from_registry
        assert detected[0].detected_files == ["tsconfig.json"]

    @pytest.mark.asyncio
    async def test_pattern_only_match(self, project_dir, detector):
        (project_dir / "tsconfig.node.json").write_text("{}")

        detected = await detector.detect_installed(project_dir)

        assert [(c.name, c.from_registry) for c in detected] == [("typescript", False)]

    @pytest.mark.asyncio
    async def test_manifest_key_counts(self, project_dir, detector):
        (project_dir / "package.json").write_text('{"name": "p", "prettier": {"semi": false}}')

        names = [c.name for c in await detector.detect_installed(project_dir)]

        assert names == ["prettier"]

    @pytest.mark.asyncio
    async def test_requires_package_json(self, temp_dir, detector):
        with pytest.raises(ProjectError) as excinfo:
            await detector.detect_installed(temp_dir)
        assert excinfo.value.error.kind == ErrorKind.PROJECT_INVALID


class TestCheckConflicts:
    def test_conflicts_with_installed_peer(self, detector):
        report = detector.check_conflicts(["biome"], ["eslint", "prettier", "typescript"])

        assert report.has_conflicts
        assert [(c.capability, c.conflicts_with) for c in report.conflicts] == [
            ("eslint", "biome"),
            ("prettier", "biome"),
        ]
        assert report.conflicting_with("eslint") == ["biome"]
        assert report.conflicting_with("typescript") == []

    def test_no_conflicts(self, detector):
        report = detector.check_conflicts(["prettier", "husky"], ["eslint"])
        assert not report.has_conflicts

    def test_unknown_requested_name_is_ignored(self, detector):
        assert not detector.check_conflicts(["biome"], ["rome"]).has_conflicts

    @pytest.mark.asyncio
    async def test_find_conflicts(self, project_dir, detector):
        (project_dir / "biome.jsonc").write_text("{}")

        report = await detector.find_conflicts(project_dir, ["eslint", "editorconfig"])

        assert report.conflicting_with("eslint") == ["biome"]
        assert report.conflicting_with("editorconfig") == []


def test_categorize_configs():
    configs = [DetectedConfig(name) for name in ["eslint", "jest", "typescript", "husky", "editorconfig", "tailwind"]]

    categorized = categorize_configs(configs)

    assert categorized == {
        "linting": ["eslint"],
        "testing": ["jest"],
        "building": ["typescript"],
        "git": ["husky"],
        "editor": ["editorconfig"],
        "other": ["tailwind"],
    }
