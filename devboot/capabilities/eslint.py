"""ESLint capability (flat config)."""

from devboot.installer.models import FileTransform, InstallOptions
from devboot.project import ProjectContext

from .base import Capability, add_package_scripts
from .generators import ConfigGenerator, GeneratedConfig

ESLINT_CONFIG_FILES = (
    ".eslintrc.js",
    ".eslintrc.cjs",
    ".eslintrc.json",
    ".eslintrc.yml",
    ".eslintrc.yaml",
    "eslint.config.js",
    "eslint.config.mjs",
    "eslint.config.ts",
)

BASE_DEPENDENCIES = {
    "eslint": "^9.17.0",
    "@eslint/js": "^9.17.0",
    "globals": "^15.14.0",
}
TYPESCRIPT_DEPENDENCIES = {"typescript-eslint": "^8.18.0"}
REACT_DEPENDENCIES = {
    "eslint-plugin-react": "^7.37.2",
    "eslint-plugin-react-hooks": "^5.1.0",
}
TEST_FILES = ["test/**", "tests/**", "__tests__/**", "**/*.test.*", "**/*.spec.*"]


class ESLintGenerator(ConfigGenerator):
    title = "ESLint"

    def default_config(self, context: ProjectContext) -> GeneratedConfig:
        dependencies = dict(BASE_DEPENDENCIES)
        imports = ['import js from "@eslint/js";', 'import globals from "globals";']
        entries = ["  js.configs.recommended,"]
        preset = "javascript"

        if context.has_typescript:
            dependencies.update(TYPESCRIPT_DEPENDENCIES)
            imports.append('import tseslint from "typescript-eslint";')
            entries.append("  ...tseslint.configs.recommended,")
            preset = "typescript"

        if context.is_react_based:
            dependencies.update(REACT_DEPENDENCIES)
            imports.append('import react from "eslint-plugin-react";')
            imports.append('import reactHooks from "eslint-plugin-react-hooks";')
            entries.append('  react.configs.flat["jsx-runtime"],')
            entries.append('  reactHooks.configs["recommended-latest"],')
            preset = f"{preset}-react"

        environment = "browser" if context.is_react_based else "node"
        entries += [
            "  {",
            f"    languageOptions: {{ globals: globals.{environment} }},",
            "  },",
        ]

        if context.has_test_directory and context.manifest.has_dependency("jest"):
            files = ", ".join(f'"{pattern}"' for pattern in TEST_FILES)
            entries += [
                "  {",
                f"    files: [{files}],",
                "    languageOptions: { globals: globals.jest },",
                "  },",
            ]

        lines = [
            *imports,
            "",
            "export default [",
            '  { ignores: ["dist/", "build/", "coverage/", ".next/"] },',
            *entries,
            "];",
            "",
        ]
        return GeneratedConfig(
            config="\n".join(lines),
            config_file_name="eslint.config.mjs",
            dependencies=dependencies,
            preset_name=preset,
        )


class ESLintCapability(Capability):
    name = "eslint"
    display_name = "ESLint"
    description = "JavaScript and TypeScript linter for code quality"
    detect_files = ESLINT_CONFIG_FILES
    manifest_key = "eslintConfig"
    conflicts_with = ("biome",)

    def default_generator(self) -> ConfigGenerator:
        return ESLintGenerator()

    @property
    def removable_files(self) -> tuple[str, ...]:
        return ESLINT_CONFIG_FILES + (".eslintignore",)

    async def get_files_to_modify(
        self, context: ProjectContext, options: InstallOptions
    ) -> dict[str, FileTransform]:
        return {"package.json": add_package_scripts({"lint": "eslint .", "lint:fix": "eslint . --fix"})}
