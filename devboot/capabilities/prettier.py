"""Prettier capability."""

from devboot.installer.models import FileTransform, InstallOptions
from devboot.project import ProjectContext, ProjectKind

from .base import Capability, add_package_scripts
from .generators import ConfigGenerator, GeneratedConfig, to_json

PRETTIER_VERSION = "^3.4.2"

PRETTIER_CONFIG_FILES = (
    ".prettierrc",
    ".prettierrc.json",
    ".prettierrc.yml",
    ".prettierrc.yaml",
    ".prettierrc.js",
    ".prettierrc.cjs",
    ".prettierrc.mjs",
    "prettier.config.js",
    "prettier.config.cjs",
    "prettier.config.mjs",
)

_IGNORE_PATTERNS = [
    "# Dependencies",
    "node_modules/",
    "",
    "# Build outputs",
    "dist/",
    "build/",
    "out/",
    "",
    "# Environment files",
    ".env*",
    "",
    "# Logs",
    "*.log",
    "",
    "# Package manager files",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "",
]


class PrettierGenerator(ConfigGenerator):
    title = "Prettier"

    def default_config(self, context: ProjectContext) -> GeneratedConfig:
        config = {
            "semi": True,
            "singleQuote": True,
            "trailingComma": "es5",
            "tabWidth": 2,
            "useTabs": False,
            "printWidth": 80,
            "endOfLine": "lf",
        }
        if context.is_react_based:
            config["jsxSingleQuote"] = True

        return GeneratedConfig(
            config=to_json(config),
            config_file_name=".prettierrc.json",
            dependencies={"prettier": PRETTIER_VERSION},
            additional_files={".prettierignore": self.ignore_file(context)},
            preset_name="default",
        )

    def ignore_file(self, context: ProjectContext) -> str:
        patterns = list(_IGNORE_PATTERNS)
        if context.project_kind == ProjectKind.NEXT:
            patterns += ["# Next.js", ".next/", "next-env.d.ts", ""]
        elif context.project_kind == ProjectKind.VITE:
            patterns += ["# Vite", ".vite/", ""]
        patterns += ["# Coverage", "coverage/", ""]
        return "\n".join(patterns)


class PrettierCapability(Capability):
    name = "prettier"
    display_name = "Prettier"
    description = "Code formatter for consistent code style"
    detect_files = PRETTIER_CONFIG_FILES
    manifest_key = "prettier"
    conflicts_with = ("biome",)

    def default_generator(self) -> ConfigGenerator:
        return PrettierGenerator()

    @property
    def removable_files(self) -> tuple[str, ...]:
        return PRETTIER_CONFIG_FILES + (".prettierignore",)

    async def get_files_to_modify(
        self, context: ProjectContext, options: InstallOptions
    ) -> dict[str, FileTransform]:
        return {
            "package.json": add_package_scripts(
                {"format": "prettier --write .", "format:check": "prettier --check ."}
            )
        }
