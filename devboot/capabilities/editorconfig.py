"""EditorConfig capability."""

import logging
from pathlib import Path

import yaml

from devboot.project import ProjectContext

from .base import Capability
from .generators import ConfigGenerator, GeneratedConfig

_logging = logging.getLogger(__name__)

PRETTIER_RC_FILES = (".prettierrc", ".prettierrc.json", ".prettierrc.yaml", ".prettierrc.yml")


def find_prettier_tab_width(context: ProjectContext) -> int | None:
    """tabWidth from an existing Prettier config, if one declares it."""
    candidates = [context.manifest.get("prettier")]

    for name in PRETTIER_RC_FILES:
        path: Path = context.root_path / name
        if not path.is_file():
            continue
        try:
            # YAML is a superset of JSON, so this covers every listed format.
            candidates.append(yaml.safe_load(path.read_text(encoding="utf-8")))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            _logging.debug(f"Ignoring unreadable {name}: {e}")

    for config in candidates:
        if isinstance(config, dict):
            tab_width = config.get("tabWidth")
            if isinstance(tab_width, int) and not isinstance(tab_width, bool):
                return tab_width
    return None


class EditorConfigGenerator(ConfigGenerator):
    title = "EditorConfig"

    def default_config(self, context: ProjectContext) -> GeneratedConfig:
        indent = find_prettier_tab_width(context) or 2
        lines = [
            "# EditorConfig is awesome: https://EditorConfig.org",
            "",
            "root = true",
            "",
            "[*]",
            "charset = utf-8",
            "end_of_line = lf",
            "insert_final_newline = true",
            "trim_trailing_whitespace = true",
            "indent_style = space",
            f"indent_size = {indent}",
            "",
            "[*.md]",
            "trim_trailing_whitespace = false",
            "",
            "[*.{json,yml,yaml}]",
            "indent_size = 2",
            "",
            "[*.{js,jsx,mjs,cjs}]",
            f"indent_size = {indent}",
            "",
        ]
        if context.has_typescript:
            lines += ["[*.{ts,tsx}]", f"indent_size = {indent}", ""]
        lines += ["[Makefile]", "indent_style = tab", ""]

        return GeneratedConfig(config="\n".join(lines), config_file_name=".editorconfig")


class EditorConfigCapability(Capability):
    name = "editorconfig"
    display_name = "EditorConfig"
    description = "Consistent coding styles across different editors"
    detect_files = (".editorconfig",)

    def default_generator(self) -> ConfigGenerator:
        return EditorConfigGenerator()
