"""TypeScript capability with framework presets."""

import copy
import re

from devboot.installer.models import FileTransform, InstallOptions, ValidationResult
from devboot.project import ProjectContext, ProjectKind

from .base import Capability, add_package_scripts
from .generators import ConfigGenerator, GeneratedConfig, to_json

NEXT_ENV = (
    '/// <reference types="next" />\n'
    '/// <reference types="next/image-types/global" />\n'
    "\n"
    "// NOTE: This file should not be edited\n"
)
VITE_ENV = '/// <reference types="vite/client" />\n'

PRESETS = {
    ProjectKind.NEXT: (
        "next-app",
        {
            "compilerOptions": {
                "target": "ES2022",
                "lib": ["dom", "dom.iterable", "esnext"],
                "allowJs": True,
                "skipLibCheck": True,
                "strict": True,
                "noEmit": True,
                "esModuleInterop": True,
                "module": "esnext",
                "moduleResolution": "bundler",
                "resolveJsonModule": True,
                "isolatedModules": True,
                "jsx": "preserve",
                "incremental": True,
                "plugins": [{"name": "next"}],
                "paths": {"@/*": ["./src/*"]},
            },
            "include": ["next-env.d.ts", "**/*.ts", "**/*.tsx", ".next/types/**/*.ts"],
            "exclude": ["node_modules"],
        },
    ),
    ProjectKind.VITE: (
        "vite-react",
        {
            "compilerOptions": {
                "target": "ES2022",
                "useDefineForClassFields": True,
                "lib": ["ES2022", "DOM", "DOM.Iterable"],
                "module": "ESNext",
                "skipLibCheck": True,
                "moduleResolution": "bundler",
                "allowImportingTsExtensions": True,
                "isolatedModules": True,
                "noEmit": True,
                "jsx": "react-jsx",
                "strict": True,
                "noUnusedLocals": True,
                "noUnusedParameters": True,
            },
            "include": ["src"],
        },
    ),
    ProjectKind.REACT: (
        "react",
        {
            "compilerOptions": {
                "target": "ES2020",
                "lib": ["dom", "dom.iterable", "esnext"],
                "module": "esnext",
                "moduleResolution": "bundler",
                "jsx": "react-jsx",
                "strict": True,
                "esModuleInterop": True,
                "skipLibCheck": True,
                "resolveJsonModule": True,
                "isolatedModules": True,
                "noEmit": True,
            },
            "include": ["src"],
        },
    ),
    ProjectKind.NODE: (
        "node",
        {
            "compilerOptions": {
                "target": "ES2022",
                "module": "NodeNext",
                "moduleResolution": "NodeNext",
                "outDir": "dist",
                "rootDir": "src",
                "strict": True,
                "esModuleInterop": True,
                "skipLibCheck": True,
                "forceConsistentCasingInFileNames": True,
                "declaration": True,
                "sourceMap": True,
            },
            "include": ["src"],
            "exclude": ["node_modules", "dist"],
        },
    ),
}

_MAJOR_VERSION = re.compile(r"\d+")


def typescript_dependencies(context: ProjectContext) -> dict[str, str]:
    deps = {"typescript": "^5.8.3", "@types/node": "^24.0.0"}
    manifest = context.manifest

    if context.project_kind in (ProjectKind.NEXT, ProjectKind.VITE):
        deps["@types/react"] = "^19.0.0"
        deps["@types/react-dom"] = "^19.0.0"
    elif context.project_kind == ProjectKind.REACT:
        match = _MAJOR_VERSION.search(manifest.dependencies.get("react", ""))
        if match:
            deps["@types/react"] = f"^{match.group()}.0.0"
            deps["@types/react-dom"] = f"^{match.group()}.0.0"

    if "express" in manifest.dependencies:
        deps["@types/express"] = "^5.0.0"
    return deps


class TypeScriptGenerator(ConfigGenerator):
    title = "TypeScript"

    def default_config(self, context: ProjectContext) -> GeneratedConfig:
        preset_name, preset = PRESETS[context.project_kind]
        config = copy.deepcopy(preset)

        if context.project_kind == ProjectKind.NODE and not context.has_src_directory:
            del config["compilerOptions"]["rootDir"]
            config["include"] = ["**/*.ts"]

        additional: dict[str, str] = {}

        if context.project_kind == ProjectKind.NEXT:
            if not (context.root_path / "next-env.d.ts").exists():
                additional["next-env.d.ts"] = NEXT_ENV
        elif context.project_kind == ProjectKind.VITE:
            if not (context.root_path / "src" / "vite-env.d.ts").exists():
                additional["src/vite-env.d.ts"] = VITE_ENV

        return GeneratedConfig(
            config=to_json(config),
            config_file_name="tsconfig.json",
            dependencies=typescript_dependencies(context),
            additional_files=additional,
            preset_name=preset_name,
        )


class TypeScriptCapability(Capability):
    name = "typescript"
    display_name = "TypeScript"
    description = "TypeScript configuration with framework-specific optimizations"
    detect_files = ("tsconfig.json",)

    def default_generator(self) -> ConfigGenerator:
        return TypeScriptGenerator()

    async def validate(
        self, context: ProjectContext, options: InstallOptions
    ) -> ValidationResult:
        result = await super().validate(context, options)
        if not context.manifest.has_dependency("typescript"):
            result.warnings.append(
                "TypeScript not found in dependencies. It will be installed."
            )
        return result

    async def get_files_to_modify(
        self, context: ProjectContext, options: InstallOptions
    ) -> dict[str, FileTransform]:
        return {"package.json": add_package_scripts({"typecheck": "tsc --noEmit"})}
