"""Installation planning and rendering."""

from typing import TYPE_CHECKING

from devboot.project import ProjectContext

from .models import InstallOptions, InstallPlan

if TYPE_CHECKING:
    from devboot.capabilities import Capability


async def plan_install(
    capability: "Capability", context: ProjectContext, options: InstallOptions
) -> InstallPlan:
    """Collect a capability's plan without touching disk."""
    return InstallPlan(
        capability=capability.name,
        files_to_create=await capability.get_files_to_create(context, options),
        files_to_modify=await capability.get_files_to_modify(context, options),
        dependencies=await capability.get_dependencies(context),
    )


def render_plan(plan: InstallPlan) -> str:
    lines = [f"Installation Plan: {plan.capability}", ""]

    if plan.files_to_create:
        lines.append("Files to create:")
        lines.extend(f"  ✨ {path}" for path in plan.files_to_create)
        lines.append("")

    if plan.files_to_modify:
        lines.append("Files to modify:")
        lines.extend(f"  ✏️  {path}" for path in plan.files_to_modify)
        lines.append("")

    if not plan.dependencies.is_empty():
        lines.append("Packages to install:")
        lines.extend(f"  📦 {spec}" for spec in plan.dependencies.runtime_specs())
        lines.extend(f"  📦 {spec} (dev)" for spec in plan.dependencies.development_specs())

    return "\n".join(lines).rstrip("\n")


__all__ = ["plan_install", "render_plan"]
