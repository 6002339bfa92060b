from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as package_version

from npm_bridge.commands import install_deps, npm, npm_debug
from npm_bridge.environment import EnvironmentCheckError, check_environment
from npm_bridge.hooks import InstallHook, InstallLock, install_hooks
from npm_bridge.manifest import render_manifest, synthesize
from npm_bridge.process import PackageManagerExit, PackageManagerLaunchError, invoke
from npm_bridge.project import ProjectConfig, ProjectConfigError, load_project


def _resolve_version() -> str:
    for distribution_name in ("npm-bridge", "npm_bridge"):
        try:
            return package_version(distribution_name)
        except PackageNotFoundError:
            continue
    return "0+unknown"


__version__ = _resolve_version()

__all__ = [
    "__version__",
    "EnvironmentCheckError",
    "InstallHook",
    "InstallLock",
    "PackageManagerExit",
    "PackageManagerLaunchError",
    "ProjectConfig",
    "ProjectConfigError",
    "check_environment",
    "install_deps",
    "install_hooks",
    "invoke",
    "load_project",
    "npm",
    "npm_debug",
    "render_manifest",
    "synthesize",
]
