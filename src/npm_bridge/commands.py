from __future__ import annotations

from collections.abc import Sequence

from npm_bridge.deprecation import warn_about_deprecation
from npm_bridge.environment import check_environment
from npm_bridge.manifest_file import with_package_json
from npm_bridge.process import run_package_manager
from npm_bridge.project import ProjectConfig

PPRINT_ARG = "pprint"


def prepare(project: ProjectConfig) -> None:
    check_environment(project)
    warn_about_deprecation(project)


def npm_debug(project: ProjectConfig) -> str:
    with with_package_json(project) as path:
        content = path.read_text(encoding="utf-8")
        print(f"npm-bridge generated {path.name}:\n")
        print(content, end="")
    return content


def npm(project: ProjectConfig, args: Sequence[str]) -> None:
    """Run npm with `args` against a generated manifest.

    `["pprint"]` prints the manifest instead of running npm. Raises
    `EnvironmentCheckError` before any side effect and `PackageManagerExit`
    when npm fails.
    """

    prepare(project)
    if list(args) == [PPRINT_ARG]:
        npm_debug(project)
        return
    with with_package_json(project):
        run_package_manager(project, args)


def install_deps(project: ProjectConfig) -> None:
    prepare(project)
    with with_package_json(project):
        run_package_manager(project, ["install"])
