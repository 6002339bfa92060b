from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from npm_bridge.project import ProjectConfig, ProjectConfigError

_Rule = tuple[Callable[[ProjectConfig], bool], Callable[[ProjectConfig], dict[str, Any]]]


def _flatten(value: Any) -> Iterable[Any]:
    if isinstance(value, (list, tuple)):
        for item in value:
            yield from _flatten(item)
        return
    yield value


def transform_deps(deps: Any, *, field: str = "dependencies") -> dict[str, str]:
    """Flatten `[[name, version], ...]` declarations into a name -> version mapping.

    Later declarations of the same name win. A mapping is accepted as-is.
    """

    if isinstance(deps, Mapping):
        missing = [str(k) for k, v in deps.items() if v is None]
        if missing:
            raise ProjectConfigError(
                f"npm.{field} has no version for: {', '.join(missing)}.",
                code="npm_dependency_version_missing",
                details={"field": field, "names": missing},
                hint=f"Give every npm.{field} entry a version spec, e.g. \"*\" or \"^1.0.0\".",
            )
        return {str(k): str(v) for k, v in deps.items()}
    flat = list(_flatten(deps))
    if len(flat) % 2 != 0:
        raise ProjectConfigError(
            f"npm.{field} must flatten to name/version pairs; got {len(flat)} items.",
            code="npm_dependencies_unpaired",
            details={"field": field, "items": [str(x) for x in flat]},
            hint=f"Declare npm.{field} as a list of [name, version] pairs.",
        )
    out: dict[str, str] = {}
    for name, version in zip(flat[0::2], flat[1::2]):
        if not isinstance(name, str) or not name.strip():
            raise ProjectConfigError(
                f"npm.{field} has a non-string package name: {name!r}.",
                code="npm_dependency_name_invalid",
                details={"field": field, "name": repr(name)},
            )
        out[name] = str(version)
    return out


def _npm(project: ProjectConfig, key: str) -> Any:
    return project.npm.get(key)


def _has_npm(key: str) -> Callable[[ProjectConfig], bool]:
    return lambda p: _npm(p, key) is not None


def _copy_npm(key: str) -> Callable[[ProjectConfig], dict[str, Any]]:
    return lambda p: {key: _npm(p, key)}


def _always(_project: ProjectConfig) -> bool:
    return True


def _project_license_name(project: ProjectConfig) -> Any:
    if project.license is None:
        return None
    return project.license.get("name")


def _author(project: ProjectConfig) -> Any:
    author = _npm(project, "author")
    return author if author is not None else project.author


# Applied in order; a later producer overwrites earlier keys.
_RULES: list[_Rule] = [
    (_always, lambda p: {"private": p.npm.get("private", True)}),
    (
        lambda p: _npm(p, "name") is not None or p.name is not None,
        lambda p: {"name": _npm(p, "name") if _npm(p, "name") is not None else p.name},
    ),
    (lambda p: p.description is not None, lambda p: {"description": p.description}),
    (lambda p: p.version is not None, lambda p: {"version": p.version}),
    (
        _has_npm("dependencies"),
        lambda p: {"dependencies": transform_deps(_npm(p, "dependencies"))},
    ),
    (lambda p: p.url is not None, lambda p: {"homepage": p.url}),
    (
        lambda p: _project_license_name(p) is not None,
        lambda p: {"license": _project_license_name(p)},
    ),
    (_has_npm("directories"), _copy_npm("directories")),
    (_has_npm("files"), _copy_npm("files")),
    (_has_npm("keywords"), _copy_npm("keywords")),
    (lambda p: _author(p) is not None, lambda p: {"author": _author(p)}),
    (
        _has_npm("dev-dependencies"),
        lambda p: {
            "devDependencies": transform_deps(
                _npm(p, "dev-dependencies"), field="dev-dependencies"
            )
        },
    ),
    (lambda p: p.main is not None, lambda p: {"scripts": {"start": f"node {p.main}"}}),
    (_has_npm("license"), _copy_npm("license")),
    (_has_npm("repository"), _copy_npm("repository")),
]


def synthesize(project: ProjectConfig) -> dict[str, Any]:
    manifest: dict[str, Any] = {}
    for applies, produce in _RULES:
        if applies(project):
            manifest.update(produce(project))

    overrides = _npm(project, "package")
    if overrides is not None:
        if not isinstance(overrides, Mapping):
            raise ProjectConfigError(
                f"npm.package must be a mapping, got {type(overrides).__name__}.",
                code="npm_package_not_mapping",
                details={"type": type(overrides).__name__},
            )
        manifest.update(overrides)
    return manifest


def render_manifest(project: ProjectConfig) -> str:
    return json.dumps(synthesize(project), indent=2, ensure_ascii=False) + "\n"
