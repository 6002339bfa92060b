from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

DEFAULT_PROJECT_FILE = "project.yaml"
DEFAULT_PACKAGE_FILE_NAME = "package.json"
DEFAULT_PACKAGE_MANAGER = "npm"


class ProjectConfigError(ValueError):
    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: dict[str, Any] | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message)
        normalized_code = (
            code.strip()
            if isinstance(code, str) and code.strip()
            else "invalid_project_config"
        )
        normalized_details = dict(details) if isinstance(details, dict) else {}
        if not normalized_details:
            normalized_details = {"reason": message}
        normalized_hint = (
            hint.strip()
            if isinstance(hint, str) and hint.strip()
            else "Fix the project descriptor (project.yaml) and rerun."
        )
        self.code = normalized_code
        self.details = normalized_details
        self.hint = normalized_hint


@dataclass(frozen=True)
class ProjectConfig:
    project_dir: Path
    name: str | None = None
    version: str | None = None
    description: str | None = None
    url: str | None = None
    license: Mapping[str, Any] | None = None
    author: Any = None
    main: str | None = None
    npm: Mapping[str, Any] = field(default_factory=dict)
    raw: Mapping[str, Any] = field(default_factory=dict)

    @property
    def write_package_json(self) -> bool:
        return self.npm.get("write-package-json") is True


def _optional_str(data: Mapping[str, Any], key: str, *, path: Path) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # YAML reads `version: 1.0` as a float.
        return str(value)
    if not isinstance(value, str):
        raise ProjectConfigError(
            f"Expected string for {key} in {path}, got {type(value).__name__}.",
            code="project_field_not_string",
            details={"path": str(path), "field": key, "type": type(value).__name__},
        )
    return value


def _optional_mapping(
    data: Mapping[str, Any], key: str, *, path: Path
) -> dict[str, Any] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ProjectConfigError(
            f"Expected mapping for {key} in {path}, got {type(value).__name__}.",
            code="project_field_not_mapping",
            details={"path": str(path), "field": key, "type": type(value).__name__},
        )
    return value


def project_from_mapping(
    data: Mapping[str, Any],
    *,
    project_dir: Path,
    source: Path | None = None,
) -> ProjectConfig:
    if source is None:
        source = project_dir / DEFAULT_PROJECT_FILE
    return ProjectConfig(
        project_dir=project_dir,
        name=_optional_str(data, "name", path=source),
        version=_optional_str(data, "version", path=source),
        description=_optional_str(data, "description", path=source),
        url=_optional_str(data, "url", path=source),
        license=_optional_mapping(data, "license", path=source),
        author=data.get("author"),
        main=_optional_str(data, "main", path=source),
        npm=_optional_mapping(data, "npm", path=source) or {},
        raw=dict(data),
    )


def load_project(path: Path) -> ProjectConfig:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ProjectConfigError(
            f"Failed to read {path}: {e}",
            code="project_read_failed",
            details={"path": str(path), "error": str(e)},
            hint="Run from the project directory or pass --project PATH.",
        ) from e
    except yaml.YAMLError as e:
        raise ProjectConfigError(
            f"Failed to parse YAML in {path}: {e}",
            code="project_yaml_parse_failed",
            details={"path": str(path), "error": str(e)},
            hint="Fix YAML syntax in the project descriptor.",
        ) from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ProjectConfigError(
            f"Expected a YAML mapping in {path}, got {type(raw).__name__}.",
            code="project_not_mapping",
            details={"path": str(path), "type": type(raw).__name__},
        )

    return project_from_mapping(raw, project_dir=path.parent.resolve(), source=path)


def _resolve_under(project_dir: Path, value: str) -> Path:
    raw = Path(value)
    return raw if raw.is_absolute() else (project_dir / raw)


def resolve_root(project: ProjectConfig) -> Path:
    root = project.npm.get("root")
    if root is None:
        return project.project_dir
    if not isinstance(root, str) or not root.strip():
        raise ProjectConfigError(
            "npm.root must be a non-empty string.",
            code="npm_root_invalid",
            details={"root": repr(root)},
        )
    if root.startswith(":"):
        key = root[1:]
        target = project.raw.get(key)
        if not isinstance(target, str) or not target.strip():
            raise ProjectConfigError(
                f"npm.root refers to {key!r}, which is not a path in the project.",
                code="npm_root_reference_unresolved",
                details={"root": root, "key": key},
                hint=f"Define a top-level `{key}` path or point npm.root at a directory.",
            )
        return _resolve_under(project.project_dir, target)
    return _resolve_under(project.project_dir, root)


def package_file(project: ProjectConfig) -> Path:
    name = project.npm.get("package-file-name", DEFAULT_PACKAGE_FILE_NAME)
    if not isinstance(name, str) or not name.strip():
        raise ProjectConfigError(
            "npm.package-file-name must be a non-empty string.",
            code="package_file_name_invalid",
            details={"package-file-name": repr(name)},
        )
    return resolve_root(project) / name


def package_manager_binary(project: ProjectConfig) -> str:
    binary = project.npm.get("binary", DEFAULT_PACKAGE_MANAGER)
    if not isinstance(binary, str) or not binary.strip():
        raise ProjectConfigError(
            "npm.binary must be a non-empty string.",
            code="package_manager_binary_invalid",
            details={"binary": repr(binary)},
        )
    return binary.strip()
