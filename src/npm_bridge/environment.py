from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

from npm_bridge.process import resolve_executable
from npm_bridge.project import ProjectConfig, package_file, package_manager_binary


class EnvironmentCheckError(RuntimeError):
    def __init__(self, message: str, *, code: str, details: dict[str, str]) -> None:
        super().__init__(message)
        self.code = code
        self.details = details


def _lookup_argv(binary: str, *, is_windows: bool) -> list[str]:
    if is_windows:
        return ["cmd", "/C", "for", "%i", "in", f"({binary})", "do", "@echo.", "%~$PATH:i"]
    return [resolve_executable(binary), "-version"]


def has_package_manager(binary: str = "npm", *, is_windows: bool | None = None) -> bool:
    if is_windows is None:
        is_windows = os.name == "nt"
    if is_windows and any(sep in binary for sep in ("/", "\\")):
        return Path(binary).is_file()
    try:
        proc = subprocess.run(
            _lookup_argv(binary, is_windows=is_windows),
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError:
        return False
    if proc.returncode != 0:
        return False
    if is_windows:
        # The for-loop echoes an empty line when the name is not on PATH.
        return bool(proc.stdout.strip())
    return True


def check_environment(project: ProjectConfig) -> None:
    manifest_path = package_file(project)
    if not project.write_package_json and manifest_path.exists():
        message = f"Your project already has a {manifest_path.name} file. Please remove it."
        print(message, file=sys.stderr)
        raise EnvironmentCheckError(
            message,
            code="manifest_already_exists",
            details={"path": str(manifest_path)},
        )

    binary = package_manager_binary(project)
    if not has_package_manager(binary):
        message = f"Unable to find {binary} on your path. Please install it."
        print(message, file=sys.stderr)
        raise EnvironmentCheckError(
            message,
            code="package_manager_not_found",
            details={"binary": binary},
        )
