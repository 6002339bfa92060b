from __future__ import annotations

import os
import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path

from npm_bridge.project import ProjectConfig, package_manager_binary, resolve_root


class PackageManagerLaunchError(RuntimeError):
    def __init__(self, message: str, *, binary: str, argv: list[str]) -> None:
        super().__init__(message)
        self.code = "package_manager_launch_failed"
        self.details = {"binary": binary, "argv": argv}
        self.hint = "Ensure npm is installed and on PATH, or set npm.binary to its full path."


class PackageManagerExit(RuntimeError):
    def __init__(self, returncode: int, *, argv: list[str]) -> None:
        super().__init__(f"{' '.join(argv)} exited with code {returncode}")
        self.returncode = returncode
        self.argv = argv


def resolve_executable(binary: str) -> str:
    p = Path(binary)
    if p.is_absolute():
        return str(p)

    if any(sep in binary for sep in ("/", "\\")) or (os.name == "nt" and ":" in binary):
        return binary

    resolved = shutil.which(binary)
    return resolved if resolved is not None else binary


def invoke(project_root: Path, args: Sequence[str], *, binary: str = "npm") -> int:
    """Run the package manager in `project_root` with inherited stdio; return its exit code."""

    argv = [resolve_executable(binary), *args]
    try:
        proc = subprocess.run(argv, cwd=str(project_root), check=False)
    except OSError as e:
        raise PackageManagerLaunchError(
            f"Could not launch {binary!r}: {e}",
            binary=binary,
            argv=argv,
        ) from e
    return proc.returncode


def run_package_manager(project: ProjectConfig, args: Sequence[str]) -> None:
    binary = package_manager_binary(project)
    returncode = invoke(resolve_root(project), args, binary=binary)
    if returncode != 0:
        raise PackageManagerExit(returncode, argv=[binary, *args])
