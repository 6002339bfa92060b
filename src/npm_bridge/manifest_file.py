from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from npm_bridge.manifest import render_manifest
from npm_bridge.project import ProjectConfig, package_file


def write_manifest_file(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8", newline="\n")


@contextmanager
def with_manifest_file(path: Path, content: str, *, persist: bool) -> Iterator[Path]:
    """Write `content` to `path` for the duration of the block.

    The file is removed on every exit path unless `persist` is set; persisted
    files are left in place after the block and after the process exits.
    """

    try:
        write_manifest_file(path, content)
        yield path
    finally:
        if not persist:
            path.unlink(missing_ok=True)


@contextmanager
def with_package_json(project: ProjectConfig) -> Iterator[Path]:
    path = package_file(project)
    content = render_manifest(project)
    with with_manifest_file(path, content, persist=project.write_package_json) as written:
        yield written
