from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from npm_bridge.hooks import InstallHook, InstallLock, install_hooks
from npm_bridge.project import ProjectConfig, load_project, project_from_mapping


def test_install_lock_compare_and_set() -> None:
    lock = InstallLock()
    assert lock.try_acquire() is True
    assert lock.locked is True
    assert lock.try_acquire() is False
    lock.release()
    assert lock.locked is False


def test_reentrant_deps_install_once(tmp_path: Path) -> None:
    installs: list[ProjectConfig] = []
    hook = InstallHook(install=installs.append)
    project = project_from_mapping({"name": "foo"}, project_dir=tmp_path)
    depth = {"n": 0}

    def deps(p: ProjectConfig) -> str:
        depth["n"] += 1
        if depth["n"] < 4:
            wrapped(p)
        return "resolved"

    wrapped = hook.wrap(deps)

    assert wrapped(project) == "resolved"
    assert depth["n"] == 4
    assert installs == [project]
    assert hook.lock.locked is False


def test_each_top_level_call_installs(tmp_path: Path) -> None:
    installs: list[ProjectConfig] = []
    wrapped = InstallHook(install=installs.append).wrap(lambda p, extra=None: extra)
    project = project_from_mapping({}, project_dir=tmp_path)

    assert wrapped(project, extra=1) == 1
    assert wrapped(project) is None
    assert len(installs) == 2


def test_lock_released_when_wrapped_call_fails(tmp_path: Path) -> None:
    installs: list[ProjectConfig] = []
    hook = InstallHook(install=installs.append)

    def deps(_p: ProjectConfig) -> None:
        raise RuntimeError("resolution failed")

    with pytest.raises(RuntimeError, match="resolution failed"):
        hook.wrap(deps)(project_from_mapping({}, project_dir=tmp_path))
    assert installs == []
    assert hook.lock.locked is False


def test_shared_lock_guards_separate_hooks(tmp_path: Path) -> None:
    lock = InstallLock()
    installs: list[str] = []
    outer = InstallHook(lock=lock, install=lambda _p: installs.append("outer"))
    inner = InstallHook(lock=lock, install=lambda _p: installs.append("inner"))
    project = project_from_mapping({}, project_dir=tmp_path)

    inner_wrapped = inner.wrap(lambda p: "inner")
    outer_wrapped = outer.wrap(lambda p: inner_wrapped(p))

    assert outer_wrapped(project) == "inner"
    assert installs == ["outer"]


def test_install_hooks_runs_npm_install(
    write_project: Callable[..., Path], dummy_npm
) -> None:
    project = load_project(write_project({"name": "foo", "npm": {"binary": dummy_npm.binary}}))
    calls: list[str] = []

    def deps(p: ProjectConfig) -> None:
        calls.append("deps")

    install_hooks(deps)(project)

    npm_calls = dummy_npm.calls()
    assert calls == ["deps"]
    assert [c["argv"] for c in npm_calls] == [["install"]]
    assert '"name": "foo"' in npm_calls[0]["manifest"]
    assert not (project.project_dir / "package.json").exists()
