from __future__ import annotations

import functools
import threading
from collections.abc import Callable
from typing import Any, TypeVar

from npm_bridge.commands import install_deps
from npm_bridge.project import ProjectConfig

_R = TypeVar("_R")


class InstallLock:
    """Compare-and-set flag marking that an install is already in flight."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locked = False

    @property
    def locked(self) -> bool:
        with self._guard:
            return self._locked

    def try_acquire(self) -> bool:
        with self._guard:
            if self._locked:
                return False
            self._locked = True
            return True

    def release(self) -> None:
        with self._guard:
            self._locked = False


class InstallHook:
    """Wraps a host dependency-resolution callable so `npm install` runs after it.

    The wrapped callable must take the project as its first positional argument.
    Nested calls made while an install is in flight pass straight through.
    """

    def __init__(
        self,
        *,
        lock: InstallLock | None = None,
        install: Callable[[ProjectConfig], None] = install_deps,
    ) -> None:
        self.lock = lock if lock is not None else InstallLock()
        self._install = install

    def wrap(self, fn: Callable[..., _R]) -> Callable[..., _R]:
        @functools.wraps(fn)
        def wrapper(project: ProjectConfig, *args: Any, **kwargs: Any) -> _R:
            if not self.lock.try_acquire():
                return fn(project, *args, **kwargs)
            try:
                ret = fn(project, *args, **kwargs)
                self._install(project)
                return ret
            finally:
                self.lock.release()

        return wrapper


def install_hooks(
    fn: Callable[..., _R], *, hook: InstallHook | None = None
) -> Callable[..., _R]:
    return (hook if hook is not None else InstallHook()).wrap(fn)
