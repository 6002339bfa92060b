from __future__ import annotations

import sys

from npm_bridge.project import ProjectConfig

# Old top-level keys and the key that replaces each one inside the `npm` block.
KEY_DEPRECATIONS: dict[str, str] = {
    "nodejs": "package",
    "node-dependencies": "dependencies",
    "npm-root": "root",
}


def select_deprecated_keys(project: ProjectConfig) -> list[str]:
    present = set(project.raw)
    return [key for key in KEY_DEPRECATIONS if key in present]


def deprecation_message(used_key: str) -> str:
    return f"{used_key} is deprecated. Use {KEY_DEPRECATIONS[used_key]} in an npm map instead."


def warn_about_deprecation(project: ProjectConfig) -> list[str]:
    messages = [deprecation_message(key) for key in select_deprecated_keys(project)]
    for message in messages:
        print(f"WARNING: {message}", file=sys.stderr)
    return messages
